"""
Services Package
================

These are the "workers" that do the actual work.

- normalize: Turns raw JSON into typed records
- build_filter: Decides which stored records are still relevant
- CollectionGateway: Talks to Firestore
- erase_collection: Deletes a whole collection in batches
- ReportManager: The boss that ties them together
- StoreHandle / connect_store: The shared Firestore client
"""

from .normalizer import normalize
from .query_filter import build_filter, build_filters
from .gateway import CollectionGateway
from .eraser import erase_collection
from .report_manager import ReportManager, SnapshotResult, EraseResult
from .store import StoreHandle, connect_store

__all__ = [
    "normalize",
    "build_filter",
    "build_filters",
    "CollectionGateway",
    "erase_collection",
    "ReportManager",
    "SnapshotResult",
    "EraseResult",
    "StoreHandle",
    "connect_store",
]
