"""
Models Package
==============

This is where all our data models live.
Import from here instead of the individual files.

Example:
    from app.models import RecordKind, SensorReading
"""

from .report import (
    # Kinds of records and where they live
    RecordKind,
    COLLECTION_NAMES,

    # Normalized records (what we write)
    SensorReading,
    CitizenReport,
    PreReport,
    RECORD_MODELS,

    # Read filters
    QueryFilter,

    # What we send back to the frontend
    AddRecordResponse,
    CombinedDataResponse,
    DeleteAllResponse,
)

__all__ = [
    "RecordKind",
    "COLLECTION_NAMES",
    "SensorReading",
    "CitizenReport",
    "PreReport",
    "RECORD_MODELS",
    "QueryFilter",
    "AddRecordResponse",
    "CombinedDataResponse",
    "DeleteAllResponse",
]
