"""
Report Manager
==============

This is the BRAIN of the backend. Routers call it; it calls the rest.

WHAT IT DOES:
------------
1. add_record:     normalize a payload, insert it, return the new ID
2. fetch_snapshot: read all three collections at once, each through its
                   window filter, all filters built from the same `now`
3. erase_all:      drain every collection, one after another

FAILURE POLICY:
--------------
- fetch_snapshot runs the three reads concurrently and waits for all of
  them. A failed read gives an empty list for that collection and an
  entry in `errors`; the others still come back.
- erase_all keeps going when one collection fails, and reports per
  collection what was deleted and what broke.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from app.exceptions import StoreError
from app.models import RecordKind
from app.services.eraser import DEFAULT_BATCH_SIZE, erase_collection
from app.services.gateway import CollectionGateway
from app.services.normalizer import normalize
from app.services.query_filter import DEFAULT_WINDOW_HOURS, build_filters
from app.utils.validation import epoch_millis

logger = logging.getLogger(__name__)


@dataclass
class SnapshotResult:
    """Rows per collection name, plus any collection that failed."""
    records: dict = field(default_factory=dict)
    errors: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class EraseResult:
    """Documents deleted per collection name, plus failures."""
    deleted: dict = field(default_factory=dict)
    errors: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class ReportManager:
    """
    Coordinates normalizer, gateway, filters and eraser for one request.

    Cheap to build; the routers make one per request from the shared
    store handle.
    """

    def __init__(
        self,
        gateway: CollectionGateway,
        batch_size: int = DEFAULT_BATCH_SIZE,
        window_hours: float = DEFAULT_WINDOW_HOURS,
    ):
        self.gateway = gateway
        self.batch_size = batch_size
        self.window_hours = window_hours

    async def add_record(self, kind: Union[RecordKind, str], payload) -> str:
        """
        Validate and store one record.

        Raises:
            ValidationError: Bad payload (nothing is written)
            StoreWriteError: Firestore rejected the write
        """
        record = normalize(kind, payload)
        return await self.gateway.insert(kind, record)

    async def fetch_snapshot(self, now_ms: Optional[int] = None) -> SnapshotResult:
        """
        Read every collection through its filter.

        Args:
            now_ms: Snapshot instant; sampled here if not given

        Returns:
            SnapshotResult keyed by collection name
        """
        if now_ms is None:
            now_ms = epoch_millis()
        filters = build_filters(now_ms, self.window_hours)
        kinds = list(RecordKind)

        results = await asyncio.gather(
            *(self.gateway.read_filtered(kind, filters[kind]) for kind in kinds),
            return_exceptions=True,
        )

        snapshot = SnapshotResult()
        for kind, result in zip(kinds, results):
            if isinstance(result, StoreError):
                snapshot.records[kind.collection] = []
                snapshot.errors[kind.collection] = str(result)
            elif isinstance(result, BaseException):
                raise result
            else:
                snapshot.records[kind.collection] = result
        return snapshot

    async def erase_all(self) -> EraseResult:
        """Drain sensorData, citizenReports and preReports, in that order."""
        outcome = EraseResult()
        for kind in RecordKind:
            try:
                outcome.deleted[kind.collection] = await erase_collection(
                    self.gateway, kind, self.batch_size
                )
            except StoreError as e:
                outcome.deleted[kind.collection] = getattr(e, "deleted", 0)
                outcome.errors[kind.collection] = str(e)
                logger.error(f"[{kind.collection}] erase failed, moving on: {e}")
        return outcome
