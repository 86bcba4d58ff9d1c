"""
Collection Gateway
==================

The only place that talks to Firestore.

One gateway wraps one async Firestore client (from the Firebase Admin SDK)
and exposes a handful of per-collection operations:

    insert(kind, record)          -> new document ID
    read_all(kind)                -> every document
    read_filtered(kind, filter)   -> documents matching one predicate
    fetch_page(kind, limit)       -> up to `limit` document snapshots
    delete_batch(kind, docs)      -> delete snapshots in one atomic batch
    delete_all(kind, batch_size)  -> drain the whole collection

Any exception from the client is logged with the collection and operation
and re-raised as StoreReadError / StoreWriteError. Nothing is retried here:
inserts aren't idempotent, so a retry could create duplicates.
"""

import logging
from typing import Union

from google.cloud.firestore import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter
from pydantic import BaseModel

from app.exceptions import StoreReadError, StoreWriteError
from app.models import RecordKind, QueryFilter
from app.services.eraser import DEFAULT_BATCH_SIZE, erase_collection

logger = logging.getLogger(__name__)


def to_record(snapshot) -> dict:
    """Flatten a document snapshot into `{id, ...fields}`."""
    return {"id": snapshot.id, **(snapshot.to_dict() or {})}


class CollectionGateway:
    """
    Thin async wrapper around the Firestore client.

    HOW TO USE:
    ----------
    gateway = CollectionGateway(firestore_async.client())

    doc_id = await gateway.insert(RecordKind.SENSOR, reading)
    rows = await gateway.read_filtered(RecordKind.SENSOR, build_filter(...))
    """

    def __init__(self, client):
        """
        Args:
            client: google.cloud.firestore AsyncClient (or anything with
                    the same collection/batch surface)
        """
        self.client = client

    def collection(self, kind: Union[RecordKind, str]):
        """Collection reference for a kind. Unknown kinds raise ValueError."""
        return self.client.collection(RecordKind(kind).collection)

    # =========================================================================
    # WRITES
    # =========================================================================

    async def insert(self, kind: Union[RecordKind, str], record: Union[BaseModel, dict]) -> str:
        """
        Write one normalized record and return its document ID.

        `createdAt` is always the Firestore server timestamp; whatever the
        record carries under that name is overwritten.
        """
        kind = RecordKind(kind)
        data = record.model_dump() if isinstance(record, BaseModel) else dict(record)
        data["createdAt"] = SERVER_TIMESTAMP

        try:
            _, doc_ref = await self.collection(kind).add(data)
        except Exception as e:
            logger.error(f"[{kind.collection}] insert failed: {e}")
            raise StoreWriteError(kind, "insert", str(e)) from e

        logger.info(f"[{kind.collection}] added document {doc_ref.id}")
        return doc_ref.id

    async def delete_batch(self, kind: Union[RecordKind, str], snapshots: list) -> int:
        """
        Delete the given documents in a single batch commit.

        Returns:
            Number of documents deleted
        """
        kind = RecordKind(kind)
        if not snapshots:
            return 0

        batch = self.client.batch()
        for snapshot in snapshots:
            batch.delete(snapshot.reference)

        try:
            await batch.commit()
        except Exception as e:
            logger.error(f"[{kind.collection}] batch delete of {len(snapshots)} failed: {e}")
            raise StoreWriteError(kind, "delete", str(e)) from e

        return len(snapshots)

    async def delete_all(self, kind: Union[RecordKind, str], batch_size: int = DEFAULT_BATCH_SIZE) -> int:
        """Remove every document in the collection. See services.eraser."""
        return await erase_collection(self, kind, batch_size)

    # =========================================================================
    # READS
    # =========================================================================

    async def read_all(self, kind: Union[RecordKind, str]) -> list[dict]:
        """Every document in the collection, unfiltered."""
        kind = RecordKind(kind)
        try:
            snapshots = await self.collection(kind).get()
        except Exception as e:
            logger.error(f"[{kind.collection}] read_all failed: {e}")
            raise StoreReadError(kind, "read", str(e)) from e
        return [to_record(s) for s in snapshots]

    async def read_filtered(self, kind: Union[RecordKind, str], query_filter: QueryFilter) -> list[dict]:
        """Documents where `query_filter.field <op> query_filter.value`."""
        kind = RecordKind(kind)
        query = self.collection(kind).where(
            filter=FieldFilter(query_filter.field, query_filter.op, query_filter.value)
        )
        try:
            snapshots = await query.get()
        except Exception as e:
            logger.error(
                f"[{kind.collection}] filtered read "
                f"({query_filter.field} {query_filter.op} {query_filter.value}) failed: {e}"
            )
            raise StoreReadError(kind, "read", str(e)) from e
        return [to_record(s) for s in snapshots]

    async def fetch_page(self, kind: Union[RecordKind, str], limit: int) -> list:
        """Up to `limit` raw document snapshots (used for bulk deletes)."""
        kind = RecordKind(kind)
        try:
            return await self.collection(kind).limit(limit).get()
        except Exception as e:
            logger.error(f"[{kind.collection}] page fetch failed: {e}")
            raise StoreReadError(kind, "read", str(e)) from e
