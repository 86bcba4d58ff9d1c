"""
Bulk Eraser
===========

Deletes an entire collection, one page at a time.

    FETCH_PAGE --(empty)--> DONE
        |
        v
    DELETE_BATCH --> yield to event loop --> FETCH_PAGE

Each page is deleted in one batch commit, so a page is all-or-nothing.
The collection as a whole is NOT: if batch N fails, batches 1..N-1 stay
deleted and the StoreWriteError carries how many went.
"""

import asyncio
import logging
from typing import Union

from app.exceptions import StoreError, StoreWriteError
from app.models import RecordKind

logger = logging.getLogger(__name__)


DEFAULT_BATCH_SIZE = 300


async def erase_collection(
    gateway,
    kind: Union[RecordKind, str],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> int:
    """
    Delete every document in the collection for `kind`.

    Args:
        gateway: CollectionGateway to run against
        kind: Record kind whose collection gets drained
        batch_size: Max documents per fetch/delete round

    Returns:
        Total documents deleted (0 for an empty collection)

    Raises:
        StoreWriteError: A page fetch or batch commit failed
        ValueError: batch_size is not positive
    """
    kind = RecordKind(kind)
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    deleted = 0
    rounds = 0
    while True:
        try:
            page = await gateway.fetch_page(kind, batch_size)
            if not page:
                break
            deleted += await gateway.delete_batch(kind, page)
        except StoreError as e:
            logger.error(f"[{kind.collection}] erase stopped after {deleted} documents")
            raise StoreWriteError(kind, "delete", e.detail, deleted=deleted) from e

        rounds += 1
        # Let other requests run between batches
        await asyncio.sleep(0)

    logger.info(f"[{kind.collection}] erased {deleted} documents in {rounds} batches")
    return deleted
