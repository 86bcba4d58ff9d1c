"""
Query Filter Policy
===================

Decides which stored records count as "currently relevant" for the map.

    sensor / citizen:  time > now - 24h     (trailing recency window)
    pre:               endDate > now        (report still active)

Older records stay in Firestore; they just aren't served by the default read.
`startDate` never hides a pre-report.

All values are epoch milliseconds. Callers sample `now` once per request and
pass the same value for every kind so the three collections line up.
"""

from typing import Union

from app.models import RecordKind, QueryFilter


HOUR_MS = 60 * 60 * 1000
DEFAULT_WINDOW_HOURS = 24


def build_filter(
    kind: Union[RecordKind, str],
    now_ms: int,
    window_hours: float = DEFAULT_WINDOW_HOURS,
) -> QueryFilter:
    """
    Build the read predicate for one kind.

    Args:
        kind: Record kind
        now_ms: The request's snapshot instant (epoch millis)
        window_hours: Recency window for sensor/citizen data

    Returns:
        QueryFilter to hand to CollectionGateway.read_filtered
    """
    kind = RecordKind(kind)
    if kind is RecordKind.PRE:
        return QueryFilter(field="endDate", op=">", value=now_ms)
    return QueryFilter(field="time", op=">", value=now_ms - int(window_hours * HOUR_MS))


def build_filters(now_ms: int, window_hours: float = DEFAULT_WINDOW_HOURS) -> dict:
    """Filters for every kind, all built from the same instant."""
    return {kind: build_filter(kind, now_ms, window_hours) for kind in RecordKind}
