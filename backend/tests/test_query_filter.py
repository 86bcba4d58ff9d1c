"""
Query Filter Policy Tests
=========================
"""

from app.models import QueryFilter, RecordKind
from app.services.query_filter import HOUR_MS, build_filter, build_filters

NOW = 1_700_000_000_000


def test_sensor_and_citizen_use_trailing_day():
    expected = QueryFilter(field="time", op=">", value=NOW - 24 * HOUR_MS)
    assert build_filter("sensor", NOW) == expected
    assert build_filter(RecordKind.CITIZEN, NOW) == expected


def test_pre_reports_use_end_date_only():
    assert build_filter("pre", NOW) == QueryFilter(field="endDate", op=">", value=NOW)


def test_window_is_configurable():
    assert build_filter("sensor", NOW, window_hours=1).value == NOW - HOUR_MS


def test_all_filters_share_one_instant():
    filters = build_filters(NOW)
    assert set(filters) == set(RecordKind)
    assert filters[RecordKind.PRE].value == NOW
    assert filters[RecordKind.SENSOR].value == NOW - 24 * HOUR_MS


def test_deterministic():
    assert build_filters(NOW) == build_filters(NOW)
