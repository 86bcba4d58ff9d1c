"""
Collection Gateway Tests
========================

Runs the gateway against the in-memory Firestore double from conftest.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from app.exceptions import StoreReadError, StoreWriteError
from app.models import CitizenReport, QueryFilter, RecordKind, SensorReading
from app.services.gateway import CollectionGateway


def run(coro):
    return asyncio.run(coro)


class TestInsert:

    def test_returns_store_id_and_uses_kind_collection(self, fake_db):
        gateway = CollectionGateway(fake_db)
        reading = SensorReading(lat=1, lon=2, smoke=3, temp=4, time=5)

        doc_id = run(gateway.insert(RecordKind.SENSOR, reading))

        assert doc_id in fake_db.docs("sensorData")
        stored = fake_db.docs("sensorData")[doc_id]
        assert stored["lat"] == 1.0
        assert stored["humidity"] == 0.0

    def test_created_at_comes_from_store_clock(self, fake_db):
        gateway = CollectionGateway(fake_db)
        before = datetime.now(timezone.utc)

        doc_id = run(gateway.insert("citizen", {"lat": 1.0, "lon": 2.0, "time": 3, "createdAt": "1999-01-01"}))

        created_at = fake_db.docs("citizenReports")[doc_id]["createdAt"]
        assert isinstance(created_at, datetime)
        assert created_at >= before

    def test_store_failure_becomes_write_error(self, fake_db):
        fake_db.fail("insert", "preReports")
        gateway = CollectionGateway(fake_db)

        with pytest.raises(StoreWriteError) as exc_info:
            run(gateway.insert("pre", {"lat": 1.0, "lon": 2.0, "startDate": 1, "endDate": 2}))

        assert exc_info.value.kind is RecordKind.PRE
        assert exc_info.value.operation == "insert"
        assert fake_db.docs("preReports") == {}

    def test_unknown_kind_is_a_programming_error(self, fake_db):
        gateway = CollectionGateway(fake_db)
        with pytest.raises(ValueError):
            run(gateway.insert("drone", {"lat": 1.0}))


class TestReads:

    def test_read_all_includes_ids(self, fake_db):
        fake_db.seed("citizenReports", 3, lat=1.0, lon=2.0, time=10)
        gateway = CollectionGateway(fake_db)

        rows = run(gateway.read_all(RecordKind.CITIZEN))

        assert len(rows) == 3
        assert all(row["id"].startswith("doc") for row in rows)
        assert rows[0]["lat"] == 1.0

    def test_read_filtered_applies_predicate(self, fake_db):
        gateway = CollectionGateway(fake_db)
        run(gateway.insert("citizen", CitizenReport(lat=1, lon=1, time=100)))
        run(gateway.insert("citizen", CitizenReport(lat=2, lon=2, time=200)))

        rows = run(gateway.read_filtered("citizen", QueryFilter(field="time", op=">", value=150)))

        assert [row["time"] for row in rows] == [200]

    def test_read_failure_becomes_read_error(self, fake_db):
        fake_db.fail("read", "sensorData")
        gateway = CollectionGateway(fake_db)

        with pytest.raises(StoreReadError):
            run(gateway.read_filtered("sensor", QueryFilter(field="time", op=">", value=0)))
        with pytest.raises(StoreReadError):
            run(gateway.read_all("sensor"))

    def test_round_trip(self, fake_db):
        gateway = CollectionGateway(fake_db)
        reading = SensorReading(lat=37.5, lon=127.0, smoke=10, temp=20, humidity=30, time=1000)

        doc_id = run(gateway.insert("sensor", reading))
        [row] = run(gateway.read_all("sensor"))

        created_at = row.pop("createdAt")
        assert isinstance(created_at, datetime)
        assert row == {"id": doc_id, **reading.model_dump()}
