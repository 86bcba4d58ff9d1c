"""
Shared fixtures: an in-memory stand-in for the async Firestore client.

Only the surface CollectionGateway uses is implemented:
    client.collection(name).add(data)
    client.collection(name).get()
    client.collection(name).where(filter=FieldFilter(...)).get()
    client.collection(name).limit(n).get()
    client.batch().delete(ref); await batch.commit()
"""

import itertools
import operator
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from google.api_core.exceptions import ServiceUnavailable
from google.cloud.firestore import SERVER_TIMESTAMP

from app.main import Config, create_app
from app.services import StoreHandle


OPERATORS = {
    "<": operator.lt,
    "<=": operator.le,
    "==": operator.eq,
    ">": operator.gt,
    ">=": operator.ge,
}


class FakeDocRef:
    def __init__(self, collection_name, doc_id):
        self.collection_name = collection_name
        self.id = doc_id


class FakeSnapshot:
    def __init__(self, collection_name, doc_id, data):
        self.id = doc_id
        self.reference = FakeDocRef(collection_name, doc_id)
        self._data = data

    def to_dict(self):
        return dict(self._data)


class FakeQuery:
    def __init__(self, db, name, filters=(), limit=None):
        self.db = db
        self.name = name
        self.filters = tuple(filters)
        self._limit = limit

    def where(self, filter):
        return FakeQuery(self.db, self.name, self.filters + (filter,), self._limit)

    def limit(self, count):
        return FakeQuery(self.db, self.name, self.filters, count)

    async def get(self):
        self.db.check("read", self.name)
        self.db.reads.append((self.name, self.filters, self._limit))
        snapshots = []
        for doc_id, data in self.db.collections.get(self.name, {}).items():
            if all(self._matches(data, f) for f in self.filters):
                snapshots.append(FakeSnapshot(self.name, doc_id, data))
        if self._limit is not None:
            snapshots = snapshots[:self._limit]
        return snapshots

    @staticmethod
    def _matches(data, field_filter):
        if field_filter.field_path not in data:
            return False
        compare = OPERATORS[field_filter.op_string]
        return compare(data[field_filter.field_path], field_filter.value)


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        super().__init__(db, name)

    async def add(self, data):
        self.db.check("insert", self.name)
        now = datetime.now(timezone.utc)
        stored = {
            key: (now if value is SERVER_TIMESTAMP else value)
            for key, value in data.items()
        }
        doc_id = f"doc{next(self.db.ids):04d}"
        self.db.collections.setdefault(self.name, {})[doc_id] = stored
        return now, FakeDocRef(self.name, doc_id)


class FakeBatch:
    def __init__(self, db):
        self.db = db
        self.refs = []

    def delete(self, ref):
        self.refs.append(ref)

    async def commit(self):
        for name in {ref.collection_name for ref in self.refs}:
            self.db.check("delete", name)
        for ref in self.refs:
            self.db.collections.get(ref.collection_name, {}).pop(ref.id, None)
        self.db.commits.append(len(self.refs))


class FakeFirestore:
    """Dict-backed async Firestore double with failure injection."""

    def __init__(self):
        self.collections = {}
        self.commits = []
        self.reads = []
        self.failures = set()
        self.ids = itertools.count(1)

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)

    def fail(self, op, name):
        """Make every `op` ("insert", "read", "delete") on `name` raise."""
        self.failures.add((op, name))

    def check(self, op, name):
        if (op, name) in self.failures:
            raise ServiceUnavailable(f"{op} on {name} unavailable")

    def seed(self, name, count, **fields):
        """Put `count` documents straight into a collection."""
        for _ in range(count):
            doc_id = f"doc{next(self.ids):04d}"
            self.collections.setdefault(name, {})[doc_id] = dict(fields)

    def docs(self, name):
        return self.collections.get(name, {})


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def client(fake_db):
    app = create_app(store=StoreHandle.available(fake_db, project_id="test-project"))
    return TestClient(app)


class SmallBatchConfig(Config):
    DELETE_BATCH_SIZE = 2


@pytest.fixture
def small_batch_client(fake_db):
    app = create_app(store=StoreHandle.available(fake_db), config=SmallBatchConfig)
    return TestClient(app)
