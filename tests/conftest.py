import copy
import itertools
from collections import defaultdict
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from kalima.dependencies import get_identity_provider, get_store
from kalima.exceptions import ConflictError, NotFoundError
from kalima.main import app


class InMemoryStore:
    """Dict-backed stand-in for FirestoreStore with the same async methods."""

    def __init__(self):
        self.collections = defaultdict(dict)
        self._ids = itertools.count(1)

    def _new_id(self):
        return f"doc{next(self._ids)}"

    def docs(self, collection):
        return self.collections[collection]

    async def get(self, collection, doc_id):
        doc = self.collections[collection].get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def find_one(self, collection, field, value):
        for doc_id, doc in self.collections[collection].items():
            if doc.get(field) == value:
                return doc_id, copy.deepcopy(doc)
        return None

    async def list(self, collection, filters=None):
        if isinstance(filters, dict):
            filters = [(k, "==", v) for k, v in filters.items()]
        result = []
        for doc_id, doc in self.collections[collection].items():
            if all(doc.get(field) == value for field, _, value in filters or []):
                result.append((doc_id, copy.deepcopy(doc)))
        return result

    async def add(self, collection, data):
        doc_id = self._new_id()
        self.collections[collection][doc_id] = copy.deepcopy(data)
        return doc_id

    async def create(self, collection, doc_id, data):
        if doc_id in self.collections[collection]:
            raise ConflictError("Document already exists")
        self.collections[collection][doc_id] = copy.deepcopy(data)

    async def set(self, collection, doc_id, data):
        self.collections[collection][doc_id] = copy.deepcopy(data)

    async def update(self, collection, doc_id, data):
        if doc_id not in self.collections[collection]:
            raise NotFoundError("Document not found")
        self.collections[collection][doc_id].update(copy.deepcopy(data))

    async def delete(self, collection, doc_id):
        self.collections[collection].pop(doc_id, None)

    async def array_union(self, collection, doc_id, field, values):
        if doc_id not in self.collections[collection]:
            raise NotFoundError("Document not found")
        doc = self.collections[collection][doc_id]
        current = list(doc.get(field) or [])
        for value in values:
            if value not in current:
                current.append(copy.deepcopy(value))
        doc[field] = current

    async def array_remove(self, collection, doc_id, field, values):
        if doc_id not in self.collections[collection]:
            raise NotFoundError("Document not found")
        doc = self.collections[collection][doc_id]
        doc[field] = [v for v in doc.get(field) or [] if v not in values]

    async def commit_batch(self, writes):
        for write in writes:
            if write.op == "create" and write.doc_id in self.collections[write.collection]:
                raise ConflictError("Document already exists")
            if write.op == "union" and write.doc_id not in self.collections[write.collection]:
                raise NotFoundError("Document not found")

        ids = []
        for write in writes:
            doc_id = write.doc_id or self._new_id()
            if write.op == "delete":
                self.collections[write.collection].pop(doc_id, None)
            elif write.op == "union":
                doc = self.collections[write.collection][doc_id]
                for field, values in write.data.items():
                    current = list(doc.get(field) or [])
                    current += [copy.deepcopy(v) for v in values if v not in current]
                    doc[field] = current
            else:
                self.collections[write.collection][doc_id] = copy.deepcopy(write.data)
            ids.append(doc_id)
        return ids


class FakeClock:
    """Returns a new timestamp one minute later on every call."""

    def __init__(self, start=datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        current = self.now
        self.now += timedelta(minutes=1)
        return current


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_identity_provider] = lambda: None
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def article_payload():
    """Factory for a minimal valid article submission."""

    def _make(title="Hi", **overrides):
        payload = {
            "availableLanguages": ["en"],
            "translations": {
                "en": {
                    "title": title,
                    "summary": "A summary here",
                    "content": [{"paragraph": "text"}],
                }
            },
        }
        payload.update(overrides)
        return payload

    return _make
