"""
Pytest configuration and shared fixtures for backend tests.

MongoDB is replaced by a small in-memory fake client injected through the
ConnectionManager's client_factory.
"""

import asyncio
import os

# Disable rate limiting before the limiter module is imported
os.environ["TASKBOARD_RATE_LIMIT_ENABLED"] = "false"

import pytest  # noqa: E402
from bson import ObjectId  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

TEST_URI = "mongodb://localhost:27017/taskboard"


def _matches(doc, query):
    return all(doc.get(key) == value for key, value in (query or {}).items())


def _project(doc, projection):
    hidden = {key for key, flag in (projection or {}).items() if not flag}
    return {key: value for key, value in doc.items() if key not in hidden}


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, keys):
        for key, direction in reversed(keys):
            self._docs.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return list(self._docs)


class FakeCollection:
    """Supports the subset of the motor collection API the stores use."""

    def __init__(self):
        self.docs = []
        self.fail_with = None
        self.insert_error = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def find(self, query=None, projection=None):
        self._check()
        return FakeCursor([_project(doc, projection) for doc in self.docs if _matches(doc, query)])

    async def find_one(self, query=None, projection=None):
        self._check()
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    async def insert_one(self, doc):
        self._check()
        if self.insert_error is not None:
            raise self.insert_error
        doc.setdefault("_id", ObjectId())
        self.docs.append(dict(doc))
        return FakeInsertResult(doc["_id"])


class FakeDatabase:
    def __init__(self):
        self._collections = {}

    def __getitem__(self, name):
        return self._collections.setdefault(name, FakeCollection())


class FakeAdmin:
    def __init__(self, ping_error=None):
        self.ping_error = ping_error

    async def command(self, name):
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}


class FakeMongoClient:
    def __init__(self, uri, ping_error=None, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.admin = FakeAdmin(ping_error)
        self.address = ("127.0.0.1", 27017)
        self.closed = False
        self._databases = {}

    def __getitem__(self, name):
        return self._databases.setdefault(name, FakeDatabase())

    def close(self):
        self.closed = True


class FakeClientFactory:
    """Stands in for AsyncIOMotorClient and records every client it builds."""

    def __init__(self):
        self.clients = []
        self.ping_error = None
        self.construct_error = None

    def __call__(self, uri, **kwargs):
        if self.construct_error is not None:
            raise self.construct_error
        client = FakeMongoClient(uri, ping_error=self.ping_error, **kwargs)
        self.clients.append(client)
        return client

    @property
    def client(self):
        return self.clients[-1]

    def collection(self, name, database="taskboard"):
        return self.client[database][name]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's database settings out of the tests."""
    for name in ("MONGO_URI", "DATABASE_URL", "CLIENT_URL", "TASKBOARD_MONGO_URI"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def client_factory():
    return FakeClientFactory()


@pytest.fixture
def app_settings():
    from taskboard.config import Settings

    return Settings(environment="test", mongo_uri=None)


@pytest.fixture
def disconnected_manager():
    from taskboard.db import ConnectionManager

    return ConnectionManager(uri=None)


@pytest.fixture
def connected_manager(client_factory):
    from taskboard.db import ConnectionManager

    manager = ConnectionManager(uri=TEST_URI, client_factory=client_factory)
    asyncio.run(manager.connect())
    return manager


@pytest.fixture
def client(app_settings):
    """Test client for an app without a database (fallback mode)."""
    from taskboard.db import ConnectionManager
    from taskboard.main import create_app

    app = create_app(app_settings, ConnectionManager(uri=None))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def connected_client(app_settings, client_factory):
    """Test client for an app connected to the fake MongoDB."""
    from taskboard.db import ConnectionManager
    from taskboard.main import create_app

    manager = ConnectionManager(uri=TEST_URI, client_factory=client_factory)
    app = create_app(app_settings, manager)
    with TestClient(app) as test_client:
        yield test_client
