"""
Pytest configuration for the health records backend.

Shared fixtures:
- in-memory repositories and the services built on them, for unit tests
- a Flask app on in-memory SQLite with fake content-store and settlement
  collaborators injected through ``app.extensions``
"""
import hashlib
from datetime import datetime, timedelta

import pytest

from access_control.ledger import AccessLedger
from app import create_app
from config import TestConfig
from errors import UpstreamUnavailable
from repositories.memory import MemoryGrantRepository, MemoryRecordRepository, MemoryUserRepository
from services.record_store import RecordStore
from services.user_directory import UserDirectory

TEST_PASSWORD = "Sup3rSecret!"


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start=datetime(2026, 1, 1, 9, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


class FakeContentStore:

    def __init__(self):
        self.blobs = {}
        self.available = True

    def put(self, data):
        if not self.available:
            raise UpstreamUnavailable("Content store timed out")
        cid = "bafy" + hashlib.sha256(data).hexdigest()[:32]
        self.blobs[cid] = data
        return cid

    def get(self, content_address):
        if not self.available or content_address not in self.blobs:
            raise UpstreamUnavailable("Content store request failed")
        return self.blobs[content_address]

    def gateway_url(self, content_address):
        return f"https://gateway.test/ipfs/{content_address}"


class FakeSettlement:

    def __init__(self, available=True):
        self.available = available
        self.submitted = []

    def submit(self, record):
        self.submitted.append(record.id)
        if not self.available:
            raise UpstreamUnavailable("Settlement service request failed")
        return f"0xtx{record.id:04d}"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(clock):
    return AccessLedger(MemoryGrantRepository(), clock=clock)


@pytest.fixture
def store(ledger, clock):
    return RecordStore(MemoryRecordRepository(clock=clock), ledger)


@pytest.fixture
def directory():
    return UserDirectory(MemoryUserRepository())


@pytest.fixture
def alice(directory):
    return directory.create_user("alice", TEST_PASSWORD)


@pytest.fixture
def provider(directory):
    return directory.create_user("dr_bob", TEST_PASSWORD, wallet_address="0xProvider1")


@pytest.fixture
def content_store():
    return FakeContentStore()


@pytest.fixture
def settlement():
    return FakeSettlement()


@pytest.fixture
def app(content_store, settlement):
    app = create_app(TestConfig)
    app.extensions["content_store"] = content_store
    app.extensions["settlement"] = settlement
    yield app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


def register_and_login(client, username, wallet_address=None, password=TEST_PASSWORD):
    """Register a user through the API and return (auth headers, user payload)."""
    body = {"username": username, "password": password}
    if wallet_address:
        body["wallet_address"] = wallet_address
    r = client.post("/auth/register", json=body)
    assert r.status_code == 201, r.get_json()

    r = client.post("/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.get_json()
    data = r.get_json()
    return {"Authorization": f"Bearer {data['access_token']}"}, data["user"]


@pytest.fixture
def alice_api(client):
    return register_and_login(client, "alice")


@pytest.fixture
def provider_api(client):
    return register_and_login(client, "dr_bob", wallet_address="0xProvider1")
