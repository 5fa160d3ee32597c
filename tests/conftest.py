"""
Pytest configuration and shared fixtures.
"""

import json

import pytest
from fastapi.testclient import TestClient

from adapters.local.json_key_store import JsonFileKeyStore
from api import create_app
from config import Config
from domain.expiry import MS_PER_HOUR
from domain.models import LIFETIME_DAYS
from ports.notifier import NotifierPort
from use_cases.lifecycle import LifecycleEngine

NOW = 1_700_000_000_000
DAY_MS = 24 * MS_PER_HOUR
ADMIN_SECRET = "s3cret-admin"


class FakeClock:
    """Callable clock returning a settable epoch-ms value."""

    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance_hours(self, hours: float) -> None:
        self.now += int(hours * MS_PER_HOUR)


class RecordingNotifier(NotifierPort):
    def __init__(self):
        self.messages = []
        self.closed = False

    def notify(self, message: str) -> None:
        self.messages.append(message)

    def close(self) -> None:
        self.closed = True


def make_key(auth_key="AUTH-1", status="active", activated_at=NOW - DAY_MS,
             duration_days=30, expires_at=NOW + DAY_MS, **extra):
    """Key object in the persisted (dashboard) shape."""
    entry = {
        "authKey": auth_key,
        "status": status,
        "durationDays": duration_days,
        "expiresAt": expires_at,
    }
    if activated_at is not None:
        entry["activatedAt"] = activated_at
    entry.update(extra)
    return entry


def make_lifetime_key(auth_key="LIFE-1", **extra):
    return make_key(auth_key=auth_key, duration_days=LIFETIME_DAYS, expires_at=0, **extra)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def keys_path(tmp_path):
    return tmp_path / "data" / "keys.json"


@pytest.fixture
def store(keys_path):
    return JsonFileKeyStore(str(keys_path))


@pytest.fixture
def seed(store):
    """Write a key mapping straight to the store file."""
    def _seed(keys):
        store.path.parent.mkdir(parents=True, exist_ok=True)
        store.path.write_text(json.dumps(keys), encoding="utf-8")
        return keys
    return _seed


@pytest.fixture
def read_store(store):
    def _read():
        return json.loads(store.path.read_text(encoding="utf-8"))
    return _read


@pytest.fixture
def engine(store, clock):
    return LifecycleEngine(store, heartbeat_hours=12, clock=clock)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app_config(keys_path):
    return Config(keys_file=str(keys_path), admin_secret=ADMIN_SECRET)


@pytest.fixture
def client(app_config, store, notifier, clock):
    app = create_app(app_config, store=store, notifier=notifier, clock=clock)
    with TestClient(app) as test_client:
        yield test_client
