# greentransit/conftest.py
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to PYTHONPATH
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("ENV", "test")


class FakeClock:
    """Settable UTC clock for deterministic trip dates and record ids."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def set(self, moment: datetime) -> None:
        self.now = moment


@pytest.fixture(scope="session")
def db_url():
    """
    Provide DATABASE_URL for tests.

    Returns the URL from environment, or None if not set.
    """
    return os.getenv("TEST_DATABASE_URL") or os.getenv("DATABASE_URL")


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 3, 8, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    from greentransit.features.storage.store import InMemoryStore

    return InMemoryStore()


@pytest.fixture
def ledger(store, clock):
    from greentransit.features.ledger.service import ProfileLedger

    return ProfileLedger(store, clock=clock)


@pytest.fixture
def client(ledger):
    """TestClient whose ledger dependency is a fresh in-memory ledger."""
    from fastapi.testclient import TestClient

    from greentransit.api.deps import get_ledger
    from greentransit.main import app

    app.dependency_overrides[get_ledger] = lambda: ledger
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_ledger, None)
