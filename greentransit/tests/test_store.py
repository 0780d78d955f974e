import pytest

from greentransit.core.config import Settings
from greentransit.core.database import build_engine
from greentransit.features.ledger.service import ProfileLedger
from greentransit.features.storage.factory import build_store
from greentransit.features.storage.store import InMemoryStore, StoreError
from greentransit.features.storage.store_sql import SqlStore


@pytest.fixture
def sql_store():
    return SqlStore(build_engine("sqlite:///:memory:"))


def test_memory_store_copies_values():
    store = InMemoryStore()
    value = {"items": [1, 2]}
    store.commit({"k": value})
    value["items"].append(3)
    assert store.get("k") == {"items": [1, 2]}

    fetched = store.get("k")
    fetched["items"].clear()
    assert store.get("k") == {"items": [1, 2]}


def test_memory_store_commit_is_all_or_nothing():
    store = InMemoryStore({"a": 1})
    with pytest.raises(StoreError):
        store.commit({"a": 2, "b": object()})
    assert store.get("a") == 1
    assert store.get("b") is None


def test_sql_store_round_trip(sql_store):
    assert sql_store.get("profile") is None
    sql_store.commit({"profile": {"totalPoints": 5}, "tasks": [{"id": 1}]})
    assert sql_store.get("profile") == {"totalPoints": 5}

    sql_store.commit({"profile": {"totalPoints": 9}})
    assert sql_store.get("profile") == {"totalPoints": 9}
    assert sql_store.get("tasks") == [{"id": 1}]
    assert sql_store.ping()

    sql_store.clear()
    assert sql_store.get("tasks") is None


def test_ledger_over_sql_store(sql_store, clock):
    ledger = ProfileLedger(sql_store, clock=clock)
    ledger.record_trip("bus", 10, "Douliu Station", "Main Gate")

    # A second ledger over the same store sees the committed snapshot
    fresh = ProfileLedger(sql_store, clock=clock)
    profile = fresh.get_profile()
    assert profile.travel_count == 1
    assert profile.total_points == 50
    assert fresh.get_records()[0].start_location == "Douliu Station"


def test_factory_selects_backend():
    assert isinstance(build_store(Settings(STORE_BACKEND="memory")), InMemoryStore)
    sql = build_store(Settings(STORE_BACKEND="sql", DATABASE_URL="sqlite:///:memory:"))
    assert isinstance(sql, SqlStore)
