from datetime import datetime, timedelta, timezone

from greentransit.features.stats.service import filter_records, summarize, transport_breakdown
from greentransit.models.profile import UserProfile
from greentransit.models.trip import TravelRecord

BASE = datetime(2025, 3, 1, tzinfo=timezone.utc)


def _records(modes):
    return [
        TravelRecord(f"travel_{i}", BASE + timedelta(days=i), mode, 1.0, "a", "b", 0.1, 1)
        for i, mode in enumerate(modes)
    ]


def test_breakdown_needs_five_trips():
    shares = transport_breakdown(_records(["walking"] * 4))
    assert set(shares.values()) == {0}
    assert len(shares) == 6


def test_breakdown_sums_to_hundred():
    shares = transport_breakdown(_records(["walking"] * 3 + ["cycling"] * 2 + ["bus"]))
    assert shares["walking"] == 50
    assert shares["cycling"] == 33
    assert shares["bus"] == 17
    assert sum(shares.values()) == 100


def test_rounding_drift_goes_to_largest_later_mode():
    shares = transport_breakdown(_records(["walking", "cycling", "bus"] * 2))
    assert (shares["walking"], shares["cycling"], shares["bus"]) == (33, 33, 34)
    assert sum(shares.values()) == 100


def test_filter_records_inclusive():
    records = _records(["walking"] * 5)
    picked = filter_records(records, BASE + timedelta(days=1), BASE + timedelta(days=3))
    assert [r.id for r in picked] == ["travel_1", "travel_2", "travel_3"]
    assert filter_records(records) == records


def test_summary():
    profile = UserProfile(total_points=120, total_carbon_saved=50, streak_days=2, travel_count=7)
    summary = summarize(profile, _records(["bus"] * 5))
    assert summary["treesEquivalent"] == 2.5
    assert summary["transportBreakdown"]["bus"] == 100
    assert summary["recordsInHistory"] == 5
