"""
Read-only dashboard projections over the profile and trip history.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from greentransit.features.calculator.service import calculate_trees_equivalent, streak_multiplier
from greentransit.models.profile import UserProfile
from greentransit.models.trip import TRANSPORT_MODES, TravelRecord, to_utc

# Fewer trips than this and the mode share is reported as all zeros
MIN_RECORDS_FOR_BREAKDOWN = 5


def filter_records(
    records: Sequence[TravelRecord],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[TravelRecord]:
    """Records with start <= date <= end; order preserved."""
    lo = to_utc(start) if start else None
    hi = to_utc(end) if end else None
    return [
        r
        for r in records
        if (lo is None or r.date >= lo) and (hi is None or r.date <= hi)
    ]


def transport_breakdown(records: Sequence[TravelRecord]) -> Dict[str, int]:
    """
    Whole-number share of trips per mode, summing to exactly 100.

    Each share is rounded half-up; any rounding drift is absorbed by the
    largest share (the later mode wins a tie).
    """
    shares = {mode: 0 for mode in TRANSPORT_MODES}
    if len(records) < MIN_RECORDS_FOR_BREAKDOWN:
        return shares

    counts = {mode: 0 for mode in TRANSPORT_MODES}
    for record in records:
        if record.mode in counts:
            counts[record.mode] += 1
    total = sum(counts.values())
    if total == 0:
        return shares

    for mode, count in counts.items():
        shares[mode] = math.floor(count / total * 100 + 0.5)

    drift = 100 - sum(shares.values())
    if drift:
        largest = TRANSPORT_MODES[0]
        for mode in TRANSPORT_MODES[1:]:
            if shares[mode] >= shares[largest]:
                largest = mode
        shares[largest] += drift
    return shares


def summarize(profile: UserProfile, records: Sequence[TravelRecord]) -> dict:
    return {
        "totalPoints": profile.total_points,
        "rewardPoints": profile.reward_points,
        "totalCarbonSaved": profile.total_carbon_saved,
        "treesEquivalent": round(calculate_trees_equivalent(profile.total_carbon_saved), 2),
        "streakDays": profile.streak_days,
        "streakMultiplier": streak_multiplier(profile.streak_days),
        "travelCount": profile.travel_count,
        "recordsInHistory": len(records),
        "transportBreakdown": transport_breakdown(records),
    }
