"""
Emission / points calculator.

Pure, deterministic conversion of a trip into carbon saved and points.
No external calls, no side effects. Unknown modes degrade to zero credit.
"""

from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict

# g CO2 per km, per passenger
EMISSION_FACTORS: Dict[str, float] = {
    "walking": 0,
    "cycling": 0,
    "bus": 68,
    "carpool": 48,  # four people sharing one car
    "motorcycle": 103,
    "car": 192,
}

# Points per km
POINT_FACTORS: Dict[str, float] = {
    "walking": 10,
    "cycling": 8,
    "bus": 5,
    "carpool": 4,
    "motorcycle": 2,
    "car": 1,
}

BASELINE_MODE = "car"
STREAK_BLOCK_DAYS = 5
STREAK_BONUS_PER_BLOCK = 0.1
STREAK_BONUS_CAP = 0.5
KG_CO2_PER_TREE_YEAR = 20.0


def is_known_mode(mode: str) -> bool:
    return mode in EMISSION_FACTORS


def calculate_emission(mode: str, distance_km: float) -> float:
    """Emission of a trip in kg CO2."""
    factor = EMISSION_FACTORS.get(mode, 0)
    return factor * distance_km / 1000


def calculate_emission_saved(mode: str, distance_km: float) -> float:
    """kg CO2 saved compared with driving the same distance alone."""
    if not is_known_mode(mode):
        return 0.0
    saved = calculate_emission(BASELINE_MODE, distance_km) - calculate_emission(mode, distance_km)
    return max(0.0, saved)


def streak_bonus(streak_days: int) -> float:
    """+10% per full 5-day block, capped at +50%."""
    blocks = math.floor(max(0, streak_days) / STREAK_BLOCK_DAYS)
    return min(STREAK_BONUS_CAP, round(blocks * STREAK_BONUS_PER_BLOCK, 10))


def streak_multiplier(streak_days: int) -> float:
    return 1 + streak_bonus(streak_days)


def _round_half_up(value: float) -> int:
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_points(mode: str, distance_km: float, streak_days: int = 0) -> int:
    base = POINT_FACTORS.get(mode, 0) * distance_km
    return max(0, _round_half_up(base * streak_multiplier(streak_days)))


def calculate_trees_equivalent(carbon_saved_kg: float) -> float:
    """Trees needed for a year to absorb the same amount of CO2."""
    return carbon_saved_kg / KG_CO2_PER_TREE_YEAR
