import math

import pytest

from greentransit.features.calculator.service import (
    calculate_emission,
    calculate_emission_saved,
    calculate_points,
    calculate_trees_equivalent,
    streak_multiplier,
)
from greentransit.models.trip import TRANSPORT_MODES


def test_walking_two_km_saves_full_car_emission():
    assert calculate_emission_saved("walking", 2) == pytest.approx(0.384)
    assert calculate_points("walking", 2, 0) == 20


def test_bus_saves_difference_to_car():
    # (192 - 68) g/km over 10 km
    assert calculate_emission_saved("bus", 10) == pytest.approx(1.24)


def test_car_saves_nothing():
    assert calculate_emission_saved("car", 12.5) == 0


@pytest.mark.parametrize("mode", TRANSPORT_MODES)
def test_emission_monotonic_in_distance(mode):
    assert calculate_emission(mode, 1) <= calculate_emission(mode, 2) <= calculate_emission(mode, 5)
    assert calculate_emission_saved(mode, 1) <= calculate_emission_saved(mode, 5)


def test_unknown_mode_earns_nothing():
    assert calculate_emission("hoverboard", 3) == 0
    assert calculate_emission_saved("hoverboard", 3) == 0
    assert calculate_points("hoverboard", 3, 10) == 0


def test_points_monotonic_in_streak():
    earned = [calculate_points("walking", 1, s) for s in range(0, 40)]
    assert earned == sorted(earned)
    assert calculate_points("walking", 1, 4) == 10
    assert calculate_points("walking", 1, 5) == 11


def test_streak_bonus_caps_at_fifty_percent():
    assert calculate_points("walking", 1, 25) == calculate_points("walking", 1, 50) == 15
    assert streak_multiplier(100) == pytest.approx(1.5)


def test_points_round_half_up():
    assert calculate_points("walking", 0.25, 0) == 3
    assert calculate_points("cycling", 0.8, 0) == 6


def test_trees_equivalent():
    assert calculate_trees_equivalent(40) == 2
    assert math.isclose(calculate_trees_equivalent(0.384), 0.0192)
