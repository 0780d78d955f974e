import pytest

from greentransit.features.routes.catalog import (
    CAMPUS_LOCATIONS,
    DANGER_ZONES,
    PREDEFINED_ROUTES,
    get_location,
)
from greentransit.features.routes.scoring_engine import RouteScoringEngine, score_route
from greentransit.features.routes.service import (
    candidate_routes,
    find_route,
    recommend_route,
    reverse_route,
)
from greentransit.models.route import Route, RoutePreference


def _route(route_id: str) -> Route:
    return next(r for r in PREDEFINED_ROUTES if r.id == route_id)


def test_catalog_contents():
    assert len(CAMPUS_LOCATIONS) == 8
    assert len(PREDEFINED_ROUTES) == 5
    assert DANGER_ZONES[0].risk_level == 8
    assert len(DANGER_ZONES[0].polygon) == 8
    assert get_location("station").type == "transport"
    assert get_location("nowhere") is None
    # Every route endpoint is a known location
    ids = {loc.id for loc in CAMPUS_LOCATIONS}
    assert all(r.start in ids and r.end in ids for r in PREDEFINED_ROUTES)


def test_direct_route_found():
    route = find_route("main_gate", "library")
    assert route.id == "main_to_library_walk"


def test_reverse_route_fallback():
    original = _route("main_to_library_walk")
    route = find_route("library", "main_gate")

    assert route.id == "main_to_library_walk_reverse"
    assert route.name.endswith("(reverse)")
    assert (route.start, route.end) == ("library", "main_gate")
    assert route.path == tuple(reversed(original.path))
    assert route.distance == original.distance
    assert route.safety_index == original.safety_index


def test_no_route():
    assert find_route("main_gate", "design") is None
    assert recommend_route("main_gate", "design", RoutePreference()) is None


def test_direct_route_shadows_reverse():
    # Both directions exist in the catalog; only the direct one is a candidate
    candidates = candidate_routes("main_gate", "station")
    assert [c.id for c in candidates] == ["main_to_station_safe"]
    assert [c.id for c in candidate_routes("station", "main_gate")] == ["station_to_main_bus"]


def test_reverse_used_only_when_direct_missing():
    candidates = candidate_routes("library", "main_gate")
    assert [c.id for c in candidates] == ["main_to_library_walk_reverse"]


def test_default_score():
    # safety 9*.5 + eco 10*.5 + time (10 - .2)*.5
    assert score_route(_route("main_to_library_walk"), RoutePreference()) == pytest.approx(14.4)


def test_tie_keeps_first_candidate():
    first = Route("first", "First", "a", "b", ((0.0, 0.0),), 1.0, 10, "walking", 8)
    second = Route("second", "Second", "a", "b", ((1.0, 1.0),), 1.0, 10, "walking", 8)
    rec = recommend_route("a", "b", RoutePreference(), routes=(first, second))
    assert rec.route.id == "first"
    assert rec.candidates_considered == 2


def test_rain_keeps_only_direct_candidate():
    rec = recommend_route("main_gate", "station", RoutePreference(weather="rainy"))
    assert rec.route.id == "main_to_station_safe"
    assert rec.candidates_considered == 1
    assert not rec.reversed
    # safety 3.5 + eco 5 + time 3.25 - 3 rain
    assert rec.score == pytest.approx(8.75)


def test_higher_score_wins_between_direct_routes():
    slow = Route("slow", "Slow", "a", "b", ((0.0, 0.0),), 2.0, 60, "walking", 6)
    fast = Route("fast", "Fast", "a", "b", ((0.0, 0.0),), 2.0, 5, "bus", 9)
    rec = recommend_route("a", "b", RoutePreference(weather="rainy"), routes=(slow, fast))
    assert rec.route.id == "fast"


def test_rainy_penalty_is_three():
    route = _route("student_center_to_main_gate")
    dry = score_route(route, RoutePreference(weather="sunny"))
    wet = score_route(route, RoutePreference(weather="rainy"))
    assert dry - wet == pytest.approx(3)
    # Non-walking routes are unaffected
    bus = _route("station_to_main_bus")
    assert score_route(bus, RoutePreference(weather="rainy")) == score_route(bus, RoutePreference())


def test_night_penalty_only_below_safety_seven():
    risky = Route("risky", "Risky", "a", "b", ((0.0, 0.0),), 1.0, 10, "cycling", 6)
    safe = _route("main_to_station_safe")  # safety 7
    night = RoutePreference(time_of_day="night")

    assert score_route(risky, RoutePreference()) - score_route(risky, night) == pytest.approx(2)
    assert score_route(safe, night) == score_route(safe, RoutePreference())


def test_time_score_floor():
    assert RouteScoringEngine.time_score(500) == 1
    assert RouteScoringEngine.time_score(0) == 10
    assert RouteScoringEngine.eco_score("gondola") == 4


def test_recommendation_is_deterministic():
    prefs = RoutePreference(safety=9, eco=2, time=7, weather="cloudy", time_of_day="evening")
    results = {recommend_route("station", "main_gate", prefs).to_dict()["route"]["id"] for _ in range(10)}
    assert results == {"station_to_main_bus"}


def test_reverse_of_reverse_restores_path():
    original = _route("dorm_to_engineering_cycle")
    twice = reverse_route(reverse_route(original))
    assert twice.path == original.path
    assert (twice.start, twice.end) == (original.start, original.end)
