"""
Route Scoring Engine

Pure, deterministic scoring of a route under a preference vector.
No external calls, no randomness, no side effects.

Scoring:
- Safety: safety_index weighted by safety / 10
- Eco: walking 10, cycling 8, bus 6, anything else 4; weighted by eco / 10
- Time: 10 - min(9, minutes / 10); weighted by time / 10
- Rainy weather: -3 for walking routes
- Night: -2 for routes with safety_index below 7

Higher is better. Totals can go negative under penalties.
"""

from __future__ import annotations

from greentransit.models.route import Route, RoutePreference, ScoreBreakdown


class RouteScoringEngine:
    """Pure deterministic route scoring."""

    ECO_SCORES = {"walking": 10.0, "cycling": 8.0, "bus": 6.0}
    ECO_SCORE_OTHER = 4.0

    TIME_SCORE_MAX = 10.0
    TIME_PENALTY_CAP = 9.0
    MINUTES_PER_POINT = 10.0

    RAINY_WALKING_PENALTY = -3.0
    NIGHT_PENALTY = -2.0
    NIGHT_SAFE_THRESHOLD = 7

    @staticmethod
    def eco_score(route_type: str) -> float:
        return RouteScoringEngine.ECO_SCORES.get(route_type, RouteScoringEngine.ECO_SCORE_OTHER)

    @staticmethod
    def time_score(estimated_minutes: float) -> float:
        """Shorter is better; floors at 1 for trips of 90+ minutes."""
        penalty = min(
            RouteScoringEngine.TIME_PENALTY_CAP,
            estimated_minutes / RouteScoringEngine.MINUTES_PER_POINT,
        )
        return RouteScoringEngine.TIME_SCORE_MAX - penalty

    @staticmethod
    def score(route: Route, prefs: RoutePreference) -> ScoreBreakdown:
        """
        Score one route.

        Args:
            route: Candidate route (direct or reversed)
            prefs: Weights 1..10 plus optional weather / time-of-day context

        Returns:
            ScoreBreakdown whose total() is the route score
        """
        weather = 0.0
        if prefs.weather == "rainy" and route.type == "walking":
            weather = RouteScoringEngine.RAINY_WALKING_PENALTY

        time_of_day = 0.0
        if prefs.time_of_day == "night" and route.safety_index < RouteScoringEngine.NIGHT_SAFE_THRESHOLD:
            time_of_day = RouteScoringEngine.NIGHT_PENALTY

        return ScoreBreakdown(
            safety=route.safety_index * (prefs.safety / 10),
            eco=RouteScoringEngine.eco_score(route.type) * (prefs.eco / 10),
            time=RouteScoringEngine.time_score(route.estimated_time) * (prefs.time / 10),
            weather=weather,
            time_of_day=time_of_day,
        )


def score_route(route: Route, prefs: RoutePreference) -> float:
    return RouteScoringEngine.score(route, prefs).total()
