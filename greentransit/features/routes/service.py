from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from greentransit.features.routes.catalog import PREDEFINED_ROUTES
from greentransit.features.routes.scoring_engine import RouteScoringEngine
from greentransit.models.route import Route, RoutePreference, RouteRecommendation

logger = logging.getLogger("greentransit")

REVERSE_SUFFIX = "_reverse"


def reverse_route(route: Route) -> Route:
    """Synthetic opposite-direction route; metrics are carried over unchanged."""
    return replace(
        route,
        id=f"{route.id}{REVERSE_SUFFIX}",
        name=f"{route.name} (reverse)",
        start=route.end,
        end=route.start,
        path=tuple(reversed(route.path)),
    )


def candidate_routes(
    start_id: str, end_id: str, routes: Sequence[Route] = PREDEFINED_ROUTES
) -> List[Route]:
    """Direct catalog routes; reversed ones only when no direct route exists."""
    direct = [r for r in routes if r.start == start_id and r.end == end_id]
    if direct:
        return direct
    return [reverse_route(r) for r in routes if r.start == end_id and r.end == start_id]


def find_route(
    start_id: str, end_id: str, routes: Sequence[Route] = PREDEFINED_ROUTES
) -> Optional[Route]:
    """First direct route, else the first reversed one, else None."""
    candidates = candidate_routes(start_id, end_id, routes)
    return candidates[0] if candidates else None


def recommend_route(
    start_id: str,
    end_id: str,
    prefs: RoutePreference,
    routes: Sequence[Route] = PREDEFINED_ROUTES,
) -> Optional[RouteRecommendation]:
    candidates = candidate_routes(start_id, end_id, routes)
    if not candidates:
        logger.info("route.not_found", extra={"start": start_id, "end": end_id})
        return None

    best: Optional[RouteRecommendation] = None
    for route in candidates:
        breakdown = RouteScoringEngine.score(route, prefs)
        score = breakdown.total()
        # Strictly greater: ties keep the earlier candidate
        if best is None or score > best.score:
            best = RouteRecommendation(
                route=route,
                score=score,
                breakdown=breakdown,
                reversed=route.id.endswith(REVERSE_SUFFIX),
                candidates_considered=len(candidates),
            )
    return best
