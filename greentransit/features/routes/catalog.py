"""
Static campus reference data: locations, danger zones, predefined routes.

Coordinates are (lat, lng). This module is read-only; nothing writes to it at
runtime.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from greentransit.models.route import CampusLocation, DangerZone, Route

CAMPUS_CENTER = (23.694033091149173, 120.53405455108127)

CAMPUS_LOCATIONS: Tuple[CampusLocation, ...] = (
    CampusLocation(
        id="main_gate",
        name="Main Gate",
        position=(23.69588784760861, 120.53431077240255),
        type="entrance",
        description="Main campus entrance",
    ),
    CampusLocation(
        id="library",
        name="Library",
        position=(23.693738, 120.534227),
        type="building",
        description="University library",
    ),
    CampusLocation(
        id="student_center",
        name="Student Activity Center",
        position=(23.69111131114025, 120.53509521420952),
        type="building",
        description="Venue for student clubs and gatherings",
    ),
    CampusLocation(
        id="engineering",
        name="Engineering College",
        position=(23.694691967664962, 120.53665125919225),
        type="building",
        description="Mechanical, electrical and electronic engineering departments",
    ),
    CampusLocation(
        id="management",
        name="Management College",
        position=(23.694414542648126, 120.53260008156494),
        type="building",
        description="Business, information and finance departments",
    ),
    CampusLocation(
        id="design",
        name="Design College",
        position=(23.692118514152266, 120.53489707733729),
        type="building",
        description="Industrial design, visual communication and architecture departments",
    ),
    CampusLocation(
        id="dormitory",
        name="Student Dormitory",
        position=(23.689289654493248, 120.53459085129329),
        type="building",
        description="Student housing",
    ),
    CampusLocation(
        id="station",
        name="Douliu Railway Station",
        position=(23.711770609311447, 120.54385186879234),
        type="transport",
        description="Douliu railway station",
    ),
)

DANGER_ZONES: Tuple[DangerZone, ...] = (
    DangerZone(
        id="dragon_pond_road",
        name="Dragon Pond Road",
        description="Off-campus road with heavy, fast traffic; pedestrians and cyclists take extra care",
        polygon=(
            (23.694174, 120.538126),
            (23.694136, 120.538132),
            (23.691521, 120.528763),
            (23.690892, 120.525113),
            (23.691923, 120.525069),
            (23.692033, 120.526151),
            (23.691712, 120.528572),
            (23.692377, 120.530349),
        ),
        risk_level=8,
    ),
)

# Main gate <-> station path, listed gate first
_GATE_STATION_PATH = (
    (23.695301341946802, 120.53440347370554),
    (23.696034294072675, 120.53426436802823),
    (23.6962453839526, 120.53406428923495),
    (23.695845693281342, 120.5316095139504),
    (23.6983567475842, 120.53112955650579),
    (23.699937652957573, 120.53207998178328),
    (23.70139707418221, 120.52935488756651),
    (23.70479905818722, 120.5291778615449),
    (23.708036233769363, 120.52983620144545),
    (23.713495937561092, 120.53316371668518),
    (23.710071663857093, 120.53777145453279),
    (23.712240820880822, 120.54079448932686),
)

PREDEFINED_ROUTES: Tuple[Route, ...] = (
    Route(
        id="main_to_library_walk",
        name="Main Gate to Library (walk)",
        start="main_gate",
        end="library",
        path=(
            (23.695950603417664, 120.53466292268489),
            (23.69458285562304, 120.53445704443878),
            (23.694047424630003, 120.53424783214136),
        ),
        distance=0.25,
        estimated_time=2,
        type="walking",
        safety_index=9,
        description="Follows the main campus walkway, lit the whole way",
    ),
    Route(
        id="dorm_to_engineering_cycle",
        name="Dormitory to Engineering College (bike)",
        start="dormitory",
        end="engineering",
        path=(
            (23.689857059017303, 120.53434529119755),
            (23.69021096920485, 120.53637566661449),
            (23.69151368847791, 120.53613606693024),
            (23.693507903278118, 120.53575996958178),
            (23.694617816287263, 120.53557496686773),
        ),
        distance=0.8,
        estimated_time=5,
        type="cycling",
        safety_index=8,
        description="Passes the design and management colleges on a dedicated bike lane",
    ),
    Route(
        id="station_to_main_bus",
        name="Douliu Station to Main Gate (bus)",
        start="station",
        end="main_gate",
        path=tuple(reversed(_GATE_STATION_PATH)),
        distance=2.8,
        estimated_time=15,
        type="bus",
        safety_index=9,
        description="Campus shuttle every 30 minutes, free with a student ID",
    ),
    Route(
        id="main_to_station_safe",
        name="Main Gate to Douliu Station (safe route)",
        start="main_gate",
        end="station",
        path=_GATE_STATION_PATH,
        distance=2.8,
        estimated_time=35,
        type="walking",
        safety_index=7,
        description="Avoids the Dragon Pond Road danger zone; longer but safer",
    ),
    Route(
        id="student_center_to_main_gate",
        name="Student Activity Center to Main Gate",
        start="student_center",
        end="main_gate",
        path=(
            (23.69132987812816, 120.53508153127581),
            (23.69113927138021, 120.53404885628476),
            (23.695124856025117, 120.5332364712782),
            (23.695301341946802, 120.53440347370554),
        ),
        distance=0.6,
        estimated_time=7,
        type="walking",
        safety_index=9,
        description="On-campus route, lit along the way",
    ),
)


def list_locations() -> List[CampusLocation]:
    return list(CAMPUS_LOCATIONS)


def get_location(location_id: str) -> Optional[CampusLocation]:
    return next((loc for loc in CAMPUS_LOCATIONS if loc.id == location_id), None)


def list_danger_zones() -> List[DangerZone]:
    return list(DANGER_ZONES)


def list_routes() -> List[Route]:
    return list(PREDEFINED_ROUTES)


def get_route(route_id: str) -> Optional[Route]:
    return next((r for r in PREDEFINED_ROUTES if r.id == route_id), None)
