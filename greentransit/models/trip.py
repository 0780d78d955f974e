from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


TRANSPORT_MODES: tuple[str, ...] = ("walking", "cycling", "bus", "carpool", "motorcycle", "car")
ZERO_CARBON_MODES = frozenset({"walking", "cycling"})
GREEN_MODES = frozenset({"walking", "cycling", "bus"})


def to_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    if not isinstance(value, str):
        raise ValueError(f"invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(text))


def format_timestamp(moment: Optional[datetime]) -> Optional[str]:
    if moment is None:
        return None
    return to_utc(moment).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class TravelRecord:
    """
    One logged trip. Immutable once created; carbon and points are derived
    by the calculator at submission time and never recomputed.
    """

    id: str
    date: datetime
    mode: str
    distance: float  # km
    start_location: str
    end_location: str
    carbon_saved: float  # kg CO2
    points: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": format_timestamp(self.date),
            "mode": self.mode,
            "distance": self.distance,
            "startLocation": self.start_location,
            "endLocation": self.end_location,
            "carbonSaved": self.carbon_saved,
            "points": self.points,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TravelRecord":
        if not isinstance(data, dict):
            raise ValueError("travel record must be an object")
        distance = float(data["distance"])
        carbon_saved = float(data.get("carbonSaved", 0.0))
        points = int(data.get("points", 0))
        if distance <= 0 or carbon_saved < 0 or points < 0:
            raise ValueError(f"travel record {data.get('id')!r} has negative or zero values")
        # Older clients stored the endpoints as "start" / "end"
        start = data.get("startLocation", data.get("start"))
        end = data.get("endLocation", data.get("end"))
        if not isinstance(start, str) or not isinstance(end, str):
            raise ValueError(f"travel record {data.get('id')!r} is missing endpoints")
        date = parse_timestamp(data.get("date"))
        if date is None:
            raise ValueError(f"travel record {data.get('id')!r} has no date")
        return cls(
            id=str(data["id"]),
            date=date,
            mode=str(data["mode"]),
            distance=distance,
            start_location=start,
            end_location=end,
            carbon_saved=carbon_saved,
            points=points,
        )
