"""
Shared data structures for the trip document.

The persisted JSON uses camelCase keys (``routeGeoJSON``, ``distanceKm``); the
dataclasses use snake_case attributes and translate at the ``from_dict`` /
``to_dict`` boundary. All values are frozen: edits go through
``dataclasses.replace`` so a previous document value is never changed in place.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import InvalidCoordinate, MalformedDocument

# A GeoJSON LineString or MultiLineString dict, always WGS-84, [lon, lat] order.
Route = Dict[str, Any]

DAY_KEYS = ("day", "date", "title", "points", "routeGeoJSON", "distanceKm")
META_KEYS = ("title", "author", "description")


def _to_float(value: Any, what: str) -> float:
    if isinstance(value, bool):
        raise MalformedDocument(f"{what} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise MalformedDocument(f"{what} must be a number, got {value!r}")


@dataclass(frozen=True)
class Point:
    """A named waypoint in WGS-84 degrees."""

    name: str
    lat: float
    lon: float

    def is_set(self) -> bool:
        """``lat == 0 and lon == 0`` is the convention for an unset point."""
        return not (self.lat == 0 and self.lon == 0)

    def validate(self) -> "Point":
        """Raise InvalidCoordinate unless lat/lon are finite and in range."""
        validate_lon_lat(self.lon, self.lat)
        return self

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Point":
        if not isinstance(raw, dict):
            raise MalformedDocument(f"point must be an object, got {type(raw).__name__}")
        name = str(raw.get("name") or "")
        lat = _to_float(raw.get("lat", 0), "point.lat")
        lon = _to_float(raw.get("lon", 0), "point.lon")
        # (0, 0) means "not set yet" and is exempt from the range check
        if lat != 0 or lon != 0:
            try:
                validate_lon_lat(lon, lat)
            except InvalidCoordinate as e:
                raise MalformedDocument(f"point {name!r}: {e}") from e
        return cls(name=name, lat=lat, lon=lon)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "lat": self.lat, "lon": self.lon}


def validate_lon_lat(lon: Any, lat: Any) -> Tuple[float, float]:
    """Check one coordinate pair and return it as floats.

    Raises:
        InvalidCoordinate: for non-numeric, NaN/inf or out-of-range values
    """
    for label, value in (("longitude", lon), ("latitude", lat)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidCoordinate(f"{label} must be a number, got {value!r}", value)
        if not math.isfinite(value):
            raise InvalidCoordinate(f"{label} must be finite, got {value!r}", value)

    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(f"latitude {lat} outside [-90, 90]", lat)
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinate(f"longitude {lon} outside [-180, 180]", lon)
    return float(lon), float(lat)



def _check_line(coords: Any, what: str) -> None:
    if not isinstance(coords, list):
        raise MalformedDocument(f"{what} must be an array of [lon, lat] positions")
    for position in coords:
        if not isinstance(position, (list, tuple)) or len(position) < 2:
            raise MalformedDocument(f"{what} has a position that is not [lon, lat]: {position!r}")
        try:
            validate_lon_lat(position[0], position[1])
        except InvalidCoordinate as e:
            raise MalformedDocument(f"{what}: {e}") from e


def check_route(route: Any) -> None:
    """Reject anything but a LineString or MultiLineString of valid [lon, lat] positions.

    Raises:
        MalformedDocument: naming what is wrong with the geometry
    """
    if not isinstance(route, dict):
        raise MalformedDocument("day.routeGeoJSON must be a GeoJSON object or null")
    geometry_type = route.get("type")
    coords = route.get("coordinates")
    if geometry_type == "LineString":
        _check_line(coords, "day.routeGeoJSON.coordinates")
    elif geometry_type == "MultiLineString":
        if not isinstance(coords, list):
            raise MalformedDocument("day.routeGeoJSON.coordinates must be an array of lines")
        for i, line in enumerate(coords):
            _check_line(line, f"day.routeGeoJSON.coordinates[{i}]")
    else:
        raise MalformedDocument(
            f"day.routeGeoJSON must be a LineString or MultiLineString, got type {geometry_type!r}")


@dataclass(frozen=True)
class DayRecord:
    """One trip day.

    ``extras`` carries every key the core does not model (``meta``, ``video``,
    ``segments``, ``clue`` and whatever the scrapers add). It is opaque to the
    core and written back verbatim on export.
    """

    day: Optional[int]
    date: Optional[str]
    points: Tuple[Point, ...] = ()
    route_geojson: Optional[Route] = None
    distance_km: Optional[float] = None
    title: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "DayRecord":
        if not isinstance(raw, dict):
            raise MalformedDocument(f"day record must be an object, got {type(raw).__name__}")

        raw_points = raw.get("points") or []
        if not isinstance(raw_points, list):
            raise MalformedDocument("day.points must be an array")

        route = raw.get("routeGeoJSON")
        if route is not None:
            check_route(route)

        distance = raw.get("distanceKm")
        return cls(
            day=raw.get("day"),
            date=raw.get("date"),
            title=raw.get("title"),
            points=tuple(Point.from_dict(p) for p in raw_points),
            route_geojson=copy.deepcopy(route),
            distance_km=None if distance is None else _to_float(distance, "day.distanceKm"),
            extras={k: copy.deepcopy(v) for k, v in raw.items() if k not in DAY_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"day": self.day, "date": self.date}
        if self.title is not None:
            result["title"] = self.title
        result["points"] = [p.to_dict() for p in self.points]
        result["routeGeoJSON"] = copy.deepcopy(self.route_geojson)
        result["distanceKm"] = self.distance_km
        result.update(copy.deepcopy(self.extras))
        return result

    def with_changes(self, patch: Dict[str, Any]) -> "DayRecord":
        """Return a copy with a partial JSON-style patch merged in.

        Patch keys use the document names (``points``, ``routeGeoJSON``...).
        Unknown keys land in ``extras``.
        """
        merged = self.to_dict()
        merged.update(patch)
        return DayRecord.from_dict(merged)


@dataclass(frozen=True)
class TripMeta:
    """Descriptive trip header."""

    title: str = ""
    author: str = ""
    description: str = ""
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "TripMeta":
        if not isinstance(raw, dict):
            raise MalformedDocument(f"meta must be an object, got {type(raw).__name__}")
        return cls(
            title=raw.get("title") or "",
            author=raw.get("author") or "",
            description=raw.get("description") or "",
            extras={k: copy.deepcopy(v) for k, v in raw.items() if k not in META_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {"title": self.title, "author": self.author, "description": self.description}
        result.update(copy.deepcopy(self.extras))
        return result


@dataclass(frozen=True)
class TripData:
    """The whole trip document."""

    meta: TripMeta
    days: Tuple[DayRecord, ...] = ()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "TripData":
        return cls(
            meta=TripMeta.from_dict(raw["meta"]),
            days=tuple(DayRecord.from_dict(d) for d in raw["days"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"meta": self.meta.to_dict(), "days": [d.to_dict() for d in self.days]}

    def with_days(self, days) -> "TripData":
        return replace(self, days=tuple(days))


def sort_days(days, newest_first: bool = True) -> List[Tuple[int, DayRecord]]:
    """Order days for display, keeping each record's original index.

    Days compare by ``day`` number when both have one, otherwise by ``date``
    string; records with neither keep their relative order.
    """
    numbered, dated, rest = [], [], []
    for item in enumerate(days):
        record = item[1]
        if isinstance(record.day, int) and not isinstance(record.day, bool):
            numbered.append(item)
        elif record.date:
            dated.append(item)
        else:
            rest.append(item)

    numbered.sort(key=lambda item: item[1].day, reverse=newest_first)
    dated.sort(key=lambda item: item[1].date, reverse=newest_first)
    return numbered + dated + rest
