"""
Route length and trip mileage.

Distances are great-circle (haversine) sums in kilometres. Rounding to two
decimals happens once, on the value handed back to the caller; segment and
day sums are carried at full precision.
"""

from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from math import asin, cos, radians, sin, sqrt
from typing import Iterable, Optional, Sequence

from ..models import DayRecord, Route
from .route_builder import points_to_line_string

# Mean earth radius (IUGG), kilometres
EARTH_RADIUS_KM = 6371.0088


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on earth in kilometers.
    """
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * asin(sqrt(min(1.0, a)))

    return c * EARTH_RADIUS_KM


def round_km(value: float) -> float:
    """Round to 2 decimals, halves away from zero (2.675 -> 2.68)."""
    return float(Decimal(repr(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def _line_length(coordinates: Sequence[Sequence[float]]) -> float:
    total = 0.0
    for prev, curr in zip(coordinates, coordinates[1:]):
        # GeoJSON order is [lon, lat]
        total += haversine_distance(prev[1], prev[0], curr[1], curr[0])
    return total


def _raw_distance(route: Optional[Route]) -> Optional[float]:
    if not route:
        return None

    route_type = route.get('type')
    coordinates = route.get('coordinates') or []

    if route_type == 'LineString':
        if len(coordinates) < 2:
            return None
        return _line_length(coordinates)

    if route_type == 'MultiLineString':
        segments = [seg for seg in coordinates if seg and len(seg) >= 2]
        if not segments:
            return None
        return sum(_line_length(seg) for seg in segments)

    raise ValueError(f"Unsupported geometry type: {route_type}")


def calculate_distance(route: Optional[Route]) -> Optional[float]:
    """
    Length of a LineString or MultiLineString in kilometres.

    Args:
        route: GeoJSON geometry dict in WGS-84, or None

    Returns:
        Distance rounded to 2 decimals, or None when the geometry has no
        segment with at least two coordinates (no data is not zero movement)
    """
    distance = _raw_distance(route)
    return None if distance is None else round_km(distance)


def _raw_day_distance(day: DayRecord) -> Optional[float]:
    if day.route_geojson:
        return _raw_distance(day.route_geojson)
    if len(day.points) >= 2:
        return _raw_distance(points_to_line_string(day.points))
    return None


def calculate_day_distance(day: DayRecord) -> Optional[float]:
    """Distance of one day: stored route first, then the straight-line path through its points."""
    distance = _raw_day_distance(day)
    return None if distance is None else round_km(distance)


def calculate_total_distance(days: Iterable[DayRecord]) -> float:
    """Trip mileage; days without geometry count as 0."""
    total = 0.0
    for day in days:
        distance = calculate_day_distance(day)
        if distance is not None:
            total += distance
    return round_km(total)


def update_day_distance(day: DayRecord) -> DayRecord:
    """Return a copy of ``day`` with ``distance_km`` freshly computed.

    This is the only place that writes ``distance_km``; call it after any
    change to ``points`` or ``route_geojson``.
    """
    return replace(day, distance_km=calculate_day_distance(day))
