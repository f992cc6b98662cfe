"""
Display/measurement routes derived from day records.

A stored ``routeGeoJSON`` is authoritative. When a day has none, the
straight-line path through its points stands in for display and mileage, but
it is only written back to the day through ``regenerate_route``.
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

from ..exceptions import InsufficientGeometry
from ..models import DayRecord, Point, Route


def points_to_line_string(points: Sequence[Point]) -> Route:
    """Map points to a LineString of [lon, lat] pairs, in order, unsimplified."""
    return {
        'type': 'LineString',
        'coordinates': [[point.lon, point.lat] for point in points],
    }


def get_day_route(day: DayRecord) -> Optional[Route]:
    """Route to draw/measure for one day, or None."""
    if day.route_geojson:
        return day.route_geojson
    if len(day.points) >= 2:
        return points_to_line_string(day.points)
    return None


def _segments(route: Route) -> List[list]:
    if route.get('type') == 'LineString':
        return [route.get('coordinates') or []]
    if route.get('type') == 'MultiLineString':
        return [seg for seg in route.get('coordinates') or [] if seg]
    return []


def merge_all_routes(days: Iterable[DayRecord]) -> Optional[Route]:
    """
    Concatenate every day's route into one MultiLineString for whole-trip display.

    MultiLineString day routes are flattened into their individual segments;
    segments with fewer than 2 coordinates are dropped.

    Returns:
        MultiLineString dict, or None when no day contributes a segment
    """
    lines = []
    for day in days:
        route = get_day_route(day)
        if not route:
            continue
        for segment in _segments(route):
            if len(segment) >= 2:
                lines.append([list(coord) for coord in segment])

    if not lines:
        return None

    return {'type': 'MultiLineString', 'coordinates': lines}


def flatten_route(route: Optional[Route]) -> Optional[Route]:
    """Join a MultiLineString's segments into a single LineString."""
    if not route or route.get('type') != 'MultiLineString':
        return route
    flat = []
    for segment in _segments(route):
        flat.extend(list(coord) for coord in segment)
    return {'type': 'LineString', 'coordinates': flat}


def collect_all_points(days: Iterable[DayRecord]) -> List[Point]:
    all_points: List[Point] = []
    for day in days:
        all_points.extend(day.points)
    return all_points


# (span in degrees, zoom) checked top to bottom
_ZOOM_LADDER = ((10, 5), (5, 6), (2, 7), (1, 8), (0.5, 9), (0.2, 10), (0.1, 11))


def calculate_bounds(days: Iterable[DayRecord]) -> Optional[Dict]:
    """
    Centre and zoom level that frame every point of the given days.

    Returns:
        {'center': (lat, lon), 'zoom': int} or None when there are no points
    """
    all_points = collect_all_points(days)
    if not all_points:
        return None

    lons = [p.lon for p in all_points]
    lats = [p.lat for p in all_points]
    min_lon, max_lon = min(lons), max(lons)
    min_lat, max_lat = min(lats), max(lats)

    max_diff = max(max_lon - min_lon, max_lat - min_lat)
    zoom = 12
    for span, level in _ZOOM_LADDER:
        if max_diff > span:
            zoom = level
            break

    return {
        'center': ((min_lat + max_lat) / 2, (min_lon + max_lon) / 2),
        'zoom': zoom,
    }


def regenerate_route(day: DayRecord) -> DayRecord:
    """Replace the day's stored route with the path through its points.

    Raises:
        InsufficientGeometry: when the day has fewer than 2 points
    """
    from .distance import update_day_distance

    if len(day.points) < 2:
        raise InsufficientGeometry(len(day.points))
    return update_day_distance(replace(day, route_geojson=points_to_line_string(day.points)))
