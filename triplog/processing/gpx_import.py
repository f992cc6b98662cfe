"""
GPX track import.

Reads GPX 1.0/1.1 content with gpxpy and turns it into a GeoJSON route for a
day record. GPX coordinates are already WGS-84, so no frame conversion happens.
"""

from dataclasses import replace
from typing import List, Optional, Tuple

import gpxpy
import gpxpy.gpx

from ..config.logging_config import get_logger
from ..exceptions import MalformedDocument
from ..geo.distance import update_day_distance
from ..models import DayRecord, Point, Route

logger = get_logger(__name__)


def parse_gpx_route(gpx_content: str) -> Tuple[Optional[Route], List[Point]]:
    """
    Parse GPX content into a route and named waypoints.

    Track segments come first; planned ``<rte>`` routes are used only when the
    file has no track points. Segments with fewer than 2 points are dropped.

    Args:
        gpx_content: String content of the GPX file

    Returns:
        (route, waypoints). ``route`` is a LineString for one segment, a
        MultiLineString for several, or None when nothing usable was found.

    Raises:
        MalformedDocument: If the content is not valid GPX
    """
    try:
        gpx = gpxpy.parse(gpx_content)
    except gpxpy.gpx.GPXException as e:
        raise MalformedDocument(f"invalid GPX: {e}")

    segments: List[List[List[float]]] = []
    for track in gpx.tracks:
        for segment in track.segments:
            segments.append([[p.longitude, p.latitude] for p in segment.points])

    if not any(segments):
        for gpx_route in gpx.routes:
            segments.append([[p.longitude, p.latitude] for p in gpx_route.points])

    segments = [segment for segment in segments if len(segment) >= 2]

    waypoints = [
        Point(name=waypoint.name or '', lat=waypoint.latitude, lon=waypoint.longitude)
        for waypoint in gpx.waypoints
    ]

    logger.info(f"Parsed GPX: {len(segments)} segment(s), {len(waypoints)} waypoint(s)")

    if not segments:
        return None, waypoints
    if len(segments) == 1:
        return {'type': 'LineString', 'coordinates': segments[0]}, waypoints
    return {'type': 'MultiLineString', 'coordinates': segments}, waypoints


def apply_gpx_to_day(day: DayRecord, gpx_content: str, use_waypoints: bool = False) -> DayRecord:
    """
    Return a copy of ``day`` whose route comes from the GPX file.

    Args:
        day: Day to update
        gpx_content: String content of the GPX file
        use_waypoints: Replace the day's points with the GPX waypoints

    Raises:
        MalformedDocument: invalid GPX, or a file with no usable route
    """
    route, waypoints = parse_gpx_route(gpx_content)
    if route is None:
        raise MalformedDocument("GPX file contains no track or route with at least 2 points")

    updated = replace(day, route_geojson=route)
    if use_waypoints and waypoints:
        updated = replace(updated, points=tuple(waypoints))

    return update_day_distance(updated)
