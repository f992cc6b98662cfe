"""
Draw a trip, or one day of it, through any map adapter.
"""

from typing import Optional

from ..config.config import get_config
from ..config.logging_config import get_logger
from ..geo.route_builder import calculate_bounds, get_day_route, merge_all_routes
from ..models import TripData
from .base import MapAdapter
from .factory import create_map_adapter

logger = get_logger(__name__)


def draw_trip(adapter: MapAdapter, trip: TripData, day_index: Optional[int] = None) -> MapAdapter:
    """
    Draw onto an initialized adapter.

    Args:
        adapter: Any MapAdapter, already ``init``-ed
        trip: Trip document (WGS-84)
        day_index: Draw only this day; None draws the whole trip

    Returns:
        The same adapter
    """
    adapter.clear_route()
    adapter.clear_points()

    if day_index is None:
        days = list(trip.days)
        route = merge_all_routes(days)
    else:
        if not 0 <= day_index < len(trip.days):
            raise IndexError(f"Day index {day_index} out of range for {len(trip.days)} day(s)")
        days = [trip.days[day_index]]
        route = get_day_route(days[0])

    if route:
        adapter.draw_route(route)

    points = [point for day in days for point in day.points if point.is_set()]
    if points:
        adapter.draw_points(points)

    bounds = calculate_bounds(days)
    if bounds:
        lat, lon = bounds['center']
        adapter.set_center(lat, lon, bounds['zoom'])

    logger.debug(f"Drew {len(days)} day(s), {len(points)} point(s), route={'yes' if route else 'no'}")
    return adapter


def render_trip_map(trip: TripData, map_type: Optional[str] = None, day_index: Optional[int] = None,
                    container_id: str = "trip-map") -> MapAdapter:
    """Create, initialize and draw an adapter for ``map_type`` (default from config)."""
    adapter = create_map_adapter(map_type or get_config().map.default_provider)
    adapter.init(container_id)
    return draw_trip(adapter, trip, day_index)
