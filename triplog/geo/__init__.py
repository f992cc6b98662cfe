"""
Geo pipeline for TripLog: frame conversion, route building and mileage.
"""

from .coordinate_transform import (
    CoordinateFrame,
    wgs84_to_gcj02,
    wgs84_to_bd09,
    gcj02_to_wgs84,
    bd09_to_wgs84,
    transform_point,
    transform_points,
    transform_route,
)
from .distance import (
    calculate_distance,
    calculate_day_distance,
    calculate_total_distance,
    update_day_distance,
)
from .route_builder import (
    points_to_line_string,
    get_day_route,
    merge_all_routes,
    calculate_bounds,
    regenerate_route,
)

__all__ = [
    'CoordinateFrame', 'wgs84_to_gcj02', 'wgs84_to_bd09', 'gcj02_to_wgs84', 'bd09_to_wgs84',
    'transform_point', 'transform_points', 'transform_route',
    'calculate_distance', 'calculate_day_distance', 'calculate_total_distance', 'update_day_distance',
    'points_to_line_string', 'get_day_route', 'merge_all_routes', 'calculate_bounds', 'regenerate_route',
]
