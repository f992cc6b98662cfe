"""
Map rendering for TripLog.

One adapter per map provider behind a single interface; projection to GCJ-02
or BD-09 stays inside the adapters.
"""

from .base import MapAdapter, FoliumMapAdapter
from .adapters import OSMAdapter, AMapAdapter, BaiduMapAdapter
from .factory import create_map_adapter
from .map_view import draw_trip, render_trip_map

__all__ = [
    'MapAdapter', 'FoliumMapAdapter', 'OSMAdapter', 'AMapAdapter', 'BaiduMapAdapter',
    'create_map_adapter', 'draw_trip', 'render_trip_map',
]
