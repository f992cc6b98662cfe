from .distance_stats import distance_summary, distance_dataframe
from .day_merger import merge_day_files, merge_to_trip, read_clue
from .gpx_import import parse_gpx_route, apply_gpx_to_day

__all__ = [
    'distance_summary', 'distance_dataframe',
    'merge_day_files', 'merge_to_trip', 'read_clue',
    'parse_gpx_route', 'apply_gpx_to_day',
]
