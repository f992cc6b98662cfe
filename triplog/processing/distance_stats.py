"""
Trip mileage summaries.
"""

from typing import Any, Dict, Iterable, List

import pandas as pd

from ..geo.distance import calculate_day_distance, calculate_total_distance, round_km
from ..models import DayRecord, sort_days


def distance_summary(days: Iterable[DayRecord]) -> Dict[str, Any]:
    """
    Headline mileage numbers for a trip.

    Returns:
        total_distance_km, days_with_distance, total_days and
        average_distance_km (over days that have a distance, 0.0 if none)
    """
    days = list(days)
    total = calculate_total_distance(days)
    counted = sum(1 for day in days if calculate_day_distance(day) is not None)

    return {
        'total_distance_km': total,
        'days_with_distance': counted,
        'total_days': len(days),
        'average_distance_km': round_km(total / counted) if counted else 0.0,
    }


def distance_dataframe(days: Iterable[DayRecord], newest_first: bool = False) -> pd.DataFrame:
    """One row per day: index, day, date, title, point count, distance (km)."""
    rows: List[Dict[str, Any]] = []
    for index, day in sort_days(list(days), newest_first=newest_first):
        rows.append({
            'index': index,
            'day': day.day,
            'date': day.date,
            'title': day.title or '',
            'points': len(day.points),
            'has_route': day.route_geojson is not None,
            'distance_km': calculate_day_distance(day),
        })

    columns = ['index', 'day', 'date', 'title', 'points', 'has_route', 'distance_km']
    return pd.DataFrame(rows, columns=columns)
