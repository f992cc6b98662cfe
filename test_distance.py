#!/usr/bin/env python3
"""
Test script for route distance calculation.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from triplog.geo.distance import (
    calculate_day_distance,
    calculate_distance,
    calculate_total_distance,
    haversine_distance,
    round_km,
    update_day_distance,
)
from triplog.models import DayRecord, Point

TENTH_DEGREE_AT_39N = {'type': 'LineString', 'coordinates': [[116.0, 39.0], [116.1, 39.0]]}


def test_tenth_degree_of_longitude_at_39n():
    """0.1 degree of longitude at 39N is about 8.64 km on the mean-radius sphere."""
    print("Testing single segment distance...")

    distance = calculate_distance(TENTH_DEGREE_AT_39N)

    assert distance == 8.64
    assert distance == pytest.approx(8.64, abs=0.1)
    print(f"✓ Distance: {distance} km")


def test_haversine_known_value():
    # one degree of latitude on the mean sphere
    assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, abs=0.01)
    assert haversine_distance(39.0, 116.0, 39.0, 116.0) == 0.0


def test_multi_line_string_sums_segments():
    route = {
        'type': 'MultiLineString',
        'coordinates': [
            [[116.0, 39.0], [116.1, 39.0]],
            [[117.0, 39.0], [117.1, 39.0]],
        ],
    }

    # gap between segments is not counted
    assert calculate_distance(route) == 17.28


@pytest.mark.parametrize("route", [
    None,
    {},
    {'type': 'LineString', 'coordinates': []},
    {'type': 'LineString', 'coordinates': [[116.0, 39.0]]},
    {'type': 'MultiLineString', 'coordinates': []},
    {'type': 'MultiLineString', 'coordinates': [[[116.0, 39.0]]]},
])
def test_short_geometry_has_no_distance(route):
    assert calculate_distance(route) is None


def test_unknown_geometry_type():
    with pytest.raises(ValueError):
        calculate_distance({'type': 'Polygon', 'coordinates': [[[0, 0], [1, 0], [1, 1], [0, 0]]]})


def test_distance_never_decreases_when_extending():
    coords = [[116.0, 39.0], [116.05, 39.02]]
    previous = calculate_distance({'type': 'LineString', 'coordinates': coords})

    for extra in ([116.05, 39.02], [116.1, 39.1], [116.0, 39.0], [116.2, 39.05]):
        coords = coords + [extra]
        current = calculate_distance({'type': 'LineString', 'coordinates': coords})
        assert current >= previous
        previous = current


def test_day_prefers_stored_route_over_points():
    day = DayRecord(
        day=1,
        date="2024-05-01",
        points=(Point("start", 39.0, 116.0), Point("end", 40.0, 117.0)),
        route_geojson=TENTH_DEGREE_AT_39N,
    )

    assert calculate_day_distance(day) == 8.64


def test_day_falls_back_to_points():
    day = DayRecord(day=1, date=None, points=(Point("a", 39.0, 116.0), Point("b", 39.0, 116.1)))

    assert calculate_day_distance(day) == 8.64


def test_day_with_one_point_has_no_distance():
    day = DayRecord(day=1, date=None, points=(Point("a", 39.0, 116.0),))

    assert calculate_day_distance(day) is None


def test_empty_day_has_no_distance():
    """A day with no points and no route keeps distanceKm empty."""
    day = DayRecord(day=3, date="2024-05-03", points=(), route_geojson=None, distance_km=12.5)

    assert calculate_day_distance(day) is None
    assert update_day_distance(day).distance_km is None


def test_update_day_distance_is_idempotent():
    day = DayRecord(day=1, date=None, route_geojson=TENTH_DEGREE_AT_39N, distance_km=999.0)

    once = update_day_distance(day)
    twice = update_day_distance(once)

    assert once.distance_km == 8.64
    assert twice == once
    # original untouched
    assert day.distance_km == 999.0


def test_total_distance():
    print("Testing total distance...")

    assert calculate_total_distance([]) == 0

    days = [
        DayRecord(day=1, date=None, route_geojson=TENTH_DEGREE_AT_39N),
        DayRecord(day=2, date=None),
        DayRecord(day=3, date=None, points=(Point("a", 39.0, 116.0), Point("b", 39.0, 116.1))),
    ]
    assert calculate_total_distance(days) == 17.28
    print("✓ Total distance summed over days")


def test_round_half_up():
    assert round_km(0.125) == 0.13
    assert round_km(2.675) == 2.68
    assert round_km(8.6417) == 8.64
    assert round_km(0.0) == 0.0


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
