#!/usr/bin/env python3
"""
Test script for trip processing: GPX import, day-file merging and mileage stats.
"""

import json
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from triplog.exceptions import MalformedDocument
from triplog.models import DayRecord, Point
from triplog.processing import (
    apply_gpx_to_day,
    distance_dataframe,
    distance_summary,
    merge_day_files,
    merge_to_trip,
    parse_gpx_route,
    read_clue,
)

TRACK_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <wpt lat="39.0" lon="116.0"><name>起点</name></wpt>
  <wpt lat="39.0" lon="116.1"><name>终点</name></wpt>
  <trk>
    <name>Day 1</name>
    <trkseg>
      <trkpt lat="39.0" lon="116.0"><ele>50</ele></trkpt>
      <trkpt lat="39.0" lon="116.05"><ele>55</ele></trkpt>
      <trkpt lat="39.0" lon="116.1"><ele>60</ele></trkpt>
    </trkseg>
  </trk>
</gpx>"""

TWO_SEGMENT_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <trkseg>
      <trkpt lat="39.0" lon="116.0"></trkpt>
      <trkpt lat="39.0" lon="116.1"></trkpt>
    </trkseg>
    <trkseg>
      <trkpt lat="39.0" lon="117.0"></trkpt>
      <trkpt lat="39.0" lon="117.1"></trkpt>
    </trkseg>
    <trkseg>
      <trkpt lat="39.5" lon="117.5"></trkpt>
    </trkseg>
  </trk>
</gpx>"""

ROUTE_ONLY_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <rte>
    <rtept lat="39.0" lon="116.0"><name>A</name></rtept>
    <rtept lat="39.0" lon="116.1"><name>B</name></rtept>
  </rte>
</gpx>"""

EMPTY_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
</gpx>"""


def test_parse_gpx_track():
    print("Testing GPX parsing...")

    route, waypoints = parse_gpx_route(TRACK_GPX)

    assert route == {'type': 'LineString', 'coordinates': [[116.0, 39.0], [116.05, 39.0], [116.1, 39.0]]}
    assert [w.name for w in waypoints] == ['起点', '终点']
    print("✓ GPX track parsed")


def test_parse_gpx_multiple_segments():
    route, _ = parse_gpx_route(TWO_SEGMENT_GPX)

    assert route['type'] == 'MultiLineString'
    # single-point segment dropped
    assert len(route['coordinates']) == 2


def test_parse_gpx_route_points_when_no_track():
    route, waypoints = parse_gpx_route(ROUTE_ONLY_GPX)

    assert route == {'type': 'LineString', 'coordinates': [[116.0, 39.0], [116.1, 39.0]]}
    assert waypoints == []


def test_parse_invalid_gpx():
    with pytest.raises(MalformedDocument):
        parse_gpx_route("this is not xml")


def test_apply_gpx_to_day():
    day = DayRecord(day=1, date='2024-05-01', points=(Point('旧', 30.0, 100.0),), extras={'clue': 'x'})

    updated = apply_gpx_to_day(day, TRACK_GPX)

    assert updated.distance_km == 8.64
    assert updated.route_geojson['type'] == 'LineString'
    assert updated.points == day.points
    assert updated.extras == {'clue': 'x'}
    assert day.route_geojson is None

    with_waypoints = apply_gpx_to_day(day, TRACK_GPX, use_waypoints=True)
    assert [p.name for p in with_waypoints.points] == ['起点', '终点']


def test_apply_gpx_without_route():
    with pytest.raises(MalformedDocument):
        apply_gpx_to_day(DayRecord(day=1, date=None), EMPTY_GPX)


def _write_day(directory, name, record):
    (directory / name).write_text(json.dumps(record, ensure_ascii=False), encoding='utf-8')


def test_merge_day_files(tmp_path):
    print("Testing day merge...")

    days_dir = tmp_path / 'days'
    clue_dir = tmp_path / 'clues'
    days_dir.mkdir()
    clue_dir.mkdir()

    _write_day(days_dir, 'day002_2024-05-02_雅安.json', {'day': 2, 'date': '2024-05-02', 'points': [],
                                                        'video': {'bvid': 'BV2'}})
    _write_day(days_dir, 'day001_2024-05-01_成都.json', {'day': 1, 'date': '2024-05-01', 'points': []})
    (days_dir / 'day003_broken.json').write_text('{not json', encoding='utf-8')
    (days_dir / 'notes.txt').write_text('ignored', encoding='utf-8')
    (clue_dir / 'day001_2024-05-01_成都.txt').write_text('旅行骑行线索提取\n\n出发成都\n天气晴', encoding='utf-8')

    merged = merge_day_files(str(days_dir), str(clue_dir), meta={'title': '合并'})

    assert merged['meta'] == {'title': '合并'}
    assert [d['day'] for d in merged['days']] == [1, 2]
    assert merged['days'][0]['clue'] == '出发成都\n天气晴'
    assert 'clue' not in merged['days'][1]
    assert merged['days'][1]['video'] == {'bvid': 'BV2'}
    print("✓ Days merged in filename order")


def test_merge_to_trip(tmp_path):
    _write_day(tmp_path, 'day001.json', {'day': 1, 'date': None,
                                         'points': [{'name': 'a', 'lat': 39.0, 'lon': 116.0},
                                                    {'name': 'b', 'lat': 39.0, 'lon': 116.1}]})

    trip = merge_to_trip(str(tmp_path))

    assert trip.meta.title
    assert trip.days[0].distance_km == 8.64


def test_merge_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        merge_day_files(str(tmp_path / 'missing'))


def test_read_clue(tmp_path):
    plain = tmp_path / 'plain.txt'
    plain.write_text('  just text  \n', encoding='utf-8')
    header_only = tmp_path / 'header.txt'
    header_only.write_text('旅行骑行线索提取\n', encoding='utf-8')

    assert read_clue(str(plain)) == 'just text'
    assert read_clue(str(header_only)) is None
    assert read_clue(str(tmp_path / 'absent.txt')) is None


def _days():
    return [
        DayRecord(day=1, date='2024-05-01', title='第一天', distance_km=8.64,
                  route_geojson={'type': 'LineString', 'coordinates': [[116.0, 39.0], [116.1, 39.0]]}),
        DayRecord(day=2, date='2024-05-02'),
        DayRecord(day=3, date='2024-05-03', points=(Point('a', 39.0, 117.0), Point('b', 39.0, 117.1))),
    ]


def test_distance_summary():
    print("Testing distance summary...")

    summary = distance_summary(_days())

    assert summary == {
        'total_distance_km': 17.28,
        'days_with_distance': 2,
        'total_days': 3,
        'average_distance_km': 8.64,
    }
    print("✓ Summary computed")


def test_distance_summary_without_distances():
    summary = distance_summary([DayRecord(day=1, date=None)])

    assert summary['total_distance_km'] == 0
    assert summary['average_distance_km'] == 0.0
    assert distance_summary([])['total_days'] == 0


def test_distance_dataframe():
    df = distance_dataframe(_days())

    assert list(df.columns) == ['index', 'day', 'date', 'title', 'points', 'has_route', 'distance_km']
    assert list(df['day']) == [1, 2, 3]
    assert df.loc[0, 'title'] == '第一天'
    assert df['distance_km'].sum() == pytest.approx(17.28)

    newest = distance_dataframe(_days(), newest_first=True)
    assert list(newest['index']) == [2, 1, 0]


def test_distance_dataframe_empty():
    df = distance_dataframe([])

    assert df.empty
    assert 'distance_km' in df.columns


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
