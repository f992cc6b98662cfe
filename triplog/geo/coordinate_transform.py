"""
Coordinate frame conversion between WGS-84, GCJ-02 and BD-09.

GCJ-02 is the offset frame used by AMap; BD-09 is Baidu's frame, a further
rotation/offset on top of GCJ-02. Storage is always WGS-84: these functions run
only when handing data to a provider or when bringing provider results back.

Points outside mainland China's bounding box are returned unchanged, matching
what the providers themselves do.
"""

import math
from dataclasses import replace
from enum import Enum
from typing import Callable, Iterable, List, Tuple

from ..exceptions import InvalidCoordinate
from ..models import Point, Route, validate_lon_lat

# Krasovsky 1940 ellipsoid used by the GCJ-02 algorithm
KRASOVSKY_A = 6378245.0
KRASOVSKY_EE = 0.00669342162296594323
X_PI = math.pi * 3000.0 / 180.0

CHINA_BOUNDS = {
    'min_lon': 72.004,
    'max_lon': 137.8347,
    'min_lat': 0.8293,
    'max_lat': 55.8271,
}

LonLat = Tuple[float, float]


class CoordinateFrame(str, Enum):
    WGS84 = "wgs84"
    GCJ02 = "gcj02"
    BD09 = "bd09"


def out_of_china(lon: float, lat: float) -> bool:
    """True when the point lies outside the region where GCJ-02 applies."""
    return not (CHINA_BOUNDS['min_lon'] <= lon <= CHINA_BOUNDS['max_lon'] and
                CHINA_BOUNDS['min_lat'] <= lat <= CHINA_BOUNDS['max_lat'])


def _transform_lat(x: float, y: float) -> float:
    ret = -100.0 + 2.0 * x + 3.0 * y + 0.2 * y * y + 0.1 * x * y + 0.2 * math.sqrt(abs(x))
    ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * math.sin(y * math.pi) + 40.0 * math.sin(y / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (160.0 * math.sin(y / 12.0 * math.pi) + 320.0 * math.sin(y * math.pi / 30.0)) * 2.0 / 3.0
    return ret


def _transform_lon(x: float, y: float) -> float:
    ret = 300.0 + x + 2.0 * y + 0.1 * x * x + 0.1 * x * y + 0.1 * math.sqrt(abs(x))
    ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * math.sin(x * math.pi) + 40.0 * math.sin(x / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (150.0 * math.sin(x / 12.0 * math.pi) + 300.0 * math.sin(x / 30.0 * math.pi)) * 2.0 / 3.0
    return ret


def _gcj02_offset(lon: float, lat: float) -> LonLat:
    dlat = _transform_lat(lon - 105.0, lat - 35.0)
    dlon = _transform_lon(lon - 105.0, lat - 35.0)
    radlat = lat / 180.0 * math.pi
    magic = math.sin(radlat)
    magic = 1 - KRASOVSKY_EE * magic * magic
    sqrtmagic = math.sqrt(magic)
    dlat = (dlat * 180.0) / ((KRASOVSKY_A * (1 - KRASOVSKY_EE)) / (magic * sqrtmagic) * math.pi)
    dlon = (dlon * 180.0) / (KRASOVSKY_A / sqrtmagic * math.cos(radlat) * math.pi)
    return dlon, dlat


def wgs84_to_gcj02(lon: float, lat: float) -> LonLat:
    """WGS-84 to GCJ-02 (AMap)."""
    lon, lat = validate_lon_lat(lon, lat)
    if out_of_china(lon, lat):
        return lon, lat
    dlon, dlat = _gcj02_offset(lon, lat)
    return lon + dlon, lat + dlat


def gcj02_to_wgs84(lon: float, lat: float) -> LonLat:
    """GCJ-02 to WGS-84, single-step inverse (residual well under 10 m)."""
    lon, lat = validate_lon_lat(lon, lat)
    if out_of_china(lon, lat):
        return lon, lat
    dlon, dlat = _gcj02_offset(lon, lat)
    return lon - dlon, lat - dlat


def gcj02_to_bd09(lon: float, lat: float) -> LonLat:
    """GCJ-02 to BD-09."""
    z = math.sqrt(lon * lon + lat * lat) + 0.00002 * math.sin(lat * X_PI)
    theta = math.atan2(lat, lon) + 0.000003 * math.cos(lon * X_PI)
    return z * math.cos(theta) + 0.0065, z * math.sin(theta) + 0.006


def bd09_to_gcj02(lon: float, lat: float) -> LonLat:
    """BD-09 to GCJ-02."""
    x = lon - 0.0065
    y = lat - 0.006
    z = math.sqrt(x * x + y * y) - 0.00002 * math.sin(y * X_PI)
    theta = math.atan2(y, x) - 0.000003 * math.cos(x * X_PI)
    return z * math.cos(theta), z * math.sin(theta)


def wgs84_to_bd09(lon: float, lat: float) -> LonLat:
    """WGS-84 to BD-09 (Baidu)."""
    lon, lat = validate_lon_lat(lon, lat)
    if out_of_china(lon, lat):
        return lon, lat
    return gcj02_to_bd09(*wgs84_to_gcj02(lon, lat))


def bd09_to_wgs84(lon: float, lat: float) -> LonLat:
    """BD-09 to WGS-84, used for geocoder and route-planner results."""
    lon, lat = validate_lon_lat(lon, lat)
    if out_of_china(lon, lat):
        return lon, lat
    return gcj02_to_wgs84(*bd09_to_gcj02(lon, lat))


def _identity(lon: float, lat: float) -> LonLat:
    return validate_lon_lat(lon, lat)


_FROM_WGS84 = {
    CoordinateFrame.WGS84: _identity,
    CoordinateFrame.GCJ02: wgs84_to_gcj02,
    CoordinateFrame.BD09: wgs84_to_bd09,
}


def get_transform(frame) -> Callable[[float, float], LonLat]:
    """Return the WGS-84 -> ``frame`` function for a frame name or enum."""
    try:
        return _FROM_WGS84[CoordinateFrame(frame)]
    except ValueError:
        raise ValueError(f"Unsupported coordinate frame: {frame}") from None


def transform_point(point: Point, frame) -> Point:
    """Project a WGS-84 Point, keeping its name."""
    lon, lat = get_transform(frame)(point.lon, point.lat)
    return replace(point, lon=lon, lat=lat)


def transform_points(points: Iterable[Point], frame) -> List[Point]:
    transform = get_transform(frame)
    result = []
    for point in points:
        lon, lat = transform(point.lon, point.lat)
        result.append(replace(point, lon=lon, lat=lat))
    return result


def _transform_line(coords, transform) -> List[List[float]]:
    line = []
    for coord in coords:
        if not isinstance(coord, (list, tuple)) or len(coord) < 2:
            raise InvalidCoordinate(f"coordinate must be a [lon, lat] pair, got {coord!r}", coord)
        lon, lat = transform(coord[0], coord[1])
        # keep any extra ordinates (elevation) untouched
        line.append([lon, lat, *coord[2:]])
    return line


def transform_route(route: Route, frame) -> Route:
    """Project every coordinate of a LineString/MultiLineString.

    The whole route is rejected on the first bad coordinate; callers never get
    a partially projected geometry. Other GeoJSON keys are carried over.
    """
    transform = get_transform(frame)
    route_type = route.get('type')

    if route_type == 'LineString':
        coordinates = _transform_line(route.get('coordinates') or [], transform)
    elif route_type == 'MultiLineString':
        coordinates = [_transform_line(seg or [], transform) for seg in route.get('coordinates') or []]
    else:
        raise ValueError(f"Unsupported geometry type: {route_type}")

    return {**route, 'coordinates': coordinates}
