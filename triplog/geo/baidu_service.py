"""
Baidu map web services: geocoding and riding-route planning.

Baidu answers in BD-09; every result is converted back to WGS-84 before it
leaves this module, so nothing provider-specific reaches the trip document.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from ..config.config import get_config
from ..config.logging_config import get_logger, log_function_entry, log_function_exit
from ..exceptions import InvalidCoordinate
from ..models import Point, Route
from .coordinate_transform import bd09_to_wgs84, wgs84_to_bd09

logger = get_logger(__name__)


class BaiduMapService:
    """Thin client for the Baidu geocoding and riding direction APIs."""

    def __init__(self, map_config=None, session: Optional[requests.Session] = None):
        """Initialize the service.

        Args:
            map_config: MapConfig instance (defaults to the global configuration)
            session: Optional requests session, mainly for tests
        """
        self.config = map_config or get_config().map
        self.session = session or requests.Session()

    def is_available(self) -> bool:
        return self.config.is_baidu_configured()

    def _get_json(self, path: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """GET a Baidu endpoint with a fixed-delay retry loop.

        Returns the decoded body when Baidu reports status 0, otherwise None.
        """
        url = f"{self.config.baidu_api_url.rstrip('/')}/{path.lstrip('/')}"
        params = {**params, 'ak': self.config.baidu_ak, 'output': 'json'}

        for attempt in range(self.config.max_retries):
            try:
                response = self.session.get(url, params=params, timeout=self.config.request_timeout_seconds)
                response.raise_for_status()
                body = response.json()
            except (requests.exceptions.RequestException, ValueError) as e:
                logger.warning(f"Baidu request {path} failed (attempt {attempt + 1}/{self.config.max_retries}): {e}")
                if attempt < self.config.max_retries - 1:
                    time.sleep(self.config.retry_delay_seconds)
                continue

            if body.get('status') != 0:
                # Non-zero status is an answer, not a transport failure; do not retry
                logger.warning(f"Baidu {path} returned status {body.get('status')}: {body.get('message') or body.get('msg')}")
                return None
            return body

        logger.error(f"Baidu request {path} gave up after {self.config.max_retries} attempts")
        return None

    def geocode(self, address: str, city: Optional[str] = None) -> Optional[Tuple[float, float]]:
        """
        Resolve an address to WGS-84 coordinates.

        Args:
            address: Free-text address or place name
            city: Optional city hint

        Returns:
            (lat, lon) in WGS-84, or None if Baidu found nothing
        """
        log_function_entry(logger, "geocode", address=address, city=city)

        address = (address or "").strip()
        if not address:
            raise ValueError("address must not be empty")
        if not self.is_available():
            logger.error("BAIDU_MAP_AK not configured - cannot geocode")
            return None

        params = {'address': address}
        if city:
            params['city'] = city

        body = self._get_json('geocoding/v3/', params)
        if not body:
            return None

        location = (body.get('result') or {}).get('location') or {}
        try:
            lon, lat = bd09_to_wgs84(location.get('lng'), location.get('lat'))
        except InvalidCoordinate as e:
            logger.warning(f"Baidu returned an unusable location for '{address}': {e}")
            return None

        logger.debug(f"Geocoded '{address}' to {lat:.6f}, {lon:.6f}")
        log_function_exit(logger, "geocode", (lat, lon))
        return lat, lon

    def _plan_leg(self, start: Point, end: Point) -> Optional[List[List[float]]]:
        start_lon, start_lat = wgs84_to_bd09(start.lon, start.lat)
        end_lon, end_lat = wgs84_to_bd09(end.lon, end.lat)

        body = self._get_json('directionlite/v1/riding', {
            'origin': f"{start_lat:.6f},{start_lon:.6f}",
            'destination': f"{end_lat:.6f},{end_lon:.6f}",
            'coord_type': 'bd09ll',
        })
        if not body:
            return None

        routes = (body.get('result') or {}).get('routes') or []
        if not routes:
            return None

        path: List[List[float]] = []
        for step in routes[0].get('steps') or []:
            for pair in (step.get('path') or '').split(';'):
                if not pair:
                    continue
                lng, lat = (float(v) for v in pair.split(','))
                lon, lat = bd09_to_wgs84(lng, lat)
                path.append([lon, lat])

        return path if len(path) >= 2 else None

    def plan_riding_route(self, points: Sequence[Point]) -> Optional[Route]:
        """
        Plan a cycling route through the points, one Baidu request per leg.

        Legs Baidu cannot plan are skipped.

        Returns:
            WGS-84 LineString for a single planned leg, MultiLineString for
            several, or None when nothing could be planned
        """
        log_function_entry(logger, "plan_riding_route", points=len(points))

        if len(points) < 2:
            return None
        if not self.is_available():
            logger.error("BAIDU_MAP_AK not configured - cannot plan riding route")
            return None

        legs = []
        for index, (start, end) in enumerate(zip(points, points[1:])):
            leg = self._plan_leg(start, end)
            if leg:
                legs.append(leg)
            else:
                logger.warning(f"No riding route for leg {index + 1}: {start.name} -> {end.name}")

        if not legs:
            result = None
        elif len(legs) == 1:
            result = {'type': 'LineString', 'coordinates': legs[0]}
        else:
            result = {'type': 'MultiLineString', 'coordinates': legs}

        log_function_exit(logger, "plan_riding_route", f"legs={len(legs)}")
        return result
