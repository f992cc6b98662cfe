"""
Map adapter interface and the folium-backed implementation shared by all providers.

Callers always hand WGS-84 data to an adapter. Each provider subclass declares
its coordinate frame and tile source; projection happens inside the adapter,
so nothing outside this package needs to know which provider is in use.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import folium

from ..config.config import get_config
from ..config.logging_config import get_logger
from ..geo.coordinate_transform import CoordinateFrame, get_transform, transform_points, transform_route
from ..models import Point, Route

logger = get_logger(__name__)

ROUTE_COLOR = '#3b82f6'
POINT_COLOR = '#ef4444'


class MapAdapter(ABC):
    """Provider-neutral map operations. All coordinates are WGS-84."""

    @abstractmethod
    def init(self, container_id: str) -> None:
        ...

    @abstractmethod
    def set_center(self, lat: float, lon: float, zoom: int) -> None:
        ...

    @abstractmethod
    def draw_route(self, route: Route) -> None:
        ...

    @abstractmethod
    def draw_points(self, points: Sequence[Point]) -> None:
        ...

    @abstractmethod
    def clear_route(self) -> None:
        ...

    @abstractmethod
    def clear_points(self) -> None:
        ...

    @abstractmethod
    def destroy(self) -> None:
        ...


class FoliumMapAdapter(MapAdapter):
    """Renders the current route and points as a folium (Leaflet) HTML map."""

    provider = "osm"
    frame = CoordinateFrame.WGS84
    attribution = "&copy; OpenStreetMap contributors"
    subdomains = "abc"

    def __init__(self, map_config=None):
        self.config = map_config or get_config().map
        self.container_id: Optional[str] = None
        self.center = None
        self.zoom = self.config.default_zoom
        self.route: Optional[Route] = None
        self.points: List[Point] = []

    @property
    def tile_url(self) -> str:
        return self.config.osm_tile_url

    @property
    def is_initialized(self) -> bool:
        return self.container_id is not None

    def _require_init(self):
        if not self.is_initialized:
            raise RuntimeError(f"{type(self).__name__} used before init()")

    def project(self, lon: float, lat: float):
        """WGS-84 -> this provider's frame, as (lon, lat)."""
        return get_transform(self.frame)(lon, lat)

    def init(self, container_id: str) -> None:
        if not container_id:
            raise ValueError("container_id must not be empty")
        self.container_id = container_id
        self.route = None
        self.points = []
        self.zoom = self.config.default_zoom
        lon, lat = self.project(self.config.default_center_lon, self.config.default_center_lat)
        self.center = (lat, lon)
        logger.debug(f"{self.provider} map initialized in '{container_id}'")

    def set_center(self, lat: float, lon: float, zoom: int) -> None:
        self._require_init()
        projected_lon, projected_lat = self.project(lon, lat)
        self.center = (projected_lat, projected_lon)
        self.zoom = zoom

    def draw_route(self, route: Route) -> None:
        self._require_init()
        # Projection runs before the old route is replaced, so a bad
        # coordinate leaves the previous drawing in place
        self.route = transform_route(route, self.frame)

    def draw_points(self, points: Sequence[Point]) -> None:
        self._require_init()
        self.points = transform_points(points, self.frame)

    def clear_route(self) -> None:
        self.route = None

    def clear_points(self) -> None:
        self.points = []

    def destroy(self) -> None:
        self.clear_route()
        self.clear_points()
        self.container_id = None
        self.center = None

    def _route_segments(self):
        if not self.route:
            return []
        if self.route.get('type') == 'LineString':
            return [self.route['coordinates']]
        return list(self.route['coordinates'])

    def build_map(self) -> folium.Map:
        """Build a folium map of the current state."""
        self._require_init()

        m = folium.Map(location=list(self.center), zoom_start=self.zoom, tiles=None)
        folium.TileLayer(
            tiles=self.tile_url,
            attr=self.attribution,
            name=self.provider,
            subdomains=self.subdomains,
        ).add_to(m)

        route_group = folium.FeatureGroup(name="Route", show=True)
        for segment in self._route_segments():
            if len(segment) < 2:
                continue
            folium.PolyLine(
                [[coord[1], coord[0]] for coord in segment],
                color=ROUTE_COLOR,
                weight=4,
                opacity=1.0,
            ).add_to(route_group)

        points_group = folium.FeatureGroup(name="Points", show=True)
        for point in self.points:
            folium.CircleMarker(
                [point.lat, point.lon],
                radius=6,
                color='#ffffff',
                weight=2,
                fill=True,
                fill_color=POINT_COLOR,
                fill_opacity=1.0,
                tooltip=point.name or None,
            ).add_to(points_group)

        route_group.add_to(m)
        points_group.add_to(m)
        return m

    def get_html(self) -> str:
        return self.build_map().get_root().render()

    def save(self, path: Optional[str] = None) -> str:
        """Write the map as a standalone HTML file and return its path."""
        self._require_init()
        path = path or f"{self.container_id}.html"
        self.build_map().save(path)
        logger.info(f"Saved {self.provider} map to {path}")
        return path
