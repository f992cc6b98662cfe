"""Provider-specific map adapters."""

from ..geo.coordinate_transform import CoordinateFrame
from .base import FoliumMapAdapter


class OSMAdapter(FoliumMapAdapter):
    """OpenStreetMap tiles; WGS-84 throughout."""

    provider = "osm"
    frame = CoordinateFrame.WGS84


class AMapAdapter(FoliumMapAdapter):
    """AMap (Gaode) tiles, drawn in GCJ-02."""

    provider = "amap"
    frame = CoordinateFrame.GCJ02
    attribution = "&copy; AutoNavi"
    subdomains = "1234"

    @property
    def tile_url(self) -> str:
        return self.config.amap_tile_url


class BaiduMapAdapter(FoliumMapAdapter):
    """Baidu map, drawn in BD-09.

    Baidu's own tile pyramid does not follow the XYZ web-mercator grid, so
    ``BAIDU_TILE_URL`` should point at a BD-09 aligned XYZ tile source.
    """

    provider = "baidu"
    frame = CoordinateFrame.BD09
    attribution = "&copy; Baidu"
    subdomains = "0123"

    @property
    def tile_url(self) -> str:
        return self.config.baidu_tile_url
