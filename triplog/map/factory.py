from typing import Dict, Type

from .adapters import AMapAdapter, BaiduMapAdapter, OSMAdapter
from .base import MapAdapter

MAP_ADAPTERS: Dict[str, Type[MapAdapter]] = {
    'osm': OSMAdapter,
    'amap': AMapAdapter,
    'baidu': BaiduMapAdapter,
}


def create_map_adapter(map_type: str, map_config=None) -> MapAdapter:
    """Build the adapter for ``'osm'``, ``'amap'`` or ``'baidu'``."""
    adapter_cls = MAP_ADAPTERS.get((map_type or '').lower())
    if adapter_cls is None:
        raise ValueError(f"Unsupported map type: {map_type}. Expected one of: {', '.join(MAP_ADAPTERS)}")
    return adapter_cls(map_config)
