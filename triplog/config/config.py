"""
Configuration management for TripLog.
Centralizes environment variables and application settings.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .logging_config import get_logger

logger = get_logger(__name__)

load_dotenv()


@dataclass
class AppConfig:
    """General application configuration."""
    log_level: str = "INFO"
    log_to_file: bool = True
    data_directory: str = "trip_data"
    default_document: str = "everyday-merged.json"
    default_title: str = "骑行旅行记录"


@dataclass
class MapConfig:
    """Map provider and map web-service configuration."""
    default_provider: str = "osm"
    default_center_lat: float = 39.9093
    default_center_lon: float = 116.3974
    default_zoom: int = 10
    osm_tile_url: str = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
    amap_tile_url: str = "https://webrd0{s}.is.autonavi.com/appmaptile?lang=zh_cn&size=1&scale=1&style=8&x={x}&y={y}&z={z}"
    baidu_tile_url: str = "https://maponline{s}.bdimg.com/tile/?qt=vtile&x={x}&y={y}&z={z}&styles=pl&scaler=1"
    baidu_ak: str = ""
    amap_key: str = ""
    baidu_api_url: str = "https://api.map.baidu.com"
    request_timeout_seconds: int = 10
    max_retries: int = 3
    retry_delay_seconds: float = 1.0

    def is_baidu_configured(self) -> bool:
        """Check whether a Baidu web-service key is available."""
        return bool(self.baidu_ak)


@dataclass
class S3Config:
    """S3 storage configuration for trip documents."""
    enabled: bool = False
    bucket_name: str = ""
    aws_region: str = "us-east-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    max_file_size_mb: int = 20

    def is_configured(self) -> bool:
        """Check if S3 has a bucket and credentials."""
        return bool(self.bucket_name and self.aws_access_key_id and self.aws_secret_access_key)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class ConfigManager:
    """Centralized configuration manager for TripLog."""

    def __init__(self):
        """Initialize configuration manager."""
        logger.debug("Initializing configuration manager")
        self._app_config = None
        self._map_config = None
        self._s3_config = None

        self._load_configurations()

    def _load_configurations(self):
        """Load all configuration sections."""
        try:
            self._app_config = self._load_app_config()
            self._map_config = self._load_map_config()
            self._s3_config = self._load_s3_config()

            logger.debug("All configurations loaded successfully")

        except ValueError as e:
            logger.error(f"Error loading configurations: {e}")
            raise

    def _load_app_config(self) -> AppConfig:
        """Load general application configuration."""
        config = AppConfig(
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            log_to_file=_env_bool("LOG_TO_FILE", "true"),
            data_directory=os.environ.get("DATA_DIRECTORY", "trip_data"),
            default_document=os.environ.get("TRIPLOG_DEFAULT_DOCUMENT", "everyday-merged.json"),
            default_title=os.environ.get("TRIPLOG_DEFAULT_TITLE", "骑行旅行记录"),
        )

        logger.debug(f"App config loaded - Log level: {config.log_level}")
        return config

    def _load_map_config(self) -> MapConfig:
        """Load map provider configuration."""
        defaults = MapConfig()
        config = MapConfig(
            default_provider=os.environ.get("TRIPLOG_MAP_PROVIDER", defaults.default_provider).lower(),
            default_center_lat=float(os.environ.get("MAP_DEFAULT_LAT", str(defaults.default_center_lat))),
            default_center_lon=float(os.environ.get("MAP_DEFAULT_LON", str(defaults.default_center_lon))),
            default_zoom=int(os.environ.get("MAP_DEFAULT_ZOOM", str(defaults.default_zoom))),
            osm_tile_url=os.environ.get("OSM_TILE_URL", defaults.osm_tile_url),
            amap_tile_url=os.environ.get("AMAP_TILE_URL", defaults.amap_tile_url),
            baidu_tile_url=os.environ.get("BAIDU_TILE_URL", defaults.baidu_tile_url),
            baidu_ak=os.environ.get("BAIDU_MAP_AK", ""),
            amap_key=os.environ.get("AMAP_KEY", ""),
            baidu_api_url=os.environ.get("BAIDU_API_URL", defaults.baidu_api_url),
            request_timeout_seconds=int(os.environ.get("MAP_REQUEST_TIMEOUT", "10")),
            max_retries=int(os.environ.get("MAP_MAX_RETRIES", "3")),
            retry_delay_seconds=float(os.environ.get("MAP_RETRY_DELAY", "1.0")),
        )

        if not config.is_baidu_configured():
            logger.debug("BAIDU_MAP_AK not set - geocoding and riding route planning disabled")
        return config

    def _load_s3_config(self) -> S3Config:
        """Load S3 configuration from environment variables."""
        config = S3Config(
            enabled=_env_bool("S3_ENABLED", "false"),
            bucket_name=os.environ.get("S3_BUCKET_NAME", ""),
            aws_region=os.environ.get("AWS_REGION", "us-east-1"),
            aws_access_key_id=os.environ.get("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.environ.get("AWS_SECRET_ACCESS_KEY"),
            max_file_size_mb=int(os.environ.get("S3_MAX_FILE_SIZE_MB", "20")),
        )

        if config.enabled and not config.is_configured():
            logger.warning("S3 enabled but bucket or credentials missing - falling back to local storage")
        return config

    @property
    def app(self) -> AppConfig:
        """Get application configuration."""
        return self._app_config

    @property
    def map(self) -> MapConfig:
        """Get map configuration."""
        return self._map_config

    @property
    def s3(self) -> S3Config:
        """Get S3 configuration."""
        return self._s3_config

    def get_environment_info(self) -> Dict[str, Any]:
        """Get environment information for debugging."""
        return {
            "data_directory": self._app_config.data_directory,
            "default_document": self._app_config.default_document,
            "log_level": self._app_config.log_level,
            "map_provider": self._map_config.default_provider,
            "baidu_configured": self._map_config.is_baidu_configured(),
            "s3_enabled": self._s3_config.enabled,
        }

    def validate_configuration(self) -> Dict[str, bool]:
        """Validate all configuration sections."""
        validation_results = {
            "valid_log_level": self._app_config.log_level.upper() in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            "valid_map_provider": self._map_config.default_provider in ["osm", "amap", "baidu"],
            "valid_default_zoom": 1 <= self._map_config.default_zoom <= 20,
            "request_timeout_valid": self._map_config.request_timeout_seconds > 0,
            "s3_ready": (not self._s3_config.enabled) or self._s3_config.is_configured(),
        }

        logger.info(f"Configuration validation completed: {sum(validation_results.values())}/{len(validation_results)} checks passed")
        return validation_results


# Global configuration instance
config_manager = ConfigManager()


def get_config() -> ConfigManager:
    """Get the global configuration manager instance."""
    return config_manager
