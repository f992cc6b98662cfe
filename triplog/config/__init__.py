from .logging_config import setup_logging, get_logger
from .config import get_config, ConfigManager

__all__ = ['setup_logging', 'get_logger', 'get_config', 'ConfigManager']
