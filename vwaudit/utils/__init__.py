"""VW-AUDIT Utilities"""

from .config import Config, get_config
from .logger import get_logger, setup_file_logging

__all__ = ["Config", "get_config", "get_logger", "setup_file_logging"]
