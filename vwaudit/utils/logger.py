"""
VW-AUDIT Logging Module

Provides consistent logging across the harness with rich formatting.
"""

import logging
from typing import Optional
from pathlib import Path

from rich.logging import RichHandler
from rich.console import Console

ROOT_LOGGER_NAME = "vwaudit"

# Console for rich output
console = Console(stderr=True)

# Cache for loggers
_loggers: dict[str, logging.Logger] = {}


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get or create a logger with consistent formatting.
    
    Args:
        name: Logger name (usually __name__)
        level: Optional log level override
        
    Returns:
        Configured logger instance
    """
    if name in _loggers:
        return _loggers[name]
    
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        full_name = name
    else:
        full_name = f"{ROOT_LOGGER_NAME}.{name}"
    
    logger = logging.getLogger(full_name)
    
    # Set level
    log_level = level or _default_level()
    logger.setLevel(getattr(logging, log_level.upper()))
    
    # Handlers live on the root so child loggers never print twice
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        rich_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True
        )
        rich_handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(rich_handler)
    
    _loggers[name] = logger
    return logger


def set_level(level: str):
    """Change the level of every logger handed out so far"""
    value = getattr(logging, level.upper())
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(value)
    for logger in _loggers.values():
        logger.setLevel(value)


def setup_file_logging(log_path: Path, level: str = "DEBUG") -> logging.Handler:
    """
    Add file logging to all VW-AUDIT loggers.
    
    Args:
        log_path: Path to log file
        level: Log level for file handler
        
    Returns:
        The attached handler, so callers can detach it again
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)
    
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(getattr(logging, level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(name)s | %(levelname)s | %(message)s")
    )
    
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.addHandler(file_handler)
    return file_handler


def _default_level() -> str:
    # Imported lazily: config imports nothing from here, but keep the
    # logger usable before any config exists.
    from vwaudit.utils.config import get_config
    return get_config().log_level
