"""
VW-AUDIT Log Capture

Collects log records from the harness loggers for later inspection. The
capture is attached to a named logger explicitly; nothing global is patched.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, List, Union

from vwaudit.utils.logger import ROOT_LOGGER_NAME


@dataclass
class LogEntry:
    """A captured log line"""
    level: str
    message: str
    logger: str
    timestamp: datetime


class LogCapture(logging.Handler):
    """Logging handler that keeps every record it receives in memory"""
    
    def __init__(self, level: int = logging.NOTSET):
        super().__init__(level)
        self._entries: List[LogEntry] = []
    
    def emit(self, record: logging.LogRecord):
        self._entries.append(LogEntry(
            level=record.levelname.lower(),
            message=record.getMessage(),
            logger=record.name,
            timestamp=datetime.fromtimestamp(record.created)
        ))
    
    def get_logs(self) -> List[LogEntry]:
        return list(self._entries)
    
    def clear(self):
        self._entries.clear()
    
    def search(self, pattern: str) -> List[LogEntry]:
        """Entries whose message contains ``pattern``"""
        return [entry for entry in self._entries if pattern in entry.message]
    
    def __len__(self) -> int:
        return len(self._entries)


@contextmanager
def capture_logs(
    target: Union[str, logging.Logger] = ROOT_LOGGER_NAME,
    level: int = logging.NOTSET
) -> Iterator[LogCapture]:
    """
    Attach a LogCapture to a logger for the duration of a block.
    
    Args:
        target: Logger or logger name (defaults to the harness root logger)
        level: Minimum level the capture keeps
    """
    logger = target if isinstance(target, logging.Logger) else logging.getLogger(target)
    capture = LogCapture(level)
    logger.addHandler(capture)
    try:
        yield capture
    finally:
        logger.removeHandler(capture)
