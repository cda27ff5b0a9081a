"""
VW-AUDIT Monitored Objects

Explicit wrapper recording reads and writes of an object's properties.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, MutableMapping, Optional

from vwaudit.diagnostics.sensitive import SENSITIVE_KEYS
from vwaudit.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class AccessRecord:
    """One property access"""
    operation: str  # "get" or "set"
    prop: str
    sensitive: bool
    value_type: str
    value_length: Optional[int] = None


class MonitoredObject:
    """
    Wraps a mapping or plain object and logs every access made through
    ``get`` and ``set``. Access that bypasses the wrapper is not seen.
    """
    
    def __init__(self, target: Any, name: str, log: Optional[logging.Logger] = None):
        self._target = target
        self.name = name
        self._logger = log or logger
        self.access_log: List[AccessRecord] = []
    
    @property
    def target(self) -> Any:
        return self._target
    
    def get(self, prop: str, default: Any = None) -> Any:
        """Read a property"""
        self._logger.debug(f"[MONITOR] Accessing {self.name}.{prop}")
        if isinstance(self._target, MutableMapping):
            value = self._target.get(prop, default)
        else:
            value = getattr(self._target, prop, default)
        self._record("get", prop, value)
        return value
    
    def set(self, prop: str, value: Any):
        """Write a property"""
        self._logger.debug(f"[MONITOR] Setting {self.name}.{prop}")
        if isinstance(self._target, MutableMapping):
            self._target[prop] = value
        else:
            setattr(self._target, prop, value)
        self._record("set", prop, value)
    
    @property
    def sensitive_accesses(self) -> List[AccessRecord]:
        return [record for record in self.access_log if record.sensitive]
    
    def summary(self) -> Dict[str, int]:
        """Access counts per property"""
        counts: Dict[str, int] = {}
        for record in self.access_log:
            counts[record.prop] = counts.get(record.prop, 0) + 1
        return counts
    
    def _record(self, operation: str, prop: str, value: Any):
        sensitive = prop in SENSITIVE_KEYS
        length = len(value) if isinstance(value, str) else None
        self.access_log.append(AccessRecord(
            operation=operation,
            prop=prop,
            sensitive=sensitive,
            value_type=type(value).__name__,
            value_length=length
        ))
        if sensitive:
            verb = "Accessing" if operation == "get" else "Setting"
            self._logger.warning(
                f"[SECURITY] {verb} sensitive property: {self.name}.{prop} "
                f"(type: {type(value).__name__}, length: {length})"
            )
