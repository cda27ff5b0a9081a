"""VW-AUDIT Diagnostics Module"""

from .capture import LogCapture, LogEntry, capture_logs
from .sensitive import (
    SENSITIVE_KEYS, SensitiveMatch, StateInspection,
    inspect_serialized_state, search_for_sensitive_data
)
from .monitor import MonitoredObject
from .flags import DebugFlagReport, detect_debug_flags
from .exposure import SecretMatch, find_exposed_secrets

__all__ = [
    "LogCapture", "LogEntry", "capture_logs",
    "SENSITIVE_KEYS", "SensitiveMatch", "StateInspection",
    "inspect_serialized_state", "search_for_sensitive_data",
    "MonitoredObject", "DebugFlagReport", "detect_debug_flags",
    "SecretMatch", "find_exposed_secrets",
]
