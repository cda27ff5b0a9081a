"""
VW-AUDIT Sensitive Data Detection

Pattern checks for key material in logs and serialized wallet state.
"""

import base64
import binascii
import json
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from vwaudit.utils.logger import get_logger

logger = get_logger(__name__)

SENSITIVE_KEYS = ["privateKey", "private_key", "pk", "mnemonic", "seed", "secret"]

SENSITIVE_PATTERNS = [
    re.compile(r"privateKey", re.IGNORECASE),
    re.compile(r"private_key", re.IGNORECASE),
    re.compile(r"mnemonic", re.IGNORECASE),
    re.compile(r"seed", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"0x[a-fA-F0-9]{64}"),  # Private key
    # Heuristic: twelve 3-8 letter lowercase words, as in BIP39 phrases
    re.compile(r"(?<![\w.,'-])(?:[a-z]{3,8} ){11}[a-z]{3,8}(?![\w.,'-])"),
]

_BASE64_RE = re.compile(r"^[A-Za-z0-9+/=]+$")


@dataclass
class SensitiveMatch:
    """A log entry that matched one of the sensitive patterns"""
    pattern: str
    entry: Any


@dataclass
class StateInspection:
    """Result of inspecting a serialized piece of wallet state"""
    label: str
    data_type: str
    is_json: bool = False
    looks_base64: bool = False
    length: Optional[int] = None
    keys: List[str] = field(default_factory=list)
    sensitive_keys: List[str] = field(default_factory=list)
    
    @property
    def is_critical(self) -> bool:
        return bool(self.sensitive_keys)


def _entry_text(entry: Any) -> str:
    message = getattr(entry, "message", entry)
    if isinstance(message, str):
        return message
    return json.dumps(message, default=str)


def search_for_sensitive_data(entries: Iterable[Any]) -> List[SensitiveMatch]:
    """
    Search log entries for key material.
    
    Args:
        entries: LogEntry objects, strings, or JSON-serializable values
        
    Returns:
        One match per (entry, pattern) pair that hit
    """
    found = []
    for entry in entries:
        text = _entry_text(entry)
        for pattern in SENSITIVE_PATTERNS:
            if pattern.search(text):
                found.append(SensitiveMatch(pattern=pattern.pattern, entry=entry))
    return found


def _looks_base64(text: str) -> bool:
    if not text or not _BASE64_RE.match(text):
        return False
    try:
        base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def inspect_serialized_state(data: Any, label: str = "State") -> StateInspection:
    """
    Describe serialized wallet state and flag sensitive keys in it.
    
    Strings are checked for base64 and JSON encoding; parsed JSON objects
    are searched key by key. Other values are serialized and searched as text.
    """
    inspection = StateInspection(label=label, data_type=type(data).__name__)
    
    if isinstance(data, str):
        inspection.length = len(data)
        inspection.looks_base64 = _looks_base64(data)
        try:
            parsed = json.loads(data)
        except json.JSONDecodeError:
            parsed = None
        else:
            inspection.is_json = True
        
        if isinstance(parsed, dict):
            inspection.keys = list(parsed.keys())
            inspection.sensitive_keys = [k for k in SENSITIVE_KEYS if k in parsed]
    else:
        if isinstance(data, dict):
            inspection.keys = list(data.keys())
        text = json.dumps(data, default=str)
        inspection.sensitive_keys = [k for k in SENSITIVE_KEYS if f'"{k}"' in text]
    
    for key in inspection.sensitive_keys:
        logger.error(f"[CRITICAL] Found sensitive key in serialized {label}: {key}")
    
    return inspection
