"""
VW-AUDIT Client-Side Secret Scan

Finds credentials shipped in client-side bundles: browser API keys,
RPC URLs with the provider key in the path, and function keys.
"""

import re
from dataclasses import dataclass
from typing import List

SECRET_PATTERNS = {
    "google_api_key": re.compile(r"AIza[0-9A-Za-z_\-]{35}"),
    "keyed_rpc_url": re.compile(
        r"https://[\w.-]+\.(?:alchemy\.com|infura\.io|quiknode\.pro)/v\d+/[0-9A-Za-z_\-]{16,}"
    ),
    "function_key": re.compile(r"(?i)(?:function|gateway)\w*key\s*[:=]\s*[\"']([A-Za-z0-9+/_\-]{30,}={0,2})[\"']"),
    "walletconnect_project_id": re.compile(r"(?i)projectId\s*[:=]\s*[\"']([0-9a-f]{32})[\"']"),
}


@dataclass
class SecretMatch:
    """A credential found in scanned text. Only a redacted preview is kept."""
    kind: str
    line: int
    preview: str


def _redact(value: str) -> str:
    return value[:6] + "..." if len(value) > 6 else "..."


def find_exposed_secrets(text: str) -> List[SecretMatch]:
    """
    Scan client-side source for credentials.
    
    Args:
        text: Source text (e.g. a bundled constants file)
        
    Returns:
        Matches in line order
    """
    matches = []
    for line_no, line in enumerate(text.splitlines(), 1):
        for kind, pattern in SECRET_PATTERNS.items():
            for match in pattern.finditer(line):
                value = match.group(1) if pattern.groups else match.group(0)
                matches.append(SecretMatch(kind=kind, line=line_no, preview=_redact(value)))
    return matches
