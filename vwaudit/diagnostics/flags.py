"""
VW-AUDIT Debug Flag Detection
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

DEBUG_FLAGS = ["DEBUG", "NODE_ENV", "VERBOSE", "LOG_LEVEL", "ENABLE_LOGGING"]


@dataclass
class DebugFlagReport:
    """Debug-related variables present in an environment"""
    found: Dict[str, str] = field(default_factory=dict)
    
    @property
    def development_mode(self) -> bool:
        """Development builds may expose more information"""
        return self.found.get("NODE_ENV") == "development"


def detect_debug_flags(environ: Optional[Mapping[str, str]] = None) -> DebugFlagReport:
    """Report which debug flags are set (defaults to os.environ)"""
    env = os.environ if environ is None else environ
    return DebugFlagReport(found={flag: env[flag] for flag in DEBUG_FLAGS if env.get(flag)})
