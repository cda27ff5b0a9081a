"""VW-AUDIT Findings Module"""

from .models import Severity, Finding
from .ledger import FindingLedger, DEFAULT_LEDGER, DEFAULT_FINDINGS

__all__ = ["Severity", "Finding", "FindingLedger", "DEFAULT_LEDGER", "DEFAULT_FINDINGS"]
