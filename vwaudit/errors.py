"""
VW-AUDIT Errors

Exceptions raised across the harness. Dispatch failures are never raised;
they are encoded in the response envelope instead.
"""

from typing import List, Optional


class VWAuditError(Exception):
    """Base class for all harness errors"""


class EnvelopeValidationError(VWAuditError):
    """A wire payload does not have the VW_REQ / VW_RES shape"""
    
    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.errors = errors or []


class ReportWriteError(VWAuditError):
    """Writing a rendered report to its destination failed"""
    
    def __init__(self, destination: str, cause: OSError):
        super().__init__(f"Failed to write report to {destination}: {cause}")
        self.destination = destination
        self.cause = cause


class UnknownScenarioError(VWAuditError):
    """A scenario id was requested that the registry does not know"""
