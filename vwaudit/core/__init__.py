"""VW-AUDIT Core Engine Module"""

from .engine import AuditEngine, AuditSummary

__all__ = ["AuditEngine", "AuditSummary"]
