"""VW-AUDIT Trust Boundary Catalog"""

from .catalog import (
    RiskLevel, TrustBoundary, TRUST_BOUNDARIES,
    list_boundaries, get_boundary, boundaries_by_risk
)

__all__ = [
    "RiskLevel", "TrustBoundary", "TRUST_BOUNDARIES",
    "list_boundaries", "get_boundary", "boundaries_by_risk",
]
