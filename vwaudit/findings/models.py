"""
VW-AUDIT Finding Models

Severity levels and the immutable finding record.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class Severity(Enum):
    """Vulnerability severity levels following CVSS"""
    INFO = "INFO"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"
    
    @property
    def label(self) -> str:
        """Capitalized name used in reports"""
        return self.value.capitalize()
    
    @property
    def color(self) -> str:
        """Get display color for severity"""
        colors = {
            "INFO": "blue",
            "LOW": "green",
            "MEDIUM": "yellow",
            "HIGH": "orange3",
            "CRITICAL": "red"
        }
        return colors.get(self.value, "white")
    
    @property
    def score_range(self) -> tuple:
        """CVSS score range"""
        ranges = {
            "INFO": (0.0, 0.0),
            "LOW": (0.1, 3.9),
            "MEDIUM": (4.0, 6.9),
            "HIGH": (7.0, 8.9),
            "CRITICAL": (9.0, 10.0)
        }
        return ranges.get(self.value, (0.0, 0.0))
    
    @classmethod
    def from_score(cls, score: float) -> "Severity":
        """Severity band a CVSS score falls into"""
        for severity in (cls.CRITICAL, cls.HIGH, cls.MEDIUM, cls.LOW):
            low, _ = severity.score_range
            if score >= low:
                return severity
        return cls.INFO


@dataclass(frozen=True)
class Finding:
    """A documented vulnerability. Built once, read by the report renderer."""
    
    id: str
    title: str
    severity: Severity
    cvss_score: float
    impact: str
    description: str
    proof_of_concept: str
    remediation_steps: Tuple[str, ...] = field(default_factory=tuple)
    affected_locations: Tuple[str, ...] = field(default_factory=tuple)
    
    def __post_init__(self):
        # Accept lists from callers but keep the record immutable
        object.__setattr__(self, "remediation_steps", tuple(self.remediation_steps))
        object.__setattr__(self, "affected_locations", tuple(self.affected_locations))
    
    @property
    def score_matches_severity(self) -> bool:
        """True if the CVSS score lies in the severity's band"""
        low, high = self.severity.score_range
        return low <= self.cvss_score <= high
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "severity": self.severity.value,
            "cvss_score": self.cvss_score,
            "impact": self.impact,
            "description": self.description,
            "proof_of_concept": self.proof_of_concept,
            "remediation_steps": list(self.remediation_steps),
            "affected_locations": list(self.affected_locations)
        }
