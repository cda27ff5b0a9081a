"""
VW-AUDIT Scenario Base Class

Abstract base for executable audit scenarios. A scenario drives the
message-flow simulator the way an attacking page would and reports whether
the behaviour behind a ledger finding reproduces.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from vwaudit.findings import Severity
from vwaudit.protocol.simulator import MessageFlowSimulator


class ScenarioStatus(Enum):
    """Scenario result status"""
    VULNERABLE = "vulnerable"          # Behaviour reproduced
    NOT_VULNERABLE = "not_vulnerable"  # Behaviour did not reproduce
    INCONCLUSIVE = "inconclusive"      # Could not determine
    ERROR = "error"                    # Scenario failed


@dataclass
class ScenarioResult:
    """Result of a scenario execution"""
    
    scenario_id: str
    scenario_name: str
    status: ScenarioStatus
    severity: Severity = Severity.INFO
    finding_id: Optional[str] = None
    title: str = ""
    description: str = ""
    evidence: List[str] = field(default_factory=list)
    remediation: str = ""
    execution_time: float = 0.0
    error_message: Optional[str] = None
    
    @property
    def is_vulnerable(self) -> bool:
        """Check if the behaviour was reproduced"""
        return self.status == ScenarioStatus.VULNERABLE
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario_id": self.scenario_id,
            "scenario_name": self.scenario_name,
            "status": self.status.value,
            "severity": self.severity.value,
            "finding_id": self.finding_id,
            "title": self.title or self.scenario_name,
            "description": self.description,
            "evidence": list(self.evidence),
            "remediation": self.remediation,
            "execution_time": self.execution_time,
            "error_message": self.error_message
        }


@dataclass
class ScenarioMetadata:
    """Metadata for an audit scenario"""
    
    id: str
    name: str
    category: str
    severity: Severity
    description: str
    finding_id: Optional[str] = None
    boundary_stage: Optional[int] = None
    tags: List[str] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "severity": self.severity.value,
            "description": self.description,
            "finding_id": self.finding_id,
            "boundary_stage": self.boundary_stage,
            "tags": self.tags
        }


class Scenario(ABC):
    """
    Abstract base class for all audit scenarios.
    
    Subclasses must implement:
    - metadata property
    - execute() method
    """
    
    @property
    @abstractmethod
    def metadata(self) -> ScenarioMetadata:
        """Scenario metadata including ID, name, severity, etc."""
        pass
    
    @abstractmethod
    async def execute(self, simulator: MessageFlowSimulator, context: Dict[str, Any]) -> ScenarioResult:
        """
        Execute the scenario.
        
        Args:
            simulator: Message-flow simulator to attack
            context: Run context (hostile origin, trusted origins, source text, ...)
            
        Returns:
            ScenarioResult with evidence
        """
        pass
    
    def _create_result(self, status: ScenarioStatus, **kwargs) -> ScenarioResult:
        """Helper to create result with common fields populated"""
        return ScenarioResult(
            scenario_id=self.metadata.id,
            scenario_name=self.metadata.name,
            status=status,
            severity=kwargs.get("severity", self.metadata.severity),
            finding_id=kwargs.get("finding_id", self.metadata.finding_id),
            **{k: v for k, v in kwargs.items() if k not in ["severity", "finding_id"]}
        )
    
    def _vulnerable(self, **kwargs) -> ScenarioResult:
        """Shorthand for vulnerable result"""
        return self._create_result(ScenarioStatus.VULNERABLE, **kwargs)
    
    def _not_vulnerable(self, **kwargs) -> ScenarioResult:
        """Shorthand for not vulnerable result"""
        return self._create_result(ScenarioStatus.NOT_VULNERABLE, **kwargs)
    
    def _inconclusive(self, **kwargs) -> ScenarioResult:
        """Shorthand for inconclusive result"""
        return self._create_result(ScenarioStatus.INCONCLUSIVE, **kwargs)
    
    def _error(self, message: str, **kwargs) -> ScenarioResult:
        """Shorthand for error result"""
        return self._create_result(ScenarioStatus.ERROR, error_message=message, **kwargs)


def hostile_origin(context: Dict[str, Any]) -> str:
    """Origin an attacking page posts from"""
    return context.get("hostile_origin", "https://malicious-site.com")
