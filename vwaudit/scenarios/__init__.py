"""VW-AUDIT Audit Scenario Module"""

from .base import Scenario, ScenarioMetadata, ScenarioResult, ScenarioStatus
from .registry import ScenarioRegistry

__all__ = ["Scenario", "ScenarioMetadata", "ScenarioResult", "ScenarioStatus", "ScenarioRegistry"]
