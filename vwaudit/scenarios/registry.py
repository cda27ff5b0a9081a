"""
VW-AUDIT Scenario Registry

Auto-discovers and manages audit scenario modules.
"""

import importlib
import pkgutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from vwaudit.scenarios.base import Scenario, ScenarioMetadata
from vwaudit.utils.logger import get_logger

logger = get_logger(__name__)

SEVERITY_ORDER = {"CRITICAL": 0, "HIGH": 1, "MEDIUM": 2, "LOW": 3, "INFO": 4}


class ScenarioRegistry:
    """
    Registry for audit scenario discovery and lookup.
    
    Features:
    - Auto-discovery of built-in scenario modules
    - Filtering by category
    - Ordering by severity
    """
    
    def __init__(self, auto_discover: bool = True):
        """
        Initialize scenario registry.
        
        Args:
            auto_discover: If True, automatically discover built-in scenarios
        """
        self._scenarios: Dict[str, Type[Scenario]] = {}
        self._instances: Dict[str, Scenario] = {}
        
        if auto_discover:
            self._discover_scenarios()
    
    def _discover_scenarios(self):
        """Auto-discover built-in scenarios"""
        from vwaudit.scenarios import builtin
        self._discover_from_package(builtin)
        logger.debug(f"Discovered {len(self._scenarios)} audit scenarios")
    
    def _discover_from_package(self, package):
        """Discover scenarios from a package"""
        package_path = Path(package.__file__).parent
        
        for _, module_name, _ in pkgutil.iter_modules([str(package_path)]):
            try:
                module = importlib.import_module(f"{package.__name__}.{module_name}")
            except ImportError as e:
                logger.warning(f"Failed to load module {module_name}: {e}")
                continue
            
            # Find concrete Scenario subclasses
            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                
                if (isinstance(attr, type) and
                    issubclass(attr, Scenario) and
                    attr is not Scenario and
                    not getattr(attr, "__abstractmethods__", None)):
                    self.register(attr)
    
    def register(self, scenario_class: Type[Scenario]):
        """Register a scenario class"""
        instance = scenario_class()
        scenario_id = instance.metadata.id
        self._scenarios[scenario_id] = scenario_class
        self._instances[scenario_id] = instance
        logger.debug(f"Registered scenario: {scenario_id}")
    
    def get_scenario(self, scenario_id: str) -> Optional[Scenario]:
        """Get scenario instance by ID"""
        return self._instances.get(scenario_id)
    
    def get_all_scenarios(self) -> List[Scenario]:
        """All registered scenarios, most severe first"""
        return sorted(
            self._instances.values(),
            key=lambda s: (SEVERITY_ORDER.get(s.metadata.severity.value, 5), s.metadata.id)
        )
    
    def get_scenario_metadata(self, scenario_id: str) -> Optional[ScenarioMetadata]:
        """Get scenario metadata by ID"""
        scenario = self._instances.get(scenario_id)
        return scenario.metadata if scenario else None
    
    def get_all_metadata(self) -> List[Dict[str, Any]]:
        """Get metadata for all scenarios"""
        return [scenario.metadata.to_dict() for scenario in self.get_all_scenarios()]
    
    def get_scenarios_by_category(self, category: str) -> List[Scenario]:
        """Get scenarios filtered by category"""
        return [
            scenario for scenario in self.get_all_scenarios()
            if scenario.metadata.category.lower() == category.lower()
        ]
    
    def get_scenarios_for_finding(self, finding_id: str) -> List[Scenario]:
        """Scenarios that confirm a ledger finding"""
        return [s for s in self.get_all_scenarios() if s.metadata.finding_id == finding_id]
    
    def get_categories(self) -> List[str]:
        """Get list of all scenario categories"""
        return sorted({s.metadata.category for s in self._instances.values()})
    
    def get_summary(self) -> Dict[str, Any]:
        """Get summary of registered scenarios"""
        by_category: Dict[str, int] = {}
        by_severity: Dict[str, int] = {}
        
        for scenario in self._instances.values():
            cat = scenario.metadata.category
            sev = scenario.metadata.severity.value
            by_category[cat] = by_category.get(cat, 0) + 1
            by_severity[sev] = by_severity.get(sev, 0) + 1
        
        return {
            "total": len(self._instances),
            "by_category": by_category,
            "by_severity": by_severity,
            "categories": sorted(by_category)
        }
    
    def __len__(self) -> int:
        return len(self._instances)
