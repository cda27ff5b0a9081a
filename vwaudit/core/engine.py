"""
VW-AUDIT Core Engine

Runs audit scenarios against the message-flow simulator and ties confirmed
behaviour back to the finding ledger.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from vwaudit.diagnostics import (
    DebugFlagReport, SensitiveMatch, capture_logs, detect_debug_flags, search_for_sensitive_data
)
from vwaudit.errors import UnknownScenarioError
from vwaudit.findings import DEFAULT_LEDGER, FindingLedger
from vwaudit.protocol.simulator import MessageFlowSimulator
from vwaudit.scenarios import ScenarioRegistry, ScenarioResult, ScenarioStatus
from vwaudit.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class AuditSummary:
    """Outcome of one audit run"""
    results: List[ScenarioResult] = field(default_factory=list)
    confirmed_finding_ids: List[str] = field(default_factory=list)
    debug_flags: DebugFlagReport = field(default_factory=DebugFlagReport)
    log_leaks: List[SensitiveMatch] = field(default_factory=list)
    
    def count(self, status: ScenarioStatus) -> int:
        return sum(1 for result in self.results if result.status == status)
    
    @property
    def status_counts(self) -> Dict[str, int]:
        return {status.value: self.count(status) for status in ScenarioStatus}
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [result.to_dict() for result in self.results],
            "confirmed_finding_ids": list(self.confirmed_finding_ids),
            "status_counts": self.status_counts,
            "debug_flags": dict(self.debug_flags.found),
            "development_mode": self.debug_flags.development_mode,
            "log_leaks": len(self.log_leaks)
        }


class AuditEngine:
    """
    Main audit orchestration engine.
    
    Scenarios run one after another against a single simulator. A failing
    scenario becomes an ERROR result; the rest of the run continues.
    """
    
    def __init__(
        self,
        simulator: Optional[MessageFlowSimulator] = None,
        registry: Optional[ScenarioRegistry] = None,
        ledger: FindingLedger = DEFAULT_LEDGER,
        report_generator=None
    ):
        """
        Initialize audit engine.
        
        Args:
            simulator: Simulator to attack (defaults to the audited build,
                extension methods included)
            registry: Scenario registry (defaults to the built-in scenarios)
            ledger: Finding ledger results are mapped onto
            report_generator: Optional ReportGenerator instance
        """
        self.simulator = simulator or MessageFlowSimulator(include_extension_methods=True)
        self.registry = registry or ScenarioRegistry()
        self.ledger = ledger
        self._report_generator = report_generator
        self.last_summary: Optional[AuditSummary] = None
        
        # Event callbacks
        self._event_callbacks: Dict[str, List[Callable]] = {
            "scenario_started": [],
            "scenario_completed": [],
            "finding_confirmed": [],
            "audit_completed": [],
        }
    
    # ========== Execution ==========
    
    async def run(
        self,
        scenario_ids: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> AuditSummary:
        """
        Execute scenarios.
        
        Args:
            scenario_ids: Scenarios to run (defaults to all, most severe first)
            context: Run context passed to every scenario
            
        Returns:
            AuditSummary
            
        Raises:
            UnknownScenarioError: if an id is not registered
        """
        if scenario_ids:
            scenarios = []
            for scenario_id in scenario_ids:
                scenario = self.registry.get_scenario(scenario_id)
                if scenario is None:
                    raise UnknownScenarioError(f"Unknown scenario: {scenario_id}")
                scenarios.append(scenario)
        else:
            scenarios = self.registry.get_all_scenarios()
        
        context = dict(context or {})
        summary = AuditSummary(debug_flags=detect_debug_flags())
        logger.info(f"Running {len(scenarios)} audit scenarios")
        
        with capture_logs() as capture:
            for scenario in scenarios:
                meta = scenario.metadata
                self._emit_event("scenario_started", {"scenario_id": meta.id})
                
                start = time.perf_counter()
                try:
                    result = await scenario.execute(self.simulator, context)
                except Exception as e:
                    logger.error(f"Scenario {meta.id} failed: {e}")
                    result = scenario._error(str(e))
                result.execution_time = time.perf_counter() - start
                
                summary.results.append(result)
                self._emit_event("scenario_completed", result)
                
                if result.is_vulnerable:
                    logger.warning(f"[{result.severity.value}] {meta.name}: {result.title or meta.name}")
                    if result.finding_id and result.finding_id not in summary.confirmed_finding_ids:
                        summary.confirmed_finding_ids.append(result.finding_id)
                        self._emit_event("finding_confirmed", {"finding_id": result.finding_id})
        
        summary.log_leaks = search_for_sensitive_data(capture.get_logs())
        if summary.log_leaks:
            logger.warning(f"{len(summary.log_leaks)} log lines matched sensitive patterns during the run")
        
        # Ledger order, not discovery order
        order = {finding_id: index for index, finding_id in enumerate(self.ledger.ids())}
        summary.confirmed_finding_ids.sort(key=lambda fid: order.get(fid, len(order)))
        
        self.last_summary = summary
        self._emit_event("audit_completed", summary)
        logger.info(
            f"Audit complete: {summary.count(ScenarioStatus.VULNERABLE)} vulnerable, "
            f"{len(summary.confirmed_finding_ids)} findings confirmed"
        )
        return summary
    
    # ========== Reporting ==========
    
    def confirmed_ledger(self, summary: Optional[AuditSummary] = None) -> FindingLedger:
        """Ledger restricted to findings a run confirmed"""
        summary = summary or self.last_summary
        if summary is None:
            return FindingLedger()
        confirmed = set(summary.confirmed_finding_ids)
        return FindingLedger(f for f in self.ledger if f.id in confirmed)
    
    def generate_report(
        self,
        fmt: str = "markdown",
        output: Optional[Path] = None,
        confirmed_only: bool = False
    ) -> Path:
        """
        Generate vulnerability report.
        
        Args:
            fmt: Report format ('markdown' or 'json')
            output: Destination path (defaults to the reports directory)
            confirmed_only: Only include findings the last run confirmed
            
        Returns:
            Path to generated report
        """
        if self._report_generator is None:
            from vwaudit.reporting import ReportGenerator
            self._report_generator = ReportGenerator()
        
        ledger = self.confirmed_ledger() if confirmed_only else self.ledger
        return self._report_generator.generate(ledger, fmt=fmt, output=output)
    
    # ========== Event System ==========
    
    def on(self, event: str, callback: Callable):
        """Register event callback"""
        if event in self._event_callbacks:
            self._event_callbacks[event].append(callback)
    
    def off(self, event: str, callback: Callable):
        """Unregister event callback"""
        if event in self._event_callbacks and callback in self._event_callbacks[event]:
            self._event_callbacks[event].remove(callback)
    
    def _emit_event(self, event: str, data: Any):
        for callback in self._event_callbacks.get(event, []):
            try:
                callback(data)
            except Exception as e:
                logger.error(f"Event callback error: {e}")
