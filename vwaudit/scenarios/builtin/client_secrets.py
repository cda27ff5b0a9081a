"""
Exposed Client-Side Secrets

Scans shipped client-side source for API keys, keyed RPC URLs and
function keys.
"""

from pathlib import Path
from typing import Any, Dict

from vwaudit.diagnostics import find_exposed_secrets
from vwaudit.findings import Severity
from vwaudit.protocol.simulator import MessageFlowSimulator
from vwaudit.scenarios.base import Scenario, ScenarioMetadata, ScenarioResult


class ExposedSecretsScenario(Scenario):
    """
    Needs ``source_text`` or ``source_path`` in the run context.
    """

    @property
    def metadata(self) -> ScenarioMetadata:
        return ScenarioMetadata(
            id="exposed_client_secrets",
            name="Hardcoded Client-Side Secrets",
            category="Configuration",
            severity=Severity.HIGH,
            description="Checks client-side source for embedded API keys and function keys.",
            finding_id="VW-007",
            boundary_stage=4,
            tags=["secrets", "configuration"]
        )

    async def execute(self, simulator: MessageFlowSimulator, context: Dict[str, Any]) -> ScenarioResult:
        text = context.get("source_text")
        source = "source text"
        
        if text is None and context.get("source_path"):
            path = Path(context["source_path"])
            text = path.read_text(encoding="utf-8", errors="replace")
            source = str(path)
        
        if text is None:
            return self._inconclusive(description="No client-side source supplied to scan.")
        
        matches = find_exposed_secrets(text)
        if matches:
            return self._vulnerable(
                title="Credentials embedded in client-side source",
                description=f"{len(matches)} credential(s) found in {source}.",
                evidence=[f"line {m.line}: {m.kind} {m.preview}" for m in matches],
                remediation="Move keys server-side, restrict browser keys by referrer and rotate exposed ones."
            )
        
        return self._not_vulnerable(description=f"No credentials found in {source}.")
