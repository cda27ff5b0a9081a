"""
Message Injection

Malformed, uncorrelated and unauthenticated messages (trust boundary 3).
"""

from typing import Any, Dict

from vwaudit.findings import Severity
from vwaudit.protocol.simulator import MessageFlowSimulator
from vwaudit.scenarios.base import Scenario, ScenarioMetadata, ScenarioResult


class MessageInjectionScenario(Scenario):
    """
    Run the injection probes and report every one that got through.
    """

    @property
    def metadata(self) -> ScenarioMetadata:
        return ScenarioMetadata(
            id="message_injection",
            name="Message Injection",
            category="Message Channel",
            severity=Severity.HIGH,
            description="Sends malformed and unauthenticated envelopes and checks which are served.",
            finding_id="VW-008",
            boundary_stage=3,
            tags=["injection", "authentication"]
        )

    async def execute(self, simulator: MessageFlowSimulator, context: Dict[str, Any]) -> ScenarioResult:
        probes = await simulator.run_injection_probes()
        failed = [probe for probe in probes if probe.vulnerable]
        
        if failed:
            return self._vulnerable(
                title="Unauthenticated messages are served",
                description=(
                    f"{len(failed)} of {len(probes)} probes got through. Envelopes carry no "
                    "signature or nonce, so any page can forge them."
                ),
                evidence=[f"{probe.name}: {probe.detail}" for probe in failed],
                remediation="Sign envelopes, bind them to a nonce, and reject empty or reused ids."
            )
        
        return self._not_vulnerable(
            description="Every probe was rejected with a structured error.",
            evidence=[f"{probe.name}: {probe.detail}" for probe in probes]
        )
