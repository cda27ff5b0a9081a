"""
Origin Validation Bypass

Posts a signing request from untrusted origins and checks whether the
extension accepts it (trust boundary 1).
"""

from typing import Any, Dict

from vwaudit.findings import Severity
from vwaudit.protocol.envelope import VWRequest
from vwaudit.protocol.simulator import MessageFlowSimulator
from vwaudit.protocol.transactions import BURN_ADDRESS
from vwaudit.scenarios.base import Scenario, ScenarioMetadata, ScenarioResult

UNTRUSTED_ORIGINS = [
    "https://malicious-site.com",
    "https://phishing-site.net",
    "http://localhost:3000",
    "null",
]


class OriginValidationScenario(Scenario):
    """
    Send eth_sendTransaction from hostile origins.
    """

    @property
    def metadata(self) -> ScenarioMetadata:
        return ScenarioMetadata(
            id="origin_validation_bypass",
            name="Origin Validation Bypass",
            category="Message Channel",
            severity=Severity.CRITICAL,
            description='Checks whether messages from arbitrary origins reach the background ("*" postMessage origin).',
            finding_id="VW-002",
            boundary_stage=1,
            tags=["postMessage", "origin"]
        )

    async def execute(self, simulator: MessageFlowSimulator, context: Dict[str, Any]) -> ScenarioResult:
        origins = context.get("untrusted_origins", UNTRUSTED_ORIGINS)
        accepted = []
        
        for index, origin in enumerate(origins, 1):
            request = VWRequest(
                id=f"origin-bypass-{index}",
                method="eth_sendTransaction",
                args=[{"to": BURN_ADDRESS, "value": "0xDE0B6B3A7640000"}]
            )
            trace = await simulator.deliver(request, origin)
            if trace.accepted and trace.response.success:
                accepted.append(origin)
        
        if accepted:
            return self._vulnerable(
                title="Signing requests accepted from untrusted origins",
                description=f"{len(accepted)} of {len(origins)} untrusted origins reached the signer.",
                evidence=[f"accepted: {origin}" for origin in accepted],
                remediation="Post with an explicit target origin and check event.origin against an allowlist."
            )
        
        return self._not_vulnerable(
            description="All untrusted origins were rejected at the web page boundary."
        )
