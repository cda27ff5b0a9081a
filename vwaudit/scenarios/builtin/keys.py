"""
Key Management Scenarios

Private key retrieval through requestPk and recovery parameter tampering.
"""

from typing import Any, Dict

from vwaudit.diagnostics import search_for_sensitive_data
from vwaudit.findings import Severity
from vwaudit.protocol.envelope import METHOD_NOT_FOUND, VWRequest
from vwaudit.protocol.methods import DEFAULT_CHAIN_ID
from vwaudit.protocol.simulator import MessageFlowSimulator
from vwaudit.protocol.transactions import BURN_ADDRESS
from vwaudit.scenarios.base import Scenario, ScenarioMetadata, ScenarioResult, hostile_origin


class PrivateKeyRequestScenario(Scenario):
    """
    Call requestPk from a hostile page and scan the response for key material.
    """

    @property
    def metadata(self) -> ScenarioMetadata:
        return ScenarioMetadata(
            id="private_key_request",
            name="Private Key Exposure via requestPk",
            category="Key Management",
            severity=Severity.CRITICAL,
            description="Checks whether any page can retrieve key material through requestPk.",
            finding_id="VW-001",
            boundary_stage=3,
            tags=["keys", "requestPk"]
        )

    async def execute(self, simulator: MessageFlowSimulator, context: Dict[str, Any]) -> ScenarioResult:
        request = VWRequest(
            id="exploit-1",
            method="requestPk",
            args=[{"chainId": str(DEFAULT_CHAIN_ID), "vaultData": {}}]
        )
        trace = await simulator.deliver(request, hostile_origin(context))
        response = trace.response
        
        if not response.success:
            if response.error and response.error.message == METHOD_NOT_FOUND:
                return self._inconclusive(description="Simulator does not expose requestPk.")
            return self._not_vulnerable(description=f"requestPk refused: {response.error.message if response.error else 'no error'}")
        
        matches = search_for_sensitive_data(response.data or [])
        if matches:
            return self._vulnerable(
                title="Private key returned to an untrusted page",
                description="requestPk answered a hostile origin with key material in the response.",
                evidence=[f"pattern {m.pattern} matched response data" for m in matches],
                remediation="Remove requestPk from the page-facing channel; keep keys in extension context."
            )
        
        return self._vulnerable(
            severity=Severity.HIGH,
            title="requestPk callable from an untrusted page",
            description="No key material was found in the response, but the method is reachable.",
            evidence=[f"response data: {response.data}"],
            remediation="Restrict requestPk to the extension context."
        )


class RecoveryManipulationScenario(Scenario):
    """
    Send signRecovery with attacker-chosen transaction data.
    """

    @property
    def metadata(self) -> ScenarioMetadata:
        return ScenarioMetadata(
            id="recovery_manipulation",
            name="Recovery Mechanism Manipulation",
            category="Key Management",
            severity=Severity.HIGH,
            description="Checks whether recovery parameters from a page are accepted without validation.",
            finding_id="VW-005",
            boundary_stage=3,
            tags=["recovery"]
        )

    async def execute(self, simulator: MessageFlowSimulator, context: Dict[str, Any]) -> ScenarioResult:
        tx_data = {"to": BURN_ADDRESS, "value": "0x0"}
        request = VWRequest(
            id="recovery-exploit",
            method="signRecovery",
            args=[{"chainId": str(DEFAULT_CHAIN_ID), "vaultData": {}, "txData": tx_data}]
        )
        trace = await simulator.deliver(request, hostile_origin(context))
        response = trace.response
        
        if not response.success:
            if response.error and response.error.message == METHOD_NOT_FOUND:
                return self._inconclusive(description="Simulator does not expose signRecovery.")
            return self._not_vulnerable(description="signRecovery refused the tampered parameters.")
        
        forwarded = any(
            isinstance(item, dict) and item.get("txData") == tx_data
            for item in (response.data or [])
        )
        return self._vulnerable(
            title="Recovery accepted attacker-chosen parameters",
            description=(
                "signRecovery was accepted from an untrusted page"
                + (" and forwarded the attacker's txData unchanged." if forwarded else ".")
            ),
            evidence=[f"txData: {tx_data}", f"response data: {response.data}"],
            remediation="Authenticate the recovery flow and validate every recovery parameter."
        )
