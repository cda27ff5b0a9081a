"""
Storage Exposure

The injected script mirrors wallet state into localStorage, which every
script on the page can read (trust boundary 5).
"""

from typing import Any, Dict

from vwaudit.diagnostics import MonitoredObject, inspect_serialized_state, search_for_sensitive_data
from vwaudit.findings import Severity
from vwaudit.protocol.envelope import VWRequest
from vwaudit.protocol.simulator import VAULT_STORAGE_KEY, MessageFlowSimulator
from vwaudit.scenarios.base import Scenario, ScenarioMetadata, ScenarioResult, hostile_origin


class StorageExposureScenario(Scenario):
    """
    Connect, then read the persisted vault record as a page script would.
    """

    @property
    def metadata(self) -> ScenarioMetadata:
        return ScenarioMetadata(
            id="storage_exposure",
            name="Vault Exposure via localStorage",
            category="Storage",
            severity=Severity.CRITICAL,
            description="Checks whether wallet state persisted by the page bridge is readable by page scripts.",
            finding_id="VW-004",
            boundary_stage=5,
            tags=["localStorage", "vault"]
        )

    async def execute(self, simulator: MessageFlowSimulator, context: Dict[str, Any]) -> ScenarioResult:
        trace = await simulator.deliver(
            VWRequest(id="storage-connect", method="eth_requestAccounts"),
            hostile_origin(context)
        )
        
        local_storage = MonitoredObject(simulator.storage, "localStorage")
        stored = local_storage.get(VAULT_STORAGE_KEY)
        if stored is None:
            if not trace.accepted:
                return self._inconclusive(description="Connection was refused, nothing was persisted.")
            return self._not_vulnerable(description="No vault record was written to localStorage.")
        
        inspection = inspect_serialized_state(stored, label=VAULT_STORAGE_KEY)
        leaks = search_for_sensitive_data([stored])
        
        evidence = [
            f"{VAULT_STORAGE_KEY} readable from the page ({inspection.length} chars, json={inspection.is_json})",
            f"keys: {', '.join(inspection.keys) or 'none'}",
        ]
        evidence.extend(f"sensitive key: {key}" for key in inspection.sensitive_keys)
        evidence.extend(f"pattern {match.pattern} matched stored value" for match in leaks)
        
        return self._vulnerable(
            title="Vault record stored in web-accessible localStorage",
            description=(
                "The vault record is persisted unencrypted where any page script can read it"
                + (" and contains key material." if inspection.is_critical or leaks else ".")
            ),
            evidence=evidence,
            remediation="Keep wallet state in chrome.storage inside the extension and encrypt it at rest."
        )
