"""Built-in audit scenarios against the simulated extension."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import pytest

from vwaudit.findings import DEFAULT_LEDGER, Severity
from vwaudit.protocol import MessageFlowSimulator
from vwaudit.scenarios import Scenario, ScenarioRegistry, ScenarioResult, ScenarioStatus

TRUSTED = "https://wallet.verified.network"
FAKE_BROWSER_KEY = "AIza" + "Q" * 35

EXPECTED_IDS = {
    "origin_validation_bypass",
    "message_injection",
    "silent_transaction_signing",
    "transaction_manipulation",
    "transaction_validation_bypass",
    "private_key_request",
    "recovery_manipulation",
    "storage_exposure",
    "exposed_client_secrets",
}


def _run(scenario_id: str, simulator: Optional[MessageFlowSimulator] = None, **context: Any) -> ScenarioResult:
    scenario = ScenarioRegistry().get_scenario(scenario_id)
    assert scenario is not None
    simulator = simulator or MessageFlowSimulator(include_extension_methods=True)
    return asyncio.run(scenario.execute(simulator, context))


def test_registry_discovers_builtin_scenarios() -> None:
    registry = ScenarioRegistry()

    assert {m["id"] for m in registry.get_all_metadata()} == EXPECTED_IDS
    assert len(registry) == len(EXPECTED_IDS)


def test_registry_orders_by_severity() -> None:
    severities = [s.metadata.severity for s in ScenarioRegistry().get_all_scenarios()]
    order = [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW, Severity.INFO]

    assert severities == sorted(severities, key=order.index)


def test_every_scenario_maps_to_a_ledger_finding() -> None:
    for scenario in ScenarioRegistry().get_all_scenarios():
        assert DEFAULT_LEDGER.get(scenario.metadata.finding_id) is not None, scenario.metadata.id


def test_registry_lookups() -> None:
    registry = ScenarioRegistry()

    assert registry.get_scenario("nope") is None
    assert "Transaction Signing" in registry.get_categories()
    assert len(registry.get_scenarios_by_category("transaction signing")) == 3
    assert {s.metadata.id for s in registry.get_scenarios_for_finding("VW-006")} == {
        "transaction_manipulation",
        "transaction_validation_bypass",
    }
    assert registry.get_summary()["total"] == len(EXPECTED_IDS)


def test_empty_registry() -> None:
    assert len(ScenarioRegistry(auto_discover=False)) == 0


@pytest.mark.parametrize("scenario_id", sorted(EXPECTED_IDS - {"exposed_client_secrets"}))
def test_scenario_reproduces_against_default_build(scenario_id: str) -> None:
    result = _run(scenario_id)

    assert result.status == ScenarioStatus.VULNERABLE, result.description
    assert result.is_vulnerable
    assert result.evidence
    assert result.finding_id


def test_private_key_request_finds_key_material() -> None:
    result = _run("private_key_request")

    assert result.severity == Severity.CRITICAL
    assert any("0x[a-fA-F0-9]{64}" in line for line in result.evidence)


def test_private_key_request_without_extension_methods() -> None:
    result = _run("private_key_request", MessageFlowSimulator())

    assert result.status == ScenarioStatus.INCONCLUSIVE


def test_allowlist_closes_origin_paths() -> None:
    hardened = MessageFlowSimulator(allowed_origins=[TRUSTED], include_extension_methods=True)

    assert _run("origin_validation_bypass", hardened).status == ScenarioStatus.NOT_VULNERABLE
    assert _run("silent_transaction_signing", hardened).status == ScenarioStatus.NOT_VULNERABLE
    assert _run("private_key_request", hardened).status == ScenarioStatus.NOT_VULNERABLE
    assert _run("storage_exposure", hardened).status == ScenarioStatus.INCONCLUSIVE


def test_trusted_origin_still_reaches_storage() -> None:
    hardened = MessageFlowSimulator(allowed_origins=[TRUSTED])

    assert _run("storage_exposure", hardened, hostile_origin=TRUSTED).status == ScenarioStatus.VULNERABLE


def test_transaction_manipulation_reports_changed_fields() -> None:
    result = _run("transaction_manipulation")

    assert any(line.startswith("to:") for line in result.evidence)
    assert any(line.startswith("value:") for line in result.evidence)


def test_transaction_manipulation_identical_transactions() -> None:
    tx = {"to": "0x742d35cc6634c0532925a3b844bc9e7595f0beb1", "value": "0x1"}

    result = _run("transaction_manipulation", approved_tx=tx, manipulated_tx=dict(tx))

    assert result.status == ScenarioStatus.INCONCLUSIVE


def test_exposed_secrets_needs_source() -> None:
    assert _run("exposed_client_secrets").status == ScenarioStatus.INCONCLUSIVE


def test_exposed_secrets_from_text() -> None:
    result = _run("exposed_client_secrets", source_text="const key = '" + FAKE_BROWSER_KEY + "';\n")

    assert result.status == ScenarioStatus.VULNERABLE
    assert result.evidence == ["line 1: google_api_key AIzaQQ..."]


def test_exposed_secrets_from_path(tmp_path: Path) -> None:
    source = tmp_path / "constants.ts"
    source.write_text("export const CHAIN_ID = 8453;\n", encoding="utf-8")

    result = _run("exposed_client_secrets", source_path=str(source))

    assert result.status == ScenarioStatus.NOT_VULNERABLE


def test_result_serialization() -> None:
    data = _run("origin_validation_bypass").to_dict()

    assert data["status"] == "vulnerable"
    assert data["severity"] == "CRITICAL"
    assert data["finding_id"] == "VW-002"


def test_custom_scenario_registration() -> None:
    from vwaudit.scenarios import ScenarioMetadata

    class AlwaysInconclusive(Scenario):
        @property
        def metadata(self) -> ScenarioMetadata:
            return ScenarioMetadata(
                id="custom",
                name="Custom",
                category="Custom",
                severity=Severity.LOW,
                description="test",
            )

        async def execute(self, simulator: MessageFlowSimulator, context: dict[str, Any]) -> ScenarioResult:
            return self._inconclusive(description="nothing to see")

    registry = ScenarioRegistry(auto_discover=False)
    registry.register(AlwaysInconclusive)

    result = asyncio.run(registry.get_scenario("custom").execute(MessageFlowSimulator(), {}))
    assert result.status == ScenarioStatus.INCONCLUSIVE
    assert result.severity == Severity.LOW
