"""Audit engine orchestration."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from vwaudit.core import AuditEngine
from vwaudit.errors import UnknownScenarioError
from vwaudit.findings import DEFAULT_LEDGER, Severity
from vwaudit.protocol import MessageFlowSimulator
from vwaudit.scenarios import Scenario, ScenarioMetadata, ScenarioRegistry, ScenarioResult, ScenarioStatus


class ExplodingScenario(Scenario):
    @property
    def metadata(self) -> ScenarioMetadata:
        return ScenarioMetadata(
            id="exploding",
            name="Exploding",
            category="Test",
            severity=Severity.LOW,
            description="raises",
        )

    async def execute(self, simulator: MessageFlowSimulator, context: dict[str, Any]) -> ScenarioResult:
        raise RuntimeError("kaboom")


def test_full_run_confirms_findings_in_ledger_order() -> None:
    summary = asyncio.run(AuditEngine().run())

    assert len(summary.results) == 9
    assert summary.count(ScenarioStatus.VULNERABLE) == 8
    assert summary.count(ScenarioStatus.INCONCLUSIVE) == 1
    expected = [fid for fid in DEFAULT_LEDGER.ids() if fid != "VW-007"]
    assert summary.confirmed_finding_ids == expected


def test_secrets_scenario_confirms_with_source() -> None:
    context = {"source_text": "key: '" + "AIza" + "Z" * 35 + "'"}

    summary = asyncio.run(AuditEngine().run(["exposed_client_secrets"], context))

    assert summary.confirmed_finding_ids == ["VW-007"]


def test_selected_scenarios_only() -> None:
    summary = asyncio.run(AuditEngine().run(["storage_exposure", "origin_validation_bypass"]))

    assert [r.scenario_id for r in summary.results] == ["storage_exposure", "origin_validation_bypass"]
    assert summary.confirmed_finding_ids == ["VW-002", "VW-004"]


def test_unknown_scenario_raises() -> None:
    with pytest.raises(UnknownScenarioError):
        asyncio.run(AuditEngine().run(["does_not_exist"]))


def test_failing_scenario_is_isolated() -> None:
    registry = ScenarioRegistry()
    registry.register(ExplodingScenario)
    engine = AuditEngine(registry=registry)

    summary = asyncio.run(engine.run(["exploding", "origin_validation_bypass"]))

    failed, passed = summary.results
    assert failed.status == ScenarioStatus.ERROR
    assert failed.error_message == "kaboom"
    assert passed.status == ScenarioStatus.VULNERABLE


def test_events_are_emitted() -> None:
    engine = AuditEngine()
    seen: list[str] = []
    engine.on("scenario_started", lambda data: seen.append("start:" + data["scenario_id"]))
    engine.on("finding_confirmed", lambda data: seen.append("finding:" + data["finding_id"]))

    asyncio.run(engine.run(["origin_validation_bypass"]))

    assert seen == ["start:origin_validation_bypass", "finding:VW-002"]


def test_summary_serialization() -> None:
    summary = asyncio.run(AuditEngine().run(["message_injection"]))
    data = summary.to_dict()

    assert data["status_counts"]["vulnerable"] == 1
    assert data["confirmed_finding_ids"] == ["VW-008"]
    assert isinstance(data["log_leaks"], int)


def test_debug_flags_recorded(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NODE_ENV", "development")

    summary = asyncio.run(AuditEngine().run(["message_injection"]))

    assert summary.debug_flags.development_mode is True


def test_confirmed_report(tmp_path: Path) -> None:
    engine = AuditEngine()
    asyncio.run(engine.run(["origin_validation_bypass", "storage_exposure"]))

    path = engine.generate_report(output=tmp_path / "report.md", confirmed_only=True)

    text = path.read_text(encoding="utf-8")
    assert "Total Vulnerabilities: 2" in text
    assert "Critical: 2" in text
    assert [line for line in text.splitlines() if line.startswith("## ")] == [
        "## 1. Wildcard Origin in postMessage - Transaction Signing Bypass (VW-002)",
        "## 2. Key Storage in Web-Accessible localStorage (VW-004)",
    ]


def test_confirmed_ledger_before_any_run() -> None:
    assert len(AuditEngine().confirmed_ledger()) == 0
