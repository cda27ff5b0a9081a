"""Finding ledger contents and invariants."""

from __future__ import annotations

import pytest

from vwaudit.findings import DEFAULT_LEDGER, Finding, FindingLedger, Severity


def test_default_ledger_order_and_counts() -> None:
    assert DEFAULT_LEDGER.ids() == [f"VW-00{i}" for i in range(1, 9)]
    assert DEFAULT_LEDGER.severity_counts() == {"Critical": 4, "High": 4, "Medium": 0, "Low": 0, "Info": 0}


def test_scores_match_severity_bands() -> None:
    for finding in DEFAULT_LEDGER:
        assert finding.score_matches_severity, finding.id
        assert Severity.from_score(finding.cvss_score) == finding.severity


def test_every_finding_has_remediation_and_locations() -> None:
    for finding in DEFAULT_LEDGER:
        assert finding.remediation_steps
        assert finding.affected_locations
        assert finding.proof_of_concept.startswith("vwaudit run --scenario ")


def test_lookup() -> None:
    assert DEFAULT_LEDGER.get("VW-004").title == "Key Storage in Web-Accessible localStorage"
    assert DEFAULT_LEDGER.get("VW-999") is None
    assert [f.id for f in DEFAULT_LEDGER.by_severity(Severity.HIGH)] == ["VW-005", "VW-006", "VW-007", "VW-008"]


def test_duplicate_ids_rejected() -> None:
    finding = DEFAULT_LEDGER[0]

    with pytest.raises(ValueError):
        FindingLedger([finding, finding])


def test_finding_is_immutable() -> None:
    finding = Finding(
        id="X-1",
        title="t",
        severity=Severity.LOW,
        cvss_score=2.0,
        impact="i",
        description="d",
        proof_of_concept="p",
        remediation_steps=["a"],
    )

    assert finding.remediation_steps == ("a",)
    with pytest.raises(AttributeError):
        finding.title = "changed"  # type: ignore[misc]


def test_severity_labels() -> None:
    assert Severity.CRITICAL.label == "Critical"
    assert Severity.from_score(0.0) == Severity.INFO
    assert Severity.from_score(5.0) == Severity.MEDIUM
