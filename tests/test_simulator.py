"""Message-flow simulator: origin gate, persistence and probes."""

from __future__ import annotations

import asyncio
import json

from vwaudit.protocol import MessageFlowSimulator, new_message_id
from vwaudit.protocol.envelope import VWRequest
from vwaudit.protocol.methods import classify_method, is_sensitive
from vwaudit.protocol.simulator import DEMO_ADDRESS, FLOW_STAGES, VAULT_STORAGE_KEY

HOSTILE = "https://malicious-site.com"
TRUSTED = "https://wallet.verified.network"


def test_default_methods() -> None:
    simulator = MessageFlowSimulator()

    assert simulator.dispatcher.methods() == ["eth_requestAccounts", "eth_sendTransaction", "eth_sign"]


def test_extension_methods_are_opt_in() -> None:
    simulator = MessageFlowSimulator(include_extension_methods=True)

    for method in ("requestPk", "signRecovery", "completeRecovery", "sendTransaction"):
        assert simulator.dispatcher.has_method(method)


def test_wildcard_accepts_any_origin_and_crosses_every_stage() -> None:
    simulator = MessageFlowSimulator()

    trace = asyncio.run(simulator.deliver(VWRequest(id="d1", method="eth_sign"), HOSTILE))

    assert trace.accepted is True
    assert trace.stages == FLOW_STAGES
    assert trace.response.success is True


def test_allowlist_rejects_at_first_stage() -> None:
    simulator = MessageFlowSimulator(allowed_origins=[TRUSTED])

    rejected = asyncio.run(simulator.deliver(VWRequest(id="d2", method="eth_sign"), HOSTILE))
    accepted = asyncio.run(simulator.deliver(VWRequest(id="d3", method="eth_sign"), TRUSTED))

    assert rejected.accepted is False
    assert rejected.stages == ["web_page"]
    assert rejected.response.id == "d2"
    assert "Origin not allowed" in rejected.response.error.message
    assert accepted.accepted is True


def test_persisted_response_is_mirrored_to_storage() -> None:
    simulator = MessageFlowSimulator()

    trace = asyncio.run(simulator.deliver(VWRequest(id="c1", method="eth_requestAccounts"), HOSTILE))

    assert trace.stored is True
    vault = json.loads(simulator.storage[VAULT_STORAGE_KEY])
    assert vault["address"] == DEMO_ADDRESS


def test_injection_probes_against_default_build() -> None:
    simulator = MessageFlowSimulator()

    results = {r.name: r for r in asyncio.run(simulator.run_injection_probes())}

    assert set(results) == {"malformed_message", "missing_id", "origin_validation", "message_id_collision"}
    assert results["malformed_message"].vulnerable is False
    assert results["missing_id"].vulnerable is True
    assert results["origin_validation"].vulnerable is True
    assert results["message_id_collision"].vulnerable is False
    assert results["malformed_message"].to_dict()["response"]["success"] is False


def test_origin_probe_with_allowlist() -> None:
    simulator = MessageFlowSimulator(allowed_origins=[TRUSTED])

    results = {r.name: r for r in asyncio.run(simulator.run_injection_probes())}

    assert results["origin_validation"].vulnerable is False


def test_vault_exposure() -> None:
    simulator = MessageFlowSimulator()

    clean = simulator.inspect_vault_exposure()
    leaky = simulator.inspect_vault_exposure({"address": DEMO_ADDRESS, "privateKey": "0x" + "1" * 64, "seed": None})

    assert clean.exposes_secrets is False
    assert clean.web_accessible is True
    assert leaky.sensitive_keys == ["privateKey"]
    assert "seed" not in leaky.serialized


def test_requested_private_key_is_exposed_in_vault() -> None:
    simulator = MessageFlowSimulator(include_extension_methods=True)

    trace = asyncio.run(simulator.deliver(VWRequest(id="pk1", method="requestPk"), HOSTILE))
    exposure = simulator.inspect_vault_exposure()

    assert trace.stored is True
    assert exposure.sensitive_keys == ["pk"]
    assert exposure.exposes_secrets is True


def test_message_ids() -> None:
    first, second = new_message_id(), new_message_id()

    assert len(first) == 11
    assert first != second


def test_method_classification() -> None:
    assert classify_method("requestPk") == "extension"
    assert classify_method("eth_signTypedData_v4") == "walletconnect"
    assert classify_method("eth_blockNumber") == "rpc"
    assert classify_method("made_up") == "unknown"
    assert is_sensitive("requestPk")
    assert not is_sensitive("eth_blockNumber")


def test_sensitive_method_delivery_is_flagged() -> None:
    from vwaudit.diagnostics import capture_logs

    simulator = MessageFlowSimulator()

    with capture_logs() as capture:
        asyncio.run(simulator.deliver(VWRequest(id="s1", method="eth_sendTransaction"), HOSTILE))
        asyncio.run(simulator.deliver(VWRequest(id="s2", method="eth_requestAccounts"), HOSTILE))

    flagged = capture.search("Forwarding sensitive")
    assert len(flagged) == 1
    assert "eth_sendTransaction" in flagged[0].message
