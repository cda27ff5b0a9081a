"""Log capture, sensitive-data detection, monitoring and secret scanning."""

from __future__ import annotations

import base64
import json
import logging

from vwaudit.diagnostics import (
    MonitoredObject,
    capture_logs,
    detect_debug_flags,
    find_exposed_secrets,
    inspect_serialized_state,
    search_for_sensitive_data,
)
from vwaudit.utils.logger import get_logger

# Assembled at runtime so no credential-shaped literal lives in the tree
FAKE_BROWSER_KEY = "AIza" + "X" * 35
FAKE_RPC_KEY = "k" * 24


def test_capture_collects_harness_logs() -> None:
    log = get_logger("tests.capture")

    with capture_logs() as capture:
        log.warning("first message")
        log.error("second message")

    entries = capture.get_logs()
    assert [e.message for e in entries] == ["first message", "second message"]
    assert entries[0].level == "warning"
    assert entries[0].logger == "vwaudit.tests.capture"
    assert len(capture.search("second")) == 1
    capture.clear()
    assert len(capture) == 0


def test_capture_detaches_after_block() -> None:
    log = get_logger("tests.detach")

    with capture_logs() as capture:
        pass
    log.warning("after")

    assert len(capture) == 0
    assert not any(h is capture for h in logging.getLogger("vwaudit").handlers)


def test_search_for_sensitive_data() -> None:
    entries = [
        "Setting myVault in localStorage",
        "privateKey loaded",
        {"pk": "0x" + "ab" * 32},
        "abandon ability able about above absent absorb abstract absurd abuse access accident",
    ]

    matches = search_for_sensitive_data(entries)
    hit_entries = [m.entry for m in matches]

    assert entries[0] not in hit_entries
    assert entries[1] in hit_entries
    assert entries[2] in hit_entries
    assert entries[3] in hit_entries


def test_ordinary_sentences_are_not_mnemonics() -> None:
    entries = [
        "the page sent the request to the wallet before the user could approve it.",
        "Forwarding sensitive transaction method eth_sendTransaction from https://malicious-site.com",
        "a page can read the vault from local storage when the popup is not open",
    ]

    assert search_for_sensitive_data(entries) == []


def test_inspect_json_state() -> None:
    state = inspect_serialized_state(json.dumps({"address": "0x1", "mnemonic": "words"}), label="vault")

    assert state.is_json is True
    assert state.keys == ["address", "mnemonic"]
    assert state.sensitive_keys == ["mnemonic"]
    assert state.is_critical


def test_inspect_base64_state() -> None:
    encoded = base64.b64encode(b"opaque blob").decode()

    state = inspect_serialized_state(encoded)

    assert state.looks_base64 is True
    assert state.is_json is False
    assert not state.is_critical


def test_inspect_plain_object() -> None:
    state = inspect_serialized_state({"secret": 1})

    assert state.data_type == "dict"
    assert state.sensitive_keys == ["secret"]


def test_monitored_object_records_access() -> None:
    storage: dict[str, str] = {"myVault": "{}"}
    monitored = MonitoredObject(storage, "localStorage")

    monitored.get("myVault")
    monitored.set("privateKey", "0xsecret")
    monitored.get("privateKey")

    assert storage["privateKey"] == "0xsecret"
    assert monitored.summary() == {"myVault": 1, "privateKey": 2}
    assert len(monitored.sensitive_accesses) == 2
    assert monitored.access_log[1].operation == "set"
    assert monitored.access_log[1].value_length == len("0xsecret")


def test_monitored_object_warning_omits_value() -> None:
    monitored = MonitoredObject({}, "localStorage")

    with capture_logs() as capture:
        monitored.set("mnemonic", "very secret words")

    warnings = [e.message for e in capture.get_logs() if e.level == "warning"]
    assert warnings
    assert all("very secret words" not in w for w in warnings)


def test_monitored_plain_object() -> None:
    class Wallet:
        address = "0x1"

    monitored = MonitoredObject(Wallet(), "wallet")

    assert monitored.get("address") == "0x1"
    assert monitored.get("missing", "default") == "default"


def test_detect_debug_flags() -> None:
    report = detect_debug_flags({"NODE_ENV": "development", "DEBUG": "1", "PATH": "/bin"})

    assert report.found == {"DEBUG": "1", "NODE_ENV": "development"}
    assert report.development_mode is True
    assert detect_debug_flags({}).found == {}


def test_find_exposed_secrets() -> None:
    source = "\n".join([
        "export const BROWSER_KEY = '" + FAKE_BROWSER_KEY + "';",
        "const rpc = 'https://base-mainnet.g.alchemy.com/v2/" + FAKE_RPC_KEY + "';",
        "const functionKey = '" + "F" * 40 + "==';",
        "const nothing = 'hello';",
    ])

    matches = find_exposed_secrets(source)

    assert [(m.kind, m.line) for m in matches] == [
        ("google_api_key", 1),
        ("keyed_rpc_url", 2),
        ("function_key", 3),
    ]
    assert all(m.preview.endswith("...") for m in matches)
    assert all(FAKE_BROWSER_KEY not in m.preview for m in matches)


def test_find_exposed_secrets_clean_source() -> None:
    assert find_exposed_secrets("const chainId = 8453;\n") == []
