"""
Transaction Signing Scenarios

Silent signing, parameter manipulation and missing transaction validation.
"""

from typing import Any, Dict, List

from vwaudit.findings import Severity
from vwaudit.protocol.envelope import METHOD_NOT_FOUND, VWRequest
from vwaudit.protocol.simulator import MessageFlowSimulator
from vwaudit.protocol.transactions import (
    BURN_ADDRESS, ZERO_ADDRESS, diff_transactions, validate_transaction
)
from vwaudit.scenarios.base import Scenario, ScenarioMetadata, ScenarioResult, hostile_origin

LEGIT_RECIPIENT = "0x742d35cc6634c0532925a3b844bc9e7595f0beb1"

MALICIOUS_TX = {
    "to": BURN_ADDRESS,
    "value": "0xDE0B6B3A7640000",  # 1 ETH
    "gas": "0x5208",               # 21000
    "gasPrice": "0x3B9ACA00",      # 1 gwei
}

APPROVED_TX = {
    "to": LEGIT_RECIPIENT,
    "value": "0x2386F26FC10000",   # 0.01 ETH
    "gas": "0x5208",
    "gasPrice": "0x3B9ACA00",
}

INVALID_TRANSACTIONS = [
    ("Zero Address Recipient", {"to": ZERO_ADDRESS, "value": "0x1"}),
    ("Invalid Address Format", {"to": "0xINVALID", "value": "0x1"}),
    ("Negative Value", {"to": LEGIT_RECIPIENT, "value": "-0x1"}),
    ("Excessive Gas", {"to": LEGIT_RECIPIENT, "value": "0x1", "gas": "0xFFFFFFFF"}),
    ("Malformed Data", {"to": LEGIT_RECIPIENT, "value": "0x1", "data": "0xINVALID"}),
]


class SilentTransactionSigningScenario(Scenario):
    """
    Ask for signatures from a hostile page and look for a confirmation step.
    """

    @property
    def metadata(self) -> ScenarioMetadata:
        return ScenarioMetadata(
            id="silent_transaction_signing",
            name="Silent Transaction Signing",
            category="Transaction Signing",
            severity=Severity.CRITICAL,
            description="Checks whether a page can get transactions signed without user confirmation.",
            finding_id="VW-003",
            boundary_stage=3,
            tags=["signing", "consent"]
        )

    async def execute(self, simulator: MessageFlowSimulator, context: Dict[str, Any]) -> ScenarioResult:
        origin = hostile_origin(context)
        approaches = [
            ("Direct eth_sendTransaction", "eth_sendTransaction", MALICIOUS_TX),
            ("Alternative sendTransaction", "sendTransaction", MALICIOUS_TX),
            ("Manipulated parameters", "eth_sendTransaction",
             {**MALICIOUS_TX, "to": ZERO_ADDRESS, "value": "0x" + "F" * 16}),
        ]
        
        signed: List[str] = []
        for index, (name, method, tx) in enumerate(approaches, 1):
            trace = await simulator.deliver(
                VWRequest(id=f"silent-tx-{index}", method=method, args=[tx]), origin
            )
            response = trace.response
            if response.success:
                signed.append(f"{name}: signed without confirmation -> {response.data}")
        
        if signed:
            return self._vulnerable(
                title="Transactions signed without user confirmation",
                description=f"{len(signed)} of {len(approaches)} approaches returned a signed transaction.",
                evidence=signed,
                remediation="Require an explicit popup confirmation before every signature."
            )
        
        return self._not_vulnerable(description="No approach produced a signature.")


class TransactionManipulationScenario(Scenario):
    """
    Sign a transaction that differs from the one the user approved.
    """

    @property
    def metadata(self) -> ScenarioMetadata:
        return ScenarioMetadata(
            id="transaction_manipulation",
            name="Transaction Parameter Manipulation",
            category="Transaction Signing",
            severity=Severity.HIGH,
            description="Checks whether parameters can change between user approval and signing.",
            finding_id="VW-006",
            boundary_stage=3,
            tags=["signing", "integrity"]
        )

    async def execute(self, simulator: MessageFlowSimulator, context: Dict[str, Any]) -> ScenarioResult:
        approved = context.get("approved_tx", APPROVED_TX)
        manipulated = context.get("manipulated_tx", MALICIOUS_TX)
        changed = diff_transactions(approved, manipulated)
        
        if not changed:
            return self._inconclusive(description="Approved and manipulated transactions are identical.")
        
        trace = await simulator.deliver(
            VWRequest(id="tx-manipulation", method="eth_sendTransaction", args=[manipulated]),
            hostile_origin(context)
        )
        
        evidence = [f"{name}: {before} -> {after}" for name, (before, after) in changed.items()]
        if trace.response.success:
            return self._vulnerable(
                title="Manipulated transaction was signed",
                description="The signer never compares the signed transaction with the approved one.",
                evidence=evidence,
                remediation="Bind the confirmation to a hash of the exact parameters that get signed."
            )
        
        return self._not_vulnerable(
            description="The manipulated transaction was refused.",
            evidence=evidence
        )


class TransactionValidationScenario(Scenario):
    """
    Submit transactions a signer should refuse.
    """

    @property
    def metadata(self) -> ScenarioMetadata:
        return ScenarioMetadata(
            id="transaction_validation_bypass",
            name="Transaction Validation Bypass",
            category="Transaction Signing",
            severity=Severity.HIGH,
            description="Checks whether invalid transactions are signed without validation.",
            finding_id="VW-006",
            boundary_stage=4,
            tags=["signing", "validation"]
        )

    async def execute(self, simulator: MessageFlowSimulator, context: Dict[str, Any]) -> ScenarioResult:
        origin = hostile_origin(context)
        accepted = []
        
        for index, (name, tx) in enumerate(INVALID_TRANSACTIONS, 1):
            problems = validate_transaction(tx)
            if not problems:
                continue
            
            trace = await simulator.deliver(
                VWRequest(id=f"invalid-tx-{index}", method="eth_sendTransaction", args=[tx]), origin
            )
            if trace.response.success:
                accepted.append(f"{name}: signed despite {'; '.join(problems)}")
            elif trace.response.error and trace.response.error.message == METHOD_NOT_FOUND:
                return self._inconclusive(description="Simulator has no eth_sendTransaction handler.")
        
        if accepted:
            return self._vulnerable(
                title="Invalid transactions are signed",
                description=f"{len(accepted)} of {len(INVALID_TRANSACTIONS)} invalid transactions were signed.",
                evidence=accepted,
                remediation="Validate recipient, value, gas and data before handing a transaction to the SDK."
            )
        
        return self._not_vulnerable(description="Every invalid transaction was refused.")
