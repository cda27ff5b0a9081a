"""
VW-AUDIT Transaction Checks

The validation a signing path should apply before a transaction reaches
the SDK, and a field diff between what the user approved and what was
signed.
"""

import re
from typing import Any, Dict, List, Mapping, Tuple

ZERO_ADDRESS = "0x" + "0" * 40
BURN_ADDRESS = "0x000000000000000000000000000000000000dEaD"
MAX_GAS = 30_000_000  # Block gas limit on Base / mainnet

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_QUANTITY_RE = re.compile(r"^0x[0-9a-fA-F]+$")
_DATA_RE = re.compile(r"^0x(?:[0-9a-fA-F]{2})*$")

TX_FIELDS = ("from", "to", "value", "gas", "gasPrice", "data", "nonce")


def validate_transaction(tx: Mapping[str, Any]) -> List[str]:
    """
    Check a transaction request.
    
    Args:
        tx: eth_sendTransaction parameter object
        
    Returns:
        Problems found; empty if the transaction is acceptable
    """
    problems = []
    
    to = tx.get("to")
    if not isinstance(to, str) or not _ADDRESS_RE.match(to):
        problems.append(f"invalid recipient address: {to!r}")
    elif to.lower() == ZERO_ADDRESS:
        problems.append("zero address recipient")
    
    value = tx.get("value")
    if not isinstance(value, str) or not _QUANTITY_RE.match(value):
        problems.append(f"value must be a non-negative hex quantity: {value!r}")
    
    for name in ("gasPrice", "nonce"):
        if name in tx and (not isinstance(tx[name], str) or not _QUANTITY_RE.match(tx[name])):
            problems.append(f"{name} must be a hex quantity: {tx[name]!r}")
    
    if "gas" in tx:
        gas = tx["gas"]
        if not isinstance(gas, str) or not _QUANTITY_RE.match(gas):
            problems.append(f"gas must be a hex quantity: {gas!r}")
        elif int(gas, 16) > MAX_GAS:
            problems.append(f"excessive gas: {int(gas, 16)} > {MAX_GAS}")
    
    if "data" in tx and (not isinstance(tx["data"], str) or not _DATA_RE.match(tx["data"])):
        problems.append(f"malformed data: {tx['data']!r}")
    
    return problems


def diff_transactions(
    approved: Mapping[str, Any],
    signed: Mapping[str, Any]
) -> Dict[str, Tuple[Any, Any]]:
    """Fields whose value differs between the approved and the signed transaction"""
    changed = {}
    for name in TX_FIELDS:
        before, after = approved.get(name), signed.get(name)
        if isinstance(before, str) and isinstance(after, str):
            same = before.lower() == after.lower()
        else:
            same = before == after
        if not same:
            changed[name] = (before, after)
    return changed
