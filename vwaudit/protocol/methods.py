"""
VW-AUDIT Method Catalog

Method names the audited extension routes through its message channel,
grouped the way the extension groups them.
"""

from typing import Dict, List


# Extension methods: request method -> name the background service handles
EXTENSION_METHODS: Dict[str, str] = {
    "connectWallet": "connectWallet",
    "eth_requestAccounts": "eth_requestAccounts",
    "invitation": "invitation",
    "getAccount": "getAccounts",
    "requestPk": "getPk",
    "signRecovery": "signRecovery",
    "completeRecovery": "completeRecovery",
    "sendTransaction": "sendTransaction",
    "eth_sendTransaction": "eth_sendTransaction",
    "closePopup": "closePopup",
    # Shipped in production builds although only used in development
    "pair_walletconnect_uri": "pair_walletconnect_uri",
}

# Forwarded to WalletConnect for signing
WALLETCONNECT_METHODS: List[str] = [
    "eth_sendRawTransaction",
    "eth_sign",
    "eth_signTransaction",
    "eth_signTypedData",
    "eth_signTypedData_v3",
    "eth_signTypedData_v4",
]

# Read-only JSON-RPC methods proxied to the RPC node
RPC_METHODS: List[str] = [
    # ETH
    "eth_blockNumber",
    "eth_chainId",
    "eth_protocolVersion",
    "eth_syncing",
    "eth_coinbase",
    "eth_getBalance",
    "eth_getStorageAt",
    "eth_getTransactionCount",
    "eth_getCode",
    "eth_getProof",
    "eth_getBlockByHash",
    "eth_getBlockByNumber",
    "eth_getBlockTransactionCountByHash",
    "eth_getBlockTransactionCountByNumber",
    "eth_getUncleByBlockHashAndIndex",
    "eth_getUncleByBlockNumberAndIndex",
    "eth_getUncleCountByBlockHash",
    "eth_getUncleCountByBlockNumber",
    "eth_getTransactionByHash",
    "eth_getTransactionByBlockHashAndIndex",
    "eth_getTransactionByBlockNumberAndIndex",
    "eth_getTransactionReceipt",
    "eth_call",
    "eth_estimateGas",
    "eth_gasPrice",
    "eth_maxPriorityFeePerGas",
    "eth_feeHistory",
    "eth_newFilter",
    "eth_newBlockFilter",
    "eth_newPendingTransactionFilter",
    "eth_getFilterChanges",
    "eth_getFilterLogs",
    "eth_uninstallFilter",
    "eth_getLogs",
    "eth_sendRawTransaction",
    "eth_subscribe",
    "eth_unsubscribe",
    
    # Net
    "net_version",
    "net_listening",
    "net_peerCount",
    
    # Web3
    "web3_clientVersion",
    "web3_sha3",
]

# Methods that can move funds or reveal key material
SENSITIVE_METHODS: List[str] = [
    "requestPk",
    "signRecovery",
    "completeRecovery",
    "sendTransaction",
    "eth_sendTransaction",
    "eth_sign",
    "eth_signTransaction",
    "eth_signTypedData",
    "eth_signTypedData_v3",
    "eth_signTypedData_v4",
    "eth_sendRawTransaction",
]

DEFAULT_CHAIN_ID = 8453


def classify_method(method: str) -> str:
    """
    Name the channel a method travels through.
    
    Returns:
        One of ``extension``, ``walletconnect``, ``rpc`` or ``unknown``
    """
    if method in EXTENSION_METHODS:
        return "extension"
    if method in WALLETCONNECT_METHODS:
        return "walletconnect"
    if method in RPC_METHODS:
        return "rpc"
    return "unknown"


def is_sensitive(method: str) -> bool:
    """True if the method signs, sends, or exposes keys"""
    return method in SENSITIVE_METHODS
