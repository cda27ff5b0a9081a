"""
VW-AUDIT Message Flow Simulator

Reproduces the extension's message path outside the browser:

    Web Page -> Injected Script -> Content Script -> Background -> SDK

Only the documented message shapes are modelled. The background handlers
answer with canned data; nothing here talks to a network or a real SDK.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from vwaudit.diagnostics.sensitive import SENSITIVE_KEYS
from vwaudit.protocol.dispatcher import MethodDispatcher
from vwaudit.protocol.envelope import VWRequest, VWResponse
from vwaudit.protocol.methods import classify_method, is_sensitive
from vwaudit.utils.logger import get_logger

logger = get_logger(__name__)

DEMO_ADDRESS = "0x1234567890123456789012345678901234567890"
VAULT_STORAGE_KEY = "myVault"
WILDCARD_ORIGIN = "*"

# Shape of the vault record the injected script keeps in localStorage
DEFAULT_VAULT: Dict[str, Any] = {
    "address": DEMO_ADDRESS,
    "regAddress": DEMO_ADDRESS,
    "chainId": "8453",
}

# Stand-in key material returned by the simulated getPk path. Not a real key.
SAMPLE_PRIVATE_KEY = "0x" + "ab" * 32

FLOW_STAGES = [
    "web_page",
    "injected_script",
    "content_script",
    "background",
    "sdk",
]


def new_message_id() -> str:
    """Random correlation id of the kind the injected script generates"""
    return uuid.uuid4().hex[:11]


@dataclass
class ProbeResult:
    """Outcome of one message-injection probe"""
    name: str
    vulnerable: bool
    detail: str
    response: Optional[VWResponse] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "vulnerable": self.vulnerable,
            "detail": self.detail,
            "response": self.response.to_dict() if self.response else None
        }


@dataclass
class VaultExposure:
    """What a web page can read from the vault record in localStorage"""
    storage_key: str
    serialized: str
    sensitive_keys: List[str] = field(default_factory=list)
    web_accessible: bool = True
    
    @property
    def exposes_secrets(self) -> bool:
        return bool(self.sensitive_keys)


@dataclass
class FlowTrace:
    """Stages a delivered message crossed and the response it produced"""
    origin: str
    accepted: bool
    stages: List[str]
    response: VWResponse
    stored: bool = False


class MessageFlowSimulator:
    """
    Simulated extension background with the extension's trust path in front.
    
    By default the simulator behaves like the audited build: the injected
    script posts with a ``"*"`` target origin and the content script does not
    filter by origin, so every origin is accepted.
    """
    
    def __init__(
        self,
        allowed_origins: Optional[List[str]] = None,
        include_extension_methods: bool = False,
        log: Optional[logging.Logger] = None
    ):
        """
        Initialize simulator.
        
        Args:
            allowed_origins: Origins accepted at the web page boundary;
                None reproduces the wildcard behaviour
            include_extension_methods: Also register the key and recovery
                methods the background exposes (requestPk, signRecovery, ...)
            log: Logger for diagnostic output
        """
        self._logger = log or logger
        self.allowed_origins = allowed_origins
        self.dispatcher = MethodDispatcher(log=self._logger)
        self.storage: Dict[str, str] = {}
        
        self._setup_handlers()
        if include_extension_methods:
            self._setup_extension_handlers()
    
    # ========== Handlers ==========
    
    def _setup_handlers(self):
        """Background handlers for the wallet RPC methods"""
        
        async def eth_request_accounts(req: VWRequest) -> VWResponse:
            self._logger.info("[Background] Handling eth_requestAccounts")
            return VWResponse.ok(req.id, data=[DEMO_ADDRESS], result=True, persist=True)
        
        async def eth_send_transaction(req: VWRequest) -> VWResponse:
            self._logger.info("[Background] Handling eth_sendTransaction")
            return VWResponse.ok(req.id, data=["0x...signed_tx_hash"], result=True)
        
        async def eth_sign(req: VWRequest) -> VWResponse:
            self._logger.info("[Background] Handling eth_sign")
            return VWResponse.ok(req.id, data=["0x...signature"], result=True)
        
        self.dispatcher.register("eth_requestAccounts", eth_request_accounts)
        self.dispatcher.register("eth_sendTransaction", eth_send_transaction)
        self.dispatcher.register("eth_sign", eth_sign)
    
    def _setup_extension_handlers(self):
        """Handlers for the extension-specific methods (background.js:5553-5600)"""
        
        async def request_pk(req: VWRequest) -> VWResponse:
            self._logger.info("[Background] Handling requestPk")
            vault = {**DEFAULT_VAULT, "pk": SAMPLE_PRIVATE_KEY}
            return VWResponse.ok(req.id, data=[vault], result=True, persist=True)
        
        async def sign_recovery(req: VWRequest) -> VWResponse:
            self._logger.info("[Background] Handling signRecovery")
            # Recovery parameters are forwarded as-is
            return VWResponse.ok(req.id, data=list(req.args), result=True)
        
        async def complete_recovery(req: VWRequest) -> VWResponse:
            self._logger.info("[Background] Handling completeRecovery")
            return VWResponse.ok(req.id, data=list(req.args), result=True)
        
        async def send_transaction(req: VWRequest) -> VWResponse:
            self._logger.info("[Background] Handling sendTransaction")
            return VWResponse.ok(req.id, data=["0x...signed_tx_hash"], result=True)
        
        self.dispatcher.register("requestPk", request_pk)
        self.dispatcher.register("signRecovery", sign_recovery)
        self.dispatcher.register("completeRecovery", complete_recovery)
        self.dispatcher.register("sendTransaction", send_transaction)
    
    # ========== Message Path ==========
    
    def accepts_origin(self, origin: str) -> bool:
        """Whether a message from ``origin`` passes the web page boundary"""
        if self.allowed_origins is None:
            return True
        return origin in self.allowed_origins
    
    async def handle_message(self, request: VWRequest) -> VWResponse:
        """Hand a request straight to the background dispatcher"""
        return await self.dispatcher.handle(request)
    
    async def deliver(self, request: VWRequest, origin: str) -> FlowTrace:
        """
        Send a request along the full path, starting at a web page.
        
        Args:
            request: Request envelope posted by the page
            origin: Origin of the posting page
            
        Returns:
            FlowTrace with the stages crossed and the response
        """
        if not self.accepts_origin(origin):
            self._logger.info(f"[Injected] Dropping message from untrusted origin {origin}")
            return FlowTrace(
                origin=origin,
                accepted=False,
                stages=FLOW_STAGES[:1],
                response=VWResponse.fail(request.id, f"Origin not allowed: {origin}")
            )
        
        if isinstance(request.method, str) and is_sensitive(request.method):
            self._logger.warning(
                f"[Content] Forwarding sensitive {classify_method(request.method)} method "
                f"{request.method} from {origin}"
            )
        
        response = await self.dispatcher.handle(request)
        trace = FlowTrace(origin=origin, accepted=True, stages=list(FLOW_STAGES), response=response)
        
        # The injected script mirrors saveToStorage responses into localStorage
        if response.success and response.persist and response.data:
            self._store_vault(response.data[0])
            trace.stored = True
        
        return trace
    
    def _store_vault(self, value: Any):
        if isinstance(value, dict):
            vault = dict(value)
        else:
            vault = {**DEFAULT_VAULT, "address": value, "regAddress": value}
        self.storage[VAULT_STORAGE_KEY] = json.dumps(vault)
        self._logger.warning(f"Setting {VAULT_STORAGE_KEY} in localStorage (web-accessible)")
    
    # ========== Probes ==========
    
    async def run_injection_probes(self) -> List[ProbeResult]:
        """Malformed message, missing id, origin and id collision probes"""
        results = []
        
        malformed = await self.dispatcher.handle(VWRequest(id="test-1", method=None))
        results.append(ProbeResult(
            name="malformed_message",
            vulnerable=malformed.success,
            detail=(
                "Null method was rejected with a structured error"
                if not malformed.success else
                "Null method was accepted"
            ),
            response=malformed
        ))
        
        missing_id = await self.dispatcher.handle(VWRequest(id="", method="eth_requestAccounts"))
        results.append(ProbeResult(
            name="missing_id",
            vulnerable=missing_id.success,
            detail=(
                "Request with an empty id was served; the response cannot be correlated"
                if missing_id.success else
                "Request with an empty id was rejected"
            ),
            response=missing_id
        ))
        
        hostile = "https://malicious-site.com"
        accepted = self.accepts_origin(hostile)
        results.append(ProbeResult(
            name="origin_validation",
            vulnerable=accepted,
            detail=(
                f'postMessage uses "{WILDCARD_ORIGIN}" origin; {hostile} is accepted'
                if accepted else
                f"{hostile} is rejected at the web page boundary"
            )
        ))
        
        id1, id2 = new_message_id(), new_message_id()
        collided = id1 == id2
        results.append(ProbeResult(
            name="message_id_collision",
            vulnerable=collided,
            detail=f"ID 1: {id1}, ID 2: {id2}, collision risk: {'HIGH' if collided else 'LOW'}"
        ))
        
        for result in results:
            level = logging.WARNING if result.vulnerable else logging.INFO
            self._logger.log(level, f"Probe {result.name}: {result.detail}")
        
        return results
    
    def inspect_vault_exposure(self, vault: Optional[Dict[str, Any]] = None) -> VaultExposure:
        """
        Serialize a vault record the way the injected script does and list
        the sensitive keys a web page could read from it.
        
        Args:
            vault: Vault record (defaults to the stored vault, else DEFAULT_VAULT)
        """
        if vault is None:
            stored = self.storage.get(VAULT_STORAGE_KEY)
            vault = json.loads(stored) if stored else DEFAULT_VAULT
        
        # JSON.stringify drops undefined members
        serialized = json.dumps({k: v for k, v in vault.items() if v is not None})
        found = [key for key in SENSITIVE_KEYS if f'"{key}"' in serialized]
        
        if found:
            self._logger.error(f"[CRITICAL] Sensitive keys in {VAULT_STORAGE_KEY}: {', '.join(found)}")
        else:
            self._logger.info(f"No keys found in {VAULT_STORAGE_KEY} (but still accessible from web pages)")
        
        return VaultExposure(storage_key=VAULT_STORAGE_KEY, serialized=serialized, sensitive_keys=found)
