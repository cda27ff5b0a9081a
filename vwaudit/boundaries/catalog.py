"""
VW-AUDIT Trust Boundaries

The five trust boundaries crossed by a VW_REQ on its way from a web page to
storage, with the validation each one should perform.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class RiskLevel(Enum):
    """Boundary risk rating"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"
    
    @property
    def rank(self) -> int:
        return ["LOW", "MEDIUM", "HIGH", "CRITICAL"].index(self.value)


@dataclass(frozen=True)
class TrustBoundary:
    """A transition between components with different privilege or origin"""
    stage: int
    name: str
    source: str
    target: str
    description: str
    risk: RiskLevel
    required_validation: str
    risk_notes: Tuple[str, ...] = field(default_factory=tuple)
    code_references: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "risk_notes", tuple(self.risk_notes))
        object.__setattr__(self, "code_references", tuple(self.code_references))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage,
            "name": self.name,
            "source": self.source,
            "target": self.target,
            "description": self.description,
            "risk": self.risk.value,
            "required_validation": self.required_validation,
            "risk_notes": list(self.risk_notes),
            "code_references": list(self.code_references)
        }


# ============================================================================
# Trust path: Web Page -> Injected -> Content -> Background -> SDK -> Storage
# ============================================================================

TRUST_BOUNDARIES = (
    TrustBoundary(
        stage=1,
        name="Web Page -> Injected Script",
        source="web_page",
        target="injected_script",
        description='The injected script exchanges postMessage traffic with the page using a "*" target origin.',
        risk=RiskLevel.CRITICAL,
        required_validation="Origin check: post to and accept from an explicit origin, never \"*\"",
        risk_notes=[
            "Any website can send messages",
            "Malicious website can inject eth_sendTransaction requests",
        ],
        code_references=["scripts/injected.js:2322-2325"]
    ),
    TrustBoundary(
        stage=2,
        name="Injected Script -> Content Script",
        source="injected_script",
        target="content_script",
        description="The content script relays window messages into the extension.",
        risk=RiskLevel.HIGH,
        required_validation="Source-window check: event.source === window",
        risk_notes=[
            "If source validation is weak, messages can be spoofed",
        ],
        code_references=["scripts/content.js:message handlers"]
    ),
    TrustBoundary(
        stage=3,
        name="Content Script -> Background",
        source="content_script",
        target="background",
        description="Messages enter the extension context through chrome.runtime.sendMessage.",
        risk=RiskLevel.HIGH,
        required_validation=(
            "Sender validation: message structure, sender origin, "
            "message id uniqueness and per-method permissions"
        ),
        risk_notes=[
            "If the content script is compromised, the background is at risk",
            "Background must validate every message",
        ],
        code_references=["scripts/background.js:5553-5600"]
    ),
    TrustBoundary(
        stage=4,
        name="Background -> SDK",
        source="background",
        target="sdk",
        description="The background calls the custody SDK directly.",
        risk=RiskLevel.MEDIUM,
        required_validation="SDK version pinning and advisory audit (@verified-network/verified-custody ^0.4.8)",
        risk_notes=[
            "SDK vulnerabilities affect the entire extension",
            "Caret range admits unreviewed minor releases",
        ],
        code_references=["package.json:@verified-network/verified-custody"]
    ),
    TrustBoundary(
        stage=5,
        name="Storage Access",
        source="injected_script",
        target="storage",
        description="Wallet data is kept in localStorage of the web page context.",
        risk=RiskLevel.CRITICAL,
        required_validation="Storage access control: keep wallet data in chrome.storage, not localStorage",
        risk_notes=[
            'localStorage.getItem("myVault") is readable by page JavaScript',
            "Readable from DevTools, other injected scripts and other extensions",
        ],
        code_references=["scripts/injected.js:2306-2309", "scripts/injected.js:2395-2398"]
    ),
)


def list_boundaries() -> List[TrustBoundary]:
    """All boundaries in trust-path order"""
    return list(TRUST_BOUNDARIES)


def get_boundary(key: Union[int, str]) -> Optional[TrustBoundary]:
    """Look up a boundary by stage number or (case-insensitive) name"""
    for boundary in TRUST_BOUNDARIES:
        if isinstance(key, int):
            if boundary.stage == key:
                return boundary
        elif isinstance(key, str):
            if boundary.name.lower() == key.lower():
                return boundary
        else:
            return None
    return None


def boundaries_by_risk(risk: RiskLevel) -> List[TrustBoundary]:
    """Boundaries rated exactly ``risk``"""
    return [b for b in TRUST_BOUNDARIES if b.risk == risk]
