"""
VW-AUDIT Vulnerability Ledger

Fixed set of findings for the Verified Wallet extension, in report order.
"""

from typing import Dict, Iterable, Iterator, List, Optional

from vwaudit.findings.models import Finding, Severity


class FindingLedger:
    """
    Ordered, read-only collection of findings.
    
    Finding ids must be unique; order is preserved for rendering.
    """
    
    def __init__(self, findings: Iterable[Finding] = ()):
        self._findings = tuple(findings)
        
        seen = set()
        for finding in self._findings:
            if finding.id in seen:
                raise ValueError(f"Duplicate finding id: {finding.id}")
            seen.add(finding.id)
    
    def __iter__(self) -> Iterator[Finding]:
        return iter(self._findings)
    
    def __len__(self) -> int:
        return len(self._findings)
    
    def __getitem__(self, index: int) -> Finding:
        return self._findings[index]
    
    def get(self, finding_id: str) -> Optional[Finding]:
        """Get finding by ID"""
        for finding in self._findings:
            if finding.id == finding_id:
                return finding
        return None
    
    def by_severity(self, severity: Severity) -> List[Finding]:
        """Findings of one severity, in ledger order"""
        return [f for f in self._findings if f.severity == severity]
    
    def severity_counts(self) -> Dict[str, int]:
        """Count per severity label, zero-filled, most severe first"""
        counts = {sev.label: 0 for sev in (
            Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW, Severity.INFO
        )}
        for finding in self._findings:
            counts[finding.severity.label] += 1
        return counts
    
    def ids(self) -> List[str]:
        return [f.id for f in self._findings]


# ============================================================================
# Verified Wallet extension findings
# ============================================================================

DEFAULT_FINDINGS = [
    Finding(
        id="VW-001",
        title="Private Key Exposure via requestPk Method",
        severity=Severity.CRITICAL,
        cvss_score=9.8,
        impact="Direct theft of private keys, complete wallet compromise",
        description=(
            "The extension exposes a requestPk method that can be called from any website "
            "to retrieve private keys. Keys may be returned in plaintext or stored in "
            "web-accessible localStorage."
        ),
        proof_of_concept="vwaudit run --scenario private_key_request",
        remediation_steps=[
            "Remove requestPk method or restrict to extension context only",
            "Implement proper key encryption before storage",
            "Move keys from localStorage to secure extension storage",
            "Add origin validation to prevent web page access",
        ],
        affected_locations=[
            "scripts/background.js:5553-5563",
            "scripts/injected.js:2306-2309",
            "utils/constants.ts:36",
        ]
    ),
    Finding(
        id="VW-002",
        title="Wildcard Origin in postMessage - Transaction Signing Bypass",
        severity=Severity.CRITICAL,
        cvss_score=9.1,
        impact="Unauthorized transaction signing from malicious websites, fund theft",
        description=(
            'The extension uses wildcard origin ("*") in postMessage, allowing any website '
            "to send transaction signing requests. No origin validation is performed."
        ),
        proof_of_concept="vwaudit run --scenario origin_validation_bypass",
        remediation_steps=[
            "Remove wildcard origin from postMessage",
            "Implement strict origin validation",
            "Use specific origin or origin whitelist",
            "Validate message source in content script",
        ],
        affected_locations=[
            "scripts/injected.js:2322-2324",
            "scripts/content.js:message handlers",
        ]
    ),
    Finding(
        id="VW-003",
        title="Silent Transaction Signing Without User Consent",
        severity=Severity.CRITICAL,
        cvss_score=9.0,
        impact="Transactions can be signed and broadcast without user confirmation",
        description=(
            "The extension may allow transaction signing without proper user confirmation. "
            "Race conditions or timing attacks may bypass popup confirmation."
        ),
        proof_of_concept="vwaudit run --scenario silent_transaction_signing",
        remediation_steps=[
            "Enforce mandatory popup confirmation for all transactions",
            "Implement transaction signing locks",
            "Add user interaction verification",
            "Prevent concurrent transaction requests",
        ],
        affected_locations=[
            "scripts/background.js:5588-5600",
            "scripts/injected.js:2285-2326",
        ]
    ),
    Finding(
        id="VW-004",
        title="Key Storage in Web-Accessible localStorage",
        severity=Severity.CRITICAL,
        cvss_score=9.3,
        impact="Private keys accessible from any website via XSS, complete wallet compromise",
        description=(
            "Wallet data including potentially sensitive information is stored in "
            "localStorage, which is accessible from any website on the same origin. "
            "XSS attacks can steal this data."
        ),
        proof_of_concept="vwaudit run --scenario storage_exposure",
        remediation_steps=[
            "Move all sensitive data to chrome.storage.local",
            "Implement proper data encryption",
            "Remove localStorage usage for wallet data",
            "Add XSS protection measures",
        ],
        affected_locations=[
            "scripts/injected.js:2306-2309",
            "scripts/injected.js:2395-2398",
        ]
    ),
    Finding(
        id="VW-005",
        title="Recovery Mechanism Vulnerable to Manipulation",
        severity=Severity.HIGH,
        cvss_score=8.2,
        impact="Unauthorized wallet recovery, potential account takeover",
        description=(
            "The recovery mechanism (signRecovery, completeRecovery) can be manipulated by "
            "malicious websites. Recovery parameters are not properly validated."
        ),
        proof_of_concept="vwaudit run --scenario recovery_manipulation",
        remediation_steps=[
            "Add authentication to recovery flow",
            "Validate all recovery parameters",
            "Implement recovery time delays",
            "Require additional verification steps",
        ],
        affected_locations=[
            "scripts/background.js:5564-5587",
            "utils/constants.ts:37-38",
        ]
    ),
    Finding(
        id="VW-006",
        title="Transaction Parameter Manipulation",
        severity=Severity.HIGH,
        cvss_score=7.8,
        impact="Transaction parameters can be modified before signing, leading to fund theft",
        description=(
            "Transaction parameters can be manipulated between user input and signing. "
            "No validation prevents parameter modification."
        ),
        proof_of_concept="vwaudit run --scenario transaction_manipulation",
        remediation_steps=[
            "Validate transaction parameters before signing",
            "Compare user input with signed transaction",
            "Implement transaction parameter locks",
            "Add transaction review step",
        ],
        affected_locations=[
            "scripts/background.js:5588-5600",
            "scripts/injected.js:2285-2326",
        ]
    ),
    Finding(
        id="VW-007",
        title="Exposed API Keys and Secrets in Client-Side Code",
        severity=Severity.HIGH,
        cvss_score=8.5,
        impact="Unauthorized API access, service abuse, cost exploitation",
        description=(
            "API keys, gateway function keys, and Firebase configuration are exposed in "
            "the client-side constants file. These can be extracted and used for "
            "unauthorized API calls."
        ),
        proof_of_concept="vwaudit run --scenario exposed_client_secrets",
        remediation_steps=[
            "Rotate all exposed keys immediately",
            "Move keys to server-side only",
            "Use environment variables",
            "Implement proper key management",
        ],
        affected_locations=[
            "constants.ts:15-29",
            "utils/constants.js:2071-2081",
        ]
    ),
    Finding(
        id="VW-008",
        title="Missing Message Authentication",
        severity=Severity.HIGH,
        cvss_score=7.5,
        impact="Message tampering, injection attacks, unauthorized operations",
        description=(
            "Messages between web page and extension are not cryptographically signed. "
            "Messages can be tampered with or injected by malicious websites."
        ),
        proof_of_concept="vwaudit run --scenario message_injection",
        remediation_steps=[
            "Implement cryptographic message signing",
            "Verify message integrity",
            "Add message nonces/timestamps",
            "Validate message structure",
        ],
        affected_locations=[
            "scripts/injected.js:2322-2324",
            "scripts/content.js:message handlers",
        ]
    ),
]

DEFAULT_LEDGER = FindingLedger(DEFAULT_FINDINGS)
