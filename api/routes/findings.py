"""
VW-AUDIT Findings API Routes

Read-only access to the vulnerability ledger.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException

from api.schemas import FindingListResponse, FindingResponse, SeverityLevel
from vwaudit.findings import DEFAULT_LEDGER, Severity

router = APIRouter(prefix="/findings", tags=["Findings"])


@router.get("", response_model=FindingListResponse)
async def list_findings(severity: Optional[SeverityLevel] = None):
    """
    List ledger findings in report order.
    
    Optionally filter by severity.
    """
    if severity:
        findings = DEFAULT_LEDGER.by_severity(Severity(severity.value))
    else:
        findings = list(DEFAULT_LEDGER)
    
    return FindingListResponse(
        findings=[FindingResponse(**f.to_dict()) for f in findings],
        total=len(findings),
        by_severity=DEFAULT_LEDGER.severity_counts()
    )


@router.get("/{finding_id}", response_model=FindingResponse)
async def get_finding(finding_id: str):
    """
    Get details for a specific finding.
    """
    finding = DEFAULT_LEDGER.get(finding_id.upper())
    if not finding:
        raise HTTPException(status_code=404, detail="Finding not found")
    return FindingResponse(**finding.to_dict())
