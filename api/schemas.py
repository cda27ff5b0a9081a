"""
VW-AUDIT API Schemas

Pydantic models for request/response validation.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# ========== Enums ==========

class SeverityLevel(str, Enum):
    INFO = "INFO"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ScenarioStatusValue(str, Enum):
    VULNERABLE = "vulnerable"
    NOT_VULNERABLE = "not_vulnerable"
    INCONCLUSIVE = "inconclusive"
    ERROR = "error"


# ========== Request Models ==========

class ScenarioRunRequest(BaseModel):
    """Request to run audit scenarios"""
    scenario_ids: Optional[List[str]] = Field(default=None, description="Scenarios to run (all if omitted)")
    hostile_origin: Optional[str] = Field(default=None, description="Origin the attacking page posts from")
    allowed_origins: Optional[List[str]] = Field(
        default=None, description="Origins accepted at the web page boundary (wildcard if omitted)"
    )
    source_text: Optional[str] = Field(default=None, description="Client-side source to scan for secrets")
    
    @field_validator("hostile_origin")
    @classmethod
    def validate_origin(cls, v: Optional[str]) -> Optional[str]:
        """Origin cannot be blank"""
        if v is not None and not v.strip():
            raise ValueError("hostile_origin cannot be empty")
        return v


# ========== Response Models ==========

class BoundaryInfo(BaseModel):
    """Trust boundary"""
    stage: int
    name: str
    source: str
    target: str
    description: str
    risk: SeverityLevel
    required_validation: str
    risk_notes: List[str] = []
    code_references: List[str] = []


class BoundaryListResponse(BaseModel):
    """Trust boundary catalog"""
    boundaries: List[BoundaryInfo]
    total: int


class FindingResponse(BaseModel):
    """Ledger finding"""
    id: str
    title: str
    severity: SeverityLevel
    cvss_score: float
    impact: str
    description: str
    proof_of_concept: str
    remediation_steps: List[str]
    affected_locations: List[str]


class FindingListResponse(BaseModel):
    """List of findings"""
    findings: List[FindingResponse]
    total: int
    by_severity: Dict[str, int]


class ScenarioInfo(BaseModel):
    """Audit scenario information"""
    id: str
    name: str
    category: str
    severity: SeverityLevel
    description: str
    finding_id: Optional[str] = None
    boundary_stage: Optional[int] = None
    tags: List[str] = []


class ScenarioListResponse(BaseModel):
    """List of available scenarios"""
    scenarios: List[ScenarioInfo]
    total: int
    categories: List[str]


class ScenarioResultResponse(BaseModel):
    """Outcome of one scenario"""
    scenario_id: str
    scenario_name: str
    status: ScenarioStatusValue
    severity: SeverityLevel
    finding_id: Optional[str] = None
    title: str
    description: str
    evidence: List[str]
    remediation: str
    execution_time: float
    error_message: Optional[str] = None


class AuditSummaryResponse(BaseModel):
    """Outcome of an audit run"""
    results: List[ScenarioResultResponse]
    confirmed_finding_ids: List[str]
    status_counts: Dict[str, int]
    debug_flags: Dict[str, str]
    development_mode: bool
    log_leaks: int


class ErrorResponse(BaseModel):
    """API error response"""
    error: str
    detail: Optional[str] = None
    errors: Optional[List[Dict[str, Any]]] = None
