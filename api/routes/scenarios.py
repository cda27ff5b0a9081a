"""
VW-AUDIT Scenarios API Routes

Endpoints for listing and running audit scenarios.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException

from api.schemas import AuditSummaryResponse, ScenarioInfo, ScenarioListResponse, ScenarioRunRequest
from vwaudit.core import AuditEngine
from vwaudit.errors import UnknownScenarioError
from vwaudit.protocol import MessageFlowSimulator
from vwaudit.scenarios import ScenarioRegistry

router = APIRouter(prefix="/scenarios", tags=["Scenarios"])


@router.get("", response_model=ScenarioListResponse)
async def list_scenarios(category: Optional[str] = None):
    """
    List all available audit scenarios.
    
    Optionally filter by category.
    """
    registry = ScenarioRegistry()
    
    if category:
        metadata = [s.metadata.to_dict() for s in registry.get_scenarios_by_category(category)]
    else:
        metadata = registry.get_all_metadata()
    
    scenarios = [ScenarioInfo(**m) for m in metadata]
    return ScenarioListResponse(
        scenarios=scenarios,
        total=len(scenarios),
        categories=registry.get_categories()
    )


@router.get("/{scenario_id}", response_model=ScenarioInfo)
async def get_scenario(scenario_id: str):
    """
    Get details for a specific scenario.
    """
    metadata = ScenarioRegistry().get_scenario_metadata(scenario_id)
    if not metadata:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return ScenarioInfo(**metadata.to_dict())


@router.post("/run", response_model=AuditSummaryResponse)
async def run_scenarios(request: ScenarioRunRequest):
    """
    Run scenarios against a fresh simulator.
    """
    context = {}
    if request.hostile_origin:
        context["hostile_origin"] = request.hostile_origin
    if request.source_text is not None:
        context["source_text"] = request.source_text
    
    engine = AuditEngine(simulator=MessageFlowSimulator(
        allowed_origins=request.allowed_origins,
        include_extension_methods=True
    ))
    
    try:
        summary = await engine.run(request.scenario_ids, context)
    except UnknownScenarioError as e:
        raise HTTPException(status_code=404, detail=str(e))
    
    return AuditSummaryResponse(**summary.to_dict())
