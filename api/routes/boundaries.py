"""
VW-AUDIT Boundaries API Routes
"""

from fastapi import APIRouter, HTTPException

from api.schemas import BoundaryInfo, BoundaryListResponse
from vwaudit.boundaries import get_boundary, list_boundaries

router = APIRouter(prefix="/boundaries", tags=["Boundaries"])


@router.get("", response_model=BoundaryListResponse)
async def list_trust_boundaries():
    """
    List the trust boundaries in message-flow order.
    """
    boundaries = [BoundaryInfo(**b.to_dict()) for b in list_boundaries()]
    return BoundaryListResponse(boundaries=boundaries, total=len(boundaries))


@router.get("/{stage}", response_model=BoundaryInfo)
async def get_trust_boundary(stage: int):
    """
    Get one trust boundary by stage number.
    """
    boundary = get_boundary(stage)
    if not boundary:
        raise HTTPException(status_code=404, detail="Boundary not found")
    return BoundaryInfo(**boundary.to_dict())
