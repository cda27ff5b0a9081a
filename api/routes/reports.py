"""
VW-AUDIT Reports API Routes

Renders reports on request. Nothing is written to disk.
"""

import json

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse

from vwaudit.findings import DEFAULT_LEDGER
from vwaudit.reporting import ReportGenerator

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/markdown", response_class=PlainTextResponse)
async def markdown_report():
    """
    Render the vulnerability report as Markdown.
    """
    content = ReportGenerator().render(DEFAULT_LEDGER)
    return PlainTextResponse(content, media_type="text/markdown")


@router.get("/json")
async def json_report():
    """
    Render the vulnerability report as JSON.
    """
    return JSONResponse(json.loads(ReportGenerator().render_json(DEFAULT_LEDGER)))


@router.get("/boundaries", response_class=PlainTextResponse)
async def boundary_report():
    """
    Render the trust boundary catalog as Markdown.
    """
    return PlainTextResponse(ReportGenerator().render_boundaries(), media_type="text/markdown")
