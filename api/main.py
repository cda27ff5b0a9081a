"""
VW-AUDIT FastAPI Application

Main entry point for the VW-AUDIT Web API.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import boundaries, findings, messages, reports, scenarios
from vwaudit import __version__
from vwaudit.errors import EnvelopeValidationError, ReportWriteError, VWAuditError
from vwaudit.utils.logger import get_logger

logger = get_logger(__name__)
req_logger = get_logger("vwaudit.requests")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    from vwaudit.scenarios import ScenarioRegistry
    registry = ScenarioRegistry()
    logger.info(f"VW-AUDIT API starting, {len(registry)} audit scenarios loaded")
    
    yield
    
    logger.info("VW-AUDIT API shutting down")


# Create FastAPI app
app = FastAPI(
    title="VW-AUDIT API",
    description="Verified Wallet extension message-flow audit - REST API",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Local tooling only; the API is bound to 127.0.0.1 by default
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(messages.router, prefix="/api")
app.include_router(boundaries.router, prefix="/api")
app.include_router(findings.router, prefix="/api")
app.include_router(reports.router, prefix="/api")
app.include_router(scenarios.router, prefix="/api")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all API requests with timing"""
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    
    if request.url.path.startswith("/api"):
        req_logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({duration_ms:.0f}ms)"
        )
    
    return response


@app.get("/api/health")
async def health_check():
    """API health check endpoint"""
    return {
        "status": "healthy",
        "service": "vwaudit-api",
        "version": __version__
    }


# Error handlers

@app.exception_handler(EnvelopeValidationError)
async def envelope_error_handler(request: Request, exc: EnvelopeValidationError):
    """Invalid wire shape"""
    errors = [
        {"loc": [str(part) for part in item.get("loc", ())], "msg": str(item.get("msg", ""))}
        for item in exc.errors
    ]
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid envelope", "detail": str(exc), "errors": errors}
    )


@app.exception_handler(ReportWriteError)
async def report_error_handler(request: Request, exc: ReportWriteError):
    """Report could not be written"""
    logger.error(str(exc))
    return JSONResponse(status_code=500, content={"error": "Report write failed", "detail": str(exc)})


@app.exception_handler(VWAuditError)
async def audit_error_handler(request: Request, exc: VWAuditError):
    """Any other harness error"""
    return JSONResponse(status_code=400, content={"error": type(exc).__name__, "detail": str(exc)})


if __name__ == "__main__":
    import uvicorn
    from vwaudit.utils.config import get_config
    
    config = get_config()
    uvicorn.run("api.main:app", host=config.api_host, port=config.api_port, reload=True)
