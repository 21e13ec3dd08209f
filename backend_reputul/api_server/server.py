"""
FastAPI server — reputation scoring and feedback gate over the review store.

Lifespan validates the scoring configuration (a bad value aborts startup)
and creates the store tables. Engine errors map to HTTP 400 with a stable
error code; HTTPException keeps the same {"detail": ...} shape.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from backend_reputul import __version__
from backend_reputul.api_server.feedback_gate import router as feedback_gate_router
from backend_reputul.api_server.reputation import router as reputation_router
from backend_reputul.config.settings import get_scoring_config
from backend_reputul.core.exceptions import ReputulError
from backend_reputul.database.sql_store import get_sql_store
from backend_reputul.reputul_logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Fail fast on invalid scoring config; make sure the store tables exist."""
    config = get_scoring_config()
    logger.info("api_scoring_config_loaded", **config.to_dict())
    store = get_sql_store()
    logger.info("api_started", version=__version__, database=store.url.split("?")[0].split("//")[-1])
    yield
    logger.info("api_shutdown")


app = FastAPI(
    title="Reputul Reputation API",
    description="Reputation snapshot, rating goals and compliant feedback routing per business.",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(reputation_router)
app.include_router(feedback_gate_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.exception_handler(ReputulError)
def reputul_error_handler(request: Request, exc: ReputulError) -> JSONResponse:
    """Engine validation errors are client errors: 400 with detail + code."""
    logger.warning("api_request_rejected", path=request.url.path, code=exc.code, detail=exc.message)
    return JSONResponse(status_code=400, content=exc.to_dict())


@app.exception_handler(HTTPException)
def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
