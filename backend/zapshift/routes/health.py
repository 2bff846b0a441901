"""
zapShift Backend — Liveness and Health Routes
===============================================

What:  GET / (plain-text liveness, kept for existing uptime monitors) and
       GET /health (document store ping, version, uptime).
Why:   Load balancers and Docker health checks need a cheap signal; GET /
       answers even when the database is down, GET /health does not lie
       about it.
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.errors import PyMongoError

from zapshift import __version__
from zapshift.database import DocumentStore, get_store
from zapshift.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Liveness probe")
async def root() -> str:
    return "zapShift server is running"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Document store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(store: DocumentStore = Depends(get_store)):
    """
    Ping the document store and report aggregate status.

    Returns 200 when the ping succeeds and 503 otherwise, so orchestrators
    can stop routing traffic to an instance that lost its database.
    """
    db_status = "connected"
    overall = "healthy"
    try:
        await store.ping()
    except PyMongoError as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: document store unreachable: %s", str(e))

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if overall != "healthy":
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
