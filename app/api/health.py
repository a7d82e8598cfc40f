"""Banner, liveness and readiness endpoints.

/health always answers 200 while the process is alive; its body says
whether the database is reachable.  /ready answers 503 when a configured
database cannot be reached, so a load balancer stops routing here
without restarting the container.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.db import engine as db_engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def _database_check() -> str:
    if db_engine.engine is None:
        return "not_configured"
    try:
        async with db_engine.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.warning("Database health check failed", exc_info=True)
        return "degraded"
    return "ok"


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "CourseMaster Backend is Running..."


@router.get("/health")
async def health() -> dict:
    database = await _database_check()
    return {
        "status": "degraded" if database == "degraded" else "ok",
        "checks": {"database": database},
    }


@router.get("/ready")
async def ready() -> Response:
    if await _database_check() == "degraded":
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(status_code=status.HTTP_200_OK)
