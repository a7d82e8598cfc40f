"""Translate service errors into HTTP errors.

Every failure body has the shape ``{"detail": {"message": ...}}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.services.errors import NotFoundError, ServiceError

logger = logging.getLogger(__name__)


def http_error(exc: ServiceError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    else:
        # Conflict, state mismatch, illegal transition and bad input
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail={"message": exc.message})


async def _store_failure(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": {"message": "Internal server error", "error": str(exc)}},
    )


async def _invalid_request(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    logger.warning("Invalid request body on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": {
                "message": "Invalid request",
                "errors": jsonable_encoder(errors),
            }
        },
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SQLAlchemyError, _store_failure)
    # asyncpg connection failures (refused, timed out) arrive unwrapped.
    app.add_exception_handler(OSError, _store_failure)
    app.add_exception_handler(RequestValidationError, _invalid_request)
