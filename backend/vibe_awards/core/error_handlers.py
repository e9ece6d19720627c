"""Exception handlers that render every error as {"error": message}."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from vibe_awards.core.exceptions import StoreError, VibeAwardsException
from vibe_awards.schemas.common import ErrorResponse

logger = structlog.get_logger(__name__)


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=message).model_dump()
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # loc looks like ("body", "app_id") or ("query", "limit")
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    if first.get("type") == "missing":
        return f"{field} is required" if field else "Request body is required"
    msg = first.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


async def vibe_awards_exception_handler(request: Request, exc: VibeAwardsException) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error("store_error", path=request.url.path, cause=repr(exc.cause))
    return _error(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, _describe_validation_error(exc))


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("unhandled_store_error", path=request.url.path, error=repr(exc))
    return _error(500, StoreError().message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VibeAwardsException, vibe_awards_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
