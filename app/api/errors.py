# app/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.domain.errors import (
    ERROR_CART_CONFLICT,
    ERROR_INTERNAL,
    ERROR_INVALID_REQUEST,
    ERROR_STORE_UNAVAILABLE,
    CartConflictError,
    StoreUnavailable,
    ValidationError,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc) or ERROR_INVALID_REQUEST})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": ERROR_INVALID_REQUEST, "errors": errors})


async def conflict_handler(request: Request, exc: CartConflictError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=409, content={"detail": ERROR_CART_CONFLICT})


async def store_unavailable_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path}: store failure: {exc}")
    return JSONResponse(status_code=503, content={"detail": ERROR_STORE_UNAVAILABLE})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path}: unhandled error", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": ERROR_INTERNAL})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(CartConflictError, conflict_handler)
    app.add_exception_handler(StoreUnavailable, store_unavailable_handler)
    app.add_exception_handler(SQLAlchemyError, store_unavailable_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
