# shop/api/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shop.domain.errors import (
    ValidationError,
    NotFoundError,
    ConflictError,
    InsufficientStockError,
    AuthenticationError,
    AuthorizationError,
    IntegrationError,
)
from shop.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_BY_ERROR = (
    (InsufficientStockError, 400),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def _domain_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        body = {"detail": str(exc)}
        available = getattr(exc, "available", None)
        if available is not None:
            body["available"] = available
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(status_code=status_code, content=body, headers=headers)

    return handler


async def _integration_handler(request: Request, exc: IntegrationError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} integration failure: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


async def _unexpected_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} failed")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    for error_class, status_code in _STATUS_BY_ERROR:
        app.add_exception_handler(error_class, _domain_handler(status_code))
    app.add_exception_handler(IntegrationError, _integration_handler)
    app.add_exception_handler(Exception, _unexpected_handler)
