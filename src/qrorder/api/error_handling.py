from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from qrorder.api.middleware.request_id import get_request_id
from qrorder.application.errors import (
    AuthenticationError,
    InvalidOrderTransitionError,
    MenuItemUnavailableError,
    OrderNotFoundError,
    OrderValidationError,
    RestaurantNotFoundError,
    RestaurantUnavailableError,
    TenantAccessDeniedError,
    TrackingCodeExhaustedError,
)

logger = logging.getLogger(__name__)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
        headers=headers,
    )


def _exception_handler(status_code: int, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
            headers=headers,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 405:
        code = "METHOD_NOT_ALLOWED"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": validation_exc.errors()},
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"method": request.method, "path": request.url.path},
    )
    return _error_response(
        status_code=500,
        code="INTERNAL_ERROR",
        message="internal server error",
    )


EXCEPTION_MAPPINGS: list[tuple[type[Exception], int, str]] = [
    (OrderValidationError, 400, "INVALID_ORDER"),
    (MenuItemUnavailableError, 400, "MENU_ITEM_UNAVAILABLE"),
    (AuthenticationError, 401, "UNAUTHENTICATED"),
    (TenantAccessDeniedError, 403, "FORBIDDEN"),
    (RestaurantUnavailableError, 403, "RESTAURANT_BLOCKED"),
    (RestaurantNotFoundError, 404, "RESTAURANT_NOT_FOUND"),
    (OrderNotFoundError, 404, "ORDER_NOT_FOUND"),
    (InvalidOrderTransitionError, 409, "INVALID_ORDER_TRANSITION"),
    (TrackingCodeExhaustedError, 500, "TRACKING_CODE_SPACE_EXHAUSTED"),
]


def register_exception_handlers(app: FastAPI) -> None:
    for exc_cls, status_code, code in EXCEPTION_MAPPINGS:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
