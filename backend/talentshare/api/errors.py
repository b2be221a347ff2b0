"""
Exception handlers rendering every failure as

    {"success": false, "error": <message>, "code": <code>}

Domain errors carry their own status; framework errors (HTTPException,
request validation) are folded into the same envelope.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from talentshare.core.exceptions import DomainError, UnauthenticatedError
from talentshare.core.logging import get_logger

logger = get_logger(__name__)

_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHENTICATED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
}


def error_body(message: str, code: str, details: Optional[Any] = None) -> dict:
    body: dict[str, Any] = {"success": False, "error": message, "code": code}
    if details:
        body["details"] = jsonable_encoder(details)
    return body


def _first_validation_message(errors: list[dict]) -> str:
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        logger.info(
            "domain_error",
            code=exc.code,
            status_code=exc.status_code,
            error=exc.message,
        )
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
        return JSONResponse(
            error_body(exc.message, exc.code, exc.details),
            status_code=exc.status_code,
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            error_body(message, _STATUS_CODES.get(exc.status_code, "HTTP_ERROR")),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        return JSONResponse(
            error_body(_first_validation_message(errors), "VALIDATION_ERROR", errors),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
