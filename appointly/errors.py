"""
Exception handlers - translate domain and infrastructure errors into
consistent RFC-7807-style JSON responses.
"""

import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from .exceptions import DomainError

logger = logging.getLogger(__name__)


def classify_exception(exc: Exception) -> tuple[int, str, str, Optional[str]]:
    """Map an exception to (status_code, error_type, message, details)"""
    if isinstance(exc, DomainError):
        # Domain messages are always safe to expose
        return exc.status_code, exc.error_type, exc.message, None

    if isinstance(exc, StaleDataError):
        return (
            409,
            "ConcurrencyError",
            "The record was modified by another user. Please refresh and try again.",
            str(exc),
        )

    if isinstance(exc, IntegrityError):
        return 409, "DatabaseError", "A database error occurred.", "A record with this value already exists."

    if isinstance(exc, SQLAlchemyError):
        return 500, "DatabaseError", "A database error occurred.", None

    if isinstance(exc, NotImplementedError):
        return 501, "NotImplemented", "This feature is not yet implemented.", str(exc) or None

    if isinstance(exc, LookupError):
        return 404, "NotFound", str(exc), None

    if isinstance(exc, ValueError):
        return 400, "ArgumentError", str(exc), None

    return 500, "InternalServerError", "An unexpected error occurred. Please try again later.", None


def build_error_response(
    request: Request, exc: Exception, is_development: bool
) -> tuple[int, dict]:
    status_code, error_type, message, details = classify_exception(exc)

    body = {
        "statusCode": status_code,
        "errorType": error_type,
        "message": message,
        "details": details,
        "path": request.url.path,
        "method": request.method,
        "traceId": request.headers.get("x-request-id") or uuid.uuid4().hex,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "instance": f"{request.method} {request.url.path}",
    }

    if is_development:
        body["stackTrace"] = "".join(traceback.format_exception(exc))
        cause = exc.__cause__ or exc.__context__
        body["innerException"] = str(cause) if cause else None

    return status_code, body


def register_exception_handlers(app: FastAPI, is_development: bool = False) -> None:
    """Install the error handlers; development mode adds stack traces to responses"""

    async def handle_exception(request: Request, exc: Exception):
        status_code, body = build_error_response(request, exc, is_development)

        log_message = (
            f"Request failed. TraceId: {body['traceId']} | Status: {status_code} | "
            f"Type: {body['errorType']} | {request.method} {request.url.path}"
        )
        if status_code >= 500:
            logger.error(f"🔥 {log_message}", exc_info=exc)
        else:
            logger.warning(f"⚠️ {log_message} - {body['message']}")

        return JSONResponse(status_code=status_code, content=body)

    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Convert 422 validation errors from HTTPBearer to 401 authentication errors
        when the issue is with the Authorization header
        """
        for error in exc.errors():
            if error.get("loc") and "authorization" in str(error.get("loc")).lower():
                logger.warning(
                    f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
                )
                return JSONResponse(
                    status_code=401,
                    content={
                        "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                    },
                )

        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content={"detail": jsonable_errors(exc)},
        )

    app.add_exception_handler(DomainError, handle_exception)
    app.add_exception_handler(SQLAlchemyError, handle_exception)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, handle_exception)


def jsonable_errors(exc: RequestValidationError) -> list:
    """Pydantic error contexts may hold exception objects; keep them serializable"""
    return jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
