"""
Centralized error handlers for FastAPI.

Maps domain error categories to HTTP responses.
Every error body uses the `{success, message, errors?}` envelope.
Stack traces are only exposed when the application runs in debug mode.
"""

import logging
import traceback
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from papertrade.domain.errors import (
    AuthenticationError,
    BusinessRuleError,
    ConflictError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_401 = 401
HTTP_403 = 403
HTTP_404 = 404
HTTP_409 = 409
HTTP_500 = 500


def _error_response(
    status_code: int,
    message: str,
    errors: Optional[list[str]] = None,
    stack: Optional[str] = None,
) -> JSONResponse:
    """Build a consistent JSON error envelope."""
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    if stack:
        body["stack"] = stack
    return JSONResponse(status_code=status_code, content=body)


def _format_validation_error(error: dict[str, Any]) -> str:
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    if location:
        return f"{'.'.join(location)}: {error.get('msg')}"
    return str(error.get("msg"))


def register_error_handlers(app: FastAPI, debug: bool = False) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
        debug: Include stack traces in 500 responses.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed request bodies, paths and query strings."""
        errors = [_format_validation_error(error) for error in exc.errors()]
        logger.warning("Request validation failed: %s %s", request.url.path, errors)
        return _error_response(HTTP_400, "Validation error", errors)

    @app.exception_handler(ValidationError)
    async def handle_domain_validation(
        _request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle semantic validation failures raised by use cases."""
        logger.warning("Validation error: %s", exc.message)
        return _error_response(HTTP_400, exc.message, exc.errors)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        """Handle missing entities."""
        logger.warning("Not found: %s", exc.message)
        return _error_response(HTTP_404, exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(_request: Request, exc: ConflictError) -> JSONResponse:
        """Handle unique constraint collisions."""
        logger.warning("Conflict: %s", exc.message)
        return _error_response(HTTP_409, exc.message)

    @app.exception_handler(BusinessRuleError)
    async def handle_business_rule(
        _request: Request, exc: BusinessRuleError
    ) -> JSONResponse:
        """Handle business rule violations (funds, holdings, watchlist)."""
        logger.warning("Business rule violated: %s", exc.message)
        return _error_response(HTTP_400, exc.message)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication(
        _request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        """Handle unidentified callers."""
        logger.warning("Authentication failed: %s", exc.message)
        return _error_response(HTTP_401, exc.message)

    @app.exception_handler(PermissionDeniedError)
    async def handle_permission_denied(
        _request: Request, exc: PermissionDeniedError
    ) -> JSONResponse:
        """Handle callers that are not allowed to proceed."""
        logger.warning("Permission denied: %s", exc.message)
        return _error_response(HTTP_403, exc.message)

    @app.exception_handler(DomainError)
    async def handle_domain(_request: Request, exc: DomainError) -> JSONResponse:
        """Catch-all for uncategorized domain errors."""
        logger.error("Unhandled domain error: %s", exc.message)
        return _error_response(HTTP_400, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle routing errors (unknown route, wrong method)."""
        if exc.status_code == HTTP_404:
            logger.warning("Route not found: %s %s", request.method, request.url.path)
            return _error_response(HTTP_404, "Route not found")
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals outside debug."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        stack = None
        if debug:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return _error_response(HTTP_500, "Internal server error", stack=stack)
