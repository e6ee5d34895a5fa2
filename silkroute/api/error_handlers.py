"""Error Handlers — global exception handlers shared by the Billing and Sales apps.

Invariants:
    - SilkRouteError → structured JSON with error code, message, severity
    - RequestValidationError → field-level error details, 400
    - Exception (catch-all) → never leaks internal details
    - Every layer logs the request's correlation id, and domain envelopes carry it

Design Decisions:
    - Three-layer handler: domain (SilkRouteError), validation (Pydantic), catch-all (Exception)
    - Same envelope on both services so BillingClient can parse Billing's errors
    - Log level follows ErrorSeverity: client mistakes are warnings, everything else errors
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from silkroute.core.errors import ErrorCategory, ErrorSeverity, SilkRouteError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _request_extra(request: Request, **fields) -> dict:
    return {
        "path": request.url.path,
        "correlation_id": getattr(request.state, "correlation_id", None),
        **fields,
    }


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register billing/sales domain and infrastructure error handler."""

    @app.exception_handler(SilkRouteError)
    async def silkroute_error_handler(request: Request, exc: SilkRouteError):
        """Handle all domain/infrastructure errors."""
        extra = _request_extra(request, error_code=exc.code)
        if exc.context.correlation_id is None:
            exc.context.correlation_id = extra["correlation_id"]
        log = logger.warning if exc.severity is ErrorSeverity.WARNING else logger.error
        log(f"SilkRouteError: {exc.message}", extra=extra)
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Request validation failed: {exc.errors()}",
            extra=_request_extra(request, error_code="VALIDATION_ERROR"),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled {type(exc).__name__}: {exc}",
            exc_info=True,
            extra=_request_extra(request, error_code="INTERNAL_ERROR"),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": ErrorCategory.INTERNAL.value,
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """One detail entry per failed input field."""
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": ErrorCategory.VALIDATION.value,
            "severity": ErrorSeverity.WARNING.value,
            "details": details,
        },
    }
