"""Error Hierarchy — typed, categorized exceptions for every billing/sales failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation and not-found errors are 400-level; upstream and asset errors are 500-level
    - to_response() produces the REST envelope shared by both services
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with SilkRouteError base: one FastAPI handler per app catches all
      (ADR: uniform error shape across Billing and Sales, so the client stub can parse it)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    ASSET = "asset"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    invoice_id: str | None = None
    correlation_id: str | None = None
    operation: str | None = None
    upstream_status: int | None = None
    upstream_code: str | None = None


class SilkRouteError(Exception):
    """Base exception for all billing/sales errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "invoice_id": self.context.invoice_id,
                    "correlation_id": self.context.correlation_id,
                    "operation": self.context.operation,
                    "upstream_status": self.context.upstream_status,
                    "upstream_code": self.context.upstream_code,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvoiceValidationError(SilkRouteError):
    """Required input (body, lines, file, archive) missing or empty."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class ResourceNotFoundError(SilkRouteError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvoiceNotFoundError(ResourceNotFoundError):
    """Unknown invoice id."""
    def __init__(self, invoice_id: object, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.invoice_id = str(invoice_id)
        super().__init__("Invoice", str(invoice_id), ctx)


# ─── Infrastructure Errors (500-level) ──────────────────────────

class UpstreamEmptyResponseError(SilkRouteError):
    """Billing answered successfully but without a payload."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "UPSTREAM_EMPTY_RESPONSE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )


class UpstreamServiceError(SilkRouteError):
    """Billing call failed at the transport level or with an unexpected status."""
    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.upstream_status = upstream_status
        super().__init__(
            f"Billing service error: {message}",
            "UPSTREAM_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 502,
        )
        self.upstream_status = upstream_status


class AssetMissingError(SilkRouteError):
    """Invoice PDF asset absent at the configured location."""
    def __init__(self, path: str, context: ErrorContext | None = None):
        super().__init__(
            f"PDF asset not found at '{path}'.",
            "ASSET_MISSING", ErrorCategory.ASSET,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.path = path
