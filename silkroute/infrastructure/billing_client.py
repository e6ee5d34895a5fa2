"""Billing Client — remote stub implementing BillingContract over HTTP with httpx.

Invariants:
    - Method and path per operation come from BILLING_ROUTES (same table the server binds)
    - 404 → InvoiceNotFoundError, 400 → InvoiceValidationError, other non-2xx →
      UpstreamServiceError; transport failures → UpstreamServiceError
    - No retries, no timeout unless configured: a call completes or fails once
    - 2xx with empty body on a payload operation → None (caller decides)
    - Streamed downloads close the upstream response after the consumer drains it
    - A streamed download with no bytes at all is an empty payload (None); the first
      chunk is read before the payload is handed out

Design Decisions:
    - Wrapper over a caller-owned httpx.AsyncClient: tests inject ASGITransport to run
      against an in-process Billing app; production passes a pooled client
    - Error envelope parsed for the upstream message and code: 400s keep their text, and
      Billing's own error code (e.g. ASSET_MISSING) travels in context.upstream_code
"""

import logging
from collections.abc import AsyncIterator
from uuid import UUID

import httpx

from silkroute.core.binary_payload import BinaryPayload, FileUpload
from silkroute.core.billing_contract import BILLING_PREFIX, BILLING_ROUTES
from silkroute.core.domain_types import (
    CORRELATION_HEADER,
    DEFAULT_ATTACHMENT_NAME,
    DEFAULT_CONTENT_TYPE,
    PDF_CONTENT_TYPE,
)
from silkroute.core.errors import (
    ErrorContext,
    InvoiceNotFoundError,
    InvoiceValidationError,
    UpstreamServiceError,
)
from silkroute.schemas.billing import (
    Attachment,
    BulkImportRequest,
    CreateInvoiceRequest,
    ImportResult,
    Invoice,
    InvoiceListItem,
    InvoiceSearchQuery,
    PagedResult,
)

logger = logging.getLogger(__name__)

OCTET_STREAM = {"Content-Type": "application/octet-stream"}
JSON_BODY = {"Content-Type": "application/json"}


def _path(operation: str, **params: object) -> str:
    return BILLING_PREFIX + BILLING_ROUTES[operation].path.format(**params)


def _error_envelope(response: httpx.Response) -> tuple[str, str | None]:
    """Message and code from the shared error envelope; raw text and no code otherwise."""
    fallback = response.text or response.reason_phrase
    try:
        body = response.json()
    except ValueError:
        return fallback, None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
        code = error.get("code")
        return (
            str(error.get("message", response.reason_phrase)),
            str(code) if code is not None else None,
        )
    return fallback, None


class BillingClient:
    """Implements BillingContract by calling the Billing service."""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def get_invoice(self, invoice_id: UUID) -> Invoice | None:
        response = await self._send(
            "get_invoice", _path("get_invoice", invoice_id=invoice_id),
            invoice_id=invoice_id,
        )
        if not response.content:
            return None
        return Invoice.model_validate(response.json())

    async def get_invoice_status(
        self, invoice_id: UUID, correlation_id: str,
    ) -> str:
        response = await self._send(
            "get_invoice_status",
            _path("get_invoice_status", invoice_id=invoice_id),
            headers={CORRELATION_HEADER: correlation_id},
            invoice_id=invoice_id,
        )
        return response.text

    async def search_invoices(
        self, query: InvoiceSearchQuery,
    ) -> PagedResult[InvoiceListItem] | None:
        response = await self._send(
            "search_invoices", _path("search_invoices"), params=query.to_params(),
        )
        if not response.content:
            return None
        return PagedResult[InvoiceListItem].model_validate(response.json())

    async def create_invoice(
        self, request: CreateInvoiceRequest | None,
    ) -> Invoice | None:
        response = await self._send(
            "create_invoice", _path("create_invoice"),
            content=request.model_dump_json(by_alias=True) if request else b"",
            headers=JSON_BODY,
        )
        if not response.content:
            return None
        return Invoice.model_validate(response.json())

    async def upload_company_logo_bytes(self, logo: bytes | None) -> None:
        await self._send(
            "upload_company_logo_bytes", _path("upload_company_logo_bytes"),
            content=logo or b"", headers=OCTET_STREAM,
        )

    async def upload_company_logo_stream(
        self, logo: BinaryPayload | None,
    ) -> None:
        await self._send(
            "upload_company_logo_stream", _path("upload_company_logo_stream"),
            content=logo.iter_chunks() if logo else b"", headers=OCTET_STREAM,
        )

    async def download_invoice_pdf_bytes(self, invoice_id: UUID) -> bytes | None:
        response = await self._send(
            "download_invoice_pdf_bytes",
            _path("download_invoice_pdf_bytes", invoice_id=invoice_id),
            invoice_id=invoice_id,
        )
        return response.content or None

    async def download_invoice_pdf_stream(
        self, invoice_id: UUID,
    ) -> BinaryPayload | None:
        operation = "download_invoice_pdf_stream"
        request = self.http.build_request(
            BILLING_ROUTES[operation].method,
            _path(operation, invoice_id=invoice_id),
        )
        try:
            response = await self.http.send(request, stream=True)
        except httpx.TransportError as e:
            raise self._transport_error(operation, e, invoice_id)
        if response.is_error:
            await response.aread()
            await response.aclose()
            self._raise_for_status(operation, response, invoice_id)
        chunks = self._drain(response)
        try:
            first = await anext(chunks, None)
        except httpx.TransportError as e:
            raise self._transport_error(operation, e, invoice_id)
        if first is None:
            return None
        return BinaryPayload.from_chunks(
            self._prepend(first, chunks),
            content_type=response.headers.get("content-type", PDF_CONTENT_TYPE),
        )

    async def import_invoices(
        self, request: BulkImportRequest | None,
    ) -> ImportResult | None:
        response = await self._send(
            "import_invoices", _path("import_invoices"),
            content=request.model_dump_json(by_alias=True) if request else b"",
            headers=JSON_BODY,
        )
        if not response.content:
            return None
        return ImportResult.model_validate(response.json())

    async def upload_invoice_attachment(
        self, invoice_id: UUID, upload: FileUpload | None,
    ) -> Attachment | None:
        files = None
        if upload is not None:
            files = {"file": (
                upload.file_name or DEFAULT_ATTACHMENT_NAME,
                upload.content,
                upload.content_type or DEFAULT_CONTENT_TYPE,
            )}
        response = await self._send(
            "upload_invoice_attachment",
            _path("upload_invoice_attachment", invoice_id=invoice_id),
            files=files,
            invoice_id=invoice_id,
        )
        if not response.content:
            return None
        return Attachment.model_validate(response.json())

    # ─── Plumbing ────────────────────────────────────────────────

    async def _send(
        self,
        operation: str,
        path: str,
        *,
        invoice_id: UUID | None = None,
        **kwargs,
    ) -> httpx.Response:
        """One call, no retry. Maps status codes to the error taxonomy."""
        try:
            response = await self.http.request(
                BILLING_ROUTES[operation].method, path, **kwargs,
            )
        except httpx.TransportError as e:
            raise self._transport_error(operation, e, invoice_id)
        if response.is_error:
            self._raise_for_status(operation, response, invoice_id)
        logger.debug(
            f"Billing {operation} → {response.status_code}",
            extra={"operation": operation, "status_code": response.status_code},
        )
        return response

    @staticmethod
    async def _drain(response: httpx.Response) -> AsyncIterator[bytes]:
        try:
            async for chunk in response.aiter_bytes():
                if chunk:
                    yield chunk
        finally:
            await response.aclose()

    @staticmethod
    async def _prepend(
        first: bytes, rest: AsyncIterator[bytes],
    ) -> AsyncIterator[bytes]:
        yield first
        async for chunk in rest:
            yield chunk

    @staticmethod
    def _raise_for_status(
        operation: str, response: httpx.Response, invoice_id: UUID | None,
    ) -> None:
        context = ErrorContext(
            invoice_id=str(invoice_id) if invoice_id else None,
            operation=operation,
            upstream_status=response.status_code,
        )
        if response.status_code == 404 and invoice_id is not None:
            raise InvoiceNotFoundError(invoice_id, context)
        message, upstream_code = _error_envelope(response)
        context.upstream_code = upstream_code
        if response.status_code == 400:
            raise InvoiceValidationError(message, context)
        logger.error(
            f"Billing {operation} failed with {response.status_code}: {message}",
            extra={
                "operation": operation,
                "status_code": response.status_code,
                "error_code": upstream_code,
            },
        )
        raise UpstreamServiceError(message, response.status_code, context)

    @staticmethod
    def _transport_error(
        operation: str, error: httpx.TransportError, invoice_id: UUID | None,
    ) -> UpstreamServiceError:
        logger.error(
            f"Billing {operation} transport failure: {error}",
            extra={"operation": operation},
        )
        return UpstreamServiceError(
            f"{operation} transport failure: {error}",
            context=ErrorContext(
                invoice_id=str(invoice_id) if invoice_id else None,
                operation=operation,
            ),
        )
