"""Billing Contract — the one operation set shared by the Billing server and its remote callers.

Invariants:
    - BillingHandler (server) and BillingClient (HTTP stub) both satisfy this Protocol
    - Return types are identical on both sides; the gateway never knows which it holds
    - Payload-returning operations may yield None when the remote side answered
      without a body — callers decide whether that is an error
    - BILLING_ROUTES is the single source of HTTP method/path per operation

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: the client implementation does IO; the server implementation
      is async so both fit the same shape
"""

from typing import NamedTuple, Protocol
from uuid import UUID

from silkroute.core.binary_payload import BinaryPayload, FileUpload
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


class Route(NamedTuple):
    method: str
    path: str


BILLING_PREFIX = "/api/billing"

BILLING_ROUTES: dict[str, Route] = {
    "get_invoice": Route("GET", "/invoices/{invoice_id}"),
    "get_invoice_status": Route("GET", "/invoices/{invoice_id}/status"),
    "search_invoices": Route("GET", "/invoices/search"),
    "create_invoice": Route("POST", "/invoices"),
    "upload_company_logo_bytes": Route("POST", "/assets/company-logo/bytes"),
    "upload_company_logo_stream": Route("POST", "/assets/company-logo/stream"),
    "download_invoice_pdf_bytes": Route("GET", "/invoices/{invoice_id}/pdf/bytes"),
    "download_invoice_pdf_stream": Route("GET", "/invoices/{invoice_id}/pdf/stream"),
    "import_invoices": Route("POST", "/invoices/import"),
    "upload_invoice_attachment": Route("POST", "/invoices/{invoice_id}/attachments"),
}


class BillingContract(Protocol):
    """Operations Billing offers. Implemented by handler (server) and client (stub)."""

    async def get_invoice(self, invoice_id: UUID) -> Invoice | None: ...

    async def get_invoice_status(
        self, invoice_id: UUID, correlation_id: str,
    ) -> str: ...

    async def search_invoices(
        self, query: InvoiceSearchQuery,
    ) -> PagedResult[InvoiceListItem] | None: ...

    async def create_invoice(
        self, request: CreateInvoiceRequest | None,
    ) -> Invoice | None: ...

    async def upload_company_logo_bytes(self, logo: bytes | None) -> None: ...

    async def upload_company_logo_stream(
        self, logo: BinaryPayload | None,
    ) -> None: ...

    async def download_invoice_pdf_bytes(self, invoice_id: UUID) -> bytes | None: ...

    async def download_invoice_pdf_stream(
        self, invoice_id: UUID,
    ) -> BinaryPayload | None: ...

    async def import_invoices(
        self, request: BulkImportRequest | None,
    ) -> ImportResult | None: ...

    async def upload_invoice_attachment(
        self, invoice_id: UUID, upload: FileUpload | None,
    ) -> Attachment | None: ...
