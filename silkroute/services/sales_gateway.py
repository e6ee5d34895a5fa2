"""Sales Gateway — translates sales-domain requests into Billing contract calls.

Invariants:
    - Holds no storage; every operation is one remote call (or none, on validation failure)
    - Validation errors are raised BEFORE any remote call
    - A successful remote call without payload → UpstreamEmptyResponseError, never a default
    - A missing invoice always surfaces as InvoiceNotFoundError, never an unhandled fault
    - Both transport modes of an artifact carry byte-identical content

Design Decisions:
    - Depends on the BillingContract Protocol, not on BillingClient: the same gateway runs
      against the in-process handler in tests and against HTTP in production
    - Mode parsing lives in TransportMode.parse so routes pass the raw query string
"""

import logging
from uuid import UUID

from silkroute.core.binary_payload import BinaryPayload, FileUpload
from silkroute.core.billing_contract import BillingContract
from silkroute.core.domain_types import PDF_CONTENT_TYPE, InvoiceStatus, TransportMode
from silkroute.core.errors import (
    ErrorContext,
    InvoiceNotFoundError,
    InvoiceValidationError,
    UpstreamEmptyResponseError,
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
from silkroute.schemas.sales import CreateOrderRequest, PlaceOrderResponse

logger = logging.getLogger(__name__)


class SalesGateway:
    """Sales-facing operations implemented purely through a BillingContract."""

    def __init__(self, billing: BillingContract):
        self.billing = billing

    async def place_order(
        self, request: CreateOrderRequest | None,
    ) -> PlaceOrderResponse:
        if request is None:
            raise InvoiceValidationError("Request body is missing.")
        if not request.lines:
            raise InvoiceValidationError("Order must contain at least one line.")

        invoice = await self.billing.create_invoice(CreateInvoiceRequest(
            customer_id=request.customer_id,
            lines=[line.to_invoice_line() for line in request.lines],
        ))
        if invoice is None:
            raise UpstreamEmptyResponseError(
                "Billing did not return an invoice payload.",
                ErrorContext(operation="place_order"),
            )
        logger.info(
            f"Order placed as invoice {invoice.number}",
            extra={"invoice_id": str(invoice.id), "operation": "place_order"},
        )
        return PlaceOrderResponse.from_invoice(invoice)

    async def get_invoice(self, invoice_id: UUID) -> Invoice:
        invoice = await self.billing.get_invoice(invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(
                invoice_id, ErrorContext(operation="get_invoice"),
            )
        return invoice

    async def get_invoice_status(
        self, invoice_id: UUID, correlation_id: str,
    ) -> str:
        return await self.billing.get_invoice_status(invoice_id, correlation_id)

    async def search_invoices(
        self,
        customer_id: UUID | None = None,
        status: InvoiceStatus | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PagedResult[InvoiceListItem]:
        result = await self.billing.search_invoices(InvoiceSearchQuery(
            customer_id=customer_id,
            status=status,
            page=page,
            page_size=page_size,
        ))
        if result is None:
            raise UpstreamEmptyResponseError(
                "Billing did not return a search result payload.",
                ErrorContext(operation="search_invoices"),
            )
        return result

    async def download_invoice_pdf(
        self, invoice_id: UUID, mode: str | None = None,
    ) -> BinaryPayload:
        if TransportMode.parse(mode) is TransportMode.STREAM:
            payload = await self.billing.download_invoice_pdf_stream(invoice_id)
        else:
            content = await self.billing.download_invoice_pdf_bytes(invoice_id)
            payload = (
                BinaryPayload.from_bytes(content, content_type=PDF_CONTENT_TYPE)
                if content else None
            )
        if payload is None:
            raise UpstreamEmptyResponseError(
                "Billing did not return a PDF payload.",
                ErrorContext(invoice_id=str(invoice_id), operation="download_invoice_pdf"),
            )
        return payload

    async def upload_attachment(
        self, invoice_id: UUID, upload: FileUpload | None,
    ) -> Attachment:
        if upload is None or not upload.content:
            raise InvoiceValidationError("File is missing or empty.")
        attachment = await self.billing.upload_invoice_attachment(invoice_id, upload)
        if attachment is None:
            raise UpstreamEmptyResponseError(
                "Billing did not return an attachment payload.",
                ErrorContext(invoice_id=str(invoice_id), operation="upload_attachment"),
            )
        return attachment

    async def import_invoices(
        self, archive: bytes | None, source_name: str | None = None,
    ) -> ImportResult:
        if not archive:
            raise InvoiceValidationError("Archive file is missing or empty.")
        result = await self.billing.import_invoices(BulkImportRequest(
            source_name=source_name, archive_bytes=archive,
        ))
        if result is None:
            raise UpstreamEmptyResponseError(
                "Billing did not return an import result payload.",
                ErrorContext(operation="import_invoices"),
            )
        return result

    async def upload_company_logo(
        self, logo: BinaryPayload | None, mode: str | None = None,
    ) -> None:
        """Stream mode forwards the payload untouched; bytes mode drains it first."""
        if logo is None or logo.size == 0:
            raise InvoiceValidationError("Logo file is missing or empty.")
        if TransportMode.parse(mode) is TransportMode.STREAM:
            await self.billing.upload_company_logo_stream(logo)
            return
        content = await logo.read_all()
        if not content:
            raise InvoiceValidationError("Logo file is missing or empty.")
        await self.billing.upload_company_logo_bytes(content)
