"""Billing Handler — server-side implementation of BillingContract against the ledger.

Invariants:
    - Every empty/missing input is rejected with InvoiceValidationError before the ledger
      is touched
    - get_invoice raises InvoiceNotFoundError; get_invoice_status never raises for a
      missing id and answers "NotFound (corr=…)" instead
    - Stream uploads are drained to completion before the logo is replaced
    - Both PDF operations serve the same asset bytes

Design Decisions:
    - Handler owns request-level validation; the ledger re-checks
      lines/archive so direct callers cannot bypass it
"""

import logging
from uuid import UUID

from silkroute.core import ledger_rules
from silkroute.core.binary_payload import BinaryPayload, FileUpload
from silkroute.core.domain_types import PDF_CONTENT_TYPE
from silkroute.core.errors import ErrorContext, InvoiceNotFoundError, InvoiceValidationError
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
from silkroute.services.billing_ledger import BillingLedger
from silkroute.services.invoice_pdf import InvoicePdfAsset

logger = logging.getLogger(__name__)


class BillingHandler:
    """Implements BillingContract directly on a BillingLedger."""

    def __init__(self, ledger: BillingLedger, pdf_asset: InvoicePdfAsset):
        self.ledger = ledger
        self.pdf_asset = pdf_asset

    async def get_invoice(self, invoice_id: UUID) -> Invoice | None:
        invoice = self.ledger.get_invoice(invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(
                invoice_id, ErrorContext(operation="get_invoice"),
            )
        return invoice

    async def get_invoice_status(
        self, invoice_id: UUID, correlation_id: str,
    ) -> str:
        invoice = self.ledger.get_invoice(invoice_id)
        status = invoice.status.value if invoice else "NotFound"
        return ledger_rules.format_status_echo(status, correlation_id)

    async def search_invoices(
        self, query: InvoiceSearchQuery,
    ) -> PagedResult[InvoiceListItem]:
        return self.ledger.search_invoices(query)

    async def create_invoice(
        self, request: CreateInvoiceRequest | None,
    ) -> Invoice | None:
        if request is None:
            raise InvoiceValidationError("Request body is missing.")
        if not request.lines:
            raise InvoiceValidationError("Invoice must contain at least one line.")
        return self.ledger.create_invoice(request)

    async def upload_company_logo_bytes(self, logo: bytes | None) -> None:
        if not logo:
            raise InvoiceValidationError("Logo bytes are empty.")
        self.ledger.set_company_logo(logo)

    async def upload_company_logo_stream(
        self, logo: BinaryPayload | None,
    ) -> None:
        if logo is None:
            raise InvoiceValidationError("Logo stream is missing.")
        content = await logo.read_all()
        if not content:
            raise InvoiceValidationError("Logo stream is empty.")
        self.ledger.set_company_logo(content)

    async def download_invoice_pdf_bytes(self, invoice_id: UUID) -> bytes:
        return await self.pdf_asset.read_bytes()

    async def download_invoice_pdf_stream(
        self, invoice_id: UUID,
    ) -> BinaryPayload:
        # Fail before headers go out; a stream cannot carry an error status.
        await self.pdf_asset.ensure_exists()
        return BinaryPayload.from_chunks(
            self.pdf_asset.iter_chunks(), content_type=PDF_CONTENT_TYPE,
        )

    async def import_invoices(
        self, request: BulkImportRequest | None,
    ) -> ImportResult | None:
        if request is None:
            raise InvoiceValidationError("Request body is missing.")
        if not request.archive_bytes:
            raise InvoiceValidationError("ArchiveBytes are empty.")
        return self.ledger.import_invoices(request)

    async def upload_invoice_attachment(
        self, invoice_id: UUID, upload: FileUpload | None,
    ) -> Attachment | None:
        if upload is None or not upload.content:
            raise InvoiceValidationError("File is missing or empty.")
        return self.ledger.save_attachment(
            invoice_id,
            upload.content,
            upload.file_name,
            upload.content_type,
            upload.size,
        )
