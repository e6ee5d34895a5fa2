"""Invoice Ledger & Attachment Store — the in-memory, process-lifetime owner of billing state.

Invariants:
    - Invoices and attachments are only ever inserted, never mutated or deleted
    - Each map and the logo slot has its own lock; callers never lock
    - Invoice ids are fresh uuid4s, so concurrent creates never collide
    - The logo slot is last-writer-wins with no history
    - get_invoice never raises for a missing id (returns None)

Design Decisions:
    - threading.Lock over asyncio.Lock: the ledger is sync and may be called from
      the threadpool as well as from the event loop
    - Search snapshots values under the lock, then filters/paginates lock-free
    - Explicit instance injected via app.state (no module-level singleton)
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from silkroute.core import ledger_rules
from silkroute.core.domain_types import (
    CURRENCY,
    DEFAULT_ATTACHMENT_NAME,
    DEFAULT_CONTENT_TYPE,
    AttachmentId,
    CustomerId,
    InvoiceId,
    InvoiceStatus,
)
from silkroute.core.errors import InvoiceValidationError
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

SEED_CUSTOMER_A = CustomerId(UUID("11111111-1111-1111-1111-111111111111"))
SEED_CUSTOMER_B = CustomerId(UUID("22222222-2222-2222-2222-222222222222"))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BillingLedger:
    """Concurrency-safe store for invoices, attachments and the company logo."""

    def __init__(self) -> None:
        self._invoices: dict[UUID, Invoice] = {}
        self._attachments: dict[UUID, Attachment] = {}
        self._logo: bytes | None = None
        self._invoices_lock = threading.Lock()
        self._attachments_lock = threading.Lock()
        self._logo_lock = threading.Lock()

    @classmethod
    def seeded(cls) -> "BillingLedger":
        ledger = cls()
        ledger.seed()
        return ledger

    # ─── Invoices ────────────────────────────────────────────────

    def create_invoice(self, request: CreateInvoiceRequest) -> Invoice:
        if not request.lines:
            raise InvoiceValidationError("Invoice must contain at least one line.")
        invoice_id = InvoiceId(uuid4())
        invoice = Invoice(
            id=invoice_id,
            number=ledger_rules.invoice_number("INV", invoice_id),
            customer_id=request.customer_id,
            total=ledger_rules.compute_total(
                (line.quantity, line.unit_price) for line in request.lines
            ),
            currency=CURRENCY,
            issued_at=_utcnow(),
            status=InvoiceStatus.ISSUED,
        )
        self._put_invoice(invoice)
        logger.info(
            f"Invoice {invoice.number} created ({len(request.lines)} lines)",
            extra={"invoice_id": str(invoice_id), "operation": "create_invoice"},
        )
        return invoice

    def get_invoice(self, invoice_id: UUID) -> Invoice | None:
        with self._invoices_lock:
            return self._invoices.get(invoice_id)

    def search_invoices(
        self, query: InvoiceSearchQuery,
    ) -> PagedResult[InvoiceListItem]:
        with self._invoices_lock:
            snapshot = list(self._invoices.values())
        matches = [
            InvoiceListItem.from_invoice(invoice)
            for invoice in snapshot
            if (query.customer_id is None or invoice.customer_id == query.customer_id)
            and (query.status is None or invoice.status == query.status)
        ]
        return PagedResult[InvoiceListItem](
            items=ledger_rules.paginate(matches, query.page, query.page_size),
            total_count=len(matches),
        )

    def import_invoices(self, request: BulkImportRequest) -> ImportResult:
        """Stand-in for archive parsing: synthesizes invoices from the archive size."""
        if not request.archive_bytes:
            raise InvoiceValidationError("ArchiveBytes are empty.")
        imported = ledger_rules.import_count(len(request.archive_bytes))
        now = _utcnow()
        for i in range(imported):
            invoice_id = InvoiceId(uuid4())
            self._put_invoice(Invoice(
                id=invoice_id,
                number=ledger_rules.invoice_number("IMP", invoice_id),
                customer_id=CustomerId(uuid4()),
                total=ledger_rules.import_total(i),
                currency=CURRENCY,
                issued_at=now - timedelta(minutes=i),
                status=InvoiceStatus.ISSUED,
            ))
        logger.info(
            f"Imported {imported} invoices from {request.source_name or 'unknown'}",
            extra={"operation": "import_invoices"},
        )
        return ImportResult(
            imported_count=imported,
            failed_count=0,
            message=ledger_rules.import_message(imported, request.source_name),
        )

    @property
    def invoice_count(self) -> int:
        with self._invoices_lock:
            return len(self._invoices)

    def _put_invoice(self, invoice: Invoice) -> None:
        with self._invoices_lock:
            self._invoices[invoice.id] = invoice

    # ─── Attachments ─────────────────────────────────────────────

    def save_attachment(
        self,
        invoice_id: UUID,
        content: bytes,
        file_name: str | None,
        content_type: str | None,
        size: int,
    ) -> Attachment:
        """Store attachment metadata. invoice_id is not checked against the ledger."""
        attachment = Attachment(
            attachment_id=AttachmentId(uuid4()),
            file_name=ledger_rules.blank_to_default(file_name, DEFAULT_ATTACHMENT_NAME),
            content_type=ledger_rules.blank_to_default(content_type, DEFAULT_CONTENT_TYPE),
            size=size,
            uploaded_at=_utcnow(),
        )
        self._put_attachment(attachment)
        logger.info(
            f"Attachment {attachment.file_name} saved ({len(content)} bytes)",
            extra={"invoice_id": str(invoice_id), "operation": "save_attachment"},
        )
        return attachment

    def get_attachment(self, attachment_id: UUID) -> Attachment | None:
        with self._attachments_lock:
            return self._attachments.get(attachment_id)

    @property
    def attachment_count(self) -> int:
        with self._attachments_lock:
            return len(self._attachments)

    def _put_attachment(self, attachment: Attachment) -> None:
        with self._attachments_lock:
            self._attachments[attachment.attachment_id] = attachment

    # ─── Company logo ────────────────────────────────────────────

    def set_company_logo(self, logo: bytes) -> None:
        with self._logo_lock:
            self._logo = logo
        logger.info(
            f"Company logo replaced ({len(logo)} bytes)",
            extra={"operation": "set_company_logo"},
        )

    @property
    def company_logo(self) -> bytes | None:
        with self._logo_lock:
            return self._logo

    # ─── Seed ────────────────────────────────────────────────────

    def seed(self) -> None:
        """Fixed boot state: three invoices, three attachments."""
        now = _utcnow()
        for invoice_id, number, customer, total, status, age in (
            ("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa", "INV-SEED-0001",
             SEED_CUSTOMER_A, "120.00", InvoiceStatus.ISSUED, 10),
            ("bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb", "INV-SEED-0002",
             SEED_CUSTOMER_A, "89.50", InvoiceStatus.PAID, 6),
            ("cccccccc-cccc-cccc-cccc-cccccccccccc", "INV-SEED-0003",
             SEED_CUSTOMER_B, "310.10", InvoiceStatus.OVERDUE, 3),
        ):
            self._put_invoice(Invoice(
                id=InvoiceId(UUID(invoice_id)),
                number=number,
                customer_id=customer,
                total=Decimal(total),
                currency=CURRENCY,
                issued_at=now - timedelta(days=age),
                status=status,
            ))

        for attachment_id, file_name, content_type, size, age in (
            ("dddddddd-dddd-dddd-dddd-dddddddddddd", "seed-attachment-1.txt",
             "text/plain", 128, 9),
            ("eeeeeeee-eeee-eeee-eeee-eeeeeeeeeeee", "seed-attachment-2.pdf",
             "application/pdf", 2048, 5),
            ("ffffffff-ffff-ffff-ffff-ffffffffffff", "seed-attachment-3.bin",
             DEFAULT_CONTENT_TYPE, 4096, 2),
        ):
            self._put_attachment(Attachment(
                attachment_id=AttachmentId(UUID(attachment_id)),
                file_name=file_name,
                content_type=content_type,
                size=size,
                uploaded_at=now - timedelta(days=age),
            ))
        logger.info("Billing ledger seeded with 3 invoices and 3 attachments")
