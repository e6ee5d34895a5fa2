"""Billing Ledger — create/search/import/attach behaviour of the in-memory store.

Tests cover:
    - seed scenario: 3 invoices, one Overdue 310.10 for customer B, 3 attachments
    - create_invoice totals, numbering, defaults; empty lines rejected
    - search filters, total_count independent of paging, clamping
    - import count/message and synthesized invoices
    - attachment defaults and size
    - logo last-writer-wins
    - concurrent creates from threads never lose invoices
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from silkroute.core.domain_types import InvoiceStatus
from silkroute.core.errors import InvoiceValidationError
from silkroute.schemas.billing import (
    BulkImportRequest,
    CreateInvoiceRequest,
    InvoiceLine,
    InvoiceSearchQuery,
)
from silkroute.services.billing_ledger import (
    BillingLedger,
    SEED_CUSTOMER_A,
    SEED_CUSTOMER_B,
)


def _request(*lines: tuple[int, str], customer=None) -> CreateInvoiceRequest:
    return CreateInvoiceRequest(
        customer_id=customer or uuid4(),
        lines=[
            InvoiceLine(description=f"item-{i}", quantity=q, unit_price=Decimal(p))
            for i, (q, p) in enumerate(lines)
        ],
    )


# ─── seed ────────────────────────────────────────────────────────

def test_seed_has_three_invoices_and_attachments(ledger):
    assert ledger.invoice_count == 3
    assert ledger.attachment_count == 3


def test_seed_contains_overdue_invoice_for_customer_b(ledger):
    result = ledger.search_invoices(InvoiceSearchQuery())
    assert result.total_count == 3
    overdue = [i for i in result.items if i.status == InvoiceStatus.OVERDUE]
    assert len(overdue) == 1
    assert overdue[0].total == Decimal("310.10")
    invoice = ledger.get_invoice(overdue[0].id)
    assert invoice.customer_id == SEED_CUSTOMER_B
    assert invoice.number == "INV-SEED-0003"


def test_seed_attachment_ids_are_fixed(ledger):
    att = ledger.get_attachment(UUID("eeeeeeee-eeee-eeee-eeee-eeeeeeeeeeee"))
    assert att.file_name == "seed-attachment-2.pdf"
    assert att.content_type == "application/pdf"
    assert att.size == 2048


def test_unseeded_ledger_is_empty():
    assert BillingLedger().invoice_count == 0
    assert BillingLedger().company_logo is None


# ─── create / get ────────────────────────────────────────────────

def test_create_invoice_total_is_exact_sum(ledger):
    invoice = ledger.create_invoice(_request((2, "19.99"), (3, "0.01"), (1, "100")))
    assert invoice.total == Decimal("140.01")


def test_create_invoice_defaults(ledger):
    invoice = ledger.create_invoice(_request((1, "5.00")))
    assert invoice.status == InvoiceStatus.ISSUED
    assert invoice.currency == "USD"
    assert invoice.number == f"INV-{invoice.id.hex[:8].upper()}"
    assert invoice.issued_at.tzinfo is not None
    assert ledger.get_invoice(invoice.id) == invoice


def test_create_invoice_rejects_empty_lines(ledger):
    with pytest.raises(InvoiceValidationError):
        ledger.create_invoice(CreateInvoiceRequest(customer_id=uuid4(), lines=[]))
    assert ledger.invoice_count == 3


def test_get_missing_invoice_returns_none(ledger):
    assert ledger.get_invoice(uuid4()) is None


# ─── search ──────────────────────────────────────────────────────

def test_search_filters_by_customer(ledger):
    result = ledger.search_invoices(InvoiceSearchQuery(customer_id=SEED_CUSTOMER_A))
    assert result.total_count == 2
    assert {i.number for i in result.items} == {"INV-SEED-0001", "INV-SEED-0002"}


def test_search_filters_by_status(ledger):
    result = ledger.search_invoices(InvoiceSearchQuery(status=InvoiceStatus.PAID))
    assert result.total_count == 1
    assert result.items[0].total == Decimal("89.50")


def test_search_filters_combine(ledger):
    result = ledger.search_invoices(InvoiceSearchQuery(
        customer_id=SEED_CUSTOMER_B, status=InvoiceStatus.PAID,
    ))
    assert result.total_count == 0
    assert result.items == []


def test_search_total_count_ignores_paging(ledger):
    for _ in range(7):
        ledger.create_invoice(_request((1, "1.00")))
    page = ledger.search_invoices(InvoiceSearchQuery(page=2, page_size=4))
    assert page.total_count == 10
    assert len(page.items) == 4
    last = ledger.search_invoices(InvoiceSearchQuery(page=3, page_size=4))
    assert len(last.items) == 2


def test_search_never_exceeds_page_size(ledger):
    for _ in range(30):
        ledger.create_invoice(_request((1, "1.00")))
    for size in (1, 5, 20, 50):
        assert len(ledger.search_invoices(InvoiceSearchQuery(page_size=size)).items) <= size


def test_search_clamps_non_positive_paging(ledger):
    for _ in range(25):
        ledger.create_invoice(_request((1, "1.00")))
    clamped = ledger.search_invoices(InvoiceSearchQuery(page=0, page_size=0))
    default = ledger.search_invoices(InvoiceSearchQuery(page=1, page_size=20))
    assert [i.id for i in clamped.items] == [i.id for i in default.items]
    assert len(clamped.items) == 20
    negative = ledger.search_invoices(InvoiceSearchQuery(page=-5, page_size=-1))
    assert len(negative.items) == 20


# ─── import ──────────────────────────────────────────────────────

@pytest.mark.parametrize("size,expected", [(1, 1), (300, 2), (128 * 40, 25)])
def test_import_count_rule(ledger, size, expected):
    result = ledger.import_invoices(BulkImportRequest(
        source_name="batch.zip", archive_bytes=b"x" * size,
    ))
    assert result.imported_count == expected
    assert result.failed_count == 0
    assert ledger.invoice_count == 3 + expected


def test_import_message_uses_unknown_without_source(ledger):
    result = ledger.import_invoices(BulkImportRequest(archive_bytes=b"x"))
    assert result.message == "Imported 1 invoices from 'unknown'."


def test_import_synthesizes_issued_invoices_with_increasing_totals(ledger):
    ledger.import_invoices(BulkImportRequest(archive_bytes=b"x" * 384))
    imported = [
        ledger.get_invoice(i.id)
        for i in ledger.search_invoices(InvoiceSearchQuery(page_size=100)).items
        if i.number.startswith("IMP-")
    ]
    assert sorted(i.total for i in imported) == [
        Decimal("49.99"), Decimal("50.99"), Decimal("51.99"),
    ]
    assert all(i.status == InvoiceStatus.ISSUED for i in imported)
    assert len({i.id for i in imported}) == 3
    newest_first = sorted(imported, key=lambda i: i.total)
    assert newest_first[0].issued_at > newest_first[1].issued_at > newest_first[2].issued_at


def test_import_rejects_empty_archive(ledger):
    with pytest.raises(InvoiceValidationError):
        ledger.import_invoices(BulkImportRequest(archive_bytes=b""))


# ─── attachments / logo ──────────────────────────────────────────

def test_save_attachment_applies_defaults(ledger):
    att = ledger.save_attachment(uuid4(), b"abc", "  ", "", 3)
    assert att.file_name == "attachment.bin"
    assert att.content_type == "application/octet-stream"
    assert att.size == 3
    assert ledger.get_attachment(att.attachment_id) == att


def test_save_attachment_does_not_check_invoice(ledger):
    att = ledger.save_attachment(uuid4(), b"data", "a.txt", "text/plain", 4)
    assert att.file_name == "a.txt"
    assert ledger.attachment_count == 4


def test_logo_is_last_writer_wins(ledger):
    ledger.set_company_logo(b"first")
    ledger.set_company_logo(b"second")
    assert ledger.company_logo == b"second"


# ─── concurrency ─────────────────────────────────────────────────

def test_concurrent_creates_are_all_stored(ledger):
    with ThreadPoolExecutor(max_workers=8) as pool:
        invoices = list(pool.map(
            lambda _: ledger.create_invoice(_request((1, "1.00"))), range(200),
        ))
    assert len({i.id for i in invoices}) == 200
    assert ledger.invoice_count == 203
