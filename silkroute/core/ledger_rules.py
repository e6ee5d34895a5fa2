"""Ledger Rules — pure arithmetic and formatting behind the invoice ledger.

Invariants:
    - compute_total is exact Decimal arithmetic, never float
    - clamp_paging maps page<=0 to 1 and page_size<=0 to 20
    - import_count is clamp(len // 128, 1, 25)
    - format_status_echo embeds the correlation id verbatim

Design Decisions:
    - Kept free of ledger state so the rules are testable without locks or IO
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import TypeVar
from uuid import UUID

from silkroute.core.domain_types import DEFAULT_PAGE, DEFAULT_PAGE_SIZE

T = TypeVar("T")

IMPORT_BYTES_PER_INVOICE = 128
IMPORT_MIN_COUNT = 1
IMPORT_MAX_COUNT = 25
IMPORT_BASE_TOTAL = Decimal("49.99")
NUMBER_FRAGMENT_LENGTH = 8


def compute_total(lines: Iterable[tuple[int, Decimal]]) -> Decimal:
    """Σ(quantity × unit_price) over (quantity, unit_price) pairs."""
    return sum(
        (Decimal(quantity) * unit_price for quantity, unit_price in lines),
        Decimal("0"),
    )


def invoice_number(prefix: str, invoice_id: UUID) -> str:
    """INV-1A2B3C4D style number from the first id fragment. Not reserved."""
    return f"{prefix}-{invoice_id.hex[:NUMBER_FRAGMENT_LENGTH].upper()}"


def clamp_paging(page: int, page_size: int) -> tuple[int, int]:
    return (
        page if page > 0 else DEFAULT_PAGE,
        page_size if page_size > 0 else DEFAULT_PAGE_SIZE,
    )


def paginate(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """Slice one page out of an already-filtered sequence."""
    page, page_size = clamp_paging(page, page_size)
    skip = (page - 1) * page_size
    return list(items[skip:skip + page_size])


def import_count(archive_size: int) -> int:
    return max(
        IMPORT_MIN_COUNT,
        min(IMPORT_MAX_COUNT, archive_size // IMPORT_BYTES_PER_INVOICE),
    )


def import_total(index: int) -> Decimal:
    return IMPORT_BASE_TOTAL + index


def import_message(imported: int, source_name: str | None) -> str:
    return f"Imported {imported} invoices from '{source_name or 'unknown'}'."


def format_status_echo(status: str, correlation_id: str) -> str:
    return f"{status} (corr={correlation_id})"


def blank_to_default(value: str | None, default: str) -> str:
    """Replace None/whitespace-only values with the default."""
    if value is None or not value.strip():
        return default
    return value
