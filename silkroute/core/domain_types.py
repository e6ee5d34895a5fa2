"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - InvoiceId, CustomerId, AttachmentId wrap the UUIDs the ledger mints
    - All valid states encoded as Enums — no raw string matching
    - InvoiceStatus accepts its names in any letter case
    - CURRENCY is fixed to USD in this core

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

InvoiceId = NewType("InvoiceId", UUID)
CustomerId = NewType("CustomerId", UUID)
AttachmentId = NewType("AttachmentId", UUID)


# ─── Constants ───────────────────────────────────────────────────

CURRENCY = "USD"
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
DEFAULT_ATTACHMENT_NAME = "attachment.bin"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
PDF_CONTENT_TYPE = "application/pdf"
UPLOAD_CHUNK_SIZE = 64 * 1024
CORRELATION_HEADER = "X-Correlation-Id"


# ─── Enums ───────────────────────────────────────────────────────

class InvoiceStatus(str, Enum):
    """Invoice states. Set at creation or seed, never transitioned."""
    ISSUED = "Issued"
    PAID = "Paid"
    OVERDUE = "Overdue"
    CANCELLED = "Cancelled"

    @classmethod
    def _missing_(cls, value: object) -> "InvoiceStatus | None":
        """Names bind case-insensitively ("overdue", "PAID")."""
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class TransportMode(str, Enum):
    """Binary transport for the same artifact: whole buffer or chunk stream."""
    BYTES = "bytes"
    STREAM = "stream"

    @classmethod
    def parse(cls, raw: str | None) -> "TransportMode":
        """Case-insensitive; anything unrecognized falls back to BYTES."""
        if raw and raw.strip().lower() == cls.STREAM.value:
            return cls.STREAM
        return cls.BYTES
