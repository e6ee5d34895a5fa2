"""Billing Schemas — invoice, attachment, search and import DTOs shared by both services.

Invariants:
    - Wire names are camelCase, Python attributes snake_case (populate_by_name)
    - Money is Decimal end to end; JSON carries it as a string, never a float
    - CreateInvoiceRequest.lines may arrive empty; emptiness is a domain validation
      error raised by the handler, not a schema error
    - archive_bytes travels as base64 in JSON and as raw bytes in Python

Design Decisions:
    - One schema module for both sides of the contract: server routes and client stub
      agree on shape by importing the same classes
    - Base64 via Annotated validator/serializer pair: works both for FastAPI body
      parsing (python mode) and model_dump_json (json mode)
"""

import base64
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Generic, TypeVar
from uuid import UUID

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
)
from pydantic.alias_generators import to_camel

from silkroute.core.domain_types import (
    CURRENCY,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    InvoiceStatus,
)

T = TypeVar("T")


def _decode_base64(value: object) -> object:
    if isinstance(value, str):
        return base64.b64decode(value, validate=True)
    return value


Base64Payload = Annotated[
    bytes,
    BeforeValidator(_decode_base64),
    PlainSerializer(
        lambda v: base64.b64encode(v).decode("ascii"),
        return_type=str,
        when_used="json",
    ),
]


class CamelModel(BaseModel):
    """Base for wire DTOs — camelCase aliases, snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Invoice(CamelModel):
    id: UUID
    number: str
    customer_id: UUID
    total: Decimal
    currency: str = CURRENCY
    issued_at: datetime
    status: InvoiceStatus


class InvoiceListItem(CamelModel):
    """Search projection of Invoice."""
    id: UUID
    number: str
    total: Decimal
    currency: str = CURRENCY
    status: InvoiceStatus

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceListItem":
        return cls(
            id=invoice.id,
            number=invoice.number,
            total=invoice.total,
            currency=invoice.currency,
            status=invoice.status,
        )


class InvoiceSearchQuery(CamelModel):
    """Filters are skipped when None; paging is clamped by the ledger, not here."""
    customer_id: UUID | None = None
    status: InvoiceStatus | None = None
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    def to_params(self) -> dict[str, str]:
        """Query-string binding used by the client stub."""
        params = {"page": str(self.page), "pageSize": str(self.page_size)}
        if self.customer_id is not None:
            params["customerId"] = str(self.customer_id)
        if self.status is not None:
            params["status"] = self.status.value
        return params


class PagedResult(CamelModel, Generic[T]):
    items: list[T] = Field(default_factory=list)
    total_count: int = 0


class InvoiceLine(CamelModel):
    description: str = ""
    quantity: int
    unit_price: Decimal


class CreateInvoiceRequest(CamelModel):
    customer_id: UUID
    lines: list[InvoiceLine] = Field(default_factory=list)


class BulkImportRequest(CamelModel):
    source_name: str | None = None
    archive_bytes: Base64Payload = b""


class ImportResult(CamelModel):
    imported_count: int
    failed_count: int
    message: str


class Attachment(CamelModel):
    attachment_id: UUID
    file_name: str
    content_type: str = DEFAULT_CONTENT_TYPE
    size: int
    uploaded_at: datetime
