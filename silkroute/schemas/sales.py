"""Sales Schemas — order placement DTOs on the gateway's public surface.

Invariants:
    - OrderLine maps 1:1 onto InvoiceLine (sku becomes description)
    - PlaceOrderResponse is a projection of the created Invoice
"""

from decimal import Decimal
from uuid import UUID

from pydantic import Field

from silkroute.core.domain_types import CURRENCY
from silkroute.schemas.billing import CamelModel, Invoice, InvoiceLine


class OrderLine(CamelModel):
    sku: str = ""
    quantity: int
    unit_price: Decimal

    def to_invoice_line(self) -> InvoiceLine:
        return InvoiceLine(
            description=self.sku,
            quantity=self.quantity,
            unit_price=self.unit_price,
        )


class CreateOrderRequest(CamelModel):
    customer_id: UUID
    lines: list[OrderLine] = Field(default_factory=list)


class PlaceOrderResponse(CamelModel):
    invoice_id: UUID
    invoice_number: str
    total: Decimal
    currency: str = CURRENCY

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "PlaceOrderResponse":
        return cls(
            invoice_id=invoice.id,
            invoice_number=invoice.number,
            total=invoice.total,
            currency=invoice.currency,
        )
