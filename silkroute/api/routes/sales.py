"""Sales Gateway Routes — the public Sales surface, served entirely through SalesGateway.

Invariants:
    - Every route delegates to SalesGateway; no billing state is read here
    - The correlation id forwarded on status lookups is the inbound request's own
    - PDF downloads carry Content-Disposition invoice-{hex}.pdf in both modes
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import PlainTextResponse, Response, StreamingResponse

from silkroute.api.dependencies import (
    get_correlation_id,
    get_sales_gateway,
    open_upload_stream,
    read_upload,
)
from silkroute.core.domain_types import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    InvoiceStatus,
    TransportMode,
)
from silkroute.schemas.billing import Attachment, ImportResult, Invoice, InvoiceListItem, PagedResult
from silkroute.schemas.sales import CreateOrderRequest, PlaceOrderResponse
from silkroute.services.sales_gateway import SalesGateway

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/sales/billing", tags=["sales"])


@router.post("/orders", response_model=PlaceOrderResponse)
async def place_order(
    body: CreateOrderRequest | None = Body(None),
    gateway: SalesGateway = Depends(get_sales_gateway),
):
    """Place an order by issuing an invoice in Billing."""
    return await gateway.place_order(body)


@router.get("/invoices", response_model=PagedResult[InvoiceListItem])
async def search_invoices(
    customer_id: UUID | None = Query(None, alias="customerId"),
    status_filter: InvoiceStatus | None = Query(None, alias="status"),
    page: int = Query(DEFAULT_PAGE),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
    gateway: SalesGateway = Depends(get_sales_gateway),
):
    return await gateway.search_invoices(customer_id, status_filter, page, page_size)


@router.post("/invoices/import", response_model=ImportResult)
async def import_invoices(
    archive: UploadFile | None = File(None),
    source_name: str | None = Form(None, alias="sourceName"),
    gateway: SalesGateway = Depends(get_sales_gateway),
):
    """Buffer the uploaded archive and forward it to Billing's import."""
    upload = await read_upload(archive)
    return await gateway.import_invoices(
        upload.content if upload else None, source_name,
    )


@router.get("/invoices/{invoice_id}", response_model=Invoice)
async def get_invoice(
    invoice_id: UUID, gateway: SalesGateway = Depends(get_sales_gateway),
):
    return await gateway.get_invoice(invoice_id)


@router.get("/invoices/{invoice_id}/status", response_class=PlainTextResponse)
async def get_invoice_status(
    invoice_id: UUID,
    correlation_id: str = Depends(get_correlation_id),
    gateway: SalesGateway = Depends(get_sales_gateway),
):
    return PlainTextResponse(
        await gateway.get_invoice_status(invoice_id, correlation_id),
    )


@router.get("/invoices/{invoice_id}/pdf")
async def download_invoice_pdf(
    invoice_id: UUID,
    mode: str = Query(TransportMode.BYTES.value),
    gateway: SalesGateway = Depends(get_sales_gateway),
):
    """Same PDF either way: mode=bytes buffers it, mode=stream relays chunks."""
    payload = await gateway.download_invoice_pdf(invoice_id, mode)
    headers = {
        "Content-Disposition": f'attachment; filename="invoice-{invoice_id.hex}.pdf"',
    }
    if payload.mode is TransportMode.STREAM:
        return StreamingResponse(
            payload.iter_chunks(), media_type=payload.content_type, headers=headers,
        )
    return Response(payload.content, media_type=payload.content_type, headers=headers)


@router.post("/invoices/{invoice_id}/attachments", response_model=Attachment)
async def upload_attachment(
    invoice_id: UUID,
    file: UploadFile | None = File(None),
    gateway: SalesGateway = Depends(get_sales_gateway),
):
    return await gateway.upload_attachment(invoice_id, await read_upload(file))


@router.post(
    "/admin/company-logo",
    status_code=status.HTTP_204_NO_CONTENT, response_class=Response,
)
async def upload_company_logo(
    logo: UploadFile | None = File(None),
    mode: str = Query(TransportMode.BYTES.value),
    gateway: SalesGateway = Depends(get_sales_gateway),
):
    """mode=stream relays the upload chunk by chunk; mode=bytes buffers it first."""
    await gateway.upload_company_logo(open_upload_stream(logo), mode)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
