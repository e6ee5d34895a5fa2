"""Billing Routes — HTTP binding of BillingContract onto BillingHandler.

Invariants:
    - Method and path for each operation come from BILLING_ROUTES (shared with the client)
    - Routes never contain business logic (validation lives in BillingHandler)
    - /invoices/search is registered before /invoices/{invoice_id}
    - Logo bodies are raw application/octet-stream; the stream route never buffers
      before handing the body to the handler

Design Decisions:
    - Optional bodies/files (default None): a missing body is a domain validation error
      with the contract's message, not a framework 422
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, Header, Query, Request, UploadFile, status
from fastapi.responses import PlainTextResponse, Response, StreamingResponse

from silkroute.api.dependencies import get_billing_handler, read_upload
from silkroute.core.binary_payload import BinaryPayload
from silkroute.core.billing_contract import BILLING_PREFIX, BILLING_ROUTES
from silkroute.core.domain_types import (
    CORRELATION_HEADER,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    PDF_CONTENT_TYPE,
    InvoiceStatus,
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
from silkroute.services.billing_handler import BillingHandler

logger = logging.getLogger(__name__)
router = APIRouter(prefix=BILLING_PREFIX, tags=["billing"])


def _bind(operation: str, **kwargs):
    route = BILLING_ROUTES[operation]
    return router.api_route(
        route.path, methods=[route.method], name=operation, **kwargs,
    )


@_bind("search_invoices", response_model=PagedResult[InvoiceListItem])
async def search_invoices(
    customer_id: UUID | None = Query(None, alias="customerId"),
    status_filter: InvoiceStatus | None = Query(None, alias="status"),
    page: int = Query(DEFAULT_PAGE),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
    billing: BillingHandler = Depends(get_billing_handler),
):
    return await billing.search_invoices(InvoiceSearchQuery(
        customer_id=customer_id,
        status=status_filter,
        page=page,
        page_size=page_size,
    ))


@_bind("import_invoices", response_model=ImportResult)
async def import_invoices(
    body: BulkImportRequest | None = Body(None),
    billing: BillingHandler = Depends(get_billing_handler),
):
    return await billing.import_invoices(body)


@_bind("get_invoice", response_model=Invoice)
async def get_invoice(
    invoice_id: UUID, billing: BillingHandler = Depends(get_billing_handler),
):
    return await billing.get_invoice(invoice_id)


@_bind("get_invoice_status", response_class=PlainTextResponse)
async def get_invoice_status(
    invoice_id: UUID,
    correlation_id: str = Header("", alias=CORRELATION_HEADER),
    billing: BillingHandler = Depends(get_billing_handler),
):
    return PlainTextResponse(
        await billing.get_invoice_status(invoice_id, correlation_id),
    )


@_bind("create_invoice", response_model=Invoice)
async def create_invoice(
    body: CreateInvoiceRequest | None = Body(None),
    billing: BillingHandler = Depends(get_billing_handler),
):
    return await billing.create_invoice(body)


@_bind(
    "upload_company_logo_bytes",
    status_code=status.HTTP_204_NO_CONTENT, response_class=Response,
)
async def upload_company_logo_bytes(
    request: Request, billing: BillingHandler = Depends(get_billing_handler),
):
    await billing.upload_company_logo_bytes(await request.body())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@_bind(
    "upload_company_logo_stream",
    status_code=status.HTTP_204_NO_CONTENT, response_class=Response,
)
async def upload_company_logo_stream(
    request: Request, billing: BillingHandler = Depends(get_billing_handler),
):
    await billing.upload_company_logo_stream(
        BinaryPayload.from_chunks(request.stream()),
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@_bind("download_invoice_pdf_bytes", response_class=Response)
async def download_invoice_pdf_bytes(
    invoice_id: UUID, billing: BillingHandler = Depends(get_billing_handler),
):
    content = await billing.download_invoice_pdf_bytes(invoice_id)
    return Response(content, media_type=PDF_CONTENT_TYPE)


@_bind("download_invoice_pdf_stream", response_class=StreamingResponse)
async def download_invoice_pdf_stream(
    invoice_id: UUID, billing: BillingHandler = Depends(get_billing_handler),
):
    payload = await billing.download_invoice_pdf_stream(invoice_id)
    return StreamingResponse(
        payload.iter_chunks(), media_type=payload.content_type,
    )


@_bind("upload_invoice_attachment", response_model=Attachment)
async def upload_invoice_attachment(
    invoice_id: UUID,
    file: UploadFile | None = File(None),
    billing: BillingHandler = Depends(get_billing_handler),
):
    return await billing.upload_invoice_attachment(
        invoice_id, await read_upload(file),
    )
