"""Request Dependencies — resolve per-app components and per-request context.

Invariants:
    - Components live on app.state, set by the app factory (no globals)
    - Every request has a correlation id: inbound X-Correlation-Id or a fresh uuid4 hex
    - read_upload buffers a whole file; open_upload_stream never reads more than one
      chunk ahead of its consumer
"""

from collections.abc import AsyncIterator
from uuid import uuid4

from fastapi import FastAPI, Request, UploadFile

from silkroute.core.binary_payload import BinaryPayload, FileUpload
from silkroute.core.domain_types import (
    CORRELATION_HEADER,
    DEFAULT_CONTENT_TYPE,
    UPLOAD_CHUNK_SIZE,
)
from silkroute.services.billing_handler import BillingHandler
from silkroute.services.sales_gateway import SalesGateway


def get_billing_handler(request: Request) -> BillingHandler:
    return request.app.state.billing_handler


def get_sales_gateway(request: Request) -> SalesGateway:
    return request.app.state.sales_gateway


def get_correlation_id(request: Request) -> str:
    return request.state.correlation_id


def register_correlation_middleware(app: FastAPI) -> None:
    """Tag each request with a correlation id and echo it on the response."""

    @app.middleware("http")
    async def assign_correlation_id(request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid4().hex
        request.state.correlation_id = correlation_id
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


async def read_upload(file: UploadFile | None) -> FileUpload | None:
    """Buffer a multipart file fully; None stays None."""
    if file is None:
        return None
    try:
        content = await file.read()
    finally:
        await file.close()
    return FileUpload(
        content=content,
        file_name=file.filename,
        content_type=file.content_type,
    )


def open_upload_stream(
    file: UploadFile | None, chunk_size: int = UPLOAD_CHUNK_SIZE,
) -> BinaryPayload | None:
    """Expose a multipart file as a chunk stream; the file is read lazily and closed at EOF."""
    if file is None:
        return None

    async def chunks() -> AsyncIterator[bytes]:
        try:
            while chunk := await file.read(chunk_size):
                yield chunk
        finally:
            await file.close()

    return BinaryPayload.from_chunks(
        chunks(),
        content_type=file.content_type or DEFAULT_CONTENT_TYPE,
        size=file.size,
    )
