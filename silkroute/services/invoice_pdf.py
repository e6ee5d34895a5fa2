"""Invoice PDF Asset — the single canned PDF served for every invoice id.

Invariants:
    - Every invoice id yields the same bytes (stub behaviour)
    - Missing file → AssetMissingError, checked before any bytes are produced
    - iter_chunks() reads the file to EOF; concatenated chunks == read_bytes()

Design Decisions:
    - anyio file IO: non-blocking reads on the event loop, same library Starlette uses
"""

import logging
from collections.abc import AsyncIterator
from pathlib import Path

import anyio

from silkroute.core.errors import AssetMissingError

logger = logging.getLogger(__name__)

DEFAULT_PDF_PATH = Path(__file__).resolve().parent.parent / "assets" / "invoice.pdf"


class InvoicePdfAsset:
    """Reads the configured PDF as a buffer or as a chunk stream."""

    def __init__(self, path: Path = DEFAULT_PDF_PATH, chunk_size: int = 64 * 1024):
        self.path = Path(path)
        self.chunk_size = chunk_size

    async def read_bytes(self) -> bytes:
        await self.ensure_exists()
        return await anyio.Path(self.path).read_bytes()

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        await self.ensure_exists()
        async with await anyio.open_file(self.path, "rb") as f:
            while chunk := await f.read(self.chunk_size):
                yield chunk

    async def ensure_exists(self) -> None:
        if not await anyio.Path(self.path).is_file():
            logger.error(
                f"Invoice PDF asset missing at {self.path}",
                extra={"error_code": "ASSET_MISSING"},
            )
            raise AssetMissingError(str(self.path))
