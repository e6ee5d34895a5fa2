"""Binary Payload — one representation for an artifact carried as a buffer or as a stream.

Invariants:
    - A BYTES payload holds the whole artifact in memory; iterating yields it once
    - A STREAM payload wraps an async chunk iterator and may be consumed exactly once
    - read_all() drains either mode to completion (partial reads are never an end state)
    - Both modes of the same artifact produce byte-identical read_all() results
    - size is the exact length in BYTES mode; in STREAM mode it is the announced
      length, or None when unknown

Design Decisions:
    - Mode is explicit (TransportMode) so callers pick the remote operation without
      isinstance checks
    - FileUpload is a plain dataclass: form uploads are buffered before reaching the contract
"""

from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass

from silkroute.core.domain_types import DEFAULT_CONTENT_TYPE, TransportMode


class BinaryPayload:
    """Buffered or streamed bytes with a content type."""

    def __init__(
        self,
        *,
        content: bytes | None = None,
        chunks: AsyncIterable[bytes] | None = None,
        content_type: str = DEFAULT_CONTENT_TYPE,
        size: int | None = None,
    ):
        if (content is None) == (chunks is None):
            raise ValueError("BinaryPayload needs exactly one of content or chunks")
        self._content = content
        self._chunks = chunks
        self._consumed = False
        self.content_type = content_type
        self.size = len(content) if content is not None else size

    @classmethod
    def from_bytes(
        cls, content: bytes, content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> "BinaryPayload":
        return cls(content=content, content_type=content_type)

    @classmethod
    def from_chunks(
        cls,
        chunks: AsyncIterable[bytes],
        content_type: str = DEFAULT_CONTENT_TYPE,
        size: int | None = None,
    ) -> "BinaryPayload":
        """`size` is the announced length when the producer knows it up front."""
        return cls(chunks=chunks, content_type=content_type, size=size)

    @property
    def mode(self) -> TransportMode:
        return TransportMode.BYTES if self._content is not None else TransportMode.STREAM

    @property
    def content(self) -> bytes:
        """Buffered content. Only valid in BYTES mode."""
        if self._content is None:
            raise RuntimeError("Streamed payload has no buffered content; use read_all()")
        return self._content

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        """Yield the artifact chunk by chunk."""
        if self._content is not None:
            yield self._content
            return
        if self._consumed:
            raise RuntimeError("Streamed payload already consumed")
        self._consumed = True
        async for chunk in self._chunks:
            if chunk:
                yield chunk

    async def read_all(self) -> bytes:
        """Drain the payload into one buffer."""
        if self._content is not None:
            return self._content
        buffer = bytearray()
        async for chunk in self.iter_chunks():
            buffer.extend(chunk)
        return bytes(buffer)


@dataclass
class FileUpload:
    """A multipart file after buffering."""
    content: bytes
    file_name: str | None = None
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)
