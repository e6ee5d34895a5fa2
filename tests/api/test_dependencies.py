"""Request Dependencies — multipart files exposed as buffers or lazy chunk streams."""

from silkroute.api.dependencies import open_upload_stream, read_upload
from silkroute.core.domain_types import TransportMode


class _CountingFile:
    """Stands in for an UploadFile and records every read size."""

    def __init__(self, data: bytes, content_type: str | None = "image/png"):
        self.data = data
        self.offset = 0
        self.reads: list[int] = []
        self.closed = False
        self.filename = "logo.png"
        self.content_type = content_type
        self.size = len(data)

    async def read(self, size: int = -1) -> bytes:
        self.reads.append(size)
        end = len(self.data) if size < 0 else self.offset + size
        chunk = self.data[self.offset:end]
        self.offset += len(chunk)
        return chunk

    async def close(self) -> None:
        self.closed = True


async def test_open_upload_stream_reads_in_chunks_only_when_consumed():
    upload = _CountingFile(b"x" * 10)
    payload = open_upload_stream(upload, chunk_size=4)

    assert payload.mode is TransportMode.STREAM
    assert payload.size == 10
    assert payload.content_type == "image/png"
    assert upload.reads == []

    assert await payload.read_all() == b"x" * 10
    assert upload.reads == [4, 4, 4, 4]
    assert upload.closed


async def test_open_upload_stream_defaults_content_type():
    payload = open_upload_stream(_CountingFile(b"a", content_type=None))
    assert payload.content_type == "application/octet-stream"


async def test_missing_upload_stays_none():
    assert open_upload_stream(None) is None
    assert await read_upload(None) is None


async def test_read_upload_buffers_whole_file():
    upload = _CountingFile(b"hello")
    buffered = await read_upload(upload)
    assert buffered.content == b"hello"
    assert buffered.file_name == "logo.png"
    assert upload.reads == [-1]
    assert upload.closed
