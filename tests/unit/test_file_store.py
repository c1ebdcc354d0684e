# =============================================================================
# TESTS - GridFS blob store
# =============================================================================

from io import BytesIO
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from gridfs.errors import NoFile

from utils.errors import NotFound, PayloadTooLarge
from utils.file_store import GridFSFileStore, iter_upload


async def _chunks(*parts):
    for part in parts:
        yield part


@pytest.fixture
def store():
    store = GridFSFileStore.__new__(GridFSFileStore)
    store.bucket = MagicMock()
    return store


@pytest.fixture
def grid_in():
    grid_in = MagicMock()
    grid_in._id = ObjectId()
    grid_in.write = AsyncMock()
    grid_in.close = AsyncMock()
    grid_in.abort = AsyncMock()
    return grid_in


class TestIterUpload:
    @pytest.mark.asyncio
    async def test_reads_in_chunks(self):
        class Upload:
            def __init__(self, data):
                self.buffer = BytesIO(data)

            async def read(self, size):
                return self.buffer.read(size)

        chunks = [c async for c in iter_upload(Upload(b"abcdefg"), chunk_size=3)]

        assert chunks == [b"abc", b"def", b"g"]


class TestGridFSFileStore:
    @pytest.mark.asyncio
    async def test_put_streams_chunks(self, store, grid_in):
        store.bucket.open_upload_stream.return_value = grid_in

        file_id = await store.put("notes.pdf", "application/pdf", _chunks(b"ab", b"cd"))

        assert file_id == str(grid_in._id)
        assert grid_in.write.await_count == 2
        grid_in.close.assert_awaited_once()
        store.bucket.open_upload_stream.assert_called_once_with(
            "notes.pdf", metadata={"contentType": "application/pdf"}
        )

    @pytest.mark.asyncio
    async def test_put_over_limit_aborts(self, store, grid_in):
        store.bucket.open_upload_stream.return_value = grid_in

        with pytest.raises(PayloadTooLarge):
            await store.put("big.pdf", "application/pdf", _chunks(b"1234", b"5678"), max_bytes=6)

        grid_in.abort.assert_awaited_once()
        grid_in.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_open_unknown_file(self, store):
        store.bucket.open_download_stream = AsyncMock(side_effect=NoFile("missing"))

        with pytest.raises(NotFound):
            await store.open(str(ObjectId()))

    @pytest.mark.asyncio
    async def test_open_malformed_id(self, store):
        with pytest.raises(NotFound):
            await store.open("nope")

    @pytest.mark.asyncio
    async def test_open_streams_content(self, store):
        grid_out = MagicMock()
        grid_out.filename = "notes.pdf"
        grid_out.metadata = {"contentType": "application/pdf"}
        grid_out.length = 6
        grid_out.readchunk = AsyncMock(side_effect=[b"abc", b"def", b""])
        store.bucket.open_download_stream = AsyncMock(return_value=grid_out)

        stored = await store.open(str(ObjectId()))
        data = b"".join([c async for c in stored.chunks])

        assert data == b"abcdef"
        assert stored.filename == "notes.pdf"
        assert stored.content_type == "application/pdf"

    @pytest.mark.asyncio
    async def test_put_interrupted_upload_aborts(self, store, grid_in):
        store.bucket.open_upload_stream.return_value = grid_in

        async def interrupted():
            yield b"first chunk"
            raise ConnectionResetError("client went away")

        with pytest.raises(ConnectionResetError):
            await store.put("notes.pdf", "application/pdf", interrupted())

        grid_in.write.assert_awaited_once_with(b"first chunk")
        grid_in.abort.assert_awaited_once()
        grid_in.close.assert_not_awaited()
