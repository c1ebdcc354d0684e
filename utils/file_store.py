from dataclasses import dataclass
from typing import AsyncIterator, Optional
from bson import ObjectId
from bson.errors import InvalidId
from gridfs.errors import NoFile
from motor.motor_asyncio import AsyncIOMotorGridFSBucket
from pymongo.errors import PyMongoError
from utils.errors import NotFound, PayloadTooLarge, StorageFailure
from utils.logger import get_logger

logger = get_logger("file_store")

CHUNK_SIZE = 256 * 1024


@dataclass
class StoredFile:
    file_id: str
    filename: str
    content_type: str
    length: int
    chunks: AsyncIterator[bytes]


async def iter_upload(upload, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Read an UploadFile (or anything with an async read(size)) chunk by chunk."""
    while True:
        chunk = await upload.read(chunk_size)
        if not chunk:
            break
        yield chunk


class GridFSFileStore:
    """Chunked blob storage for uploaded PDFs, backed by a GridFS bucket."""

    def __init__(self, database, bucket_name: str = "uploads"):
        self.bucket = AsyncIOMotorGridFSBucket(database, bucket_name=bucket_name)

    async def put(
        self,
        filename: str,
        content_type: str,
        chunks: AsyncIterator[bytes],
        max_bytes: Optional[int] = None,
    ) -> str:
        try:
            grid_in = self.bucket.open_upload_stream(
                filename, metadata={"contentType": content_type}
            )
            written = 0
            try:
                async for chunk in chunks:
                    written += len(chunk)
                    if max_bytes is not None and written > max_bytes:
                        raise PayloadTooLarge(
                            f"File exceeds the {max_bytes // (1024 * 1024)}MB upload limit."
                        )
                    await grid_in.write(chunk)
            except BaseException:
                # drop the chunks already written, no fs.files entry exists yet
                await grid_in.abort()
                raise
            await grid_in.close()
        except PyMongoError as e:
            logger.error(f"Error storing '{filename}' in GridFS: {e}")
            raise StorageFailure("Failed to store the uploaded file.") from e

        file_id = str(grid_in._id)
        logger.info(f"Stored '{filename}' ({written} bytes) with id {file_id}")
        return file_id

    async def open(self, file_id: str) -> StoredFile:
        try:
            grid_out = await self.bucket.open_download_stream(ObjectId(file_id))
        except (InvalidId, TypeError, NoFile):
            raise NotFound("No PDF found for this quiz.")
        except PyMongoError as e:
            logger.error(f"Error opening GridFS file {file_id}: {e}")
            raise StorageFailure("Failed to retrieve PDF file.") from e

        metadata = grid_out.metadata or {}
        return StoredFile(
            file_id=str(file_id),
            filename=grid_out.filename,
            content_type=metadata.get("contentType") or "application/pdf",
            length=grid_out.length,
            chunks=self._read_chunks(grid_out),
        )

    @staticmethod
    async def _read_chunks(grid_out) -> AsyncIterator[bytes]:
        try:
            while True:
                chunk = await grid_out.readchunk()
                if not chunk:
                    break
                yield chunk
        except PyMongoError as e:
            logger.error(f"Error streaming PDF from GridFS: {e}")
            raise StorageFailure("Failed to retrieve PDF file.") from e
