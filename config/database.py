import asyncio
from enum import Enum
from typing import Callable, Optional
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError
from utils.errors import StorageFailure
from utils.logger import get_logger

logger = get_logger("database")


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


class ConnectionManager:
    """
    Lazily connects to MongoDB on first use and caches the database handle.

    Callers arriving while an attempt is in flight wait on that same attempt.
    A failed attempt is remembered (for /health) and retried on the next call.
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        client_factory: Callable[..., AsyncIOMotorClient] = AsyncIOMotorClient,
        server_selection_timeout_ms: int = 5000,
    ):
        self.uri = uri
        self.db_name = db_name
        self._client_factory = client_factory
        self._timeout_ms = server_selection_timeout_ms
        self._client = None
        self._database = None
        self._pending: Optional[asyncio.Task] = None
        self._error: Optional[BaseException] = None
        self.state = ConnectionState.DISCONNECTED

    async def get_database(self):
        if self.state is ConnectionState.CONNECTED:
            return self._database

        if self._pending is None:
            self.state = ConnectionState.CONNECTING
            self._pending = asyncio.ensure_future(self._connect())

        try:
            return await asyncio.shield(self._pending)
        except PyMongoError as e:
            raise StorageFailure("Database connection is unavailable.") from e

    async def _connect(self):
        client = None
        try:
            client = self._client_factory(self.uri, serverSelectionTimeoutMS=self._timeout_ms)
            await client.admin.command("ping")
        except PyMongoError as e:
            logger.error(f"Error connecting to MongoDB: {e}")
            if client is not None:
                client.close()
            self._error = e
            self.state = ConnectionState.FAILED
            raise
        finally:
            self._pending = None

        self._client = client
        self._database = client[self.db_name]
        self._error = None
        self.state = ConnectionState.CONNECTED
        logger.info(f"MongoDB connected, using database '{self.db_name}'")
        return self._database

    def status(self) -> dict:
        info = {"state": self.state.value}
        if self.state is ConnectionState.FAILED and self._error is not None:
            info["error"] = str(self._error)
        return info

    def close(self):
        if self._client is not None:
            self._client.close()
        self._client = None
        self._database = None
        self.state = ConnectionState.DISCONNECTED
