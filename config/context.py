from fastapi import Request
from config.database import ConnectionManager
from config.settings import Settings
from utils.file_store import GridFSFileStore
from utils.gemini_service import GeminiService
from utils.pdf_text import PdfTextExtractor
from utils.quiz_store import QuizStore


class AppContext:
    """Process-wide resources, built once at startup and handed to every request."""

    def __init__(self, settings: Settings, connection: ConnectionManager, llm, extractor):
        self.settings = settings
        self.connection = connection
        self.llm = llm
        self.extractor = extractor

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        return cls(
            settings=settings,
            connection=ConnectionManager(settings.mongo_uri, settings.mongo_db_name),
            llm=GeminiService(
                api_key=settings.gemini_api_key,
                model_name=settings.gemini_model,
                timeout=settings.llm_timeout_seconds,
            ),
            extractor=PdfTextExtractor(),
        )

    async def get_quiz_store(self) -> QuizStore:
        return QuizStore(await self.connection.get_database())

    async def get_file_store(self) -> GridFSFileStore:
        database = await self.connection.get_database()
        return GridFSFileStore(database, self.settings.gridfs_bucket)

    def close(self):
        self.connection.close()


def get_context(request: Request) -> AppContext:
    return request.app.state.context
