# =============================================================================
# CONFTEST - shared fixtures
# =============================================================================
# In-memory stand-ins for MongoDB, GridFS, Gemini and the PDF extractor,
# injected through AppContext so no database or network is needed.
# =============================================================================

import json
from io import BytesIO
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from bson import ObjectId
from starlette.datastructures import Headers, UploadFile

from config.context import AppContext
from config.database import ConnectionManager
from config.settings import Settings
from utils.errors import NotFound, PayloadTooLarge
from utils.file_store import StoredFile
from utils.quiz_store import to_object_id


SAMPLE_QUESTIONS = [
    {
        "questionText": "What gas do plants absorb during photosynthesis?",
        "options": ["Oxygen", "Carbon dioxide", "Nitrogen", "Helium"],
        "correctAnswer": "Carbon dioxide",
    },
    {
        "questionText": "Where in the cell does photosynthesis happen?",
        "options": ["Nucleus", "Mitochondria", "Chloroplast", "Ribosome"],
        "correctAnswer": "Chloroplast",
    },
    {
        "questionText": "Which pigment makes leaves green?",
        "options": ["Chlorophyll", "Carotene", "Melanin", "Xanthophyll"],
        "correctAnswer": "Chlorophyll",
    },
]

LONG_TOPIC = (
    "Photosynthesis is the process by which green plants use sunlight, water and "
    "carbon dioxide to produce glucose and oxygen inside their chloroplasts."
)

PDF_TEXT = (
    "Chapter 1. Chlorophyll is the pigment that absorbs light energy and gives "
    "leaves their green colour during photosynthesis."
)


# =============================================================================
# FAKE STORES
# =============================================================================


class FakeQuizStore:
    """Same interface as utils.quiz_store.QuizStore, kept in memory."""

    def __init__(self):
        self.quizzes = []
        self.results = []

    async def insert_quiz(self, quiz_doc):
        now = datetime.now(timezone.utc)
        doc = dict(quiz_doc)
        doc["questions"] = [{"_id": ObjectId(), **q} for q in quiz_doc["questions"]]
        doc.update({"_id": ObjectId(), "createdAt": now, "updatedAt": now})
        self.quizzes.append(doc)
        return doc

    async def find_quiz(self, quiz_id):
        oid = to_object_id(quiz_id)
        return next((q for q in self.quizzes if q["_id"] == oid), None)

    async def list_quizzes(self):
        return list(reversed(self.quizzes))

    async def insert_result(self, result_doc):
        now = datetime.now(timezone.utc)
        doc = {**result_doc, "_id": ObjectId(), "createdAt": now, "updatedAt": now}
        self.results.append(doc)
        return doc

    async def find_results(self, quiz_id):
        oid = to_object_id(quiz_id)
        return [r for r in reversed(self.results) if r["quiz"] == oid]


class FakeFileStore:
    """Same interface as utils.file_store.GridFSFileStore, kept in memory."""

    def __init__(self):
        self.files = {}

    async def put(self, filename, content_type, chunks, max_bytes=None):
        data = b""
        async for chunk in chunks:
            data += chunk
            if max_bytes is not None and len(data) > max_bytes:
                raise PayloadTooLarge()
        file_id = str(ObjectId())
        self.files[file_id] = (filename, content_type, data)
        return file_id

    async def open(self, file_id):
        if file_id not in self.files:
            raise NotFound("No PDF found for this quiz.")
        filename, content_type, data = self.files[file_id]

        async def chunks():
            for start in range(0, len(data), 4):
                yield data[start:start + 4]

        return StoredFile(file_id, filename, content_type, len(data), chunks())


class FakeContext(AppContext):
    def __init__(self, settings, llm, extractor):
        super().__init__(
            settings=settings,
            connection=ConnectionManager(settings.mongo_uri, settings.mongo_db_name),
            llm=llm,
            extractor=extractor,
        )
        self.quiz_store = FakeQuizStore()
        self.file_store = FakeFileStore()

    async def get_quiz_store(self):
        return self.quiz_store

    async def get_file_store(self):
        return self.file_store


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def settings():
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        mongo_db_name="quiz_test",
        gemini_api_key="test-key-123",
        allowed_origins=["http://localhost:5173"],
        max_upload_mb=1,
        log_level="ERROR",
    )


@pytest.fixture
def ai_response():
    return json.dumps(SAMPLE_QUESTIONS)


@pytest.fixture
def mock_llm(ai_response):
    llm = AsyncMock()
    llm.generate = AsyncMock(return_value=ai_response)
    return llm


@pytest.fixture
def mock_extractor():
    extractor = AsyncMock()
    extractor.extract = AsyncMock(return_value=PDF_TEXT)
    return extractor


@pytest.fixture
def ctx(settings, mock_llm, mock_extractor):
    return FakeContext(settings, mock_llm, mock_extractor)


@pytest.fixture
def make_upload():
    def _make(data=b"%PDF-1.4 fake pdf bytes", filename="notes.pdf", content_type="application/pdf"):
        return UploadFile(
            file=BytesIO(data),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )

    return _make


@pytest.fixture
def client(ctx):
    from fastapi.testclient import TestClient
    from main import create_app

    return TestClient(create_app(context=ctx))
