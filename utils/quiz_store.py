from datetime import datetime, timezone
from typing import List, Optional
from bson import ObjectId
from pymongo.errors import PyMongoError
from utils.errors import StorageFailure
from utils.logger import get_logger

logger = get_logger("quiz_store")


def to_object_id(value) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


class QuizStore:
    """Quizzes (with embedded questions) and their submission results in MongoDB."""

    def __init__(self, database):
        self.quizzes = database["quizzes"]
        self.results = database["results"]

    async def insert_quiz(self, quiz_doc: dict) -> dict:
        now = datetime.now(timezone.utc)
        doc = dict(quiz_doc)
        doc["questions"] = [{"_id": ObjectId(), **q} for q in quiz_doc["questions"]]
        doc["createdAt"] = now
        doc["updatedAt"] = now
        try:
            result = await self.quizzes.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Error saving quiz '{doc.get('title')}': {e}")
            raise StorageFailure("Failed to save the quiz.") from e
        doc["_id"] = result.inserted_id
        return doc

    async def find_quiz(self, quiz_id) -> Optional[dict]:
        oid = to_object_id(quiz_id)
        if oid is None:
            return None
        try:
            return await self.quizzes.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Error fetching quiz {quiz_id}: {e}")
            raise StorageFailure() from e

    async def list_quizzes(self) -> List[dict]:
        try:
            return await self.quizzes.find(
                {}, {"title": 1, "questions": 1, "createdAt": 1}
            ).sort("createdAt", -1).to_list(None)
        except PyMongoError as e:
            logger.error(f"Error fetching all quizzes: {e}")
            raise StorageFailure() from e

    async def insert_result(self, result_doc: dict) -> dict:
        now = datetime.now(timezone.utc)
        doc = {**result_doc, "createdAt": now, "updatedAt": now}
        try:
            result = await self.results.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Error saving result for quiz {doc.get('quiz')}: {e}")
            raise StorageFailure("Failed to save the quiz result.") from e
        doc["_id"] = result.inserted_id
        return doc

    async def find_results(self, quiz_id) -> List[dict]:
        oid = to_object_id(quiz_id)
        if oid is None:
            return []
        try:
            return await self.results.find({"quiz": oid}).sort("createdAt", -1).to_list(None)
        except PyMongoError as e:
            logger.error(f"Error fetching results for quiz {quiz_id}: {e}")
            raise StorageFailure() from e
