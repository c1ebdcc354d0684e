import json
from typing import List
from pydantic import TypeAdapter, ValidationError
from models.quiz_model import GeneratedQuestion
from utils.errors import MalformedAiResponse
from utils.logger import get_logger

logger = get_logger("quiz_parser")

_questions_adapter = TypeAdapter(List[GeneratedQuestion])


def strip_code_fences(raw_text: str) -> str:
    """
    Removes ```json / ``` fences wrapped around the model output
    """
    cleaned = raw_text.strip()

    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    return cleaned.strip()


def parse_quiz_questions(raw_text: str) -> List[GeneratedQuestion]:
    if not raw_text or not raw_text.strip():
        logger.error("Empty AI response")
        raise MalformedAiResponse()

    cleaned = strip_code_fences(raw_text)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing AI response: {e}. Raw output: {raw_text}")
        raise MalformedAiResponse() from e

    if not isinstance(parsed, list) or len(parsed) == 0:
        logger.error(f"AI response is not a valid or non-empty array. Raw output: {raw_text}")
        raise MalformedAiResponse()

    try:
        return _questions_adapter.validate_python(parsed)
    except ValidationError as e:
        logger.error(f"AI questions failed validation: {e}. Raw output: {raw_text}")
        raise MalformedAiResponse() from e
