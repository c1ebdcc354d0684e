from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

NO_ANSWER = "No Answer"


class SourceType(str, Enum):
    TEXT = "text"
    PDF = "pdf"
    COMBINED = "combined"


class GeneratedQuestion(BaseModel):
    """One question as returned by the AI, validated before it is stored."""

    questionText: str
    options: List[str] = Field(..., min_length=2)
    correctAnswer: str

    @field_validator("questionText")
    @classmethod
    def question_not_blank(cls, v):
        if not v.strip():
            raise ValueError("questionText cannot be empty")
        return v

    @field_validator("options")
    @classmethod
    def options_not_blank(cls, v):
        if any(not option.strip() for option in v):
            raise ValueError("options cannot contain empty strings")
        return v

    @model_validator(mode="after")
    def answer_is_an_option(self):
        if self.correctAnswer not in self.options:
            raise ValueError("correctAnswer must be one of the options")
        return self


class SubmittedAnswer(BaseModel):
    questionId: str
    answer: Optional[str] = None


class QuizSubmission(BaseModel):
    answers: List[SubmittedAnswer] = Field(default_factory=list)
