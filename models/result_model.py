from typing import List
from pydantic import BaseModel


class GradedAnswer(BaseModel):
    questionId: str
    questionText: str
    submittedAnswer: str
    correctAnswer: str
    isCorrect: bool


class GradeReport(BaseModel):
    score: int
    totalQuestions: int
    submittedAnswers: List[GradedAnswer]
