from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from config.context import AppContext, get_context
from controllers.quiz_controller import *
from models.quiz_model import QuizSubmission
from utils.helper import success_response

router = APIRouter(prefix="/api/quizzes", tags=["Quizzes"])


@router.post("/generate")
async def generate_quiz(
    title: str = Form(""),
    numQuestions: int = Form(DEFAULT_NUM_QUESTIONS, ge=1, le=50),
    topic: Optional[str] = Form(None),
    pdfFile: Optional[UploadFile] = File(None),
    ctx: AppContext = Depends(get_context),
):
    quiz = await generate_quiz_service(ctx, title, topic, pdfFile, numQuestions)
    return success_response(
        "Quiz generated and saved successfully!",
        data=quiz,
        status_code=201,
        quizId=quiz["_id"],
    )


@router.get("")
async def list_quizzes(ctx: AppContext = Depends(get_context)):
    return await list_quizzes_service(ctx)


@router.get("/{quiz_id}")
async def get_quiz_for_taking(quiz_id: str, ctx: AppContext = Depends(get_context)):
    return await get_quiz_for_taking_service(ctx, quiz_id)


@router.get("/{quiz_id}/pdf")
async def get_quiz_pdf(quiz_id: str, ctx: AppContext = Depends(get_context)):
    return await get_quiz_pdf_service(ctx, quiz_id)


@router.post("/{quiz_id}/submit")
async def submit_quiz(
    quiz_id: str,
    data: QuizSubmission,
    ctx: AppContext = Depends(get_context),
):
    return await submit_quiz_service(ctx, quiz_id, data.answers)
