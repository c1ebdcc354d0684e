import asyncio
from typing import List, Optional
from bson import ObjectId
from fastapi.responses import StreamingResponse
from urllib.parse import quote
from config.context import AppContext
from models.quiz_model import NO_ANSWER, SourceType, SubmittedAnswer
from models.result_model import GradeReport, GradedAnswer
from utils.errors import InsufficientContext, InvalidInput, NotFound
from utils.file_store import iter_upload
from utils.helper import content_disposition, serialize_doc
from utils.logger import get_logger
from utils.prompt import generate_quiz_prompt
from utils.quiz_parser import parse_quiz_questions

logger = get_logger("quiz")

DEFAULT_NUM_QUESTIONS = 5
MIN_CONTEXT_CHARS = 50
MAX_CONTEXT_CHARS = 24000


def _has_file(upload) -> bool:
    return upload is not None and bool(getattr(upload, "filename", None))


async def generate_quiz_service(
    ctx: AppContext,
    title: Optional[str],
    topic: Optional[str] = None,
    upload=None,
    number_of_questions: int = DEFAULT_NUM_QUESTIONS,
) -> dict:
    title = (title or "").strip()
    if not title:
        raise InvalidInput("A quiz title is required.")

    topic_text = topic if topic and topic.strip() else None
    has_file = _has_file(upload)
    if not topic_text and not has_file:
        raise InvalidInput("Please provide either a topic or a PDF file to generate the quiz.")
    if number_of_questions < 1:
        raise InvalidInput("numQuestions must be at least 1.")

    context_text = ""
    source_type = None
    source_filename = None
    source_file_id = None

    if topic_text:
        context_text += f"Topic provided by user:\n{topic_text}"
        source_type = SourceType.TEXT

    if has_file:
        # The file is stored before anything else can fail, so it is never lost
        logger.info("Step 1: Storing PDF in GridFS...")
        file_store = await ctx.get_file_store()
        source_filename = upload.filename
        source_file_id = await file_store.put(
            source_filename,
            upload.content_type or "application/pdf",
            iter_upload(upload),
            max_bytes=ctx.settings.max_upload_bytes,
        )

    try:
        if has_file:
            logger.info("Step 2: Extracting text from PDF...")
            await upload.seek(0)
            pdf_text = await ctx.extractor.extract(await upload.read())
            if pdf_text:
                separator = (
                    f"\n\n--- Content from uploaded PDF ({source_filename}) ---\n"
                    if context_text else ""
                )
                context_text += separator + pdf_text
            source_type = SourceType.COMBINED if source_type is SourceType.TEXT else SourceType.PDF

        if len(context_text.strip()) < MIN_CONTEXT_CHARS:
            raise InsufficientContext()

        logger.info(f"Step 3: Generating quiz with AI from source type: {source_type.value}")
        prompt = generate_quiz_prompt(context_text[:MAX_CONTEXT_CHARS], number_of_questions)
        ai_response = await ctx.llm.generate(prompt)

        logger.info("Step 4: Parsing AI response...")
        questions = parse_quiz_questions(ai_response)

        if len(questions) != number_of_questions:
            logger.warning(f"Asked for {number_of_questions} questions, AI returned {len(questions)}")

        quiz_doc = {
            "title": title,
            "topic": topic_text or f"Content from {source_filename}",
            "sourceType": source_type.value,
            "questions": [q.model_dump() for q in questions],
        }
        if source_file_id:
            quiz_doc["sourceFilename"] = source_filename
            quiz_doc["sourceFileId"] = ObjectId(source_file_id)

        logger.info("Step 5: Saving complete quiz to database...")
        quiz_store = await ctx.get_quiz_store()
        saved = await quiz_store.insert_quiz(quiz_doc)
    except Exception:
        if source_file_id:
            logger.warning(f"Quiz generation failed, stored PDF {source_file_id} has no owning quiz")
        raise

    logger.info(f"Quiz '{saved['title']}' saved successfully with id {saved['_id']}")
    return saved


async def list_quizzes_service(ctx: AppContext) -> List[dict]:
    quiz_store = await ctx.get_quiz_store()
    quizzes = await quiz_store.list_quizzes()
    return [
        {
            "_id": str(quiz["_id"]),
            "id": str(quiz["_id"]),
            "title": quiz["title"],
            "questionCount": len(quiz.get("questions", [])),
        }
        for quiz in quizzes
    ]


async def get_quiz_for_taking_service(ctx: AppContext, quiz_id: str) -> dict:
    quiz_store = await ctx.get_quiz_store()
    quiz, results = await asyncio.gather(
        quiz_store.find_quiz(quiz_id),
        quiz_store.find_results(quiz_id),
    )
    if not quiz:
        raise NotFound("Quiz not found.")

    # correctAnswer never leaves the server here
    questions_for_student = [
        {
            "_id": str(q["_id"]),
            "id": str(q["_id"]),
            "questionText": q["questionText"],
            "options": q["options"],
        }
        for q in quiz["questions"]
    ]

    return {
        "quiz": {
            "_id": str(quiz["_id"]),
            "id": str(quiz["_id"]),
            "title": quiz["title"],
            "questions": questions_for_student,
        },
        "results": serialize_doc(results),
    }


async def get_quiz_pdf_service(ctx: AppContext, quiz_id: str) -> StreamingResponse:
    quiz_store = await ctx.get_quiz_store()
    quiz = await quiz_store.find_quiz(quiz_id)
    if not quiz:
        raise NotFound("Quiz not found.")
    if not quiz.get("sourceFileId"):
        raise NotFound("No PDF found for this quiz.")

    file_store = await ctx.get_file_store()
    stored = await file_store.open(str(quiz["sourceFileId"]))
    filename = quiz.get("sourceFilename") or stored.filename

    return StreamingResponse(
        stored.chunks,
        media_type="application/pdf",
        headers={
            "Content-Disposition": content_disposition(filename),
            "Content-Length": str(stored.length),
            "X-Quiz-Title": quote(quiz["title"], safe="-_.!~*'()"),
        },
    )


def grade_answers(questions: List[dict], answers: List[SubmittedAnswer]) -> GradeReport:
    """
    Score answers against the stored questions, in the quiz's own order.

    Only exact (case-sensitive) matches count. Questions without an answer
    are recorded as "No Answer". The denominator is always the quiz's
    question count, whatever was submitted.
    """
    graded = []
    score = 0

    for question in questions:
        question_id = str(question["_id"])
        submitted = next((a for a in answers if a.questionId == question_id), None)
        answer = submitted.answer if submitted is not None else None

        is_correct = answer is not None and answer == question["correctAnswer"]
        if is_correct:
            score += 1

        graded.append(GradedAnswer(
            questionId=question_id,
            questionText=question["questionText"],
            submittedAnswer=answer if answer is not None else NO_ANSWER,
            correctAnswer=question["correctAnswer"],
            isCorrect=is_correct,
        ))

    return GradeReport(score=score, totalQuestions=len(questions), submittedAnswers=graded)


async def submit_quiz_service(ctx: AppContext, quiz_id: str, answers: List[SubmittedAnswer]) -> dict:
    quiz_store = await ctx.get_quiz_store()
    quiz = await quiz_store.find_quiz(quiz_id)
    if not quiz:
        raise NotFound("Quiz not found.")

    report = grade_answers(quiz["questions"], answers)

    result_doc = {
        "quiz": quiz["_id"],
        "score": report.score,
        "totalQuestions": report.totalQuestions,
        "submittedAnswers": [
            {**item.model_dump(), "questionId": ObjectId(item.questionId)}
            for item in report.submittedAnswers
        ],
    }
    saved = await quiz_store.insert_result(result_doc)
    logger.info(f"Result {saved['_id']} saved for quiz {quiz['_id']}: {report.score}/{report.totalQuestions}")

    return {
        "message": "Quiz submitted successfully!",
        "resultId": str(saved["_id"]),
        "score": report.score,
        "totalQuestions": report.totalQuestions,
        "results": [item.model_dump() for item in report.submittedAnswers],
    }
