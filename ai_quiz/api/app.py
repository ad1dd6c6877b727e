"""FastAPI application exposing quiz and feedback generation."""

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ai_quiz import __version__
from ai_quiz.config.settings import get_settings
from ai_quiz.generation.errors import GenerationFailed, MalformedResponse, SchemaViolation
from ai_quiz.generation.orchestrator import QuizGenerator
from ai_quiz.models.quiz import FeedbackRequest, QuizRequest

logger = logging.getLogger(__name__)

app = FastAPI(title="AI Quiz", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_generator() -> QuizGenerator:
    """Generator built once from the cached settings."""
    return QuizGenerator.from_settings(get_settings())


def error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def failure_response(error: GenerationFailed) -> JSONResponse:
    """502 when the model kept answering badly, 500 for everything else."""
    if isinstance(error.last_error, (MalformedResponse, SchemaViolation)):
        return error_response(502, f"AI returned malformed data: {error.last_error}")
    return error_response(500, str(error) or "Generation failed")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}


async def read_payload(request: Request) -> dict[str, Any] | None:
    """The JSON object sent as the request body, or None if there is none."""
    try:
        payload = await request.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def invalid_quiz_request(error: ValidationError) -> JSONResponse:
    """400 naming the topic when it is the field at fault."""
    details = error.errors(include_url=False, include_context=False)
    if any(item["loc"][:1] == ("topic",) for item in details):
        return error_response(400, "Invalid topic", details=details)
    return error_response(400, "Invalid payload", details=details)


@app.post("/api/quiz/generate")
async def generate_quiz(
    request: Request,
    generator: QuizGenerator = Depends(get_generator),
):
    """Generate a multiple choice quiz for a topic."""
    payload = await read_payload(request)
    if payload is None:
        return error_response(400, "Invalid payload")
    try:
        quiz_request = QuizRequest.model_validate(payload)
    except ValidationError as e:
        return invalid_quiz_request(e)

    try:
        quiz = await generator.generate_questions(quiz_request)
    except GenerationFailed as e:
        logger.error("Quiz generation failed for %r: %s", quiz_request.topic, e)
        return failure_response(e)

    return quiz.model_dump(by_alias=True)


@app.post("/api/quiz/feedback")
async def generate_feedback(
    request: Request,
    generator: QuizGenerator = Depends(get_generator),
):
    """Generate personalised feedback for a finished quiz."""
    payload = await read_payload(request)
    if payload is None:
        return error_response(400, "Invalid payload")
    try:
        feedback_request = FeedbackRequest.model_validate(payload)
    except ValidationError:
        return error_response(400, "Invalid payload")

    try:
        feedback = await generator.generate_feedback(feedback_request)
    except GenerationFailed as e:
        logger.error("Feedback generation failed for %r: %s", feedback_request.topic, e)
        return failure_response(e)

    return feedback.model_dump()
