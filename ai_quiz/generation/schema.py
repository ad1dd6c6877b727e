"""Validate decoded model output against the quiz and feedback contracts."""

from typing import Any

from pydantic import ValidationError

from ai_quiz.generation.errors import SchemaViolation
from ai_quiz.models.quiz import DEFAULT_NUM_QUESTIONS, FeedbackMessage, Quiz


def validate_quiz(obj: Any, num_questions: int = DEFAULT_NUM_QUESTIONS) -> Quiz:
    """
    Build a Quiz from decoded JSON.

    Checks run in a fixed order: topic, question count, then each question's
    id, text, options and correctIndex, then id uniqueness. All structural
    checks run; the raised error names the first violation found.

    Args:
        obj: Decoded JSON value
        num_questions: Exact number of questions required

    Returns:
        Validated Quiz

    Raises:
        SchemaViolation: If the value breaks the contract
    """
    if not isinstance(obj, dict):
        raise SchemaViolation(f"expected a JSON object, got {type(obj).__name__}")

    try:
        return Quiz.model_validate(obj, context={"num_questions": num_questions})
    except ValidationError as e:
        raise to_schema_violation(e, obj) from e


def validate_feedback(obj: Any) -> FeedbackMessage:
    """Build a FeedbackMessage from decoded JSON."""
    if not isinstance(obj, dict):
        raise SchemaViolation(f"expected a JSON object, got {type(obj).__name__}")

    try:
        return FeedbackMessage.model_validate(obj)
    except ValidationError as e:
        raise to_schema_violation(e, obj) from e


def to_schema_violation(error: ValidationError, obj: dict[str, Any]) -> SchemaViolation:
    """Describe the first pydantic error, naming the question it belongs to."""
    first = error.errors()[0]
    loc = first["loc"]
    location = format_location(loc)

    subject = location or "value"
    if len(loc) >= 2 and loc[0] == "questions" and isinstance(loc[1], int):
        question_id = question_id_at(obj, loc[1])
        field = ".".join(str(part) for part in loc[2:])
        subject = f"question {loc[1] + 1}"
        if question_id:
            subject += f" (id '{question_id}')"
        if field:
            subject += f" field '{field}'"

    message = f"{subject}: {first['msg']}"
    return SchemaViolation(message, location=location)


def format_location(loc: tuple) -> str:
    """Render a pydantic error location as ``questions[2].options``."""
    parts: list[str] = []
    for part in loc:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        else:
            parts.append(f".{part}" if parts else str(part))
    return "".join(parts)


def question_id_at(obj: dict[str, Any], index: int) -> str | None:
    questions = obj.get("questions")
    if isinstance(questions, list) and 0 <= index < len(questions):
        item = questions[index]
        if isinstance(item, dict) and isinstance(item.get("id"), str):
            return item["id"]
    return None
