"""Pydantic models for quiz data structures."""

from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

DEFAULT_NUM_QUESTIONS = 5
OPTIONS_PER_QUESTION = 4


class QuestionDifficulty(str, Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Question(BaseModel):
    """A single multiple choice question with four options."""

    id: str = Field(..., min_length=1, description="Identifier, unique within a quiz")
    text: str = Field(..., min_length=5, description="The question text")
    options: list[str] = Field(
        ...,
        min_length=OPTIONS_PER_QUESTION,
        max_length=OPTIONS_PER_QUESTION,
        description="Exactly four answer options",
    )
    correct_index: int = Field(
        ...,
        ge=0,
        le=OPTIONS_PER_QUESTION - 1,
        alias="correctIndex",
        strict=True,
        description="Index of the correct option (0-3)",
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "id": "q1",
                "text": "What is the capital of France?",
                "options": ["London", "Paris", "Berlin", "Madrid"],
                "correctIndex": 1,
            }
        },
    }


class Quiz(BaseModel):
    """A generated quiz on a single topic.

    The expected question count is passed through the validation context
    (``{"num_questions": n}``); without it the default of five applies.
    """

    topic: str = Field(..., description="Quiz topic")
    questions: list[Question] = Field(..., description="Questions in order")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("questions", mode="before")
    @classmethod
    def validate_question_count(cls, v, info: ValidationInfo):
        """Check the count before any question is looked at."""
        expected = (info.context or {}).get("num_questions", DEFAULT_NUM_QUESTIONS)
        if isinstance(v, list) and len(v) != expected:
            raise ValueError(f"expected exactly {expected} questions, got {len(v)}")
        return v

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "Quiz":
        """Ensure question ids are unique."""
        seen: set[str] = set()
        for question in self.questions:
            if question.id in seen:
                raise ValueError(f"duplicate question id '{question.id}'")
            seen.add(question.id)
        return self

    @property
    def question_count(self) -> int:
        """Get the number of questions in this quiz."""
        return len(self.questions)

    def score(self, answers: Mapping[str, int]) -> int:
        """Count answers (question id -> chosen index) that are correct."""
        return sum(1 for q in self.questions if answers.get(q.id) == q.correct_index)


class FeedbackMessage(BaseModel):
    """Short personalised feedback after a finished quiz."""

    message: str = Field(..., min_length=5, description="Encouraging feedback text")

    model_config = {"frozen": True}


class QuizRequest(BaseModel):
    """Parameters for quiz generation."""

    topic: str = Field(..., min_length=1, description="Quiz topic")
    num_questions: int = Field(
        default=DEFAULT_NUM_QUESTIONS,
        ge=1,
        le=20,
        alias="numQuestions",
        description="Number of questions to generate",
    )
    difficulty: QuestionDifficulty = Field(
        default=QuestionDifficulty.MEDIUM,
        description="Question difficulty level",
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "topic": "Space Exploration",
                "numQuestions": 5,
                "difficulty": "medium",
            }
        },
    }

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v: str) -> str:
        """Clean and validate the topic."""
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("A non-blank topic is required")
        return cleaned


class FeedbackRequest(BaseModel):
    """Parameters for feedback generation."""

    topic: str = Field(..., min_length=1)
    score: int = Field(..., ge=0)
    total: int = Field(..., ge=1)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_score(self) -> "FeedbackRequest":
        if self.score > self.total:
            raise ValueError("score cannot exceed total")
        return self
