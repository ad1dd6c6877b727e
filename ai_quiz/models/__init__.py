"""Data models for quiz generation."""

from .quiz import (
    DEFAULT_NUM_QUESTIONS,
    FeedbackMessage,
    FeedbackRequest,
    Question,
    QuestionDifficulty,
    Quiz,
    QuizRequest,
)

__all__ = [
    "DEFAULT_NUM_QUESTIONS",
    "Question",
    "Quiz",
    "QuestionDifficulty",
    "FeedbackMessage",
    "QuizRequest",
    "FeedbackRequest",
]
