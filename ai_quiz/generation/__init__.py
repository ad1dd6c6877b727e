"""LLM generation: backends, JSON recovery, validation and retry policy."""

from .errors import (
    AllProvidersExhausted,
    GenerationFailed,
    MalformedResponse,
    NotConfigured,
    ProviderUnavailable,
    QuizGenerationError,
    SchemaViolation,
)
from .extractor import extract_json
from .orchestrator import AttemptResult, QuizGenerator
from .providers import Backend, GeminiBackend, OllamaBackend
from .schema import validate_feedback, validate_quiz

__all__ = [
    "QuizGenerator",
    "AttemptResult",
    "Backend",
    "OllamaBackend",
    "GeminiBackend",
    "extract_json",
    "validate_quiz",
    "validate_feedback",
    "QuizGenerationError",
    "ProviderUnavailable",
    "MalformedResponse",
    "SchemaViolation",
    "GenerationFailed",
    "AllProvidersExhausted",
    "NotConfigured",
]
