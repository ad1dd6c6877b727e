"""Errors raised while generating quiz content with an LLM backend.

Transient errors (``ProviderUnavailable``, ``MalformedResponse``,
``SchemaViolation``) are retried by the orchestrator. ``GenerationFailed``
and its subclasses are terminal and reach the caller.
"""

from typing import Any


class QuizGenerationError(Exception):
    """Base class for all generation errors."""

    def __init__(self, message: str, backend: str | None = None):
        super().__init__(message)
        self.message = message
        self.backend = backend

    def __str__(self) -> str:
        if self.backend:
            return f"[{self.backend}] {self.message}"
        return self.message


class ProviderUnavailable(QuizGenerationError):
    """Transport failure, timeout or non-success status from a backend."""


class MalformedResponse(QuizGenerationError):
    """The backend replied but no JSON object could be recovered."""


class SchemaViolation(QuizGenerationError):
    """Decoded JSON that breaks the quiz or feedback contract."""

    def __init__(self, message: str, location: str = "", backend: str | None = None):
        super().__init__(message, backend=backend)
        self.location = location


class GenerationFailed(QuizGenerationError):
    """Terminal failure: no validated result could be produced."""

    def __init__(
        self,
        message: str,
        last_error: Exception | None = None,
        attempts: list[Any] | None = None,
    ):
        super().__init__(message)
        self.last_error = last_error
        self.attempts = attempts or []


class AllProvidersExhausted(GenerationFailed):
    """Every configured backend used up its retry budget."""


class NotConfigured(GenerationFailed):
    """No backend is configured, so nothing was attempted."""
