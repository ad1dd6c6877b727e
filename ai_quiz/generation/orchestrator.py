"""Generation orchestrator: retries and backend fallback."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from ai_quiz.config.settings import Settings
from ai_quiz.generation.errors import (
    AllProvidersExhausted,
    MalformedResponse,
    NotConfigured,
    ProviderUnavailable,
    QuizGenerationError,
    SchemaViolation,
)
from ai_quiz.generation.extractor import extract_json
from ai_quiz.generation.prompts import build_feedback_prompt, build_quiz_prompt
from ai_quiz.generation.providers import Backend, GeminiBackend, OllamaBackend
from ai_quiz.generation.schema import validate_feedback, validate_quiz
from ai_quiz.models.quiz import FeedbackMessage, FeedbackRequest, Quiz, QuizRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS = (ProviderUnavailable, MalformedResponse, SchemaViolation)


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of one backend call plus extraction and validation."""

    backend: str
    attempt: int
    value: Any = None
    error: QuizGenerationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class QuizGenerator:
    """
    Produce validated quizzes and feedback from an ordered list of backends.

    Backends are tried strictly in order. Each gets ``max_attempts`` tries
    before the next one is used; only when every backend has used up its
    budget does generation fail.
    """

    def __init__(
        self,
        backends: Sequence[Backend],
        max_attempts: int = 3,
        retry_delay: float = 0.25,
        attempt_timeout: float | None = None,
    ):
        self.backends = list(backends)
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.attempt_timeout = attempt_timeout or None

    @classmethod
    def from_settings(cls, settings: Settings) -> "QuizGenerator":
        """
        Build the backend list from configuration.

        Ollama comes first when enabled; Gemini is only added when an API
        key is configured.
        """
        timeout = settings.attempt_timeout or None
        backends: list[Backend] = []
        if settings.ollama_enabled:
            backends.append(
                OllamaBackend(
                    base_url=settings.ollama_base_url,
                    model=settings.ollama_model,
                    timeout=timeout,
                )
            )
        if settings.gemini_api_key:
            backends.append(
                GeminiBackend(
                    api_key=settings.gemini_api_key,
                    preferred_model=settings.gemini_model,
                    temperature=settings.generation_temperature,
                )
            )
        return cls(
            backends,
            max_attempts=settings.max_attempts,
            retry_delay=settings.retry_delay,
            attempt_timeout=timeout,
        )

    @property
    def backend_names(self) -> list[str]:
        return [backend.name for backend in self.backends]

    async def generate_questions(self, request: QuizRequest) -> Quiz:
        """
        Generate a validated quiz.

        Args:
            request: Topic, question count and difficulty

        Returns:
            Quiz with exactly ``request.num_questions`` questions

        Raises:
            NotConfigured: If no backend is configured
            AllProvidersExhausted: If every attempt on every backend failed
        """
        prompt = build_quiz_prompt(request)
        return await self._run(
            "questions",
            prompt,
            lambda obj: validate_quiz(obj, request.num_questions),
            retry_delay=self.retry_delay,
        )

    async def generate_feedback(self, request: FeedbackRequest) -> FeedbackMessage:
        """Generate a short feedback message for a finished quiz."""
        prompt = build_feedback_prompt(request)
        return await self._run("feedback", prompt, validate_feedback, retry_delay=0.0)

    async def _run(
        self,
        kind: str,
        prompt: str,
        validate: Callable[[Any], T],
        retry_delay: float,
    ) -> T:
        if not self.backends:
            raise NotConfigured(f"No LLM backend configured for {kind} generation")

        attempts: list[AttemptResult] = []
        for backend in self.backends:
            for attempt in range(1, self.max_attempts + 1):
                result = await self._attempt(backend, attempt, prompt, validate)
                attempts.append(result)
                if result.ok:
                    logger.info("Generated %s with %s on attempt %d", kind, backend.name, attempt)
                    return result.value

                logger.warning(
                    "%s attempt %d/%d for %s failed: %s",
                    backend.name,
                    attempt,
                    self.max_attempts,
                    kind,
                    result.error,
                )
                if attempt < self.max_attempts and retry_delay > 0:
                    await asyncio.sleep(retry_delay * attempt)

            logger.warning("Backend %s exhausted for %s generation", backend.name, kind)

        last_error = attempts[-1].error
        raise AllProvidersExhausted(
            f"Failed to generate valid {kind} with any backend: {last_error}",
            last_error=last_error,
            attempts=attempts,
        )

    async def _attempt(
        self,
        backend: Backend,
        attempt: int,
        prompt: str,
        validate: Callable[[Any], T],
    ) -> AttemptResult:
        try:
            text = await self._call(backend, prompt)
            value = validate(extract_json(text))
        except RETRYABLE_ERRORS as e:
            if e.backend is None:
                e.backend = backend.name
            return AttemptResult(backend=backend.name, attempt=attempt, error=e)
        return AttemptResult(backend=backend.name, attempt=attempt, value=value)

    async def _call(self, backend: Backend, prompt: str) -> str:
        if self.attempt_timeout is None:
            return await backend.generate(prompt)
        try:
            return await asyncio.wait_for(backend.generate(prompt), timeout=self.attempt_timeout)
        except asyncio.TimeoutError as e:
            raise ProviderUnavailable(
                f"no reply within {self.attempt_timeout:g}s", backend=backend.name
            ) from e
