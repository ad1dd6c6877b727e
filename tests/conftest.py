"""Shared test fixtures and configuration for pytest."""

import json
from typing import Any

import pytest

from ai_quiz.generation.providers import Backend
from ai_quiz.models.quiz import Quiz


class ScriptedBackend(Backend):
    """Backend that plays back canned replies; exceptions in the script are raised."""

    def __init__(self, name: str, replies: list[Any]):
        self.name = name
        self.replies = list(replies)
        self.prompts: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError(f"{self.name} called more often than scripted")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def scripted_backend():
    """Factory for ScriptedBackend instances."""
    return ScriptedBackend


@pytest.fixture
def quiz_payload() -> dict[str, Any]:
    """A well-formed five question quiz as a model would return it."""
    return {
        "topic": "Space Exploration",
        "questions": [
            {
                "id": "q1",
                "text": "Which mission first landed humans on the Moon?",
                "options": ["Apollo 8", "Apollo 11", "Gemini 4", "Vostok 1"],
                "correctIndex": 1,
            },
            {
                "id": "q2",
                "text": "Who was the first person in space?",
                "options": ["Yuri Gagarin", "Alan Shepard", "John Glenn", "Valentina Tereshkova"],
                "correctIndex": 0,
            },
            {
                "id": "q3",
                "text": "Which planet did the Curiosity rover land on?",
                "options": ["Venus", "Mercury", "Mars", "Jupiter"],
                "correctIndex": 2,
            },
            {
                "id": "q4",
                "text": "What does ISS stand for?",
                "options": [
                    "Interstellar Shuttle System",
                    "Internal Space Station",
                    "International Satellite Service",
                    "International Space Station",
                ],
                "correctIndex": 3,
            },
            {
                "id": "q5",
                "text": "Which telescope launched in 2021 observes mainly in infrared?",
                "options": ["James Webb", "Hubble", "Kepler", "Spitzer"],
                "correctIndex": 0,
            },
        ],
    }


@pytest.fixture
def quiz_json(quiz_payload: dict[str, Any]) -> str:
    """The quiz payload serialised as a model reply."""
    return json.dumps(quiz_payload)


@pytest.fixture
def sample_quiz(quiz_payload: dict[str, Any]) -> Quiz:
    """A validated Quiz built from the payload."""
    return Quiz.model_validate(quiz_payload)


@pytest.fixture
def feedback_json() -> str:
    return json.dumps({"message": "Great job! Review orbital mechanics next."})


SETTINGS_ENV_VARS = [
    "OLLAMA_BASE_URL",
    "OLLAMA_MODEL",
    "OLLAMA_ENABLED",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GENERATION_TEMPERATURE",
    "MAX_ATTEMPTS",
    "RETRY_DELAY",
    "ATTEMPT_TIMEOUT",
    "HOST",
    "PORT",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove settings variables that may leak in from the shell or a .env file."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
