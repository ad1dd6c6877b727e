"""LLM backends behind one ``generate(prompt) -> text`` interface.

Two kinds exist: a local Ollama service called over its HTTP API, and the
hosted Gemini models called through LangChain. Each call is independent;
no client or session outlives it.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

import httpx
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from ai_quiz.generation.errors import ProviderUnavailable

logger = logging.getLogger(__name__)

# Tried in order after the configured preferred model
GEMINI_FALLBACK_MODELS = (
    "gemini-2.0-flash",
    "gemini-1.5-flash",
    "gemini-1.5-flash-latest",
    "gemini-1.5-pro",
)

_MODEL_UNAVAILABLE_MARKERS = (
    "not found",
    "not_found",
    "is not supported for",
    "not supported for this model",
    "unsupported model",
)


class Backend(ABC):
    """A generative model service that turns a prompt into raw text."""

    name: str = "backend"

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Return the model's raw text reply.

        Raises:
            ProviderUnavailable: If the service cannot produce a reply
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class OllamaBackend(Backend):
    """Locally hosted model served by Ollama's ``/api/generate`` endpoint."""

    name = "ollama"

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1",
        json_mode: bool = True,
        timeout: float | None = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.json_mode = json_mode
        self.timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/api/generate"

    def build_payload(self, prompt: str) -> dict[str, Any]:
        payload: dict[str, Any] = {"model": self.model, "prompt": prompt, "stream": False}
        if self.json_mode:
            payload["format"] = "json"
        return payload

    async def generate(self, prompt: str) -> str:
        payload = self.build_payload(prompt)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise ProviderUnavailable(f"request to {self.endpoint} timed out", backend=self.name) from e
        except httpx.RequestError as e:
            raise ProviderUnavailable(f"cannot reach {self.endpoint}: {e}", backend=self.name) from e

        if not resp.is_success:
            body = resp.text[:200]
            raise ProviderUnavailable(f"HTTP {resp.status_code}: {body}", backend=self.name)

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderUnavailable("response body is not JSON", backend=self.name) from e

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise ProviderUnavailable("response has no text field", backend=self.name)

        logger.debug("Ollama %s returned %d characters", self.model, len(text))
        return text


def is_model_unavailable(error: Exception) -> bool:
    """
    Tell whether a remote error means "try the next model".

    Model-not-found (404) and model-does-not-support-this-operation errors
    qualify. Anything else, such as a bad API key or an exhausted quota,
    does not.
    """
    code = getattr(error, "code", None) or getattr(error, "status_code", None)
    if code == 404:
        return True
    text = str(error).lower()
    if "404" in text and "model" in text:
        return True
    return any(marker in text for marker in _MODEL_UNAVAILABLE_MARKERS)


def candidate_models(preferred: str | None, fallbacks: Sequence[str] = GEMINI_FALLBACK_MODELS) -> list[str]:
    """Preferred model first, then the fallbacks, without duplicates."""
    ordered = [preferred] if preferred else []
    ordered.extend(fallbacks)
    models: list[str] = []
    for model in ordered:
        if model not in models:
            models.append(model)
    return models


def message_text(content: Any) -> str:
    """Flatten LangChain message content (a string or a list of parts)."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return str(content)


class GeminiBackend(Backend):
    """Hosted Gemini models, tried in order until one accepts the request."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        preferred_model: str | None = None,
        fallback_models: Sequence[str] = GEMINI_FALLBACK_MODELS,
        temperature: float = 0.7,
        model_factory: Callable[[str], BaseChatModel] | None = None,
    ):
        self.api_key = api_key
        self.models = candidate_models(preferred_model, fallback_models)
        self.temperature = temperature
        self._model_factory = model_factory or self._create_chat_model

    def _create_chat_model(self, model_name: str) -> BaseChatModel:
        return ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=self.api_key,
            temperature=self.temperature,
            max_retries=1,
        )

    async def generate(self, prompt: str) -> str:
        last_error: Exception | None = None

        for model_name in self.models:
            try:
                llm = self._model_factory(model_name)
                response = await llm.ainvoke([HumanMessage(content=prompt)])
            except Exception as e:
                if not is_model_unavailable(e):
                    # auth, quota and the like: stop here
                    raise ProviderUnavailable(f"{model_name}: {e}", backend=self.name) from e
                logger.warning("Gemini model %s unavailable, trying next: %s", model_name, e)
                last_error = e
                continue

            text = message_text(response.content)
            logger.debug("Gemini %s returned %d characters", model_name, len(text))
            return text

        raise ProviderUnavailable(
            f"no usable model among {', '.join(self.models)}: {last_error}",
            backend=self.name,
        )
