"""Application settings and configuration."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file if present
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Local model (Ollama)
    ollama_base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL of the local Ollama service",
        validation_alias="OLLAMA_BASE_URL",
    )
    ollama_model: str = Field(
        default="llama3.1",
        description="Model name served by Ollama",
        validation_alias="OLLAMA_MODEL",
    )
    ollama_enabled: bool = Field(
        default=True,
        description="Try the local model before any remote backend",
        validation_alias="OLLAMA_ENABLED",
    )

    # Remote model (Gemini). No key means the backend is left out entirely.
    gemini_api_key: str | None = Field(
        default=None,
        description="Google Gemini API key (optional)",
        validation_alias="GEMINI_API_KEY",
    )
    gemini_model: str | None = Field(
        default=None,
        description="Preferred Gemini model, tried before the built-in fallbacks",
        validation_alias="GEMINI_MODEL",
    )

    # Generation Settings
    generation_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Temperature for remote generation",
        validation_alias="GENERATION_TEMPERATURE",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per backend before falling back",
        validation_alias="MAX_ATTEMPTS",
    )
    retry_delay: float = Field(
        default=0.25,
        ge=0.0,
        description="Seconds multiplied by the attempt number between quiz attempts",
        validation_alias="RETRY_DELAY",
    )
    attempt_timeout: float = Field(
        default=60.0,
        ge=0.0,
        description="Per-attempt deadline in seconds (0 disables it)",
        validation_alias="ATTEMPT_TIMEOUT",
    )

    # Server / logging
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=4000, ge=1, le=65535, validation_alias="PORT")
    log_level: str = Field(
        default="INFO",
        description="Root log level",
        validation_alias="LOG_LEVEL",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Loaded the first time and then cached for the CLI and API
@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with loaded configuration
    """
    return Settings()
