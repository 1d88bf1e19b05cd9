"""Configuration management for Murmur."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ApiKeyNotConfiguredError, InvalidEndpointError, InvalidModelFormatError, ModelNotConfiguredError

DEFAULT_MODEL = "groq:llama3-70b-8192"
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Answer questions clearly and concisely in 1–2 sentences. "
    "Be direct and avoid unnecessary elaboration."
)
DEFAULT_ENDPOINT = "http://127.0.0.1:8000/api/chat"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="MURMUR_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Upstream provider
    model: str = Field(default=DEFAULT_MODEL, description="Model in provider:model form")
    api_key: str | None = Field(default=None, description="API key for the LLM provider")
    api_base: str | None = Field(default=None, description="Optional API base URL")
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, description="Fixed persona preamble")
    max_tokens: int = Field(default=500, ge=1, description="Maximum output tokens per reply")

    # Chat endpoint client
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="URL of the POST /api/chat endpoint")
    request_timeout_seconds: float | None = Field(
        default=None, description="Transport timeout for endpoint calls; unset waits indefinitely"
    )

    # Widget timing
    typing_interval_ms: int = Field(default=30, ge=0, description="Delay between revealed characters")
    thinking_delay_seconds: float = Field(default=2.0, ge=0, description="Simulated thinking time in offline mode")

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    log_level: str = Field(default="INFO", description="Log level")

    @property
    def provider(self) -> str:
        provider, _, _ = self.model.partition(":")
        return provider

    @property
    def resolved_api_key(self) -> str | None:
        """Return the configured key, falling back to the provider's conventional variable."""
        if self.api_key:
            return self.api_key
        if not self.provider:
            return None
        return os.getenv(f"{self.provider.upper()}_API_KEY") or None

    @property
    def typing_interval(self) -> float:
        return self.typing_interval_ms / 1000

    def require_upstream(self) -> None:
        """Validate the settings needed to reach the model provider directly."""
        if not self.model.strip():
            raise ModelNotConfiguredError("Model not configured. Set MURMUR_MODEL (e.g., 'groq:llama3-70b-8192').")
        provider, separator, name = self.model.partition(":")
        if not separator or not provider or not name:
            raise InvalidModelFormatError(f"Model must use provider:model format, got {self.model!r}.")
        if not self.resolved_api_key:
            raise ApiKeyNotConfiguredError(
                f"API key not configured. Set MURMUR_API_KEY or {provider.upper()}_API_KEY in your environment."
            )

    def require_endpoint(self) -> None:
        if not self.endpoint.startswith(("http://", "https://")):
            raise InvalidEndpointError(f"Endpoint must be an http(s) URL, got {self.endpoint!r}.")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load settings once per process from the environment and .env file."""
    return Settings()
