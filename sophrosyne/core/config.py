"""
Application configuration loader and it handles:
- Environment variables
- App settings
- Model configuration
- Credential resolution for the chat API

And, the main purpose:
Central place for system configuration. The journey client never reads
these globals itself; it receives a ClientConfig built from them.
"""


import os
from dataclasses import dataclass, field

from pydantic_settings import BaseSettings

API_KEY_ENV_VAR = "GROK_API_KEY"
API_KEY_PLACEHOLDER = "your_key_here"


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./sophrosyne.db"

    # LLM
    LLM_PROVIDER: str = "grok"  # grok | mock (for no-key dev)
    GROK_API_KEY: str = ""
    GROK_BASE_URL: str = "https://api.x.ai/v1"
    LLM_MODEL: str = "grok-3-mini"
    SCRIPTURE_TRANSLATION: str = "ESV"

    # Retry + transport
    MAX_ATTEMPTS: int = 3
    RETRY_DELAY_SECONDS: float = 1.0
    REQUEST_TIMEOUT_SECONDS: float = 40.0
    CONNECT_TIMEOUT_SECONDS: float = 10.0

    # Feedback + reminders
    LOW_RATING_THRESHOLD: int = 3
    REMINDER_HOUR: int = 8
    UPCOMING_VERSE_LIMIT: int = 7

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with a fixed pause between attempts (no growth, no jitter)."""

    max_attempts: int = 3
    delay_seconds: float = 1.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {self.delay_seconds}")


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    base_url: str = "https://api.x.ai/v1"
    model: str = "grok-3-mini"
    translation: str = "ESV"
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    timeout_seconds: float = 40.0
    connect_timeout_seconds: float = 10.0

    @property
    def chat_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"

    @property
    def is_api_key_configured(self) -> bool:
        return is_api_key_configured(self.api_key)


def resolve_api_key(packaged_value: str | None = None) -> str:
    """
    Resolve the chat API credential.

    Priority: process environment > packaged configuration (.env / settings)
    > placeholder.
    """
    env_key = os.environ.get(API_KEY_ENV_VAR, "")
    if env_key:
        return env_key
    if packaged_value is None:
        packaged_value = settings.GROK_API_KEY
    if packaged_value:
        return packaged_value
    return API_KEY_PLACEHOLDER


def is_api_key_configured(key: str) -> bool:
    return bool(key) and key != API_KEY_PLACEHOLDER


def mask_api_key(key: str) -> str:
    if len(key) <= 8:
        return "*" * len(key)
    return key[:4] + "*" * (len(key) - 8) + key[-4:]


def client_config_from_settings(s: Settings | None = None, api_key: str | None = None) -> ClientConfig:
    s = s or settings
    return ClientConfig(
        api_key=api_key or resolve_api_key(s.GROK_API_KEY),
        base_url=s.GROK_BASE_URL,
        model=s.LLM_MODEL,
        translation=s.SCRIPTURE_TRANSLATION,
        retry=RetryPolicy(max_attempts=s.MAX_ATTEMPTS, delay_seconds=s.RETRY_DELAY_SECONDS),
        timeout_seconds=s.REQUEST_TIMEOUT_SECONDS,
        connect_timeout_seconds=s.CONNECT_TIMEOUT_SECONDS,
    )
