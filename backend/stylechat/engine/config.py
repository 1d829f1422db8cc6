"""Edit engine configuration, passed explicitly into every edit call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stylechat.config import Settings

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_PROXY_PATH = "/api/anthropic/messages"
ANTHROPIC_VERSION = "2023-06-01"

# Cheap/fast tier; patch responses are small
DEFAULT_MODEL = "claude-3-5-haiku-latest"
PATCH_MAX_TOKENS = 4096
DEFAULT_TIMEOUT_SECONDS = 300.0

# Conversation turns sent with each request
HISTORY_WINDOW = 6


@dataclass
class EditConfig:
    """Where and how the edit engine talks to the model.

    ``api_url`` may be a same-origin relative path (the development proxy);
    such requests are sent to ``proxy_base_url`` and need no credential.
    """

    api_url: str = ANTHROPIC_MESSAGES_URL
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    max_tokens: int = PATCH_MAX_TOKENS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    proxy_base_url: str = "http://127.0.0.1:8000"
    anthropic_version: str = ANTHROPIC_VERSION

    @property
    def uses_proxy(self) -> bool:
        return self.api_url.startswith("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> EditConfig:
        api_url = settings.anthropic_api_url.strip()
        if not api_url:
            api_url = ANTHROPIC_PROXY_PATH if settings.is_development else ANTHROPIC_MESSAGES_URL
        return cls(
            api_url=api_url,
            api_key=settings.anthropic_api_key or None,
            model=settings.anthropic_model or DEFAULT_MODEL,
            proxy_base_url=settings.stylechat_proxy_base_url,
        )
