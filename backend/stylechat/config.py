"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    anthropic_api_url: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"
    anthropic_proxy_timeout_ms: int = 300_000

    stylechat_env: str = "development"
    stylechat_log_level: str = "debug"

    # Base URL used to reach our own proxy route when the endpoint is relative
    stylechat_proxy_base_url: str = "http://127.0.0.1:8000"

    # CORS
    cors_origins: list[str] = ["http://localhost:8888"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_development(self) -> bool:
        return self.stylechat_env.strip().lower() in ("development", "dev", "local")


settings = Settings()
