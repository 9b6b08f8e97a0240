"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="KWIK_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "KwikMaps Route Optimizer API"
    api_prefix: str = "/api"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    max_waypoints: int = Field(
        default=300,
        ge=2,
        description="Upper bound on waypoints per optimization request (2-opt is O(N^3) worst case).",
    )
    two_opt_wrap_boundary: bool = Field(
        default=True,
        description="Score 2-opt moves on the last edge against the first waypoint (virtual closing edge).",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Chat-completions provider (Groq, OpenAI compatible)
    groq_api_key: Optional[str] = Field(
        default=None,
        description="API key for the chat-completions provider. Insights are disabled when unset.",
    )
    groq_base_url: str = Field(default="https://api.groq.com/openai/v1")
    groq_model: str = Field(default="llama-3.3-70b-versatile")
    llm_timeout_seconds: float = Field(default=60.0, gt=0.0)
    llm_max_retries: int = Field(default=1, ge=0)
    llm_backoff_seconds: float = Field(default=1.0, ge=0.0)
    insights_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    insights_max_tokens: int = Field(default=3000, ge=1)
    chat_temperature: float = Field(default=0.6, ge=0.0, le=2.0)
    chat_max_tokens: int = Field(default=2000, ge=1)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        # Return empty tuple if value is None or empty
        return tuple()

    @property
    def insights_configured(self) -> bool:
        return bool(self.groq_api_key)


settings = Settings()
