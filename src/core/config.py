"""Application configuration using Pydantic Settings v2.

Loads configuration from environment variables with .env file support.
All settings are validated at startup and available as typed attributes.
"""

from __future__ import annotations

import functools
import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """BPEL2BPMN query settings.

    Configuration is loaded from environment variables.
    A .env file in the project root is also read if present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = "INFO"

    # ── BPEL semantics ───────────────────────────────────────────
    bpel_true_value: str = "yes"
    implicit_join_operator: str = " OR "
    strict_link_names: bool = True  # False: skip source/target without linkName

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Upper-case the level name and reject names logging does not know."""
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("bpel_true_value")
    @classmethod
    def check_true_value(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("bpel_true_value must not be blank")
        return v.strip()

    @field_validator("implicit_join_operator")
    @classmethod
    def check_join_operator(cls, v: str) -> str:
        """Reject an empty operator; surrounding whitespace is kept as given."""
        if not v:
            raise ValueError("implicit_join_operator must not be empty")
        return v


@functools.lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Install the root log handler at the configured level."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=LOG_FORMAT,
    )
