"""Environment-driven settings for errchain.

``ErrchainSettings`` holds the few knobs the package has: how its structlog
output is rendered and at which level. Values come from ``ERRCHAIN_*``
environment variables or a ``.env`` file.

Features:
    - **Pydantic validation:** ``log_level`` is checked and upper-cased
    - **env_prefix:** ``ERRCHAIN_LOG_LEVEL``, ``ERRCHAIN_JSON_LOGS``, ...
    - **Extra ignore:** Unknown env vars don't cause startup failures

Examples:
    >>> from errchain.core.settings import ErrchainSettings
    >>> ErrchainSettings(log_level="debug").log_level
    'DEBUG'

Tags:
    settings, configuration, pydantic, environment, errchain
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ErrchainSettings(BaseSettings):
    """Settings for errchain logging.

    Fields
    ──────
    log_level    : Structlog log level
    json_logs    : True for JSON, False for console, None to auto-detect (tty)
    service      : Service name stamped on every log line
    debug        : Shorthand that forces DEBUG level
    """

    model_config = SettingsConfigDict(
        env_prefix="ERRCHAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = Field(
        default=None,
        description="Render logs as JSON; None picks JSON when stdout is not a tty",
    )
    service: str = "errchain"
    debug: bool = False

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LEVELS)}")
        return level

    @property
    def effective_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


@lru_cache(maxsize=1)
def get_settings() -> ErrchainSettings:
    """Return the process-wide settings, loaded on first use."""
    return ErrchainSettings()


def reset_settings() -> None:
    """Forget cached settings so the next ``get_settings()`` re-reads the env."""
    get_settings.cache_clear()


__all__ = ["ErrchainSettings", "get_settings", "reset_settings"]
