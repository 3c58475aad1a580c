# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for cache location and logging. Every field can
be set from the environment with the ``SCW_`` prefix, e.g.
``SCW_CACHE_PATH`` or ``SCW_LOG_LEVEL``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scwcli.cache.persistence import default_cache_path


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file and SCW_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Cache ===
    cache_enabled: bool = True
    cache_path: Path | None = None

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Cross-field and filesystem consistency rules."""
        errors: list[str] = []

        if self.cache_path is not None and self.cache_path.expanduser().is_dir():
            errors.append(f"SCW_CACHE_PATH points to a directory: {self.cache_path}")

        if (
            self.log_file is not None
            and self.cache_path is not None
            and self.log_file.expanduser() == self.cache_path.expanduser()
        ):
            errors.append("SCW_LOG_FILE must differ from SCW_CACHE_PATH")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def resolved_cache_path(self) -> Path:
        """Configured cache file, or the per-user default."""
        if self.cache_path is None:
            return default_cache_path()
        return self.cache_path.expanduser()


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-command config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
