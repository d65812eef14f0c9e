"""Configuration management for debounce."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_state_dir() -> Path:
    """Return ``~/.config/debounce``; raises ``RuntimeError`` without a home directory."""

    return Path.home() / ".config" / "debounce"


class DebounceSettings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    state_dir: Path | None = Field(default=None, validation_alias="DEBOUNCE_STATE_DIR")
    log_level: str = Field(default="WARNING", validation_alias="DEBOUNCE_LOG_LEVEL")
    sweep_probability: float = Field(default=0.01, validation_alias="DEBOUNCE_SWEEP_PROBABILITY")
    sweep_threshold: int = Field(default=20, validation_alias="DEBOUNCE_SWEEP_THRESHOLD")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "DEBOUNCE_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("state_dir", mode="before")
    @classmethod
    def _parse_state_dir(cls, value):
        if value is None or value == "":
            return None
        return Path(str(value)).expanduser()

    @field_validator("sweep_probability")
    @classmethod
    def _validate_sweep_probability(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("DEBOUNCE_SWEEP_PROBABILITY must be between 0 and 1")
        return value

    @field_validator("sweep_threshold")
    @classmethod
    def _validate_sweep_threshold(cls, value: int) -> int:
        if value < 0:
            raise ValueError("DEBOUNCE_SWEEP_THRESHOLD must be >= 0")
        return value

    def resolved_state_dir(self) -> Path:
        """Return the marker store root, falling back to the home directory default."""

        return self.state_dir if self.state_dir is not None else default_state_dir()


@lru_cache(maxsize=1)
def get_settings() -> DebounceSettings:
    """Return cached settings instance."""

    return DebounceSettings()


__all__ = ["DebounceSettings", "default_state_dir", "get_settings"]
