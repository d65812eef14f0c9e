"""Data models for persisted cooldown markers."""

from __future__ import annotations

from datetime import timedelta
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

_NANOSECONDS_PER_MICROSECOND = 1_000


def to_nanoseconds(value: timedelta) -> int:
    """Convert a timedelta into whole nanoseconds."""

    microseconds = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    return microseconds * _NANOSECONDS_PER_MICROSECOND


class MarkerPayload(BaseModel):
    """Content of a marker file: the cooldown and command it was written for."""

    model_config = ConfigDict(extra="ignore")

    cooldown_period: int = Field(
        ...,
        ge=0,
        description="Cooldown in effect when the marker was written, in nanoseconds.",
    )
    command: list[str] = Field(
        ...,
        min_length=1,
        description="Command line that completed successfully.",
    )

    @field_validator("command")
    @classmethod
    def _require_executable(cls, value: list[str]) -> list[str]:
        if not value[0]:
            raise ValueError("Marker command must name an executable")
        return value

    @property
    def cooldown(self) -> timedelta:
        return timedelta(microseconds=self.cooldown_period // _NANOSECONDS_PER_MICROSECOND)

    @classmethod
    def for_command(cls, cooldown: timedelta, command: Sequence[str]) -> "MarkerPayload":
        return cls(cooldown_period=to_nanoseconds(cooldown), command=list(command))


__all__ = ["MarkerPayload", "to_nanoseconds"]
