"""Parsing of duration expressions such as ``90s`` or ``1h30m``."""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation

_UNITS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3_600 * 1_000_000_000,
}

_MAX_NANOSECONDS = 2**63 - 1

_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)([^\d.]*)")


class DurationError(ValueError):
    """Raised when a duration expression cannot be parsed."""


def parse_duration(text: str) -> timedelta:
    """Parse a sequence of ``<number><unit>`` components into a timedelta.

    Units are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``; the
    bare literal ``0`` is also accepted. Negative durations are rejected and
    sub-microsecond precision is truncated.
    """

    remaining = text
    negative = False
    if remaining[:1] in ("+", "-"):
        negative = remaining[0] == "-"
        remaining = remaining[1:]

    if remaining == "0":
        return timedelta(0)
    if not remaining:
        raise DurationError(f"invalid duration {text!r}")

    total = Decimal(0)
    position = 0
    while position < len(remaining):
        match = _COMPONENT.match(remaining, position)
        if match is None:
            raise DurationError(f"invalid duration {text!r}")
        number, unit = match.groups()
        if not unit:
            raise DurationError(f"missing unit in duration {text!r}")
        if unit not in _UNITS:
            raise DurationError(f"unknown unit {unit!r} in duration {text!r}")
        try:
            total += Decimal(number) * _UNITS[unit]
        except InvalidOperation as exc:
            raise DurationError(f"invalid duration {text!r}") from exc
        position = match.end()

    nanoseconds = int(total)
    if nanoseconds > _MAX_NANOSECONDS:
        raise DurationError(f"invalid duration {text!r}")
    if negative and nanoseconds:
        raise DurationError(f"cooldown must not be negative: {text!r}")
    return timedelta(microseconds=nanoseconds // 1_000)


__all__ = ["DurationError", "parse_duration"]
