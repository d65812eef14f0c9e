from __future__ import annotations

from datetime import timedelta

import pytest

from debounce_cli.duration import DurationError, parse_duration


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1h", timedelta(hours=1)),
        ("15m", timedelta(minutes=15)),
        ("45s", timedelta(seconds=45)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5s", timedelta(seconds=1.5)),
        (".5m", timedelta(seconds=30)),
        ("300ms", timedelta(milliseconds=300)),
        ("2us", timedelta(microseconds=2)),
        ("2µs", timedelta(microseconds=2)),
        ("+5s", timedelta(seconds=5)),
        ("0", timedelta(0)),
        ("1500ns", timedelta(microseconds=1)),
    ],
)
def test_parse_duration(text: str, expected: timedelta) -> None:
    assert parse_duration(text) == expected


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("xyz", "invalid duration"),
        ("", "invalid duration"),
        ("h", "invalid duration"),
        ("1", "missing unit"),
        ("1d", "unknown unit"),
        ("1h2", "missing unit"),
        ("-1h", "must not be negative"),
        ("3000000h", "invalid duration"),
    ],
)
def test_parse_duration_rejects(text: str, message: str) -> None:
    with pytest.raises(DurationError) as excinfo:
        parse_duration(text)

    assert message in str(excinfo.value)


def test_duration_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_duration("soon")
