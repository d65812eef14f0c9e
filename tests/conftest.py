from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from debounce_cli.storage import MarkerStore


class MovableClock:
    """Wall clock that tests can push forward."""

    def __init__(self) -> None:
        self.offset = timedelta(0)

    def advance(self, delta: timedelta) -> None:
        self.offset += delta

    def __call__(self) -> datetime:
        return datetime.now(timezone.utc) + self.offset


@pytest.fixture
def clock() -> MovableClock:
    return MovableClock()


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    return tmp_path / "state"


@pytest.fixture
def store(state_dir: Path, clock: MovableClock) -> MarkerStore:
    return MarkerStore(state_dir, clock=clock)


@pytest.fixture
def make_script(tmp_path: Path):
    def _make(name: str, body: str = "exit 0") -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        script.chmod(0o755)
        return script

    return _make
