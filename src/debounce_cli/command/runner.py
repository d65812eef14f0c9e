"""Async runner for the wrapped command."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Iterable, Sequence


class CommandRunnerError(RuntimeError):
    """Base class for command runner errors."""


class CommandLaunchError(CommandRunnerError):
    """Raised when the command process cannot be started at all."""


@dataclass(slots=True)
class CommandExecutionResult:
    """Holds the outcome of a wrapped command invocation."""

    args: tuple[str, ...]
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def exit_status(self) -> int:
        """Exit status to propagate; signal deaths map to ``128 + signum``."""

        if self.returncode < 0:
            return 128 - self.returncode
        return self.returncode


class CommandRunner:
    """Execute a command with its output passed straight through."""

    async def run(self, command: Sequence[str]) -> CommandExecutionResult:
        return await self._invoke(*command)

    async def _invoke(self, *args: str) -> CommandExecutionResult:
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=None,
                stderr=None,
                env=dict(os.environ),
            )
        except OSError as exc:
            raise CommandLaunchError(f"cannot start {args[0]!r}: {exc}") from exc
        returncode = await process.wait()
        return CommandExecutionResult(args=tuple(args), returncode=returncode)


class FakeCommandRunner(CommandRunner):
    """Test double that records commands instead of spawning them."""

    def __init__(self, responses: Iterable[CommandExecutionResult | int] | None = None) -> None:
        self._responses = list(responses or [])
        self._invocations: list[tuple[str, ...]] = []

    async def _invoke(self, *args: str) -> CommandExecutionResult:  # type: ignore[override]
        self._invocations.append(tuple(args))
        if self._responses:
            response = self._responses.pop(0)
            if isinstance(response, int):
                return CommandExecutionResult(args=tuple(args), returncode=response)
            return response
        return CommandExecutionResult(args=tuple(args), returncode=0)

    @property
    def invocations(self) -> list[tuple[str, ...]]:
        return self._invocations


__all__ = [
    "CommandExecutionResult",
    "CommandLaunchError",
    "CommandRunner",
    "CommandRunnerError",
    "FakeCommandRunner",
]
