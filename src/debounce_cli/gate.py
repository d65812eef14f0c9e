"""Decide whether a command may run and record its successes."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Sequence

from .command import CommandRunner, CommandRunnerError, fingerprint
from .duration import parse_duration
from .storage import MarkerPayload, MarkerStore, Sweeper


@dataclass(slots=True, frozen=True)
class Invocation:
    """A command line paired with the cooldown it is debounced by."""

    cooldown: timedelta
    command: tuple[str, ...]
    fingerprint: str

    @classmethod
    def from_arguments(cls, duration: str, command: Sequence[str]) -> "Invocation":
        """Build an invocation from raw CLI text.

        Raises ``DurationError`` for a bad duration and ``IdentityError`` when
        the executable cannot be resolved.
        """

        cooldown = parse_duration(duration)
        return cls(cooldown=cooldown, command=tuple(command), fingerprint=fingerprint(command))

    def payload(self) -> MarkerPayload:
        return MarkerPayload.for_command(self.cooldown, self.command)


def _run_sync(coro):
    """Execute an async coroutine on a dedicated event loop."""

    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class Debouncer:
    """Run invocations whose cooldown has elapsed since their last success."""

    def __init__(
        self,
        store: MarkerStore,
        *,
        runner: CommandRunner | None = None,
        sweeper: Sweeper | None = None,
        should_sweep: Callable[[], bool] | None = None,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._runner = runner or CommandRunner()
        self._sweeper = sweeper or Sweeper(store)
        self._should_sweep = should_sweep or (lambda: False)
        self._clock = clock or store.now
        self._logger = logger or logging.getLogger(__name__)

    @property
    def store(self) -> MarkerStore:
        return self._store

    def is_runnable(self, fingerprint: str, cooldown: timedelta) -> bool:
        """True when more than ``cooldown`` has passed since the last success."""

        return self._clock() - self._store.read(fingerprint) > cooldown

    def run(self, invocation: Invocation) -> int:
        """Run ``invocation`` if it is due and return the exit status to report."""

        if not self.is_runnable(invocation.fingerprint, invocation.cooldown):
            self._logger.debug(
                "Skipping command still in cooldown",
                extra={"fingerprint": invocation.fingerprint, "command": list(invocation.command)},
            )
            return 0

        if self._should_sweep():
            self._sweeper.sweep()

        try:
            result = _run_sync(self._runner.run(invocation.command))
        except CommandRunnerError as exc:
            self._logger.error("%s", exc)
            return 1

        if result.ok:
            self._store.write(invocation.fingerprint, invocation.payload())
        else:
            self._logger.debug(
                "Command failed; cooldown not recorded",
                extra={"fingerprint": invocation.fingerprint, "returncode": result.returncode},
            )
        return result.exit_status


__all__ = ["Debouncer", "Invocation"]
