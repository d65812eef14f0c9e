"""Command-line entry point: ``debounce <duration> <executable> [args...]``."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from pydantic import ValidationError

from . import __version__
from .command import IdentityError
from .config import DebounceSettings, get_settings
from .duration import DurationError
from .gate import Debouncer, Invocation
from .storage import MarkerStore, Sweeper, probabilistic_trigger

logger = logging.getLogger(__name__)


class UsageError(ValueError):
    """Raised for malformed command-line arguments."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise UsageError(message)


def configure_logging(level: str) -> None:
    """Configure root logging for the debounce CLI."""

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="debounce",
        description=(
            "Run a command unless it already completed successfully within the "
            "given cooldown period."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("duration", help="Cooldown period, e.g. 30s, 15m, 1h30m")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Executable and its arguments")
    return parser


def build_debouncer(settings: DebounceSettings) -> Debouncer:
    """Wire a Debouncer from settings; raises ``RuntimeError`` without a home directory."""

    store = MarkerStore(settings.resolved_state_dir())
    return Debouncer(
        store,
        sweeper=Sweeper(store, threshold=settings.sweep_threshold),
        should_sweep=probabilistic_trigger(settings.sweep_probability),
    )


def main(argv: Sequence[str] | None = None, *, settings: DebounceSettings | None = None) -> int:
    """Entry point for the ``debounce`` console script. Returns the exit status."""

    try:
        settings = settings or get_settings()
    except ValidationError as exc:
        configure_logging("WARNING")
        logger.error("debounce: invalid configuration: %s", exc)
        return 1
    configure_logging(settings.log_level)

    try:
        args = build_parser().parse_args(argv)
        if not args.command:
            raise UsageError(
                "not enough arguments (first provide the cooldown value, "
                "followed by the command and its arguments)"
            )
        invocation = Invocation.from_arguments(args.duration, args.command)
    except (UsageError, DurationError, IdentityError) as exc:
        logger.error("debounce: %s", exc)
        return 1

    try:
        debouncer = build_debouncer(settings)
    except RuntimeError as exc:
        logger.error("debounce: cannot determine the state directory: %s", exc)
        return 1

    return debouncer.run(invocation)


__all__ = ["UsageError", "build_debouncer", "build_parser", "configure_logging", "main"]
