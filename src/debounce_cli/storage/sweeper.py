"""Opportunistic cleanup of expired cooldown markers."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from pydantic import ValidationError

from .markers import MarkerStore

DEFAULT_SWEEP_THRESHOLD = 20
DEFAULT_SWEEP_PROBABILITY = 0.01


@dataclass(slots=True)
class SweepReport:
    """Counts collected during one sweep."""

    scanned: int = 0
    removed: int = 0
    skipped: int = 0


class Sweeper:
    """Delete markers whose own recorded cooldown has elapsed.

    Small stores are left alone: scanning is only worth it once the root holds
    at least ``threshold`` entries. Every per-file failure is logged and
    skipped so one foreign or half-written file cannot stop the pass.
    """

    def __init__(
        self,
        store: MarkerStore,
        *,
        threshold: int = DEFAULT_SWEEP_THRESHOLD,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._threshold = threshold
        self._clock = clock or store.now
        self._logger = logger or logging.getLogger(__name__)

    def sweep(self) -> SweepReport:
        report = SweepReport()
        try:
            entries = self._store.list_entries()
        except FileNotFoundError:
            self._logger.debug("Marker store %s does not exist yet", self._store.root)
            return report
        except OSError as exc:
            self._logger.warning("Failed to read directory %s: %s", self._store.root, exc)
            return report

        if len(entries) < self._threshold:
            return report

        self._logger.info(
            "cleaning up expired cooldown markers",
            extra={"store": str(self._store.root), "entries": len(entries)},
        )

        for entry in entries:
            try:
                if entry.is_dir():
                    continue
                modified = datetime.fromtimestamp(entry.stat().st_mtime, tz=timezone.utc)
            except OSError as exc:
                self._logger.warning("cannot read info for %s: %s", entry.name, exc)
                report.skipped += 1
                continue

            report.scanned += 1
            try:
                payload = self._store.read_payload(entry.name)
            except OSError as exc:
                self._logger.warning("cannot read content of %s: %s", entry.name, exc)
                report.skipped += 1
                continue
            except ValidationError as exc:
                self._logger.warning(
                    "cannot understand the content of %s: %s", entry.name, exc.errors(include_url=False)
                )
                report.skipped += 1
                continue

            if self._clock() - modified > payload.cooldown:
                try:
                    self._store.remove(entry.name)
                except OSError as exc:
                    self._logger.warning("cannot delete %s: %s", entry.name, exc)
                    report.skipped += 1
                    continue
                report.removed += 1

        return report


def probabilistic_trigger(
    probability: float = DEFAULT_SWEEP_PROBABILITY,
    rng: random.Random | None = None,
) -> Callable[[], bool]:
    """Return a callable that answers "sweep now?" with the given probability."""

    source = rng or random.Random()

    def should_sweep() -> bool:
        return source.random() < probability

    return should_sweep


__all__ = [
    "DEFAULT_SWEEP_PROBABILITY",
    "DEFAULT_SWEEP_THRESHOLD",
    "SweepReport",
    "Sweeper",
    "probabilistic_trigger",
]
