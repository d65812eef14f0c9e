"""Filesystem-backed store of cooldown markers."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from .models import MarkerPayload

NEVER = datetime.min.replace(tzinfo=timezone.utc)
"""Last-success time reported for commands that have no marker."""

_DIRECTORY_MODE = 0o700


class MarkerStore:
    """Map command fingerprints to files whose mtime records the last success.

    Reads never fail: a missing or unreadable marker means "never run". Writes
    are best effort and only log on failure, since losing a marker merely
    lets the next invocation run early.
    """

    def __init__(
        self,
        root: Path,
        *,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._root = Path(root)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._logger = logger or logging.getLogger(__name__)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, name: str) -> Path:
        return self._root / name

    def read(self, fingerprint: str) -> datetime:
        """Return when ``fingerprint`` last succeeded, or ``NEVER``."""

        try:
            stat = self.path_for(fingerprint).stat()
        except OSError:
            return NEVER
        return datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)

    def write(self, fingerprint: str, payload: MarkerPayload) -> bool:
        """Record a success for ``fingerprint`` now. Returns False on failure."""

        try:
            self._root.mkdir(mode=_DIRECTORY_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            self._logger.warning("debounce could not access %s: %s", self._root, exc)
            return False

        try:
            content = payload.model_dump_json()
        except ValueError as exc:
            self._logger.warning("debounce could not serialise %r: %s", payload, exc)
            return False

        try:
            self._replace(self.path_for(fingerprint), content)
        except OSError as exc:
            self._logger.warning("debounce could not write to %s: %s", self._root, exc)
            return False
        return True

    def _replace(self, target: Path, content: str) -> None:
        # mkstemp creates the file with mode 0o600.
        handle, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=self._root)
        try:
            with os.fdopen(handle, "w", encoding="utf-8") as stream:
                stream.write(content)
            os.replace(temp_name, target)
        except OSError:
            with contextlib.suppress(OSError):
                os.unlink(temp_name)
            raise

    def list_entries(self) -> list[os.DirEntry[str]]:
        """Return the entries of the store root sorted by name.

        Raises ``OSError`` when the directory cannot be read.
        """

        with os.scandir(self._root) as entries:
            return sorted(entries, key=lambda entry: entry.name)

    def read_payload(self, name: str) -> MarkerPayload:
        """Parse the marker called ``name``.

        Raises ``OSError`` or ``pydantic.ValidationError``.
        """

        content = self.path_for(name).read_bytes()
        return MarkerPayload.model_validate_json(content)

    def remove(self, name: str) -> None:
        self.path_for(name).unlink()

    def now(self) -> datetime:
        return self._clock()


__all__ = ["MarkerStore", "NEVER"]
