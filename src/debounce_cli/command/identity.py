"""Stable identity for a command line."""

from __future__ import annotations

import hashlib
import os
import shutil
from pathlib import Path
from typing import Sequence


class IdentityError(RuntimeError):
    """Base class for errors raised while deriving a command identity."""


class ResolutionError(IdentityError):
    """Raised when the executable cannot be located on the search path."""


class PathError(IdentityError):
    """Raised when the executable path cannot be made absolute."""


def _follow_symlinks(reference: str) -> str:
    # Bare names stay bare so they are looked up on PATH like the executor does.
    if os.sep not in reference and (os.altsep is None or os.altsep not in reference):
        return reference
    try:
        return str(Path(reference).resolve(strict=True))
    except (OSError, RuntimeError):
        return reference


def resolve_executable(reference: str) -> str:
    """Return the absolute path of the executable ``reference`` names."""

    candidate = _follow_symlinks(reference)
    located = shutil.which(candidate)
    if located is None:
        raise ResolutionError(f"executable file not found in $PATH: {reference!r}")
    try:
        return os.path.abspath(located)
    except OSError as exc:
        raise PathError(f"{reference!r} could not be resolved to an absolute path") from exc


def fingerprint(command_line: Sequence[str]) -> str:
    """Return the hex SHA-256 identity of a command line.

    The digest covers the resolved executable path followed by the raw bytes
    of every argument, so aliases and symlinks of one program share an
    identity. Arguments are concatenated without a separator: ``["ab", "c"]``
    and ``["a", "bc"]`` hash identically, which keeps identities compatible
    with markers already on disk.
    """

    if not command_line:
        raise ResolutionError("no command given")

    executable = resolve_executable(command_line[0])
    hasher = hashlib.sha256()
    hasher.update(os.fsencode(executable))
    for argument in command_line[1:]:
        hasher.update(os.fsencode(argument))
    return hasher.hexdigest()


__all__ = [
    "IdentityError",
    "PathError",
    "ResolutionError",
    "fingerprint",
    "resolve_executable",
]
