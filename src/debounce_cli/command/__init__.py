"""Command identity and execution utilities."""

from .identity import IdentityError, PathError, ResolutionError, fingerprint, resolve_executable
from .runner import CommandExecutionResult, CommandLaunchError, CommandRunner, CommandRunnerError

__all__ = [
    "CommandExecutionResult",
    "CommandLaunchError",
    "CommandRunner",
    "CommandRunnerError",
    "IdentityError",
    "PathError",
    "ResolutionError",
    "fingerprint",
    "resolve_executable",
]
