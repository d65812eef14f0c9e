"""Run a command unless it already succeeded within a cooldown period."""

__version__ = "0.1.0"

__all__ = ["__version__"]
