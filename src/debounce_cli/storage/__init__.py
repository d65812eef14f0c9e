"""Storage abstractions for cooldown markers."""

from .markers import NEVER, MarkerStore
from .models import MarkerPayload
from .sweeper import SweepReport, Sweeper, probabilistic_trigger

__all__ = [
    "MarkerPayload",
    "MarkerStore",
    "NEVER",
    "SweepReport",
    "Sweeper",
    "probabilistic_trigger",
]
