"""CLI helpers exposed for other modules."""

from .ui import StepTracker, confirm

__all__ = ["StepTracker", "confirm"]
