"""CLI helpers exposed for other modules."""

from .ui import StepTracker, live_tracker

__all__ = ["StepTracker", "live_tracker"]
