"""Process start-up helpers for transitcharts entry points."""

from .logging import configure_logging

__all__ = ["configure_logging"]
