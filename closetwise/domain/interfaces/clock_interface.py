"""
Abstract interface for the clock shared by all calculators.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Clock(ABC):
    """Source of the current time as a timezone-aware UTC datetime."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant."""
        pass
