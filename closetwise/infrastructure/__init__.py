# Infrastructure Package
"""
Concrete implementations of the domain interfaces (ledgers, clocks).
"""

from .clock import FixedClock, SystemClock

__all__ = ["FixedClock", "SystemClock"]
