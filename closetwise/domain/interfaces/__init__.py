# Domain Interfaces Package
"""
Abstract base classes defining contracts for infrastructure implementations.
"""

from .clock_interface import Clock
from .ledger_interface import WardrobeLedger

__all__ = ["Clock", "WardrobeLedger"]
