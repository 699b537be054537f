# Database Infrastructure Package
"""
Wardrobe ledger implementations.

Provides:
- InMemoryLedger: dictionary-backed ledger guarded by a lock
- SQLiteLedger: local SQLite file with conditional-update compare-and-swap
- create_ledger: build the ledger selected in configuration

Example:
    >>> from closetwise.infrastructure.database import create_ledger
    >>> ledger = create_ledger()  # Uses config.yaml ledger settings
"""

from typing import Optional

from closetwise.domain.interfaces.ledger_interface import WardrobeLedger
from closetwise.utils.config import LedgerConfig, get_config
from closetwise.utils.logger import get_logger

from .in_memory_ledger import InMemoryLedger
from .sqlite_ledger import SQLiteLedger

logger = get_logger(__name__)


def create_ledger(config: Optional[LedgerConfig] = None) -> WardrobeLedger:
    """
    Create the ledger backend named in configuration.
    
    Args:
        config: Ledger settings. If None, reads config.yaml.
        
    Returns:
        A WardrobeLedger implementation.
    """
    if config is None:
        config = get_config().ledger
    
    if config.backend == "sqlite":
        return SQLiteLedger(config.database_path)
    
    logger.info("Using in-memory wardrobe ledger")
    return InMemoryLedger()


__all__ = [
    "InMemoryLedger",
    "SQLiteLedger",
    "create_ledger",
]
