# Shopping Behavior Use Case
"""
Use case for tracking how a user's purchasing changes month to month.

Counts purchases in the current and previous calendar month, the number
of days since the last purchase, and an estimate of money saved by
buying fewer items than last month.
"""
from typing import List

import numpy as np

from closetwise.domain.entities.results import ShoppingBehaviorReport
from closetwise.domain.entities.wardrobe_item import WardrobeItem
from closetwise.domain.interfaces.clock_interface import Clock
from closetwise.domain.interfaces.ledger_interface import WardrobeLedger
from closetwise.utils.dates import month_bounds, shift_month, whole_days_between
from closetwise.utils.logger import get_logger

logger = get_logger(__name__)


class ShoppingBehaviorTracker:
    """Reports purchase reduction, no-purchase streak and estimated savings."""
    
    def __init__(self, ledger: WardrobeLedger, clock: Clock):
        """
        Initialize the tracker.
        
        Args:
            ledger: Wardrobe ledger for purchase history.
            clock: Source of the current time.
        """
        self.ledger = ledger
        self.clock = clock
    
    def track_shopping_behavior(self, user_id: str) -> ShoppingBehaviorReport:
        """
        Summarise the user's purchases for the current month.
        
        Deleted items still count: they were bought.
        
        Args:
            user_id: Owner of the wardrobe.
            
        Returns:
            ShoppingBehaviorReport for the current calendar month.
        """
        now = self.clock.now()
        items = self.ledger.list_items(user_id, include_tombstoned=True)
        
        current = self._purchased_in(items, now.year, now.month)
        previous = self._purchased_in(items, *shift_month(now.year, now.month, -1))
        
        if previous:
            reduction = (len(previous) - len(current)) / len(previous) * 100.0
            average_price = float(np.mean([item.purchase_price for item in previous]))
        else:
            reduction = 0.0
            average_price = 0.0
        savings = max(0.0, (len(previous) - len(current)) * average_price)
        
        past_purchases = [
            item.purchase_date for item in items
            if item.purchase_date is not None and item.purchase_date <= now
        ]
        last_purchase = max(past_purchases) if past_purchases else None
        streak_days = whole_days_between(last_purchase, now) if last_purchase else 0
        
        logger.info(
            f"Shopping behavior for user {user_id}: {len(current)} purchases this month, "
            f"{len(previous)} last month, {streak_days} day streak"
        )
        
        return ShoppingBehaviorReport(
            user_id=user_id,
            monthly_purchases=len(current),
            previous_month_purchases=len(previous),
            reduction_percentage=reduction,
            streak_days=streak_days,
            total_savings=savings,
            last_purchase_date=last_purchase,
        )
    
    @staticmethod
    def _purchased_in(items, year: int, month: int) -> List[WardrobeItem]:
        start, end = month_bounds(year, month)
        return [
            item for item in items
            if item.purchase_date is not None and start <= item.purchase_date < end
        ]
