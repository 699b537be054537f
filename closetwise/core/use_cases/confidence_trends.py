# Confidence Trends Use Case
"""
Use case for rolling up a user's outfit ratings and usage over a month.

Produces the average confidence and its month-over-month change,
wardrobe utilisation, shopping reduction and cost-per-wear improvement
against a trailing baseline, plus the items the user feels most and
least confident in.
"""
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from closetwise.domain.entities.results import ItemConfidence, MonthlyConfidenceMetrics
from closetwise.domain.entities.wardrobe_item import OutfitRating, WardrobeItem, WearEvent
from closetwise.domain.interfaces.clock_interface import Clock
from closetwise.domain.interfaces.ledger_interface import WardrobeLedger
from closetwise.utils.config import TrendConfig, get_config
from closetwise.utils.dates import month_bounds, shift_month
from closetwise.utils.exceptions import InvalidInputError
from closetwise.utils.logger import get_logger, log_execution_time

logger = get_logger(__name__)


def _mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sample."""
    if not values:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


class ConfidenceTrendAggregator:
    """
    Aggregates monthly confidence and usage metrics.
    
    Missing baselines are reported as "no change" (0) rather than as
    missing data, and a positive improvement value always means better
    (higher confidence, less shopping, cheaper per wear).
    """
    
    def __init__(
        self,
        ledger: WardrobeLedger,
        clock: Clock,
        config: Optional[TrendConfig] = None,
    ):
        """
        Initialize the aggregator.
        
        Args:
            ledger: Wardrobe ledger for items, wears and ratings.
            clock: Source of the current time (for the default month).
            config: Trend policy. If None, reads config.yaml.
        """
        self.ledger = ledger
        self.clock = clock
        self.config = config or get_config().trends
    
    def generate_monthly_confidence_metrics(
        self,
        user_id: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> MonthlyConfidenceMetrics:
        """
        Build the confidence report for one calendar month.
        
        Args:
            user_id: Owner of the wardrobe.
            month: Month (1-12); defaults to the current month.
            year: Year; defaults to the current year.
            
        Returns:
            MonthlyConfidenceMetrics for the month.
            
        Raises:
            InvalidInputError: If month is outside 1-12, or the year is too
                early to hold the baseline months (or later than 9998).
        """
        now = self.clock.now()
        month = now.month if month is None else month
        year = now.year if year is None else year
        if not 1 <= month <= 12:
            raise InvalidInputError("Month must be between 1 and 12", field="month", value=month)
        earliest_year, _ = shift_month(year, month, -max(1, self.config.baseline_months))
        if earliest_year < 1 or year > 9998:
            raise InvalidInputError(
                "Year out of range for the month and its baseline", field="year", value=year
            )
        
        with log_execution_time(logger, f"monthly confidence metrics {year}-{month:02d}"):
            start, end = month_bounds(year, month)
            prev_start, prev_end = month_bounds(*shift_month(year, month, -1))
            
            ratings = self.ledger.list_outfit_ratings(user_id, start, end)
            prev_ratings = self.ledger.list_outfit_ratings(user_id, prev_start, prev_end)
            owned = self.ledger.list_items(user_id)
            all_items = self.ledger.list_items(user_id, include_tombstoned=True)
            month_wears = self.ledger.list_wear_events(user_id=user_id, start=start, end=end)
            wears_to_date = self.ledger.list_wear_events(user_id=user_id, end=end)
            
            average = _mean([rating.confidence for rating in ratings])
            if ratings and prev_ratings:
                improvement = average - _mean([rating.confidence for rating in prev_ratings])
            else:
                improvement = 0.0
            
            most, least = self._rank_item_confidence(ratings, all_items)
            
            metrics = MonthlyConfidenceMetrics(
                user_id=user_id,
                month=month,
                year=year,
                average_confidence_rating=average,
                confidence_improvement=improvement,
                total_outfits_rated=len({rating.outfit_id for rating in ratings}),
                wardrobe_utilization=self._utilization(month_wears, owned),
                shopping_reduction_percentage=self._shopping_reduction(all_items, year, month),
                cost_per_wear_improvement=self._cost_per_wear_improvement(
                    all_items, wears_to_date, year, month
                ),
                most_confident_items=most,
                least_confident_items=least,
            )
        
        logger.info(
            f"Confidence metrics {year}-{month:02d} for user {user_id}: "
            f"avg {metrics.average_confidence_rating:.2f}, "
            f"{metrics.total_outfits_rated} outfits, "
            f"utilization {metrics.wardrobe_utilization:.1f}%"
        )
        return metrics
    
    @staticmethod
    def _utilization(month_wears: Sequence[WearEvent], owned: Sequence[WardrobeItem]) -> float:
        """Percentage of owned items worn in the window, clamped to [0, 100]."""
        if not owned:
            return 0.0
        owned_ids = {item.item_id for item in owned}
        worn = {event.item_id for event in month_wears if event.item_id in owned_ids}
        return min(100.0, max(0.0, len(worn) / len(owned) * 100.0))
    
    def _baseline_months(self, year: int, month: int) -> List[Tuple[int, int]]:
        return [shift_month(year, month, -k) for k in range(1, self.config.baseline_months + 1)]
    
    def _shopping_reduction(self, items: Sequence[WardrobeItem], year: int, month: int) -> float:
        """Drop in purchases against the trailing monthly average, as a percentage."""
        def purchases_in(y: int, m: int) -> int:
            start, end = month_bounds(y, m)
            return sum(
                1 for item in items
                if item.purchase_date is not None and start <= item.purchase_date < end
            )
        
        baseline = _mean([purchases_in(y, m) for y, m in self._baseline_months(year, month)])
        if baseline == 0:
            return 0.0
        current = purchases_in(year, month)
        return (baseline - current) / baseline * 100.0
    
    def _cost_per_wear_improvement(
        self,
        items: Sequence[WardrobeItem],
        wears: Sequence[WearEvent],
        year: int,
        month: int,
    ) -> float:
        """Drop in average cost-per-wear against the trailing baseline, in currency."""
        def aggregate_at(boundary: datetime) -> Optional[float]:
            owned_then = [
                item for item in items
                if item.purchase_date is not None and item.purchase_date < boundary
            ]
            if not owned_then:
                return None
            counts: Dict[str, int] = defaultdict(int)
            for event in wears:
                if event.worn_at < boundary:
                    counts[event.item_id] += 1
            return _mean([
                item.purchase_price / max(counts[item.item_id], 1) for item in owned_then
            ])
        
        current = aggregate_at(month_bounds(year, month)[1])
        baseline_values = [
            value for value in (
                aggregate_at(month_bounds(y, m)[1]) for y, m in self._baseline_months(year, month)
            )
            if value is not None
        ]
        if current is None or not baseline_values:
            return 0.0
        return _mean(baseline_values) - current
    
    def _rank_item_confidence(
        self,
        ratings: Sequence[OutfitRating],
        items: Sequence[WardrobeItem],
    ) -> Tuple[Tuple[ItemConfidence, ...], Tuple[ItemConfidence, ...]]:
        """Average each rated item's scores and take the top and bottom N."""
        by_item: Dict[str, List[float]] = defaultdict(list)
        for rating in ratings:
            for item_id in set(rating.item_ids):
                by_item[item_id].append(rating.confidence)
        
        lookup = {item.item_id: item for item in items}
        entries = [
            ItemConfidence(item=lookup[item_id], average_rating=_mean(scores), rating_count=len(scores))
            for item_id, scores in by_item.items()
            if item_id in lookup
        ]
        
        top_n = self.config.top_n
        most = sorted(entries, key=lambda e: (-e.average_rating, e.item.item_id))[:top_n]
        least = sorted(entries, key=lambda e: (e.average_rating, e.item.item_id))[:top_n]
        return tuple(most), tuple(least)
