"""
Analytics engine facade.

Wires one wardrobe ledger, one clock and one configuration into every
calculator and exposes their operations to the presentation layer.

Example:
    >>> from closetwise.core import AnalyticsEngine
    >>> engine = AnalyticsEngine(ledger, config=config)
    >>> engine.calculate_cost_per_wear("item-1").cost_per_wear
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from closetwise.core.use_cases.confidence_trends import ConfidenceTrendAggregator
from closetwise.core.use_cases.cost_per_wear import ValuationCalculator
from closetwise.core.use_cases.rediscovery_challenge import RediscoveryChallengeBuilder
from closetwise.core.use_cases.shop_your_closet import ClosetSimilarityMatcher
from closetwise.core.use_cases.shopping_behavior import ShoppingBehaviorTracker
from closetwise.domain.entities.challenge import ChallengeType, RediscoveryChallenge
from closetwise.domain.entities.results import (
    CostPerWearResult,
    MonthlyConfidenceMetrics,
    ShopYourClosetRecommendation,
    ShoppingBehaviorReport,
)
from closetwise.domain.interfaces.clock_interface import Clock
from closetwise.domain.interfaces.ledger_interface import WardrobeLedger
from closetwise.infrastructure.clock import SystemClock
from closetwise.utils.config import AppConfig, get_config
from closetwise.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


class AnalyticsEngine:
    """
    Entry point to the anti-consumption analytics.
    
    Attributes:
        valuation: Cost-per-wear calculator.
        challenges: Rediscovery challenge builder.
        matcher: Shop-your-closet matcher.
        trends: Monthly confidence aggregator.
        shopping: Shopping behaviour tracker.
    """

    def __init__(
        self,
        ledger: WardrobeLedger,
        clock: Optional[Clock] = None,
        config: Optional[AppConfig] = None,
    ):
        """
        Initialize the engine.
        
        Args:
            ledger: Wardrobe ledger shared by all calculators.
            clock: Clock shared by all calculators (wall clock by default).
            config: Application configuration. If None, reads config.yaml.
        """
        self.ledger = ledger
        self.clock = clock or SystemClock()
        self.config = config or get_config()
        configure_logging(self.config.log_level)
        
        self.valuation = ValuationCalculator(ledger, self.clock, self.config.valuation)
        self.challenges = RediscoveryChallengeBuilder(ledger, self.clock, self.config.challenges)
        self.matcher = ClosetSimilarityMatcher(ledger, self.config.matching)
        self.trends = ConfidenceTrendAggregator(ledger, self.clock, self.config.trends)
        self.shopping = ShoppingBehaviorTracker(ledger, self.clock)
        
        logger.debug(f"AnalyticsEngine ready with {type(ledger).__name__}")

    def calculate_cost_per_wear(self, item_id: str) -> CostPerWearResult:
        """See ValuationCalculator.calculate_cost_per_wear."""
        return self.valuation.calculate_cost_per_wear(item_id)

    def create_challenge(
        self,
        user_id: str,
        challenge_type: Optional[Union[ChallengeType, str]] = None,
    ) -> Optional[RediscoveryChallenge]:
        """See RediscoveryChallengeBuilder.create_challenge."""
        return self.challenges.create_challenge(user_id, challenge_type)

    def mark_item_worn(self, challenge_id: str, item_id: str) -> RediscoveryChallenge:
        """See RediscoveryChallengeBuilder.mark_item_worn."""
        return self.challenges.mark_item_worn(challenge_id, item_id)

    def generate_recommendation(
        self,
        user_id: str,
        target_description: str,
        category: str,
        colors: Optional[Sequence[str]] = None,
        style: Optional[str] = None,
    ) -> ShopYourClosetRecommendation:
        """See ClosetSimilarityMatcher.generate_recommendation."""
        return self.matcher.generate_recommendation(
            user_id, target_description, category, colors, style
        )

    def generate_monthly_confidence_metrics(
        self,
        user_id: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> MonthlyConfidenceMetrics:
        """See ConfidenceTrendAggregator.generate_monthly_confidence_metrics."""
        return self.trends.generate_monthly_confidence_metrics(user_id, month, year)

    def track_shopping_behavior(self, user_id: str) -> ShoppingBehaviorReport:
        """See ShoppingBehaviorTracker.track_shopping_behavior."""
        return self.shopping.track_shopping_behavior(user_id)
