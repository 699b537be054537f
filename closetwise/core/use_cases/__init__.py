# Use Cases Package
"""
Application use cases (business logic).

Each use case reads the minimal slice of data it needs from the wardrobe
ledger, computes, and returns an immutable result object. Use cases do
not call each other and share no mutable state.
"""

from closetwise.core.use_cases.confidence_trends import ConfidenceTrendAggregator
from closetwise.core.use_cases.cost_per_wear import ValuationCalculator, project_cost_per_wear
from closetwise.core.use_cases.rediscovery_challenge import (
    CHALLENGE_CATALOGUE,
    RediscoveryChallengeBuilder,
)
from closetwise.core.use_cases.shop_your_closet import ClosetSimilarityMatcher
from closetwise.core.use_cases.shopping_behavior import ShoppingBehaviorTracker

__all__ = [
    # Valuation
    "ValuationCalculator",
    "project_cost_per_wear",
    # Rediscovery challenges
    "CHALLENGE_CATALOGUE",
    "RediscoveryChallengeBuilder",
    # Shop your closet
    "ClosetSimilarityMatcher",
    # Trends
    "ConfidenceTrendAggregator",
    "ShoppingBehaviorTracker",
]
