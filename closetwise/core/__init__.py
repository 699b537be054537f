"""Core analytics for ClosetWise."""

from .engine import AnalyticsEngine
from .scoring import ClosetScorer
from .use_cases import (
    ClosetSimilarityMatcher,
    ConfidenceTrendAggregator,
    RediscoveryChallengeBuilder,
    ShoppingBehaviorTracker,
    ValuationCalculator,
)

__all__ = [
    "AnalyticsEngine",
    "ClosetScorer",
    "ClosetSimilarityMatcher",
    "ConfidenceTrendAggregator",
    "RediscoveryChallengeBuilder",
    "ShoppingBehaviorTracker",
    "ValuationCalculator",
]
