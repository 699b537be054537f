# Domain Entities Package
"""
Core business entities as dataclasses.
"""

from .challenge import ChallengeType, RediscoveryChallenge
from .results import (
    CostPerWearResult,
    ItemConfidence,
    MonthlyConfidenceMetrics,
    ShopYourClosetRecommendation,
    ShoppingBehaviorReport,
)
from .wardrobe_item import OutfitRating, WardrobeItem, WearEvent

__all__ = [
    "ChallengeType",
    "CostPerWearResult",
    "ItemConfidence",
    "MonthlyConfidenceMetrics",
    "OutfitRating",
    "RediscoveryChallenge",
    "ShopYourClosetRecommendation",
    "ShoppingBehaviorReport",
    "WardrobeItem",
    "WearEvent",
]
