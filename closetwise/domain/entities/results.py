"""
Computed result value objects returned by the analytics calculators.

Results are never persisted. They are immutable, carry no behaviour and
serialise with ``dataclasses.asdict``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from .wardrobe_item import WardrobeItem


@dataclass(frozen=True)
class CostPerWearResult:
    """Present and projected cost-per-wear of a single item."""

    item_id: str
    purchase_price: float
    total_wears: int
    days_since_purchase: int
    cost_per_wear: float
    projected_cost_per_wear: float


@dataclass(frozen=True)
class ShopYourClosetRecommendation:
    """Owned items that could substitute for an intended purchase."""

    user_id: str
    target_description: str
    category: str
    colors: Tuple[str, ...]
    style: Optional[str]
    confidence_score: float
    reasoning: Tuple[str, ...]
    similar_owned_items: Tuple[WardrobeItem, ...]  # Best match first
    match_scores: Tuple[float, ...]  # Parallel to similar_owned_items


@dataclass(frozen=True)
class ItemConfidence:
    """Average confidence of the outfits an item was rated in."""

    item: WardrobeItem
    average_rating: float
    rating_count: int


@dataclass(frozen=True)
class MonthlyConfidenceMetrics:
    """Confidence and usage roll-up for one calendar month."""

    user_id: str
    month: int
    year: int
    average_confidence_rating: float
    confidence_improvement: float
    total_outfits_rated: int
    wardrobe_utilization: float
    shopping_reduction_percentage: float
    cost_per_wear_improvement: float
    most_confident_items: Tuple[ItemConfidence, ...]
    least_confident_items: Tuple[ItemConfidence, ...]


@dataclass(frozen=True)
class ShoppingBehaviorReport:
    """Month-over-month purchase counts, no-purchase streak and savings."""

    user_id: str
    monthly_purchases: int
    previous_month_purchases: int
    reduction_percentage: float
    streak_days: int
    total_savings: float
    last_purchase_date: Optional[datetime] = None
