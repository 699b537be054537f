"""
Wardrobe entities owned by the ledger: items, wear events and outfit ratings.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from closetwise.utils.dates import ensure_utc


def _normalise_labels(values) -> Tuple[str, ...]:
    """Lower-case, strip and de-duplicate labels while keeping their order."""
    seen = []
    for value in values or ():
        label = str(value).strip().lower()
        if label and label not in seen:
            seen.append(label)
    return tuple(seen)


@dataclass(frozen=True)
class WardrobeItem:
    """
    Represents a clothing item owned by a user.
    
    Items are never hard-deleted: removal sets ``tombstoned`` so that
    historical wear statistics stay reconstructable.
    """

    item_id: str
    user_id: str
    category: str
    name: str = ""
    colors: Tuple[str, ...] = ()
    brand: Optional[str] = None
    purchase_price: float = 0.0
    purchase_date: Optional[datetime] = None
    tags: Tuple[str, ...] = ()
    image_url: Optional[str] = None
    tombstoned: bool = False

    def __post_init__(self) -> None:
        """Validate and normalise fields after initialization."""
        if not self.item_id:
            raise ValueError("WardrobeItem item_id cannot be empty")
        if not self.user_id:
            raise ValueError("WardrobeItem user_id cannot be empty")
        if not self.category or not self.category.strip():
            raise ValueError("WardrobeItem category cannot be empty")
        if self.purchase_price < 0:
            raise ValueError("WardrobeItem purchase_price cannot be negative")
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "category", self.category.strip().lower())
        object.__setattr__(self, "colors", _normalise_labels(self.colors))
        object.__setattr__(self, "tags", _normalise_labels(self.tags))
        if self.purchase_date is not None:
            object.__setattr__(self, "purchase_date", ensure_utc(self.purchase_date))


@dataclass(frozen=True)
class WearEvent:
    """One "marked as worn" action. Append-only."""

    item_id: str
    user_id: str
    worn_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "worn_at", ensure_utc(self.worn_at))


@dataclass(frozen=True)
class OutfitRating:
    """
    A confidence score (1 to 5, continuous) for an outfit worn on a given date.
    
    The score is attributed to every item of the outfit when aggregating.
    """

    rating_id: str
    user_id: str
    outfit_id: str
    item_ids: Tuple[str, ...]
    confidence: float
    worn_on: datetime
    note: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the confidence range."""
        if not 1.0 <= self.confidence <= 5.0:
            raise ValueError(
                f"OutfitRating confidence must be within [1, 5], got {self.confidence}"
            )
        object.__setattr__(self, "item_ids", tuple(self.item_ids))
        object.__setattr__(self, "worn_on", ensure_utc(self.worn_on))
