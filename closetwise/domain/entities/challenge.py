"""
RediscoveryChallenge entity: a time-boxed prompt to wear neglected items.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from closetwise.utils.dates import ensure_utc


class ChallengeType(Enum):
    """Types of rediscovery challenges."""

    NEGLECTED_ITEMS = "neglected_items"
    COLOR_EXPLORATION = "color_exploration"
    STYLE_MIXING = "style_mixing"


@dataclass(frozen=True)
class RediscoveryChallenge:
    """
    A persisted challenge whose progress is advanced by "mark item worn".
    
    Invariants:
        0 <= progress <= total_items
        completed_at is set exactly when progress == total_items
        counted_item_ids holds the distinct targets counted so far
    """

    challenge_id: str
    user_id: str
    challenge_type: ChallengeType
    title: str
    description: str
    target_item_ids: Tuple[str, ...]
    created_at: datetime
    expires_at: datetime
    reward: str = ""
    progress: int = 0
    counted_item_ids: Tuple[str, ...] = ()
    completed_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate the progress invariants."""
        object.__setattr__(self, "target_item_ids", tuple(self.target_item_ids))
        object.__setattr__(self, "counted_item_ids", tuple(self.counted_item_ids))
        object.__setattr__(self, "created_at", ensure_utc(self.created_at))
        object.__setattr__(self, "expires_at", ensure_utc(self.expires_at))
        if self.completed_at is not None:
            object.__setattr__(self, "completed_at", ensure_utc(self.completed_at))
        if not 0 <= self.progress <= self.total_items:
            raise ValueError(
                f"Challenge progress {self.progress} outside [0, {self.total_items}]"
            )
        if len(set(self.counted_item_ids)) != self.progress:
            raise ValueError("Challenge progress must equal the number of counted items")
        if (self.completed_at is not None) != (self.progress == self.total_items):
            raise ValueError("completed_at must be set exactly when progress reaches total_items")

    @property
    def total_items(self) -> int:
        """Number of target items."""
        return len(self.target_item_ids)

    def is_completed(self) -> bool:
        """Check if every target item has been worn."""
        return self.completed_at is not None

    def is_expired(self, now: datetime) -> bool:
        """Check if the challenge window has passed."""
        return now > self.expires_at

    def is_active(self, now: datetime) -> bool:
        """Check if progress can still be recorded."""
        return not self.is_completed() and not self.is_expired(now)
