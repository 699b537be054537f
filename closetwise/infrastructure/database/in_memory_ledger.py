"""
In-memory wardrobe ledger.

Keeps items, wear events, ratings and challenges in dictionaries. The
challenge progress compare-and-swap is serialised with a lock so that
concurrent "mark item worn" calls never lose an increment.

Example:
    >>> ledger = InMemoryLedger()
    >>> ledger.add_item(item)
    >>> ledger.record_wear(item.item_id, worn_at)
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from closetwise.domain.entities.challenge import RediscoveryChallenge
from closetwise.domain.entities.wardrobe_item import OutfitRating, WardrobeItem, WearEvent
from closetwise.domain.interfaces.ledger_interface import WardrobeLedger
from closetwise.utils.dates import ensure_utc
from closetwise.utils.exceptions import ConflictError, InvalidInputError, NotFoundError
from closetwise.utils.logger import get_logger

logger = get_logger(__name__)


def _in_window(moment: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and moment < ensure_utc(start):
        return False
    if end is not None and moment >= ensure_utc(end):
        return False
    return True


class InMemoryLedger(WardrobeLedger):
    """
    Dictionary-backed WardrobeLedger.
    
    Suitable for tests and single-process use. All public methods are
    thread-safe.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._items: Dict[str, WardrobeItem] = {}
        self._wear_events: List[WearEvent] = []
        self._ratings: List[OutfitRating] = []
        self._challenges: Dict[str, RediscoveryChallenge] = {}

    # ============================================
    # Write helpers
    # ============================================

    def add_item(self, item: WardrobeItem) -> WardrobeItem:
        """Insert or replace a wardrobe item."""
        with self._lock:
            self._items[item.item_id] = item
        return item

    def tombstone_item(self, item_id: str) -> WardrobeItem:
        """Mark an item as deleted while keeping its history."""
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                raise NotFoundError("Item not found", entity="item", identifier=item_id)
            item = replace(item, tombstoned=True)
            self._items[item_id] = item
        logger.debug(f"Tombstoned item {item_id}")
        return item

    def record_wear(self, item_id: str, worn_at: datetime) -> WearEvent:
        """Append a wear event for an existing item."""
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                raise NotFoundError("Item not found", entity="item", identifier=item_id)
            event = WearEvent(item_id=item_id, user_id=item.user_id, worn_at=ensure_utc(worn_at))
            self._wear_events.append(event)
        return event

    def add_outfit_rating(self, rating: OutfitRating) -> OutfitRating:
        """Append an outfit rating."""
        with self._lock:
            self._ratings.append(rating)
        return rating

    # ============================================
    # WardrobeLedger
    # ============================================

    def get_item(self, item_id: str) -> Optional[WardrobeItem]:
        with self._lock:
            return self._items.get(item_id)

    def list_items(self, user_id: str, include_tombstoned: bool = False) -> List[WardrobeItem]:
        with self._lock:
            items = [item for item in self._items.values() if item.user_id == user_id]
        if not include_tombstoned:
            items = [item for item in items if not item.tombstoned]
        return sorted(items, key=lambda item: item.item_id)

    def list_wear_events(
        self,
        item_id: Optional[str] = None,
        user_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[WearEvent]:
        if item_id is None and user_id is None:
            raise InvalidInputError("Either item_id or user_id is required", field="item_id")
        with self._lock:
            events = list(self._wear_events)
        events = [
            event for event in events
            if (item_id is None or event.item_id == item_id)
            and (user_id is None or event.user_id == user_id)
            and _in_window(event.worn_at, start, end)
        ]
        return sorted(events, key=lambda event: event.worn_at)

    def list_outfit_ratings(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[OutfitRating]:
        with self._lock:
            ratings = list(self._ratings)
        ratings = [
            rating for rating in ratings
            if rating.user_id == user_id and _in_window(rating.worn_on, start, end)
        ]
        return sorted(ratings, key=lambda rating: rating.worn_on)

    def get_challenge(self, challenge_id: str) -> Optional[RediscoveryChallenge]:
        with self._lock:
            return self._challenges.get(challenge_id)

    def get_active_challenge(self, user_id: str) -> Optional[RediscoveryChallenge]:
        with self._lock:
            candidates = [
                challenge for challenge in self._challenges.values()
                if challenge.user_id == user_id and not challenge.is_completed()
            ]
        if not candidates:
            return None
        return max(candidates, key=lambda challenge: challenge.created_at)

    def create_challenge(self, challenge: RediscoveryChallenge) -> RediscoveryChallenge:
        with self._lock:
            self._challenges[challenge.challenge_id] = challenge
        logger.debug(f"Stored challenge {challenge.challenge_id} for user {challenge.user_id}")
        return challenge

    def update_challenge_progress(
        self,
        challenge_id: str,
        expected_progress: int,
        new_progress: int,
        counted_item_ids: Sequence[str],
        completed_at: Optional[datetime] = None,
    ) -> RediscoveryChallenge:
        with self._lock:
            current = self._challenges.get(challenge_id)
            if current is None:
                raise NotFoundError("Challenge not found", entity="challenge", identifier=challenge_id)
            if current.progress != expected_progress:
                raise ConflictError(
                    challenge_id=challenge_id,
                    expected_progress=expected_progress,
                    actual_progress=current.progress,
                )
            updated = replace(
                current,
                progress=new_progress,
                counted_item_ids=tuple(counted_item_ids),
                completed_at=completed_at,
            )
            self._challenges[challenge_id] = updated
        return updated
