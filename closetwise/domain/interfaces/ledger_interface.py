"""
Abstract interface for the Wardrobe Ledger (items, wear log, ratings, challenges).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from closetwise.domain.entities.challenge import RediscoveryChallenge
from closetwise.domain.entities.wardrobe_item import OutfitRating, WardrobeItem, WearEvent


class WardrobeLedger(ABC):
    """
    Abstract base class for wardrobe ledgers.
    
    Defines the read contract the analytics calculators rely on, plus the
    compare-and-swap primitive used for challenge progress. Implementations
    raise LedgerUnavailableError when their store cannot be reached.
    """

    @abstractmethod
    def get_item(self, item_id: str) -> Optional[WardrobeItem]:
        """
        Retrieve a wardrobe item by ID, tombstoned or not.
        
        Args:
            item_id: The unique identifier of the item.
            
        Returns:
            The WardrobeItem if found, None otherwise.
        """
        pass

    @abstractmethod
    def list_items(self, user_id: str, include_tombstoned: bool = False) -> List[WardrobeItem]:
        """
        List the items a user owns.
        
        Args:
            user_id: Owner of the wardrobe.
            include_tombstoned: Also return deleted items.
            
        Returns:
            List of WardrobeItem.
        """
        pass

    @abstractmethod
    def list_wear_events(
        self,
        item_id: Optional[str] = None,
        user_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[WearEvent]:
        """
        List wear events for an item or a user.
        
        Args:
            item_id: Restrict to one item.
            user_id: Restrict to one user's wardrobe.
            start: Inclusive lower bound on worn_at.
            end: Exclusive upper bound on worn_at.
            
        Returns:
            List of WearEvent ordered by worn_at.
        """
        pass

    @abstractmethod
    def list_outfit_ratings(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[OutfitRating]:
        """
        List a user's outfit ratings whose worn date falls in [start, end).
        
        Returns:
            List of OutfitRating ordered by worn_on.
        """
        pass

    @abstractmethod
    def get_challenge(self, challenge_id: str) -> Optional[RediscoveryChallenge]:
        """Retrieve a challenge by ID, or None."""
        pass

    @abstractmethod
    def get_active_challenge(self, user_id: str) -> Optional[RediscoveryChallenge]:
        """
        Return the user's most recent challenge that is not completed.
        
        Expiry is judged by the caller against its own clock.
        """
        pass

    @abstractmethod
    def create_challenge(self, challenge: RediscoveryChallenge) -> RediscoveryChallenge:
        """Persist a new challenge and return it."""
        pass

    @abstractmethod
    def update_challenge_progress(
        self,
        challenge_id: str,
        expected_progress: int,
        new_progress: int,
        counted_item_ids: Sequence[str],
        completed_at: Optional[datetime] = None,
    ) -> RediscoveryChallenge:
        """
        Compare-and-swap the progress of a challenge.
        
        The write is applied only if the stored progress still equals
        ``expected_progress``; progress, counted items and completion time
        change together in one update.
        
        Args:
            challenge_id: Challenge to update.
            expected_progress: Progress value the caller read.
            new_progress: Progress value to store.
            counted_item_ids: Target items counted after the update.
            completed_at: Completion time, set when new_progress reaches the total.
            
        Returns:
            The updated challenge.
            
        Raises:
            ConflictError: If the stored progress no longer matches.
            NotFoundError: If the challenge does not exist.
        """
        pass
