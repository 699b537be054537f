# Rediscovery Challenge Use Case
"""
Use case for issuing and progressing rediscovery challenges.

A challenge asks the user to wear a handful of their most neglected
items within a fixed window. At most one challenge is active per user;
progress is advanced through a compare-and-swap on the ledger so that
concurrent "mark item worn" calls never lose an increment.
"""
import uuid
from datetime import timedelta
from typing import Optional, Union

from closetwise.core.selection import (
    last_worn_by_item,
    parse_challenge_type,
    rank_by_neglect,
    select_targets,
    suggest_challenge_type,
)
from closetwise.domain.entities.challenge import ChallengeType, RediscoveryChallenge
from closetwise.domain.interfaces.clock_interface import Clock
from closetwise.domain.interfaces.ledger_interface import WardrobeLedger
from closetwise.utils.config import ChallengeConfig, get_config
from closetwise.utils.exceptions import (
    ConflictError,
    NotActiveError,
    NotFoundError,
    NotTargetedError,
)
from closetwise.utils.logger import get_logger

logger = get_logger(__name__)


CHALLENGE_CATALOGUE = {
    ChallengeType.NEGLECTED_ITEMS: {
        "title": "Rediscover Your Hidden Gems",
        "description": "Wear {count} items that have been waiting patiently in your closet",
        "reward": "Unlock a special confidence boost for creative styling!",
    },
    ChallengeType.COLOR_EXPLORATION: {
        "title": "Color Adventure Challenge",
        "description": "Explore different color combinations with {count} of your neglected pieces",
        "reward": "Discover new favorite color pairings!",
    },
    ChallengeType.STYLE_MIXING: {
        "title": "Style Fusion Challenge",
        "description": "Mix {count} pieces from different categories to create unique looks",
        "reward": "Master the art of versatile styling!",
    },
}


class RediscoveryChallengeBuilder:
    """
    Selects neglected items into a time-boxed challenge and tracks progress.
    
    This use case:
    1. Returns the user's active, unexpired challenge if there is one
    2. Otherwise ranks items by neglect and picks targets for the type
    3. Advances progress one distinct target item at a time
    """
    
    def __init__(
        self,
        ledger: WardrobeLedger,
        clock: Clock,
        config: Optional[ChallengeConfig] = None,
    ):
        """
        Initialize the builder.
        
        Args:
            ledger: Wardrobe ledger holding items, wears and challenges.
            clock: Source of the current time.
            config: Challenge policy. If None, reads config.yaml.
        """
        self.ledger = ledger
        self.clock = clock
        self.config = config or get_config().challenges
    
    def create_challenge(
        self,
        user_id: str,
        challenge_type: Optional[Union[ChallengeType, str]] = None,
    ) -> Optional[RediscoveryChallenge]:
        """
        Create a challenge for the user, or return the one already running.
        
        Args:
            user_id: Owner of the wardrobe.
            challenge_type: Requested type; defaults to the configured type.
            
        Returns:
            The active challenge, or None when the user has no items to target.
        """
        now = self.clock.now()
        
        existing = self.ledger.get_active_challenge(user_id)
        if existing is not None:
            if existing.is_active(now):
                logger.info(f"Reusing active challenge {existing.challenge_id} for user {user_id}")
                return existing
            logger.info(
                f"Challenge {existing.challenge_id} expired at {existing.expires_at.isoformat()} "
                f"with {existing.progress}/{existing.total_items}; issuing a new one"
            )
        
        items = self.ledger.list_items(user_id)
        last_worn = last_worn_by_item(self.ledger.list_wear_events(user_id=user_id))
        ranked = rank_by_neglect(items, last_worn)
        
        resolved_type = self._resolve_type(challenge_type, ranked, last_worn, now)
        targets = select_targets(resolved_type, ranked, self.config.total_items)
        
        if not targets:
            logger.info(f"No items available for a {resolved_type.value} challenge (user {user_id})")
            return None
        
        template = CHALLENGE_CATALOGUE[resolved_type]
        challenge = RediscoveryChallenge(
            challenge_id=f"ch_{uuid.uuid4().hex[:12]}",
            user_id=user_id,
            challenge_type=resolved_type,
            title=template["title"],
            description=template["description"].format(count=len(targets)),
            target_item_ids=tuple(item.item_id for item in targets),
            created_at=now,
            expires_at=now + timedelta(days=self.config.duration_days),
            reward=template["reward"],
        )
        
        stored = self.ledger.create_challenge(challenge)
        logger.info(
            f"Created {resolved_type.value} challenge {stored.challenge_id} "
            f"with {stored.total_items} items for user {user_id}"
        )
        return stored
    
    def mark_item_worn(self, challenge_id: str, item_id: str) -> RediscoveryChallenge:
        """
        Count a target item as worn for a challenge.
        
        Args:
            challenge_id: Challenge to progress.
            item_id: Target item the user wore.
            
        Returns:
            The updated challenge (unchanged if the item was already counted).
            
        Raises:
            NotFoundError: If the challenge or item does not exist.
            NotActiveError: If the challenge expired or is already completed.
            NotTargetedError: If the item is not a target of the challenge.
            ConflictError: If every compare-and-swap attempt lost a race.
        """
        item = self.ledger.get_item(item_id)
        last_conflict: Optional[ConflictError] = None
        
        for attempt in range(1, self.config.max_update_attempts + 1):
            challenge = self.ledger.get_challenge(challenge_id)
            if challenge is None:
                raise NotFoundError("Challenge not found", entity="challenge", identifier=challenge_id)
            if item is None or item.tombstoned:
                raise NotFoundError("Item not found", entity="item", identifier=item_id)
            
            now = self.clock.now()
            if challenge.is_completed():
                raise NotActiveError(
                    "Challenge is already completed", challenge_id=challenge_id, reason="completed"
                )
            if challenge.is_expired(now):
                raise NotActiveError(
                    "This challenge has expired", challenge_id=challenge_id, reason="expired"
                )
            if item_id not in challenge.target_item_ids:
                raise NotTargetedError(challenge_id=challenge_id, item_id=item_id)
            if item_id in challenge.counted_item_ids:
                logger.debug(f"Item {item_id} already counted for challenge {challenge_id}")
                return challenge
            
            new_progress = challenge.progress + 1
            completed_at = now if new_progress == challenge.total_items else None
            
            try:
                updated = self.ledger.update_challenge_progress(
                    challenge_id,
                    expected_progress=challenge.progress,
                    new_progress=new_progress,
                    counted_item_ids=challenge.counted_item_ids + (item_id,),
                    completed_at=completed_at,
                )
            except ConflictError as e:
                last_conflict = e
                logger.warning(
                    f"Progress conflict on challenge {challenge_id} "
                    f"(attempt {attempt}/{self.config.max_update_attempts})"
                )
                continue
            
            if updated.is_completed():
                logger.info(f"Challenge {challenge_id} completed")
            else:
                logger.info(
                    f"Challenge {challenge_id} progress {updated.progress}/{updated.total_items}"
                )
            return updated
        
        raise ConflictError(
            f"Gave up after {self.config.max_update_attempts} conflicting progress updates",
            challenge_id=challenge_id,
            context=dict(last_conflict.context) if last_conflict else {},
        )
    
    def _resolve_type(self, requested, ranked, last_worn, now) -> ChallengeType:
        """Pick the challenge type from the request or configuration."""
        challenge_type = parse_challenge_type(requested)
        if challenge_type is not None:
            return challenge_type
        if self.config.default_type != "auto":
            return ChallengeType(self.config.default_type)
        
        cutoff = now - timedelta(days=self.config.neglected_after_days)
        neglected = [
            item for item in ranked
            if item.item_id not in last_worn or last_worn[item.item_id] < cutoff
        ]
        return suggest_challenge_type(neglected)
