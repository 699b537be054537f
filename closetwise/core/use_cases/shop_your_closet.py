# Shop Your Closet Use Case
"""
Use case for finding owned items that could replace an intended purchase.

Candidates are restricted to the requested category, scored on colour,
style and how rarely they are worn, then ranked best first.
"""
from collections import Counter
from typing import List, Optional, Sequence

from closetwise.core.scoring.closet_scorer import (
    ClosetScorer,
    MatchBreakdown,
    normalise_colors,
    parse_style_keywords,
)
from closetwise.domain.entities.results import ShopYourClosetRecommendation
from closetwise.domain.interfaces.ledger_interface import WardrobeLedger
from closetwise.utils.config import MatchingConfig, get_config
from closetwise.utils.exceptions import InvalidInputError
from closetwise.utils.logger import get_logger

logger = get_logger(__name__)


class ClosetSimilarityMatcher:
    """
    Ranks already-owned items that could substitute for a desired purchase.
    
    Category is a hard filter; colours and style are optional refinements.
    A candidate is kept when its score reaches ``min_score`` (inclusive).
    An empty result is a normal outcome, never an error.
    """
    
    def __init__(
        self,
        ledger: WardrobeLedger,
        config: Optional[MatchingConfig] = None,
        scorer: Optional[ClosetScorer] = None,
    ):
        """
        Initialize the matcher.
        
        Args:
            ledger: Wardrobe ledger for items and wear history.
            config: Matching policy. If None, reads config.yaml.
            scorer: Scorer to use; built from ``config`` when omitted.
        """
        self.ledger = ledger
        self.config = config or get_config().matching
        self.scorer = scorer or ClosetScorer(self.config)
    
    def generate_recommendation(
        self,
        user_id: str,
        target_description: str,
        category: str,
        colors: Optional[Sequence[str]] = None,
        style: Optional[str] = None,
    ) -> ShopYourClosetRecommendation:
        """
        Find owned items similar to the item the user wants to buy.
        
        Args:
            user_id: Owner of the wardrobe.
            target_description: Free-text description of the desired purchase.
            category: Required category of the desired purchase.
            colors: Optional colours of the desired purchase.
            style: Optional style hint (keywords separated by commas or spaces).
            
        Returns:
            ShopYourClosetRecommendation, best match first.
            
        Raises:
            InvalidInputError: If category is blank.
        """
        if not category or not category.strip():
            raise InvalidInputError("Category is required", field="category", value=category)
        
        category_key = category.strip().lower()
        requested_colors = normalise_colors(colors)
        keywords = parse_style_keywords(style)
        
        candidates = [
            item for item in self.ledger.list_items(user_id)
            if item.category == category_key
        ]
        
        matches: List[MatchBreakdown] = []
        if candidates:
            wear_counts = Counter(
                event.item_id for event in self.ledger.list_wear_events(user_id=user_id)
            )
            scored = self.scorer.score_items(candidates, requested_colors, keywords, wear_counts)
            matches = [match for match in scored if match.total >= self.config.min_score]
            matches.sort(key=lambda m: (-m.total, m.wear_count, m.item.item_id))
            matches = matches[: self.config.max_results]
        
        logger.info(
            f"Shop-your-closet for user {user_id}: {len(candidates)} {category_key} candidates, "
            f"{len(matches)} matches"
        )
        
        if not matches:
            reasoning = (f"No similar {category_key} items found in your closet",)
            confidence = 0.0
        else:
            reasoning = tuple(self._build_reasoning(matches[0], category_key))
            confidence = matches[0].total
        
        return ShopYourClosetRecommendation(
            user_id=user_id,
            target_description=target_description,
            category=category_key,
            colors=tuple(requested_colors),
            style=style,
            confidence_score=confidence,
            reasoning=reasoning,
            similar_owned_items=tuple(match.item for match in matches),
            match_scores=tuple(match.total for match in matches),
        )
    
    def _build_reasoning(self, top: MatchBreakdown, category: str) -> List[str]:
        """One line per factor of the top match that clears the materiality threshold."""
        threshold = self.config.materiality_threshold
        reasoning: List[str] = []
        
        if top.matched_colors and top.color >= threshold:
            reasoning.extend(f"Matches requested color: {color}" for color in top.matched_colors)
        if top.matched_keywords and top.style >= threshold:
            reasoning.extend(f"Matches requested style: {keyword}" for keyword in top.matched_keywords)
        if top.underuse >= threshold:
            if top.wear_count == 0:
                reasoning.append("Never worn yet, a great opportunity to finally use it")
            else:
                reasoning.append("Rarely worn, a great opportunity to use it more")
        
        if not reasoning:
            reasoning.append(f"Same category as the {category} item you want to buy")
        return reasoning
