"""
Weighted scorer for shop-your-closet matching.

Combines three per-candidate factors into a score in [0, 1]:

    score = color_w * color + style_w * style + underuse_w * underuse

- color: fraction of requested colours present on the item
- style: fraction of requested style keywords present in the item's tags
- underuse: 1 / (1 + wear_count), rewarding rarely-worn items

Example:
    >>> from closetwise.core.scoring import ClosetScorer
    >>> scorer = ClosetScorer(matching_config)
    >>> breakdown = scorer.score_item(item, ["black"], ["casual"], wear_count=2)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from closetwise.domain.entities.wardrobe_item import WardrobeItem
from closetwise.utils.config import MatchingConfig, MatchWeights, get_config
from closetwise.utils.logger import get_logger

logger = get_logger(__name__)


def parse_style_keywords(style: Optional[str]) -> List[str]:
    """Split a style hint on commas and whitespace into lower-case keywords."""
    if not style:
        return []
    keywords: List[str] = []
    for token in re.split(r"[,\s]+", style.lower()):
        if token and token not in keywords:
            keywords.append(token)
    return keywords


def normalise_colors(colors: Optional[Sequence[str]]) -> List[str]:
    """Lower-case, strip and de-duplicate requested colours."""
    normalised: List[str] = []
    for color in colors or ():
        value = str(color).strip().lower()
        if value and value not in normalised:
            normalised.append(value)
    return normalised


@dataclass(frozen=True)
class MatchBreakdown:
    """
    Per-factor scores of one candidate.
    
    Attributes:
        item: The owned candidate item.
        color: Colour overlap score (0-1).
        style: Style keyword overlap score (0-1).
        underuse: Rarely-worn bonus (0-1).
        total: Weighted combination (0-1).
        matched_colors: Requested colours found on the item.
        matched_keywords: Requested style keywords found in the item's tags.
        wear_count: Recorded wears of the item.
    """
    
    item: WardrobeItem
    color: float
    style: float
    underuse: float
    total: float
    matched_colors: Tuple[str, ...]
    matched_keywords: Tuple[str, ...]
    wear_count: int


class ClosetScorer:
    """
    Scores owned items against a desired purchase.
    
    The weights are read from config.yaml by default but can be overridden.
    When no colours (or no style) are requested the corresponding factor
    contributes a neutral baseline instead of zero.
    """

    def __init__(self, config: Optional[MatchingConfig] = None):
        """
        Initialize the scorer.
        
        Args:
            config: Matching policy. If None, reads config.yaml.
        """
        self._config = config or get_config().matching
        logger.debug(f"ClosetScorer initialized with weights: {self.weights}")
    
    @property
    def weights(self) -> MatchWeights:
        """Return current factor weights."""
        return self._config.weights

    def color_score(
        self,
        requested: Sequence[str],
        item_colors: Sequence[str],
    ) -> Tuple[float, Tuple[str, ...]]:
        """Fraction of requested colours found on the item, with the matches."""
        if not requested:
            return self._config.neutral_color_score, ()
        matched = tuple(
            color for color in requested
            if any(color in item_color for item_color in item_colors)
        )
        return len(matched) / len(requested), matched

    def style_score(
        self,
        keywords: Sequence[str],
        tags: Sequence[str],
    ) -> Tuple[float, Tuple[str, ...]]:
        """Fraction of requested style keywords found in the tags, with the matches."""
        if not keywords:
            return self._config.neutral_style_score, ()
        matched = tuple(
            keyword for keyword in keywords
            if any(keyword in tag for tag in tags)
        )
        return len(matched) / len(keywords), matched

    @staticmethod
    def underuse_score(wear_count: int) -> float:
        """Bonus that shrinks as an item gets worn more."""
        return 1.0 / (1.0 + max(wear_count, 0))

    def compute_score(self, color: float, style: float, underuse: float) -> float:
        """Weighted combination of the three factors."""
        weights = self.weights
        return weights.color * color + weights.style * style + weights.underuse * underuse

    def compute_score_batch(
        self,
        colors: Sequence[float],
        styles: Sequence[float],
        underuses: Sequence[float],
    ) -> np.ndarray:
        """
        Weighted combination for many candidates at once.
        
        Raises:
            ValueError: If input lists have different lengths.
        """
        if not len(colors) == len(styles) == len(underuses):
            raise ValueError(
                f"Input lists must have same length: "
                f"{len(colors)}, {len(styles)}, {len(underuses)}"
            )
        factors = np.array([colors, styles, underuses], dtype=np.float64)
        weights = np.array([self.weights.color, self.weights.style, self.weights.underuse])
        return np.clip(weights @ factors, 0.0, 1.0)

    def score_items(
        self,
        items: Sequence[WardrobeItem],
        colors: Sequence[str],
        keywords: Sequence[str],
        wear_counts: dict,
    ) -> List[MatchBreakdown]:
        """Score every candidate, keeping the input order."""
        color_parts = [self.color_score(colors, item.colors) for item in items]
        style_parts = [self.style_score(keywords, item.tags) for item in items]
        counts = [int(wear_counts.get(item.item_id, 0)) for item in items]
        underuses = [self.underuse_score(count) for count in counts]
        
        totals = self.compute_score_batch(
            [part[0] for part in color_parts],
            [part[0] for part in style_parts],
            underuses,
        )
        
        return [
            MatchBreakdown(
                item=item,
                color=color_parts[i][0],
                style=style_parts[i][0],
                underuse=underuses[i],
                total=float(totals[i]),
                matched_colors=color_parts[i][1],
                matched_keywords=style_parts[i][1],
                wear_count=counts[i],
            )
            for i, item in enumerate(items)
        ]

    def __repr__(self) -> str:
        """String representation."""
        weights = self.weights
        return (
            f"ClosetScorer(color={weights.color}, "
            f"style={weights.style}, underuse={weights.underuse})"
        )
