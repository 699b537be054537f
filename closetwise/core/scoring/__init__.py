# Scoring Package
"""
Similarity scoring for shop-your-closet matching.

Provides:
- ClosetScorer: weighted colour/style/underuse scoring
- MatchBreakdown: per-factor scores of one candidate
- parse_style_keywords / normalise_colors: request normalisation
"""

from .closet_scorer import ClosetScorer, MatchBreakdown, normalise_colors, parse_style_keywords

__all__ = [
    "ClosetScorer",
    "MatchBreakdown",
    "normalise_colors",
    "parse_style_keywords",
]
