"""
Target selection for rediscovery challenges.

Each challenge type has one selection function working on the same
neglect ranking; ``select_targets`` is the single dispatch point.

Example:
    >>> ranked = rank_by_neglect(items, last_worn)
    >>> targets = select_targets(ChallengeType.STYLE_MIXING, ranked, limit=5)
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from closetwise.domain.entities.challenge import ChallengeType
from closetwise.domain.entities.wardrobe_item import WardrobeItem, WearEvent
from closetwise.utils.exceptions import InvalidInputError


def last_worn_by_item(events: Iterable[WearEvent]) -> Dict[str, datetime]:
    """Map each item to its latest wear time."""
    last_worn: Dict[str, datetime] = {}
    for event in events:
        current = last_worn.get(event.item_id)
        if current is None or event.worn_at > current:
            last_worn[event.item_id] = event.worn_at
    return last_worn


def rank_by_neglect(
    items: Sequence[WardrobeItem],
    last_worn: Dict[str, datetime],
) -> List[WardrobeItem]:
    """
    Order items from most to least neglected.
    
    Never-worn items come first, then by last wear ascending. Ties fall
    back to older purchases first, then item id.
    """
    def sort_key(item: WardrobeItem):
        worn = last_worn.get(item.item_id)
        purchased = item.purchase_date.timestamp() if item.purchase_date else float("-inf")
        return (
            worn is not None,
            worn.timestamp() if worn else 0.0,
            purchased,
            item.item_id,
        )
    
    return sorted(items, key=sort_key)


def select_neglected(ranked: Sequence[WardrobeItem], limit: int) -> List[WardrobeItem]:
    """Take the most neglected items."""
    return list(ranked[:limit])


def _select_diverse(ranked: Sequence[WardrobeItem], limit: int, features) -> List[WardrobeItem]:
    """Greedy pick: keep an item only if it adds an unseen feature value."""
    selected: List[WardrobeItem] = []
    seen = set()
    for item in ranked:
        if len(selected) >= limit:
            break
        values = set(features(item))
        if values - seen:
            selected.append(item)
            seen |= values
    return selected


def select_color_diverse(ranked: Sequence[WardrobeItem], limit: int) -> List[WardrobeItem]:
    """Neglected items that each bring at least one new colour."""
    return _select_diverse(ranked, limit, lambda item: item.colors)


def select_category_diverse(ranked: Sequence[WardrobeItem], limit: int) -> List[WardrobeItem]:
    """Neglected items that each bring a new category."""
    return _select_diverse(ranked, limit, lambda item: (item.category,))


def select_targets(
    challenge_type: ChallengeType,
    ranked: Sequence[WardrobeItem],
    limit: int,
) -> List[WardrobeItem]:
    """Dispatch to the selection strategy of a challenge type."""
    if challenge_type is ChallengeType.NEGLECTED_ITEMS:
        return select_neglected(ranked, limit)
    if challenge_type is ChallengeType.COLOR_EXPLORATION:
        return select_color_diverse(ranked, limit)
    if challenge_type is ChallengeType.STYLE_MIXING:
        return select_category_diverse(ranked, limit)
    raise ValueError(f"Unknown challenge type: {challenge_type}")


def suggest_challenge_type(items: Sequence[WardrobeItem]) -> ChallengeType:
    """
    Pick a challenge type from the variety of a neglected pool.
    
    More than 3 categories favours style mixing, more than 5 colours
    favours colour exploration, otherwise a plain neglected-items challenge.
    """
    categories = {item.category for item in items}
    colors = {color for item in items for color in item.colors}
    if len(categories) > 3:
        return ChallengeType.STYLE_MIXING
    if len(colors) > 5:
        return ChallengeType.COLOR_EXPLORATION
    return ChallengeType.NEGLECTED_ITEMS


def parse_challenge_type(value: Optional[object]) -> Optional[ChallengeType]:
    """Accept a ChallengeType, its string value, or None."""
    if value is None or isinstance(value, ChallengeType):
        return value
    try:
        return ChallengeType(str(value).strip().lower())
    except ValueError as e:
        raise InvalidInputError(
            f"Unknown challenge type: {value}", field="challenge_type", value=value
        ) from e
