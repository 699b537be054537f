"""Pytest fixtures and configuration for ClosetWise tests."""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from closetwise.domain.entities.wardrobe_item import OutfitRating, WardrobeItem
from closetwise.infrastructure.clock import FixedClock
from closetwise.infrastructure.database.in_memory_ledger import InMemoryLedger
from closetwise.utils.config import (
    AppConfig,
    ChallengeConfig,
    LedgerConfig,
    MatchingConfig,
    MatchWeights,
    TrendConfig,
    ValuationConfig,
)

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)
USER_ID = "user-1"


@pytest.fixture
def test_config() -> AppConfig:
    """Provide test-specific configuration with the in-memory ledger."""
    return AppConfig(
        valuation=ValuationConfig(horizon_days=365),
        challenges=ChallengeConfig(
            total_items=5,
            duration_days=14,
            max_update_attempts=3,
            default_type="neglected_items",
        ),
        matching=MatchingConfig(
            weights=MatchWeights(color=0.5, style=0.3, underuse=0.2),
            neutral_color_score=0.5,
            neutral_style_score=0.5,
            min_score=0.3,
            max_results=6,
            materiality_threshold=0.5,
        ),
        trends=TrendConfig(top_n=5, baseline_months=3),
        ledger=LedgerConfig(backend="memory"),
        log_level="DEBUG",
    )


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at 2024-05-20 12:00 UTC."""
    return FixedClock(NOW)


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def add_item(ledger) -> Callable[..., WardrobeItem]:
    """Factory adding a wardrobe item to the ledger."""

    def _add_item(
        item_id: str,
        category: str = "tops",
        colors=(),
        tags=(),
        price: float = 50.0,
        purchased_days_ago: float = 100,
        user_id: str = USER_ID,
        **kwargs,
    ) -> WardrobeItem:
        item = WardrobeItem(
            item_id=item_id,
            user_id=user_id,
            category=category,
            name=kwargs.pop("name", item_id),
            colors=tuple(colors),
            tags=tuple(tags),
            purchase_price=price,
            purchase_date=kwargs.pop("purchase_date", NOW - timedelta(days=purchased_days_ago)),
            **kwargs,
        )
        return ledger.add_item(item)

    return _add_item


@pytest.fixture
def wear(ledger) -> Callable[..., None]:
    """Factory recording ``times`` wears of an item ``days_ago`` days before NOW."""

    def _wear(item_id: str, days_ago: float = 1, times: int = 1) -> None:
        for _ in range(times):
            ledger.record_wear(item_id, NOW - timedelta(days=days_ago))

    return _wear


@pytest.fixture
def rate(ledger) -> Callable[..., OutfitRating]:
    """Factory adding an outfit rating worn on the given date."""
    counter = {"n": 0}

    def _rate(item_ids, confidence: float, worn_on: datetime, outfit_id=None, user_id: str = USER_ID):
        counter["n"] += 1
        rating = OutfitRating(
            rating_id=f"rating-{counter['n']}",
            user_id=user_id,
            outfit_id=outfit_id or f"outfit-{counter['n']}",
            item_ids=tuple(item_ids),
            confidence=confidence,
            worn_on=worn_on,
        )
        return ledger.add_outfit_rating(rating)

    return _rate
