"""Unit tests for shop-your-closet recommendations."""

import pytest

from closetwise.core.use_cases.shop_your_closet import ClosetSimilarityMatcher
from closetwise.utils.config import MatchingConfig, MatchWeights
from closetwise.utils.exceptions import InvalidInputError

USER_ID = "user-1"


@pytest.fixture
def matcher(ledger, test_config):
    """Create matcher with default thresholds."""
    return ClosetSimilarityMatcher(ledger, test_config.matching)


class TestGenerateRecommendation:
    """Test ClosetSimilarityMatcher.generate_recommendation."""
    
    def test_no_items_in_category(self, matcher, add_item):
        """Test a user who owns no shoes gets an empty recommendation."""
        add_item("tee", category="tops", colors=("black",))
        
        rec = matcher.generate_recommendation(USER_ID, "Black sneakers", "shoes", ["black"])
        
        assert rec.similar_owned_items == ()
        assert rec.match_scores == ()
        assert rec.confidence_score == 0.0
        assert rec.reasoning == ("No similar shoes items found in your closet",)
        assert rec.category == "shoes"
    
    def test_best_match_first(self, matcher, add_item, wear):
        """Test exact colour and style match outranks others."""
        add_item("black-tee", colors=("black",), tags=("casual",))
        add_item("white-tee", colors=("white",))
        wear("white-tee", times=3)
        
        rec = matcher.generate_recommendation(
            USER_ID, "Black casual t-shirt", "tops", ["Black"], "casual"
        )
        
        assert [item.item_id for item in rec.similar_owned_items] == ["black-tee"]
        assert rec.confidence_score == pytest.approx(1.0)
        assert rec.colors == ("black",)
        assert rec.style == "casual"
        assert rec.reasoning == (
            "Matches requested color: black",
            "Matches requested style: casual",
            "Never worn yet, a great opportunity to finally use it",
        )
    
    def test_scores_within_range_and_sorted(self, matcher, add_item, wear):
        """Test scores are in [0, 1], non-increasing, and above the minimum."""
        add_item("a", colors=("red",))
        add_item("b")
        add_item("c", colors=("red", "blue"), tags=("formal",))
        wear("b", times=1)
        wear("c", times=4)
        
        rec = matcher.generate_recommendation(USER_ID, "Red blouse", "tops", ["red"], "formal")
        
        scores = list(rec.match_scores)
        assert scores == sorted(scores, reverse=True)
        assert all(0.3 <= score <= 1.0 for score in scores)
        assert rec.confidence_score == scores[0]
    
    def test_neutral_baseline_without_preferences(self, matcher, add_item, wear):
        """Test category-only requests rank by underuse."""
        add_item("worn-once")
        add_item("unworn")
        add_item("worn-often")
        wear("worn-once", times=1)
        wear("worn-often", times=4)
        
        rec = matcher.generate_recommendation(USER_ID, "Any top", "tops")
        
        assert [item.item_id for item in rec.similar_owned_items] == [
            "unworn", "worn-once", "worn-often"
        ]
        assert rec.match_scores == pytest.approx((0.6, 0.5, 0.44))
        assert rec.reasoning == ("Never worn yet, a great opportunity to finally use it",)
    
    def test_ties_prefer_fewer_wears_then_id(self, matcher, add_item):
        """Test equal scores are ordered by item id."""
        add_item("b-top")
        add_item("a-top")
        
        rec = matcher.generate_recommendation(USER_ID, "Top", "tops")
        
        assert [item.item_id for item in rec.similar_owned_items] == ["a-top", "b-top"]
    
    def test_rarely_worn_reasoning(self, matcher, add_item, wear):
        """Test one previous wear still counts as material underuse."""
        add_item("once")
        wear("once", times=1)
        
        rec = matcher.generate_recommendation(USER_ID, "Top", "tops")
        
        assert rec.reasoning == ("Rarely worn, a great opportunity to use it more",)
    
    def test_fallback_reasoning(self, matcher, add_item, wear):
        """Test category line when no factor is material."""
        add_item("black-tee", colors=("black",))
        wear("black-tee", times=2)
        
        rec = matcher.generate_recommendation(
            USER_ID, "Striped top", "tops", ["black", "white", "red"]
        )
        
        assert rec.confidence_score == pytest.approx(0.5 / 3 + 0.15 + 0.2 / 3)
        assert rec.reasoning == ("Same category as the tops item you want to buy",)
    
    def test_below_minimum_filtered(self, matcher, add_item, wear):
        """Test weak matches are dropped."""
        add_item("white-tee", colors=("white",))
        wear("white-tee", times=3)
        
        rec = matcher.generate_recommendation(USER_ID, "Black top", "tops", ["black"], "casual")
        
        assert rec.similar_owned_items == ()
        assert rec.confidence_score == 0.0
    
    def test_max_results(self, matcher, add_item):
        """Test results are capped."""
        for i in range(8):
            add_item(f"top-{i}")
        
        rec = matcher.generate_recommendation(USER_ID, "Top", "tops")
        
        assert len(rec.similar_owned_items) == 6
        assert len(rec.match_scores) == 6
    
    def test_category_case_insensitive(self, matcher, add_item):
        """Test category comparison ignores case."""
        add_item("tee", category="Tops")
        
        rec = matcher.generate_recommendation(USER_ID, "Top", " TOPS ")
        
        assert [item.item_id for item in rec.similar_owned_items] == ["tee"]
    
    def test_excludes_tombstoned_and_other_users(self, matcher, ledger, add_item):
        """Test only the user's live items are considered."""
        add_item("mine")
        add_item("deleted")
        add_item("theirs", user_id="user-2")
        ledger.tombstone_item("deleted")
        
        rec = matcher.generate_recommendation(USER_ID, "Top", "tops")
        
        assert [item.item_id for item in rec.similar_owned_items] == ["mine"]
    
    def test_blank_category(self, matcher):
        """Test a blank category is rejected."""
        with pytest.raises(InvalidInputError):
            matcher.generate_recommendation(USER_ID, "Something", "  ")
    
    def test_read_only(self, matcher, ledger, add_item):
        """Test recommendations leave the ledger unchanged."""
        add_item("tee")
        
        matcher.generate_recommendation(USER_ID, "Top", "tops")
        
        assert ledger.list_wear_events(user_id=USER_ID) == []
        assert ledger.get_active_challenge(USER_ID) is None
    
    def test_min_score_is_inclusive(self, ledger, add_item):
        """Test a candidate scoring exactly the minimum is kept."""
        config = MatchingConfig(
            weights=MatchWeights(color=1.0, style=0.0, underuse=0.0),
            min_score=0.5,
        )
        matcher = ClosetSimilarityMatcher(ledger, config)
        add_item("half-match", colors=("black",))
        
        rec = matcher.generate_recommendation(USER_ID, "Top", "tops", ["black", "white"])
        
        assert rec.match_scores == (0.5,)
