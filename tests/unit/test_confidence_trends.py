"""Unit tests for monthly confidence trends."""

from datetime import datetime, timezone

import pytest

from closetwise.core.use_cases.confidence_trends import ConfidenceTrendAggregator
from closetwise.utils.config import TrendConfig
from closetwise.utils.exceptions import InvalidInputError

USER_ID = "user-1"


def utc(year, month, day, hour=12):
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def aggregator(ledger, clock, test_config):
    """Create aggregator reporting top 5 items over a three month baseline."""
    return ConfidenceTrendAggregator(ledger, clock, test_config.trends)


class TestConfidenceAverages:
    """Test rating averages and month-over-month change."""
    
    def test_average_without_previous_month(self, aggregator, add_item, rate):
        """Test zero prior ratings means no improvement."""
        add_item("a")
        rate(["a"], 4.0, utc(2024, 5, 2))
        rate(["a"], 5.0, utc(2024, 5, 9))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.average_confidence_rating == pytest.approx(4.5)
        assert metrics.confidence_improvement == 0.0
        assert metrics.total_outfits_rated == 2
    
    def test_improvement_over_previous_month(self, aggregator, add_item, rate):
        """Test improvement is the difference of monthly averages."""
        add_item("a")
        rate(["a"], 3.0, utc(2024, 4, 20))
        rate(["a"], 4.0, utc(2024, 5, 2))
        rate(["a"], 5.0, utc(2024, 5, 9))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.confidence_improvement == pytest.approx(1.5)
    
    def test_current_month_without_ratings(self, aggregator, add_item, rate):
        """Test a month with no ratings reports zeros."""
        add_item("a")
        rate(["a"], 3.0, utc(2024, 4, 20))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.average_confidence_rating == 0.0
        assert metrics.confidence_improvement == 0.0
        assert metrics.total_outfits_rated == 0
        assert metrics.most_confident_items == ()
        assert metrics.least_confident_items == ()
    
    def test_month_window_is_half_open(self, aggregator, add_item, rate):
        """Test ratings on the first instant of the next month are excluded."""
        add_item("a")
        rate(["a"], 2.0, datetime(2024, 5, 1, tzinfo=timezone.utc))
        rate(["a"], 5.0, datetime(2024, 6, 1, tzinfo=timezone.utc))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.average_confidence_rating == pytest.approx(2.0)
    
    def test_january_compares_with_december(self, aggregator, add_item, rate):
        """Test the previous month wraps into the previous year."""
        add_item("a")
        rate(["a"], 2.0, utc(2023, 12, 28))
        rate(["a"], 3.5, utc(2024, 1, 3))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 1, 2024)
        
        assert metrics.month == 1
        assert metrics.year == 2024
        assert metrics.confidence_improvement == pytest.approx(1.5)
    
    def test_defaults_to_current_month(self, aggregator):
        """Test month and year default to the clock."""
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID)
        
        assert (metrics.month, metrics.year) == (5, 2024)
    
    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month(self, aggregator, month):
        """Test out-of-range months are rejected."""
        with pytest.raises(InvalidInputError):
            aggregator.generate_monthly_confidence_metrics(USER_ID, month, 2024)
    
    @pytest.mark.parametrize("month, year", [(1, 1), (3, 1), (5, 0), (1, 9999)])
    def test_year_without_room_for_baseline(self, aggregator, month, year):
        """Test years whose previous or baseline months cannot exist are rejected."""
        with pytest.raises(InvalidInputError) as exc_info:
            aggregator.generate_monthly_confidence_metrics(USER_ID, month, year)
        
        assert exc_info.value.context["field"] == "year"
    
    def test_earliest_supported_month(self, aggregator):
        """Test the first month with a full three month baseline is accepted."""
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 4, 1)
        
        assert (metrics.month, metrics.year) == (4, 1)
        assert metrics.average_confidence_rating == 0.0


class TestItemConfidence:
    """Test most and least confident item lists."""
    
    @pytest.fixture
    def rated(self, add_item, rate):
        """Three items with averages 5, 3.5 and 2."""
        for item_id in ("a", "b", "c"):
            add_item(item_id)
        rate(["a", "b"], 5.0, utc(2024, 5, 3))
        rate(["b", "c", "ghost"], 2.0, utc(2024, 5, 4))
    
    def test_ranking(self, aggregator, rated):
        """Test averages per item and ordering in both directions."""
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        most = [(e.item.item_id, e.average_rating, e.rating_count) for e in metrics.most_confident_items]
        least = [e.item.item_id for e in metrics.least_confident_items]
        
        assert most == [("a", 5.0, 1), ("b", 3.5, 2), ("c", 2.0, 1)]
        assert least == ["c", "b", "a"]
    
    def test_top_n(self, ledger, clock, rated):
        """Test lists are truncated to top_n."""
        aggregator = ConfidenceTrendAggregator(ledger, clock, TrendConfig(top_n=2))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert [e.item.item_id for e in metrics.most_confident_items] == ["a", "b"]
        assert [e.item.item_id for e in metrics.least_confident_items] == ["c", "b"]
    
    def test_deleted_items_still_reported(self, aggregator, ledger, rated):
        """Test ratings of since-deleted items keep their history."""
        ledger.tombstone_item("a")
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.most_confident_items[0].item.item_id == "a"
    
    def test_repeated_item_in_outfit_counted_once(self, aggregator, add_item, rate):
        """Test an item listed twice in one outfit gets one score."""
        add_item("a")
        rate(["a", "a"], 4.0, utc(2024, 5, 3))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.most_confident_items[0].rating_count == 1


class TestUsageMetrics:
    """Test utilisation, shopping reduction and cost-per-wear improvement."""
    
    def test_utilization(self, aggregator, ledger, add_item):
        """Test percentage of owned items worn in the month."""
        for item_id in ("a", "b", "c", "d", "gone"):
            add_item(item_id)
        ledger.tombstone_item("gone")
        ledger.record_wear("a", utc(2024, 5, 2))
        ledger.record_wear("a", utc(2024, 5, 3))
        ledger.record_wear("b", utc(2024, 5, 10))
        ledger.record_wear("c", utc(2024, 4, 10))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.wardrobe_utilization == pytest.approx(50.0)
    
    def test_utilization_ignores_wears_of_deleted_items(self, aggregator, ledger, add_item):
        """Test wears of tombstoned items do not inflate utilisation."""
        add_item("kept")
        add_item("gone")
        ledger.record_wear("kept", utc(2024, 5, 2))
        ledger.record_wear("gone", utc(2024, 5, 3))
        ledger.tombstone_item("gone")
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.wardrobe_utilization == pytest.approx(100.0)
    
    def test_utilization_without_items(self, aggregator):
        """Test an empty wardrobe reports zero utilisation."""
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.wardrobe_utilization == 0.0
        assert metrics.shopping_reduction_percentage == 0.0
        assert metrics.cost_per_wear_improvement == 0.0
    
    def test_shopping_reduction(self, aggregator, add_item):
        """Test purchases against the trailing three month average."""
        add_item("apr-1", purchase_date=utc(2024, 4, 2))
        add_item("apr-2", purchase_date=utc(2024, 4, 5))
        add_item("apr-3", purchase_date=utc(2024, 4, 9))
        add_item("mar-1", purchase_date=utc(2024, 3, 2))
        add_item("mar-2", purchase_date=utc(2024, 3, 5))
        add_item("mar-3", purchase_date=utc(2024, 3, 9))
        add_item("may-1", purchase_date=utc(2024, 5, 2))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.shopping_reduction_percentage == pytest.approx(50.0)
    
    def test_shopping_increase_is_negative(self, aggregator, add_item):
        """Test buying more than the baseline reports a negative reduction."""
        add_item("apr-1", purchase_date=utc(2024, 4, 2))
        add_item("may-1", purchase_date=utc(2024, 5, 2))
        add_item("may-2", purchase_date=utc(2024, 5, 3))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.shopping_reduction_percentage == pytest.approx(-500.0)
    
    def test_cost_per_wear_improvement(self, aggregator, ledger, add_item):
        """Test drop of average cost-per-wear against month-end baselines."""
        add_item("coat", price=100.0, purchase_date=utc(2024, 2, 10))
        ledger.record_wear("coat", utc(2024, 3, 5))
        ledger.record_wear("coat", utc(2024, 4, 5))
        ledger.record_wear("coat", utc(2024, 5, 3))
        ledger.record_wear("coat", utc(2024, 5, 10))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        # baseline: 50 (end of April), 100 (end of March), 100 (end of February)
        assert metrics.cost_per_wear_improvement == pytest.approx(250.0 / 3 - 25.0)
    
    def test_cost_per_wear_without_history(self, aggregator, ledger, add_item):
        """Test items bought this month have no baseline."""
        add_item("new", price=80.0, purchase_date=utc(2024, 5, 2))
        ledger.record_wear("new", utc(2024, 5, 3))
        
        metrics = aggregator.generate_monthly_confidence_metrics(USER_ID, 5, 2024)
        
        assert metrics.cost_per_wear_improvement == 0.0
