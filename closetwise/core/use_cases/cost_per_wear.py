# Cost-Per-Wear Use Case
"""
Use case for valuing a wardrobe item by its cost per wear.

Amortises the purchase price over recorded wears and extrapolates the
observed wear rate to a fixed horizon to project the future value.
"""
from typing import Optional

from closetwise.domain.entities.results import CostPerWearResult
from closetwise.domain.interfaces.clock_interface import Clock
from closetwise.domain.interfaces.ledger_interface import WardrobeLedger
from closetwise.utils.config import ValuationConfig, get_config
from closetwise.utils.dates import whole_days_between
from closetwise.utils.exceptions import NotFoundError
from closetwise.utils.logger import get_logger

logger = get_logger(__name__)


def project_cost_per_wear(
    purchase_price: float,
    total_wears: int,
    days_since_purchase: int,
    horizon_days: int,
) -> float:
    """
    Project cost-per-wear at the horizon by linear extrapolation of the wear rate.
    
    Once the horizon has passed the projection equals the current
    cost-per-wear.
    
    Example:
        >>> round(project_cost_per_wear(100.0, 4, 100, 365), 2)
        6.85
    """
    if days_since_purchase >= horizon_days:
        return purchase_price / max(total_wears, 1)
    estimated_wears = total_wears * (horizon_days / max(days_since_purchase, 1))
    return purchase_price / max(estimated_wears, 1)


class ValuationCalculator:
    """
    Computes present and projected cost-per-wear for a single item.
    
    An unworn item reports its full price as cost-per-wear: the cost so far
    of something never used is its sticker price.
    """
    
    def __init__(
        self,
        ledger: WardrobeLedger,
        clock: Clock,
        config: Optional[ValuationConfig] = None,
    ):
        """
        Initialize the calculator.
        
        Args:
            ledger: Wardrobe ledger to read items and wear events from.
            clock: Source of the current time.
            config: Valuation policy. If None, reads config.yaml.
        """
        self.ledger = ledger
        self.clock = clock
        self.config = config or get_config().valuation
    
    def calculate_cost_per_wear(self, item_id: str) -> CostPerWearResult:
        """
        Compute cost-per-wear for an item.
        
        Args:
            item_id: Identifier of a non-tombstoned item.
            
        Returns:
            CostPerWearResult with current and projected values.
            
        Raises:
            NotFoundError: If the item does not exist or was deleted.
            LedgerUnavailableError: If the ledger cannot be read.
        """
        item = self.ledger.get_item(item_id)
        if item is None or item.tombstoned:
            raise NotFoundError("Item not found", entity="item", identifier=item_id)
        
        total_wears = len(self.ledger.list_wear_events(item_id=item_id))
        now = self.clock.now()
        purchase_price = float(item.purchase_price or 0.0)
        purchase_date = item.purchase_date or now
        days_since_purchase = whole_days_between(purchase_date, now)
        
        cost_per_wear = purchase_price / max(total_wears, 1)
        projected = project_cost_per_wear(
            purchase_price,
            total_wears,
            days_since_purchase,
            self.config.horizon_days,
        )
        
        logger.debug(
            f"Cost per wear for {item_id}: {cost_per_wear:.2f} "
            f"({total_wears} wears over {days_since_purchase} days, projected {projected:.2f})"
        )
        
        return CostPerWearResult(
            item_id=item_id,
            purchase_price=purchase_price,
            total_wears=total_wears,
            days_since_purchase=days_since_purchase,
            cost_per_wear=cost_per_wear,
            projected_cost_per_wear=projected,
        )
