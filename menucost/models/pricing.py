"""Cost and pricing result models."""

from typing import List, Optional

from pydantic import BaseModel, Field

from menucost.models.catalog import ChannelTaxRate
from menucost.models.common import CmvStatus, FixedCostAllocationMode, MarginStatus


class ResolvedCost(BaseModel):
    """Resolved unit cost of one ingredient."""

    ingredient_id: str
    unit: str = "un"
    unit_cost: float = 0.0
    # Ingredients (this one or any component) that were never priced
    missing_cost_ids: List[str] = Field(default_factory=list)

    @property
    def is_defined(self) -> bool:
        return not self.missing_cost_ids


class CmvResult(BaseModel):
    """CMV of one product or combo."""

    product_id: str
    cmv: float = 0.0
    has_undefined_cost: bool = False
    undefined_ingredient_ids: List[str] = Field(default_factory=list)


class ComboCost(BaseModel):
    """Cost breakdown of a combo."""

    combo_id: str
    cmv: float = 0.0
    full_price: float = Field(default=0.0, description="Sum of constituent sale prices")
    combo_price: float = 0.0
    discount_value: float = 0.0
    discount_percent: float = 0.0
    has_undefined_cost: bool = False


class CostAllocation(BaseModel):
    """Fixed cost burden under one allocation mode."""

    mode: FixedCostAllocationMode = FixedCostAllocationMode.REVENUE_BASED
    total_fixed_costs: float = 0.0
    average_monthly_revenue: float = 0.0
    estimated_monthly_sales: float = 0.0

    fixed_cost_percent: float = Field(default=0.0, description="Fixed costs / average revenue * 100")
    per_unit_value: float = Field(default=0.0, description="Fixed costs / estimated monthly sales")
    explanation: str = ""


class PricingContext(BaseModel):
    """Everything company-wide a pricing call needs, passed explicitly."""

    desired_profit_percent: float = 15.0
    target_cmv_percent: float = 35.0
    cmv_warning_band_percent: float = 5.0
    price_tolerance_percent: float = 5.0

    variable_cost_percent: float = Field(default=0.0, description="Sum of company-wide fees")
    allocation: CostAllocation = Field(default_factory=CostAllocation)
    channels: List[ChannelTaxRate] = Field(default_factory=list)


class ChannelPrice(BaseModel):
    """Ideal price for one sales channel."""

    channel_id: str
    channel_name: str
    total_tax_rate: float
    ideal_price: Optional[float] = None


class ProductMetrics(BaseModel):
    """Pricing metrics for one product at its current sale price."""

    cmv: float
    sale_price: float

    cmv_percent: float = 0.0
    cmv_status: CmvStatus = CmvStatus.HEALTHY

    gross_margin_percent: float = 0.0
    contribution_margin_percent: float = 0.0

    fixed_cost_value: float = 0.0
    variable_cost_value: float = 0.0
    total_cost: float = 0.0

    profit_value: float = 0.0
    profit_percent: float = 0.0
    margin_status: MarginStatus = MarginStatus.HEALTHY

    # None when the burden reaches 100%: the product cannot be priced profitably
    burden_percent: float = 0.0
    markup: Optional[float] = None
    ideal_menu_price: Optional[float] = None
    channel_prices: List[ChannelPrice] = Field(default_factory=list)

    fixed_cost_method: FixedCostAllocationMode = FixedCostAllocationMode.REVENUE_BASED
    fixed_cost_explanation: str = ""

    @property
    def can_price_profitably(self) -> bool:
        return self.markup is not None


class CostSimulation(BaseModel):
    """Effect of a CMV change on a product."""

    change_percent: float
    current_cmv: float
    simulated_cmv: float

    current: ProductMetrics
    simulated: ProductMetrics
    repriced_ideal_price: Optional[float] = None

    profit_value_diff: float = 0.0
    profit_percent_diff: float = 0.0
