"""
Cost Allocation Model

Spreads a company's monthly fixed costs over the units it sells.

MODES:
- revenue_based: fixed costs are a share of revenue,
  fixed_cost_percent = total_fixed / average_monthly_revenue * 100,
  and each unit carries sale_price * fixed_cost_percent / 100
- per_unit: each unit carries a flat total_fixed / estimated_monthly_sales,
  whatever its price
"""

from typing import Iterable, Tuple

from menucost.models.common import FixedCostAllocationMode
from menucost.models.pricing import CostAllocation
from menucost.models.settings import BusinessSettings


def average_monthly_revenue(monthly_revenue: Iterable[float]) -> float:
    """
    Average over the months that have revenue entered.

    A month stored as 0 has not been filled in yet and is left out, so a
    company that entered two months is not averaged over twelve.
    """
    entered = [value for value in monthly_revenue if value and value > 0]
    return sum(entered) / len(entered) if entered else 0.0


def allocate_fixed_cost_percent(total_fixed_costs: float, average_monthly_revenue: float) -> float:
    """Fixed costs as % of average monthly revenue (0 without revenue)."""
    if average_monthly_revenue <= 0:
        return 0.0
    return total_fixed_costs / average_monthly_revenue * 100


def build_cost_allocation(
    settings: BusinessSettings,
    total_fixed_costs: float,
    average_monthly_revenue: float,
) -> CostAllocation:
    """Build the fixed cost allocation for the company's configured mode."""
    mode = settings.fixed_cost_allocation_mode
    estimated_sales = settings.estimated_monthly_sales
    percent = allocate_fixed_cost_percent(total_fixed_costs, average_monthly_revenue)
    per_unit = total_fixed_costs / estimated_sales if estimated_sales > 0 else 0.0

    if mode == FixedCostAllocationMode.PER_UNIT:
        explanation = f"R$ {total_fixed_costs:.0f} / {estimated_sales:g} sales per month"
    else:
        explanation = (
            f"{percent:.2f}% of average monthly revenue (R$ {average_monthly_revenue:.0f})"
        )

    return CostAllocation(
        mode=mode,
        total_fixed_costs=total_fixed_costs,
        average_monthly_revenue=average_monthly_revenue,
        estimated_monthly_sales=estimated_sales,
        fixed_cost_percent=percent,
        per_unit_value=per_unit,
        explanation=explanation,
    )


def split_fixed_burden(allocation: CostAllocation) -> Tuple[float, float]:
    """
    Split the fixed burden into (percent of price, flat amount per unit).

    This is the only place the allocation mode is branched on; every pricing
    computation goes through it.
    """
    if allocation.mode == FixedCostAllocationMode.PER_UNIT:
        return 0.0, allocation.per_unit_value
    return allocation.fixed_cost_percent, 0.0


def fixed_cost_value(allocation: CostAllocation, sale_price: float) -> float:
    """Fixed cost carried by one unit sold at sale_price."""
    percent, flat = split_fixed_burden(allocation)
    return sale_price * percent / 100 + flat


def allocate_fixed_cost_per_unit(
    settings: BusinessSettings,
    total_fixed_costs: float,
    average_monthly_revenue: float,
    sale_price: float = 0.0,
) -> float:
    """Fixed cost per unit under the company's mode (revenue_based needs sale_price)."""
    allocation = build_cost_allocation(settings, total_fixed_costs, average_monthly_revenue)
    return fixed_cost_value(allocation, sale_price)
