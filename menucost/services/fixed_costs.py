"""
Fixed Cost Calculator

Derives the monthly value of structured fixed costs:
- CLT salary: base + 13th salary + vacation (with 1/3 bonus) + FGTS
- Freelancer / motoboy: daily rate * people * days worked
- Staff snack: unit cost * monthly quantity, optionally priced from a product's CMV
"""

import logging
from typing import Dict, Iterable, Mapping, Optional

from menucost.models.common import FixedCostKind
from menucost.models.settings import FixedCost, FixedCostConfig

logger = logging.getLogger(__name__)

FGTS_RATE = 0.08


def clt_breakdown(base_salary: float) -> Dict[str, float]:
    """Monthly burden of a CLT employee."""
    thirteenth = base_salary / 12
    vacation = (base_salary + base_salary / 3) / 12
    fgts = base_salary * FGTS_RATE
    return {
        "base_salary": base_salary,
        "thirteenth": thirteenth,
        "vacation": vacation,
        "fgts": fgts,
        "total": base_salary + thirteenth + vacation + fgts,
    }


def daily_rate_total(config: FixedCostConfig) -> float:
    people = config.qty_people if config.qty_people else 1
    return (config.daily_rate or 0.0) * people * (config.days_worked or 0.0)


def snack_total(
    config: FixedCostConfig,
    product_unit_costs: Optional[Mapping[str, float]] = None,
) -> float:
    if config.product_id:
        unit_cost = (product_unit_costs or {}).get(config.product_id)
        if unit_cost is None:
            logger.warning(f"Snack cost references unpriced product {config.product_id}")
            return 0.0
        return unit_cost * (config.monthly_qty or 0.0)

    quantity = config.monthly_qty if config.monthly_qty else 1
    return (config.unit_cost or 0.0) * quantity


def apply_fixed_cost_config(
    cost: FixedCost,
    product_unit_costs: Optional[Mapping[str, float]] = None,
) -> FixedCost:
    """Return a copy of the cost with monthly_value (and derived config fields) recomputed."""
    config = cost.config
    if config is None or config.kind == FixedCostKind.MANUAL:
        return cost

    if config.kind == FixedCostKind.CLT_SALARY:
        breakdown = clt_breakdown(config.base_salary or 0.0)
        new_config = config.model_copy(update={
            "thirteenth": breakdown["thirteenth"],
            "vacation": breakdown["vacation"],
            "fgts": breakdown["fgts"],
        })
        monthly_value = breakdown["total"]
    elif config.kind == FixedCostKind.DAILY_RATE:
        new_config = config
        monthly_value = daily_rate_total(config)
    else:
        monthly_value = snack_total(config, product_unit_costs)
        new_config = config
        if config.product_id and product_unit_costs and config.product_id in product_unit_costs:
            new_config = config.model_copy(
                update={"unit_cost": product_unit_costs[config.product_id]}
            )

    return cost.model_copy(update={"monthly_value": monthly_value, "config": new_config})


def total_fixed_costs(
    costs: Iterable[FixedCost],
    product_unit_costs: Optional[Mapping[str, float]] = None,
) -> float:
    """Sum of monthly fixed costs, deriving structured ones from their config."""
    return sum(
        apply_fixed_cost_config(cost, product_unit_costs).monthly_value
        for cost in costs
    )
