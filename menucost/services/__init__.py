"""Business logic services for menucost."""

from menucost.services import (
    catalog_pricing,
    composite_resolver,
    cost_allocation,
    fixed_costs,
    insight_engine,
    monthly_kpis,
    pricing_context,
    pricing_engine,
    recipe_cost,
)

__all__ = [
    "catalog_pricing",
    "composite_resolver",
    "cost_allocation",
    "fixed_costs",
    "insight_engine",
    "monthly_kpis",
    "pricing_context",
    "pricing_engine",
    "recipe_cost",
]
