"""Cost and pricing endpoints."""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from menucost.models.pricing import CostSimulation, PricingContext, ResolvedCost
from menucost.models.snapshot import CatalogPricingResult, CatalogSnapshot, EntityError
from menucost.services.catalog_pricing import price_catalog, resolve_ingredient_costs
from menucost.services.composite_resolver import validate_composition
from menucost.services.pricing_engine import (
    compute_burden_percent,
    compute_markup,
    simulate_cost_change,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class MarkupRequest(BaseModel):
    fixed_cost_percent: float = 0.0
    variable_cost_percent: float = 0.0
    desired_profit_percent: float = 15.0


class MarkupResponse(BaseModel):
    burden_percent: float
    markup: Optional[float] = None
    can_price_profitably: bool


class SimulationRequest(BaseModel):
    cmv: float = Field(..., ge=0)
    sale_price: float = Field(..., ge=0)
    change_percent: float = 10.0
    context: PricingContext = Field(default_factory=PricingContext)


class IngredientCostsResponse(BaseModel):
    costs: Dict[str, ResolvedCost]
    errors: List[EntityError] = Field(default_factory=list)
    validation_errors: List[str] = Field(default_factory=list)


@router.post("/catalog", response_model=CatalogPricingResult)
async def price_catalog_snapshot(snapshot: CatalogSnapshot) -> CatalogPricingResult:
    """
    Price every product of a catalog snapshot.

    Returns CMV, metrics, ideal prices per channel and insights per product.
    """
    return price_catalog(snapshot)


@router.post("/ingredients/costs", response_model=IngredientCostsResponse)
async def ingredient_costs(snapshot: CatalogSnapshot) -> IngredientCostsResponse:
    """Resolve ingredient unit costs and report composition problems."""
    costs, errors = resolve_ingredient_costs(snapshot)
    validation_errors = validate_composition(
        snapshot.ingredients, snapshot.ingredient_components
    )
    if validation_errors:
        logger.info(f"Composition validation found {len(validation_errors)} problems")

    return IngredientCostsResponse(
        costs=costs,
        errors=errors,
        validation_errors=validation_errors,
    )


@router.post("/markup", response_model=MarkupResponse)
async def markup(request: MarkupRequest) -> MarkupResponse:
    """Markup multiplier for a cost structure."""
    value = compute_markup(
        request.fixed_cost_percent,
        request.variable_cost_percent,
        request.desired_profit_percent,
    )
    return MarkupResponse(
        burden_percent=compute_burden_percent(
            request.fixed_cost_percent,
            request.variable_cost_percent,
            request.desired_profit_percent,
        ),
        markup=value,
        can_price_profitably=value is not None,
    )


@router.post("/simulate", response_model=CostSimulation)
async def simulate(request: SimulationRequest) -> CostSimulation:
    """Effect of a CMV change on a product's profit and ideal price."""
    return simulate_cost_change(
        request.cmv,
        request.sale_price,
        request.change_percent,
        request.context,
    )
