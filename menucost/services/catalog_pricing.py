"""
Catalog Pricing

Prices a whole catalog snapshot: ingredient costs -> product CMVs -> pricing
context -> per-product metrics and insights. A malformed ingredient is
reported and its products marked as having an undefined cost; it never aborts
the batch.
"""

import logging
from typing import Dict, List, Optional, Tuple

from menucost.models.pricing import CmvResult, ComboCost, ResolvedCost
from menucost.models.snapshot import (
    CatalogPricingResult,
    CatalogSnapshot,
    EntityError,
    ProductPricing,
)
from menucost.services.composite_resolver import CompositeCostResolver
from menucost.services.insight_engine import build_insights, worst_insight_level
from menucost.services.pricing_context import build_pricing_context
from menucost.services.pricing_engine import compute_product_metrics, context_markup
from menucost.services.recipe_cost import compute_catalog_cmvs

logger = logging.getLogger(__name__)


def resolve_ingredient_costs(
    snapshot: CatalogSnapshot,
) -> Tuple[Dict[str, ResolvedCost], List[EntityError]]:
    """Resolve every ingredient of the snapshot, collecting per-ingredient errors."""
    resolver = CompositeCostResolver(snapshot.ingredients, snapshot.ingredient_components)
    index, failures = resolver.resolve_all()

    errors = [
        EntityError(
            entity_type="ingredient",
            entity_id=ingredient_id,
            code=exc.code,
            message=exc.message,
        )
        for ingredient_id, exc in failures.items()
    ]
    return index, errors


def compute_snapshot_cmvs(
    snapshot: CatalogSnapshot,
) -> Tuple[Dict[str, CmvResult], Dict[str, ComboCost], Dict[str, ResolvedCost], List[EntityError]]:
    index, errors = resolve_ingredient_costs(snapshot)
    cmvs, combos = compute_catalog_cmvs(
        snapshot.products, snapshot.recipe_lines, snapshot.combo_lines, index
    )
    return cmvs, combos, index, errors


def product_unit_costs(snapshot: CatalogSnapshot) -> Dict[str, Optional[float]]:
    """
    Unit cost per product for cost-of-sales estimates.

    Products whose CMV depends on a missing cost map to None.
    """
    cmvs, _, _, _ = compute_snapshot_cmvs(snapshot)
    return {
        product_id: (None if result.has_undefined_cost else result.cmv)
        for product_id, result in cmvs.items()
    }


def price_catalog(snapshot: CatalogSnapshot) -> CatalogPricingResult:
    """
    Price every product of a catalog snapshot.

    Returns:
        CatalogPricingResult with the pricing context, company markup,
        resolved ingredient costs, per-product pricing and isolated errors
    """
    cmvs, combos, index, errors = compute_snapshot_cmvs(snapshot)

    context = build_pricing_context(
        snapshot.business_settings,
        snapshot.fixed_costs,
        snapshot.fees,
        snapshot.channels,
        product_unit_costs={pid: result.cmv for pid, result in cmvs.items()},
    )
    burden, markup = context_markup(context)
    if markup is None:
        logger.warning(
            f"Pricing burden of {burden:.1f}% leaves no room for a markup "
            f"(company {snapshot.company_id})"
        )

    products: List[ProductPricing] = []
    for product in snapshot.products:
        cmv = cmvs[product.product_id]
        metrics = compute_product_metrics(cmv.cmv, product.sale_price, context)
        insights = build_insights(product, metrics, context)

        products.append(ProductPricing(
            product_id=product.product_id,
            name=product.name,
            is_combo=product.is_combo,
            cmv=cmv,
            combo=combos.get(product.product_id),
            metrics=metrics,
            insights=insights,
            worst_level=worst_insight_level(insights),
        ))

    logger.info(
        f"Priced {len(products)} products for company {snapshot.company_id} "
        f"({len(errors)} errors)"
    )

    return CatalogPricingResult(
        context=context,
        markup=markup,
        burden_percent=burden,
        ingredient_costs=index,
        products=products,
        errors=errors,
    )
