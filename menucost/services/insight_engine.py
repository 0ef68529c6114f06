"""
Insight Engine

Turns computed product metrics into a ranked list of pricing warnings.
Does not compute metrics itself; it receives them from the pricing engine.
"""

import math
from typing import Iterable, List, Optional, Union

from menucost.models.catalog import Product
from menucost.models.common import CmvStatus, InsightLevel
from menucost.models.insights import Insight
from menucost.models.pricing import PricingContext, ProductMetrics
from menucost.models.settings import BusinessSettings

# Lower = more urgent
LEVEL_PRIORITY = {
    InsightLevel.DANGER: 0,
    InsightLevel.WARNING: 1,
    InsightLevel.INFO: 2,
}

KEY_PRIORITY = {
    "negative_margin": 0,
    "cmv_above_target": 1,
    "price_below_ideal": 2,
    "profit_below_desired": 3,
    "targets_unreachable": 4,
}


def _sort_key(insight: Insight):
    return LEVEL_PRIORITY[insight.level], KEY_PRIORITY.get(insight.key, 99)


def build_insights(
    product: Product,
    metrics: ProductMetrics,
    settings: Union[BusinessSettings, PricingContext],
) -> List[Insight]:
    """
    Generate insights for a product from its pre-computed metrics.

    Args:
        product: The product (only sale_price is used)
        metrics: Metrics from compute_product_metrics
        settings: Targets (target CMV %, desired profit %, price tolerance %)

    Returns:
        Insights sorted danger -> warning -> info, then by key priority
    """
    sale_price = product.sale_price
    ideal_price = metrics.ideal_menu_price

    if not sale_price or sale_price <= 0:
        return []
    if ideal_price is not None and not math.isfinite(ideal_price):
        return []

    insights: List[Insight] = []
    target_cmv = settings.target_cmv_percent
    desired_profit = settings.desired_profit_percent

    # 1. Loss on every unit sold
    if metrics.profit_percent < 0:
        insights.append(Insight(
            key="negative_margin",
            level=InsightLevel.DANGER,
            title="Negative margin (loss)",
            detail=(
                f"Profit of {metrics.profit_percent:.1f}%: each unit sold loses "
                f"R$ {abs(metrics.profit_value):.2f}."
            ),
        ))

    # 2. CMV above target
    if metrics.cmv_status in (CmvStatus.DANGER, CmvStatus.WARNING):
        far = metrics.cmv_status == CmvStatus.DANGER
        insights.append(Insight(
            key="cmv_above_target",
            level=InsightLevel.DANGER if far else InsightLevel.WARNING,
            title="CMV far above target" if far else "CMV above target",
            detail=(
                f"CMV of {metrics.cmv_percent:.1f}% is "
                f"{metrics.cmv_percent - target_cmv:.1f}pp above the {target_cmv:g}% target."
            ),
        ))

    # 3. Price below ideal, with a tolerance so rounding never triggers it
    if ideal_price is not None and ideal_price > 0:
        gap = (ideal_price - sale_price) / ideal_price
        if gap > settings.price_tolerance_percent / 100:
            insights.append(Insight(
                key="price_below_ideal",
                level=InsightLevel.WARNING,
                title="Price below ideal",
                detail=(
                    f"Current price R$ {sale_price:.2f} is {gap * 100:.0f}% below the "
                    f"ideal price of R$ {ideal_price:.2f}."
                ),
            ))

    # 4. Positive but below desired; never together with negative_margin
    if 0 <= metrics.profit_percent < desired_profit:
        insights.append(Insight(
            key="profit_below_desired",
            level=InsightLevel.WARNING,
            title="Profit below desired",
            detail=(
                f"Profit of {metrics.profit_percent:.1f}% is below the "
                f"{desired_profit:g}% target."
            ),
        ))

    if metrics.markup is None:
        insights.append(Insight(
            key="targets_unreachable",
            level=InsightLevel.INFO,
            title="Cannot price profitably",
            detail=(
                f"Fixed, variable and profit targets add up to {metrics.burden_percent:.1f}% "
                f"of the price; no markup can cover them."
            ),
        ))

    insights.sort(key=_sort_key)
    return insights


def worst_insight_level(insights: Iterable[Insight]) -> Optional[InsightLevel]:
    """Most severe level among insights, for a single badge."""
    levels = [insight.level for insight in insights]
    if not levels:
        return None
    return min(levels, key=LEVEL_PRIORITY.__getitem__)
