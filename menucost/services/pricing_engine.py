"""
Pricing Engine

Derives the markup multiplier, ideal menu price, per-channel ideal prices and
the realized metrics of a product at its current sale price.

FORMULAS:
    burden% = fixed% + variable% + desired_profit%
    markup  = 100 / (100 - burden%)        (undefined when burden% >= 100)
    ideal   = cost_basis * markup
    channel = ideal / (1 - channel_tax% / 100)

In per_unit allocation mode the fixed share of the burden is 0 and the flat
fixed cost per unit is added to the cost basis instead.
"""

from typing import Iterable, List, Optional, Tuple

from menucost.models.catalog import ChannelTaxRate
from menucost.models.common import CmvStatus, MarginStatus
from menucost.models.pricing import ChannelPrice, CostSimulation, PricingContext, ProductMetrics
from menucost.services.cost_allocation import fixed_cost_value, split_fixed_burden


def compute_burden_percent(
    fixed_cost_percent: float,
    variable_cost_percent: float,
    desired_profit_percent: float,
) -> float:
    return fixed_cost_percent + variable_cost_percent + desired_profit_percent


def compute_markup(
    fixed_cost_percent: float,
    variable_cost_percent: float,
    desired_profit_percent: float,
) -> Optional[float]:
    """
    Markup multiplier covering every cost share plus the desired profit.

    Returns:
        100 / (100 - burden%), or None when burden% >= 100 (no price can
        cover the targets). Channel taxes are applied per channel, not here.
    """
    burden = compute_burden_percent(fixed_cost_percent, variable_cost_percent, desired_profit_percent)
    if burden >= 100:
        return None
    return 100 / (100 - burden)


def context_markup(context: PricingContext) -> Tuple[float, Optional[float]]:
    """Company-wide (burden%, markup) for a pricing context."""
    fixed_percent, _ = split_fixed_burden(context.allocation)
    burden = compute_burden_percent(
        fixed_percent, context.variable_cost_percent, context.desired_profit_percent
    )
    markup = compute_markup(
        fixed_percent, context.variable_cost_percent, context.desired_profit_percent
    )
    return burden, markup


def compute_ideal_menu_price(cmv: float, markup: Optional[float]) -> Optional[float]:
    """Ideal price on the own channel: cmv * markup (None when markup is undefined)."""
    if markup is None or markup <= 0:
        return None
    if cmv <= 0:
        return 0.0
    return cmv * markup


def compute_channel_price(menu_price: Optional[float], channel_tax_rate: float) -> Optional[float]:
    """
    Gross up a menu price so the seller still nets it after the channel's fees.

    Returns:
        menu_price / (1 - rate/100); menu_price itself when rate <= 0;
        None when rate >= 100 or the menu price is undefined
    """
    if menu_price is None or channel_tax_rate >= 100:
        return None
    if menu_price <= 0:
        return 0.0
    if channel_tax_rate <= 0:
        return menu_price
    return menu_price / (1 - channel_tax_rate / 100)


def compute_all_channel_prices(
    base_price: Optional[float],
    channels: Iterable[ChannelTaxRate],
) -> List[ChannelPrice]:
    return [
        ChannelPrice(
            channel_id=channel.channel_id,
            channel_name=channel.name,
            total_tax_rate=channel.total_tax_rate,
            ideal_price=compute_channel_price(base_price, channel.total_tax_rate),
        )
        for channel in channels
    ]


def _cmv_status(cmv_percent: float, context: PricingContext) -> CmvStatus:
    if cmv_percent <= context.target_cmv_percent:
        return CmvStatus.HEALTHY
    if cmv_percent <= context.target_cmv_percent + context.cmv_warning_band_percent:
        return CmvStatus.WARNING
    return CmvStatus.DANGER


def _margin_status(profit_percent: float, context: PricingContext) -> MarginStatus:
    if profit_percent < 0:
        return MarginStatus.DANGER
    if profit_percent < context.desired_profit_percent:
        return MarginStatus.WARNING
    return MarginStatus.HEALTHY


def compute_product_metrics(cmv: float, sale_price: float, context: PricingContext) -> ProductMetrics:
    """
    Compute pricing metrics for a product.

    Args:
        cmv: Cost of goods of one unit
        sale_price: Current sale price
        context: Company-wide pricing context

    Returns:
        ProductMetrics; ratios over a non-positive price are 0.0, markup and
        ideal prices are None when the product cannot be priced profitably
    """
    burden, markup = context_markup(context)

    # Ideal prices
    _, flat_fixed = split_fixed_burden(context.allocation)
    cost_basis = cmv + flat_fixed
    ideal_menu_price = compute_ideal_menu_price(cost_basis, markup)
    channel_prices = compute_all_channel_prices(ideal_menu_price, context.channels)

    # Cost breakdown at the actual price
    variable_cost = sale_price * (context.variable_cost_percent / 100)
    fixed_cost = fixed_cost_value(context.allocation, sale_price)
    total_cost = cmv + variable_cost + fixed_cost
    profit_value = sale_price - total_cost

    if sale_price > 0:
        cmv_percent = cmv / sale_price * 100
        gross_margin = (sale_price - cmv) / sale_price * 100
        contribution_margin = (sale_price - cmv - variable_cost) / sale_price * 100
        profit_percent = profit_value / sale_price * 100
    else:
        cmv_percent = gross_margin = contribution_margin = profit_percent = 0.0

    return ProductMetrics(
        cmv=cmv,
        sale_price=sale_price,
        cmv_percent=cmv_percent,
        cmv_status=_cmv_status(cmv_percent, context),
        gross_margin_percent=gross_margin,
        contribution_margin_percent=contribution_margin,
        fixed_cost_value=fixed_cost,
        variable_cost_value=variable_cost,
        total_cost=total_cost,
        profit_value=profit_value,
        profit_percent=profit_percent,
        margin_status=_margin_status(profit_percent, context),
        burden_percent=burden,
        markup=markup,
        ideal_menu_price=ideal_menu_price,
        channel_prices=channel_prices,
        fixed_cost_method=context.allocation.mode,
        fixed_cost_explanation=context.allocation.explanation,
    )


def simulate_cost_change(
    cmv: float,
    sale_price: float,
    change_percent: float,
    context: PricingContext,
) -> CostSimulation:
    """
    What happens to a product when its CMV changes by change_percent.

    Compares current metrics with metrics at the same sale price and the new
    CMV, and reports the ideal price for the new CMV.
    """
    simulated_cmv = cmv * (1 + change_percent / 100)

    current = compute_product_metrics(cmv, sale_price, context)
    simulated = compute_product_metrics(simulated_cmv, sale_price, context)

    return CostSimulation(
        change_percent=change_percent,
        current_cmv=cmv,
        simulated_cmv=simulated_cmv,
        current=current,
        simulated=simulated,
        repriced_ideal_price=simulated.ideal_menu_price,
        profit_value_diff=simulated.profit_value - current.profit_value,
        profit_percent_diff=simulated.profit_percent - current.profit_percent,
    )
