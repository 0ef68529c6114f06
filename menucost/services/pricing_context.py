"""
Pricing Context Builder

Joins business settings, fixed costs, fees and sales channels into the
PricingContext every pricing call receives explicitly.
"""

import logging
from typing import Iterable, List, Mapping, Optional

from menucost.models.catalog import ChannelTaxRate, Fee, SalesChannel
from menucost.models.pricing import PricingContext
from menucost.models.settings import BusinessSettings, FixedCost
from menucost.services.cost_allocation import average_monthly_revenue, build_cost_allocation
from menucost.services.fixed_costs import total_fixed_costs

logger = logging.getLogger(__name__)


def variable_cost_percent(fees: Iterable[Fee]) -> float:
    """Company-wide variable cost %: the sum of all fees."""
    return sum(fee.percentage or 0.0 for fee in fees)


def resolve_channel_tax_rates(
    channels: Iterable[SalesChannel],
    fees: Iterable[Fee],
) -> List[ChannelTaxRate]:
    """Collapse each channel's fees into a total tax rate."""
    fee_by_id = {fee.fee_id: fee for fee in fees}
    rates = []

    for channel in channels:
        total = sum(channel.fee_percentages)
        for fee_id in channel.fee_ids:
            fee = fee_by_id.get(fee_id)
            if fee is None:
                logger.warning(f"Channel {channel.channel_id} references unknown fee {fee_id}")
                continue
            total += fee.percentage or 0.0

        rates.append(ChannelTaxRate(
            channel_id=channel.channel_id,
            name=channel.name,
            total_tax_rate=total,
        ))

    return rates


def build_pricing_context(
    settings: BusinessSettings,
    fixed_costs: Iterable[FixedCost],
    fees: Iterable[Fee],
    channels: Iterable[SalesChannel],
    product_unit_costs: Optional[Mapping[str, float]] = None,
) -> PricingContext:
    """
    Build the pricing context of one company.

    Args:
        settings: Business settings
        fixed_costs: Monthly fixed costs (structured ones are derived from config)
        fees: All company fees (their sum is the variable cost %)
        channels: Sales channels
        product_unit_costs: Product CMVs, for fixed costs priced from a product

    Returns:
        PricingContext with allocation, variable cost % and channel tax rates
    """
    fees = list(fees)
    fixed_total = total_fixed_costs(fixed_costs, product_unit_costs)
    avg_revenue = average_monthly_revenue(settings.monthly_revenue)

    return PricingContext(
        desired_profit_percent=settings.desired_profit_percent,
        target_cmv_percent=settings.target_cmv_percent,
        cmv_warning_band_percent=settings.cmv_warning_band_percent,
        price_tolerance_percent=settings.price_tolerance_percent,
        variable_cost_percent=variable_cost_percent(fees),
        allocation=build_cost_allocation(settings, fixed_total, avg_revenue),
        channels=resolve_channel_tax_rates(channels, fees),
    )
