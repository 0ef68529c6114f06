"""Tests for markup, ideal prices and product metrics."""

import pytest

from menucost.models.catalog import ChannelTaxRate
from menucost.models.common import CmvStatus, FixedCostAllocationMode, MarginStatus
from menucost.models.pricing import CostAllocation, PricingContext
from menucost.services.pricing_engine import (
    compute_all_channel_prices,
    compute_burden_percent,
    compute_channel_price,
    compute_ideal_menu_price,
    compute_markup,
    compute_product_metrics,
    context_markup,
    simulate_cost_change,
)


def make_context(fixed=20.0, variable=10.0, profit=15.0, channels=None, **kwargs) -> PricingContext:
    return PricingContext(
        desired_profit_percent=profit,
        variable_cost_percent=variable,
        allocation=CostAllocation(fixed_cost_percent=fixed),
        channels=channels or [],
        **kwargs,
    )


class TestMarkup:
    """markup = 100 / (100 - burden%)."""

    def test_markup_scenario(self):
        """CMV R$5.00 at 20% fixed, 10% variable and 15% profit prices at R$9.09."""
        assert compute_burden_percent(20, 10, 15) == 45
        markup = compute_markup(20, 10, 15)

        assert markup == pytest.approx(1.8181818)
        assert compute_ideal_menu_price(5.0, markup) == pytest.approx(9.0909, abs=1e-3)

    @pytest.mark.parametrize("cmv", [0.35, 5.0, 42.9])
    @pytest.mark.parametrize(
        "fixed,variable,profit",
        [(0, 0, 0), (10, 5, 15), (20, 10, 15), (30, 25, 30), (40, 30, 29.5)],
    )
    def test_ideal_price_round_trip(self, cmv, fixed, variable, profit):
        """Removing the burden from the ideal price gives back the CMV."""
        burden = compute_burden_percent(fixed, variable, profit)
        ideal = compute_ideal_menu_price(cmv, compute_markup(fixed, variable, profit))

        assert burden < 100
        assert ideal * (1 - burden / 100) == pytest.approx(cmv)

    def test_zero_burden(self):
        assert compute_markup(0, 0, 0) == pytest.approx(1.0)

    @pytest.mark.parametrize("fixed,variable,profit", [(50, 30, 20), (60, 30, 20), (100, 0, 0)])
    def test_unreachable_targets(self, fixed, variable, profit):
        assert compute_markup(fixed, variable, profit) is None

    def test_ideal_price_without_markup(self):
        assert compute_ideal_menu_price(5.0, None) is None

    def test_ideal_price_without_cost(self):
        assert compute_ideal_menu_price(0.0, 2.0) == 0.0

    def test_per_unit_mode_drops_fixed_percent(self):
        context = make_context(fixed=20.0)
        context.allocation.mode = FixedCostAllocationMode.PER_UNIT

        burden, markup = context_markup(context)
        assert burden == pytest.approx(25.0)
        assert markup == pytest.approx(100 / 75)


class TestChannelPrices:
    """channel price = menu price / (1 - rate/100)."""

    def test_gross_up(self):
        assert compute_channel_price(10.0, 20.0) == pytest.approx(12.5)

    def test_no_fees(self):
        assert compute_channel_price(10.0, 0.0) == 10.0

    def test_rate_at_or_above_100(self):
        assert compute_channel_price(10.0, 100.0) is None
        assert compute_channel_price(10.0, 120.0) is None

    def test_undefined_menu_price(self):
        assert compute_channel_price(None, 10.0) is None

    def test_net_after_fees_equals_menu_price(self):
        for rate in (4.0, 16.0, 27.5):
            gross = compute_channel_price(23.95, rate)
            assert gross * (1 - rate / 100) == pytest.approx(23.95)

    def test_all_channels(self):
        channels = [
            ChannelTaxRate(channel_id="counter", name="Counter", total_tax_rate=0.0),
            ChannelTaxRate(channel_id="ifood", name="iFood", total_tax_rate=20.0),
        ]
        prices = compute_all_channel_prices(10.0, channels)

        assert [p.channel_id for p in prices] == ["counter", "ifood"]
        assert prices[0].ideal_price == 10.0
        assert prices[1].ideal_price == pytest.approx(12.5)


class TestProductMetrics:
    def test_healthy_product(self):
        context = make_context(fixed=20.0, variable=22.0, profit=15.0)
        metrics = compute_product_metrics(10.3, 30.0, context)

        assert metrics.cmv_percent == pytest.approx(34.333, abs=1e-3)
        assert metrics.cmv_status == CmvStatus.HEALTHY
        assert metrics.variable_cost_value == pytest.approx(6.6)
        assert metrics.fixed_cost_value == pytest.approx(6.0)
        assert metrics.total_cost == pytest.approx(22.9)
        assert metrics.profit_value == pytest.approx(7.1)
        assert metrics.margin_status == MarginStatus.HEALTHY
        assert metrics.ideal_menu_price == pytest.approx(10.3 * 100 / 43)
        assert metrics.can_price_profitably

    def test_cmv_status_bands(self):
        context = make_context(target_cmv_percent=35.0, cmv_warning_band_percent=5.0)

        assert compute_product_metrics(3.5, 10.0, context).cmv_status == CmvStatus.HEALTHY
        assert compute_product_metrics(3.8, 10.0, context).cmv_status == CmvStatus.WARNING
        assert compute_product_metrics(4.5, 10.0, context).cmv_status == CmvStatus.DANGER

    def test_margin_status(self):
        context = make_context(fixed=0.0, variable=0.0, profit=15.0)

        assert compute_product_metrics(9.0, 10.0, context).margin_status == MarginStatus.WARNING
        assert compute_product_metrics(11.0, 10.0, context).margin_status == MarginStatus.DANGER

    def test_zero_price(self):
        metrics = compute_product_metrics(5.0, 0.0, make_context())

        assert metrics.cmv_percent == 0.0
        assert metrics.profit_percent == 0.0
        assert metrics.gross_margin_percent == 0.0

    @pytest.mark.parametrize("mode", list(FixedCostAllocationMode))
    def test_selling_at_ideal_price_yields_desired_profit(self, mode):
        context = make_context(fixed=20.0, variable=10.0, profit=15.0)
        context.allocation.mode = mode
        context.allocation.per_unit_value = 2.0

        ideal = compute_product_metrics(5.0, 1.0, context).ideal_menu_price
        at_ideal = compute_product_metrics(5.0, ideal, context)

        assert at_ideal.profit_percent == pytest.approx(15.0)

    def test_unreachable_targets(self):
        channels = [ChannelTaxRate(channel_id="ifood", name="iFood", total_tax_rate=12.0)]
        metrics = compute_product_metrics(5.0, 10.0, make_context(fixed=60.0, variable=30.0, channels=channels))

        assert metrics.markup is None
        assert metrics.ideal_menu_price is None
        assert metrics.channel_prices[0].ideal_price is None
        assert not metrics.can_price_profitably

    def test_per_unit_fixed_cost_is_flat(self):
        context = make_context(fixed=20.0, variable=10.0, profit=15.0)
        context.allocation.mode = FixedCostAllocationMode.PER_UNIT
        context.allocation.per_unit_value = 2.0

        cheap = compute_product_metrics(5.0, 10.0, context)
        dear = compute_product_metrics(5.0, 40.0, context)

        assert cheap.fixed_cost_value == dear.fixed_cost_value == pytest.approx(2.0)
        assert cheap.ideal_menu_price == pytest.approx(7.0 * 100 / 75)

    def test_per_unit_fixed_cost_priced_without_cmv(self):
        context = make_context(fixed=20.0, variable=10.0, profit=15.0)
        context.allocation.mode = FixedCostAllocationMode.PER_UNIT
        context.allocation.per_unit_value = 2.0

        metrics = compute_product_metrics(0.0, 10.0, context)
        assert metrics.ideal_menu_price == pytest.approx(2.0 * 100 / 75)

    def test_revenue_based_without_cmv_is_free(self):
        metrics = compute_product_metrics(0.0, 10.0, make_context())
        assert metrics.ideal_menu_price == 0.0


class TestSimulation:
    def test_cost_increase(self):
        context = make_context(fixed=0.0, variable=0.0, profit=15.0)
        simulation = simulate_cost_change(10.0, 30.0, 10.0, context)

        assert simulation.simulated_cmv == pytest.approx(11.0)
        assert simulation.profit_value_diff == pytest.approx(-1.0)
        assert simulation.profit_percent_diff == pytest.approx(-100 / 30)
        assert simulation.repriced_ideal_price == pytest.approx(11.0 / 0.85)

    def test_cost_decrease(self):
        simulation = simulate_cost_change(10.0, 30.0, -50.0, make_context())

        assert simulation.simulated_cmv == pytest.approx(5.0)
        assert simulation.profit_value_diff == pytest.approx(5.0)
