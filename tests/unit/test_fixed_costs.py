"""Tests for fixed cost derivation and the pricing context."""

import pytest

from menucost.models.catalog import Fee, SalesChannel
from menucost.models.common import FixedCostAllocationMode, FixedCostKind
from menucost.models.settings import FixedCost, FixedCostConfig
from menucost.services.fixed_costs import (
    apply_fixed_cost_config,
    clt_breakdown,
    daily_rate_total,
    snack_total,
    total_fixed_costs,
)
from menucost.services.pricing_context import (
    build_pricing_context,
    resolve_channel_tax_rates,
    variable_cost_percent,
)


class TestFixedCostCalculator:
    def test_clt_breakdown(self):
        breakdown = clt_breakdown(2000.0)

        assert breakdown["thirteenth"] == pytest.approx(166.667, abs=1e-3)
        assert breakdown["vacation"] == pytest.approx(222.222, abs=1e-3)
        assert breakdown["fgts"] == pytest.approx(160.0)
        assert breakdown["total"] == pytest.approx(2548.889, abs=1e-3)

    def test_daily_rate(self):
        config = FixedCostConfig(kind=FixedCostKind.DAILY_RATE, daily_rate=80, qty_people=2, days_worked=20)
        assert daily_rate_total(config) == pytest.approx(3200.0)

    def test_daily_rate_defaults_to_one_person(self):
        config = FixedCostConfig(kind=FixedCostKind.DAILY_RATE, daily_rate=80, days_worked=10)
        assert daily_rate_total(config) == pytest.approx(800.0)

    def test_manual_snack(self):
        config = FixedCostConfig(kind=FixedCostKind.SNACK, unit_cost=12.0, monthly_qty=30)
        assert snack_total(config) == pytest.approx(360.0)

    def test_snack_from_product(self):
        config = FixedCostConfig(kind=FixedCostKind.SNACK, product_id="pizza", monthly_qty=20)
        assert snack_total(config, {"pizza": 10.3}) == pytest.approx(206.0)

    def test_snack_from_unpriced_product(self):
        config = FixedCostConfig(kind=FixedCostKind.SNACK, product_id="pizza", monthly_qty=20)
        assert snack_total(config, {}) == 0.0

    def test_apply_config_fills_derived_fields(self):
        cost = FixedCost(
            fixed_cost_id="cook",
            name="Cook",
            config=FixedCostConfig(kind=FixedCostKind.CLT_SALARY, base_salary=2000.0),
        )
        applied = apply_fixed_cost_config(cost)

        assert applied.monthly_value == pytest.approx(2548.889, abs=1e-3)
        assert applied.config.fgts == pytest.approx(160.0)
        assert cost.monthly_value == 0.0

    def test_manual_cost_kept(self):
        cost = FixedCost(fixed_cost_id="rent", monthly_value=6000.0)
        assert apply_fixed_cost_config(cost) is cost

    def test_total(self):
        costs = [
            FixedCost(fixed_cost_id="rent", monthly_value=6000.0),
            FixedCost(
                fixed_cost_id="motoboy",
                config=FixedCostConfig(kind=FixedCostKind.DAILY_RATE, daily_rate=100, days_worked=25),
            ),
        ]
        assert total_fixed_costs(costs) == pytest.approx(8500.0)


class TestPricingContext:
    @pytest.fixture
    def fees(self):
        return [
            Fee(fee_id="card", name="Card", percentage=4.0),
            Fee(fee_id="tax", name="Simples", percentage=6.0),
        ]

    def test_variable_cost_percent(self, fees):
        assert variable_cost_percent(fees) == pytest.approx(10.0)

    def test_channel_tax_rates(self, fees):
        channels = [
            SalesChannel(channel_id="counter", name="Counter"),
            SalesChannel(channel_id="app", name="App", fee_ids=["card", "ghost"], fee_percentages=[12.0]),
        ]
        rates = resolve_channel_tax_rates(channels, fees)

        assert rates[0].total_tax_rate == 0.0
        assert rates[1].total_tax_rate == pytest.approx(16.0)

    def test_build_context(self, sample_settings, fees):
        context = build_pricing_context(
            sample_settings,
            [FixedCost(fixed_cost_id="rent", monthly_value=10000.0)],
            fees,
            [],
        )

        assert context.variable_cost_percent == pytest.approx(10.0)
        assert context.allocation.mode == FixedCostAllocationMode.REVENUE_BASED
        assert context.allocation.fixed_cost_percent == pytest.approx(20.0)
        assert context.desired_profit_percent == 15.0
        assert context.channels == []
