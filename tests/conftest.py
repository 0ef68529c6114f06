"""Pytest configuration and fixtures."""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app
os.environ["DEBUG"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

from menucost.models.catalog import (  # noqa: E402
    ComboLine,
    Fee,
    Ingredient,
    IngredientComponent,
    Product,
    RecipeLine,
    SalesChannel,
)
from menucost.models.settings import BusinessSettings, FixedCost  # noqa: E402
from menucost.models.snapshot import CatalogSnapshot  # noqa: E402


@pytest.fixture
def api_client() -> Generator[TestClient, None, None]:
    """Create a FastAPI test client."""
    from api.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def sample_ingredients() -> list:
    """Flour and yeast priced per kg, dough composed of both."""
    return [
        Ingredient(ingredient_id="flour", name="Flour", unit="kg", cost_per_unit=2.00),
        Ingredient(ingredient_id="yeast", name="Yeast", unit="kg", cost_per_unit=10.00),
        Ingredient(ingredient_id="cheese", name="Mozzarella", unit="kg", cost_per_unit=40.00),
        Ingredient(ingredient_id="box", name="Pizza box", unit="un", cost_per_unit=1.50,
                   category="Embalagem"),
        Ingredient(
            ingredient_id="dough",
            name="Dough",
            unit="kg",
            is_composite=True,
            components=[
                IngredientComponent(parent_id="dough", child_id="flour", quantity=0.5),
                IngredientComponent(parent_id="dough", child_id="yeast", quantity=0.1),
            ],
        ),
    ]


@pytest.fixture
def sample_products() -> list:
    return [
        Product(product_id="pizza", name="Pizza", sale_price=30.0),
        Product(product_id="soda", name="Soda", sale_price=6.0),
        Product(product_id="combo", name="Pizza + Soda", sale_price=32.0, is_combo=True),
    ]


@pytest.fixture
def sample_recipe_lines() -> list:
    return [
        RecipeLine(product_id="pizza", ingredient_id="dough", quantity=400, unit="g"),
        RecipeLine(product_id="pizza", ingredient_id="cheese", quantity=200, unit="g"),
        RecipeLine(product_id="pizza", ingredient_id="box", quantity=1),
    ]


@pytest.fixture
def sample_settings() -> BusinessSettings:
    return BusinessSettings(
        desired_profit_percent=15,
        target_cmv_percent=35,
        estimated_monthly_sales=1000,
        monthly_revenue=[50000.0] * 12,
    )


@pytest.fixture
def sample_catalog(sample_ingredients, sample_products, sample_recipe_lines, sample_settings):
    """A small pizzeria catalog."""
    return CatalogSnapshot(
        company_id="acme",
        ingredients=sample_ingredients,
        recipe_lines=sample_recipe_lines,
        combo_lines=[
            ComboLine(combo_id="combo", product_id="pizza", quantity=1),
            ComboLine(combo_id="combo", product_id="soda", quantity=1),
        ],
        products=sample_products,
        fees=[
            Fee(fee_id="card", name="Card", percentage=4.0),
            Fee(fee_id="tax", name="Simples", percentage=6.0),
            Fee(fee_id="ifood", name="iFood commission", percentage=12.0),
        ],
        channels=[
            SalesChannel(channel_id="counter", name="Counter", fee_ids=["card"]),
            SalesChannel(channel_id="ifood", name="iFood", fee_ids=["card", "ifood"]),
        ],
        business_settings=sample_settings,
        fixed_costs=[
            FixedCost(fixed_cost_id="rent", name="Rent", monthly_value=6000.0),
            FixedCost(fixed_cost_id="power", name="Power", monthly_value=4000.0),
        ],
    )
