"""Integration tests for pricing endpoints."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def catalog_payload(sample_catalog) -> dict:
    return sample_catalog.model_dump(mode="json")


class TestCatalogPricing:
    def test_price_catalog(self, api_client: TestClient, catalog_payload):
        response = api_client.post("/api/v1/pricing/catalog", json=catalog_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["markup"] == pytest.approx(100 / 43)
        assert data["burden_percent"] == pytest.approx(57.0)
        assert data["errors"] == []

        products = {p["product_id"]: p for p in data["products"]}
        assert products["pizza"]["cmv"]["cmv"] == pytest.approx(10.3)
        assert products["combo"]["combo"]["discount_value"] == pytest.approx(4.0)
        assert len(products["pizza"]["metrics"]["channel_prices"]) == 2

    def test_cycle_reported_not_raised(self, api_client: TestClient, catalog_payload):
        catalog_payload["ingredients"].append(
            {"ingredient_id": "a", "unit": "kg", "is_composite": True}
        )
        catalog_payload["ingredient_components"] = [
            {"parent_id": "a", "child_id": "a", "quantity": 1.0}
        ]
        response = api_client.post("/api/v1/pricing/catalog", json=catalog_payload)

        assert response.status_code == 200
        errors = response.json()["errors"]
        assert errors[0]["entity_id"] == "a"
        assert errors[0]["code"] == "CYCLIC_COMPOSITION"

    def test_invalid_payload(self, api_client: TestClient):
        response = api_client.post(
            "/api/v1/pricing/catalog",
            json={"products": [{"name": "missing id"}]},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "VALIDATION_ERROR"
        assert "request_id" in data


class TestIngredientCosts:
    def test_costs_and_validation(self, api_client: TestClient, catalog_payload):
        catalog_payload["ingredients"].append({
            "ingredient_id": "stuffed",
            "unit": "kg",
            "is_composite": True,
            "components": [{"parent_id": "stuffed", "child_id": "dough", "quantity": 1.0}],
        })
        response = api_client.post("/api/v1/pricing/ingredients/costs", json=catalog_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["costs"]["dough"]["unit_cost"] == pytest.approx(2.0)
        assert "stuffed" not in data["costs"]
        assert data["errors"][0]["entity_id"] == "stuffed"
        assert data["errors"][0]["code"] == "NESTED_COMPOSITION"
        assert len(data["validation_errors"]) == 1


class TestMarkup:
    def test_markup(self, api_client: TestClient):
        response = api_client.post("/api/v1/pricing/markup", json={
            "fixed_cost_percent": 20,
            "variable_cost_percent": 10,
            "desired_profit_percent": 15,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["burden_percent"] == pytest.approx(45.0)
        assert data["markup"] == pytest.approx(1.8181818)
        assert data["can_price_profitably"] is True

    def test_unreachable(self, api_client: TestClient):
        response = api_client.post("/api/v1/pricing/markup", json={
            "fixed_cost_percent": 50,
            "variable_cost_percent": 30,
            "desired_profit_percent": 20,
        })

        data = response.json()
        assert data["markup"] is None
        assert data["can_price_profitably"] is False


class TestSimulate:
    def test_simulate(self, api_client: TestClient):
        response = api_client.post("/api/v1/pricing/simulate", json={
            "cmv": 10.0,
            "sale_price": 30.0,
            "change_percent": 10.0,
            "context": {"desired_profit_percent": 15.0},
        })

        assert response.status_code == 200
        data = response.json()
        assert data["simulated_cmv"] == pytest.approx(11.0)
        assert data["profit_value_diff"] == pytest.approx(-1.0)

    def test_negative_cmv_rejected(self, api_client: TestClient):
        response = api_client.post("/api/v1/pricing/simulate", json={"cmv": -1, "sale_price": 10})
        assert response.status_code == 400
