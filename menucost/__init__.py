"""
menucost Core Package

Pure business logic for restaurant cost and pricing: composite ingredient costs,
recipe CMV, fixed cost allocation, markup and channel prices, pricing insights,
and monthly KPI rollups.
No framework dependencies (FastAPI) in this package.
"""

__version__ = "1.0.0"

from menucost.errors import CostEngineError, CyclicCompositionError
from menucost.models.catalog import Ingredient, Product, RecipeLine, SalesChannel
from menucost.models.insights import Insight
from menucost.models.pricing import PricingContext, ProductMetrics
from menucost.models.reports import MonthlyKpi, Sale
from menucost.models.settings import BusinessSettings, FixedCost

__all__ = [
    "CostEngineError",
    "CyclicCompositionError",
    "Ingredient",
    "Product",
    "RecipeLine",
    "SalesChannel",
    "BusinessSettings",
    "FixedCost",
    "PricingContext",
    "ProductMetrics",
    "Insight",
    "MonthlyKpi",
    "Sale",
]
