"""Data models for menucost."""

from menucost.models.catalog import (
    ChannelTaxRate,
    ComboLine,
    Fee,
    Ingredient,
    IngredientComponent,
    Product,
    RecipeLine,
    SalesChannel,
)
from menucost.models.common import (
    CmvStatus,
    FixedCostAllocationMode,
    FixedCostKind,
    InsightLevel,
    MarginStatus,
)
from menucost.models.insights import Insight
from menucost.models.pricing import (
    ChannelPrice,
    CmvResult,
    ComboCost,
    CostAllocation,
    CostSimulation,
    PricingContext,
    ProductMetrics,
    ResolvedCost,
)
from menucost.models.reports import KpiSummary, ManualRevenue, MonthlyKpi, Sale
from menucost.models.settings import BusinessSettings, FixedCost, FixedCostConfig
from menucost.models.snapshot import (
    CatalogPricingResult,
    CatalogSnapshot,
    EntityError,
    KpiSnapshot,
    ProductPricing,
)

__all__ = [
    # Common
    "FixedCostAllocationMode",
    "CmvStatus",
    "MarginStatus",
    "InsightLevel",
    "FixedCostKind",
    # Catalog
    "Ingredient",
    "IngredientComponent",
    "RecipeLine",
    "ComboLine",
    "Product",
    "Fee",
    "SalesChannel",
    "ChannelTaxRate",
    # Settings
    "BusinessSettings",
    "FixedCost",
    "FixedCostConfig",
    # Pricing
    "ResolvedCost",
    "CmvResult",
    "ComboCost",
    "CostAllocation",
    "PricingContext",
    "ChannelPrice",
    "ProductMetrics",
    "CostSimulation",
    "Insight",
    # Reports
    "Sale",
    "ManualRevenue",
    "MonthlyKpi",
    "KpiSummary",
    # Snapshots
    "CatalogSnapshot",
    "KpiSnapshot",
    "EntityError",
    "ProductPricing",
    "CatalogPricingResult",
]
