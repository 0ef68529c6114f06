"""
Snapshot Models

Read-only, single-tenant snapshots the engine computes over, and the batch
results produced from them.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from menucost.models.catalog import (
    ComboLine,
    Fee,
    Ingredient,
    IngredientComponent,
    Product,
    RecipeLine,
    SalesChannel,
)
from menucost.models.common import InsightLevel
from menucost.models.insights import Insight
from menucost.models.pricing import CmvResult, ComboCost, PricingContext, ProductMetrics, ResolvedCost
from menucost.models.reports import ManualRevenue, Sale
from menucost.models.settings import BusinessSettings, FixedCost


class CatalogSnapshot(BaseModel):
    """Everything needed to price a company's catalog."""

    company_id: Optional[str] = None

    ingredients: List[Ingredient] = Field(default_factory=list)
    ingredient_components: List[IngredientComponent] = Field(default_factory=list)
    recipe_lines: List[RecipeLine] = Field(default_factory=list)
    combo_lines: List[ComboLine] = Field(default_factory=list)
    products: List[Product] = Field(default_factory=list)

    fees: List[Fee] = Field(default_factory=list)
    channels: List[SalesChannel] = Field(default_factory=list)
    business_settings: BusinessSettings = Field(default_factory=BusinessSettings)
    fixed_costs: List[FixedCost] = Field(default_factory=list)


class KpiSnapshot(BaseModel):
    """Sales history plus the unit costs needed to estimate cost of sales."""

    company_id: str = "default"
    sales: List[Sale] = Field(default_factory=list)
    manual_revenue: List[ManualRevenue] = Field(default_factory=list)

    # Unit cost per product; when omitted, derived from the catalog's CMVs
    product_unit_costs: Optional[Dict[str, Optional[float]]] = None
    catalog: Optional[CatalogSnapshot] = None


class EntityError(BaseModel):
    """An isolated failure for one entity of a batch."""

    entity_type: str
    entity_id: str
    code: str
    message: str


class ProductPricing(BaseModel):
    """Full pricing picture of one product."""

    product_id: str
    name: str = ""
    is_combo: bool = False

    cmv: CmvResult
    combo: Optional[ComboCost] = None
    metrics: ProductMetrics
    insights: List[Insight] = Field(default_factory=list)
    worst_level: Optional[InsightLevel] = None


class CatalogPricingResult(BaseModel):
    """Pricing of a whole catalog snapshot."""

    context: PricingContext
    markup: Optional[float] = None
    burden_percent: float = 0.0
    ingredient_costs: Dict[str, ResolvedCost] = Field(default_factory=dict)
    products: List[ProductPricing] = Field(default_factory=list)
    errors: List[EntityError] = Field(default_factory=list)
