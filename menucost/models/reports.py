"""
Reporting Data Models

Historical sales and the monthly KPI series derived from them.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Sale(BaseModel):
    """An immutable historical sale."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: float = 0.0
    price: float = Field(default=0.0, description="Unit sale price")
    sold_at: Optional[datetime] = None


class ManualRevenue(BaseModel):
    """Revenue typed in by hand for a month without POS integration."""

    year: int
    month: int = Field(..., ge=1, le=12)
    revenue: float = 0.0


class MonthlyKpi(BaseModel):
    """Financial KPIs of one calendar month."""

    year: int
    month: int
    label: str = Field(..., description="YYYY-MM")

    revenue_sales: float = 0.0
    revenue_manual: Optional[float] = None

    cost_estimated: float = 0.0
    profit_estimated: float = 0.0

    # None when there is no sales revenue in the month
    margin_percent: Optional[float] = None
    cmv_percent: Optional[float] = None

    undefined_cost_qty: float = 0.0
    undefined_cost_revenue: float = 0.0


class KpiSummary(BaseModel):
    """Totals over a KPI window."""

    months: int = 0
    revenue_sales: float = 0.0
    revenue_manual: float = 0.0
    cost_estimated: float = 0.0
    profit_estimated: float = 0.0
    margin_percent: Optional[float] = None
    cmv_percent: Optional[float] = None
    undefined_cost_qty: float = 0.0
    undefined_cost_revenue: float = 0.0
