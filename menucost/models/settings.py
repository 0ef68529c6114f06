"""Company-wide pricing settings and fixed costs."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from menucost.models.common import FixedCostAllocationMode, FixedCostKind

MONTH_KEYS = ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]


class BusinessSettings(BaseModel):
    """Per-company pricing targets and assumptions."""

    desired_profit_percent: float = Field(default=15.0, description="Desired profit as % of price")
    platform_tax_rate: float = Field(default=0.0, ge=0)
    estimated_monthly_sales: float = Field(default=1000.0, description="Estimated units sold per month")
    fixed_cost_allocation_mode: FixedCostAllocationMode = FixedCostAllocationMode.REVENUE_BASED
    target_cmv_percent: float = Field(default=35.0, description="CMV target as % of price")

    # Thresholds
    cmv_warning_band_percent: float = Field(
        default=5.0, ge=0,
        description="Points above target still reported as warning instead of danger",
    )
    price_tolerance_percent: float = Field(
        default=5.0, ge=0,
        description="How far below the ideal price a product may be before it is flagged",
    )

    # Calendar buckets jan..dec
    monthly_revenue: List[float] = Field(
        default_factory=lambda: [0.0] * 12,
        min_length=12,
        max_length=12,
    )

    @field_validator("monthly_revenue", mode="before")
    @classmethod
    def _monthly_revenue_from_mapping(cls, value):
        """Accept the stored {jan: .., feb: ..} shape as well as a plain list."""
        if isinstance(value, dict):
            return [float(value.get(key) or 0.0) for key in MONTH_KEYS]
        return value


class FixedCostConfig(BaseModel):
    """Structured inputs a fixed cost's monthly value is derived from."""

    kind: FixedCostKind = FixedCostKind.MANUAL

    # CLT salary
    base_salary: Optional[float] = None
    thirteenth: Optional[float] = None
    vacation: Optional[float] = None
    fgts: Optional[float] = None

    # Freelancer / motoboy
    daily_rate: Optional[float] = None
    qty_people: Optional[float] = None
    days_worked: Optional[float] = None

    # Staff snack
    unit_cost: Optional[float] = None
    monthly_qty: Optional[float] = None
    product_id: Optional[str] = None


class FixedCost(BaseModel):
    """A monthly fixed cost (payroll, rent, utilities...)."""

    fixed_cost_id: str
    name: str = ""
    category: Optional[str] = None
    monthly_value: float = 0.0
    config: Optional[FixedCostConfig] = None
