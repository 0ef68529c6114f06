"""Common types used across the cost engine."""

from enum import Enum

# ============================================================================
# Status Enums (these are system states, not business data)
# ============================================================================

class FixedCostAllocationMode(str, Enum):
    """How fixed costs are spread over units sold."""
    REVENUE_BASED = "revenue_based"
    PER_UNIT = "per_unit"


class CmvStatus(str, Enum):
    """CMV health versus the company target."""
    HEALTHY = "healthy"
    WARNING = "warning"
    DANGER = "danger"


class MarginStatus(str, Enum):
    """Profit health versus the desired profit."""
    HEALTHY = "healthy"
    WARNING = "warning"
    DANGER = "danger"


class InsightLevel(str, Enum):
    """Severity of a pricing insight."""
    DANGER = "danger"
    WARNING = "warning"
    INFO = "info"


class FixedCostKind(str, Enum):
    """How a fixed cost's monthly value is obtained."""
    MANUAL = "manual"
    CLT_SALARY = "clt_salary"
    DAILY_RATE = "daily_rate"
    SNACK = "snack"
