"""Pricing insight models."""

from pydantic import BaseModel

from menucost.models.common import InsightLevel


class Insight(BaseModel):
    """A single actionable warning about a product."""

    key: str
    level: InsightLevel
    title: str
    detail: str
