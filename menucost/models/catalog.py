"""
Catalog Data Models

Ingredients, recipes, products, combos and sales channels as read from the
tenant's store. Costs of composite ingredients are derived, never stored.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class IngredientComponent(BaseModel):
    """One bill-of-materials line of a composite ingredient."""

    parent_id: str
    child_id: str
    quantity: float = Field(..., description="Quantity in the child's base unit")


class Ingredient(BaseModel):
    """An ingredient, packaging item or side."""

    ingredient_id: str = Field(..., description="Unique identifier")
    name: str = ""
    unit: str = Field(default="un", description="Base unit of measure (kg, g, l, ml, un)")

    # None means the ingredient was never priced (missing cost), 0.0 means free
    cost_per_unit: Optional[float] = None
    category: Optional[str] = None

    is_composite: bool = False
    components: List[IngredientComponent] = Field(default_factory=list)


class RecipeLine(BaseModel):
    """One ingredient line of a product recipe."""

    product_id: str
    ingredient_id: str
    quantity: float
    unit: Optional[str] = Field(
        default=None,
        description="Display unit entered by the user; None means the ingredient's base unit",
    )


class ComboLine(BaseModel):
    """One constituent product of a combo."""

    combo_id: str
    product_id: str
    quantity: float = 1.0


class Product(BaseModel):
    """A menu product or combo."""

    product_id: str
    name: str = ""
    category: Optional[str] = None
    sale_price: float = 0.0
    active: bool = True
    is_combo: bool = False


class Fee(BaseModel):
    """A percentage deduction (card processor, marketplace commission, tax)."""

    fee_id: str
    name: str = ""
    percentage: float = 0.0


class SalesChannel(BaseModel):
    """A sales outlet and the fees it charges."""

    channel_id: str
    name: str
    fee_ids: List[str] = Field(default_factory=list)
    fee_percentages: List[float] = Field(
        default_factory=list,
        description="Inline fee percentages, used in addition to fee_ids",
    )


class ChannelTaxRate(BaseModel):
    """A channel with its fees collapsed into one total rate."""

    channel_id: str
    name: str
    total_tax_rate: float = 0.0
