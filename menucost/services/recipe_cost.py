"""
Recipe Cost Aggregator

Sums recipe lines into a product's CMV and constituent products into a combo's
CMV. Quantities typed in a display unit (g, ml) are converted to the
ingredient's base unit (kg, l) first.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from menucost.models.catalog import ComboLine, Product, RecipeLine
from menucost.models.pricing import CmvResult, ComboCost, ResolvedCost

logger = logging.getLogger(__name__)

# (display unit, base unit) -> factor
_MULTIPLY = {
    ("kg", "g"): 1000.0,
    ("l", "ml"): 1000.0,
}
_DIVIDE = {
    ("g", "kg"): 1000.0,
    ("ml", "l"): 1000.0,
}


def to_base_quantity(quantity: float, unit: Optional[str], base_unit: Optional[str]) -> float:
    """Convert a quantity from its display unit to the ingredient's base unit."""
    if not unit or not base_unit:
        return quantity

    key = (unit.strip().lower(), base_unit.strip().lower())
    if key in _DIVIDE:
        return quantity / _DIVIDE[key]
    if key in _MULTIPLY:
        return quantity * _MULTIPLY[key]
    return quantity


def cost_per_unit_from_package(
    package_price: float,
    package_amount: float,
    unit_multiplier: float = 1.0,
) -> Optional[float]:
    """
    Cost per base unit from a purchase (e.g. R$ 12.00 for a 5 kg bag).

    unit_multiplier scales the package amount into the base unit
    (e.g. 1000 when the package is labelled in g and the base unit is kg).
    """
    if package_price <= 0 or package_amount <= 0:
        return None
    multiplier = unit_multiplier or 1.0
    return (package_price / package_amount) * multiplier


def compute_cmv(
    recipe_lines: Iterable[RecipeLine],
    ingredient_cost_index: Mapping[str, ResolvedCost],
    product_id: Optional[str] = None,
) -> CmvResult:
    """
    Compute the CMV of one product from its recipe.

    Args:
        recipe_lines: The product's recipe lines
        ingredient_cost_index: Resolved costs by ingredient_id
        product_id: Product the lines belong to (defaults to the first line's)

    Returns:
        CmvResult; has_undefined_cost is set when an ingredient was never
        priced or is missing from the index. Non-positive costs add nothing.
    """
    total = 0.0
    undefined: List[str] = []

    for line in recipe_lines:
        if product_id is None:
            product_id = line.product_id

        resolved = ingredient_cost_index.get(line.ingredient_id)
        if resolved is None:
            if line.ingredient_id not in undefined:
                undefined.append(line.ingredient_id)
            continue

        if not resolved.is_defined and line.ingredient_id not in undefined:
            undefined.append(line.ingredient_id)

        if resolved.unit_cost <= 0:
            continue

        quantity = to_base_quantity(line.quantity, line.unit, resolved.unit)
        total += quantity * resolved.unit_cost

    return CmvResult(
        product_id=product_id or "",
        cmv=total,
        has_undefined_cost=bool(undefined),
        undefined_ingredient_ids=undefined,
    )


def compute_combo_cost(
    combo: Product,
    combo_lines: Iterable[ComboLine],
    product_cmvs: Mapping[str, CmvResult],
    products_by_id: Mapping[str, Product],
) -> ComboCost:
    """
    Compute a combo's CMV and the discount it gives over buying items separately.

    CMV = SUM(child CMV * qty); full price = SUM(child sale price * qty).
    """
    cmv = 0.0
    full_price = 0.0
    has_undefined = False

    for line in combo_lines:
        child_cmv = product_cmvs.get(line.product_id)
        if child_cmv is None:
            has_undefined = True
        else:
            cmv += child_cmv.cmv * line.quantity
            has_undefined = has_undefined or child_cmv.has_undefined_cost

        child = products_by_id.get(line.product_id)
        if child is not None:
            full_price += child.sale_price * line.quantity

    discount_value = full_price - combo.sale_price
    discount_percent = (discount_value / full_price * 100) if full_price > 0 else 0.0

    return ComboCost(
        combo_id=combo.product_id,
        cmv=cmv,
        full_price=full_price,
        combo_price=combo.sale_price,
        discount_value=discount_value,
        discount_percent=discount_percent,
        has_undefined_cost=has_undefined,
    )


def compute_catalog_cmvs(
    products: Iterable[Product],
    recipe_lines: Iterable[RecipeLine],
    combo_lines: Iterable[ComboLine],
    ingredient_cost_index: Mapping[str, ResolvedCost],
) -> Tuple[Dict[str, CmvResult], Dict[str, ComboCost]]:
    """
    Compute CMVs for every product and combo of a catalog.

    Combos are priced from the CMVs of plain products; a combo nested inside
    another combo counts as an undefined cost.

    Returns:
        (CmvResult by product_id, ComboCost by combo product_id)
    """
    products = list(products)
    products_by_id = {p.product_id: p for p in products}

    lines_by_product: Dict[str, List[RecipeLine]] = defaultdict(list)
    for line in recipe_lines:
        lines_by_product[line.product_id].append(line)

    combo_lines_by_combo: Dict[str, List[ComboLine]] = defaultdict(list)
    for line in combo_lines:
        combo_lines_by_combo[line.combo_id].append(line)

    cmvs: Dict[str, CmvResult] = {}
    for product in products:
        if product.is_combo:
            continue
        cmvs[product.product_id] = compute_cmv(
            lines_by_product.get(product.product_id, []),
            ingredient_cost_index,
            product_id=product.product_id,
        )

    plain_cmvs = dict(cmvs)
    combos: Dict[str, ComboCost] = {}
    for product in products:
        if not product.is_combo:
            continue
        lines = combo_lines_by_combo.get(product.product_id, [])
        nested = [line.product_id for line in lines if line.product_id not in plain_cmvs]
        if nested:
            logger.warning(f"Combo {product.product_id} references unpriced products: {nested}")

        combo_cost = compute_combo_cost(product, lines, plain_cmvs, products_by_id)
        combos[product.product_id] = combo_cost
        cmvs[product.product_id] = CmvResult(
            product_id=product.product_id,
            cmv=combo_cost.cmv,
            has_undefined_cost=combo_cost.has_undefined_cost,
        )

    logger.info(f"Computed CMV for {len(cmvs)} products ({len(combos)} combos)")
    return cmvs, combos
