"""
Composite Cost Resolver

Resolves ingredient unit costs, expanding composite ingredients into their
bill of materials. Composite costs are always recomputed from the components;
a stored cost on a composite is ignored. Composites may contain only plain
ingredients; deeper nesting is rejected on read.
"""

import logging
from collections import defaultdict, deque
from typing import Dict, Iterable, List, Set, Tuple

from menucost.errors import (
    CompositionDepthError,
    CostEngineError,
    CyclicCompositionError,
    NestedCompositionError,
    UnknownIngredientError,
)
from menucost.models.catalog import Ingredient, IngredientComponent
from menucost.models.pricing import ResolvedCost

logger = logging.getLogger(__name__)

MAX_COMPOSITION_DEPTH = 16


def index_ingredients(
    ingredients: Iterable[Ingredient],
    components: Iterable[IngredientComponent] = (),
) -> Dict[str, Ingredient]:
    """Index ingredients by id, attaching component rows to their parents."""
    by_id = {ing.ingredient_id: ing for ing in ingredients}

    rows_by_parent: Dict[str, List[IngredientComponent]] = defaultdict(list)
    for row in components:
        rows_by_parent[row.parent_id].append(row)

    for parent_id, rows in rows_by_parent.items():
        parent = by_id.get(parent_id)
        if parent is None:
            logger.warning(f"Dropping {len(rows)} component rows for unknown parent {parent_id}")
            continue
        by_id[parent_id] = parent.model_copy(
            update={"components": list(parent.components) + rows}
        )

    return by_id


class CompositeCostResolver:
    """Resolves unit costs over one immutable ingredient snapshot."""

    def __init__(
        self,
        ingredients: Iterable[Ingredient],
        components: Iterable[IngredientComponent] = (),
        max_depth: int = MAX_COMPOSITION_DEPTH,
    ):
        self._ingredients = index_ingredients(ingredients, components)
        self.max_depth = max_depth

    @property
    def ingredients(self) -> Dict[str, Ingredient]:
        return self._ingredients

    def get(self, ingredient_id: str) -> Ingredient:
        ingredient = self._ingredients.get(ingredient_id)
        if ingredient is None:
            raise UnknownIngredientError(ingredient_id)
        return ingredient

    def resolve(self, ingredient_id: str) -> ResolvedCost:
        """Resolve one ingredient's unit cost and the missing costs behind it."""
        return self._resolved(self.get(ingredient_id), {})

    def resolve_unit_cost(self, ingredient_id: str) -> float:
        return self.resolve(ingredient_id).unit_cost

    def resolve_all(self) -> Tuple[Dict[str, ResolvedCost], Dict[str, CostEngineError]]:
        """
        Resolve every ingredient in the snapshot.

        A malformed ingredient is reported in the failures dict and never
        aborts the rest of the batch.

        Returns:
            (cost index by ingredient_id, failures by ingredient_id)
        """
        memo: Dict[str, Tuple[float, List[str]]] = {}
        index: Dict[str, ResolvedCost] = {}
        failures: Dict[str, CostEngineError] = {}

        for ingredient_id, ingredient in self._ingredients.items():
            try:
                index[ingredient_id] = self._resolved(ingredient, memo)
            except CostEngineError as exc:
                logger.warning(f"Could not resolve cost of {ingredient_id}: {exc.message}")
                failures[ingredient_id] = exc

        logger.info(
            f"Resolved {len(index)} ingredient costs ({len(failures)} failed)"
        )
        return index, failures

    def dependents_of(self, ingredient_id: str) -> Set[str]:
        """Composites whose cost depends, directly or transitively, on an ingredient."""
        parents: Dict[str, Set[str]] = defaultdict(set)
        for ingredient in self._ingredients.values():
            if not ingredient.is_composite:
                continue
            for component in ingredient.components:
                parents[component.child_id].add(ingredient.ingredient_id)

        dependents: Set[str] = set()
        queue = deque([ingredient_id])
        while queue:
            current = queue.popleft()
            for parent_id in parents.get(current, ()):
                if parent_id not in dependents:
                    dependents.add(parent_id)
                    queue.append(parent_id)

        dependents.discard(ingredient_id)
        return dependents

    def _resolved(self, ingredient: Ingredient, memo: Dict) -> ResolvedCost:
        unit_cost, missing = self._resolve(ingredient, [], memo)
        return ResolvedCost(
            ingredient_id=ingredient.ingredient_id,
            unit=ingredient.unit,
            unit_cost=unit_cost,
            missing_cost_ids=missing,
        )

    def _resolve(
        self,
        ingredient: Ingredient,
        path: List[str],
        memo: Dict[str, Tuple[float, List[str]]],
    ) -> Tuple[float, List[str]]:
        ingredient_id = ingredient.ingredient_id

        if ingredient_id in memo:
            return memo[ingredient_id]

        if ingredient_id in path:
            raise CyclicCompositionError(path[path.index(ingredient_id):] + [ingredient_id])

        if len(path) >= self.max_depth:
            raise CompositionDepthError(path[0], self.max_depth)

        if not ingredient.is_composite:
            if ingredient.cost_per_unit is None:
                result = (0.0, [ingredient_id])
            else:
                result = (ingredient.cost_per_unit, [])
            memo[ingredient_id] = result
            return result

        path.append(ingredient_id)
        total = 0.0
        missing: List[str] = []
        for component in ingredient.components:
            child = self._ingredients.get(component.child_id)
            if child is None:
                raise UnknownIngredientError(component.child_id, referenced_by=ingredient_id)

            # Cycles surface from the recursive call before nesting is checked
            child_cost, child_missing = self._resolve(child, path, memo)
            if child.is_composite:
                raise NestedCompositionError(ingredient_id, child.ingredient_id)

            total += component.quantity * child_cost
            for missing_id in child_missing:
                if missing_id not in missing:
                    missing.append(missing_id)
        path.pop()

        result = (total, missing)
        memo[ingredient_id] = result
        return result


def resolve_unit_cost(ingredient: Ingredient, all_ingredients: Iterable[Ingredient]) -> float:
    """
    Resolve the unit cost of an ingredient.

    Args:
        ingredient: Ingredient to price
        all_ingredients: Snapshot the ingredient's components are looked up in

    Returns:
        Stored cost for plain ingredients, weighted sum of the components'
        resolved costs for composites (0.0 for an empty composite)

    Raises:
        CyclicCompositionError: the composite references itself
        NestedCompositionError: a component is itself composite
        UnknownIngredientError: a component references a missing ingredient
    """
    snapshot = {ing.ingredient_id: ing for ing in all_ingredients}
    snapshot[ingredient.ingredient_id] = ingredient
    return CompositeCostResolver(snapshot.values()).resolve_unit_cost(ingredient.ingredient_id)


def validate_composition(
    ingredients: Iterable[Ingredient],
    components: Iterable[IngredientComponent] = (),
) -> List[str]:
    """
    Validate composite ingredients before they are saved.

    Returns:
        List of validation errors (empty if valid)

    Validations:
        - Composites have >= 1 component
        - Component quantities are non-negative
        - Components reference known, non-composite ingredients other than the parent
        - Plain ingredients carry no components
    """
    errors = []
    by_id = index_ingredients(ingredients, components)

    for ingredient_id, ingredient in by_id.items():
        if not ingredient.is_composite:
            if ingredient.components:
                errors.append(f"Ingredient {ingredient_id} is not composite but has components")
            continue

        if not ingredient.components:
            errors.append(f"Composite ingredient {ingredient_id} has no components")
            continue

        for component in ingredient.components:
            if component.quantity < 0:
                errors.append(
                    f"Negative quantity for {ingredient_id}/{component.child_id}: "
                    f"{component.quantity}"
                )

            if component.child_id == ingredient_id:
                errors.append(f"Composite ingredient {ingredient_id} references itself")
                continue

            child = by_id.get(component.child_id)
            if child is None:
                errors.append(
                    f"Composite ingredient {ingredient_id} references unknown ingredient "
                    f"{component.child_id}"
                )
            elif child.is_composite:
                errors.append(
                    f"Composite ingredient {ingredient_id} references composite "
                    f"{component.child_id} (only one level of composition is allowed)"
                )

    return errors
