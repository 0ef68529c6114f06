"""Engine error types.

Every error carries a stable ``code`` so batch services can record it per entity
and the API can render it without knowing the concrete class.
"""

from typing import Any, Dict, List, Optional


class CostEngineError(Exception):
    """Base class for recoverable engine errors."""

    code = "COST_ENGINE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class CyclicCompositionError(CostEngineError):
    """A composite ingredient references itself directly or transitively."""

    code = "CYCLIC_COMPOSITION"

    def __init__(self, path: List[str]):
        self.path = list(path)
        super().__init__(
            message=f"Cyclic composition detected: {' -> '.join(self.path)}",
            details={"path": self.path},
        )


class CompositionDepthError(CostEngineError):
    """Composite nesting deeper than the resolver allows."""

    code = "COMPOSITION_TOO_DEEP"

    def __init__(self, ingredient_id: str, max_depth: int):
        super().__init__(
            message=f"Composition of {ingredient_id} exceeds max depth {max_depth}",
            details={"ingredient_id": ingredient_id, "max_depth": max_depth},
        )


class NestedCompositionError(CostEngineError):
    """A composite ingredient has another composite as a component."""

    code = "NESTED_COMPOSITION"

    def __init__(self, ingredient_id: str, child_id: str):
        super().__init__(
            message=(
                f"Composite {ingredient_id} contains composite {child_id}; "
                f"only one level of composition is allowed"
            ),
            details={"ingredient_id": ingredient_id, "child_id": child_id},
        )


class UnknownIngredientError(CostEngineError):
    """A component or recipe line references an ingredient not in the snapshot."""

    code = "UNKNOWN_INGREDIENT"

    def __init__(self, ingredient_id: str, referenced_by: Optional[str] = None):
        message = f"Ingredient not found: {ingredient_id}"
        if referenced_by:
            message += f" (referenced by {referenced_by})"
        super().__init__(
            message=message,
            details={"ingredient_id": ingredient_id, "referenced_by": referenced_by},
        )


class InvalidWindowError(CostEngineError):
    """Invalid reporting window."""

    code = "INVALID_WINDOW"

    def __init__(self, months_back: int):
        super().__init__(
            message=f"months_back must be >= 1, got {months_back}",
            details={"months_back": months_back},
        )


class DataSourceError(CostEngineError):
    """A KPI data source could not deliver a dataset."""

    code = "DATA_SOURCE_ERROR"
