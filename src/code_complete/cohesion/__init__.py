"""Cohesion analysis engine for function and class units."""

from code_complete.cohesion.engine import (
    CLASS_DEFAULTS,
    FUNCTION_DEFAULTS,
    CohesionEngine,
    CohesionOptions,
)

__all__ = [
    "CLASS_DEFAULTS",
    "FUNCTION_DEFAULTS",
    "CohesionEngine",
    "CohesionOptions",
]
