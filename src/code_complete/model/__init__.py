"""Enums shared across the engine, analyzers and report layers."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Internal severity — rule levels map onto it via ``policy.presets``."""

    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AnalyzerType(str, Enum):
    """Canonical rule families."""

    COHESION = "cohesion"
    COMPLEXITY = "complexity"
    COUPLING = "coupling"
    MAGIC_NUMBERS = "magic_numbers"
    BOOLEAN_PARAMS = "boolean_params"
    NAMING = "naming"
    LATE_USAGE = "late_usage"


class UnitKind(str, Enum):
    """What a cohesion analysis unit is built from."""

    FUNCTION = "function"
    CLASS = "class"
