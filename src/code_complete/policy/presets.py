"""Rule presets and rule levels — single source of truth.

A preset maps every rule name to a ``RuleSetting`` (level + options).
Rules a preset does not mention are ``off``.  Levels map onto finding
severities: ``warn`` → MEDIUM, ``error`` → HIGH.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from code_complete.model import Severity
from code_complete.rules import RULE_NAMES

LEVELS = ("off", "warn", "error")

LEVEL_SEVERITY: Mapping[str, Severity] = MappingProxyType({
    "warn": Severity.MEDIUM,
    "error": Severity.HIGH,
})


@dataclass(frozen=True, slots=True)
class RuleSetting:
    level: str = "off"
    options: Mapping[str, Any] = field(default_factory=dict)

    @property
    def enabled(self) -> bool:
        return self.level != "off"

    @property
    def severity(self) -> Severity:
        return LEVEL_SEVERITY.get(self.level, Severity.INFO)

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level, "options": dict(self.options)}


def _preset(**rules: RuleSetting) -> dict[str, RuleSetting]:
    resolved = {name: RuleSetting() for name in RULE_NAMES}
    for key, setting in rules.items():
        resolved[key.replace("_", "-")] = setting
    return resolved


def _warn(**options: Any) -> RuleSetting:
    return RuleSetting("warn", options)


def _error(**options: Any) -> RuleSetting:
    return RuleSetting("error", options)


# ── presets ─────────────────────────────────────────────────────────

RECOMMENDED = _preset(
    # readability
    max_nesting_depth=_warn(maxDepth=3),
    no_complex_conditionals=_warn(maxOperators=3),
    # code organization
    no_late_argument_usage=_warn(maxLinesBetweenDeclarationAndUsage=10),
    no_late_variable_usage=_warn(maxLinesBetweenDeclarationAndUsage=5),
    # magic numbers, with common exceptions
    no_magic_numbers_except_zero_one=_warn(
        ignore=[0, 1, -1, 2, 10, 24, 60, 100, 1000],
        ignoreArrayIndexes=True,
        ignoreDefaultValues=True,
    ),
)

STRICT = _preset(
    max_nesting_depth=_error(maxDepth=2),
    no_complex_conditionals=_error(maxOperators=2),
    no_late_argument_usage=_error(maxLinesBetweenDeclarationAndUsage=5),
    no_late_variable_usage=_error(maxLinesBetweenDeclarationAndUsage=3),
    no_magic_numbers_except_zero_one=_error(
        ignore=[0, 1, -1],
        ignoreArrayIndexes=True,
        ignoreDefaultValues=True,
    ),
    enforce_meaningful_names=_error(
        minLength=3,
        allowedNames=["id", "i", "j", "k", "x", "y", "z", "e", "_", "a", "b"],
        disallowedNames=["temp", "tmp", "foo", "bar", "baz", "test", "data"],
    ),
    no_boolean_params=_error(ignoreDefault=True),
    # cohesion is informational
    low_function_cohesion=_warn(minSharedVariablePercentage=40, minFunctionLength=15),
    low_class_cohesion=_warn(minSharedPropertyPercentage=40, minClassLength=5),
)

RELAXED = _preset(
    max_nesting_depth=_warn(maxDepth=4),
    no_complex_conditionals=_warn(maxOperators=4),
)

ALL = {name: RuleSetting("warn") for name in RULE_NAMES}

PRESETS: Mapping[str, Mapping[str, RuleSetting]] = MappingProxyType({
    "recommended": MappingProxyType(RECOMMENDED),
    "strict": MappingProxyType(STRICT),
    "relaxed": MappingProxyType(RELAXED),
    "all": MappingProxyType(ALL),
})

DEFAULT_PRESET = "recommended"


def preset_names() -> list[str]:
    return sorted(PRESETS)
