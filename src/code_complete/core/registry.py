"""Rule registry — kebab-case rule name → analyzer class."""

from __future__ import annotations

from code_complete.analyzers._base import RuleAnalyzer
from code_complete.analyzers.boolean_params import BooleanParamsAnalyzer
from code_complete.analyzers.cohesion import ClassCohesionAnalyzer, FunctionCohesionAnalyzer
from code_complete.analyzers.complexity import ComplexConditionalsAnalyzer
from code_complete.analyzers.coupling import (
    FanOutAnalyzer,
    ImportCouplingAnalyzer,
    ParameterCouplingAnalyzer,
)
from code_complete.analyzers.late_usage import (
    LateArgumentUsageAnalyzer,
    LateVariableUsageAnalyzer,
)
from code_complete.analyzers.magic_numbers import MagicNumberAnalyzer
from code_complete.analyzers.naming import MeaningfulNamesAnalyzer
from code_complete.analyzers.nesting import NestingDepthAnalyzer
from code_complete.rules import RULE_NAMES

RULE_CLASSES: dict[str, type[RuleAnalyzer]] = {
    cls.id: cls
    for cls in (
        FunctionCohesionAnalyzer,
        ClassCohesionAnalyzer,
        ComplexConditionalsAnalyzer,
        NestingDepthAnalyzer,
        FanOutAnalyzer,
        ParameterCouplingAnalyzer,
        ImportCouplingAnalyzer,
        MagicNumberAnalyzer,
        BooleanParamsAnalyzer,
        MeaningfulNamesAnalyzer,
        LateVariableUsageAnalyzer,
        LateArgumentUsageAnalyzer,
    )
}

if set(RULE_CLASSES) != set(RULE_NAMES):
    raise AssertionError(
        "analyzer registry and RULE_NAMES disagree: "
        f"{sorted(set(RULE_CLASSES) ^ set(RULE_NAMES))}"
    )


def rule_class(name: str) -> type[RuleAnalyzer]:
    """Look up a rule by name; ``KeyError`` when unknown."""
    return RULE_CLASSES[name]


def rule_names() -> list[str]:
    return sorted(RULE_CLASSES)
