"""Analyzers produce raw findings from source code.

Every analyzer follows the ``Analyzer`` protocol used by
``core.runner.run_scan``: it exposes ``id``, ``version`` and
``run(root, files) -> list[Finding]``.  The rule analyzers additionally
offer ``check_source(source, path)`` for in-memory checks.

Available analyzers (``id`` → class):
    - low-function-cohesion: FunctionCohesionAnalyzer
    - low-class-cohesion: ClassCohesionAnalyzer
    - no-complex-conditionals: ComplexConditionalsAnalyzer
    - max-nesting-depth: NestingDepthAnalyzer
    - high-fan-out: FanOutAnalyzer
    - high-parameter-coupling: ParameterCouplingAnalyzer
    - high-import-coupling: ImportCouplingAnalyzer
    - no-magic-numbers-except-zero-one: MagicNumberAnalyzer
    - no-boolean-params: BooleanParamsAnalyzer
    - enforce-meaningful-names: MeaningfulNamesAnalyzer
    - no-late-variable-usage: LateVariableUsageAnalyzer
    - no-late-argument-usage: LateArgumentUsageAnalyzer
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from code_complete.model.finding import Finding


class Analyzer(Protocol):
    """Every analyzer must expose ``id``, ``version``, and ``run()``."""

    id: str
    version: str

    def run(self, root: Path, files: list[Path]) -> list[Finding]:
        """Analyze *files* under *root* and return findings."""
        ...


_LAZY = {
    "FunctionCohesionAnalyzer": ".cohesion",
    "ClassCohesionAnalyzer": ".cohesion",
    "ComplexConditionalsAnalyzer": ".complexity",
    "NestingDepthAnalyzer": ".nesting",
    "FanOutAnalyzer": ".coupling",
    "ParameterCouplingAnalyzer": ".coupling",
    "ImportCouplingAnalyzer": ".coupling",
    "MagicNumberAnalyzer": ".magic_numbers",
    "BooleanParamsAnalyzer": ".boolean_params",
    "MeaningfulNamesAnalyzer": ".naming",
    "LateVariableUsageAnalyzer": ".late_usage",
    "LateArgumentUsageAnalyzer": ".late_usage",
}


# Lazy imports to avoid circular dependencies
def __getattr__(name: str):
    module = _LAZY.get(name)
    if module is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module, __name__), name)
