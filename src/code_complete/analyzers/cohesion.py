"""Cohesion analyzers — functions and classes doing more than one job.

Rules
-----
COH_FUNCTION_001
    A function whose control-structure blocks split into disconnected
    groups by shared variable usage (``low-function-cohesion``).
COH_CLASS_001
    A class whose methods split into disconnected groups by shared
    ``self`` member usage (``low-class-cohesion``).
"""

from __future__ import annotations

import ast
from dataclasses import dataclass

from code_complete.cohesion import CohesionEngine, CohesionOptions
from code_complete.model import AnalyzerType, UnitKind
from code_complete.model.cohesion import CohesionFinding
from code_complete.model.finding import Finding
from code_complete.rules import COH_CLASS_001, COH_FUNCTION_001

from ._base import RuleAnalyzer

_PERCENT = {"type": "integer", "minimum": 0, "maximum": 100}
_LINES = {"type": "integer", "minimum": 1}


@dataclass(frozen=True)
class FunctionCohesionOptions:
    min_shared_variable_percentage: int = 30
    min_function_length: int = 10


@dataclass(frozen=True)
class ClassCohesionOptions:
    min_shared_property_percentage: int = 40
    min_class_length: int = 10


class _CohesionAnalyzer(RuleAnalyzer):
    analyzer_type = AnalyzerType.COHESION
    id_prefix = "coh"
    confidence = 0.8
    rule_id: str = ""

    def _engine(self) -> CohesionEngine:
        raise NotImplementedError

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        return [self._to_finding(cf, rel) for cf in self._engine().analyze(tree)]

    def _to_finding(self, cf: CohesionFinding, rel: str) -> Finding:
        keyword = "class" if cf.unit_kind is UnitKind.CLASS else "def"
        snippet = f"{keyword} {cf.unit_name}  # components={cf.component_count}"
        return self.make_finding(
            self.rule_id,
            rel,
            line_start=cf.location.start_line,
            line_end=cf.location.end_line,
            symbol=cf.unit_name,
            message=cf.message(),
            snippet=snippet,
            cohesion=cf.to_dict(),
        )


class FunctionCohesionAnalyzer(_CohesionAnalyzer):
    """Flags functions whose blocks share too few variables."""

    id = "low-function-cohesion"
    description = "Functions whose blocks do not share variables should be split."
    rule_id = COH_FUNCTION_001

    Options = FunctionCohesionOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "minSharedVariablePercentage": {**_PERCENT, "default": 30},
            "minFunctionLength": {**_LINES, "default": 10},
        },
        "additionalProperties": False,
    }

    def _engine(self) -> CohesionEngine:
        return CohesionEngine(
            function_options=CohesionOptions(
                min_shared_percentage=self.options.min_shared_variable_percentage,
                min_unit_length=self.options.min_function_length,
            )
        )


class ClassCohesionAnalyzer(_CohesionAnalyzer):
    """Flags classes whose methods fall into unrelated groups."""

    id = "low-class-cohesion"
    description = "Classes whose methods do not share members should be split."
    rule_id = COH_CLASS_001

    Options = ClassCohesionOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "minSharedPropertyPercentage": {**_PERCENT, "default": 40},
            "minClassLength": {**_LINES, "default": 10},
        },
        "additionalProperties": False,
    }

    def _engine(self) -> CohesionEngine:
        return CohesionEngine(
            class_options=CohesionOptions(
                min_shared_percentage=self.options.min_shared_property_percentage,
                min_unit_length=self.options.min_class_length,
            )
        )
