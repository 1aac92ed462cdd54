"""Complexity analyzer — detects conditions that pack too much logic."""

from __future__ import annotations

import ast
from dataclasses import dataclass

from code_complete.model import AnalyzerType
from code_complete.model.finding import Finding
from code_complete.rules import CPX_CONDITIONAL_001

from ._base import RuleAnalyzer, end_line


def _logical_operators(node: ast.expr | None) -> int:
    """Count ``and``/``or`` operators in a condition.

    A chain ``a and b and c`` is one ``BoolOp`` with three operands, i.e.
    two operators.  ``not`` is transparent.
    """
    if node is None:
        return 0
    if isinstance(node, ast.BoolOp):
        return len(node.values) - 1 + sum(_logical_operators(v) for v in node.values)
    if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.Not):
        return _logical_operators(node.operand)
    return 0


def _conditions(tree: ast.AST):
    """Yield every test expression a reader has to evaluate as a condition."""
    for node in ast.walk(tree):
        if isinstance(node, (ast.If, ast.While, ast.IfExp)):
            yield node.test
        elif isinstance(node, ast.comprehension):
            yield from node.ifs
        elif isinstance(node, ast.match_case) and node.guard is not None:
            yield node.guard


@dataclass(frozen=True)
class ComplexConditionalsOptions:
    max_operators: int = 2


class ComplexConditionalsAnalyzer(RuleAnalyzer):
    """Finds conditions with more logical operators than allowed."""

    id = "no-complex-conditionals"
    description = "Conditions should not chain too many and/or operators."
    analyzer_type = AnalyzerType.COMPLEXITY
    id_prefix = "cx"
    confidence = 0.95

    Options = ComplexConditionalsOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "maxOperators": {"type": "integer", "minimum": 0, "default": 2},
        },
        "additionalProperties": False,
    }

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        findings: list[Finding] = []
        limit = self.options.max_operators
        for test in _conditions(tree):
            count = _logical_operators(test)
            if count <= limit:
                continue
            snippet = ast.unparse(test)
            findings.append(
                self.make_finding(
                    CPX_CONDITIONAL_001,
                    rel,
                    line_start=test.lineno,
                    line_end=end_line(test),
                    column=test.col_offset,
                    symbol=f"L{test.lineno}:{test.col_offset}",
                    message=(
                        f"This condition is too complex ({count} operators). "
                        f"Maximum allowed is {limit}. "
                        "Consider extracting it to a function or variable."
                    ),
                    snippet=snippet,
                    operators=count,
                )
            )
        return findings
