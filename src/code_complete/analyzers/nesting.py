"""Nesting-depth analyzer — control flow stacked too deep inside a function."""

from __future__ import annotations

import ast
from dataclasses import dataclass

from code_complete.model import AnalyzerType
from code_complete.model.finding import Finding
from code_complete.rules import CPX_NESTING_001

from ._base import RuleAnalyzer, end_line

_NESTING_NODES = (
    ast.If,
    ast.For,
    ast.AsyncFor,
    ast.While,
    ast.With,
    ast.AsyncWith,
    ast.Try,
    ast.Match,
)
if hasattr(ast, "TryStar"):  # 3.11+
    _NESTING_NODES = (*_NESTING_NODES, ast.TryStar)

_FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)


def _is_elif(node: ast.AST, parent: ast.AST | None) -> bool:
    """An ``elif`` is an ``If`` that is the sole ``orelse`` of its parent ``If``."""
    return (
        isinstance(node, ast.If)
        and isinstance(parent, ast.If)
        and len(parent.orelse) == 1
        and parent.orelse[0] is node
        and node.col_offset == parent.col_offset
    )


@dataclass(frozen=True)
class NestingOptions:
    max_depth: int = 3


class _DepthVisitor(ast.NodeVisitor):
    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        self.depth = 0
        self.parents: list[ast.AST] = []
        self.too_deep: list[tuple[ast.AST, int]] = []

    def generic_visit(self, node: ast.AST) -> None:
        parent = self.parents[-1] if self.parents else None
        saved = self.depth
        if isinstance(node, _FUNCTION_NODES):
            # every function body starts again at depth 0
            self.depth = 0
        elif isinstance(node, _NESTING_NODES) and not _is_elif(node, parent):
            self.depth += 1
            if self.depth > self.max_depth:
                self.too_deep.append((node, self.depth))

        self.parents.append(node)
        super().generic_visit(node)
        self.parents.pop()
        self.depth = saved


class NestingDepthAnalyzer(RuleAnalyzer):
    """Finds control structures nested deeper than ``maxDepth``."""

    id = "max-nesting-depth"
    description = "Limit how deeply control structures nest."
    analyzer_type = AnalyzerType.COMPLEXITY
    id_prefix = "nest"
    confidence = 0.95

    Options = NestingOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "maxDepth": {"type": "integer", "minimum": 0, "default": 3},
        },
        "additionalProperties": False,
    }

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        visitor = _DepthVisitor(self.options.max_depth)
        visitor.visit(tree)
        findings: list[Finding] = []
        for node, depth in visitor.too_deep:
            keyword = type(node).__name__.lower()
            findings.append(
                self.make_finding(
                    CPX_NESTING_001,
                    rel,
                    line_start=node.lineno,
                    line_end=end_line(node),
                    column=node.col_offset,
                    symbol=f"L{node.lineno}:{node.col_offset}",
                    message=(
                        f"Nesting depth of {depth} exceeds maximum allowed depth of "
                        f"{self.options.max_depth}. Consider refactoring with guard "
                        "clauses or extracting to helper functions."
                    ),
                    snippet=f"{keyword}  # depth={depth}",
                    depth=depth,
                )
            )
        return findings
