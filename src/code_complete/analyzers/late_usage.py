"""Late-usage analyzers — values bound long before they are first needed.

Rules
-----
LATE_VARIABLE_001
    Inside a function, a local variable read more than
    ``maxLinesBetweenDeclarationAndUsage`` lines after it was bound.
    Reported once per binding, at the first such read.
LATE_ARGUMENT_001
    A parameter first read more than ``maxLinesBetweenDeclarationAndUsage``
    lines after the ``def`` line.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Iterator

from code_complete.model import AnalyzerType
from code_complete.model.finding import Finding
from code_complete.rules import LATE_ARGUMENT_001, LATE_VARIABLE_001

from ._base import RuleAnalyzer, receiver_of

_FUNCTION_DEFS = (ast.FunctionDef, ast.AsyncFunctionDef)
_NESTED_SCOPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda, ast.ClassDef)

_LINES_SCHEMA = {"type": "integer", "minimum": 0}


def _functions_with_parents(tree: ast.AST) -> Iterator[tuple[ast.AST, ast.AST]]:
    for parent in ast.walk(tree):
        for child in ast.iter_child_nodes(parent):
            if isinstance(child, _FUNCTION_DEFS):
                yield child, parent


def _own_scope_names(fn: ast.FunctionDef | ast.AsyncFunctionDef) -> list[ast.Name]:
    """``Name`` nodes in *fn*'s own scope, ordered by source position."""
    found: list[ast.Name] = []
    stack: list[ast.AST] = list(fn.body)
    while stack:
        node = stack.pop()
        if isinstance(node, _NESTED_SCOPES):
            continue
        if isinstance(node, ast.Name):
            found.append(node)
        stack.extend(ast.iter_child_nodes(node))
    # a store sorts before a load at the same position (``x += 1``)
    found.sort(key=lambda n: (n.lineno, n.col_offset, isinstance(n.ctx, ast.Load)))
    return found


@dataclass(frozen=True)
class LateVariableOptions:
    max_lines_between_declaration_and_usage: int = 5


@dataclass(frozen=True)
class LateArgumentOptions:
    max_lines_between_declaration_and_usage: int = 10


class LateVariableUsageAnalyzer(RuleAnalyzer):
    """Finds local variables declared far from where they are used."""

    id = "no-late-variable-usage"
    description = "Declare variables close to where they are first used."
    analyzer_type = AnalyzerType.LATE_USAGE
    id_prefix = "late"
    confidence = 0.7

    Options = LateVariableOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "maxLinesBetweenDeclarationAndUsage": {**_LINES_SCHEMA, "default": 5},
        },
        "additionalProperties": False,
    }

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        limit = self.options.max_lines_between_declaration_and_usage
        findings: list[Finding] = []
        for fn, _parent in _functions_with_parents(tree):
            # name → [binding line, already reported]
            bindings: dict[str, list] = {}
            for node in _own_scope_names(fn):
                if isinstance(node.ctx, (ast.Store, ast.Del)):
                    bindings[node.id] = [node.lineno, False]
                    continue
                binding = bindings.get(node.id)
                if binding is None or binding[1]:
                    continue
                distance = node.lineno - binding[0]
                if distance <= limit:
                    continue
                binding[1] = True
                findings.append(
                    self.make_finding(
                        LATE_VARIABLE_001,
                        rel,
                        line_start=node.lineno,
                        line_end=node.lineno,
                        column=node.col_offset,
                        symbol=f"{fn.name}.{node.id}@{binding[0]}",
                        message=(
                            f'Variable "{node.id}" is used too late: {distance} lines '
                            f"after declaration (max: {limit}). Declared on line "
                            f"{binding[0]}, first used on line {node.lineno}."
                        ),
                        snippet=node.id,
                        declaration_line=binding[0],
                        usage_line=node.lineno,
                    )
                )
        return findings


class LateArgumentUsageAnalyzer(RuleAnalyzer):
    """Finds parameters whose first use sits far below the signature."""

    id = "no-late-argument-usage"
    description = "Use arguments close to the function signature."
    analyzer_type = AnalyzerType.LATE_USAGE
    id_prefix = "late"
    confidence = 0.7

    Options = LateArgumentOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "maxLinesBetweenDeclarationAndUsage": {**_LINES_SCHEMA, "default": 10},
        },
        "additionalProperties": False,
    }

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        limit = self.options.max_lines_between_declaration_and_usage
        findings: list[Finding] = []
        for fn, parent in _functions_with_parents(tree):
            args = fn.args
            params = [a.arg for a in (*args.posonlyargs, *args.args, *args.kwonlyargs)]
            receiver = receiver_of(fn, parent)
            first_read: dict[str, int] = {}
            for stmt in fn.body:
                for node in ast.walk(stmt):
                    if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Load):
                        line = first_read.get(node.id)
                        if line is None or node.lineno < line:
                            first_read[node.id] = node.lineno
            for name in params:
                if name == receiver or name not in first_read:
                    continue
                distance = first_read[name] - fn.lineno
                if distance <= limit:
                    continue
                findings.append(
                    self.make_finding(
                        LATE_ARGUMENT_001,
                        rel,
                        line_start=fn.lineno,
                        line_end=first_read[name],
                        column=fn.col_offset,
                        symbol=f"{fn.name}.{name}",
                        message=(
                            f'Argument "{name}" is used {distance} lines after its '
                            f"declaration (max: {limit})."
                        ),
                        snippet=f"def {fn.name}(… {name} …)",
                        usage_line=first_read[name],
                    )
                )
        return findings
