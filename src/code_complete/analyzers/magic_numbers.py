"""Magic-number analyzer — unexplained numeric literals other than 0 and 1."""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass

from code_complete.model import AnalyzerType
from code_complete.model.finding import Finding
from code_complete.rules import MAG_NUMBER_001

from ._base import RuleAnalyzer, end_line

_CONSTANT_NAME = re.compile(r"^_*[A-Z][A-Z0-9_]*$")
_ALWAYS_ALLOWED = (0, 1)


def _is_number(node: ast.AST) -> bool:
    return (
        isinstance(node, ast.Constant)
        and isinstance(node.value, (int, float, complex))
        and not isinstance(node.value, bool)
    )


def _is_constant_definition(parent: ast.AST | None) -> bool:
    """``MAX_RETRIES = 5`` / ``TIMEOUT: float = 2.5`` name the number."""
    if isinstance(parent, ast.Assign):
        targets = parent.targets
    elif isinstance(parent, ast.AnnAssign):
        targets = [parent.target]
    else:
        return False
    return all(isinstance(t, ast.Name) and _CONSTANT_NAME.match(t.id) for t in targets)


@dataclass(frozen=True)
class MagicNumberOptions:
    ignore: tuple[float, ...] = ()
    ignore_array_indexes: bool = True
    ignore_default_values: bool = True


class _LiteralVisitor(ast.NodeVisitor):
    def __init__(self) -> None:
        self.parents: list[ast.AST] = []
        # (node reported on, value, parent of that node)
        self.literals: list[tuple[ast.AST, complex | float | int, ast.AST | None]] = []

    def generic_visit(self, node: ast.AST) -> None:
        if _is_number(node):
            self._record(node)
        self.parents.append(node)
        super().generic_visit(node)
        self.parents.pop()

    def _record(self, node: ast.Constant) -> None:
        value = node.value
        target: ast.AST = node
        depth = len(self.parents) - 1
        parent = self.parents[depth] if depth >= 0 else None
        # fold a sign into the literal: ``-2`` is the number -2
        if isinstance(parent, ast.UnaryOp) and isinstance(parent.op, (ast.USub, ast.UAdd)):
            value = -value if isinstance(parent.op, ast.USub) else value
            target = parent
            depth -= 1
            parent = self.parents[depth] if depth >= 0 else None
        self.literals.append((target, value, parent))


class MagicNumberAnalyzer(RuleAnalyzer):
    """Finds numeric literals that should be named constants."""

    id = "no-magic-numbers-except-zero-one"
    description = "Numbers other than 0 and 1 should be named constants."
    analyzer_type = AnalyzerType.MAGIC_NUMBERS
    id_prefix = "mag"
    confidence = 0.7

    Options = MagicNumberOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "ignore": {"type": "array", "items": {"type": "number"}, "default": []},
            "ignoreArrayIndexes": {"type": "boolean", "default": True},
            "ignoreDefaultValues": {"type": "boolean", "default": True},
        },
        "additionalProperties": False,
    }

    def _exempt(self, target: ast.AST, value, parent: ast.AST | None) -> bool:
        opts = self.options
        if value in _ALWAYS_ALLOWED or value in opts.ignore:
            return True
        if _is_constant_definition(parent):
            return True
        if opts.ignore_array_indexes:
            if isinstance(parent, ast.Subscript) and parent.slice is target:
                return True
            if isinstance(parent, ast.Slice):
                return True
        if opts.ignore_default_values and isinstance(parent, ast.arguments):
            return True
        return False

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        visitor = _LiteralVisitor()
        visitor.visit(tree)
        findings: list[Finding] = []
        for target, value, parent in visitor.literals:
            if self._exempt(target, value, parent):
                continue
            text = ast.unparse(target)
            findings.append(
                self.make_finding(
                    MAG_NUMBER_001,
                    rel,
                    line_start=target.lineno,
                    line_end=end_line(target),
                    column=target.col_offset,
                    symbol=f"L{target.lineno}:{target.col_offset}",
                    message=(
                        f'Magic number "{text}" is discouraged. '
                        "Consider using a named constant instead."
                    ),
                    snippet=text,
                    value=text,
                )
            )
        return findings
