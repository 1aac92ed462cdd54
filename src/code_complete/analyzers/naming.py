"""Naming analyzer — names too short or too generic to mean anything.

Rules
-----
NAM_DISALLOWED_001
    Name listed in ``disallowedNames`` (``foo``, ``bar``, ``baz`` by default).
NAM_TOO_SHORT_001
    Name shorter than ``minLength`` and not in ``allowedNames``.

Checked names: functions, classes, parameters and assigned variables;
attribute targets (``self.x = …``) too when ``checkProperties`` is set.
Each name is reported once per scope.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass

from code_complete.model import AnalyzerType
from code_complete.model.finding import Finding
from code_complete.rules import NAM_DISALLOWED_001, NAM_TOO_SHORT_001

from ._base import RuleAnalyzer

DEFAULT_ALLOWED_NAMES = (
    "i", "j", "k", "x", "y", "z", "id", "e", "_", "a", "b", "c",
    "db", "fs", "os", "ui", "io", "ip", "url", "uri", "api", "btn", "idx",
    "ctx", "req", "res", "err", "msg", "val", "str", "num", "obj", "arr", "fn",
)
DEFAULT_DISALLOWED_NAMES = ("foo", "bar", "baz")

_SCOPE_NODES = (ast.Module, ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda, ast.ClassDef)


@dataclass(frozen=True)
class MeaningfulNamesOptions:
    min_length: int = 2
    allowed_names: tuple[str, ...] = DEFAULT_ALLOWED_NAMES
    disallowed_names: tuple[str, ...] = DEFAULT_DISALLOWED_NAMES
    check_properties: bool = False


class _NameCollector(ast.NodeVisitor):
    """Collect ``(name, node, scope)`` for every checked binding."""

    def __init__(self, check_properties: bool) -> None:
        self.check_properties = check_properties
        self.scopes: list[ast.AST] = []
        self.names: list[tuple[str, ast.AST, ast.AST]] = []

    def _add(self, name: str, node: ast.AST) -> None:
        self.names.append((name, node, self.scopes[-1] if self.scopes else node))

    def generic_visit(self, node: ast.AST) -> None:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            self._add(node.name, node)
        elif isinstance(node, ast.arg):
            self._add(node.arg, node)
        elif isinstance(node, ast.Name) and isinstance(node.ctx, ast.Store):
            self._add(node.id, node)
        elif (
            self.check_properties
            and isinstance(node, ast.Attribute)
            and isinstance(node.ctx, ast.Store)
        ):
            self._add(node.attr, node)

        scoped = isinstance(node, _SCOPE_NODES)
        if scoped:
            self.scopes.append(node)
        super().generic_visit(node)
        if scoped:
            self.scopes.pop()


class MeaningfulNamesAnalyzer(RuleAnalyzer):
    """Finds identifiers that do not describe what they hold."""

    id = "enforce-meaningful-names"
    description = "Names should be long and specific enough to be meaningful."
    analyzer_type = AnalyzerType.NAMING
    id_prefix = "nam"
    confidence = 0.75

    Options = MeaningfulNamesOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "minLength": {"type": "integer", "minimum": 1, "default": 2},
            "allowedNames": {
                "type": "array",
                "items": {"type": "string"},
                "default": list(DEFAULT_ALLOWED_NAMES),
            },
            "disallowedNames": {
                "type": "array",
                "items": {"type": "string"},
                "default": list(DEFAULT_DISALLOWED_NAMES),
            },
            "checkProperties": {"type": "boolean", "default": False},
        },
        "additionalProperties": False,
    }

    def _violation(self, name: str) -> tuple[str, str] | None:
        opts = self.options
        if name in opts.allowed_names:
            return None
        if name in opts.disallowed_names:
            return (
                NAM_DISALLOWED_001,
                f'Name "{name}" is not allowed. Consider using a more descriptive name.',
            )
        if len(name) < opts.min_length:
            return (
                NAM_TOO_SHORT_001,
                f'Name "{name}" is too short (minimum {opts.min_length} characters).',
            )
        return None

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        collector = _NameCollector(self.options.check_properties)
        collector.visit(tree)
        seen: set[tuple[int, str]] = set()
        findings: list[Finding] = []
        for name, node, scope in collector.names:
            key = (id(scope), name)
            if key in seen:
                continue
            seen.add(key)
            violation = self._violation(name)
            if violation is None:
                continue
            rule_id, message = violation
            findings.append(
                self.make_finding(
                    rule_id,
                    rel,
                    line_start=node.lineno,
                    line_end=node.lineno,
                    column=node.col_offset,
                    symbol=f"{getattr(scope, 'name', '<module>')}.{name}",
                    message=message,
                    snippet=name,
                    name=name,
                )
            )
        return findings
