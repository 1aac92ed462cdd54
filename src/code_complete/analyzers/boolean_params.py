"""Boolean-parameter analyzer — flag arguments that switch behaviour."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Iterator

from code_complete.model import AnalyzerType
from code_complete.model.finding import Finding
from code_complete.rules import BOOL_PARAM_001

from ._base import RuleAnalyzer

_ALLOWED_PREFIXES = ("is", "has", "should", "can", "will", "did", "does")


def has_allowed_prefix(name: str) -> bool:
    """``is_ready``, ``isReady`` and ``has`` read as predicates; ``island`` does not."""
    for prefix in _ALLOWED_PREFIXES:
        if not name.startswith(prefix):
            continue
        rest = name[len(prefix):]
        if not rest or rest[0] == "_" or rest[0].isupper():
            return True
    return False


def _is_bool_annotation(annotation: ast.expr | None) -> bool:
    if annotation is None:
        return False
    if isinstance(annotation, ast.Name):
        return annotation.id == "bool"
    if isinstance(annotation, ast.Attribute):
        return annotation.attr == "bool"
    if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
        return annotation.value.strip() == "bool"
    return False


def _is_bool_literal(node: ast.expr | None) -> bool:
    return isinstance(node, ast.Constant) and isinstance(node.value, bool)


def _params_with_defaults(args: ast.arguments) -> Iterator[tuple[ast.arg, ast.expr | None]]:
    positional = [*args.posonlyargs, *args.args]
    padding = [None] * (len(positional) - len(args.defaults))
    yield from zip(positional, [*padding, *args.defaults])
    yield from zip(args.kwonlyargs, args.kw_defaults)


def suggest_replacement(name: str) -> str:
    lowered = name.lower()
    if lowered in {"enabled", "disable", "disabled", "enable"}:
        return 'mode: Literal["enabled", "disabled"]'
    if lowered in {"visible", "hidden", "show", "hide"}:
        return 'visibility: Literal["visible", "hidden"]'
    if "flag" in lowered:
        return "options: <dataclass>"
    return f"{name}_mode: <Enum>"


@dataclass(frozen=True)
class BooleanParamsOptions:
    ignore_default: bool = False


class BooleanParamsAnalyzer(RuleAnalyzer):
    """Finds ``bool`` parameters that are not named as predicates."""

    id = "no-boolean-params"
    description = "Avoid boolean flag parameters."
    analyzer_type = AnalyzerType.BOOLEAN_PARAMS
    id_prefix = "bool"
    confidence = 0.8

    Options = BooleanParamsOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "ignoreDefault": {"type": "boolean", "default": False},
        },
        "additionalProperties": False,
    }

    def _is_boolean(self, param: ast.arg, default: ast.expr | None) -> bool:
        if _is_bool_annotation(param.annotation):
            return True
        return _is_bool_literal(default) and not self.options.ignore_default

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        findings: list[Finding] = []
        for node in ast.walk(tree):
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)):
                continue
            for param, default in _params_with_defaults(node.args):
                if has_allowed_prefix(param.arg) or not self._is_boolean(param, default):
                    continue
                bad = f"{param.arg}: bool"
                good = suggest_replacement(param.arg)
                findings.append(
                    self.make_finding(
                        BOOL_PARAM_001,
                        rel,
                        line_start=param.lineno,
                        line_end=param.end_lineno or param.lineno,
                        column=param.col_offset,
                        symbol=f"{getattr(node, 'name', 'lambda')}.{param.arg}",
                        message=(
                            f'Boolean parameter "{param.arg}" is discouraged. Consider '
                            "using descriptive objects or enums instead, e.g., replace "
                            f'"{bad}" with "{good}".'
                        ),
                        snippet=bad,
                        parameter=param.arg,
                    )
                )
        return findings
