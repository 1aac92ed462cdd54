"""Coupling analyzers — fan-out, parameter count and import count.

Rules
-----
CPL_FANOUT_FUNCTION_001
    Function calling more distinct external targets than ``maxFunctionFanOut``.
CPL_FANOUT_CLASS_001
    Class whose methods together call more than ``maxClassFanOut`` targets.
CPL_PARAMS_001
    Function taking more than ``maxParams`` parameters.
CPL_IMPORTS_001
    Module importing from more than ``maxImports`` distinct modules.
"""

from __future__ import annotations

import ast
import builtins
import fnmatch
from dataclasses import dataclass, field
from typing import Iterator

from code_complete.cohesion.nodes import ANONYMOUS
from code_complete.model import AnalyzerType
from code_complete.model.finding import Finding
from code_complete.rules import (
    CPL_FANOUT_CLASS_001,
    CPL_FANOUT_FUNCTION_001,
    CPL_IMPORTS_001,
    CPL_PARAMS_001,
)

from ._base import RuleAnalyzer, end_line, receiver_of

_BUILTIN_NAMES = frozenset(dir(builtins))
_FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)


def _function_name(node: ast.AST) -> str:
    return getattr(node, "name", ANONYMOUS)


def _local_names(fn: ast.FunctionDef | ast.AsyncFunctionDef | ast.Lambda) -> set[str]:
    """Parameters plus every name bound directly in *fn*'s own scope."""
    args = fn.args
    names = {a.arg for a in (*args.posonlyargs, *args.args, *args.kwonlyargs)}
    if args.vararg:
        names.add(args.vararg.arg)
    if args.kwarg:
        names.add(args.kwarg.arg)

    body = fn.body if isinstance(fn.body, list) else [fn.body]
    stack: list[ast.AST] = list(body)
    while stack:
        node = stack.pop()
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            names.add(node.name)
            continue
        if isinstance(node, ast.Lambda):
            continue
        if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Store):
            names.add(node.id)
        elif isinstance(node, ast.alias):
            names.add(node.asname or node.name.split(".")[0])
        elif isinstance(node, ast.ExceptHandler) and node.name:
            names.add(node.name)
        stack.extend(ast.iter_child_nodes(node))
    return names


# ── fan-out ──────────────────────────────────────────────────────────


@dataclass
class _FanOutContext:
    node: ast.AST
    kind: str                  # "function" | "class"
    receiver: str | None = None
    local_names: set[str] = field(default_factory=set)
    external_calls: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class FanOutOptions:
    max_function_fan_out: int = 7
    max_class_fan_out: int = 15
    ignore_built_ins: bool = True
    ignore_self_references: bool = True
    min_function_length: int = 5


class _FanOutVisitor(ast.NodeVisitor):
    def __init__(self, options: FanOutOptions) -> None:
        self.options = options
        self.stack: list[_FanOutContext] = []
        self.parents: list[ast.AST] = []
        self.done: list[_FanOutContext] = []

    def _nearest(self, kind: str) -> _FanOutContext | None:
        for ctx in reversed(self.stack):
            if ctx.kind == kind:
                return ctx
        return None

    def _receivers(self) -> set[str]:
        return {ctx.receiver for ctx in self.stack if ctx.receiver}

    def generic_visit(self, node: ast.AST) -> None:
        parent = self.parents[-1] if self.parents else None
        ctx = None
        if isinstance(node, _FUNCTION_NODES):
            ctx = _FanOutContext(
                node, "function",
                receiver=receiver_of(node, parent),
                local_names=_local_names(node),
            )
        elif isinstance(node, ast.ClassDef):
            ctx = _FanOutContext(node, "class")
        elif isinstance(node, ast.Call):
            self._record_call(node)

        if ctx is not None:
            self.stack.append(ctx)
        self.parents.append(node)
        super().generic_visit(node)
        self.parents.pop()
        if ctx is not None:
            self.stack.pop()
            self.done.append(ctx)

    def _call_name(self, func: ast.expr) -> str | None:
        if isinstance(func, ast.Name):
            return func.id
        if isinstance(func, ast.Attribute) and isinstance(func.value, ast.Name):
            owner = func.value.id
            if owner in self._receivers():
                if self.options.ignore_self_references:
                    return None
            return f"{owner}.{func.attr}"
        return None

    def _record_call(self, node: ast.Call) -> None:
        function_ctx = self._nearest("function")
        class_ctx = self._nearest("class")
        if function_ctx is None and class_ctx is None:
            return
        name = self._call_name(node.func)
        if name is None:
            return
        base = name.split(".")[0]
        if self.options.ignore_built_ins and base in _BUILTIN_NAMES:
            return
        is_self = base in self._receivers()
        if function_ctx is not None and not is_self and base in function_ctx.local_names:
            return
        if function_ctx is not None:
            function_ctx.external_calls.add(name)
        if class_ctx is not None:
            class_ctx.external_calls.add(name)


class FanOutAnalyzer(RuleAnalyzer):
    """Finds functions and classes that depend on too many outside callables."""

    id = "high-fan-out"
    description = "Functions and classes should not call too many external targets."
    analyzer_type = AnalyzerType.COUPLING
    id_prefix = "fan"
    confidence = 0.85

    Options = FanOutOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "maxFunctionFanOut": {"type": "integer", "minimum": 1, "default": 7},
            "maxClassFanOut": {"type": "integer", "minimum": 1, "default": 15},
            "ignoreBuiltIns": {"type": "boolean", "default": True},
            "ignoreSelfReferences": {"type": "boolean", "default": True},
            "minFunctionLength": {"type": "integer", "minimum": 1, "default": 5},
        },
        "additionalProperties": False,
    }

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        opts = self.options
        visitor = _FanOutVisitor(opts)
        visitor.visit(tree)

        findings: list[Finding] = []
        for ctx in visitor.done:
            node = ctx.node
            count = len(ctx.external_calls)
            length = end_line(node) - node.lineno + 1
            if ctx.kind == "function":
                if length < opts.min_function_length or count <= opts.max_function_fan_out:
                    continue
                rule_id, limit = CPL_FANOUT_FUNCTION_001, opts.max_function_fan_out
                message = (
                    f'Function "{_function_name(node)}" calls {count} external functions '
                    f"(maximum allowed: {limit}). Consider breaking down this function "
                    "or using dependency injection."
                )
            else:
                if count <= opts.max_class_fan_out:
                    continue
                rule_id, limit = CPL_FANOUT_CLASS_001, opts.max_class_fan_out
                message = (
                    f'Class "{node.name}" has {count} external dependencies '
                    f"(maximum allowed: {limit}). Consider extracting responsibilities "
                    "or using dependency injection."
                )
            calls = sorted(ctx.external_calls)
            findings.append(
                self.make_finding(
                    rule_id,
                    rel,
                    line_start=node.lineno,
                    line_end=end_line(node),
                    column=node.col_offset,
                    symbol=_function_name(node),
                    message=message,
                    snippet=f"{_function_name(node)}  # fan-out={count}",
                    fan_out=count,
                    calls=calls,
                )
            )
        return findings


# ── parameter coupling ───────────────────────────────────────────────


@dataclass(frozen=True)
class ParameterCouplingOptions:
    max_params: int = 4
    count_variadic: bool = False


class _ParentedWalk(ast.NodeVisitor):
    """Collect ``(function, parent)`` pairs in source order."""

    def __init__(self) -> None:
        self.parents: list[ast.AST] = []
        self.functions: list[tuple[ast.AST, ast.AST | None]] = []

    def generic_visit(self, node: ast.AST) -> None:
        if isinstance(node, _FUNCTION_NODES):
            self.functions.append((node, self.parents[-1] if self.parents else None))
        self.parents.append(node)
        super().generic_visit(node)
        self.parents.pop()


def _counted_params(node: ast.AST, parent: ast.AST | None, *, count_variadic: bool) -> list[str]:
    args = node.args
    positional = [a.arg for a in (*args.posonlyargs, *args.args)]
    receiver = receiver_of(node, parent)
    if receiver is not None and positional and positional[0] == receiver:
        positional = positional[1:]
    names = positional + [a.arg for a in args.kwonlyargs]
    if count_variadic:
        if args.vararg:
            names.append("*" + args.vararg.arg)
        if args.kwarg:
            names.append("**" + args.kwarg.arg)
    return names


class ParameterCouplingAnalyzer(RuleAnalyzer):
    """Finds functions whose signatures take too many parameters."""

    id = "high-parameter-coupling"
    description = "Functions should not take too many parameters."
    analyzer_type = AnalyzerType.COUPLING
    id_prefix = "par"
    confidence = 0.95

    Options = ParameterCouplingOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "maxParams": {"type": "integer", "minimum": 1, "default": 4},
            "countVariadic": {"type": "boolean", "default": False},
        },
        "additionalProperties": False,
    }

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        walker = _ParentedWalk()
        walker.visit(tree)
        limit = self.options.max_params
        findings: list[Finding] = []
        for node, parent in walker.functions:
            params = _counted_params(node, parent, count_variadic=self.options.count_variadic)
            if len(params) <= limit:
                continue
            name = _function_name(node)
            findings.append(
                self.make_finding(
                    CPL_PARAMS_001,
                    rel,
                    line_start=node.lineno,
                    line_end=end_line(node),
                    column=node.col_offset,
                    symbol=name,
                    message=(
                        f'Function "{name}" has {len(params)} parameters (maximum allowed: '
                        f"{limit}). Consider grouping them into a dataclass or options object."
                    ),
                    snippet=f"def {name}({', '.join(params)})",
                    param_count=len(params),
                )
            )
        return findings


# ── import coupling ──────────────────────────────────────────────────


@dataclass(frozen=True)
class ImportCouplingOptions:
    max_imports: int = 10
    ignore_type_imports: bool = True
    ignore_patterns: tuple[str, ...] = ()


def _is_type_checking_guard(test: ast.expr) -> bool:
    if isinstance(test, ast.Name):
        return test.id == "TYPE_CHECKING"
    return isinstance(test, ast.Attribute) and test.attr == "TYPE_CHECKING"


def _imports(tree: ast.AST, *, skip_type_only: bool) -> Iterator[ast.Import | ast.ImportFrom]:
    stack: list[ast.AST] = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            yield node
            continue
        if skip_type_only and isinstance(node, ast.If) and _is_type_checking_guard(node.test):
            stack.extend(reversed(node.orelse))
            continue
        stack.extend(reversed(list(ast.iter_child_nodes(node))))


def _module_sources(node: ast.Import | ast.ImportFrom) -> list[str]:
    if isinstance(node, ast.Import):
        return [alias.name for alias in node.names]
    return ["." * node.level + (node.module or "")]


class ImportCouplingAnalyzer(RuleAnalyzer):
    """Finds modules that import from too many other modules."""

    id = "high-import-coupling"
    description = "Modules should not depend on too many other modules."
    analyzer_type = AnalyzerType.COUPLING
    id_prefix = "imp"
    confidence = 0.9

    Options = ImportCouplingOptions
    OPTIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "maxImports": {"type": "integer", "minimum": 1, "default": 10},
            "ignoreTypeImports": {"type": "boolean", "default": True},
            "ignorePatterns": {
                "type": "array",
                "items": {"type": "string"},
                "default": [],
            },
        },
        "additionalProperties": False,
    }

    def _ignored(self, module: str) -> bool:
        return any(fnmatch.fnmatch(module, pat) for pat in self.options.ignore_patterns)

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        sources: list[str] = []
        for node in _imports(tree, skip_type_only=self.options.ignore_type_imports):
            for module in _module_sources(node):
                if module not in sources and not self._ignored(module):
                    sources.append(module)

        limit = self.options.max_imports
        if len(sources) <= limit:
            return []
        last_line = max((end_line(n) for n in tree.body), default=1)
        listing = "\n".join(f"  - {m}" for m in sources)
        return [
            self.make_finding(
                CPL_IMPORTS_001,
                rel,
                line_start=1,
                line_end=last_line,
                symbol="<module>",
                message=(
                    f"File has high import coupling: {len(sources)} module imports "
                    f"(max: {limit}).\n\nImported modules:\n{listing}\n\n"
                    "Consider splitting this module into smaller, focused modules."
                ),
                snippet=f"# imports={len(sources)}",
                modules=sources,
            )
        ]
