"""Adapter from raw ``ast`` nodes to the closed set of shapes the engine reads.

The cohesion engine never inspects ``ast`` classes directly.  ``classify``
translates a node (plus its parent) into exactly one of:

``FunctionUnit``   def / async def / lambda — a function-level unit
``ClassUnit``      class statement — a class-level unit
``ControlBlock``   if / for / while / match / try — a function-level block
``Identifier``     a bound or referenced name
``MemberAccess``   ``<name>.<attr>`` — candidate receiver member access

and ``None`` for everything else.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from enum import Enum
from typing import Union

from code_complete.model.cohesion import UnitSpan

CONSTRUCTOR_NAMES = frozenset({"__init__", "__new__"})
ANONYMOUS = "anonymous"


class BlockType(str, Enum):
    IF = "if"
    FOR = "for"
    WHILE = "while"
    MATCH = "match"
    TRY = "try"
    METHOD = "method"


class Binding(str, Enum):
    LOAD = "load"
    STORE = "store"
    DELETE = "delete"
    PARAMETER = "parameter"


_BLOCK_TYPES: dict[type, BlockType] = {
    ast.If: BlockType.IF,
    ast.For: BlockType.FOR,
    ast.AsyncFor: BlockType.FOR,
    ast.While: BlockType.WHILE,
    ast.Match: BlockType.MATCH,
    ast.Try: BlockType.TRY,
}
if hasattr(ast, "TryStar"):  # 3.11+
    _BLOCK_TYPES[ast.TryStar] = BlockType.TRY

_CTX_BINDING: dict[type, Binding] = {
    ast.Load: Binding.LOAD,
    ast.Store: Binding.STORE,
    ast.Del: Binding.DELETE,
}


@dataclass(frozen=True, slots=True)
class MethodInfo:
    """Present on a ``FunctionUnit`` defined directly in a class body."""

    name: str
    receiver: str | None
    is_constructor: bool


@dataclass(frozen=True, slots=True)
class FunctionUnit:
    """``header`` holds the decorators and defaults, which run in the enclosing scope."""

    name: str
    span: UnitSpan
    method: MethodInfo | None = None
    binds_name: bool = True
    header: tuple[ast.AST, ...] = ()


@dataclass(frozen=True, slots=True)
class ClassUnit:
    """``header`` holds the decorators, bases and class keywords."""

    name: str
    span: UnitSpan
    header: tuple[ast.AST, ...] = ()


@dataclass(frozen=True, slots=True)
class ControlBlock:
    block_type: BlockType
    span: UnitSpan


@dataclass(frozen=True, slots=True)
class Identifier:
    name: str
    binding: Binding


@dataclass(frozen=True, slots=True)
class MemberAccess:
    receiver: str
    member: str


SyntaxNode = Union[FunctionUnit, ClassUnit, ControlBlock, Identifier, MemberAccess]


def span_of(node: ast.AST) -> UnitSpan:
    start = getattr(node, "lineno", 0) or 0
    end = getattr(node, "end_lineno", None) or start
    return UnitSpan(start, end)


def _is_staticmethod(node: ast.FunctionDef | ast.AsyncFunctionDef) -> bool:
    for deco in node.decorator_list:
        if isinstance(deco, ast.Name) and deco.id == "staticmethod":
            return True
        if isinstance(deco, ast.Attribute) and deco.attr == "staticmethod":
            return True
    return False


def method_receiver(node: ast.FunctionDef | ast.AsyncFunctionDef) -> str | None:
    """Name bound to the instance (or class) inside a method, if any."""
    if _is_staticmethod(node):
        return None
    positional = [*node.args.posonlyargs, *node.args.args]
    if not positional:
        return None
    return positional[0].arg


def _defaults(args: ast.arguments) -> tuple[ast.expr, ...]:
    return (*args.defaults, *(d for d in args.kw_defaults if d is not None))


def classify(node: ast.AST, parent: ast.AST | None) -> SyntaxNode | None:
    """Translate *node* into the engine's closed node set."""
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        method = None
        if isinstance(parent, ast.ClassDef):
            method = MethodInfo(
                name=node.name,
                receiver=method_receiver(node),
                is_constructor=node.name in CONSTRUCTOR_NAMES,
            )
        header = (*node.decorator_list, *_defaults(node.args))
        return FunctionUnit(node.name, span_of(node), method, header=header)
    if isinstance(node, ast.Lambda):
        return FunctionUnit(ANONYMOUS, span_of(node), binds_name=False, header=_defaults(node.args))
    if isinstance(node, ast.ClassDef):
        header = (*node.decorator_list, *node.bases, *(kw.value for kw in node.keywords))
        return ClassUnit(node.name, span_of(node), header=header)

    block_type = _BLOCK_TYPES.get(type(node))
    if block_type is not None:
        return ControlBlock(block_type, span_of(node))

    if isinstance(node, ast.Name):
        return Identifier(node.id, _CTX_BINDING.get(type(node.ctx), Binding.LOAD))
    if isinstance(node, ast.arg):
        return Identifier(node.arg, Binding.PARAMETER)
    if isinstance(node, ast.ExceptHandler) and node.name:
        return Identifier(node.name, Binding.STORE)
    if isinstance(node, (ast.MatchAs, ast.MatchStar)) and node.name:
        return Identifier(node.name, Binding.STORE)
    if isinstance(node, ast.alias):
        bound = node.asname or node.name.split(".")[0]
        if bound != "*":
            return Identifier(bound, Binding.STORE)
        return None

    if isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name):
        return MemberAccess(node.value.id, node.attr)
    return None
