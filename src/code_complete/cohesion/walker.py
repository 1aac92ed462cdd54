"""Depth-first enter/exit traversal over a Python ``ast`` tree.

Python's ``ast`` nodes carry no parent pointer, so the walker hands the
parent along with every event.  Traversal is iterative so that deeply
nested sources cannot exhaust the interpreter's recursion limit.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Phase(str, Enum):
    ENTER = "enter"
    EXIT = "exit"


@dataclass(frozen=True, slots=True)
class WalkEvent:
    phase: Phase
    node: ast.AST
    parent: ast.AST | None


def walk_events(tree: ast.AST) -> Iterator[WalkEvent]:
    """Yield ENTER/EXIT events for *tree* in source (field) order.

    Children are visited in the order ``ast.iter_child_nodes`` produces,
    which follows each node's ``_fields`` declaration.
    """
    yield WalkEvent(Phase.ENTER, tree, None)
    stack: list[tuple[ast.AST, ast.AST | None, Iterator[ast.AST]]] = [
        (tree, None, ast.iter_child_nodes(tree))
    ]
    while stack:
        node, parent, children = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            yield WalkEvent(Phase.EXIT, node, parent)
            continue
        yield WalkEvent(Phase.ENTER, child, node)
        stack.append((child, node, ast.iter_child_nodes(child)))
