"""Classify identifier and member-access events into block usage."""

from __future__ import annotations

from enum import Enum

from .nodes import Binding, Identifier, MemberAccess
from .scope import TraversalState


class Usage(str, Enum):
    READ = "read"
    WRITE = "write"
    SKIP = "skip"


_WRITE_BINDINGS = frozenset({Binding.STORE, Binding.DELETE, Binding.PARAMETER})


def classify_identifier(ref: Identifier, state: TraversalState) -> Usage:
    # the method receiver stands for the object itself, not a variable
    if ref.name in state.receiver_names():
        return Usage.SKIP
    if ref.binding in _WRITE_BINDINGS:
        return Usage.WRITE
    return Usage.READ


def record_identifier(state: TraversalState, ref: Identifier) -> Usage:
    """Add *ref* to the innermost function frame; returns how it was counted."""
    unit = state.current_function()
    if unit is None:
        return Usage.SKIP
    usage = classify_identifier(ref, state)
    frame = unit.frames[-1]
    if usage is Usage.READ:
        frame.reads.add(ref.name)
    elif usage is Usage.WRITE:
        frame.writes.add(ref.name)
        if len(unit.frames) == 1:
            unit.declared_names.add(ref.name)
    return usage


def record_member(state: TraversalState, access: MemberAccess) -> bool:
    """Attribute ``receiver.member`` to the open method that owns *receiver*.

    Enclosing classes are searched outward, so a closure inside a nested
    class still credits its outer method.  Accesses through any other
    object are ignored.
    """
    for unit in state.open_classes():
        frame = unit.frames[-1]
        if frame.receiver is not None and frame.receiver == access.receiver:
            frame.used_members.add(access.member)
            return True
    return False
