"""Scope tracking: the unit stack and each unit's block-accumulator stack.

``TraversalState`` is owned by one traversal and passed explicitly to the
usage classifier.  Every ``exit_*`` operation tolerates underflow and
returns ``None`` instead of raising, so a malformed or partial traversal
never aborts analysis of sibling units.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from code_complete.model import UnitKind
from code_complete.model.cohesion import UnitSpan

from .blocks import Block, BlockFrame, extract_block
from .nodes import BlockType


class UnitState(str, Enum):
    CREATED = "created"
    ACCUMULATING = "accumulating"
    FINALIZING = "finalizing"
    REPORTED = "reported"
    DISCARDED = "discarded"


@dataclass(slots=True)
class AnalysisUnit:
    """One function or class under analysis.

    ``declared_names`` holds the names written at the top level of a
    function, outside any control block.
    """

    kind: UnitKind
    name: str
    span: UnitSpan
    receiver: str | None = None
    blocks: list[Block] = field(default_factory=list)
    declared_names: set[str] = field(default_factory=set)
    frames: list[BlockFrame] = field(default_factory=list)
    state: UnitState = UnitState.CREATED

    @property
    def current_frame(self) -> BlockFrame | None:
        return self.frames[-1] if self.frames else None

    def commit(self, frame: BlockFrame) -> Block | None:
        """Extract *frame* and append it to ``blocks`` if it has signal."""
        if self.state is not UnitState.ACCUMULATING:
            return None
        block = extract_block(frame, len(self.blocks))
        if block is not None:
            self.blocks.append(block)
        return block

    def finish(self, reported: bool) -> None:
        self.state = UnitState.REPORTED if reported else UnitState.DISCARDED


class TraversalState:
    """Stack of open analysis units for a single traversal."""

    def __init__(self) -> None:
        self.units: list[AnalysisUnit] = []
        # units set aside while their decorators or defaults are visited
        self.parked: list[AnalysisUnit] = []
        self._header_ids: set[int] = set()

    def reset(self) -> None:
        self.units.clear()
        self.parked.clear()
        self._header_ids.clear()

    @property
    def current(self) -> AnalysisUnit | None:
        return self.units[-1] if self.units else None

    # ── units ───────────────────────────────────────────────────────

    def enter_unit(
        self,
        kind: UnitKind,
        name: str,
        span: UnitSpan,
        receiver: str | None = None,
    ) -> AnalysisUnit:
        unit = AnalysisUnit(kind=kind, name=name, span=span, receiver=receiver)
        if kind is UnitKind.FUNCTION:
            unit.frames.append(BlockFrame(block_type=None, span=span))
        unit.state = UnitState.ACCUMULATING
        self.units.append(unit)
        return unit

    def exit_unit(self) -> AnalysisUnit | None:
        if not self.units:
            return None
        unit = self.units.pop()
        unit.frames.clear()
        unit.state = UnitState.FINALIZING
        return unit

    # ── function-level blocks ───────────────────────────────────────

    def enter_block(self, block_type: BlockType, span: UnitSpan) -> None:
        unit = self.current
        if unit is None or unit.kind is not UnitKind.FUNCTION:
            return
        unit.frames.append(BlockFrame(block_type=block_type, span=span))

    def exit_block(self) -> Block | None:
        unit = self.current
        if unit is None or unit.kind is not UnitKind.FUNCTION:
            return None
        # frames[0] is the function top level and stays until exit_unit
        if len(unit.frames) <= 1:
            return None
        return unit.commit(unit.frames.pop())

    # ── class-level blocks (methods) ────────────────────────────────

    def enter_method(
        self,
        name: str,
        span: UnitSpan,
        receiver: str | None,
        *,
        constructor: bool = False,
    ) -> None:
        unit = self.current
        if unit is None or unit.kind is not UnitKind.CLASS:
            return
        unit.frames.append(
            BlockFrame(
                block_type=BlockType.METHOD,
                span=span,
                name=name,
                receiver=receiver,
                constructor=constructor,
            )
        )

    def exit_method(self) -> Block | None:
        unit = self.current
        if unit is None or unit.kind is not UnitKind.CLASS or not unit.frames:
            return None
        return unit.commit(unit.frames.pop())

    # ── header expressions ──────────────────────────────────────────

    def mark_header(self, nodes: Iterable[object]) -> None:
        self._header_ids.update(id(n) for n in nodes)

    def is_header(self, node: object) -> bool:
        return id(node) in self._header_ids

    def park(self) -> None:
        """Set the innermost unit aside so a header is credited to its parent."""
        if self.units:
            self.parked.append(self.units.pop())

    def unpark(self) -> AnalysisUnit | None:
        if not self.parked:
            return None
        unit = self.parked.pop()
        self.units.append(unit)
        return unit

    # ── lookups used by the usage classifier ────────────────────────

    def current_function(self) -> AnalysisUnit | None:
        """Innermost unit, when it is a function with an open frame."""
        unit = self.current
        if unit is None or unit.kind is not UnitKind.FUNCTION or not unit.frames:
            return None
        return unit

    def open_classes(self) -> Iterator[AnalysisUnit]:
        """Class units with a method open, innermost first."""
        for unit in reversed(self.units):
            if unit.kind is UnitKind.CLASS and unit.frames:
                yield unit

    def receiver_names(self) -> set[str]:
        """Receiver names of the enclosing functions up to the nearest class."""
        names: set[str] = set()
        for unit in reversed(self.units):
            if unit.kind is UnitKind.CLASS:
                break
            if unit.receiver:
                names.add(unit.receiver)
        return names
