"""Block accumulators and the extractor that freezes them into ``Block``s."""

from __future__ import annotations

from dataclasses import dataclass, field

from code_complete.model.cohesion import UnitSpan

from .nodes import BlockType


@dataclass(slots=True)
class BlockFrame:
    """Mutable usage accumulator for one open block.

    A function unit's first frame (``block_type is None``) collects the
    function's top-level usage and is never extracted.  Method frames on a
    class unit carry the method's receiver name.
    """

    block_type: BlockType | None
    span: UnitSpan
    name: str = ""
    receiver: str | None = None
    constructor: bool = False
    reads: set[str] = field(default_factory=set)
    writes: set[str] = field(default_factory=set)
    used_members: set[str] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        if self.block_type is BlockType.METHOD:
            return not self.used_members
        return not (self.reads or self.writes)


@dataclass(frozen=True, slots=True)
class Block:
    index: int
    block_type: BlockType
    name: str
    start_line: int
    end_line: int
    reads: frozenset[str] = frozenset()
    writes: frozenset[str] = frozenset()
    used_members: frozenset[str] = frozenset()

    @property
    def signal(self) -> frozenset[str]:
        """Names compared between blocks when building the overlap graph."""
        if self.block_type is BlockType.METHOD:
            return self.used_members
        return self.reads | self.writes

    @property
    def line_range(self) -> str:
        return f"{self.start_line}-{self.end_line}"


def block_label(block_type: BlockType, span: UnitSpan) -> str:
    return f"{block_type.value}:{span.start_line}"


def extract_block(frame: BlockFrame, index: int) -> Block | None:
    """Freeze *frame* into a ``Block``, or ``None`` when it carries no signal.

    Top-level frames and constructor frames are never extracted.
    """
    if frame.block_type is None or frame.constructor or frame.is_empty:
        return None
    return Block(
        index=index,
        block_type=frame.block_type,
        name=frame.name or block_label(frame.block_type, frame.span),
        start_line=frame.span.start_line,
        end_line=frame.span.end_line,
        reads=frozenset(frame.reads),
        writes=frozenset(frame.writes),
        used_members=frozenset(frame.used_members),
    )
