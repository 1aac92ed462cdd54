"""Pairwise overlap graph between the blocks of one unit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .blocks import Block

VACUOUS_SCORE = 100.0


def overlap_score(a: frozenset[str], b: frozenset[str]) -> float:
    """Jaccard similarity of *a* and *b* as a percentage.

    100 when either side is empty.
    """
    if not a or not b:
        return VACUOUS_SCORE
    return len(a & b) * 100 / len(a | b)


@dataclass(slots=True)
class OverlapGraph:
    """Undirected adjacency list indexed by block position."""

    size: int
    adjacency: list[list[int]] = field(default_factory=list)
    pair_count: int = 0
    score_total: float = 0.0
    edge_count: int = 0

    def add_edge(self, i: int, j: int) -> None:
        self.adjacency[i].append(j)
        self.adjacency[j].append(i)
        self.edge_count += 1

    @property
    def average_overlap(self) -> float:
        if not self.pair_count:
            return 0.0
        return round(self.score_total / self.pair_count, 1)


def calls_between(a: Block, b: Block) -> bool:
    return a.name in b.used_members or b.name in a.used_members


def build_overlap_graph(
    blocks: Sequence[Block],
    threshold: float,
    *,
    call_edges: bool = False,
) -> OverlapGraph:
    """Connect every pair of blocks whose overlap score reaches *threshold*.

    With *call_edges* set (class units), a pair is also connected when
    either block uses the other's name as a member.
    """
    graph = OverlapGraph(size=len(blocks), adjacency=[[] for _ in blocks])
    for i in range(len(blocks)):
        for j in range(i + 1, len(blocks)):
            score = overlap_score(blocks[i].signal, blocks[j].signal)
            graph.pair_count += 1
            graph.score_total += score
            if score >= threshold or (call_edges and calls_between(blocks[i], blocks[j])):
                graph.add_edge(i, j)
    return graph
