"""Connected components of an overlap graph."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Sequence

from code_complete.model.cohesion import ComponentDetail

from .blocks import Block
from .graph import OverlapGraph


@dataclass(frozen=True, slots=True)
class Component:
    members: tuple[int, ...]   # sorted block indices


def connected_components(graph: OverlapGraph) -> list[Component]:
    """Breadth-first partition of the graph's nodes.

    Start nodes are taken in index order, so the result is deterministic
    and every node lands in exactly one component.
    """
    visited = [False] * graph.size
    components: list[Component] = []
    for start in range(graph.size):
        if visited[start]:
            continue
        visited[start] = True
        queue = deque([start])
        members = []
        while queue:
            node = queue.popleft()
            members.append(node)
            for neighbour in graph.adjacency[node]:
                if not visited[neighbour]:
                    visited[neighbour] = True
                    queue.append(neighbour)
        components.append(Component(tuple(sorted(members))))
    return components


def is_low_cohesion(components: Sequence[Component]) -> bool:
    return len(components) > 1


def summarize_components(
    blocks: Sequence[Block],
    components: Sequence[Component],
) -> tuple[ComponentDetail, ...]:
    details = []
    for comp in components:
        members = [blocks[i] for i in comp.members]
        names: set[str] = set()
        for block in members:
            names |= block.signal
        details.append(
            ComponentDetail(
                member_names=tuple(b.name for b in members),
                shared_identifiers=tuple(sorted(names)),
                block_type_tags=tuple(b.block_type.value for b in members),
                line_ranges=tuple(b.line_range for b in members),
            )
        )
    return tuple(details)
