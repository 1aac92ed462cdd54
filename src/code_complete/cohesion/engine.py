"""Cohesion engine — drives the walker and analyses each unit on exit.

Usage::

    engine = CohesionEngine(function_options=FUNCTION_DEFAULTS)
    for finding in engine.analyze(ast.parse(source)):
        print(finding.message())

Function units are decomposed into control-structure blocks, class units
into methods.  A unit is flagged when its overlap graph has more than one
connected component.  Passing ``None`` for either side's options disables
reporting for that side; units are still tracked so that attribution of
nested code stays correct.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass

from code_complete.model import UnitKind
from code_complete.model.cohesion import CohesionFinding

from .components import connected_components, is_low_cohesion, summarize_components
from .graph import build_overlap_graph
from .nodes import (
    Binding,
    ClassUnit,
    ControlBlock,
    FunctionUnit,
    Identifier,
    MemberAccess,
    SyntaxNode,
    classify,
)
from .scope import AnalysisUnit, TraversalState
from .usage import record_identifier, record_member
from .walker import Phase, walk_events


@dataclass(frozen=True, slots=True)
class CohesionOptions:
    min_shared_percentage: int
    min_unit_length: int


FUNCTION_DEFAULTS = CohesionOptions(min_shared_percentage=30, min_unit_length=10)
CLASS_DEFAULTS = CohesionOptions(min_shared_percentage=40, min_unit_length=10)


class CohesionEngine:
    def __init__(
        self,
        function_options: CohesionOptions | None = None,
        class_options: CohesionOptions | None = None,
    ) -> None:
        self.function_options = function_options
        self.class_options = class_options
        self._state = TraversalState()

    def analyze(self, tree: ast.AST) -> list[CohesionFinding]:
        """Run one traversal of *tree*; findings come out in unit-exit order."""
        state = self._state
        state.reset()
        findings: list[CohesionFinding] = []
        for event in walk_events(tree):
            entering = event.phase is Phase.ENTER
            # decorators, defaults and bases belong to the enclosing scope
            header = state.is_header(event.node)
            if header and entering:
                state.park()
            node = classify(event.node, event.parent)
            if node is not None and entering:
                self._enter(state, node)
            elif node is not None:
                finding = self._exit(state, node)
                if finding is not None:
                    findings.append(finding)
            if header and not entering:
                state.unpark()
        # partial units from an aborted traversal are dropped unreported
        state.reset()
        return findings

    # ── event handlers ──────────────────────────────────────────────

    def _enter(self, state: TraversalState, node: SyntaxNode) -> None:
        if isinstance(node, FunctionUnit):
            if node.binds_name:
                record_identifier(state, Identifier(node.name, Binding.STORE))
            receiver = None
            if node.method is not None:
                receiver = node.method.receiver
                state.enter_method(
                    node.method.name,
                    node.span,
                    receiver,
                    constructor=node.method.is_constructor,
                )
            state.enter_unit(UnitKind.FUNCTION, node.name, node.span, receiver)
            state.mark_header(node.header)
        elif isinstance(node, ClassUnit):
            record_identifier(state, Identifier(node.name, Binding.STORE))
            state.enter_unit(UnitKind.CLASS, node.name, node.span)
            state.mark_header(node.header)
        elif isinstance(node, ControlBlock):
            state.enter_block(node.block_type, node.span)
        elif isinstance(node, Identifier):
            record_identifier(state, node)
        elif isinstance(node, MemberAccess):
            record_member(state, node)

    def _exit(self, state: TraversalState, node: SyntaxNode) -> CohesionFinding | None:
        if isinstance(node, ControlBlock):
            state.exit_block()
            return None
        if isinstance(node, (FunctionUnit, ClassUnit)):
            unit = state.exit_unit()
            finding = self._finalize(unit) if unit is not None else None
            if isinstance(node, FunctionUnit) and node.method is not None:
                state.exit_method()
            return finding
        return None

    # ── exit analysis ───────────────────────────────────────────────

    def _options_for(self, unit: AnalysisUnit) -> CohesionOptions | None:
        if unit.kind is UnitKind.CLASS:
            return self.class_options
        return self.function_options

    def _finalize(self, unit: AnalysisUnit) -> CohesionFinding | None:
        options = self._options_for(unit)
        if (
            options is None
            or unit.span.length < options.min_unit_length
            or len(unit.blocks) < 2
        ):
            unit.finish(reported=False)
            return None

        graph = build_overlap_graph(
            unit.blocks,
            options.min_shared_percentage,
            call_edges=unit.kind is UnitKind.CLASS,
        )
        components = connected_components(graph)
        if not is_low_cohesion(components):
            unit.finish(reported=False)
            return None

        unit.finish(reported=True)
        return CohesionFinding(
            unit_kind=unit.kind,
            unit_name=unit.name,
            location=unit.span,
            component_count=len(components),
            average_overlap_percent=graph.average_overlap,
            configured_threshold=options.min_shared_percentage,
            components=summarize_components(unit.blocks, components),
        )
