"""Structured cohesion finding handed from the engine to the reporter.

One ``CohesionFinding`` is produced per flagged unit (function or class).
``to_dict`` uses the camelCase keys consumers of the finding expect::

    {
      "unitKind": "function",
      "unitName": "process",
      "location": {"startLine": 3, "endLine": 17},
      "componentCount": 2,
      "averageOverlapPercent": 0.0,
      "configuredThreshold": 30,
      "components": [
        {"memberNames": [...], "sharedIdentifiers": [...],
         "blockTypeTags": [...], "lineRanges": [...]},
        ...
      ]
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field

from . import UnitKind


@dataclass(frozen=True, slots=True)
class UnitSpan:
    start_line: int
    end_line: int

    @property
    def length(self) -> int:
        """Number of source lines covered, both ends inclusive."""
        return self.end_line - self.start_line + 1


@dataclass(frozen=True, slots=True)
class ComponentDetail:
    """One connected group of blocks (or methods) inside a flagged unit."""

    member_names: tuple[str, ...]
    shared_identifiers: tuple[str, ...]
    block_type_tags: tuple[str, ...]
    line_ranges: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "memberNames": list(self.member_names),
            "sharedIdentifiers": list(self.shared_identifiers),
            "blockTypeTags": list(self.block_type_tags),
            "lineRanges": list(self.line_ranges),
        }

    def describe(self) -> str:
        members = ", ".join(self.member_names)
        names = ", ".join(self.shared_identifiers) or "-"
        return f"[{members}] uses {{{names}}}"


@dataclass(frozen=True, slots=True)
class CohesionFinding:
    unit_kind: UnitKind
    unit_name: str
    location: UnitSpan
    component_count: int
    average_overlap_percent: float
    configured_threshold: int
    components: tuple[ComponentDetail, ...] = field(default_factory=tuple)

    @property
    def members_label(self) -> str:
        return "methods" if self.unit_kind is UnitKind.CLASS else "blocks"

    def message(self) -> str:
        kind = "Class" if self.unit_kind is UnitKind.CLASS else "Function"
        return (
            f"{kind} '{self.unit_name}' has low cohesion: "
            f"{self.component_count} disconnected groups of {self.members_label} "
            f"(average sharing {self.average_overlap_percent:.1f}%, "
            f"threshold {self.configured_threshold}%). "
            "Consider splitting it into smaller, focused units."
        )

    def format_components(self) -> str:
        """Numbered, one-line-per-group breakdown for human output."""
        lines = []
        for n, comp in enumerate(self.components, start=1):
            lines.append(f"  {n}. {comp.describe()}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "unitKind": self.unit_kind.value,
            "unitName": self.unit_name,
            "location": {
                "startLine": self.location.start_line,
                "endLine": self.location.end_line,
            },
            "componentCount": self.component_count,
            "averageOverlapPercent": self.average_overlap_percent,
            "configuredThreshold": self.configured_threshold,
            "components": [c.to_dict() for c in self.components],
        }
