"""Finding: one rule violation, as stored in a run result."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any

from . import AnalyzerType, Severity


@dataclass(frozen=True, slots=True)
class Location:
    """File and line range a finding points at (1-based, inclusive).

    ``column`` is the 0-based offset of the flagged node on ``line_start``.
    """

    path: str
    line_start: int
    line_end: int
    column: int = 0

    @property
    def label(self) -> str:
        """``path:12`` or ``path:12-30``."""
        if self.line_end > self.line_start:
            return f"{self.path}:{self.line_start}-{self.line_end}"
        return f"{self.path}:{self.line_start}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "line_start": self.line_start,
            "line_end": self.line_end,
            "column": self.column,
        }


@dataclass(frozen=True, slots=True)
class Finding:
    """Immutable rule violation; ``findings[]`` in ``run_result.schema.json``.

    ``metadata`` always carries ``rule_id`` and the kebab-case ``rule`` name.
    Cohesion findings add the structured unit report under ``cohesion``.
    """

    finding_id: str
    type: AnalyzerType
    severity: Severity
    confidence: float
    message: str
    location: Location
    fingerprint: str
    snippet: str = ""
    metadata: dict = field(default_factory=dict)

    @property
    def rule_id(self) -> str:
        return self.metadata.get("rule_id", "")

    @property
    def rule(self) -> str:
        return self.metadata.get("rule", "")

    @property
    def cohesion(self) -> dict[str, Any] | None:
        return self.metadata.get("cohesion")

    @property
    def sort_key(self) -> tuple[str, int, int, str]:
        """Source order: path, line, column, then rule id."""
        loc = self.location
        return (loc.path, loc.line_start, loc.column, self.rule_id)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "finding_id": self.finding_id,
            "type": self.type.value,
            "severity": self.severity.value,
            "confidence": self.confidence,
            "message": self.message,
            "location": self.location.to_dict(),
            "fingerprint": self.fingerprint,
        }
        if self.snippet:
            d["snippet"] = self.snippet
        if self.metadata:
            d["metadata"] = dict(self.metadata)
        return d


def make_fingerprint(rule_id: str, rel_path: str, symbol: str, snippet: str) -> str:
    """``sha256:`` digest of ``rule|path|symbol|snippet``.

    Line numbers are left out so a finding keeps its fingerprint when code
    above it moves.  Windows separators are normalized.
    """
    payload = "|".join([rule_id, rel_path.replace("\\", "/"), symbol, snippet.strip()])
    return "sha256:" + hashlib.sha256(payload.encode()).hexdigest()
