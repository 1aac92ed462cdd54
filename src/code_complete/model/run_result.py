"""RunResult — the immutable, schema-aligned scan artifact."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from code_complete import __version__
from code_complete.model import Severity
from code_complete.model.finding import Finding

_SEVERITY_ORDER = [s.value for s in Severity]


@dataclass(slots=True)
class RunResult:
    """Assembled scan result matching ``run_result.schema.json``.

    Constructed by ``core.runner`` after all analyzers finish.
    """

    # ── run metadata ────────────────────────────────────────────────
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    project_id: str = ""
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )
    tool_version: str = __version__
    engine_version: str = "engine_v1"

    config: dict = field(default_factory=dict)

    # ── summary ─────────────────────────────────────────────────────
    files_scanned: int = 0
    findings: list[Finding] = field(default_factory=list)

    @property
    def worst_severity(self) -> str | None:
        present = {f.severity.value for f in self.findings}
        for sev in reversed(_SEVERITY_ORDER):
            if sev in present:
                return sev
        return None

    def counts(self) -> dict[str, Any]:
        severity_counts: dict[str, int] = {}
        type_counts: dict[str, int] = {}
        rule_counts: dict[str, int] = {}
        for f in self.findings:
            severity_counts[f.severity.value] = severity_counts.get(f.severity.value, 0) + 1
            type_counts[f.type.value] = type_counts.get(f.type.value, 0) + 1
            if f.rule:
                rule_counts[f.rule] = rule_counts.get(f.rule, 0) + 1
        return {
            "findings_total": len(self.findings),
            "by_severity": severity_counts,
            "by_type": type_counts,
            "by_rule": rule_counts,
        }

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Produce the full RunResult JSON matching the schema."""
        return {
            "schema_version": "run_result_v1",
            "run": {
                "run_id": self.run_id,
                "project_id": self.project_id or "",
                "created_at": self.created_at,
                "tool_version": self.tool_version,
                "engine_version": self.engine_version,
                "config": self.config,
            },
            "summary": {
                "files_scanned": self.files_scanned,
                "worst_severity": self.worst_severity,
                "counts": self.counts(),
            },
            "findings": [f.to_dict() for f in self.findings],
        }
