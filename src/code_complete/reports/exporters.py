"""Multi-format exporters for scan results and findings.

Supports:

*  **text** — one block per file, for terminals.
*  **JSON** — machine-readable, suitable for CI artifact storage.
*  **Markdown** — human-readable, suitable for PR comments.

All exporters accept a :class:`RunResult` and produce a string.  Cohesion
findings carry their structured payload in ``metadata["cohesion"]``; the
text and Markdown exporters expand it into the per-group breakdown.
"""

from __future__ import annotations

from collections import Counter
from itertools import groupby

from code_complete.model import Severity
from code_complete.model.finding import Finding
from code_complete.model.run_result import RunResult
from code_complete.utils.json_norm import stable_json_dumps

# ── severity ordering (worst first) ─────────────────────────────────
_SEVERITY_ORDER = [
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFO,
]


def level_label(severity: Severity) -> str:
    """Rule level a severity was produced by (``error`` / ``warning``)."""
    if _SEVERITY_ORDER.index(severity) <= _SEVERITY_ORDER.index(Severity.HIGH):
        return "error"
    return "warning"


def cohesion_breakdown(finding: Finding) -> list[str]:
    """One line per connected group of a cohesion finding; ``[]`` otherwise."""
    payload = finding.cohesion
    if not payload:
        return []
    lines = []
    for n, comp in enumerate(payload.get("components", []), start=1):
        members = ", ".join(comp.get("memberNames", []))
        names = ", ".join(comp.get("sharedIdentifiers", [])) or "-"
        lines.append(f"{n}. [{members}] uses {{{names}}}")
    return lines


def _summary_line(result: RunResult) -> str:
    labels = Counter(level_label(f.severity) for f in result.findings)
    total = len(result.findings)
    return (
        f"{total} problem{'s' if total != 1 else ''} "
        f"({labels.get('error', 0)} errors, {labels.get('warning', 0)} warnings) "
        f"in {result.files_scanned} files"
    )


# ════════════════════════════════════════════════════════════════════
# JSON exporter
# ════════════════════════════════════════════════════════════════════


def export_json(result: RunResult, *, indent: int = 2, ci_mode: bool = False) -> str:
    """Export a ``RunResult`` as indented JSON."""
    return stable_json_dumps(result.to_dict(), indent=indent, ci_mode=ci_mode)


# ════════════════════════════════════════════════════════════════════
# Text exporter
# ════════════════════════════════════════════════════════════════════


def export_text(result: RunResult) -> str:
    """Export a ``RunResult`` as a terminal listing grouped by file."""
    lines: list[str] = []
    ordered = sorted(result.findings, key=lambda f: f.sort_key)
    for path, group in groupby(ordered, key=lambda f: f.location.path):
        lines.append(path)
        for f in group:
            lines.append(
                f"  {f.location.line_start:>4}  {level_label(f.severity):<7}  "
                f"{f.message}  {f.rule}"
            )
            for detail in cohesion_breakdown(f):
                lines.append(f"          {detail}")
        lines.append("")

    lines.append(_summary_line(result) if result.findings else "No problems found.")
    return "\n".join(lines) + "\n"


# ════════════════════════════════════════════════════════════════════
# Markdown exporter
# ════════════════════════════════════════════════════════════════════


def export_markdown(result: RunResult, *, top_n: int = 20) -> str:
    """Export a ``RunResult`` as a concise Markdown summary."""
    lines: list[str] = []

    lines.append("# Scan Results")
    lines.append("")
    lines.append(f"**Generated:** {result.created_at}  ")
    lines.append(f"**Files scanned:** {result.files_scanned}  ")
    lines.append(f"**Findings:** {len(result.findings)}")
    lines.append("")

    # Rule breakdown
    rule_counts = Counter(f.rule for f in result.findings)
    if rule_counts:
        lines.append("## By Rule")
        lines.append("")
        lines.append("| Rule | Count |")
        lines.append("|------|------:|")
        for rule, c in sorted(rule_counts.items()):
            lines.append(f"| `{rule}` | {c} |")
        lines.append("")

    # Top findings
    sorted_findings = sorted(
        result.findings,
        key=lambda f: (
            _SEVERITY_ORDER.index(f.severity),
            *f.sort_key,
        ),
    )
    top = sorted_findings[:top_n]
    if top:
        lines.append(f"## Top {len(top)} Findings")
        lines.append("")
        for i, f in enumerate(top, 1):
            loc = f.location.label
            lines.append(
                f"{i}. **[{level_label(f.severity).upper()}]** `{loc}` {f.message}"
            )
            for detail in cohesion_breakdown(f):
                lines.append(f"    - {detail.split('. ', 1)[1]}")
        lines.append("")

    lines.append("---")
    lines.append(f"*Exported by code-complete {result.tool_version}*")
    lines.append("")
    return "\n".join(lines)


# ════════════════════════════════════════════════════════════════════
# Dispatcher
# ════════════════════════════════════════════════════════════════════

FORMATS = ("text", "json", "markdown")


def export_result(
    result: RunResult,
    fmt: str = "text",
    *,
    top_n: int = 20,
    ci_mode: bool = False,
) -> str:
    """Export a ``RunResult`` in the specified format.

    Parameters
    ----------
    result:
        The scan result to export.
    fmt:
        One of ``"text"``, ``"json"``, ``"markdown"``.
    top_n:
        Number of top findings for markdown.

    Raises
    ------
    ValueError
        If *fmt* is not recognised.
    """
    if fmt == "text":
        return export_text(result)
    if fmt == "json":
        return export_json(result, ci_mode=ci_mode)
    if fmt in ("markdown", "md"):
        return export_markdown(result, top_n=top_n)
    raise ValueError(f"Unknown export format: {fmt!r} (use text|json|markdown)")
