"""Exit-code policy — severity- and warning-count-based CI exit codes.

Philosophy:
  - Deterministic in CI
  - ``error``-level findings (HIGH and above) always fail the run
  - ``warn``-level findings fail it only past ``max_warnings``
  - Unknown severities are fail-safe (CRITICAL)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping

from code_complete.utils.exit_codes import ExitCode


SeverityName = Literal["NONE", "INFO", "LOW", "MEDIUM", "HIGH", "CRITICAL"]


@dataclass(frozen=True)
class ExitCodePolicy:
    """Tunable thresholds for findings → exit-code mapping."""

    ok: int = ExitCode.SUCCESS
    fail: int = ExitCode.VIOLATION
    # Minimum severity counted as a warning / as an error
    warn_at: SeverityName = "MEDIUM"
    fail_at: SeverityName = "HIGH"
    # None = any number of warnings is acceptable
    max_warnings: int | None = None


DEFAULT_POLICY = ExitCodePolicy()


_SEV_RANK: dict[SeverityName, int] = {
    "NONE": 0,
    "INFO": 1,
    "LOW": 2,
    "MEDIUM": 3,
    "HIGH": 4,
    "CRITICAL": 5,
}


def _normalize_severity(value: str | None) -> SeverityName:
    """Normalize a raw severity string to a canonical literal.

    Unknown values are treated as ``CRITICAL`` (fail-safe in CI).
    """
    if not value:
        return "NONE"
    v = value.strip().upper()
    if v in _SEV_RANK:
        return v  # type: ignore[return-value]
    return "CRITICAL"


def worst_severity_from_counts(by_severity: Mapping[str, int] | None) -> str | None:
    """Worst severity with a non-zero count, or ``None`` without findings."""
    if not by_severity:
        return None
    worst: str | None = None
    worst_rank = -1
    for sev_str, count in by_severity.items():
        if not count:
            continue
        normalized = _normalize_severity(sev_str)
        rank = _SEV_RANK[normalized]
        if rank > worst_rank:
            worst_rank = rank
            worst = normalized
    return worst


def warning_count(
    by_severity: Mapping[str, int] | None,
    *,
    policy: ExitCodePolicy = DEFAULT_POLICY,
) -> int:
    """Findings at or above ``warn_at`` but below ``fail_at``."""
    low = _SEV_RANK[policy.warn_at]
    high = _SEV_RANK[policy.fail_at]
    return sum(
        count
        for sev, count in (by_severity or {}).items()
        if low <= _SEV_RANK[_normalize_severity(sev)] < high
    )


def exit_code_for_counts(
    by_severity: Mapping[str, int] | None,
    *,
    policy: ExitCodePolicy = DEFAULT_POLICY,
) -> int:
    """Compute the CI exit code from a ``by_severity`` counts dict.

    Contract:
      - monotonic (more or worse findings never lower the exit code)
      - unknown severities treated as CRITICAL (fail-safe)
    """
    worst = _normalize_severity(worst_severity_from_counts(by_severity))
    if _SEV_RANK[worst] >= _SEV_RANK[policy.fail_at]:
        return policy.fail
    if policy.max_warnings is not None and warning_count(by_severity, policy=policy) > policy.max_warnings:
        return policy.fail
    return policy.ok
