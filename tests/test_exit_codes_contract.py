"""Exit code contract tests — enforce stable CLI exit semantics.

Code  Meaning
----  -------
  0   Success — no violations detected
  1   Violation — an error-level finding, or more warnings than allowed
  2   Error — usage error, bad configuration, missing file
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

from code_complete.policy.exit_codes import (
    ExitCodePolicy,
    exit_code_for_counts,
    warning_count,
    worst_severity_from_counts,
)
from code_complete.utils.exit_codes import ExitCode

REPO_ROOT = Path(__file__).resolve().parents[1]
FIXTURES = REPO_ROOT / "tests" / "fixtures" / "repos"


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    env = {**os.environ}
    env["PYTHONPATH"] = str(REPO_ROOT / "src") + (
        os.pathsep + env["PYTHONPATH"] if env.get("PYTHONPATH") else ""
    )
    return subprocess.run(
        [sys.executable, "-m", "code_complete", *args],
        capture_output=True,
        text=True,
        env=env,
    )


# ── Policy ──────────────────────────────────────────────────────────

class TestExitCodePolicy:
    """exit_code_for_counts is monotonic and fail-safe."""

    def test_no_findings(self) -> None:
        assert exit_code_for_counts({}) == ExitCode.SUCCESS
        assert exit_code_for_counts(None) == ExitCode.SUCCESS

    def test_warnings_pass_by_default(self) -> None:
        assert exit_code_for_counts({"medium": 40}) == ExitCode.SUCCESS

    def test_error_level_fails(self) -> None:
        assert exit_code_for_counts({"medium": 1, "high": 1}) == ExitCode.VIOLATION

    def test_max_warnings(self) -> None:
        policy = ExitCodePolicy(max_warnings=2)
        assert exit_code_for_counts({"medium": 2}, policy=policy) == ExitCode.SUCCESS
        assert exit_code_for_counts({"medium": 3}, policy=policy) == ExitCode.VIOLATION

    def test_low_and_info_are_not_warnings(self) -> None:
        assert warning_count({"low": 5, "info": 5, "medium": 1}) == 1
        policy = ExitCodePolicy(max_warnings=0)
        assert exit_code_for_counts({"low": 5}, policy=policy) == ExitCode.SUCCESS

    def test_unknown_severity_is_fail_safe(self) -> None:
        assert worst_severity_from_counts({"weird": 1}) == "CRITICAL"
        assert exit_code_for_counts({"weird": 1}) == ExitCode.VIOLATION

    def test_zero_counts_are_ignored(self) -> None:
        assert worst_severity_from_counts({"high": 0, "low": 2}) == "LOW"

    @pytest.mark.parametrize("extra", [{"medium": 1}, {"high": 1}, {"critical": 1}])
    def test_monotonic(self, extra) -> None:
        base = {"medium": 1}
        worse = {k: base.get(k, 0) + extra.get(k, 0) for k in {*base, *extra}}
        policy = ExitCodePolicy(max_warnings=1)
        assert exit_code_for_counts(worse, policy=policy) >= exit_code_for_counts(base, policy=policy)


# ── CLI ─────────────────────────────────────────────────────────────

class TestScanExitCodes:
    """code-complete <path>: 0 = clean, 1 = violation, 2 = error."""

    def test_clean_returns_0(self) -> None:
        r = _run(str(FIXTURES / "clean"))
        assert r.returncode == 0, r.stderr

    def test_warnings_return_0(self) -> None:
        r = _run(str(FIXTURES / "low_cohesion"))
        assert r.returncode == 0, r.stderr
        assert "2 warnings" in r.stdout

    def test_error_level_returns_1(self) -> None:
        r = _run(str(FIXTURES / "low_cohesion"), "--rule", "low-class-cohesion=error")
        assert r.returncode == 1, r.stderr

    def test_too_many_warnings_returns_1(self) -> None:
        r = _run(str(FIXTURES / "low_cohesion"), "--max-warnings", "0")
        assert r.returncode == 1, r.stderr

    def test_missing_path_returns_2(self, tmp_path: Path) -> None:
        r = _run(str(tmp_path / "nonexistent"))
        assert r.returncode == 2

    def test_bad_config_returns_2(self) -> None:
        r = _run(str(FIXTURES / "clean"), "--rule", "no-such-rule")
        assert r.returncode == 2
        assert "unknown rule" in r.stderr


class TestValidateExitCodes:
    """validate: 0 = valid, 1 = invalid instance, 2 = unreadable input."""

    def test_validate_bad_instance_returns_1(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text('{"schema_version": "run_result_v1", "run": {}}', encoding="utf-8")
        r = _run("validate", str(bad), "run_result.schema.json")
        assert r.returncode == 1

    def test_validate_malformed_json_returns_2(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        r = _run("validate", str(bad), "run_result.schema.json")
        assert r.returncode == 2
