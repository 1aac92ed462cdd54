"""Integration tests for the scan pipeline (code_complete.core.runner)."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import jsonschema
import pytest

from code_complete.analyzers.cohesion import FunctionCohesionAnalyzer
from code_complete.analyzers.nesting import NestingDepthAnalyzer
from code_complete.contracts.load import load_schema
from code_complete.core.config import load_config
from code_complete.core.discover import discover_py_files
from code_complete.core.runner import CI_CREATED_AT, run_scan
from code_complete.model import AnalyzerType, Severity
from code_complete.model.finding import Location, make_fingerprint

SPLIT_FUNCTION = textwrap.dedent("""\
    def report(users, products):
        active_users = []
        expensive_products = []
        if users:
            active_users = users
            active_users.sort()
        if products:
            expensive_products = products
            expensive_products.reverse()
        summary = len(active_users)
        summary += len(expensive_products)
        return summary
""")

DEEP_FUNCTION = textwrap.dedent("""\
    def walk(rows):
        for row in rows:
            if row:
                while row:
                    if row.done:
                        return row
""")


@pytest.fixture()
def sample_project(tmp_path: Path) -> Path:
    """A small project with one split function and one deeply nested one."""
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / "report.py").write_text(SPLIT_FUNCTION, encoding="utf-8")
    (tmp_path / "pkg" / "walk.py").write_text(DEEP_FUNCTION, encoding="utf-8")
    (tmp_path / "pkg" / "broken.py").write_text("def broken(:\n", encoding="utf-8")
    return tmp_path


class _Boom:
    id = "boom"
    version = "0.0.0"

    def run(self, root, files):
        raise RuntimeError("analyzer crashed")


class TestRunScan:
    """End-to-end scan pipeline tests."""

    def test_produces_valid_run_result_json(self, sample_project: Path) -> None:
        result = run_scan(sample_project, project_id="test-project")
        jsonschema.validate(result.to_dict(), load_schema("run_result.schema.json"))

    def test_default_config_is_recommended(self, sample_project: Path) -> None:
        result = run_scan(sample_project)

        assert result.config["preset"] == "recommended"
        assert {f.rule for f in result.findings} == {"max-nesting-depth"}
        assert result.files_scanned == 3

    def test_config_enables_cohesion(self, sample_project: Path) -> None:
        cfg = load_config(sample_project, rule_overrides={"low-function-cohesion": "error"})
        result = run_scan(sample_project, config=cfg)

        cohesion = [f for f in result.findings if f.type is AnalyzerType.COHESION]
        assert len(cohesion) == 1
        assert cohesion[0].severity is Severity.HIGH
        assert cohesion[0].location.path == "pkg/report.py"
        assert result.worst_severity == "high"

    def test_explicit_analyzers(self, sample_project: Path) -> None:
        result = run_scan(sample_project, [FunctionCohesionAnalyzer()])
        assert [f.rule for f in result.findings] == ["low-function-cohesion"]

    def test_findings_sorted_by_path_then_line(self, sample_project: Path) -> None:
        result = run_scan(
            sample_project,
            [NestingDepthAnalyzer.from_config({"maxDepth": 1}), FunctionCohesionAnalyzer()],
        )
        keys = [(f.location.path, f.location.line_start) for f in result.findings]
        assert keys == sorted(keys)

    def test_counts(self, sample_project: Path) -> None:
        cfg = load_config(sample_project, rule_overrides={"low-function-cohesion": "warn"})
        counts = run_scan(sample_project, config=cfg).to_dict()["summary"]["counts"]

        assert counts["findings_total"] == 2
        assert counts["by_rule"] == {"low-function-cohesion": 1, "max-nesting-depth": 1}
        assert counts["by_severity"] == {"medium": 2}
        assert counts["by_type"] == {"cohesion": 1, "complexity": 1}

    def test_crashing_analyzer_is_skipped(self, sample_project: Path) -> None:
        result = run_scan(sample_project, [_Boom(), FunctionCohesionAnalyzer()])
        assert len(result.findings) == 1

    def test_crashing_analyzer_without_timeout(self, sample_project: Path, monkeypatch) -> None:
        monkeypatch.setenv("CODE_COMPLETE_ANALYZER_TIMEOUT", "0")
        result = run_scan(sample_project, [_Boom()])
        assert result.findings == []

    def test_single_file(self, sample_project: Path) -> None:
        result = run_scan(sample_project / "pkg" / "walk.py")
        assert result.files_scanned == 1
        assert [f.location.path for f in result.findings] == ["walk.py"]


class TestDeterminism:
    def test_ci_mode_is_byte_stable(self, sample_project: Path, tmp_path_factory) -> None:
        out_a = tmp_path_factory.mktemp("a")
        out_b = tmp_path_factory.mktemp("b")
        run_scan(sample_project, ci_mode=True, out_dir=out_a)
        run_scan(sample_project, ci_mode=True, out_dir=out_b)

        text_a = (out_a / "run_result.json").read_text(encoding="utf-8")
        assert text_a == (out_b / "run_result.json").read_text(encoding="utf-8")
        assert text_a.endswith("\n")

    def test_ci_mode_fixes_run_metadata(self, sample_project: Path) -> None:
        run = run_scan(sample_project, ci_mode=True).to_dict()["run"]
        assert run["created_at"] == CI_CREATED_AT
        assert run["run_id"].startswith("ci-")
        assert run["config"]["root"] == "."

    def test_run_id_depends_on_config(self, sample_project: Path) -> None:
        cfg = load_config(sample_project, preset="strict")
        default_id = run_scan(sample_project, ci_mode=True).run_id
        assert run_scan(sample_project, config=cfg, ci_mode=True).run_id != default_id

    def test_testing_hooks(self, sample_project: Path) -> None:
        result = run_scan(sample_project, _run_id="fixed", _created_at="2024-01-01T00:00:00+00:00")
        assert (result.run_id, result.created_at) == ("fixed", "2024-01-01T00:00:00+00:00")

    def test_out_dir_artifact_parses(self, sample_project: Path, tmp_path_factory) -> None:
        out = tmp_path_factory.mktemp("out") / "nested"
        run_scan(sample_project, out_dir=out)
        data = json.loads((out / "run_result.json").read_text(encoding="utf-8"))
        assert data["schema_version"] == "run_result_v1"


class TestDiscover:
    def test_default_excludes(self, tmp_path: Path) -> None:
        for rel in ["app.py", ".venv/lib.py", "pkg/__pycache__/x.py", "pkg/mod.py", "notes.txt"]:
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("", encoding="utf-8")

        found = [p.relative_to(tmp_path).as_posix() for p in discover_py_files(tmp_path)]
        assert found == ["app.py", "pkg/mod.py"]

    def test_basename_and_glob_excludes(self, tmp_path: Path) -> None:
        for rel in ["keep.py", "legacy/old.py", "gen/out.py", "src/gen/inner.py"]:
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("", encoding="utf-8")

        found = discover_py_files(tmp_path, exclude=["legacy", "gen/*"])
        assert [p.relative_to(tmp_path).as_posix() for p in found] == ["keep.py", "src/gen/inner.py"]

    def test_single_file(self, tmp_path: Path) -> None:
        target = tmp_path / "one.py"
        target.write_text("", encoding="utf-8")
        assert discover_py_files(target) == [target.resolve()]
        other = tmp_path / "notes.md"
        other.write_text("", encoding="utf-8")
        assert discover_py_files(other) == []


class TestFindingModel:
    def test_location_label(self) -> None:
        assert Location("a.py", 3, 3).label == "a.py:3"
        assert Location("a.py", 3, 9).label == "a.py:3-9"

    def test_fingerprint_ignores_line_numbers_and_separators(self) -> None:
        a = make_fingerprint("COH_FUNCTION_001", "pkg\\mod.py", "report", "def report():  ")
        b = make_fingerprint("COH_FUNCTION_001", "pkg/mod.py", "report", "def report():")
        assert a == b
        assert a.startswith("sha256:")

    def test_cohesion_payload_and_sort_key(self) -> None:
        finding = FunctionCohesionAnalyzer().check_source(SPLIT_FUNCTION, "shop/report.py")[0]
        assert finding.cohesion["unitName"] == "report"
        assert finding.sort_key == ("shop/report.py", 1, 0, "COH_FUNCTION_001")
        assert finding.to_dict()["location"] == finding.location.to_dict()
