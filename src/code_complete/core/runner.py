"""Runner — orchestrates analyzers, collects findings, builds RunResult."""

from __future__ import annotations

import hashlib
import logging
import os
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from pathlib import Path
from typing import TYPE_CHECKING

from code_complete.contracts.load import validate_instance
from code_complete.core.config import ScanConfig, build_analyzers, load_config
from code_complete.core.discover import discover_py_files
from code_complete.model.finding import Finding
from code_complete.model.run_result import RunResult
from code_complete.utils.json_norm import stable_json_dumps

if TYPE_CHECKING:
    from code_complete.analyzers import Analyzer

_logger = logging.getLogger(__name__)

# Default per-analyzer timeout in seconds.  Override with
# CODE_COMPLETE_ANALYZER_TIMEOUT env var (0 = no limit).
_DEFAULT_ANALYZER_TIMEOUT = 300  # 5 minutes

# Fixed values used in CI mode so artifacts are byte-for-byte reproducible.
CI_CREATED_AT = "2000-01-01T00:00:00+00:00"


def _analyzer_timeout() -> float | None:
    timeout_str = os.environ.get("CODE_COMPLETE_ANALYZER_TIMEOUT", "")
    timeout = float(timeout_str) if timeout_str else _DEFAULT_ANALYZER_TIMEOUT
    return None if timeout == 0 else timeout


def _ci_run_id(config: dict, files: list[str]) -> str:
    payload = stable_json_dumps({"config": config, "files": files}, ci_mode=True)
    return "ci-" + hashlib.sha256(payload.encode()).hexdigest()[:12]


def run_analyzers(
    root: Path,
    files: list[Path],
    analyzers: list[Analyzer],
) -> list[Finding]:
    """Run every analyzer under the per-analyzer deadline; failures are skipped."""
    analyzer_timeout = _analyzer_timeout()

    all_findings: list[Finding] = []
    for analyzer in analyzers:
        analyzer_id = getattr(analyzer, "id", type(analyzer).__name__)
        _logger.debug("Running analyzer '%s' on %d files", analyzer_id, len(files))
        if analyzer_timeout is not None:
            # Run with a deadline so a single slow analyzer cannot stall
            # the entire scan indefinitely.
            with ThreadPoolExecutor(max_workers=1) as pool:
                future = pool.submit(analyzer.run, root, files)
                try:
                    all_findings.extend(future.result(timeout=analyzer_timeout))
                except FuturesTimeoutError:
                    _logger.warning(
                        "Analyzer '%s' timed out after %.0fs — skipped",
                        analyzer_id,
                        analyzer_timeout,
                    )
                except Exception:
                    _logger.exception(
                        "Analyzer '%s' raised an exception — skipped",
                        analyzer_id,
                    )
        else:
            try:
                all_findings.extend(analyzer.run(root, files))
            except Exception:
                _logger.exception("Analyzer '%s' raised an exception — skipped", analyzer_id)
    return all_findings


def run_scan(
    root: Path,
    analyzers: list[Analyzer] | None = None,
    *,
    config: ScanConfig | None = None,
    project_id: str = "",
    out_dir: Path | None = None,
    ci_mode: bool = False,
    # Testing hooks for golden-fixture determinism
    _run_id: str | None = None,
    _created_at: str | None = None,
) -> RunResult:
    """Execute *analyzers* (default: those enabled by *config*) against *root*.

    This is the **only** entry point that wires discovery → analyzers → output.
    """
    root = root.resolve()
    scan_root = root if root.is_dir() else root.parent
    if config is None:
        config = load_config(scan_root)
    if analyzers is None:
        analyzers = build_analyzers(config)

    files = discover_py_files(root, include=config.include, exclude=config.exclude)
    _logger.info("Scanning %d files under %s with %d rules", len(files), scan_root, len(analyzers))

    # ── 1. run every analyzer (with per-analyzer timeout) ───────────
    findings = run_analyzers(scan_root, files, analyzers)
    findings.sort(key=lambda f: (*f.sort_key, f.finding_id))

    # ── 2. assemble RunResult ───────────────────────────────────────
    config_dict = config.to_dict()
    if ci_mode:
        # absolute roots differ between machines
        config_dict["root"] = "."
    result = RunResult(
        project_id=project_id,
        config=config_dict,
        files_scanned=len(files),
        findings=findings,
    )
    if ci_mode:
        rel_files = [p.relative_to(scan_root).as_posix() for p in files]
        object.__setattr__(result, "run_id", _ci_run_id(config_dict, rel_files))
        object.__setattr__(result, "created_at", CI_CREATED_AT)
    # Inject deterministic values for golden-fixture testing
    if _run_id is not None:
        object.__setattr__(result, "run_id", _run_id)
    if _created_at is not None:
        object.__setattr__(result, "created_at", _created_at)

    # ── 3. validate output against schema ───────────────────────────
    result_dict = result.to_dict()
    validate_instance(result_dict, "run_result.schema.json")

    # ── 4. optionally write artifacts to disk ───────────────────────
    if out_dir is not None:
        out_dir.mkdir(parents=True, exist_ok=True)
        (out_dir / "run_result.json").write_text(
            stable_json_dumps(result_dict, ci_mode=ci_mode),
            encoding="utf-8",
        )
    return result
