"""
code_complete.api
=================

Programmatic entrypoints for using code_complete as a library.

Goals:
  - No argparse / CLI dependencies
  - Deterministic mode support (ci_mode=True)
  - Stable, JSON-friendly outputs that match the bundled schema

Usage::

    from code_complete.api import scan_project, scan_source

    result, result_dict = scan_project(".", preset="strict", ci_mode=True)
    findings = scan_source(source_text, rules={"low-function-cohesion": "warn"})
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from code_complete.contracts.load import validate_instance as _validate_instance
from code_complete.core.config import (
    ScanConfig,
    build_analyzers,
    load_config,
    resolve_rules,
)
from code_complete.core.runner import run_scan
from code_complete.model.finding import Finding
from code_complete.model.run_result import RunResult
from code_complete.policy.presets import DEFAULT_PRESET

_logger = logging.getLogger(__name__)


def _to_path(p: str | Path) -> Path:
    return p if isinstance(p, Path) else Path(p)


# ── scan_project ────────────────────────────────────────────────────


def scan_project(
    root: str | Path,
    *,
    project_id: str = "",
    config: Optional[str | Path] = None,
    preset: Optional[str] = None,
    rules: Optional[Mapping[str, Any]] = None,
    ci_mode: bool = False,
    analyzers: Optional[list[Any]] = None,
) -> tuple[RunResult, dict[str, Any]]:
    """Run the standard scan pipeline programmatically.

    Parameters
    ----------
    root:
        Directory (or single ``.py`` file) to scan.
    config:
        Path to a YAML config file.  Default: ``.code-complete.yml`` at
        *root*, if present.
    preset:
        Preset name; overrides the config file's ``extends``.
    rules:
        Rule overrides applied last (same value forms as the config file).
    ci_mode:
        If True, output is byte-deterministic (fixed timestamp and run id).
    analyzers:
        Override the configured analyzer set. Each must conform to the
        ``Analyzer`` protocol (``id``, ``version``, ``run()``).

    Returns
    -------
    ``(RunResult, run_result_dict)``

    Raises
    ------
    FileNotFoundError
        If *root* does not exist.
    ConfigError
        If the configuration is invalid.
    """
    root_p = _to_path(root).resolve()
    if not root_p.exists():
        raise FileNotFoundError(f"scan_project: root does not exist: {root_p}")

    scan_root = root_p if root_p.is_dir() else root_p.parent
    scan_config = load_config(
        scan_root,
        config_path=_to_path(config) if config is not None else None,
        preset=preset,
        rule_overrides=rules,
    )
    rr = run_scan(
        root_p,
        analyzers,
        config=scan_config,
        project_id=project_id,
        ci_mode=ci_mode,
    )
    return rr, rr.to_dict()


# ── scan_source ─────────────────────────────────────────────────────


def scan_source(
    source: str,
    *,
    path: str = "<string>",
    preset: str = DEFAULT_PRESET,
    rules: Optional[Mapping[str, Any]] = None,
) -> list[Finding]:
    """Check one in-memory source text with the resolved rule set.

    Raises ``SyntaxError`` when *source* does not parse.
    """
    scan_config = ScanConfig(root=Path("."), preset=preset, rules=resolve_rules(preset, rules))
    findings: list[Finding] = []
    for analyzer in build_analyzers(scan_config):
        findings.extend(analyzer.check_source(source, path))
    findings.sort(key=lambda f: f.sort_key[1:])
    return findings


# ── validate_instance ───────────────────────────────────────────────


def validate_instance(
    instance: dict[str, Any],
    schema_name: str,
) -> None:
    """Validate a Python dict against a named bundled schema.

    Raises
    ------
    jsonschema.ValidationError
        If validation fails.
    """
    _validate_instance(instance, schema_name)
