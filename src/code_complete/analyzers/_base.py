"""Shared plumbing for rule analyzers.

Each rule analyzer subclasses ``RuleAnalyzer`` and implements
``check(tree, rel)``.  The base class handles file reading and parsing,
option validation (camelCase keys checked against ``OPTIONS_SCHEMA`` with
jsonschema, then mapped onto the snake_case fields of ``Options``), finding
construction and stable finding IDs.
"""

from __future__ import annotations

import ast
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Mapping

import jsonschema

from code_complete.cohesion.nodes import method_receiver
from code_complete.core.config import ConfigError
from code_complete.model import AnalyzerType, Severity
from code_complete.model.finding import Finding, Location, make_fingerprint

_logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def camel_to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def parse_options(
    options_cls: type,
    schema: Mapping[str, Any],
    raw: Mapping[str, Any] | None,
    *,
    rule: str,
) -> Any:
    """Validate *raw* camelCase options and build an ``options_cls`` instance.

    Raises ``ConfigError`` when the options do not satisfy *schema*.
    """
    raw = dict(raw or {})
    try:
        jsonschema.validate(instance=raw, schema=schema)
    except jsonschema.ValidationError as exc:
        where = "/".join(str(p) for p in exc.absolute_path) or "options"
        raise ConfigError(f"{rule}: invalid {where}: {exc.message}") from exc
    kwargs = {}
    for key, value in raw.items():
        kwargs[camel_to_snake(key)] = tuple(value) if isinstance(value, list) else value
    return options_cls(**kwargs)


@dataclass(frozen=True)
class NoOptions:
    pass


def parse_module(path: Path) -> ast.Module | None:
    """Parse *path*, or return ``None`` (and log) when it cannot be parsed."""
    try:
        source = path.read_text(encoding="utf-8", errors="replace")
        return ast.parse(source, filename=str(path))
    except SyntaxError as exc:
        _logger.debug("Skipping %s: syntax error at line %s", path, exc.lineno)
    except (ValueError, OSError) as exc:
        _logger.warning("Skipping %s: %s", path, exc)
    return None


def end_line(node: ast.AST) -> int:
    return getattr(node, "end_lineno", None) or node.lineno


def receiver_of(node: ast.AST, parent: ast.AST | None) -> str | None:
    """Receiver name (``self``/``cls``) when *node* is a method of *parent*."""
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and isinstance(parent, ast.ClassDef):
        return method_receiver(node)
    return None


class RuleAnalyzer:
    """Base for every rule; satisfies the ``Analyzer`` protocol."""

    id: ClassVar[str] = ""
    version: ClassVar[str] = "1.0.0"
    description: ClassVar[str] = ""
    analyzer_type: ClassVar[AnalyzerType]
    id_prefix: ClassVar[str] = "rule"
    confidence: ClassVar[float] = 0.9

    Options: ClassVar[type] = NoOptions
    OPTIONS_SCHEMA: ClassVar[dict[str, Any]] = {
        "type": "object",
        "properties": {},
        "additionalProperties": False,
    }

    def __init__(self, options: Any = None, *, severity: Severity = Severity.MEDIUM) -> None:
        self.options = options if options is not None else self.Options()
        self.severity = severity

    @classmethod
    def from_config(
        cls,
        raw: Mapping[str, Any] | None = None,
        *,
        severity: Severity = Severity.MEDIUM,
    ) -> RuleAnalyzer:
        return cls(
            parse_options(cls.Options, cls.OPTIONS_SCHEMA, raw, rule=cls.id),
            severity=severity,
        )

    @classmethod
    def default_options(cls) -> dict[str, Any]:
        """camelCase option defaults, as documented in ``OPTIONS_SCHEMA``."""
        props = cls.OPTIONS_SCHEMA.get("properties", {})
        return {k: v["default"] for k, v in props.items() if "default" in v}

    # ── entry points ────────────────────────────────────────────────

    def run(self, root: Path, files: list[Path]) -> list[Finding]:
        findings: list[Finding] = []
        for path in files:
            tree = parse_module(path)
            if tree is None:
                continue
            rel = path.relative_to(root).as_posix()
            findings.extend(self.check(tree, rel))
        return self._assign_ids(findings)

    def check_source(self, source: str, path: str = "<string>") -> list[Finding]:
        """Check in-memory *source*; ``SyntaxError`` propagates to the caller."""
        tree = ast.parse(source, filename=path)
        return self._assign_ids(self.check(tree, path))

    def check(self, tree: ast.Module, rel: str) -> list[Finding]:
        raise NotImplementedError

    # ── helpers for subclasses ──────────────────────────────────────

    def make_finding(
        self,
        rule_id: str,
        rel: str,
        *,
        line_start: int,
        line_end: int,
        column: int = 0,
        symbol: str,
        message: str,
        snippet: str,
        **extra: Any,
    ) -> Finding:
        return Finding(
            finding_id="",  # filled by _assign_ids
            type=self.analyzer_type,
            severity=self.severity,
            confidence=self.confidence,
            message=message,
            location=Location(path=rel, line_start=line_start, line_end=line_end, column=column),
            fingerprint=make_fingerprint(rule_id, rel, symbol, snippet),
            snippet=snippet,
            metadata={"rule_id": rule_id, "rule": self.id, **extra},
        )

    def _assign_ids(self, findings: list[Finding]) -> list[Finding]:
        findings.sort(key=lambda f: f.sort_key)
        # Assign stable finding IDs (fingerprint-based)
        for i, f in enumerate(findings):
            object.__setattr__(f, "finding_id", f"{self.id_prefix}_{f.fingerprint[7:15]}_{i:04d}")
        return findings
