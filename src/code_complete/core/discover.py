"""File discovery — find Python files respecting exclusion patterns."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path

_logger = logging.getLogger(__name__)

# Default exclusion prefixes (relative to scan root).
_DEFAULT_EXCLUDES = frozenset(
    {
        ".git",
        ".github",
        ".venv",
        "venv",
        "__pycache__",
        "node_modules",
        "dist",
        "build",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
    }
)

_MAX_FILE_BYTES = 2_000_000  # 2 MB safety limit


def _excluded(rel: Path, skip_dirs: frozenset[str], patterns: list[str]) -> bool:
    if any(part in skip_dirs for part in rel.parts[:-1]):
        return True
    posix = rel.as_posix()
    return any(fnmatch.fnmatch(posix, pat) for pat in patterns)


def discover_py_files(
    root: Path,
    *,
    include: list[str] | tuple[str, ...] | None = None,
    exclude: list[str] | tuple[str, ...] | None = None,
) -> list[Path]:
    """Recursively find ``*.py`` files under *root*.

    Parameters
    ----------
    root:
        Directory to scan.  A single ``.py`` file is accepted too.
    include:
        Glob patterns to include.  Default: ``["**/*.py"]``.
    exclude:
        Directory basenames to skip (merged with built-in defaults) or
        glob patterns matched against the root-relative POSIX path.

    Returns
    -------
    Sorted list of absolute ``Path`` objects.
    """
    if root.is_file():
        return [root.resolve()] if root.suffix == ".py" else []

    extra = list(exclude or [])
    skip = _DEFAULT_EXCLUDES | {e for e in extra if not any(c in e for c in "*?[/")}
    patterns = [e for e in extra if any(c in e for c in "*?[/")]

    results: set[Path] = set()
    for pat in include or ["**/*.py"]:
        for p in root.glob(pat):
            rel = p.relative_to(root)
            if _excluded(rel, skip, patterns) or not p.is_file():
                continue
            try:
                if p.stat().st_size > _MAX_FILE_BYTES:
                    _logger.warning("Skipping %s: larger than %d bytes", rel, _MAX_FILE_BYTES)
                    continue
            except OSError:
                continue
            results.add(p.resolve())

    return sorted(results)
