"""Shared utilities for code_complete."""

from code_complete.utils.exit_codes import ExitCode
from code_complete.utils.json_norm import stable_json_dumps

__all__ = [
    "ExitCode",
    "stable_json_dumps",
]
