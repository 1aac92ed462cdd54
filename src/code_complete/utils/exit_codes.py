"""Centralized exit-code contract for all CLI commands.

Code  Meaning
----  -------
  0   Success — no violations
  1   Violation — an error-level finding, or too many warnings
  2   Error — usage error, bad configuration, missing file, runtime failure
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    VIOLATION = 1
    ERROR = 2
