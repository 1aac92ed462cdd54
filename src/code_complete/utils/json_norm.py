"""Canonical JSON: the one dump path for run results, rule tables and hashes.

Output has sorted keys and a trailing newline.  Paths become POSIX
strings, enums their values, dataclasses dicts, and sets (the identifier
sets of cohesion components) sorted lists.  In CI mode floats are
rounded so that overlap averages hash identically across platforms.
"""

from __future__ import annotations

import json
import math
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

CI_FLOAT_DIGITS = 4


def to_jsonable(obj: Any, *, float_digits: int | None = None) -> Any:
    """Convert *obj* to JSON-safe builtins, optionally rounding floats."""
    if isinstance(obj, Enum):
        obj = obj.value
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return str(obj)
        return obj if float_digits is None else round(obj, float_digits)
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, Path):
        return obj.as_posix()
    if is_dataclass(obj) and not isinstance(obj, type):
        obj = asdict(obj)
    if isinstance(obj, Mapping):
        return {str(k): to_jsonable(v, float_digits=float_digits) for k, v in obj.items()}
    if isinstance(obj, (set, frozenset)):
        return sorted(to_jsonable(v, float_digits=float_digits) for v in obj)
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v, float_digits=float_digits) for v in obj]
    return str(obj)


def stable_json_dumps(
    obj: Any,
    *,
    ci_mode: bool = False,
    indent: int | None = 2,
) -> str:
    built = to_jsonable(obj, float_digits=CI_FLOAT_DIGITS if ci_mode else None)
    return json.dumps(built, indent=indent, sort_keys=True, ensure_ascii=False) + "\n"
