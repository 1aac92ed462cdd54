"""Bundled JSON schemas and validation against them.

Usage::

    from code_complete.contracts.load import schema_errors, validate_instance

    validate_instance(result.to_dict(), "run_result.schema.json")
    for line in schema_errors(doc, "run_result.schema.json"):
        print(line)
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema

SCHEMA_DIR = "data/schemas"
SCHEMA_VERSIONS = {"run_result.schema.json": "run_result_v1"}


def _schema_path(name: str) -> Path:
    # Source checkout first, then installed package data (wheel / zip).
    local = Path(__file__).resolve().parents[1] / SCHEMA_DIR / name
    if local.exists():
        return local
    with resources.as_file(resources.files("code_complete") / SCHEMA_DIR / name) as p:
        if p.exists():
            return p
    raise FileNotFoundError(f"unknown schema {name!r} (available: {', '.join(available_schemas())})")


def available_schemas() -> list[str]:
    base = Path(__file__).resolve().parents[1] / SCHEMA_DIR
    return sorted(p.name for p in base.glob("*.schema.json"))


@lru_cache(maxsize=None)
def _load_schema_text(name: str) -> str:
    return _schema_path(name).read_text(encoding="utf-8")


def load_schema(name: str) -> dict[str, Any]:
    """Bundled schema *name* as a fresh dict."""
    return json.loads(_load_schema_text(name))


def _check_version(instance: Any, schema_name: str) -> None:
    expected = SCHEMA_VERSIONS.get(schema_name)
    if expected is None or not isinstance(instance, dict):
        return
    found = instance.get("schema_version")
    if found != expected:
        raise jsonschema.ValidationError(
            f"expected schema_version={expected!r}, got {found!r}"
        )


def validate_instance(instance: Any, schema_name: str) -> None:
    """Raise ``jsonschema.ValidationError`` unless *instance* matches the schema.

    A wrong ``schema_version`` is reported on its own, ahead of whatever
    structural errors the mismatch would cause.
    """
    _check_version(instance, schema_name)
    jsonschema.validate(instance=instance, schema=load_schema(schema_name))


def schema_errors(instance: Any, schema_name: str) -> list[str]:
    """Every validation error as ``<json path>: <message>``, in path order."""
    try:
        _check_version(instance, schema_name)
    except jsonschema.ValidationError as e:
        return [f"$.schema_version: {e.message}"]
    schema = load_schema(schema_name)
    validator = jsonschema.validators.validator_for(schema)(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(map(str, e.absolute_path)))
    return [f"{e.json_path}: {e.message}" for e in errors]
