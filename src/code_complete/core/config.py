"""Scan configuration — presets, YAML config files and rule overrides.

Resolution order (later wins):

1. preset (``--preset``, else the file's ``extends``, else ``recommended``)
2. ``rules:`` from the config file
3. rule overrides passed on the command line / API

A rule value may be a level string, ``[level, {options}]`` or
``{level: ..., options: {...}}``.  YAML 1.1 reads a bare ``off`` as
``False``; that is accepted as ``off``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

import jsonschema
import yaml

from code_complete.policy.presets import DEFAULT_PRESET, LEVELS, PRESETS, RuleSetting

if TYPE_CHECKING:
    from code_complete.analyzers._base import RuleAnalyzer

_logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".code-complete.yml", ".code-complete.yaml")

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "extends": {"type": "string"},
        "include": _STRING_LIST,
        "exclude": _STRING_LIST,
        "rules": {"type": "object"},
    },
    "additionalProperties": False,
}


class ConfigError(ValueError):
    """Invalid configuration: unknown rule or preset, bad level, bad options."""


@dataclass(frozen=True)
class ScanConfig:
    """Immutable, fully resolved scan configuration."""

    root: Path
    include: tuple[str, ...] = ("**/*.py",)
    exclude: tuple[str, ...] = ()
    preset: str = DEFAULT_PRESET
    rules: Mapping[str, RuleSetting] = field(default_factory=dict)
    config_file: Path | None = None

    def enabled_rules(self) -> list[str]:
        return sorted(name for name, s in self.rules.items() if s.enabled)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": str(self.root),
            "include": list(self.include),
            "exclude": list(self.exclude),
            "preset": self.preset,
            "rules": {name: self.rules[name].to_dict() for name in self.enabled_rules()},
        }


# ── rule settings ───────────────────────────────────────────────────


def _level(name: str, value: Any) -> str:
    if value is False:
        return "off"
    if not isinstance(value, str) or value not in LEVELS:
        raise ConfigError(
            f"{name}: level must be one of {', '.join(LEVELS)}, got {value!r}"
        )
    return value


def parse_rule_setting(
    name: str,
    value: Any,
    base: RuleSetting | None = None,
) -> RuleSetting:
    """Turn a raw rule value into a ``RuleSetting``.

    A bare level keeps *base*'s options; an explicit options mapping
    replaces them.
    """
    inherited = base.options if base is not None else {}
    if isinstance(value, (list, tuple)):
        if not 1 <= len(value) <= 2:
            raise ConfigError(f"{name}: expected [level] or [level, options]")
        options = value[1] if len(value) == 2 else inherited
        if not isinstance(options, Mapping):
            raise ConfigError(f"{name}: options must be a mapping")
        return RuleSetting(_level(name, value[0]), dict(options))
    if isinstance(value, Mapping):
        unknown = set(value) - {"level", "options"}
        if unknown:
            raise ConfigError(f"{name}: unexpected keys {sorted(unknown)}")
        options = value.get("options", inherited)
        if not isinstance(options, Mapping):
            raise ConfigError(f"{name}: options must be a mapping")
        level = value.get("level", base.level if base is not None else "warn")
        return RuleSetting(_level(name, level), dict(options))
    return RuleSetting(_level(name, value), dict(inherited))


def resolve_rules(
    preset: str,
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, RuleSetting]:
    """Apply *overrides* on top of *preset*, validating names and options."""
    from code_complete.core.registry import RULE_CLASSES

    if preset not in PRESETS:
        raise ConfigError(
            f"unknown preset {preset!r} (choose from {', '.join(sorted(PRESETS))})"
        )
    rules = dict(PRESETS[preset])
    for name, value in (overrides or {}).items():
        if name not in RULE_CLASSES:
            raise ConfigError(f"unknown rule {name!r}")
        rules[name] = parse_rule_setting(name, value, rules.get(name))

    # options are checked even for rules turned off, so typos surface early
    for name, setting in rules.items():
        RULE_CLASSES[name].from_config(setting.options)
    return rules


# ── config files ────────────────────────────────────────────────────


def find_config_file(root: Path) -> Path | None:
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Path) -> dict[str, Any]:
    """Read and schema-check a YAML config file."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"{path}: cannot read config: {exc}") from exc
    if data is None:
        return {}
    try:
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise ConfigError(f"{path}: {exc.message}") from exc
    return data


def load_config(
    root: Path,
    *,
    config_path: Path | None = None,
    preset: str | None = None,
    rule_overrides: Mapping[str, Any] | None = None,
) -> ScanConfig:
    """Resolve the effective ``ScanConfig`` for a scan of *root*."""
    if config_path is None:
        config_path = find_config_file(root)
    data: dict[str, Any] = {}
    if config_path is not None:
        _logger.debug("Loading config from %s", config_path)
        data = load_config_file(config_path)

    chosen = preset or data.get("extends") or DEFAULT_PRESET
    overrides: dict[str, Any] = dict(data.get("rules") or {})
    overrides.update(rule_overrides or {})

    return ScanConfig(
        root=root,
        include=tuple(data.get("include") or ("**/*.py",)),
        exclude=tuple(data.get("exclude") or ()),
        preset=chosen,
        rules=resolve_rules(chosen, overrides),
        config_file=config_path,
    )


def build_analyzers(config: ScanConfig) -> list[RuleAnalyzer]:
    """Instantiate one analyzer per enabled rule, in rule-name order."""
    from code_complete.core.registry import RULE_CLASSES

    analyzers = []
    for name in config.enabled_rules():
        setting = config.rules[name]
        analyzers.append(
            RULE_CLASSES[name].from_config(setting.options, severity=setting.severity)
        )
    return analyzers
