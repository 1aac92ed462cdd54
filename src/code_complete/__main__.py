"""CLI entry-point for code_complete.

Usage:
    python -m code_complete <path>
    python -m code_complete <path> --preset strict --format json
    python -m code_complete <path> --rule low-function-cohesion=error --rule max-nesting-depth=off
    python -m code_complete <path> --config ci.yml --max-warnings 0 --ci
    python -m code_complete rules [--preset NAME] [--json]
    python -m code_complete validate <instance.json> <schema_name>
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from code_complete import __version__
from code_complete.api import scan_project as _api_scan_project
from code_complete.contracts.load import schema_errors
from code_complete.core.config import ConfigError
from code_complete.policy.exit_codes import ExitCodePolicy, exit_code_for_counts
from code_complete.policy.presets import DEFAULT_PRESET, preset_names
from code_complete.reports.exporters import FORMATS, export_result
from code_complete.utils.exit_codes import ExitCode
from code_complete.utils.json_norm import stable_json_dumps

_KNOWN_COMMANDS = {"rules", "validate"}


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _parse_rule_flags(values: list[str] | None) -> dict[str, str]:
    """``NAME`` or ``NAME=LEVEL`` → rule override mapping (bare name = warn)."""
    overrides: dict[str, str] = {}
    for raw in values or []:
        name, sep, level = raw.partition("=")
        name = name.strip()
        if not name:
            raise ConfigError(f"--rule: missing rule name in {raw!r}")
        overrides[name] = level.strip() if sep else "warn"
    return overrides


def _add_scan_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "path",
        type=Path,
        help="Root directory (or single .py file) to scan.",
    )
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML config file (default: .code-complete.yml at the scan root).",
    )
    p.add_argument(
        "--preset",
        choices=preset_names(),
        default=None,
        help="Rule preset; overrides the config file's 'extends'.",
    )
    p.add_argument(
        "--rule",
        dest="rules",
        action="append",
        metavar="NAME[=LEVEL]",
        help="Enable a rule (or set its level: off|warn|error). Repeatable.",
    )
    p.add_argument(
        "--format",
        dest="fmt",
        choices=FORMATS,
        default="text",
        help="Output format (default: text).",
    )
    p.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the report to FILE instead of stdout.",
    )
    p.add_argument(
        "--max-warnings",
        dest="max_warnings",
        type=int,
        default=None,
        help="Fail when more than N warn-level findings are reported.",
    )
    p.add_argument(
        "--project-id",
        dest="project_id",
        default="",
        help="Attach a project identifier to the run.",
    )
    p.add_argument(
        "--ci",
        "--deterministic",
        dest="ci_mode",
        action="store_true",
        default=False,
        help="Enable deterministic output (stable IDs, timestamps, ordering).",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug).",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="code-complete",
        description="Design-quality checks for Python, built around cohesion.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    sub = p.add_subparsers(dest="command")

    # ── rules subcommand ────────────────────────────────────────────
    rules_p = sub.add_parser(
        "rules",
        help="List rules with their level in a preset and default options.",
    )
    rules_p.add_argument(
        "--preset",
        choices=preset_names(),
        default=DEFAULT_PRESET,
        help="Preset whose levels are shown (default: %(default)s).",
    )
    rules_p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the rule table as JSON.",
    )

    # ── validate subcommand ─────────────────────────────────────────
    val_p = sub.add_parser(
        "validate",
        help="Validate a JSON instance against a bundled schema.",
    )
    val_p.add_argument("instance", type=Path, help="Path to the JSON file to validate.")
    val_p.add_argument("schema_name", help="Schema filename, e.g. run_result.schema.json")
    return p


def _build_default_parser() -> argparse.ArgumentParser:
    """Parser for default positional mode.

    Argparse subparsers greedily consume the first positional token, so a
    path argument is parsed here whenever it is not a known subcommand.
    """
    p = argparse.ArgumentParser(
        prog="code-complete",
        description="Design-quality checks for Python, built around cohesion.",
    )
    _add_scan_arguments(p)
    p.set_defaults(command=None)
    return p


# ── handlers ────────────────────────────────────────────────────────


def _rule_table(preset: str) -> list[dict[str, Any]]:
    from code_complete.core.registry import RULE_CLASSES
    from code_complete.policy.presets import PRESETS
    from code_complete.rules import RULE_NAMES

    table = []
    for name in sorted(RULE_CLASSES):
        cls = RULE_CLASSES[name]
        setting = PRESETS[preset][name]
        table.append({
            "name": name,
            "rule_ids": list(RULE_NAMES[name]),
            "level": setting.level,
            "options": {**cls.default_options(), **setting.options},
            "description": cls.description,
        })
    return table


def _handle_rules(args: argparse.Namespace) -> int:
    """Dispatch ``code-complete rules``."""
    table = _rule_table(args.preset)
    if args.json_out:
        sys.stdout.write(stable_json_dumps(table))
        return ExitCode.SUCCESS

    width = max(len(row["name"]) for row in table)
    print(f"Rules ({args.preset} preset):")
    for row in table:
        print(f"  {row['name']:<{width}}  {row['level']:<5}  {row['description']}")
        if row["options"]:
            opts = ", ".join(f"{k}={v!r}" for k, v in sorted(row["options"].items()))
            print(f"  {'':<{width}}         {opts}")
    return ExitCode.SUCCESS


def _handle_validate(args: argparse.Namespace) -> int:
    """Dispatch ``code-complete validate``.

    Prints one ``FAIL:`` line per schema violation.  Exit code contract:
    1 = schema violation, 2 = unreadable instance or unknown schema.
    """
    try:
        instance_dict = json.loads(Path(args.instance).read_text(encoding="utf-8"))
        errors = schema_errors(instance_dict, args.schema_name)
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return ExitCode.ERROR
    if errors:
        for line in errors:
            print(f"FAIL: {line}", file=sys.stderr)
        return ExitCode.VIOLATION
    print(f"{args.instance}: OK")
    return ExitCode.SUCCESS


def _handle_scan(args: argparse.Namespace) -> int:
    """Dispatch ``code-complete <path>``."""
    target: Path = args.path.resolve()
    if not target.exists():
        print(f"error: path does not exist: {target}", file=sys.stderr)
        return ExitCode.ERROR

    try:
        result, result_dict = _api_scan_project(
            target,
            project_id=args.project_id,
            config=args.config,
            preset=args.preset,
            rules=_parse_rule_flags(args.rules),
            ci_mode=args.ci_mode,
        )
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR

    output = export_result(result, fmt=args.fmt, ci_mode=args.ci_mode)
    if args.output:
        out: Path = args.output
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(output, encoding="utf-8")
        print(f"Report written to {out}", file=sys.stderr)
    else:
        sys.stdout.write(output)

    policy = ExitCodePolicy(max_warnings=args.max_warnings)
    by_severity = result_dict["summary"]["counts"]["by_severity"]
    return exit_code_for_counts(by_severity, policy=policy)


def main(argv: list[str] | None = None) -> int:
    """Entry-point — returns an exit code (0 = clean, 1 = violations, 2 = error)."""
    effective_argv = list(argv) if argv is not None else sys.argv[1:]

    first_positional = next(
        (a for a in effective_argv if not a.startswith("-")), None
    )
    if first_positional and first_positional not in _KNOWN_COMMANDS:
        args = _build_default_parser().parse_args(effective_argv)
    else:
        parser = _build_parser()
        args = parser.parse_args(effective_argv)
        if args.command is None:
            parser.print_usage(sys.stderr)
            print("error: please provide a path or use a subcommand.", file=sys.stderr)
            return ExitCode.ERROR

    if args.command == "rules":
        return _handle_rules(args)
    if args.command == "validate":
        return _handle_validate(args)

    _configure_logging(args.verbose)
    return _handle_scan(args)


if __name__ == "__main__":
    raise SystemExit(main())
