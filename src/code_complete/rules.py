"""Canonical rule ID registry.

Single source of truth for all rule IDs emitted by code-complete, and for
the kebab-case rule names used in presets and config files.

Structure:
  PUBLIC_RULE_IDS       - stable, supported, safe for downstream consumption
  EXPERIMENTAL_RULE_IDS - unstable, may change or be removed
  DEPRECATED_RULE_IDS   - scheduled for removal, do not add new usage
  ALL_RULE_IDS          - union of all buckets (internal use only)
  RULE_NAMES            - rule name → the rule IDs it can emit
"""

from __future__ import annotations

# ── Cohesion (public) ───────────────────────────────────────────────
COH_FUNCTION_001 = "COH_FUNCTION_001"
COH_CLASS_001 = "COH_CLASS_001"

# ── Complexity (public) ─────────────────────────────────────────────
CPX_CONDITIONAL_001 = "CPX_CONDITIONAL_001"
CPX_NESTING_001 = "CPX_NESTING_001"

# ── Coupling (public) ───────────────────────────────────────────────
CPL_FANOUT_FUNCTION_001 = "CPL_FANOUT_FUNCTION_001"
CPL_FANOUT_CLASS_001 = "CPL_FANOUT_CLASS_001"
CPL_PARAMS_001 = "CPL_PARAMS_001"
CPL_IMPORTS_001 = "CPL_IMPORTS_001"

# ── Literals & signatures (public) ──────────────────────────────────
MAG_NUMBER_001 = "MAG_NUMBER_001"
BOOL_PARAM_001 = "BOOL_PARAM_001"

# ── Naming (public) ─────────────────────────────────────────────────
NAM_TOO_SHORT_001 = "NAM_TOO_SHORT_001"
NAM_DISALLOWED_001 = "NAM_DISALLOWED_001"

# ── Late usage (public) ─────────────────────────────────────────────
LATE_VARIABLE_001 = "LATE_VARIABLE_001"
LATE_ARGUMENT_001 = "LATE_ARGUMENT_001"

# ── Buckets ─────────────────────────────────────────────────────────

PUBLIC_RULE_IDS: list[str] = sorted([
    # Cohesion
    COH_FUNCTION_001,
    COH_CLASS_001,
    # Complexity
    CPX_CONDITIONAL_001,
    CPX_NESTING_001,
    # Coupling
    CPL_FANOUT_FUNCTION_001,
    CPL_FANOUT_CLASS_001,
    CPL_PARAMS_001,
    CPL_IMPORTS_001,
    # Literals & signatures
    MAG_NUMBER_001,
    BOOL_PARAM_001,
    # Naming
    NAM_TOO_SHORT_001,
    NAM_DISALLOWED_001,
    # Late usage
    LATE_VARIABLE_001,
    LATE_ARGUMENT_001,
])

EXPERIMENTAL_RULE_IDS: list[str] = sorted([
    # Add experimental rules here as they're developed
])

DEPRECATED_RULE_IDS: list[str] = sorted([
    # Add deprecated rules here before removal
])

# Union of all buckets (internal use only)
ALL_RULE_IDS: list[str] = sorted(set(
    PUBLIC_RULE_IDS
    + EXPERIMENTAL_RULE_IDS
    + DEPRECATED_RULE_IDS
))

# ── Rule names ──────────────────────────────────────────────────────

RULE_NAMES: dict[str, tuple[str, ...]] = {
    "low-function-cohesion": (COH_FUNCTION_001,),
    "low-class-cohesion": (COH_CLASS_001,),
    "no-complex-conditionals": (CPX_CONDITIONAL_001,),
    "max-nesting-depth": (CPX_NESTING_001,),
    "high-fan-out": (CPL_FANOUT_FUNCTION_001, CPL_FANOUT_CLASS_001),
    "high-parameter-coupling": (CPL_PARAMS_001,),
    "high-import-coupling": (CPL_IMPORTS_001,),
    "no-magic-numbers-except-zero-one": (MAG_NUMBER_001,),
    "no-boolean-params": (BOOL_PARAM_001,),
    "enforce-meaningful-names": (NAM_TOO_SHORT_001, NAM_DISALLOWED_001),
    "no-late-variable-usage": (LATE_VARIABLE_001,),
    "no-late-argument-usage": (LATE_ARGUMENT_001,),
}


def _assert_rule_registry_invariants() -> None:
    """Fail fast on invariant violations.

    Called at import time so CI and local runs catch issues immediately.
    """
    import re

    # Pattern matches multi-segment IDs like CPL_FANOUT_CLASS_001
    rule_re = re.compile(r"^[A-Z]{2,4}_[A-Z][A-Z0-9_]*_[0-9]{3}$")
    name_re = re.compile(r"^[a-z]+(-[a-z]+)*$")

    def _check_bucket(name: str, ids: list[str]) -> None:
        if ids != sorted(ids):
            raise AssertionError(f"{name} must be sorted")
        if len(ids) != len(set(ids)):
            raise AssertionError(f"{name} must contain unique IDs")
        bad = [x for x in ids if not rule_re.match(x)]
        if bad:
            raise AssertionError(f"{name} contains invalid rule IDs: {bad}")

    _check_bucket("PUBLIC_RULE_IDS", PUBLIC_RULE_IDS)
    _check_bucket("EXPERIMENTAL_RULE_IDS", EXPERIMENTAL_RULE_IDS)
    _check_bucket("DEPRECATED_RULE_IDS", DEPRECATED_RULE_IDS)
    _check_bucket("ALL_RULE_IDS", ALL_RULE_IDS)

    # Buckets must be disjoint.
    pub = set(PUBLIC_RULE_IDS)
    exp = set(EXPERIMENTAL_RULE_IDS)
    dep = set(DEPRECATED_RULE_IDS)
    overlap = (pub & exp) | (pub & dep) | (exp & dep)
    if overlap:
        raise AssertionError(
            f"Rule ID buckets must be disjoint; overlaps: {sorted(overlap)}"
        )

    # ALL must be exact union.
    union = pub | exp | dep
    if set(ALL_RULE_IDS) != union:
        raise AssertionError(
            "ALL_RULE_IDS must equal union(PUBLIC, EXPERIMENTAL, DEPRECATED)"
        )

    # Every rule name is kebab-case and owns registered IDs only.
    bad_names = [n for n in RULE_NAMES if not name_re.match(n)]
    if bad_names:
        raise AssertionError(f"RULE_NAMES contains invalid names: {bad_names}")
    named = [rid for ids in RULE_NAMES.values() for rid in ids]
    if len(named) != len(set(named)):
        raise AssertionError("a rule ID may belong to only one rule name")
    unknown = set(named) - union
    if unknown:
        raise AssertionError(f"RULE_NAMES references unknown IDs: {sorted(unknown)}")


_assert_rule_registry_invariants()
