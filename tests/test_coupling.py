"""Tests for high-fan-out, high-parameter-coupling and high-import-coupling."""

from __future__ import annotations

import textwrap

from code_complete.analyzers.coupling import (
    FanOutAnalyzer,
    ImportCouplingAnalyzer,
    ParameterCouplingAnalyzer,
)
from code_complete.rules import (
    CPL_FANOUT_CLASS_001,
    CPL_FANOUT_FUNCTION_001,
    CPL_IMPORTS_001,
    CPL_PARAMS_001,
)


def check(analyzer_cls, source: str, **options):
    return analyzer_cls.from_config(options).check_source(textwrap.dedent(source))


ORCHESTRATOR = """\
def orchestrate(order):
    validate(order)
    price = compute_price(order)
    tax = compute_tax(price)
    charge(order, price + tax)
    notify(order)
    audit.log(order)
    metrics.incr("orders")
    archive(order)
    return len(order)
"""

SERVICE = """\
class Service:
    def load(self):
        return fetch()

    def save(self):
        store()
        self.reset()

    def reset(self):
        clear()
"""


# ── fan-out ─────────────────────────────────────────────────────────


class TestFanOut:
    def test_function_over_limit(self) -> None:
        findings = check(FanOutAnalyzer, ORCHESTRATOR)

        assert len(findings) == 1
        f = findings[0]
        assert f.rule_id == CPL_FANOUT_FUNCTION_001
        assert f.metadata["fan_out"] == 8
        assert f.metadata["calls"] == [
            "archive", "audit.log", "charge", "compute_price",
            "compute_tax", "metrics.incr", "notify", "validate",
        ]
        assert 'Function "orchestrate" calls 8 external functions (maximum allowed: 7)' in f.message

    def test_builtins_ignored_by_default(self) -> None:
        f = check(FanOutAnalyzer, ORCHESTRATOR)[0]
        assert "len" not in f.metadata["calls"]

        f = check(FanOutAnalyzer, ORCHESTRATOR, ignoreBuiltIns=False)[0]
        assert f.metadata["fan_out"] == 9

    def test_local_callables_are_not_external(self) -> None:
        source = ORCHESTRATOR.replace("    validate(order)\n", "    validate = make_validator()\n    validate(order)\n")
        f = check(FanOutAnalyzer, source)[0]
        assert "validate" not in f.metadata["calls"]
        assert "make_validator" in f.metadata["calls"]

    def test_short_function_is_skipped(self) -> None:
        assert check(FanOutAnalyzer, ORCHESTRATOR, minFunctionLength=20) == []

    def test_class_fan_out_ignores_self_calls(self) -> None:
        findings = check(FanOutAnalyzer, SERVICE, maxClassFanOut=2)

        assert [f.rule_id for f in findings] == [CPL_FANOUT_CLASS_001]
        assert findings[0].metadata["calls"] == ["clear", "fetch", "store"]
        assert 'Class "Service" has 3 external dependencies' in findings[0].message

    def test_self_calls_counted_when_requested(self) -> None:
        findings = check(FanOutAnalyzer, SERVICE, maxClassFanOut=2, ignoreSelfReferences=False)
        assert "self.reset" in findings[0].metadata["calls"]
        assert findings[0].metadata["fan_out"] == 4

    def test_under_limits_is_clean(self) -> None:
        assert check(FanOutAnalyzer, SERVICE) == []


# ── parameter coupling ──────────────────────────────────────────────


class TestParameterCoupling:
    def test_too_many_parameters(self) -> None:
        findings = check(ParameterCouplingAnalyzer, "def build(a, b, c, d, e):\n    pass\n")

        assert len(findings) == 1
        f = findings[0]
        assert f.rule_id == CPL_PARAMS_001
        assert f.metadata["param_count"] == 5
        assert f.snippet == "def build(a, b, c, d, e)"

    def test_receiver_is_not_counted(self) -> None:
        source = """\
            class Box:
                def put(self, a, b, c, d):
                    pass

                @staticmethod
                def make(a, b, c, d, e):
                    pass
        """
        findings = check(ParameterCouplingAnalyzer, source)
        assert [f.metadata["param_count"] for f in findings] == [5]

    def test_keyword_only_parameters_count(self) -> None:
        findings = check(ParameterCouplingAnalyzer, "def f(a, *, b, c):\n    pass\n", maxParams=2)
        assert findings[0].metadata["param_count"] == 3

    def test_variadic_only_with_option(self) -> None:
        source = "def f(a, *args, **kwargs):\n    pass\n"
        assert check(ParameterCouplingAnalyzer, source, maxParams=2) == []
        findings = check(ParameterCouplingAnalyzer, source, maxParams=2, countVariadic=True)
        assert findings[0].snippet == "def f(a, *args, **kwargs)"

    def test_lambda(self) -> None:
        findings = check(ParameterCouplingAnalyzer, "f = lambda a, b, c: a\n", maxParams=2)
        assert findings[0].message.startswith('Function "anonymous" has 3 parameters')


# ── import coupling ─────────────────────────────────────────────────

TYPED_IMPORTS = """\
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections import abc
"""


class TestImportCoupling:
    def test_over_limit(self) -> None:
        findings = check(ImportCouplingAnalyzer, TYPED_IMPORTS, maxImports=2)

        assert len(findings) == 1
        f = findings[0]
        assert f.rule_id == CPL_IMPORTS_001
        assert f.metadata["modules"] == ["os", "sys", "typing"]
        assert (f.location.line_start, f.location.line_end) == (1, 6)
        assert "3 module imports (max: 2)" in f.message
        assert "  - typing" in f.message

    def test_type_checking_imports_counted_when_requested(self) -> None:
        f = check(ImportCouplingAnalyzer, TYPED_IMPORTS, maxImports=2, ignoreTypeImports=False)[0]
        assert f.metadata["modules"] == ["os", "sys", "typing", "collections"]

    def test_ignore_patterns(self) -> None:
        assert check(ImportCouplingAnalyzer, TYPED_IMPORTS, maxImports=2, ignorePatterns=["typ*"]) == []

    def test_repeated_and_relative_sources(self) -> None:
        source = """\
            import os, os.path
            from os import sep
            from . import sibling
            from ..pkg import thing
        """
        f = check(ImportCouplingAnalyzer, source, maxImports=1)[0]
        assert f.metadata["modules"] == ["os", "os.path", ".", "..pkg"]

    def test_default_limit(self) -> None:
        source = "".join(f"import mod{i}\n" for i in range(10))
        assert check(ImportCouplingAnalyzer, source) == []
        assert len(check(ImportCouplingAnalyzer, source + "import extra\n")) == 1
