"""Tests for no-magic-numbers-except-zero-one."""

from __future__ import annotations

import textwrap

from code_complete.analyzers.magic_numbers import MagicNumberAnalyzer
from code_complete.rules import MAG_NUMBER_001

SAMPLE = textwrap.dedent("""\
    TIMEOUT = 30
    def wait(retries=3):
        delay = retries * 2.5
        items = [1, 2, 3]
        first = items[2]
        return delay - -4 + first
""")


def values(source: str = SAMPLE, **options) -> list[str]:
    findings = MagicNumberAnalyzer.from_config(options).check_source(source)
    return [f.metadata["value"] for f in findings]


class TestMagicNumbers:
    def test_default_exemptions(self) -> None:
        """Constants, defaults, indexes and 0/1 are fine; the rest is flagged."""
        assert values() == ["2.5", "2", "3", "-4"]

    def test_finding_shape(self) -> None:
        f = MagicNumberAnalyzer().check_source(SAMPLE)[0]
        assert f.rule_id == MAG_NUMBER_001
        assert f.location.line_start == 3
        assert f.message == 'Magic number "2.5" is discouraged. Consider using a named constant instead.'

    def test_ignore_list(self) -> None:
        assert values(ignore=[2, 2.5]) == ["3", "-4"]

    def test_sign_is_part_of_the_literal(self) -> None:
        assert values("offset = -1\n") == ["-1"]
        assert values("offset = -1\n", ignore=[-1]) == []
        assert values("offset = +5\n") == ["+5"]

    def test_array_indexes_flagged_when_disabled(self) -> None:
        assert "2" in values("first = items[2]\n", ignoreArrayIndexes=False)
        assert values("part = items[2:5]\n") == []
        assert values("part = items[2:5]\n", ignoreArrayIndexes=False) == ["2", "5"]

    def test_default_values_flagged_when_disabled(self) -> None:
        assert values("def f(n=3, *, k=4):\n    return n\n") == []
        assert values("def f(n=3, *, k=4):\n    return n\n", ignoreDefaultValues=False) == ["3", "4"]

    def test_same_line_findings_follow_source_columns(self) -> None:
        """Keyword-only defaults are visited before positional ones in the AST."""
        source = "def f(n=3, *, k=4): ...\n"
        findings = MagicNumberAnalyzer.from_config({"ignoreDefaultValues": False}).check_source(source)
        assert [f.metadata["value"] for f in findings] == ["3", "4"]
        assert [f.location.column for f in findings] == [8, 16]
        assert findings[1].to_dict()["location"]["column"] == 16
        assert findings[0].finding_id.endswith("_0000")

    def test_constant_definitions(self) -> None:
        assert values("MAX_RETRIES = 5\n_LIMIT: float = 2.5\n") == []
        assert values("retries = 5\n") == ["5"]
        assert values("LIMIT, other = 5, 6\n") == ["5", "6"]

    def test_booleans_and_strings_are_not_numbers(self) -> None:
        assert values("enabled = True\nname = '42'\n") == []

    def test_zero_and_one_always_allowed(self) -> None:
        assert values("a = 0\nb = 1\nc = 1.0\nd = -0\n") == []
