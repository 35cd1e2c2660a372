"""
Tests for the pattern table driver and token helpers.
"""

import re

from src.field_extraction.patterns import (
    PatternRule,
    contains_any,
    find_digit_tokens,
    last_group,
    scan_lines,
)


def _digits(match, line):
    return match.group(1)


class TestPatternRule:
    """PatternRule compiles once and matches case-insensitively"""

    def test_case_insensitive_by_default(self):
        rule = PatternRule("invoice", r"Invoice\s*(\d+)")
        assert rule.search("INVOICE 123").group(1) == "123"

    def test_explicit_flags(self):
        rule = PatternRule("strict", r"Invoice\s*(\d+)", flags=0)
        assert rule.search("INVOICE 123") is None

    def test_group_count(self):
        assert PatternRule("one", r"(\d+)").group_count == 1
        assert PatternRule("two", r"(\d+)%\s*(\d+)").group_count == 2


class TestScanLines:
    """scan_lines walks lines in order and rules in table order per line"""

    def test_earlier_line_beats_higher_priority_rule(self):
        rules = (PatternRule("a", r"a\s*(\d+)"), PatternRule("b", r"b\s*(\d+)"))
        candidate = scan_lines(["b 2", "a 1"], rules, _digits)

        assert candidate.value == "2"
        assert candidate.rule.name == "b"
        assert candidate.line_index == 0

    def test_rule_order_within_a_line(self):
        rules = (PatternRule("a", r"a\s*(\d+)"), PatternRule("b", r"b\s*(\d+)"))
        candidate = scan_lines(["b 2 a 1"], rules, _digits)

        assert candidate.value == "1"
        assert candidate.rule.name == "a"

    def test_rejected_interpretation_keeps_scanning(self):
        rules = (PatternRule("num", r"(\d+)"),)

        def only_even(match, line):
            value = int(match.group(1))
            return value if value % 2 == 0 else None

        candidate = scan_lines(["7", "8"], rules, only_even)
        assert candidate.value == 8
        assert candidate.line == "8"

    def test_no_match_returns_none(self):
        rules = (PatternRule("num", r"(\d+)"),)
        assert scan_lines(["no digits here"], rules, _digits) is None
        assert scan_lines([], rules, _digits) is None


def test_find_digit_tokens_respects_length_range():
    line = "Ref 12 Order 123456 Tel 0501234567890"
    assert find_digit_tokens(line, 3, 10) == ["123456"]
    assert find_digit_tokens(line, 2, 15) == ["12", "123456", "0501234567890"]


def test_contains_any_ignores_case():
    assert contains_any("TOTAL AMOUNT", ("total",))
    assert not contains_any("Hosting", ("total", "vat"))


def test_last_group_returns_final_capture():
    match = re.search(r"VAT\s*\((\d+)%\):\s*\$(\d+\.\d+)", "VAT (15%): $93.00")
    assert last_group(match) == "93.00"
