"""
Pattern Table Module.

Field extractors describe their cascades as ordered tables of
PatternRule entries. A single driver, scan_lines(), walks the lines in
document order and tries every rule on each line in table order; the
first match whose interpretation is accepted wins.

Author: ML Engineering Team
"""

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Pattern, Sequence, TypeVar

T = TypeVar('T')

# Currency marks recognised in front of amounts
CURRENCY = r"[$€£¥₹]"

# Plain number as OCR emits it: "93", "93.", "93.00"
NUMBER = r"\d+\.?\d*"

# Amount with optional thousand separators: "1,234.56" or a plain number
AMOUNT = rf"\d{{1,3}}(?:,\d{{3}})+(?:\.\d+)?|{NUMBER}"

AMOUNT_RE = re.compile(rf"({AMOUNT})")
CURRENCY_AMOUNT_RE = re.compile(rf"{CURRENCY}\s*({AMOUNT})")
PRICE_TOKEN_RE = re.compile(rf"{CURRENCY}?({AMOUNT})")


@dataclass(frozen=True)
class PatternRule:
    """
    One entry of an ordered pattern table.

    Attributes:
        name: Short label used in trace logging.
        pattern: Regular expression with at least one capture group.
        flags: Regex flags; matching is case-insensitive by default.
    """
    name: str
    pattern: str
    flags: int = re.IGNORECASE
    regex: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'regex', re.compile(self.pattern, self.flags))

    @property
    def group_count(self) -> int:
        """Number of capture groups in the pattern."""
        return self.regex.groups

    def search(self, line: str) -> Optional['re.Match']:
        return self.regex.search(line)


@dataclass(frozen=True)
class Candidate:
    """
    An accepted match produced by scan_lines().

    Attributes:
        value: Interpreted value.
        rule: Rule that matched.
        line: Line the value came from.
        line_index: Position of that line in the sequence.
    """
    value: object
    rule: PatternRule
    line: str
    line_index: int


def last_group(match: 're.Match') -> str:
    """Return the text of the last capture group of a match."""
    return (match.group(match.re.groups) or '').strip()


def scan_lines(
    lines: Sequence[str],
    rules: Sequence[PatternRule],
    interpret: Callable[['re.Match', str], Optional[T]]
) -> Optional[Candidate]:
    """
    Run an ordered pattern table over lines and return the first accepted match.

    Lines are visited in document order. On each line the rules are tried
    in table order; interpret() turns a match into a value or returns None
    to reject it, in which case scanning continues.

    Args:
        lines: Normalized OCR lines.
        rules: Ordered pattern table.
        interpret: Callback receiving (match, line).

    Returns:
        Candidate for the first accepted match, or None.
    """
    for index, line in enumerate(lines):
        for rule in rules:
            match = rule.search(line)
            if match is None:
                continue
            value = interpret(match, line)
            if value is not None:
                return Candidate(value=value, rule=rule, line=line, line_index=index)
    return None


def find_digit_tokens(line: str, min_digits: int, max_digits: int) -> List[str]:
    """
    Find standalone runs of digits within a length range.

    Args:
        line: Text to search.
        min_digits: Minimum token length.
        max_digits: Maximum token length.

    Returns:
        Matching tokens in the order they appear.

    Example:
        >>> find_digit_tokens("Ref 12 Order 123456 Tel 0501234567890", 3, 10)
        ['123456']
    """
    return re.findall(rf"\b(\d{{{min_digits},{max_digits}}})\b", line)


def contains_any(line: str, keywords: Sequence[str]) -> bool:
    """Case-insensitive substring test against a keyword list."""
    lowered = line.lower()
    return any(keyword.lower() in lowered for keyword in keywords)
