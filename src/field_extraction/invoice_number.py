"""
Invoice Number Extractor Module.

Finds the short numeric token that identifies an invoice. Five ordered
passes are tried, from explicit labels down to positional and magnitude
heuristics; the first candidate that survives the plausibility filters
wins. When nothing survives, a timestamp-based identifier is generated.

Passes:
    1. Explicit pattern: keyword + number tables ("Invoice # 123", "INV-123")
    2. Invoice-word line: any 3-15 digit token on a line mentioning "invoice"
       (including OCR remnants such as "nvoice") or the Arabic word
    3. Keyword line: any 3-15 digit token on a line with an invoice keyword
    4. Header: standalone 4-15 digit token in the first lines
    5. Fallback: 8-15 digit token in the first lines

Author: ML Engineering Team
"""

import re
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from config import get_config
from src.utils.helpers import generate_timestamp
from src.utils.logger import get_logger
from .filters import is_obviously_not_invoice_number, is_valid_invoice_number
from .patterns import PatternRule, contains_any, find_digit_tokens

# Initialize module logger
logger = get_logger(__name__)


# Ordered by priority; garbled OCR forms of "Invoice" ("nvoice", "eer #")
# are deliberate.
EXPLICIT_PATTERNS = (
    PatternRule("hash", r"#\s*(\d+)"),
    PatternRule("garbled-neer-hash", r"neer\s*#\s*(\d+)"),
    PatternRule("garbled-eer-hash", r"eer\s*#\s*(\d+)"),
    PatternRule("word-hash", r"[a-zA-Z]*\s*#\s*(\d+)"),
    PatternRule("garbled-invoice", r"[a-zA-Z]*nvoice\s*#?\s*(\d+)"),
    PatternRule("invoice-hash", r"Invoice\s*#\s*(\d+)"),
    PatternRule("arabic-invoice-number", r"فاتورة\s*رقم\s*(\d+)"),
    PatternRule("invoice", r"Invoice\s*(\d+)"),
    PatternRule("invoice-number", r"Invoice\s*Number\s*:?\s*(\d+)"),
    PatternRule("arabic-number-of-invoice", r"رقم\s*الفاتورة\s*:?\s*(\d+)"),
    PatternRule("inv", r"INV\s*[-#]?\s*(\d+)"),
    PatternRule("no", r"No\.?\s*(\d+)"),
    PatternRule("invoice-colon", r"Invoice\s*:?\s*(\d+)"),
    PatternRule("inv-abbrev", r"Inv\.?\s*:?\s*(\d+)"),
    PatternRule("bill-hash", r"Bill\s*#\s*(\d+)"),
    PatternRule("receipt-hash", r"Receipt\s*#\s*(\d+)"),
    PatternRule("trailing-invoice", r"(\d+)\s*Invoice"),
)

INVOICE_WORD_RE = re.compile(r"[a-zA-Z]*nvoice", re.IGNORECASE)
ARABIC_INVOICE_WORD = "فاتورة"

# Substrings that put a line in the keyword pass
KEYWORD_LINE_TERMS = ("#", "invoice", "فاتورة", "bill", "receipt", "inv")


class InvoiceNumberExtractor:
    """
    Cascade extractor for the invoice number.

    Attributes:
        min_length: Shortest accepted number.
        max_length: Longest accepted number.
        phone_number_length: Length from which unlabeled numbers look like phones.
        header_lines: Lines searched by the header pass.
        fallback_lines: Lines searched by the magnitude pass.
        fallback_prefix: Prefix of the generated identifier.
        fallback_format: strftime format of the generated identifier.

    Example:
        >>> extractor = InvoiceNumberExtractor()
        >>> extractor.extract(["ACME Hosting", "Invoice # 482910"], datetime.now())
        '482910'
    """

    def __init__(
        self,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
        phone_number_length: Optional[int] = None,
        header_lines: Optional[int] = None,
        fallback_lines: Optional[int] = None,
        fallback_prefix: Optional[str] = None,
        fallback_format: Optional[str] = None,
    ) -> None:
        settings = {
            "min_length": (min_length, 3),
            "max_length": (max_length, 10),
            "phone_number_length": (phone_number_length, 10),
            "header_lines": (header_lines, 5),
            "fallback_lines": (fallback_lines, 10),
            "fallback_prefix": (fallback_prefix, "INV-"),
            "fallback_format": (fallback_format, "%Y%m%d%H%M%S"),
        }
        for name, (value, default) in settings.items():
            if value is None:
                value = get_config(f"extraction.invoice_number.{name}", default)
            setattr(self, name, value)

        self.passes: List[Tuple[str, Callable[[Sequence[str]], Optional[str]]]] = [
            ("explicit pattern", self.explicit_pattern_pass),
            ("invoice-word line", self.invoice_word_pass),
            ("keyword line", self.keyword_line_pass),
            ("header position", self.header_pass),
            ("fallback magnitude", self.magnitude_pass),
        ]

    def extract(self, lines: Sequence[str], now: datetime) -> str:
        """
        Run the cascade and fall back to a generated identifier.

        Args:
            lines: Normalized OCR lines.
            now: Moment used for the generated identifier.

        Returns:
            Invoice number, never empty.
        """
        number = self.find(lines)
        if number is not None:
            return number

        fallback = self.generate_fallback(now)
        logger.warning(f"Could not extract invoice number, generated {fallback}")
        return fallback

    def find(self, lines: Sequence[str]) -> Optional[str]:
        """Run the five passes in order and return the first accepted number."""
        for position, (name, run_pass) in enumerate(self.passes, start=1):
            logger.debug(f"Invoice number pass {position} ({name})")
            number = run_pass(lines)
            if number is not None:
                logger.info(f"Invoice number {number} found by pass {position} ({name})")
                return number
        return None

    def generate_fallback(self, now: datetime) -> str:
        """Build the timestamp identifier, e.g. INV-20260121143022."""
        return f"{self.fallback_prefix}{generate_timestamp(self.fallback_format, now)}"

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def is_valid(self, number: str, line: str) -> bool:
        return is_valid_invoice_number(
            number,
            line,
            min_length=self.min_length,
            max_length=self.max_length,
            phone_number_length=self.phone_number_length,
        )

    def is_excluded(self, number: str, line: str) -> bool:
        return is_obviously_not_invoice_number(number, line, max_length=self.max_length)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def explicit_pattern_pass(self, lines: Sequence[str]) -> Optional[str]:
        """Pass 1: keyword + number patterns, lines in order, patterns by priority."""
        for line in lines:
            for rule in EXPLICIT_PATTERNS:
                match = rule.search(line)
                if match is None:
                    continue
                number = match.group(1)
                if self.is_valid(number, line):
                    logger.debug(f"Pattern '{rule.name}' matched {number} in line: {line}")
                    return number
                logger.debug(f"Pattern '{rule.name}' candidate {number} rejected in line: {line}")
        return None

    def invoice_word_pass(self, lines: Sequence[str]) -> Optional[str]:
        """Pass 2: any 3-15 digit token on a line that mentions an invoice."""
        for line in lines:
            if INVOICE_WORD_RE.search(line) or ARABIC_INVOICE_WORD in line:
                number = self._first_valid(line, 3, 15)
                if number is not None:
                    return number
        return None

    def keyword_line_pass(self, lines: Sequence[str]) -> Optional[str]:
        """Pass 3: any 3-15 digit token on a line with an invoice keyword."""
        for line in lines:
            if contains_any(line, KEYWORD_LINE_TERMS):
                number = self._first_valid(line, 3, 15)
                if number is not None:
                    return number
        return None

    def header_pass(self, lines: Sequence[str]) -> Optional[str]:
        """Pass 4: standalone 4-15 digit token in the header lines."""
        for line in lines[:self.header_lines]:
            number = self._first_valid(line, 4, 15, exclude_obvious=True)
            if number is not None:
                return number
        return None

    def magnitude_pass(self, lines: Sequence[str]) -> Optional[str]:
        """Pass 5: long 8-15 digit token in the first lines."""
        for line in lines[:self.fallback_lines]:
            number = self._first_valid(line, 8, 15, exclude_obvious=True)
            if number is not None:
                return number
        return None

    def _first_valid(
        self,
        line: str,
        min_digits: int,
        max_digits: int,
        exclude_obvious: bool = False
    ) -> Optional[str]:
        for number in find_digit_tokens(line, min_digits, max_digits):
            if not self.is_valid(number, line):
                continue
            if exclude_obvious and self.is_excluded(number, line):
                continue
            return number
        return None
