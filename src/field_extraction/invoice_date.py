"""
Invoice Date Extractor Module.

Label patterns and date-shaped patterns are tried on every line in
document order; the first captured text that parses as a calendar date
is the invoice date. Without one, the caller's current date is used.

Author: ML Engineering Team
"""

from datetime import date
from typing import Optional, Sequence

from src.postprocessor.normalizers import DateNormalizer
from src.utils.logger import get_logger
from .patterns import PatternRule, scan_lines

# Initialize module logger
logger = get_logger(__name__)


DATE_PATTERNS = (
    PatternRule("invoice-date-label", r"Invoice\s*Date\s*:?\s*(.+)"),
    PatternRule("date-label", r"Date\s*:?\s*(.+)"),
    PatternRule("arabic-invoice-date-label", r"تاريخ\s*الفاتورة\s*:?\s*(.+)"),
    PatternRule("month-day-year", r"(\w{3}\s+\d{1,2},\s+\d{4})"),
    PatternRule("slashed", r"(\d{1,2}/\d{1,2}/\d{4})"),
    PatternRule("iso", r"(\d{4}-\d{1,2}-\d{1,2})"),
)


class InvoiceDateExtractor:
    """
    Extracts the invoice date.

    Example:
        >>> InvoiceDateExtractor().extract(["Date: 2026-01-21"], date(2026, 10, 1))
        datetime.date(2026, 1, 21)
    """

    def __init__(self, date_normalizer: Optional[DateNormalizer] = None) -> None:
        self.date_normalizer = date_normalizer or DateNormalizer()

    def extract(self, lines: Sequence[str], today: date) -> date:
        """
        Find the invoice date or fall back to today.

        Args:
            lines: Normalized OCR lines.
            today: Default when no date parses.

        Returns:
            Invoice date.
        """
        found = self.find(lines, today)
        if found is not None:
            return found

        logger.debug(f"No parsable invoice date, defaulting to {today.isoformat()}")
        return today

    def find(self, lines: Sequence[str], today: Optional[date] = None) -> Optional[date]:
        """First parsable date in the text; `today` fills any missing year or day."""
        candidate = scan_lines(
            lines,
            DATE_PATTERNS,
            lambda match, line: self._interpret(match, today)
        )
        if candidate is None:
            return None
        logger.info(
            f"Invoice date {candidate.value.isoformat()} found by "
            f"'{candidate.rule.name}' in line: {candidate.line}"
        )
        return candidate.value

    def _interpret(self, match, today: Optional[date]) -> Optional[date]:
        return self.date_normalizer.parse(match.group(1).strip(), default=today)
