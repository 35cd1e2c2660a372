"""
Data Normalizers Module.

This module turns the raw tokens captured from OCR lines into typed values:
    - Date strings into datetime.date
    - Currency/amount strings into Decimal

A token that cannot be parsed yields None so the calling cascade can move
on to its next pattern.

Author: ML Engineering Team
"""

import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, List

from dateutil import parser as date_parser

from config import get_config
from src.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)

TWO_PLACES = Decimal("0.01")


class DateNormalizer:
    """
    Parses date strings captured from OCR text.

    Explicit formats are tried first, then dateutil's parser in
    month-first and day-first order. Candidates made only of digits
    (a bare year or day number) are never treated as dates.

    Attributes:
        input_formats: List of recognized input format strings

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.parse("Jan 15, 2026")
        datetime.date(2026, 1, 15)
        >>> normalizer.parse("Net 30 days") is None
        True
    """

    DEFAULT_INPUT_FORMATS = [
        "%b %d, %Y",
        "%B %d, %Y",
        "%m/%d/%Y",
        "%Y-%m-%d",
        "%d/%m/%Y",
        "%d-%m-%Y",
        "%d.%m.%Y",
    ]

    def __init__(self, input_formats: Optional[List[str]] = None) -> None:
        """
        Initialize the date normalizer with configuration.

        Args:
            input_formats: strptime formats to try before dateutil.
                          If None, uses config.
        """
        if input_formats is None:
            input_formats = get_config(
                "postprocessing.date.input_formats",
                self.DEFAULT_INPUT_FORMATS
            )
        self.input_formats = input_formats

    def parse(self, date_str: str, default: Optional[date] = None) -> Optional[date]:
        """
        Parse a date string into a calendar date.

        Args:
            date_str: Candidate date text.
            default: Supplies the year, month or day a partial date leaves
                    out (e.g. "March 5"). Without it dateutil uses the
                    system clock.

        Returns:
            Parsed date, or None if the text is not a date.
        """
        if not date_str:
            return None

        date_str = self._clean_date_string(date_str)

        if not date_str or not re.search(r'\d', date_str):
            return None
        if re.fullmatch(r'[\d\s]+', date_str):
            return None

        parsed = self._try_explicit_formats(date_str)
        if parsed is None:
            parsed = self._try_dateutil_parser(date_str, default)

        if parsed is None:
            logger.debug(f"Could not parse date: '{date_str}'")
            return None
        return parsed.date()

    def _clean_date_string(self, date_str: str) -> str:
        """
        Clean and prepare date string for parsing.

        Args:
            date_str: Raw date string.

        Returns:
            Cleaned date string.
        """
        date_str = ' '.join(date_str.split())

        # 1st, 2nd, 3rd, 4th
        date_str = re.sub(r'(\d+)(st|nd|rd|th)\b', r'\1', date_str, flags=re.IGNORECASE)

        return date_str.strip(' :')

    def _try_explicit_formats(self, date_str: str) -> Optional[datetime]:
        for fmt in self.input_formats:
            try:
                return datetime.strptime(date_str, fmt)
            except ValueError:
                continue
        return None

    def _try_dateutil_parser(
        self,
        date_str: str,
        default: Optional[date] = None
    ) -> Optional[datetime]:
        """
        Try to parse date using dateutil's strict parser.

        Args:
            date_str: Date string to parse.
            default: Date that fills the parts missing from date_str.

        Returns:
            Parsed datetime or None.
        """
        fill = datetime.combine(default, time()) if default is not None else None
        for dayfirst in (False, True):
            try:
                return date_parser.parse(date_str, dayfirst=dayfirst, default=fill)
            except (ValueError, OverflowError):
                continue
        return None


class AmountNormalizer:
    """
    Converts currency/amount strings to Decimal.

    Handles currency symbols and thousand separators. Negative or
    non-finite values are rejected, and so are digit runs longer than
    MAX_INTEGER_DIGITS, which OCR noise produces but no invoice carries.

    Example:
        >>> normalizer = AmountNormalizer()
        >>> normalizer.to_decimal("$1,234.56")
        Decimal('1234.56')
        >>> normalizer.to_decimal("12a") is None
        True
    """

    CURRENCY_SYMBOLS = ['$', '€', '£', '¥', '₹']
    MAX_INTEGER_DIGITS = 15

    def to_decimal(self, amount_str: str) -> Optional[Decimal]:
        """
        Parse an amount string.

        Args:
            amount_str: Input amount string (e.g., "$1,234.56").

        Returns:
            Decimal value, or None if the text is not a valid amount.
        """
        if not amount_str:
            return None

        cleaned = amount_str.strip()
        for symbol in self.CURRENCY_SYMBOLS:
            cleaned = cleaned.replace(symbol, '')
        cleaned = cleaned.replace(',', '').strip()

        if not cleaned:
            return None

        try:
            value = Decimal(cleaned)
        except InvalidOperation:
            logger.debug(f"Could not parse amount: '{amount_str}'")
            return None

        if not value.is_finite() or value < 0:
            return None
        if value.adjusted() >= self.MAX_INTEGER_DIGITS:
            logger.debug(f"Amount too long to be a price: '{amount_str}'")
            return None
        return value

    def to_int(self, quantity_str: str) -> Optional[int]:
        """Parse a quantity token, or None if it is not a whole number."""
        try:
            value = int(quantity_str)
        except (TypeError, ValueError):
            return None
        return value if value >= 0 else None

    @staticmethod
    def round_money(value: Decimal) -> Decimal:
        """Round a value to two decimal places (half up)."""
        return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
