"""
Amount Extractors Module.

Extractors for the money fields of an invoice:
    - TotalAmountExtractor: "Total Amount:", "Balance Due:", Arabic total,
      or the first currency-marked number
    - SubtotalExtractor: "Subtotal:", "Sub Total:", Arabic subtotal
    - VatAmountExtractor: explicit VAT/Tax lines only

When no VAT line yields an amount, derive_vat() computes it from the total
and subtotal. The assembler runs that step after the other fields so each
extractor stays a pure function of the lines.

Author: ML Engineering Team
"""

from decimal import Decimal
from typing import Optional, Sequence, Tuple

from config import get_config
from src.postprocessor.normalizers import AmountNormalizer
from src.utils.logger import get_logger
from .patterns import (
    AMOUNT,
    AMOUNT_RE,
    CURRENCY,
    CURRENCY_AMOUNT_RE,
    PatternRule,
    contains_any,
    last_group,
    scan_lines,
)

# Initialize module logger
logger = get_logger(__name__)

ZERO = Decimal("0")

# VAT provenance recorded on the result
VAT_SOURCE_EXPLICIT = "explicit"
VAT_SOURCE_DIFFERENCE = "difference"
VAT_SOURCE_ESTIMATED = "estimated"
VAT_SOURCE_NONE = "none"

TOTAL_PATTERNS = (
    PatternRule("total-amount", rf"Total\s*Amount\s*:?\s*{CURRENCY}?\s*({AMOUNT})"),
    PatternRule("balance-due", rf"Balance\s*Due\s*:?\s*{CURRENCY}?\s*({AMOUNT})"),
    PatternRule("arabic-total", rf"المجموع\s*:?\s*{CURRENCY}?\s*({AMOUNT})"),
    PatternRule("currency-amount", rf"{CURRENCY}({AMOUNT})"),
)

SUBTOTAL_PATTERNS = (
    PatternRule("subtotal", rf"Subtotal\s*:?\s*{CURRENCY}?\s*({AMOUNT})"),
    PatternRule("sub-total", rf"Sub\s*Total\s*:?\s*{CURRENCY}?\s*({AMOUNT})"),
    PatternRule("arabic-subtotal", rf"المجموع\s*الفرعي\s*:?\s*{CURRENCY}?\s*({AMOUNT})"),
)

# Percentage-tagged rules come first; with more than one group the last
# group is the amount.
VAT_PATTERNS = (
    PatternRule(
        "tax-bracketed-percent",
        rf"(?:VAT|Tax|ضريبة)\s*\((\d+)\s*%\)\s*:?\s*{CURRENCY}?\s*({AMOUNT})",
    ),
    PatternRule(
        "tax-percent",
        rf"(?:VAT|Tax|ضريبة)\s*(\d+)\s*%\s*:?\s*{CURRENCY}?\s*({AMOUNT})",
    ),
    PatternRule("vat-currency", rf"VAT.*?{CURRENCY}({AMOUNT})"),
    PatternRule("vat-colon", rf"VAT\s*:?\s*{CURRENCY}?({AMOUNT})"),
    PatternRule("arabic-tax", rf"ضريبة.*?{CURRENCY}?({AMOUNT})"),
    PatternRule("tax", rf"Tax.*?{CURRENCY}?({AMOUNT})"),
)

TAX_LINE_TERMS = ("VAT", "Tax", "ضريبة")


class AmountFieldExtractor:
    """
    Base class for a money field read from an ordered pattern table.

    Subclasses set `field_name` and `patterns`. The first capture that
    parses as a non-negative decimal wins; otherwise the field is 0.
    """

    field_name = "amount"
    patterns: Tuple[PatternRule, ...] = ()

    def __init__(self, amount_normalizer: Optional[AmountNormalizer] = None) -> None:
        self.amount_normalizer = amount_normalizer or AmountNormalizer()

    def extract(self, lines: Sequence[str]) -> Decimal:
        found = self.find(lines)
        return found if found is not None else ZERO

    def find(self, lines: Sequence[str]) -> Optional[Decimal]:
        candidate = scan_lines(lines, self.patterns, self._interpret)
        if candidate is None:
            logger.debug(f"No {self.field_name} found")
            return None
        logger.info(
            f"{self.field_name} {candidate.value} found by "
            f"'{candidate.rule.name}' in line: {candidate.line}"
        )
        return candidate.value

    def _interpret(self, match, line: str) -> Optional[Decimal]:
        return self.amount_normalizer.to_decimal(match.group(1))


class TotalAmountExtractor(AmountFieldExtractor):
    """
    Extracts the invoice total.

    Example:
        >>> TotalAmountExtractor().extract(["Total Amount: $115.00"])
        Decimal('115.00')
    """

    field_name = "total amount"
    patterns = TOTAL_PATTERNS


class SubtotalExtractor(AmountFieldExtractor):
    """Extracts the pre-tax subtotal."""

    field_name = "subtotal"
    patterns = SUBTOTAL_PATTERNS


class VatAmountExtractor:
    """
    Reads an explicit VAT amount from VAT/Tax lines.

    For each line mentioning VAT, Tax or the Arabic word for tax, the
    pattern table is tried; then any currency-marked number on the line;
    then any bare number above `bare_number_threshold`. A single-group
    match is only trusted above `single_group_threshold` or when the line
    carries a currency mark, so a lone percentage is not read as an amount.

    Attributes:
        single_group_threshold: Minimum single-group value without a currency mark.
        bare_number_threshold: Minimum value for an unlabeled number.

    Example:
        >>> VatAmountExtractor().find(["VAT (15%): $93.00"])
        Decimal('93.00')
    """

    def __init__(
        self,
        single_group_threshold: Optional[Decimal] = None,
        bare_number_threshold: Optional[Decimal] = None,
        amount_normalizer: Optional[AmountNormalizer] = None,
    ) -> None:
        if single_group_threshold is None:
            single_group_threshold = get_config("extraction.vat.single_group_threshold", 50)
        if bare_number_threshold is None:
            bare_number_threshold = get_config("extraction.vat.bare_number_threshold", 30)
        self.single_group_threshold = Decimal(str(single_group_threshold))
        self.bare_number_threshold = Decimal(str(bare_number_threshold))
        self.amount_normalizer = amount_normalizer or AmountNormalizer()

    def find(self, lines: Sequence[str]) -> Optional[Decimal]:
        """
        Return the first explicit VAT amount, or None.

        Args:
            lines: Normalized OCR lines.

        Returns:
            VAT amount read from the text, or None when no VAT line has one.
        """
        for line in lines:
            if not contains_any(line, TAX_LINE_TERMS):
                continue
            amount = self._from_line(line)
            if amount is not None:
                logger.info(f"VAT amount {amount} found in line: {line}")
                return amount
        return None

    def _from_line(self, line: str) -> Optional[Decimal]:
        to_decimal = self.amount_normalizer.to_decimal

        for rule in VAT_PATTERNS:
            match = rule.search(line)
            if match is None:
                continue
            if rule.group_count > 1:
                amount = to_decimal(last_group(match))
                if amount is not None:
                    return amount
            else:
                amount = to_decimal(match.group(1))
                if amount is not None and (
                    amount > self.single_group_threshold or self._has_currency(line)
                ):
                    return amount
                logger.debug(f"VAT rule '{rule.name}' value {amount} rejected in line: {line}")

        for match in CURRENCY_AMOUNT_RE.finditer(line):
            amount = to_decimal(match.group(1))
            if amount is not None:
                return amount

        for match in AMOUNT_RE.finditer(line):
            amount = to_decimal(match.group(1))
            if amount is not None and amount > self.bare_number_threshold:
                return amount

        return None

    def _has_currency(self, line: str) -> bool:
        return any(symbol in line for symbol in self.amount_normalizer.CURRENCY_SYMBOLS)


def derive_vat(
    total: Decimal,
    subtotal: Decimal,
    rate: Decimal
) -> Tuple[Decimal, str]:
    """
    Derive VAT when the text states none.

    The difference total - subtotal is used when both are positive and the
    total is larger. Otherwise VAT is estimated from a tax-inclusive total
    as total * rate / (1 + rate), rounded to 2 places.

    Args:
        total: Extracted total amount.
        subtotal: Extracted subtotal.
        rate: Tax rate as a fraction (0.15 for 15%).

    Returns:
        Tuple of (vat_amount, source) where source is "difference",
        "estimated" or "none".

    Example:
        >>> derive_vat(Decimal("115.00"), Decimal("100.00"), Decimal("0.15"))
        (Decimal('15.00'), 'difference')
        >>> derive_vat(Decimal("115.00"), Decimal("0"), Decimal("0.15"))
        (Decimal('15.00'), 'estimated')
    """
    if total > 0 and subtotal > 0 and total > subtotal:
        return total - subtotal, VAT_SOURCE_DIFFERENCE

    if total > 0:
        estimated = AmountNormalizer.round_money(total * rate / (1 + rate))
        if estimated > 0:
            return estimated, VAT_SOURCE_ESTIMATED

    return ZERO, VAT_SOURCE_NONE
