"""
Plausibility Filters Module.

Small predicates that accept or reject a syntactically valid candidate
given the line it was found on. They are shared by several extractors
and are independent of any cascade.

Author: ML Engineering Team
"""

import unicodedata
from typing import Sequence

from .patterns import contains_any

# Words that mark a line as talking about the invoice itself
INVOICE_KEYWORDS = ("invoice", "فاتورة", "#", "bill", "receipt")

# Words that mark a line as talking about money
PRICE_KEYWORDS = ("$", "total", "amount", "price", "cost", "subtotal", "balance", "due")

# Invoice vocabulary that never appears in a person's name
NAME_STOP_WORDS = (
    "invoice", "date", "total", "amount", "vat",
    "subtotal", "description", "quantity", "price",
)

# Calendar years that OCR often isolates as standalone numbers
BLOCKED_YEARS = ("2024", "2025", "2026")

MIN_INVOICE_NUMBER_LENGTH = 3
MAX_INVOICE_NUMBER_LENGTH = 10
PHONE_NUMBER_LENGTH = 10


def is_valid_invoice_number(
    number: str,
    line: str,
    min_length: int = MIN_INVOICE_NUMBER_LENGTH,
    max_length: int = MAX_INVOICE_NUMBER_LENGTH,
    phone_number_length: int = PHONE_NUMBER_LENGTH,
) -> bool:
    """
    Decide whether a digit token can be the invoice number.

    Rules, in order:
        1. Reject tokens shorter than min_length or longer than max_length.
        2. Reject 4-digit tokens starting with "20" and the blocked years.
        3. Accept if the line carries an invoice keyword.
        4. Reject if the line carries a price keyword.
        5. Reject tokens of phone_number_length digits or more.

    Args:
        number: Candidate digit token.
        line: Line the token was found on.
        min_length: Shortest acceptable token.
        max_length: Longest acceptable token.
        phone_number_length: Length from which a token looks like a phone number.

    Returns:
        True if the token is plausible.

    Example:
        >>> is_valid_invoice_number("482910", "Invoice # 482910")
        True
        >>> is_valid_invoice_number("482910", "Total Amount: $482910.00")
        False
    """
    if not number or len(number) < min_length or len(number) > max_length:
        return False

    if len(number) == 4 and number.startswith("20"):
        return False
    if number in BLOCKED_YEARS:
        return False

    has_invoice_keyword = contains_any(line, INVOICE_KEYWORDS)
    if has_invoice_keyword:
        return True

    if contains_any(line, PRICE_KEYWORDS):
        return False

    if len(number) >= phone_number_length:
        return False

    return True


def is_obviously_not_invoice_number(
    number: str,
    line: str,
    max_length: int = MAX_INVOICE_NUMBER_LENGTH,
) -> bool:
    """
    Exclusion filter for numbers found without an explicit label.

    A line with an invoice keyword is never excluded. Otherwise the number
    is excluded when its line mentions money, VAT or a percentage, looks
    like a date (a "/" or "-" on a line longer than 8 characters), or when
    the number is longer than max_length digits.

    Args:
        number: Candidate digit token.
        line: Line the token was found on.
        max_length: Longest acceptable token.

    Returns:
        True if the number must be excluded.
    """
    if contains_any(line, INVOICE_KEYWORDS):
        return False

    if contains_any(line, PRICE_KEYWORDS):
        return True

    lowered = line.lower()
    if "vat" in lowered or "%" in lowered:
        return True

    if ("/" in line or "-" in line) and len(line) > 8:
        return True

    return len(number) > max_length


def is_numeric_or_symbol(text: str) -> bool:
    """
    True when text holds nothing but digits, punctuation, symbols or spaces.

    Example:
        >>> is_numeric_or_symbol("12/05 - $")
        True
        >>> is_numeric_or_symbol("Ali 2")
        False
    """
    if not text or not text.strip():
        return True
    for char in text:
        if char.isspace():
            continue
        category = unicodedata.category(char)
        if category == "Nd" or category[0] in ("P", "S"):
            continue
        return False
    return True


def is_likely_person_name(
    text: str,
    min_length: int = 3,
    max_length: int = 50,
    min_letter_ratio: float = 0.7,
    stop_words: Sequence[str] = NAME_STOP_WORDS,
) -> bool:
    """
    Structural check for a line that looks like a person's name.

    The line must be min_length..max_length characters long, mostly
    letters, free of invoice vocabulary, and split into 2 to 4 words that
    each start with a letter. Works for Latin and Arabic script.

    Args:
        text: Candidate line.
        min_length: Shortest acceptable line.
        max_length: Longest acceptable line.
        min_letter_ratio: Minimum share of letters among all characters.
        stop_words: Vocabulary that disqualifies the line.

    Returns:
        True if the line looks like a name.

    Example:
        >>> is_likely_person_name("Sara Ahmed")
        True
        >>> is_likely_person_name("Invoice Date")
        False
    """
    if not text or not text.strip():
        return False
    if len(text) < min_length or len(text) > max_length:
        return False

    letter_count = sum(1 for char in text if char.isalpha())
    if letter_count < len(text) * min_letter_ratio:
        return False

    if contains_any(text, stop_words):
        return False

    words = text.split()
    if not 2 <= len(words) <= 4:
        return False
    return all(word[0].isalpha() for word in words)
