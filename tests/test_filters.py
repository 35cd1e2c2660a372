"""
Tests for the plausibility filters shared by the extractors.
"""

import pytest

from src.field_extraction.filters import (
    is_likely_person_name,
    is_numeric_or_symbol,
    is_obviously_not_invoice_number,
    is_valid_invoice_number,
)


class TestIsValidInvoiceNumber:
    """Length, year, keyword and phone-number rules"""

    def test_accepts_number_on_invoice_line(self):
        assert is_valid_invoice_number("482910", "Invoice # 482910")

    def test_rejects_number_on_price_line(self):
        assert not is_valid_invoice_number("482910", "Total Amount: $482910.00")

    @pytest.mark.parametrize("number", ["12", "12345678901"])
    def test_length_bounds(self, number):
        assert not is_valid_invoice_number(number, "Invoice # " + number)

    @pytest.mark.parametrize("number", ["2025", "2024", "2026", "2099"])
    def test_years_rejected_even_with_invoice_keyword(self, number):
        assert not is_valid_invoice_number(number, f"Invoice {number}")

    def test_invoice_keyword_overrides_price_keyword(self):
        assert is_valid_invoice_number("5521", "Invoice total 5521")

    def test_phone_length_rejected_without_keyword(self):
        assert not is_valid_invoice_number("0501234567", "Tel 0501234567")

    def test_phone_length_accepted_with_keyword(self):
        assert is_valid_invoice_number("0501234567", "Receipt 0501234567")

    def test_unlabeled_short_number_accepted(self):
        assert is_valid_invoice_number("48291", "48291")

    def test_custom_limits(self):
        assert not is_valid_invoice_number("123456", "Invoice 123456", max_length=5)
        assert is_valid_invoice_number("12", "Invoice 12", min_length=2)


class TestIsObviouslyNotInvoiceNumber:
    """Exclusion filter for unlabeled candidates"""

    def test_invoice_keyword_never_excluded(self):
        assert not is_obviously_not_invoice_number("1001", "Bill 1001 total $5")

    def test_price_line_excluded(self):
        assert is_obviously_not_invoice_number("1500", "Balance 1500")

    def test_vat_and_percent_lines_excluded(self):
        assert is_obviously_not_invoice_number("1500", "vat 1500")
        assert is_obviously_not_invoice_number("1500", "1500 15%")

    def test_date_like_line_excluded(self):
        assert is_obviously_not_invoice_number("2026", "12/05/2026")
        assert is_obviously_not_invoice_number("4829", "ref 4829-A-01")

    def test_short_line_with_dash_kept(self):
        assert not is_obviously_not_invoice_number("4829", "4829-A")

    def test_long_number_excluded(self):
        assert is_obviously_not_invoice_number("12345678901", "12345678901")

    def test_plain_number_kept(self):
        assert not is_obviously_not_invoice_number("48291", "48291")


class TestIsNumericOrSymbol:

    @pytest.mark.parametrize("text", ["12345", "12/05 - $", ":", "   ", ""])
    def test_numeric_and_symbol_text(self, text):
        assert is_numeric_or_symbol(text)

    @pytest.mark.parametrize("text", ["Ali 2", "محمد", "x"])
    def test_text_with_letters(self, text):
        assert not is_numeric_or_symbol(text)


class TestIsLikelyPersonName:

    @pytest.mark.parametrize("text", ["Sara Ahmed", "محمد علي", "Mary Jane Van Dyke"])
    def test_names(self, text):
        assert is_likely_person_name(text)

    def test_invoice_vocabulary_rejected(self):
        assert not is_likely_person_name("Invoice Date")
        assert not is_likely_person_name("Total Due")

    def test_word_count(self):
        assert not is_likely_person_name("Madonna")
        assert not is_likely_person_name("one two three four five")

    def test_mostly_digits_rejected(self):
        assert not is_likely_person_name("Ref 123456")

    def test_words_must_start_with_letters(self):
        assert not is_likely_person_name("Sara 2Ahmed")

    def test_length_bounds(self):
        assert not is_likely_person_name("A B", min_length=4)
        assert not is_likely_person_name("Sara " + "A" * 60)
