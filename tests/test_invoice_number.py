"""
Tests for the invoice number cascade.
"""

import pytest

from src.field_extraction.invoice_number import InvoiceNumberExtractor


@pytest.fixture
def extractor():
    return InvoiceNumberExtractor()


class TestExplicitPatternPass:

    def test_invoice_hash(self, extractor, fixed_now):
        assert extractor.extract(["ACME Hosting", "Invoice # 482910"], fixed_now) == "482910"

    @pytest.mark.parametrize("line, expected", [
        ("Invoice Number: 77120", "77120"),
        ("INV-55012", "55012"),
        ("No. 4471", "4471"),
        ("Bill # 9031", "9031"),
        ("Receipt #3310", "3310"),
        ("فاتورة رقم 1001", "1001"),
        ("رقم الفاتورة: 8812", "8812"),
        ("nvoice 66123", "66123"),
        ("3390 Invoice", "3390"),
    ])
    def test_labels(self, extractor, line, expected):
        assert extractor.explicit_pattern_pass([line]) == expected

    def test_first_line_wins(self, extractor):
        lines = ["Order # 5001", "Invoice # 482910"]
        assert extractor.explicit_pattern_pass(lines) == "5001"

    def test_year_candidate_rejected(self, extractor):
        assert extractor.explicit_pattern_pass(["Invoice 2025"]) is None


class TestLaterPasses:

    def test_invoice_word_line(self, extractor):
        lines = ["Invoice Date 2025 12345"]
        assert extractor.explicit_pattern_pass(lines) is None
        assert extractor.invoice_word_pass(lines) == "12345"
        assert extractor.find(lines) == "12345"

    def test_garbled_invoice_word_line(self, extractor):
        assert extractor.invoice_word_pass(["nvoice ref 77812"]) == "77812"

    def test_keyword_line(self, extractor):
        lines = ["Bill ref 55821"]
        assert extractor.invoice_word_pass(lines) is None
        assert extractor.keyword_line_pass(lines) == "55821"

    def test_header_position(self, extractor):
        lines = ["ACME Hosting", "48291", "Thank you"]
        assert extractor.header_pass(lines) == "48291"
        assert extractor.find(lines) == "48291"

    def test_header_skips_price_lines(self, extractor):
        assert extractor.header_pass(["Balance 48291"]) is None

    def test_header_only_reads_first_lines(self, extractor):
        lines = ["Acme", "Street", "City", "Country", "Phone", "48291"]
        assert extractor.header_pass(lines) is None

    def test_magnitude_fallback(self, extractor):
        lines = ["Acme", "Street", "City", "Country", "Phone", "Ref 12345678"]
        assert extractor.magnitude_pass(lines) == "12345678"
        assert extractor.find(lines) == "12345678"


class TestFallback:

    def test_price_line_never_yields_number(self, extractor, fixed_now):
        number = extractor.extract(["Total Amount: $482910.00"], fixed_now)
        assert number != "482910"
        assert number == "INV-20260121143022"

    def test_year_never_returned(self, extractor, fixed_now):
        assert extractor.extract(["Invoice 2025"], fixed_now) == "INV-20260121143022"

    def test_phone_number_rejected(self, extractor, fixed_now):
        assert extractor.extract(["Tel 0501234567"], fixed_now) == "INV-20260121143022"

    def test_empty_lines(self, extractor, fixed_now):
        assert extractor.extract([], fixed_now) == "INV-20260121143022"

    def test_custom_prefix(self, fixed_now):
        extractor = InvoiceNumberExtractor(fallback_prefix="GEN-")
        assert extractor.extract([], fixed_now) == "GEN-20260121143022"

    def test_zero_override_is_kept(self):
        extractor = InvoiceNumberExtractor(header_lines=0, fallback_lines=0)
        assert extractor.header_lines == 0
        assert extractor.fallback_lines == 0
        assert extractor.header_pass(["4471"]) is None

    def test_derived_numbers_respect_length_limits(self, extractor, fixed_now):
        lines = ["Invoice # 12", "Invoice # 123456789012", "Invoice # 4471"]
        number = extractor.extract(lines, fixed_now)
        assert number == "4471"
        assert 3 <= len(number) <= 10
