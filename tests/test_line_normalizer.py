"""
Tests for splitting OCR text into normalized lines.
"""

from src.field_extraction import normalize_lines


def test_lines_are_trimmed_and_blank_lines_dropped():
    """Whitespace around lines and empty lines disappear"""
    text = "  Invoice # 1001 \r\n\n   \n Hosting 1 $100 $100\n"
    assert normalize_lines(text) == ["Invoice # 1001", "Hosting 1 $100 $100"]


def test_document_order_is_preserved():
    text = "third?\nfirst?\nsecond?"
    assert normalize_lines(text) == ["third?", "first?", "second?"]


def test_mixed_scripts_survive():
    text = "فاتورة رقم 1001\nCustomer: Ali"
    assert normalize_lines(text) == ["فاتورة رقم 1001", "Customer: Ali"]


def test_empty_input_yields_no_lines():
    assert normalize_lines("") == []
    assert normalize_lines(None) == []
    assert normalize_lines("\n\n  \t\n") == []
