"""
Tests for invoice date extraction.
"""

from datetime import date

import pytest

from src.field_extraction.invoice_date import InvoiceDateExtractor

TODAY = date(2026, 1, 21)


@pytest.fixture
def extractor():
    return InvoiceDateExtractor()


@pytest.mark.parametrize("lines, expected", [
    (["Invoice Date: Feb 3, 2026"], date(2026, 2, 3)),
    (["Date: Jan 21, 2026"], date(2026, 1, 21)),
    (["تاريخ الفاتورة: 2026-02-15"], date(2026, 2, 15)),
    (["Issued Mar 9, 2026 by ACME"], date(2026, 3, 9)),
    (["Issued 03/15/2026"], date(2026, 3, 15)),
    (["Printed 2026-02-05"], date(2026, 2, 5)),
])
def test_date_patterns(extractor, lines, expected):
    assert extractor.extract(lines, TODAY) == expected


def test_unparsable_label_does_not_stop_scan(extractor):
    lines = ["Date: pending", "Due 2026-03-01"]
    assert extractor.extract(lines, TODAY) == date(2026, 3, 1)


def test_first_date_in_document_order(extractor):
    lines = ["Printed 2026-02-05", "Invoice Date: Feb 3, 2026"]
    assert extractor.extract(lines, TODAY) == date(2026, 2, 5)


def test_defaults_to_today(extractor):
    assert extractor.extract(["no dates here"], TODAY) == TODAY
    assert extractor.extract(["Date: 2026"], TODAY) == TODAY
    assert extractor.extract([], TODAY) == TODAY


def test_find_returns_none_without_date(extractor):
    assert extractor.find(["Hosting 1 $100.00 $100.00"]) is None


def test_partial_date_completed_from_today(extractor):
    today = date(2020, 1, 21)
    assert extractor.extract(["Date: March 5"], today) == date(2020, 3, 5)
    assert extractor.extract(["Date: 10:30"], today) == today
