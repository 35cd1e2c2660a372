"""
Tests for the immutable result value objects.
"""

import dataclasses
import json
from datetime import date
from decimal import Decimal

import pytest

from src.field_extraction import InvoiceExtractionResult, LineItem
from src.utils.exceptions import ValidationError


def _result(**overrides):
    fields = dict(
        invoice_number="482910",
        invoice_date=date(2026, 1, 21),
        customer_name="محمد علي",
        total_amount=Decimal("115"),
        vat_amount=Decimal("15"),
        line_items=[LineItem("Hosting", 1, Decimal("100"), Decimal("100"))],
        subtotal_amount=Decimal("100"),
        vat_source="difference",
    )
    fields.update(overrides)
    return InvoiceExtractionResult(**fields)


class TestLineItem:

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            LineItem("Hosting", -1, Decimal("100"), Decimal("100"))
        with pytest.raises(ValidationError):
            LineItem("Hosting", 1, Decimal("-100"), Decimal("100"))

    def test_empty_description_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            LineItem("  ", 1, Decimal("1"), Decimal("1"))
        assert exc_info.value.details["field"] == "description"

    def test_to_dict_and_back(self):
        item = LineItem("Hosting", 2, Decimal("100"), Decimal("200"))
        data = item.to_dict()
        assert data == {
            "description": "Hosting",
            "quantity": 2,
            "unit_price": "100.00",
            "line_total": "200.00",
        }
        assert LineItem.from_dict(data) == item


class TestInvoiceExtractionResult:

    def test_line_items_frozen_as_tuple(self):
        result = _result()
        assert isinstance(result.line_items, tuple)

    def test_immutable(self):
        result = _result()
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.total_amount = Decimal("1")

    @pytest.mark.parametrize("field_name", ["total_amount", "vat_amount", "subtotal_amount"])
    def test_negative_amounts_rejected(self, field_name):
        with pytest.raises(ValidationError):
            _result(**{field_name: Decimal("-0.01")})

    @pytest.mark.parametrize("field_name", ["total_amount", "vat_amount", "subtotal_amount"])
    def test_overlong_amounts_rejected(self, field_name):
        with pytest.raises(ValidationError) as exc_info:
            _result(**{field_name: Decimal("9" * 29)})
        assert exc_info.value.details["field"] == field_name

    def test_empty_invoice_number_rejected(self):
        with pytest.raises(ValidationError):
            _result(invoice_number="")

    def test_line_items_total(self):
        result = _result(line_items=[
            LineItem("Hosting", 1, Decimal("100"), Decimal("100")),
            LineItem("Domain Name", 1, Decimal("20"), Decimal("20")),
        ])
        assert result.line_items_total == Decimal("120")
        assert _result(line_items=()).line_items_total == Decimal("0")

    def test_to_dict(self):
        data = _result().to_dict()
        assert data["invoice_date"] == "2026-01-21"
        assert data["total_amount"] == "115.00"
        assert data["subtotal_amount"] == "100.00"
        assert data["vat_amount"] == "15.00"
        assert data["vat_source"] == "difference"
        assert data["line_items"][0]["description"] == "Hosting"

    def test_from_dict_restores_result(self):
        result = _result()
        assert InvoiceExtractionResult.from_dict(result.to_dict()) == result

    def test_to_json_keeps_arabic(self):
        text = _result().to_json()
        assert "محمد علي" in text
        assert json.loads(text)["customer_name"] == "محمد علي"

    def test_repr(self):
        assert repr(_result()) == (
            "InvoiceExtractionResult(invoice=482910, customer=محمد علي, "
            "total=115, vat=15, items=1)"
        )
