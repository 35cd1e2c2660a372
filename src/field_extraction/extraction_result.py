"""
Extraction Result Data Classes.

This module defines the immutable value objects produced by the field
extraction core and handed to the persistence layer.

Classes:
    LineItem: One billable row of an invoice
    InvoiceExtractionResult: The complete structured invoice record

Author: ML Engineering Team
"""

import json
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Tuple

from src.postprocessor.normalizers import AmountNormalizer
from src.utils.exceptions import ValidationError

TWO_PLACES = Decimal("0.01")


def _money(value: Decimal) -> str:
    """Render a decimal with two places for serialisation."""
    return str(value.quantize(TWO_PLACES))


def _require_non_negative(field_name: str, value) -> None:
    if value < 0:
        raise ValidationError(field_name, str(value), "must not be negative")


def _require_amount(field_name: str, value: Decimal) -> None:
    _require_non_negative(field_name, value)
    if value.adjusted() >= AmountNormalizer.MAX_INTEGER_DIGITS:
        raise ValidationError(field_name, str(value), "has too many digits")


@dataclass(frozen=True)
class LineItem:
    """
    One billable entry of an invoice.

    Attributes:
        description: Service or product text (non-empty)
        quantity: Number of units
        unit_price: Price per unit
        line_total: Amount billed for the row

    Example:
        >>> item = LineItem("Hosting", 1, Decimal("100.00"), Decimal("100.00"))
        >>> item.to_dict()["unit_price"]
        '100.00'
    """
    description: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    def __post_init__(self):
        if not self.description or not self.description.strip():
            raise ValidationError("description", self.description, "must not be empty")
        _require_non_negative("quantity", self.quantity)
        _require_amount("unit_price", self.unit_price)
        _require_amount("line_total", self.line_total)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            'description': self.description,
            'quantity': self.quantity,
            'unit_price': _money(self.unit_price),
            'line_total': _money(self.line_total),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LineItem':
        return cls(
            description=data['description'],
            quantity=int(data.get('quantity', 0)),
            unit_price=Decimal(str(data.get('unit_price', '0'))),
            line_total=Decimal(str(data.get('line_total', '0'))),
        )


@dataclass(frozen=True)
class InvoiceExtractionResult:
    """
    Structured invoice record recovered from OCR text.

    Every field is always populated: extractors fall back to defaults
    (generated invoice number, current date, "Unknown Customer", zero
    amounts) instead of leaving a field unset.

    Attributes:
        invoice_number: Invoice identifier, never empty
        invoice_date: Date the invoice was issued
        customer_name: Name of the billed customer
        total_amount: Invoice total
        vat_amount: VAT read from the text or derived from the totals
        line_items: Billable rows in document order
        subtotal_amount: Pre-tax subtotal (0 when not stated)
        vat_source: How vat_amount was obtained: "explicit",
            "difference", "estimated" or "none"

    Example:
        >>> result = InvoiceExtractionResult(
        ...     invoice_number="482910",
        ...     invoice_date=date(2026, 1, 21),
        ...     customer_name="Ali Mohamed",
        ...     total_amount=Decimal("115.00"),
        ...     vat_amount=Decimal("15.00"),
        ... )
        >>> print(result.to_json())
    """
    invoice_number: str
    invoice_date: date
    customer_name: str
    total_amount: Decimal
    vat_amount: Decimal
    line_items: Tuple[LineItem, ...] = field(default_factory=tuple)
    subtotal_amount: Decimal = Decimal("0")
    vat_source: str = "none"

    def __post_init__(self):
        if not self.invoice_number:
            raise ValidationError("invoice_number", self.invoice_number, "must not be empty")
        if not self.customer_name:
            raise ValidationError("customer_name", self.customer_name, "must not be empty")
        _require_amount("total_amount", self.total_amount)
        _require_amount("vat_amount", self.vat_amount)
        _require_amount("subtotal_amount", self.subtotal_amount)
        # Lists are frozen into tuples so the record stays immutable
        object.__setattr__(self, 'line_items', tuple(self.line_items))

    @property
    def line_items_total(self) -> Decimal:
        """Sum of line totals across all items."""
        return sum((item.line_total for item in self.line_items), Decimal("0"))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Dates are ISO strings and amounts are 2-place strings so the
        output is JSON-safe without losing decimal precision.
        """
        return {
            'invoice_number': self.invoice_number,
            'invoice_date': self.invoice_date.isoformat(),
            'customer_name': self.customer_name,
            'total_amount': _money(self.total_amount),
            'subtotal_amount': _money(self.subtotal_amount),
            'vat_amount': _money(self.vat_amount),
            'vat_source': self.vat_source,
            'line_items': [item.to_dict() for item in self.line_items],
        }

    def to_json(self, indent: int = 2) -> str:
        """
        Convert to JSON string.

        Args:
            indent: JSON indentation level.

        Returns:
            JSON string representation.
        """
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InvoiceExtractionResult':
        """
        Create an InvoiceExtractionResult from dictionary.

        Args:
            data: Dictionary as produced by to_dict().

        Returns:
            InvoiceExtractionResult instance.
        """
        return cls(
            invoice_number=data['invoice_number'],
            invoice_date=date.fromisoformat(data['invoice_date']),
            customer_name=data['customer_name'],
            total_amount=Decimal(str(data.get('total_amount', '0'))),
            vat_amount=Decimal(str(data.get('vat_amount', '0'))),
            line_items=tuple(LineItem.from_dict(item) for item in data.get('line_items', [])),
            subtotal_amount=Decimal(str(data.get('subtotal_amount', '0'))),
            vat_source=data.get('vat_source', 'none'),
        )

    def __repr__(self) -> str:
        return (
            f"InvoiceExtractionResult("
            f"invoice={self.invoice_number}, "
            f"customer={self.customer_name}, "
            f"total={self.total_amount}, "
            f"vat={self.vat_amount}, "
            f"items={len(self.line_items)})"
        )
