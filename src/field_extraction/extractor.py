"""
Invoice Text Extractor Module.

This module provides InvoiceTextExtractor, the record assembler of the
field extraction core. It normalizes raw OCR text into lines, runs every
field extractor over the same lines, derives VAT from the totals when the
text states none, and packages the values into an immutable
InvoiceExtractionResult.

Flow:
    raw text → normalize_lines → invoice number, customer, date,
    total, subtotal, VAT, line items → VAT post-pass → result

Extraction is a pure function of the input text and the injected clock:
no state is kept between calls and no I/O is performed.

Author: ML Engineering Team
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from config import get_config
from src.utils.logger import get_logger
from .amounts import (
    SubtotalExtractor,
    TotalAmountExtractor,
    VatAmountExtractor,
    VAT_SOURCE_EXPLICIT,
    derive_vat,
)
from .customer_name import CustomerNameExtractor
from .extraction_result import InvoiceExtractionResult
from .invoice_date import InvoiceDateExtractor
from .invoice_number import InvoiceNumberExtractor
from .line_items import LineItemExtractor, ServiceCatalog
from .line_normalizer import normalize_lines

# Initialize module logger
logger = get_logger(__name__)


class InvoiceTextExtractor:
    """
    Heuristic extractor turning OCR text into an invoice record.

    The extractor never raises on bad input: every field has a default
    and unparsable tokens are treated as non-matches.

    Attributes:
        clock: Zero-argument callable returning the current datetime.
        max_text_length: Input beyond this many characters is ignored.
        vat_rate: Tax rate used to estimate VAT from a total.

    Example:
        >>> extractor = InvoiceTextExtractor()
        >>> result = extractor.extract(ocr_text)
        >>> print(result.invoice_number, result.total_amount)
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        max_text_length: Optional[int] = None,
        vat_rate: Optional[Decimal] = None,
        service_catalog: Optional[ServiceCatalog] = None,
        invoice_number_extractor: Optional[InvoiceNumberExtractor] = None,
        customer_name_extractor: Optional[CustomerNameExtractor] = None,
        invoice_date_extractor: Optional[InvoiceDateExtractor] = None,
        total_extractor: Optional[TotalAmountExtractor] = None,
        subtotal_extractor: Optional[SubtotalExtractor] = None,
        vat_extractor: Optional[VatAmountExtractor] = None,
        line_item_extractor: Optional[LineItemExtractor] = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            clock: Source of "now" for the fallback invoice number and the
                  default date. Defaults to datetime.now.
            max_text_length: Character limit applied before parsing.
                  If None, uses config.
            vat_rate: Rate for VAT estimation. If None, uses config.
            service_catalog: Known services for line items. If None, uses config.
            *_extractor: Replacement field extractors.
        """
        self.clock = clock or datetime.now
        if max_text_length is None:
            max_text_length = get_config("extraction.max_text_length", 100000)
        self.max_text_length = max_text_length
        if vat_rate is None:
            vat_rate = get_config("extraction.vat.default_rate", 0.15)
        self.vat_rate = Decimal(str(vat_rate))

        self.invoice_number_extractor = invoice_number_extractor or InvoiceNumberExtractor()
        self.customer_name_extractor = customer_name_extractor or CustomerNameExtractor()
        self.invoice_date_extractor = invoice_date_extractor or InvoiceDateExtractor()
        self.total_extractor = total_extractor or TotalAmountExtractor()
        self.subtotal_extractor = subtotal_extractor or SubtotalExtractor()
        self.vat_extractor = vat_extractor or VatAmountExtractor()
        self.line_item_extractor = line_item_extractor or LineItemExtractor(
            catalog=service_catalog
        )

        logger.debug(
            f"InvoiceTextExtractor initialized (max_text_length={self.max_text_length}, "
            f"vat_rate={self.vat_rate})"
        )

    def extract(self, text: Optional[str]) -> InvoiceExtractionResult:
        """
        Extract a complete invoice record from OCR text.

        Args:
            text: Raw OCR text; may be empty, noisy or mixed-script.

        Returns:
            Fully populated InvoiceExtractionResult.
        """
        text = text or ""
        if len(text) > self.max_text_length:
            logger.warning(
                f"OCR text has {len(text)} characters, "
                f"only the first {self.max_text_length} are parsed"
            )
            text = text[:self.max_text_length]

        lines = normalize_lines(text)
        now = self.clock()
        logger.debug(f"Parsing {len(lines)} OCR line(s)")

        invoice_number = self.invoice_number_extractor.extract(lines, now)
        customer_name = self.customer_name_extractor.extract(lines)
        invoice_date = self.invoice_date_extractor.extract(lines, now.date())
        total_amount = self.total_extractor.extract(lines)
        subtotal_amount = self.subtotal_extractor.extract(lines)
        vat_amount, vat_source = self.resolve_vat(lines, total_amount, subtotal_amount)
        line_items = self.line_item_extractor.extract(lines)

        result = InvoiceExtractionResult(
            invoice_number=invoice_number,
            invoice_date=invoice_date,
            customer_name=customer_name,
            total_amount=total_amount,
            vat_amount=vat_amount,
            line_items=tuple(line_items),
            subtotal_amount=subtotal_amount,
            vat_source=vat_source,
        )

        logger.info(
            f"Parsed invoice: Number={result.invoice_number}, "
            f"Customer={result.customer_name}, Total={result.total_amount}, "
            f"VAT={result.vat_amount} ({result.vat_source}), "
            f"Items={len(result.line_items)}"
        )
        return result

    def resolve_vat(self, lines, total_amount: Decimal, subtotal_amount: Decimal):
        """
        Read VAT from the text, or derive it from total and subtotal.

        Returns:
            Tuple of (vat_amount, vat_source).
        """
        explicit = self.vat_extractor.find(lines)
        if explicit is not None:
            return explicit, VAT_SOURCE_EXPLICIT

        vat_amount, vat_source = derive_vat(total_amount, subtotal_amount, self.vat_rate)
        if vat_amount > 0:
            logger.warning(f"No VAT line found, VAT {vat_amount} derived by {vat_source}")
        return vat_amount, vat_source
