"""
Field Extraction Module for Invoice OCR.

This module recovers a structured invoice record from raw, noisy,
mixed-script (Latin + Arabic) OCR text using keyword patterns,
plausibility filters and fallback cascades.

Features:
    - Line normalization
    - Invoice number, customer, date, total, subtotal and VAT extraction
    - Line item section parsing with a known-service catalog
    - Immutable, always fully populated result

Author: ML Engineering Team
"""

from .extractor import InvoiceTextExtractor
from .extraction_result import InvoiceExtractionResult, LineItem
from .line_items import ServiceCatalog
from .line_normalizer import normalize_lines

__all__ = [
    'InvoiceTextExtractor',
    'InvoiceExtractionResult',
    'LineItem',
    'ServiceCatalog',
    'normalize_lines',
]
