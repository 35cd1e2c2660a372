"""
Post-Processing Module for Invoice OCR Extraction.

This module provides the value normalizers used by the field
extractors:
    - Date parsing
    - Amount/currency parsing into Decimal

Author: ML Engineering Team
"""

from .normalizers import DateNormalizer, AmountNormalizer

__all__ = [
    'DateNormalizer',
    'AmountNormalizer'
]
