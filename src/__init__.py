"""
Invoice OCR Text Extraction - Source Package.

This package contains the modules that turn a scanned invoice, or the
OCR text already recognised from one, into a structured invoice record.

Modules:
    - input_handler: PDF and image loading
    - ocr_engine: Tesseract text recognition
    - field_extraction: Rule-based field extraction from OCR text
    - postprocessor: Date and amount normalization
    - utils: Logging, exceptions and helpers

Architecture:
    Input → OCR → Field Extraction → JSON record
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'input_handler',
    'ocr_engine',
    'field_extraction',
    'postprocessor',
    'utils'
]
