"""
Input Handler Module for Invoice OCR Extraction.

This module provides functionality for:
    - Validating input files
    - Rasterizing the first page of a PDF
    - Loading images and converting them to grayscale for OCR

Supported formats:
    - PDF
    - Images: PNG, JPG, JPEG, TIF, TIFF, BMP

Author: ML Engineering Team
"""

from .handler import InputHandler, InputResult

__all__ = ['InputHandler', 'InputResult']
