"""
OCR Engine Module for Invoice OCR Extraction.

This module provides the Tesseract wrapper that produces the raw text
handed to the field extraction core.

Author: ML Engineering Team
"""

from .engine import OCREngine

__all__ = ['OCREngine']
