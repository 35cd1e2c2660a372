"""
Utility Module for Invoice OCR Extraction.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Custom exceptions
    - File and timestamp helpers
"""

from .logger import setup_logger, get_logger, set_verbosity
from .helpers import ensure_directory, get_file_extension, generate_timestamp

__all__ = [
    'setup_logger',
    'get_logger',
    'set_verbosity',
    'ensure_directory',
    'get_file_extension',
    'generate_timestamp'
]
