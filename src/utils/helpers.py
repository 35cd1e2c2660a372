"""
Helper Utilities Module.

This module provides small utility functions shared across the invoice
OCR extraction system.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - generate_timestamp: Generate formatted timestamps
    - validate_file_exists: Check a path points at a regular file
"""

from datetime import datetime
from pathlib import Path
from typing import Union, Optional


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/reports")
        PosixPath('outputs/reports')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the file extension from a filepath.

    Returns the extension in lowercase, including the dot.
    Returns empty string if no extension exists.

    Args:
        filepath: Path to the file.

    Returns:
        Lowercase file extension including dot (e.g., ".pdf").

    Example:
        >>> get_file_extension("scan.PDF")
        '.pdf'
        >>> get_file_extension("noextension")
        ''
    """
    return Path(filepath).suffix.lower()


def generate_timestamp(
    format_str: str = "%Y%m%d_%H%M%S",
    now: Optional[datetime] = None
) -> str:
    """
    Generate a formatted timestamp string.

    Args:
        format_str: strftime format string.
        now: Moment to format. Defaults to the current local time.

    Returns:
        Formatted timestamp string.

    Example:
        >>> generate_timestamp("%Y%m%d%H%M%S", datetime(2026, 1, 21, 14, 30, 22))
        '20260121143022'
    """
    if now is None:
        now = datetime.now()
    return now.strftime(format_str)


def validate_file_exists(filepath: Union[str, Path]) -> bool:
    """
    Check if a file exists and is a regular file.

    Args:
        filepath: Path to check.

    Returns:
        True if file exists and is a regular file.
    """
    path = Path(filepath)
    return path.exists() and path.is_file()
