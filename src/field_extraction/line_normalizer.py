"""
Line Normalizer Module.

Splits raw OCR text into the ordered sequence of trimmed, non-empty lines
that every field extractor works on. OCR destroys page layout, so line
order is the only structural signal that survives.

Author: ML Engineering Team
"""

from typing import List, Optional


def normalize_lines(text: Optional[str]) -> List[str]:
    """
    Split OCR text into trimmed, non-empty lines.

    Args:
        text: Raw OCR text. None and empty strings are accepted.

    Returns:
        Lines in document order, without surrounding whitespace.

    Example:
        >>> normalize_lines("  Invoice # 1001 \\r\\n\\n Hosting 1 $100 $100\\n")
        ['Invoice # 1001', 'Hosting 1 $100 $100']
    """
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]
