"""
OCR Engine Module.

This module wraps Tesseract (through pytesseract) to turn a page image
into the raw text consumed by the field extraction core. Arabic and
English are recognised together and the character set is restricted to
what invoices contain.

Usage:
    from src.ocr_engine import OCREngine

    engine = OCREngine()
    text = engine.extract_text(image)

Requirements:
    - Tesseract OCR installed on the system with the "ara" and "eng" data
    - pytesseract Python package

Author: ML Engineering Team
"""

import time
from typing import Optional

import pytesseract
from PIL import Image

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError

# Initialize module logger
logger = get_logger(__name__)

DEFAULT_WHITELIST = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz$.,:-# "
    "أبتثجحخدذرزسشصضطظعغفقكلمنهويءآإأؤئة"
)


class OCREngine:
    """
    Tesseract OCR engine returning plain text.

    Attributes:
        language: Tesseract language code (e.g., "ara+eng")
        psm: Page Segmentation Mode (1-13)
        char_whitelist: Characters Tesseract may emit

    Example:
        >>> engine = OCREngine()
        >>> text = engine.extract_text(image)
        >>> print(text.splitlines()[0])
    """

    def __init__(
        self,
        language: Optional[str] = None,
        psm: Optional[int] = None,
        char_whitelist: Optional[str] = None
    ) -> None:
        """Initialize the engine from arguments or configuration."""
        if language is None:
            language = get_config("ocr.tesseract.lang", "ara+eng")
        if psm is None:
            psm = get_config("ocr.tesseract.psm", 3)
        if char_whitelist is None:
            char_whitelist = get_config("ocr.tesseract.char_whitelist", DEFAULT_WHITELIST)
        self.language = language
        self.psm = psm
        self.char_whitelist = char_whitelist

        logger.debug(f"OCREngine initialized (lang={self.language}, psm={self.psm})")

    def check_available(self) -> str:
        """
        Check that the Tesseract binary can be run.

        Returns:
            Tesseract version string.

        Raises:
            OCREngineNotAvailableError: If Tesseract is not installed.
        """
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise OCREngineNotAvailableError(f"Tesseract OCR (not installed or not in PATH): {e}")
        logger.info(f"Tesseract version: {version}")
        return str(version)

    def build_config(self) -> str:
        """
        Build the Tesseract configuration string.

        Spaces inside the whitelist are escaped so the value survives
        pytesseract's argument splitting.
        """
        config_parts = [f"--psm {self.psm}"]
        if self.char_whitelist:
            whitelist = self.char_whitelist.replace(" ", "\\ ")
            config_parts.append(f"-c tessedit_char_whitelist={whitelist}")
        return ' '.join(config_parts)

    def extract_text(self, image: Image.Image, source: str = "image") -> str:
        """
        Recognise the text on a page image.

        Args:
            image: PIL image, ideally grayscale.
            source: Name used in log and error messages.

        Returns:
            Raw OCR text, possibly empty.

        Raises:
            OCREngineNotAvailableError: If Tesseract is missing.
            OCRProcessingError: If recognition fails.
        """
        if not isinstance(image, Image.Image):
            raise OCRProcessingError(source, "Invalid image input")

        start_time = time.time()
        try:
            text = pytesseract.image_to_string(
                image,
                lang=self.language,
                config=self.build_config()
            )
        except pytesseract.TesseractNotFoundError as e:
            raise OCREngineNotAvailableError(f"Tesseract OCR (not installed or not in PATH): {e}")
        except (pytesseract.TesseractError, RuntimeError) as e:
            logger.error(f"OCR processing failed for {source}: {e}")
            raise OCRProcessingError(source, str(e))

        logger.info(
            f"OCR completed for {source}: {len(text.splitlines())} lines "
            f"({time.time() - start_time:.2f}s)"
        )
        logger.debug(f"Extracted text from {source}: {text!r}")
        return text
