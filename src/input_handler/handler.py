"""
Input Handler Module.

Loads an invoice document and turns it into the grayscale page image the
OCR engine reads. Only the first page of a PDF is used.

Usage:
    from src.input_handler import InputHandler

    handler = InputHandler()
    document = handler.load("invoice.pdf")
    image = document.image

Classes:
    InputResult: Loaded document
    InputHandler: Validation, PDF rasterization and image loading
"""

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import fitz  # PyMuPDF
from PIL import Image, UnidentifiedImageError

from config import get_config
from src.utils.helpers import get_file_extension, validate_file_exists
from src.utils.logger import get_logger
from src.utils.exceptions import (
    CorruptedFileError,
    DocumentNotFoundError,
    EmptyDocumentError,
    UnsupportedFileTypeError,
)

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class InputResult:
    """
    A loaded invoice document.

    Attributes:
        filepath: Original file path
        filename: Original filename
        file_type: 'pdf' or 'image'
        image: Grayscale PIL image of the (first) page
    """
    filepath: str
    filename: str
    file_type: str
    image: Image.Image

    def __repr__(self) -> str:
        return (
            f"InputResult(filename='{self.filename}', "
            f"type='{self.file_type}', size={self.image.size})"
        )


class InputHandler:
    """
    Loads PDF and image invoices for OCR.

    Attributes:
        supported_extensions: Set of accepted file extensions
        pdf_zoom: Scale factor used when rasterizing a PDF page

    Example:
        >>> handler = InputHandler()
        >>> document = handler.load("scan.png")
        >>> document.image.mode
        'L'
    """

    PDF_EXTENSIONS = {'.pdf'}
    IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.tif', '.tiff', '.bmp'}

    def __init__(self, pdf_zoom: Optional[float] = None) -> None:
        self.supported_extensions = {
            ext.lower() for ext in get_config(
                "input.supported_extensions",
                sorted(self.PDF_EXTENSIONS | self.IMAGE_EXTENSIONS)
            )
        }
        if pdf_zoom is None:
            pdf_zoom = get_config("input.pdf.zoom", 2.0)
        self.pdf_zoom = pdf_zoom

        logger.debug(f"InputHandler initialized with extensions: {sorted(self.supported_extensions)}")

    def is_supported(self, filepath: Union[str, Path]) -> bool:
        return get_file_extension(filepath) in self.supported_extensions

    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a file exists and has a supported type.

        Raises:
            DocumentNotFoundError: If the file doesn't exist.
            UnsupportedFileTypeError: If the extension is not supported.
            CorruptedFileError: If the file is empty.
        """
        path = Path(filepath)

        if not validate_file_exists(path):
            raise DocumentNotFoundError(str(filepath))

        extension = get_file_extension(path)
        if extension not in self.supported_extensions:
            raise UnsupportedFileTypeError(extension, sorted(self.supported_extensions))

        if path.stat().st_size == 0:
            raise CorruptedFileError(str(filepath), "File is empty")

        return path

    def load(self, filepath: Union[str, Path]) -> InputResult:
        """
        Load a document as a grayscale page image.

        Args:
            filepath: Path to the invoice file.

        Returns:
            InputResult holding the page image.

        Raises:
            InputError: Subclass describing why the document could not be loaded.
        """
        path = self.validate_file(filepath)
        logger.info(f"Loading file: {path.name}")

        if get_file_extension(path) in self.PDF_EXTENSIONS:
            file_type = 'pdf'
            image = self.render_first_page(path)
        else:
            file_type = 'image'
            image = self.open_image(path)

        return InputResult(
            filepath=str(filepath),
            filename=path.name,
            file_type=file_type,
            image=self.to_grayscale(image),
        )

    def render_first_page(self, path: Path) -> Image.Image:
        """
        Rasterize the first page of a PDF with PyMuPDF.

        Raises:
            CorruptedFileError: If the PDF cannot be opened or rendered.
            EmptyDocumentError: If the PDF has no pages.
        """
        try:
            doc = fitz.open(str(path))
        except Exception as e:
            raise CorruptedFileError(str(path), str(e))

        try:
            if doc.page_count == 0:
                raise EmptyDocumentError(str(path))

            page = doc.load_page(0)
            matrix = fitz.Matrix(self.pdf_zoom, self.pdf_zoom)
            pix = page.get_pixmap(matrix=matrix)
            image = Image.open(io.BytesIO(pix.tobytes("png")))
            image.load()
        except EmptyDocumentError:
            raise
        except Exception as e:
            logger.error(f"PyMuPDF conversion failed: {e}")
            raise CorruptedFileError(str(path), str(e))
        finally:
            doc.close()

        logger.debug(f"Rendered first PDF page at zoom {self.pdf_zoom}: {image.size}")
        return image

    def open_image(self, path: Path) -> Image.Image:
        """
        Open an image file.

        Raises:
            CorruptedFileError: If the image cannot be decoded.
        """
        try:
            image = Image.open(path)
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise CorruptedFileError(str(path), f"Image could not be decoded: {e}")
        return image

    @staticmethod
    def to_grayscale(image: Image.Image) -> Image.Image:
        if image.mode != 'L':
            image = image.convert('L')
        return image
