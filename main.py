#!/usr/bin/env python3
"""
Invoice OCR Text Extraction - Main Entry Point.

Runs scanned invoices (PDF or image) or already recognised OCR text
files through the field extraction core and writes the structured
records as JSON.

Usage:
    Command Line:
        python main.py --input invoice.pdf
        python main.py --input ocr_text.txt --output results.json
        python main.py --input ./invoices/ --output results.json --debug

    Python:
        from main import run_extraction
        results = run_extraction("invoice.pdf")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, List, Dict, Any

from config import ConfigurationManager, get_config
from src.field_extraction import InvoiceTextExtractor
from src.utils.exceptions import CorruptedFileError, InvoiceOCRError
from src.utils.helpers import ensure_directory, get_file_extension
from src.utils.logger import get_logger, set_verbosity, setup_logger_from_config


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Argument list; defaults to sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Invoice OCR Text Extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Scan a single invoice:
        python main.py --input invoice.pdf

    Parse OCR text that was recognised elsewhere:
        python main.py --input page1.txt --output results.json

    Process a directory:
        python main.py --input ./invoices/ --output results.json
        """
    )

    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Invoice file (PDF, image or .txt OCR text) or directory of them"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="JSON output file (default: print to stdout)"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)
    logger = setup_logger_from_config()
    set_verbosity(debug=args.debug, quiet=args.quiet)

    logger.info(f"Invoice OCR extraction v{config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input}")
    return config


def collect_inputs(input_path: str) -> List[Path]:
    """
    List the files to process.

    Args:
        input_path: File or directory path.

    Returns:
        Sorted list of document and text files.

    Raises:
        FileNotFoundError: If input path doesn't exist.
        ValueError: If a single file has an unsupported type.
    """
    logger = get_logger(__name__)
    path = Path(input_path)

    if not path.exists():
        raise FileNotFoundError(f"Input path not found: {path}")

    accepted = set(get_config("input.supported_extensions", [])) | set(
        get_config("input.text_extensions", [".txt"])
    )

    if path.is_file():
        if get_file_extension(path) not in accepted:
            raise ValueError(f"Unsupported file type: {path.suffix}")
        return [path]

    files = sorted(p for p in path.iterdir() if p.is_file() and get_file_extension(p) in accepted)
    if not files:
        logger.warning(f"No supported files found in: {path}")
    else:
        logger.info(f"Found {len(files)} files to process")
    return files


def read_text(file_path: Path, input_handler=None, ocr_engine=None) -> str:
    """
    Obtain OCR text for one file.

    Text files are read as UTF-8; documents go through the input handler
    and the OCR engine.

    Raises:
        CorruptedFileError: If a text file is not valid UTF-8.
    """
    if get_file_extension(file_path) in get_config("input.text_extensions", [".txt"]):
        try:
            return file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptedFileError(str(file_path), "not valid UTF-8 text") from e

    document = input_handler.load(file_path)
    return ocr_engine.extract_text(document.image, source=document.filename)


def run_extraction(
    input_path: str,
    output_path: Optional[str] = None,
    config_path: Optional[str] = None,
    extractor: Optional[InvoiceTextExtractor] = None
) -> List[Dict[str, Any]]:
    """
    Run the extraction pipeline over a file or directory.

    Files that fail to load or recognise are logged and skipped.

    Args:
        input_path: Path to input file or directory.
        output_path: Optional JSON file for the results.
        config_path: Optional custom configuration file path.
        extractor: Field extractor to use (a default one is built otherwise).

    Returns:
        List of result dictionaries, one per processed file, each with a
        "source_file" entry.

    Example:
        >>> results = run_extraction("invoices/")
        >>> for r in results:
        ...     print(r['invoice_number'])
    """
    logger = get_logger(__name__)
    ConfigurationManager(config_path)

    files = collect_inputs(input_path)
    extractor = extractor or InvoiceTextExtractor()

    input_handler = None
    ocr_engine = None
    text_extensions = get_config("input.text_extensions", [".txt"])
    if any(get_file_extension(f) not in text_extensions for f in files):
        # Text-only runs never touch Tesseract or PyMuPDF
        from src.input_handler import InputHandler
        from src.ocr_engine import OCREngine

        input_handler = InputHandler()
        ocr_engine = OCREngine()
        ocr_engine.check_available()

    results = []
    for file_path in files:
        logger.info(f"Processing: {file_path.name}")
        try:
            text = read_text(file_path, input_handler, ocr_engine)
        except InvoiceOCRError as e:
            logger.error(f"Error processing {file_path.name}: {e}")
            continue

        record = extractor.extract(text).to_dict()
        record['source_file'] = str(file_path)
        results.append(record)

    if output_path:
        output_file = Path(output_path)
        ensure_directory(output_file.parent)
        output_file.write_text(
            json.dumps(results, indent=2, ensure_ascii=False),
            encoding="utf-8"
        )
        logger.info(f"Wrote {len(results)} result(s) to {output_file}")

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        args = parse_arguments(argv)
        initialize_system(args)
        logger = get_logger(__name__)

        results = run_extraction(
            input_path=args.input,
            output_path=args.output,
            config_path=args.config
        )

        if not args.output:
            print(json.dumps(results, indent=2, ensure_ascii=False))

        logger.info(f"Extraction complete. Processed {len(results)} file(s).")
        return 0

    except (FileNotFoundError, ValueError, InvoiceOCRError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
