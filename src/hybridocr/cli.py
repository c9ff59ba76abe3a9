# src/hybridocr/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_OCR_BACKEND, DEFAULT_RASTERIZER, ExtractionConfig, normalize_pages
from .exceptions import ExtractionFailed
from .extractor import TextExtractor
from .logger import setup_logging
from .utils import import_obj, normalize_backend_alias

__all__ = ["main"]

logger = logging.getLogger("hybridocr")


def _preflight_backend_import(dotted: str) -> None:
    """
    Try to import the backend class now, so we can fail fast with a clear message
    instead of crashing halfway through a batch.
    """
    try:
        import_obj(dotted)
    except ImportError as e:
        raise SystemExit(
            f"Cannot load backend {dotted!r} ({e})\n"
            f"- Rasterizers: gm, pymupdf\n"
            f"- OCR engines: tesseract, pytesseract"
        ) from e


def _pages_arg(value: str):
    try:
        return normalize_pages(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="hybridocr",
        description="hybridocr: extract text from PDFs, falling back to OCR for scanned pages",
    )
    p.add_argument("pdfs", nargs="+", type=Path, help="PDF files to extract")

    # Core I/O & selection
    p.add_argument("-o", "--output", type=Path, default=Path("."), help="Output directory (created if missing)")
    p.add_argument(
        "-p", "--pages", type=_pages_arg,
        help="'all' for one file per page, or a range such as 1-3,5. Omit for one file per document.",
    )

    # OCR behavior
    ocr_group = p.add_argument_group("OCR")
    mx_ocr = ocr_group.add_mutually_exclusive_group()
    mx_ocr.add_argument("--ocr", dest="ocr", action="store_true", help="Force OCR for every page")
    mx_ocr.add_argument("--no-ocr", dest="ocr", action="store_false", help="Never OCR, use embedded text only")
    p.set_defaults(ocr=None)
    ocr_group.add_argument("-l", "--language", default="eng", help="Tesseract language code (default: eng)")
    ocr_group.add_argument("--no-clean", dest="clean", action="store_false",
                           help="Keep OCR output as-is (cleanup only applies to eng)")
    ocr_group.add_argument("--no-orientation-detection", dest="detect_orientation", action="store_false",
                           help="Do not ask tesseract to detect page orientation")
    ocr_group.add_argument("--psm", type=int, help="Explicit tesseract page segmentation mode")
    ocr_group.add_argument("-d", "--density", type=int, help="Raster resolution for OCR in DPI (default: 400)")
    ocr_group.add_argument("--rasterizer", default=DEFAULT_RASTERIZER,
                           help="Rasterizer alias (gm, pymupdf) or dotted class path")
    ocr_group.add_argument("--ocr-backend", default=DEFAULT_OCR_BACKEND,
                           help="OCR engine alias (tesseract, pytesseract) or dotted class path")

    # Direct extraction
    p.add_argument("--layout", action="store_true", help="Preserve physical layout in directly extracted text")

    # Runtime
    p.add_argument("--timeout", type=float, help="Seconds allowed per external tool call (default: no limit)")
    p.add_argument("--log-file", type=Path, help="Also write a log file here")
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only, no progress bars")
    return p


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _config_from_args(args: argparse.Namespace) -> ExtractionConfig:
    args.rasterizer = normalize_backend_alias(args.rasterizer)
    args.ocr_backend = normalize_backend_alias(args.ocr_backend)
    _preflight_backend_import(args.rasterizer)
    _preflight_backend_import(args.ocr_backend)

    return ExtractionConfig.from_options(
        output=args.output,
        pages=args.pages,
        ocr=args.ocr,
        language=args.language,
        clean=args.clean,
        detect_orientation=args.detect_orientation,
        psm=args.psm,
        layout=args.layout,
        density=args.density,
        timeout=args.timeout,
        rasterizer=args.rasterizer,
        ocr_backend=args.ocr_backend,
        show_progress=not args.quiet,
    )


def main(argv: Optional[List[str]] = None):
    args = _parse_args(argv)

    level = logging.DEBUG if args.verbose else (logging.WARNING if args.quiet else logging.INFO)
    setup_logging(level=level, file_path=args.log_file, file_level=logging.DEBUG if args.log_file else None)

    try:
        config = _config_from_args(args)
    except SystemExit as e:
        logger.error("%s", e)
        sys.exit(2)

    logger.debug("Config, %s", config.to_dict())
    config.output.mkdir(parents=True, exist_ok=True)

    try:
        extracted = TextExtractor(config).extract(args.pdfs)
    except ExtractionFailed as e:
        logger.error("Extraction failed:\n%s", e.output.rstrip())
        sys.exit(1)

    for path in extracted:
        print(path)


if __name__ == "__main__":
    main()
