# src/hybridocr/extractor.py
"""
Delegates to pdftotext and tesseract to pull text out of PDF documents.

OCR can be forced (ocr=True) or forbidden (ocr=False). Otherwise:

  * pdffonts is asked whether the PDF embeds any fonts; with none, the
    whole selection goes through OCR.
  * Each requested page is extracted with pdftotext. Pages with fewer
    than 100 bytes of text (scans, or pages holding just a running head
    or a page number) are queued.
  * The queued pages are OCRed at the end and their OCR output replaces
    the direct text.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from tqdm import tqdm

from . import logger as _logger  # noqa: F401, registers Logger.progress
from .config import ExtractionConfig, OCRMode
from .direct import DirectPageExtractor, PendingOCRQueue
from .document import Document, resolve_pages
from .fonts import FontPresenceDetector
from .pipeline import RasterOCRPipeline
from .runner import ProcessRunner
from .utils import as_path_list

__all__ = ["TextExtractor", "extract_text"]

logger = logging.getLogger("hybridocr")


class TextExtractor:
    def __init__(self, config: ExtractionConfig, runner: Optional[ProcessRunner] = None):
        self.config = config
        self.runner = runner or ProcessRunner(timeout=config.timeout)
        self.fonts = FontPresenceDetector(self.runner)
        self.direct = DirectPageExtractor(config, self.runner)
        self.pipeline = RasterOCRPipeline(config, self.runner)

    def extract(self, pdfs: Union[str, Path, Iterable[Union[str, Path]]]) -> List[Path]:
        """
        Extract text from a list of PDFs, in order.
        Returns the text files produced. The first failure aborts the call;
        files already written stay on disk.
        """
        documents = [Document(p) for p in as_path_list(pdfs)]
        extracted_filenames: List[Path] = []
        for document in tqdm(documents, desc="Extracting text", disable=not self.config.show_progress):
            extracted_filenames.extend(self._extract_document(document))
        return extracted_filenames

    def _use_ocr_only(self, document: Document) -> bool:
        if self.config.ocr_mode is OCRMode.FORCED:
            return True
        if self.config.ocr_mode is OCRMode.FORBIDDEN:
            return False
        if not self.fonts.contains_text(document):
            logger.info("No embedded fonts in %s, using OCR", document.path.name)
            return True
        return False

    def _extract_document(self, document: Document) -> List[Path]:
        logger.info("Extracting text from %s", document.path.name)
        pages = resolve_pages(self.config.pages, document)

        if self._use_ocr_only(document):
            return self.pipeline.ocr(document, pages)

        if pages is None:
            return [self.direct.extract_full(document)]

        pending = PendingOCRQueue()
        page_results = []
        for i, page in enumerate(pages, start=1):
            page_results.append((page, self.direct.extract_page(document, page, pending)))
            logger.progress(
                "Direct text page %s of %s", page, document.path.name,
                extra={"phase": "direct", "current": i, "total": len(pages)},
            )

        if not pending:
            return [path for _, path in page_results]

        if self.config.ocr_mode is not OCRMode.FORBIDDEN and self.pipeline.available():
            queued = pending.drain()
            logger.info("%d page(s) of %s need OCR, %s", len(queued), document.path.name, queued)
            extracted = [path for _, path in page_results if path is not None]
            extracted.extend(self.pipeline.ocr(document, queued))
            return extracted

        logger.warning(
            "OCR engine not available, keeping short direct text for pages %s of %s",
            list(pending), document.path.name,
        )
        return [path or document.text_path(self.config.output, page) for page, path in page_results]


def extract_text(pdfs: Union[str, Path, Iterable[Union[str, Path]]], **options) -> List[Path]:
    """
    Extract text from one or more PDFs into the output directory.

    Options: output, pages ("all", "1-3,5", or page numbers), ocr
    (True/False/None), language, clean, detect_orientation, psm, layout,
    and the ExtractionConfig extras (density, timeout, rasterizer,
    ocr_backend, show_progress).
    """
    config = ExtractionConfig.from_options(**options)
    config.output.mkdir(parents=True, exist_ok=True)
    return TextExtractor(config).extract(pdfs)
