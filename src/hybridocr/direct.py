# src/hybridocr/direct.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .config import ExtractionConfig
from .document import Document
from .runner import ProcessRunner, cli_path, resolve_binary

logger = logging.getLogger("hybridocr")

# Scanned pages usually give back only a file name or a page number, so
# anything shorter than this is treated as "no real text".
MIN_TEXT_PER_PAGE = 100  # in bytes


class PendingOCRQueue:
    """Pages of one document whose embedded text was too short, in page order."""

    def __init__(self):
        self._pages: List[int] = []

    def append(self, page: int) -> None:
        self._pages.append(page)

    def drain(self) -> List[int]:
        pages, self._pages = self._pages, []
        return pages

    def __iter__(self) -> Iterator[int]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, page: object) -> bool:
        return page in self._pages


class DirectPageExtractor:
    """Pulls the embedded text layer out with pdftotext."""

    def __init__(self, config: ExtractionConfig, runner: ProcessRunner, pdftotext_cmd: Optional[str] = None):
        self.config = config
        self.runner = runner
        self.cmd = pdftotext_cmd or resolve_binary("pdftotext", "PDFTOTEXT_CMD") or "pdftotext"

    def _run_pdftotext(self, pdf: Path, text_path: Path, options: Sequence[str] = ()) -> None:
        args = [self.cmd, *options, "-enc", "UTF-8"]
        if self.config.keep_layout:
            args.append("-layout")
        args += [cli_path(pdf), cli_path(text_path)]
        self.runner.run(args)

    def extract_full(self, document: Document) -> Path:
        """Extract the full contents of a PDF as a single file."""
        text_path = document.text_path(self.config.output)
        self._run_pdftotext(document.path, text_path)
        return text_path

    def extract_page(self, document: Document, page: int, pending: PendingOCRQueue) -> Optional[Path]:
        """
        Extract a single page. Returns the text file, or None when the page
        was queued for OCR because its text came out shorter than
        MIN_TEXT_PER_PAGE. The short file is left in place either way.
        """
        text_path = document.text_path(self.config.output, page)
        self._run_pdftotext(document.path, text_path, ["-f", str(page), "-l", str(page)])

        if self.config.forbid_ocr:
            return text_path

        size = text_path.stat().st_size
        if size < MIN_TEXT_PER_PAGE:
            logger.debug("Page %s of %s has %d bytes of text, queued for OCR", page, document.path.name, size)
            pending.append(page)
            return None
        return text_path
