# src/hybridocr/document.py
from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF

from .config import ALL_PAGES, PageSpec
from .exceptions import ExtractionFailed


def count_pages(file_path: Path) -> int:
    """Page count as reported by PyMuPDF. Encrypted or unreadable files fail."""
    try:
        with fitz.open(file_path) as doc:
            if doc.needs_pass:
                raise ExtractionFailed(f"{file_path.name} is encrypted and requires a password")
            return doc.page_count
    except (RuntimeError, ValueError, OSError) as e:
        raise ExtractionFailed(f"Unable to open {file_path.name}, {e}") from e


@dataclass(frozen=True)
class Document:
    path: Path

    @property
    def base_name(self) -> str:
        """File name without its extension, case and punctuation untouched."""
        return self.path.stem

    @cached_property
    def page_count(self) -> int:
        return count_pages(self.path)

    def output_base(self, output_dir: Path, page: Optional[int] = None) -> Path:
        """Output path without the .txt suffix (tesseract appends it itself)."""
        name = self.base_name if page is None else f"{self.base_name}_{page}"
        return Path(output_dir) / name

    def text_path(self, output_dir: Path, page: Optional[int] = None) -> Path:
        base = self.output_base(output_dir, page)
        return base.with_name(base.name + ".txt")


def resolve_pages(pages: PageSpec, document: Document) -> Optional[List[int]]:
    """
    Turn a page selection into concrete 1-based page numbers.
    None stays None (whole document as one file).
    """
    if pages is None:
        return None
    if pages == ALL_PAGES:
        return list(range(1, document.page_count + 1))

    total = document.page_count
    out_of_range = [p for p in pages if p > total]
    if out_of_range:
        raise ExtractionFailed(
            f"Page {out_of_range[0]} is out of range for {document.path.name} ({total} pages)"
        )
    return list(pages)
