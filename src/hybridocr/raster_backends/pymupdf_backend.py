# hybridocr/raster_backends/pymupdf_backend.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF
from PIL import Image, ImageFilter

from ..exceptions import ExtractionFailed
from .base import BaseRasterizer

logger = logging.getLogger("hybridocr")


class PyMuPDFRasterizer(BaseRasterizer):
    """
    In-process rasterizer, no GraphicsMagick or Ghostscript needed.

    Pages are rendered to 8-bit grayscale, despeckled with a 3x3 median
    filter and written as a (multi-frame) TIFF with Pillow.
    """

    def __init__(self, runner=None, density: int = 400, despeckle: bool = True, **kwargs):
        self.density = int(density)
        self.despeckle = despeckle

    def _render(self, page: "fitz.Page") -> Image.Image:
        # Prefer matrix-based scaling (consistent across PyMuPDF versions)
        zoom = self.density / 72.0
        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), colorspace=fitz.csGRAY, alpha=False)
        img = Image.frombytes("L", (pix.width, pix.height), pix.samples)
        if self.despeckle:
            img = img.filter(ImageFilter.MedianFilter(3))
        return img

    def rasterize(self, pdf: Path, tiff: Path, scratch: Path, page: Optional[int] = None) -> None:
        frames: List[Image.Image] = []
        try:
            with fitz.open(pdf) as doc:
                if doc.needs_pass:
                    raise ExtractionFailed(f"{pdf.name} is encrypted and requires a password")
                indices = [page - 1] if page is not None else range(doc.page_count)
                for i in indices:
                    frames.append(self._render(doc.load_page(i)))
        except (RuntimeError, ValueError, IndexError, OSError) as e:
            raise ExtractionFailed(f"PyMuPDF failed to render {pdf.name}, {e}") from e

        if not frames:
            raise ExtractionFailed(f"{pdf.name} has no pages to render")
        logger.debug("Rendered %d frame(s) of %s at %d dpi", len(frames), pdf.name, self.density)
        frames[0].save(tiff, format="TIFF", save_all=True, append_images=frames[1:])
