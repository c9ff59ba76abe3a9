# src/hybridocr/pipeline.py
from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from tqdm import tqdm

from . import logger as _logger  # noqa: F401, registers Logger.progress
from .config import ExtractionConfig
from .document import Document
from .postprocess import clean_file
from .runner import ProcessRunner
from .utils import build_backend

logger = logging.getLogger("hybridocr")

# tesseract --psm 1: automatic page segmentation with orientation and script detection
PSM_AUTO_OSD = 1


@contextmanager
def scratch_workspace() -> Iterator[Path]:
    """A private temp directory, removed with its contents however the block exits."""
    with tempfile.TemporaryDirectory(prefix="hybridocr_") as tmp:
        logger.debug("Created scratch workspace %s", tmp)
        yield Path(tmp)
    logger.debug("Removed scratch workspace %s", tmp)


class RasterOCRPipeline:
    """
    Rasterize -> OCR -> optional cleanup, for a whole document or a list
    of pages. Output names match the direct extractor's, so an OCR pass
    over a page replaces that page's direct text file.
    """

    def __init__(self, config: ExtractionConfig, runner: ProcessRunner):
        self.config = config
        self.rasterizer = build_backend(config.rasterizer, runner=runner, density=config.density)
        self.engine = build_backend(config.ocr_backend, runner=runner)

    def available(self) -> bool:
        return self.engine.is_available()

    @property
    def psm(self) -> Optional[int]:
        if self.config.psm is not None:
            return self.config.psm
        if self.config.detect_orientation:
            return PSM_AUTO_OSD
        return None

    def _ocr_image(self, document: Document, tiff: Path, scratch: Path, page: Optional[int]) -> Path:
        self.rasterizer.rasterize(document.path, tiff, scratch, page)
        extracted = self.engine.recognize(
            tiff, document.output_base(self.config.output, page), self.config.language, self.psm
        )
        if self.config.clean_ocr:
            clean_file(extracted)
        return extracted

    def ocr(self, document: Document, pages: Optional[Sequence[int]] = None) -> List[Path]:
        extracted_filenames: List[Path] = []
        with scratch_workspace() as scratch:
            if pages is None:
                logger.info("Running OCR over all of %s", document.path.name)
                tiff = scratch / "document.tif"
                extracted_filenames.append(self._ocr_image(document, tiff, scratch, None))
                return extracted_filenames

            total = len(pages)
            for i, page in enumerate(tqdm(pages, desc=f"OCR {document.base_name}", leave=False,
                                          disable=not self.config.show_progress), start=1):
                tiff = scratch / f"page_{page}.tif"
                extracted_filenames.append(self._ocr_image(document, tiff, scratch, page))
                # keep at most one page raster on disk
                tiff.unlink(missing_ok=True)
                logger.progress(
                    "OCR page %s of %s", page, document.path.name,
                    extra={"phase": "ocr", "current": i, "total": total},
                )
        return extracted_filenames
