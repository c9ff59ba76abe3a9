# src/hybridocr/utils.py
from __future__ import annotations

import importlib
import logging
from typing import Any, Dict, Iterable, List, Union
from pathlib import Path

logger = logging.getLogger("hybridocr")

# Short names accepted wherever a backend class path is expected
BACKEND_ALIASES: Dict[str, str] = {
    # Rasterizers
    "gm": "hybridocr.raster_backends.gm_backend.GraphicsMagickRasterizer",
    "graphicsmagick": "hybridocr.raster_backends.gm_backend.GraphicsMagickRasterizer",
    "pymupdf": "hybridocr.raster_backends.pymupdf_backend.PyMuPDFRasterizer",
    "fitz": "hybridocr.raster_backends.pymupdf_backend.PyMuPDFRasterizer",

    # OCR engines
    "tess": "hybridocr.ocr_backends.tesseract_backend.TesseractCLIEngine",
    "tesseract": "hybridocr.ocr_backends.tesseract_backend.TesseractCLIEngine",
    "pytesseract": "hybridocr.ocr_backends.pytesseract_backend.PyTesseractEngine",
}


def normalize_backend_alias(name: str) -> str:
    """
    Allow short aliases (case-insensitive).
    Returns a fully qualified dotted path 'module.Class'.
    """
    if not name:
        return name
    raw = name.strip().strip('"\'')
    return BACKEND_ALIASES.get(raw.lower(), raw)


def import_obj(dotted: str):
    mod_path, _, attr = dotted.rpartition(".")
    if not mod_path or not attr:
        raise ImportError(f"Invalid backend path, {dotted}")
    mod = importlib.import_module(mod_path)
    try:
        return getattr(mod, attr)
    except AttributeError as e:
        raise ImportError(f"Backend class not found, {dotted}") from e


def build_backend(dotted: str, **kwargs: Any):
    """Import a backend class by dotted path (or alias) and instantiate it."""
    backend_cls = import_obj(normalize_backend_alias(dotted))
    logger.debug("Using backend %s", backend_cls.__name__)
    return backend_cls(**kwargs)


def as_path_list(pdfs: Union[str, Path, Iterable[Union[str, Path]]]) -> List[Path]:
    """Accept one path or any iterable of paths."""
    if isinstance(pdfs, (str, Path)):
        return [Path(pdfs)]
    return [Path(p) for p in pdfs]
