# src/hybridocr/__init__.py
from . import logger as _logger  # noqa: F401, registers Logger.progress
from .config import ExtractionConfig, OCRMode
from .exceptions import ExtractionFailed, hybridOCRError
from .extractor import TextExtractor, extract_text
from .fonts import has_embedded_text
from .postprocess import clean_text

__all__ = [
    "ExtractionConfig",
    "OCRMode",
    "ExtractionFailed",
    "hybridOCRError",
    "TextExtractor",
    "extract_text",
    "has_embedded_text",
    "clean_text",
]

__version__ = "1.0.0"
