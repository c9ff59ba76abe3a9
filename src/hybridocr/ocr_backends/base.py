# hybridocr/ocr_backends/base.py
from pathlib import Path
from typing import Optional
from abc import ABC, abstractmethod

class BaseOCREngine(ABC):
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the engine can run on this machine."""
        pass

    @abstractmethod
    def recognize(self, image: Path, output_base: Path, language: str, psm: Optional[int] = None) -> Path:
        """OCR an image into output_base + '.txt' and return that path."""
        pass
