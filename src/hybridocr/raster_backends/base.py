# hybridocr/raster_backends/base.py
from pathlib import Path
from typing import Optional
from abc import ABC, abstractmethod

class BaseRasterizer(ABC):
    @abstractmethod
    def rasterize(self, pdf: Path, tiff: Path, scratch: Path, page: Optional[int] = None) -> None:
        """
        Write a grayscale TIFF of one 1-based page, or of every page when
        page is None. scratch is a private directory for temporary files.
        """
        pass
