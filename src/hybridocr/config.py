# src/hybridocr/config.py
from __future__ import annotations

import re
from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union

ALL_PAGES = "all"

DEFAULT_RASTERIZER = "hybridocr.raster_backends.gm_backend.GraphicsMagickRasterizer"
DEFAULT_OCR_BACKEND = "hybridocr.ocr_backends.tesseract_backend.TesseractCLIEngine"

PageSpec = Union[str, Tuple[int, ...], None]

_RANGE_PART = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$")


class OCRMode(str, Enum):
    AUTO = "auto"
    FORCED = "forced"
    FORBIDDEN = "forbidden"

    @classmethod
    def from_flag(cls, ocr: Optional[bool]) -> "OCRMode":
        """True forces OCR, False forbids it, None lets the font check decide."""
        if ocr is True:
            return cls.FORCED
        if ocr is False:
            return cls.FORBIDDEN
        return cls.AUTO


def parse_page_range(value: str) -> Tuple[int, ...]:
    """
    Parse '3', '1-4' or '1-3,7,9-10' into an ordered tuple of page numbers.
    Repeated pages are kept only once, at their first position.
    """
    pages = []
    for part in value.split(","):
        if not part.strip():
            continue
        m = _RANGE_PART.match(part)
        if not m:
            raise ValueError(f"Invalid page range: {value!r}")
        first = int(m.group(1))
        last = int(m.group(2)) if m.group(2) else first
        if first < 1 or last < first:
            raise ValueError(f"Invalid page range: {value!r}")
        pages.extend(range(first, last + 1))
    if not pages:
        raise ValueError(f"Invalid page range: {value!r}")
    return tuple(dict.fromkeys(pages))


def normalize_pages(pages: Union[str, Iterable[int], None]) -> PageSpec:
    if pages is None:
        return None
    if isinstance(pages, str):
        if pages.strip().lower() == ALL_PAGES:
            return ALL_PAGES
        return parse_page_range(pages)
    out = []
    for p in pages:
        if isinstance(p, bool) or int(p) != p or p < 1:
            raise ValueError(f"Page numbers must be positive integers, got {p!r}")
        out.append(int(p))
    if not out:
        raise ValueError("Empty page selection")
    return tuple(dict.fromkeys(out))


@dataclass(frozen=True)
class ExtractionConfig:
    """Configuration for one hybridocr extraction call."""
    output: Path = Path(".")
    pages: PageSpec = None
    ocr_mode: OCRMode = OCRMode.AUTO
    language: str = "eng"
    clean_ocr: bool = True
    detect_orientation: bool = True
    psm: Optional[int] = None
    keep_layout: bool = False

    density: int = 400
    timeout: Optional[float] = None
    rasterizer: str = DEFAULT_RASTERIZER
    ocr_backend: str = DEFAULT_OCR_BACKEND
    show_progress: bool = False

    def __post_init__(self):
        # frozen, so normalisation goes through object.__setattr__
        object.__setattr__(self, "output", Path(self.output))
        object.__setattr__(self, "pages", normalize_pages(self.pages))
        object.__setattr__(self, "ocr_mode", OCRMode(self.ocr_mode))
        # cleanup heuristics are tuned for English only
        object.__setattr__(self, "clean_ocr", bool(self.clean_ocr) and self.language == "eng")
        if self.psm is not None:
            object.__setattr__(self, "psm", int(self.psm))

    @property
    def force_ocr(self) -> bool:
        return self.ocr_mode is OCRMode.FORCED

    @property
    def forbid_ocr(self) -> bool:
        return self.ocr_mode is OCRMode.FORBIDDEN

    @classmethod
    def from_options(
        cls,
        output: Union[str, Path, None] = None,
        pages: Union[str, Iterable[int], None] = None,
        ocr: Optional[bool] = None,
        language: Optional[str] = None,
        clean: Optional[bool] = None,
        detect_orientation: Optional[bool] = None,
        psm: Optional[int] = None,
        layout: Optional[bool] = None,
        **extra: Any,
    ) -> "ExtractionConfig":
        """
        Build a config from the loose option names used by extract_text and
        the CLI. None always means "use the default".
        """
        language = language or "eng"
        d: Dict[str, Any] = {
            "output": output or ".",
            "pages": pages,
            "ocr_mode": OCRMode.from_flag(ocr),
            "language": language,
            "clean_ocr": clean is not False,
            "detect_orientation": detect_orientation is not False,
            "psm": psm,
            "keep_layout": bool(layout),
        }
        d.update({k: v for k, v in extra.items() if v is not None})
        return cls(**d)

    def to_dict(self) -> Dict[str, Any]:
        """Converts config to a plain dictionary (for logging or JSON)."""
        d = asdict(self)
        d["output"] = str(self.output)
        d["ocr_mode"] = self.ocr_mode.value
        if isinstance(self.pages, tuple):
            d["pages"] = list(self.pages)
        return d

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ExtractionConfig":
        d = dict(config_dict)

        # allow explicit None to mean use default
        for key in ["output", "language", "density", "rasterizer", "ocr_backend", "ocr_mode"]:
            if d.get(key) is None:
                d.pop(key, None)

        if isinstance(d.get("output"), str):
            d["output"] = Path(d["output"])

        return cls(**d)
