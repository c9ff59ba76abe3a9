# hybridocr/ocr_backends/pytesseract_backend.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytesseract as pt

from ..exceptions import ExtractionFailed
from .base import BaseOCREngine
from .tesseract_backend import resolve_tesseract_cmd, text_output


class PyTesseractEngine(BaseOCREngine):
    """
    Pytesseract-based backend.

    Kwargs supported (all optional):
      - tesseract_cmd: full path to tesseract binary (Windows)
      - oem: 0..3 (default: engine default)
      - preserve_interword_spaces: bool (default False)
      - extra_config: str of extra flags (appended to config string)
    """

    def __init__(self, runner=None, tesseract_cmd: Optional[str] = None, oem: Optional[int] = None,
                 preserve_interword_spaces: bool = False, extra_config: str = "", **kwargs):
        cmd = tesseract_cmd or resolve_tesseract_cmd()
        if cmd:
            pt.pytesseract.tesseract_cmd = str(cmd)
        self.timeout = getattr(runner, "timeout", None) or 0
        self.oem = oem
        self.preserve_interword_spaces = preserve_interword_spaces
        self.extra_config = extra_config.strip()

    def is_available(self) -> bool:
        try:
            pt.get_tesseract_version()
            return True
        except (pt.TesseractNotFoundError, OSError):
            return False

    def _config(self, psm: Optional[int]) -> str:
        cfg_parts = []
        if psm is not None:
            cfg_parts.append(f"--psm {psm}")
        if self.oem is not None:
            cfg_parts.append(f"--oem {self.oem}")
        if self.preserve_interword_spaces:
            cfg_parts.append("-c preserve_interword_spaces=1")
        if self.extra_config:
            cfg_parts.append(self.extra_config)
        return " ".join(cfg_parts)

    def recognize(self, image: Path, output_base: Path, language: str, psm: Optional[int] = None) -> Path:
        try:
            # a str path goes to tesseract as-is, so multi-frame TIFFs work
            text = pt.image_to_string(str(image), lang=language, config=self._config(psm), timeout=self.timeout)
        except pt.TesseractError as e:
            raise ExtractionFailed(str(e.message)) from e
        except pt.TesseractNotFoundError as e:
            raise ExtractionFailed(str(e)) from e
        except RuntimeError as e:
            # pytesseract reports its own timeout as a bare RuntimeError
            raise ExtractionFailed(f"tesseract failed on {image.name}, {e}") from e

        out = text_output(output_base)
        out.write_text(text, encoding="utf-8")
        return out
