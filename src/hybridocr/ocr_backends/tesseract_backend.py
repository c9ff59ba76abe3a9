# hybridocr/ocr_backends/tesseract_backend.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..runner import ProcessRunner, cli_path, resolve_binary
from .base import BaseOCREngine


def resolve_tesseract_cmd() -> Optional[str]:
    return resolve_binary("tesseract", "TESSERACT_CMD")


def text_output(output_base: Path) -> Path:
    """tesseract writes <output_base>.txt; output_base may itself contain dots."""
    return output_base.with_name(output_base.name + ".txt")


class TesseractCLIEngine(BaseOCREngine):
    """
    Runs the tesseract binary directly, one process per image.

    Kwargs supported (all optional):
      - tesseract_cmd: full path to the tesseract binary
      - oem: OCR engine mode passed as --oem
    """

    def __init__(self, runner: ProcessRunner, tesseract_cmd: Optional[str] = None, oem: Optional[int] = None, **kwargs):
        self.runner = runner
        self.cmd = tesseract_cmd or resolve_tesseract_cmd()
        self.oem = oem

    def is_available(self) -> bool:
        return self.cmd is not None

    def recognize(self, image: Path, output_base: Path, language: str, psm: Optional[int] = None) -> Path:
        args = [self.cmd or "tesseract", cli_path(image), cli_path(output_base), "-l", language]
        if psm is not None:
            args += ["--psm", str(psm)]
        if self.oem is not None:
            args += ["--oem", str(self.oem)]
        self.runner.run(args)
        return text_output(output_base)
