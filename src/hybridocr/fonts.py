# src/hybridocr/fonts.py
from __future__ import annotations

import logging
import re
from typing import Optional

from .document import Document
from .runner import ProcessRunner, cli_path, resolve_binary

logger = logging.getLogger("hybridocr")

# pdffonts prints a table header and one row per font, so output that ends
# on the header rule means no fonts were listed.
NO_TEXT_DETECTED = re.compile(r"---------\n\n?\Z")


def has_embedded_text(fonts_output: str) -> bool:
    """True unless the pdffonts output lists zero fonts."""
    return NO_TEXT_DETECTED.search(fonts_output) is None


class FontPresenceDetector:
    """Decides whether a PDF carries a text layer by asking pdffonts."""

    def __init__(self, runner: ProcessRunner, pdffonts_cmd: Optional[str] = None):
        self.runner = runner
        self.cmd = pdffonts_cmd or resolve_binary("pdffonts", "PDFFONTS_CMD") or "pdffonts"

    def contains_text(self, document: Document) -> bool:
        output = self.runner.run([self.cmd, cli_path(document.path)])
        found = has_embedded_text(output)
        logger.debug("Embedded fonts in %s, %s", document.path.name, found)
        return found
