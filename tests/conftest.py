import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import fitz  # PyMuPDF
import pytest

from hybridocr.exceptions import ExtractionFailed
from hybridocr.ocr_backends.tesseract_backend import TesseractCLIEngine
from hybridocr.runner import ProcessRunner

# Long enough to stay above the 100 byte direct-text threshold
LONG_TEXT = "\n".join(
    f"Line {i} of a page that carries a proper embedded text layer." for i in range(1, 6)
)
OCR_TEXT = "Recognized text from a scanned page of the corrosion report.\n" * 3

PDFFONTS_HEADER = (
    "name                                 type              encoding         emb sub uni object ID\n"
    "------------------------------------ ----------------- ---------------- --- --- --- ---------\n"
)
PDFFONTS_ROW = "Helvetica                            Type 1            WinAnsi          no  no  no       5  0\n"


class FakeRunner(ProcessRunner):
    """
    Stands in for pdffonts, pdftotext, gm and tesseract.

    page_texts maps 1-based page numbers to the text pdftotext "finds".
    Calls are recorded as (tool, args, env).
    """

    def __init__(self, page_texts: Optional[Dict[int, str]] = None, fonts: bool = True,
                 languages: Iterable[str] = ("eng", "deu"), ocr_text: str = OCR_TEXT,
                 fail: Optional[Dict[str, str]] = None):
        super().__init__()
        self.page_texts = page_texts or {}
        self.fonts = fonts
        self.languages = set(languages)
        self.ocr_text = ocr_text
        self.fail = fail or {}
        self.calls: List[tuple] = []

    def tools(self) -> List[str]:
        return [tool for tool, _, _ in self.calls]

    def args_for(self, tool: str) -> List[List[str]]:
        return [args for t, args, _ in self.calls if t == tool]

    def run(self, args, env=None):
        args = [str(a) for a in args]
        tool = Path(args[0]).name
        self.calls.append((tool, args, dict(env or {})))
        if tool in self.fail:
            raise ExtractionFailed(self.fail[tool])
        return getattr(self, f"_{tool}")(args, env or {})

    def _pdffonts(self, args, env):
        return PDFFONTS_HEADER + (PDFFONTS_ROW if self.fonts else "")

    def _pdftotext(self, args, env):
        if "-f" in args:
            text = self.page_texts.get(int(args[args.index("-f") + 1]), "")
        else:
            text = "\f".join(self.page_texts[p] for p in sorted(self.page_texts))
        Path(args[-1]).write_text(text, encoding="utf-8")
        return ""

    def _gm(self, args, env):
        Path(args[-1]).write_bytes(b"II*\x00fake tiff")
        return ""

    def _tesseract(self, args, env):
        lang = args[args.index("-l") + 1]
        if lang not in self.languages:
            raise ExtractionFailed(
                f"Error opening data file /usr/share/tesseract-ocr/5/tessdata/{lang}.traineddata\n"
                "Please make sure the TESSDATA_PREFIX environment variable is set to your \"tessdata\" directory.\n"
                f"Failed loading language '{lang}'\n"
                "Tesseract couldn't load any languages!\n"
                "Could not initialize tesseract.\n"
            )
        Path(args[2] + ".txt").write_text(self.ocr_text, encoding="utf-8")
        return ""


def _write_pdf(path: Path, pages: List[Optional[str]], encrypt: bool = False) -> Path:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=11)
    kwargs = {}
    if encrypt:
        kwargs = dict(encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner", user_pw="secret")
    doc.save(str(path), **kwargs)
    doc.close()
    return path


@pytest.fixture
def make_pdf(tmp_path):
    """Factory for small PDFs; None in pages means a blank page."""
    src = tmp_path / "src"
    src.mkdir()

    def _make(name: str = "sample.pdf", pages: Optional[List[Optional[str]]] = None, encrypt: bool = False) -> Path:
        return _write_pdf(src / name, pages if pages is not None else [LONG_TEXT, LONG_TEXT], encrypt=encrypt)

    return _make


@pytest.fixture
def out_dir(tmp_path):
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def ocr_available(monkeypatch):
    monkeypatch.setattr(TesseractCLIEngine, "is_available", lambda self: True)


@pytest.fixture
def ocr_unavailable(monkeypatch):
    monkeypatch.setattr(TesseractCLIEngine, "is_available", lambda self: False)


@pytest.fixture
def scratch_root(tmp_path, monkeypatch):
    """Point tempfile at a known directory so leftover workspaces are visible."""
    import tempfile

    root = tmp_path / "scratch"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture(autouse=True)
def _restore_package_logger():
    # the CLI reconfigures the package logger, keep tests independent
    lg = logging.getLogger("hybridocr")
    saved = (list(lg.handlers), lg.level, lg.propagate)
    yield
    lg.handlers[:] = saved[0]
    lg.setLevel(saved[1])
    lg.propagate = saved[2]
