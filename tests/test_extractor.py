import logging

import pytest

import hybridocr.extractor as extractor_mod
from hybridocr import ExtractionConfig, ExtractionFailed, TextExtractor, extract_text

from conftest import LONG_TEXT, OCR_TEXT, FakeRunner


def _extract(pdfs, runner, **options):
    return TextExtractor(ExtractionConfig.from_options(**options), runner=runner).extract(pdfs)


def test_paged_extraction(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("obama_arts.pdf")
    runner = FakeRunner(page_texts={1: LONG_TEXT, 2: LONG_TEXT})
    paths = _extract(pdf, runner, output=out_dir, pages="all")
    assert paths == [out_dir / "obama_arts_1.txt", out_dir / "obama_arts_2.txt"]
    assert sorted(p.name for p in out_dir.glob("*.txt")) == ["obama_arts_1.txt", "obama_arts_2.txt"]
    assert "tesseract" not in runner.tools()


def test_page_only_extraction(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("obama_arts.pdf")
    paths = _extract(pdf, FakeRunner(page_texts={2: LONG_TEXT}), output=out_dir, pages=range(2, 3))
    assert paths == [out_dir / "obama_arts_2.txt"]
    assert [p.name for p in out_dir.glob("*.txt")] == ["obama_arts_2.txt"]


def test_capitalized_name_is_preserved(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("OBAMA_ARTS.PDF")
    paths = _extract(pdf, FakeRunner(page_texts={2: LONG_TEXT}), output=out_dir, pages=[2])
    assert [p.name for p in paths] == ["OBAMA_ARTS_2.txt"]


def test_name_with_spaces_and_quotes(make_pdf, out_dir, ocr_available):
    name = "PDF file with spaces 'single' and \"double quotes\".pdf"
    pdf = make_pdf(name)
    runner = FakeRunner(page_texts={1: LONG_TEXT, 2: LONG_TEXT})
    paths = _extract(pdf, runner, output=out_dir, pages="all")
    assert [p.name for p in paths] == [
        "PDF file with spaces 'single' and \"double quotes\"_1.txt",
        "PDF file with spaces 'single' and \"double quotes\"_2.txt",
    ]
    assert all(p.exists() for p in paths)
    assert runner.args_for("pdffonts")[0][-1] == str(pdf)


def test_short_pages_escalate_to_ocr(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("mixed.pdf", pages=[LONG_TEXT, None, LONG_TEXT])
    runner = FakeRunner(page_texts={1: LONG_TEXT, 2: "2", 3: LONG_TEXT})
    paths = _extract(pdf, runner, output=out_dir, pages="all")

    # direct results first, then the OCR output
    assert paths == [out_dir / "mixed_1.txt", out_dir / "mixed_3.txt", out_dir / "mixed_2.txt"]
    assert [a[-2] for a in runner.args_for("gm")] == [f"{pdf}[1]"]
    assert (out_dir / "mixed_2.txt").read_text(encoding="utf-8") == OCR_TEXT
    assert (out_dir / "mixed_1.txt").read_text(encoding="utf-8") == LONG_TEXT


def test_no_fonts_means_everything_via_ocr(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("corrosion.pdf", pages=[None] * 4)
    runner = FakeRunner(fonts=False)
    paths = _extract(pdf, runner, output=out_dir, pages="all")
    assert [p.name for p in paths] == [f"corrosion_{i}.txt" for i in range(1, 5)]
    assert all(p.stat().st_size > 1 for p in paths)
    assert "pdftotext" not in runner.tools()


def test_no_fonts_whole_document(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("scan.pdf", pages=[None, None])
    runner = FakeRunner(fonts=False)
    assert _extract(pdf, runner, output=out_dir) == [out_dir / "scan.txt"]
    assert len(runner.args_for("tesseract")) == 1


def test_whole_document_direct_has_no_escalation(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("thin.pdf")
    runner = FakeRunner(page_texts={1: "x"})
    assert _extract(pdf, runner, output=out_dir) == [out_dir / "thin.txt"]
    assert runner.tools() == ["pdffonts", "pdftotext"]


def test_forced_ocr_skips_font_check(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("a.pdf")
    runner = FakeRunner(page_texts={1: LONG_TEXT, 2: LONG_TEXT})
    paths = _extract(pdf, runner, output=out_dir, pages="all", ocr=True)
    assert len(paths) == 2
    assert "pdffonts" not in runner.tools()
    assert "pdftotext" not in runner.tools()


def test_forbidden_ocr_keeps_short_pages(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("a.pdf")
    runner = FakeRunner(fonts=False, page_texts={1: "", 2: LONG_TEXT})
    paths = _extract(pdf, runner, output=out_dir, pages="all", ocr=False)
    assert paths == [out_dir / "a_1.txt", out_dir / "a_2.txt"]
    assert runner.tools() == ["pdftotext", "pdftotext"]


def test_without_ocr_engine_direct_text_is_kept(make_pdf, out_dir, ocr_unavailable, caplog):
    pdf = make_pdf("a.pdf", pages=[None, LONG_TEXT])
    runner = FakeRunner(page_texts={2: LONG_TEXT})
    with caplog.at_level(logging.WARNING, logger="hybridocr"):
        paths = _extract(pdf, runner, output=out_dir, pages="all")
    assert paths == [out_dir / "a_1.txt", out_dir / "a_2.txt"]
    assert "tesseract" not in runner.tools()
    assert "OCR engine not available" in caplog.text


def test_threshold_boundary(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("edge.pdf")
    runner = FakeRunner(page_texts={1: "a" * 100, 2: "a" * 99})
    paths = _extract(pdf, runner, output=out_dir, pages="all")
    assert paths == [out_dir / "edge_1.txt", out_dir / "edge_2.txt"]
    assert [a[-2] for a in runner.args_for("gm")] == [f"{pdf}[1]"]


def test_queue_is_per_document(make_pdf, out_dir, ocr_available):
    first = make_pdf("first.pdf")
    second = make_pdf("second.pdf")

    class PerDocRunner(FakeRunner):
        def _pdftotext(self, args, env):
            self.page_texts = {1: "", 2: LONG_TEXT} if "first" in args[-2] else {1: LONG_TEXT, 2: LONG_TEXT}
            return super()._pdftotext(args, env)

    runner = PerDocRunner()
    paths = _extract([first, second], runner, output=out_dir, pages="all")
    assert [p.name for p in paths] == ["first_2.txt", "first_1.txt", "second_1.txt", "second_2.txt"]
    assert [a[-2] for a in runner.args_for("gm")] == [f"{first}[0]"]


def test_failure_aborts_remaining_documents(make_pdf, out_dir, ocr_available):
    good = make_pdf("good.pdf")
    bad = make_pdf("bad.pdf")

    class FailingRunner(FakeRunner):
        def _pdffonts(self, args, env):
            if args[-1].endswith("bad.pdf"):
                raise ExtractionFailed("Syntax Error: Couldn't read xref table\n")
            return super()._pdffonts(args, env)

    runner = FailingRunner(page_texts={1: LONG_TEXT, 2: LONG_TEXT})
    with pytest.raises(ExtractionFailed, match="xref"):
        _extract([good, bad, good], runner, output=out_dir, pages="all")
    # earlier output stays, nothing after the failure ran
    assert sorted(p.name for p in out_dir.glob("*.txt")) == ["good_1.txt", "good_2.txt"]
    assert len(runner.args_for("pdffonts")) == 2


@pytest.mark.parametrize("ocr", [True, False, None])
def test_password_protected_fails_in_every_mode(make_pdf, out_dir, ocr_available, ocr):
    pdf = make_pdf("completely_encrypted.pdf", encrypt=True)
    with pytest.raises(ExtractionFailed):
        _extract(pdf, FakeRunner(), output=out_dir, pages="all", ocr=ocr)


def test_unsupported_language(make_pdf, out_dir, ocr_available):
    pdf = make_pdf("corrosion.pdf", pages=[None, None])
    with pytest.raises(ExtractionFailed) as exc:
        _extract(pdf, FakeRunner(fonts=False), output=out_dir, pages="all", language="mock")
    assert "tessdata/mock" in exc.value.output


def test_same_inputs_same_file_names(make_pdf, tmp_path, ocr_available):
    pdf = make_pdf("mixed.pdf", pages=[LONG_TEXT, None])
    names = []
    for run in ("one", "two"):
        out = tmp_path / run
        out.mkdir()
        runner = FakeRunner(page_texts={1: LONG_TEXT, 2: ""})
        _extract(pdf, runner, output=out, pages="all")
        names.append(sorted(p.name for p in out.iterdir()))
    assert names[0] == names[1] == ["mixed_1.txt", "mixed_2.txt"]


def test_extract_text_creates_output_dir(make_pdf, tmp_path, monkeypatch, ocr_available):
    runner = FakeRunner(page_texts={1: LONG_TEXT, 2: LONG_TEXT})
    monkeypatch.setattr(extractor_mod, "ProcessRunner", lambda timeout=None: runner)
    out = tmp_path / "nested" / "out"
    paths = extract_text(str(make_pdf("obama_arts.pdf")), output=out, pages="all")
    assert out.is_dir()
    assert [p.name for p in paths] == ["obama_arts_1.txt", "obama_arts_2.txt"]
