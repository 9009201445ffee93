from __future__ import annotations

import json
from datetime import date
from io import BytesIO

import pdfplumber
import pytest
from PIL import Image

import main
from flowpdf import FLAG_CENTER, FLAG_JUSTIFY, Footer, PDFDocument


def _page_texts(data_or_path):
    with pdfplumber.open(data_or_path) as pdf:
        return [page.extract_text() or "" for page in pdf.pages]


def _pdf_bytes(backend) -> bytes:
    buf = BytesIO()
    backend.save(buf)
    return buf.getvalue()


def _long_document(engine: str) -> PDFDocument:
    doc = PDFDocument(engine=engine, footer=Footer.default())
    doc.draw_text("Report title\n", FLAG_CENTER)
    doc.draw_text("lorem ipsum dolor sit amet " * 400, FLAG_JUSTIFY)
    doc.draw_table([["Name", "Qty"], ["apple", "3"]], [120, 60])
    doc.draw_image(Image.new("RGB", (60, 40), (0, 128, 0)))
    return doc


class TestReportLabOutput:
    def test_text_and_footer_in_pdf(self, tmp_path):
        out = tmp_path / "report.pdf"
        doc = _long_document("reportlab")
        assert doc.finish(out, today=date(2024, 3, 7), user="tester")

        texts = _page_texts(out)
        assert len(texts) == doc.page_count >= 2
        assert "Report title" in texts[0]
        # 首页不绘制页脚，其余页右侧为 "Page k of n"
        assert "Page 1 of" not in texts[0]
        n = len(texts)
        for k in range(1, n):
            assert f"Page {k + 1} of {n}" in texts[k]
            assert "07 Mar 2024" in texts[k]
            assert "tester" in texts[k]

    def test_text_stays_inside_margins(self, tmp_path):
        out = tmp_path / "margins.pdf"
        doc = PDFDocument()
        doc.draw_text("word " * 3000, FLAG_JUSTIFY)
        assert doc.finish(out)
        with pdfplumber.open(out) as pdf:
            for page in pdf.pages:
                for ch in page.chars:
                    assert ch["x0"] >= 50 - 0.5
                    assert ch["x1"] <= page.width - 50 + 0.5
                    # pdfplumber 的 top 从页面上沿起算
                    assert page.height - ch["bottom"] >= 50 - 5

    def test_write_to_stream(self):
        buf = BytesIO()
        doc = PDFDocument()
        doc.draw_text("streamed")
        assert doc.finish(buf)
        assert buf.getvalue().startswith(b"%PDF")
        assert "streamed" in _page_texts(BytesIO(buf.getvalue()))[0]


class TestPyMuPDFOutput:
    def test_text_and_footer_in_pdf(self, tmp_path):
        fitz = pytest.importorskip("fitz")
        out = tmp_path / "report.pdf"
        doc = _long_document("pymupdf")
        assert doc.finish(out, today=date(2024, 3, 7), user="tester")

        with fitz.open(out) as pdf:
            n = pdf.page_count
            assert n == doc.page_count >= 2
            assert "Report title" in pdf[0].get_text()
            assert f"Page {n} of {n}" in pdf[n - 1].get_text()

    def test_spaced_line_is_committed_once(self, monkeypatch):
        fitz = pytest.importorskip("fitz")
        from flowpdf.components import PageGeometry
        from flowpdf.processors.engines.pymupdf import PyMuPDFBackend

        commits = []
        page_inserts = []
        original_commit = fitz.Shape.commit

        def counting_commit(self, *args, **kwargs):
            commits.append(1)
            return original_commit(self, *args, **kwargs)

        monkeypatch.setattr(fitz.Shape, "commit", counting_commit)
        monkeypatch.setattr(fitz.Page, "insert_text", lambda *a, **k: page_inserts.append(a))

        backend = PyMuPDFBackend()
        backend.open_surface(PageGeometry(600, 800, 50, 50, 50, 50))
        backend.set_character_spacing(0.5)
        backend.draw_string(50, 700, "abcdef")
        # 两端对齐的一行：无论多少字形，都只写一次内容流
        assert len(commits) == 1
        assert page_inserts == []

        with fitz.open(stream=_pdf_bytes(backend), filetype="pdf") as pdf:
            text = pdf[0].get_text()
        for ch in "abcdef":
            assert ch in text


class TestCommandLine:
    def test_content_json_to_pdf(self, tmp_path):
        content = tmp_path / "content.json"
        content.write_text(
            json.dumps(
                [
                    {"type": "text", "text": "Hello layout\n", "style": "title1", "align": "center"},
                    {"type": "table", "rows": [["k", "v"], ["a", "1"]], "widths": [80, 80]},
                ]
            ),
            encoding="utf-8",
        )
        out = tmp_path / "out.pdf"
        assert main.main(["--content-json", str(content), "--output", str(out), "--no-footer"]) == 0
        texts = _page_texts(out)
        assert "Hello layout" in texts[0]

    def test_csv_table(self, tmp_path):
        csv_path = tmp_path / "t.csv"
        csv_path.write_text("Name,Qty\napple,3\n", encoding="utf-8")
        out = tmp_path / "t.pdf"
        assert main.main(["--table-csv", str(csv_path), "--output", str(out)]) == 0
        assert "apple" in _page_texts(out)[0]

    def test_missing_input_returns_usage_code(self):
        assert main.main([]) == 2

    def test_example_document(self, tmp_path, monkeypatch):
        monkeypatch.setattr(main, "PATH_EXAMPLE_CONTENT_JSON", tmp_path / "content.json")
        monkeypatch.setattr(main, "PATH_EXAMPLES_DIR", tmp_path)
        out = tmp_path / "example.pdf"
        assert main.main(["--make-example", "--output", str(out)]) == 0
        texts = _page_texts(out)
        assert len(texts) > 1
        assert "END OF DOCUMENT" in texts[-1]
        assert (tmp_path / "content.json").exists()
