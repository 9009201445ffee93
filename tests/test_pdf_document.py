from __future__ import annotations

import pytest
from PIL import Image

from conftest import RecordingBackend, WordMetrics
from flowpdf import FLAG_CENTER, Footer, InvalidLayoutInputError, NoActiveSurfaceError, PDFDocument


@pytest.fixture
def doc():
    return PDFDocument(backend=RecordingBackend(), metrics=WordMetrics())


class TestFacade:
    def test_first_draw_opens_a_page(self, doc):
        assert doc.page_count == 0
        assert doc.draw_text("hello") == 12
        assert doc.page_count == 1

    def test_cursor_before_first_draw_is_kept(self, doc):
        doc.set_cursor(50, 400)
        doc.draw_text("hello")
        assert doc.page_count == 1
        assert doc.backend.strings() == [(50, 400, "hello")]

    def test_cursor_before_first_table_and_image(self):
        doc = PDFDocument(backend=RecordingBackend(), metrics=WordMetrics())
        doc.set_cursor(50, 400)
        doc.draw_table([["a"]], [40])
        assert doc.backend.named("draw_line")[0][2][:2] == (50, 400)

        doc = PDFDocument(backend=RecordingBackend(), metrics=WordMetrics())
        doc.set_cursor(120, 500)
        doc.draw_image(Image.new("RGB", (30, 20)))
        assert doc.backend.named("draw_image")[0][2][1:3] == (120, 480)

    def test_explicit_pages_required_without_auto_open(self):
        doc = PDFDocument(backend=RecordingBackend(), metrics=WordMetrics(), auto_open_page=False)
        with pytest.raises(NoActiveSurfaceError):
            doc.draw_text("hello")
        doc.new_page()
        assert doc.draw_text("hello") == 12

    def test_draw_text_at_position(self, doc):
        doc.draw_text("a", x=100, y=400)
        assert doc.backend.strings() == [(100, 400, "a")]

    def test_styles_switch_font_size(self, doc):
        doc.title1_style()
        assert doc.font_size == 20
        doc.title2_style()
        assert doc.font_size == 15
        doc.set_normal_font_size(11)
        doc.normal_style()
        assert doc.font_size == 11
        assert doc.line_sep == pytest.approx(13.2)

    def test_margin_properties(self, doc):
        doc.left_margin = 70
        assert doc.content_start_x == 70
        assert doc.content_width == pytest.approx(doc.page_width - 120)
        with pytest.raises(InvalidLayoutInputError):
            doc.right_margin = 10_000
        assert doc.right_margin == 50

    def test_table_cell_margin_is_used(self, doc):
        doc.set_table_cell_margin(10)
        doc.set_cursor(50, 700)
        doc.draw_table([["a"]], [60])
        assert doc.backend.strings()[0][0] == 60

    def test_draw_image_from_path(self, doc, tmp_path):
        path = tmp_path / "img.png"
        Image.new("RGB", (30, 20)).save(path)
        assert doc.draw_image(path, FLAG_CENTER) == 20

    def test_finish_passes_footer(self, doc, tmp_path):
        doc.footer = Footer(left_text="", center_text="", right_text="{PAGE}", omit_first_page=False)
        doc.draw_text("x")
        assert doc.finish(tmp_path / "out.pdf", user="u")
        assert [i.text for i in doc.backend.footer_items] == ["1"]


class TestFromConfig:
    def test_config_values_are_applied(self):
        config = {
            "page_size": "A5",
            "orientation": "landscape",
            "margins": {"top": 20, "left": 30},
            "title1_font_size": 24,
            "table_cell_margin": 2,
            "footer": Footer.default(),
        }
        doc = PDFDocument.from_config(config, backend=RecordingBackend(), metrics=WordMetrics())
        assert doc.page_width > doc.page_height
        assert (doc.top_margin, doc.bottom_margin, doc.left_margin) == (20, 50, 30)
        assert doc.title1_font_size == 24
        assert doc.table_cell_margin == 2
        assert doc.footer == Footer.default()


class TestDrawBlocks:
    def test_block_types(self, doc, tmp_path):
        Image.new("RGB", (10, 10)).save(tmp_path / "i.png")
        blocks = [
            {"type": "text", "text": "Title\n", "style": "title1", "align": "center"},
            {"type": "font", "size": 12, "color": [255, 0, 0]},
            {"type": "text", "text": "body"},
            {"type": "image", "image": "i.png", "align": "left|newline"},
            {"type": "table", "rows": [["a", {"image": "i.png"}], None], "widths": [40, 40]},
            {"type": "new_page"},
            {"type": "cursor", "x": 100, "y": 300},
        ]
        assert doc.draw_blocks(blocks, base_dir=tmp_path) == len(blocks)
        assert doc.page_count == 2
        assert doc.get_cursor() == (100, 300)
        # 带 style 的文本块结束后恢复原字号
        assert doc.font_size == 12

    def test_bad_blocks_are_skipped(self, doc):
        blocks = [
            {"type": "sparkle"},
            {"type": "text", "text": "x", "align": "middle"},
            {"type": "image", "image": "missing.png"},
            {"type": "table", "rows": [["a", "b"], ["c"]], "widths": [40, 40]},
            {"type": "text", "text": "ok"},
        ]
        assert doc.draw_blocks(blocks) == 1
        assert [s[2] for s in doc.backend.strings()] == ["ok"]

    def test_table_widths_default_to_even_split(self, doc):
        doc.draw_blocks([{"type": "table", "rows": [["a", "b"]]}])
        xs = sorted({line[2][0] for line in doc.backend.named("draw_line")})
        assert xs[0] == 50
        assert xs[1] == pytest.approx(50 + doc.content_width / 2)
