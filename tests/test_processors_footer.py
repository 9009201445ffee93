from __future__ import annotations

from datetime import date

import pytest

from flowpdf.components import PageGeometry
from flowpdf.processors.footer import Footer, build_footer_plan, substitute


def _geometries(n: int):
    return [PageGeometry(600, 800, 50, 40, 50, 50) for _ in range(n)]


def _plan(footer: Footer, n: int = 3):
    return build_footer_plan(
        footer,
        _geometries(n),
        measure_width=lambda text, font, size: 5.0 * len(text),
        line_height=lambda font, size: 10.0,
        today=date(2024, 3, 7),
        user="alice",
    )


class TestSubstitute:
    def test_all_placeholders(self):
        text = substitute("{DATE} {USER} {PAGE}/{NUMPAGES}", 2, 5, "07 Mar 2024", "bob")
        assert text == "07 Mar 2024 bob 2/5"

    def test_text_without_placeholders_unchanged(self):
        assert substitute("Confidential", 1, 1, "", "") == "Confidential"


class TestFooterPlan:
    def test_omit_and_count_first_page(self):
        footer = Footer(left_text="", center_text="", right_text="{PAGE} of {NUMPAGES}")
        items = _plan(footer)
        assert [(i.page_index, i.text) for i in items] == [(1, "2 of 3"), (2, "3 of 3")]

    def test_not_counting_first_page(self):
        footer = Footer(left_text="", center_text="", right_text="{PAGE}/{NUMPAGES}", count_first_page=False)
        items = _plan(footer)
        assert [i.text for i in items] == ["1/2", "2/2"]

    def test_first_page_included_when_not_omitted(self):
        footer = Footer(left_text="{PAGE}", center_text="", right_text="", omit_first_page=False)
        items = _plan(footer)
        assert [i.text for i in items] == ["1", "2", "3"]

    def test_default_footer_slots(self):
        items = [i for i in _plan(Footer.default()) if i.page_index == 1]
        texts = [i.text for i in items]
        assert texts == ["07 Mar 2024", "alice", "Page 2 of 3"]

    def test_slot_positions(self):
        items = [i for i in _plan(Footer.default()) if i.page_index == 1]
        left, center, right = items
        assert left.x == 50
        assert center.x == pytest.approx((600 - 5 * len("alice")) / 2)
        assert right.x + 5 * len("Page 2 of 3") == pytest.approx(550)
        assert {i.y for i in items} == {20.0}

    def test_multiline_slot_stacks_downward(self):
        footer = Footer(left_text="", center_text="line one\nline two", right_text="")
        items = [i for i in _plan(footer) if i.page_index == 2]
        assert [(i.text, i.y) for i in items] == [("line one", 20.0), ("line two", 10.0)]

    def test_style_is_carried(self):
        items = _plan(Footer.default())
        assert {(i.font_name, i.font_size, i.color) for i in items} == {("Times-Bold", 8.0, (128, 128, 128))}

    def test_default_returns_fresh_instance(self):
        a = Footer.default()
        a.center_text = "changed"
        assert Footer.default().center_text == "{USER}"


def test_finish_applies_footer_once(pager, backend, tmp_path):
    for _ in range(3):
        pager.new_page()
    footer = Footer(left_text="", center_text="", right_text="{PAGE}/{NUMPAGES}")
    assert pager.finish(tmp_path / "out.pdf", footer, today=date(2024, 1, 1), user="u")
    assert len(backend.named("apply_footer")) == 1
    assert [i.text for i in backend.footer_items] == ["2/3", "3/3"]
