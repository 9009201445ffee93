from __future__ import annotations

import pytest

from flowpdf.components import InvalidLayoutInputError, NoActiveSurfaceError
from flowpdf.processors.pagination import Paginator


class TestPageLifecycle:
    def test_document_starts_without_page(self, pager, backend):
        assert pager.state.page_count == 0
        assert not pager.state.page_open
        assert backend.calls == []

    def test_ensure_page_opens_lazily(self, pager, backend):
        pager.ensure_page()
        assert pager.state.page_count == 1
        assert [c[1] for c in backend.calls][:1] == ["open_surface"]

    def test_ensure_page_without_auto_open_raises(self, make_pager):
        pager = make_pager(auto_open_page=False)
        with pytest.raises(NoActiveSurfaceError):
            pager.ensure_page()

    def test_new_page_closes_previous_and_resets_cursor(self, pager, backend):
        pager.new_page()
        pager.set_cursor(100, 100)
        pager.new_page()
        names = [c[1] for c in backend.calls]
        assert names.index("close_surface") < names.index("open_surface", 1)
        g = pager.geometry
        assert pager.get_cursor() == (g.content_start_x, g.content_start_y)
        assert pager.state.page_count == 2

    def test_cursor_set_before_first_page_is_kept(self, pager):
        pager.set_cursor(50, 400)
        pager.ensure_page()
        assert pager.state.page_count == 1
        assert pager.get_cursor() == (50, 400)
        # 显式开页仍复位到页顶
        pager.new_page()
        g = pager.geometry
        assert pager.get_cursor() == (g.content_start_x, g.content_start_y)

    def test_lazy_page_without_cursor_starts_at_top(self, pager):
        pager.ensure_page()
        g = pager.geometry
        assert pager.get_cursor() == (g.content_start_x, g.content_start_y)

    def test_style_is_reapplied_on_every_page(self, pager, backend):
        pager.set_font_size(20)
        pager.set_text_color((1, 2, 3))
        pager.new_page()
        pager.new_page()
        fonts = [c for c in backend.named("set_font") if c[0] == 1]
        colors = [c for c in backend.named("set_fill_color") if c[0] == 1]
        assert fonts[-1][2] == ("Helvetica", 20.0)
        assert colors[-1][2] == ((1, 2, 3),)

    def test_finish_twice_is_rejected(self, pager, backend, tmp_path):
        pager.new_page()
        assert pager.finish(tmp_path / "a.pdf") is True
        with pytest.raises(NoActiveSurfaceError):
            pager.finish(tmp_path / "b.pdf")

    def test_drawing_after_finish_is_rejected(self, pager, tmp_path):
        pager.new_page()
        pager.finish(tmp_path / "a.pdf")
        with pytest.raises(NoActiveSurfaceError):
            pager.ensure_page()
        with pytest.raises(NoActiveSurfaceError):
            pager.new_page()

    def test_finish_closes_open_page_before_save(self, pager, backend, tmp_path):
        pager.new_page()
        pager.finish(tmp_path / "a.pdf")
        names = [c[1] for c in backend.calls]
        assert names[-2:] == ["close_surface", "save"]


class TestStyleState:
    def test_line_sep_follows_font_size(self, pager):
        assert pager.line_sep == 12
        pager.set_font_size(20)
        assert pager.line_sep == 24

    def test_font_change_on_open_page_is_sent_to_backend(self, pager, backend):
        pager.new_page()
        pager.set_font("Times-Roman")
        assert backend.named("set_font")[-1][2] == ("Times-Roman", 10.0)


class TestGeometry:
    def test_default_a4_writable_area(self, pager):
        g = pager.geometry
        assert (g.content_start_x, g.content_end_y) == (50, 50)
        assert g.content_width == pytest.approx(595.2756 - 100, abs=1e-3)
        assert g.content_start_y == pytest.approx(841.8898 - 50, abs=1e-3)

    def test_landscape_swaps_dimensions(self, make_pager):
        pager = make_pager(orientation="landscape")
        g = pager.geometry
        assert g.page_width > g.page_height

    def test_margin_change_clamps_cursor(self, pager):
        pager.new_page()
        pager.set_margins(top=100, left=80)
        g = pager.geometry
        assert pager.get_cursor() == (80, g.page_height - 100)

    def test_invalid_margins_raise_and_keep_state(self, pager):
        before = pager.geometry
        with pytest.raises(InvalidLayoutInputError):
            pager.set_margins(left=400, right=400)
        with pytest.raises(InvalidLayoutInputError):
            pager.set_margins(top=-1)
        assert pager.geometry == before

    def test_page_size_takes_effect_on_next_page(self, pager, backend):
        pager.new_page()
        pager.set_page_size("LETTER")
        assert backend.named("open_surface")[0][2][0].page_height == pytest.approx(841.8898, abs=1e-3)
        pager.new_page()
        assert backend.named("open_surface")[1][2][0].page_height == pytest.approx(792.0)


class TestAdvanceLine:
    def test_drops_one_line(self, pager):
        pager.new_page()
        pager.set_cursor(120, 500)
        assert pager.advance_line(50) is False
        assert pager.get_cursor() == (50, 488)

    def test_breaks_near_bottom(self, pager):
        pager.new_page()
        pager.set_cursor(120, 70)
        assert pager.advance_line(60) is True
        assert pager.state.page_count == 2
        assert pager.get_cursor() == (60, pager.geometry.content_start_y)

    def test_suppression_is_scoped(self, pager):
        pager.new_page()
        with pager.suppress_page_breaks():
            with pager.suppress_page_breaks():
                pass
            assert pager.state.suppress_breaks is True
            pager.set_cursor(50, 70)
            assert pager.advance_line(50) is False
        assert pager.state.suppress_breaks is False


def test_paginator_accepts_explicit_page_tuple(backend):
    from conftest import WordMetrics

    pager = Paginator(backend, WordMetrics(), page_size=(300, 200), margins=(10, 10, 10, 10))
    assert pager.geometry.size == (200, 300)
