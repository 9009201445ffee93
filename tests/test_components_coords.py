from __future__ import annotations

import pytest

from flowpdf.components import (
    InvalidLayoutInputError,
    PageGeometry,
    align_offset,
    clamp_coords,
    clamp_cursor,
    resolve_page_size,
)
from flowpdf.variables import FLAG_CENTER, FLAG_JUSTIFY, FLAG_LEFT, FLAG_RIGHT


def test_clamp_basic_center():
    x, y = clamp_coords(50, 60, 0, 200, 0, 100)
    assert (x, y) == (50, 60)


def test_clamp_left_bottom():
    x, y = clamp_coords(-10, -5, 2, 198, 2, 98)
    assert (x, y) == (2, 2)


def test_clamp_right_top():
    x, y = clamp_coords(500, 500, 2, 198, 2, 98)
    assert (x, y) == (198, 98)


def test_clamp_cursor_to_writable_area():
    g = PageGeometry(200, 300, 20, 10, 30, 40)
    assert clamp_cursor(0, 1000, g) == (30, 280)
    assert clamp_cursor(500, -5, g) == (160, 10)


def test_align_offset():
    assert align_offset(100, FLAG_CENTER) == 50
    assert align_offset(100, FLAG_RIGHT) == 100
    assert align_offset(100, FLAG_LEFT) == 0
    assert align_offset(100, FLAG_JUSTIFY) == 0


class TestPageGeometry:
    def test_content_area(self):
        g = PageGeometry(200, 300, 20, 10, 30, 40)
        assert g.content_width == 130
        assert g.content_height == 270
        assert (g.content_start_x, g.content_end_x) == (30, 160)
        assert (g.content_start_y, g.content_end_y) == (280, 10)

    def test_empty_writable_area_rejected(self):
        with pytest.raises(InvalidLayoutInputError):
            PageGeometry(200, 300, 0, 0, 100, 100)

    def test_negative_margin_rejected(self):
        with pytest.raises(InvalidLayoutInputError):
            PageGeometry(200, 300, -1, 0, 0, 0)


class TestResolvePageSize:
    def test_named_size_case_insensitive(self):
        assert resolve_page_size("letter") == (612.0, 792.0)

    def test_landscape_swaps(self):
        w, h = resolve_page_size("A4", "landscape")
        assert w > h

    def test_portrait_normalises_tuple(self):
        assert resolve_page_size((400, 300)) == (300.0, 400.0)

    def test_unknown_name(self):
        with pytest.raises(InvalidLayoutInputError):
            resolve_page_size("B99")

    def test_non_positive_size(self):
        with pytest.raises(InvalidLayoutInputError):
            resolve_page_size((0, 100))
