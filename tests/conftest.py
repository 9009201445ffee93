from __future__ import annotations

"""
pytest 全局配置：将项目根目录加入 sys.path，确保 `from flowpdf...` 可被导入；
并提供记录型绘制后端与确定性的字体度量替身。
"""

import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence, Set, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from flowpdf.processors.engines import DrawingBackend  # noqa: E402
from flowpdf.processors.pagination import Paginator  # noqa: E402


class RecordingBackend(DrawingBackend):
    """把每次调用记录为 (页序号, 方法名, 参数)；fail_on 中的方法会抛出 OSError。"""

    def __init__(self, fail_on: Optional[Set[str]] = None) -> None:
        self.calls: List[Tuple[int, str, Tuple[Any, ...]]] = []
        self.fail_on: Set[str] = set(fail_on or ())
        self.page: int = -1
        self.pages_opened: int = 0
        self.footer_items: List[Any] = []
        self.saved_to: Any = None

    def _record(self, name: str, *args: Any) -> None:
        if name in self.fail_on:
            raise OSError(f"simulated failure in {name}")
        self.calls.append((self.page, name, args))

    def open_surface(self, geometry):
        self.page = self.pages_opened
        self.pages_opened += 1
        self._record("open_surface", geometry)
        return self.page

    def close_surface(self, handle):
        self._record("close_surface", handle)

    def set_font(self, font_name, font_size):
        self._record("set_font", font_name, font_size)

    def set_fill_color(self, rgb):
        self._record("set_fill_color", rgb)

    def set_character_spacing(self, value):
        self._record("set_character_spacing", value)

    def draw_string(self, x, y, text):
        self._record("draw_string", x, y, text)

    def draw_line(self, x1, y1, x2, y2):
        self._record("draw_line", x1, y1, x2, y2)

    def draw_image(self, image, x, y, width, height):
        self._record("draw_image", image, x, y, width, height)

    def apply_footer(self, items: Sequence[Any]) -> None:
        self._record("apply_footer", len(items))
        self.footer_items = list(items)

    def save(self, output) -> None:
        self._record("save", output)
        self.saved_to = output

    # ---------- 查询辅助 ----------
    def named(self, name: str) -> List[Tuple[int, str, Tuple[Any, ...]]]:
        return [c for c in self.calls if c[1] == name]

    def strings(self) -> List[Tuple[float, float, str]]:
        """所有 draw_string 的 (x, y, text)。"""
        return [c[2] for c in self.named("draw_string")]


class WordMetrics:
    """每个单词宽 10pt（与字号无关），行距 = 12 * 字号 / 10（字号 10 时为 12pt）。"""

    def width(self, text, font_name, font_size):
        return 10.0 * len(text.split())

    def line_height(self, font_name, font_size):
        return 12.0 * float(font_size) / 10.0


class CharMetrics:
    """每个字符（含空格）宽 5pt，行距 = 12 * 字号 / 10。"""

    def width(self, text, font_name, font_size):
        return 5.0 * len(text)

    def line_height(self, font_name, font_size):
        return 12.0 * float(font_size) / 10.0


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def make_pager(backend):
    """构造 Paginator：默认 A4、四边 50pt、WordMetrics。"""

    def _make(metrics=None, **kwargs) -> Paginator:
        return Paginator(backend, metrics if metrics is not None else WordMetrics(), **kwargs)

    return _make


@pytest.fixture
def pager(make_pager) -> Paginator:
    return make_pager()
