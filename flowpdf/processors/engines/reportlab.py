"""
文件路径：flowpdf/processors/engines/reportlab.py

说明：ReportLab 画布后端与页脚的 PyPDF2 合并。

- 正文绘制在单个内存画布上，每个页面结束时 showPage；
- ReportLab 页面一旦结束便不可再编辑，因此页脚绘制到独立的叠加图层 PDF，
  在 save 时按页与正文合并（PdfPage.merge_page）。
"""

from __future__ import annotations

from io import BytesIO
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from PyPDF2 import PdfReader, PdfWriter
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ...components import get_logger
from ...variables import STYLE_FONT_NAME, STYLE_NORMAL_FONT_SIZE, STYLE_TABLE_BORDER_WIDTH
from . import DrawingBackend, OutputTarget, write_output

if TYPE_CHECKING:
    from PIL import Image

    from ...components.page import PageGeometry
    from ..footer import FooterItem


logger = get_logger(__name__)


class ReportLabBackend(DrawingBackend):
    """基于 reportlab.pdfgen.canvas 的绘制后端。"""

    def __init__(self, *, border_width: float = STYLE_TABLE_BORDER_WIDTH) -> None:
        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer)
        self._border_width = float(border_width)
        self._page_sizes: List[Tuple[float, float]] = []
        self._open_handle: Optional[int] = None
        self._font: Tuple[str, float] = (STYLE_FONT_NAME, float(STYLE_NORMAL_FONT_SIZE))
        self._char_space: float = 0.0
        # Tc 属于文本状态，会跨文本对象保留；记录已写入的值以便归零
        self._emitted_char_space: float = 0.0
        self._footer_items: Dict[int, List[FooterItem]] = {}

    # ---------- 页面 ----------
    def open_surface(self, geometry: PageGeometry) -> int:
        if self._open_handle is not None:
            self.close_surface(self._open_handle)
        self._canvas.setPageSize(geometry.size)
        self._canvas.setLineWidth(self._border_width)
        self._page_sizes.append(geometry.size)
        self._open_handle = len(self._page_sizes) - 1
        self._emitted_char_space = 0.0
        return self._open_handle

    def close_surface(self, handle: int) -> None:
        if self._open_handle is None or handle != self._open_handle:
            logger.warning("关闭的页面句柄与当前页面不一致，忽略：%s (当前 %s)", handle, self._open_handle)
            return
        self._canvas.showPage()
        self._open_handle = None

    # ---------- 状态 ----------
    def set_font(self, font_name: str, font_size: float) -> None:
        self._canvas.setFont(font_name, font_size)
        self._font = (font_name, float(font_size))

    def set_fill_color(self, rgb: Tuple[int, int, int]) -> None:
        self._canvas.setFillColorRGB(*(v / 255.0 for v in rgb))

    def set_character_spacing(self, value: float) -> None:
        self._char_space = float(value)

    # ---------- 绘制 ----------
    def draw_string(self, x: float, y: float, text: str) -> None:
        text_obj = self._canvas.beginText(x, y)
        text_obj.setFont(*self._font)
        if self._char_space != self._emitted_char_space:
            text_obj.setCharSpace(self._char_space)
            self._emitted_char_space = self._char_space
        text_obj.textOut(text)
        self._canvas.drawText(text_obj)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._canvas.line(x1, y1, x2, y2)

    def draw_image(self, image: Image.Image, x: float, y: float, width: float, height: float) -> None:
        self._canvas.drawImage(ImageReader(image), x, y, width=width, height=height, mask="auto")

    # ---------- 页脚与输出 ----------
    def apply_footer(self, items: Sequence[FooterItem]) -> None:
        self._footer_items = {}
        for item in items:
            self._footer_items.setdefault(item.page_index, []).append(item)

    def save(self, output: OutputTarget) -> None:
        if self._open_handle is not None:
            self.close_surface(self._open_handle)
        self._canvas.save()
        data = self._buffer.getvalue()
        if self._footer_items:
            data = self._merge_footer(data)
        write_output(data, output)
        logger.info("ReportLab 输出完成：%d 页 (%.1f KB)", len(self._page_sizes), len(data) / 1024.0)

    def _build_footer_layer(self) -> bytes:
        """生成与正文页一一对应的页脚图层；无页脚的页面留空。"""
        buf = BytesIO()
        c = canvas.Canvas(buf)
        for page_index, size in enumerate(self._page_sizes):
            c.setPageSize(size)
            for item in self._footer_items.get(page_index, []):
                c.setFont(item.font_name, item.font_size)
                c.setFillColorRGB(*(v / 255.0 for v in item.color))
                c.drawString(item.x, item.y, item.text)
            c.showPage()
        c.save()
        return buf.getvalue()

    def _merge_footer(self, data: bytes) -> bytes:
        """将页脚图层逐页覆盖合并到正文上。"""
        base_reader = PdfReader(BytesIO(data))
        overlay_reader = PdfReader(BytesIO(self._build_footer_layer()))

        writer = PdfWriter()
        for i, page in enumerate(base_reader.pages):
            if i in self._footer_items and i < len(overlay_reader.pages):
                page.merge_page(overlay_reader.pages[i])  # PyPDF2 3.x API
            writer.add_page(page)

        out = BytesIO()
        writer.write(out)
        return out.getvalue()


__all__ = ["ReportLabBackend"]
