"""
文件路径：flowpdf/processors/engines/pymupdf.py

说明：PyMuPDF 直接绘制后端。

- PyMuPDF 以左上为原点、y 向下，绘制前统一翻转：y_fitz = page_height - y；
- 文本宽度仍使用 ReportLab 度量，保证与换行计算一致；
- 页面始终可编辑，页脚在 save 前直接写入已有页面；
- 字符间距（Tc）无原生参数，按字形逐个写入同一 Shape 并累加间距，整行提交一次。
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Set, Tuple

import fitz  # PyMuPDF
from reportlab.pdfbase import pdfmetrics

from ...components import FileHandler, get_logger
from ...variables import ERR_BACKEND_CALL_FAILED, STYLE_FONT_NAME, STYLE_NORMAL_FONT_SIZE, STYLE_TABLE_BORDER_WIDTH
from . import DrawingBackend, OutputTarget

if TYPE_CHECKING:
    from PIL import Image

    from ...components.page import PageGeometry
    from ..footer import FooterItem


logger = get_logger(__name__)

# ReportLab 标准字体名 -> PyMuPDF Base-14 简写
_BASE14_FONTS: Dict[str, str] = {
    "Helvetica": "helv",
    "Helvetica-Bold": "hebo",
    "Helvetica-Oblique": "heit",
    "Helvetica-BoldOblique": "hebi",
    "Times-Roman": "tiro",
    "Times-Bold": "tibo",
    "Times-Italic": "tiit",
    "Times-BoldItalic": "tibi",
    "Courier": "cour",
    "Courier-Bold": "cobo",
    "Courier-Oblique": "coit",
    "Courier-BoldOblique": "cobi",
    "Symbol": "symb",
    "ZapfDingbats": "zadb",
}


class PyMuPDFBackend(DrawingBackend):
    """基于 fitz.Document 的绘制后端。

    参数：
        font_files: 非标准字体名到 TTF/OTF 文件的映射，用于 insert_font 内嵌。
        border_width: 表格边框线宽。
    """

    def __init__(
        self,
        *,
        font_files: Optional[Dict[str, Path]] = None,
        border_width: float = STYLE_TABLE_BORDER_WIDTH,
    ) -> None:
        self._doc = fitz.open()
        self._page: Optional[fitz.Page] = None
        self._font_files: Dict[str, Path] = {k: Path(v) for k, v in (font_files or {}).items()}
        self._border_width = float(border_width)
        self._font: Tuple[str, float] = (STYLE_FONT_NAME, float(STYLE_NORMAL_FONT_SIZE))
        self._color: Tuple[float, float, float] = (0.0, 0.0, 0.0)
        self._char_space: float = 0.0
        # 每页已内嵌的字体：页码 -> 字体名集合
        self._inserted_fonts: Dict[int, Set[str]] = {}

    def _require_page(self) -> fitz.Page:
        if self._page is None:
            raise RuntimeError(f"[{ERR_BACKEND_CALL_FAILED}] 当前没有打开的页面")
        return self._page

    def _fitz_font(self, page: fitz.Page, font_name: str) -> str:
        """解析 PyMuPDF 可用的字体名；自定义字体首次使用时内嵌到该页。"""
        code = _BASE14_FONTS.get(font_name)
        if code:
            return code
        font_file = self._font_files.get(font_name)
        if font_file is None:
            logger.warning("PyMuPDF 未找到字体文件，回退 Helvetica：%s", font_name)
            return "helv"
        inserted = self._inserted_fonts.setdefault(page.number, set())
        if font_name not in inserted:
            page.insert_font(fontname=font_name, fontfile=str(font_file))
            inserted.add(font_name)
            logger.info("PyMuPDF 已内嵌字体：%s -> %s", font_name, font_file)
        return font_name

    def _insert_text(
        self,
        page: fitz.Page,
        x: float,
        y: float,
        text: str,
        font: Tuple[str, float],
        color: Tuple[float, float, float],
        char_space: float = 0.0,
    ) -> None:
        font_name, font_size = font
        fontname = self._fitz_font(page, font_name)
        baseline = page.rect.height - y
        if not char_space:
            page.insert_text((x, baseline), text, fontsize=font_size, fontname=fontname, color=color)
            return
        # 整行字形收进同一个 Shape，只提交一次内容流
        shape = page.new_shape()
        cur_x = x
        for ch in text:
            shape.insert_text((cur_x, baseline), ch, fontsize=font_size, fontname=fontname, color=color)
            cur_x += pdfmetrics.stringWidth(ch, font_name, font_size) + char_space
        shape.commit()

    # ---------- 页面 ----------
    def open_surface(self, geometry: PageGeometry) -> int:
        self._page = self._doc.new_page(width=geometry.page_width, height=geometry.page_height)
        return self._page.number

    def close_surface(self, handle: int) -> None:
        self._page = None

    # ---------- 状态 ----------
    def set_font(self, font_name: str, font_size: float) -> None:
        self._font = (font_name, float(font_size))

    def set_fill_color(self, rgb: Tuple[int, int, int]) -> None:
        self._color = tuple(v / 255.0 for v in rgb)  # type: ignore[assignment]

    def set_character_spacing(self, value: float) -> None:
        self._char_space = float(value)

    # ---------- 绘制 ----------
    def draw_string(self, x: float, y: float, text: str) -> None:
        page = self._require_page()
        self._insert_text(page, x, y, text, self._font, self._color, self._char_space)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        page = self._require_page()
        h = page.rect.height
        page.draw_line(fitz.Point(x1, h - y1), fitz.Point(x2, h - y2), color=(0, 0, 0), width=self._border_width)

    def draw_image(self, image: Image.Image, x: float, y: float, width: float, height: float) -> None:
        page = self._require_page()
        h = page.rect.height
        buf = BytesIO()
        image.save(buf, format="PNG")
        rect = fitz.Rect(x, h - (y + height), x + width, h - y)
        page.insert_image(rect, stream=buf.getvalue())

    def add_font_file(self, font_name: str, path: Path) -> None:
        self._font_files[font_name] = Path(path)

    # ---------- 页脚与输出 ----------
    def apply_footer(self, items: Sequence[FooterItem]) -> None:
        for item in items:
            page = self._doc[item.page_index]
            color = tuple(v / 255.0 for v in item.color)
            self._insert_text(page, item.x, item.y, item.text, (item.font_name, item.font_size), color)

    def save(self, output: OutputTarget) -> None:
        self._page = None
        if isinstance(output, (str, Path)):
            target = Path(output)
            FileHandler.ensure_parent_writable(target)
            self._doc.save(str(target), deflate=True, clean=True, garbage=4)
            size = target.stat().st_size
        else:
            data = self._doc.tobytes(deflate=True, clean=True, garbage=4)
            output.write(data)
            size = len(data)
        logger.info("PyMuPDF 输出完成：%d 页 (%.1f KB)", self._doc.page_count, size / 1024.0)
        self._doc.close()


__all__ = ["PyMuPDFBackend"]
