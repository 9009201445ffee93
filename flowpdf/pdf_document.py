"""
文件路径：flowpdf/pdf_document.py

模块职责：
- 对外门面：PDFDocument 把段落、图片、表格、分页、样式、页脚等操作组合为一个文档对象。
- 仅通过 `flowpdf/components` 进行通用操作（日志、文件、字体），跨模块变量统一从 `flowpdf/variables.py` 引用。

注意：
- 坐标系为 PDF 标准：左下角为原点，y 向上；单位 pt。
- 文档创建时没有页面，首次绘制时自动开页（auto_open_page=False 时需显式 new_page）。
- 修改纸张尺寸/方向会立即重算可写区域，纸张本身从下一页起生效。

组件调用说明：
- processors.pagination.Paginator（光标/页面/样式状态）
- processors.layout.layout_text（段落排版）
- processors.table.draw_table（表格）
- processors.images.draw_image / load_image（图片）
- processors.footer.Footer（页脚）
- data_handler.parse_align_flags（内容块中的对齐字符串）
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from PIL import Image

from .components import FileHandler, FontMetrics, get_logger, register_font_file
from .components.page import PageSizeLike
from .data_handler import load_table_csv, parse_align_flags
from .processors.engines import DrawingBackend, OutputTarget, create_backend
from .processors.footer import Footer
from .processors.images import draw_image as _draw_image
from .processors.images import load_image
from .processors.layout import layout_text
from .processors.pagination import Paginator
from .processors.table import Cell, draw_table as _draw_table
from .variables import (
    CONST_ENGINE_DEFAULT,
    CONST_ORIENTATION_PORTRAIT,
    ERR_DATA_INVALID,
    FLAG_LEFT,
    STYLE_FONT_NAME,
    STYLE_MARGIN_BOTTOM,
    STYLE_MARGIN_LEFT,
    STYLE_MARGIN_RIGHT,
    STYLE_MARGIN_TOP,
    STYLE_NORMAL_FONT_SIZE,
    STYLE_PAGE_SIZE_DEFAULT,
    STYLE_TABLE_CELL_MARGIN,
    STYLE_TEXT_COLOR_RGB,
    STYLE_TITLE1_FONT_SIZE,
    STYLE_TITLE2_FONT_SIZE,
)


logger = get_logger(__name__)

ImageLike = Union[Image.Image, str, Path]


class PDFDocument:
    """分页排版文档。

    用法示例：
        doc = PDFDocument()
        doc.footer = Footer.default()
        doc.title1_style()
        doc.draw_text("Title\\n", FLAG_CENTER)
        doc.normal_style()
        doc.draw_text(long_text, FLAG_JUSTIFY)
        doc.draw_table([["A", "B"], ["1", "2"]], [100, 200])
        doc.finish("output/report.pdf")
    """

    def __init__(
        self,
        *,
        engine: str = CONST_ENGINE_DEFAULT,
        backend: Optional[DrawingBackend] = None,
        metrics: Optional[FontMetrics] = None,
        page_size: PageSizeLike = STYLE_PAGE_SIZE_DEFAULT,
        orientation: str = CONST_ORIENTATION_PORTRAIT,
        margins: Tuple[float, float, float, float] = (
            STYLE_MARGIN_TOP,
            STYLE_MARGIN_BOTTOM,
            STYLE_MARGIN_LEFT,
            STYLE_MARGIN_RIGHT,
        ),
        font_name: str = STYLE_FONT_NAME,
        font_size: float = STYLE_NORMAL_FONT_SIZE,
        text_color: Tuple[int, int, int] = STYLE_TEXT_COLOR_RGB,
        footer: Optional[Footer] = None,
        auto_open_page: bool = True,
    ) -> None:
        self.backend: DrawingBackend = backend if backend is not None else create_backend(engine)
        self.pager = Paginator(
            self.backend,
            metrics,
            page_size=page_size,
            orientation=orientation,
            margins=margins,
            font_name=font_name,
            font_size=font_size,
            text_color=text_color,
            auto_open_page=auto_open_page,
        )
        self.footer: Optional[Footer] = footer
        self.normal_font_size: float = STYLE_NORMAL_FONT_SIZE
        self.title1_font_size: float = STYLE_TITLE1_FONT_SIZE
        self.title2_font_size: float = STYLE_TITLE2_FONT_SIZE
        self.table_cell_margin: float = STYLE_TABLE_CELL_MARGIN

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **kwargs: Any) -> "PDFDocument":
        """按 data_handler.load_document_config 的结果创建文档；kwargs 优先于配置。"""
        margins = config.get("margins") or {}
        options: Dict[str, Any] = {
            "engine": config.get("engine", CONST_ENGINE_DEFAULT),
            "page_size": config.get("page_size", STYLE_PAGE_SIZE_DEFAULT),
            "orientation": config.get("orientation", CONST_ORIENTATION_PORTRAIT),
            "margins": (
                float(margins.get("top", STYLE_MARGIN_TOP)),
                float(margins.get("bottom", STYLE_MARGIN_BOTTOM)),
                float(margins.get("left", STYLE_MARGIN_LEFT)),
                float(margins.get("right", STYLE_MARGIN_RIGHT)),
            ),
            "font_name": config.get("font_name", STYLE_FONT_NAME),
            "font_size": float(config.get("font_size", STYLE_NORMAL_FONT_SIZE)),
            "text_color": tuple(config.get("text_color", STYLE_TEXT_COLOR_RGB)),
            "footer": config.get("footer"),
        }
        options.update(kwargs)
        doc = cls(**options)
        if "normal_font_size" in config:
            doc.set_normal_font_size(config["normal_font_size"])
        if "title1_font_size" in config:
            doc.set_title1_font_size(config["title1_font_size"])
        if "title2_font_size" in config:
            doc.set_title2_font_size(config["title2_font_size"])
        if "table_cell_margin" in config:
            doc.set_table_cell_margin(config["table_cell_margin"])
        return doc

    # -----------------------------
    # 绘制
    # -----------------------------
    def draw_text(
        self,
        text: Optional[str],
        flags: int = FLAG_LEFT,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> float:
        """从当前光标（或给定的 x, y）处绘制文本，在左右边距之间换行。

        返回：
            绘制高度（行距 × 输出行数）。
        """
        if x is not None and y is not None:
            self.pager.ensure_page()
            self.pager.set_cursor(x, y)
        g = self.pager.geometry
        return layout_text(self.pager, text, g.content_start_x, g.content_end_x, flags)

    def draw_image(
        self,
        image: ImageLike,
        flags: int = 0,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> float:
        """放置图片（PIL 图片或图片路径），返回图片高度。"""
        if not isinstance(image, Image.Image):
            image = load_image(image)
        return _draw_image(self.pager, image, flags, x, y)

    def draw_table(
        self,
        rows: Sequence[Optional[Sequence[Any]]],
        column_widths: Sequence[float],
        column_flags: Optional[Sequence[int]] = None,
        table_align: int = FLAG_LEFT,
    ) -> float:
        """从当前光标处绘制表格，返回最后一页上的表格高度。"""
        return _draw_table(self.pager, rows, column_widths, column_flags, table_align, self.table_cell_margin)

    def new_page(self) -> None:
        self.pager.new_page()

    # -----------------------------
    # 光标
    # -----------------------------
    def set_cursor(self, x: float, y: float) -> None:
        self.pager.set_cursor(x, y)

    def get_cursor(self) -> Tuple[float, float]:
        return self.pager.get_cursor()

    @property
    def cursor_x(self) -> float:
        return self.pager.state.cursor_x

    @property
    def cursor_y(self) -> float:
        return self.pager.state.cursor_y

    # -----------------------------
    # 样式
    # -----------------------------
    def normal_style(self) -> None:
        self.pager.set_font_size(self.normal_font_size)

    def title1_style(self) -> None:
        self.pager.set_font_size(self.title1_font_size)

    def title2_style(self) -> None:
        self.pager.set_font_size(self.title2_font_size)

    def set_normal_font_size(self, size: float) -> None:
        self.normal_font_size = float(size)

    def set_title1_font_size(self, size: float) -> None:
        self.title1_font_size = float(size)

    def set_title2_font_size(self, size: float) -> None:
        self.title2_font_size = float(size)

    @property
    def font_name(self) -> str:
        return self.pager.state.style.font_name

    @font_name.setter
    def font_name(self, value: str) -> None:
        self.pager.set_font(value)

    def set_font(self, font_name: str) -> None:
        self.pager.set_font(font_name)

    @property
    def font_size(self) -> float:
        return self.pager.state.style.font_size

    @font_size.setter
    def font_size(self, value: float) -> None:
        self.pager.set_font_size(value)

    def set_font_size(self, size: float) -> None:
        self.pager.set_font_size(size)

    @property
    def text_color(self) -> Tuple[int, int, int]:
        return self.pager.state.style.text_color

    @text_color.setter
    def text_color(self, rgb: Tuple[int, int, int]) -> None:
        self.pager.set_text_color(rgb)

    def set_text_color(self, rgb: Tuple[int, int, int]) -> None:
        self.pager.set_text_color(rgb)

    @property
    def line_sep(self) -> float:
        return self.pager.line_sep

    def set_table_cell_margin(self, margin: float) -> None:
        self.table_cell_margin = float(margin)

    def register_font(self, path: Union[str, Path], face_name: Optional[str] = None) -> str:
        """注册 TTF/OTF 字体并返回字体名，之后可用于 set_font。"""
        name = register_font_file(Path(path), face_name)
        self.backend.add_font_file(name, Path(path))
        return name

    # -----------------------------
    # 页面几何
    # -----------------------------
    @property
    def top_margin(self) -> float:
        return self.pager.geometry.top_margin

    @top_margin.setter
    def top_margin(self, value: float) -> None:
        self.pager.set_margins(top=value)

    @property
    def bottom_margin(self) -> float:
        return self.pager.geometry.bottom_margin

    @bottom_margin.setter
    def bottom_margin(self, value: float) -> None:
        self.pager.set_margins(bottom=value)

    @property
    def left_margin(self) -> float:
        return self.pager.geometry.left_margin

    @left_margin.setter
    def left_margin(self, value: float) -> None:
        self.pager.set_margins(left=value)

    @property
    def right_margin(self) -> float:
        return self.pager.geometry.right_margin

    @right_margin.setter
    def right_margin(self, value: float) -> None:
        self.pager.set_margins(right=value)

    def set_margins(
        self,
        top: Optional[float] = None,
        bottom: Optional[float] = None,
        left: Optional[float] = None,
        right: Optional[float] = None,
    ) -> None:
        self.pager.set_margins(top, bottom, left, right)

    def set_orientation(self, orientation: str) -> None:
        self.pager.set_orientation(orientation)

    def set_page_size(self, page_size: PageSizeLike) -> None:
        self.pager.set_page_size(page_size)

    @property
    def page_width(self) -> float:
        return self.pager.geometry.page_width

    @property
    def page_height(self) -> float:
        return self.pager.geometry.page_height

    @property
    def content_width(self) -> float:
        return self.pager.geometry.content_width

    @property
    def content_height(self) -> float:
        return self.pager.geometry.content_height

    @property
    def content_start_x(self) -> float:
        return self.pager.geometry.content_start_x

    @property
    def content_start_y(self) -> float:
        return self.pager.geometry.content_start_y

    @property
    def content_end_x(self) -> float:
        return self.pager.geometry.content_end_x

    @property
    def content_end_y(self) -> float:
        return self.pager.geometry.content_end_y

    @property
    def page_count(self) -> int:
        return self.pager.state.page_count

    # -----------------------------
    # 内容块
    # -----------------------------
    def _resolve_image(self, source: Any, base_dir: Optional[Path]) -> Image.Image:
        if isinstance(source, Image.Image):
            return source
        if isinstance(source, dict):
            path = source.get("image") or source.get("path")
            size = (source["width"], source["height"]) if "width" in source and "height" in source else None
        else:
            path, size = source, None
        p = Path(str(path))
        if base_dir is not None and not p.is_absolute():
            p = base_dir / p
        return load_image(p, size)

    def _table_cell(self, value: Any, base_dir: Optional[Path]) -> Any:
        if isinstance(value, dict) and ("image" in value):
            return Cell.image(self._resolve_image(value, base_dir))
        return value

    def _draw_block(self, block: Mapping[str, Any], base_dir: Optional[Path]) -> None:
        kind = str(block.get("type", "text")).strip().lower()
        if kind == "text":
            style = block.get("style")
            saved_size = self.font_size
            if style:
                {"normal": self.normal_style, "title1": self.title1_style, "title2": self.title2_style}[str(style)]()
            try:
                self.draw_text(block.get("text"), parse_align_flags(block.get("align")), block.get("x"), block.get("y"))
            finally:
                if style:
                    self.set_font_size(saved_size)
        elif kind == "image":
            image = self._resolve_image(block, base_dir)
            self.draw_image(image, parse_align_flags(block.get("align"), default=0), block.get("x"), block.get("y"))
        elif kind == "table":
            if block.get("csv"):
                csv_path = Path(block["csv"])
                if base_dir is not None and not csv_path.is_absolute():
                    csv_path = base_dir / csv_path
                rows: List[Any] = load_table_csv(csv_path)
            else:
                rows = [
                    None if row is None else [self._table_cell(v, base_dir) for v in row]
                    for row in block.get("rows", [])
                ]
            widths = block.get("widths")
            if not widths:
                n = len(next((r for r in rows if r is not None), []))
                widths = [self.content_width / n] * n if n else []
            aligns = block.get("aligns")
            column_flags = [parse_align_flags(a) for a in aligns] if aligns is not None else None
            self.draw_table(rows, widths, column_flags, parse_align_flags(block.get("table_align")))
        elif kind == "new_page":
            self.new_page()
        elif kind == "cursor":
            self.set_cursor(float(block["x"]), float(block["y"]))
        elif kind == "font":
            if "name" in block:
                self.set_font(str(block["name"]))
            if "size" in block:
                self.set_font_size(float(block["size"]))
            if "color" in block:
                self.set_text_color(tuple(int(v) for v in block["color"]))
        else:
            raise KeyError(f"未知的内容块类型：{kind}")

    def draw_blocks(self, blocks: Iterable[Mapping[str, Any]], base_dir: Optional[Path] = None) -> int:
        """按顺序绘制内容块（见 data_handler.load_content_blocks）。

        支持的块类型：text / image / table / new_page / cursor / font。
        单个块出错时记录日志并跳过，不中断其余内容。

        返回：
            成功绘制的块数。
        """
        drawn = 0
        for idx, block in enumerate(blocks):
            try:
                self._draw_block(block, base_dir)
                drawn += 1
            except (KeyError, ValueError, TypeError, FileNotFoundError) as exc:
                logger.warning("[%s] 跳过第 %d 个内容块：%s", ERR_DATA_INVALID, idx, exc)
        return drawn

    # -----------------------------
    # 完成
    # -----------------------------
    def finish(
        self,
        output: Optional[OutputTarget] = None,
        *,
        today: Optional[date] = None,
        user: Optional[str] = None,
    ) -> bool:
        """关闭当前页、写入页脚并保存；output 为空时写入 output/ 下的带时间戳文件。

        返回：
            是否输出成功（写入失败时记录日志并返回 False）。
        """
        if output is None:
            output = FileHandler.timestamped_output_path(None)
        return self.pager.finish(output, self.footer, today=today, user=user)


__all__ = ["PDFDocument"]
