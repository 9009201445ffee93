"""
文件路径：flowpdf/processors/__init__.py

说明：
- 排版处理器包，按职责拆分：
  - line_builder.py（单行贪心取词）
  - layout.py（段落换行/对齐/换页）
  - pagination.py（光标、页面生命周期、样式状态、finish）
  - table.py（表格两遍排版，行不跨页）
  - images.py（图片放置与加载）
  - footer.py（页脚占位符与绘制计划）
  - engines/{reportlab.py, pymupdf.py}（绘制后端）
"""

from .engines import DrawingBackend, create_backend
from .footer import Footer, FooterItem, build_footer_plan, substitute
from .images import draw_image, load_image
from .layout import layout_text, resolve_alignment
from .line_builder import build_line
from .pagination import LayoutState, Paginator, StyleState
from .table import CELL_IMAGE, CELL_TEXT, Cell, as_cell, draw_table, measure_row

__all__ = [
    "DrawingBackend",
    "create_backend",
    "Footer",
    "FooterItem",
    "build_footer_plan",
    "substitute",
    "draw_image",
    "load_image",
    "layout_text",
    "resolve_alignment",
    "build_line",
    "LayoutState",
    "Paginator",
    "StyleState",
    "CELL_IMAGE",
    "CELL_TEXT",
    "Cell",
    "as_cell",
    "draw_table",
    "measure_row",
]
