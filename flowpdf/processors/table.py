"""
文件路径：flowpdf/processors/table.py

说明：表格排版（文本/图片单元格），行不跨页。

流程：
1) 校验行列形状与列宽（不合法抛出 InvalidLayoutInputError）；
2) 按 table_align 计算整表 x 原点（只算一次）；
3) 整个表格期间禁止自动换页；
4) 绘制第 i 行之前，以试运行（emit=False）测出第 i+1 行的高度；
   第 i 行绘制完成后，若剩余空间放不下第 i+1 行，则先开新页；
5) 每行绘制完成后，以该行最大高度为每个单元格画 4 条边框线；
6) 表格结束后光标移到左边距、表格下方一行；该处已放不下一行时立即换页。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Union

from PIL import Image

from ..components import InvalidLayoutInputError, get_logger
from ..components.coords import align_offset
from ..variables import (
    CONST_CELL_BASELINE_RATIO,
    FLAG_LEFT,
    STYLE_TABLE_CELL_MARGIN,
)
from .layout import layout_text, resolve_alignment

if TYPE_CHECKING:
    from .pagination import Paginator


logger = get_logger(__name__)

CELL_TEXT = "text"
CELL_IMAGE = "image"


@dataclass(frozen=True)
class Cell:
    """表格单元格：文本或图片（带标签的变体）。"""

    kind: str
    content: Union[str, Image.Image] = ""

    @classmethod
    def text(cls, value: Optional[str] = "") -> "Cell":
        return cls(CELL_TEXT, value or "")

    @classmethod
    def image(cls, value: Image.Image) -> "Cell":
        return cls(CELL_IMAGE, value)


def as_cell(value: Any) -> Cell:
    """把调用方传入的单元格值转换为 Cell：None 为空文本，字符串/数字为文本，PIL 图片为图片。"""
    if isinstance(value, Cell):
        return value
    if value is None:
        return Cell.text("")
    if isinstance(value, Image.Image):
        return Cell.image(value)
    if isinstance(value, (str, int, float)):
        return Cell.text(str(value))
    raise InvalidLayoutInputError(f"不支持的单元格类型：{type(value).__name__}")


def _validate(
    rows: Sequence[Optional[Sequence[Any]]],
    column_widths: Sequence[float],
    column_flags: Optional[Sequence[int]],
    cell_margin: float,
) -> List[int]:
    if not column_widths:
        raise InvalidLayoutInputError("列宽不能为空")
    for idx, w in enumerate(column_widths):
        if w is None or float(w) < 0:
            raise InvalidLayoutInputError(f"第 {idx} 列宽度非法：{w}")
    if cell_margin < 0:
        raise InvalidLayoutInputError(f"单元格边距不能为负数：{cell_margin}")
    n = len(column_widths)
    if column_flags is None:
        flags = [FLAG_LEFT] * n
    else:
        flags = [int(f) for f in column_flags]
        if len(flags) != n:
            raise InvalidLayoutInputError(f"列对齐数量 {len(flags)} 与列数 {n} 不一致")
    for r, row in enumerate(rows):
        if row is not None and len(row) != n:
            raise InvalidLayoutInputError(f"第 {r} 行单元格数 {len(row)} 与列数 {n} 不一致")
    return flags


def _layout_cell(
    pager: Paginator,
    x: float,
    y: float,
    width: float,
    cell: Cell,
    flags: int,
    cell_margin: float,
    emit: bool,
) -> float:
    """在 (x, y)（单元格左上角）排版单个单元格，返回内容高度。"""
    if cell.kind == CELL_IMAGE:
        img = cell.content
        w, h = float(img.width), float(img.height)
        if emit:
            pager.safe_call("draw_image", img, x + cell_margin, y - h, w, h)
        return h
    if cell.kind == CELL_TEXT:
        pager.set_cursor(x + cell_margin, y - CONST_CELL_BASELINE_RATIO * pager.line_sep)
        return layout_text(pager, cell.content, x + cell_margin, x + width - cell_margin, flags, emit=emit)
    raise InvalidLayoutInputError(f"未知的单元格类型：{cell.kind}")


def _layout_row(
    pager: Paginator,
    x: float,
    y: float,
    row: Sequence[Cell],
    column_widths: Sequence[float],
    column_flags: Sequence[int],
    cell_margin: float,
    emit: bool,
) -> float:
    max_h = 0.0
    cell_x = x
    for cell, w, f in zip(row, column_widths, column_flags):
        max_h = max(max_h, _layout_cell(pager, cell_x, y, float(w), cell, f, cell_margin, emit))
        cell_x += float(w)
    return max_h


def _draw_borders(pager: Paginator, x: float, y: float, column_widths: Sequence[float], height: float) -> None:
    cell_x = x
    for w in column_widths:
        w = float(w)
        pager.safe_call("draw_line", cell_x, y, cell_x + w, y)
        pager.safe_call("draw_line", cell_x + w, y, cell_x + w, y - height)
        pager.safe_call("draw_line", cell_x + w, y - height, cell_x, y - height)
        pager.safe_call("draw_line", cell_x, y - height, cell_x, y)
        cell_x += w


def measure_row(
    pager: Paginator,
    x: float,
    y: float,
    row: Sequence[Cell],
    column_widths: Sequence[float],
    column_flags: Sequence[int],
    cell_margin: float = STYLE_TABLE_CELL_MARGIN,
) -> float:
    """试运行一行，返回行高；不绘制、不换页，光标恢复原位。"""
    saved = pager.get_cursor()
    try:
        return _layout_row(pager, x, y, row, column_widths, column_flags, cell_margin, emit=False)
    finally:
        pager.set_cursor(*saved)


def draw_table(
    pager: Paginator,
    rows: Sequence[Optional[Sequence[Any]]],
    column_widths: Sequence[float],
    column_flags: Optional[Sequence[int]] = None,
    table_align: int = FLAG_LEFT,
    cell_margin: float = STYLE_TABLE_CELL_MARGIN,
) -> float:
    """从当前光标处绘制表格，返回最后一页上的表格高度。

    参数：
        rows: 行序列；行为 None 时跳过；单元格可为 str、PIL 图片、None 或 Cell。
        column_widths: 各列宽度（pt，非负）。
        column_flags: 各列对齐位标志，默认全部左对齐。
        table_align: 整表在可写区域内的水平对齐（LEFT/CENTER/RIGHT）。
        cell_margin: 单元格左右留白。

    异常：
        InvalidLayoutInputError: 行列数不一致、列宽为负、单元格类型不支持。
    """
    flags = _validate(rows, column_widths, column_flags, float(cell_margin))
    body = [[as_cell(v) for v in row] for row in rows if row is not None]
    if not body:
        return 0.0

    pager.ensure_page()
    g = pager.geometry
    table_width = sum(float(w) for w in column_widths)
    x = g.content_start_x + align_offset(g.content_width - table_width, resolve_alignment(table_align))
    y = pager.state.cursor_y

    tab_height = 0.0
    with pager.suppress_page_breaks():
        first_h = measure_row(pager, x, y, body[0], column_widths, flags, cell_margin)
        if y - first_h < pager.geometry.content_end_y and not pager.at_page_top():
            pager.new_page()
            y = pager.geometry.content_start_y

        for idx, row in enumerate(body):
            has_next = idx + 1 < len(body)
            next_h = measure_row(pager, x, y, body[idx + 1], column_widths, flags, cell_margin) if has_next else 0.0

            row_top = y - tab_height
            row_h = _layout_row(pager, x, row_top, row, column_widths, flags, cell_margin, emit=True)
            _draw_borders(pager, x, row_top, column_widths, row_h)
            tab_height += row_h

            if has_next and (y - tab_height - next_h) < pager.geometry.content_end_y:
                pager.new_page()
                tab_height = 0.0
                y = pager.geometry.content_start_y

    pager.set_cursor(pager.geometry.left_margin, y - tab_height - pager.line_sep)
    pager.break_if_low(pager.geometry.left_margin)
    logger.info("表格绘制完成：%d 行 x %d 列，末页高度 %.1f", len(body), len(column_widths), tab_height)
    return tab_height


__all__ = ["CELL_TEXT", "CELL_IMAGE", "Cell", "as_cell", "measure_row", "draw_table"]
