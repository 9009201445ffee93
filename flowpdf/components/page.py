"""
文件路径：flowpdf/components/page.py

说明：页面几何：纸张尺寸解析（含横向/纵向）与可写区域计算。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from reportlab.lib import pagesizes

from .errors import InvalidLayoutInputError
from ..variables import (
    CONST_ORIENTATION_LANDSCAPE,
    CONST_ORIENTATION_PORTRAIT,
    ERR_INVALID_MARGINS,
)


PageSizeLike = Union[str, Sequence[float]]


@dataclass(frozen=True)
class PageGeometry:
    """单页几何信息（不可变）。

    属性：
        page_width, page_height: 页面尺寸（pt），已按方向交换。
        top_margin, bottom_margin, left_margin, right_margin: 四个边距（pt）。

    派生属性（均为 PDF 坐标，左下为原点）：
        content_start_x: 可写区域最左 x（= left_margin）
        content_end_x: 可写区域最右 x
        content_start_y: 可写区域最上 y（= page_height - top_margin）
        content_end_y: 可写区域最下 y（= bottom_margin）
    """

    page_width: float
    page_height: float
    top_margin: float
    bottom_margin: float
    left_margin: float
    right_margin: float

    def __post_init__(self) -> None:
        if min(self.top_margin, self.bottom_margin, self.left_margin, self.right_margin) < 0:
            raise InvalidLayoutInputError("边距不能为负数", ERR_INVALID_MARGINS)
        if self.content_width <= 0 or self.content_height <= 0:
            raise InvalidLayoutInputError(
                f"边距超出页面尺寸，可写区域为空：page=({self.page_width}, {self.page_height})",
                ERR_INVALID_MARGINS,
            )

    @property
    def content_width(self) -> float:
        return self.page_width - self.left_margin - self.right_margin

    @property
    def content_height(self) -> float:
        return self.page_height - self.top_margin - self.bottom_margin

    @property
    def content_start_x(self) -> float:
        return self.left_margin

    @property
    def content_end_x(self) -> float:
        return self.left_margin + self.content_width

    @property
    def content_start_y(self) -> float:
        return self.page_height - self.top_margin

    @property
    def content_end_y(self) -> float:
        return self.bottom_margin

    @property
    def size(self) -> Tuple[float, float]:
        return (self.page_width, self.page_height)


def resolve_page_size(page_size: PageSizeLike, orientation: str = CONST_ORIENTATION_PORTRAIT) -> Tuple[float, float]:
    """解析纸张尺寸并按方向返回 (width, height)。

    支持的输入：
    - ReportLab 页面尺寸名（不区分大小写），如 "A4"、"letter"、"legal"
    - 两元素序列 (width, height)，单位 pt

    方向：
    - portrait：保证 width <= height
    - landscape：保证 width >= height
    """
    logger = logging.getLogger(__name__)
    if isinstance(page_size, str):
        key = page_size.strip().upper()
        size = getattr(pagesizes, key, None)
        if size is None:
            raise InvalidLayoutInputError(f"未知的纸张尺寸：{page_size}")
        width, height = float(size[0]), float(size[1])
    else:
        try:
            width, height = float(page_size[0]), float(page_size[1])
        except (TypeError, ValueError, IndexError) as exc:
            raise InvalidLayoutInputError(f"无法解析纸张尺寸：{page_size!r}") from exc
    if width <= 0 or height <= 0:
        raise InvalidLayoutInputError(f"纸张尺寸必须为正数：({width}, {height})")

    orient = (orientation or CONST_ORIENTATION_PORTRAIT).strip().lower()
    if orient == CONST_ORIENTATION_LANDSCAPE:
        return (max(width, height), min(width, height))
    if orient != CONST_ORIENTATION_PORTRAIT:
        logger.warning("未知的纸张方向：%s，按纵向处理", orientation)
    return (min(width, height), max(width, height))


__all__ = ["PageGeometry", "PageSizeLike", "resolve_page_size"]
