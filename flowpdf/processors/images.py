"""
文件路径：flowpdf/processors/images.py

说明：图片放置与加载。

- 图片左上角默认位于当前光标处；CENTER/LEFT/RIGHT 在页面边距之间水平调整；
- 未设置 NEWLINE 时光标保持不变（可用于叠加图层）；设置后光标移到左边距、图片下方一行处，
  该处已放不下一行时立即换页；
- 图片尺寸（pt）等于其像素尺寸。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple, Union

from PIL import Image

from ..components import FileHandler, get_logger
from ..variables import FLAG_CENTER, FLAG_LEFT, FLAG_NEWLINE, FLAG_RIGHT

if TYPE_CHECKING:
    from .pagination import Paginator


logger = get_logger(__name__)


def load_image(path: Union[str, Path], size: Optional[Tuple[int, int]] = None) -> Image.Image:
    """用 Pillow 读取图片，可选缩放到 size=(width, height)。

    异常：
        FileNotFoundError: 文件不存在。
    """
    p = Path(path)
    FileHandler.validate_readable_file(p)
    with Image.open(p) as img:
        img.load()
        result = img.copy()
    if size is not None:
        result = result.resize((int(size[0]), int(size[1])))
    logger.info("已加载图片：%s (%dx%d)", p, result.width, result.height)
    return result


def draw_image(
    pager: Paginator,
    image: Image.Image,
    flags: int = 0,
    x: Optional[float] = None,
    y: Optional[float] = None,
) -> float:
    """在当前光标（或给定的 x, y）处放置图片，返回图片高度。

    光标未显式指定时，若图片会越过下边距且光标不在页顶，先开启新页
    （表格内部等抑制换页的场景除外）。显式给定坐标时按原位置绘制，不自动换页。
    """
    pager.ensure_page()
    explicit = x is not None and y is not None
    if explicit:
        pager.set_cursor(x, y)

    width, height = float(image.width), float(image.height)
    if (
        not explicit
        and pager.state.cursor_y - height < pager.geometry.content_end_y
        and not pager.at_page_top()
        and pager.breaks_allowed()
    ):
        pager.new_page()

    g = pager.geometry
    img_x = pager.state.cursor_x
    img_y = pager.state.cursor_y - height
    if flags & FLAG_CENTER:
        img_x = (g.page_width - width) / 2.0
    elif flags & FLAG_LEFT:
        img_x = g.left_margin
    elif flags & FLAG_RIGHT:
        img_x = g.page_width - g.right_margin - width

    pager.safe_call("draw_image", image, img_x, img_y, width, height)

    if flags & FLAG_NEWLINE:
        pager.set_cursor(g.left_margin, img_y - pager.line_sep)
        pager.break_if_low(g.left_margin)
    return height


__all__ = ["load_image", "draw_image"]
