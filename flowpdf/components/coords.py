"""
文件路径：flowpdf/components/coords.py

说明：坐标计算相关通用函数：光标钳制与对齐偏移。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from ..variables import FLAG_CENTER, FLAG_RIGHT

if TYPE_CHECKING:
    from .page import PageGeometry


def clamp_coords(
    x: float,
    y: float,
    x_min: float,
    x_max: float,
    y_min: float,
    y_max: float,
) -> Tuple[float, float]:
    """将坐标限制在给定矩形内。

    参数：
        x, y: 输入坐标。
        x_min, x_max: X 方向允许范围。
        y_min, y_max: Y 方向允许范围（PDF 坐标系，y_min 为下边界）。
    返回：
        (clamped_x, clamped_y)
    """
    clamped_x = max(x_min, min(x_max, x))
    clamped_y = max(y_min, min(y_max, y))
    return clamped_x, clamped_y


def clamp_cursor(x: float, y: float, geometry: PageGeometry) -> Tuple[float, float]:
    """将光标限制在页面可写区域内（边距以内）。

    说明：可写区域的上边界为 content_start_y，下边界为 content_end_y。
    """
    return clamp_coords(
        x,
        y,
        x_min=geometry.content_start_x,
        x_max=geometry.content_end_x,
        y_min=geometry.content_end_y,
        y_max=geometry.content_start_y,
    )


def align_offset(free_space: float, align: int) -> float:
    """按对齐方式返回水平偏移量。

    - CENTER：剩余空间的一半
    - RIGHT：全部剩余空间
    - 其他（LEFT/JUSTIFY）：0
    """
    if align == FLAG_CENTER:
        return free_space / 2.0
    if align == FLAG_RIGHT:
        return free_space
    return 0.0


__all__ = [
    "clamp_coords",
    "clamp_cursor",
    "align_offset",
]
