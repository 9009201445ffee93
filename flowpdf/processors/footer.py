"""
文件路径：flowpdf/processors/footer.py

说明：页脚定义与页脚绘制计划。

- Footer 有左/中/右三个文本槽，可包含占位符 {PAGE}、{NUMPAGES}、{DATE}、{USER}；
- 占位符在 finish 时一次性替换，此时所有页面都已存在，总页数已知；
- build_footer_plan 只计算每页要绘制的文本与坐标（FooterItem），实际绘制由后端完成；
- 页码规则：
  - count_first_page=True：第 k 页（0 基）的页码为 k+1，总页数为 n；
  - count_first_page=False：首页不计数，第 k 页的页码为 k，总页数为 n-1；
  - omit_first_page=True：首页不绘制页脚。
"""

from __future__ import annotations

import getpass
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Sequence, Tuple

from ..components import get_logger
from ..components.page import PageGeometry
from ..variables import (
    CONST_FOOTER_DATE,
    CONST_FOOTER_DATE_FORMAT,
    CONST_FOOTER_NUMPAGES,
    CONST_FOOTER_PAGE,
    CONST_FOOTER_USER,
    STYLE_FOOTER_FONT_NAME,
    STYLE_FOOTER_FONT_SIZE,
    STYLE_FOOTER_TEXT_COLOR_RGB,
)


logger = get_logger(__name__)


@dataclass
class Footer:
    """文档页脚（独立于文档创建，finish 前挂载）。"""

    left_text: str = CONST_FOOTER_DATE
    center_text: str = CONST_FOOTER_USER
    right_text: str = f"Page {CONST_FOOTER_PAGE} of {CONST_FOOTER_NUMPAGES}"
    omit_first_page: bool = True
    count_first_page: bool = True
    font_name: str = STYLE_FOOTER_FONT_NAME
    font_size: float = STYLE_FOOTER_FONT_SIZE
    text_color: Tuple[int, int, int] = field(default=STYLE_FOOTER_TEXT_COLOR_RGB)

    @classmethod
    def default(cls) -> "Footer":
        """返回一份新的默认页脚：左侧日期，中间用户名，右侧 "Page {PAGE} of {NUMPAGES}"。"""
        return cls()


@dataclass(frozen=True)
class FooterItem:
    """单条页脚绘制项（PDF 坐标，基线起点）。"""

    page_index: int
    x: float
    y: float
    text: str
    font_name: str
    font_size: float
    color: Tuple[int, int, int]


def current_user() -> str:
    """当前系统用户名；无法获取时返回空串。"""
    try:
        return getpass.getuser()
    except Exception as exc:  # noqa: BLE001
        logger.warning("无法获取当前用户名，{USER} 将替换为空：%s", exc)
        return ""


def substitute(text: str, page_number: int, num_pages: int, date_text: str, user: str) -> str:
    """替换页脚文本中的占位符。"""
    return (
        (text or "")
        .replace(CONST_FOOTER_PAGE, str(page_number))
        .replace(CONST_FOOTER_NUMPAGES, str(num_pages))
        .replace(CONST_FOOTER_DATE, date_text)
        .replace(CONST_FOOTER_USER, user)
    )


def build_footer_plan(
    footer: Footer,
    geometries: Sequence[PageGeometry],
    measure_width: Callable[[str, str, float], float],
    line_height: Callable[[str, float], float],
    today: date,
    user: str,
) -> List[FooterItem]:
    """计算全部页面的页脚绘制项。

    参数：
        footer: 页脚定义。
        geometries: 每个已创建页面的几何信息（顺序即页序）。
        measure_width: (text, font_name, font_size) -> 宽度。
        line_height: (font_name, font_size) -> 行距。
        today: 用于 {DATE} 的日期。
        user: 用于 {USER} 的用户名。

    返回：
        FooterItem 列表。首行基线位于下边距的一半处，含换行的文本槽逐行向下排列；
        左槽起于左边距，中槽在页面内居中，右槽止于右边距。
    """
    n = len(geometries)
    num_pages = n if footer.count_first_page else n - 1
    date_text = today.strftime(CONST_FOOTER_DATE_FORMAT)
    sep = line_height(footer.font_name, footer.font_size)
    color = tuple(footer.text_color)

    items: List[FooterItem] = []
    for k, geometry in enumerate(geometries):
        if k == 0 and footer.omit_first_page:
            continue
        page_number = k + 1 if footer.count_first_page else k
        base_y = geometry.bottom_margin / 2.0

        for slot in ("left", "center", "right"):
            raw = getattr(footer, f"{slot}_text")
            if not raw:
                continue
            text = substitute(raw, page_number, num_pages, date_text, user)
            for line_no, line in enumerate(text.splitlines()):
                if not line:
                    continue
                width = measure_width(line, footer.font_name, footer.font_size)
                if slot == "left":
                    x = geometry.content_start_x
                elif slot == "center":
                    x = (geometry.page_width - width) / 2.0
                else:
                    x = geometry.content_end_x - width
                items.append(
                    FooterItem(
                        page_index=k,
                        x=x,
                        y=base_y - line_no * sep,
                        text=line,
                        font_name=footer.font_name,
                        font_size=footer.font_size,
                        color=color,  # type: ignore[arg-type]
                    )
                )
    logger.info("页脚计划：%d 页，共 %d 条", n, len(items))
    return items


__all__ = ["Footer", "FooterItem", "current_user", "substitute", "build_footer_plan"]
