"""
文件路径：flowpdf/processors/pagination.py

说明：分页控制器。

- 持有绘制后端、字体度量与唯一的排版状态（LayoutState：光标、页面几何、样式、页计数、当前页面句柄）；
- 两种状态：无页面（文档刚创建）/ 页面打开；首次绘制时按需自动开页；
- 抑制标志（suppress_page_breaks）开启期间引擎不会自行开页，由调用方（表格排版）在安全位置换页；
- 所有后端调用都经过 safe_call：异常记录日志后降级为空操作，文档仍可继续绘制；
- finish 只能调用一次：关闭当前页、生成并写入页脚、输出文件。
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterator, List, Optional, Tuple

from ..components import (
    FontMetrics,
    NoActiveSurfaceError,
    PageGeometry,
    ReportLabMetrics,
    clamp_cursor,
    get_logger,
    resolve_page_size,
    safe_line_height,
    safe_text_width,
)
from ..components.page import PageSizeLike
from ..variables import (
    CONST_FLOAT_EPSILON,
    CONST_ORIENTATION_PORTRAIT,
    ERR_BACKEND_CALL_FAILED,
    ERR_FOOTER_FAILED,
    ERR_PDF_WRITE_FAILED,
    STYLE_FONT_NAME,
    STYLE_MARGIN_BOTTOM,
    STYLE_MARGIN_LEFT,
    STYLE_MARGIN_RIGHT,
    STYLE_MARGIN_TOP,
    STYLE_NORMAL_FONT_SIZE,
    STYLE_PAGE_SIZE_DEFAULT,
    STYLE_TEXT_COLOR_RGB,
)
from .engines import DrawingBackend, OutputTarget
from .footer import Footer, build_footer_plan, current_user


logger = get_logger(__name__)


@dataclass
class StyleState:
    """当前样式：字体、字号、颜色与派生行距。"""

    font_name: str = STYLE_FONT_NAME
    font_size: float = STYLE_NORMAL_FONT_SIZE
    text_color: Tuple[int, int, int] = STYLE_TEXT_COLOR_RGB
    line_sep: float = 0.0


@dataclass
class LayoutState:
    """排版引擎的全部可变状态，由 Paginator 独占修改。"""

    geometry: PageGeometry
    style: StyleState
    page_size: PageSizeLike = STYLE_PAGE_SIZE_DEFAULT
    orientation: str = CONST_ORIENTATION_PORTRAIT
    cursor_x: float = 0.0
    cursor_y: float = 0.0
    page_count: int = 0
    surface: Optional[int] = None
    page_open: bool = False
    suppress_breaks: bool = False
    # 无页面时调用方设置过光标：首页按需打开后保留该位置
    cursor_pinned: bool = False
    finished: bool = False
    page_geometries: List[PageGeometry] = field(default_factory=list)


class Paginator:
    """光标与页面生命周期的唯一管理者。

    参数：
        backend: 绘制后端。
        metrics: 字体度量；默认 ReportLabMetrics。
        page_size: 纸张名（如 "A4"）或 (width, height)。
        orientation: "portrait" 或 "landscape"。
        margins: (top, bottom, left, right)，单位 pt。
        auto_open_page: 无页面时绘制是否自动开页；为 False 时抛出 NoActiveSurfaceError。
    """

    def __init__(
        self,
        backend: DrawingBackend,
        metrics: Optional[FontMetrics] = None,
        *,
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
        auto_open_page: bool = True,
    ) -> None:
        self.backend = backend
        self.metrics: FontMetrics = metrics if metrics is not None else ReportLabMetrics()
        self.auto_open_page = auto_open_page
        width, height = resolve_page_size(page_size, orientation)
        top, bottom, left, right = margins
        geometry = PageGeometry(width, height, top, bottom, left, right)
        self.state = LayoutState(
            geometry=geometry,
            style=StyleState(font_name=font_name, font_size=float(font_size), text_color=tuple(text_color)),
            page_size=page_size,
            orientation=orientation,
            cursor_x=geometry.content_start_x,
            cursor_y=geometry.content_start_y,
        )
        self._update_line_sep()

    # =============================
    # 后端与度量
    # =============================
    def safe_call(self, method: str, *args: Any) -> Any:
        """调用后端方法；失败时记录日志并返回 None（降级为空操作）。"""
        try:
            return getattr(self.backend, method)(*args)
        except Exception as exc:  # noqa: BLE001
            logger.error("[%s] 后端调用失败：%s%r -> %s", ERR_BACKEND_CALL_FAILED, method, args, exc)
            return None

    def text_width(self, text: str) -> float:
        """当前字体/字号下的文本宽度；度量失败时为 0。"""
        style = self.state.style
        return safe_text_width(self.metrics, text, style.font_name, style.font_size)

    @property
    def line_sep(self) -> float:
        return self.state.style.line_sep

    @property
    def geometry(self) -> PageGeometry:
        return self.state.geometry

    def _update_line_sep(self) -> None:
        style = self.state.style
        style.line_sep = safe_line_height(self.metrics, style.font_name, style.font_size)

    def _apply_style(self) -> None:
        """把当前样式重新下发给后端（新页面不会继承上一页的图形状态）。"""
        style = self.state.style
        self.safe_call("set_font", style.font_name, style.font_size)
        self.safe_call("set_fill_color", style.text_color)

    # =============================
    # 样式
    # =============================
    def set_font(self, font_name: str) -> None:
        self.state.style.font_name = font_name
        self._update_line_sep()
        if self.state.page_open:
            self.safe_call("set_font", font_name, self.state.style.font_size)

    def set_font_size(self, font_size: float) -> None:
        self.state.style.font_size = float(font_size)
        self._update_line_sep()
        if self.state.page_open:
            self.safe_call("set_font", self.state.style.font_name, self.state.style.font_size)

    def set_text_color(self, rgb: Tuple[int, int, int]) -> None:
        self.state.style.text_color = tuple(int(v) for v in rgb)  # type: ignore[assignment]
        if self.state.page_open:
            self.safe_call("set_fill_color", self.state.style.text_color)

    # =============================
    # 页面几何
    # =============================
    def _build_geometry(
        self,
        page_size: Optional[PageSizeLike] = None,
        orientation: Optional[str] = None,
        margins: Optional[Tuple[float, float, float, float]] = None,
    ) -> PageGeometry:
        g = self.state.geometry
        width, height = resolve_page_size(
            self.state.page_size if page_size is None else page_size,
            self.state.orientation if orientation is None else orientation,
        )
        top, bottom, left, right = margins or (g.top_margin, g.bottom_margin, g.left_margin, g.right_margin)
        return PageGeometry(width, height, top, bottom, left, right)

    def _commit_geometry(self, geometry: PageGeometry) -> None:
        """替换当前几何并把光标钳制到新的可写区域内。"""
        self.state.geometry = geometry
        self.state.cursor_x, self.state.cursor_y = clamp_cursor(self.state.cursor_x, self.state.cursor_y, geometry)

    def set_margins(
        self,
        top: Optional[float] = None,
        bottom: Optional[float] = None,
        left: Optional[float] = None,
        right: Optional[float] = None,
    ) -> None:
        """修改边距（未提供的保持不变）；非法边距抛出 InvalidLayoutInputError 且状态不变。"""
        g = self.state.geometry
        margins = (
            g.top_margin if top is None else float(top),
            g.bottom_margin if bottom is None else float(bottom),
            g.left_margin if left is None else float(left),
            g.right_margin if right is None else float(right),
        )
        self._commit_geometry(self._build_geometry(margins=margins))

    def set_page_size(self, page_size: PageSizeLike) -> None:
        """修改纸张尺寸；可写区域立即重算，纸张本身从下一页起生效。"""
        geometry = self._build_geometry(page_size=page_size)
        self.state.page_size = page_size
        self._commit_geometry(geometry)

    def set_orientation(self, orientation: str) -> None:
        geometry = self._build_geometry(orientation=orientation)
        self.state.orientation = orientation
        self._commit_geometry(geometry)

    # =============================
    # 页面生命周期
    # =============================
    def new_page(self) -> None:
        """关闭当前页并开启新页，光标复位到可写区域左上角。"""
        if self.state.finished:
            raise NoActiveSurfaceError("文档已完成，不能再开启新页面")
        self.close_page()
        self.state.page_count += 1
        geometry = self._build_geometry()
        self.state.geometry = geometry
        self.state.page_geometries.append(geometry)
        self.state.surface = self.safe_call("open_surface", geometry)
        self.state.page_open = True
        self.state.cursor_pinned = False
        self.state.cursor_x = geometry.content_start_x
        self.state.cursor_y = geometry.content_start_y
        self._apply_style()
        logger.info("开启第 %d 页：%.0fx%.0f", self.state.page_count, geometry.page_width, geometry.page_height)

    def close_page(self) -> None:
        if not self.state.page_open:
            return
        self.safe_call("close_surface", self.state.surface)
        self.state.page_open = False
        self.state.surface = None

    def ensure_page(self) -> None:
        """确保存在可绘制页面。

        异常：
            NoActiveSurfaceError: 文档已 finish，或无页面且禁止自动开页。
        """
        if self.state.finished:
            raise NoActiveSurfaceError("文档已完成，不能继续绘制")
        if self.state.page_open:
            return
        if not self.auto_open_page:
            raise NoActiveSurfaceError("当前没有打开的页面，请先调用 new_page()")
        pinned = self.get_cursor() if self.state.cursor_pinned else None
        self.new_page()
        if pinned is not None:
            self.set_cursor(*pinned)

    # =============================
    # 光标
    # =============================
    def set_cursor(self, x: float, y: float) -> None:
        self.state.cursor_x = float(x)
        self.state.cursor_y = float(y)
        if not self.state.page_open:
            self.state.cursor_pinned = True

    def get_cursor(self) -> Tuple[float, float]:
        return (self.state.cursor_x, self.state.cursor_y)

    def at_page_top(self) -> bool:
        """光标是否位于可写区域顶部（刚开页或刚换页）。"""
        return abs(self.state.cursor_y - self.state.geometry.content_start_y) < CONST_FLOAT_EPSILON

    def breaks_allowed(self, emit: bool = True) -> bool:
        return emit and not self.state.suppress_breaks

    def advance_line(self, start_x: float, emit: bool = True) -> bool:
        """换行：光标回到 start_x 并下移一个行距。

        当下一条基线将低于下边距且允许自动换页时开启新页，光标横向仍回到 start_x。

        返回：
            是否触发了换页。
        """
        self.state.cursor_x = start_x
        self.state.cursor_y -= self.line_sep
        return self.break_if_low(start_x, emit)

    def break_if_low(self, start_x: float, emit: bool = True) -> bool:
        """光标所在基线之下已放不下一行时开启新页，光标横向回到 start_x。

        表格之后、带 NEWLINE 的图片之后也用它检查，保证下一行文字不落入下边距。
        """
        state = self.state
        if (state.cursor_y - self.line_sep) < state.geometry.content_end_y and self.breaks_allowed(emit):
            self.new_page()
            state.cursor_x = start_x
            return True
        return False

    @contextmanager
    def suppress_page_breaks(self) -> Iterator[None]:
        """在上下文内禁止自动换页，退出时恢复原值。"""
        previous = self.state.suppress_breaks
        self.state.suppress_breaks = True
        try:
            yield
        finally:
            self.state.suppress_breaks = previous

    # =============================
    # 完成输出
    # =============================
    def finish(
        self,
        output: OutputTarget,
        footer: Optional[Footer] = None,
        *,
        today: Optional[date] = None,
        user: Optional[str] = None,
    ) -> bool:
        """关闭当前页、写入页脚并输出文档。

        返回：
            输出成功返回 True；写入失败记录日志并返回 False。

        异常：
            NoActiveSurfaceError: 重复调用 finish。
        """
        if self.state.finished:
            raise NoActiveSurfaceError("文档已完成，finish 只能调用一次")
        self.close_page()

        if footer is not None and self.state.page_geometries:
            try:
                items = build_footer_plan(
                    footer,
                    self.state.page_geometries,
                    measure_width=lambda text, font, size: safe_text_width(self.metrics, text, font, size),
                    line_height=lambda font, size: safe_line_height(self.metrics, font, size),
                    today=today or date.today(),
                    user=user if user is not None else current_user(),
                )
                self.backend.apply_footer(items)
            except Exception as exc:  # noqa: BLE001
                logger.error("[%s] 页脚写入失败：%s", ERR_FOOTER_FAILED, exc)

        self.state.finished = True
        try:
            self.backend.save(output)
        except Exception as exc:  # noqa: BLE001
            logger.error("[%s] PDF 写入失败：%s -> %s", ERR_PDF_WRITE_FAILED, output, exc)
            return False
        logger.info("文档输出完成：%d 页 -> %s", self.state.page_count, output)
        return True


__all__ = ["StyleState", "LayoutState", "Paginator"]
