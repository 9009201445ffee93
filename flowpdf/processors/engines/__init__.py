"""
文件路径：flowpdf/processors/engines/__init__.py

说明：绘制引擎（后端）抽象与工厂。

- `reportlab.py`：ReportLab 画布输出；页脚通过叠加图层 + PyPDF2 合并回写到已完成页面；
- `pymupdf.py`：PyMuPDF 直接绘制；页面始终可编辑，页脚直接写入已有页面。

坐标约定：所有方法接收 PDF 坐标（左下为原点，y 向上），由具体引擎负责转换。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Sequence, Tuple, Union

from ...components import FileHandler
from ...variables import CONST_ENGINE_PYMUPDF, CONST_ENGINE_REPORTLAB

if TYPE_CHECKING:
    from PIL import Image

    from ...components.page import PageGeometry
    from ..footer import FooterItem


OutputTarget = Union[str, Path, BinaryIO]


class DrawingBackend(ABC):
    """绘制后端接口（外部协作者）。

    排版引擎只通过本接口输出，不直接依赖具体 PDF 库。
    任何方法抛出的异常都会在调用边界被记录并降级为空操作。
    """

    @abstractmethod
    def open_surface(self, geometry: PageGeometry) -> int:
        """开启新页面并返回页面句柄（0 基页序号）。"""

    @abstractmethod
    def close_surface(self, handle: int) -> None:
        """结束页面绘制。"""

    @abstractmethod
    def set_font(self, font_name: str, font_size: float) -> None:
        ...

    @abstractmethod
    def set_fill_color(self, rgb: Tuple[int, int, int]) -> None:
        ...

    @abstractmethod
    def set_character_spacing(self, value: float) -> None:
        """设置字符间距（PDF Tc），对后续 draw_string 生效，直到再次设置。"""

    @abstractmethod
    def draw_string(self, x: float, y: float, text: str) -> None:
        """以 (x, y) 为基线起点绘制单行文本。"""

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        ...

    @abstractmethod
    def draw_image(self, image: Image.Image, x: float, y: float, width: float, height: float) -> None:
        """以 (x, y) 为左下角绘制图片。"""

    def add_font_file(self, font_name: str, path: Path) -> None:
        """登记自定义字体文件。默认无需处理：ReportLab 已通过 pdfmetrics 注册。"""

    @abstractmethod
    def apply_footer(self, items: Sequence[FooterItem]) -> None:
        """登记页脚绘制项；在 save 之前调用且只调用一次。"""

    @abstractmethod
    def save(self, output: OutputTarget) -> None:
        """输出 PDF 到文件路径或二进制流。"""


def create_backend(engine: str = CONST_ENGINE_REPORTLAB, **kwargs) -> DrawingBackend:
    """按名称创建绘制后端。

    参数：
        engine: "reportlab"（默认）或 "pymupdf"。
        kwargs: 透传给具体后端构造函数。

    异常：
        ValueError: 未知的引擎名。
    """
    name = (engine or CONST_ENGINE_REPORTLAB).strip().lower()
    if name == CONST_ENGINE_REPORTLAB:
        from .reportlab import ReportLabBackend

        return ReportLabBackend(**kwargs)
    if name == CONST_ENGINE_PYMUPDF:
        # 延迟导入：仅在选择该引擎时才需要 PyMuPDF
        from .pymupdf import PyMuPDFBackend

        return PyMuPDFBackend(**kwargs)
    raise ValueError(f"未知的绘制引擎：{engine}")


def write_output(data: bytes, output: OutputTarget) -> None:
    """将 PDF 字节写入路径或二进制流。"""
    if isinstance(output, (str, Path)):
        target = Path(output)
        FileHandler.ensure_parent_writable(target)
        with open(target, "wb") as f:  # noqa: P103
            f.write(data)
    else:
        output.write(data)


__all__ = ["DrawingBackend", "OutputTarget", "create_backend", "write_output"]
