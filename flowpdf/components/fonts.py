"""
文件路径：flowpdf/components/fonts.py

说明：字体度量（宽度与行距）与字体注册。

- 所有引擎统一使用 ReportLab 的字体度量（pdfmetrics），即使在 PyMuPDF 路径中也沿用，
  以保证换行与对齐结果与引擎无关；
- 行距 = 字体包围盒高度 / 1000 * 字号；
- 度量必须是确定性的：引擎不做缓存，每行重新查询。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from ..variables import ERR_FILE_NOT_FOUND, ERR_METRICS_FAILED


logger = logging.getLogger(__name__)

# 标准 14 字体的 FontBBox（取自 Adobe AFM），ReportLab 内置字体不携带包围盒
_STANDARD_FONT_BBOX = {
    "Helvetica": (-166, -225, 1000, 931),
    "Helvetica-Bold": (-170, -228, 1003, 962),
    "Helvetica-Oblique": (-170, -225, 1116, 931),
    "Helvetica-BoldOblique": (-174, -228, 1114, 962),
    "Times-Roman": (-168, -218, 1000, 898),
    "Times-Bold": (-168, -218, 1000, 935),
    "Times-Italic": (-169, -217, 1010, 883),
    "Times-BoldItalic": (-200, -218, 996, 921),
    "Courier": (-23, -250, 715, 805),
    "Courier-Bold": (-113, -250, 749, 801),
    "Courier-Oblique": (-27, -250, 849, 805),
    "Courier-BoldOblique": (-57, -250, 869, 801),
    "Symbol": (-180, -293, 1090, 1010),
    "ZapfDingbats": (-1, -143, 981, 820),
}


class FontMetrics(Protocol):
    """字体度量接口（外部协作者）。"""

    def width(self, text: str, font_name: str, font_size: float) -> float:
        ...

    def line_height(self, font_name: str, font_size: float) -> float:
        ...


class ReportLabMetrics:
    """基于 ReportLab pdfmetrics 的度量实现。"""

    def width(self, text: str, font_name: str, font_size: float) -> float:
        return float(pdfmetrics.stringWidth(text, font_name, font_size))

    def line_height(self, font_name: str, font_size: float) -> float:
        face = pdfmetrics.getFont(font_name).face
        bbox = getattr(face, "bbox", None) or _STANDARD_FONT_BBOX.get(font_name)
        if bbox and len(bbox) == 4 and bbox[3] > bbox[1]:
            return (float(bbox[3]) - float(bbox[1])) / 1000.0 * float(font_size)
        # 包围盒缺失时以上升/下降线估算
        ascent, descent = pdfmetrics.getAscentDescent(font_name, font_size)
        return float(ascent) - float(descent)


def safe_text_width(metrics: FontMetrics, text: str, font_name: str, font_size: float) -> float:
    """度量文本宽度；度量失败时记录日志并返回 0（降级而非中断）。"""
    try:
        return float(metrics.width(text, font_name, font_size))
    except Exception as exc:  # noqa: BLE001
        logger.error("[%s] 文本宽度度量失败：font=%s size=%s text=%r -> %s", ERR_METRICS_FAILED, font_name, font_size, text, exc)
        return 0.0


def safe_line_height(metrics: FontMetrics, font_name: str, font_size: float) -> float:
    """度量行距；失败时记录日志并返回 0。"""
    try:
        return float(metrics.line_height(font_name, font_size))
    except Exception as exc:  # noqa: BLE001
        logger.error("[%s] 行距度量失败：font=%s size=%s -> %s", ERR_METRICS_FAILED, font_name, font_size, exc)
        return 0.0


def register_font_file(path: Path, face_name: Optional[str] = None) -> str:
    """向 ReportLab 注册 TTF/OTF 字体文件，返回注册名。

    参数：
        path: 字体文件路径（仅接受 .ttf/.otf）。
        face_name: 注册名；默认使用文件名 stem。

    返回：
        注册成功的字体名，可直接用于 set_font。

    异常：
        FileNotFoundError: 文件不存在或扩展名不受支持。
    """
    p = Path(path)
    if not p.exists() or p.suffix.lower() not in {".ttf", ".otf"}:
        raise FileNotFoundError(f"[{ERR_FILE_NOT_FOUND}] 字体文件不存在或不是 TTF/OTF：{p}")
    name = face_name or p.stem
    if name in pdfmetrics.getRegisteredFontNames():
        logger.info("字体已注册，跳过：%s", name)
        return name
    pdfmetrics.registerFont(TTFont(name, str(p)))
    logger.info("已注册字体：%s -> %s", name, p)
    return name


__all__ = [
    "FontMetrics",
    "ReportLabMetrics",
    "safe_text_width",
    "safe_line_height",
    "register_font_file",
]
