"""
文件路径：flowpdf/data_handler.py

模块职责：
- 加载文档配置 JSON（纸张、方向、边距、字体、样式字号、单元格留白、页脚）。
- 加载内容描述 JSON（内容块列表），以及 CSV 表格数据。
- 解析对齐方式字符串为位标志。

说明：
- 不依赖排版模块的状态，只做数据读取与清洗；解析失败统一抛出 ConfigLoadError。

变量引用说明（来自 flowpdf/variables.py）：
- PATH_DOCUMENT_CONFIG_JSON, CONST_ENCODING, FLAG_*, ERR_CONFIG_LOAD_FAILED, ERR_DATA_INVALID

组件调用说明（供业务模块）：
- load_document_config：读取文档配置（缺失时返回空配置）
- load_content_blocks：读取内容块列表
- load_table_csv：读取 CSV 表格（首行为表头）
- parse_align_flags：对齐字符串/列表 -> 位标志
- footer_from_config：页脚配置 -> Footer
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .components import ConfigLoadError, FileHandler, InvalidLayoutInputError, get_logger
from .processors.footer import Footer
from .variables import (
    PATH_DOCUMENT_CONFIG_JSON,
    CONST_ENCODING,
    FLAG_CENTER,
    FLAG_JUSTIFY,
    FLAG_LEFT,
    FLAG_NEWLINE,
    FLAG_RIGHT,
    ERR_CONFIG_LOAD_FAILED,
    ERR_DATA_INVALID,
)


logger = get_logger(__name__)

_ALIGN_NAMES: Dict[str, int] = {
    "left": FLAG_LEFT,
    "center": FLAG_CENTER,
    "centre": FLAG_CENTER,
    "right": FLAG_RIGHT,
    "justify": FLAG_JUSTIFY,
    "newline": FLAG_NEWLINE,
}

# 文档配置中允许出现的顶层键
_CONFIG_KEYS = {
    "page_size",
    "orientation",
    "margins",
    "font_name",
    "font_size",
    "text_color",
    "normal_font_size",
    "title1_font_size",
    "title2_font_size",
    "table_cell_margin",
    "footer",
    "engine",
}


def _json_loads_strip_bom(content: str):
    """解析 JSON 字符串，自动去除 UTF-8 BOM。"""
    if content.startswith("\ufeff"):
        content = content.lstrip("\ufeff")
    return json.loads(content)


def parse_align_flags(value: Union[None, int, str, Sequence[str]], default: int = FLAG_LEFT) -> int:
    """把对齐描述转换为位标志。

    支持：
    - None：返回 default
    - int：原样返回
    - 字符串："center"、"center|newline"、"right+newline"（不区分大小写）
    - 字符串列表：["center", "newline"]

    异常：
        InvalidLayoutInputError: 含未知的对齐名。
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidLayoutInputError(f"对齐方式非法：{value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        parts = value.replace("+", "|").replace(",", "|").split("|")
    else:
        parts = [str(p) for p in value]
    flags = 0
    for part in parts:
        key = part.strip().lower()
        if not key:
            continue
        if key not in _ALIGN_NAMES:
            raise InvalidLayoutInputError(f"未知的对齐方式：{part}")
        flags |= _ALIGN_NAMES[key]
    return flags or default


def footer_from_config(data: Any) -> Optional[Footer]:
    """页脚配置 -> Footer。

    - None / false：不使用页脚
    - true / "default"：默认页脚
    - 对象：在默认页脚基础上覆盖给定字段
    """
    if data is None or data is False:
        return None
    if data is True or data == "default":
        return Footer.default()
    if not isinstance(data, dict):
        raise ConfigLoadError(f"页脚配置需为对象或布尔值：{data!r}", ERR_DATA_INVALID)
    footer = Footer.default()
    for key in ("left_text", "center_text", "right_text", "font_name"):
        if key in data:
            setattr(footer, key, "" if data[key] is None else str(data[key]))
    for key in ("omit_first_page", "count_first_page"):
        if key in data:
            setattr(footer, key, bool(data[key]))
    if "font_size" in data:
        footer.font_size = float(data["font_size"])
    if "text_color" in data:
        footer.text_color = tuple(int(v) for v in data["text_color"])  # type: ignore[assignment]
    return footer


def load_document_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """加载文档配置 JSON。

    参数：
        config_path: 配置路径；默认读取 `config/document.json`。

    返回：
        只含已知键的配置字典；文件不存在时返回空字典。

    异常：
        ConfigLoadError: JSON 非法或结构不正确。
    """
    path = Path(config_path) if config_path else PATH_DOCUMENT_CONFIG_JSON
    if not path.exists():
        logger.warning("找不到文档配置文件，将使用默认配置：%s", path)
        return {}
    try:
        data = _json_loads_strip_bom(path.read_text(encoding=CONST_ENCODING))
    except Exception as exc:  # noqa: BLE001
        raise ConfigLoadError(f"配置加载失败: {path} -> {exc}", ERR_CONFIG_LOAD_FAILED) from exc
    if not isinstance(data, dict):
        raise ConfigLoadError(f"文档配置需为对象结构：{path}")

    unknown = sorted(set(data) - _CONFIG_KEYS)
    if unknown:
        logger.warning("忽略未知的配置项：%s", ", ".join(unknown))
    config = {k: v for k, v in data.items() if k in _CONFIG_KEYS}

    margins = config.get("margins")
    if margins is not None:
        if isinstance(margins, (int, float)):
            config["margins"] = {side: float(margins) for side in ("top", "bottom", "left", "right")}
        elif isinstance(margins, dict):
            config["margins"] = {str(k): float(v) for k, v in margins.items()}
        else:
            raise ConfigLoadError(f"margins 需为数字或对象：{margins!r}", ERR_DATA_INVALID)
    if "footer" in config:
        config["footer"] = footer_from_config(config["footer"])
    return config


def load_content_blocks(path: Path) -> List[Dict[str, Any]]:
    """从 JSON 文件加载内容块。

    支持两种结构：
    - 数组：[{"type": "text", "text": "..."}, ...]
    - 对象：{"blocks": [ ... ]}

    返回：
        内容块列表（跳过非对象项）。
    """
    p = Path(path)
    FileHandler.validate_readable_file(p)
    try:
        data = _json_loads_strip_bom(p.read_text(encoding=CONST_ENCODING))
    except Exception as exc:  # noqa: BLE001
        raise ConfigLoadError(f"内容描述加载失败: {p} -> {exc}") from exc
    if isinstance(data, dict) and isinstance(data.get("blocks"), list):
        items = data["blocks"]
    elif isinstance(data, list):
        items = data
    else:
        raise ConfigLoadError("内容描述需为数组或包含 blocks 数组的对象", ERR_DATA_INVALID)

    blocks = [obj for obj in items if isinstance(obj, dict)]
    if len(blocks) != len(items):
        logger.warning("[%s] 跳过 %d 个非对象内容块", ERR_DATA_INVALID, len(items) - len(blocks))
    return blocks


def load_table_csv(path: Path) -> List[List[str]]:
    """从 CSV 文件加载表格（首行为表头，作为第一行绘制）。

    异常：
        ConfigLoadError: 各行列数不一致或文件为空。
    """
    p = Path(path)
    FileHandler.validate_readable_file(p)
    with p.open("r", encoding=CONST_ENCODING, newline="") as f:  # noqa: P103
        rows = [[cell.strip() for cell in row] for row in csv.reader(f) if row]
    if not rows:
        raise ConfigLoadError(f"CSV 表格为空：{p}", ERR_DATA_INVALID)
    width = len(rows[0])
    for idx, row in enumerate(rows):
        if len(row) != width:
            raise ConfigLoadError(f"CSV 第 {idx + 1} 行有 {len(row)} 列，表头为 {width} 列：{p}", ERR_DATA_INVALID)
    return rows


__all__ = [
    "parse_align_flags",
    "footer_from_config",
    "load_document_config",
    "load_content_blocks",
    "load_table_csv",
]
