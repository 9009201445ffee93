"""
文件路径：flowpdf/components/errors.py

说明：排版引擎的异常类型。所有异常携带 `err_code`（来自 variables 的 ERR_ 常量），
`str(exc)` 统一为 "[code] message" 形式，与 ErrorHandler.format_error 保持一致。
"""

from __future__ import annotations

from typing import Optional

from ..variables import (
    ERR_CONFIG_LOAD_FAILED,
    ERR_INVALID_LAYOUT_INPUT,
    ERR_NO_ACTIVE_SURFACE,
)


class LayoutError(Exception):
    """排版相关异常基类。"""

    default_code: int = 0

    def __init__(self, message: str, err_code: Optional[int] = None) -> None:
        self.err_code = self.default_code if err_code is None else int(err_code)
        self.message = message
        super().__init__(f"[{self.err_code}] {message}")


class InvalidLayoutInputError(LayoutError, ValueError):
    """输入不满足排版前置条件：表格行列数不一致、列宽为负、边距非法等。"""

    default_code = ERR_INVALID_LAYOUT_INPUT


class NoActiveSurfaceError(LayoutError, RuntimeError):
    """没有可绘制的页面：未开页且禁止自动开页，或文档已 finish。"""

    default_code = ERR_NO_ACTIVE_SURFACE


class ConfigLoadError(LayoutError, RuntimeError):
    """配置或内容描述文件无法解析。"""

    default_code = ERR_CONFIG_LOAD_FAILED


__all__ = [
    "LayoutError",
    "InvalidLayoutInputError",
    "NoActiveSurfaceError",
    "ConfigLoadError",
]
