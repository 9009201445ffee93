"""
文件路径：flowpdf/components/__init__.py

说明：
- 排版引擎的公共组件：日志、输出路径与文件校验、错误信息格式；
- 同时聚合导出各子模块：`coords.py`（光标钳制/对齐偏移）、`page.py`（页面几何）、
  `text.py`（分词）、`fonts.py`（字体度量与注册）、`errors.py`（异常类型）；
- 处理器、门面与测试统一写作 `from flowpdf.components import ...`。
"""

from __future__ import annotations

import logging
import tempfile
import time
from pathlib import Path
from typing import Optional

from ..variables import (
    PATH_LOGS_DIR,
    PATH_OUTPUT_DIR,
    PATH_LOG_FILE,
    CONST_DEFAULT_OUTPUT_SUFFIX,
    CONST_ENCODING,
    CONST_LOG_FORMAT,
    CONST_LOG_DATEFMT,
    ERR_PATH_NOT_WRITABLE,
    ERR_FILE_NOT_FOUND,
)

from .coords import align_offset, clamp_coords, clamp_cursor
from .errors import ConfigLoadError, InvalidLayoutInputError, LayoutError, NoActiveSurfaceError
from .fonts import FontMetrics, ReportLabMetrics, register_font_file, safe_line_height, safe_text_width
from .page import PageGeometry, resolve_page_size
from .text import NEWLINE, TOKEN_NEWLINE, TOKEN_WORD, Token, join_words, tokenize


# =============================
# 日志
# =============================
_LOGGER_CONFIGURED: bool = False


def get_logger(name: str) -> logging.Logger:
    """返回命名 logger。

    首次调用时给根 logger 挂上 logs/app.log 文件输出与控制台输出（INFO 级别），
    之后各模块的 logger 都沿用这两个输出。

    参数：
        name: 一般传入 __name__。
    """
    global _LOGGER_CONFIGURED
    if not _LOGGER_CONFIGURED:
        PATH_LOGS_DIR.mkdir(parents=True, exist_ok=True)
        formatter = logging.Formatter(fmt=CONST_LOG_FORMAT, datefmt=CONST_LOG_DATEFMT)
        root = logging.getLogger()
        for handler in (logging.FileHandler(PATH_LOG_FILE, encoding=CONST_ENCODING), logging.StreamHandler()):
            handler.setFormatter(formatter)
            root.addHandler(handler)
        if root.level == logging.NOTSET or root.level > logging.INFO:
            root.setLevel(logging.INFO)
        _LOGGER_CONFIGURED = True
    return logging.getLogger(name)


# =============================
# 文件与输出路径
# =============================
class FileHandler:
    """输入文件校验与 PDF 输出路径。"""

    @staticmethod
    def ensure_project_dirs() -> None:
        """创建运行期目录 logs/ 与 output/。"""
        PATH_LOGS_DIR.mkdir(parents=True, exist_ok=True)
        PATH_OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def validate_readable_file(path: Path) -> None:
        """输入文件（内容描述、CSV、图片）必须存在且是普通文件。

        异常：
            FileNotFoundError: 路径不存在或是目录。
        """
        if not Path(path).is_file():
            raise FileNotFoundError(ErrorHandler.format_error(ERR_FILE_NOT_FOUND, f"找不到输入文件：{path}"))

    @staticmethod
    def ensure_parent_writable(target: Path) -> None:
        """写 PDF 之前创建父目录，并用一个临时文件确认目录可写。

        异常：
            PermissionError: 目录无法写入。
        """
        folder = Path(target).parent
        folder.mkdir(parents=True, exist_ok=True)
        try:
            with tempfile.TemporaryFile(dir=folder):
                pass
        except OSError as exc:
            raise PermissionError(ErrorHandler.format_error(ERR_PATH_NOT_WRITABLE, f"输出目录不可写：{folder}")) from exc

    @staticmethod
    def timestamped_output_path(
        source: Optional[Path],
        suffix: str = CONST_DEFAULT_OUTPUT_SUFFIX,
        prefix: Optional[str] = None,
    ) -> Path:
        """在 output/ 下生成 "<名称>_<时间戳><后缀>" 形式的 PDF 路径。

        名称优先取 prefix，其次取 source（内容描述或 CSV 文件）的 stem，都没有时为 "document"。
        """
        FileHandler.ensure_project_dirs()
        name = (prefix or "").strip() or (source.stem if source is not None else "document")
        return PATH_OUTPUT_DIR / "{}_{}{}".format(name, time.strftime("%Y%m%d_%H%M%S"), suffix)


# =============================
# 错误信息
# =============================
class ErrorHandler:
    @staticmethod
    def format_error(err_code: int, message: str) -> str:
        """统一为 "[code] message"，与 LayoutError 的字符串形式一致。"""
        return f"[{err_code}] {message}"


__all__ = [
    # 日志
    "get_logger",
    # 文件与输出路径
    "FileHandler",
    # 错误
    "ErrorHandler",
    "LayoutError",
    "InvalidLayoutInputError",
    "NoActiveSurfaceError",
    "ConfigLoadError",
    # 坐标
    "clamp_coords",
    "clamp_cursor",
    "align_offset",
    # 页面几何
    "PageGeometry",
    "resolve_page_size",
    # 分词
    "Token",
    "TOKEN_WORD",
    "TOKEN_NEWLINE",
    "NEWLINE",
    "tokenize",
    "join_words",
    # 字体度量
    "FontMetrics",
    "ReportLabMetrics",
    "safe_text_width",
    "safe_line_height",
    "register_font_file",
]
