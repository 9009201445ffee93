"""
文件路径：flowpdf/variables.py

说明：flowpdf 的全部跨模块常量，按前缀分组：
  - PATH_：项目目录与默认文件位置（pathlib.Path）
  - STYLE_：默认字体、字号、颜色、边距、纸张与页脚样式
  - FLAG_：对齐与图片位标志，可按位或组合
  - CONST_：方向名、引擎名、页脚占位符、日志格式等
  - ERR_：错误码，按千位分组

其余模块只从这里导入常量，不自行定义全局量。长度单位均为 pt（1/72 英寸），
坐标系为 PDF 标准：左下角为原点，y 向上增大。
"""

from pathlib import Path
from typing import Tuple


# =============================
# 路径（PATH_）
# =============================
# 仓库根目录（flowpdf 包的上一级）
PATH_ROOT: Path = Path(__file__).resolve().parents[1]

# 运行期目录
PATH_CONFIG_DIR: Path = PATH_ROOT / "config"
PATH_EXAMPLES_DIR: Path = PATH_ROOT / "examples"
PATH_OUTPUT_DIR: Path = PATH_ROOT / "output"
PATH_LOGS_DIR: Path = PATH_ROOT / "logs"

# 默认文件
PATH_DOCUMENT_CONFIG_JSON: Path = PATH_CONFIG_DIR / "document.json"  # 页面/边距/字体/页脚配置
PATH_EXAMPLE_CONTENT_JSON: Path = PATH_EXAMPLES_DIR / "content.json"  # 示例内容块描述
PATH_EXAMPLE_OUTPUT_PDF: Path = PATH_EXAMPLES_DIR / "example_document.pdf"  # 示例输出 PDF
PATH_LOG_FILE: Path = PATH_LOGS_DIR / "app.log"


# =============================
# 样式（STYLE_）
# =============================
STYLE_FONT_NAME: str = "Helvetica"  # 默认正文字体（ReportLab 标准 Type1 字体名）
STYLE_NORMAL_FONT_SIZE: float = 10.0  # normal_style 字号（pt）
STYLE_TITLE1_FONT_SIZE: float = 20.0  # title1_style 字号（pt）
STYLE_TITLE2_FONT_SIZE: float = 15.0  # title2_style 字号（pt）
STYLE_TEXT_COLOR_RGB: Tuple[int, int, int] = (0, 0, 0)  # 正文颜色
STYLE_TABLE_CELL_MARGIN: float = 5.0  # 表格单元格边框与文字之间的水平留白（pt）
STYLE_TABLE_BORDER_WIDTH: float = 1.0  # 表格边框线宽（pt）

# 页面默认值
STYLE_PAGE_SIZE_DEFAULT: str = "A4"
STYLE_MARGIN_TOP: float = 50.0
STYLE_MARGIN_BOTTOM: float = 50.0
STYLE_MARGIN_LEFT: float = 50.0
STYLE_MARGIN_RIGHT: float = 50.0

# 页脚默认样式
STYLE_FOOTER_FONT_NAME: str = "Times-Bold"
STYLE_FOOTER_FONT_SIZE: float = 8.0
STYLE_FOOTER_TEXT_COLOR_RGB: Tuple[int, int, int] = (128, 128, 128)  # 灰色


# =============================
# 位标志（FLAG_）
# =============================
# 文本/图片/表格单元格对齐方式，可与 FLAG_NEWLINE 按位或组合（仅图片使用 NEWLINE）
FLAG_CENTER: int = 1
FLAG_LEFT: int = 2
FLAG_RIGHT: int = 4
FLAG_JUSTIFY: int = 8
FLAG_NEWLINE: int = 16  # 图片专用：放置后将光标移至图片下方


# =============================
# 常量（CONST_）
# =============================
CONST_ENCODING: str = "utf-8"

# 纸张方向
CONST_ORIENTATION_PORTRAIT: str = "portrait"
CONST_ORIENTATION_LANDSCAPE: str = "landscape"

# 绘制引擎
CONST_ENGINE_REPORTLAB: str = "reportlab"
CONST_ENGINE_PYMUPDF: str = "pymupdf"
CONST_ENGINE_DEFAULT: str = CONST_ENGINE_REPORTLAB

# 表格单元格首行基线相对单元格上边框的下移比例（乘以行距）
CONST_CELL_BASELINE_RATIO: float = 0.8

# 页脚占位符（在 finish 时一次性替换）
CONST_FOOTER_PAGE: str = "{PAGE}"
CONST_FOOTER_NUMPAGES: str = "{NUMPAGES}"
CONST_FOOTER_DATE: str = "{DATE}"
CONST_FOOTER_USER: str = "{USER}"
CONST_FOOTER_DATE_FORMAT: str = "%d %b %Y"  # 例如 "07 Mar 2024"

# 浮点比较容差（光标是否位于行首等判断）
CONST_FLOAT_EPSILON: float = 1e-6

# 日志格式（get_logger 使用）
CONST_LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CONST_LOG_DATEFMT: str = "%Y-%m-%d %H:%M:%S"

# 输出文件名后缀（CLI 自动命名时使用）
CONST_DEFAULT_OUTPUT_SUFFIX: str = "_layout.pdf"


# =============================
# 错误码（ERR_）
# =============================
# 1xxx：文件与路径
ERR_FILE_NOT_FOUND: int = 1001  # 输入文件（内容描述、CSV、图片）不存在
ERR_PATH_NOT_WRITABLE: int = 1003  # PDF 输出目录不可写

# 2xxx：排版输入相关
ERR_INVALID_LAYOUT_INPUT: int = 2001  # 表格行列不一致、宽度为负、对齐方式非法等
ERR_INVALID_MARGINS: int = 2002  # 边距导致可写区域为空

# 3xxx：绘制面/后端相关
ERR_NO_ACTIVE_SURFACE: int = 3001  # 无可用页面（未开页或已 finish）
ERR_BACKEND_CALL_FAILED: int = 3002  # 后端绘制调用失败（记录后降级为空操作）
ERR_METRICS_FAILED: int = 3003  # 字体度量失败（宽度按 0 处理）
ERR_PDF_WRITE_FAILED: int = 3004  # PDF 写入失败
ERR_FOOTER_FAILED: int = 3005  # 页脚叠加失败

# 4xxx：配置与内容数据
ERR_CONFIG_LOAD_FAILED: int = 4001  # 配置或内容描述 JSON 无法解析
ERR_DATA_INVALID: int = 4002  # 内容块或页脚配置非法


# =============================
# 导出声明
# =============================
__all__ = [
    # PATH_
    "PATH_ROOT",
    "PATH_CONFIG_DIR",
    "PATH_EXAMPLES_DIR",
    "PATH_OUTPUT_DIR",
    "PATH_LOGS_DIR",
    "PATH_DOCUMENT_CONFIG_JSON",
    "PATH_EXAMPLE_CONTENT_JSON",
    "PATH_EXAMPLE_OUTPUT_PDF",
    "PATH_LOG_FILE",
    # STYLE_
    "STYLE_FONT_NAME",
    "STYLE_NORMAL_FONT_SIZE",
    "STYLE_TITLE1_FONT_SIZE",
    "STYLE_TITLE2_FONT_SIZE",
    "STYLE_TEXT_COLOR_RGB",
    "STYLE_TABLE_CELL_MARGIN",
    "STYLE_TABLE_BORDER_WIDTH",
    "STYLE_PAGE_SIZE_DEFAULT",
    "STYLE_MARGIN_TOP",
    "STYLE_MARGIN_BOTTOM",
    "STYLE_MARGIN_LEFT",
    "STYLE_MARGIN_RIGHT",
    "STYLE_FOOTER_FONT_NAME",
    "STYLE_FOOTER_FONT_SIZE",
    "STYLE_FOOTER_TEXT_COLOR_RGB",
    # FLAG_
    "FLAG_CENTER",
    "FLAG_LEFT",
    "FLAG_RIGHT",
    "FLAG_JUSTIFY",
    "FLAG_NEWLINE",
    # CONST_
    "CONST_ENCODING",
    "CONST_ORIENTATION_PORTRAIT",
    "CONST_ORIENTATION_LANDSCAPE",
    "CONST_ENGINE_REPORTLAB",
    "CONST_ENGINE_PYMUPDF",
    "CONST_ENGINE_DEFAULT",
    "CONST_CELL_BASELINE_RATIO",
    "CONST_FOOTER_PAGE",
    "CONST_FOOTER_NUMPAGES",
    "CONST_FOOTER_DATE",
    "CONST_FOOTER_USER",
    "CONST_FOOTER_DATE_FORMAT",
    "CONST_FLOAT_EPSILON",
    "CONST_LOG_FORMAT",
    "CONST_LOG_DATEFMT",
    "CONST_DEFAULT_OUTPUT_SUFFIX",
    # ERR_
    "ERR_FILE_NOT_FOUND",
    "ERR_PATH_NOT_WRITABLE",
    "ERR_INVALID_LAYOUT_INPUT",
    "ERR_INVALID_MARGINS",
    "ERR_NO_ACTIVE_SURFACE",
    "ERR_BACKEND_CALL_FAILED",
    "ERR_METRICS_FAILED",
    "ERR_PDF_WRITE_FAILED",
    "ERR_FOOTER_FAILED",
    "ERR_CONFIG_LOAD_FAILED",
    "ERR_DATA_INVALID",
]
