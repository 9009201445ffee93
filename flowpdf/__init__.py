"""
文件路径：flowpdf/__init__.py

说明：flowpdf 排版与分页引擎。常用入口：

    from flowpdf import PDFDocument, Footer, FLAG_CENTER
"""

from .components import ConfigLoadError, InvalidLayoutInputError, LayoutError, NoActiveSurfaceError
from .pdf_document import PDFDocument
from .processors.footer import Footer
from .processors.table import Cell
from .variables import FLAG_CENTER, FLAG_JUSTIFY, FLAG_LEFT, FLAG_NEWLINE, FLAG_RIGHT

__version__ = "0.1.0"

__all__ = [
    "PDFDocument",
    "Footer",
    "Cell",
    "FLAG_CENTER",
    "FLAG_LEFT",
    "FLAG_RIGHT",
    "FLAG_JUSTIFY",
    "FLAG_NEWLINE",
    "LayoutError",
    "InvalidLayoutInputError",
    "NoActiveSurfaceError",
    "ConfigLoadError",
]
