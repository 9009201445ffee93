"""
文件路径：main.py

命令行入口：
- 功能：读取内容描述 JSON（段落/图片/表格/分页），按文档配置排版并输出 PDF。
- 依赖：`flowpdf/pdf_document.py`、`flowpdf/data_handler.py`、`flowpdf/components`、`flowpdf/variables.py`。

快速使用示例：
    # 1) 生成一份示例文档（各种对齐的文本、叠加图片、跨页表格、两端对齐的多页正文）
    python main.py --make-example

    # 2) 按内容描述与文档配置排版
    python main.py --content-json examples/content.json --config-json config/document.json

    # 3) 仅把 CSV 表格排版输出，使用 PyMuPDF 引擎、不加页脚
    python main.py --table-csv data.csv --engine pymupdf --no-footer

运行说明：
- 内容描述结构见 flowpdf/pdf_document.py 中 PDFDocument.draw_blocks；
- 文档配置（纸张、方向、边距、字体、页脚）见 flowpdf/data_handler.py 中 load_document_config；
- 未指定 --output 时输出到 output/ 目录下带时间戳的文件。

变量引用说明（来自 flowpdf/variables.py）：
- PATH_EXAMPLES_DIR, PATH_EXAMPLE_CONTENT_JSON, PATH_EXAMPLE_OUTPUT_PDF, CONST_DEFAULT_OUTPUT_SUFFIX, FLAG_*
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List, Optional

from PIL import Image, ImageDraw

from flowpdf.components import FileHandler, get_logger
from flowpdf.data_handler import load_content_blocks, load_document_config, load_table_csv
from flowpdf.pdf_document import PDFDocument
from flowpdf.processors.footer import Footer
from flowpdf.processors.table import Cell
from flowpdf.variables import (
    PATH_EXAMPLES_DIR,
    PATH_EXAMPLE_CONTENT_JSON,
    PATH_EXAMPLE_OUTPUT_PDF,
    CONST_DEFAULT_OUTPUT_SUFFIX,
    CONST_ENCODING,
    CONST_ENGINE_PYMUPDF,
    CONST_ENGINE_REPORTLAB,
    FLAG_CENTER,
    FLAG_JUSTIFY,
    FLAG_LEFT,
    FLAG_NEWLINE,
    FLAG_RIGHT,
)


logger = get_logger(__name__)

_EXAMPLE_PARAGRAPHS = [
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Multa sunt dicta ab antiquis de contemnendis ac "
    "despiciendis rebus humanis; Duo Reges: constructio interrete. Id Sextilius factum negabat. Tum Quintus: "
    "Est plane, Piso, ut dicis, inquit.\n\n",
    "Quasi vero, inquit, perpetua oratio rhetorum solum, non etiam philosophorum sit. Septem autem illi non suo, "
    "sed populorum suffragio omnium nominati sunt. Cur post Tarentum ad Archytam? Quia nec honesto quic quam "
    "honestius nec turpi turpius. Re mihi non aeque satisfacit, et quidem locis pluribus.\n\n",
    "Qualem igitur hominem natura inchoavit? Tum ille timide vel potius verecunde: Facio, inquit. Cur iustitia "
    "laudatur? Haec bene dicuntur, nec ego repugno, sed inter sese ipsa pugnant. Erit enim mecum, si tecum erit.\n\n",
    "Vestri haec verecundius, illi fortasse constantius. Si quicquam extra virtutem habeatur in bonis. Utinam "
    "quidem dicerent alium alio beatiorem! Iam ruinas videres. At certe gravius.\n\n",
    "Ut non sine causa ex iis memoriae ducta sit disciplina. Sint ista Graecorum; Sed nonne merninisti licere mihi "
    "ista probare, quae sunt a te dicta? Dicimus aliquem hilare vivere; Quamquam tu hanc copiosiorem etiam soles "
    "dicere. Sed vos squalidius, illorum vides quam niteat oratio. Si mala non sunt, iacet omnis ratio "
    "Peripateticorum. Hoc non est positum in nostra actione.\n\n",
]


def _example_text(num: int) -> str:
    return "".join(_EXAMPLE_PARAGRAPHS[:num])


def _example_images() -> tuple:
    """生成示例用底图与半透明叠加图（避免依赖网络图片）。"""
    basemap = Image.new("RGB", (400, 300), (200, 220, 240))
    draw = ImageDraw.Draw(basemap)
    for i in range(0, 300, 20):
        draw.line([(0, i), (400, i)], fill=(150, 170, 200), width=2)
    draw.rectangle([(40, 180), (360, 280)], fill=(90, 140, 90))

    overlay = Image.new("RGBA", (400, 300), (0, 0, 0, 0))
    odraw = ImageDraw.Draw(overlay)
    odraw.ellipse([(140, 60), (260, 180)], fill=(255, 200, 0, 180))
    return basemap, overlay


def _example_flag(colors: List[tuple]) -> Image.Image:
    """生成 40x30 的横条纹小图，作为表格中的图片单元格。"""
    img = Image.new("RGB", (40, 30), colors[0])
    draw = ImageDraw.Draw(img)
    band = 30 // len(colors)
    for i, color in enumerate(colors):
        draw.rectangle([(0, i * band), (40, (i + 1) * band)], fill=color)
    return img


def build_example_document(output: Path, engine: str = CONST_ENGINE_REPORTLAB) -> bool:
    """生成示例文档：标题、各种对齐的段落、叠加图片、跨页表格、多页两端对齐正文。"""
    basemap, overlay = _example_images()
    table = [
        [None, "Country", "Area", "Population", "Info"],
        [Cell.image(_example_flag([(186, 12, 47), (255, 255, 255), (0, 32, 91)])), "Norway", "col2", "col3", "col4"],
        [Cell.image(_example_flag([(0, 106, 167), (254, 204, 0)])), "Sweden", "col2", "col3", "col4"],
        [Cell.image(_example_flag([(198, 12, 48), (255, 255, 255)])), "Denmark", "col2", "col3", "col4"],
        [Cell.image(_example_flag([(218, 37, 29), (255, 255, 0)])), "Vietnam", "col2", "col3", "col4"],
        [Cell.image(_example_flag([(165, 25, 49), (244, 245, 248), (45, 42, 74)])), "Thailand", "col2", "col3", "col4"],
        [Cell.image(_example_flag([(254, 203, 0), (52, 178, 51), (234, 40, 57)])), "Burma", "col2", "col3", "col4"],
        [Cell.image(_example_flag([(178, 34, 52), (255, 255, 255), (60, 59, 110)])), "USA", "col2", "col3", "col4"],
        [Cell.image(_example_flag([(0, 0, 0), (221, 0, 0), (255, 206, 0)])), "Germany", "col2", "col3", "col4"],
    ]

    footer = Footer.default()
    footer.center_text = "A simple PDF document\nWritten by flowpdf"
    footer.omit_first_page = False

    doc = PDFDocument(engine=engine, footer=footer)
    doc.new_page()

    doc.title1_style()
    doc.set_text_color((0x20, 0x20, 0xFF))
    doc.draw_text("My simple pdf document\n\n", FLAG_CENTER)
    doc.set_text_color((0, 0, 0))

    doc.title2_style()
    doc.draw_text("\n\nLeft aligned text\n\n")
    doc.normal_style()
    doc.draw_text(_example_text(3))

    doc.draw_image(basemap, FLAG_CENTER)
    doc.draw_image(overlay, FLAG_CENTER | FLAG_NEWLINE)
    doc.draw_text("Figure 1: An example figure with overlay\n", FLAG_CENTER)

    doc.title2_style()
    doc.draw_text("\n\nRight aligned text\n\n")
    doc.normal_style()
    doc.draw_text(_example_text(2), FLAG_RIGHT)

    doc.draw_table(
        table,
        [50, 100, 60, 70, 200],
        [FLAG_CENTER, FLAG_LEFT, FLAG_CENTER, FLAG_RIGHT, FLAG_LEFT],
        FLAG_CENTER,
    )
    doc.draw_text("Table 1: A rather odd table, centered on page\n", FLAG_CENTER)

    doc.title2_style()
    doc.draw_text("\n\nCentered text\n\n")
    doc.normal_style()
    doc.draw_text(_example_text(4), FLAG_CENTER)

    doc.title2_style()
    doc.draw_text("\n\nJustified text\n\n")
    doc.normal_style()
    for _ in range(10):
        doc.draw_text(_example_text(5), FLAG_JUSTIFY)

    doc.title1_style()
    doc.draw_text("\n\n-- END OF DOCUMENT --", FLAG_CENTER)
    return doc.finish(output)


def _write_example_content(path: Path) -> None:
    """写出一份示例内容描述 JSON，便于参照 --content-json 的结构。"""
    if path.exists():
        return
    blocks = [
        {"type": "text", "text": "Example content\n\n", "style": "title1", "align": "center"},
        {"type": "text", "text": _example_text(2), "align": "justify"},
        {
            "type": "table",
            "rows": [["Name", "Value"], ["alpha", "1"], ["beta", "2"]],
            "widths": [120, 80],
            "aligns": ["left", "right"],
            "table_align": "center",
        },
        {"type": "new_page"},
        {"type": "text", "text": "Second page", "style": "title2"},
    ]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(blocks, ensure_ascii=False, indent=2), encoding=CONST_ENCODING)
    logger.info("已生成示例内容描述：%s", path)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="PDF 排版工具（段落换行/对齐、图片、表格、自动分页、页脚）")
    parser.add_argument("--content-json", dest="content_json", type=Path, default=None, help="内容描述 JSON（数组或包含 blocks 数组的对象）")
    parser.add_argument("--config-json", dest="config_json", type=Path, default=None, help="文档配置 JSON（纸张/边距/字体/页脚），默认 config/document.json")
    parser.add_argument("--table-csv", dest="table_csv", type=Path, default=None, help="追加绘制的 CSV 表格，首行为表头")
    parser.add_argument("--output", type=Path, default=None, help="输出 PDF 路径（可省略，自动生成）")
    parser.add_argument("--output-prefix", dest="output_prefix", type=str, default=None, help="输出文件名前缀（覆盖内容文件名 stem）")
    parser.add_argument("--engine", type=str, choices=[CONST_ENGINE_REPORTLAB, CONST_ENGINE_PYMUPDF], default=None, help="绘制引擎：reportlab/pymupdf（默认取配置或 reportlab）")
    parser.add_argument("--no-footer", dest="no_footer", action="store_true", help="不绘制页脚")
    parser.add_argument("--make-example", action="store_true", help="生成示例文档与示例内容描述")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    FileHandler.ensure_project_dirs()

    if args.make_example:
        PATH_EXAMPLES_DIR.mkdir(parents=True, exist_ok=True)
        _write_example_content(PATH_EXAMPLE_CONTENT_JSON)
        output = args.output or PATH_EXAMPLE_OUTPUT_PDF
        ok = build_example_document(output, engine=args.engine or CONST_ENGINE_REPORTLAB)
        print(f"示例文档{'已生成' if ok else '生成失败'}：{output}")
        return 0 if ok else 1

    if args.content_json is None and args.table_csv is None:
        print("未提供 --content-json 或 --table-csv，可先运行 --make-example 查看示例")
        return 2

    config = load_document_config(args.config_json)
    overrides = {}
    if args.engine:
        overrides["engine"] = args.engine
    if args.no_footer:
        overrides["footer"] = None
    elif "footer" not in config:
        overrides["footer"] = Footer.default()
    doc = PDFDocument.from_config(config, **overrides)

    if args.content_json is not None:
        blocks = load_content_blocks(args.content_json)
        drawn = doc.draw_blocks(blocks, base_dir=args.content_json.parent)
        logger.info("内容块绘制完成：%d/%d", drawn, len(blocks))

    if args.table_csv is not None:
        rows = load_table_csv(args.table_csv)
        n = len(rows[0])
        doc.draw_table(rows, [doc.content_width / n] * n, [FLAG_LEFT] * n)

    output = args.output
    if output is None:
        source = args.content_json or args.table_csv
        output = FileHandler.timestamped_output_path(source, suffix=CONST_DEFAULT_OUTPUT_SUFFIX, prefix=args.output_prefix)
    ok = doc.finish(output)
    print(f"排版{'完成' if ok else '失败'}，共 {doc.page_count} 页，保存至：{output}")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
