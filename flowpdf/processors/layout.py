"""
文件路径：flowpdf/processors/layout.py

说明：段落排版：贪心换行、对齐（左/右/居中/两端）与自动换页。

状态机（每次从当前光标处向 build_line 请求下一行）：
- -1（显式换行）：光标回到左边界并下移一行，必要时换页；
- 0（放不下）：若本行已有内容，仅换行后重试同一个单词；
  若光标已在左边界，则强制绘制该单词（允许溢出），再换行，保证不会死循环；
- N>0：以单空格拼接 N 个单词；若位于行首且非左对齐，按剩余空间 space 处理：
  - CENTER：光标右移 space/2；RIGHT：右移 space；
  - JUSTIFY：仅对段落中非末行生效，字符间距 = space / (字符数 - 1)，绘制后复位为 0。

emit=False 时为"试运行"：与真实绘制共用同一套逻辑，只推进光标，
不调用后端、不开页、不换页（表格行高预估使用）。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..components import join_words, tokenize
from ..components.coords import align_offset
from ..variables import (
    CONST_FLOAT_EPSILON,
    FLAG_CENTER,
    FLAG_JUSTIFY,
    FLAG_LEFT,
    FLAG_RIGHT,
)
from .line_builder import build_line

if TYPE_CHECKING:
    from .pagination import Paginator


def resolve_alignment(flags: Optional[int]) -> int:
    """从位标志中选出对齐方式，优先级：CENTER > RIGHT > JUSTIFY > LEFT。"""
    flags = int(flags or 0)
    if flags & FLAG_CENTER:
        return FLAG_CENTER
    if flags & FLAG_RIGHT:
        return FLAG_RIGHT
    if flags & FLAG_JUSTIFY:
        return FLAG_JUSTIFY
    return FLAG_LEFT


def _emit_line(pager: Paginator, line: str, emit: bool, char_space: float = 0.0) -> None:
    """在光标处绘制一行并把光标右移到行尾（含注入的字符间距）。"""
    state = pager.state
    width = pager.text_width(line)
    if emit:
        if char_space:
            pager.safe_call("set_character_spacing", char_space)
        pager.safe_call("draw_string", state.cursor_x, state.cursor_y, line)
        if char_space:
            pager.safe_call("set_character_spacing", 0.0)
    state.cursor_x += width + char_space * max(len(line) - 1, 0)


def layout_text(
    pager: Paginator,
    text: Optional[str],
    start_x: float,
    end_x: float,
    flags: int = FLAG_LEFT,
    *,
    emit: bool = True,
) -> float:
    """从当前光标处排版一段文本，限制在 [start_x, end_x] 之间。

    参数：
        pager: 分页控制器（持有光标与后端）。
        text: 原始文本，可含换行；None/空白文本为空操作。
        start_x, end_x: 左右边界（PDF 坐标）。
        flags: 对齐位标志。
        emit: False 时只推进光标，不产生任何绘制。

    返回：
        绘制的总高度 = 行距 × 输出的行数（含强制绘制的溢出单词，不含显式空行）。
    """
    tokens = tokenize(text)
    if not tokens:
        return 0.0
    if emit:
        pager.ensure_page()

    align = resolve_alignment(flags)
    state = pager.state
    height = 0.0
    i = 0
    while i < len(tokens):
        num = build_line(tokens, i, end_x - state.cursor_x, pager.text_width)
        if num == -1:
            i += 1
            pager.advance_line(start_x, emit)
        elif num == 0:
            if state.cursor_x > start_x + CONST_FLOAT_EPSILON:
                # 本行已有内容：先换行，再对同一单词重新判断
                pager.advance_line(start_x, emit)
            else:
                _emit_line(pager, tokens[i].text, emit)
                height += pager.line_sep
                i += 1
                pager.advance_line(start_x, emit)
        else:
            line = join_words(tokens, i, num)
            char_space = 0.0
            fresh_line = abs(state.cursor_x - start_x) < CONST_FLOAT_EPSILON
            if fresh_line and align != FLAG_LEFT:
                space = end_x - start_x - pager.text_width(line)
                if align == FLAG_JUSTIFY:
                    nxt = i + num
                    last_line = nxt >= len(tokens) or tokens[nxt].is_newline
                    if not last_line and len(line) > 1:
                        char_space = space / (len(line) - 1)
                else:
                    state.cursor_x += align_offset(space, align)
            _emit_line(pager, line, emit, char_space)
            i += num
            height += pager.line_sep
    return height


__all__ = ["resolve_alignment", "layout_text"]
