"""
文件路径：flowpdf/processors/line_builder.py

说明：单行构建：从给定位置起，计算在最大宽度内能放下多少个单词。
"""

from __future__ import annotations

from typing import Callable, Sequence

from ..components.text import Token


def build_line(
    tokens: Sequence[Token],
    first: int,
    max_width: float,
    measure: Callable[[str], float],
) -> int:
    """从 tokens[first] 开始贪心累积单词，返回能放入一行的单词数。

    参数：
        tokens: 记号序列（单词与换行记号）。
        first: 起始下标，必须小于 len(tokens)。
        max_width: 行的最大可用宽度。
        measure: 以当前字体/字号度量字符串宽度的函数。

    返回：
        -1：tokens[first] 是换行记号；
        0：第一个单词（含一个前导空格）已超过 max_width；
        N>0：前 N 个单词以单空格拼接后宽度不超过 max_width。
        遇到换行记号时停止，且不计入换行记号本身。
    """
    if tokens[first].is_newline:
        return -1

    # 首词额外计入一个前导空格，为行首留出余量
    if measure(" " + tokens[first].text) > max_width:
        return 0

    line = tokens[first].text
    count = 1
    for k in range(first + 1, len(tokens)):
        token = tokens[k]
        if token.is_newline:
            break
        candidate = line + " " + token.text
        if measure(candidate) > max_width:
            break
        line = candidate
        count += 1
    return count


__all__ = ["build_line"]
