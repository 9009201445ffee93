"""
文件路径：flowpdf/components/text.py

说明：文本切分（分词）与拼接工具。

分词规则：
- 每个换行符（\\n、\\r\\n、\\r）都产生一个独立的换行记号（kind=TOKEN_NEWLINE），
  与普通单词处于同一记号流中；
- 其余文本按任意空白串切分为单词记号（kind=TOKEN_WORD）；
- 不含任何单词的文本（空串、纯空白、仅换行）返回空列表；
- 换行记号以 kind 区分，而不是特殊字符串，因此用户文本不可能与之冲突。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

TOKEN_WORD = "word"
TOKEN_NEWLINE = "newline"

_LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Token:
    """记号：单词或显式换行。"""

    kind: str
    text: str = ""

    @property
    def is_newline(self) -> bool:
        return self.kind == TOKEN_NEWLINE


NEWLINE = Token(TOKEN_NEWLINE)


def tokenize(text: Optional[str]) -> List[Token]:
    """将原始文本切分为记号序列。

    参数：
        text: 原始文本；None 视为空文本。

    返回：
        记号列表。None、空文本或纯空白文本（包括仅含换行的文本）返回空列表，
        调用方应将其视为高度为 0 的空操作。

    示例：
        >>> [t.text or "<NL>" for t in tokenize("a b\\nc")]
        ['a', 'b', '<NL>', 'c']
    """
    if not text or not str(text).strip():
        return []
    tokens: List[Token] = []
    segments = _LINE_SPLIT_RE.split(str(text))
    for idx, segment in enumerate(segments):
        if idx > 0:
            tokens.append(NEWLINE)
        tokens.extend(Token(TOKEN_WORD, word) for word in segment.split())
    return tokens


def join_words(tokens: Sequence[Token], first: int, count: int) -> str:
    """以单个空格拼接 tokens[first:first+count] 中的单词。"""
    return " ".join(t.text for t in tokens[first:first + count] if not t.is_newline)


__all__ = [
    "TOKEN_WORD",
    "TOKEN_NEWLINE",
    "Token",
    "NEWLINE",
    "tokenize",
    "join_words",
]
