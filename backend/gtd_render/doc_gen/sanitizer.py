"""
文本清洗 - 把任意文本收敛到标准PDF字体可显示的字符集

标准 Type1 字体（Helvetica/Courier/Times）不含西里尔字母，因此：
- 俄文/乌兹别克文字母按转写表替换为拉丁字母（保留大小写）
- ASCII 可打印字符、空白与通用标点（U+2000-U+206F）原样保留
- 其余字符（含 C0 控制字符）替换为空格
- 最后合并连续空白并去除首尾空白

转写是单向有损的，不能从输出还原原文。
"""

from __future__ import annotations

import re

CYRILLIC_TO_LATIN: dict[str, str] = {
    "А": "A", "Б": "B", "В": "V", "Г": "G", "Д": "D", "Е": "E", "Ё": "E", "Ж": "Zh",
    "З": "Z", "И": "I", "Й": "Y", "К": "K", "Л": "L", "М": "M", "Н": "N", "О": "O",
    "П": "P", "Р": "R", "С": "S", "Т": "T", "У": "U", "Ф": "F", "Х": "Kh", "Ц": "Ts",
    "Ч": "Ch", "Ш": "Sh", "Щ": "Shch", "Ъ": "", "Ы": "Y", "Ь": "", "Э": "E", "Ю": "Yu",
    "Я": "Ya",
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "e", "ж": "zh",
    "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m", "н": "n", "о": "o",
    "п": "p", "р": "r", "с": "s", "т": "t", "у": "u", "ф": "f", "х": "kh", "ц": "ts",
    "ч": "ch", "ш": "sh", "щ": "shch", "ъ": "", "ы": "y", "ь": "", "э": "e", "ю": "yu",
    "я": "ya",
    # 乌兹别克文
    "Ў": "O'", "ў": "o'", "Қ": "Q", "қ": "q", "Ғ": "G'", "ғ": "g'", "Ҳ": "H", "ҳ": "h",
}

# 通用标点区段（引号、破折号、省略号等）
PUNCTUATION_RANGE = (0x2000, 0x206F)

_WHITESPACE = re.compile(r"\s+")


def is_renderable(char: str) -> bool:
    """字符是否在可显示字符集内（不含转写）"""
    code = ord(char)
    if code < 128:
        # C0 控制字符与 DEL 只保留空白类
        return 32 <= code < 127 or char in "\t\n\r"
    return PUNCTUATION_RANGE[0] <= code <= PUNCTUATION_RANGE[1]


def sanitize(text: str | None) -> str:
    """清洗文本（None 返回空串）"""
    if not text:
        return ""

    parts: list[str] = []
    for char in str(text):
        replacement = CYRILLIC_TO_LATIN.get(char)
        if replacement is not None:
            parts.append(replacement)
        elif is_renderable(char):
            parts.append(char)
        else:
            parts.append(" ")

    return _WHITESPACE.sub(" ", "".join(parts)).strip()
