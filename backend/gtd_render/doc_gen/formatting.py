"""
字段值格式化 - 数字/日期/税率/整数

职责：
1. 金额：固定小数位 + 千分位分组（分组符/小数点符可配置）
2. 整数：序号、件数等计数值
3. 日期：date/datetime/ISO字符串 → 配置的日期格式
4. 税率：数字追加 %，字符串原样
5. 多行文本折行（wrap_text）

解析失败一律返回 None（调用方视为空值不绘制），不抛异常。
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from ..config.runtime_config import FormatConfig
from ..models import to_decimal

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    """字段值类型"""
    TEXT = "text"
    AMOUNT = "amount"
    INTEGER = "integer"
    DATE = "date"
    RATE = "rate"


class ValueFormatter:
    """字段值格式化器"""

    def __init__(self, config: FormatConfig | None = None):
        self.config = config or FormatConfig()

    def format(self, value: Any, kind: FieldKind | str = FieldKind.TEXT) -> str | None:
        """按类型格式化，空值或解析失败返回 None"""
        if value is None:
            return None
        kind = FieldKind(kind)
        if kind is FieldKind.AMOUNT:
            result = self.format_amount(value)
        elif kind is FieldKind.INTEGER:
            result = self.format_integer(value)
        elif kind is FieldKind.DATE:
            result = self.format_date(value)
        elif kind is FieldKind.RATE:
            result = self.format_rate(value)
        else:
            result = str(value)

        if result is None:
            logger.debug(f"字段值无法按 {kind.value} 格式化，跳过: {value!r}")
            return None
        return result if result.strip() else None

    def format_amount(self, value: Any) -> str | None:
        """金额：1648000 → '1 648 000,00'，0 → '0,00'"""
        number = to_decimal(value)
        if number is None:
            return None
        decimals = self.config.decimals
        quantum = Decimal(1).scaleb(-decimals)
        number = number.quantize(quantum, rounding=ROUND_HALF_UP)
        if number == 0:
            number = abs(number)

        # 先按 en 习惯格式化，再替换为配置的符号对
        text = f"{number:,.{decimals}f}"
        return (
            text.replace(",", "\0")
            .replace(".", self.config.decimal_separator)
            .replace("\0", self.config.group_separator)
        )

    def format_integer(self, value: Any) -> str | None:
        number = to_decimal(value)
        if number is None:
            return None
        return str(int(number.to_integral_value(rounding=ROUND_HALF_UP)))

    def format_date(self, value: Any) -> str | None:
        if isinstance(value, (date, datetime)):
            return value.strftime(self.config.date_format)
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            # 已经是目标格式的字符串原样接受
            try:
                parsed = datetime.strptime(text, self.config.date_format)
            except ValueError:
                return None
        return parsed.strftime(self.config.date_format)

    def format_rate(self, value: Any) -> str | None:
        if isinstance(value, str):
            return value.strip() or None
        number = to_decimal(value)
        if number is None:
            return None
        return f"{number.normalize():f}%"


def wrap_text(
    text: str,
    width: float,
    font_size: float,
    char_width_factor: float = 0.6,
) -> list[str]:
    """按估算字宽折行（贪心装词，超长单词硬切分）

    平均字宽 = 字号 x 系数，每行最多 floor(width / 字宽) 个字符（至少1个）。
    """
    if not text:
        return []

    char_width = font_size * char_width_factor
    max_chars = max(1, int(width // char_width)) if char_width > 0 else 1

    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars:
            current = candidate
            continue
        if current:
            lines.append(current)
            current = word
        else:
            current = word
        # 单词本身超长：切成 max_chars 的片段
        while len(current) > max_chars:
            lines.append(current[:max_chars])
            current = current[max_chars:]

    if current:
        lines.append(current)
    return lines
