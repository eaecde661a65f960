"""
字段绘制器 - 把单个值按落点画到 reportlab 画布上

职责：
1. 标定模式下先画边框（与值是否为空无关）
2. 按类型格式化 → 清洗 → 空值跳过
3. 多行字段折行并截断到 max_lines
4. 居中/右对齐按字体度量计算起点（逐行生效）

依赖：
- reportlab.pdfbase.pdfmetrics: 标准字体字宽
- formatting / sanitizer / calibration

测试要点：
- test_absent_value_noop: None/空串/纯空白/无法解析 → 不调用 drawString
- test_borders_drawn_for_empty: 边框开关打开时空值也画边框
- test_multiline_truncated: 超过 max_lines 的行被截掉
"""

from __future__ import annotations

import logging
from typing import Any

from reportlab.pdfbase.pdfmetrics import stringWidth

from ..config.runtime_config import RenderConfig, get_config
from ..interfaces import IFieldRenderer
from ..models import Align, FieldPlacement, FontFamily, RenderOptions
from .calibration import draw_field_border
from .formatting import FieldKind, ValueFormatter, wrap_text
from .sanitizer import sanitize

logger = logging.getLogger(__name__)

# 标准 Type1 字体（无需嵌入）
FONT_NAMES: dict[FontFamily, str] = {
    FontFamily.HELVETICA: "Helvetica",
    FontFamily.COURIER: "Courier",
    FontFamily.TIMES: "Times-Roman",
}


class FieldRenderer(IFieldRenderer):
    """字段绘制器（无状态，可跨页复用）"""

    def __init__(
        self,
        config: RenderConfig | None = None,
        options: RenderOptions | None = None,
    ):
        self.config = config or get_config()
        self.options = options or RenderOptions()
        self.formatter = ValueFormatter(self.config.format)

    def render(
        self,
        canvas: Any,
        value: Any,
        placement: FieldPlacement,
        field_name: str | None = None,
        kind: FieldKind | str = FieldKind.TEXT,
    ) -> None:
        if self.options.show_field_borders:
            draw_field_border(canvas, placement, field_name)

        text = self.prepare_text(value, kind)
        if not text:
            return

        font_name = FONT_NAMES[placement.font_family]
        font_size = placement.font_size or self.options.default_font_size

        if placement.multiline and placement.width:
            lines = wrap_text(
                text,
                placement.width,
                font_size,
                self.config.layout.char_width_factor,
            )
            max_lines = placement.max_lines or self.config.layout.default_max_lines
            if len(lines) > max_lines:
                logger.debug(f"字段 {field_name} 折行 {len(lines)} 行，截断为 {max_lines} 行")
                lines = lines[:max_lines]
        else:
            lines = [text]

        line_height = font_size * self.config.layout.line_height_factor
        canvas.setFillColorRGB(0, 0, 0)
        canvas.setFont(font_name, font_size)
        for index, line in enumerate(lines):
            x = self._aligned_x(line, placement, font_name, font_size)
            canvas.drawString(x, placement.y - index * line_height, line)

    def prepare_text(self, value: Any, kind: FieldKind | str = FieldKind.TEXT) -> str:
        """格式化 + 清洗，结果为空串表示不绘制"""
        formatted = self.formatter.format(value, kind)
        if formatted is None:
            return ""
        return sanitize(formatted)

    @staticmethod
    def _aligned_x(
        text: str,
        placement: FieldPlacement,
        font_name: str,
        font_size: float,
    ) -> float:
        if not placement.width or placement.align is Align.LEFT:
            return placement.x
        text_width = stringWidth(text, font_name, font_size)
        if placement.align is Align.CENTER:
            return placement.x + (placement.width - text_width) / 2
        return placement.x + placement.width - text_width
