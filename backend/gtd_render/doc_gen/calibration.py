"""
标定辅助层 - 坐标网格与字段边框

用于核对坐标表与空白表格是否对齐：
- draw_debug_grid: 每 step 点一条浅色网格线，每100点加粗并标注坐标
- draw_field_border: 字段落点的红色边框 + 字段名小字

两者都只在 RenderOptions 打开对应开关时由组装器/字段绘制器调用。
"""

from __future__ import annotations

from typing import Any

from ..models import FieldPlacement
from .sanitizer import sanitize

GRID_MAJOR_STEP = 100
BORDER_CAPTION_SIZE = 5


def draw_debug_grid(canvas: Any, width: float, height: float, step: int = 50) -> None:
    """绘制坐标网格（原点左下角）"""
    if step <= 0:
        raise ValueError(f"网格间距必须为正数: {step}")

    canvas.saveState()
    canvas.setStrokeColorRGB(0.9, 0.9, 0.9)
    canvas.setFillColorRGB(0.5, 0.5, 0.5)
    canvas.setFont("Helvetica", 6)

    for x in range(0, int(width) + 1, step):
        major = x % GRID_MAJOR_STEP == 0
        canvas.setLineWidth(0.5 if major else 0.2)
        canvas.line(x, 0, x, height)
        if major:
            canvas.drawString(x + 2, 5, str(x))

    for y in range(0, int(height) + 1, step):
        major = y % GRID_MAJOR_STEP == 0
        canvas.setLineWidth(0.5 if major else 0.2)
        canvas.line(0, y, width, y)
        if major:
            canvas.drawString(2, y + 2, str(y))

    canvas.restoreState()


def draw_field_border(
    canvas: Any,
    placement: FieldPlacement,
    field_name: str | None = None,
) -> None:
    """绘制字段边框（无宽度的落点没有可画的框，跳过）"""
    if not placement.width:
        return

    box_height = placement.box_height()
    canvas.saveState()
    canvas.setStrokeColorRGB(1, 0, 0)
    canvas.setStrokeAlpha(0.3)
    canvas.setLineWidth(0.5)
    canvas.rect(placement.x, placement.y - box_height, placement.width, box_height, stroke=1, fill=0)

    caption = sanitize(field_name)
    if caption:
        canvas.setFillColorRGB(1, 0, 0)
        canvas.setFont("Helvetica", BORDER_CAPTION_SIZE)
        canvas.drawString(placement.x, placement.y + 2, caption)
    canvas.restoreState()
