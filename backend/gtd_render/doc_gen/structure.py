"""
表格结构绘制 - 没有空白表格模板时程序化画出表格骨架

主页（ТД1）：外框、行线、列线、黑底白字栏号、标题 "GTD / TD1"
续页（ТД2）：标题、外框、商品分隔线

所有位置都相对于表格外框（左边距28，上沿 = 页高-55，下沿 = 20），
与坐标表中的字段落点配套使用。栏号只用拉丁字母/数字（标准字体无西里尔字形）。
"""

from __future__ import annotations

from typing import Any

TITLE_FONT = "Helvetica-Bold"

# === ТД1 外框 ===
PRIMARY_MARGIN = 28
PRIMARY_TOP_GAP = 55
PRIMARY_BOTTOM = 20

# 整行横线（距表格上沿的距离）
PRIMARY_ROWS = (60, 100, 160, 190, 250, 280, 310, 350, 390, 430, 470, 630, 710)

# 列基准（距表格左沿）
COL_1 = 230  # 第2栏右界
COL_2 = 400  # 第1栏左界
COL_A = 480  # A栏左界

# 竖线段：(距左沿x, 起点距上沿, 终点距上沿)
PRIMARY_VERTICALS = (
    # 第2、1、A栏
    (COL_1, 0, 60),
    (COL_2, 0, 60),
    (COL_A, 0, 100),
    # 第3-7栏
    (COL_1, 60, 100),
    (COL_1 + 35, 60, 100),
    (COL_1 + 80, 60, 100),
    (COL_1 + 125, 60, 100),
    (COL_2, 60, 100),
    # 第8、9栏
    (COL_1, 100, 160),
    # 第10-13栏
    (70, 160, 190),
    (160, 160, 190),
    (COL_2, 160, 190),
    # 第14-17栏
    (COL_1, 190, 310),
    (COL_A, 190, 310),
    # 第18-20栏
    (COL_1, 310, 350),
    (COL_1 + 25, 310, 350),
    # 第21-24栏
    (COL_1, 350, 390),
    (COL_2, 350, 390),
    (COL_A, 350, 390),
    # 第25-28栏
    (45, 390, 430),
    (95, 390, 430),
    (COL_1, 390, 430),
    # 第29、30栏
    (COL_1, 430, 470),
    # 商品区 第31-46栏
    (COL_1, 470, 630),
    (COL_1 + 45, 470, 500),
    # 第47栏 税费
    (40, 630, 710),
    (75, 630, 710),
    (140, 630, 710),
    (185, 630, 710),
    (COL_1, 630, 710),
    (COL_1 + 35, 630, 710),
    (COL_A, 630, 710),
)

# 商品区右半部的细横线（距上沿），从第2栏右界画到表格右沿
GOODS_SUB_ROWS = (500, 525, 550, 575, 600)

# 栏号：(标签, 距左沿x, 距上沿y)
BLOCK_NUMBERS = (
    ("2", 2, 13), ("1", COL_2 + 2, 13), ("A", COL_A + 2, 13),
    ("3", COL_1 + 2, 73), ("4", COL_1 + 37, 73), ("5", COL_1 + 82, 73),
    ("6", COL_1 + 127, 73), ("7", COL_2 + 2, 73),
    ("8", 2, 113), ("9", COL_1 + 2, 113),
    ("10", 2, 173), ("11", 72, 173), ("12", 162, 173), ("13", COL_2 + 2, 173),
    ("14", 2, 203), ("15", COL_1 + 2, 203), ("16", COL_1 + 2, 263), ("17", COL_1 + 2, 293),
    ("18", 2, 323), ("19", COL_1 + 2, 323), ("20", COL_1 + 27, 323),
    ("21", 2, 363), ("22", COL_1 + 2, 363), ("23", COL_2 + 2, 363), ("24", COL_A + 2, 363),
    ("25", 2, 403), ("26", 47, 403), ("27", 97, 403), ("28", COL_1 + 2, 403),
    ("29", 2, 443), ("30", COL_1 + 2, 443),
    ("31", 2, 483), ("32", COL_1 + 2, 483), ("33", COL_1 + 47, 483),
    ("47", 2, 643),
)

# === ТД2 ===
CONTINUATION_MARGIN = 20
CONTINUATION_TOP_GAP = 60
# 第一个商品带的上沿（页面坐标）
CONTINUATION_ITEM_TOP = 775


def draw_primary_structure(canvas: Any, width: float, height: float) -> None:
    """程序化绘制主页（ТД1）骨架"""
    left = PRIMARY_MARGIN
    right = width - PRIMARY_MARGIN
    top = height - PRIMARY_TOP_GAP
    bottom = PRIMARY_BOTTOM

    canvas.saveState()
    canvas.setFillColorRGB(0, 0, 0)
    canvas.setStrokeColorRGB(0, 0, 0)
    canvas.setFont(TITLE_FONT, 14)
    canvas.drawString(280, height - 35, "GTD / TD1")

    canvas.setLineWidth(1)
    canvas.rect(left, bottom, right - left, top - bottom, stroke=1, fill=0)

    canvas.setLineWidth(0.5)
    for offset in PRIMARY_ROWS:
        y = top - offset
        if y > bottom:
            canvas.line(left, y, right, y)

    for dx, start, end in PRIMARY_VERTICALS:
        canvas.line(left + dx, top - start, left + dx, top - end)

    canvas.setLineWidth(0.3)
    for offset in GOODS_SUB_ROWS:
        canvas.line(left + COL_1, top - offset, right, top - offset)

    for label, dx, dy in BLOCK_NUMBERS:
        draw_block_number(canvas, label, left + dx, top - dy)
    canvas.restoreState()


def draw_block_number(canvas: Any, label: str, x: float, y: float) -> None:
    """黑底白字栏号（两位数用宽框）"""
    wide = len(label) > 1
    canvas.setFillColorRGB(0, 0, 0)
    canvas.rect(x, y, 14 if wide else 10, 10, stroke=0, fill=1)
    canvas.setFillColorRGB(1, 1, 1)
    canvas.setFont(TITLE_FONT, 7)
    canvas.drawString(x + (2 if wide else 3), y + 2, label)
    canvas.setFillColorRGB(0, 0, 0)


def draw_continuation_structure(
    canvas: Any,
    width: float,
    height: float,
    item_offset: float = 218,
    page_capacity: int = 3,
) -> None:
    """程序化绘制续页（ТД2）骨架：标题、外框、商品分隔线"""
    margin = CONTINUATION_MARGIN
    canvas.saveState()
    canvas.setFillColorRGB(0, 0, 0)
    canvas.setStrokeColorRGB(0, 0, 0)
    canvas.setFont(TITLE_FONT, 12)
    canvas.drawString(margin, height - 35, "GTD / TD2 - Additional Sheet")

    canvas.setLineWidth(1)
    canvas.rect(margin, margin, width - 2 * margin, height - CONTINUATION_TOP_GAP - margin, stroke=1, fill=0)

    canvas.setLineWidth(0.5)
    canvas.line(margin, CONTINUATION_ITEM_TOP, width - margin, CONTINUATION_ITEM_TOP)
    for index in range(1, page_capacity):
        y = CONTINUATION_ITEM_TOP - index * item_offset
        if y > margin:
            canvas.line(margin, y, width - margin, y)
    canvas.restoreState()
