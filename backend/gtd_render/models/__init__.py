"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- RenderRequest: 渲染请求（表头 + 商品列表 + 选项）
- DeclarationHeader / LineItem / PaymentRow: 报关单内容
- FieldPlacement / CoordinateSet: 坐标落点
"""

from .declaration import (
    ContinuationHeader,
    DeclarationHeader,
    LineItem,
    PaymentRow,
    RenderOptions,
    RenderRequest,
    to_decimal,
)
from .placement import (
    Align,
    CoordinateSet,
    CoordinateTable,
    FieldPlacement,
    FieldScope,
    FontFamily,
    SheetLayout,
    SheetVariant,
)

__all__ = [
    "RenderRequest",
    "RenderOptions",
    "DeclarationHeader",
    "ContinuationHeader",
    "LineItem",
    "PaymentRow",
    "to_decimal",
    "FieldPlacement",
    "CoordinateSet",
    "CoordinateTable",
    "SheetLayout",
    "SheetVariant",
    "FieldScope",
    "Align",
    "FontFamily",
]
