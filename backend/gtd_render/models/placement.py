"""
坐标落点模型 - 字段在表格页面上的位置

对应 config/coordinates.yaml 的 sheets.<variant>.<scope>
坐标单位为PDF点（A4: 595 x 842），原点在页面左下角
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SheetVariant(str, Enum):
    """页面类型"""
    PRIMARY = "primary"            # ТД1 主页
    CONTINUATION = "continuation"  # ТД2 续页


class FieldScope(str, Enum):
    """字段作用域"""
    HEADER = "header"  # 表头字段，不随商品偏移
    ITEM = "item"      # 商品字段，按商品序号整体下移


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class FontFamily(str, Enum):
    HELVETICA = "helvetica"
    COURIER = "courier"
    TIMES = "times"


class FieldPlacement(BaseModel):
    """单个字段的落点"""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float | None = None
    height: float | None = None
    font_size: float | None = None
    align: Align = Align.LEFT
    multiline: bool = False
    max_lines: int | None = Field(None, ge=1)
    font_family: FontFamily = FontFamily.HELVETICA

    def shifted(self, dy: float) -> FieldPlacement:
        """返回Y方向下移 dy 后的新落点"""
        if not dy:
            return self
        return self.model_copy(update={"y": self.y - dy})

    def box_height(self) -> float:
        """边框高度（无 height 时退化为字号）"""
        return self.height or self.font_size or 10


class SheetLayout(BaseModel):
    """单个页面类型的坐标（表头 + 商品）"""

    model_config = ConfigDict(frozen=True)

    header: dict[str, FieldPlacement] = Field(default_factory=dict)
    item: dict[str, FieldPlacement] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_unique_names(self) -> SheetLayout:
        duplicated = sorted(set(self.header) & set(self.item))
        if duplicated:
            raise ValueError(f"字段同时出现在表头与商品作用域: {duplicated}")
        return self


class CoordinateTable(BaseModel):
    """坐标表（coordinates.yaml 的结构化表示）"""

    model_config = ConfigDict(frozen=True)

    schema_version: str
    page_size: tuple[float, float] = (595.0, 842.0)
    item_offset: float = 218.0
    continuation_capacity: int = Field(3, ge=1)
    sheets: dict[SheetVariant, SheetLayout]

    @model_validator(mode="after")
    def _check_variants(self) -> CoordinateTable:
        missing = [v.value for v in SheetVariant if v not in self.sheets]
        if missing:
            raise ValueError(f"坐标表缺少页面类型: {missing}")
        return self


class CoordinateSet:
    """单个页面类型的只读坐标集合

    字段名在集合内唯一；item_fields 标记需要按商品序号偏移的字段。
    """

    __slots__ = ("variant", "_placements", "_item_fields")

    def __init__(self, variant: SheetVariant, layout: SheetLayout):
        self.variant = variant
        merged = {**layout.header, **layout.item}
        self._placements: Mapping[str, FieldPlacement] = MappingProxyType(merged)
        self._item_fields = frozenset(layout.item)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._placements

    def __len__(self) -> int:
        return len(self._placements)

    def __iter__(self):
        return iter(self._placements)

    def get(self, field_name: str) -> FieldPlacement | None:
        return self._placements.get(field_name)

    def is_item_field(self, field_name: str) -> bool:
        return field_name in self._item_fields

    def names(self, scope: FieldScope | None = None) -> frozenset[str]:
        """按作用域列出字段名"""
        if scope is FieldScope.ITEM:
            return self._item_fields
        if scope is FieldScope.HEADER:
            return frozenset(self._placements) - self._item_fields
        return frozenset(self._placements)
