"""
坐标表 - 字段名 + 页面类型 + 商品序号 → 落点

职责：
1. 按页面类型提供只读坐标集合（CoordinateSet）
2. 商品字段按序号整体下移（offset_for 是唯一的偏移计算入口）
3. 查不到字段时立即报错（配置缺陷，不允许静默画在(0,0)）

测试要点：
- test_lookup_header_ignores_index: 表头字段忽略商品序号
- test_lookup_item_offset: 商品字段 y = 基准y - i*偏移
- test_lookup_unknown_field: 未知字段抛 ConfigurationError
"""

from __future__ import annotations

from pathlib import Path

from ..config import CoordinateLoader, get_config
from ..interfaces import ConfigurationError, ICoordinateRegistry
from ..models import (
    CoordinateSet,
    CoordinateTable,
    FieldPlacement,
    FieldScope,
    SheetVariant,
)


class CoordinateRegistry(ICoordinateRegistry):
    """坐标表实现（加载后只读，可在线程间共享）"""

    def __init__(self, table: CoordinateTable):
        self.table = table
        self.item_offset = float(table.item_offset)
        self.continuation_capacity = table.continuation_capacity
        self.page_size = (float(table.page_size[0]), float(table.page_size[1]))
        self._sets = {
            variant: CoordinateSet(variant, layout)
            for variant, layout in table.sheets.items()
        }

    @classmethod
    def from_path(cls, coordinates_path: str | Path | None = None) -> CoordinateRegistry:
        """从YAML加载（默认取运行期配置中的坐标表路径）"""
        path = coordinates_path or get_config().coordinates_path
        return cls(CoordinateLoader.load(path))

    @property
    def schema_version(self) -> str:
        return self.table.schema_version

    def coordinate_set(self, variant: SheetVariant) -> CoordinateSet:
        return self._sets[SheetVariant(variant)]

    def offset_for(self, item_index: int) -> float:
        """商品序号 → Y方向偏移（同一商品的所有字段共用）"""
        if item_index < 0:
            raise ConfigurationError(f"商品序号不能为负: {item_index}")
        return self.item_offset * item_index

    def lookup(
        self,
        field_name: str,
        variant: SheetVariant,
        item_index: int = 0,
    ) -> FieldPlacement:
        """查询字段落点"""
        coords = self.coordinate_set(variant)
        placement = coords.get(field_name)
        if placement is None:
            raise ConfigurationError(
                f"坐标表中没有字段 '{field_name}' (页面类型: {SheetVariant(variant).value})"
            )
        if coords.is_item_field(field_name):
            return placement.shifted(self.offset_for(item_index))
        return placement

    def field_names(
        self,
        variant: SheetVariant,
        scope: FieldScope | None = None,
    ) -> frozenset[str]:
        """列出字段名（绑定校验用）"""
        return self.coordinate_set(variant).names(scope)


_registry: CoordinateRegistry | None = None


def get_registry() -> CoordinateRegistry:
    """获取进程级坐标表（惰性加载）"""
    global _registry
    if _registry is None:
        _registry = CoordinateRegistry.from_path()
    return _registry
