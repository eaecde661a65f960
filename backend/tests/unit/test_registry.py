"""
坐标表单元测试

每个模块完成后必须运行：pytest tests/unit/test_registry.py -v
"""

from pathlib import Path

import pytest

from gtd_render.config import CoordinateLoader
from gtd_render.config.coordinate_loader import DEFAULT_COORDINATES_PATH
from gtd_render.doc_gen import CoordinateRegistry
from gtd_render.interfaces import ConfigurationError
from gtd_render.models import FieldScope, SheetVariant


class TestCoordinateLoader:
    """坐标表加载测试"""

    def test_load_packaged_table(self, coordinate_table):
        """测试内置坐标表"""
        assert coordinate_table.schema_version == "1.0"
        assert coordinate_table.page_size == (595, 842)
        assert coordinate_table.item_offset == 218
        assert coordinate_table.continuation_capacity == 3

    def test_load_cached(self):
        """测试重复加载返回同一对象"""
        assert CoordinateLoader.load() is CoordinateLoader.load()

    def test_missing_file(self, temp_dir: Path):
        """测试坐标表不存在"""
        with pytest.raises(ConfigurationError):
            CoordinateLoader.load(temp_dir / "missing.yaml")

    def test_duplicate_field_across_scopes(self, temp_dir: Path):
        """测试同一页面内表头与商品字段重名"""
        path = temp_dir / "dup.yaml"
        path.write_text(
            """
schema_version: "1.0"
sheets:
  primary:
    header:
      hs_code: {x: 1, y: 1}
    item:
      hs_code: {x: 2, y: 2}
  continuation:
    header: {}
    item: {}
""",
            encoding="utf-8",
        )
        with pytest.raises(ConfigurationError):
            CoordinateLoader.load(path)

    def test_missing_variant(self, temp_dir: Path):
        """测试缺少续页坐标"""
        path = temp_dir / "partial.yaml"
        path.write_text(
            'schema_version: "1.0"\nsheets:\n  primary:\n    header: {}\n',
            encoding="utf-8",
        )
        with pytest.raises(ConfigurationError):
            CoordinateLoader.load(path)


class TestCoordinateRegistry:
    """坐标查询测试"""

    def test_lookup_header_ignores_index(self, registry: CoordinateRegistry):
        """表头字段忽略商品序号"""
        base = registry.lookup("exporter_name", SheetVariant.PRIMARY)
        shifted = registry.lookup("exporter_name", SheetVariant.PRIMARY, item_index=2)
        assert base == shifted
        assert base.y == 765

    def test_lookup_item_offset(self, registry: CoordinateRegistry):
        """商品字段 y = 基准y - i*218"""
        for index in range(3):
            placement = registry.lookup("hs_code", SheetVariant.CONTINUATION, item_index=index)
            assert placement.x == 400
            assert placement.y == 760 - index * 218

    def test_item_fields_move_together(self, registry: CoordinateRegistry):
        """同一商品的所有字段偏移量相同"""
        names = registry.field_names(SheetVariant.CONTINUATION, FieldScope.ITEM)
        for name in names:
            base = registry.lookup(name, SheetVariant.CONTINUATION, 0)
            moved = registry.lookup(name, SheetVariant.CONTINUATION, 1)
            assert base.y - moved.y == registry.offset_for(1)
            assert moved.x == base.x

    def test_lookup_unknown_field(self, registry: CoordinateRegistry):
        """未知字段抛 ConfigurationError"""
        with pytest.raises(ConfigurationError, match="no_such_field"):
            registry.lookup("no_such_field", SheetVariant.PRIMARY)

    def test_primary_only_field_missing_on_continuation(self, registry: CoordinateRegistry):
        """主页专有字段在续页上不存在"""
        with pytest.raises(ConfigurationError):
            registry.lookup("package_type", SheetVariant.CONTINUATION)

    def test_offset_for(self, registry: CoordinateRegistry):
        assert registry.offset_for(0) == 0
        assert registry.offset_for(2) == 436

    def test_offset_negative(self, registry: CoordinateRegistry):
        with pytest.raises(ConfigurationError):
            registry.offset_for(-1)

    def test_field_names_by_scope(self, registry: CoordinateRegistry):
        """按作用域列字段"""
        items = registry.field_names(SheetVariant.PRIMARY, FieldScope.ITEM)
        headers = registry.field_names(SheetVariant.PRIMARY, FieldScope.HEADER)
        assert "duty_amount" in items
        assert "exporter_name" in headers
        assert not items & headers
        assert registry.field_names(SheetVariant.PRIMARY) == items | headers

    def test_from_path(self):
        """测试从默认路径构造"""
        reg = CoordinateRegistry.from_path(DEFAULT_COORDINATES_PATH)
        assert reg.schema_version == "1.0"
        assert reg.page_size == (595.0, 842.0)
