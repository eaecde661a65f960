"""
坐标表加载器 - 读取 config/coordinates.yaml

职责：
- 解析YAML并提供类型安全访问
- 校验坐标表结构（页面类型齐全、同一页面内字段名唯一）
- 缓存加载结果（每个进程只解析一次，加载后只读）

使用方式：
    table = CoordinateLoader.load()
    placement = table.sheets[SheetVariant.PRIMARY].header["exporter_name"]
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..interfaces import ConfigurationError
from ..models import CoordinateTable

DEFAULT_COORDINATES_PATH = Path(__file__).with_name("coordinates.yaml")


class CoordinateLoader:
    """坐标表加载器（缓存）"""

    @classmethod
    @lru_cache(maxsize=4)
    def load(cls, coordinates_path: str | Path = DEFAULT_COORDINATES_PATH) -> CoordinateTable:
        """加载并缓存坐标表"""
        path = Path(coordinates_path)
        if not path.exists():
            raise ConfigurationError(f"坐标表不存在: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        try:
            return CoordinateTable(**(data or {}))
        except (TypeError, ValidationError) as e:
            raise ConfigurationError(f"坐标表格式错误: {path}: {e}") from e

    @classmethod
    def reload(cls, coordinates_path: str | Path = DEFAULT_COORDINATES_PATH) -> CoordinateTable:
        """强制重新加载（清除缓存）"""
        cls.load.cache_clear()
        return cls.load(coordinates_path)


# 便捷函数
def load_coordinates(coordinates_path: str | Path = DEFAULT_COORDINATES_PATH) -> CoordinateTable:
    """加载坐标表"""
    return CoordinateLoader.load(coordinates_path)
