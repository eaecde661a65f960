"""
配置层 - 加载坐标表与运行期配置

职责：
- 加载 config/coordinates.yaml（坐标表，随包发布）
- 加载 config/gtd_runtime.yaml（运行期参数，可选）
- 提供类型安全的配置访问接口
"""

from .coordinate_loader import CoordinateLoader, load_coordinates
from .runtime_config import RenderConfig, get_config, reload_config

__all__ = [
    "CoordinateLoader",
    "load_coordinates",
    "RenderConfig",
    "get_config",
    "reload_config",
]
