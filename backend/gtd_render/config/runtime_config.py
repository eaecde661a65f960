"""
运行期配置 - 读取 config/gtd_runtime.yaml

职责：
- 加载数字/日期格式、排版、模板路径等运行参数
- 提供环境变量覆盖机制（前缀 GTD_，嵌套分隔符 __）
- 类型安全的配置访问
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

# from_yaml 期间生效的YAML取值（优先级低于构造参数与环境变量）
_yaml_values: ContextVar[dict[str, Any]] = ContextVar("_yaml_values", default={})


class FormatConfig(BaseModel):
    """数字/日期格式

    缺省按俄语区习惯：千分位为空格、小数点为逗号（1 648 000,00 / 0,00）。
    改为 decimal_separator="." 与 group_separator="," 即输出 1,648,000.00 / 0.00。
    """

    decimal_separator: str = ","
    group_separator: str = " "
    decimals: int = 2
    date_format: str = "%d.%m.%Y"


class LayoutConfig(BaseModel):
    """排版参数"""

    page_capacity: int = Field(3, ge=1)
    default_max_lines: int = 10
    char_width_factor: float = 0.6
    line_height_factor: float = 1.2
    grid_step: int = 50


class TemplateConfig(BaseModel):
    """空白表格模板（图片或PDF）"""

    base_dir: str = "templates"
    primary: str = "td1-blank.jpg"
    continuation: str = "td2-blank.jpg"


class PDFConfig(BaseModel):
    """PDF输出配置"""

    invariant: bool = True
    title: str = "GTD"
    author: str = ""


class ConcurrencyConfig(BaseModel):
    """并发配置"""

    max_workers: int = 2


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"


class YamlValuesSource(PydanticBaseSettingsSource):
    """YAML取值作为配置来源（由 from_yaml 填入）"""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return _yaml_values.get().get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(_yaml_values.get())


class RenderConfig(BaseSettings):
    """运行期配置

    取值优先级：构造参数 > 环境变量（GTD_*） > YAML > 字段缺省值
    """

    # 坐标表（默认使用包内置版本）
    coordinates_path: Path = Path(__file__).with_name("coordinates.yaml")

    # 各子配置
    format: FormatConfig = Field(default_factory=FormatConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    templates: TemplateConfig = Field(default_factory=TemplateConfig)
    pdf: PDFConfig = Field(default_factory=PDFConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "GTD_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
            YamlValuesSource(settings_cls),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RenderConfig:
        """从YAML文件加载配置（环境变量仍可覆盖其中任意项）"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {}) or {}
        values: dict[str, Any] = {}
        for section in ("format", "layout", "templates", "pdf", "concurrency", "logging"):
            extracted = cls._extract(runtime_opts, section)
            if extracted:
                values[section] = extracted
        if data.get("coordinates_path"):
            values["coordinates_path"] = data["coordinates_path"]

        token = _yaml_values.set(values)
        try:
            config = cls()
        finally:
            _yaml_values.reset(token)

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key, {}) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if not self.coordinates_path.is_absolute():
            self.coordinates_path = (base_dir / self.coordinates_path).resolve()
        template_dir = Path(self.templates.base_dir)
        if not template_dir.is_absolute():
            self.templates.base_dir = str((base_dir / template_dir).resolve())


# 全局配置实例
_config: RenderConfig | None = None

DEFAULT_CONFIG_PATH = Path("config/gtd_runtime.yaml")


def get_config() -> RenderConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RenderConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RenderConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RenderConfig.from_yaml(path)
    return _config
