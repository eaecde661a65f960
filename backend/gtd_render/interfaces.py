"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from gtd_render.interfaces import ITemplateStorage

    class S3TemplateStorage(ITemplateStorage):
        def read_bytes(self, identifier: str) -> bytes:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import FieldPlacement, RenderRequest, SheetVariant
    from .doc_gen.background import Background


# ============================================================================
# 坐标与模板
# ============================================================================

class ICoordinateRegistry(ABC):
    """坐标表接口 - 字段名 → 落点"""

    @abstractmethod
    def lookup(
        self,
        field_name: str,
        variant: SheetVariant,
        item_index: int = 0,
    ) -> FieldPlacement:
        """
        查询字段落点

        Args:
            field_name: 字段名
            variant: 页面类型（主页/续页）
            item_index: 商品在本页中的序号（仅商品字段生效）

        Returns:
            已叠加商品偏移的落点

        Raises:
            ConfigurationError: 字段不在坐标表中
        """
        ...

    @abstractmethod
    def offset_for(self, item_index: int) -> float:
        """商品序号 → Y方向偏移量"""
        ...


class ITemplateStorage(ABC):
    """空白表格模板存储接口（外部协作方）"""

    @abstractmethod
    def read_bytes(self, identifier: str) -> bytes:
        """
        读取模板原始字节

        Args:
            identifier: 模板路径或存储标识

        Raises:
            AssetError: 模板不存在或不可读
        """
        ...


class ITemplateLoader(ABC):
    """模板加载器接口 - 字节 → 背景对象"""

    @abstractmethod
    def load(self, identifier: str) -> Background:
        """加载并识别模板类型（图片/PDF页面）"""
        ...


# ============================================================================
# 渲染
# ============================================================================

class IFieldRenderer(ABC):
    """字段绘制器接口"""

    @abstractmethod
    def render(
        self,
        canvas: Any,
        value: Any,
        placement: FieldPlacement,
        field_name: str | None = None,
        kind: str = "text",
    ) -> None:
        """在画布上按落点绘制单个字段（空值不绘制）"""
        ...


class IDocumentAssembler(ABC):
    """文档组装器接口"""

    @abstractmethod
    def assemble(self, request: RenderRequest) -> bytes:
        """
        组装完整报关单PDF

        Args:
            request: 渲染请求（表头+商品列表+选项）

        Returns:
            PDF字节（1张主页 + N张续页）
        """
        ...


class IPDFExporter(ABC):
    """PDF后处理接口"""

    @abstractmethod
    def underlay_pages(self, pdf_bytes: bytes, underlays: dict[int, Any]) -> bytes:
        """把模板PDF页面垫到指定页下方"""
        ...

    @abstractmethod
    def count_pdf_pages(self, pdf: bytes | Path) -> int:
        """计算PDF页数"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class GTDRenderError(Exception):
    """基础异常"""
    pass


class ConfigurationError(GTDRenderError):
    """配置缺陷（坐标表与绑定不一致等），属于部署期错误"""
    pass


class AssetError(GTDRenderError):
    """模板资源缺失或不可读（组装器会降级为程序绘制）"""
    pass


class ExportError(GTDRenderError):
    """PDF导出/后处理错误"""
    pass
