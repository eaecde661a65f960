"""
文档生成模块 - 报关单（ГТД）PDF渲染

子模块：
- registry: 坐标表（字段落点 + 商品偏移）
- sanitizer: 文本清洗（西里尔转写）
- formatting: 数字/日期/税率格式化、折行
- field_renderer: 单字段绘制
- pagination: 主页/续页分页
- bindings: 模型属性 → 坐标字段绑定
- derivation: 派生字段计算
- structure: 程序化表格骨架
- background: 空白表格模板加载
- calibration: 坐标网格与字段边框
- pdf_engine: PDF后处理（模板垫底、页数计算）
- assembler: 文档组装
"""

from .assembler import DocumentAssembler, render_calibration_sheet, sample_request
from .background import (
    EmbeddedPageBackground,
    FileTemplateStorage,
    RasterBackground,
    TemplateLoader,
)
from .derivation import DerivationEngine
from .field_renderer import FieldRenderer
from .formatting import FieldKind, ValueFormatter, wrap_text
from .pagination import Pagination, paginate
from .pdf_engine import PDFExporter, count_pdf_pages
from .registry import CoordinateRegistry, get_registry
from .sanitizer import sanitize

__all__ = [
    "DocumentAssembler",
    "render_calibration_sheet",
    "sample_request",
    "RasterBackground",
    "EmbeddedPageBackground",
    "FileTemplateStorage",
    "TemplateLoader",
    "DerivationEngine",
    "FieldRenderer",
    "FieldKind",
    "ValueFormatter",
    "wrap_text",
    "Pagination",
    "paginate",
    "PDFExporter",
    "count_pdf_pages",
    "CoordinateRegistry",
    "get_registry",
    "sanitize",
]
