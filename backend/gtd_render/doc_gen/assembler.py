"""
文档组装器 - 渲染请求 → 完整报关单PDF

流程：
1. 派生字段补齐（DerivationEngine）
2. 分页：首商品进主页，其余按每页容量装入续页
3. 主页：背景（模板或程序化骨架）→ 网格 → 表头字段 → 首商品字段
4. 每张续页：背景 → 网格 → 简要表头（续页序号从1开始）→ 本页商品
5. 序列化；PDF模板背景通过 PyPDF2 垫到对应页下方

失败处理：
- 模板缺失/不可读：warning 日志，降级为程序化骨架
- 单个字段值无效：该字段不绘制
- 绑定与坐标表不一致：构造时抛 ConfigurationError
- 每页商品数超出续页版面容量：抛 ConfigurationError

依赖：
- reportlab: 画布与图片
- PyPDF2（经 PDFExporter）: 模板页面垫底

测试要点：
- test_page_count: 1/4/7 个商品 → 1/2/3 页
- test_blank_header: 全空表头也能出一页
- test_background_fallback: 模板缺失时仍出结构页
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any

from reportlab.pdfgen import canvas as pdf_canvas

from ..config.runtime_config import RenderConfig, get_config
from ..interfaces import AssetError, ConfigurationError, IDocumentAssembler, ITemplateLoader, IPDFExporter
from ..models import (
    ContinuationHeader,
    DeclarationHeader,
    FieldScope,
    LineItem,
    PaymentRow,
    RenderOptions,
    RenderRequest,
    SheetVariant,
)
from .background import EmbeddedPageBackground, FileTemplateStorage, RasterBackground, TemplateLoader
from .bindings import bindings_for, validate_bindings
from .calibration import draw_debug_grid
from .derivation import DerivationEngine
from .field_renderer import FieldRenderer
from .pagination import paginate
from .pdf_engine import PDFExporter
from .registry import CoordinateRegistry
from .structure import draw_continuation_structure, draw_primary_structure

logger = logging.getLogger(__name__)


class DocumentAssembler(IDocumentAssembler):
    """报关单组装器（构造后只读，可在线程间共享）"""

    def __init__(
        self,
        registry: CoordinateRegistry | None = None,
        config: RenderConfig | None = None,
        template_loader: ITemplateLoader | None = None,
        exporter: IPDFExporter | None = None,
    ):
        self.config = config or get_config()
        self.registry = registry or CoordinateRegistry.from_path(self.config.coordinates_path)
        validate_bindings(self.registry)

        self.template_loader = template_loader or TemplateLoader(
            FileTemplateStorage(self.config.templates.base_dir)
        )
        self.exporter = exporter or PDFExporter()
        self.derivation = DerivationEngine()

    # ------------------------------------------------------------------
    # 对外接口
    # ------------------------------------------------------------------

    def assemble(self, request: RenderRequest) -> bytes:
        request = self.derivation.compute(self._resolve_capacity(request))
        options = request.options
        pagination = paginate(request.items, options.page_capacity)
        renderer = FieldRenderer(self.config, options)
        width, height = self.registry.page_size

        buffer = io.BytesIO()
        pdf = pdf_canvas.Canvas(
            buffer,
            pagesize=(width, height),
            invariant=1 if self.config.pdf.invariant else 0,
        )
        pdf.setTitle(self.config.pdf.title)
        if self.config.pdf.author:
            pdf.setAuthor(self.config.pdf.author)

        underlays: dict[int, EmbeddedPageBackground] = {}

        # === 主页 ===
        self._begin_page(pdf, SheetVariant.PRIMARY, options, page_index=0, underlays=underlays)
        self._draw_fields(pdf, renderer, SheetVariant.PRIMARY, FieldScope.HEADER, request.header)
        if pagination.first_item is not None:
            self._draw_fields(
                pdf, renderer, SheetVariant.PRIMARY, FieldScope.ITEM, pagination.first_item
            )
        pdf.showPage()

        # === 续页 ===
        for sheet_number, page_items in enumerate(pagination.continuation_pages, start=1):
            self._begin_page(
                pdf, SheetVariant.CONTINUATION, options, page_index=sheet_number, underlays=underlays
            )
            short_header = ContinuationHeader(
                exporter_name=request.header.exporter_name,
                consignee_name=request.header.consignee_name,
                declaration_number=request.header.declaration_number,
                sheet_number=sheet_number,
            )
            self._draw_fields(
                pdf, renderer, SheetVariant.CONTINUATION, FieldScope.HEADER, short_header
            )
            for item_index, item in enumerate(page_items):
                self._draw_fields(
                    pdf, renderer, SheetVariant.CONTINUATION, FieldScope.ITEM, item, item_index
                )
            pdf.showPage()

        pdf.save()
        data = buffer.getvalue()
        if underlays:
            data = self.exporter.underlay_pages(data, underlays)

        logger.info(
            f"报关单已生成: {pagination.page_count} 页 "
            f"(商品 {len(request.items)} 个, 续页 {pagination.continuation_count} 张)"
        )
        return data

    def assemble_many(self, requests: Iterable[RenderRequest]) -> list[bytes]:
        """并发渲染多个独立请求（结果顺序与请求顺序一致）"""
        requests = list(requests)
        if not requests:
            return []
        workers = max(1, min(self.config.concurrency.max_workers, len(requests)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.assemble, requests))

    def render_calibration_sheet(self, options: RenderOptions | None = None) -> bytes:
        """标定页：主页 + 网格 + 字段边框 + 示例数据"""
        options = options or RenderOptions(show_debug_grid=True, show_field_borders=True)
        return self.assemble(sample_request(options))

    def _resolve_capacity(self, request: RenderRequest) -> RenderRequest:
        """续页容量：选项优先，其次运行期配置；不得超过坐标表的商品带数"""
        capacity = request.options.page_capacity or self.config.layout.page_capacity
        limit = self.registry.continuation_capacity
        if capacity > limit:
            raise ConfigurationError(
                f"每页商品数 {capacity} 超出续页版面容量 {limit}（坐标表 continuation_capacity）"
            )
        if capacity == request.options.page_capacity:
            return request
        options = request.options.model_copy(update={"page_capacity": capacity})
        return request.model_copy(update={"options": options})

    # ------------------------------------------------------------------
    # 页面绘制
    # ------------------------------------------------------------------

    def _begin_page(
        self,
        pdf: Any,
        variant: SheetVariant,
        options: RenderOptions,
        page_index: int,
        underlays: dict[int, EmbeddedPageBackground],
    ) -> None:
        width, height = self.registry.page_size
        background = self._load_background(variant, options)

        if isinstance(background, RasterBackground):
            pdf.drawImage(background.image_reader(), 0, 0, width=width, height=height)
        elif isinstance(background, EmbeddedPageBackground):
            underlays[page_index] = background
        elif variant is SheetVariant.PRIMARY:
            draw_primary_structure(pdf, width, height)
        else:
            draw_continuation_structure(
                pdf, width, height, self.registry.item_offset, options.page_capacity
            )

        if options.show_debug_grid:
            draw_debug_grid(pdf, width, height, self.config.layout.grid_step)

    def _load_background(
        self,
        variant: SheetVariant,
        options: RenderOptions,
    ) -> RasterBackground | EmbeddedPageBackground | None:
        if not options.use_background_image:
            return None

        if variant is SheetVariant.PRIMARY:
            identifier = options.primary_template or self.config.templates.primary
        else:
            identifier = options.continuation_template or self.config.templates.continuation

        try:
            return self.template_loader.load(identifier)
        except AssetError as e:
            logger.warning(f"模板不可用，改为程序化绘制表格: {e}")
            return None

    def _draw_fields(
        self,
        pdf: Any,
        renderer: FieldRenderer,
        variant: SheetVariant,
        scope: FieldScope,
        source: Any,
        item_index: int = 0,
    ) -> None:
        for binding in bindings_for(variant, scope):
            placement = self.registry.lookup(binding.key, variant, item_index)
            renderer.render(pdf, binding.value_of(source), placement, binding.key, binding.kind)


# ============================================================================
# 标定示例数据
# ============================================================================

def sample_request(options: RenderOptions | None = None) -> RenderRequest:
    """标定用示例报关单（单商品，只出主页）"""
    header = DeclarationHeader(
        declaration_type="ИМ",
        declaration_type_code="40",
        exporter_name="ACME TRADING CO., LTD",
        exporter_address="No. 123 Business Street, Shanghai, China",
        exporter_tin="123456789",
        consignee_name='ООО "ИМПОРТ ТРЕЙД"',
        consignee_address="г. Ташкент, ул. Навои, 100",
        consignee_tin="987654321",
        total_items=5,
        total_packages=100,
        declaration_number="11706/010125/0000001",
        declaration_date=date(2025, 1, 1),
        currency="USD",
        total_invoice_amount=50000,
    )
    item = LineItem(
        item_number=1,
        hs_code="8471300000",
        goods_description="Компьютеры портативные (ноутбуки)",
        gross_weight=150.5,
        net_weight=145.0,
        item_price=10000,
        customs_value=10500,
        duty=PaymentRow(rate="0%", amount=0),
        vat=PaymentRow(rate="12%", amount=1260),
    )
    return RenderRequest(header=header, items=[item], options=options or RenderOptions())


def render_calibration_sheet(
    assembler: DocumentAssembler | None = None,
    options: RenderOptions | None = None,
) -> bytes:
    """便捷函数：生成标定页"""
    return (assembler or DocumentAssembler()).render_calibration_sheet(options)


def assemble(request: RenderRequest, assembler: DocumentAssembler | None = None) -> bytes:
    """便捷函数：渲染单个请求"""
    return (assembler or DocumentAssembler()).assemble(request)


def assemble_many(
    requests: Sequence[RenderRequest],
    assembler: DocumentAssembler | None = None,
) -> list[bytes]:
    """便捷函数：并发渲染多个请求"""
    return (assembler or DocumentAssembler()).assemble_many(requests)
