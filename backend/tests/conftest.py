"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(registry, make_items):
        items = make_items(4)
        assert registry.lookup("hs_code", SheetVariant.PRIMARY).x == 355
"""

from __future__ import annotations

import io
import tempfile
from pathlib import Path
from typing import Callable, Generator
from unittest.mock import MagicMock

import pytest
from PIL import Image
from reportlab.pdfgen import canvas as pdf_canvas

from gtd_render.config import CoordinateLoader, RenderConfig
from gtd_render.doc_gen import (
    CoordinateRegistry,
    DocumentAssembler,
    FileTemplateStorage,
    TemplateLoader,
)
from gtd_render.models import (
    CoordinateTable,
    DeclarationHeader,
    LineItem,
    PaymentRow,
)


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def coordinate_table() -> CoordinateTable:
    """包内置坐标表（会话级别缓存）"""
    return CoordinateLoader.load()


@pytest.fixture
def registry(coordinate_table: CoordinateTable) -> CoordinateRegistry:
    return CoordinateRegistry(coordinate_table)


@pytest.fixture
def render_config() -> RenderConfig:
    """运行期配置（默认值，不读取工作目录下的YAML）"""
    return RenderConfig()


# ============================================================================
# 数据模型 Fixtures
# ============================================================================

@pytest.fixture
def sample_header() -> DeclarationHeader:
    """示例表头"""
    return DeclarationHeader(
        declaration_type="ИМ",
        declaration_type_code="40",
        exporter_name="ACME TRADING CO., LTD",
        exporter_address="No. 123 Business Street, Shanghai, China",
        exporter_tin="123456789",
        consignee_name='ООО "ИМПОРТ ТРЕЙД"',
        consignee_address="г. Ташкент, ул. Навои, 100",
        consignee_tin="987654321",
        declaration_number="11706/010125/0000001",
        declaration_date="2025-01-15",
        currency="USD",
        total_invoice_amount=50000,
    )


@pytest.fixture
def make_items() -> Callable[[int], list[LineItem]]:
    """按数量生成商品列表（不带序号，由派生引擎补齐）"""

    def _make(count: int) -> list[LineItem]:
        return [
            LineItem(
                hs_code=f"84713000{index:02d}",
                goods_description=f"Ноутбук модель {index}",
                gross_weight=150.5 + index,
                net_weight=145 + index,
                customs_value=10500,
                duty=PaymentRow(base=10500, rate=0, amount=0),
                vat=PaymentRow(base=10500, rate=12, amount=1260),
            )
            for index in range(count)
        ]

    return _make


@pytest.fixture
def mock_canvas() -> MagicMock:
    """reportlab 画布替身（只记录调用）"""
    return MagicMock()


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def png_bytes() -> bytes:
    """60x85 白色PNG"""
    buf = io.BytesIO()
    Image.new("RGB", (60, 85), "white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def template_pdf_bytes() -> bytes:
    """单页PDF模板（300x420，带 TEMPLATE 字样）"""
    buf = io.BytesIO()
    c = pdf_canvas.Canvas(buf, pagesize=(300, 420), invariant=1)
    c.setFont("Helvetica", 12)
    c.drawString(40, 380, "TEMPLATE")
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture
def template_dir(temp_dir: Path, png_bytes: bytes, template_pdf_bytes: bytes) -> Path:
    """模板目录：td1.png / td2.png / td1.pdf / td2.pdf"""
    (temp_dir / "td1.png").write_bytes(png_bytes)
    (temp_dir / "td2.png").write_bytes(png_bytes)
    (temp_dir / "td1.pdf").write_bytes(template_pdf_bytes)
    (temp_dir / "td2.pdf").write_bytes(template_pdf_bytes)
    return temp_dir


@pytest.fixture
def assembler(
    registry: CoordinateRegistry,
    render_config: RenderConfig,
    template_dir: Path,
) -> DocumentAssembler:
    """组装器（模板从临时目录读取）"""
    loader = TemplateLoader(FileTemplateStorage(template_dir))
    return DocumentAssembler(registry=registry, config=render_config, template_loader=loader)
