"""
文档组装单元测试（真实 reportlab 输出，PyPDF2 读回核对）

每个模块完成后必须运行：pytest tests/unit/test_assembler.py -v
"""

import io
import logging

import pytest
from PyPDF2 import PdfReader

from gtd_render.config import RenderConfig
from gtd_render.doc_gen import CoordinateRegistry, DocumentAssembler, count_pdf_pages
from gtd_render.interfaces import ConfigurationError
from gtd_render.models import (
    CoordinateTable,
    DeclarationHeader,
    RenderOptions,
    RenderRequest,
    SheetVariant,
)


def _pages(pdf_bytes: bytes) -> list[str]:
    """每页的提取文本"""
    reader = PdfReader(io.BytesIO(pdf_bytes))
    return [page.extract_text() or "" for page in reader.pages]


class TestPageCount:
    """页数 = 1 + ceil((N-1)/3)"""

    @pytest.mark.parametrize("count, expected", [(0, 1), (1, 1), (4, 2), (7, 3), (8, 4)])
    def test_page_count(self, assembler: DocumentAssembler, sample_header, make_items, count, expected):
        pdf = assembler.assemble(RenderRequest(header=sample_header, items=make_items(count)))
        assert pdf.startswith(b"%PDF")
        assert count_pdf_pages(pdf) == expected

    def test_custom_capacity(self, assembler: DocumentAssembler, make_items):
        request = RenderRequest(items=make_items(7), options=RenderOptions(page_capacity=2))
        assert count_pdf_pages(assembler.assemble(request)) == 4

    def test_capacity_from_config(self, registry: CoordinateRegistry, make_items):
        """选项未给出容量时取运行期配置 layout.page_capacity"""
        config = RenderConfig(layout={"page_capacity": 2})
        assembler = DocumentAssembler(registry=registry, config=config)
        pdf = assembler.assemble(RenderRequest(items=make_items(6)))
        assert count_pdf_pages(pdf) == 4

    @pytest.mark.parametrize("capacity", [4, 10])
    def test_capacity_beyond_layout(self, assembler: DocumentAssembler, make_items, capacity):
        """续页版面只容纳3个商品带，超出即报配置错误"""
        request = RenderRequest(items=make_items(5), options=RenderOptions(page_capacity=capacity))
        with pytest.raises(ConfigurationError, match="continuation_capacity"):
            assembler.assemble(request)

    def test_config_capacity_beyond_layout(self, registry: CoordinateRegistry, make_items):
        config = RenderConfig(layout={"page_capacity": 4})
        assembler = DocumentAssembler(registry=registry, config=config)
        with pytest.raises(ConfigurationError):
            assembler.assemble(RenderRequest(items=make_items(5)))


class TestContent:
    """页面内容"""

    def test_blank_header(self, assembler: DocumentAssembler):
        """全空请求也能生成一张结构页"""
        pages = _pages(assembler.assemble(RenderRequest()))
        assert len(pages) == 1
        assert "GTD / TD1" in pages[0]

    def test_primary_fields(self, assembler: DocumentAssembler, sample_header, make_items):
        pages = _pages(assembler.assemble(RenderRequest(header=sample_header, items=make_items(1))))
        text = pages[0]
        assert "ACME TRADING CO., LTD" in text
        assert "IMPORT TREYD" in text
        assert "15.01.2025" in text
        assert "50 000,00" in text
        assert "8471300000" in text

    def test_continuation_header(self, assembler: DocumentAssembler, sample_header, make_items):
        """续页印简要表头与后续商品"""
        pages = _pages(assembler.assemble(RenderRequest(header=sample_header, items=make_items(4))))
        assert "GTD / TD2 - Additional Sheet" in pages[1]
        assert "11706/010125/0000001" in pages[1]
        for index in (1, 2, 3):
            assert f"84713000{index:02d}" in pages[1]
        assert "8471300001" not in pages[0]

    def test_deterministic(self, assembler: DocumentAssembler, sample_header, make_items):
        """相同输入输出字节一致"""
        request = RenderRequest(header=sample_header, items=make_items(4))
        assert assembler.assemble(request) == assembler.assemble(request)

    def test_field_borders_with_empty_values(self, assembler: DocumentAssembler):
        """边框模式下空字段也标出字段名"""
        request = RenderRequest(options=RenderOptions(show_field_borders=True))
        text = _pages(assembler.assemble(request))[0]
        assert "exporter_name" in text
        assert "declaration_number" in text

    def test_debug_grid(self, assembler: DocumentAssembler):
        request = RenderRequest(options=RenderOptions(show_debug_grid=True))
        text = _pages(assembler.assemble(request))[0]
        assert "800" in text


class TestBackground:
    """模板背景"""

    def test_background_fallback(self, assembler: DocumentAssembler, caplog):
        """模板缺失：warning 日志 + 程序化骨架"""
        options = RenderOptions(use_background_image=True, primary_template="missing.jpg")
        with caplog.at_level(logging.WARNING):
            pages = _pages(assembler.assemble(RenderRequest(options=options)))
        assert len(pages) == 1
        assert "GTD / TD1" in pages[0]
        assert any("missing.jpg" in r.getMessage() for r in caplog.records)

    def test_raster_background(self, assembler: DocumentAssembler, sample_header):
        """图片背景替代程序化骨架"""
        options = RenderOptions(use_background_image=True, primary_template="td1.png")
        pdf = assembler.assemble(RenderRequest(header=sample_header, options=options))
        page = PdfReader(io.BytesIO(pdf)).pages[0]
        assert "/XObject" in page["/Resources"]
        text = page.extract_text()
        assert "GTD / TD1" not in text
        assert "ACME TRADING CO., LTD" in text

    def test_embedded_page_background(self, assembler: DocumentAssembler, sample_header, make_items):
        """PDF模板垫在每页下方"""
        options = RenderOptions(
            use_background_image=True,
            primary_template="td1.pdf",
            continuation_template="td2.pdf",
        )
        pdf = assembler.assemble(
            RenderRequest(header=sample_header, items=make_items(4), options=options)
        )
        pages = _pages(pdf)
        assert len(pages) == 2
        assert all("TEMPLATE" in text for text in pages)
        assert "ACME TRADING CO., LTD" in pages[0]
        assert "GTD / TD2" not in pages[1]


class TestAssemblerSetup:
    """构造与批量渲染"""

    def test_binding_mismatch(self, coordinate_table: CoordinateTable, render_config: RenderConfig):
        """坐标表缺字段时构造即失败"""
        data = coordinate_table.model_dump()
        del data["sheets"][SheetVariant.CONTINUATION]["header"]["sheet_number"]
        registry = CoordinateRegistry(CoordinateTable(**data))
        with pytest.raises(ConfigurationError):
            DocumentAssembler(registry=registry, config=render_config)

    def test_assemble_many_order(self, assembler: DocumentAssembler, make_items):
        """批量结果与请求顺序一致"""
        requests = [
            RenderRequest(
                header=DeclarationHeader(declaration_number=f"DOC-{count}"),
                items=make_items(count),
            )
            for count in (7, 1, 4)
        ]
        results = assembler.assemble_many(requests)
        assert [count_pdf_pages(pdf) for pdf in results] == [3, 1, 2]
        for count, pdf in zip((7, 1, 4), results):
            assert f"DOC-{count}" in _pages(pdf)[0]

    def test_assemble_many_empty(self, assembler: DocumentAssembler):
        assert assembler.assemble_many([]) == []

    def test_calibration_sheet(self, assembler: DocumentAssembler):
        pages = _pages(assembler.render_calibration_sheet())
        assert len(pages) == 1
        assert "exporter_name" in pages[0]
        assert "ACME TRADING CO., LTD" in pages[0]
