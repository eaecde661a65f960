"""
PDF后处理引擎 - 模板页面垫底 / 页数计算

职责：
1. 把PDF模板的第一页缩放到输出页尺寸，垫在指定输出页的下方
2. PDF页数计算（字节或文件）

依赖：
- PyPDF2: 读写PDF、页面合并

测试要点：
- test_count_pdf_pages: 字节与文件两种输入
- test_underlay_keeps_page_count: 垫底后页数不变
"""

from __future__ import annotations

import io
from pathlib import Path

from PyPDF2 import PageObject, PdfReader, PdfWriter, Transformation

from ..interfaces import ExportError, IPDFExporter
from .background import EmbeddedPageBackground


class PDFExporter(IPDFExporter):
    """PDF后处理实现"""

    def underlay_pages(
        self,
        pdf_bytes: bytes,
        underlays: dict[int, EmbeddedPageBackground],
    ) -> bytes:
        """按页序号垫入模板页面（序号从0开始，未列出的页原样保留）"""
        if not underlays:
            return pdf_bytes

        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            writer = PdfWriter()
            templates: dict[str, PageObject] = {}

            for index, page in enumerate(reader.pages):
                background = underlays.get(index)
                if background is None:
                    writer.add_page(page)
                    continue

                template = templates.get(background.identifier)
                if template is None:
                    template = PdfReader(io.BytesIO(background.data)).pages[0]
                    templates[background.identifier] = template

                width = float(page.mediabox.width)
                height = float(page.mediabox.height)
                box = template.mediabox
                transform = (
                    Transformation()
                    .translate(-float(box.left), -float(box.bottom))
                    .scale(width / background.width, height / background.height)
                )

                base = PageObject.create_blank_page(width=width, height=height)
                base.merge_transformed_page(template, transform)
                base.merge_page(page)
                writer.add_page(base)

            buffer = io.BytesIO()
            writer.write(buffer)
            return buffer.getvalue()
        except Exception as e:
            raise ExportError(f"模板页面合并失败: {e}") from e

    def count_pdf_pages(self, pdf: bytes | Path) -> int:
        """计算PDF页数"""
        if isinstance(pdf, (bytes, bytearray)):
            source = io.BytesIO(pdf)
        else:
            path = Path(pdf)
            if not path.exists():
                raise ExportError(f"PDF文件不存在: {path}")
            source = str(path)

        try:
            return len(PdfReader(source).pages)
        except Exception as e:
            raise ExportError(f"PDF无法解析: {e}") from e


def count_pdf_pages(pdf: bytes | Path) -> int:
    """便捷函数"""
    return PDFExporter().count_pdf_pages(pdf)
