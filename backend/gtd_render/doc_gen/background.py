"""
空白表格模板 - 读取并识别背景资源

职责：
1. FileTemplateStorage: 从目录读取模板字节（默认存储实现）
2. TemplateLoader: 按字节头识别类型，只识别一次并缓存
   - %PDF 开头 → EmbeddedPageBackground（第一页，垫到输出页下方）
   - 其他 → RasterBackground（图片，满版绘制）
3. 资源缺失/不可读统一抛 AssetError，由组装器降级为程序化骨架

依赖：
- reportlab.lib.utils.ImageReader: 图片尺寸
- PyPDF2: PDF模板页面尺寸

测试要点：
- test_sniff_png: PNG 识别为 raster
- test_sniff_pdf: PDF 识别为 embedded_page
- test_missing_template: 不存在时抛 AssetError
"""

from __future__ import annotations

import io
import logging
import threading
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from PyPDF2 import PdfReader
from reportlab.lib.utils import ImageReader

from ..interfaces import AssetError, ITemplateLoader, ITemplateStorage

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


class RasterBackground(BaseModel):
    """图片背景（JPEG/PNG）"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["raster"] = "raster"
    identifier: str
    data: bytes
    width: float
    height: float

    def image_reader(self) -> ImageReader:
        return ImageReader(io.BytesIO(self.data))


class EmbeddedPageBackground(BaseModel):
    """PDF页面背景（取模板第一页）"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["embedded_page"] = "embedded_page"
    identifier: str
    data: bytes
    width: float
    height: float


Background = Annotated[
    Union[RasterBackground, EmbeddedPageBackground],
    Field(discriminator="kind"),
]


class FileTemplateStorage(ITemplateStorage):
    """本地目录模板存储（相对标识基于 base_dir 解析）"""

    def __init__(self, base_dir: str | Path = "templates"):
        self.base_dir = Path(base_dir)

    def resolve(self, identifier: str) -> Path:
        path = Path(identifier)
        return path if path.is_absolute() else self.base_dir / path

    def read_bytes(self, identifier: str) -> bytes:
        path = self.resolve(identifier)
        if not path.is_file():
            raise AssetError(f"模板不存在: {path}")
        try:
            return path.read_bytes()
        except OSError as e:
            raise AssetError(f"模板不可读: {path}: {e}") from e


class TemplateLoader(ITemplateLoader):
    """模板加载器（读穿缓存，线程安全）"""

    def __init__(self, storage: ITemplateStorage):
        self.storage = storage
        self._cache: dict[str, RasterBackground | EmbeddedPageBackground] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}

    def load(self, identifier: str) -> RasterBackground | EmbeddedPageBackground:
        with self._lock:
            cached = self._cache.get(identifier)
            if cached is not None:
                return cached
            key_lock = self._key_locks.setdefault(identifier, threading.Lock())

        # 同一模板只读取一次；不同模板的首次加载互不阻塞
        with key_lock:
            with self._lock:
                cached = self._cache.get(identifier)
            if cached is not None:
                return cached
            data = self.storage.read_bytes(identifier)
            background = sniff_background(identifier, data)
            with self._lock:
                self._cache[identifier] = background

        logger.debug(
            f"模板已加载: {identifier} ({background.kind}, "
            f"{background.width:g}x{background.height:g})"
        )
        return background

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()


def sniff_background(identifier: str, data: bytes) -> RasterBackground | EmbeddedPageBackground:
    """按字节头识别模板类型"""
    if not data:
        raise AssetError(f"模板为空: {identifier}")

    if data.lstrip()[:4] == PDF_MAGIC:
        try:
            reader = PdfReader(io.BytesIO(data))
            box = reader.pages[0].mediabox
            width, height = float(box.width), float(box.height)
        except Exception as e:
            raise AssetError(f"PDF模板无法解析: {identifier}: {e}") from e
        return EmbeddedPageBackground(identifier=identifier, data=data, width=width, height=height)

    try:
        width, height = ImageReader(io.BytesIO(data)).getSize()
    except Exception as e:
        raise AssetError(f"图片模板无法解析: {identifier}: {e}") from e
    return RasterBackground(identifier=identifier, data=data, width=width, height=height)
