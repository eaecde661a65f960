"""
分页控制 - 商品列表 → 主页首商品 + 续页分组

规则：
- 第1个商品印在主页（ТД1）
- 其余商品按每页 page_capacity 个（默认3）依次装入续页（ТД2）
- 续页数 = ceil((N-1) / capacity)，N <= 1 时为 0
- 不设商品数上限（由调用方控制）
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..models import LineItem

DEFAULT_PAGE_CAPACITY = 3


class Pagination(BaseModel):
    """分页结果"""

    model_config = ConfigDict(frozen=True)

    first_item: LineItem | None = None
    continuation_pages: list[list[LineItem]] = Field(default_factory=list)

    @property
    def continuation_count(self) -> int:
        return len(self.continuation_pages)

    @property
    def page_count(self) -> int:
        """总页数（主页 + 续页）"""
        return 1 + self.continuation_count


def continuation_page_count(item_count: int, page_capacity: int = DEFAULT_PAGE_CAPACITY) -> int:
    """续页数量（不实际分组）"""
    if page_capacity < 1:
        raise ValueError(f"每页商品数必须 >= 1: {page_capacity}")
    if item_count <= 1:
        return 0
    return math.ceil((item_count - 1) / page_capacity)


def paginate(items: Sequence[LineItem], page_capacity: int = DEFAULT_PAGE_CAPACITY) -> Pagination:
    """把商品列表分到主页和续页"""
    if page_capacity < 1:
        raise ValueError(f"每页商品数必须 >= 1: {page_capacity}")
    if not items:
        return Pagination()

    rest = list(items[1:])
    pages = [rest[i:i + page_capacity] for i in range(0, len(rest), page_capacity)]
    return Pagination(first_item=items[0], continuation_pages=pages)
