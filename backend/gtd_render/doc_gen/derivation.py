"""
派生字段引擎 - 补齐调用方未给出的计算字段/固定缺省值

职责：
1. 表头：第3栏续页数、第5栏商品总数、第18栏运输工具数
2. 商品：第32栏序号、第43栏估价方法
3. 第47栏：税费种类代码（关税20/增值税70/规费10）与缴纳方式（НТ）

只补空值，调用方显式给出的值一律保留。

测试要点：
- test_derive_additional_sheets: 续页数 = ceil((N-1)/每页容量)
- test_derive_item_numbers: 序号 = 位置 + 1
- test_explicit_values_kept: 显式值不被覆盖
"""

from __future__ import annotations

from ..models import DeclarationHeader, LineItem, PaymentRow, RenderRequest
from .pagination import DEFAULT_PAGE_CAPACITY, continuation_page_count

# 第47栏 税费种类代码
DUTY_TYPE_CODE = "20"
VAT_TYPE_CODE = "70"
FEE_TYPE_CODE = "10"

DEFAULT_PAYMENT_METHOD = "НТ"
DEFAULT_VALUATION_METHOD = "1"
DEFAULT_TRANSPORT_COUNT = 1


class DerivationEngine:
    """派生字段计算引擎"""

    def compute(self, request: RenderRequest) -> RenderRequest:
        """返回补齐派生字段后的新请求（原请求不变）"""
        capacity = request.options.page_capacity or DEFAULT_PAGE_CAPACITY
        header = self.derive_header(request.header, len(request.items), capacity)
        items = [self.derive_item(item, index) for index, item in enumerate(request.items)]
        return request.model_copy(update={"header": header, "items": items})

    def derive_header(
        self,
        header: DeclarationHeader,
        item_count: int,
        page_capacity: int = DEFAULT_PAGE_CAPACITY,
    ) -> DeclarationHeader:
        update = {}
        if header.additional_sheets is None:
            update["additional_sheets"] = continuation_page_count(item_count, page_capacity)
        if header.total_items is None:
            update["total_items"] = item_count
        if header.transport_count is None:
            update["transport_count"] = DEFAULT_TRANSPORT_COUNT
        return header.model_copy(update=update) if update else header

    def derive_item(self, item: LineItem, position: int) -> LineItem:
        update = {
            "duty": self._derive_payment(item.duty, DUTY_TYPE_CODE),
            "vat": self._derive_payment(item.vat, VAT_TYPE_CODE),
            "fee": self._derive_payment(item.fee, FEE_TYPE_CODE),
        }
        if item.item_number is None:
            update["item_number"] = position + 1
        if not item.valuation_method_code:
            update["valuation_method_code"] = DEFAULT_VALUATION_METHOD
        return item.model_copy(update=update)

    @staticmethod
    def _derive_payment(row: PaymentRow, type_code: str) -> PaymentRow:
        update = {}
        if not row.type_code:
            update["type_code"] = type_code
        if not row.payment_method:
            update["payment_method"] = DEFAULT_PAYMENT_METHOD
        return row.model_copy(update=update) if update else row
