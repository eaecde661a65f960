"""
派生字段单元测试

每个模块完成后必须运行：pytest tests/unit/test_derivation.py -v
"""

import pytest

from gtd_render.doc_gen import DerivationEngine
from gtd_render.models import (
    DeclarationHeader,
    LineItem,
    PaymentRow,
    RenderOptions,
    RenderRequest,
)


class TestDerivationEngine:
    """派生字段引擎测试"""

    @pytest.fixture
    def engine(self) -> DerivationEngine:
        return DerivationEngine()

    @pytest.mark.parametrize("count, expected", [(0, 0), (1, 0), (4, 1), (7, 2), (8, 3)])
    def test_derive_additional_sheets(self, engine: DerivationEngine, make_items, count, expected):
        """续页数 = ceil((N-1)/3)"""
        request = RenderRequest(items=make_items(count))
        derived = engine.compute(request)
        assert derived.header.additional_sheets == expected
        assert derived.header.total_items == count

    def test_capacity_from_options(self, engine: DerivationEngine, make_items):
        request = RenderRequest(items=make_items(7), options=RenderOptions(page_capacity=2))
        assert engine.compute(request).header.additional_sheets == 3

    def test_derive_item_numbers(self, engine: DerivationEngine, make_items):
        """序号 = 位置 + 1"""
        derived = engine.compute(RenderRequest(items=make_items(5)))
        assert [item.item_number for item in derived.items] == [1, 2, 3, 4, 5]

    def test_payment_defaults(self, engine: DerivationEngine):
        """第47栏种类代码与缴纳方式缺省值"""
        item = engine.derive_item(LineItem(), 0)
        assert (item.duty.type_code, item.vat.type_code, item.fee.type_code) == ("20", "70", "10")
        assert {row.payment_method for row in item.payments} == {"НТ"}
        assert item.valuation_method_code == "1"

    def test_transport_count_default(self, engine: DerivationEngine):
        header = engine.derive_header(DeclarationHeader(), item_count=1)
        assert header.transport_count == 1

    def test_explicit_values_kept(self, engine: DerivationEngine):
        """显式值不被覆盖"""
        request = RenderRequest(
            header=DeclarationHeader(additional_sheets=9, total_items=42, transport_count=3),
            items=[
                LineItem(
                    item_number=7,
                    valuation_method_code="6",
                    duty=PaymentRow(type_code="27", payment_method="БН"),
                )
            ],
        )
        derived = engine.compute(request)
        assert derived.header.additional_sheets == 9
        assert derived.header.total_items == 42
        assert derived.header.transport_count == 3
        item = derived.items[0]
        assert item.item_number == 7
        assert item.valuation_method_code == "6"
        assert (item.duty.type_code, item.duty.payment_method) == ("27", "БН")

    def test_request_not_mutated(self, engine: DerivationEngine, make_items):
        request = RenderRequest(items=make_items(2))
        engine.compute(request)
        assert request.header.total_items is None
        assert request.items[0].item_number is None
