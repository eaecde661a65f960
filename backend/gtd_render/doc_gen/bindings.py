"""
字段绑定 - 模型属性 → 坐标表字段名

每个页面区域（主页表头/主页商品/续页表头/续页商品）是一张
(坐标键, 属性路径, 值类型) 的声明表，组装器逐条查坐标、取值、绘制。

组装器构造时调用 validate_bindings 做双向校验：
- 绑定键必须在坐标表中存在
- 坐标表中的每个字段必须有绑定
任何不一致都是配置缺陷，直接抛 ConfigurationError。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Callable

from ..interfaces import ConfigurationError
from ..models import FieldScope, SheetVariant
from .formatting import FieldKind


@dataclass(frozen=True)
class FieldBinding:
    """单条绑定"""

    key: str
    source: str
    kind: FieldKind = FieldKind.TEXT
    getter: Callable[[Any], Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "getter", attrgetter(self.source))

    def value_of(self, obj: Any) -> Any:
        return self.getter(obj)


def _bind(key: str, source: str | None = None, kind: FieldKind = FieldKind.TEXT) -> FieldBinding:
    return FieldBinding(key=key, source=source or key, kind=kind)


TEXT = FieldKind.TEXT
AMOUNT = FieldKind.AMOUNT
INTEGER = FieldKind.INTEGER
DATE = FieldKind.DATE
RATE = FieldKind.RATE


PRIMARY_HEADER_BINDINGS: tuple[FieldBinding, ...] = (
    # 第1栏 / A栏
    _bind("declaration_type"),
    _bind("declaration_type_code"),
    _bind("declaration_sub_code"),
    _bind("service_marks"),
    # 第2栏
    _bind("exporter_name"),
    _bind("exporter_address"),
    _bind("exporter_tin"),
    _bind("exporter_country_code"),
    # 第3-7栏
    _bind("additional_sheets", kind=INTEGER),
    _bind("loading_specs"),
    _bind("total_items", kind=INTEGER),
    _bind("total_packages", kind=INTEGER),
    _bind("declaration_number"),
    _bind("declaration_date", kind=DATE),
    # 第8-9栏
    _bind("consignee_name"),
    _bind("consignee_address"),
    _bind("consignee_tin"),
    _bind("financial_responsible_name"),
    _bind("financial_responsible_tin"),
    # 第10-13栏
    _bind("first_destination_country"),
    _bind("trading_country"),
    _bind("trading_country_code"),
    _bind("offshore_indicator"),
    _bind("total_customs_value", kind=AMOUNT),
    _bind("total_customs_value_currency"),
    _bind("block_13"),
    # 第14栏
    _bind("declarant_name"),
    _bind("declarant_address"),
    _bind("declarant_tin"),
    # 第15-17栏
    _bind("dispatch_country"),
    _bind("dispatch_country_code"),
    _bind("destination_country_code"),
    _bind("origin_country"),
    _bind("destination_country"),
    # 第18-21栏
    _bind("transport_count", kind=INTEGER),
    _bind("departure_transport_type"),
    _bind("departure_transport_number"),
    _bind("transport_nationality"),
    _bind("container_indicator"),
    _bind("incoterms_code"),
    _bind("delivery_place"),
    _bind("border_transport_number"),
    # 第22-28栏
    _bind("currency"),
    _bind("total_invoice_amount", kind=AMOUNT),
    _bind("exchange_rate", kind=AMOUNT),
    _bind("transaction_nature"),
    _bind("transaction_currency_code"),
    _bind("border_transport_mode"),
    _bind("inland_transport_mode"),
    _bind("loading_place"),
    _bind("bank_details"),
    # 第29-30栏
    _bind("entry_customs_office"),
    _bind("goods_location"),
    # 第48-54栏
    _bind("deferred_payment"),
    _bind("warehouse_name"),
    _bind("calculation_details"),
    _bind("principal_name"),
    _bind("principal_position"),
    _bind("transit_customs_office"),
    _bind("guarantee_invalid"),
    _bind("customs_notes"),
    _bind("exit_customs_office"),
    _bind("customs_control"),
    _bind("declaration_place"),
    _bind("signature_date", "declaration_date", DATE),
    _bind("signatory_name"),
    _bind("signatory_phone"),
)


def _payment_bindings() -> tuple[FieldBinding, ...]:
    """第47栏：关税/增值税/规费各一行 + 合计"""
    rows: list[FieldBinding] = []
    for row in ("duty", "vat", "fee"):
        rows += [
            _bind(f"{row}_type", f"{row}.type_code"),
            _bind(f"{row}_base", f"{row}.base", AMOUNT),
            _bind(f"{row}_rate", f"{row}.rate", RATE),
            _bind(f"{row}_amount", f"{row}.amount", AMOUNT),
            _bind(f"{row}_payment_method", f"{row}.payment_method"),
        ]
    rows.append(_bind("total_payment", kind=AMOUNT))
    return tuple(rows)


# 只印在主页的商品字段（续页表格上没有对应格子）
PRIMARY_ONLY_ITEM_KEYS = frozenset({"package_type", "package_quantity", "movement_code"})

ITEM_BINDINGS: tuple[FieldBinding, ...] = (
    _bind("item_number", kind=INTEGER),
    _bind("goods_description"),
    _bind("marks_numbers"),
    _bind("package_type"),
    _bind("package_quantity", kind=INTEGER),
    _bind("hs_code"),
    _bind("origin_country_code"),
    _bind("gross_weight", kind=AMOUNT),
    _bind("preference_code"),
    _bind("procedure_code"),
    _bind("previous_procedure_code"),
    _bind("movement_code"),
    _bind("net_weight", kind=AMOUNT),
    _bind("quota_number"),
    _bind("previous_document"),
    _bind("supplementary_quantity", kind=AMOUNT),
    _bind("supplementary_unit"),
    _bind("item_price", kind=AMOUNT),
    _bind("valuation_method_code"),
    _bind("additional_info"),
    _bind("customs_value", kind=AMOUNT),
    _bind("statistical_value", kind=AMOUNT),
) + _payment_bindings()

CONTINUATION_HEADER_BINDINGS: tuple[FieldBinding, ...] = (
    _bind("exporter_name_short", "exporter_name"),
    _bind("consignee_name_short", "consignee_name"),
    _bind("declaration_number"),
    _bind("sheet_number", kind=INTEGER),
)

CONTINUATION_ITEM_BINDINGS: tuple[FieldBinding, ...] = tuple(
    b for b in ITEM_BINDINGS if b.key not in PRIMARY_ONLY_ITEM_KEYS
)

BINDINGS: dict[tuple[SheetVariant, FieldScope], tuple[FieldBinding, ...]] = {
    (SheetVariant.PRIMARY, FieldScope.HEADER): PRIMARY_HEADER_BINDINGS,
    (SheetVariant.PRIMARY, FieldScope.ITEM): ITEM_BINDINGS,
    (SheetVariant.CONTINUATION, FieldScope.HEADER): CONTINUATION_HEADER_BINDINGS,
    (SheetVariant.CONTINUATION, FieldScope.ITEM): CONTINUATION_ITEM_BINDINGS,
}


def bindings_for(variant: SheetVariant, scope: FieldScope) -> tuple[FieldBinding, ...]:
    return BINDINGS[(SheetVariant(variant), FieldScope(scope))]


def validate_bindings(registry: Any) -> None:
    """双向校验绑定与坐标表（registry 需提供 field_names(variant, scope)）"""
    problems: list[str] = []
    for (variant, scope), bindings in BINDINGS.items():
        bound = [b.key for b in bindings]
        duplicated = sorted({k for k in bound if bound.count(k) > 1})
        registered = registry.field_names(variant, scope)

        unregistered = sorted(set(bound) - registered)
        unbound = sorted(registered - set(bound))
        where = f"{variant.value}.{scope.value}"
        if duplicated:
            problems.append(f"{where} 绑定键重复: {duplicated}")
        if unregistered:
            problems.append(f"{where} 绑定键在坐标表中不存在: {unregistered}")
        if unbound:
            problems.append(f"{where} 坐标表字段没有绑定: {unbound}")

    if problems:
        raise ConfigurationError("字段绑定与坐标表不一致: " + "; ".join(problems))
