"""
报关单数据模型 - 渲染引擎的输入结构

渲染引擎只消费这个结构化数据，与表单/数据库层完全解耦。
国家名称、币种等参考数据由调用方预先解析。
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

# 数值字段允许字符串（渲染时再解析，解析失败视为空值）
Number = Union[int, float, Decimal, str]
DateLike = Union[date, datetime, str]


class PaymentRow(BaseModel):
    """第47栏单行税费（关税/增值税/规费）"""

    model_config = ConfigDict(frozen=True)

    type_code: str | None = Field(None, description="税费种类代码")
    base: Number | None = Field(None, description="计税基础")
    rate: Number | None = Field(None, description="税率(数字按百分比显示)")
    amount: Number | None = Field(None, description="税额")
    payment_method: str | None = Field(None, description="缴纳方式代码")


class LineItem(BaseModel):
    """商品行（第31-47栏）"""

    item_number: int | None = Field(None, description="第32栏 商品序号")
    goods_description: str | None = Field(None, description="第31栏 货物描述")
    marks_numbers: str | None = Field(None, description="唛头及编号")
    package_type: str | None = None
    package_quantity: Number | None = None
    hs_code: str | None = Field(None, description="第33栏 商品编码")
    origin_country_code: str | None = Field(None, description="第34栏 原产国代码")
    gross_weight: Number | None = Field(None, description="第35栏 毛重(kg)")
    preference_code: str | None = Field(None, description="第36栏 优惠")
    procedure_code: str | None = Field(None, description="第37栏 程序")
    previous_procedure_code: str | None = None
    movement_code: str | None = None
    net_weight: Number | None = Field(None, description="第38栏 净重(kg)")
    quota_number: str | None = Field(None, description="第39栏 配额")
    previous_document: str | None = Field(None, description="第40栏 前置单证")
    supplementary_quantity: Number | None = Field(None, description="第41栏 辅助数量")
    supplementary_unit: str | None = None
    item_price: Number | None = Field(None, description="第42栏 发票价格")
    valuation_method_code: str | None = Field(None, description="第43栏 估价方法")
    additional_info: str | None = Field(None, description="第44栏 附加信息/单证")
    customs_value: Number | None = Field(None, description="第45栏 完税价格")
    statistical_value: Number | None = Field(None, description="第46栏 统计价格")

    # 第47栏 固定三行
    duty: PaymentRow = Field(default_factory=PaymentRow)
    vat: PaymentRow = Field(default_factory=PaymentRow)
    fee: PaymentRow = Field(default_factory=PaymentRow)
    total_payment_override: Number | None = Field(
        None, alias="total_payment", description="显式给定的合计（缺省时自动求和）"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def payments(self) -> tuple[PaymentRow, PaymentRow, PaymentRow]:
        return (self.duty, self.vat, self.fee)

    @property
    def total_payment(self) -> Number | None:
        """合计：优先显式值，否则为已给出税额之和"""
        if self.total_payment_override is not None:
            return self.total_payment_override
        amounts = [to_decimal(row.amount) for row in self.payments]
        present = [a for a in amounts if a is not None]
        if not present:
            return None
        return sum(present, Decimal("0"))


class DeclarationHeader(BaseModel):
    """报关单表头（第1-30栏及第48-54栏）"""

    model_config = ConfigDict(frozen=True)

    # === 第1栏 申报类型 ===
    declaration_type: str | None = None
    declaration_type_code: str | None = None
    declaration_sub_code: str | None = None
    service_marks: str | None = Field(None, description="A栏 海关备注")

    # === 第2栏 发货人 ===
    exporter_name: str | None = None
    exporter_address: str | None = None
    exporter_tin: str | None = None
    exporter_country_code: str | None = None

    # === 第3-7栏 ===
    additional_sheets: int | None = Field(None, description="缺省时按续页数计算")
    loading_specs: str | None = None
    total_items: int | None = Field(None, description="缺省时按商品数计算")
    total_packages: Number | None = None
    declaration_number: str | None = None
    declaration_date: DateLike | None = None

    # === 第8栏 收货人 ===
    consignee_name: str | None = None
    consignee_address: str | None = None
    consignee_tin: str | None = None

    # === 第9栏 财务责任人 ===
    financial_responsible_name: str | None = None
    financial_responsible_tin: str | None = None

    # === 第10-13栏 ===
    first_destination_country: str | None = None
    trading_country: str | None = None
    trading_country_code: str | None = None
    offshore_indicator: str | None = None
    total_customs_value: Number | None = None
    total_customs_value_currency: str | None = None
    block_13: str | None = None

    # === 第14栏 申报人 ===
    declarant_name: str | None = None
    declarant_address: str | None = None
    declarant_tin: str | None = None

    # === 第15-17栏 国家 ===
    dispatch_country: str | None = None
    dispatch_country_code: str | None = None
    origin_country: str | None = None
    destination_country: str | None = None
    destination_country_code: str | None = None

    # === 第18-21栏 运输 ===
    transport_count: int | None = Field(None, description="缺省为1")
    departure_transport_type: str | None = None
    departure_transport_number: str | None = None
    transport_nationality: str | None = None
    container_indicator: str | None = None
    incoterms_code: str | None = None
    delivery_place: str | None = None
    border_transport_number: str | None = None

    # === 第22-28栏 金额/运输方式/银行 ===
    currency: str | None = None
    total_invoice_amount: Number | None = None
    exchange_rate: Number | None = None
    transaction_nature: str | None = None
    transaction_currency_code: str | None = None
    border_transport_mode: str | None = None
    inland_transport_mode: str | None = None
    loading_place: str | None = None
    bank_details: str | None = None

    # === 第29-30栏 ===
    entry_customs_office: str | None = None
    goods_location: str | None = None

    # === 第48-54栏 ===
    deferred_payment: str | None = None
    warehouse_name: str | None = None
    calculation_details: str | None = Field(None, description="B栏 计算明细")
    principal_name: str | None = None
    principal_position: str | None = None
    transit_customs_office: str | None = None
    guarantee_invalid: str | None = None
    customs_notes: str | None = Field(None, description="C栏")
    exit_customs_office: str | None = None
    customs_control: str | None = Field(None, description="D栏 海关监管")
    declaration_place: str | None = None
    signatory_name: str | None = None
    signatory_phone: str | None = None


class ContinuationHeader(BaseModel):
    """续页简要表头"""

    model_config = ConfigDict(frozen=True)

    exporter_name: str | None = None
    consignee_name: str | None = None
    declaration_number: str | None = None
    sheet_number: int


class RenderOptions(BaseModel):
    """渲染选项"""

    model_config = ConfigDict(frozen=True)

    use_background_image: bool = False
    show_debug_grid: bool = False
    show_field_borders: bool = False
    default_font_size: float = Field(8, gt=0)
    page_capacity: int | None = Field(None, ge=1, description="缺省取配置 layout.page_capacity")
    primary_template: str | None = Field(None, description="缺省取配置 templates.primary")
    continuation_template: str | None = Field(None, description="缺省取配置 templates.continuation")


class RenderRequest(BaseModel):
    """渲染请求（组装器的唯一输入）"""

    model_config = ConfigDict(frozen=True)

    header: DeclarationHeader = Field(default_factory=DeclarationHeader)
    items: list[LineItem] = Field(default_factory=list)
    options: RenderOptions = Field(default_factory=RenderOptions)


def to_decimal(value: Number | None) -> Decimal | None:
    """宽松转换为Decimal（失败返回None）"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        text = _normalize_number(str(value))
        if not text:
            return None
        try:
            result = Decimal(text)
        except ArithmeticError:
            return None
    return result if result.is_finite() else None


def _normalize_number(text: str) -> str:
    """统一千分位与小数点写法

    - 去除空白（含不换行空格）
    - 同时出现 "," 与 "."：靠后者为小数点，另一者为千分位
    - 只出现一种且多次：视为千分位（1,648,000 / 1.648.000）
    - 只出现一次：视为小数点（1648000,50）
    """
    text = "".join(text.split())
    last_comma, last_dot = text.rfind(","), text.rfind(".")
    if last_comma >= 0 and last_dot >= 0:
        decimal_mark, group_mark = (",", ".") if last_comma > last_dot else (".", ",")
        return text.replace(group_mark, "").replace(decimal_mark, ".")
    for mark in (",", "."):
        count = text.count(mark)
        if count > 1:
            return text.replace(mark, "")
        if count == 1:
            return text.replace(mark, ".")
    return text
