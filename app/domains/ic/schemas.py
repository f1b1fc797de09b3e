# app/domains/ic/schemas.py

"""
'ic' 도메인의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, computed_field, model_validator
from sqlmodel import SQLModel, Field

from . import models as ic_models


# =============================================================================
# 1. Company
# =============================================================================
class CompanyCreate(ic_models.CompanyBase):
    intercompany_markup: Decimal = Field(Decimal("10"), ge=0, le=100)


class CompanyUpdate(SQLModel):
    name: Optional[str] = Field(None, max_length=200)
    tax_id: Optional[str] = Field(None, max_length=20)
    is_primary: Optional[bool] = None
    is_active: Optional[bool] = None
    intercompany_markup: Optional[Decimal] = Field(None, ge=0, le=100)


class CompanyRead(ic_models.CompanyBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CompanyBrief(SQLModel):
    id: int
    code: str
    name: str

    class Config:
        from_attributes = True


# =============================================================================
# 2. 정산 계산 결과 (Settlement)
# =============================================================================
class SettlementLine(BaseModel):
    sku: str
    title: str
    quantity: int
    unit_cost: Decimal
    markup: Decimal
    line_total: Decimal


class SettlementOrder(BaseModel):
    id: int
    order_number: str
    total_price: Decimal
    cost_total: Decimal
    processed_at: datetime
    product_count: int
    payment_type: str


class SettlementPreview(BaseModel):
    company_id: int
    company_name: str
    company_code: str
    period_start: datetime
    period_end: datetime
    orders: List[SettlementOrder]
    line_items: List[SettlementLine]
    warnings: List[str] = []
    total_orders: int
    total_items: int
    subtotal: Decimal
    markup_percent: Decimal
    markup_amount: Decimal
    total: Decimal

    @computed_field
    @property
    def order_ids(self) -> List[int]:
        return [order.id for order in self.orders]


class EligibleOrder(BaseModel):
    id: int
    order_number: str
    total_price: Decimal
    processed_at: datetime
    payment_type: str
    product_count: int


class SettlementRequest(BaseModel):
    """기간(period_start/period_end) 또는 주문 ID 목록 중 하나로 정산 대상을 지정합니다."""
    company_id: int
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    order_ids: Optional[List[int]] = None

    @model_validator(mode="after")
    def check_scope(self):
        if self.order_ids is not None and (self.period_start or self.period_end):
            raise ValueError("Specificati fie perioada, fie lista de comenzi")
        if self.order_ids is not None and not self.order_ids:
            raise ValueError("Lista de comenzi este goala")
        return self


# =============================================================================
# 3. IntercompanyInvoice
# =============================================================================
class IntercompanyOrderLinkRead(SQLModel):
    id: int
    order_id: int
    amount: Decimal

    class Config:
        from_attributes = True


class IntercompanyInvoiceRead(SQLModel):
    id: int
    invoice_number: str
    issued_by_company_id: int
    received_by_company_id: int
    period_start: datetime
    period_end: datetime
    total_value: Decimal
    total_vat: Decimal
    total_with_vat: Decimal
    total_items: int
    status: ic_models.IntercompanyInvoiceStatus
    line_items: List[Dict[str, Any]] = []
    markup_percent: Decimal
    issued_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    issued_by_company: Optional[CompanyBrief] = None
    received_by_company: Optional[CompanyBrief] = None
    order_links: List[IntercompanyOrderLinkRead] = []

    class Config:
        from_attributes = True


class IntercompanyInvoiceList(BaseModel):
    items: List[IntercompanyInvoiceRead]
    total: int


class CompanySettlementSummary(BaseModel):
    company_id: int
    company_code: str
    company_name: str
    pending_orders: int
    pending_value: Decimal
    unpaid_invoices: int
    unpaid_value: Decimal


class WeeklySettlementResult(BaseModel):
    processed: int
    skipped: int
    failed: int
    results: List[Dict[str, Any]] = []
