# app/domains/ord/schemas.py

"""
'ord' 도메인의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel
from sqlmodel import SQLModel, Field

from . import models as ord_models


class StoreCreate(ord_models.StoreBase):
    pass


class StoreUpdate(SQLModel):
    name: Optional[str] = Field(None, max_length=100)
    domain: Optional[str] = None
    is_active: Optional[bool] = None


class StoreRead(ord_models.StoreBase):
    id: int

    class Config:
        from_attributes = True


class OrderLineItemCreate(SQLModel):
    sku: Optional[str] = None
    title: str = Field(..., max_length=255)
    variant_title: Optional[str] = None
    quantity: int = Field(1, ge=1)
    price: Decimal = Field(Decimal("0"), ge=0)


class OrderLineItemRead(OrderLineItemCreate):
    id: int

    class Config:
        from_attributes = True


class OrderCreate(SQLModel):
    order_number: str = Field(..., max_length=50)
    store_id: Optional[int] = None
    customer_name: Optional[str] = None
    shipping_city: Optional[str] = None
    payment_type: ord_models.PaymentType = ord_models.PaymentType.ONLINE
    financial_status: ord_models.FinancialStatus = ord_models.FinancialStatus.PENDING
    total_price: Decimal = Decimal("0")
    billing_company_id: Optional[int] = None
    intercompany_status: Optional[ord_models.IntercompanyStatus] = None
    line_items: List[OrderLineItemCreate] = []


class OrderUpdate(SQLModel):
    """청구 법인/정산 상태 변경용"""
    financial_status: Optional[ord_models.FinancialStatus] = None
    billing_company_id: Optional[int] = None
    intercompany_status: Optional[ord_models.IntercompanyStatus] = None


class InvoiceRecord(SQLModel):
    invoice_number: str = Field(..., min_length=1, max_length=100)
    issued_at: Optional[datetime] = None


class OrderRead(SQLModel):
    id: int
    order_number: str
    store_id: Optional[int] = None
    customer_name: Optional[str] = None
    shipping_city: Optional[str] = None
    payment_type: ord_models.PaymentType
    financial_status: ord_models.FinancialStatus
    total_price: Decimal
    billing_company_id: Optional[int] = None
    intercompany_status: Optional[ord_models.IntercompanyStatus] = None
    invoice_number: Optional[str] = None
    invoice_issued_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    store: Optional[StoreRead] = None
    line_items: List[OrderLineItemRead] = []

    class Config:
        from_attributes = True


class OrderList(BaseModel):
    items: List[OrderRead]
    total: int
