# app/domains/ord/models.py

"""
'ord' 도메인 (PostgreSQL 'ord' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
"""

from typing import Optional, List
from datetime import datetime, UTC
from decimal import Decimal
from enum import Enum

from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import Numeric, String
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


class PaymentType(str, Enum):
    COD = "cod"
    ONLINE = "online"


class FinancialStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class IntercompanyStatus(str, Enum):
    PENDING = "pending"
    SETTLED = "settled"


# =============================================================================
# 1. ord.stores 테이블 모델
# =============================================================================
class StoreBase(SQLModel):
    name: str = Field(max_length=100, sa_column_kwargs={"unique": True}, description="스토어명")
    domain: Optional[str] = Field(default=None, max_length=200, description="스토어 도메인")
    is_active: bool = Field(default=True)


class Store(StoreBase, table=True):
    __tablename__ = "stores"
    __table_args__ = {'schema': 'ord'}

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )


# =============================================================================
# 2. ord.orders 테이블 모델
# =============================================================================
class Order(SQLModel, table=True):
    __tablename__ = "orders"
    __table_args__ = {'schema': 'ord'}

    id: Optional[int] = Field(default=None, primary_key=True)
    order_number: str = Field(max_length=50, index=True, description="주문 번호 (채널 표기 그대로)")
    store_id: Optional[int] = Field(default=None, foreign_key="ord.stores.id", index=True)
    customer_name: Optional[str] = Field(default=None, max_length=200)
    shipping_city: Optional[str] = Field(default=None, max_length=100)
    payment_type: PaymentType = Field(default=PaymentType.ONLINE, sa_column=Column(String(20), nullable=False))
    financial_status: FinancialStatus = Field(
        default=FinancialStatus.PENDING, sa_column=Column(String(20), nullable=False)
    )
    total_price: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 2), nullable=False, server_default="0"))
    billing_company_id: Optional[int] = Field(default=None, foreign_key="ic.companies.id", index=True)
    intercompany_status: Optional[IntercompanyStatus] = Field(default=None, sa_column=Column(String(20), index=True))
    invoice_number: Optional[str] = Field(default=None, max_length=100)
    invoice_issued_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )

    store: Optional["Store"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    line_items: List["OrderLineItem"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan", "order_by": "OrderLineItem.id"}
    )


class OrderLineItem(SQLModel, table=True):
    __tablename__ = "order_line_items"
    __table_args__ = {'schema': 'ord'}

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: Optional[int] = Field(default=None, foreign_key="ord.orders.id", index=True)
    sku: Optional[str] = Field(default=None, max_length=100)
    title: str = Field(max_length=255)
    variant_title: Optional[str] = Field(default=None, max_length=255)
    quantity: int = Field(default=1)
    price: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 2), nullable=False, server_default="0"))
