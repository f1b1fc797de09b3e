# app/domains/ic/models.py

"""
'ic' 도메인 (PostgreSQL 'ic' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime, UTC
from decimal import Decimal
from enum import Enum

from sqlalchemy import String, Numeric
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, Relationship, SQLModel, Column


class IntercompanyInvoiceStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


# =============================================================================
# 1. ic.companies 테이블 모델
# =============================================================================
class CompanyBase(SQLModel):
    code: str = Field(max_length=20, sa_column_kwargs={"unique": True}, description="법인 코드")
    name: str = Field(max_length=200, description="법인명")
    tax_id: Optional[str] = Field(default=None, max_length=20, description="사업자 번호 (CUI)")
    is_primary: bool = Field(default=False, description="주 법인 여부 (재고 보유, 정산 인보이스 발행)")
    is_active: bool = Field(default=True)
    intercompany_markup: Decimal = Field(
        default=Decimal("10"),
        sa_column=Column(Numeric(5, 2), nullable=False, server_default="10"),
        description="정산 마크업 (%)",
    )


class Company(CompanyBase, table=True):
    __tablename__ = "companies"
    __table_args__ = {'schema': 'ic'}

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )


# =============================================================================
# 2. ic.intercompany_invoices 테이블 모델
# =============================================================================
class IntercompanyInvoice(SQLModel, table=True):
    __tablename__ = "intercompany_invoices"
    __table_args__ = {'schema': 'ic'}

    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_number: str = Field(max_length=30, sa_column_kwargs={"unique": True}, index=True)
    issued_by_company_id: int = Field(foreign_key="ic.companies.id")
    received_by_company_id: int = Field(foreign_key="ic.companies.id", index=True)
    period_start: datetime = Field(sa_column=Column(TIMESTAMP(timezone=True), nullable=False))
    period_end: datetime = Field(sa_column=Column(TIMESTAMP(timezone=True), nullable=False))
    total_value: Decimal = Field(sa_column=Column(Numeric(18, 2), nullable=False))
    total_vat: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 2), nullable=False, server_default="0"))
    total_with_vat: Decimal = Field(sa_column=Column(Numeric(18, 2), nullable=False))
    total_items: int = Field(default=0, description="포함된 주문 수")
    status: IntercompanyInvoiceStatus = Field(
        default=IntercompanyInvoiceStatus.PENDING, sa_column=Column(String(20), nullable=False, index=True)
    )
    line_items: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSONB, nullable=False))
    markup_percent: Decimal = Field(sa_column=Column(Numeric(5, 2), nullable=False))
    issued_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    paid_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )

    issued_by_company: Optional[Company] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "foreign_keys": "IntercompanyInvoice.issued_by_company_id"}
    )
    received_by_company: Optional[Company] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "foreign_keys": "IntercompanyInvoice.received_by_company_id"}
    )
    order_links: List["IntercompanyOrderLink"] = Relationship(
        back_populates="invoice",
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan", "order_by": "IntercompanyOrderLink.id"},
    )


# =============================================================================
# 3. ic.intercompany_order_links 테이블 모델 (주문은 한 번만 정산)
# =============================================================================
class IntercompanyOrderLink(SQLModel, table=True):
    __tablename__ = "intercompany_order_links"
    __table_args__ = {'schema': 'ic'}

    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_id: Optional[int] = Field(default=None, foreign_key="ic.intercompany_invoices.id", index=True)
    order_id: int = Field(foreign_key="ord.orders.id", sa_column_kwargs={"unique": True})
    amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, server_default="0"),
        description="주문의 매입가 합계",
    )

    invoice: Optional[IntercompanyInvoice] = Relationship(back_populates="order_links")
