# app/domains/shp/models.py

"""
'shp' 도메인 (PostgreSQL 'shp' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
"""

from typing import Optional
import datetime as dt
from datetime import datetime, UTC
from enum import Enum

from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import String
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from app.domains.ord.models import Order


class AwbStatus(str, Enum):
    CREATED = "created"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    RETURNED = "returned"
    CANCELLED = "cancelled"
    DELETED = "deleted"


class HandoverSessionStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class CloseType(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


# =============================================================================
# 1. shp.handover_sessions 테이블 모델 (업무일당 1건)
# =============================================================================
class HandoverSession(SQLModel, table=True):
    __tablename__ = "handover_sessions"
    __table_args__ = {'schema': 'shp'}

    id: Optional[int] = Field(default=None, primary_key=True)
    date: dt.date = Field(sa_column_kwargs={"unique": True}, description="업무일 (현지 날짜)")
    status: HandoverSessionStatus = Field(
        default=HandoverSessionStatus.OPEN, sa_column=Column(String(10), nullable=False)
    )
    total_issued: int = Field(default=0)
    total_handed_over: int = Field(default=0)
    total_not_handed: int = Field(default=0)
    total_from_prev_days: int = Field(default=0)
    closed_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    closed_by: Optional[int] = Field(default=None, foreign_key="usr.users.id", description="자동 마감이면 NULL")
    closed_by_name: Optional[str] = Field(default=None, max_length=100)
    close_type: Optional[CloseType] = Field(default=None, sa_column=Column(String(10)))
    reopened_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    reopened_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    reopened_by_name: Optional[str] = Field(default=None, max_length=100)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )


# =============================================================================
# 2. shp.awbs 테이블 모델
# =============================================================================
class AWB(SQLModel, table=True):
    __tablename__ = "awbs"
    __table_args__ = {'schema': 'shp'}

    id: Optional[int] = Field(default=None, primary_key=True)
    awb_number: Optional[str] = Field(default=None, max_length=50, sa_column_kwargs={"unique": True}, index=True)
    order_id: int = Field(foreign_key="ord.orders.id", index=True)
    current_status: Optional[AwbStatus] = Field(default=AwbStatus.CREATED, sa_column=Column(String(20), index=True))
    courier_status_code: Optional[str] = Field(default=None, max_length=10)
    courier_status_name: Optional[str] = Field(default=None, max_length=200)
    courier_status_desc: Optional[str] = Field(default=None)
    is_collected: bool = Field(default=False, description="상품대금(COD) 회수 여부")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True),
    )
    # 인계 스캔
    handed_over_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True), index=True))
    handed_over_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    handed_over_by_name: Optional[str] = Field(default=None, max_length=100)
    handed_over_note: Optional[str] = Field(default=None)
    not_handed_over: bool = Field(default=False)
    not_handed_over_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    # 스캔 없이 택배사 픽업(C0)이 확인된 경우
    has_c0_without_scan: bool = Field(default=False)
    c0_received_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    handover_session_id: Optional[int] = Field(default=None, foreign_key="shp.handover_sessions.id")

    order: Optional[Order] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
