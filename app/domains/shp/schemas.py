# app/domains/shp/schemas.py

"""
'shp' 도메인의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

import datetime as dt
from typing import Optional, List, Literal
from datetime import datetime

from pydantic import BaseModel
from sqlmodel import SQLModel, Field

from . import models as shp_models


# =============================================================================
# 1. AWB
# =============================================================================
class AWBCreate(SQLModel):
    awb_number: str = Field(..., min_length=5, max_length=50)
    order_id: int
    is_collected: bool = False


class AWBUpdate(SQLModel):
    is_collected: Optional[bool] = None
    current_status: Optional[shp_models.AwbStatus] = None


class CourierStatusUpdate(SQLModel):
    code: str = Field(..., min_length=1, max_length=10)
    event_at: Optional[datetime] = None


class AWBRead(SQLModel):
    id: int
    awb_number: Optional[str] = None
    order_id: int
    current_status: Optional[shp_models.AwbStatus] = None
    courier_status_code: Optional[str] = None
    courier_status_name: Optional[str] = None
    courier_status_desc: Optional[str] = None
    is_collected: bool
    created_at: Optional[datetime] = None
    handed_over_at: Optional[datetime] = None
    handed_over_by_name: Optional[str] = None
    handed_over_note: Optional[str] = None
    not_handed_over: bool
    not_handed_over_at: Optional[datetime] = None
    has_c0_without_scan: bool
    c0_received_at: Optional[datetime] = None
    handover_session_id: Optional[int] = None

    class Config:
        from_attributes = True


class HandoverAWB(BaseModel):
    """인계 화면용 AWB 뷰 (주문/스토어/수령인/상품 문자열 포함)"""
    id: int
    awb_number: Optional[str] = None
    order_id: int
    order_number: str
    store_id: Optional[int] = None
    store_name: str
    recipient_name: str
    recipient_city: str
    products: str
    courier_status_code: Optional[str] = None
    courier_status_name: Optional[str] = None
    courier_status_desc: Optional[str] = None
    handed_over_at: Optional[datetime] = None
    handed_over_by_name: Optional[str] = None
    handed_over_note: Optional[str] = None
    not_handed_over: bool
    not_handed_over_at: Optional[datetime] = None
    has_c0_without_scan: bool
    c0_received_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


# =============================================================================
# 2. 인계 (Handover)
# =============================================================================
class HandoverStats(BaseModel):
    total_issued: int = 0
    total_handed_over: int = 0
    total_not_handed_over: int = 0
    total_pending: int = 0
    total_from_prev_days: int = 0
    total_c0_alerts: int = 0


class TodayStats(HandoverStats):
    session_status: Optional[shp_models.HandoverSessionStatus] = None
    closed_at: Optional[datetime] = None
    closed_by: Optional[str] = None


class HandoverSessionRead(SQLModel):
    id: int
    date: dt.date
    status: shp_models.HandoverSessionStatus
    total_issued: int
    total_handed_over: int
    total_not_handed: int
    total_from_prev_days: int
    closed_at: Optional[datetime] = None
    closed_by_name: Optional[str] = None
    close_type: Optional[shp_models.CloseType] = None
    reopened_at: Optional[datetime] = None
    reopened_by_name: Optional[str] = None

    class Config:
        from_attributes = True


class HandoverSessionWithStats(BaseModel):
    session: HandoverSessionRead
    stats: HandoverStats


class ScanRequest(BaseModel):
    awb_number: str


class ScanDetails(BaseModel):
    awb_number: str
    order_number: str = "-"
    previous_scan_date: Optional[datetime] = None
    was_not_handed_over: bool = False


class ScanResult(BaseModel):
    success: bool
    message: str
    type: Literal["success", "warning", "error"]
    awb: Optional[HandoverAWB] = None
    details: Optional[ScanDetails] = None


class ActionResult(BaseModel):
    success: bool
    message: str
    count: Optional[int] = None


class FinalizeResult(BaseModel):
    success: bool = True
    not_handed_over_count: int
    message: str
    stats: HandoverStats


class C0ResolveRequest(BaseModel):
    action: Literal["mark_handed", "ignore"]


class HandoverReport(BaseModel):
    date: dt.date
    stats: HandoverStats
    session: Optional[HandoverSessionRead] = None
    closed_at: Optional[datetime] = None
    closed_by: Optional[str] = None
    close_type: Optional[shp_models.CloseType] = None
    handed_over_list: List[HandoverAWB] = []
    not_handed_over_list: List[HandoverAWB] = []
    from_prev_days_list: List[HandoverAWB] = []
