# app/domains/shared/schemas.py

"""
'shared' 도메인 (PostgreSQL 'shared' 스키마)의 Pydantic 스키마를 정의하는 모듈입니다.
"""
import re
from typing import Optional, Dict, Any, List
from datetime import datetime

from pydantic import BaseModel, field_validator
from sqlmodel import SQLModel

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


# =============================================================================
# 1. shared.notifications 스키마
# =============================================================================
class NotificationRead(SQLModel):
    id: int
    user_id: Optional[int] = None
    type: str
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotificationList(BaseModel):
    items: List[NotificationRead]
    unread: int


# =============================================================================
# 2. shared.app_settings 스키마
# =============================================================================
class AppSettingsRead(SQLModel):
    handover_auto_close_time: str
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AppSettingsUpdate(SQLModel):
    handover_auto_close_time: str

    @field_validator("handover_auto_close_time")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        """HH:MM (00-23, 00-59) 형식만 허용합니다."""
        v = v.strip()
        if not HHMM_PATTERN.match(v):
            raise ValueError("Format invalid. Folositi HH:MM (ex: 20:00)")
        return v


# =============================================================================
# 3. shared.cron_locks 스키마
# =============================================================================
class CronLockRead(SQLModel):
    job_name: str
    lock_id: str
    locked_at: datetime
    expires_at: datetime

    class Config:
        from_attributes = True
