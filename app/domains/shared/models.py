# app/domains/shared/models.py

"""
'shared' 도메인 (PostgreSQL 'shared' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 도메인 간에 공유되는 테이블(주기 작업 잠금, 알림, 애플리케이션 설정)에 대한
SQLModel 클래스를 포함합니다.
"""

from typing import Optional, Dict, Any
from datetime import datetime, UTC

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel, Column


# =============================================================================
# 1. shared.cron_locks 테이블 모델
# =============================================================================
class CronLock(SQLModel, table=True):
    """
    주기 작업(cron)의 중복 실행을 막기 위한 이름 기반 잠금.
    job_name당 한 행만 존재하며, expires_at이 지난 행은 다른 실행자가 가져갈 수 있습니다.
    """
    __tablename__ = "cron_locks"
    __table_args__ = {'schema': 'shared'}

    job_name: str = Field(sa_column=Column(String(100), primary_key=True), description="작업 이름")
    lock_id: str = Field(max_length=150, description="잠금 소유자 식별자 ({job_name}-{epoch_ms})")
    locked_at: datetime = Field(
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
        description="잠금 획득 시각"
    )
    expires_at: datetime = Field(
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False, index=True),
        description="잠금 만료 시각"
    )


# =============================================================================
# 2. shared.notifications 테이블 모델
# =============================================================================
class NotificationBase(SQLModel):
    user_id: Optional[int] = Field(default=None, foreign_key="usr.users.id", index=True, description="수신 사용자 ID (NULL이면 전체)")
    type: str = Field(max_length=50, description="알림 유형 (예: nir_in_stock)")
    title: str = Field(max_length=200, description="알림 제목")
    message: str = Field(description="알림 내용")
    data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSONB), description="부가 데이터")
    is_read: bool = Field(default=False, description="읽음 여부")


class Notification(NotificationBase, table=True):
    __tablename__ = "notifications"
    __table_args__ = {'schema': 'shared'}

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )


# =============================================================================
# 3. shared.app_settings 테이블 모델 (단일 행, id=1)
# =============================================================================
class AppSettings(SQLModel, table=True):
    __tablename__ = "app_settings"
    __table_args__ = {'schema': 'shared'}

    id: int = Field(default=1, primary_key=True)
    handover_auto_close_time: str = Field(default="20:00", max_length=5, description="인계 자동 마감 시각 (HH:MM)")
    updated_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )
