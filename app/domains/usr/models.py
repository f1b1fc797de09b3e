# app/domains/usr/models.py

"""
'usr' 도메인 (PostgreSQL 'usr' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import IntEnum
from sqlmodel import Field, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


# =============================================================================
# 사용자 역할(RBAC) 정의. 값이 작을수록 높은 권한입니다.
# =============================================================================
class UserRole(IntEnum):
    """
    사용자 역할을 정의하는 정수형 Enum 클래스입니다.
    DB에는 정수 값으로 저장되며, 권한 코드 검사 시 '역할 값 <= 허용 값'으로 비교합니다.
    """
    SUPERUSER = 1       # 최고 관리자
    ADMIN = 10          # 시스템 관리자
    MANAGER = 30        # 매니저 (차이 승인, 인계 마감, 정산)
    OFFICE = 50         # 사무실 (NIR 검증, 재고 반영)
    WAREHOUSE = 60      # 창고 (입고 검수, AWB 스캔)
    GENERAL_USER = 100  # 일반 사용자 (조회)


# =============================================================================
# 1. usr.users 테이블 모델
# =============================================================================
class UserBase(SQLModel):
    """
    usr.users 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    login_id: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="로그인 ID")
    email: Optional[str] = Field(default=None, max_length=100, sa_column_kwargs={"unique": True}, description="사용자 이메일")
    full_name: Optional[str] = Field(default=None, max_length=100, description="사용자 전체 이름")
    role: UserRole = Field(default=UserRole.GENERAL_USER, description="사용자 역할 (권한)")
    is_active: bool = Field(default=True, description="계정 활성 여부")


class User(UserBase, table=True):
    """
    PostgreSQL의 usr.users 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "users"
    __table_args__ = {'schema': 'usr'}

    id: Optional[int] = Field(default=None, primary_key=True, description="사용자 고유 ID")
    password_hash: str = Field(max_length=255, description="해싱된 비밀번호")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    @property
    def display_name(self) -> str:
        """감사(audit) 필드에 기록할 사용자 표시 이름."""
        return self.full_name or self.login_id
