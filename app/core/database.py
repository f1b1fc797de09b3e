# app/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진을 설정합니다.
- 비동기 세션 생성을 위한 유틸리티 함수를 제공합니다.
- 애플리케이션 시작 시 데이터베이스 스키마/테이블을 생성하는 함수를 포함합니다 (개발용).
"""

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import configure_mappers, sessionmaker
from sqlalchemy import text

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings

# =============================================================================
# 모든 도메인 모델 임포트
# =============================================================================
# 모든 SQLModel 클래스가 SQLModel.metadata에 등록되어야 configure_mappers()와
# create_all()이 관계를 올바르게 인식합니다.
from app.domains.usr import models      # noqa
from app.domains.inv import models      # noqa
from app.domains.ord import models      # noqa
from app.domains.shp import models      # noqa
from app.domains.ic import models       # noqa
from app.domains.shared import models   # noqa

logger = logging.getLogger(__name__)

# 도메인별 PostgreSQL 스키마 목록
SCHEMAS = ['shared', 'usr', 'inv', 'ord', 'shp', 'ic']

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL.get_secret_value(),
    echo=settings.DEBUG_MODE,
    future=True,
    pool_recycle=3600,  # 1시간마다 연결 재활용
    pool_size=10,
    max_overflow=20
)

# 비동기 세션을 생성하는 '세션 공장'을 정의합니다.
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

metadata = SQLModel.metadata

# 매퍼 구성 완료 플래그 (중복 호출 방지)
_mappers_configured = False


# =============================================================================
# 데이터베이스 초기화 및 테이블 생성 함수
# =============================================================================
async def create_db_and_tables() -> None:
    """
    데이터베이스 스키마 및 테이블을 생성합니다.
    개발 환경 전용이며, 기존 테이블을 삭제하지는 않습니다.
    """
    global _mappers_configured

    async with engine.begin() as conn:
        for schema_name in SCHEMAS:
            await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema_name}"))
        logger.info("Schemas ensured: %s", ", ".join(SCHEMAS))

        if not _mappers_configured:
            configure_mappers()
            _mappers_configured = True

        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables created (or already present).")


# =============================================================================
# 비동기 데이터베이스 세션 의존성 주입
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 자동으로 닫습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    ARQ Task 등 비동기 컨텍스트에서 사용할 수 있는
    독립적인 비동기 DB 세션을 제공하는 컨텍스트 관리자입니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
