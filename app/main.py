import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from arq import cron
from arq.connections import create_pool, RedisSettings
from redis.exceptions import RedisError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

# 핵심 설정 및 데이터베이스 모듈 임포트
from app.core.config import settings
from app.core.database import engine, get_session
from app import API_PREFIX

# 태스크 모듈 임포트
from app.core import tasks as core_tasks
from app.domains.shared import tasks as shared_tasks
from app.domains.shp import tasks as shp_tasks
from app.domains.ic import tasks as ic_tasks

# 도메인 라우터 임포트
from app.domains.shared.routers import router as shared_router
from app.domains.usr.routers import router as usr_router
from app.domains.inv.routers import router as inv_router
from app.domains.ord.routers import router as ord_router
from app.domains.shp.routers import router as shp_router
from app.domains.ic.routers import router as ic_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    shared_tasks.send_notification_task,
    shared_tasks.cleanup_expired_locks_task,
    shp_tasks.auto_finalize_handover_task,
    ic_tasks.weekly_settlement_task,
]


# ARQ 워커 설정 클래스 (arq app.main.ArqWorkerSettings)
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    cron_jobs = [
        # 매일 00:00 DB 헬스 체크
        cron(core_tasks.health_check_database_task, hour=0, minute=0, timeout=300),
        # 매분 인계 자동 마감 확인
        cron(shp_tasks.auto_finalize_handover_task, minute=set(range(60)), timeout=120),
        # 매주 월요일 06:00 법인간 정산
        cron(ic_tasks.weekly_settlement_task, weekday="mon", hour=6, minute=0, timeout=1800),
        # 매시 정각 만료된 cron 잠금 정리
        cron(shared_tasks.cleanup_expired_locks_task, minute=0, timeout=300),
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    ARQ Redis 커넥션 풀을 만들고 종료 시 DB/Redis 연결을 정리합니다.
    Redis에 연결할 수 없으면 app.state.redis는 None이며, 작업은 요청 안에서 동기로 실행됩니다.
    """
    logger.info("Starting %s", settings.APP_NAME)
    try:
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("ARQ Redis pool created")
    except (OSError, RedisError) as e:
        app.state.redis = None
        logger.warning("Redis unavailable, background jobs will run inline: %s", e)

    yield  # 애플리케이션 실행

    logger.info("Shutting down %s", settings.APP_NAME)
    if app.state.redis:
        await app.state.redis.close()
    await engine.dispose()


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# -- CORS 미들웨어 설정 --
# 프로덕션에서는 allow_origins를 실제 프론트엔드 도메인으로 제한해야 합니다.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- 도메인 라우터 포함 --
app.include_router(shared_router, prefix=f"{API_PREFIX}/shared", tags=["Shared (알림, 설정, cron 잠금)"])
app.include_router(usr_router, prefix=f"{API_PREFIX}/usr", tags=["User Management (사용자 관리)"])
app.include_router(inv_router, prefix=f"{API_PREFIX}/inv", tags=["Inventory & Reception (재고 및 입고)"])
app.include_router(ord_router, prefix=f"{API_PREFIX}/ord", tags=["Orders (주문 관리)"])
app.include_router(shp_router, prefix=f"{API_PREFIX}/shp", tags=["Shipping & Handover (택배 및 인계)"])
app.include_router(ic_router, prefix=f"{API_PREFIX}/ic", tags=["Intercompany (법인간 정산)"])


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database health check failed: No result from test query"
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
