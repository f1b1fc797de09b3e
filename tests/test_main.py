# tests/test_main.py

"""
FastAPI 애플리케이션의 메인 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.

- 애플리케이션의 루트 경로 (`/`) 응답을 테스트합니다.
- 데이터베이스 연결 헬스 체크 엔드포인트 (`/health-check`)를 테스트합니다.
- ARQ 워커 설정에 주기 작업이 등록되어 있는지 확인합니다.
"""

import pytest
from arq.connections import RedisSettings
from httpx import AsyncClient

from app.core.config import settings
from app.main import ArqWorkerSettings, app, lifespan, worker_functions


@pytest.mark.asyncio
async def test_read_root(client: AsyncClient):
    """
    루트 엔드포인트 (`GET /`)가 올바르게 응답하는지 테스트합니다.
    """
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {
        "message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."
    }


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """
    헬스 체크 엔드포인트 (`GET /health-check`)가 데이터베이스 연결 상태를 올바르게 반환하는지 테스트합니다.
    """
    response = await client.get("/health-check")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database_connection": "successful"}


def test_worker_registers_cron_jobs():
    """자동 마감, 주간 정산, 잠금 정리 작업이 워커에 등록되어 있어야 합니다."""
    names = {fn.__name__ for fn in worker_functions}
    assert {"auto_finalize_handover_task", "weekly_settlement_task", "cleanup_expired_locks_task"} <= names
    assert len(ArqWorkerSettings.cron_jobs) == 4


@pytest.mark.asyncio
async def test_lifespan_without_redis_runs_jobs_inline(monkeypatch):
    """(성공) Redis에 연결할 수 없어도 앱은 시작되고 app.state.redis는 None이다"""
    monkeypatch.setattr(
        ArqWorkerSettings, "redis_settings", RedisSettings(host="127.0.0.1", port=1, conn_retries=0)
    )
    async with lifespan(app):
        assert app.state.redis is None
