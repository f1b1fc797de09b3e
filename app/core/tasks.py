# app/core/tasks.py

import logging

from sqlmodel import select
from app.core.database import get_async_session_context

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def health_check_database_task(ctx):
    """
    ARQ 워커에 의해 매일 실행되는 데이터베이스 헬스 체크 태스크.
    연결 실패는 예외 대신 실패 결과로 기록됩니다.
    """
    logger.info("ARQ task: database health check")

    try:
        async with get_async_session_context() as db:
            result = await db.execute(select(1))
            if result.scalar_one_or_none() == 1:
                logger.info("Database health check: ok")
                return {"status": "success", "message": "Database connection successful."}
            error_msg = "Database health check failed: No result from test query."
            logger.error(error_msg)
            return {"status": "failed", "message": error_msg}
    except Exception as e:
        # 워커 자체는 계속 동작해야 하므로 결과로만 남깁니다.
        logger.error("Database health check failed: %s", e)
        return {"status": "failed", "message": f"Database connection error: {e}"}
