# app/domains/shp/tasks.py

"""
'shp' 도메인의 ARQ 백그라운드 작업.
"""

import logging
from typing import Any, Dict

from app.core import cron_lock
from app.core.database import get_async_session_context
from . import handover

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

AUTO_FINALIZE_JOB = "handover_auto_finalize"
AUTO_FINALIZE_LOCK_TTL_MINUTES = 2


async def auto_finalize_handover_task(ctx) -> Dict[str, Any]:
    """
    매분 실행. 설정된 마감 시각이 되면 오늘 인계 세션을 자동 마감합니다.
    여러 워커가 동시에 실행해도 cron 잠금으로 한 번만 처리됩니다.
    """
    async def _run() -> bool:
        async with get_async_session_context() as db:
            return await handover.check_auto_finalize(db)

    outcome = await cron_lock.with_cron_lock(AUTO_FINALIZE_JOB, _run, ttl_minutes=AUTO_FINALIZE_LOCK_TTL_MINUTES)
    if outcome.get("result"):
        logger.info("Handover auto-finalized")
    return outcome
