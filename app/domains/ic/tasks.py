# app/domains/ic/tasks.py

"""
'ic' 도메인의 ARQ 백그라운드 작업.
"""

import logging
from typing import Any, Dict

from app.core import cron_lock
from app.core.database import get_async_session_context
from . import settlement

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

WEEKLY_SETTLEMENT_JOB = "intercompany_weekly_settlement"


async def weekly_settlement_task(ctx) -> Dict[str, Any]:
    """매주 월요일. 보조 법인별 지난 7일 정산 인보이스를 발행합니다."""
    async def _run() -> Dict[str, Any]:
        async with get_async_session_context() as db:
            result = await settlement.run_weekly_settlement(db)
        return result.model_dump(mode="json")

    return await cron_lock.with_cron_lock(WEEKLY_SETTLEMENT_JOB, _run)
