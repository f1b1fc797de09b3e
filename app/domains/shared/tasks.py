# app/domains/shared/tasks.py

"""
'shared' 도메인의 ARQ 백그라운드 작업.

ctx에 "db" 세션이 들어 있으면(동기 폴백 호출) 그 세션을 사용하고,
워커에서 실행될 때는 독립적인 세션을 엽니다.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from sqlmodel import select

from app.core import cron_lock
from app.core.database import get_async_session_context
from app.domains.usr import models as usr_models
from . import models as shared_models

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def recipient_roles(role: int) -> List[usr_models.UserRole]:
    """주어진 역할 값 이상의 권한을 가진 역할 목록. role 컬럼은 enum 타입이라 IN 조건으로 비교합니다."""
    return [r for r in usr_models.UserRole if r <= role]


@asynccontextmanager
async def _task_session(ctx: Dict[str, Any]):
    if ctx and ctx.get("db") is not None:
        yield ctx["db"]
    else:
        async with get_async_session_context() as session:
            yield session


async def send_notification_task(
    ctx,
    type: str,
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
    role: Optional[int] = None,
) -> Dict[str, Any]:
    """
    role(최대 역할 값)이 주어지면 해당 역할 이상의 활성 사용자마다 알림을 만들고,
    없으면 전체 대상(user_id=NULL) 알림 하나를 만듭니다.
    """
    async with _task_session(ctx) as db:
        if role is None:
            db.add(shared_models.Notification(type=type, title=title, message=message, data=data))
            count = 1
        else:
            result = await db.execute(
                select(usr_models.User.id).where(
                    usr_models.User.is_active.is_(True),
                    usr_models.User.role.in_(recipient_roles(role)),
                )
            )
            user_ids = result.scalars().all()
            for user_id in user_ids:
                db.add(shared_models.Notification(user_id=user_id, type=type, title=title, message=message, data=data))
            count = len(user_ids)
        await db.commit()

    logger.info("Notification '%s' sent to %d recipient(s)", type, count)
    return {"status": "success", "sent": count}


async def cleanup_expired_locks_task(ctx) -> Dict[str, Any]:
    """만료된 cron 잠금 행을 정리합니다 (매시간)."""
    async with _task_session(ctx) as db:
        removed = await cron_lock.cleanup_expired_locks(db)
        await db.commit()
    return {"status": "success", "removed": removed}
