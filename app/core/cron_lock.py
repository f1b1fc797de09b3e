# app/core/cron_lock.py

"""
주기 작업(cron)의 중복 실행을 막는 이름 기반 DB 잠금.

여러 워커가 같은 작업을 동시에 시작하더라도 하나만 실행되도록,
INSERT ... ON CONFLICT DO UPDATE ... WHERE expires_at < now() 한 문장으로
잠금을 원자적으로 획득합니다. 만료된 잠금만 덮어쓸 수 있습니다.
"""

import time
import logging
from datetime import datetime, timedelta, UTC
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.database import get_async_session_context
from app.domains.shared.models import CronLock

logger = logging.getLogger(__name__)


class LockResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    acquired: bool
    lock_id: Optional[str] = None
    existing_lock: Optional[CronLock] = None


def make_lock_id(job_name: str) -> str:
    return f"{job_name}-{int(time.time() * 1000)}"


async def acquire_lock(
    db: AsyncSession, job_name: str, ttl_minutes: Optional[int] = None
) -> LockResult:
    """
    잠금 획득을 시도합니다. 호출자가 commit 해야 다른 세션에서 보입니다.
    """
    ttl = ttl_minutes if ttl_minutes is not None else settings.CRON_LOCK_TTL_MINUTES
    now = datetime.now(UTC)
    lock_id = make_lock_id(job_name)

    statement = (
        insert(CronLock)
        .values(job_name=job_name, lock_id=lock_id, locked_at=now, expires_at=now + timedelta(minutes=ttl))
    )
    statement = statement.on_conflict_do_update(
        index_elements=[CronLock.job_name],
        set_={
            "lock_id": statement.excluded.lock_id,
            "locked_at": statement.excluded.locked_at,
            "expires_at": statement.excluded.expires_at,
        },
        where=CronLock.expires_at < now,
    ).returning(CronLock.lock_id)

    result = await db.execute(statement)
    returned = result.scalar_one_or_none()
    if returned == lock_id:
        logger.info("Cron lock acquired: %s (%s)", job_name, lock_id)
        return LockResult(acquired=True, lock_id=lock_id)

    existing = await db.execute(
        select(CronLock).where(CronLock.job_name == job_name).execution_options(populate_existing=True)
    )
    return LockResult(acquired=False, existing_lock=existing.scalars().first())


async def release_lock(db: AsyncSession, job_name: str, lock_id: Optional[str] = None) -> bool:
    """
    잠금을 해제합니다. lock_id가 주어지면 해당 소유자의 잠금만 삭제하고,
    없으면 강제로 삭제합니다.
    """
    statement = delete(CronLock).where(CronLock.job_name == job_name)
    if lock_id is not None:
        statement = statement.where(CronLock.lock_id == lock_id)
    result = await db.execute(statement)
    released = result.rowcount > 0
    if released:
        logger.info("Cron lock released: %s", job_name)
    return released


async def cleanup_expired_locks(db: AsyncSession) -> int:
    result = await db.execute(delete(CronLock).where(CronLock.expires_at < datetime.now(UTC)))
    if result.rowcount:
        logger.info("Removed %d expired cron lock(s)", result.rowcount)
    return result.rowcount


async def get_active_locks(db: AsyncSession) -> List[CronLock]:
    result = await db.execute(
        select(CronLock).where(CronLock.expires_at >= datetime.now(UTC)).order_by(CronLock.locked_at)
    )
    return result.scalars().all()


async def with_cron_lock(
    job_name: str,
    fn: Callable[[], Awaitable[Any]],
    ttl_minutes: Optional[int] = None,
    session_context: Callable[[], Any] = get_async_session_context,
) -> Dict[str, Any]:
    """
    잠금을 획득한 경우에만 fn()을 실행합니다.
    잠금 관리는 fn과 분리된 짧은 세션에서 처리되며, fn의 예외는 잠금 해제 후 다시 발생합니다.
    """
    async with session_context() as db:
        lock = await acquire_lock(db, job_name, ttl_minutes)

    if not lock.acquired:
        since = lock.existing_lock.locked_at.isoformat() if lock.existing_lock else "unknown"
        logger.warning("Skipping %s: lock held since %s", job_name, since)
        return {"success": False, "skipped": True, "reason": f"Job already running since {since}"}

    try:
        result = await fn()
        return {"success": True, "result": result}
    finally:
        async with session_context() as db:
            await release_lock(db, job_name, lock.lock_id)
