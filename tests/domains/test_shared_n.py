# tests/domains/test_shared_n.py

"""
'shared' 도메인 (cron 잠금, 애플리케이션 설정, 알림) 관련 테스트 모듈입니다.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, UTC

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import cron_lock
from app.domains.shared import models as shared_models
from app.domains.shared import tasks as shared_tasks
from app.domains.usr import models as usr_models


@pytest.fixture(scope="function")
def session_context(db_session: AsyncSession):
    """with_cron_lock이 테스트 세션을 사용하도록 하는 세션 컨텍스트"""
    @asynccontextmanager
    async def _context():
        yield db_session
        await db_session.commit()
    return _context


# =================================================================================
# 1. cron 잠금
# =================================================================================
@pytest.mark.asyncio
async def test_acquire_lock_is_exclusive(db_session: AsyncSession):
    """(성공→실패) 잠금이 살아 있는 동안 두 번째 획득은 실패한다"""
    first = await cron_lock.acquire_lock(db_session, "job_a", ttl_minutes=5)
    await db_session.commit()
    assert first.acquired is True
    assert first.lock_id.startswith("job_a-")

    second = await cron_lock.acquire_lock(db_session, "job_a", ttl_minutes=5)
    assert second.acquired is False
    assert second.existing_lock.lock_id == first.lock_id

    # 다른 소유자의 lock_id로는 해제되지 않음
    assert await cron_lock.release_lock(db_session, "job_a", "job_a-0") is False
    assert await cron_lock.release_lock(db_session, "job_a", first.lock_id) is True
    await db_session.commit()

    third = await cron_lock.acquire_lock(db_session, "job_a")
    assert third.acquired is True


@pytest.mark.asyncio
async def test_expired_lock_can_be_taken_over(db_session: AsyncSession):
    """(성공) 만료된 잠금은 다른 실행자가 가져갈 수 있다"""
    past = datetime.now(UTC) - timedelta(hours=1)
    db_session.add(shared_models.CronLock(
        job_name="job_b", lock_id="job_b-old", locked_at=past, expires_at=past + timedelta(minutes=10)
    ))
    await db_session.commit()

    result = await cron_lock.acquire_lock(db_session, "job_b")
    assert result.acquired is True
    assert result.lock_id != "job_b-old"


@pytest.mark.asyncio
async def test_cleanup_expired_locks(db_session: AsyncSession):
    """(성공) 만료된 잠금만 정리된다"""
    now = datetime.now(UTC)
    db_session.add(shared_models.CronLock(job_name="old", lock_id="old-1", locked_at=now - timedelta(hours=2), expires_at=now - timedelta(hours=1)))
    db_session.add(shared_models.CronLock(job_name="live", lock_id="live-1", locked_at=now, expires_at=now + timedelta(minutes=5)))
    await db_session.commit()

    result = await shared_tasks.cleanup_expired_locks_task({"db": db_session})
    assert result == {"status": "success", "removed": 1}

    active = await cron_lock.get_active_locks(db_session)
    assert [lock.job_name for lock in active] == ["live"]


@pytest.mark.asyncio
async def test_with_cron_lock_runs_and_releases(db_session: AsyncSession, session_context):
    """(성공) 잠금을 잡고 실행한 뒤 해제한다"""
    async def _job():
        return 42

    result = await cron_lock.with_cron_lock("job_c", _job, session_context=session_context)
    assert result == {"success": True, "result": 42}

    remaining = (await db_session.execute(
        select(shared_models.CronLock).where(shared_models.CronLock.job_name == "job_c")
    )).scalars().first()
    assert remaining is None


@pytest.mark.asyncio
async def test_with_cron_lock_skips_when_held(db_session: AsyncSession, session_context):
    """(실패) 이미 실행 중이면 건너뛰고 함수는 호출되지 않는다"""
    await cron_lock.acquire_lock(db_session, "job_d")
    await db_session.commit()
    calls = []

    async def _job():
        calls.append(1)

    result = await cron_lock.with_cron_lock("job_d", _job, session_context=session_context)
    assert result["success"] is False
    assert result["skipped"] is True
    assert result["reason"].startswith("Job already running since ")
    assert calls == []


@pytest.mark.asyncio
async def test_with_cron_lock_releases_on_error(db_session: AsyncSession, session_context):
    """(실패) 함수에서 예외가 나도 잠금은 해제되고 예외는 전파된다"""
    async def _job():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await cron_lock.with_cron_lock("job_e", _job, session_context=session_context)
    assert await cron_lock.get_active_locks(db_session) == []


@pytest.mark.asyncio
async def test_cron_lock_endpoints_require_admin(
    admin_client: AsyncClient, office_client: AsyncClient, db_session: AsyncSession
):
    """(성공/실패) 잠금 조회/강제 해제는 관리자 전용"""
    await cron_lock.acquire_lock(db_session, "job_f")
    await db_session.commit()

    response = await office_client.get("/api/v1/shared/cron-locks")
    assert response.status_code == 403

    response = await admin_client.get("/api/v1/shared/cron-locks")
    assert response.status_code == 200
    assert [lock["job_name"] for lock in response.json()] == ["job_f"]

    response = await admin_client.delete("/api/v1/shared/cron-locks/job_f")
    assert response.status_code == 204
    response = await admin_client.delete("/api/v1/shared/cron-locks/job_f")
    assert response.status_code == 404


# =================================================================================
# 2. 애플리케이션 설정
# =================================================================================
@pytest.mark.asyncio
async def test_settings_default_and_update(authorized_client: AsyncClient, admin_client: AsyncClient):
    """(성공) 설정이 없으면 기본 마감 시각을 반환하고, 관리자는 변경할 수 있다"""
    response = await authorized_client.get("/api/v1/shared/settings")
    assert response.status_code == 200
    assert response.json()["handover_auto_close_time"] == "20:00"

    response = await admin_client.put("/api/v1/shared/settings", json={"handover_auto_close_time": " 18:45 "})
    assert response.status_code == 200
    assert response.json()["handover_auto_close_time"] == "18:45"

    response = await authorized_client.get("/api/v1/shared/settings")
    assert response.json()["handover_auto_close_time"] == "18:45"


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["24:00", "7:30", "20:60", "2000", ""])
async def test_settings_rejects_invalid_time(admin_client: AsyncClient, value: str):
    """(실패) HH:MM 형식이 아니면 422"""
    response = await admin_client.put("/api/v1/shared/settings", json={"handover_auto_close_time": value})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_settings_update_forbidden_for_manager(manager_client: AsyncClient):
    """(실패) 권한: 마감 시각 변경은 관리자 전용"""
    response = await manager_client.put("/api/v1/shared/settings", json={"handover_auto_close_time": "19:00"})
    assert response.status_code == 403


# =================================================================================
# 3. 알림
# =================================================================================
@pytest.mark.asyncio
async def test_notification_fan_out_by_role(
    db_session: AsyncSession, test_manager: usr_models.User, test_office_user: usr_models.User,
    test_admin_user: usr_models.User,
):
    """(성공) 역할이 주어지면 그 역할 이상의 사용자마다 알림이 생성된다"""
    result = await shared_tasks.send_notification_task(
        {"db": db_session}, "nir_in_stock", "NIR in stoc", "1 produs", {"goods_receipt_id": 1},
        usr_models.UserRole.MANAGER.value,
    )
    assert result["sent"] == 2

    recipients = (await db_session.execute(
        select(shared_models.Notification.user_id).where(shared_models.Notification.type == "nir_in_stock")
    )).scalars().all()
    assert set(recipients) == {test_manager.id, test_admin_user.id}


def test_recipient_roles_include_higher_authority():
    """(성공) 기준 역할과 그보다 높은 권한의 역할만 포함된다"""
    Role = usr_models.UserRole
    assert shared_tasks.recipient_roles(Role.MANAGER) == [Role.SUPERUSER, Role.ADMIN, Role.MANAGER]
    assert shared_tasks.recipient_roles(Role.SUPERUSER) == [Role.SUPERUSER]


@pytest.mark.asyncio
async def test_notification_skips_inactive_users(db_session: AsyncSession, user_factory, test_manager: usr_models.User):
    """(성공) 비활성 사용자에게는 알림이 가지 않는다"""
    await user_factory("fost", "fostpass123", role=usr_models.UserRole.MANAGER, is_active=False)
    result = await shared_tasks.send_notification_task(
        {"db": db_session}, "nir_in_stock", "NIR in stoc", "1 produs", None, usr_models.UserRole.MANAGER.value,
    )
    assert result["sent"] == 1


@pytest.mark.asyncio
async def test_read_and_mark_notifications(manager_client: AsyncClient, db_session: AsyncSession, test_manager: usr_models.User):
    """(성공) 본인 알림과 전체 알림이 보이고, 읽음 처리하면 미읽음 수가 줄어든다"""
    await shared_tasks.send_notification_task({"db": db_session}, "broadcast", "Anunt", "Mesaj general")
    await shared_tasks.send_notification_task(
        {"db": db_session}, "personal", "Pentru manager", "Mesaj", None, usr_models.UserRole.MANAGER.value
    )

    response = await manager_client.get("/api/v1/shared/notifications")
    assert response.status_code == 200
    body = response.json()
    assert body["unread"] == 2
    assert {n["type"] for n in body["items"]} == {"broadcast", "personal"}

    personal = next(n for n in body["items"] if n["type"] == "personal")
    response = await manager_client.post(f"/api/v1/shared/notifications/{personal['id']}/read")
    assert response.status_code == 200
    assert response.json()["is_read"] is True

    response = await manager_client.get("/api/v1/shared/notifications", params={"unread_only": True})
    assert response.json()["unread"] == 1
