# app/domains/shared/routers.py

"""
'shared' 도메인 (알림, 애플리케이션 설정, cron 잠금 관리)의 API 엔드포인트를 정의하는 모듈입니다.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import cron_lock
from app.core import dependencies as deps
from app.core.config import settings
from app.domains.usr import models as usr_models

from . import crud as shared_crud
from . import schemas as shared_schemas


router = APIRouter(
    tags=["Shared (시스템 공용정보 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. shared.notifications 엔드포인트
# =============================================================================
@router.get("/notifications", response_model=shared_schemas.NotificationList)
async def read_my_notifications(
    unread_only: bool = False,
    skip: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """내 알림과 전체 알림을 최신순으로 조회합니다."""
    items = await shared_crud.notification.get_for_user(
        db, user_id=current_user.id, unread_only=unread_only, skip=skip, limit=limit
    )
    unread = await shared_crud.notification.count_unread(db, user_id=current_user.id)
    return {"items": items, "unread": unread}


@router.post("/notifications/{notification_id}/read", response_model=shared_schemas.NotificationRead)
async def mark_notification_read(
    notification_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    return await shared_crud.notification.mark_read(db, notification_id=notification_id, user_id=current_user.id)


@router.post("/notifications/read-all")
async def mark_all_notifications_read(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    updated = await shared_crud.notification.mark_all_read(db, user_id=current_user.id)
    return {"updated": updated}


# =============================================================================
# 2. shared.app_settings 엔드포인트
# =============================================================================
@router.get("/settings", response_model=shared_schemas.AppSettingsRead)
async def read_app_settings(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    current = await shared_crud.app_settings.get_current(db)
    if current is None:
        return {"handover_auto_close_time": settings.HANDOVER_AUTO_CLOSE_TIME}
    return current


@router.put("/settings", response_model=shared_schemas.AppSettingsRead)
async def update_app_settings(
    settings_in: shared_schemas.AppSettingsUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.require_permission("settings.handover")),
):
    return await shared_crud.app_settings.upsert(db, obj_in=settings_in, user_id=current_user.id)


# =============================================================================
# 3. shared.cron_locks 엔드포인트
# =============================================================================
@router.get("/cron-locks", response_model=List[shared_schemas.CronLockRead])
async def read_active_cron_locks(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.require_permission("admin.cron")),
):
    return await cron_lock.get_active_locks(db)


@router.delete("/cron-locks/{job_name}", status_code=status.HTTP_204_NO_CONTENT)
async def force_release_cron_lock(
    job_name: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.require_permission("admin.cron")),
):
    """소유자와 관계없이 잠금을 강제로 해제합니다."""
    released = await cron_lock.release_lock(db, job_name)
    if not released:
        raise HTTPException(status_code=404, detail="Lock not found.")
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
