# app/domains/shared/crud.py

"""
'shared' 도메인 (알림, 애플리케이션 설정)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""
import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import or_, update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.crud_base import CRUDBase
from . import models as shared_models
from . import schemas as shared_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 알림 (Notification) CRUD
# =============================================================================
class CRUDNotification(
    CRUDBase[shared_models.Notification, shared_models.NotificationBase, shared_models.NotificationBase]
):
    def __init__(self):
        super().__init__(model=shared_models.Notification)

    @staticmethod
    def _visible_to(user_id: int):
        # 본인 알림 + 전체(브로드캐스트) 알림
        return or_(shared_models.Notification.user_id == user_id, shared_models.Notification.user_id.is_(None))

    async def get_for_user(
        self, db: AsyncSession, *, user_id: int, unread_only: bool = False, skip: int = 0, limit: int = 50
    ) -> List[shared_models.Notification]:
        query = select(self.model).where(self._visible_to(user_id))
        if unread_only:
            query = query.where(self.model.is_read.is_(False))
        result = await db.execute(query.order_by(self.model.id.desc()).offset(skip).limit(limit))
        return result.scalars().all()

    async def count_unread(self, db: AsyncSession, *, user_id: int) -> int:
        result = await db.execute(
            select(func.count()).select_from(self.model).where(self._visible_to(user_id), self.model.is_read.is_(False))
        )
        return result.scalar_one()

    async def mark_read(self, db: AsyncSession, *, notification_id: int, user_id: int) -> shared_models.Notification:
        notification = await self.get(db, id=notification_id)
        if notification is None or notification.user_id not in (None, user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
        notification.is_read = True
        db.add(notification)
        await db.commit()
        await db.refresh(notification)
        return notification

    async def mark_all_read(self, db: AsyncSession, *, user_id: int) -> int:
        result = await db.execute(
            update(self.model)
            .where(self.model.user_id == user_id, self.model.is_read.is_(False))
            .values(is_read=True)
        )
        await db.commit()
        return result.rowcount


# =============================================================================
# 2. 애플리케이션 설정 (AppSettings) CRUD
# =============================================================================
class CRUDAppSettings(
    CRUDBase[shared_models.AppSettings, shared_schemas.AppSettingsUpdate, shared_schemas.AppSettingsUpdate]
):
    SINGLETON_ID = 1

    def __init__(self):
        super().__init__(model=shared_models.AppSettings)

    async def get_current(self, db: AsyncSession) -> Optional[shared_models.AppSettings]:
        return await db.get(self.model, self.SINGLETON_ID)

    async def get_handover_close_time(self, db: AsyncSession) -> str:
        """DB 설정이 없으면 환경 설정(HANDOVER_AUTO_CLOSE_TIME)을 사용합니다."""
        current = await self.get_current(db)
        if current and current.handover_auto_close_time:
            return current.handover_auto_close_time
        return settings.HANDOVER_AUTO_CLOSE_TIME

    async def upsert(
        self, db: AsyncSession, *, obj_in: shared_schemas.AppSettingsUpdate, user_id: Optional[int]
    ) -> shared_models.AppSettings:
        current = await self.get_current(db)
        if current is None:
            current = self.model(id=self.SINGLETON_ID)
        current.handover_auto_close_time = obj_in.handover_auto_close_time
        current.updated_by = user_id
        db.add(current)
        await db.commit()
        await db.refresh(current)
        logger.info("Handover auto-close time set to %s (user=%s)", current.handover_auto_close_time, user_id)
        return current


notification = CRUDNotification()
app_settings = CRUDAppSettings()
