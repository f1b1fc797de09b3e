# app/domains/shp/crud.py

"""
'shp' 도메인의 CRUD 로직을 담당하는 모듈입니다.
"""

import logging
from datetime import datetime, UTC
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.ord import models as ord_models
from . import courier_statuses
from . import handover
from . import models as shp_models
from . import schemas as shp_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. shp.awbs
# =============================================================================
class AWBCRUD(CRUDBase[shp_models.AWB, shp_schemas.AWBCreate, shp_schemas.AWBUpdate]):

    async def get_full(self, db: AsyncSession, id: int) -> Optional[shp_models.AWB]:
        result = await db.execute(
            select(self.model).where(self.model.id == id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def create(self, db: AsyncSession, *, obj_in: shp_schemas.AWBCreate) -> shp_models.AWB:
        awb_number = obj_in.awb_number.strip()
        if not await db.get(ord_models.Order, obj_in.order_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
        if await self.get_by_attribute(db, attribute="awb_number", value=awb_number):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="AWB with this number already exists")

        db_obj = shp_models.AWB(awb_number=awb_number, order_id=obj_in.order_id, is_collected=obj_in.is_collected)
        db.add(db_obj)
        await db.commit()
        return await self.get_full(db, db_obj.id)

    async def update(
        self, db: AsyncSession, *, db_obj: shp_models.AWB, obj_in: shp_schemas.AWBUpdate
    ) -> shp_models.AWB:
        for key, value in obj_in.model_dump(exclude_unset=True).items():
            setattr(db_obj, key, value)
        db.add(db_obj)
        await db.commit()
        return await self.get_full(db, db_obj.id)

    async def list(
        self,
        db: AsyncSession,
        *,
        order_id: Optional[int] = None,
        current_status: Optional[shp_models.AwbStatus] = None,
        not_handed_over: Optional[bool] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[shp_models.AWB], int]:
        query = select(self.model)
        if order_id:
            query = query.where(self.model.order_id == order_id)
        if current_status:
            query = query.where(self.model.current_status == current_status)
        if not_handed_over is not None:
            query = query.where(self.model.not_handed_over.is_(not_handed_over))

        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(query.order_by(self.model.created_at.desc(), self.model.id.desc()).offset(skip).limit(limit))
        return result.scalars().all(), total

    async def apply_courier_status(
        self, db: AsyncSession, *, db_obj: shp_models.AWB, code: str, event_at: Optional[datetime] = None
    ) -> shp_models.AWB:
        """
        택배사 상태 코드를 AWB에 반영합니다.
        - 알 수 없는 코드는 '미확인 상태'로 기록하고 current_status는 유지합니다.
        - 픽업 코드(C0/C1)이면서 인계 스캔이 없으면 C0 경보를 설정합니다.
        """
        code = code.strip().upper()
        known = courier_statuses.get_courier_status(code)
        db_obj.courier_status_code = code
        if known is None:
            db_obj.courier_status_name = courier_statuses.UNKNOWN_STATUS_NAME
            db_obj.courier_status_desc = f"Codul {code} nu este recunoscut"
            logger.warning("Unknown courier status %s for AWB %s", code, db_obj.awb_number)
        else:
            db_obj.courier_status_name = known.name
            db_obj.courier_status_desc = known.description
            mapped = courier_statuses.map_to_awb_status(known)
            if mapped:
                db_obj.current_status = mapped
        db.add(db_obj)

        if courier_statuses.is_pickup_status(code):
            await handover.mark_c0_without_scan(db, db_obj.id, event_at or datetime.now(UTC))

        await db.commit()
        return await self.get_full(db, db_obj.id)


awb = AWBCRUD(shp_models.AWB)
