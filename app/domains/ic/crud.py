# app/domains/ic/crud.py

"""
'ic' 도메인의 CRUD 로직을 담당하는 모듈입니다.
"""

import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from . import models as ic_models
from . import schemas as ic_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. ic.companies
# =============================================================================
class CompanyCRUD(CRUDBase[ic_models.Company, ic_schemas.CompanyCreate, ic_schemas.CompanyUpdate]):
    """주 법인(is_primary)은 최대 하나입니다. 새 주 법인을 지정하면 기존 지정이 해제됩니다."""

    async def get_full(self, db: AsyncSession, id: int) -> Optional[ic_models.Company]:
        result = await db.execute(
            select(self.model).where(self.model.id == id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def _clear_primary(self, db: AsyncSession, *, except_id: Optional[int] = None) -> None:
        statement = update(self.model).where(self.model.is_primary.is_(True))
        if except_id is not None:
            statement = statement.where(self.model.id != except_id)
        await db.execute(statement.values(is_primary=False).execution_options(synchronize_session=False))

    async def create(self, db: AsyncSession, *, obj_in: ic_schemas.CompanyCreate) -> ic_models.Company:
        if await self.get_by_attribute(db, attribute="code", value=obj_in.code):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Company with this code already exists")
        if obj_in.is_primary:
            await self._clear_primary(db)
        db_obj = self.model.model_validate(obj_in)
        db.add(db_obj)
        await db.commit()
        logger.info("Company %s created (primary=%s)", db_obj.code, db_obj.is_primary)
        return await self.get_full(db, db_obj.id)

    async def update(
        self, db: AsyncSession, *, db_obj: ic_models.Company, obj_in: ic_schemas.CompanyUpdate
    ) -> ic_models.Company:
        data = obj_in.model_dump(exclude_unset=True)
        if data.get("is_primary"):
            await self._clear_primary(db, except_id=db_obj.id)
        for key, value in data.items():
            setattr(db_obj, key, value)
        db.add(db_obj)
        await db.commit()
        return await self.get_full(db, db_obj.id)


company = CompanyCRUD(ic_models.Company)
