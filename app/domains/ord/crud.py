# app/domains/ord/crud.py

"""
'ord' 도메인의 CRUD 로직을 담당하는 모듈입니다.
"""

import logging
from datetime import datetime, UTC
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.ic import models as ic_models
from . import models as ord_models
from . import schemas as ord_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. ord.stores
# =============================================================================
class StoreCRUD(CRUDBase[ord_models.Store, ord_schemas.StoreCreate, ord_schemas.StoreUpdate]):

    async def create(self, db: AsyncSession, *, obj_in: ord_schemas.StoreCreate) -> ord_models.Store:
        if await self.get_by_attribute(db, attribute="name", value=obj_in.name):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Store with this name already exists")
        return await super().create(db, obj_in=obj_in)


# =============================================================================
# 2. ord.orders
# =============================================================================
class OrderCRUD(CRUDBase[ord_models.Order, ord_schemas.OrderCreate, ord_schemas.OrderUpdate]):

    async def get_full(self, db: AsyncSession, id: int) -> Optional[ord_models.Order]:
        result = await db.execute(
            select(self.model).where(self.model.id == id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def _check_references(self, db: AsyncSession, *, store_id: Optional[int], billing_company_id: Optional[int]) -> None:
        if store_id is not None and not await db.get(ord_models.Store, store_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found")
        if billing_company_id is not None and not await db.get(ic_models.Company, billing_company_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")

    async def create(self, db: AsyncSession, *, obj_in: ord_schemas.OrderCreate) -> ord_models.Order:
        await self._check_references(db, store_id=obj_in.store_id, billing_company_id=obj_in.billing_company_id)
        order = ord_models.Order(
            **obj_in.model_dump(exclude={"line_items"}),
            line_items=[ord_models.OrderLineItem(**line.model_dump()) for line in obj_in.line_items],
        )
        db.add(order)
        await db.commit()
        return await self.get_full(db, order.id)

    async def update(
        self, db: AsyncSession, *, db_obj: ord_models.Order, obj_in: ord_schemas.OrderUpdate
    ) -> ord_models.Order:
        data = obj_in.model_dump(exclude_unset=True)
        if data.get("billing_company_id") is not None:
            await self._check_references(db, store_id=None, billing_company_id=data["billing_company_id"])
        for key, value in data.items():
            setattr(db_obj, key, value)
        db.add(db_obj)
        await db.commit()
        return await self.get_full(db, db_obj.id)

    async def record_invoice(
        self, db: AsyncSession, *, db_obj: ord_models.Order, invoice_number: str, issued_at: Optional[datetime] = None
    ) -> ord_models.Order:
        """외부 발행 시스템에서 받은 인보이스 번호와 발행 시각을 기록합니다."""
        db_obj.invoice_number = invoice_number
        db_obj.invoice_issued_at = issued_at or datetime.now(UTC)
        db.add(db_obj)
        await db.commit()
        logger.info("Order %s invoiced as %s", db_obj.order_number, invoice_number)
        return await self.get_full(db, db_obj.id)

    async def list(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        store_id: Optional[int] = None,
        billing_company_id: Optional[int] = None,
        intercompany_status: Optional[ord_models.IntercompanyStatus] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[ord_models.Order], int]:
        query = select(self.model)
        if search:
            query = query.where(or_(
                self.model.order_number.ilike(f"%{search}%"),
                self.model.customer_name.ilike(f"%{search}%"),
            ))
        if store_id:
            query = query.where(self.model.store_id == store_id)
        if billing_company_id:
            query = query.where(self.model.billing_company_id == billing_company_id)
        if intercompany_status:
            query = query.where(self.model.intercompany_status == intercompany_status)

        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(query.order_by(self.model.created_at.desc(), self.model.id.desc()).offset(skip).limit(limit))
        return result.scalars().all(), total


store = StoreCRUD(ord_models.Store)
order = OrderCRUD(ord_models.Order)
