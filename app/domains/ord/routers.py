# app/domains/ord/routers.py

"""
'ord' 도메인 (스토어, 주문)의 API 엔드포인트를 정의하는 모듈입니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User as UsrUser
from app.domains.inv import services as inv_services
from . import crud as ord_crud
from . import models as ord_models
from . import schemas as ord_schemas

router = APIRouter(
    tags=["Orders (주문 관리)"],
    responses={404: {"description": "Not found"}},
)


async def _get_order_or_404(db: AsyncSession, order_id: int) -> ord_models.Order:
    db_order = await ord_crud.order.get_full(db, order_id)
    if db_order is None:
        raise HTTPException(status_code=404, detail="Order not found.")
    return db_order


# =============================================================================
# 1. ord.stores 엔드포인트
# =============================================================================
@router.post("/stores", response_model=ord_schemas.StoreRead, status_code=status.HTTP_201_CREATED)
async def create_store(
    store_in: ord_schemas.StoreCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    return await ord_crud.store.create(db, obj_in=store_in)


@router.get("/stores", response_model=List[ord_schemas.StoreRead])
async def read_stores(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("orders.view")),
):
    return await ord_crud.store.get_multi(db)


@router.put("/stores/{store_id}", response_model=ord_schemas.StoreRead)
async def update_store(
    store_id: int,
    store_in: ord_schemas.StoreUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    db_store = await ord_crud.store.get(db, id=store_id)
    if db_store is None:
        raise HTTPException(status_code=404, detail="Store not found.")
    return await ord_crud.store.update(db, db_obj=db_store, obj_in=store_in)


# =============================================================================
# 2. ord.orders 엔드포인트
# =============================================================================
@router.post("/orders", response_model=ord_schemas.OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_in: ord_schemas.OrderCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("orders.edit")),
):
    return await ord_crud.order.create(db, obj_in=order_in)


@router.get("/orders", response_model=ord_schemas.OrderList)
async def read_orders(
    search: Optional[str] = None,
    store_id: Optional[int] = None,
    billing_company_id: Optional[int] = None,
    intercompany_status: Optional[ord_models.IntercompanyStatus] = None,
    skip: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("orders.view")),
):
    items, total = await ord_crud.order.list(
        db,
        search=search,
        store_id=store_id,
        billing_company_id=billing_company_id,
        intercompany_status=intercompany_status,
        skip=skip,
        limit=limit,
    )
    return {"items": items, "total": total}


@router.get("/orders/{order_id}", response_model=ord_schemas.OrderRead)
async def read_order(
    order_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("orders.view")),
):
    return await _get_order_or_404(db, order_id)


@router.put("/orders/{order_id}", response_model=ord_schemas.OrderRead)
async def update_order(
    order_id: int,
    order_in: ord_schemas.OrderUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("orders.edit")),
):
    db_order = await _get_order_or_404(db, order_id)
    return await ord_crud.order.update(db, db_obj=db_order, obj_in=order_in)


@router.post("/orders/{order_id}/invoice", response_model=ord_schemas.OrderRead)
async def record_order_invoice(
    order_id: int,
    invoice_in: ord_schemas.InvoiceRecord,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("orders.edit")),
):
    """주문에 발행된 인보이스 번호를 기록하고 주문 라인만큼 재고를 차감합니다 (SALE)."""
    db_order = await _get_order_or_404(db, order_id)
    await ord_crud.order.record_invoice(
        db, db_obj=db_order, invoice_number=invoice_in.invoice_number, issued_at=invoice_in.issued_at
    )
    await inv_services.process_order_stock(db, order_id=order_id, user=current_user)
    return await ord_crud.order.get_full(db, order_id)
