# app/domains/ic/routers.py

"""
'ic' 도메인 (법인, 법인간 정산)의 API 엔드포인트를 정의하는 모듈입니다.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User as UsrUser
from . import crud as ic_crud
from . import models as ic_models
from . import schemas as ic_schemas
from . import settlement

router = APIRouter(
    tags=["Intercompany (법인간 정산)"],
    responses={404: {"description": "Not found"}},
)


def _to_http(e: settlement.SettlementError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


# =============================================================================
# 1. ic.companies 엔드포인트
# =============================================================================
@router.post("/companies", response_model=ic_schemas.CompanyRead, status_code=status.HTTP_201_CREATED)
async def create_company(
    company_in: ic_schemas.CompanyCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    return await ic_crud.company.create(db, obj_in=company_in)


@router.get("/companies", response_model=List[ic_schemas.CompanyRead])
async def read_companies(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("intercompany.view")),
):
    return await ic_crud.company.get_multi(db)


@router.get("/companies/{company_id}", response_model=ic_schemas.CompanyRead)
async def read_company(
    company_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("intercompany.view")),
):
    db_company = await ic_crud.company.get(db, id=company_id)
    if db_company is None:
        raise HTTPException(status_code=404, detail="Company not found.")
    return db_company


@router.put("/companies/{company_id}", response_model=ic_schemas.CompanyRead)
async def update_company(
    company_id: int,
    company_in: ic_schemas.CompanyUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    db_company = await ic_crud.company.get(db, id=company_id)
    if db_company is None:
        raise HTTPException(status_code=404, detail="Company not found.")
    return await ic_crud.company.update(db, db_obj=db_company, obj_in=company_in)


# =============================================================================
# 2. 정산 엔드포인트
# =============================================================================
@router.get("/settlement/summary", response_model=List[ic_schemas.CompanySettlementSummary])
async def read_settlement_summary(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("intercompany.view")),
):
    return await settlement.get_settlement_summary(db)


@router.get("/settlement/eligible-orders", response_model=List[ic_schemas.EligibleOrder])
async def read_eligible_orders(
    company_id: int,
    period_start: Optional[datetime] = None,
    period_end: Optional[datetime] = None,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("intercompany.view")),
):
    orders = await settlement.get_eligible_orders(db, company_id, period_start, period_end)
    return [
        ic_schemas.EligibleOrder(
            id=order.id,
            order_number=order.order_number,
            total_price=order.total_price,
            processed_at=settlement.processed_at(order),
            payment_type=order.payment_type,
            product_count=sum(item.quantity for item in order.line_items),
        )
        for order in orders
    ]


@router.post("/settlement/preview", response_model=Optional[ic_schemas.SettlementPreview])
async def preview_settlement(
    request_in: ic_schemas.SettlementRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("intercompany.view")),
):
    """대상 주문이 없으면 null을 반환합니다."""
    try:
        if request_in.order_ids is not None:
            return await settlement.calculate_settlement_from_orders(db, request_in.company_id, request_in.order_ids)
        return await settlement.calculate_settlement(
            db, request_in.company_id, request_in.period_start, request_in.period_end
        )
    except settlement.SettlementError as e:
        raise _to_http(e)


@router.post("/invoices", response_model=ic_schemas.IntercompanyInvoiceRead, status_code=status.HTTP_201_CREATED)
async def generate_invoice(
    request_in: ic_schemas.SettlementRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("intercompany.generate")),
):
    try:
        return await settlement.generate_intercompany_invoice(
            db,
            request_in.company_id,
            period_start=request_in.period_start,
            period_end=request_in.period_end,
            order_ids=request_in.order_ids,
        )
    except settlement.SettlementError as e:
        raise _to_http(e)


@router.get("/invoices", response_model=ic_schemas.IntercompanyInvoiceList)
async def read_invoices(
    company_id: Optional[int] = None,
    status_filter: Optional[ic_models.IntercompanyInvoiceStatus] = Query(None, alias="status"),
    skip: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("intercompany.view")),
):
    items, total = await settlement.get_invoices(db, company_id=company_id, status=status_filter, skip=skip, limit=limit)
    return {"items": items, "total": total}


@router.get("/invoices/{invoice_id}", response_model=ic_schemas.IntercompanyInvoiceRead)
async def read_invoice(
    invoice_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("intercompany.view")),
):
    invoice = await settlement.get_invoice(db, invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found.")
    return invoice


@router.post("/invoices/{invoice_id}/mark-paid", response_model=ic_schemas.IntercompanyInvoiceRead)
async def mark_invoice_paid(
    invoice_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("intercompany.mark_paid")),
):
    try:
        return await settlement.mark_invoice_paid(db, invoice_id)
    except settlement.SettlementError as e:
        raise _to_http(e)
