# app/domains/shp/routers.py

"""
'shp' 도메인 (AWB, 택배 인계)의 API 엔드포인트를 정의하는 모듈입니다.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User as UsrUser
from . import crud as shp_crud
from . import handover
from . import models as shp_models
from . import schemas as shp_schemas

router = APIRouter(
    tags=["Shipping & Handover (택배 및 인계)"],
    responses={404: {"description": "Not found"}},
)


async def _get_awb_or_404(db: AsyncSession, awb_id: int) -> shp_models.AWB:
    db_awb = await shp_crud.awb.get_full(db, awb_id)
    if db_awb is None:
        raise HTTPException(status_code=404, detail="AWB not found.")
    return db_awb


def _check_action_result(result: shp_schemas.ActionResult) -> shp_schemas.ActionResult:
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    return result


# =============================================================================
# 1. shp.awbs 엔드포인트
# =============================================================================
@router.post("/awbs", response_model=shp_schemas.AWBRead, status_code=status.HTTP_201_CREATED)
async def create_awb(
    awb_in: shp_schemas.AWBCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("orders.edit")),
):
    return await shp_crud.awb.create(db, obj_in=awb_in)


@router.get("/awbs", response_model=List[shp_schemas.AWBRead])
async def read_awbs(
    order_id: Optional[int] = None,
    current_status: Optional[shp_models.AwbStatus] = None,
    not_handed_over: Optional[bool] = None,
    skip: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("awb.view")),
):
    items, _ = await shp_crud.awb.list(
        db, order_id=order_id, current_status=current_status, not_handed_over=not_handed_over, skip=skip, limit=limit
    )
    return items


@router.get("/awbs/{awb_id}", response_model=shp_schemas.AWBRead)
async def read_awb(
    awb_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("awb.view")),
):
    return await _get_awb_or_404(db, awb_id)


@router.put("/awbs/{awb_id}", response_model=shp_schemas.AWBRead)
async def update_awb(
    awb_id: int,
    awb_in: shp_schemas.AWBUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("awb.track")),
):
    db_awb = await _get_awb_or_404(db, awb_id)
    return await shp_crud.awb.update(db, db_obj=db_awb, obj_in=awb_in)


@router.put("/awbs/{awb_id}/courier-status", response_model=shp_schemas.AWBRead)
async def update_courier_status(
    awb_id: int,
    status_in: shp_schemas.CourierStatusUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("awb.track")),
):
    """택배사 추적 결과(상태 코드)를 반영합니다. 픽업 코드는 미스캔 시 C0 경보를 만듭니다."""
    db_awb = await _get_awb_or_404(db, awb_id)
    return await shp_crud.awb.apply_courier_status(db, db_obj=db_awb, code=status_in.code, event_at=status_in.event_at)


# =============================================================================
# 2. 인계 (Handover) 엔드포인트
# =============================================================================
@router.get("/handover/today", response_model=List[shp_schemas.HandoverAWB])
async def read_today_handover_list(
    store_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.view")),
):
    return await handover.get_today_handover_list(db, store_id=store_id)


@router.get("/handover/today/stats", response_model=shp_schemas.TodayStats)
async def read_today_stats(
    store_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.view")),
):
    return await handover.get_today_stats(db, store_id=store_id)


@router.get("/handover/not-handed", response_model=List[shp_schemas.HandoverAWB])
async def read_not_handed_over_list(
    store_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.view")),
):
    return await handover.get_not_handed_over_list(db, store_id=store_id)


@router.get("/handover/session", response_model=shp_schemas.HandoverSessionWithStats)
async def read_today_session(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.view")),
):
    session, stats = await handover.get_today_session(db)
    return shp_schemas.HandoverSessionWithStats(
        session=shp_schemas.HandoverSessionRead.model_validate(session), stats=stats
    )


@router.post("/handover/scan", response_model=shp_schemas.ScanResult)
async def scan_awb(
    scan_in: shp_schemas.ScanRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.scan")),
):
    """스캔 결과는 항상 200으로 반환되며, 실패 여부는 success/type 필드로 구분합니다."""
    return await handover.scan_awb(db, scan_in.awb_number, current_user)


@router.post("/handover/finalize", response_model=shp_schemas.FinalizeResult)
async def finalize_handover(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.finalize")),
):
    return await handover.finalize_handover(
        db, current_user.id, current_user.display_name, shp_models.CloseType.MANUAL
    )


@router.post("/handover/reopen", response_model=shp_schemas.ActionResult)
async def reopen_handover(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.finalize")),
):
    return _check_action_result(await handover.reopen_handover(db, current_user))


@router.get("/handover/c0-alerts", response_model=List[shp_schemas.HandoverAWB])
async def read_c0_alerts(
    store_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.view")),
):
    return await handover.get_c0_alerts(db, store_id=store_id)


@router.post("/handover/c0-alerts/resolve-all", response_model=shp_schemas.ActionResult)
async def resolve_all_c0_alerts(
    resolve_in: shp_schemas.C0ResolveRequest,
    store_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.scan")),
):
    try:
        return await handover.resolve_all_c0_alerts(db, resolve_in.action, current_user, store_id=store_id)
    except handover.HandoverError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/handover/c0-alerts/{awb_id}/resolve", response_model=shp_schemas.ActionResult)
async def resolve_c0_alert(
    awb_id: int,
    resolve_in: shp_schemas.C0ResolveRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.scan")),
):
    try:
        result = await handover.resolve_c0_alert(db, awb_id, resolve_in.action, current_user)
    except handover.HandoverError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _check_action_result(result)


@router.get("/handover/report", response_model=shp_schemas.HandoverReport)
async def read_handover_report(
    day: date = Query(..., alias="date", description="업무일 (YYYY-MM-DD)"),
    store_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("handover.report")),
):
    return await handover.get_handover_report(db, day, store_id=store_id)
