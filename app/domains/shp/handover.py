# app/domains/shp/handover.py

"""
택배 인계(predare) 업무 로직.

- 목록 1: 오늘 인계 대상 (오늘 발행, 아직 스캔되지 않은 AWB)
- 목록 2: 미인계(NEPREDAT) AWB
- AWB 스캔, 일일 마감/재개, C0 경보(스캔 없이 택배사 픽업 확인), 일자별 보고서
- 설정된 시각(HH:MM)에 실행되는 자동 마감

'오늘'은 settings.TIMEZONE 기준 자정부터 24시간 구간입니다 (app.utils.dates).
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import and_, or_, update
from sqlalchemy.dialects.postgresql import insert
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.ord import models as ord_models
from app.domains.shared import crud as shared_crud
from app.domains.usr import models as usr_models
from app.utils import dates
from . import models as shp_models
from . import schemas as shp_schemas

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

AWB = shp_models.AWB
AwbStatus = shp_models.AwbStatus
SessionStatus = shp_models.HandoverSessionStatus

MIN_AWB_LENGTH = 5
DEFAULT_VARIANT = "Default Title"
C0_HANDED_NOTE = "Marcat automat pe baza confirmării FanCourier (C0)"
SYSTEM_USER_NAME = "System (Auto)"
INACTIVE_STATUSES = (AwbStatus.CANCELLED.value, AwbStatus.DELETED.value)


class HandoverError(Exception):
    """인계 처리 규칙 위반. 라우터에서 400 응답으로 변환됩니다."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


# =============================================================================
# 1. 헬퍼
# =============================================================================
def format_products(line_items: Iterable) -> str:
    """'2x 상품 - 옵션, 1x 상품' 형식의 상품 문자열을 만듭니다."""
    parts = []
    for item in line_items:
        name = item.title
        if item.variant_title and item.variant_title != DEFAULT_VARIANT:
            name += f" - {item.variant_title}"
        parts.append(f"{item.quantity}x {name}")
    return ", ".join(parts)


def to_handover_awb(awb: shp_models.AWB) -> shp_schemas.HandoverAWB:
    order = awb.order
    store = order.store if order else None
    return shp_schemas.HandoverAWB(
        id=awb.id,
        awb_number=awb.awb_number,
        order_id=awb.order_id,
        order_number=order.order_number if order else "-",
        store_id=store.id if store else None,
        store_name=store.name if store else "-",
        recipient_name=(order.customer_name if order else None) or "-",
        recipient_city=(order.shipping_city if order else None) or "-",
        products=format_products(order.line_items) if order and order.line_items else "-",
        courier_status_code=awb.courier_status_code,
        courier_status_name=awb.courier_status_name,
        courier_status_desc=awb.courier_status_desc,
        handed_over_at=awb.handed_over_at,
        handed_over_by_name=awb.handed_over_by_name,
        handed_over_note=awb.handed_over_note,
        not_handed_over=awb.not_handed_over,
        not_handed_over_at=awb.not_handed_over_at,
        has_c0_without_scan=awb.has_c0_without_scan,
        c0_received_at=awb.c0_received_at,
        created_at=awb.created_at,
    )


def _active_status():
    # 상태가 NULL인 AWB도 활성으로 간주
    return or_(AWB.current_status.is_(None), AWB.current_status.notin_(INACTIVE_STATUSES))


def _created_between(start: datetime, end: datetime):
    return and_(AWB.created_at >= start, AWB.created_at < end, AWB.awb_number.isnot(None))


def _with_store(query, store_id: Optional[int]):
    if store_id:
        query = query.join(ord_models.Order, ord_models.Order.id == AWB.order_id).where(
            ord_models.Order.store_id == store_id
        )
    return query


async def _count(db: AsyncSession, *conditions, store_id: Optional[int] = None) -> int:
    query = _with_store(select(func.count()).select_from(AWB), store_id).where(*conditions)
    return (await db.execute(query)).scalar_one()


async def _list(db: AsyncSession, *conditions, order_by, store_id: Optional[int] = None) -> List[shp_schemas.HandoverAWB]:
    query = _with_store(select(AWB), store_id).where(*conditions).order_by(*order_by)
    result = await db.execute(query.execution_options(populate_existing=True))
    return [to_handover_awb(awb) for awb in result.scalars().all()]


async def _get_session(db: AsyncSession, day: date) -> Optional[shp_models.HandoverSession]:
    result = await db.execute(
        select(shp_models.HandoverSession)
        .where(shp_models.HandoverSession.date == day)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_or_create_session(db: AsyncSession, day: date) -> shp_models.HandoverSession:
    """해당 업무일의 세션을 반환하며, 없으면 OPEN 상태로 만듭니다. 커밋은 호출자가 합니다."""
    await db.execute(
        insert(shp_models.HandoverSession)
        .values(
            date=day,
            status=SessionStatus.OPEN.value,
            total_issued=0,
            total_handed_over=0,
            total_not_handed=0,
            total_from_prev_days=0,
        )
        .on_conflict_do_nothing(index_elements=[shp_models.HandoverSession.date])
    )
    return await _get_session(db, day)


# =============================================================================
# 2. 목록 / 통계
# =============================================================================
async def get_today_handover_list(
    db: AsyncSession, store_id: Optional[int] = None, now: Optional[datetime] = None
) -> List[shp_schemas.HandoverAWB]:
    start, end = dates.today_window(now)
    return await _list(
        db,
        _created_between(start, end),
        AWB.handed_over_at.is_(None),
        _active_status(),
        order_by=(AWB.created_at.asc(), AWB.id.asc()),
        store_id=store_id,
    )


async def compute_stats(
    db: AsyncSession, start: datetime, end: datetime, store_id: Optional[int] = None
) -> shp_schemas.HandoverStats:
    created = _created_between(start, end)
    return shp_schemas.HandoverStats(
        total_issued=await _count(db, created, store_id=store_id),
        total_handed_over=await _count(db, created, AWB.handed_over_at.isnot(None), store_id=store_id),
        total_not_handed_over=await _count(db, created, AWB.not_handed_over.is_(True), store_id=store_id),
        total_pending=await _count(
            db, created, AWB.handed_over_at.is_(None), AWB.not_handed_over.is_(False), store_id=store_id
        ),
        total_from_prev_days=await _count(
            db, AWB.created_at < start, AWB.handed_over_at >= start, AWB.handed_over_at < end, store_id=store_id
        ),
        total_c0_alerts=await _count(db, created, AWB.has_c0_without_scan.is_(True), store_id=store_id),
    )


async def get_today_stats(
    db: AsyncSession, store_id: Optional[int] = None, now: Optional[datetime] = None
) -> shp_schemas.TodayStats:
    start, end = dates.today_window(now)
    stats = await compute_stats(db, start, end, store_id)
    session = await _get_session(db, dates.local_today(now))
    return shp_schemas.TodayStats(
        **stats.model_dump(),
        session_status=session.status if session else None,
        closed_at=session.closed_at if session else None,
        closed_by=session.closed_by_name if session else None,
    )


async def get_not_handed_over_list(
    db: AsyncSession, store_id: Optional[int] = None
) -> List[shp_schemas.HandoverAWB]:
    return await _list(
        db,
        AWB.not_handed_over.is_(True),
        AWB.awb_number.isnot(None),
        order_by=(AWB.created_at.desc(), AWB.id.desc()),
        store_id=store_id,
    )


async def get_today_session(
    db: AsyncSession, now: Optional[datetime] = None
) -> Tuple[shp_models.HandoverSession, shp_schemas.HandoverStats]:
    session = await get_or_create_session(db, dates.local_today(now))
    await db.commit()
    start, end = dates.today_window(now)
    return session, await compute_stats(db, start, end)


# =============================================================================
# 3. 스캔
# =============================================================================
def _error(message: str, awb_number: Optional[str] = None, order_number: str = "-", **extra) -> shp_schemas.ScanResult:
    details = shp_schemas.ScanDetails(awb_number=awb_number, order_number=order_number, **extra) if awb_number else None
    return shp_schemas.ScanResult(success=False, message=message, type="error", details=details)


async def scan_awb(
    db: AsyncSession, awb_number: str, user: usr_models.User, now: Optional[datetime] = None
) -> shp_schemas.ScanResult:
    """
    AWB를 인계 스캔합니다. 오류도 예외가 아닌 ScanResult(type="error")로 반환됩니다.
    """
    now = now or dates.now_utc()
    clean = (awb_number or "").strip()
    if len(clean) < MIN_AWB_LENGTH:
        return _error("Codul scanat nu este un număr AWB valid")

    result = await db.execute(
        select(AWB).where(AWB.awb_number == clean).with_for_update().execution_options(populate_existing=True)
    )
    awb = result.scalars().first()
    if awb is None:
        return _error(f"AWB-ul {clean} nu există în sistem", clean)

    order_number = awb.order.order_number if awb.order else "-"
    status = awb.current_status
    if status in INACTIVE_STATUSES:
        return _error(f"AWB-ul {clean} a fost anulat și nu poate fi scanat", clean, order_number)
    if status == AwbStatus.DELIVERED:
        return _error(f"AWB-ul {clean} este deja marcat ca livrat", clean, order_number)
    if status == AwbStatus.RETURNED:
        return _error(f"AWB-ul {clean} este în retur și nu poate fi predat", clean, order_number)

    start, end = dates.today_window(now)
    previous_scan = awb.handed_over_at
    if previous_scan and start <= previous_scan < end:
        return _error(
            f"AWB-ul a fost deja scanat azi la {dates.format_local_time(previous_scan)}",
            clean, order_number, previous_scan_date=previous_scan,
        )

    if previous_scan:
        scanned_on = dates.format_local_date(previous_scan)
        note = f"Rescanat. Scanat anterior pe {scanned_on}"
        outcome = ("warning", f"AWB-ul a fost scanat pe {scanned_on}. Va fi marcat ca predat pentru azi.")
        details = shp_schemas.ScanDetails(awb_number=clean, order_number=order_number, previous_scan_date=previous_scan)
    elif awb.not_handed_over:
        created_on = dates.format_local_date(awb.created_at)
        note = f"Fost NEPREDAT din {created_on}"
        outcome = (
            "warning",
            f"AWB-ul este din {created_on} și era marcat NEPREDAT. A fost mutat în predările de azi.",
        )
        details = shp_schemas.ScanDetails(awb_number=clean, order_number=order_number, was_not_handed_over=True)
    else:
        note = None
        outcome = ("success", f"✓ AWB {clean} scanat cu succes")
        details = shp_schemas.ScanDetails(awb_number=clean, order_number=order_number)

    session = await get_or_create_session(db, dates.local_today(now))
    awb.handed_over_at = now
    awb.handed_over_by = user.id
    awb.handed_over_by_name = user.display_name
    awb.handed_over_note = note
    awb.not_handed_over = False
    awb.not_handed_over_at = None
    awb.has_c0_without_scan = False
    awb.handover_session_id = session.id
    db.add(awb)
    await db.commit()
    logger.info("AWB %s handed over by %s (%s)", clean, user.login_id, outcome[0])

    return shp_schemas.ScanResult(
        success=True, message=outcome[1], type=outcome[0], awb=to_handover_awb(awb), details=details
    )


# =============================================================================
# 4. 마감 / 재개
# =============================================================================
async def finalize_handover(
    db: AsyncSession,
    user_id: Optional[int],
    user_name: str,
    close_type: shp_models.CloseType,
    now: Optional[datetime] = None,
) -> shp_schemas.FinalizeResult:
    """
    오늘 스캔되지 않은 AWB를 NEPREDAT로 표시하고 오늘 세션을 CLOSED로 저장합니다.
    자동 마감은 user_id=None, user_name="System (Auto)"로 호출됩니다.
    """
    now = now or dates.now_utc()
    start, end = dates.today_window(now)

    result = await db.execute(
        update(AWB)
        .where(
            _created_between(start, end),
            AWB.handed_over_at.is_(None),
            AWB.not_handed_over.is_(False),
            _active_status(),
        )
        .values(not_handed_over=True, not_handed_over_at=now)
        .execution_options(synchronize_session=False)
    )
    marked = result.rowcount

    stats = await compute_stats(db, start, end)
    session = await get_or_create_session(db, dates.local_today(now))
    session.status = SessionStatus.CLOSED
    session.closed_at = now
    session.closed_by = user_id
    session.closed_by_name = user_name
    session.close_type = close_type
    session.total_issued = stats.total_issued
    session.total_handed_over = stats.total_handed_over
    session.total_not_handed = stats.total_not_handed_over
    session.total_from_prev_days = stats.total_from_prev_days
    db.add(session)
    await db.commit()
    logger.info("Handover %s closed (%s) by %s: %d AWB(s) marked NEPREDAT", session.date, close_type.value, user_name, marked)

    return shp_schemas.FinalizeResult(
        not_handed_over_count=marked,
        message=f"Predarea a fost finalizată. {marked} AWB-uri marcate ca NEPREDAT.",
        stats=stats,
    )


async def reopen_handover(
    db: AsyncSession, user: usr_models.User, now: Optional[datetime] = None
) -> shp_schemas.ActionResult:
    now = now or dates.now_utc()
    session = await _get_session(db, dates.local_today(now))
    if session is None:
        return shp_schemas.ActionResult(success=False, message="Nu există o sesiune de predare pentru azi.")
    if session.status == SessionStatus.OPEN:
        return shp_schemas.ActionResult(success=False, message="Predarea este deja deschisă.")

    session.status = SessionStatus.OPEN
    session.reopened_at = now
    session.reopened_by = user.id
    session.reopened_by_name = user.display_name
    db.add(session)
    await db.commit()
    logger.info("Handover %s reopened by %s", session.date, user.login_id)
    return shp_schemas.ActionResult(success=True, message="Predarea a fost redeschisă.")


# =============================================================================
# 5. C0 경보
# =============================================================================
async def get_c0_alerts(
    db: AsyncSession, store_id: Optional[int] = None, now: Optional[datetime] = None
) -> List[shp_schemas.HandoverAWB]:
    start, end = dates.today_window(now)
    return await _list(
        db,
        _created_between(start, end),
        AWB.has_c0_without_scan.is_(True),
        order_by=(AWB.c0_received_at.desc().nulls_last(), AWB.id.desc()),
        store_id=store_id,
    )


def _mark_handed_from_c0(awb: shp_models.AWB, user: usr_models.User, session_id: int, now: datetime) -> None:
    awb.handed_over_at = awb.c0_received_at or now
    awb.handed_over_by = user.id
    awb.handed_over_by_name = user.display_name
    awb.handed_over_note = C0_HANDED_NOTE
    awb.has_c0_without_scan = False
    awb.handover_session_id = session_id


def _check_action(action: str) -> None:
    if action not in ("mark_handed", "ignore"):
        raise HandoverError(f"Actiune invalida: {action}")


async def resolve_c0_alert(
    db: AsyncSession, awb_id: int, action: str, user: usr_models.User, now: Optional[datetime] = None
) -> shp_schemas.ActionResult:
    _check_action(action)
    now = now or dates.now_utc()
    awb = await db.get(AWB, awb_id, with_for_update=True)
    if awb is None:
        return shp_schemas.ActionResult(success=False, message="AWB-ul nu a fost găsit.")
    if not awb.has_c0_without_scan:
        return shp_schemas.ActionResult(success=False, message="AWB-ul nu are o alertă C0 activă.")

    if action == "mark_handed":
        session = await get_or_create_session(db, dates.local_today(now))
        _mark_handed_from_c0(awb, user, session.id, now)
        message = "AWB-ul a fost marcat ca predat."
    else:
        awb.has_c0_without_scan = False
        message = "Alerta a fost ignorată. AWB-ul rămâne nescanat."
    db.add(awb)
    await db.commit()
    return shp_schemas.ActionResult(success=True, message=message)


async def resolve_all_c0_alerts(
    db: AsyncSession,
    action: str,
    user: usr_models.User,
    store_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> shp_schemas.ActionResult:
    _check_action(action)
    now = now or dates.now_utc()
    start, end = dates.today_window(now)
    query = _with_store(select(AWB), store_id).where(
        AWB.created_at >= start, AWB.created_at < end, AWB.has_c0_without_scan.is_(True)
    )
    awbs = (await db.execute(query.with_for_update(of=AWB))).scalars().all()

    if action == "mark_handed":
        session = await get_or_create_session(db, dates.local_today(now))
        for awb in awbs:
            _mark_handed_from_c0(awb, user, session.id, now)
            db.add(awb)
        message = f"{len(awbs)} AWB-uri marcate ca predate."
    else:
        for awb in awbs:
            awb.has_c0_without_scan = False
            db.add(awb)
        message = f"{len(awbs)} alerte ignorate."
    await db.commit()
    return shp_schemas.ActionResult(success=True, message=message, count=len(awbs))


async def mark_c0_without_scan(db: AsyncSession, awb_id: int, c0_at: datetime) -> bool:
    """
    택배사 픽업(C0/C1)이 수신되었지만 내부 스캔이 없는 AWB에 경보 플래그를 설정합니다.
    커밋은 호출자가 합니다.
    """
    awb = await db.get(AWB, awb_id)
    if awb is None or awb.handed_over_at is not None:
        return False
    awb.has_c0_without_scan = True
    awb.c0_received_at = c0_at
    db.add(awb)
    logger.info("C0 without scan flagged for AWB %s", awb.awb_number)
    return True


# =============================================================================
# 6. 보고서
# =============================================================================
async def get_handover_report(
    db: AsyncSession, day: date, store_id: Optional[int] = None
) -> shp_schemas.HandoverReport:
    start, end = dates.day_window(day)
    created = _created_between(start, end)

    handed = await _list(
        db, created, AWB.handed_over_at.isnot(None),
        order_by=(AWB.handed_over_at.asc(), AWB.id.asc()), store_id=store_id,
    )
    not_handed = await _list(
        db, created, AWB.not_handed_over.is_(True),
        order_by=(AWB.created_at.asc(), AWB.id.asc()), store_id=store_id,
    )
    from_prev_days = await _list(
        db, AWB.created_at < start, AWB.handed_over_at >= start, AWB.handed_over_at < end,
        order_by=(AWB.handed_over_at.asc(), AWB.id.asc()), store_id=store_id,
    )
    total_issued = await _count(db, created, store_id=store_id)
    session = await _get_session(db, day)

    stats = shp_schemas.HandoverStats(
        total_issued=total_issued,
        total_handed_over=len(handed),
        total_not_handed_over=len(not_handed),
        total_pending=total_issued - len(handed) - len(not_handed),
        total_from_prev_days=len(from_prev_days),
        total_c0_alerts=0,
    )
    return shp_schemas.HandoverReport(
        date=day,
        stats=stats,
        session=shp_schemas.HandoverSessionRead.model_validate(session) if session else None,
        closed_at=session.closed_at if session else None,
        closed_by=session.closed_by_name if session else None,
        close_type=session.close_type if session else None,
        handed_over_list=handed,
        not_handed_over_list=not_handed,
        from_prev_days_list=from_prev_days,
    )


# =============================================================================
# 7. 자동 마감 (cron, 매분)
# =============================================================================
async def check_auto_finalize(db: AsyncSession, now: Optional[datetime] = None) -> bool:
    """
    현지 시각의 시:분이 설정된 마감 시각과 같고 오늘 세션이 OPEN이면 자동 마감합니다.
    """
    now = now or dates.now_utc()
    close_time = await shared_crud.app_settings.get_handover_close_time(db)
    close_hour, close_minute = (int(part) for part in close_time.split(":"))

    local_now = dates.to_local(now)
    if (local_now.hour, local_now.minute) != (close_hour, close_minute):
        return False

    session = await get_or_create_session(db, dates.local_today(now))
    if session.status != SessionStatus.OPEN:
        await db.commit()
        return False

    await finalize_handover(db, None, SYSTEM_USER_NAME, shp_models.CloseType.AUTO, now=now)
    return True
