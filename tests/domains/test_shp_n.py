# tests/domains/test_shp_n.py

"""
'shp' 도메인 (AWB, 택배 인계) 관련 테스트 모듈입니다.

서비스 함수 테스트는 고정된 시각(NOW)을 주입하여 업무일 경계에 영향을 받지 않도록 합니다.
NOW = 2026-03-10 12:00 UTC (Europe/Bucharest 14:00)
"""

from datetime import date, datetime, timedelta, UTC
from decimal import Decimal
from types import SimpleNamespace

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.ord import models as ord_models
from app.domains.shared import models as shared_models
from app.domains.shp import crud as shp_crud
from app.domains.shp import courier_statuses
from app.domains.shp import handover
from app.domains.shp import models as shp_models
from app.domains.usr import models as usr_models

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)
TODAY = date(2026, 3, 10)


# =================================================================================
# 0. 테스트를 위한 Fixture 설정
# =================================================================================
@pytest.fixture(scope="function")
def awb_factory(db_session: AsyncSession, test_store: ord_models.Store):
    """주문 1건과 AWB 1건을 만드는 팩토리"""
    async def _create(awb_number: str, created_at: datetime = NOW - timedelta(hours=2), **awb_fields) -> shp_models.AWB:
        order = ord_models.Order(
            order_number=f"#{awb_number[-4:]}",
            store_id=test_store.id,
            customer_name="Ion Popescu",
            shipping_city="Cluj-Napoca",
            total_price=Decimal("150.00"),
            line_items=[
                ord_models.OrderLineItem(sku="SKU-001", title="Tricou", variant_title="M", quantity=2, price=Decimal("50")),
                ord_models.OrderLineItem(sku="SKU-002", title="Sapca", variant_title="Default Title", quantity=1, price=Decimal("50")),
            ],
        )
        db_session.add(order)
        await db_session.flush()
        awb = shp_models.AWB(awb_number=awb_number, order_id=order.id, created_at=created_at, **awb_fields)
        db_session.add(awb)
        await db_session.commit()
        await db_session.refresh(awb)
        return awb
    return _create


# =================================================================================
# 1. 순수 함수
# =================================================================================
def test_format_products_skips_default_variant():
    """(성공) 'Default Title' 옵션은 상품 문자열에서 생략된다"""
    items = [
        SimpleNamespace(title="Tricou", variant_title="M", quantity=2),
        SimpleNamespace(title="Sapca", variant_title="Default Title", quantity=1),
        SimpleNamespace(title="Geanta", variant_title=None, quantity=3),
    ]
    assert handover.format_products(items) == "2x Tricou - M, 1x Sapca, 3x Geanta"


@pytest.mark.parametrize(
    "code, expected",
    [
        ("C0", "in_transit"),
        ("H2", "in_transit"),
        ("A3", "cancelled"),
    ],
)
def test_map_courier_codes(code, expected):
    """(성공) 택배사 상태 범주가 AWB 상태로 변환된다"""
    status = courier_statuses.get_courier_status(code)
    assert status is not None
    assert courier_statuses.map_to_awb_status(status) == expected


def test_unknown_courier_code():
    """(성공) 알 수 없는 코드는 None"""
    assert courier_statuses.get_courier_status("ZZ9") is None
    assert courier_statuses.is_pickup_status("C1") is True
    assert courier_statuses.is_pickup_status("H0") is False


# =================================================================================
# 2. AWB 스캔
# =================================================================================
@pytest.mark.asyncio
async def test_scan_rejects_short_code(db_session: AsyncSession, test_warehouse_user: usr_models.User):
    """(실패) 5자 미만 코드는 유효한 AWB가 아니다"""
    result = await handover.scan_awb(db_session, " 123 ", test_warehouse_user, now=NOW)
    assert result.success is False
    assert result.type == "error"
    assert result.message == "Codul scanat nu este un număr AWB valid"
    assert result.details is None


@pytest.mark.asyncio
async def test_scan_unknown_awb(db_session: AsyncSession, test_warehouse_user: usr_models.User):
    """(실패) 존재하지 않는 AWB"""
    result = await handover.scan_awb(db_session, "9999900001", test_warehouse_user, now=NOW)
    assert result.success is False
    assert result.message == "AWB-ul 9999900001 nu există în sistem"
    assert result.details.awb_number == "9999900001"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, message",
    [
        ("cancelled", "AWB-ul {awb} a fost anulat și nu poate fi scanat"),
        ("deleted", "AWB-ul {awb} a fost anulat și nu poate fi scanat"),
        ("delivered", "AWB-ul {awb} este deja marcat ca livrat"),
        ("returned", "AWB-ul {awb} este în retur și nu poate fi predat"),
    ],
)
async def test_scan_rejects_inactive_awb(
    db_session: AsyncSession, test_warehouse_user: usr_models.User, awb_factory, status, message
):
    """(실패) 취소/배송완료/반송 AWB는 스캔할 수 없다"""
    awb = await awb_factory("1000000001", current_status=status)
    result = await handover.scan_awb(db_session, awb.awb_number, test_warehouse_user, now=NOW)
    assert result.success is False
    assert result.message == message.format(awb=awb.awb_number)
    await db_session.refresh(awb)
    assert awb.handed_over_at is None


@pytest.mark.asyncio
async def test_scan_success_and_duplicate(
    db_session: AsyncSession, test_warehouse_user: usr_models.User, awb_factory
):
    """(성공→실패) 첫 스캔은 성공, 같은 날 두 번째 스캔은 오류"""
    awb = await awb_factory("1000000002")

    result = await handover.scan_awb(db_session, "  1000000002 ", test_warehouse_user, now=NOW)
    assert result.success is True
    assert result.type == "success"
    assert result.message == "✓ AWB 1000000002 scanat cu succes"
    assert result.awb.products == "2x Tricou - M, 1x Sapca"
    assert result.awb.store_name == "Magazin Test"
    assert result.awb.handed_over_by_name == "Dan Depozit"

    await db_session.refresh(awb)
    assert awb.handed_over_at == NOW
    assert awb.handover_session_id is not None

    again = await handover.scan_awb(db_session, "1000000002", test_warehouse_user, now=NOW + timedelta(minutes=5))
    assert again.success is False
    assert again.message == "AWB-ul a fost deja scanat azi la 14:00"
    assert again.details.previous_scan_date == NOW


@pytest.mark.asyncio
async def test_rescan_from_previous_day(
    db_session: AsyncSession, test_warehouse_user: usr_models.User, awb_factory
):
    """(경고) 이전 날 스캔된 AWB는 오늘 인계로 다시 기록된다"""
    yesterday = NOW - timedelta(days=1)
    awb = await awb_factory("1000000003", created_at=yesterday - timedelta(hours=1), handed_over_at=yesterday)

    result = await handover.scan_awb(db_session, awb.awb_number, test_warehouse_user, now=NOW)
    assert result.success is True
    assert result.type == "warning"
    assert result.message == "AWB-ul a fost scanat pe 09.03.2026. Va fi marcat ca predat pentru azi."

    await db_session.refresh(awb)
    assert awb.handed_over_at == NOW
    assert awb.handed_over_note == "Rescanat. Scanat anterior pe 09.03.2026"


@pytest.mark.asyncio
async def test_scan_not_handed_over_awb(
    db_session: AsyncSession, test_warehouse_user: usr_models.User, awb_factory
):
    """(경고) NEPREDAT AWB를 스캔하면 플래그가 해제되고 오늘 인계로 이동한다"""
    awb = await awb_factory(
        "1000000004", created_at=NOW - timedelta(days=2), not_handed_over=True, not_handed_over_at=NOW - timedelta(days=2),
    )

    result = await handover.scan_awb(db_session, awb.awb_number, test_warehouse_user, now=NOW)
    assert result.type == "warning"
    assert result.details.was_not_handed_over is True
    assert result.message == "AWB-ul este din 08.03.2026 și era marcat NEPREDAT. A fost mutat în predările de azi."

    await db_session.refresh(awb)
    assert awb.not_handed_over is False
    assert awb.not_handed_over_at is None
    assert awb.handed_over_note == "Fost NEPREDAT din 08.03.2026"


@pytest.mark.asyncio
async def test_scan_endpoint_returns_200_for_errors(warehouse_client: AsyncClient):
    """(실패) 스캔 오류도 200 응답의 success=False로 반환된다"""
    response = await warehouse_client.post("/api/v1/shp/handover/scan", json={"awb_number": "12"})
    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["type"] == "error"


@pytest.mark.asyncio
async def test_scan_forbidden_for_general_user(authorized_client: AsyncClient):
    """(실패) 권한: 일반 사용자는 스캔할 수 없다"""
    response = await authorized_client.post("/api/v1/shp/handover/scan", json={"awb_number": "1000000099"})
    assert response.status_code == 403


# =================================================================================
# 3. 목록 / 통계
# =================================================================================
@pytest.mark.asyncio
async def test_today_list_and_stats(
    db_session: AsyncSession, test_warehouse_user: usr_models.User, awb_factory
):
    """(성공) 오늘 목록에는 미스캔 활성 AWB만 포함되고 통계가 일치한다"""
    await awb_factory("2000000001")
    scanned = await awb_factory("2000000002")
    await awb_factory("2000000003", current_status="cancelled")
    await awb_factory("2000000004", created_at=NOW - timedelta(days=3))
    await awb_factory("2000000005", current_status=None)
    old = await awb_factory("2000000006", created_at=NOW - timedelta(days=1))

    await handover.scan_awb(db_session, scanned.awb_number, test_warehouse_user, now=NOW)
    await handover.scan_awb(db_session, old.awb_number, test_warehouse_user, now=NOW)

    today = await handover.get_today_handover_list(db_session, now=NOW)
    assert [a.awb_number for a in today] == ["2000000001", "2000000005"]

    stats = await handover.get_today_stats(db_session, now=NOW)
    assert stats.total_issued == 4
    assert stats.total_handed_over == 1
    assert stats.total_pending == 3
    assert stats.total_from_prev_days == 1
    assert stats.session_status == shp_models.HandoverSessionStatus.OPEN


# =================================================================================
# 4. 마감 / 재개
# =================================================================================
@pytest.mark.asyncio
async def test_finalize_marks_pending_as_not_handed(
    db_session: AsyncSession, test_manager: usr_models.User, test_warehouse_user: usr_models.User, awb_factory
):
    """(성공) 마감 시 미스캔 AWB는 NEPREDAT로 표시되고 세션은 CLOSED가 된다"""
    pending = await awb_factory("3000000001")
    scanned = await awb_factory("3000000002")
    cancelled = await awb_factory("3000000003", current_status="cancelled")
    await handover.scan_awb(db_session, scanned.awb_number, test_warehouse_user, now=NOW)

    result = await handover.finalize_handover(
        db_session, test_manager.id, test_manager.display_name, shp_models.CloseType.MANUAL, now=NOW
    )
    assert result.not_handed_over_count == 1
    assert result.message == "Predarea a fost finalizată. 1 AWB-uri marcate ca NEPREDAT."

    await db_session.refresh(pending)
    await db_session.refresh(cancelled)
    assert pending.not_handed_over is True
    assert pending.not_handed_over_at == NOW
    assert cancelled.not_handed_over is False

    session = await handover._get_session(db_session, TODAY)
    assert session.status == shp_models.HandoverSessionStatus.CLOSED
    assert session.closed_by_name == "Maria Manager"
    assert session.close_type == shp_models.CloseType.MANUAL
    assert session.total_issued == 3
    assert session.total_handed_over == 1
    assert session.total_not_handed == 1

    not_handed = await handover.get_not_handed_over_list(db_session)
    assert [a.awb_number for a in not_handed] == ["3000000001"]


@pytest.mark.asyncio
async def test_reopen_handover(db_session: AsyncSession, test_manager: usr_models.User):
    """(실패→성공) 세션이 없거나 열려 있으면 재개 불가, 마감 후에는 재개 가능"""
    result = await handover.reopen_handover(db_session, test_manager, now=NOW)
    assert result.success is False
    assert result.message == "Nu există o sesiune de predare pentru azi."

    await handover.get_today_session(db_session, now=NOW)
    result = await handover.reopen_handover(db_session, test_manager, now=NOW)
    assert result.success is False
    assert result.message == "Predarea este deja deschisă."

    await handover.finalize_handover(db_session, test_manager.id, "Maria Manager", shp_models.CloseType.MANUAL, now=NOW)
    result = await handover.reopen_handover(db_session, test_manager, now=NOW)
    assert result.success is True

    session = await handover._get_session(db_session, TODAY)
    assert session.status == shp_models.HandoverSessionStatus.OPEN
    assert session.reopened_by_name == "Maria Manager"


@pytest.mark.asyncio
async def test_finalize_endpoint_requires_manager(warehouse_client: AsyncClient, manager_client: AsyncClient):
    """(실패→성공) 마감은 매니저 이상만 가능"""
    response = await warehouse_client.post("/api/v1/shp/handover/finalize")
    assert response.status_code == 403

    response = await manager_client.post("/api/v1/shp/handover/finalize")
    assert response.status_code == 200
    assert response.json()["success"] is True

    # 열린 세션이 아니므로 두 번째 재개 요청은 400
    response = await manager_client.post("/api/v1/shp/handover/reopen")
    assert response.status_code == 200
    response = await manager_client.post("/api/v1/shp/handover/reopen")
    assert response.status_code == 400


# =================================================================================
# 5. 자동 마감
# =================================================================================
@pytest.mark.asyncio
async def test_auto_finalize_only_at_configured_minute(db_session: AsyncSession, awb_factory):
    """(성공) 설정 시각(기본 20:00 현지)에만 자동 마감되고 한 번만 실행된다"""
    await awb_factory("4000000001", created_at=NOW)
    close_at = datetime(2026, 3, 10, 18, 0, tzinfo=UTC)  # 20:00 Europe/Bucharest

    assert await handover.check_auto_finalize(db_session, now=close_at - timedelta(minutes=1)) is False
    assert await handover.check_auto_finalize(db_session, now=close_at) is True
    assert await handover.check_auto_finalize(db_session, now=close_at + timedelta(seconds=30)) is False

    session = await handover._get_session(db_session, TODAY)
    assert session.status == shp_models.HandoverSessionStatus.CLOSED
    assert session.close_type == shp_models.CloseType.AUTO
    assert session.closed_by is None
    assert session.closed_by_name == "System (Auto)"


@pytest.mark.asyncio
async def test_auto_finalize_uses_db_setting(db_session: AsyncSession):
    """(성공) DB에 저장된 마감 시각이 환경 설정보다 우선한다"""
    db_session.add(shared_models.AppSettings(id=1, handover_auto_close_time="17:30"))
    await db_session.commit()

    at = datetime(2026, 3, 10, 15, 30, tzinfo=UTC)  # 17:30 Europe/Bucharest
    assert await handover.check_auto_finalize(db_session, now=at) is True


# =================================================================================
# 6. C0 경보
# =================================================================================
@pytest.mark.asyncio
async def test_courier_pickup_without_scan_raises_c0_alert(
    db_session: AsyncSession, test_warehouse_user: usr_models.User, awb_factory
):
    """(성공) 스캔 없이 C0 상태가 오면 경보가 켜지고 mark_handed로 해소된다"""
    awb = await awb_factory("5000000001")
    picked_up = NOW - timedelta(minutes=30)

    updated = await shp_crud.awb.apply_courier_status(db_session, db_obj=awb, code="c0", event_at=picked_up)
    assert updated.courier_status_code == "C0"
    assert updated.current_status == "in_transit"
    assert updated.has_c0_without_scan is True
    assert updated.c0_received_at == picked_up

    alerts = await handover.get_c0_alerts(db_session, now=NOW)
    assert [a.awb_number for a in alerts] == ["5000000001"]

    result = await handover.resolve_c0_alert(db_session, awb.id, "mark_handed", test_warehouse_user, now=NOW)
    assert result.success is True

    await db_session.refresh(awb)
    assert awb.has_c0_without_scan is False
    assert awb.handed_over_at == picked_up
    assert awb.handed_over_note == handover.C0_HANDED_NOTE

    again = await handover.resolve_c0_alert(db_session, awb.id, "ignore", test_warehouse_user, now=NOW)
    assert again.success is False


@pytest.mark.asyncio
async def test_scanned_awb_gets_no_c0_alert(
    db_session: AsyncSession, test_warehouse_user: usr_models.User, awb_factory
):
    """(성공) 이미 스캔된 AWB는 C0 수신 시 경보가 생기지 않는다"""
    awb = await awb_factory("5000000002")
    await handover.scan_awb(db_session, awb.awb_number, test_warehouse_user, now=NOW)
    awb = await shp_crud.awb.get_full(db_session, awb.id)

    updated = await shp_crud.awb.apply_courier_status(db_session, db_obj=awb, code="C0", event_at=NOW)
    assert updated.has_c0_without_scan is False


@pytest.mark.asyncio
async def test_unknown_courier_status_keeps_current_status(db_session: AsyncSession, awb_factory):
    """(성공) 알 수 없는 코드는 기록만 하고 상태를 유지한다"""
    awb = await awb_factory("5000000003")
    updated = await shp_crud.awb.apply_courier_status(db_session, db_obj=awb, code="X9")
    assert updated.current_status == "created"
    assert updated.courier_status_name == "Status necunoscut"
    assert updated.courier_status_desc == "Codul X9 nu este recunoscut"


@pytest.mark.asyncio
async def test_resolve_all_c0_alerts_ignore(
    db_session: AsyncSession, test_warehouse_user: usr_models.User, awb_factory
):
    """(성공) 일괄 무시하면 오늘 경보가 모두 해제되고 건수가 반환된다"""
    for number in ("5000000010", "5000000011"):
        awb = await awb_factory(number)
        await handover.mark_c0_without_scan(db_session, awb.id, NOW)
    await db_session.commit()

    result = await handover.resolve_all_c0_alerts(db_session, "ignore", test_warehouse_user, now=NOW)
    assert result.count == 2
    assert result.message == "2 alerte ignorate."
    assert await handover.get_c0_alerts(db_session, now=NOW) == []


@pytest.mark.asyncio
async def test_resolve_c0_invalid_action(db_session: AsyncSession, test_warehouse_user: usr_models.User):
    """(실패) 허용되지 않은 처리 방식"""
    with pytest.raises(handover.HandoverError):
        await handover.resolve_c0_alert(db_session, 1, "delete", test_warehouse_user, now=NOW)


# =================================================================================
# 7. 일자별 보고서
# =================================================================================
@pytest.mark.asyncio
async def test_handover_report(
    db_session: AsyncSession, test_manager: usr_models.User, test_warehouse_user: usr_models.User, awb_factory
):
    """(성공) 보고서는 인계/미인계/이전 발행 목록과 세션 정보를 포함한다"""
    scanned = await awb_factory("6000000001")
    await awb_factory("6000000002")
    old = await awb_factory("6000000003", created_at=NOW - timedelta(days=2))
    await handover.scan_awb(db_session, scanned.awb_number, test_warehouse_user, now=NOW)
    await handover.scan_awb(db_session, old.awb_number, test_warehouse_user, now=NOW)
    await handover.finalize_handover(db_session, test_manager.id, "Maria Manager", shp_models.CloseType.MANUAL, now=NOW)

    report = await handover.get_handover_report(db_session, TODAY)
    assert report.stats.total_issued == 2
    assert [a.awb_number for a in report.handed_over_list] == ["6000000001"]
    assert [a.awb_number for a in report.not_handed_over_list] == ["6000000002"]
    assert [a.awb_number for a in report.from_prev_days_list] == ["6000000003"]
    assert report.stats.total_pending == 0
    assert report.session.status == shp_models.HandoverSessionStatus.CLOSED
    assert report.closed_by == "Maria Manager"


@pytest.mark.asyncio
async def test_report_endpoint_validates_date(office_client: AsyncClient):
    """(실패) 잘못된 날짜 형식은 422"""
    response = await office_client.get("/api/v1/shp/handover/report", params={"date": "10-03-2026"})
    assert response.status_code == 422

    response = await office_client.get("/api/v1/shp/handover/report", params={"date": "2026-03-10"})
    assert response.status_code == 200
    assert response.json()["session"] is None


# =================================================================================
# 8. AWB CRUD
# =================================================================================
@pytest.mark.asyncio
async def test_create_awb_rejects_duplicates(office_client: AsyncClient, db_session: AsyncSession, test_store: ord_models.Store):
    """(성공→실패) AWB 생성 후 같은 번호는 400"""
    order = ord_models.Order(order_number="#7001", store_id=test_store.id)
    db_session.add(order)
    await db_session.commit()
    await db_session.refresh(order)

    payload = {"awb_number": "7000000001", "order_id": order.id}
    response = await office_client.post("/api/v1/shp/awbs", json=payload)
    assert response.status_code == 201, response.text
    assert response.json()["current_status"] == "created"

    response = await office_client.post("/api/v1/shp/awbs", json=payload)
    assert response.status_code == 400

    response = await office_client.post("/api/v1/shp/awbs", json={"awb_number": "7000000002", "order_id": 999999})
    assert response.status_code == 404

    awbs = (await db_session.execute(select(shp_models.AWB).where(shp_models.AWB.order_id == order.id))).scalars().all()
    assert len(awbs) == 1
