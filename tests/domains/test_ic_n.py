# tests/domains/test_ic_n.py

"""
'ic' 도메인 (법인, 법인간 정산) 관련 테스트 모듈입니다.

- build_settlement 금액 계산 (매입 단가 기준, 소계 전체에 마크업)
- 정산 인보이스 발행 / 입금 처리 API
- 주간 정산 실행
"""

from datetime import datetime, timedelta, UTC
from decimal import Decimal
from types import SimpleNamespace

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.numbering import generate_yearly_count_number
from app.domains.ic import models as ic_models
from app.domains.ic import settlement
from app.domains.ord import models as ord_models
from app.domains.shp import models as shp_models

ISSUED_AT = datetime(2026, 3, 12, 10, 0, tzinfo=UTC)


# =================================================================================
# 0. 테스트를 위한 Fixture 설정
# =================================================================================
def _line(sku, title, quantity):
    return SimpleNamespace(sku=sku, title=title, quantity=quantity)


def _order(id, lines, issued_at=ISSUED_AT):
    return SimpleNamespace(
        id=id, order_number=f"#{id}", total_price=Decimal("100.00"), invoice_issued_at=issued_at,
        created_at=issued_at, payment_type="cod", line_items=lines,
    )


@pytest.fixture(scope="function")
def settlement_order_factory(db_session: AsyncSession, test_store: ord_models.Store):
    """법인 청구 주문을 만드는 팩토리. collected=True이면 회수 완료된 AWB도 만듭니다."""
    async def _create(
        company_id: int,
        order_number: str,
        payment_type: str = "cod",
        financial_status: str = "pending",
        collected: bool = False,
        quantity: int = 2,
        issued_at: datetime = ISSUED_AT,
    ) -> ord_models.Order:
        order = ord_models.Order(
            order_number=order_number,
            store_id=test_store.id,
            payment_type=payment_type,
            financial_status=financial_status,
            total_price=Decimal("80.00"),
            billing_company_id=company_id,
            intercompany_status=ord_models.IntercompanyStatus.PENDING,
            invoice_number=f"F-{order_number}",
            invoice_issued_at=issued_at,
            line_items=[ord_models.OrderLineItem(sku="SKU-001", title="Produs Test", quantity=quantity, price=Decimal("40"))],
        )
        db_session.add(order)
        await db_session.flush()
        if collected:
            db_session.add(shp_models.AWB(awb_number=f"AWB{order.id:07d}", order_id=order.id, is_collected=True))
        await db_session.commit()
        await db_session.refresh(order)
        return order
    return _create


# =================================================================================
# 1. 정산 계산 (순수 함수)
# =================================================================================
def test_build_settlement_aggregates_by_sku():
    """(성공) 품목은 sku(없으면 title) 기준으로 합산되고 마크업은 소계에 적용된다"""
    company = ic_models.Company(id=5, code="SEC", name="Firma Secundara SRL", intercompany_markup=Decimal("10"))
    orders = [
        _order(1, [_line("SKU-A", "Tricou", 2), _line("SKU-B", "Sapca", 1)]),
        _order(2, [_line("SKU-A", "Tricou", 1), _line(None, "Cadou", 1)], issued_at=ISSUED_AT + timedelta(days=1)),
    ]
    preview = settlement.build_settlement(company, orders, {"SKU-A": Decimal("10.00"), "SKU-B": None})

    assert preview.total_orders == 2
    assert preview.total_items == 5
    assert preview.subtotal == Decimal("30.00")
    assert preview.markup_amount == Decimal("3.00")
    assert preview.total == Decimal("33.00")
    assert preview.warnings == ["SKU-B: Pret achizitie lipsa", "Cadou: Pret achizitie lipsa"]

    lines = {line.title: line for line in preview.line_items}
    assert lines["Tricou"].quantity == 3
    assert lines["Tricou"].unit_cost == Decimal("10.00")
    assert lines["Tricou"].line_total == Decimal("33.00")
    assert lines["Cadou"].sku == "N/A"
    assert lines["Sapca"].line_total == Decimal("0.00")

    assert [o.cost_total for o in preview.orders] == [Decimal("20.00"), Decimal("10.00")]
    assert preview.period_start == ISSUED_AT
    assert preview.period_end == ISSUED_AT + timedelta(days=1)
    assert preview.order_ids == [1, 2]


def test_build_settlement_zero_markup():
    """(성공) 마크업 0은 기본값(10)으로 대체되지 않는다"""
    company = ic_models.Company(id=5, code="SEC", name="Firma", intercompany_markup=Decimal("0"))
    preview = settlement.build_settlement(company, [_order(1, [_line("SKU-A", "Tricou", 3)])], {"SKU-A": Decimal("2.50")})
    assert preview.markup_amount == Decimal("0.00")
    assert preview.total == preview.subtotal == Decimal("7.50")


def test_build_settlement_rounds_half_up():
    """(성공) 금액은 소수 둘째 자리에서 반올림(ROUND_HALF_UP)된다"""
    company = ic_models.Company(id=5, code="SEC", name="Firma", intercompany_markup=Decimal("10"))
    preview = settlement.build_settlement(company, [_order(1, [_line("SKU-A", "Tricou", 1)])], {"SKU-A": Decimal("0.25")})
    assert preview.subtotal == Decimal("0.25")
    assert preview.markup_amount == Decimal("0.03")
    assert preview.total == Decimal("0.28")


def test_weekly_period_is_previous_seven_days():
    """(성공) 주간 정산 구간은 오늘 현지 자정 이전 7일"""
    start, end = settlement.weekly_period(datetime(2026, 3, 16, 5, 0, tzinfo=UTC))
    assert end - start == timedelta(days=7)
    assert end == datetime(2026, 3, 15, 22, 0, tzinfo=UTC)


# =================================================================================
# 2. 대상 주문
# =================================================================================
@pytest.mark.asyncio
async def test_eligible_orders(
    db_session: AsyncSession, primary_company: ic_models.Company, secondary_company: ic_models.Company,
    settlement_order_factory,
):
    """(성공) COD는 대금 회수 완료, 온라인은 결제 완료 주문만 대상이다"""
    cod_collected = await settlement_order_factory(secondary_company.id, "#1001", collected=True)
    online_paid = await settlement_order_factory(secondary_company.id, "#1002", payment_type="online", financial_status="paid")
    await settlement_order_factory(secondary_company.id, "#1003")
    await settlement_order_factory(primary_company.id, "#1004", collected=True)

    orders = await settlement.get_eligible_orders(db_session, secondary_company.id)
    assert {o.id for o in orders} == {cod_collected.id, online_paid.id}


@pytest.mark.asyncio
async def test_preview_for_primary_company_fails(office_client: AsyncClient, primary_company: ic_models.Company):
    """(실패) 주 법인은 정산 대상이 될 수 없다"""
    response = await office_client.post("/api/v1/ic/settlement/preview", json={"company_id": primary_company.id})
    assert response.status_code == 400
    assert response.json()["detail"] == "Compania primara nu poate fi decontata"


@pytest.mark.asyncio
async def test_preview_rejects_period_and_orders(office_client: AsyncClient, secondary_company: ic_models.Company):
    """(실패) 기간과 주문 목록을 동시에 지정할 수 없다"""
    payload = {"company_id": secondary_company.id, "order_ids": [1], "period_start": "2026-03-01T00:00:00Z"}
    response = await office_client.post("/api/v1/ic/settlement/preview", json=payload)
    assert response.status_code == 422


# =================================================================================
# 3. 인보이스 발행 / 입금
# =================================================================================
@pytest.mark.asyncio
async def test_generate_invoice_and_mark_paid(
    manager_client: AsyncClient, db_session: AsyncSession, test_item,
    primary_company: ic_models.Company, secondary_company: ic_models.Company, settlement_order_factory,
):
    """(성공) 인보이스 발행 시 주문이 settled가 되고, 입금 처리는 한 번만 가능하다"""
    order = await settlement_order_factory(secondary_company.id, "#2001", collected=True, quantity=2)

    response = await manager_client.post("/api/v1/ic/invoices", json={"company_id": secondary_company.id})
    assert response.status_code == 201, response.text
    invoice = response.json()
    assert invoice["invoice_number"].startswith("IC-")
    assert invoice["invoice_number"].endswith("-00001")
    assert invoice["issued_by_company_id"] == primary_company.id
    assert invoice["received_by_company_id"] == secondary_company.id
    assert invoice["status"] == "pending"
    # 2 x 12.50 = 25.00, +10% = 27.50
    assert Decimal(str(invoice["total_value"])) == Decimal("27.50")
    assert Decimal(str(invoice["total_with_vat"])) == Decimal("27.50")
    assert [link["order_id"] for link in invoice["order_links"]] == [order.id]
    assert Decimal(str(invoice["order_links"][0]["amount"])) == Decimal("25.00")
    assert invoice["line_items"][0]["sku"] == "SKU-001"

    await db_session.refresh(order)
    assert order.intercompany_status == ord_models.IntercompanyStatus.SETTLED

    # 같은 주문으로 두 번째 발행은 불가
    response = await manager_client.post("/api/v1/ic/invoices", json={"company_id": secondary_company.id})
    assert response.status_code == 400
    assert response.json()["detail"] == settlement.NO_ELIGIBLE_ORDERS

    response = await manager_client.post(f"/api/v1/ic/invoices/{invoice['id']}/mark-paid")
    assert response.status_code == 200
    assert response.json()["status"] == "paid"
    assert response.json()["paid_at"] is not None

    response = await manager_client.post(f"/api/v1/ic/invoices/{invoice['id']}/mark-paid")
    assert response.status_code == 400
    assert response.json()["detail"] == "Factura este deja platita"


@pytest.mark.asyncio
async def test_generate_invoice_from_selected_orders(
    db_session: AsyncSession, test_item,
    primary_company: ic_models.Company, secondary_company: ic_models.Company, settlement_order_factory,
):
    """(성공) 선택한 주문만 정산되고 나머지는 대기 상태로 남는다"""
    first = await settlement_order_factory(secondary_company.id, "#3001", collected=True)
    second = await settlement_order_factory(secondary_company.id, "#3002", collected=True)

    invoice = await settlement.generate_intercompany_invoice(db_session, secondary_company.id, order_ids=[first.id])
    assert [link.order_id for link in invoice.order_links] == [first.id]
    assert invoice.period_start == ISSUED_AT

    await db_session.refresh(second)
    assert second.intercompany_status == ord_models.IntercompanyStatus.PENDING


@pytest.mark.asyncio
async def test_generate_invoice_requires_primary_company(
    db_session: AsyncSession, secondary_company: ic_models.Company, settlement_order_factory,
):
    """(실패) 주 법인이 없으면 발행할 수 없고 주문 상태도 바뀌지 않는다"""
    order = await settlement_order_factory(secondary_company.id, "#3101", collected=True)
    with pytest.raises(settlement.SettlementError) as exc_info:
        await settlement.generate_intercompany_invoice(db_session, secondary_company.id)
    assert exc_info.value.message == "Nu exista firma primara configurata"

    await db_session.refresh(order)
    assert order.intercompany_status == ord_models.IntercompanyStatus.PENDING


@pytest.mark.asyncio
async def test_generate_invoice_forbidden_for_office(office_client: AsyncClient, secondary_company: ic_models.Company):
    """(실패) 권한: 발행은 매니저 이상"""
    response = await office_client.post("/api/v1/ic/invoices", json={"company_id": secondary_company.id})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_mark_unknown_invoice_paid(manager_client: AsyncClient):
    """(실패) 존재하지 않는 인보이스는 404"""
    response = await manager_client.post("/api/v1/ic/invoices/999999/mark-paid")
    assert response.status_code == 404


# =================================================================================
# 4. 요약 / 주간 정산
# =================================================================================
@pytest.mark.asyncio
async def test_settlement_summary(
    office_client: AsyncClient, primary_company: ic_models.Company, secondary_company: ic_models.Company,
    settlement_order_factory,
):
    """(성공) 보조 법인별 대기 주문 수와 금액"""
    await settlement_order_factory(secondary_company.id, "#4001", collected=True)
    await settlement_order_factory(secondary_company.id, "#4002", payment_type="online", financial_status="paid")

    response = await office_client.get("/api/v1/ic/settlement/summary")
    assert response.status_code == 200
    summary = response.json()
    assert [s["company_code"] for s in summary] == ["SEC"]
    assert summary[0]["pending_orders"] == 2
    assert Decimal(str(summary[0]["pending_value"])) == Decimal("160.00")
    assert summary[0]["unpaid_invoices"] == 0


@pytest.mark.asyncio
async def test_weekly_settlement_processes_then_skips(
    db_session: AsyncSession, test_item,
    primary_company: ic_models.Company, secondary_company: ic_models.Company, settlement_order_factory,
):
    """(성공) 대상 주문이 있으면 발행, 다시 실행하면 건너뜀으로 집계된다"""
    await settlement_order_factory(secondary_company.id, "#5001", collected=True)
    # 정산 구간(지난 7일) 밖의 주문
    await settlement_order_factory(secondary_company.id, "#5002", collected=True, issued_at=ISSUED_AT - timedelta(days=30))
    monday = datetime(2026, 3, 16, 4, 0, tzinfo=UTC)

    first = await settlement.run_weekly_settlement(db_session, now=monday)
    assert (first.processed, first.skipped, first.failed) == (1, 0, 0)
    assert first.results[0]["invoice_number"].startswith("IC-")

    invoices, total = await settlement.get_invoices(db_session, company_id=secondary_company.id)
    assert total == 1
    assert len(invoices[0].order_links) == 1

    second = await settlement.run_weekly_settlement(db_session, now=monday)
    assert (second.processed, second.skipped, second.failed) == (0, 1, 0)
    assert second.results[0]["error"] == settlement.NO_ELIGIBLE_ORDERS


@pytest.mark.asyncio
async def test_weekly_settlement_continues_after_company_error(
    db_session: AsyncSession, test_item, monkeypatch,
    primary_company: ic_models.Company, secondary_company: ic_models.Company, settlement_order_factory,
):
    """(실패→성공) 한 법인에서 예기치 않은 오류가 나도 다음 법인은 계속 정산된다"""
    broken = ic_models.Company(code="AAA", name="Aaa Firma SRL")
    db_session.add(broken)
    await db_session.commit()
    await db_session.refresh(broken)
    broken_id, secondary_id = broken.id, secondary_company.id
    await settlement_order_factory(broken_id, "#5101", collected=True)
    await settlement_order_factory(secondary_id, "#5102", collected=True)

    real_generate = settlement.generate_intercompany_invoice

    async def _generate(db, company_id, *args, **kwargs):
        if company_id == broken_id:
            raise RuntimeError("connection lost")
        return await real_generate(db, company_id, *args, **kwargs)

    monkeypatch.setattr(settlement, "generate_intercompany_invoice", _generate)
    result = await settlement.run_weekly_settlement(db_session, now=datetime(2026, 3, 16, 4, 0, tzinfo=UTC))

    assert (result.processed, result.skipped, result.failed) == (1, 0, 1)
    by_company = {entry["company_id"]: entry for entry in result.results}
    assert by_company[broken_id]["error"] == "connection lost"
    assert by_company[secondary_id]["success"] is True


@pytest.mark.asyncio
async def test_invoice_number_restarts_each_year(db_session: AsyncSession, primary_company: ic_models.Company, secondary_company: ic_models.Company):
    """(성공) IC 번호 순번은 연도별로 00001부터 다시 시작한다"""
    db_session.add(ic_models.IntercompanyInvoice(
        invoice_number="IC-2025-00001",
        issued_by_company_id=primary_company.id,
        received_by_company_id=secondary_company.id,
        period_start=datetime(2025, 12, 1, tzinfo=UTC),
        period_end=datetime(2025, 12, 8, tzinfo=UTC),
        total_value=Decimal("10.00"),
        total_vat=Decimal("0"),
        total_with_vat=Decimal("10.00"),
        total_items=1,
        line_items=[],
        markup_percent=Decimal("10"),
        issued_at=datetime(2025, 12, 8, tzinfo=UTC),
    ))
    await db_session.commit()

    assert await generate_yearly_count_number(
        db_session, ic_models.IntercompanyInvoice, "invoice_number", "IC", year=2026
    ) == "IC-2026-00001"
    assert await generate_yearly_count_number(
        db_session, ic_models.IntercompanyInvoice, "invoice_number", "IC", year=2025
    ) == "IC-2025-00002"


# =================================================================================
# 5. 법인 관리
# =================================================================================
@pytest.mark.asyncio
async def test_only_one_primary_company(admin_client: AsyncClient, db_session: AsyncSession, primary_company: ic_models.Company):
    """(성공) 새 주 법인을 지정하면 기존 주 법인은 해제된다"""
    response = await admin_client.post(
        "/api/v1/ic/companies", json={"code": "NEW", "name": "Firma Noua SRL", "is_primary": True}
    )
    assert response.status_code == 201, response.text
    assert response.json()["is_primary"] is True

    await db_session.refresh(primary_company)
    assert primary_company.is_primary is False

    response = await admin_client.post("/api/v1/ic/companies", json={"code": "NEW", "name": "Duplicat"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_company_requires_admin(manager_client: AsyncClient):
    """(실패) 권한: 법인 등록은 관리자만"""
    response = await manager_client.post("/api/v1/ic/companies", json={"code": "X", "name": "X SRL"})
    assert response.status_code == 403
