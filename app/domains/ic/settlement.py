# app/domains/ic/settlement.py

"""
법인간 정산(decontare) 서비스.

주 법인이 보조 법인 명의로 청구된 주문에 대해 인보이스를 발행합니다.
정산 금액은 주문 판매가가 아닌 매입 단가(InventoryItem.cost_price)를 기준으로 하며,
마크업은 품목별이 아닌 소계 전체에 적용됩니다.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import and_, exists, or_
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.numbering import generate_yearly_count_number
from app.domains.inv import models as inv_models
from app.domains.ord import models as ord_models
from app.domains.shp import models as shp_models
from app.utils import dates
from . import models as ic_models
from . import schemas as ic_schemas

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

Order = ord_models.Order
InvoiceStatus = ic_models.IntercompanyInvoiceStatus

NO_ELIGIBLE_ORDERS = "Nu exista comenzi eligibile pentru decontare"
DEFAULT_MARKUP = Decimal("10")
CENT = Decimal("0.01")


class SettlementError(Exception):
    """정산 규칙 위반. 라우터에서 400(또는 404) 응답으로 변환됩니다."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def round2(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def processed_at(order: ord_models.Order) -> datetime:
    return order.invoice_issued_at or order.created_at


# =============================================================================
# 1. 법인 / 대상 주문 조회
# =============================================================================
async def get_primary_company(db: AsyncSession) -> Optional[ic_models.Company]:
    result = await db.execute(
        select(ic_models.Company).where(
            ic_models.Company.is_primary.is_(True), ic_models.Company.is_active.is_(True)
        )
    )
    return result.scalars().first()


async def get_secondary_companies(db: AsyncSession) -> List[ic_models.Company]:
    result = await db.execute(
        select(ic_models.Company)
        .where(ic_models.Company.is_primary.is_(False), ic_models.Company.is_active.is_(True))
        .order_by(ic_models.Company.name)
    )
    return result.scalars().all()


async def _get_settleable_company(db: AsyncSession, company_id: int) -> ic_models.Company:
    company = await db.get(ic_models.Company, company_id)
    if company is None:
        raise SettlementError("Firma nu a fost gasita", status_code=404)
    if company.is_primary:
        raise SettlementError("Compania primara nu poate fi decontata")
    return company


def _eligible_conditions(company_id: int):
    collected_awb = exists().where(
        shp_models.AWB.order_id == Order.id, shp_models.AWB.is_collected.is_(True)
    )
    return (
        Order.billing_company_id == company_id,
        Order.intercompany_status == ord_models.IntercompanyStatus.PENDING.value,
        or_(
            and_(Order.payment_type == ord_models.PaymentType.COD.value, collected_awb),
            Order.financial_status == ord_models.FinancialStatus.PAID.value,
        ),
    )


async def get_eligible_orders(
    db: AsyncSession,
    company_id: int,
    period_start: Optional[datetime] = None,
    period_end: Optional[datetime] = None,
    for_update: bool = False,
) -> List[ord_models.Order]:
    """
    정산 대상 주문: 해당 법인 청구, 정산 대기(pending),
    COD는 택배 대금 회수 완료 / 온라인은 결제 완료.
    기간이 주어지면 인보이스 발행 시각(invoice_issued_at)으로 거릅니다.
    """
    query = select(Order).where(*_eligible_conditions(company_id))
    if period_start:
        query = query.where(Order.invoice_issued_at >= period_start)
    if period_end:
        query = query.where(Order.invoice_issued_at <= period_end)
    if for_update:
        query = query.with_for_update(of=Order)
    result = await db.execute(query.order_by(Order.created_at.asc(), Order.id.asc()))
    return result.scalars().all()


async def _get_selected_orders(
    db: AsyncSession, company_id: int, order_ids: List[int], for_update: bool = False
) -> List[ord_models.Order]:
    query = select(Order).where(
        Order.id.in_(order_ids),
        Order.billing_company_id == company_id,
        Order.intercompany_status == ord_models.IntercompanyStatus.PENDING.value,
    )
    if for_update:
        query = query.with_for_update(of=Order)
    result = await db.execute(query.order_by(Order.created_at.asc(), Order.id.asc()))
    return result.scalars().all()


async def get_cost_prices(db: AsyncSession, skus: Iterable[str]) -> Dict[str, Optional[Decimal]]:
    skus = list(set(skus))
    if not skus:
        return {}
    result = await db.execute(
        select(inv_models.InventoryItem.sku, inv_models.InventoryItem.cost_price).where(
            inv_models.InventoryItem.sku.in_(skus)
        )
    )
    return {sku: cost for sku, cost in result.all()}


# =============================================================================
# 2. 정산 계산
# =============================================================================
def build_settlement(
    company: ic_models.Company,
    orders: List[ord_models.Order],
    cost_prices: Dict[str, Optional[Decimal]],
    period_start: Optional[datetime] = None,
    period_end: Optional[datetime] = None,
) -> ic_schemas.SettlementPreview:
    """
    주문 품목을 sku(없으면 title) 기준으로 합산하여 정산서를 만듭니다.
    매입 단가가 없는 품목은 0으로 계산되고 키마다 한 번 경고가 추가됩니다.
    """
    markup = Decimal(company.intercompany_markup) if company.intercompany_markup is not None else DEFAULT_MARKUP
    products: Dict[str, Dict] = {}
    warnings: List[str] = []
    order_views: List[ic_schemas.SettlementOrder] = []

    for order in orders:
        order_cost = Decimal("0")
        for item in order.line_items:
            key = item.sku or item.title
            cost = cost_prices.get(item.sku) if item.sku else None
            if cost is None and f"{key}: Pret achizitie lipsa" not in warnings:
                warnings.append(f"{key}: Pret achizitie lipsa")

            line_cost = Decimal(cost or 0) * item.quantity
            order_cost += line_cost
            product = products.setdefault(
                key, {"sku": item.sku or "N/A", "title": item.title, "quantity": 0, "total_cost": Decimal("0")}
            )
            product["quantity"] += item.quantity
            product["total_cost"] += line_cost

        order_views.append(ic_schemas.SettlementOrder(
            id=order.id,
            order_number=order.order_number,
            total_price=Decimal(order.total_price),
            cost_total=round2(order_cost),
            processed_at=processed_at(order),
            product_count=sum(item.quantity for item in order.line_items),
            payment_type=order.payment_type,
        ))

    lines = [
        ic_schemas.SettlementLine(
            sku=product["sku"],
            title=product["title"],
            quantity=product["quantity"],
            unit_cost=round2(product["total_cost"] / product["quantity"]) if product["quantity"] else Decimal("0.00"),
            markup=markup,
            line_total=round2(product["total_cost"] * (1 + markup / 100)),
        )
        for product in products.values()
    ]

    subtotal = sum((product["total_cost"] for product in products.values()), Decimal("0"))
    markup_amount = round2(subtotal * markup / 100)
    processed = sorted(view.processed_at for view in order_views)

    return ic_schemas.SettlementPreview(
        company_id=company.id,
        company_name=company.name,
        company_code=company.code,
        period_start=period_start or (processed[0] if processed else dates.now_utc()),
        period_end=period_end or (processed[-1] if processed else dates.now_utc()),
        orders=order_views,
        line_items=lines,
        warnings=warnings,
        total_orders=len(order_views),
        total_items=sum(line.quantity for line in lines),
        subtotal=round2(subtotal),
        markup_percent=markup,
        markup_amount=markup_amount,
        total=round2(subtotal + markup_amount),
    )


async def _settle(
    db: AsyncSession,
    company: ic_models.Company,
    orders: List[ord_models.Order],
    period_start: Optional[datetime],
    period_end: Optional[datetime],
) -> Optional[ic_schemas.SettlementPreview]:
    if not orders:
        return None
    skus = (item.sku for order in orders for item in order.line_items if item.sku)
    cost_prices = await get_cost_prices(db, skus)
    return build_settlement(company, orders, cost_prices, period_start, period_end)


async def calculate_settlement(
    db: AsyncSession,
    company_id: int,
    period_start: Optional[datetime] = None,
    period_end: Optional[datetime] = None,
) -> Optional[ic_schemas.SettlementPreview]:
    """기간 기준 정산 미리보기. 대상 주문이 없으면 None."""
    company = await _get_settleable_company(db, company_id)
    orders = await get_eligible_orders(db, company_id, period_start, period_end)
    return await _settle(db, company, orders, period_start, period_end)


async def calculate_settlement_from_orders(
    db: AsyncSession, company_id: int, order_ids: List[int]
) -> Optional[ic_schemas.SettlementPreview]:
    """선택한 주문 기준 정산 미리보기. 기간은 주문 처리 시각의 최소/최대값입니다."""
    company = await _get_settleable_company(db, company_id)
    orders = await _get_selected_orders(db, company_id, order_ids)
    return await _settle(db, company, orders, None, None)


# =============================================================================
# 3. 인보이스 발행 / 입금 처리
# =============================================================================
async def get_invoice(db: AsyncSession, invoice_id: int) -> Optional[ic_models.IntercompanyInvoice]:
    result = await db.execute(
        select(ic_models.IntercompanyInvoice)
        .where(ic_models.IntercompanyInvoice.id == invoice_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def generate_intercompany_invoice(
    db: AsyncSession,
    company_id: int,
    period_start: Optional[datetime] = None,
    period_end: Optional[datetime] = None,
    order_ids: Optional[List[int]] = None,
) -> ic_models.IntercompanyInvoice:
    """
    정산 인보이스를 발행합니다. 인보이스, 주문 연결, 주문 상태(settled) 변경이 한 트랜잭션으로 저장됩니다.
    대상 주문은 FOR UPDATE로 잠가 동시 발행을 막습니다.
    """
    company = await _get_settleable_company(db, company_id)
    if order_ids is not None:
        orders = await _get_selected_orders(db, company_id, order_ids, for_update=True)
    else:
        orders = await get_eligible_orders(db, company_id, period_start, period_end, for_update=True)

    preview = await _settle(db, company, orders, period_start, period_end)
    if preview is None:
        raise SettlementError(NO_ELIGIBLE_ORDERS)

    primary = await get_primary_company(db)
    if primary is None:
        raise SettlementError("Nu exista firma primara configurata")

    now = dates.now_utc()
    invoice = ic_models.IntercompanyInvoice(
        invoice_number=await generate_yearly_count_number(db, ic_models.IntercompanyInvoice, "invoice_number", "IC"),
        issued_by_company_id=primary.id,
        received_by_company_id=company.id,
        period_start=preview.period_start,
        period_end=preview.period_end,
        total_value=preview.total,
        total_vat=Decimal("0"),
        total_with_vat=preview.total,
        total_items=preview.total_orders,
        status=InvoiceStatus.PENDING,
        line_items=[line.model_dump(mode="json") for line in preview.line_items],
        markup_percent=preview.markup_percent,
        issued_at=now,
        order_links=[
            ic_models.IntercompanyOrderLink(order_id=view.id, amount=view.cost_total) for view in preview.orders
        ],
    )
    db.add(invoice)
    for order in orders:
        order.intercompany_status = ord_models.IntercompanyStatus.SETTLED
        db.add(order)
    await db.commit()

    logger.info(
        "Intercompany invoice %s issued to %s: %d order(s), total %s",
        invoice.invoice_number, company.code, preview.total_orders, preview.total,
    )
    return await get_invoice(db, invoice.id)


async def mark_invoice_paid(db: AsyncSession, invoice_id: int) -> ic_models.IntercompanyInvoice:
    invoice = await get_invoice(db, invoice_id)
    if invoice is None:
        raise SettlementError("Factura nu a fost gasita", status_code=404)
    if invoice.status == InvoiceStatus.PAID:
        raise SettlementError("Factura este deja platita")

    invoice.status = InvoiceStatus.PAID
    invoice.paid_at = dates.now_utc()
    db.add(invoice)
    await db.commit()
    logger.info("Intercompany invoice %s marked as paid", invoice.invoice_number)
    return await get_invoice(db, invoice.id)


async def get_invoices(
    db: AsyncSession,
    company_id: Optional[int] = None,
    status: Optional[InvoiceStatus] = None,
    skip: int = 0,
    limit: int = 50,
) -> Tuple[List[ic_models.IntercompanyInvoice], int]:
    query = select(ic_models.IntercompanyInvoice)
    if company_id:
        query = query.where(ic_models.IntercompanyInvoice.received_by_company_id == company_id)
    if status:
        query = query.where(ic_models.IntercompanyInvoice.status == status)

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(
        query.order_by(ic_models.IntercompanyInvoice.created_at.desc(), ic_models.IntercompanyInvoice.id.desc())
        .offset(skip).limit(limit)
    )
    return result.scalars().all(), total


async def get_settlement_summary(db: AsyncSession) -> List[ic_schemas.CompanySettlementSummary]:
    """보조 법인별 정산 대기 주문 수/금액과 미입금 인보이스 수/금액."""
    summary = []
    for company in await get_secondary_companies(db):
        pending = await db.execute(
            select(func.count(), func.coalesce(func.sum(Order.total_price), 0)).where(*_eligible_conditions(company.id))
        )
        pending_orders, pending_value = pending.one()
        unpaid = await db.execute(
            select(
                func.count(), func.coalesce(func.sum(ic_models.IntercompanyInvoice.total_with_vat), 0)
            ).where(
                ic_models.IntercompanyInvoice.received_by_company_id == company.id,
                ic_models.IntercompanyInvoice.status == InvoiceStatus.PENDING.value,
            )
        )
        unpaid_invoices, unpaid_value = unpaid.one()
        summary.append(ic_schemas.CompanySettlementSummary(
            company_id=company.id,
            company_code=company.code,
            company_name=company.name,
            pending_orders=pending_orders,
            pending_value=round2(pending_value),
            unpaid_invoices=unpaid_invoices,
            unpaid_value=round2(unpaid_value),
        ))
    return summary


# =============================================================================
# 4. 주간 정산 (cron, 매주 월요일)
# =============================================================================
def weekly_period(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """오늘 현지 자정 이전 7일 구간."""
    period_end, _ = dates.today_window(now)
    return period_end - timedelta(days=7), period_end


async def run_weekly_settlement(db: AsyncSession, now: Optional[datetime] = None) -> ic_schemas.WeeklySettlementResult:
    """
    활성 보조 법인마다 지난 7일 정산 인보이스를 발행합니다.
    대상 주문이 없는 법인은 실패가 아닌 건너뜀(skipped)으로 집계됩니다.
    한 법인의 오류는 롤백 후 failed로 집계하고 다음 법인을 계속 처리합니다.
    """
    period_start, period_end = weekly_period(now)
    processed = skipped = failed = 0
    results = []

    # 롤백 후에는 ORM 객체가 만료되므로 필요한 값만 미리 꺼내 둡니다.
    companies = [(c.id, c.code, c.name) for c in await get_secondary_companies(db)]
    for company_id, company_code, company_name in companies:
        entry = {"company_id": company_id, "company_name": company_name, "success": False}
        try:
            invoice = await generate_intercompany_invoice(db, company_id, period_start, period_end)
        except SettlementError as e:
            entry["error"] = e.message
            if e.message == NO_ELIGIBLE_ORDERS:
                skipped += 1
            else:
                failed += 1
                logger.warning("Weekly settlement failed for %s: %s", company_code, e.message)
        except Exception as e:
            await db.rollback()
            entry["error"] = str(e)
            failed += 1
            logger.exception("Weekly settlement error for %s", company_code)
        else:
            entry.update(success=True, invoice_number=invoice.invoice_number)
            processed += 1
        results.append(entry)

    logger.info("Weekly settlement done: %d invoice(s), %d skipped, %d failed", processed, skipped, failed)
    return ic_schemas.WeeklySettlementResult(processed=processed, skipped=skipped, failed=failed, results=results)
