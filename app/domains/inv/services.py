# app/domains/inv/services.py

"""
'inv' 도메인의 업무 로직 서비스 모듈입니다.

- 입고 검수 보고서(PV): 생성, 품목 검수 입력, 사진 첨부, 확정(NIR 생성)
- 재고 반영: NIR 재고 이전(transfer-to-stock), 직접 입고 완료, 재고 조정
- 주문 재고 차감(SALE)
- 창고 간 이동(TRF): 생성, 수정, 삭제, 실행
"""

import logging
from datetime import datetime, UTC
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.numbering import generate_daily_number, generate_document_number
from app.domains.usr import models as usr_models
from app.domains.ord import models as ord_models
from app.domains.shared import tasks as shared_tasks
from app.utils.dates import local_today
from app.utils import files as file_utils
from . import models as inv_models
from . import schemas as inv_schemas
from . import crud as inv_crud

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

RRStatus = inv_models.ReceptionReportStatus
POStatus = inv_models.PurchaseOrderStatus
NIRStatus = inv_models.GoodsReceiptStatus

EDITABLE_REPORT_STATUSES = (RRStatus.DESCHIS, RRStatus.IN_COMPLETARE)
REQUIRED_PHOTO_CATEGORIES = (
    inv_models.PhotoCategory.OVERVIEW,
    inv_models.PhotoCategory.ETICHETE,
    inv_models.PhotoCategory.FACTURA,
)
DAMAGE_KEYWORD = "deteriora"


class InventoryError(Exception):
    """
    입고/재고 업무 규칙 위반. errors에는 한 번에 보고할 개별 오류 메시지가 담깁니다.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.status_code = status_code


def _ensure_editable(report: inv_models.ReceptionReport) -> None:
    if report.status not in EDITABLE_REPORT_STATUSES:
        raise InventoryError(f"Receptia nu poate fi modificata in starea {report.status}")


async def _get_report(db: AsyncSession, report_id: int) -> inv_models.ReceptionReport:
    report = await inv_crud.reception_report.get_full(db, report_id)
    if report is None:
        raise InventoryError("Receptia nu a fost gasita", status_code=404)
    return report


# =============================================================================
# 1. 입고 검수 보고서 (PV)
# =============================================================================
async def create_reception_report(
    db: AsyncSession, *, obj_in: inv_schemas.ReceptionReportCreate, user: usr_models.User
) -> inv_models.ReceptionReport:
    """
    승인된 발주에서 검수 보고서를 생성합니다. 발주 품목이 검수 라인으로 복사되며,
    발주가 APROBATA 상태였다면 IN_RECEPTIE로 바뀝니다.
    """
    po = await inv_crud.purchase_order.get_full(db, obj_in.purchase_order_id)
    if po is None:
        raise InventoryError("Comanda de achizitie nu a fost gasita", status_code=404)
    if po.status not in (POStatus.APROBATA, POStatus.IN_RECEPTIE):
        raise InventoryError("Receptia se poate crea doar pentru comenzi aprobate sau in receptie")

    open_count = (await db.execute(
        select(func.count()).select_from(inv_models.ReceptionReport).where(
            inv_models.ReceptionReport.purchase_order_id == po.id,
            inv_models.ReceptionReport.status.in_([s.value for s in EDITABLE_REPORT_STATUSES]),
        )
    )).scalar_one()
    if open_count:
        raise InventoryError("Exista deja o receptie deschisa pentru aceasta comanda")

    if obj_in.supplier_invoice_id is not None and not await db.get(inv_models.SupplierInvoice, obj_in.supplier_invoice_id):
        raise InventoryError("Factura furnizor nu a fost gasita", status_code=404)

    report = inv_models.ReceptionReport(
        report_number=await generate_daily_number(db, inv_models.ReceptionReport, "report_number", "PV"),
        purchase_order_id=po.id,
        supplier_invoice_id=obj_in.supplier_invoice_id,
        warehouse_user_id=user.id,
        warehouse_user_name=user.display_name,
        status=RRStatus.DESCHIS,
        items=[
            inv_models.ReceptionReportItem(
                purchase_order_item_id=po_item.id,
                inventory_item_id=po_item.inventory_item_id,
                quantity_expected=po_item.quantity_ordered,
            )
            for po_item in po.items
        ],
    )
    db.add(report)
    if po.status == POStatus.APROBATA:
        po.status = POStatus.IN_RECEPTIE
        db.add(po)
    await db.commit()
    logger.info("Reception report %s created for %s by %s", report.report_number, po.document_number, user.login_id)
    return await inv_crud.reception_report.get_full(db, report.id)


async def update_reception_meta(
    db: AsyncSession, *, report_id: int, obj_in: inv_schemas.ReceptionReportUpdate
) -> inv_models.ReceptionReport:
    report = await _get_report(db, report_id)
    _ensure_editable(report)
    data = obj_in.model_dump(exclude_unset=True)
    if data.get("supplier_invoice_id") is not None and not await db.get(inv_models.SupplierInvoice, data["supplier_invoice_id"]):
        raise InventoryError("Factura furnizor nu a fost gasita", status_code=404)
    for key, value in data.items():
        setattr(report, key, value)
    db.add(report)
    await db.commit()
    return await inv_crud.reception_report.get_full(db, report.id)


async def delete_reception_report(db: AsyncSession, *, report_id: int) -> None:
    """
    DESCHIS 상태의 보고서만 삭제할 수 있습니다. 발주에 남은 보고서가 없으면
    IN_RECEPTIE 발주를 APROBATA로 되돌립니다.
    """
    report = await _get_report(db, report_id)
    if report.status != RRStatus.DESCHIS:
        raise InventoryError("Doar receptiile in starea DESCHIS pot fi sterse")

    photo_paths = [photo.path for photo in report.photos]
    po_id = report.purchase_order_id
    await db.delete(report)
    await db.flush()

    remaining = (await db.execute(
        select(func.count()).select_from(inv_models.ReceptionReport).where(
            inv_models.ReceptionReport.purchase_order_id == po_id
        )
    )).scalar_one()
    if remaining == 0:
        po = await db.get(inv_models.PurchaseOrder, po_id)
        if po and po.status == POStatus.IN_RECEPTIE:
            po.status = POStatus.APROBATA
            db.add(po)
    await db.commit()

    for path in photo_paths:
        file_utils.delete_upload_file(path)


async def update_reception_items(
    db: AsyncSession, *, report_id: int, obj_in: inv_schemas.ReceptionItemsUpdate
) -> inv_models.ReceptionReport:
    """
    검수 라인을 일괄 갱신합니다. 모든 오류를 모은 뒤 하나라도 있으면 아무것도 저장하지 않습니다.
    """
    report = await _get_report(db, report_id)
    _ensure_editable(report)

    lines = {line.id: line for line in report.items}
    errors: List[str] = []
    planned: List[tuple] = []

    for change in obj_in.items:
        line = lines.get(change.item_id)
        if line is None:
            errors.append(f"Linia {change.item_id} nu apartine acestei receptii")
            continue

        received = change.quantity_received if "quantity_received" in change.model_fields_set else line.quantity_received
        observations = change.observations if "observations" in change.model_fields_set else line.observations
        verified = change.verified if change.verified is not None else line.verified
        has_difference = received is not None and Decimal(received) != Decimal(line.quantity_expected)

        if has_difference and not (observations or "").strip():
            sku = line.inventory_item.sku if line.inventory_item else str(line.inventory_item_id)
            errors.append(
                f"Observatii obligatorii pentru {sku} "
                f"(diferenta: asteptat {_fmt_qty(line.quantity_expected)}, primit {_fmt_qty(received)})"
            )
            continue
        planned.append((line, received, verified, observations, has_difference))

    if errors:
        raise InventoryError("Validare esuata", errors=errors)

    for line, received, verified, observations, has_difference in planned:
        line.quantity_received = received
        line.verified = verified
        line.observations = observations
        line.has_difference = has_difference
        db.add(line)

    report.has_differences = any(line.has_difference for line in report.items)
    if report.status == RRStatus.DESCHIS and any(
        line.quantity_received is not None or line.verified for line in report.items
    ):
        report.status = RRStatus.IN_COMPLETARE
    db.add(report)
    await db.commit()
    return await inv_crud.reception_report.get_full(db, report.id)


def _fmt_qty(value: Optional[Decimal]) -> str:
    if value is None:
        return "-"
    return format(Decimal(value).normalize(), "f")


async def add_reception_photo(
    db: AsyncSession,
    *,
    report_id: int,
    category: inv_models.PhotoCategory,
    upload_file: UploadFile,
    user: usr_models.User,
) -> inv_models.ReceptionPhoto:
    report = await _get_report(db, report_id)
    _ensure_editable(report)

    path, size_kb = await file_utils.save_upload_file(f"reception/{report.id}", upload_file)
    photo = inv_models.ReceptionPhoto(
        reception_report_id=report.id,
        category=category,
        path=path,
        original_name=upload_file.filename,
        size_kb=size_kb,
        content_type=upload_file.content_type,
        uploaded_by=user.id,
    )
    db.add(photo)
    await db.commit()
    await db.refresh(photo)
    return photo


async def delete_reception_photo(db: AsyncSession, *, report_id: int, photo_id: int) -> None:
    report = await _get_report(db, report_id)
    _ensure_editable(report)
    photo = await db.get(inv_models.ReceptionPhoto, photo_id)
    if photo is None or photo.reception_report_id != report.id:
        raise InventoryError("Fotografia nu a fost gasita", status_code=404)
    path = photo.path
    await db.delete(photo)
    await db.commit()
    file_utils.delete_upload_file(path)


def collect_finalize_errors(report: inv_models.ReceptionReport) -> List[str]:
    """확정 전 검증. 발견된 모든 문제를 메시지 목록으로 반환합니다."""
    errors: List[str] = []
    items = report.items

    missing_qty = [_sku(line) for line in items if line.quantity_received is None]
    if missing_qty:
        errors.append(f"Cantitate primita lipsa: {', '.join(missing_qty)}")

    unverified = [_sku(line) for line in items if not line.verified]
    if unverified:
        errors.append(f"Neverificate: {', '.join(unverified)}")

    no_obs = [_sku(line) for line in items if line.has_difference and not (line.observations or "").strip()]
    if no_obs:
        errors.append(f"Observatii lipsa pentru diferente: {', '.join(no_obs)}")

    categories = {photo.category for photo in report.photos}
    for category in REQUIRED_PHOTO_CATEGORIES:
        if category.value not in categories:
            errors.append(f"Fotografie {category.value} lipsa")

    mentions_damage = any(DAMAGE_KEYWORD in (line.observations or "").lower() for line in items)
    if mentions_damage and inv_models.PhotoCategory.DETERIORARI.value not in categories:
        errors.append("Fotografie DETERIORARI obligatorie cand se mentioneaza deteriorari")

    if not report.supplier_invoice_id:
        errors.append("Factura furnizor este obligatorie")
    if not report.signature_confirmed:
        errors.append("Confirmati semnatura gestionar")
    return errors


def _sku(line: Any) -> str:
    item = getattr(line, "inventory_item", None)
    return item.sku if item else str(line.inventory_item_id)


async def finalize_reception_report(
    db: AsyncSession, *, report_id: int, user: usr_models.User
) -> inv_schemas.ReceptionFinalizeResult:
    """
    검수 보고서를 확정하고 GENERAT 상태의 NIR을 생성합니다.
    NIR 생성, 보고서 FINALIZAT, 발주 RECEPTIONATA 변경은 한 트랜잭션으로 저장됩니다.
    """
    report = await _get_report(db, report_id)
    if report.status == RRStatus.FINALIZAT:
        raise InventoryError("Receptia este deja finalizata")
    existing_nir = (await db.execute(
        select(inv_models.GoodsReceipt.id).where(inv_models.GoodsReceipt.reception_report_id == report.id)
    )).scalars().first()
    if existing_nir:
        raise InventoryError("Exista deja un NIR pentru aceasta receptie")
    if report.status not in EDITABLE_REPORT_STATUSES:
        raise InventoryError(f"Receptia nu poate fi finalizata in starea {report.status}")

    errors = collect_finalize_errors(report)
    if errors:
        raise InventoryError("Receptia nu poate fi finalizata", errors=errors)

    invoice = report.supplier_invoice
    po = report.purchase_order
    now = datetime.now(UTC)

    nir_items = []
    for line in report.items:
        unit_cost = Decimal(line.inventory_item.cost_price) if line.inventory_item and line.inventory_item.cost_price is not None else Decimal("0")
        nir_items.append(inv_models.GoodsReceiptItem(
            item_id=line.inventory_item_id,
            quantity=line.quantity_received,
            unit_cost=unit_cost,
            total_cost=inv_crud.line_total(line.quantity_received, unit_cost),
            notes=line.observations,
        ))

    nir = inv_models.GoodsReceipt(
        receipt_number=await generate_daily_number(db, inv_models.GoodsReceipt, "receipt_number", "NIR"),
        supplier_id=po.supplier_id if po else None,
        supplier_invoice_id=report.supplier_invoice_id,
        reception_report_id=report.id,
        status=NIRStatus.GENERAT,
        document_number=invoice.invoice_number if invoice else None,
        document_date=invoice.invoice_date if invoice else None,
        has_differences=report.has_differences,
        created_by=user.id,
        created_by_name=user.display_name,
        items=nir_items,
    )
    inv_crud.GoodsReceiptCRUD.apply_totals(nir, nir_items)
    db.add(nir)

    report.status = RRStatus.FINALIZAT
    report.finalized_at = now
    report.finalized_by = user.id
    report.finalized_by_name = user.display_name
    db.add(report)

    if po is not None:
        po.status = POStatus.RECEPTIONATA
        db.add(po)

    await db.commit()
    logger.info("Reception %s finalized -> %s (differences=%s)", report.report_number, nir.receipt_number, nir.has_differences)
    return inv_schemas.ReceptionFinalizeResult(
        reception_report_id=report.id,
        goods_receipt_id=nir.id,
        receipt_number=nir.receipt_number,
        has_differences=nir.has_differences,
    )


# =============================================================================
# 2. 재고 반영
# =============================================================================
async def apply_receipt_to_stock(
    db: AsyncSession,
    *,
    receipt: inv_models.GoodsReceipt,
    warehouse_id: int,
    user: usr_models.User,
) -> List[inv_models.InventoryStockMovement]:
    """
    입고 전표의 각 라인을 창고 재고와 품목 재고에 더하고 RECEIPT 이동 이력을 만듭니다.
    커밋은 호출자가 합니다.
    """
    movements: List[inv_models.InventoryStockMovement] = []
    reason = f"Intrare NIR {receipt.receipt_number} (Fact. {receipt.document_number or '-'})"

    for line in receipt.items:
        quantity = Decimal(line.quantity)
        item = await db.get(inv_models.InventoryItem, line.item_id, with_for_update=True)
        if item is None:
            raise InventoryError(f"Produsul {line.item_id} nu exista", status_code=404)

        stock = (await db.execute(
            select(inv_models.WarehouseStock)
            .where(
                inv_models.WarehouseStock.warehouse_id == warehouse_id,
                inv_models.WarehouseStock.item_id == item.id,
            )
            .with_for_update()
        )).scalars().first()
        if stock is None:
            stock = inv_models.WarehouseStock(warehouse_id=warehouse_id, item_id=item.id, current_stock=Decimal("0"))
        stock.current_stock = Decimal(stock.current_stock) + quantity
        db.add(stock)

        previous_stock = Decimal(item.current_stock)
        item.current_stock = previous_stock + quantity
        if line.unit_cost is not None and Decimal(line.unit_cost) > 0:
            item.cost_price = line.unit_cost
        db.add(item)

        movement = inv_models.InventoryStockMovement(
            item_id=item.id,
            warehouse_id=warehouse_id,
            type=inv_models.MovementType.RECEIPT,
            quantity=quantity,
            previous_stock=previous_stock,
            new_stock=item.current_stock,
            receipt_id=receipt.id,
            reason=reason,
            user_id=user.id,
            user_name=user.display_name,
        )
        db.add(movement)
        movements.append(movement)
        logger.info("Stock +%s for %s (%s -> %s) via %s", quantity, item.sku, previous_stock, item.current_stock, receipt.receipt_number)

    return movements


async def transfer_to_stock(
    db: AsyncSession,
    *,
    nir_id: int,
    user: usr_models.User,
    arq_redis_pool: Optional[Any] = None,
) -> inv_schemas.TransferToStockResult:
    """
    APROBAT 상태의 NIR을 기본 창고 재고에 반영하고 IN_STOC으로 전이합니다.
    이미 IN_STOC이면 아무 것도 하지 않고 already_processed=True를 반환합니다.
    """
    nir = await inv_crud.goods_receipt.get_full(db, nir_id)
    if nir is None:
        raise InventoryError("NIR negasit", status_code=404)
    if nir.status == NIRStatus.IN_STOC:
        return inv_schemas.TransferToStockResult(
            success=True, already_processed=True, receipt_number=nir.receipt_number,
            warehouse_id=nir.warehouse_id, message="NIR-ul este deja in stoc",
        )
    if nir.status != NIRStatus.APROBAT:
        raise InventoryError(f"Doar NIR-urile aprobate pot fi transferate in stoc (stare curenta: {nir.status})")
    if not nir.items:
        raise InventoryError("NIR-ul nu are produse")

    warehouse = await inv_crud.warehouse.get_primary(db)
    if warehouse is None:
        raise InventoryError("Nu exista un depozit principal configurat")

    movements = await apply_receipt_to_stock(db, receipt=nir, warehouse_id=warehouse.id, user=user)

    now = datetime.now(UTC)
    nir.status = NIRStatus.IN_STOC
    nir.transferred_to_stock_at = now
    nir.warehouse_id = warehouse.id
    db.add(nir)
    await db.commit()
    logger.info("NIR %s transferred to stock in %s (%d lines)", nir.receipt_number, warehouse.code, len(movements))

    # 알림 실패 시 세션이 롤백되어 ORM 객체가 만료되므로 결과를 먼저 만듭니다.
    result = inv_schemas.TransferToStockResult(
        success=True,
        receipt_number=nir.receipt_number,
        warehouse_id=warehouse.id,
        movements=[inv_schemas.StockMovementRead.model_validate(m) for m in movements],
    )
    await notify_managers(
        db,
        arq_redis_pool,
        type="nir_in_stock",
        title=f"NIR {nir.receipt_number} in stoc",
        message=f"{len(movements)} produse au fost adaugate in stoc ({warehouse.name}).",
        data={"goods_receipt_id": nir.id},
    )
    return result


async def notify_managers(
    db: AsyncSession, arq_redis_pool: Optional[Any], *, type: str, title: str, message: str, data: Dict[str, Any]
) -> None:
    """매니저 이상에게 알림을 보냅니다. 실패해도 호출한 작업에는 영향을 주지 않습니다."""
    role = usr_models.UserRole.MANAGER.value
    try:
        if arq_redis_pool:
            await arq_redis_pool.enqueue_job("send_notification_task", type, title, message, data, role)
        else:
            logger.info("ARQ Redis pool not available, sending notification synchronously.")
            await shared_tasks.send_notification_task({"db": db}, type, title, message, data, role)
    except Exception as e:
        # 동기 실행 중 실패하면 요청 세션을 다시 쓸 수 있도록 되돌립니다.
        if not arq_redis_pool:
            await db.rollback()
        logger.warning("Notification '%s' failed: %s", type, e)


async def complete_direct_receipt(
    db: AsyncSession, *, receipt_id: int, user: usr_models.User, warehouse_id: Optional[int] = None
) -> inv_models.GoodsReceipt:
    """직접 입고(DRAFT)를 완료(COMPLETED)하고 재고에 반영합니다."""
    receipt = await inv_crud.goods_receipt.get_full(db, receipt_id)
    if receipt is None:
        raise InventoryError("NIR negasit", status_code=404)
    if receipt.status != NIRStatus.DRAFT:
        raise InventoryError("Doar NIR-urile in starea DRAFT pot fi finalizate")
    if not receipt.items:
        raise InventoryError("NIR-ul nu are produse")

    target_id = warehouse_id or receipt.warehouse_id
    if target_id is None:
        primary = await inv_crud.warehouse.get_primary(db)
        if primary is None:
            raise InventoryError("Nu exista un depozit principal configurat")
        target_id = primary.id
    elif not await db.get(inv_models.Warehouse, target_id):
        raise InventoryError("Depozitul nu a fost gasit", status_code=404)

    await apply_receipt_to_stock(db, receipt=receipt, warehouse_id=target_id, user=user)
    receipt.status = NIRStatus.COMPLETED
    receipt.warehouse_id = target_id
    receipt.completed_at = datetime.now(UTC)
    receipt.completed_by = user.id
    db.add(receipt)
    await db.commit()
    return await inv_crud.goods_receipt.get_full(db, receipt.id)


async def adjust_stock(
    db: AsyncSession, *, obj_in: inv_schemas.StockAdjustmentCreate, user: usr_models.User
) -> inv_models.InventoryStockMovement:
    """수동 재고 조정. 품목 재고(및 창고 재고)가 음수가 되는 차감은 거부합니다."""
    if obj_in.type not in (inv_models.MovementType.ADJUSTMENT_PLUS, inv_models.MovementType.ADJUSTMENT_MINUS):
        raise InventoryError("Tip de ajustare invalid")

    item = await db.get(inv_models.InventoryItem, obj_in.item_id, with_for_update=True)
    if item is None:
        raise InventoryError("Produsul nu a fost gasit", status_code=404)

    sign = Decimal("1") if obj_in.type == inv_models.MovementType.ADJUSTMENT_PLUS else Decimal("-1")
    delta = sign * Decimal(obj_in.quantity)

    stock = None
    if obj_in.warehouse_id is not None:
        if not await db.get(inv_models.Warehouse, obj_in.warehouse_id):
            raise InventoryError("Depozitul nu a fost gasit", status_code=404)
        stock = (await db.execute(
            select(inv_models.WarehouseStock).where(
                inv_models.WarehouseStock.warehouse_id == obj_in.warehouse_id,
                inv_models.WarehouseStock.item_id == item.id,
            ).with_for_update()
        )).scalars().first()
        current = Decimal(stock.current_stock) if stock else Decimal("0")
        if current + delta < 0:
            raise InventoryError("Insufficient stock")
        if stock is None:
            stock = inv_models.WarehouseStock(warehouse_id=obj_in.warehouse_id, item_id=item.id, current_stock=Decimal("0"))
        stock.current_stock = current + delta

    previous_stock = Decimal(item.current_stock)
    if previous_stock + delta < 0:
        raise InventoryError("Insufficient stock")

    if stock is not None:
        db.add(stock)
    item.current_stock = previous_stock + delta
    db.add(item)

    movement = inv_models.InventoryStockMovement(
        item_id=item.id,
        warehouse_id=obj_in.warehouse_id,
        type=obj_in.type,
        quantity=Decimal(obj_in.quantity),
        previous_stock=previous_stock,
        new_stock=item.current_stock,
        reason=obj_in.reason,
        user_id=user.id,
        user_name=user.display_name,
    )
    db.add(movement)
    await db.commit()
    await db.refresh(movement)
    logger.info("Stock adjustment %s %s for %s by %s", obj_in.type.value, obj_in.quantity, item.sku, user.login_id)
    return movement


async def _locked_warehouse_stock(db: AsyncSession, warehouse_id: int, item_id: int) -> inv_models.WarehouseStock:
    """창고 재고 행을 잠그고 반환합니다. 없으면 0으로 새 행을 만듭니다 (커밋은 호출자)."""
    stock = (await db.execute(
        select(inv_models.WarehouseStock).where(
            inv_models.WarehouseStock.warehouse_id == warehouse_id,
            inv_models.WarehouseStock.item_id == item_id,
        ).with_for_update()
    )).scalars().first()
    if stock is None:
        stock = inv_models.WarehouseStock(warehouse_id=warehouse_id, item_id=item_id, current_stock=Decimal("0"))
    return stock


# =============================================================================
# 3. 주문 재고 차감 (SALE)
# =============================================================================
async def process_order_stock(
    db: AsyncSession, *, order_id: int, user: Optional[usr_models.User] = None
) -> inv_schemas.OrderStockResult:
    """
    주문 라인의 SKU와 일치하는 재고 품목을 주문 수량만큼 차감하고 SALE 이동 이력을 남깁니다.

    - SKU가 없거나 일치하는 품목이 없는 라인은 건너뜁니다 (skipped).
    - 재고는 음수가 될 수 있습니다. 판매는 이미 일어났으므로 거부하지 않습니다.
    - 기본 창고가 있으면 해당 창고 재고도 함께 차감합니다.
    - 같은 주문에 SALE 이력이 이미 있으면 다시 차감하지 않습니다 (already_processed).
    """
    order = await db.get(ord_models.Order, order_id, with_for_update=True)
    if order is None:
        raise InventoryError("Comanda nu a fost gasita", status_code=404)

    existing = (await db.execute(
        select(func.count()).select_from(inv_models.InventoryStockMovement).where(
            inv_models.InventoryStockMovement.order_id == order_id,
            inv_models.InventoryStockMovement.type == inv_models.MovementType.SALE,
        )
    )).scalar_one()
    if existing:
        return inv_schemas.OrderStockResult(order_id=order_id, already_processed=True)

    warehouse = await inv_crud.warehouse.get_primary(db)
    result = inv_schemas.OrderStockResult(order_id=order_id)
    movements: List[inv_models.InventoryStockMovement] = []
    stocks: Dict[int, inv_models.WarehouseStock] = {}

    for line in order.line_items:
        if not line.sku:
            result.skipped += 1
            continue
        item = (await db.execute(
            select(inv_models.InventoryItem).where(inv_models.InventoryItem.sku == line.sku).with_for_update()
        )).scalars().first()
        if item is None:
            result.skipped += 1
            continue
        if line.quantity <= 0:
            result.errors.append(f"Cantitate invalida pentru {line.sku}: {line.quantity}")
            continue

        quantity = Decimal(line.quantity)
        if warehouse is not None:
            stock = stocks.get(item.id) or await _locked_warehouse_stock(db, warehouse.id, item.id)
            stocks[item.id] = stock
            stock.current_stock = Decimal(stock.current_stock) - quantity
            db.add(stock)

        previous_stock = Decimal(item.current_stock)
        item.current_stock = previous_stock - quantity
        db.add(item)

        movement = inv_models.InventoryStockMovement(
            item_id=item.id,
            warehouse_id=warehouse.id if warehouse else None,
            type=inv_models.MovementType.SALE,
            quantity=-quantity,
            previous_stock=previous_stock,
            new_stock=item.current_stock,
            order_id=order.id,
            reason=f"Vanzare - Comanda {order.order_number}, Produs: {line.title}",
            user_id=user.id if user else None,
            user_name=user.display_name if user else None,
        )
        db.add(movement)
        movements.append(movement)
        result.processed += 1

    await db.commit()
    result.movements = [inv_schemas.StockMovementRead.model_validate(m) for m in movements]
    logger.info(
        "Order %s stock: %d processed, %d skipped, %d errors",
        order.order_number, result.processed, result.skipped, len(result.errors),
    )
    return result


# =============================================================================
# 4. 창고 간 이동 (TRF)
# =============================================================================
TRFStatus = inv_models.TransferStatus


async def _check_transfer_warehouses(db: AsyncSession, from_id: Optional[int], to_id: Optional[int]) -> None:
    if not from_id or not to_id:
        raise InventoryError("Depozitul sursa si destinatie sunt obligatorii")
    if from_id == to_id:
        raise InventoryError("Depozitul sursa si destinatie trebuie sa fie diferite")
    for warehouse_id in (from_id, to_id):
        warehouse = await db.get(inv_models.Warehouse, warehouse_id)
        if warehouse is None:
            raise InventoryError(f"Depozitul {warehouse_id} nu a fost gasit", status_code=404)
        if not warehouse.is_active:
            raise InventoryError(f"Depozitul {warehouse.name} este inactiv")


async def _build_transfer_items(
    db: AsyncSession, items: List[inv_schemas.WarehouseTransferItemCreate]
) -> List[inv_models.WarehouseTransferItem]:
    if not items:
        raise InventoryError("Transferul trebuie sa contina cel putin un articol")
    lines = []
    for item in items:
        if not await db.get(inv_models.InventoryItem, item.item_id):
            raise InventoryError(f"Produsul {item.item_id} nu exista", status_code=404)
        lines.append(inv_models.WarehouseTransferItem(item_id=item.item_id, quantity=item.quantity, notes=item.notes))
    return lines


async def _get_draft_transfer(db: AsyncSession, transfer_id: int, action: str) -> inv_models.WarehouseTransfer:
    transfer = await inv_crud.warehouse_transfer.get_full(db, transfer_id)
    if transfer is None:
        raise InventoryError("Transferul nu a fost gasit", status_code=404)
    if transfer.status != TRFStatus.DRAFT:
        raise InventoryError(f"Poti {action} doar transferurile in status DRAFT")
    return transfer


async def create_transfer(
    db: AsyncSession, *, obj_in: inv_schemas.WarehouseTransferCreate, user: usr_models.User
) -> inv_models.WarehouseTransfer:
    """창고 간 이동을 TRF-YYYYMMDD-NNN 번호의 DRAFT로 생성합니다. 재고는 실행 시에만 움직입니다."""
    await _check_transfer_warehouses(db, obj_in.from_warehouse_id, obj_in.to_warehouse_id)
    items = await _build_transfer_items(db, obj_in.items)

    today = local_today()
    prefix = f"TRF-{today.strftime('%Y%m%d')}-"
    transfer = inv_models.WarehouseTransfer(
        transfer_number=await generate_document_number(db, inv_models.WarehouseTransfer, "transfer_number", prefix, width=3),
        from_warehouse_id=obj_in.from_warehouse_id,
        to_warehouse_id=obj_in.to_warehouse_id,
        transfer_date=obj_in.transfer_date or today,
        notes=obj_in.notes,
        created_by=user.id,
        items=items,
    )
    db.add(transfer)
    await db.commit()
    logger.info("Transfer %s created by %s (%d items)", transfer.transfer_number, user.login_id, len(items))
    return await inv_crud.warehouse_transfer.get_full(db, transfer.id)


async def update_transfer(
    db: AsyncSession, *, transfer_id: int, obj_in: inv_schemas.WarehouseTransferUpdate
) -> inv_models.WarehouseTransfer:
    transfer = await _get_draft_transfer(db, transfer_id, "modifica")
    data = obj_in.model_dump(exclude_unset=True, exclude={"items"})
    await _check_transfer_warehouses(
        db,
        data.get("from_warehouse_id", transfer.from_warehouse_id),
        data.get("to_warehouse_id", transfer.to_warehouse_id),
    )
    for key, value in data.items():
        setattr(transfer, key, value)
    if obj_in.items is not None:
        items = await _build_transfer_items(db, obj_in.items)
        transfer.items.clear()
        transfer.items.extend(items)
    db.add(transfer)
    await db.commit()
    return await inv_crud.warehouse_transfer.get_full(db, transfer.id)


async def delete_transfer(db: AsyncSession, *, transfer_id: int) -> None:
    transfer = await _get_draft_transfer(db, transfer_id, "sterge")
    await db.delete(transfer)
    await db.commit()
    logger.info("Transfer %s deleted", transfer.transfer_number)


async def execute_transfer(
    db: AsyncSession, *, transfer_id: int, user: usr_models.User
) -> inv_models.WarehouseTransfer:
    """
    DRAFT 이동을 한 트랜잭션으로 실행합니다.

    모든 라인의 출발 창고 재고를 먼저 확인하고, 하나라도 부족하면 아무 것도 움직이지 않습니다.
    라인마다 출발/도착 창고에 TRANSFER 이력을 하나씩 남기고 전/후 재고를 라인에 기록합니다.
    품목 전체 재고(current_stock)는 창고 사이 이동이므로 변하지 않습니다.
    """
    transfer = await db.get(inv_models.WarehouseTransfer, transfer_id, with_for_update=True)
    if transfer is None:
        raise InventoryError("Transferul nu a fost gasit", status_code=404)
    if transfer.status != TRFStatus.DRAFT:
        raise InventoryError("Poti executa doar transferurile in status DRAFT")
    if not transfer.items:
        raise InventoryError("Transferul trebuie sa contina cel putin un articol")
    await _check_transfer_warehouses(db, transfer.from_warehouse_id, transfer.to_warehouse_id)

    sources: Dict[int, inv_models.WarehouseStock] = {}
    targets: Dict[int, inv_models.WarehouseStock] = {}
    errors: List[str] = []
    for line in transfer.items:
        stock = sources.get(line.item_id) or await _locked_warehouse_stock(db, transfer.from_warehouse_id, line.item_id)
        sources[line.item_id] = stock
        requested = sum((Decimal(l.quantity) for l in transfer.items if l.item_id == line.item_id), Decimal("0"))
        available = Decimal(stock.current_stock)
        if available < requested:
            sku = line.inventory_item.sku if line.inventory_item else line.item_id
            message = f"{sku}: Stoc insuficient. Disponibil: {_fmt_qty(available)}, Cerut: {_fmt_qty(requested)}"
            if message not in errors:
                errors.append(message)
    if errors:
        raise InventoryError("Nu se poate executa transferul - stoc insuficient", errors=errors)

    from_name, to_name = transfer.from_warehouse.name, transfer.to_warehouse.name
    note = f"Transfer #{transfer.transfer_number}"
    for line in transfer.items:
        quantity = Decimal(line.quantity)
        source = sources[line.item_id]
        target = targets.get(line.item_id) or await _locked_warehouse_stock(db, transfer.to_warehouse_id, line.item_id)
        targets[line.item_id] = target

        line.from_stock_before = Decimal(source.current_stock)
        line.to_stock_before = Decimal(target.current_stock)
        source.current_stock = line.from_stock_before - quantity
        target.current_stock = line.to_stock_before + quantity
        line.from_stock_after = source.current_stock
        line.to_stock_after = target.current_stock
        db.add_all([source, target, line])

        db.add(inv_models.InventoryStockMovement(
            item_id=line.item_id,
            warehouse_id=transfer.from_warehouse_id,
            type=inv_models.MovementType.TRANSFER,
            quantity=-quantity,
            previous_stock=line.from_stock_before,
            new_stock=line.from_stock_after,
            transfer_id=transfer.id,
            reason=f"Transfer catre {to_name} ({note})",
            user_id=user.id,
            user_name=user.display_name,
        ))
        db.add(inv_models.InventoryStockMovement(
            item_id=line.item_id,
            warehouse_id=transfer.to_warehouse_id,
            type=inv_models.MovementType.TRANSFER,
            quantity=quantity,
            previous_stock=line.to_stock_before,
            new_stock=line.to_stock_after,
            transfer_id=transfer.id,
            reason=f"Transfer din {from_name} ({note})",
            user_id=user.id,
            user_name=user.display_name,
        ))

    transfer.status = TRFStatus.COMPLETED
    transfer.completed_by = user.id
    transfer.completed_at = datetime.now(UTC)
    db.add(transfer)
    await db.commit()
    logger.info("Transfer %s executed by %s: %s -> %s", transfer.transfer_number, user.login_id, from_name, to_name)
    return await inv_crud.warehouse_transfer.get_full(db, transfer.id)
