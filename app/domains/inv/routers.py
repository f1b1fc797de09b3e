# app/domains/inv/routers.py

"""
'inv' 도메인 (재고, 발주, 입고 검수, NIR, 주문 재고 차감, 창고 간 이동)의 API 엔드포인트를 정의하는 모듈입니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, Response, UploadFile, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User as UsrUser
from app.domains.inv import crud as inv_crud, schemas as inv_schemas, models as inv_models
from app.domains.inv import services as inv_services
from app.domains.inv import workflow as inv_workflow

router = APIRouter(
    tags=["Inventory & Reception (재고 및 입고)"],
    responses={404: {"description": "Not found"}},
)

# NIR 목표 상태별 필요 권한
TRANSITION_PERMISSIONS = {
    inv_models.GoodsReceiptStatus.TRIMIS_OFFICE: "inventory.edit",
    inv_models.GoodsReceiptStatus.VERIFICAT: "reception.verify",
    inv_models.GoodsReceiptStatus.RESPINS: "reception.verify",
    inv_models.GoodsReceiptStatus.APROBAT: "reception.verify",
    inv_models.GoodsReceiptStatus.IN_STOC: "reception.verify",
}


def _to_http(e: Exception) -> HTTPException:
    """서비스 계층 예외를 HTTP 오류로 변환합니다."""
    if isinstance(e, inv_services.InventoryError) and e.errors:
        return HTTPException(status_code=e.status_code, detail={"message": e.message, "errors": e.errors})
    return HTTPException(status_code=e.status_code, detail=e.message)


async def _get_or_404(crud, db: AsyncSession, id: int, label: str):
    obj = await (crud.get_full(db, id) if hasattr(crud, "get_full") else crud.get(db, id=id))
    if obj is None:
        raise HTTPException(status_code=404, detail=f"{label} not found.")
    return obj


# =============================================================================
# 1. inv.suppliers / inv.supplier_invoices 엔드포인트
# =============================================================================
@router.post("/suppliers", response_model=inv_schemas.SupplierRead, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    supplier_in: inv_schemas.SupplierCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    return await inv_crud.supplier.create(db, obj_in=supplier_in)


@router.get("/suppliers", response_model=List[inv_schemas.SupplierRead])
async def read_suppliers(
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    return await inv_crud.supplier.search(db, search=search, skip=skip, limit=limit)


@router.get("/suppliers/{supplier_id}", response_model=inv_schemas.SupplierRead)
async def read_supplier(
    supplier_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    return await _get_or_404(inv_crud.supplier, db, supplier_id, "Supplier")


@router.put("/suppliers/{supplier_id}", response_model=inv_schemas.SupplierRead)
async def update_supplier(
    supplier_id: int,
    supplier_in: inv_schemas.SupplierUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_supplier = await _get_or_404(inv_crud.supplier, db, supplier_id, "Supplier")
    return await inv_crud.supplier.update(db, db_obj=db_supplier, obj_in=supplier_in)


@router.post("/supplier-invoices", response_model=inv_schemas.SupplierInvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_supplier_invoice(
    invoice_in: inv_schemas.SupplierInvoiceCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    return await inv_crud.supplier_invoice.create(db, obj_in=invoice_in)


@router.get("/supplier-invoices", response_model=List[inv_schemas.SupplierInvoiceRead])
async def read_supplier_invoices(
    supplier_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    filters = {"supplier_id": supplier_id} if supplier_id else {}
    return await inv_crud.supplier_invoice.get_multi(db, skip=skip, limit=limit, **filters)


@router.get("/supplier-invoices/{invoice_id}", response_model=inv_schemas.SupplierInvoiceRead)
async def read_supplier_invoice(
    invoice_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    return await _get_or_404(inv_crud.supplier_invoice, db, invoice_id, "Supplier invoice")


@router.put("/supplier-invoices/{invoice_id}", response_model=inv_schemas.SupplierInvoiceRead)
async def update_supplier_invoice(
    invoice_id: int,
    invoice_in: inv_schemas.SupplierInvoiceUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_invoice = await _get_or_404(inv_crud.supplier_invoice, db, invoice_id, "Supplier invoice")
    return await inv_crud.supplier_invoice.update(db, db_obj=db_invoice, obj_in=invoice_in)


# =============================================================================
# 2. inv.warehouses 엔드포인트
# =============================================================================
@router.post("/warehouses", response_model=inv_schemas.WarehouseRead, status_code=status.HTTP_201_CREATED)
async def create_warehouse(
    warehouse_in: inv_schemas.WarehouseCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    return await inv_crud.warehouse.create(db, obj_in=warehouse_in)


@router.get("/warehouses", response_model=List[inv_schemas.WarehouseRead])
async def read_warehouses(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    return await inv_crud.warehouse.get_multi(db)


@router.put("/warehouses/{warehouse_id}", response_model=inv_schemas.WarehouseRead)
async def update_warehouse(
    warehouse_id: int,
    warehouse_in: inv_schemas.WarehouseUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_warehouse = await _get_or_404(inv_crud.warehouse, db, warehouse_id, "Warehouse")
    return await inv_crud.warehouse.update(db, db_obj=db_warehouse, obj_in=warehouse_in)


@router.post("/warehouses/{warehouse_id}/set-primary", response_model=inv_schemas.WarehouseRead)
async def set_primary_warehouse(
    warehouse_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    """기본 창고를 지정합니다. 다른 창고의 기본 플래그는 해제됩니다."""
    return await inv_crud.warehouse.set_primary(db, warehouse_id=warehouse_id)


# =============================================================================
# 3. inv.inventory_items / 재고 이동 엔드포인트
# =============================================================================
@router.post("/items", response_model=inv_schemas.InventoryItemRead, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    item_in: inv_schemas.InventoryItemCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    return await inv_crud.inventory_item.create(db, obj_in=item_in)


@router.get("/items", response_model=List[inv_schemas.InventoryItemRead])
async def read_inventory_items(
    search: Optional[str] = None,
    low_stock: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    return await inv_crud.inventory_item.search(db, search=search, low_stock=low_stock, skip=skip, limit=limit)


@router.get("/items/{item_id}", response_model=inv_schemas.InventoryItemRead)
async def read_inventory_item(
    item_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    return await _get_or_404(inv_crud.inventory_item, db, item_id, "Item")


@router.put("/items/{item_id}", response_model=inv_schemas.InventoryItemRead)
async def update_inventory_item(
    item_id: int,
    item_in: inv_schemas.InventoryItemUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_item = await _get_or_404(inv_crud.inventory_item, db, item_id, "Item")
    return await inv_crud.inventory_item.update(db, db_obj=db_item, obj_in=item_in)


@router.get("/items/{item_id}/stocks", response_model=List[inv_schemas.WarehouseStockRead])
async def read_item_warehouse_stocks(
    item_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    await _get_or_404(inv_crud.inventory_item, db, item_id, "Item")
    return await inv_crud.inventory_item.get_warehouse_stocks(db, item_id=item_id)


@router.get("/stock-movements", response_model=List[inv_schemas.StockMovementRead])
async def read_stock_movements(
    item_id: Optional[int] = None,
    warehouse_id: Optional[int] = None,
    type: Optional[inv_models.MovementType] = None,
    order_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    return await inv_crud.stock_movement.list(
        db, item_id=item_id, warehouse_id=warehouse_id, movement_type=type, order_id=order_id, skip=skip, limit=limit
    )


@router.post("/stock-adjustments", response_model=inv_schemas.StockMovementRead, status_code=status.HTTP_201_CREATED)
async def create_stock_adjustment(
    adjustment_in: inv_schemas.StockAdjustmentCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.adjust")),
):
    try:
        return await inv_services.adjust_stock(db, obj_in=adjustment_in, user=current_user)
    except inv_services.InventoryError as e:
        raise _to_http(e)


# =============================================================================
# 4. inv.purchase_orders (PC) 엔드포인트
# =============================================================================
@router.post("/purchase-orders", response_model=inv_schemas.PurchaseOrderRead, status_code=status.HTTP_201_CREATED)
async def create_purchase_order(
    po_in: inv_schemas.PurchaseOrderCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    return await inv_crud.purchase_order.create(db, obj_in=po_in, user=current_user)


@router.get("/purchase-orders", response_model=inv_schemas.PurchaseOrderList)
async def read_purchase_orders(
    search: Optional[str] = None,
    status_filter: Optional[inv_models.PurchaseOrderStatus] = Query(None, alias="status"),
    supplier_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    items, total = await inv_crud.purchase_order.list(
        db, search=search, status_filter=status_filter, supplier_id=supplier_id, skip=skip, limit=limit
    )
    return {"items": items, "total": total}


@router.get("/purchase-orders/{po_id}", response_model=inv_schemas.PurchaseOrderRead)
async def read_purchase_order(
    po_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    return await _get_or_404(inv_crud.purchase_order, db, po_id, "Purchase order")


@router.put("/purchase-orders/{po_id}", response_model=inv_schemas.PurchaseOrderRead)
async def update_purchase_order(
    po_id: int,
    po_in: inv_schemas.PurchaseOrderUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_po = await _get_or_404(inv_crud.purchase_order, db, po_id, "Purchase order")
    return await inv_crud.purchase_order.update(db, db_obj=db_po, obj_in=po_in)


@router.delete("/purchase-orders/{po_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_purchase_order(
    po_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_po = await _get_or_404(inv_crud.purchase_order, db, po_id, "Purchase order")
    await inv_crud.purchase_order.remove(db, db_obj=db_po)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/purchase-orders/{po_id}/approve", response_model=inv_schemas.PurchaseOrderRead)
async def approve_purchase_order(
    po_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_po = await _get_or_404(inv_crud.purchase_order, db, po_id, "Purchase order")
    return await inv_crud.purchase_order.approve(db, db_obj=db_po, user=current_user)


@router.post("/purchase-orders/{po_id}/cancel", response_model=inv_schemas.PurchaseOrderRead)
async def cancel_purchase_order(
    po_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_po = await _get_or_404(inv_crud.purchase_order, db, po_id, "Purchase order")
    return await inv_crud.purchase_order.cancel(db, db_obj=db_po)


# =============================================================================
# 5. inv.reception_reports (PV) 엔드포인트
# =============================================================================
@router.post("/reception-reports", response_model=inv_schemas.ReceptionReportRead, status_code=status.HTTP_201_CREATED)
async def create_reception_report(
    report_in: inv_schemas.ReceptionReportCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    try:
        return await inv_services.create_reception_report(db, obj_in=report_in, user=current_user)
    except inv_services.InventoryError as e:
        raise _to_http(e)


@router.get("/reception-reports", response_model=inv_schemas.ReceptionReportList)
async def read_reception_reports(
    search: Optional[str] = None,
    status_filter: Optional[inv_models.ReceptionReportStatus] = Query(None, alias="status"),
    purchase_order_id: Optional[int] = None,
    warehouse_user_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    items, total, stats = await inv_crud.reception_report.list(
        db,
        search=search,
        status_filter=status_filter,
        purchase_order_id=purchase_order_id,
        warehouse_user_id=warehouse_user_id,
        skip=skip,
        limit=limit,
    )
    return {"items": items, "total": total, "stats": stats}


@router.get("/reception-reports/{report_id}", response_model=inv_schemas.ReceptionReportRead)
async def read_reception_report(
    report_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    return await _get_or_404(inv_crud.reception_report, db, report_id, "Reception report")


@router.put("/reception-reports/{report_id}", response_model=inv_schemas.ReceptionReportRead)
async def update_reception_report(
    report_id: int,
    report_in: inv_schemas.ReceptionReportUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    try:
        return await inv_services.update_reception_meta(db, report_id=report_id, obj_in=report_in)
    except inv_services.InventoryError as e:
        raise _to_http(e)


@router.delete("/reception-reports/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reception_report(
    report_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    try:
        await inv_services.delete_reception_report(db, report_id=report_id)
    except inv_services.InventoryError as e:
        raise _to_http(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/reception-reports/{report_id}/items", response_model=inv_schemas.ReceptionReportRead)
async def update_reception_items(
    report_id: int,
    items_in: inv_schemas.ReceptionItemsUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    """검수 라인(수령 수량, 확인 여부, 비고)을 일괄 저장합니다."""
    try:
        return await inv_services.update_reception_items(db, report_id=report_id, obj_in=items_in)
    except inv_services.InventoryError as e:
        raise _to_http(e)


@router.post(
    "/reception-reports/{report_id}/photos",
    response_model=inv_schemas.ReceptionPhotoRead,
    status_code=status.HTTP_201_CREATED,
)
async def upload_reception_photo(
    report_id: int,
    category: inv_models.PhotoCategory = Form(...),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    try:
        return await inv_services.add_reception_photo(
            db, report_id=report_id, category=category, upload_file=file, user=current_user
        )
    except inv_services.InventoryError as e:
        raise _to_http(e)


@router.delete("/reception-reports/{report_id}/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reception_photo(
    report_id: int,
    photo_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    try:
        await inv_services.delete_reception_photo(db, report_id=report_id, photo_id=photo_id)
    except inv_services.InventoryError as e:
        raise _to_http(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/reception-reports/{report_id}/validation", response_model=inv_schemas.ErrorList)
async def validate_reception_report(
    report_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    """확정 전에 남은 문제 목록을 미리 확인합니다 (빈 목록이면 확정 가능)."""
    report = await _get_or_404(inv_crud.reception_report, db, report_id, "Reception report")
    errors = inv_services.collect_finalize_errors(report)
    return {"message": "OK" if not errors else "Receptia nu poate fi finalizata", "errors": errors}


@router.post("/reception-reports/{report_id}/finalize", response_model=inv_schemas.ReceptionFinalizeResult)
async def finalize_reception_report(
    report_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    try:
        return await inv_services.finalize_reception_report(db, report_id=report_id, user=current_user)
    except inv_services.InventoryError as e:
        raise _to_http(e)


# =============================================================================
# 6. inv.goods_receipts (NIR) 엔드포인트
# =============================================================================
@router.post("/goods-receipts", response_model=inv_schemas.GoodsReceiptRead, status_code=status.HTTP_201_CREATED)
async def create_goods_receipt(
    receipt_in: inv_schemas.GoodsReceiptCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    """직접 입고 전표(DRAFT)를 생성합니다."""
    return await inv_crud.goods_receipt.create(db, obj_in=receipt_in, user=current_user)


@router.get("/goods-receipts", response_model=inv_schemas.GoodsReceiptList)
async def read_goods_receipts(
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status", description="쉼표로 구분된 상태 목록"),
    supplier_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    statuses = [s.strip() for s in status_filter.split(",") if s.strip()] if status_filter else None
    items, total, stats = await inv_crud.goods_receipt.list(
        db, search=search, statuses=statuses, supplier_id=supplier_id, skip=skip, limit=limit
    )
    return {"items": items, "total": total, "stats": stats}


@router.get("/goods-receipts/{receipt_id}", response_model=inv_schemas.GoodsReceiptRead)
async def read_goods_receipt(
    receipt_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    return await _get_or_404(inv_crud.goods_receipt, db, receipt_id, "Goods receipt")


@router.put("/goods-receipts/{receipt_id}", response_model=inv_schemas.GoodsReceiptRead)
async def update_goods_receipt(
    receipt_id: int,
    receipt_in: inv_schemas.GoodsReceiptUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_receipt = await _get_or_404(inv_crud.goods_receipt, db, receipt_id, "Goods receipt")
    return await inv_crud.goods_receipt.update(db, db_obj=db_receipt, obj_in=receipt_in)


@router.delete("/goods-receipts/{receipt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goods_receipt(
    receipt_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_receipt = await _get_or_404(inv_crud.goods_receipt, db, receipt_id, "Goods receipt")
    await inv_crud.goods_receipt.remove(db, db_obj=db_receipt)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/goods-receipts/{receipt_id}/complete", response_model=inv_schemas.GoodsReceiptRead)
async def complete_goods_receipt(
    receipt_id: int,
    warehouse_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    try:
        return await inv_services.complete_direct_receipt(
            db, receipt_id=receipt_id, user=current_user, warehouse_id=warehouse_id
        )
    except inv_services.InventoryError as e:
        raise _to_http(e)


@router.post("/goods-receipts/{receipt_id}/cancel", response_model=inv_schemas.GoodsReceiptRead)
async def cancel_goods_receipt(
    receipt_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    db_receipt = await _get_or_404(inv_crud.goods_receipt, db, receipt_id, "Goods receipt")
    return await inv_crud.goods_receipt.cancel(db, db_obj=db_receipt)


@router.get("/goods-receipts/{receipt_id}/transitions", response_model=inv_schemas.NirAvailableTransitions)
async def read_available_transitions(
    receipt_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.view")),
):
    nir = await _get_or_404(inv_crud.goods_receipt, db, receipt_id, "Goods receipt")
    return inv_workflow.get_available_transitions(nir)


@router.post("/goods-receipts/{receipt_id}/transition", response_model=inv_schemas.NirTransitionResult)
async def transition_goods_receipt(
    receipt_id: int,
    transition_in: inv_schemas.NirTransitionRequest,
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """
    NIR 워크플로우 상태를 전이합니다. IN_STOC 요청은 재고 반영(transfer-to-stock)으로 처리됩니다.
    """
    target = transition_in.target_status
    code = TRANSITION_PERMISSIONS.get(target, "reception.verify")
    if not deps.has_permission(current_user, code):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions")

    try:
        if target == inv_models.GoodsReceiptStatus.IN_STOC:
            arq_redis_pool = getattr(request.app.state, "redis", None)
            await inv_services.transfer_to_stock(db, nir_id=receipt_id, user=current_user, arq_redis_pool=arq_redis_pool)
            nir = await inv_crud.goods_receipt.get_full(db, receipt_id)
        else:
            nir = await inv_workflow.transition_nir(db, receipt_id, target, current_user)
    except (inv_workflow.WorkflowError, inv_services.InventoryError) as e:
        raise _to_http(e)
    return {"success": True, "nir": nir, "has_differences": nir.has_differences}


@router.post("/goods-receipts/{receipt_id}/approve-differences", response_model=inv_schemas.GoodsReceiptRead)
async def approve_goods_receipt_differences(
    receipt_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("reception.approve_differences")),
):
    try:
        return await inv_workflow.approve_differences(db, receipt_id, current_user)
    except inv_workflow.WorkflowError as e:
        raise _to_http(e)


@router.post("/goods-receipts/{receipt_id}/transfer-to-stock", response_model=inv_schemas.TransferToStockResult)
async def transfer_goods_receipt_to_stock(
    receipt_id: int,
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("reception.verify")),
):
    arq_redis_pool = getattr(request.app.state, "redis", None)
    try:
        return await inv_services.transfer_to_stock(
            db, nir_id=receipt_id, user=current_user, arq_redis_pool=arq_redis_pool
        )
    except inv_services.InventoryError as e:
        raise _to_http(e)


# =============================================================================
# 7. 주문 재고 차감 (SALE) 엔드포인트
# =============================================================================
@router.post("/orders/{order_id}/deduct-stock", response_model=inv_schemas.OrderStockResult)
async def deduct_order_stock(
    order_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inventory.edit")),
):
    """주문 라인을 재고에서 차감합니다. 이미 차감된 주문은 already_processed=True로 응답합니다."""
    try:
        return await inv_services.process_order_stock(db, order_id=order_id, user=current_user)
    except inv_services.InventoryError as e:
        raise _to_http(e)


# =============================================================================
# 8. inv.warehouse_transfers (TRF) 엔드포인트
# =============================================================================
@router.post("/transfers", response_model=inv_schemas.WarehouseTransferRead, status_code=status.HTTP_201_CREATED)
async def create_warehouse_transfer(
    transfer_in: inv_schemas.WarehouseTransferCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("transfers.create")),
):
    try:
        return await inv_services.create_transfer(db, obj_in=transfer_in, user=current_user)
    except inv_services.InventoryError as e:
        raise _to_http(e)


@router.get("/transfers", response_model=inv_schemas.WarehouseTransferList)
async def read_warehouse_transfers(
    status_filter: Optional[inv_models.TransferStatus] = Query(None, alias="status"),
    warehouse_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("transfers.view")),
):
    transfers, total = await inv_crud.warehouse_transfer.list(
        db, status=status_filter, warehouse_id=warehouse_id, skip=skip, limit=limit
    )
    return {"items": transfers, "total": total}


@router.get("/transfers/{transfer_id}", response_model=inv_schemas.WarehouseTransferRead)
async def read_warehouse_transfer(
    transfer_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("transfers.view")),
):
    return await _get_or_404(inv_crud.warehouse_transfer, db, transfer_id, "Transfer")


@router.put("/transfers/{transfer_id}", response_model=inv_schemas.WarehouseTransferRead)
async def update_warehouse_transfer(
    transfer_id: int,
    transfer_in: inv_schemas.WarehouseTransferUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("transfers.create")),
):
    try:
        return await inv_services.update_transfer(db, transfer_id=transfer_id, obj_in=transfer_in)
    except inv_services.InventoryError as e:
        raise _to_http(e)


@router.delete("/transfers/{transfer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_warehouse_transfer(
    transfer_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("transfers.create")),
):
    try:
        await inv_services.delete_transfer(db, transfer_id=transfer_id)
    except inv_services.InventoryError as e:
        raise _to_http(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/transfers/{transfer_id}/execute", response_model=inv_schemas.WarehouseTransferRead)
async def execute_warehouse_transfer(
    transfer_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("transfers.execute")),
):
    """DRAFT 이동을 실행하여 출발 창고에서 도착 창고로 재고를 옮깁니다."""
    try:
        return await inv_services.execute_transfer(db, transfer_id=transfer_id, user=current_user)
    except inv_services.InventoryError as e:
        raise _to_http(e)
