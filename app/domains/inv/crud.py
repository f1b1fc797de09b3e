# app/domains/inv/crud.py

"""
'inv' 도메인의 CRUD(Create, Read, Update, Delete) 작업을 위한 클래스들을 정의하는 모듈입니다.

기준정보(공급업체, 인보이스, 창고, 품목)와 발주(PC) 및 입고 전표(NIR) 목록 조회를 담당합니다.
상태 전이/재고 반영 같은 업무 로직은 workflow.py, services.py에 있습니다.
"""

import logging
from datetime import datetime, UTC
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import or_, update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.numbering import generate_daily_number, generate_monthly_number
from app.domains.usr import models as usr_models
from app.domains.inv import models as inv_models
from app.domains.inv import schemas as inv_schemas

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MONEY = Decimal("0.01")


def line_total(quantity: Decimal, unit_price: Optional[Decimal]) -> Optional[Decimal]:
    if unit_price is None:
        return None
    return (Decimal(quantity) * Decimal(unit_price)).quantize(MONEY)


# =============================================================================
# 1. inv.suppliers / inv.supplier_invoices
# =============================================================================
class SupplierCRUD(CRUDBase[inv_models.Supplier, inv_schemas.SupplierCreate, inv_schemas.SupplierUpdate]):

    async def create(self, db: AsyncSession, *, obj_in: inv_schemas.SupplierCreate) -> inv_models.Supplier:
        if await self.get_by_attribute(db, attribute="name", value=obj_in.name):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Supplier with this name already exists")
        return await super().create(db, obj_in=obj_in)

    async def search(self, db: AsyncSession, *, search: Optional[str], skip: int = 0, limit: int = 100) -> List[inv_models.Supplier]:
        query = select(self.model)
        if search:
            query = query.where(self.model.name.ilike(f"%{search}%"))
        result = await db.execute(query.order_by(self.model.name).offset(skip).limit(limit))
        return result.scalars().all()


class SupplierInvoiceCRUD(
    CRUDBase[inv_models.SupplierInvoice, inv_schemas.SupplierInvoiceCreate, inv_schemas.SupplierInvoiceUpdate]
):

    async def get_by_number(self, db: AsyncSession, *, supplier_id: int, invoice_number: str) -> Optional[inv_models.SupplierInvoice]:
        result = await db.execute(
            select(self.model).where(
                self.model.supplier_id == supplier_id, self.model.invoice_number == invoice_number
            )
        )
        return result.scalars().first()

    async def create(self, db: AsyncSession, *, obj_in: inv_schemas.SupplierInvoiceCreate) -> inv_models.SupplierInvoice:
        if not await db.get(inv_models.Supplier, obj_in.supplier_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
        if await self.get_by_number(db, supplier_id=obj_in.supplier_id, invoice_number=obj_in.invoice_number):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invoice number already registered for this supplier")
        return await super().create(db, obj_in=obj_in)


# =============================================================================
# 2. inv.warehouses
# =============================================================================
class WarehouseCRUD(CRUDBase[inv_models.Warehouse, inv_schemas.WarehouseCreate, inv_schemas.WarehouseUpdate]):

    async def create(self, db: AsyncSession, *, obj_in: inv_schemas.WarehouseCreate) -> inv_models.Warehouse:
        if await self.get_by_attribute(db, attribute="code", value=obj_in.code):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Warehouse with this code already exists")
        if obj_in.is_primary:
            await db.execute(update(inv_models.Warehouse).values(is_primary=False))
        return await super().create(db, obj_in=obj_in)

    async def get_primary(self, db: AsyncSession) -> Optional[inv_models.Warehouse]:
        result = await db.execute(
            select(self.model).where(self.model.is_primary.is_(True), self.model.is_active.is_(True))
        )
        return result.scalars().first()

    async def set_primary(self, db: AsyncSession, *, warehouse_id: int) -> inv_models.Warehouse:
        """다른 창고의 기본 창고 표시를 해제하고 지정한 창고를 기본 창고로 설정합니다."""
        warehouse = await self.get(db, warehouse_id)
        if not warehouse:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Warehouse not found")
        await db.execute(
            update(inv_models.Warehouse).where(inv_models.Warehouse.id != warehouse_id).values(is_primary=False)
        )
        warehouse.is_primary = True
        db.add(warehouse)
        await db.commit()
        await db.refresh(warehouse)
        return warehouse


# =============================================================================
# 3. inv.inventory_items / inv.stock_movements
# =============================================================================
class InventoryItemCRUD(
    CRUDBase[inv_models.InventoryItem, inv_schemas.InventoryItemCreate, inv_schemas.InventoryItemUpdate]
):

    async def get_by_sku(self, db: AsyncSession, *, sku: str) -> Optional[inv_models.InventoryItem]:
        return await self.get_by_attribute(db, attribute="sku", value=sku)

    async def create(self, db: AsyncSession, *, obj_in: inv_schemas.InventoryItemCreate) -> inv_models.InventoryItem:
        if await self.get_by_sku(db, sku=obj_in.sku):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Item with this SKU already exists")
        return await super().create(db, obj_in=obj_in)

    async def search(
        self, db: AsyncSession, *, search: Optional[str] = None, low_stock: bool = False, skip: int = 0, limit: int = 100
    ) -> List[inv_models.InventoryItem]:
        query = select(self.model)
        if search:
            query = query.where(or_(self.model.sku.ilike(f"%{search}%"), self.model.name.ilike(f"%{search}%")))
        if low_stock:
            query = query.where(self.model.current_stock <= self.model.min_stock)
        result = await db.execute(query.order_by(self.model.sku).offset(skip).limit(limit))
        return result.scalars().all()

    async def get_warehouse_stocks(self, db: AsyncSession, *, item_id: int) -> List[inv_models.WarehouseStock]:
        result = await db.execute(
            select(inv_models.WarehouseStock)
            .where(inv_models.WarehouseStock.item_id == item_id)
            .order_by(inv_models.WarehouseStock.warehouse_id)
        )
        return result.scalars().all()


class StockMovementCRUD(CRUDBase[inv_models.InventoryStockMovement, inv_schemas.StockAdjustmentCreate, inv_schemas.StockAdjustmentCreate]):

    async def list(
        self,
        db: AsyncSession,
        *,
        item_id: Optional[int] = None,
        warehouse_id: Optional[int] = None,
        movement_type: Optional[inv_models.MovementType] = None,
        order_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[inv_models.InventoryStockMovement]:
        query = select(self.model)
        if item_id:
            query = query.where(self.model.item_id == item_id)
        if warehouse_id:
            query = query.where(self.model.warehouse_id == warehouse_id)
        if movement_type:
            query = query.where(self.model.type == movement_type)
        if order_id:
            query = query.where(self.model.order_id == order_id)
        result = await db.execute(query.order_by(self.model.id.desc()).offset(skip).limit(limit))
        return result.scalars().all()


# =============================================================================
# 4. inv.purchase_orders (PC)
# =============================================================================
class PurchaseOrderCRUD(
    CRUDBase[inv_models.PurchaseOrder, inv_schemas.PurchaseOrderCreate, inv_schemas.PurchaseOrderUpdate]
):

    async def get_full(self, db: AsyncSession, id: int) -> Optional[inv_models.PurchaseOrder]:
        result = await db.execute(
            select(self.model).where(self.model.id == id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    def _build_items(items: List[inv_schemas.PurchaseOrderItemCreate]) -> List[inv_models.PurchaseOrderItem]:
        return [
            inv_models.PurchaseOrderItem(
                inventory_item_id=item.inventory_item_id,
                quantity_ordered=item.quantity_ordered,
                unit_price=item.unit_price,
                total_price=line_total(item.quantity_ordered, item.unit_price),
                notes=item.notes,
            )
            for item in items
        ]

    @staticmethod
    def _apply_totals(po: inv_models.PurchaseOrder, items: List[inv_models.PurchaseOrderItem]) -> None:
        po.total_items = len(items)
        po.total_quantity = sum((Decimal(i.quantity_ordered) for i in items), Decimal("0"))
        po.total_value = sum((i.total_price or Decimal("0") for i in items), Decimal("0")).quantize(MONEY)

    async def _check_items_exist(self, db: AsyncSession, items: List[inv_schemas.PurchaseOrderItemCreate]) -> None:
        ids = {item.inventory_item_id for item in items}
        result = await db.execute(select(inv_models.InventoryItem.id).where(inv_models.InventoryItem.id.in_(ids)))
        missing = ids - set(result.scalars().all())
        if missing:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Produse inexistente: {sorted(missing)}")

    async def create(
        self, db: AsyncSession, *, obj_in: inv_schemas.PurchaseOrderCreate, user: Optional[usr_models.User] = None
    ) -> inv_models.PurchaseOrder:
        if not obj_in.supplier_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Furnizorul este obligatoriu")
        if not obj_in.items:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Adaugati cel putin un produs")
        if not await db.get(inv_models.Supplier, obj_in.supplier_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
        await self._check_items_exist(db, obj_in.items)

        items = self._build_items(obj_in.items)
        po = inv_models.PurchaseOrder(
            document_number=await generate_daily_number(db, inv_models.PurchaseOrder, "document_number", "PC"),
            supplier_id=obj_in.supplier_id,
            expected_date=obj_in.expected_date,
            notes=obj_in.notes,
            created_by=user.id if user else None,
            created_by_name=user.display_name if user else None,
            items=items,
        )
        self._apply_totals(po, items)
        db.add(po)
        await db.commit()
        logger.info("Purchase order %s created (%d items)", po.document_number, po.total_items)
        return await self.get_full(db, po.id)

    async def update(
        self, db: AsyncSession, *, db_obj: inv_models.PurchaseOrder, obj_in: inv_schemas.PurchaseOrderUpdate
    ) -> inv_models.PurchaseOrder:
        if db_obj.status != inv_models.PurchaseOrderStatus.DRAFT:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Doar comenzile in starea DRAFT pot fi modificate")

        data = obj_in.model_dump(exclude_unset=True, exclude={"items"})
        for key, value in data.items():
            setattr(db_obj, key, value)

        if obj_in.items is not None:
            if not obj_in.items:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Adaugati cel putin un produs")
            await self._check_items_exist(db, obj_in.items)
            items = self._build_items(obj_in.items)
            db_obj.items.clear()
            db_obj.items.extend(items)
            self._apply_totals(db_obj, items)

        db.add(db_obj)
        await db.commit()
        return await self.get_full(db, db_obj.id)

    async def remove(self, db: AsyncSession, *, db_obj: inv_models.PurchaseOrder) -> None:
        if db_obj.status != inv_models.PurchaseOrderStatus.DRAFT:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Doar comenzile in starea DRAFT pot fi sterse")
        await db.delete(db_obj)
        await db.commit()

    async def approve(self, db: AsyncSession, *, db_obj: inv_models.PurchaseOrder, user: usr_models.User) -> inv_models.PurchaseOrder:
        if db_obj.status != inv_models.PurchaseOrderStatus.DRAFT:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Doar comenzile in starea DRAFT pot fi aprobate")
        if not db_obj.items:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Adaugati cel putin un produs")
        db_obj.status = inv_models.PurchaseOrderStatus.APROBATA
        db_obj.approved_at = datetime.now(UTC)
        db_obj.approved_by = user.id
        db.add(db_obj)
        await db.commit()
        logger.info("Purchase order %s approved by %s", db_obj.document_number, user.login_id)
        return await self.get_full(db, db_obj.id)

    async def cancel(self, db: AsyncSession, *, db_obj: inv_models.PurchaseOrder) -> inv_models.PurchaseOrder:
        if db_obj.status not in (inv_models.PurchaseOrderStatus.DRAFT, inv_models.PurchaseOrderStatus.APROBATA):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comanda nu poate fi anulata in starea curenta")
        db_obj.status = inv_models.PurchaseOrderStatus.ANULATA
        db.add(db_obj)
        await db.commit()
        return await self.get_full(db, db_obj.id)

    async def list(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        status_filter: Optional[inv_models.PurchaseOrderStatus] = None,
        supplier_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[inv_models.PurchaseOrder], int]:
        conditions = []
        query = select(self.model).join(inv_models.Supplier, inv_models.Supplier.id == self.model.supplier_id)
        if search:
            conditions.append(or_(
                self.model.document_number.ilike(f"%{search}%"),
                inv_models.Supplier.name.ilike(f"%{search}%"),
            ))
        if status_filter:
            conditions.append(self.model.status == status_filter)
        if supplier_id:
            conditions.append(self.model.supplier_id == supplier_id)
        if conditions:
            query = query.where(*conditions)

        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(query.order_by(self.model.created_at.desc(), self.model.id.desc()).offset(skip).limit(limit))
        return result.scalars().all(), total


# =============================================================================
# 5. inv.reception_reports (PV) 조회
# =============================================================================
class ReceptionReportCRUD(CRUDBase[inv_models.ReceptionReport, inv_schemas.ReceptionReportCreate, inv_schemas.ReceptionReportUpdate]):

    async def get_full(self, db: AsyncSession, id: int) -> Optional[inv_models.ReceptionReport]:
        result = await db.execute(
            select(self.model).where(self.model.id == id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def list(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        status_filter: Optional[inv_models.ReceptionReportStatus] = None,
        purchase_order_id: Optional[int] = None,
        warehouse_user_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[inv_models.ReceptionReport], int, inv_schemas.ReceptionReportStats]:
        RR, PO, SUP = self.model, inv_models.PurchaseOrder, inv_models.Supplier
        base = (
            select(RR)
            .join(PO, PO.id == RR.purchase_order_id)
            .join(SUP, SUP.id == PO.supplier_id)
        )
        conditions = []
        if search:
            conditions.append(or_(
                RR.report_number.ilike(f"%{search}%"),
                PO.document_number.ilike(f"%{search}%"),
                SUP.name.ilike(f"%{search}%"),
            ))
        if purchase_order_id:
            conditions.append(RR.purchase_order_id == purchase_order_id)
        if warehouse_user_id:
            conditions.append(RR.warehouse_user_id == warehouse_user_id)
        if conditions:
            base = base.where(*conditions)

        # 통계는 상태 필터를 적용하기 전 기준으로 집계합니다.
        sub = base.subquery()
        stats_rows = (await db.execute(select(sub.c.status, func.count()).group_by(sub.c.status))).all()
        counts: Dict[str, int] = {row[0]: row[1] for row in stats_rows}
        stats = inv_schemas.ReceptionReportStats(
            total=sum(counts.values()),
            deschis=counts.get(inv_models.ReceptionReportStatus.DESCHIS.value, 0),
            in_completare=counts.get(inv_models.ReceptionReportStatus.IN_COMPLETARE.value, 0),
            finalizat=counts.get(inv_models.ReceptionReportStatus.FINALIZAT.value, 0),
        )

        query = base.where(RR.status == status_filter) if status_filter else base
        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(query.order_by(RR.created_at.desc(), RR.id.desc()).offset(skip).limit(limit))
        return result.scalars().all(), total, stats


# =============================================================================
# 6. inv.goods_receipts (NIR) 조회 및 직접 입고
# =============================================================================
class GoodsReceiptCRUD(CRUDBase[inv_models.GoodsReceipt, inv_schemas.GoodsReceiptCreate, inv_schemas.GoodsReceiptUpdate]):

    async def get_full(self, db: AsyncSession, id: int) -> Optional[inv_models.GoodsReceipt]:
        result = await db.execute(
            select(self.model).where(self.model.id == id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    def _build_items(items: List[inv_schemas.GoodsReceiptItemCreate]) -> List[inv_models.GoodsReceiptItem]:
        return [
            inv_models.GoodsReceiptItem(
                item_id=item.item_id,
                quantity=item.quantity,
                unit_cost=item.unit_cost,
                total_cost=line_total(item.quantity, item.unit_cost),
                notes=item.notes,
            )
            for item in items
        ]

    @staticmethod
    def apply_totals(receipt: inv_models.GoodsReceipt, items: List[inv_models.GoodsReceiptItem]) -> None:
        receipt.total_items = len(items)
        receipt.total_quantity = sum((Decimal(i.quantity) for i in items), Decimal("0"))
        receipt.total_value = sum((Decimal(i.total_cost) for i in items), Decimal("0")).quantize(MONEY)

    async def create(
        self, db: AsyncSession, *, obj_in: inv_schemas.GoodsReceiptCreate, user: Optional[usr_models.User] = None
    ) -> inv_models.GoodsReceipt:
        """직접 입고 전표(NIR-YYYYMM-NNNN)를 DRAFT 상태로 생성합니다."""
        if not obj_in.items:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Adaugati cel putin un produs")
        items = self._build_items(obj_in.items)
        receipt = inv_models.GoodsReceipt(
            receipt_number=await generate_monthly_number(db, inv_models.GoodsReceipt, "receipt_number", "NIR"),
            supplier_id=obj_in.supplier_id,
            supplier_invoice_id=obj_in.supplier_invoice_id,
            warehouse_id=obj_in.warehouse_id,
            status=inv_models.GoodsReceiptStatus.DRAFT,
            document_number=obj_in.document_number,
            document_date=obj_in.document_date,
            notes=obj_in.notes,
            created_by=user.id if user else None,
            created_by_name=user.display_name if user else None,
            items=items,
        )
        self.apply_totals(receipt, items)
        db.add(receipt)
        await db.commit()
        return await self.get_full(db, receipt.id)

    async def update(
        self, db: AsyncSession, *, db_obj: inv_models.GoodsReceipt, obj_in: inv_schemas.GoodsReceiptUpdate
    ) -> inv_models.GoodsReceipt:
        if db_obj.status != inv_models.GoodsReceiptStatus.DRAFT:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Doar NIR-urile in starea DRAFT pot fi modificate")
        data = obj_in.model_dump(exclude_unset=True, exclude={"items"})
        for key, value in data.items():
            setattr(db_obj, key, value)
        if obj_in.items is not None:
            if not obj_in.items:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Adaugati cel putin un produs")
            items = self._build_items(obj_in.items)
            db_obj.items.clear()
            db_obj.items.extend(items)
            self.apply_totals(db_obj, items)
        db.add(db_obj)
        await db.commit()
        return await self.get_full(db, db_obj.id)

    async def remove(self, db: AsyncSession, *, db_obj: inv_models.GoodsReceipt) -> None:
        if db_obj.status != inv_models.GoodsReceiptStatus.DRAFT:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Doar NIR-urile in starea DRAFT pot fi sterse")
        await db.delete(db_obj)
        await db.commit()

    async def cancel(self, db: AsyncSession, *, db_obj: inv_models.GoodsReceipt) -> inv_models.GoodsReceipt:
        if db_obj.status != inv_models.GoodsReceiptStatus.DRAFT:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Doar NIR-urile in starea DRAFT pot fi anulate")
        db_obj.status = inv_models.GoodsReceiptStatus.CANCELLED
        db.add(db_obj)
        await db.commit()
        return await self.get_full(db, db_obj.id)

    async def list(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        statuses: Optional[List[str]] = None,
        supplier_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[inv_models.GoodsReceipt], int, Dict[str, int]]:
        GR, SUP = self.model, inv_models.Supplier
        base = select(GR).outerjoin(SUP, SUP.id == GR.supplier_id)
        conditions = []
        if search:
            conditions.append(or_(
                GR.receipt_number.ilike(f"%{search}%"),
                GR.document_number.ilike(f"%{search}%"),
                SUP.name.ilike(f"%{search}%"),
            ))
        if supplier_id:
            conditions.append(GR.supplier_id == supplier_id)
        if conditions:
            base = base.where(*conditions)

        sub = base.subquery()
        stats_rows = (await db.execute(select(sub.c.status, func.count()).group_by(sub.c.status))).all()
        stats = {row[0]: row[1] for row in stats_rows}
        stats["total"] = sum(stats.values())

        query = base.where(GR.status.in_(statuses)) if statuses else base
        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(query.order_by(GR.created_at.desc(), GR.id.desc()).offset(skip).limit(limit))
        return result.scalars().all(), total, stats



# =============================================================================
# 7. inv.warehouse_transfers (TRF)
# =============================================================================
class WarehouseTransferCRUD(
    CRUDBase[inv_models.WarehouseTransfer, inv_schemas.WarehouseTransferCreate, inv_schemas.WarehouseTransferUpdate]
):

    async def get_full(self, db: AsyncSession, id: int) -> Optional[inv_models.WarehouseTransfer]:
        result = await db.execute(
            select(self.model).where(self.model.id == id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def list(
        self,
        db: AsyncSession,
        *,
        status: Optional[inv_models.TransferStatus] = None,
        warehouse_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[inv_models.WarehouseTransfer], int]:
        """상태와 창고(출발 또는 도착)로 필터링한 이동 목록. 최신 순."""
        TRF = self.model
        query = select(TRF)
        if status:
            query = query.where(TRF.status == status)
        if warehouse_id:
            query = query.where(or_(TRF.from_warehouse_id == warehouse_id, TRF.to_warehouse_id == warehouse_id))
        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(query.order_by(TRF.created_at.desc(), TRF.id.desc()).offset(skip).limit(limit))
        return result.scalars().all(), total


#  각 CRUD 클래스의 인스턴스 생성
supplier = SupplierCRUD(inv_models.Supplier)
supplier_invoice = SupplierInvoiceCRUD(inv_models.SupplierInvoice)
warehouse = WarehouseCRUD(inv_models.Warehouse)
inventory_item = InventoryItemCRUD(inv_models.InventoryItem)
stock_movement = StockMovementCRUD(inv_models.InventoryStockMovement)
purchase_order = PurchaseOrderCRUD(inv_models.PurchaseOrder)
reception_report = ReceptionReportCRUD(inv_models.ReceptionReport)
goods_receipt = GoodsReceiptCRUD(inv_models.GoodsReceipt)
warehouse_transfer = WarehouseTransferCRUD(inv_models.WarehouseTransfer)
