# app/domains/inv/schemas.py

"""
'inv' 도메인의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime, date
from decimal import Decimal

from pydantic import BaseModel
from sqlmodel import SQLModel, Field

from . import models as inv_models


# =============================================================================
# 1. 공급업체 (Supplier) / 공급업체 인보이스
# =============================================================================
class SupplierCreate(inv_models.SupplierBase):
    pass


class SupplierUpdate(SQLModel):
    name: Optional[str] = Field(None, max_length=200)
    code: Optional[str] = None
    tax_id: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None


class SupplierRead(inv_models.SupplierBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SupplierBrief(SQLModel):
    id: int
    name: str


class SupplierInvoiceCreate(SQLModel):
    supplier_id: int
    invoice_number: str = Field(..., max_length=100)
    invoice_date: date
    total_value: Decimal = Decimal("0")
    payment_status: inv_models.PaymentStatus = inv_models.PaymentStatus.UNPAID
    notes: Optional[str] = None


class SupplierInvoiceUpdate(SQLModel):
    invoice_number: Optional[str] = Field(None, max_length=100)
    invoice_date: Optional[date] = None
    total_value: Optional[Decimal] = None
    payment_status: Optional[inv_models.PaymentStatus] = None
    notes: Optional[str] = None


class SupplierInvoiceRead(SQLModel):
    id: int
    supplier_id: int
    invoice_number: str
    invoice_date: date
    total_value: Decimal
    payment_status: inv_models.PaymentStatus
    notes: Optional[str] = None
    supplier: Optional[SupplierBrief] = None

    class Config:
        from_attributes = True


# =============================================================================
# 2. 창고 (Warehouse)
# =============================================================================
class WarehouseCreate(inv_models.WarehouseBase):
    pass


class WarehouseUpdate(SQLModel):
    code: Optional[str] = Field(None, max_length=20)
    name: Optional[str] = None
    address: Optional[str] = None
    is_active: Optional[bool] = None


class WarehouseRead(inv_models.WarehouseBase):
    id: int

    class Config:
        from_attributes = True


# =============================================================================
# 3. 재고 품목 / 재고 이동
# =============================================================================
class InventoryItemCreate(SQLModel):
    sku: str = Field(..., max_length=100)
    name: str = Field(..., max_length=255)
    unit: str = "buc"
    cost_price: Optional[Decimal] = Field(None, ge=0)
    min_stock: Decimal = Decimal("0")
    is_active: bool = True


class InventoryItemUpdate(SQLModel):
    name: Optional[str] = None
    unit: Optional[str] = None
    cost_price: Optional[Decimal] = Field(None, ge=0)
    min_stock: Optional[Decimal] = None
    is_active: Optional[bool] = None


class InventoryItemRead(SQLModel):
    id: int
    sku: str
    name: str
    unit: str
    cost_price: Optional[Decimal] = None
    current_stock: Decimal
    min_stock: Decimal
    is_active: bool

    class Config:
        from_attributes = True


class InventoryItemBrief(SQLModel):
    id: int
    sku: str
    name: str
    unit: str

    class Config:
        from_attributes = True


class WarehouseStockRead(SQLModel):
    warehouse_id: int
    item_id: int
    current_stock: Decimal

    class Config:
        from_attributes = True


class StockAdjustmentCreate(SQLModel):
    item_id: int
    warehouse_id: Optional[int] = None
    type: inv_models.MovementType
    quantity: Decimal = Field(..., gt=0)
    reason: str = Field(..., min_length=1)


class StockMovementRead(SQLModel):
    id: int
    item_id: int
    warehouse_id: Optional[int] = None
    type: inv_models.MovementType
    quantity: Decimal
    previous_stock: Decimal
    new_stock: Decimal
    receipt_id: Optional[int] = None
    order_id: Optional[int] = None
    transfer_id: Optional[int] = None
    reason: Optional[str] = None
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# =============================================================================
# 4. 발주 (PurchaseOrder, PC)
# =============================================================================
class PurchaseOrderItemCreate(SQLModel):
    inventory_item_id: int
    quantity_ordered: Decimal = Field(..., gt=0)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class PurchaseOrderCreate(SQLModel):
    supplier_id: Optional[int] = None
    expected_date: Optional[date] = None
    notes: Optional[str] = None
    items: List[PurchaseOrderItemCreate] = []


class PurchaseOrderUpdate(SQLModel):
    supplier_id: Optional[int] = None
    expected_date: Optional[date] = None
    notes: Optional[str] = None
    items: Optional[List[PurchaseOrderItemCreate]] = None


class PurchaseOrderItemRead(SQLModel):
    id: int
    inventory_item_id: int
    quantity_ordered: Decimal
    unit_price: Optional[Decimal] = None
    total_price: Optional[Decimal] = None
    notes: Optional[str] = None
    inventory_item: Optional[InventoryItemBrief] = None

    class Config:
        from_attributes = True


class PurchaseOrderRead(SQLModel):
    id: int
    document_number: str
    supplier_id: int
    status: inv_models.PurchaseOrderStatus
    expected_date: Optional[date] = None
    notes: Optional[str] = None
    total_items: int
    total_quantity: Decimal
    total_value: Decimal
    created_by_name: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    supplier: Optional[SupplierBrief] = None
    items: List[PurchaseOrderItemRead] = []

    class Config:
        from_attributes = True


class PurchaseOrderBrief(SQLModel):
    id: int
    document_number: str
    status: inv_models.PurchaseOrderStatus
    supplier: Optional[SupplierBrief] = None

    class Config:
        from_attributes = True


class PurchaseOrderList(BaseModel):
    items: List[PurchaseOrderRead]
    total: int


# =============================================================================
# 5. 입고 검수 보고서 (ReceptionReport, PV)
# =============================================================================
class ReceptionReportCreate(SQLModel):
    purchase_order_id: int
    supplier_invoice_id: Optional[int] = None


class ReceptionReportUpdate(SQLModel):
    supplier_invoice_id: Optional[int] = None
    signature_confirmed: Optional[bool] = None


class ReceptionItemUpdate(SQLModel):
    item_id: int = Field(..., description="보고서 품목 라인 ID")
    quantity_received: Optional[Decimal] = Field(None, ge=0)
    verified: Optional[bool] = None
    observations: Optional[str] = None


class ReceptionItemsUpdate(SQLModel):
    items: List[ReceptionItemUpdate]


class ReceptionReportItemRead(SQLModel):
    id: int
    inventory_item_id: int
    quantity_expected: Decimal
    quantity_received: Optional[Decimal] = None
    verified: bool
    observations: Optional[str] = None
    has_difference: bool
    inventory_item: Optional[InventoryItemBrief] = None

    class Config:
        from_attributes = True


class ReceptionPhotoRead(SQLModel):
    id: int
    category: inv_models.PhotoCategory
    path: str
    original_name: Optional[str] = None
    size_kb: Optional[int] = None
    content_type: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReceptionReportRead(SQLModel):
    id: int
    report_number: str
    purchase_order_id: int
    supplier_invoice_id: Optional[int] = None
    warehouse_user_id: Optional[int] = None
    warehouse_user_name: Optional[str] = None
    status: inv_models.ReceptionReportStatus
    has_differences: bool
    signature_confirmed: bool
    finalized_at: Optional[datetime] = None
    finalized_by_name: Optional[str] = None
    created_at: Optional[datetime] = None
    purchase_order: Optional[PurchaseOrderBrief] = None
    items: List[ReceptionReportItemRead] = []
    photos: List[ReceptionPhotoRead] = []

    class Config:
        from_attributes = True


class ReceptionReportStats(BaseModel):
    total: int = 0
    deschis: int = 0
    in_completare: int = 0
    finalizat: int = 0


class ReceptionReportList(BaseModel):
    items: List[ReceptionReportRead]
    total: int
    stats: ReceptionReportStats


class ReceptionFinalizeResult(BaseModel):
    reception_report_id: int
    goods_receipt_id: int
    receipt_number: str
    has_differences: bool


# =============================================================================
# 6. 입고 전표 (GoodsReceipt, NIR)
# =============================================================================
class GoodsReceiptItemCreate(SQLModel):
    item_id: int
    quantity: Decimal = Field(..., gt=0)
    unit_cost: Decimal = Field(Decimal("0"), ge=0)
    notes: Optional[str] = None


class GoodsReceiptCreate(SQLModel):
    """직접 입고(레거시) 생성 스키마"""
    supplier_id: Optional[int] = None
    supplier_invoice_id: Optional[int] = None
    warehouse_id: Optional[int] = None
    document_number: Optional[str] = None
    document_date: Optional[date] = None
    notes: Optional[str] = None
    items: List[GoodsReceiptItemCreate] = []


class GoodsReceiptUpdate(SQLModel):
    supplier_id: Optional[int] = None
    warehouse_id: Optional[int] = None
    document_number: Optional[str] = None
    document_date: Optional[date] = None
    notes: Optional[str] = None
    items: Optional[List[GoodsReceiptItemCreate]] = None


class GoodsReceiptItemRead(SQLModel):
    id: int
    item_id: int
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    notes: Optional[str] = None
    inventory_item: Optional[InventoryItemBrief] = None

    class Config:
        from_attributes = True


class GoodsReceiptRead(SQLModel):
    id: int
    receipt_number: str
    supplier_id: Optional[int] = None
    supplier_invoice_id: Optional[int] = None
    reception_report_id: Optional[int] = None
    warehouse_id: Optional[int] = None
    status: inv_models.GoodsReceiptStatus
    document_number: Optional[str] = None
    document_date: Optional[date] = None
    notes: Optional[str] = None
    has_differences: bool
    total_items: int
    total_quantity: Decimal
    total_value: Decimal
    created_by_name: Optional[str] = None
    sent_to_office_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None
    verified_by_name: Optional[str] = None
    differences_approved_at: Optional[datetime] = None
    differences_approved_by: Optional[int] = None
    differences_approved_by_name: Optional[str] = None
    transferred_to_stock_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    supplier: Optional[SupplierBrief] = None
    items: List[GoodsReceiptItemRead] = []

    class Config:
        from_attributes = True


class GoodsReceiptList(BaseModel):
    items: List[GoodsReceiptRead]
    total: int
    stats: Dict[str, int]


class NirTransitionRequest(BaseModel):
    target_status: inv_models.GoodsReceiptStatus


class NirTransitionResult(BaseModel):
    success: bool
    nir: GoodsReceiptRead
    has_differences: bool


class NirAvailableTransitions(BaseModel):
    current_status: inv_models.GoodsReceiptStatus
    available_transitions: List[inv_models.GoodsReceiptStatus]
    requires_difference_approval: bool


class TransferToStockResult(BaseModel):
    success: bool
    already_processed: bool = False
    receipt_number: str
    warehouse_id: Optional[int] = None
    movements: List[StockMovementRead] = []
    message: Optional[str] = None


class ErrorList(BaseModel):
    """여러 검증 오류를 한 번에 반환할 때 사용되는 400 응답 본문"""
    message: str
    errors: List[str]
    details: Optional[Dict[str, Any]] = None


# =============================================================================
# 7. 주문 재고 차감 (SALE)
# =============================================================================
class OrderStockResult(BaseModel):
    order_id: int
    already_processed: bool = False
    processed: int = 0
    skipped: int = 0
    errors: List[str] = []
    movements: List[StockMovementRead] = []


# =============================================================================
# 8. 창고 간 이동 (WarehouseTransfer, TRF)
# =============================================================================
class WarehouseTransferItemCreate(SQLModel):
    item_id: int
    quantity: Decimal = Field(..., gt=0)
    notes: Optional[str] = None


class WarehouseTransferCreate(SQLModel):
    from_warehouse_id: Optional[int] = None
    to_warehouse_id: Optional[int] = None
    transfer_date: Optional[date] = None
    notes: Optional[str] = None
    items: List[WarehouseTransferItemCreate] = []


class WarehouseTransferUpdate(SQLModel):
    """DRAFT 상태에서만 허용. items가 주어지면 라인 전체를 교체합니다."""
    from_warehouse_id: Optional[int] = None
    to_warehouse_id: Optional[int] = None
    transfer_date: Optional[date] = None
    notes: Optional[str] = None
    items: Optional[List[WarehouseTransferItemCreate]] = None


class WarehouseTransferItemRead(SQLModel):
    id: int
    item_id: int
    quantity: Decimal
    from_stock_before: Optional[Decimal] = None
    from_stock_after: Optional[Decimal] = None
    to_stock_before: Optional[Decimal] = None
    to_stock_after: Optional[Decimal] = None
    notes: Optional[str] = None
    inventory_item: Optional[InventoryItemBrief] = None

    class Config:
        from_attributes = True


class WarehouseTransferRead(SQLModel):
    id: int
    transfer_number: str
    from_warehouse_id: int
    to_warehouse_id: int
    status: inv_models.TransferStatus
    transfer_date: date
    notes: Optional[str] = None
    created_by: Optional[int] = None
    completed_by: Optional[int] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    from_warehouse: Optional[WarehouseRead] = None
    to_warehouse: Optional[WarehouseRead] = None
    items: List[WarehouseTransferItemRead] = []

    class Config:
        from_attributes = True


class WarehouseTransferList(BaseModel):
    items: List[WarehouseTransferRead]
    total: int
