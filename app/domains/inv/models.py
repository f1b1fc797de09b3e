# app/domains/inv/models.py

"""
'inv' 도메인 (PostgreSQL 'inv' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

공급업체/공급업체 인보이스, 창고, 재고 품목과 창고별 재고, 재고 이동 이력,
발주(PC), 입고 검수 보고서(PV), 입고 전표(NIR, GoodsReceipt), 창고 간 이동(TRF) 테이블을 포함합니다.
"""

from typing import Optional, List
from datetime import datetime, date, UTC
from decimal import Decimal
from enum import Enum

from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import Numeric, String, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


# =============================================================================
# 상태 / 유형 Enum
# =============================================================================
class PurchaseOrderStatus(str, Enum):
    DRAFT = "DRAFT"
    APROBATA = "APROBATA"
    IN_RECEPTIE = "IN_RECEPTIE"
    RECEPTIONATA = "RECEPTIONATA"
    ANULATA = "ANULATA"


class ReceptionReportStatus(str, Enum):
    DESCHIS = "DESCHIS"
    IN_COMPLETARE = "IN_COMPLETARE"
    FINALIZAT = "FINALIZAT"


class PhotoCategory(str, Enum):
    OVERVIEW = "OVERVIEW"
    ETICHETE = "ETICHETE"
    FACTURA = "FACTURA"
    DETERIORARI = "DETERIORARI"


class GoodsReceiptStatus(str, Enum):
    # 입고 검수(PV)에서 생성되는 NIR 워크플로우
    GENERAT = "GENERAT"
    TRIMIS_OFFICE = "TRIMIS_OFFICE"
    VERIFICAT = "VERIFICAT"
    APROBAT = "APROBAT"
    IN_STOC = "IN_STOC"
    RESPINS = "RESPINS"
    # 직접 입고 (레거시)
    DRAFT = "DRAFT"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    UNPAID = "UNPAID"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


class MovementType(str, Enum):
    RECEIPT = "RECEIPT"
    ADJUSTMENT_PLUS = "ADJUSTMENT_PLUS"
    ADJUSTMENT_MINUS = "ADJUSTMENT_MINUS"
    SALE = "SALE"
    TRANSFER = "TRANSFER"


class TransferStatus(str, Enum):
    DRAFT = "DRAFT"
    COMPLETED = "COMPLETED"


# =============================================================================
# 1. inv.suppliers 테이블 모델
# =============================================================================
class SupplierBase(SQLModel):
    name: str = Field(max_length=200, sa_column_kwargs={"unique": True}, description="공급업체명")
    code: Optional[str] = Field(default=None, max_length=50, description="공급업체 코드")
    tax_id: Optional[str] = Field(default=None, max_length=50, description="사업자 번호 (CUI)")
    contact_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    is_active: bool = Field(default=True)


class Supplier(SupplierBase, table=True):
    __tablename__ = "suppliers"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )


# =============================================================================
# 2. inv.supplier_invoices 테이블 모델
# =============================================================================
class SupplierInvoiceBase(SQLModel):
    supplier_id: int = Field(foreign_key="inv.suppliers.id", index=True, description="공급업체 ID")
    invoice_number: str = Field(max_length=100, description="공급업체 인보이스 번호")
    invoice_date: date = Field(description="인보이스 발행일")
    total_value: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 2), nullable=False, server_default="0"))
    payment_status: PaymentStatus = Field(default=PaymentStatus.UNPAID, sa_column=Column(String(20), nullable=False))
    notes: Optional[str] = Field(default=None)


class SupplierInvoice(SupplierInvoiceBase, table=True):
    __tablename__ = "supplier_invoices"
    __table_args__ = (
        UniqueConstraint("supplier_id", "invoice_number", name="uq_supplier_invoice_number"),
        {'schema': 'inv'},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )

    supplier: Optional["Supplier"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})


# =============================================================================
# 3. inv.warehouses 테이블 모델
# =============================================================================
class WarehouseBase(SQLModel):
    code: str = Field(max_length=20, sa_column_kwargs={"unique": True}, description="창고 코드")
    name: str = Field(max_length=100, description="창고명")
    address: Optional[str] = Field(default=None)
    is_primary: bool = Field(default=False, description="기본 창고 여부 (NIR 재고 반영 대상)")
    is_active: bool = Field(default=True)


class Warehouse(WarehouseBase, table=True):
    __tablename__ = "warehouses"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )


# =============================================================================
# 4. inv.inventory_items 테이블 모델
# =============================================================================
class InventoryItemBase(SQLModel):
    sku: str = Field(max_length=100, sa_column_kwargs={"unique": True}, description="SKU")
    name: str = Field(max_length=255, description="품목명")
    unit: str = Field(default="buc", max_length=20, description="단위")
    cost_price: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 2)), description="매입 단가")
    min_stock: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 3), nullable=False, server_default="0"))
    is_active: bool = Field(default=True)


class InventoryItem(InventoryItemBase, table=True):
    __tablename__ = "inventory_items"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    current_stock: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 3), nullable=False, server_default="0"),
        description="전체 창고 합계 재고"
    )
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )


# =============================================================================
# 5. inv.warehouse_stocks 테이블 모델
# =============================================================================
class WarehouseStock(SQLModel, table=True):
    __tablename__ = "warehouse_stocks"
    __table_args__ = (
        UniqueConstraint("warehouse_id", "item_id", name="uq_warehouse_stock_item"),
        {'schema': 'inv'},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    warehouse_id: int = Field(foreign_key="inv.warehouses.id", index=True)
    item_id: int = Field(foreign_key="inv.inventory_items.id", index=True)
    current_stock: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 3), nullable=False, server_default="0"))
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )


# =============================================================================
# 6. inv.stock_movements 테이블 모델
# =============================================================================
class InventoryStockMovement(SQLModel, table=True):
    """재고 변동 이력. 모든 재고 증감은 이전/이후 재고와 함께 기록됩니다."""
    __tablename__ = "stock_movements"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    item_id: int = Field(foreign_key="inv.inventory_items.id", index=True)
    warehouse_id: Optional[int] = Field(default=None, foreign_key="inv.warehouses.id")
    type: MovementType = Field(sa_column=Column(String(20), nullable=False))
    quantity: Decimal = Field(sa_column=Column(Numeric(18, 3), nullable=False))
    previous_stock: Decimal = Field(sa_column=Column(Numeric(18, 3), nullable=False))
    new_stock: Decimal = Field(sa_column=Column(Numeric(18, 3), nullable=False))
    receipt_id: Optional[int] = Field(default=None, foreign_key="inv.goods_receipts.id", index=True)
    order_id: Optional[int] = Field(default=None, foreign_key="ord.orders.id", index=True)
    transfer_id: Optional[int] = Field(default=None, foreign_key="inv.warehouse_transfers.id", index=True)
    reason: Optional[str] = Field(default=None)
    user_id: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    user_name: Optional[str] = Field(default=None, max_length=100)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )


# =============================================================================
# 7. inv.purchase_orders / inv.purchase_order_items 테이블 모델
# =============================================================================
class PurchaseOrder(SQLModel, table=True):
    __tablename__ = "purchase_orders"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    document_number: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="발주 번호 (PC-DD/MM/YYYY-NNNN)")
    supplier_id: int = Field(foreign_key="inv.suppliers.id", index=True)
    status: PurchaseOrderStatus = Field(default=PurchaseOrderStatus.DRAFT, sa_column=Column(String(20), nullable=False, index=True))
    expected_date: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    total_items: int = Field(default=0)
    total_quantity: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 3), nullable=False, server_default="0"))
    total_value: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 2), nullable=False, server_default="0"))
    created_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    created_by_name: Optional[str] = Field(default=None, max_length=100)
    approved_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    approved_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )

    supplier: Optional["Supplier"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    items: List["PurchaseOrderItem"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan", "order_by": "PurchaseOrderItem.id"}
    )


class PurchaseOrderItem(SQLModel, table=True):
    __tablename__ = "purchase_order_items"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    purchase_order_id: Optional[int] = Field(default=None, foreign_key="inv.purchase_orders.id", index=True)
    inventory_item_id: int = Field(foreign_key="inv.inventory_items.id")
    quantity_ordered: Decimal = Field(sa_column=Column(Numeric(18, 3), nullable=False))
    unit_price: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 2)))
    total_price: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 2)))
    notes: Optional[str] = Field(default=None)

    inventory_item: Optional["InventoryItem"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})


# =============================================================================
# 8. inv.reception_reports / items / photos 테이블 모델
# =============================================================================
class ReceptionReport(SQLModel, table=True):
    """입고 검수 보고서 (Proces Verbal de receptie, PV)."""
    __tablename__ = "reception_reports"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    report_number: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="PV-DD/MM/YYYY-NNNN")
    purchase_order_id: int = Field(foreign_key="inv.purchase_orders.id", index=True)
    supplier_invoice_id: Optional[int] = Field(default=None, foreign_key="inv.supplier_invoices.id")
    warehouse_user_id: Optional[int] = Field(default=None, foreign_key="usr.users.id", index=True)
    warehouse_user_name: Optional[str] = Field(default=None, max_length=100)
    status: ReceptionReportStatus = Field(
        default=ReceptionReportStatus.DESCHIS, sa_column=Column(String(20), nullable=False, index=True)
    )
    has_differences: bool = Field(default=False)
    signature_confirmed: bool = Field(default=False)
    finalized_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    finalized_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    finalized_by_name: Optional[str] = Field(default=None, max_length=100)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )

    purchase_order: Optional["PurchaseOrder"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    supplier_invoice: Optional["SupplierInvoice"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    items: List["ReceptionReportItem"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan", "order_by": "ReceptionReportItem.id"}
    )
    photos: List["ReceptionPhoto"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan", "order_by": "ReceptionPhoto.id"}
    )


class ReceptionReportItem(SQLModel, table=True):
    __tablename__ = "reception_report_items"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    reception_report_id: Optional[int] = Field(default=None, foreign_key="inv.reception_reports.id", index=True)
    purchase_order_item_id: Optional[int] = Field(default=None, foreign_key="inv.purchase_order_items.id")
    inventory_item_id: int = Field(foreign_key="inv.inventory_items.id")
    quantity_expected: Decimal = Field(sa_column=Column(Numeric(18, 3), nullable=False))
    quantity_received: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 3)))
    verified: bool = Field(default=False)
    observations: Optional[str] = Field(default=None)
    has_difference: bool = Field(default=False)

    inventory_item: Optional["InventoryItem"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})


class ReceptionPhoto(SQLModel, table=True):
    __tablename__ = "reception_photos"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    reception_report_id: Optional[int] = Field(default=None, foreign_key="inv.reception_reports.id", index=True)
    category: PhotoCategory = Field(sa_column=Column(String(20), nullable=False))
    path: str = Field(max_length=500, description="UPLOAD_DIR 기준 상대 경로")
    original_name: Optional[str] = Field(default=None, max_length=255)
    size_kb: Optional[int] = Field(default=None)
    content_type: Optional[str] = Field(default=None, max_length=100)
    uploaded_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )


# =============================================================================
# 9. inv.goods_receipts / inv.goods_receipt_items 테이블 모델 (NIR)
# =============================================================================
class GoodsReceipt(SQLModel, table=True):
    """입고 전표 (Nota de Intrare-Receptie, NIR)."""
    __tablename__ = "goods_receipts"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    receipt_number: str = Field(max_length=50, sa_column_kwargs={"unique": True})
    supplier_id: Optional[int] = Field(default=None, foreign_key="inv.suppliers.id", index=True)
    supplier_invoice_id: Optional[int] = Field(default=None, foreign_key="inv.supplier_invoices.id")
    reception_report_id: Optional[int] = Field(
        default=None, foreign_key="inv.reception_reports.id", sa_column_kwargs={"unique": True}
    )
    warehouse_id: Optional[int] = Field(default=None, foreign_key="inv.warehouses.id")
    status: GoodsReceiptStatus = Field(
        default=GoodsReceiptStatus.DRAFT, sa_column=Column(String(20), nullable=False, index=True)
    )
    document_number: Optional[str] = Field(default=None, max_length=100, description="공급업체 문서(인보이스) 번호")
    document_date: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    has_differences: bool = Field(default=False)
    total_items: int = Field(default=0)
    total_quantity: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 3), nullable=False, server_default="0"))
    total_value: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 2), nullable=False, server_default="0"))

    created_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    created_by_name: Optional[str] = Field(default=None, max_length=100)
    sent_to_office_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    verified_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    verified_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    verified_by_name: Optional[str] = Field(default=None, max_length=100)
    differences_approved_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    differences_approved_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    differences_approved_by_name: Optional[str] = Field(default=None, max_length=100)
    transferred_to_stock_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    completed_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    completed_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )

    supplier: Optional["Supplier"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    supplier_invoice: Optional["SupplierInvoice"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    items: List["GoodsReceiptItem"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan", "order_by": "GoodsReceiptItem.id"}
    )


class GoodsReceiptItem(SQLModel, table=True):
    __tablename__ = "goods_receipt_items"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    receipt_id: Optional[int] = Field(default=None, foreign_key="inv.goods_receipts.id", index=True)
    item_id: int = Field(foreign_key="inv.inventory_items.id")
    quantity: Decimal = Field(sa_column=Column(Numeric(18, 3), nullable=False))
    unit_cost: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 2), nullable=False, server_default="0"))
    total_cost: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(18, 2), nullable=False, server_default="0"))
    notes: Optional[str] = Field(default=None)

    inventory_item: Optional["InventoryItem"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})


# =============================================================================
# 10. inv.warehouse_transfers / inv.warehouse_transfer_items 테이블 모델
# =============================================================================
class WarehouseTransfer(SQLModel, table=True):
    """창고 간 재고 이동. DRAFT로 만들어지고 실행(execute) 시 한 번에 COMPLETED가 됩니다."""
    __tablename__ = "warehouse_transfers"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    transfer_number: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="TRF-YYYYMMDD-NNN")
    from_warehouse_id: int = Field(foreign_key="inv.warehouses.id", index=True)
    to_warehouse_id: int = Field(foreign_key="inv.warehouses.id", index=True)
    status: TransferStatus = Field(
        default=TransferStatus.DRAFT, sa_column=Column(String(20), nullable=False, index=True)
    )
    transfer_date: date = Field(description="이동 일자")
    notes: Optional[str] = Field(default=None)
    created_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    completed_by: Optional[int] = Field(default=None, foreign_key="usr.users.id")
    completed_at: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)))
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )

    from_warehouse: Optional["Warehouse"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "foreign_keys": "WarehouseTransfer.from_warehouse_id"}
    )
    to_warehouse: Optional["Warehouse"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "foreign_keys": "WarehouseTransfer.to_warehouse_id"}
    )
    items: List["WarehouseTransferItem"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete-orphan", "order_by": "WarehouseTransferItem.id"}
    )


class WarehouseTransferItem(SQLModel, table=True):
    """이동 라인. 실행 시점의 출발/도착 창고 재고(전/후)를 함께 남깁니다."""
    __tablename__ = "warehouse_transfer_items"
    __table_args__ = {'schema': 'inv'}

    id: Optional[int] = Field(default=None, primary_key=True)
    transfer_id: Optional[int] = Field(default=None, foreign_key="inv.warehouse_transfers.id", index=True)
    item_id: int = Field(foreign_key="inv.inventory_items.id")
    quantity: Decimal = Field(sa_column=Column(Numeric(18, 3), nullable=False))
    from_stock_before: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 3)))
    from_stock_after: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 3)))
    to_stock_before: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 3)))
    to_stock_after: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 3)))
    notes: Optional[str] = Field(default=None)

    inventory_item: Optional["InventoryItem"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
