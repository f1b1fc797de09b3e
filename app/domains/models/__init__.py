# app/domains/models/__init__.py

"""
이 파일은 모든 도메인의 SQLModel 모델들을 한 곳에서 중앙 관리하여,
다른 모듈에서 쉽게 임포트할 수 있도록 하는 역할을 합니다.
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다 (Alembic autogenerate 포함).
"""

# usr (User)
from app.domains.usr.models import User, UserRole

# shared (CronLock, Notification, AppSettings)
from app.domains.shared.models import CronLock, Notification, AppSettings

# ic (Company, IntercompanyInvoice, IntercompanyOrderLink)
from app.domains.ic.models import Company, IntercompanyInvoice, IntercompanyOrderLink

# ord (Store, Order, OrderLineItem)
from app.domains.ord.models import Store, Order, OrderLineItem

# shp (AWB, HandoverSession)
from app.domains.shp.models import AWB, HandoverSession

# inv (공급업체, 창고, 품목, 재고, 발주, 입고 검수, NIR, 창고 간 이동)
from app.domains.inv.models import (
    Supplier, SupplierInvoice, Warehouse, InventoryItem, WarehouseStock, InventoryStockMovement,
    PurchaseOrder, PurchaseOrderItem, ReceptionReport, ReceptionReportItem, ReceptionPhoto,
    GoodsReceipt, GoodsReceiptItem, WarehouseTransfer, WarehouseTransferItem,
)


#  `from app.domains.models import *` 구문으로 임포트될 모델 목록 정의
__all__ = [
    # usr
    "User", "UserRole",
    # shared
    "CronLock", "Notification", "AppSettings",
    # ic
    "Company", "IntercompanyInvoice", "IntercompanyOrderLink",
    # ord
    "Store", "Order", "OrderLineItem",
    # shp
    "AWB", "HandoverSession",
    # inv
    "Supplier", "SupplierInvoice", "Warehouse", "InventoryItem", "WarehouseStock", "InventoryStockMovement",
    "PurchaseOrder", "PurchaseOrderItem", "ReceptionReport", "ReceptionReportItem", "ReceptionPhoto",
    "GoodsReceipt", "GoodsReceiptItem", "WarehouseTransfer", "WarehouseTransferItem",
]
