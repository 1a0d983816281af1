from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from stock_ledger.database import Base


class StockLogType(str, PyEnum):
    INITIAL_STOCK = "INITIAL_STOCK"
    GOODS_RECEIPT = "GOODS_RECEIPT"
    GOODS_ISSUE = "GOODS_ISSUE"
    ADJUSTMENT_IN = "ADJUSTMENT_IN"
    ADJUSTMENT_OUT = "ADJUSTMENT_OUT"
    STOCK_COUNT = "STOCK_COUNT"
    RETURN_IN = "RETURN_IN"
    RETURN_OUT = "RETURN_OUT"
    DAMAGED = "DAMAGED"
    EXPIRED = "EXPIRED"


class ReferenceType(str, PyEnum):
    """Kind of source document a stock log row points at."""

    PURCHASE_ORDER = "PURCHASE_ORDER"
    SALES_ORDER = "SALES_ORDER"
    WORK_ORDER = "WORK_ORDER"
    RETURN_AUTHORIZATION = "RETURN_AUTHORIZATION"
    STOCK_TAKE_DOCUMENT = "STOCK_TAKE_DOCUMENT"
    INVENTORY_TRANSFER = "INVENTORY_TRANSFER"  # reference_id is the destination inventory id


class ProductInventory(Base):
    """Current quantity of one product in one warehouse zone."""

    __tablename__ = "product_inventories"
    __table_args__ = (
        UniqueConstraint("product_id", "warehouse_id", "zone_id", name="uk_product_location"),
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    warehouse_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouses.id"), nullable=False)
    zone_id: Mapped[int] = mapped_column(Integer, ForeignKey("warehouse_zones.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())


class StockLog(Base):
    """Immutable record of a single quantity change."""

    __tablename__ = "stock_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    inventory_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product_inventories.id"), nullable=False, index=True
    )
    actor_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)  # NULL = system
    type: Mapped[StockLogType] = mapped_column(
        Enum(StockLogType, values_callable=lambda x: [e.value for e in x], length=50),
        nullable=False,
    )
    quantity_before: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_change: Mapped[int] = mapped_column(Integer, nullable=False)  # positive=in, negative=out
    quantity_after: Mapped[int] = mapped_column(Integer, nullable=False)
    reference_type: Mapped[ReferenceType | None] = mapped_column(
        Enum(ReferenceType, values_callable=lambda x: [e.value for e in x], length=50),
        nullable=True,
    )
    reference_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    note: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
