"""Persistence primitives for current quantities and the stock log.

These functions never commit. They run inside the unit of work opened by
the ledger engine, which owns commit and rollback.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stock_ledger.models.inventory import ProductInventory, ReferenceType, StockLog, StockLogType
from stock_ledger.models.user import User


def find_inventory(db: Session, product_id: int, warehouse_id: int, zone_id: int) -> ProductInventory | None:
    return db.scalars(
        select(ProductInventory).where(
            ProductInventory.product_id == product_id,
            ProductInventory.warehouse_id == warehouse_id,
            ProductInventory.zone_id == zone_id,
        )
    ).first()


def create_inventory(db: Session, product_id: int, warehouse_id: int, zone_id: int) -> ProductInventory:
    """Insert a zero-quantity row, or return the row a concurrent writer inserted first."""
    inventory = ProductInventory(product_id=product_id, warehouse_id=warehouse_id, zone_id=zone_id, quantity=0)
    try:
        with db.begin_nested():
            db.add(inventory)
    except IntegrityError:
        existing = find_inventory(db, product_id, warehouse_id, zone_id)
        if existing is None:
            raise
        return existing
    return inventory


def lock_inventories(db: Session, *inventory_ids: int) -> dict[int, ProductInventory]:
    """Row-lock inventories in ascending id order and reload their quantities.

    A fixed order keeps two moves across the same pair of zones from
    deadlocking each other.
    """
    locked = {}
    for inventory_id in sorted(set(inventory_ids)):
        row = db.scalars(
            select(ProductInventory)
            .where(ProductInventory.id == inventory_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).one()
        locked[inventory_id] = row
    return locked


def save_inventory(db: Session, inventory: ProductInventory, quantity: int) -> ProductInventory:
    inventory.quantity = quantity
    db.add(inventory)
    db.flush()
    return inventory


def append_stock_log(
    db: Session,
    inventory: ProductInventory,
    log_type: StockLogType,
    quantity_before: int,
    quantity_change: int,
    actor: User | None = None,
    note: str = "",
    reference_type: ReferenceType | None = None,
    reference_id: str | None = None,
) -> StockLog:
    """Append one immutable log row. ``quantity_after`` is always recomputed."""
    log = StockLog(
        inventory_id=inventory.id,
        actor_id=actor.id if actor else None,
        type=log_type,
        quantity_before=quantity_before,
        quantity_change=quantity_change,
        quantity_after=quantity_before + quantity_change,
        reference_type=reference_type,
        reference_id=reference_id,
        note=note or "",
    )
    db.add(log)
    db.flush()
    return log


# --- Read side ---

def get_inventory(db: Session, inventory_id: int) -> ProductInventory | None:
    return db.get(ProductInventory, inventory_id)


def list_inventory(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    product_id: int | None = None,
    warehouse_id: int | None = None,
) -> list[ProductInventory]:
    q = select(ProductInventory)
    if product_id is not None:
        q = q.where(ProductInventory.product_id == product_id)
    if warehouse_id is not None:
        q = q.where(ProductInventory.warehouse_id == warehouse_id)
    return list(db.scalars(q.order_by(ProductInventory.id).offset(skip).limit(limit)).all())


def get_stock_logs(db: Session, inventory_id: int, skip: int = 0, limit: int = 100) -> list[StockLog]:
    return list(
        db.scalars(
            select(StockLog)
            .where(StockLog.inventory_id == inventory_id)
            .order_by(StockLog.created_at, StockLog.id)
            .offset(skip)
            .limit(limit)
        ).all()
    )
