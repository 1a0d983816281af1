import logging

from sqlalchemy.orm import Session

from stock_ledger.database import unit_of_work
from stock_ledger.exceptions import ConflictError, InsufficientStockError, NotFoundError, ValidationFailedError
from stock_ledger.models.audit_log import AuditAction
from stock_ledger.models.inventory import ProductInventory, ReferenceType, StockLog, StockLogType
from stock_ledger.models.user import User
from stock_ledger.schemas.inventory import InventoryAdjust, InventoryMove
from stock_ledger.services import audit_service, ledger_store, lookup_service

logger = logging.getLogger(__name__)

INVENTORY_TABLE = "product_inventories"


def find_or_create_inventory(db: Session, product_id: int, warehouse_id: int, zone_id: int) -> ProductInventory:
    """Return the inventory row for the location, creating it with quantity 0 if absent.

    Callers resolve product, warehouse and zone first.
    """
    inventory = ledger_store.find_inventory(db, product_id, warehouse_id, zone_id)
    if inventory:
        return inventory
    return ledger_store.create_inventory(db, product_id, warehouse_id, zone_id)


def adjust_inventory(db: Session, data: InventoryAdjust, actor: User | None = None) -> ProductInventory:
    """Apply a signed quantity change at one location and log it as ADJUSTMENT_IN/OUT.

    A zero change is recorded as ADJUSTMENT_OUT.
    """
    try:
        with unit_of_work(db):
            lookup_service.require_location(db, data.product_id, data.warehouse_id, data.zone_id)
            inventory = find_or_create_inventory(db, data.product_id, data.warehouse_id, data.zone_id)
            inventory = ledger_store.lock_inventories(db, inventory.id)[inventory.id]

            quantity_before = inventory.quantity
            new_quantity = quantity_before + data.quantity_change
            if new_quantity < 0:
                raise InsufficientStockError(
                    f"Adjustment would result in negative stock. Current quantity: {quantity_before}"
                )

            ledger_store.save_inventory(db, inventory, new_quantity)
            log_type = StockLogType.ADJUSTMENT_IN if data.quantity_change > 0 else StockLogType.ADJUSTMENT_OUT
            ledger_store.append_stock_log(
                db,
                inventory,
                log_type,
                quantity_before=quantity_before,
                quantity_change=data.quantity_change,
                actor=actor,
                note=data.note,
                reference_type=data.reference_type,
                reference_id=data.reference_id,
            )
            audit_service.log_action(
                db,
                actor,
                AuditAction.ADJUST_INVENTORY,
                INVENTORY_TABLE,
                inventory.id,
                f"{log_type.value} {data.quantity_change:+d} ({quantity_before} -> {new_quantity}) {data.note}".strip(),
            )
    except (NotFoundError, ConflictError) as e:
        logger.warning("Adjustment rejected for product %s in zone %s: %s", data.product_id, data.zone_id, e)
        raise

    db.refresh(inventory)
    logger.info("Inventory adjusted for product ID: %s, new quantity: %d", data.product_id, inventory.quantity)
    return inventory


def move_inventory(db: Session, data: InventoryMove, actor: User | None = None) -> None:
    """Move stock between two zones of one warehouse as a GOODS_ISSUE / GOODS_RECEIPT pair.

    Both inventory rows are locked in ascending id order. The source row
    must already exist; the destination row is created on first use. Both
    log rows reference the destination inventory id.
    Either both quantities and both log rows commit, or nothing does.
    """
    if data.quantity < 1:
        raise ValidationFailedError("Quantity to move must be at least 1")
    if data.source_zone_id == data.destination_zone_id:
        raise ConflictError("Source and destination zones cannot be the same.")

    try:
        with unit_of_work(db):
            source = ledger_store.find_inventory(db, data.product_id, data.warehouse_id, data.source_zone_id)
            if not source:
                raise NotFoundError("Inventory not found in source zone.")
            lookup_service.require_zone_in_warehouse(db, data.warehouse_id, data.destination_zone_id)
            destination = find_or_create_inventory(
                db, data.product_id, data.warehouse_id, data.destination_zone_id
            )

            locked = ledger_store.lock_inventories(db, source.id, destination.id)
            source, destination = locked[source.id], locked[destination.id]

            if source.quantity < data.quantity:
                raise InsufficientStockError(f"Insufficient stock in source zone. Available: {source.quantity}")

            source_before = source.quantity
            ledger_store.save_inventory(db, source, source_before - data.quantity)
            ledger_store.append_stock_log(
                db,
                source,
                StockLogType.GOODS_ISSUE,
                quantity_before=source_before,
                quantity_change=-data.quantity,
                actor=actor,
                note=data.note,
                reference_type=ReferenceType.INVENTORY_TRANSFER,
                reference_id=str(destination.id),
            )

            destination_before = destination.quantity
            ledger_store.save_inventory(db, destination, destination_before + data.quantity)
            ledger_store.append_stock_log(
                db,
                destination,
                StockLogType.GOODS_RECEIPT,
                quantity_before=destination_before,
                quantity_change=data.quantity,
                actor=actor,
                note=data.note,
                reference_type=ReferenceType.INVENTORY_TRANSFER,
                reference_id=str(destination.id),
            )

            audit_service.log_action(
                db,
                actor,
                AuditAction.MOVE_INVENTORY,
                INVENTORY_TABLE,
                source.id,
                f"Moved {data.quantity} from inventory {source.id} to {destination.id} {data.note}".strip(),
            )
    except (NotFoundError, ConflictError) as e:
        logger.warning("Move rejected for product %s: %s", data.product_id, e)
        raise

    logger.info(
        "Moved %d units of product ID: %s from zone ID: %s to zone ID: %s",
        data.quantity, data.product_id, data.source_zone_id, data.destination_zone_id,
    )


def get_inventory(db: Session, inventory_id: int) -> ProductInventory:
    inventory = ledger_store.get_inventory(db, inventory_id)
    if not inventory:
        raise NotFoundError("Inventory", "id", inventory_id)
    return inventory


def list_inventory(
    db: Session, skip: int = 0, limit: int = 100, product_id: int | None = None, warehouse_id: int | None = None
) -> list[ProductInventory]:
    return ledger_store.list_inventory(db, skip=skip, limit=limit, product_id=product_id, warehouse_id=warehouse_id)


def get_stock_logs(db: Session, inventory_id: int, skip: int = 0, limit: int = 100) -> list[StockLog]:
    get_inventory(db, inventory_id)
    return ledger_store.get_stock_logs(db, inventory_id, skip=skip, limit=limit)
