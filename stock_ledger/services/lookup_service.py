"""Read-only lookups: reference resolution, uniqueness oracles and actors."""

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from stock_ledger.exceptions import NotFoundError
from stock_ledger.models.catalog import Product, Warehouse, WarehouseZone
from stock_ledger.models.user import User


def get_product(db: Session, product_id: int) -> Product | None:
    return db.get(Product, product_id)


def get_warehouse(db: Session, warehouse_id: int) -> Warehouse | None:
    return db.get(Warehouse, warehouse_id)


def get_zone_in_warehouse(db: Session, warehouse_id: int, zone_id: int) -> WarehouseZone | None:
    return db.scalars(
        select(WarehouseZone).where(WarehouseZone.id == zone_id, WarehouseZone.warehouse_id == warehouse_id)
    ).first()


def require_product(db: Session, product_id: int) -> Product:
    product = get_product(db, product_id)
    if not product:
        raise NotFoundError("Product", "id", product_id)
    return product


def require_warehouse(db: Session, warehouse_id: int) -> Warehouse:
    warehouse = get_warehouse(db, warehouse_id)
    if not warehouse:
        raise NotFoundError("Warehouse", "id", warehouse_id)
    return warehouse


def require_zone_in_warehouse(db: Session, warehouse_id: int, zone_id: int) -> WarehouseZone:
    zone = get_zone_in_warehouse(db, warehouse_id, zone_id)
    if not zone:
        raise NotFoundError(f"Zone not found with id: {zone_id} in warehouse {warehouse_id}")
    return zone


def require_location(db: Session, product_id: int, warehouse_id: int, zone_id: int) -> None:
    """Raise NotFoundError unless product, warehouse and zone exist and the zone is in the warehouse."""
    require_product(db, product_id)
    require_warehouse(db, warehouse_id)
    require_zone_in_warehouse(db, warehouse_id, zone_id)


# --- Uniqueness oracles ---

def sku_exists(db: Session, sku: str) -> bool:
    return db.scalar(select(exists().where(Product.sku == sku)))


def barcode_exists(db: Session, barcode: str) -> bool:
    return db.scalar(select(exists().where(Product.barcode == barcode)))


def warehouse_code_exists(db: Session, code: str) -> bool:
    return db.scalar(select(exists().where(Warehouse.code == code)))


def zone_code_exists(db: Session, code: str) -> bool:
    return db.scalar(select(exists().where(WarehouseZone.code == code)))


# --- Actors ---

def get_actor_by_username(db: Session, username: str) -> User | None:
    return db.scalars(select(User).where(User.username == username, User.active == True)).first()  # noqa: E712
