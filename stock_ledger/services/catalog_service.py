import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stock_ledger.database import unit_of_work
from stock_ledger.exceptions import ConflictError
from stock_ledger.models.audit_log import AuditAction
from stock_ledger.models.catalog import Product, Warehouse, WarehouseZone
from stock_ledger.models.user import User
from stock_ledger.schemas.catalog import ProductCreate, WarehouseCreate, ZoneCreate
from stock_ledger.services import audit_service, identifier_service, lookup_service

logger = logging.getLogger(__name__)

INSERT_ATTEMPTS = 3


def _insert_with_generated_identifiers(db: Session, build):
    """Insert ``build()``, rebuilding it when a concurrent create took its identifier.

    The generators only probe, so another transaction can claim the same
    value before this insert lands. Each attempt runs in a savepoint and a
    unique violation triggers a fresh probe.
    """
    for attempt in range(1, INSERT_ATTEMPTS + 1):
        entity = build()
        try:
            with db.begin_nested():
                db.add(entity)
        except IntegrityError as e:
            if attempt == INSERT_ATTEMPTS:
                raise ConflictError(
                    f"Generated identifier already taken after {INSERT_ATTEMPTS} attempts"
                ) from e
            logger.warning("Generated identifier taken for %s, retrying (attempt %d)", type(entity).__name__, attempt)
            continue
        return entity


def create_product(db: Session, data: ProductCreate, actor: User | None = None) -> Product:
    """Create a product with a generated SKU and EAN-13 barcode."""
    with unit_of_work(db):
        product = _insert_with_generated_identifiers(db, lambda: Product(
            sku=identifier_service.generate_sku(db, data.category, data.name, data.unit),
            barcode=identifier_service.generate_ean13_barcode(db),
            name=data.name,
            description=data.description,
            category=data.category,
            unit=data.unit,
            minimum_stock=data.minimum_stock,
        ))
        audit_service.log_action(
            db, actor, AuditAction.CREATE_PRODUCT, Product.__tablename__, product.id,
            f"Created product {product.name} ({product.sku})",
        )
    db.refresh(product)
    logger.info("Created product %s with SKU %s", product.id, product.sku)
    return product


def create_warehouse(db: Session, data: WarehouseCreate, actor: User | None = None) -> Warehouse:
    with unit_of_work(db):
        warehouse = _insert_with_generated_identifiers(db, lambda: Warehouse(
            code=identifier_service.generate_warehouse_code(db, data.name),
            name=data.name,
            address=data.address,
        ))
        audit_service.log_action(
            db, actor, AuditAction.CREATE_WAREHOUSE, Warehouse.__tablename__, warehouse.id,
            f"Created warehouse {warehouse.name} ({warehouse.code})",
        )
    db.refresh(warehouse)
    logger.info("Created warehouse %s with code %s", warehouse.id, warehouse.code)
    return warehouse


def create_zone(db: Session, warehouse_id: int, data: ZoneCreate, actor: User | None = None) -> WarehouseZone:
    with unit_of_work(db):
        warehouse = lookup_service.require_warehouse(db, warehouse_id)
        zone = _insert_with_generated_identifiers(db, lambda: WarehouseZone(
            warehouse_id=warehouse.id,
            code=identifier_service.generate_zone_code(db, warehouse.code, data.name),
            name=data.name,
        ))
        audit_service.log_action(
            db, actor, AuditAction.CREATE_ZONE, WarehouseZone.__tablename__, zone.id,
            f"Created zone {zone.name} ({zone.code}) in warehouse {warehouse.code}",
        )
    db.refresh(zone)
    logger.info("Created zone %s with code %s", zone.id, zone.code)
    return zone


def list_zones(db: Session, warehouse_id: int) -> list[WarehouseZone]:
    lookup_service.require_warehouse(db, warehouse_id)
    return list(
        db.scalars(select(WarehouseZone).where(WarehouseZone.warehouse_id == warehouse_id).order_by(WarehouseZone.id))
    )


def create_actor(db: Session, username: str, display_name: str = "") -> User:
    with unit_of_work(db):
        if db.scalars(select(User).where(User.username == username)).first():
            raise ConflictError(f"Username '{username}' already exists")
        user = User(username=username, display_name=display_name or username)
        db.add(user)
    db.refresh(user)
    return user
