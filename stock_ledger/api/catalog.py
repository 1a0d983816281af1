from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stock_ledger.api.deps import get_current_actor
from stock_ledger.database import get_db
from stock_ledger.models.user import User
from stock_ledger.schemas.catalog import (
    ProductCreate,
    ProductOut,
    WarehouseCreate,
    WarehouseOut,
    ZoneCreate,
    ZoneOut,
)
from stock_ledger.services import catalog_service

router = APIRouter(tags=["Catalog"])


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    actor: User | None = Depends(get_current_actor),
):
    return catalog_service.create_product(db, data, actor)


@router.post("/warehouses", response_model=WarehouseOut, status_code=201)
def create_warehouse(
    data: WarehouseCreate,
    db: Session = Depends(get_db),
    actor: User | None = Depends(get_current_actor),
):
    return catalog_service.create_warehouse(db, data, actor)


@router.post("/warehouses/{warehouse_id}/zones", response_model=ZoneOut, status_code=201)
def create_zone(
    warehouse_id: int,
    data: ZoneCreate,
    db: Session = Depends(get_db),
    actor: User | None = Depends(get_current_actor),
):
    return catalog_service.create_zone(db, warehouse_id, data, actor)


@router.get("/warehouses/{warehouse_id}/zones", response_model=list[ZoneOut])
def list_zones(warehouse_id: int, db: Session = Depends(get_db)):
    return catalog_service.list_zones(db, warehouse_id)
