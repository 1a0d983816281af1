from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stock_ledger.api.deps import get_current_actor
from stock_ledger.database import get_db
from stock_ledger.models.user import User
from stock_ledger.schemas.inventory import InventoryAdjust, InventoryMove, InventoryOut, StockLogOut
from stock_ledger.services import inventory_service

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("", response_model=list[InventoryOut])
def list_inventory(
    skip: int = 0,
    limit: int = 100,
    product_id: int | None = None,
    warehouse_id: int | None = None,
    db: Session = Depends(get_db),
):
    return inventory_service.list_inventory(db, skip=skip, limit=limit, product_id=product_id, warehouse_id=warehouse_id)


@router.post("/adjust", response_model=InventoryOut)
def adjust_inventory(
    data: InventoryAdjust,
    db: Session = Depends(get_db),
    actor: User | None = Depends(get_current_actor),
):
    return inventory_service.adjust_inventory(db, data, actor)


@router.post("/move", status_code=204)
def move_inventory(
    data: InventoryMove,
    db: Session = Depends(get_db),
    actor: User | None = Depends(get_current_actor),
):
    inventory_service.move_inventory(db, data, actor)
    return Response(status_code=204)


@router.get("/{inventory_id}", response_model=InventoryOut)
def get_inventory(inventory_id: int, db: Session = Depends(get_db)):
    return inventory_service.get_inventory(db, inventory_id)


@router.get("/{inventory_id}/logs", response_model=list[StockLogOut])
def get_stock_logs(inventory_id: int, skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return inventory_service.get_stock_logs(db, inventory_id, skip=skip, limit=limit)
