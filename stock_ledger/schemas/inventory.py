from datetime import datetime

from pydantic import BaseModel, Field

from stock_ledger.models.inventory import ReferenceType, StockLogType


class InventoryAdjust(BaseModel):
    product_id: int
    warehouse_id: int
    zone_id: int
    quantity_change: int  # positive=add, negative=remove
    note: str = ""
    reference_type: ReferenceType | None = None
    reference_id: str | None = Field(default=None, max_length=50)


class InventoryMove(BaseModel):
    product_id: int
    warehouse_id: int
    source_zone_id: int
    destination_zone_id: int
    quantity: int = Field(ge=1)
    note: str = ""


class InventoryOut(BaseModel):
    id: int
    product_id: int
    warehouse_id: int
    zone_id: int
    quantity: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class StockLogOut(BaseModel):
    id: int
    inventory_id: int
    actor_id: int | None
    type: StockLogType
    quantity_before: int
    quantity_change: int
    quantity_after: int
    reference_type: ReferenceType | None
    reference_id: str | None
    note: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
