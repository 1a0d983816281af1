from datetime import datetime

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    category: str = ""
    unit: str = ""
    minimum_stock: int = Field(default=0, ge=0)


class ProductOut(BaseModel):
    id: int
    sku: str
    barcode: str
    name: str
    description: str
    category: str
    unit: str
    minimum_stock: int
    active: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class WarehouseCreate(BaseModel):
    name: str = Field(min_length=1)
    address: str = ""


class WarehouseOut(BaseModel):
    id: int
    code: str
    name: str
    address: str
    active: bool

    model_config = {"from_attributes": True}


class ZoneCreate(BaseModel):
    name: str = Field(min_length=1)


class ZoneOut(BaseModel):
    id: int
    warehouse_id: int
    code: str
    name: str

    model_config = {"from_attributes": True}
