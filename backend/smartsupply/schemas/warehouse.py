"""
Pydantic schemas for warehouse endpoints.
"""

from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, Field, StringConstraints

from smartsupply.models.warehouse import DEFAULT_CAPACITY, WarehouseType

WarehouseName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class WarehouseCreate(BaseModel):
    name: WarehouseName
    location: Optional[str] = Field(default=None, max_length=255)
    type: WarehouseType = WarehouseType.PHYSICAL
    capacity: int = Field(default=DEFAULT_CAPACITY, ge=0)


class WarehouseUpdate(BaseModel):
    name: WarehouseName
    location: Optional[str] = Field(default=None, max_length=255)
    type: Optional[WarehouseType] = None
    capacity: Optional[int] = Field(default=None, ge=0)


class WarehouseOut(BaseModel):
    id: UUID
    name: str
    location: Optional[str] = None
    type: WarehouseType
    capacity: int
    created_at: datetime

    model_config = {"from_attributes": True}
