"""
Warehouse API endpoints — reads need ``can_view_warehouses``, writes need
``can_manage_warehouses``.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartsupply.core.dependencies import get_db, require_permission
from smartsupply.schemas.user import UserOut
from smartsupply.schemas.warehouse import WarehouseCreate, WarehouseOut, WarehouseUpdate
from smartsupply.services import warehouse_service

router = APIRouter()

can_view = require_permission("can_view_warehouses")
can_manage = require_permission("can_manage_warehouses")


@router.get("", response_model=list[WarehouseOut])
async def list_warehouses(
    search: Optional[str] = Query(default=None, description="Match on name or location"),
    db: AsyncSession = Depends(get_db),
    _user: UserOut = Depends(can_view),
):
    """List warehouses, optionally filtered by a search term."""
    return await warehouse_service.list_warehouses(db, search=search)


@router.post("", response_model=WarehouseOut, status_code=status.HTTP_201_CREATED)
async def create_warehouse(
    body: WarehouseCreate,
    db: AsyncSession = Depends(get_db),
    _user: UserOut = Depends(can_manage),
):
    """Create a warehouse."""
    return await warehouse_service.create_warehouse(db, body)


@router.get("/{warehouse_id}", response_model=WarehouseOut)
async def get_warehouse(
    warehouse_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user: UserOut = Depends(can_view),
):
    """Get a warehouse by ID."""
    return await warehouse_service.get_warehouse(db, warehouse_id)


@router.put("/{warehouse_id}", response_model=WarehouseOut)
async def update_warehouse(
    warehouse_id: UUID,
    body: WarehouseUpdate,
    db: AsyncSession = Depends(get_db),
    _user: UserOut = Depends(can_manage),
):
    """Update a warehouse."""
    return await warehouse_service.update_warehouse(db, warehouse_id, body)


@router.delete("/{warehouse_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_warehouse(
    warehouse_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user: UserOut = Depends(can_manage),
):
    """Delete a warehouse."""
    await warehouse_service.delete_warehouse(db, warehouse_id)
