"""
Warehouse CRUD service.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartsupply.core.exceptions import ConflictException, NotFoundException
from smartsupply.models.warehouse import Warehouse
from smartsupply.schemas.warehouse import WarehouseCreate, WarehouseUpdate


def _name_taken(name: str) -> ConflictException:
    return ConflictException(f"Warehouse with name '{name}' already exists")


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@asynccontextmanager
async def _unique_name(db: AsyncSession, name: str) -> AsyncIterator[None]:
    """Write in a SAVEPOINT; a concurrent insert of the same name becomes a 409."""
    try:
        async with db.begin_nested():
            yield
            await db.flush()
    except IntegrityError as exc:
        raise _name_taken(name) from exc


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: Optional[UUID] = None) -> None:
    query = select(Warehouse.id).where(Warehouse.name == name)
    if exclude_id is not None:
        query = query.where(Warehouse.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise _name_taken(name)


async def create_warehouse(db: AsyncSession, payload: WarehouseCreate) -> Warehouse:
    """Create a new warehouse."""
    await _ensure_name_free(db, payload.name)
    warehouse = Warehouse(
        name=payload.name,
        location=payload.location,
        type=payload.type,
        capacity=payload.capacity,
    )
    async with _unique_name(db, payload.name):
        db.add(warehouse)
    await db.refresh(warehouse)
    return warehouse


async def get_warehouse(db: AsyncSession, warehouse_id: UUID) -> Warehouse:
    """Get a warehouse by ID."""
    warehouse = await db.get(Warehouse, warehouse_id)
    if warehouse is None:
        raise NotFoundException("Warehouse")
    return warehouse


async def list_warehouses(db: AsyncSession, search: Optional[str] = None) -> list[Warehouse]:
    """List warehouses by name, optionally filtered on name/location substring."""
    query = select(Warehouse).order_by(Warehouse.name)
    if search:
        pattern = f"%{_escape_like(search.strip())}%"
        query = query.where(
            or_(
                Warehouse.name.ilike(pattern, escape="\\"),
                Warehouse.location.ilike(pattern, escape="\\"),
            )
        )
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_warehouse(db: AsyncSession, warehouse_id: UUID, payload: WarehouseUpdate) -> Warehouse:
    """Replace name/location; type and capacity only when given."""
    warehouse = await get_warehouse(db, warehouse_id)
    await _ensure_name_free(db, payload.name, exclude_id=warehouse.id)
    async with _unique_name(db, payload.name):
        warehouse.name = payload.name
        warehouse.location = payload.location
        if payload.type is not None:
            warehouse.type = payload.type
        if payload.capacity is not None:
            warehouse.capacity = payload.capacity
    await db.refresh(warehouse)
    return warehouse


async def delete_warehouse(db: AsyncSession, warehouse_id: UUID) -> None:
    """Delete a warehouse."""
    warehouse = await get_warehouse(db, warehouse_id)
    await db.delete(warehouse)
    await db.flush()
