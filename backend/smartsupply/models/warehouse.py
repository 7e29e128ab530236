"""
Warehouse model — physical or virtual storage location.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, Enum as SAEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from smartsupply.database import Base

DEFAULT_CAPACITY = 10000


class WarehouseType(str, enum.Enum):
    PHYSICAL = "PHYSICAL"
    VIRTUAL = "VIRTUAL"


class Warehouse(Base):
    __tablename__ = "warehouses"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    type: Mapped[WarehouseType] = mapped_column(
        SAEnum(WarehouseType, name="warehouse_type"),
        nullable=False,
        default=WarehouseType.PHYSICAL,
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_CAPACITY)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
