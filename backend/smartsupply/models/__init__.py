"""
Import all models so SQLAlchemy can discover them.
"""

from smartsupply.models.user import User
from smartsupply.models.warehouse import Warehouse, WarehouseType

__all__ = [
    "User",
    "Warehouse",
    "WarehouseType",
]
