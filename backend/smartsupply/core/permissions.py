"""
Role-based access control.

Roles:
  - ADMIN:        full access to everything
  - MANAGER:      manages products, suppliers, orders, stock and warehouses
  - PROCUREMENT:  manages suppliers and purchase orders, views the rest
  - WAREHOUSE_OP: views everything, adjusts stock
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from typing import Optional, Union


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    WAREHOUSE_OP = "WAREHOUSE_OP"
    PROCUREMENT = "PROCUREMENT"


@dataclass(frozen=True)
class Permissions:
    # Products
    can_view_products: bool = False
    can_create_products: bool = False
    can_edit_products: bool = False
    can_delete_products: bool = False
    # Suppliers
    can_view_suppliers: bool = False
    can_manage_suppliers: bool = False
    # Purchase orders
    can_view_orders: bool = False
    can_manage_orders: bool = False
    # Inventory
    can_view_inventory: bool = False
    can_adjust_stock: bool = False
    # Warehouses
    can_view_warehouses: bool = False
    can_manage_warehouses: bool = False

    def as_dict(self) -> dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


CAPABILITIES: frozenset[str] = frozenset(f.name for f in fields(Permissions))

NO_PERMISSIONS = Permissions()

_ALL_PERMISSIONS = Permissions(**{name: True for name in CAPABILITIES})

_ROLE_PERMISSIONS: dict[Role, Permissions] = {
    Role.ADMIN: _ALL_PERMISSIONS,
    Role.MANAGER: _ALL_PERMISSIONS,
    Role.PROCUREMENT: Permissions(
        can_view_products=True,
        can_view_suppliers=True,
        can_manage_suppliers=True,
        can_view_orders=True,
        can_manage_orders=True,
        can_view_inventory=True,
        can_view_warehouses=True,
    ),
    Role.WAREHOUSE_OP: Permissions(
        can_view_products=True,
        can_view_suppliers=True,
        can_view_orders=True,
        can_view_inventory=True,
        can_adjust_stock=True,
        can_view_warehouses=True,
    ),
}

# Applied to role strings outside the enum
FALLBACK_ROLE = Role.WAREHOUSE_OP


def parse_role(value: Union[Role, str, None]) -> Optional[Role]:
    """Map a boundary string onto ``Role``; unknown or empty values give None."""
    if value is None or isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def permissions_for(role: Union[Role, str, None]) -> Permissions:
    """Capability set for a role. Never raises."""
    if not role:
        return NO_PERMISSIONS
    parsed = parse_role(role)
    if parsed is None:
        parsed = FALLBACK_ROLE
    return _ROLE_PERMISSIONS[parsed]


def can_perform(role: Union[Role, str, None], capability: str) -> bool:
    """Whether ``role`` holds ``capability`` (e.g. ``"can_adjust_stock"``)."""
    if capability not in CAPABILITIES:
        raise ValueError(f"Unknown capability: {capability}")
    return getattr(permissions_for(role), capability)
