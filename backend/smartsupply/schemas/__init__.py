from smartsupply.schemas.user import (
    UserCreate, UserLogin, UserOut, UserDetailOut, LoginResponse, PermissionsOut,
)
from smartsupply.schemas.warehouse import WarehouseCreate, WarehouseUpdate, WarehouseOut
