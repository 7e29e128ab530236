"""
Auth API endpoints — register, login, profile, permissions.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartsupply.core.dependencies import authenticate_login, get_current_user, get_db
from smartsupply.core.permissions import permissions_for
from smartsupply.schemas.user import (
    LoginResponse,
    PermissionsOut,
    UserCreate,
    UserDetailOut,
    UserOut,
)
from smartsupply.services import auth_service

router = APIRouter()


@router.post("/register", response_model=UserDetailOut, status_code=status.HTTP_201_CREATED)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new user account."""
    return await auth_service.register_user(db, payload)


@router.post("/login", response_model=LoginResponse)
async def login(user: UserOut = Depends(authenticate_login)):
    """Exchange email + password for a bearer token."""
    return auth_service.login(user)


@router.get("/profile", response_model=UserOut)
async def profile(current_user: UserOut = Depends(get_current_user)):
    """Get the current authenticated user's profile."""
    return current_user


@router.get("/permissions", response_model=PermissionsOut)
async def permissions(current_user: UserOut = Depends(get_current_user)):
    """Capability flags for the current user's role."""
    return PermissionsOut(
        role=current_user.role,
        permissions=permissions_for(current_user.role).as_dict(),
    )
