"""Authentication endpoints for login and current-staff introspection."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from heartsmiles.api.deps import get_current_staff, get_store
from heartsmiles.api.schemas.auth import LoginRequest
from heartsmiles.core.logging import get_logger
from heartsmiles.core.security import create_access_token, verify_password
from heartsmiles.db.models.staff import public_staff
from heartsmiles.db.store import DocumentStore
from heartsmiles.repositories import staff as staff_repository

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login")
async def login(payload: LoginRequest, store: DocumentStore = Depends(get_store)) -> dict[str, Any]:
    """Authenticate a staff member by email and issue an access token."""
    staff = await staff_repository.get_staff_by_email(store, payload.email)
    if staff is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    # Documents without the flag predate it and count as active
    if staff.get("isActive") is False:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is deactivated",
        )

    if not verify_password(payload.password, staff.get("password", "")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    token = create_access_token(staff["id"], staff.get("role", ""))
    logger.info("Staff logged in", staff_id=staff["id"], role=staff.get("role"))

    return {
        "message": "Login successful",
        "staff": public_staff(staff),
        "token": token,
    }


@router.get("/me")
async def read_current_staff(
    current_staff: dict[str, Any] = Depends(get_current_staff),
) -> dict[str, Any]:
    """Return the currently authenticated staff member."""
    return {"staff": public_staff(current_staff)}
