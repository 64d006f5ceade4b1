"""Shared dependencies for API routes."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from heartsmiles.core.config import settings
from heartsmiles.core.constants import StaffRole
from heartsmiles.core.security import TokenExpired, TokenInvalid, decode_access_token
from heartsmiles.db.store import DocumentStore, FirestoreDocumentStore
from heartsmiles.pipeline.engine import ImportPipeline
from heartsmiles.processing.extractors.base import BaseExtractor
from heartsmiles.processing.extractors.llm_extractor import LlmExtractor
from heartsmiles.repositories import staff as staff_repository

security_scheme = HTTPBearer(auto_error=False)


@lru_cache
def _firestore_store() -> FirestoreDocumentStore:
    return FirestoreDocumentStore.from_settings(settings)


@lru_cache
def _llm_extractor() -> LlmExtractor:
    return LlmExtractor.from_settings(settings)


async def get_store() -> DocumentStore:
    """The process-wide document store."""
    return _firestore_store()


async def get_extractor() -> BaseExtractor:
    """The configured record extractor."""
    return _llm_extractor()


async def get_import_pipeline(
    store: DocumentStore = Depends(get_store),
    extractor: BaseExtractor = Depends(get_extractor),
) -> ImportPipeline:
    return ImportPipeline(store, extractor)


async def get_current_token_payload(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
) -> dict[str, Any]:
    """Extract and validate JWT payload from bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
        )

    try:
        return decode_access_token(credentials.credentials)
    except TokenExpired:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
        ) from None
    except TokenInvalid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        ) from None


async def get_current_staff(
    store: DocumentStore = Depends(get_store),
    token_payload: dict[str, Any] = Depends(get_current_token_payload),
) -> dict[str, Any]:
    """Resolve an active staff member from the JWT payload."""
    staff_id = token_payload.get("userId")
    if not isinstance(staff_id, str) or not staff_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    staff = await staff_repository.get_staff_by_id(store, staff_id)
    if staff is None or not staff.get("isActive", False):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or inactive user",
        )

    return staff


async def require_heartsmiles_staff(
    current_staff: dict[str, Any] = Depends(get_current_staff),
) -> dict[str, Any]:
    """Full-access role only."""
    if current_staff.get("role") != StaffRole.HEARTSMILES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="HeartSmiles staff access required",
        )
    return current_staff


async def require_staff_access(
    current_staff: dict[str, Any] = Depends(get_current_staff),
) -> dict[str, Any]:
    """Any staff role (heartSmiles or umd)."""
    if current_staff.get("role") not in (StaffRole.HEARTSMILES, StaffRole.UMD):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff access required",
        )
    return current_staff


async def require_read_only_access(
    request: Request,
    current_staff: dict[str, Any] = Depends(require_staff_access),
) -> dict[str, Any]:
    """UMD staff may only issue GET requests."""
    if current_staff.get("role") == StaffRole.UMD and request.method != "GET":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="UMD staff have read-only access",
        )
    return current_staff
