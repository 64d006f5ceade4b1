"""Program read endpoints (both staff roles)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from heartsmiles.api.deps import get_store, require_read_only_access
from heartsmiles.api.pagination import paginate
from heartsmiles.db.store import DocumentStore
from heartsmiles.repositories import programs as program_repository

router = APIRouter(
    prefix="/programs",
    tags=["Programs"],
    dependencies=[Depends(require_read_only_access)],
)


@router.get("")
async def list_programs(
    search: str | None = None,
    isActive: bool | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    store: DocumentStore = Depends(get_store),
) -> dict[str, Any]:
    """List programs; `search` matches name or description."""
    if search:
        programs = await program_repository.search_programs(store, search)
    else:
        programs = await program_repository.list_programs(store, is_active=isActive)
    return paginate(programs, "programs", page, limit)


@router.get("/by-name/{name}")
async def get_program_by_name(
    name: str,
    store: DocumentStore = Depends(get_store),
) -> dict[str, Any]:
    program = await program_repository.get_program_by_name(store, name)
    if program is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Program not found",
        )
    return {"program": program}
