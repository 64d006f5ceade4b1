"""Participant read endpoints (both staff roles)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from heartsmiles.api.deps import get_store, require_read_only_access
from heartsmiles.api.pagination import paginate
from heartsmiles.db.store import DocumentStore
from heartsmiles.repositories import participants as participant_repository

router = APIRouter(
    prefix="/participants",
    tags=["Participants"],
    dependencies=[Depends(require_read_only_access)],
)


@router.get("")
async def list_participants(
    search: str | None = None,
    school: str | None = None,
    isActive: bool | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    store: DocumentStore = Depends(get_store),
) -> dict[str, Any]:
    """List participants; `search` takes precedence over the filters."""
    if search:
        participants = await participant_repository.search_participants(store, search)
    else:
        participants = await participant_repository.list_participants(
            store,
            is_active=isActive,
            school=school,
        )
    return paginate(participants, "participants", page, limit)


@router.get("/{participant_id}")
async def get_participant(
    participant_id: str,
    store: DocumentStore = Depends(get_store),
) -> dict[str, Any]:
    participant = await participant_repository.get_participant(store, participant_id)
    if participant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Participant not found",
        )
    return {"participant": participant}
