"""
Participant repository containing all data-access operations for the
participants collection.
"""

from __future__ import annotations

from typing import Any

from heartsmiles.db.models.participant import Participant
from heartsmiles.db.store import DocumentStore

COLLECTION = "participants"


async def create_participant(store: DocumentStore, record: dict[str, Any]) -> dict[str, Any]:
    """Insert a participant built from `record` and return it with its id."""
    document = Participant.from_record(record).to_document()
    doc_id = await store.add(COLLECTION, document)
    return {"id": doc_id, **document}


async def get_participant(store: DocumentStore, participant_id: str) -> dict[str, Any] | None:
    return await store.get(COLLECTION, participant_id)


async def list_participants(
    store: DocumentStore,
    *,
    is_active: bool | None = None,
    school: str | None = None,
    program_id: str | None = None,
) -> list[dict[str, Any]]:
    """List participants with optional active/school/program filters."""
    where: dict[str, Any] = {}
    if is_active is not None:
        where["isActive"] = is_active
    if school:
        where["school"] = school
    participants = await store.list(COLLECTION, **where)
    if program_id:
        participants = [p for p in participants if program_id in (p.get("programs") or [])]
    return participants


async def search_participants(store: DocumentStore, term: str) -> list[dict[str, Any]]:
    """Case-insensitive substring match on name, identification number or school."""
    needle = term.lower()
    return [
        participant
        for participant in await store.list(COLLECTION)
        if needle in str(participant.get("name", "")).lower()
        or needle in str(participant.get("identificationNumber", "")).lower()
        or needle in str(participant.get("school", "")).lower()
    ]


async def find_by_identification_number(
    store: DocumentStore,
    identification_number: str,
) -> dict[str, Any] | None:
    """
    Linear scan of the whole collection for an exact (case-sensitive)
    identification number match.
    """
    for participant in await store.list(COLLECTION):
        if participant.get("identificationNumber") == identification_number:
            return participant
    return None
