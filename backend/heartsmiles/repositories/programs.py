"""
Program repository containing all data-access operations for the
programs collection.
"""

from __future__ import annotations

from typing import Any

from heartsmiles.db.models.program import Program
from heartsmiles.db.store import DocumentStore

COLLECTION = "programs"


async def create_program(store: DocumentStore, record: dict[str, Any]) -> dict[str, Any]:
    """Insert a program built from `record` and return it with its id."""
    document = Program.from_record(record).to_document()
    doc_id = await store.add(COLLECTION, document)
    return {"id": doc_id, **document}


async def get_program(store: DocumentStore, program_id: str) -> dict[str, Any] | None:
    return await store.get(COLLECTION, program_id)


async def list_programs(
    store: DocumentStore,
    *,
    is_active: bool | None = None,
) -> list[dict[str, Any]]:
    if is_active is None:
        return await store.list(COLLECTION)
    return await store.list(COLLECTION, isActive=is_active)


async def search_programs(store: DocumentStore, term: str) -> list[dict[str, Any]]:
    """Case-insensitive substring match on name or description."""
    needle = term.lower()
    return [
        program
        for program in await store.list(COLLECTION)
        if needle in str(program.get("name", "")).lower()
        or needle in str(program.get("description", "")).lower()
    ]


async def get_program_by_name(store: DocumentStore, name: str) -> dict[str, Any] | None:
    """Exact-name lookup, as used by the program detail page."""
    matches = await store.list(COLLECTION, name=name)
    return matches[0] if matches else None


async def find_by_name_casefold(store: DocumentStore, name: str) -> dict[str, Any] | None:
    """Linear scan of the whole collection for a case-insensitive name match."""
    wanted = name.lower()
    for program in await store.list(COLLECTION):
        if str(program.get("name", "")).lower() == wanted:
            return program
    return None
