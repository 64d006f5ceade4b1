"""
Staff repository containing all data-access operations for the staff
collection.

Repository rules:
- Pure data-access logic only
- Every function receives the DocumentStore explicitly
"""

from __future__ import annotations

from typing import Any

from heartsmiles.core.constants import StaffRole
from heartsmiles.core.security import hash_password
from heartsmiles.db.models.staff import Staff
from heartsmiles.db.store import DocumentStore

COLLECTION = "staff"


async def create_staff(
    store: DocumentStore,
    *,
    username: str,
    name: str,
    email: str,
    password: str,
    phone_number: str = "",
    role: str = StaffRole.HEARTSMILES.value,
) -> dict[str, Any]:
    """Create a staff member with a hashed password."""
    staff = Staff(
        username=username.strip(),
        name=name.strip(),
        email=email.strip(),
        password=hash_password(password),
        phone_number=phone_number,
        role=role,
    )
    document = staff.to_document()
    doc_id = await store.add(COLLECTION, document)
    return {"id": doc_id, **document}


async def get_staff_by_id(store: DocumentStore, staff_id: str) -> dict[str, Any] | None:
    return await store.get(COLLECTION, staff_id)


async def get_staff_by_email(store: DocumentStore, email: str) -> dict[str, Any] | None:
    """Fetch a staff member by exact email address."""
    matches = await store.list(COLLECTION, email=email.strip())
    return matches[0] if matches else None
