"""
Staff document — authentication and authorization for the admin UI.

Roles:
    heartSmiles — Full access (imports, edits)
    umd         — Read-only access
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from heartsmiles.core.constants import StaffRole
from heartsmiles.db.models.base import utcnow


@dataclass
class Staff:
    username: str
    name: str
    email: str
    password: str  # bcrypt hash
    phone_number: str = ""
    profile_picture_url: str = ""
    role: str = StaffRole.HEARTSMILES.value
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_document(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "phoneNumber": self.phone_number,
            "profilePictureUrl": self.profile_picture_url,
            "role": self.role,
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


def public_staff(document: dict[str, Any]) -> dict[str, Any]:
    """Strip the password hash from a staff document."""
    return {key: value for key, value in document.items() if key != "password"}
