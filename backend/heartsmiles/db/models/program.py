"""Program document — natural key is `name`, compared case-insensitively."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from heartsmiles.db.models.base import list_or_empty, text_or_empty, utcnow


@dataclass
class Program:
    name: str = ""
    description: str = ""
    participants: list[str] = field(default_factory=list)
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Program":
        return cls(
            name=text_or_empty(record.get("name")),
            description=text_or_empty(record.get("description")),
            participants=list_or_empty(record.get("participants")),
            is_active=record.get("isActive", True) is not False,
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "participants": self.participants,
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
