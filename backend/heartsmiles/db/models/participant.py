"""
Participant document — one youth enrolled with HeartSmiles.

Natural key: `identificationNumber` (unique, case-sensitive).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from heartsmiles.db.models.base import list_or_empty, text_or_empty, utcnow


@dataclass
class Participant:
    name: str = ""
    date_of_birth: str = ""
    address: str = ""
    referral_date: str = ""
    programs: list[str] = field(default_factory=list)
    school: str = ""
    identification_number: str = ""
    headshot_picture_url: str = ""
    uploaded_photos: list[dict[str, Any]] = field(default_factory=list)
    notes: list[Any] = field(default_factory=list)
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Participant":
        """Build from an extracted (camelCase) record, defaulting missing fields."""
        return cls(
            name=text_or_empty(record.get("name")),
            date_of_birth=text_or_empty(record.get("dateOfBirth")),
            address=text_or_empty(record.get("address")),
            referral_date=text_or_empty(record.get("referralDate")),
            programs=list_or_empty(record.get("programs")),
            school=text_or_empty(record.get("school")),
            identification_number=text_or_empty(record.get("identificationNumber")),
            headshot_picture_url=text_or_empty(record.get("headshotPictureUrl")),
            uploaded_photos=list_or_empty(record.get("uploadedPhotos")),
            notes=list_or_empty(record.get("notes")),
            is_active=record.get("isActive", True) is not False,
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "dateOfBirth": self.date_of_birth,
            "address": self.address,
            "referralDate": self.referral_date,
            "programs": self.programs,
            "school": self.school,
            "identificationNumber": self.identification_number,
            "headshotPictureUrl": self.headshot_picture_url,
            "uploadedPhotos": self.uploaded_photos,
            "notes": self.notes,
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
