"""
CSV export — flattens stored participant/program documents into
spreadsheet rows.

Photos and notes are exported as counts only.  Program references on a
participant are resolved to program names by the caller and joined
with "; ".
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Any, Iterable

PARTICIPANT_COLUMNS = [
    "ID",
    "Name",
    "Date of Birth",
    "Age",
    "School",
    "Address",
    "Referral Date",
    "Programs",
    "Status",
    "Notes Count",
    "Photos Count",
    "Created Date",
    "Updated Date",
]

PROGRAM_COLUMNS = [
    "Program ID",
    "Program Name",
    "Description",
    "Participant Count",
    "Status",
    "Created Date",
    "Updated Date",
]

COMBINED_COLUMNS = [
    "Data Type",
    "ID",
    "Name",
    "School",
    "Programs",
    "Program ID",
    "Program Name",
    "Description",
    "Participant Count",
    "Field",
    "Value",
    "Status",
]


def parse_iso_date(value: Any) -> date | None:
    """`YYYY-MM-DD` (or a full ISO timestamp) to a date; None when unreadable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value or "")[:10])
    except ValueError:
        return None


def age_on(date_of_birth: Any, today: date) -> int | None:
    born = parse_iso_date(date_of_birth)
    if born is None:
        return None
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def within_dates(value: Any, date_from: date | None, date_to: date | None) -> bool:
    """Inclusive range check; a missing or unreadable date never matches a range."""
    if date_from is None and date_to is None:
        return True
    when = parse_iso_date(value)
    if when is None:
        return False
    if date_from is not None and when < date_from:
        return False
    if date_to is not None and when > date_to:
        return False
    return True


def _day(value: Any) -> str:
    when = parse_iso_date(value) if value else None
    return when.isoformat() if when else ""


def _status(document: dict[str, Any]) -> str:
    return "Active" if document.get("isActive") else "Inactive"


def participant_row(
    participant: dict[str, Any],
    program_names: list[str],
    today: date,
) -> dict[str, Any]:
    age = age_on(participant.get("dateOfBirth"), today)
    return {
        "ID": participant.get("identificationNumber") or "",
        "Name": participant.get("name") or "",
        "Date of Birth": participant.get("dateOfBirth") or "",
        "Age": "" if age is None else age,
        "School": participant.get("school") or "",
        "Address": participant.get("address") or "",
        "Referral Date": participant.get("referralDate") or "",
        "Programs": "; ".join(program_names),
        "Status": _status(participant),
        "Notes Count": len(participant.get("notes") or []),
        "Photos Count": len(participant.get("uploadedPhotos") or []),
        "Created Date": _day(participant.get("createdAt")),
        "Updated Date": _day(participant.get("updatedAt")),
    }


def program_row(program: dict[str, Any]) -> dict[str, Any]:
    return {
        "Program ID": program.get("id") or "",
        "Program Name": program.get("name") or "",
        "Description": program.get("description") or "",
        "Participant Count": len(program.get("participants") or []),
        "Status": _status(program),
        "Created Date": _day(program.get("createdAt")),
        "Updated Date": _day(program.get("updatedAt")),
    }


def combined_rows(
    participants: list[dict[str, Any]],
    programs: list[dict[str, Any]],
    program_names: dict[str, list[str]],
    exported_at: datetime,
) -> list[dict[str, Any]]:
    """Summary rows, then one row per participant, then one per program."""
    summary = [
        ("Total Participants", len(participants)),
        ("Active Participants", sum(1 for p in participants if p.get("isActive"))),
        ("Total Programs", len(programs)),
        ("Active Programs", sum(1 for p in programs if p.get("isActive"))),
        ("Export Date", exported_at.date().isoformat()),
        ("Export Time", exported_at.strftime("%H:%M:%S")),
    ]
    rows: list[dict[str, Any]] = [
        {"Data Type": "Summary", "Field": field_name, "Value": value}
        for field_name, value in summary
    ]
    rows.extend(
        {
            "Data Type": "Participant",
            "ID": participant.get("identificationNumber") or "",
            "Name": participant.get("name") or "",
            "School": participant.get("school") or "",
            "Programs": "; ".join(program_names.get(participant.get("id", ""), [])),
            "Status": _status(participant),
        }
        for participant in participants
    )
    rows.extend(
        {
            "Data Type": "Program",
            "Program ID": program.get("id") or "",
            "Program Name": program.get("name") or "",
            "Description": program.get("description") or "",
            "Participant Count": len(program.get("participants") or []),
            "Status": _status(program),
        }
        for program in programs
    )
    return rows


def render_csv(columns: list[str], rows: Iterable[dict[str, Any]]) -> str:
    """Header row plus one line per row; missing columns are left empty."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, restval="")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()
