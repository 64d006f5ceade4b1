"""Schema validation — required fields, lengths, date formats.

Pure functions: no I/O, no store access.  Every failing rule adds one
message, so a record can carry several errors at once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from heartsmiles.core.constants import DATE_FORMAT, EntityKind

_DATE_SHAPE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def is_valid_date(value: str) -> bool:
    """True for a real calendar date written as YYYY-MM-DD."""
    if not _DATE_SHAPE.match(value):
        return False
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return True


def validate_participant(record: dict[str, Any]) -> ValidationResult:
    errors: list[str] = []

    if len(_text(record.get("name"))) < 2:
        errors.append("Name is required and must be at least 2 characters")

    date_of_birth = _text(record.get("dateOfBirth"))
    if not date_of_birth:
        errors.append("Date of birth is required")
    elif not is_valid_date(date_of_birth):
        errors.append("Date of birth must be a valid date in YYYY-MM-DD format")

    referral_date = _text(record.get("referralDate"))
    if referral_date and not is_valid_date(referral_date):
        errors.append("Referral date must be a valid date in YYYY-MM-DD format")

    if len(_text(record.get("identificationNumber"))) < 3:
        errors.append("Identification number is required and must be at least 3 characters")

    return ValidationResult(is_valid=not errors, errors=errors)


def validate_program(record: dict[str, Any]) -> ValidationResult:
    errors: list[str] = []

    if len(_text(record.get("name"))) < 2:
        errors.append("Program name is required and must be at least 2 characters")

    if len(_text(record.get("description"))) < 10:
        errors.append("Program description is required and must be at least 10 characters")

    return ValidationResult(is_valid=not errors, errors=errors)


_VALIDATORS = {
    EntityKind.PARTICIPANT: validate_participant,
    EntityKind.PROGRAM: validate_program,
}


def validate_record(record: dict[str, Any], kind: EntityKind) -> ValidationResult:
    """Dispatch to the validator for `kind`."""
    return _VALIDATORS[kind](record)
