"""Shared constants and enums used across the application."""

from enum import StrEnum


class StaffRole(StrEnum):
    """Roles carried by staff accounts.

    heartSmiles staff have full access; UMD staff are read-only.
    """

    HEARTSMILES = "heartSmiles"
    UMD = "umd"


class EntityKind(StrEnum):
    """Entity types the import pipeline can produce."""

    PARTICIPANT = "participant"
    PROGRAM = "program"


class ImportStage(StrEnum):
    """Where an import run currently is (or where it stopped)."""

    UPLOADED = "UPLOADED"
    PARSED = "PARSED"
    EXTRACTED = "EXTRACTED"
    VALIDATED = "VALIDATED"
    DRY_RUN_COMPLETE = "DRY_RUN_COMPLETE"
    PERSISTED = "PERSISTED"


class StepStatus(StrEnum):
    """Status of an individual pipeline step."""

    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class FileFormat(StrEnum):
    """Spreadsheet formats accepted for import."""

    DELIMITED_TEXT = "DELIMITED_TEXT"
    TABULAR_BINARY = "TABULAR_BINARY"


# Extension → format; anything else is rejected.
EXTENSION_FORMATS: dict[str, FileFormat] = {
    ".csv": FileFormat.DELIMITED_TEXT,
    ".xlsx": FileFormat.TABULAR_BINARY,
    ".xls": FileFormat.TABULAR_BINARY,
}

ALLOWED_UPLOAD_MIME_TYPES = frozenset({
    "text/csv",
    "application/csv",
    "text/plain",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
})

DATE_FORMAT = "%Y-%m-%d"
