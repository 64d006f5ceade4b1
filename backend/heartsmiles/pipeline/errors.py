"""
Exception hierarchy for the import pipeline.

All pipeline exceptions inherit from PipelineError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (step name, import ID, etc.) for logging.

Fatal errors abort the whole run:
    UnsupportedFormatError, ParseError, ExtractionError, StepExecutionError

Per-record errors are collected into the import summary, never raised
out of the pipeline:
    ValidationFailure, DuplicateKeyError, PersistenceError
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        import_id: str | None = None,
        step_name: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.import_id = import_id
        self.step_name = step_name
        self.details = details or {}
        super().__init__(message)


class StepExecutionError(PipelineError):
    """A step failed for a reason not covered by a more specific error."""
    pass


class UnsupportedFormatError(PipelineError):
    """The uploaded file's extension is not a supported spreadsheet format."""
    pass


class ParseError(PipelineError):
    """The spreadsheet could not be read."""
    pass


class ExtractionError(PipelineError):
    """The hosted model call failed or returned something other than JSON records."""
    pass


class ValidationFailure(PipelineError):
    """One extracted record failed field validation."""

    def __init__(self, message: str, *, errors: list[str] | None = None, **kwargs) -> None:
        self.errors = errors or []
        super().__init__(message, **kwargs)


class DuplicateKeyError(PipelineError):
    """A record's natural key already exists in the store."""

    def __init__(self, message: str, *, natural_key: str | None = None, **kwargs) -> None:
        self.natural_key = natural_key
        super().__init__(message, **kwargs)


class PersistenceError(PipelineError):
    """Writing one record to the store failed."""
    pass
