"""
ImportContext — mutable state object carried through every step.

This is the single source of truth for one import run.  Each step
reads from and writes to the context; the orchestrator turns the final
context into the response summary.  Nothing here outlives the request.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from heartsmiles.core.constants import EntityKind, ImportStage


# ═══════════════════════════════════════════════════════════
#  StepResult
# ═══════════════════════════════════════════════════════════

@dataclass
class StepResult:
    """Outcome of a single pipeline step execution."""

    step_name: str
    status: str                     # StepStatus value
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "step_name": self.step_name,
            "status": self.status,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
            "error": self.error,
            "metadata": self.metadata,
        }


# ═══════════════════════════════════════════════════════════
#  Per-record outcomes
# ═══════════════════════════════════════════════════════════

@dataclass
class InvalidRecord:
    """An extracted record that failed validation, with every reason."""

    record: dict[str, Any]
    errors: list[str]


@dataclass
class SaveError:
    """A valid record that was not written (duplicate or store failure)."""

    record: dict[str, Any]
    error: str


# ═══════════════════════════════════════════════════════════
#  ImportContext
# ═══════════════════════════════════════════════════════════

@dataclass
class ImportContext:
    """
    Carries all state between pipeline steps.

    Populated progressively: parse fills `rows`, extract fills
    `extracted`, validate partitions into `valid_records` /
    `invalid_records`, persist fills `saved_records` / `save_errors`.
    """

    # ─── Identity (set at init) ────────────────────────
    kind: EntityKind
    file_path: str
    filename: str = ""
    dry_run: bool = False
    import_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # ─── Stage tracking ────────────────────────────────
    stage: ImportStage = ImportStage.UPLOADED
    step_results: list[StepResult] = field(default_factory=list)

    # ─── Data (populated by steps) ─────────────────────
    rows: list[dict[str, str]] = field(default_factory=list)
    extracted: list[dict[str, Any]] = field(default_factory=list)
    valid_records: list[dict[str, Any]] = field(default_factory=list)
    invalid_records: list[InvalidRecord] = field(default_factory=list)
    saved_records: list[dict[str, Any]] = field(default_factory=list)
    save_errors: list[SaveError] = field(default_factory=list)

    def advance(self, stage: ImportStage) -> None:
        self.stage = stage

    def to_summary_dict(self) -> dict[str, Any]:
        """Compact summary for logging."""
        return {
            "import_id": self.import_id,
            "kind": self.kind.value,
            "dry_run": self.dry_run,
            "filename": self.filename,
            "stage": self.stage.value,
            "rows": len(self.rows),
            "extracted": len(self.extracted),
            "valid": len(self.valid_records),
            "invalid": len(self.invalid_records),
            "saved": len(self.saved_records),
            "save_errors": len(self.save_errors),
            "steps_completed": len(self.step_results),
        }
