"""
PipelineEngine — runs import steps sequentially.

Responsibilities:
    - Execute each step with timing, logging, and error handling
    - Stop at the first failing step and re-raise its error
    - Track the import stage on the context

ImportPipeline wraps the engine for one uploaded file: builds the
context, runs the flow, always deletes the temp file, and turns the
finished context into the response payload.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from heartsmiles.core.constants import EntityKind, ImportStage, StepStatus
from heartsmiles.db.locks import CollectionLockManager, collection_locks
from heartsmiles.db.store import DocumentStore
from heartsmiles.pipeline.context import ImportContext
from heartsmiles.pipeline.errors import PipelineError, StepExecutionError
from heartsmiles.pipeline.flow import build_import_steps
from heartsmiles.pipeline.step import PipelineStep
from heartsmiles.processing.extractors.base import BaseExtractor


@dataclass
class PipelineResult:
    """Final outcome of a pipeline execution."""

    import_id: str
    status: str                     # StepStatus value
    started_at: datetime | None = None
    completed_at: datetime | None = None
    total_duration_ms: int = 0
    steps_completed: int = 0
    total_steps: int = 0
    step_results: list[dict[str, Any]] = field(default_factory=list)
    context_summary: dict[str, Any] = field(default_factory=dict)


class PipelineEngine:
    """
    Runs a sequence of PipelineStep objects against an ImportContext.

    Usage::

        engine = PipelineEngine()
        result = await engine.run_steps(ctx, steps)
    """

    def __init__(self) -> None:
        self.logger = structlog.get_logger("pipeline.engine")

    async def run_steps(
        self,
        ctx: ImportContext,
        steps: list[PipelineStep],
    ) -> PipelineResult:
        """
        Execute an ordered list of steps against a context.

        Raises the failing step's PipelineError (fatal errors are never
        retried).  Unexpected exceptions are wrapped in StepExecutionError.
        """
        started_at = datetime.now(timezone.utc)

        log = self.logger.bind(
            import_id=ctx.import_id,
            kind=ctx.kind.value,
            dry_run=ctx.dry_run,
            total_steps=len(steps),
        )

        steps_completed = 0

        for index, step in enumerate(steps):
            step_number = index + 1

            step_log = log.bind(
                step_name=step.name,
                step_index=step_number,
                step_description=step.description,
            )

            # ── Check skip condition ──────────────────
            if await step.should_skip(ctx):
                step_log.info("Step skipped")
                ctx.step_results.append(step._skipped())
                continue

            step_log.info(f"Step {step_number}/{len(steps)}: {step.description}")
            step_started = datetime.now(timezone.utc)

            try:
                result = await step.execute(ctx)
            except Exception as exc:
                ctx.step_results.append(step._failure(step_started, str(exc)))
                step_log.error(
                    "Step failed, import stopping",
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                if isinstance(exc, PipelineError):
                    raise
                step_log.exception("Unexpected error in step")
                raise StepExecutionError(
                    f"Unexpected: {exc}",
                    import_id=ctx.import_id,
                    step_name=step.name,
                ) from exc

            ctx.step_results.append(result)
            steps_completed += 1
            step_log.info(
                "Step completed",
                duration_ms=result.duration_ms,
                metadata=result.metadata,
            )

        # ── Finalise ──────────────────────────────────
        if ctx.dry_run and ctx.stage == ImportStage.VALIDATED:
            ctx.advance(ImportStage.DRY_RUN_COMPLETE)

        completed_at = datetime.now(timezone.utc)
        return PipelineResult(
            import_id=ctx.import_id,
            status=StepStatus.COMPLETED,
            started_at=started_at,
            completed_at=completed_at,
            total_duration_ms=int((completed_at - started_at).total_seconds() * 1000),
            steps_completed=steps_completed,
            total_steps=len(steps),
            step_results=[sr.to_dict() for sr in ctx.step_results],
            context_summary=ctx.to_summary_dict(),
        )


# ═══════════════════════════════════════════════════════════
#  Import orchestration
# ═══════════════════════════════════════════════════════════

_PAYLOAD_NAMES = {
    EntityKind.PARTICIPANT: ("participant", "Participants"),
    EntityKind.PROGRAM: ("program", "Programs"),
}


def build_import_payload(ctx: ImportContext) -> dict[str, Any]:
    """Response body for a finished import, keyed by entity kind."""
    singular, plural = _PAYLOAD_NAMES[ctx.kind]
    invalid = [
        {singular: item.record, "errors": item.errors}
        for item in ctx.invalid_records
    ]

    if ctx.dry_run:
        return {
            "message": "Dry run completed",
            "summary": {
                "totalProcessed": len(ctx.extracted),
                f"valid{plural}": len(ctx.valid_records),
                f"invalid{plural}": len(ctx.invalid_records),
            },
            f"valid{plural}": ctx.valid_records,
            f"invalid{plural}": invalid,
        }

    return {
        "message": "Import completed",
        "summary": {
            "totalProcessed": len(ctx.extracted),
            f"saved{plural}": len(ctx.saved_records),
            "saveErrors": len(ctx.save_errors),
            "validationErrors": len(ctx.invalid_records),
        },
        f"saved{plural}": ctx.saved_records,
        "saveErrors": [
            {singular: item.record, "error": item.error}
            for item in ctx.save_errors
        ],
        f"invalid{plural}": invalid,
    }


class ImportPipeline:
    """
    Runs one uploaded file through Parse → Extract → Validate → Persist.

    The store and extractor are injected so tests can swap in fakes.
    """

    def __init__(
        self,
        store: DocumentStore,
        extractor: BaseExtractor,
        *,
        locks: CollectionLockManager | None = None,
        engine: PipelineEngine | None = None,
    ) -> None:
        self.store = store
        self.extractor = extractor
        self.locks = locks or collection_locks
        self.engine = engine or PipelineEngine()
        self.logger = structlog.get_logger("pipeline.import")

    async def run(
        self,
        kind: EntityKind,
        file_path: str,
        *,
        filename: str = "",
        dry_run: bool = False,
    ) -> dict[str, Any]:
        """
        Import `file_path` as `kind` records and return the response payload.

        The file at `file_path` is deleted on every exit path.
        Raises the fatal PipelineError of the first failing step.
        """
        ctx = ImportContext(
            kind=kind,
            file_path=file_path,
            filename=filename or os.path.basename(file_path),
            dry_run=dry_run,
        )
        log = self.logger.bind(import_id=ctx.import_id, kind=kind.value, dry_run=dry_run)
        log.info("Import started", filename=ctx.filename)

        try:
            steps = build_import_steps(self.store, self.extractor, self.locks)
            result = await self.engine.run_steps(ctx, steps)
        except PipelineError as exc:
            log.error("Import failed", stage=ctx.stage.value, error=str(exc))
            raise
        finally:
            _remove_temp_file(file_path, log)

        log.info(
            "Import finished",
            duration_ms=result.total_duration_ms,
            **result.context_summary,
        )
        return build_import_payload(ctx)


def _remove_temp_file(path: str, log) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        log.warning("Could not delete temp upload", path=path, error=str(exc))
