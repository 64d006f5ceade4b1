"""
PersistRecordsStep — writes valid records to the document store.

For each valid record the whole collection is scanned for the record's
natural key (participant identification number, case-sensitive; program
name, case-insensitive).  Existing keys are skipped with an
"already exists" save error, everything else is inserted.

Per-record failures are collected on the context and never abort the
import; records written before a failure stay written.  The collection
lock is held for the whole loop.

Skipped entirely on a dry run.
"""

from __future__ import annotations

from typing import Any

from heartsmiles.core.constants import EntityKind, ImportStage
from heartsmiles.core.logging import get_logger
from heartsmiles.db.locks import CollectionLockManager
from heartsmiles.db.store import DocumentStore
from heartsmiles.pipeline.context import ImportContext, SaveError, StepResult
from heartsmiles.pipeline.errors import DuplicateKeyError, PersistenceError
from heartsmiles.pipeline.step import PipelineStep
from heartsmiles.repositories import participants as participant_repo
from heartsmiles.repositories import programs as program_repo

logger = get_logger(__name__)


class PersistRecordsStep(PipelineStep):
    """Insert valid records, skipping natural-key duplicates."""

    name = "persist_records"
    description = "Save valid records to the document store"

    def __init__(self, store: DocumentStore, locks: CollectionLockManager) -> None:
        self.store = store
        self.locks = locks

    async def should_skip(self, ctx: ImportContext) -> bool:
        return ctx.dry_run

    async def execute(self, ctx: ImportContext) -> StepResult:
        started_at = self._now()
        collection = self._collection(ctx.kind)

        async with self.locks.hold(collection):
            for record in ctx.valid_records:
                try:
                    saved = await self._save_one(ctx, record)
                except (DuplicateKeyError, PersistenceError) as exc:
                    ctx.save_errors.append(SaveError(record=record, error=str(exc)))
                    logger.warning(
                        "Record not saved",
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                else:
                    ctx.saved_records.append(saved)

        ctx.advance(ImportStage.PERSISTED)

        logger.info(
            "Records persisted",
            collection=collection,
            saved=len(ctx.saved_records),
            save_errors=len(ctx.save_errors),
        )
        return self._success(started_at, metadata={
            "saved": len(ctx.saved_records),
            "save_errors": len(ctx.save_errors),
        })

    # ─── Helpers ───────────────────────────────────────

    @staticmethod
    def _collection(kind: EntityKind) -> str:
        if kind == EntityKind.PARTICIPANT:
            return participant_repo.COLLECTION
        return program_repo.COLLECTION

    async def _save_one(self, ctx: ImportContext, record: dict[str, Any]) -> dict[str, Any]:
        """Check the natural key and insert.  Raises DuplicateKeyError or PersistenceError."""
        error_context = {"import_id": ctx.import_id, "step_name": self.name}

        try:
            if ctx.kind == EntityKind.PARTICIPANT:
                key = str(record.get("identificationNumber") or "")
                existing = await participant_repo.find_by_identification_number(self.store, key)
                if existing is not None:
                    raise DuplicateKeyError(
                        "Participant with this identification number already exists",
                        natural_key=key,
                        **error_context,
                    )
                return await participant_repo.create_participant(self.store, record)

            key = str(record.get("name") or "")
            existing = await program_repo.find_by_name_casefold(self.store, key)
            if existing is not None:
                raise DuplicateKeyError(
                    "Program with this name already exists",
                    natural_key=key,
                    **error_context,
                )
            return await program_repo.create_program(self.store, record)

        except DuplicateKeyError:
            raise
        except Exception as exc:
            # Store clients raise transport and permission errors of many types
            raise PersistenceError(str(exc), **error_context) from exc
