"""
Import flow definition.

Flow:
    Parse → Extract (LLM) → Validate → Persist (skipped on dry run)

The same four steps serve both participant and program imports; the
entity kind on the context selects prompts, validators and collections.
"""

from __future__ import annotations

from heartsmiles.db.locks import CollectionLockManager
from heartsmiles.db.store import DocumentStore
from heartsmiles.pipeline.step import PipelineStep
from heartsmiles.pipeline.steps.extract_records import ExtractRecordsStep
from heartsmiles.pipeline.steps.parse_file import ParseFileStep
from heartsmiles.pipeline.steps.persist_records import PersistRecordsStep
from heartsmiles.pipeline.steps.validate_records import ValidateRecordsStep
from heartsmiles.processing.extractors.base import BaseExtractor


def build_import_steps(
    store: DocumentStore,
    extractor: BaseExtractor,
    locks: CollectionLockManager,
) -> list[PipelineStep]:
    """Return the ordered step list for one import run."""
    return [
        ParseFileStep(),
        ExtractRecordsStep(extractor),
        ValidateRecordsStep(),
        PersistRecordsStep(store, locks),
    ]
