"""
ExtractRecordsStep — sends all parsed rows to the extractor in one call.

An unsuccessful extraction aborts the import with ExtractionError; there
is no retry.
"""

from __future__ import annotations

from heartsmiles.core.constants import ImportStage
from heartsmiles.core.logging import get_logger
from heartsmiles.pipeline.context import ImportContext, StepResult
from heartsmiles.pipeline.errors import ExtractionError
from heartsmiles.pipeline.step import PipelineStep
from heartsmiles.processing.extractors.base import BaseExtractor

logger = get_logger(__name__)


class ExtractRecordsStep(PipelineStep):
    """Turn rows into candidate participant/program records."""

    name = "extract_records"
    description = "Extract structured records from rows"

    def __init__(self, extractor: BaseExtractor) -> None:
        self.extractor = extractor

    async def execute(self, ctx: ImportContext) -> StepResult:
        started_at = self._now()

        result = await self.extractor.extract(ctx.rows, ctx.kind)
        if not result.success:
            raise ExtractionError(
                result.error or "Extraction failed",
                import_id=ctx.import_id,
                step_name=self.name,
            )

        ctx.extracted = result.data
        ctx.advance(ImportStage.EXTRACTED)

        logger.info(
            "Records extracted",
            kind=ctx.kind.value,
            rows=len(ctx.rows),
            records=len(ctx.extracted),
        )
        return self._success(started_at, metadata={"extracted": len(ctx.extracted)})
