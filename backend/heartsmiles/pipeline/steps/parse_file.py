"""
ParseFileStep — reads the uploaded spreadsheet into header-keyed rows.

Unsupported extensions and unreadable files abort the import.
"""

from __future__ import annotations

import asyncio

from heartsmiles.core.constants import ImportStage
from heartsmiles.core.logging import get_logger
from heartsmiles.pipeline.context import ImportContext, StepResult
from heartsmiles.pipeline.errors import PipelineError
from heartsmiles.pipeline.step import PipelineStep
from heartsmiles.processing.parsers import parse_file

logger = get_logger(__name__)


class ParseFileStep(PipelineStep):
    """Parse the temp file (CSV / XLSX / XLS) into rows."""

    name = "parse_file"
    description = "Parse uploaded spreadsheet into rows"

    async def execute(self, ctx: ImportContext) -> StepResult:
        started_at = self._now()

        try:
            ctx.rows = await asyncio.to_thread(parse_file, ctx.file_path)
        except PipelineError as exc:
            exc.import_id = ctx.import_id
            exc.step_name = self.name
            raise

        ctx.advance(ImportStage.PARSED)

        if not ctx.rows:
            logger.warning("Uploaded file has no data rows", filename=ctx.filename)

        return self._success(started_at, metadata={"rows": len(ctx.rows)})
