"""
ValidateRecordsStep — partitions extracted records into valid / invalid.

Every extracted record ends up in exactly one of the two lists; invalid
records keep all of their error messages.
"""

from __future__ import annotations

from heartsmiles.core.constants import ImportStage
from heartsmiles.core.logging import get_logger
from heartsmiles.pipeline.context import ImportContext, InvalidRecord, StepResult
from heartsmiles.pipeline.errors import ValidationFailure
from heartsmiles.pipeline.step import PipelineStep
from heartsmiles.validation.schema_validator import validate_record

logger = get_logger(__name__)


class ValidateRecordsStep(PipelineStep):
    """Run the field validator over each extracted record."""

    name = "validate_records"
    description = "Validate extracted records (required fields, formats)"

    async def execute(self, ctx: ImportContext) -> StepResult:
        started_at = self._now()

        for idx, record in enumerate(ctx.extracted):
            try:
                self._check(ctx, record)
            except ValidationFailure as failure:
                ctx.invalid_records.append(InvalidRecord(record=record, errors=failure.errors))
                logger.warning(str(failure), record_index=idx, errors=failure.errors)
            else:
                ctx.valid_records.append(record)

        ctx.advance(ImportStage.VALIDATED)

        logger.info(
            "Validation complete",
            total=len(ctx.extracted),
            valid=len(ctx.valid_records),
            invalid=len(ctx.invalid_records),
        )
        return self._success(started_at, metadata={
            "total": len(ctx.extracted),
            "valid": len(ctx.valid_records),
            "invalid": len(ctx.invalid_records),
        })

    def _check(self, ctx: ImportContext, record: dict) -> None:
        result = validate_record(record, ctx.kind)
        if not result.is_valid:
            raise ValidationFailure(
                "Record failed validation",
                errors=result.errors,
                import_id=ctx.import_id,
                step_name=self.name,
            )
