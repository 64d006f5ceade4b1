"""
PipelineStep — base class for the import steps.

A step reads and writes the shared ImportContext.  The engine owns
ordering, logging and error capture; a step only returns its
StepResult or raises a PipelineError to stop the import.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from heartsmiles.core.constants import StepStatus
from heartsmiles.pipeline.context import ImportContext, StepResult


class PipelineStep(ABC):
    """
    One stage of an import.

    Subclasses set `name` and `description` and implement `execute`.
    Override `should_skip` to bypass the step for some imports
    (persistence on a dry run).
    """

    name: str = "unnamed_step"
    description: str = "No description"

    @abstractmethod
    async def execute(self, ctx: ImportContext) -> StepResult:
        ...

    async def should_skip(self, ctx: ImportContext) -> bool:
        return False

    # ─── Result builders ───────────────────────────────

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _result(
        self,
        status: StepStatus,
        started_at: datetime,
        *,
        metadata: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> StepResult:
        finished = self._now()
        return StepResult(
            step_name=self.name,
            status=status,
            started_at=started_at,
            completed_at=finished,
            duration_ms=int((finished - started_at).total_seconds() * 1000),
            metadata=metadata or {},
            error=error,
        )

    def _success(self, started_at: datetime, metadata: dict[str, Any] | None = None) -> StepResult:
        return self._result(StepStatus.COMPLETED, started_at, metadata=metadata)

    def _failure(self, started_at: datetime, error: str) -> StepResult:
        return self._result(StepStatus.FAILED, started_at, error=error)

    def _skipped(self) -> StepResult:
        return self._result(StepStatus.SKIPPED, self._now())
