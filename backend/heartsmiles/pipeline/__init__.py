"""
Import pipeline — spreadsheet to participant/program records.

This package provides the step-based engine that takes an uploaded
spreadsheet through parsing, LLM extraction, validation and persistence,
with per-step logging and error handling.
"""

from heartsmiles.pipeline.context import ImportContext, StepResult
from heartsmiles.pipeline.engine import ImportPipeline, PipelineEngine
from heartsmiles.pipeline.step import PipelineStep

__all__ = ["ImportPipeline", "PipelineEngine", "ImportContext", "PipelineStep", "StepResult"]
