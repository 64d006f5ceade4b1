"""
LangSmith tracing utilities for the import pipeline.

Provides a setup function and a decorator that wraps the hosted-model
calls in a LangSmith span when tracing is configured, and calls the
function directly when it isn't (e.g. local dev without API key).

Usage:
    from heartsmiles.core.tracing import setup_tracing, traceable_step

    setup_tracing(settings)   # call once at startup

    @traceable_step(name="extract_participants", run_type="llm")
    async def complete(prompt, ...):
        ...
"""

from __future__ import annotations

import functools
import os
from typing import Any, Callable

from langsmith import traceable

from heartsmiles.core.config import Settings
from heartsmiles.core.logging import get_logger

logger = get_logger(__name__)

_tracing_enabled = False


def setup_tracing(settings: Settings) -> bool:
    """
    Configure LangSmith tracing from application settings.

    Sets the environment variables the LangSmith SDK reads.
    Returns True if tracing was enabled, False otherwise.
    """
    global _tracing_enabled

    if not settings.LANGSMITH_TRACING or not settings.LANGSMITH_API_KEY:
        logger.info(
            "LangSmith tracing disabled",
            reason="LANGSMITH_TRACING=False or no API key",
        )
        _tracing_enabled = False
        return False

    os.environ["LANGSMITH_API_KEY"] = settings.LANGSMITH_API_KEY
    os.environ["LANGSMITH_ENDPOINT"] = settings.LANGSMITH_ENDPOINT
    os.environ["LANGSMITH_PROJECT"] = settings.LANGSMITH_PROJECT
    os.environ["LANGSMITH_TRACING"] = "true"

    logger.info("LangSmith tracing enabled", project=settings.LANGSMITH_PROJECT)
    _tracing_enabled = True
    return True


def traceable_step(
    name: str,
    run_type: str = "chain",
    metadata: dict[str, Any] | None = None,
    tags: list[str] | None = None,
) -> Callable:
    """
    Wrap an async function in a LangSmith span when tracing is enabled.

    Args:
        name: Trace name shown in LangSmith UI.
        run_type: One of "chain", "llm", "tool", "retriever".
        metadata: Static metadata attached to every trace.
        tags: Tags for filtering in LangSmith.
    """
    def decorator(func: Callable) -> Callable:
        traced_fn = traceable(
            name=name,
            run_type=run_type,
            metadata=metadata or {},
            tags=tags or [],
        )(func)

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if _tracing_enabled:
                return await traced_fn(*args, **kwargs)
            return await func(*args, **kwargs)
        return wrapper
    return decorator
