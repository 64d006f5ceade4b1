"""Spreadsheet import endpoints (participants and programs)."""

from __future__ import annotations

import os
import time
import uuid
from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from heartsmiles.api.deps import get_import_pipeline, require_heartsmiles_staff
from heartsmiles.core.config import settings
from heartsmiles.core.constants import ALLOWED_UPLOAD_MIME_TYPES, EXTENSION_FORMATS, EntityKind
from heartsmiles.core.logging import get_logger
from heartsmiles.pipeline.engine import ImportPipeline
from heartsmiles.pipeline.errors import (
    ExtractionError,
    ParseError,
    PipelineError,
    UnsupportedFormatError,
)

logger = get_logger(__name__)

router = APIRouter(
    prefix="/import",
    tags=["Import"],
    dependencies=[Depends(require_heartsmiles_staff)],
)

_CHUNK_SIZE = 1024 * 1024


# ─── Upload handling ──────────────────────────────────

def _check_upload_type(upload: UploadFile) -> None:
    """Accept when either the extension or the declared mime type is allowed."""
    extension = os.path.splitext(upload.filename or "")[1].lower()
    if extension in EXTENSION_FORMATS or upload.content_type in ALLOWED_UPLOAD_MIME_TYPES:
        return
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Only CSV and Excel files are allowed",
    )


def _temp_upload_path(filename: str | None) -> str:
    """`<ms>_<random>_<basename>` inside the import temp dir."""
    safe_name = os.path.basename(filename or "upload")
    stamp = f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
    return os.path.join(settings.IMPORT_TEMP_DIR, f"{stamp}_{safe_name}")


async def _save_upload(upload: UploadFile) -> str:
    """Stream the upload to the import temp dir, enforcing the size limit."""
    os.makedirs(settings.IMPORT_TEMP_DIR, exist_ok=True)
    path = _temp_upload_path(upload.filename)

    written = 0
    too_large = False
    with open(path, "wb") as handle:
        while chunk := await upload.read(_CHUNK_SIZE):
            written += len(chunk)
            if written > settings.IMPORT_MAX_FILE_BYTES:
                too_large = True
                break
            handle.write(chunk)

    if too_large:
        os.remove(path)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File size too large. Maximum size is 10MB.",
        )
    return path


async def _run_import(
    kind: EntityKind,
    file: UploadFile | None,
    dry_run: str,
    pipeline: ImportPipeline,
) -> dict[str, Any]:
    if file is None or not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )
    _check_upload_type(file)
    path = await _save_upload(file)

    try:
        return await pipeline.run(
            kind,
            path,
            filename=file.filename,
            dry_run=dry_run == "true",
        )
    except (UnsupportedFormatError, ParseError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except ExtractionError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to process data with AI", "details": str(exc)},
        ) from exc
    except PipelineError as exc:
        logger.error("Import error", kind=kind.value, error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc


# ─── Endpoints ────────────────────────────────────────

@router.post("/participants")
async def import_participants(
    file: UploadFile | None = File(None),
    dryRun: str = Form("false"),
    pipeline: ImportPipeline = Depends(get_import_pipeline),
) -> dict[str, Any]:
    """Import participants from a CSV/XLSX/XLS file."""
    return await _run_import(EntityKind.PARTICIPANT, file, dryRun, pipeline)


@router.post("/programs")
async def import_programs(
    file: UploadFile | None = File(None),
    dryRun: str = Form("false"),
    pipeline: ImportPipeline = Depends(get_import_pipeline),
) -> dict[str, Any]:
    """Import programs from a CSV/XLSX/XLS file."""
    return await _run_import(EntityKind.PROGRAM, file, dryRun, pipeline)
