"""CSV export endpoints (both staff roles)."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Literal

from fastapi import APIRouter, Depends, Response

from heartsmiles.api.deps import get_store, require_staff_access
from heartsmiles.core.logging import get_logger
from heartsmiles.db.store import DocumentStore
from heartsmiles.processing import csv_export
from heartsmiles.repositories import participants as participant_repository
from heartsmiles.repositories import programs as program_repository

logger = get_logger(__name__)

router = APIRouter(
    prefix="/export",
    tags=["Export"],
    dependencies=[Depends(require_staff_access)],
)


def _csv_response(body: str, prefix: str) -> Response:
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{prefix}_{stamp}.csv"'},
    )


async def _program_names(
    store: DocumentStore,
    participants: list[dict[str, Any]],
) -> dict[str, list[str]]:
    """Participant id -> names of its programs; dangling references are skipped."""
    cache: dict[str, str | None] = {}
    names: dict[str, list[str]] = {}
    for participant in participants:
        resolved: list[str] = []
        for program_id in participant.get("programs") or []:
            if program_id not in cache:
                program = await program_repository.get_program(store, str(program_id))
                cache[program_id] = program.get("name") if program else None
                if program is None:
                    logger.warning(
                        "Exported participant references missing program",
                        program_id=program_id,
                    )
            if cache[program_id]:
                resolved.append(cache[program_id])
        names[participant.get("id", "")] = resolved
    return names


@router.get("/participants")
async def export_participants(
    programId: str | None = None,
    school: str | None = None,
    isActive: bool = True,
    dateFrom: date | None = None,
    dateTo: date | None = None,
    format: Literal["csv"] = "csv",
    store: DocumentStore = Depends(get_store),
) -> Response:
    """Participants as CSV; `dateFrom`/`dateTo` bound the referral date."""
    participants = await participant_repository.list_participants(
        store,
        is_active=isActive,
        school=school,
        program_id=programId,
    )
    participants = [
        p for p in participants
        if csv_export.within_dates(p.get("referralDate"), dateFrom, dateTo)
    ]
    program_names = await _program_names(store, participants)

    today = datetime.now(timezone.utc).date()
    rows = [
        csv_export.participant_row(p, program_names[p.get("id", "")], today)
        for p in participants
    ]
    logger.info("Participants exported", rows=len(rows))
    return _csv_response(
        csv_export.render_csv(csv_export.PARTICIPANT_COLUMNS, rows),
        "participants_export",
    )


@router.get("/programs")
async def export_programs(
    isActive: bool = True,
    store: DocumentStore = Depends(get_store),
) -> Response:
    programs = await program_repository.list_programs(store, is_active=isActive)
    rows = [csv_export.program_row(program) for program in programs]
    logger.info("Programs exported", rows=len(rows))
    return _csv_response(
        csv_export.render_csv(csv_export.PROGRAM_COLUMNS, rows),
        "programs_export",
    )


@router.get("/combined")
async def export_combined(
    isActive: bool = True,
    store: DocumentStore = Depends(get_store),
) -> Response:
    """Summary counts followed by participant and program rows in one sheet."""
    participants = await participant_repository.list_participants(store, is_active=isActive)
    programs = await program_repository.list_programs(store, is_active=isActive)
    program_names = await _program_names(store, participants)

    rows = csv_export.combined_rows(
        participants,
        programs,
        program_names,
        datetime.now(timezone.utc),
    )
    logger.info("Combined export", participants=len(participants), programs=len(programs))
    return _csv_response(
        csv_export.render_csv(csv_export.COMBINED_COLUMNS, rows),
        "heart_smiles_combined_export",
    )
