from typing import Any

from fastapi import APIRouter, Body, Query

from score_import.dependencies import CurrentUser, ImportServiceDep
from score_import.imports.models import ImportType
from score_import.imports.schemas import ImportSummary, ImportTiming
from score_import.parsers.batch_manual import batch_manual_parser

router = APIRouter()


@router.post("/batch-manual", status_code=201, response_model=ImportSummary)
async def import_batch_manual(
    service: ImportServiceDep,
    user: CurrentUser,
    payload: dict[str, Any] = Body(...),  # noqa: B008
    user_intent: bool = Query(default=True),
) -> ImportSummary:
    return await service.import_scores(
        user,
        ImportType.file_batch_manual,
        batch_manual_parser(payload, user.id),
        user_intent=user_intent,
    )


@router.get("/", response_model=list[ImportSummary])
async def list_imports(
    service: ImportServiceDep,
    _user: CurrentUser,
    user_id: int | None = None,
    limit: int = Query(default=50, ge=1, le=500),
) -> list[ImportSummary]:
    return await service.list_imports(user_id, limit)


@router.get("/{import_id}", response_model=ImportSummary)
async def get_import(
    import_id: str,
    service: ImportServiceDep,
    _user: CurrentUser,
) -> ImportSummary:
    return await service.get_import(import_id)


@router.get("/{import_id}/timings", response_model=ImportTiming)
async def get_import_timings(
    import_id: str,
    service: ImportServiceDep,
    _user: CurrentUser,
) -> ImportTiming:
    return await service.get_timing(import_id)
