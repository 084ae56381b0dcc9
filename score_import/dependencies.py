from typing import Annotated

from fastapi import Depends

from score_import.auth import get_current_user
from score_import.config import settings
from score_import.database import get_db
from score_import.imports.collaborators import ImportCollaborators
from score_import.imports.repository import ImportRepository
from score_import.imports.schemas import ImportUser
from score_import.imports.service import ImportService

_collaborators: ImportCollaborators | None = None


def configure_collaborators(collaborators: ImportCollaborators | None) -> None:
    """Register the session/PB/stats/goal/milestone implementations imports run against."""
    global _collaborators
    _collaborators = collaborators


def get_import_repo() -> ImportRepository:
    return ImportRepository(get_db())


def get_import_service() -> ImportService:
    return ImportService(
        _collaborators,
        get_import_repo(),
        high_log_threshold=settings.import_log_high_threshold,
        medium_log_threshold=settings.import_log_medium_threshold,
    )


ImportServiceDep = Annotated[ImportService, Depends(get_import_service)]
CurrentUser = Annotated[ImportUser, Depends(get_current_user)]
