import structlog

from score_import.exceptions import AppError, NotFoundError
from score_import.imports.collaborators import ImportCollaborators, InputAcquirer
from score_import.imports.models import ImportType
from score_import.imports.orchestrator import ScoreImportOrchestrator
from score_import.imports.repository import ImportRepository
from score_import.imports.schemas import ImportSummary, ImportTiming, ImportUser

logger = structlog.get_logger()


class ImportService:
    def __init__(
        self,
        collaborators: ImportCollaborators | None,
        repo: ImportRepository,
        *,
        high_log_threshold: int,
        medium_log_threshold: int,
    ) -> None:
        self._repo = repo
        self._orchestrator = (
            ScoreImportOrchestrator(
                collaborators,
                repo,
                high_log_threshold=high_log_threshold,
                medium_log_threshold=medium_log_threshold,
            )
            if collaborators is not None
            else None
        )

    async def import_scores(
        self,
        user: ImportUser,
        import_type: ImportType,
        acquire: InputAcquirer,
        *,
        user_intent: bool = True,
    ) -> ImportSummary:
        if self._orchestrator is None:
            raise AppError(
                "Import collaborators are not configured",
                code="COLLABORATORS_NOT_CONFIGURED",
            )
        summary = await self._orchestrator.run(user, user_intent, import_type, acquire)
        logger.info(
            "import_completed",
            import_id=summary.import_id,
            user_id=user.id,
            scores=len(summary.score_ids),
            errors=len(summary.errors),
        )
        return summary

    async def get_import(self, import_id: str) -> ImportSummary:
        summary = await self._repo.get_import(import_id)
        if summary is None:
            raise NotFoundError("Import", import_id)
        return summary

    async def list_imports(self, user_id: int | None = None, limit: int = 50) -> list[ImportSummary]:
        return await self._repo.list_imports(user_id, limit)

    async def get_timing(self, import_id: str) -> ImportTiming:
        timing = await self._repo.get_timing(import_id)
        if timing is None:
            raise NotFoundError("Import timing", import_id)
        return timing
