from uuid import uuid4

import structlog
from structlog.typing import FilteringBoundLogger

from score_import.imports.models import ImportType
from score_import.imports.schemas import ImportUser


def create_import_logger_and_id(
    user: ImportUser, import_type: ImportType
) -> tuple[str, FilteringBoundLogger]:
    """Allocate a fresh import ID and a logger bound to who is importing what."""
    import_id = uuid4().hex
    logger = structlog.get_logger("score_import.import").bind(
        import_id=import_id,
        user_id=user.id,
        username=user.username,
        import_type=str(import_type),
    )
    return import_id, logger
