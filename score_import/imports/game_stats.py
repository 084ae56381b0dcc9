import asyncio

from structlog.typing import FilteringBoundLogger

from score_import.exceptions import StatUpdateError
from score_import.imports.collaborators import GameStatsUpdater
from score_import.imports.schemas import ClassDelta


async def update_users_game_stats(
    updater: GameStatsUpdater,
    game: str,
    playtypes: list[str],
    user_id: int,
    logger: FilteringBoundLogger,
) -> list[ClassDelta]:
    """Recompute stats for every playtype concurrently and flatten the deltas.

    Each playtype is updated independently. All updates are awaited before
    anything is returned; if any of them failed, the first failure (in
    playtype order) is raised and no deltas are returned.
    """
    unique_playtypes = list(dict.fromkeys(playtypes))

    results = await asyncio.gather(
        *(
            updater.update_playtype_stats(game, playtype, user_id, None, logger)
            for playtype in unique_playtypes
        ),
        return_exceptions=True,
    )

    for playtype, result in zip(unique_playtypes, results, strict=True):
        if isinstance(result, BaseException):
            logger.warning("playtype_stats_failed", playtype=playtype, error=str(result))
            raise StatUpdateError(playtype, result) from result

    return [delta for deltas in results for delta in deltas]
