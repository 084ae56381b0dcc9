"""Runs a score import from raw input to a persisted import summary.

Stages run strictly in order:
  parse -> import -> importParse -> session -> pb -> ugs -> goal -> milestone -> finalise

Per-record conversion failures are data and end up in the summary. A failure
in any stage aborts the import: nothing is persisted and the caller receives
an OrchestrationError naming the stage.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from structlog.typing import FilteringBoundLogger

from score_import.exceptions import OrchestrationError
from score_import.imports.collaborators import ImportCollaborators, ImportSink, InputAcquirer
from score_import.imports.conversion import import_all_iterable_data
from score_import.imports.finalize import (
    DEFAULT_HIGH_THRESHOLD,
    DEFAULT_MEDIUM_THRESHOLD,
    build_import_summary,
    log_import_summary,
    spawn_timing_write,
)
from score_import.imports.game_stats import update_users_game_stats
from score_import.imports.import_logger import create_import_logger_and_id
from score_import.imports.models import ImportStage, ImportType
from score_import.imports.partition import parse_import_info
from score_import.imports.schemas import ImportSummary, ImportTiming, ImportUser
from score_import.imports.timing import StageTimings, milliseconds_since, now_ms


@contextmanager
def _stage(stage: ImportStage, logger: FilteringBoundLogger) -> Iterator[None]:
    try:
        yield
    except Exception as exc:
        logger.error("import_stage_failed", stage=str(stage), error=str(exc))
        raise OrchestrationError(str(stage), exc) from exc


class ScoreImportOrchestrator:
    def __init__(
        self,
        collaborators: ImportCollaborators,
        sink: ImportSink,
        *,
        high_log_threshold: int = DEFAULT_HIGH_THRESHOLD,
        medium_log_threshold: int = DEFAULT_MEDIUM_THRESHOLD,
    ) -> None:
        self._collaborators = collaborators
        self._sink = sink
        self._high_log_threshold = high_log_threshold
        self._medium_log_threshold = medium_log_threshold

    async def run(
        self,
        user: ImportUser,
        user_intent: bool,
        import_type: ImportType,
        acquire: InputAcquirer,
    ) -> ImportSummary:
        time_started = now_ms()
        import_id, logger = create_import_logger_and_id(user, import_type)
        logger.debug("import_request_received")

        timings = StageTimings()
        c = self._collaborators

        # --- Parsing ---
        start = time.perf_counter_ns()
        with _stage(ImportStage.parse, logger):
            parsed = await acquire(logger)
        timings.record(ImportStage.parse, milliseconds_since(start))
        self._log_stage(logger, ImportStage.parse, timings)

        # --- Importing ---
        start = time.perf_counter_ns()
        with _stage(ImportStage.import_, logger):
            outcomes = await import_all_iterable_data(
                parsed.iterable, parsed.converter, parsed.context, logger
            )
        timings.record(ImportStage.import_, milliseconds_since(start), len(outcomes))
        self._log_stage(logger, ImportStage.import_, timings)

        # --- Splitting outcomes ---
        start = time.perf_counter_ns()
        with _stage(ImportStage.import_parse, logger):
            info = parse_import_info(outcomes)
        timings.record(ImportStage.import_parse, milliseconds_since(start), len(outcomes))
        self._log_stage(logger, ImportStage.import_parse, timings)

        game = parsed.game
        playtypes = info.playtypes

        # --- Sessions ---
        start = time.perf_counter_ns()
        with _stage(ImportStage.session, logger):
            sessions = await c.sessions.create_sessions(
                user.id, import_type, game, info.playtype_groups, logger
            )
        timings.record(ImportStage.session, milliseconds_since(start), len(sessions))
        self._log_stage(logger, ImportStage.session, timings)

        # --- Personal bests ---
        start = time.perf_counter_ns()
        with _stage(ImportStage.pb, logger):
            await c.personal_bests.process_pbs(user.id, info.chart_ids, logger)
        timings.record(ImportStage.pb, milliseconds_since(start), len(info.chart_ids))
        self._log_stage(logger, ImportStage.pb, timings)

        # --- Game stats, one concurrent update per playtype ---
        start = time.perf_counter_ns()
        with _stage(ImportStage.ugs, logger):
            class_deltas = await update_users_game_stats(
                c.game_stats, game, playtypes, user.id, logger
            )
        timings.record(ImportStage.ugs, milliseconds_since(start))
        self._log_stage(logger, ImportStage.ugs, timings)

        # --- Goals ---
        start = time.perf_counter_ns()
        with _stage(ImportStage.goal, logger):
            goal_info = await c.goals.update_goals(game, user.id, info.chart_ids, logger)
        timings.record(ImportStage.goal, milliseconds_since(start))
        self._log_stage(logger, ImportStage.goal, timings)

        # --- Milestones ---
        start = time.perf_counter_ns()
        with _stage(ImportStage.milestone, logger):
            milestone_info = await c.milestones.update_milestones(
                goal_info, game, playtypes, user.id, logger
            )
        timings.record(ImportStage.milestone, milliseconds_since(start))
        self._log_stage(logger, ImportStage.milestone, timings)

        # --- Finalise ---
        with _stage(ImportStage.finalise, logger):
            summary = build_import_summary(
                import_id=import_id,
                import_type=import_type,
                game=game,
                info=info,
                sessions=sessions,
                class_deltas=class_deltas,
                goal_info=goal_info,
                milestone_info=milestone_info,
                user_id=user.id,
                user_intent=user_intent,
                time_started=time_started,
            )
            log_import_summary(
                logger,
                summary,
                len(outcomes),
                self._high_log_threshold,
                self._medium_log_threshold,
            )
            await self._sink.save_import(summary)

        timing = ImportTiming(
            import_id=import_id,
            timestamp=now_ms(),
            total=summary.time_finished - summary.time_started,
            relative=dict(timings.relative),
            absolute=dict(timings.absolute),
        )
        spawn_timing_write(self._sink, timing, logger)

        return summary

    @staticmethod
    def _log_stage(
        logger: FilteringBoundLogger, stage: ImportStage, timings: StageTimings
    ) -> None:
        logger.debug(
            f"{stage}_stage_completed",
            duration_ms=timings.absolute[stage],
            relative_ms=timings.relative.get(stage),
        )
