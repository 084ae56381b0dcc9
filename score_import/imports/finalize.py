import asyncio

from structlog.typing import FilteringBoundLogger

from score_import.imports.collaborators import ImportSink
from score_import.imports.models import ImportType, LogSeverity
from score_import.imports.schemas import (
    ClassDelta,
    GoalInfo,
    ImportSummary,
    ImportTiming,
    MilestoneInfo,
    ParsedImportInfo,
    SessionInfo,
)
from score_import.imports.timing import now_ms

DEFAULT_HIGH_THRESHOLD = 500
DEFAULT_MEDIUM_THRESHOLD = 1

# Tasks are held here until done so the event loop doesn't drop them.
_background_tasks: set[asyncio.Task] = set()


def select_log_severity(
    accepted_scores: int,
    high_threshold: int = DEFAULT_HIGH_THRESHOLD,
    medium_threshold: int = DEFAULT_MEDIUM_THRESHOLD,
) -> LogSeverity:
    if accepted_scores > high_threshold:
        return LogSeverity.high
    if accepted_scores > medium_threshold:
        return LogSeverity.medium
    return LogSeverity.low


def build_import_summary(
    *,
    import_id: str,
    import_type: ImportType,
    game: str,
    info: ParsedImportInfo,
    sessions: list[SessionInfo],
    class_deltas: list[ClassDelta],
    goal_info: GoalInfo,
    milestone_info: MilestoneInfo,
    user_id: int,
    user_intent: bool,
    time_started: int,
) -> ImportSummary:
    return ImportSummary(
        import_id=import_id,
        import_type=import_type,
        id_strings=tuple(f"{game}:{playtype}" for playtype in info.playtypes),
        score_ids=info.score_ids,
        errors=info.errors,
        time_started=time_started,
        time_finished=max(now_ms(), time_started),
        created_sessions=tuple(sessions),
        user_id=user_id,
        class_deltas=tuple(class_deltas),
        goal_info=tuple(goal_info),
        milestone_info=tuple(milestone_info),
        user_intent=user_intent,
    )


def log_import_summary(
    logger: FilteringBoundLogger,
    summary: ImportSummary,
    total_documents: int,
    high_threshold: int = DEFAULT_HIGH_THRESHOLD,
    medium_threshold: int = DEFAULT_MEDIUM_THRESHOLD,
) -> LogSeverity:
    severity = select_log_severity(len(summary.score_ids), high_threshold, medium_threshold)
    took = summary.time_finished - summary.time_started

    log = {
        LogSeverity.high: logger.warning,
        LogSeverity.medium: logger.info,
        LogSeverity.low: logger.debug,
    }[severity]

    log(
        "import_finished",
        took_ms=took,
        documents=total_documents,
        failures=len(summary.errors),
        successes=len(summary.score_ids),
        sessions=len(summary.created_sessions),
        ms_per_document=took / total_documents if total_documents else None,
        severity=str(severity),
    )
    return severity


def spawn_timing_write(
    sink: ImportSink, timing: ImportTiming, logger: FilteringBoundLogger
) -> asyncio.Task:
    """Write import timings in the background.

    Best-effort telemetry, not part of the import's transactional contract:
    the caller never awaits the task and a failed write is only logged.
    """

    def _on_done(task: asyncio.Task) -> None:
        _background_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.debug("import_timing_write_failed", error=str(exc))

    task = asyncio.create_task(sink.save_timing(timing))
    _background_tasks.add(task)
    task.add_done_callback(_on_done)
    return task
