import asyncio

import pydantic
import pytest
import structlog
from structlog.testing import capture_logs

from score_import.imports.finalize import (
    build_import_summary,
    log_import_summary,
    select_log_severity,
    spawn_timing_write,
)
from score_import.imports.models import ImportType, LogSeverity
from score_import.imports.partition import parse_import_info
from score_import.imports.schemas import ImportTiming
from tests.fakes import MemoryImportSink, failure, success


@pytest.mark.parametrize(
    ("accepted", "expected"),
    [
        (0, LogSeverity.low),
        (1, LogSeverity.low),
        (2, LogSeverity.medium),
        (50, LogSeverity.medium),
        (500, LogSeverity.medium),
        (501, LogSeverity.high),
        (600, LogSeverity.high),
    ],
)
def test_severity_depends_only_on_accepted_count(accepted, expected):
    assert select_log_severity(accepted) is expected


def test_severity_thresholds_are_configurable():
    assert select_log_severity(11, high_threshold=10, medium_threshold=5) is LogSeverity.high
    assert select_log_severity(5, high_threshold=10, medium_threshold=5) is LogSeverity.low


def _summary(outcomes, time_started=1_000):
    return build_import_summary(
        import_id="imp-1",
        import_type=ImportType.file_batch_manual,
        game="iidx",
        info=parse_import_info(outcomes),
        sessions=[],
        class_deltas=[],
        goal_info=(),
        milestone_info=(),
        user_id=7,
        user_intent=True,
        time_started=time_started,
    )


def test_summary_carries_id_strings_and_partition_results():
    summary = _summary([success("s1", playtype="SP"), failure(), success("s2", playtype="DP")])

    assert summary.id_strings == ("iidx:SP", "iidx:DP")
    assert summary.score_ids == ("s1", "s2")
    assert len(summary.errors) == 1
    assert summary.user_id == 7
    assert summary.time_finished >= summary.time_started


def test_summary_is_immutable():
    summary = _summary([success("s1")])

    with pytest.raises(pydantic.ValidationError):
        summary.user_intent = False  # type: ignore[misc]


def test_summary_serialises_with_document_field_names():
    dumped = _summary([success("s1"), failure("bad", kind="InvalidScore")]).model_dump(
        mode="json", by_alias=True
    )

    assert set(dumped) == {
        "importID",
        "importType",
        "idStrings",
        "scoreIDs",
        "errors",
        "timeStarted",
        "timeFinished",
        "createdSessions",
        "userID",
        "classDeltas",
        "goalInfo",
        "milestoneInfo",
        "userIntent",
    }
    assert dumped["importType"] == "file/batch-manual"
    assert dumped["errors"] == [{"type": "InvalidScore", "message": "bad"}]


def test_summary_log_level_follows_severity():
    logger = structlog.get_logger()
    many = _summary([success(f"s{i}", chart_id=f"c{i}") for i in range(600)])
    some = _summary([success(f"s{i}", chart_id=f"c{i}") for i in range(50)])
    one = _summary([success("s1")])

    with capture_logs() as logs:
        log_import_summary(logger, many, 600)
        log_import_summary(logger, some, 50)
        log_import_summary(logger, one, 1)

    assert [entry["log_level"] for entry in logs] == ["warning", "info", "debug"]
    assert all(entry["event"] == "import_finished" for entry in logs)


def test_empty_import_logs_without_dividing_by_zero():
    with capture_logs() as logs:
        log_import_summary(structlog.get_logger(), _summary([]), 0)

    assert logs[0]["ms_per_document"] is None


def _timing():
    return ImportTiming(import_id="imp-1", timestamp=1, total=0, relative={}, absolute={})


async def test_timing_write_failure_is_only_logged():
    sink = MemoryImportSink(timing_error=RuntimeError("disk full"))

    with capture_logs() as logs:
        task = spawn_timing_write(sink, _timing(), structlog.get_logger())
        await asyncio.wait({task})
        await asyncio.sleep(0)

    assert sink.timings == []
    failed = [entry for entry in logs if entry["event"] == "import_timing_write_failed"]
    assert failed and failed[0]["log_level"] == "debug"


async def test_timing_write_runs_in_background():
    sink = MemoryImportSink(block_timing=True)

    task = spawn_timing_write(sink, _timing(), structlog.get_logger())
    await asyncio.sleep(0)

    assert not task.done()
    sink.release_timing.set()
    await task
    assert len(sink.timings) == 1
