from enum import StrEnum


class ImportType(StrEnum):
    file_batch_manual = "file/batch-manual"
    file_csv = "file/csv"
    file_json = "file/json"
    api_service = "api/service"
    ir_direct_manual = "ir/direct-manual"
    ir_barbatos = "ir/barbatos"
    ir_fervidex = "ir/fervidex"


class FailureKind(StrEnum):
    invalid_score = "InvalidScore"
    song_or_chart_not_found = "SongOrChartNotFound"
    internal_error = "InternalError"


class LogSeverity(StrEnum):
    high = "high"
    medium = "medium"
    low = "low"


class ImportStage(StrEnum):
    parse = "parse"
    import_ = "import"
    import_parse = "importParse"
    session = "session"
    pb = "pb"
    ugs = "ugs"
    goal = "goal"
    milestone = "milestone"
    finalise = "finalise"


class SessionInfoType(StrEnum):
    created = "Created"
    appended = "Appended"
