from collections.abc import Iterable
from types import MappingProxyType

from score_import.imports.schemas import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    ImportFailure,
    NormalizedScore,
    ParsedImportInfo,
)


def parse_import_info(outcomes: Iterable[ConversionOutcome]) -> ParsedImportInfo:
    """Split conversion outcomes in a single pass.

    Scores keep their input order inside each playtype group; sessions are
    built from that order downstream.
    """
    score_ids: list[str] = []
    errors: list[ImportFailure] = []
    chart_ids: set[str] = set()
    groups: dict[str, list[NormalizedScore]] = {}

    for outcome in outcomes:
        match outcome:
            case ConversionSuccess(score=score):
                score_ids.append(score.score_id)
                chart_ids.add(score.chart_id)
                groups.setdefault(score.playtype, []).append(score)
            case ConversionFailure(kind=kind, message=message):
                errors.append(ImportFailure(type=kind, message=message))

    return ParsedImportInfo(
        score_ids=tuple(score_ids),
        errors=tuple(errors),
        chart_ids=frozenset(chart_ids),
        playtype_groups=MappingProxyType({pt: tuple(scores) for pt, scores in groups.items()}),
    )
