import json
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from structlog.typing import FilteringBoundLogger

from score_import.exceptions import ConverterFailure, ValidationError
from score_import.imports.collaborators import InputAcquirer
from score_import.imports.models import FailureKind
from score_import.imports.schemas import ConversionSuccess, NormalizedScore, ParsedInput
from score_import.parsers.base import deterministic_id


class BatchManualMeta(BaseModel):
    game: str = Field(min_length=1)
    playtype: str = Field(min_length=1)
    service: str = Field(min_length=1, max_length=20)


class BatchManualScore(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    identifier: str = Field(min_length=1)
    difficulty: str = Field(min_length=1)
    score: float = Field(ge=0)
    lamp: str = Field(min_length=1)
    playtype: str | None = None
    time_achieved: int | None = Field(default=None, alias="timeAchieved", ge=0)


@dataclass(frozen=True)
class BatchManualContext:
    user_id: int
    game: str
    playtype: str
    service: str


def _describe(exc: pydantic.ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc']) or 'score'}: {err['msg']}"
        for err in exc.errors()
    )


def convert_batch_manual_score(raw: Any, context: BatchManualContext) -> ConversionSuccess:
    try:
        item = BatchManualScore.model_validate(raw)
    except pydantic.ValidationError as exc:
        raise ConverterFailure(FailureKind.invalid_score, _describe(exc)) from exc

    playtype = item.playtype or context.playtype
    song_id = deterministic_id(context.game, item.identifier, length=16)
    chart_id = deterministic_id(context.game, playtype, item.identifier, item.difficulty)
    score_id = deterministic_id(
        context.user_id, chart_id, item.score, item.lamp, item.time_achieved
    )

    return ConversionSuccess(
        score=NormalizedScore(
            score_id=score_id,
            chart_id=chart_id,
            song_id=song_id,
            game=context.game,
            playtype=playtype,
            user_id=context.user_id,
            time_achieved=item.time_achieved,
            score_data={
                "score": item.score,
                "lamp": item.lamp,
                "difficulty": item.difficulty,
                "service": context.service,
            },
        )
    )


def batch_manual_parser(payload: bytes | str | dict, user_id: int) -> InputAcquirer:
    """Build an acquisition function for a batch-manual JSON document.

    A malformed document fails the whole import; malformed scores only fail
    themselves.
    """

    async def acquire(logger: FilteringBoundLogger) -> ParsedInput:
        document = _load(payload)

        try:
            meta = BatchManualMeta.model_validate(document.get("meta"))
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Invalid batch-manual meta: {_describe(exc)}") from exc

        scores = document.get("scores")
        if not isinstance(scores, list):
            raise ValidationError("Invalid batch-manual document: 'scores' must be a list")

        logger.debug(
            "batch_manual_parsed",
            game=meta.game,
            playtype=meta.playtype,
            service=meta.service,
            scores=len(scores),
        )

        def iterate() -> Iterator[Any]:
            yield from scores

        return ParsedInput(
            iterable=iterate(),
            converter=convert_batch_manual_score,
            context=BatchManualContext(
                user_id=user_id, game=meta.game, playtype=meta.playtype, service=meta.service
            ),
            game=meta.game,
        )

    return acquire


def _load(payload: bytes | str | dict) -> dict:
    if isinstance(payload, dict):
        return payload
    try:
        document = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError(f"Invalid batch-manual JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ValidationError("Invalid batch-manual document: expected a JSON object")
    return document
