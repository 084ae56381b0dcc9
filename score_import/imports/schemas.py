"""Data structures shared across the score import pipeline.

Conversion outcomes are plain frozen dataclasses forming a tagged union, so
stages can ``match`` on them. Everything that is persisted or returned over
HTTP is a frozen pydantic model that serialises with camelCase field names.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from score_import.imports.models import ImportType, SessionInfoType

_FROZEN_CAMEL = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ImportUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    username: str


class NormalizedScore(BaseModel):
    model_config = _FROZEN_CAMEL

    score_id: str = Field(alias="scoreID")
    chart_id: str = Field(alias="chartID")
    song_id: str = Field(alias="songID")
    game: str
    playtype: str
    user_id: int = Field(alias="userID")
    time_achieved: int | None = None
    score_data: dict[str, Any] = Field(default_factory=dict)


class ImportFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    message: str


# ---------------------------------------------------------------------------
# Conversion outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConversionSuccess:
    score: NormalizedScore


@dataclass(frozen=True)
class ConversionFailure:
    kind: str
    message: str


ConversionOutcome = ConversionSuccess | ConversionFailure

Converter = Callable[[Any, Any], ConversionOutcome | Awaitable[ConversionOutcome]]


@dataclass(frozen=True)
class ParsedInput:
    """What an acquisition function hands to the pipeline."""

    iterable: Iterable[Any] | AsyncIterable[Any]
    converter: Converter
    context: Any
    game: str


@dataclass(frozen=True)
class ParsedImportInfo:
    score_ids: tuple[str, ...]
    errors: tuple[ImportFailure, ...]
    chart_ids: frozenset[str]
    playtype_groups: Mapping[str, tuple[NormalizedScore, ...]]

    @property
    def playtypes(self) -> list[str]:
        return list(self.playtype_groups)


# ---------------------------------------------------------------------------
# Collaborator results
# ---------------------------------------------------------------------------


class SessionInfo(BaseModel):
    model_config = _FROZEN_CAMEL

    type: SessionInfoType
    session_id: str = Field(alias="sessionID")


class ClassDelta(BaseModel):
    model_config = _FROZEN_CAMEL

    game: str
    playtype: str
    set: str
    old: str | None
    new: str


class GoalProgress(BaseModel):
    model_config = _FROZEN_CAMEL

    progress: float | None
    out_of: float
    achieved: bool


class GoalDelta(BaseModel):
    model_config = _FROZEN_CAMEL

    goal_id: str = Field(alias="goalID")
    old: GoalProgress | None
    new: GoalProgress


class MilestoneDelta(BaseModel):
    model_config = _FROZEN_CAMEL

    milestone_id: str = Field(alias="milestoneID")
    was_achieved: bool
    is_achieved: bool


GoalInfo = tuple[GoalDelta, ...]
MilestoneInfo = tuple[MilestoneDelta, ...]


# ---------------------------------------------------------------------------
# Persisted documents
# ---------------------------------------------------------------------------


class ImportSummary(BaseModel):
    model_config = _FROZEN_CAMEL

    import_id: str = Field(alias="importID")
    import_type: ImportType
    id_strings: tuple[str, ...]
    score_ids: tuple[str, ...] = Field(alias="scoreIDs")
    errors: tuple[ImportFailure, ...]
    time_started: int
    time_finished: int
    created_sessions: tuple[SessionInfo, ...]
    user_id: int = Field(alias="userID")
    class_deltas: tuple[ClassDelta, ...]
    goal_info: tuple[GoalDelta, ...]
    milestone_info: tuple[MilestoneDelta, ...]
    user_intent: bool

    @model_validator(mode="after")
    def _finished_after_started(self) -> ImportSummary:
        if self.time_finished < self.time_started:
            raise ValueError("timeFinished must not precede timeStarted")
        return self


class ImportTiming(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    import_id: str = Field(alias="importID")
    timestamp: int
    total: int = Field(ge=0)
    relative: dict[str, float | None] = Field(alias="rel")
    absolute: dict[str, float] = Field(alias="abs")
