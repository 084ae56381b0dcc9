from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Protocol

from structlog.typing import FilteringBoundLogger

from score_import.imports.models import ImportType
from score_import.imports.schemas import (
    ClassDelta,
    GoalInfo,
    ImportSummary,
    ImportTiming,
    MilestoneInfo,
    NormalizedScore,
    ParsedInput,
    SessionInfo,
)

InputAcquirer = Callable[[FilteringBoundLogger], Awaitable[ParsedInput]]


class SessionBuilder(ABC):
    @abstractmethod
    async def create_sessions(
        self,
        user_id: int,
        import_type: ImportType,
        game: str,
        playtype_groups: Mapping[str, tuple[NormalizedScore, ...]],
        logger: FilteringBoundLogger,
    ) -> list[SessionInfo]: ...


class PersonalBestProcessor(ABC):
    @abstractmethod
    async def process_pbs(
        self, user_id: int, chart_ids: frozenset[str], logger: FilteringBoundLogger
    ) -> None: ...


class GameStatsUpdater(ABC):
    @abstractmethod
    async def update_playtype_stats(
        self,
        game: str,
        playtype: str,
        user_id: int,
        previous_class_info: dict | None,
        logger: FilteringBoundLogger,
    ) -> list[ClassDelta]: ...


class GoalEvaluator(ABC):
    @abstractmethod
    async def update_goals(
        self,
        game: str,
        user_id: int,
        chart_ids: frozenset[str],
        logger: FilteringBoundLogger,
    ) -> GoalInfo: ...


class MilestoneEvaluator(ABC):
    @abstractmethod
    async def update_milestones(
        self,
        goal_info: GoalInfo,
        game: str,
        playtypes: list[str],
        user_id: int,
        logger: FilteringBoundLogger,
    ) -> MilestoneInfo: ...


class ImportSink(Protocol):
    async def save_import(self, summary: ImportSummary) -> None: ...

    async def save_timing(self, timing: ImportTiming) -> None: ...


@dataclass(frozen=True)
class ImportCollaborators:
    sessions: SessionBuilder
    personal_bests: PersonalBestProcessor
    game_stats: GameStatsUpdater
    goals: GoalEvaluator
    milestones: MilestoneEvaluator
