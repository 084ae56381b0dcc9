import time
from dataclasses import dataclass, field


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def milliseconds_since(start_ns: int) -> float:
    return max(time.perf_counter_ns() - start_ns, 0) / 1_000_000


def per_item(duration_ms: float, count: int) -> float | None:
    """Average duration per item, or None when there were no items."""
    if count <= 0:
        return None
    return duration_ms / count


@dataclass
class StageTimings:
    absolute: dict[str, float] = field(default_factory=dict)
    relative: dict[str, float | None] = field(default_factory=dict)

    def record(self, stage: str, duration_ms: float, count: int | None = None) -> float | None:
        stage = str(stage)
        self.absolute[stage] = duration_ms
        if count is None:
            return None
        rel = per_item(duration_ms, count)
        self.relative[stage] = rel
        return rel
