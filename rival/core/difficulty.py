"""Difficulty levels and the search budget each one buys."""

import enum
from dataclasses import dataclass
from typing import Dict, Union


@dataclass(frozen=True)
class SearchConfig:
    max_depth: int
    time_budget_ms: int
    table_capacity: int
    quiescence: bool = False

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")
        if self.time_budget_ms < 0:
            raise ValueError(f"time_budget_ms must be >= 0, got {self.time_budget_ms}")
        if self.table_capacity < 1:
            raise ValueError(f"table_capacity must be >= 1, got {self.table_capacity}")


class Difficulty(enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    MAX = "max"

    @classmethod
    def parse(cls, name: Union[str, "Difficulty"]) -> "Difficulty":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty {name!r} (expected one of: {choices})") from None


# Fixed table; not overridable from config files.
DIFFICULTY_TABLE: Dict[Difficulty, SearchConfig] = {
    Difficulty.EASY: SearchConfig(max_depth=1, time_budget_ms=500, table_capacity=1 << 12),
    Difficulty.MEDIUM: SearchConfig(max_depth=3, time_budget_ms=2_000, table_capacity=1 << 16),
    Difficulty.HARD: SearchConfig(max_depth=5, time_budget_ms=5_000, table_capacity=1 << 18, quiescence=True),
    Difficulty.MAX: SearchConfig(max_depth=8, time_budget_ms=15_000, table_capacity=1 << 20, quiescence=True),
}


def config_for(difficulty: Union[str, Difficulty]) -> SearchConfig:
    return DIFFICULTY_TABLE[Difficulty.parse(difficulty)]
