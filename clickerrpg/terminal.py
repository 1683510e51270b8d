from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clickerrpg._types import compare

if TYPE_CHECKING:
    from clickerrpg.state import ProgressionState


@dataclass
class SimulationContext:
    """Extra context available to terminal conditions during simulation."""

    elapsed: float = 0.0
    last_purchase_time: float = 0.0
    total_purchases: int = 0


class TerminalCondition(ABC):
    """Base class for simulation stopping conditions."""

    @abstractmethod
    def is_met(self, state: ProgressionState, context: SimulationContext) -> bool: ...

    @abstractmethod
    def describe(self) -> str: ...


class _TimeTerminal(TerminalCondition):
    def __init__(self, seconds: float) -> None:
        self.seconds = seconds

    def is_met(self, state: ProgressionState, context: SimulationContext) -> bool:
        return context.elapsed >= self.seconds

    def describe(self) -> str:
        return f"time({self.seconds})"


class _LevelTerminal(TerminalCondition):
    def __init__(self, level: int) -> None:
        self.level = level

    def is_met(self, state: ProgressionState, context: SimulationContext) -> bool:
        return state.enemy.level >= self.level

    def describe(self) -> str:
        return f"level({self.level})"


class _PrestigeTerminal(TerminalCondition):
    def __init__(self, count: int) -> None:
        self.count = count

    def is_met(self, state: ProgressionState, context: SimulationContext) -> bool:
        return state.total_prestiges >= self.count

    def describe(self) -> str:
        return f"prestiges({self.count})"


class _AchievementTerminal(TerminalCondition):
    def __init__(self, achievement_id: str) -> None:
        self.achievement_id = achievement_id

    def is_met(self, state: ProgressionState, context: SimulationContext) -> bool:
        return state.has_achievement(self.achievement_id)

    def describe(self) -> str:
        return f'achievement("{self.achievement_id}")'


class _StatTerminal(TerminalCondition):
    def __init__(self, stat: str, op: str, threshold: float) -> None:
        self.stat = stat
        self.op = op
        self.threshold = threshold

    def is_met(self, state: ProgressionState, context: SimulationContext) -> bool:
        return compare(state.stat(self.stat), self.op, self.threshold)

    def describe(self) -> str:
        return f'stat("{self.stat}", "{self.op}", {self.threshold})'


class _StallTerminal(TerminalCondition):
    def __init__(self, max_idle_seconds: float) -> None:
        self.max_idle_seconds = max_idle_seconds

    def is_met(self, state: ProgressionState, context: SimulationContext) -> bool:
        return context.elapsed - context.last_purchase_time >= self.max_idle_seconds

    def describe(self) -> str:
        return f"stall({self.max_idle_seconds})"


class _AnyTerminal(TerminalCondition):
    def __init__(self, conditions: list[TerminalCondition]) -> None:
        self.conditions = conditions

    def is_met(self, state: ProgressionState, context: SimulationContext) -> bool:
        return any(c.is_met(state, context) for c in self.conditions)

    def describe(self) -> str:
        return " OR ".join(c.describe() for c in self.conditions)


class _AllTerminal(TerminalCondition):
    def __init__(self, conditions: list[TerminalCondition]) -> None:
        self.conditions = conditions

    def is_met(self, state: ProgressionState, context: SimulationContext) -> bool:
        return all(c.is_met(state, context) for c in self.conditions)

    def describe(self) -> str:
        return " AND ".join(c.describe() for c in self.conditions)


class Terminal:
    """Factory for built-in terminal conditions."""

    @staticmethod
    def time(seconds: float) -> TerminalCondition:
        return _TimeTerminal(seconds)

    @staticmethod
    def level(level: int) -> TerminalCondition:
        return _LevelTerminal(level)

    @staticmethod
    def prestiges(count: int) -> TerminalCondition:
        return _PrestigeTerminal(count)

    @staticmethod
    def achievement(achievement_id: str) -> TerminalCondition:
        return _AchievementTerminal(achievement_id)

    @staticmethod
    def stat(stat: str, op: str, threshold: float) -> TerminalCondition:
        return _StatTerminal(stat, op, threshold)

    @staticmethod
    def stall(max_idle_seconds: float = 600) -> TerminalCondition:
        return _StallTerminal(max_idle_seconds)

    @staticmethod
    def any(*conditions: TerminalCondition) -> TerminalCondition:
        return _AnyTerminal(list(conditions))

    @staticmethod
    def all(*conditions: TerminalCondition) -> TerminalCondition:
        return _AllTerminal(list(conditions))
