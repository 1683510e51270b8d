from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from clickerrpg._types import Context, Trigger, compare

if TYPE_CHECKING:
    from clickerrpg.state import ProgressionState

Predicate = Callable[[Trigger, Context, "ProgressionState"], bool]


class Requirement(ABC):
    """Base class for all requirements: predicates over (trigger, context, state).

    Requirements that only look at state simply ignore the trigger and context,
    so they are re-checked after every kind of event.
    """

    @abstractmethod
    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool: ...

    def __and__(self, other: Requirement) -> Requirement:
        return _AllRequirement([self, other])

    def __or__(self, other: Requirement) -> Requirement:
        return _AnyRequirement([self, other])


# ── Private implementations ──────────────────────────────────────────


class _StatRequirement(Requirement):
    def __init__(self, stat: str, op: str, threshold: float) -> None:
        self.stat = stat
        self.op = op
        self.threshold = threshold

    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool:
        return compare(state.stat(self.stat), self.op, self.threshold)


class _HelperLevelRequirement(Requirement):
    def __init__(self, helper_id: str, op: str, threshold: int) -> None:
        self.helper_id = helper_id
        self.op = op
        self.threshold = threshold

    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool:
        return compare(state.helper_level(self.helper_id), self.op, self.threshold)


class _TriggerRequirement(Requirement):
    def __init__(self, trigger: Trigger) -> None:
        self.trigger = trigger

    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool:
        return trigger is self.trigger


class _UpgradeRequirement(Requirement):
    def __init__(self, kind: str) -> None:
        self.kind = kind

    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool:
        return trigger is Trigger.UPGRADE and context.get("kind") == self.kind


class _HelperHiredRequirement(Requirement):
    """An upgrade just bought a helper's first level."""

    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool:
        if trigger is not Trigger.UPGRADE:
            return False
        helper_id = context.get("helper_id")
        if helper_id is None:
            return False
        return state.helper_level(helper_id) == 1


class _DefeatedRequirement(Requirement):
    def __init__(
        self,
        boss: bool = False,
        special: bool = False,
        special_type: str | None = None,
    ) -> None:
        self.boss = boss
        self.special = special
        self.special_type = special_type

    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool:
        if trigger is not Trigger.ENEMY_DEFEATED:
            return False
        if self.boss and not context.get("was_boss"):
            return False
        if self.special and not context.get("was_special"):
            return False
        if self.special_type is not None and context.get("special_type") != self.special_type:
            return False
        return True


class _CountedRequirement(Requirement):
    """Counts occurrences of an event across evaluations.

    The count lives in ``state.achievement_progress[counter]`` so it survives
    unrelated triggers, saves and loads.
    """

    def __init__(self, event: Requirement, counter: str, goal: int) -> None:
        self.event = event
        self.counter = counter
        self.goal = goal

    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool:
        if not self.event.evaluate(trigger, context, state):
            return False
        count = state.achievement_progress.get(self.counter, 0) + 1
        state.achievement_progress[self.counter] = count
        return count >= self.goal


class _AllRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool:
        return all(r.evaluate(trigger, context, state) for r in self.reqs)


class _AnyRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool:
        return any(r.evaluate(trigger, context, state) for r in self.reqs)


class _CustomRequirement(Requirement):
    def __init__(self, fn: Predicate) -> None:
        self.fn = fn

    def evaluate(self, trigger: Trigger, context: Context, state: ProgressionState) -> bool:
        return self.fn(trigger, context, state)


# ── Public factory ───────────────────────────────────────────────────


class Req:
    """Factory for built-in requirement types."""

    @staticmethod
    def stat(stat: str, op: str, threshold: float) -> Requirement:
        return _StatRequirement(stat, op, threshold)

    @staticmethod
    def helper_level(helper_id: str, op: str, threshold: int) -> Requirement:
        return _HelperLevelRequirement(helper_id, op, threshold)

    @staticmethod
    def trigger(trigger: Trigger) -> Requirement:
        return _TriggerRequirement(trigger)

    @staticmethod
    def upgrade(kind: str) -> Requirement:
        return _UpgradeRequirement(kind)

    @staticmethod
    def helper_hired() -> Requirement:
        return _HelperHiredRequirement()

    @staticmethod
    def defeated(
        boss: bool = False,
        special: bool = False,
        special_type: str | None = None,
    ) -> Requirement:
        return _DefeatedRequirement(boss, special, special_type)

    @staticmethod
    def counted(event: Requirement, counter: str, goal: int) -> Requirement:
        return _CountedRequirement(event, counter, goal)

    @staticmethod
    def all(*reqs: Requirement) -> Requirement:
        return _AllRequirement(list(reqs))

    @staticmethod
    def any(*reqs: Requirement) -> Requirement:
        return _AnyRequirement(list(reqs))

    @staticmethod
    def custom(fn: Predicate) -> Requirement:
        return _CustomRequirement(fn)
