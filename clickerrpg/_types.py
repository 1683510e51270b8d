from __future__ import annotations

import operator
from enum import Enum, auto
from typing import Any, Callable, Mapping

Context = Mapping[str, Any]

_OPS: dict[str, Callable[[float, float], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
}


class Trigger(Enum):
    """Kinds of events after which achievements are evaluated."""

    CLICK = auto()
    DAMAGE = auto()
    ENEMY_DEFEATED = auto()
    UPGRADE = auto()
    SPAWN = auto()
    SKILL = auto()
    PRESTIGE = auto()
    LOAD = auto()


class Failure(Enum):
    """Distinct, recoverable reasons a player action did not go through."""

    INSUFFICIENT_FUNDS = auto()
    FEATURE_LOCKED = auto()
    AT_CAP = auto()
    ON_COOLDOWN = auto()
    NOT_UNLOCKED = auto()
    NO_ACTIVE_TARGET = auto()
    UNKNOWN_KIND = auto()
    NOT_REQUESTED = auto()
    NO_SAVE = auto()
    STORAGE_ERROR = auto()


def compare(left: float, op: str, right: float) -> bool:
    """Compare two values using a string operator."""
    fn = _OPS.get(op)
    if fn is None:
        raise ValueError(f"Unknown operator: {op!r}. Expected one of {list(_OPS)}")
    return fn(left, right)
