from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from clickerrpg._types import Trigger
from clickerrpg.economy import UpgradeStatus
from clickerrpg.requirement import Requirement

if TYPE_CHECKING:
    from clickerrpg.definition import GameDefinition
    from clickerrpg.state import ProgressionState


@dataclass
class ClickProfile:
    """Configures click behavior for strategies."""

    cps: float = 0.0
    active_until: Requirement | None = None
    _carry: float = field(default=0.0, init=False, repr=False)

    def get_clicks(self, state: ProgressionState, duration: float) -> int:
        """Return number of clicks for the given duration.

        Fractional clicks carry over, so 3 CPS over 0.5 s ticks alternates
        between one and two clicks.
        """
        if self.active_until is not None and self.active_until.evaluate(Trigger.CLICK, {}, state):
            return 0
        self._carry += self.cps * duration
        clicks = int(self._carry)
        self._carry -= clicks
        return clicks


class Strategy(ABC):
    """Base class for simulation strategies."""

    @abstractmethod
    def decide_purchases(
        self, state: ProgressionState, affordable: list[UpgradeStatus]
    ) -> list[str]:
        """Return ordered list of upgrade kinds to buy."""
        ...

    def get_clicks(self, state: ProgressionState, duration: float) -> int:
        """Return clicks during this tick. Override or use click_profile."""
        return 0

    def choose_skills(self, state: ProgressionState, ready: list[str]) -> list[str]:
        """Skills to activate now, out of those off cooldown."""
        return []

    def should_prestige(self, state: ProgressionState, stars: float) -> bool:
        """Whether to prestige now for *stars*."""
        return False

    @abstractmethod
    def describe(self) -> str: ...


class GreedyCheapest(Strategy):
    """Buy the cheapest affordable upgrade first."""

    def __init__(
        self,
        click_profile: ClickProfile | None = None,
        prestige_at_level: int | None = None,
        use_skills: bool = True,
        cost_weights: dict[str, float] | None = None,
    ) -> None:
        self.click_profile = click_profile
        self.prestige_at_level = prestige_at_level
        self.use_skills = use_skills
        self.cost_weights = cost_weights or {}

    def _weighted_cost(self, upgrade: UpgradeStatus) -> float:
        return upgrade.cost * self.cost_weights.get(upgrade.kind, 1.0)

    def decide_purchases(
        self, state: ProgressionState, affordable: list[UpgradeStatus]
    ) -> list[str]:
        if not affordable:
            return []
        return [u.kind for u in sorted(affordable, key=self._weighted_cost)]

    def get_clicks(self, state: ProgressionState, duration: float) -> int:
        if self.click_profile:
            return self.click_profile.get_clicks(state, duration)
        return 0

    def choose_skills(self, state: ProgressionState, ready: list[str]) -> list[str]:
        return list(ready) if self.use_skills else []

    def should_prestige(self, state: ProgressionState, stars: float) -> bool:
        return self.prestige_at_level is not None and state.enemy.level >= self.prestige_at_level

    def describe(self) -> str:
        parts = ["GreedyCheapest"]
        if self.click_profile and self.click_profile.cps:
            parts.append(f"({self.click_profile.cps} CPS)")
        return " ".join(parts)


class PriorityList(Strategy):
    """Follow a designer-specified purchase order."""

    def __init__(
        self,
        priorities: list[tuple[str, float]],
        fallback: Strategy | None = None,
        click_profile: ClickProfile | None = None,
    ) -> None:
        self.priorities = priorities  # (kind, target value)
        self.fallback = fallback
        self.click_profile = click_profile

    def decide_purchases(
        self, state: ProgressionState, affordable: list[UpgradeStatus]
    ) -> list[str]:
        by_kind = {u.kind: u for u in affordable}

        for kind, target in self.priorities:
            upgrade = by_kind.get(kind)
            if upgrade is not None and upgrade.value < target:
                return [kind]

        if self.fallback:
            return self.fallback.decide_purchases(state, affordable)
        return []

    def get_clicks(self, state: ProgressionState, duration: float) -> int:
        if self.click_profile:
            return self.click_profile.get_clicks(state, duration)
        if self.fallback:
            return self.fallback.get_clicks(state, duration)
        return 0

    def choose_skills(self, state: ProgressionState, ready: list[str]) -> list[str]:
        if self.fallback:
            return self.fallback.choose_skills(state, ready)
        return []

    def should_prestige(self, state: ProgressionState, stars: float) -> bool:
        if self.fallback:
            return self.fallback.should_prestige(state, stars)
        return False

    def describe(self) -> str:
        items = ", ".join(f"{kind}x{target:g}" for kind, target in self.priorities)
        return f"PriorityList([{items}])"


class CustomStrategy(Strategy):
    """Strategy defined by callables."""

    def __init__(
        self,
        decide_fn: Callable[
            [ProgressionState, list[UpgradeStatus]], list[str]
        ] | None = None,
        clicks_fn: Callable[[ProgressionState, float], int] | None = None,
        skills_fn: Callable[[ProgressionState, list[str]], list[str]] | None = None,
        prestige_fn: Callable[[ProgressionState, float], bool] | None = None,
        name: str = "Custom",
    ) -> None:
        self._decide_fn = decide_fn
        self._clicks_fn = clicks_fn
        self._skills_fn = skills_fn
        self._prestige_fn = prestige_fn
        self._name = name

    def decide_purchases(
        self, state: ProgressionState, affordable: list[UpgradeStatus]
    ) -> list[str]:
        if self._decide_fn:
            return self._decide_fn(state, affordable)
        return []

    def get_clicks(self, state: ProgressionState, duration: float) -> int:
        if self._clicks_fn:
            return self._clicks_fn(state, duration)
        return 0

    def choose_skills(self, state: ProgressionState, ready: list[str]) -> list[str]:
        if self._skills_fn:
            return self._skills_fn(state, ready)
        return []

    def should_prestige(self, state: ProgressionState, stars: float) -> bool:
        if self._prestige_fn:
            return self._prestige_fn(state, stars)
        return False

    def describe(self) -> str:
        return self._name


def helpers_first(
    definition: GameDefinition,
    click_profile: ClickProfile | None = None,
    helper_target: int = 10,
    prestige_at_level: int | None = None,
) -> Strategy:
    """Rush every helper type to *helper_target* levels, then buy greedily."""
    return PriorityList(
        priorities=[(h.upgrade_kind, helper_target) for h in definition.helper_types],
        fallback=GreedyCheapest(click_profile=click_profile, prestige_at_level=prestige_at_level),
        click_profile=click_profile,
    )
