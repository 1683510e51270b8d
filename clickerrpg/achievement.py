from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from clickerrpg._types import Context, Trigger
from clickerrpg.requirement import Requirement

if TYPE_CHECKING:
    from clickerrpg.definition import GameDefinition
    from clickerrpg.state import ProgressionState

logger = logging.getLogger(__name__)

FEATURES = ("crit", "helpers", "skills", "prestige")


class RewardType(Enum):
    CLICK_DAMAGE_MULT = auto()
    GOLD_MULT = auto()
    CRIT_CHANCE_BONUS = auto()
    HELPER_DAMAGE_MULT = auto()
    UNLOCK = auto()


@dataclass(frozen=True)
class RewardDef:
    """A permanent bonus granted once when an achievement unlocks."""

    type: RewardType
    amount: float = 0.0
    target: str = ""


class Reward:
    """Convenience constructors for achievement rewards."""

    @staticmethod
    def click_damage(amount: float) -> RewardDef:
        return RewardDef(RewardType.CLICK_DAMAGE_MULT, amount)

    @staticmethod
    def gold(amount: float) -> RewardDef:
        return RewardDef(RewardType.GOLD_MULT, amount)

    @staticmethod
    def crit_chance(amount: float) -> RewardDef:
        return RewardDef(RewardType.CRIT_CHANCE_BONUS, amount)

    @staticmethod
    def helper_damage(amount: float) -> RewardDef:
        return RewardDef(RewardType.HELPER_DAMAGE_MULT, amount)

    @staticmethod
    def unlock(feature: str) -> RewardDef:
        if feature not in FEATURES:
            raise ValueError(f"Unknown feature: {feature!r}. Expected one of {list(FEATURES)}")
        return RewardDef(RewardType.UNLOCK, target=feature)


@dataclass
class AchievementDef:
    """A one-time goal that grants permanent rewards.

    ``prestige`` achievements keep their achieved flag across a prestige
    reset; every other achievement is re-armed.
    """

    id: str
    description: str = ""
    requirement: Requirement | None = None
    rewards: list[RewardDef] = field(default_factory=list)
    prestige: bool = False
    glyph: str = ""
    progress_counter: str | None = None
    progress_goal: int | None = None


def apply_reward(reward: RewardDef, state: ProgressionState, crit_cap: float) -> None:
    if reward.type is RewardType.CLICK_DAMAGE_MULT:
        state.click_damage_multiplier += reward.amount
    elif reward.type is RewardType.GOLD_MULT:
        state.gold_multiplier += reward.amount
    elif reward.type is RewardType.CRIT_CHANCE_BONUS:
        state.grant_crit_bonus(reward.amount, crit_cap)
    elif reward.type is RewardType.HELPER_DAMAGE_MULT:
        state.helper_damage_multiplier += reward.amount
    elif reward.type is RewardType.UNLOCK:
        state.unlock(reward.target)


def grant(achievement: AchievementDef, definition: GameDefinition, state: ProgressionState) -> None:
    """Apply an achievement's rewards and latch it as achieved."""
    for reward in achievement.rewards:
        apply_reward(reward, state, definition.config.crit_chance_max)
    state.achievements.add(achievement.id)


def evaluate_achievements(
    definition: GameDefinition,
    state: ProgressionState,
    trigger: Trigger,
    context: Context | None = None,
) -> list[AchievementDef]:
    """Check every unachieved achievement and grant the ones now met.

    Returns the newly unlocked achievements in table order; each one is
    returned exactly once over the life of the state.
    """
    ctx: Context = context if context is not None else {}
    unlocked: list[AchievementDef] = []
    for adef in definition.achievements:
        if adef.id in state.achievements:
            continue
        if adef.requirement is None:
            continue
        if adef.requirement.evaluate(trigger, ctx, state):
            grant(adef, definition, state)
            unlocked.append(adef)
            logger.info("Achievement unlocked: %s (%s)", adef.id, adef.description)

    if unlocked:
        state.recompute_dps(definition)
    return unlocked
