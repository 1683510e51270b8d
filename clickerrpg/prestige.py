from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from clickerrpg._types import Failure
from clickerrpg.combat import spawn_enemy
from clickerrpg.formulas import star_gold_multiplier, stars_earned_at_prestige
from clickerrpg.state import ProgressionState

if TYPE_CHECKING:
    from clickerrpg.definition import GameDefinition


@dataclass(frozen=True)
class PrestigeResult:
    """Outcome of a prestige attempt (or a preview of one)."""

    success: bool
    stars_earned: float = 0.0
    total_stars: float = 0.0
    total_prestiges: int = 0
    kept_achievements: list[str] = field(default_factory=list)
    failure: Failure | None = None
    reason: str = ""


def stars_preview(definition: GameDefinition, state: ProgressionState) -> float:
    return stars_earned_at_prestige(state.enemy.level, definition.config.levels_per_star)


def perform_prestige(
    definition: GameDefinition,
    state: ProgressionState,
    rng: random.Random,
) -> tuple[ProgressionState, PrestigeResult]:
    """Trade the current run for stars.

    Returns a brand-new state; *state* itself is never modified. Only stars,
    the prestige counter, the prestige latch and prestige-tagged achievements
    carry over.
    """
    if not state.prestige_unlocked:
        return state, PrestigeResult(
            success=False,
            failure=Failure.FEATURE_LOCKED,
            reason="Prestige is not unlocked yet",
        )

    earned = stars_preview(definition, state)
    fresh = ProgressionState.initial(definition)

    fresh.stars = state.stars + earned
    fresh.total_prestiges = state.total_prestiges + 1
    fresh.star_gold_multiplier = star_gold_multiplier(fresh.stars, definition.config.star_gold_rate)
    fresh.prestige_unlocked = True

    kept = [
        a.id
        for a in definition.achievements
        if a.prestige and a.id in state.achievements
    ]
    fresh.achievements = set(kept)

    fresh.recompute_dps(definition)
    spawn_enemy(definition, fresh, rng, level=1)

    return fresh, PrestigeResult(
        success=True,
        stars_earned=earned,
        total_stars=fresh.stars,
        total_prestiges=fresh.total_prestiges,
        kept_achievements=kept,
    )
