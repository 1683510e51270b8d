from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from clickerrpg._types import Failure
from clickerrpg.formulas import next_click_damage

if TYPE_CHECKING:
    from clickerrpg.definition import GameDefinition
    from clickerrpg.state import ProgressionState

CLICK_DAMAGE = "click_damage"
CRIT_CHANCE = "crit_chance"
HELPER_PREFIX = "helper:"


@dataclass(frozen=True)
class PurchaseResult:
    """Outcome of a purchase attempt."""

    success: bool
    kind: str = ""
    cost: int = 0
    new_value: float = 0.0
    failure: Failure | None = None
    reason: str = ""


@dataclass(frozen=True)
class UpgradeStatus:
    """Read-only snapshot of one upgrade for query results."""

    kind: str
    display_name: str
    value: float
    cost: int
    available: bool
    affordable: bool
    maxed: bool
    next_value: float


def helper_id_of(kind: str) -> str | None:
    if kind.startswith(HELPER_PREFIX):
        return kind[len(HELPER_PREFIX):]
    return None


def upgrade_kinds(definition: GameDefinition) -> list[str]:
    return [CLICK_DAMAGE, CRIT_CHANCE] + [h.upgrade_kind for h in definition.helper_types]


def _fail(kind: str, failure: Failure, reason: str, cost: int = 0) -> PurchaseResult:
    return PurchaseResult(success=False, kind=kind, cost=cost, failure=failure, reason=reason)


_CAP_EPSILON = 1e-9


def crit_at_cap(definition: GameDefinition, state: ProgressionState) -> bool:
    return state.effective_crit_chance() >= definition.config.crit_chance_max - _CAP_EPSILON


def purchase(definition: GameDefinition, state: ProgressionState, kind: str) -> PurchaseResult:
    """Buy one level of *kind*. On failure nothing in *state* changes."""
    cfg = definition.config

    if kind == CLICK_DAMAGE:
        cost = state.click_upgrade_cost
        if state.gold < cost:
            return _fail(kind, Failure.INSUFFICIENT_FUNDS, "Not enough gold", cost)
        state.apply_purchase(cost)
        state.click_damage = next_click_damage(state.click_damage)
        state.click_upgrade_cost = cfg.click_cost_scaling.next(cost)
        return PurchaseResult(success=True, kind=kind, cost=cost, new_value=state.click_damage)

    if kind == CRIT_CHANCE:
        cost = state.crit_upgrade_cost
        if not state.crit_unlocked:
            return _fail(kind, Failure.FEATURE_LOCKED, "Critical hits are not unlocked yet", cost)
        if crit_at_cap(definition, state):
            return _fail(kind, Failure.AT_CAP, "Crit chance is already at its maximum", cost)
        if state.gold < cost:
            return _fail(kind, Failure.INSUFFICIENT_FUNDS, "Not enough gold", cost)
        state.apply_purchase(cost)
        state.crit_chance = min(
            state.crit_chance + cfg.crit_chance_step,
            cfg.crit_chance_max - state.crit_chance_bonus,
        )
        state.crit_upgrade_cost = cfg.crit_cost_scaling.next(cost)
        return PurchaseResult(
            success=True, kind=kind, cost=cost, new_value=state.effective_crit_chance()
        )

    helper_id = helper_id_of(kind)
    hdef = definition.get_helper(helper_id) if helper_id is not None else None
    if hdef is None:
        return _fail(kind, Failure.UNKNOWN_KIND, f"Unknown upgrade: {kind!r}")

    hs = state.helpers[hdef.id]
    cost = hs.cost
    if not state.helpers_unlocked:
        return _fail(kind, Failure.FEATURE_LOCKED, "Helpers are not unlocked yet", cost)
    if state.gold < cost:
        return _fail(kind, Failure.INSUFFICIENT_FUNDS, "Not enough gold", cost)
    state.apply_purchase(cost)
    hs.level += 1
    hs.cost = hdef.cost_scaling.next(cost)
    state.recompute_dps(definition)
    return PurchaseResult(success=True, kind=kind, cost=cost, new_value=hs.level)


def list_upgrades(definition: GameDefinition, state: ProgressionState) -> list[UpgradeStatus]:
    """Every upgrade with its current cost and whether it can be bought now."""
    cfg = definition.config
    result = [
        UpgradeStatus(
            kind=CLICK_DAMAGE,
            display_name="Click Damage",
            value=state.click_damage,
            cost=state.click_upgrade_cost,
            available=True,
            affordable=state.gold >= state.click_upgrade_cost,
            maxed=False,
            next_value=next_click_damage(state.click_damage),
        )
    ]

    maxed = crit_at_cap(definition, state)
    result.append(
        UpgradeStatus(
            kind=CRIT_CHANCE,
            display_name="Crit Chance",
            value=state.effective_crit_chance(),
            cost=state.crit_upgrade_cost,
            available=state.crit_unlocked,
            affordable=state.crit_unlocked and not maxed and state.gold >= state.crit_upgrade_cost,
            maxed=maxed,
            next_value=min(state.effective_crit_chance() + cfg.crit_chance_step, cfg.crit_chance_max),
        )
    )

    for hdef in definition.helper_types:
        hs = state.helpers[hdef.id]
        result.append(
            UpgradeStatus(
                kind=hdef.upgrade_kind,
                display_name=hdef.display_name,
                value=hs.level,
                cost=hs.cost,
                available=state.helpers_unlocked,
                affordable=state.helpers_unlocked and state.gold >= hs.cost,
                maxed=False,
                next_value=hs.level + 1,
            )
        )
    return result
