"""Hard-mode variant of the default game: tougher enemies, a paladin, and a second skill."""
from __future__ import annotations

from clickerrpg.achievement import AchievementDef, Reward
from clickerrpg.content import (
    BOSS_TYPES,
    ENEMY_TYPES,
    HELPER_TYPES,
    SKILLS,
    SPECIAL_ENEMY_TYPES,
    default_achievements,
)
from clickerrpg.definition import GameConfig, GameDefinition, SkillDef
from clickerrpg.helper import HelperTypeDef
from clickerrpg.requirement import Req


def define_game() -> GameDefinition:
    paladin = HelperTypeDef(
        id="paladin",
        display_name="Paladin",
        glyph="🛡️",
        description="Slow to train, but hits harder with every level",
        base_damage=5.0,
        base_cost=250,
        cost_scale=1.4,
        cost_linear_add=25,
        damage_scaling=1.1,
    )
    helpers = list(HELPER_TYPES) + [paladin]

    achievements = default_achievements() + [
        AchievementDef(
            "paladinLevel5",
            "Level 5 Paladin! (+10% Helper Damage)",
            requirement=Req.helper_level("paladin", ">=", 5),
            rewards=[Reward.helper_damage(0.10)],
            glyph="🛡️",
        ),
        AchievementDef(
            "boss5",
            "Defeat the level 25 boss! (+25% Click Damage)",
            requirement=Req.defeated(boss=True) & Req.stat("enemy_level", ">=", 25),
            rewards=[Reward.click_damage(0.25)],
            glyph="🐉",
        ),
    ]

    return GameDefinition(
        config=GameConfig(
            name="Clicker RPG (Hard)",
            hp_scale=1.19,
            gold_scale=1.09,
            boss_base_hp_mult=5.0,
            special_min_level=15,
            crit_chance_max=0.35,
            autosave_interval=60.0,
        ),
        helper_types=helpers,
        enemy_types=list(ENEMY_TYPES),
        boss_types=list(BOSS_TYPES),
        special_enemy_types=list(SPECIAL_ENEMY_TYPES),
        skills=list(SKILLS)
        + [
            SkillDef(
                id="berserk",
                display_name="Berserk",
                active_duration=5,
                cooldown_duration=120,
                multiplier=4.0,
            )
        ],
        achievements=achievements,
        legacy_helper_id="warrior",
    )
