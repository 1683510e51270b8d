"""The default Clicker RPG game: helpers, enemies, skills and achievements."""

from __future__ import annotations

from clickerrpg._types import Trigger
from clickerrpg.achievement import AchievementDef, Reward
from clickerrpg.definition import GameConfig, GameDefinition, SkillDef
from clickerrpg.enemy import BossTypeDef, EnemyTypeDef, SpecialEnemyTypeDef
from clickerrpg.helper import HelperTypeDef
from clickerrpg.requirement import Req

HELPER_TYPES = [
    HelperTypeDef(
        id="warrior",
        display_name="Warrior",
        glyph="⚔️",
        description="Strong melee fighter with balanced stats",
        base_damage=1.5,
        base_cost=30,
        cost_scale=1.28,
        cost_linear_add=5,
        damage_scaling=1.0,
    ),
    HelperTypeDef(
        id="mage",
        display_name="Mage",
        glyph="🔮",
        description="High damage but expensive magic user",
        base_damage=3.0,
        base_cost=60,
        cost_scale=1.35,
        cost_linear_add=10,
        damage_scaling=0.8,
    ),
    HelperTypeDef(
        id="rogue",
        display_name="Rogue",
        glyph="🗡️",
        description="Fast attacker with increasing efficiency",
        base_damage=1.0,
        base_cost=25,
        cost_scale=1.22,
        cost_linear_add=3,
        damage_scaling=1.2,
    ),
]

ENEMY_TYPES = [
    EnemyTypeDef("Slime", "🟢"),
    EnemyTypeDef("Goblin", "👺"),
    EnemyTypeDef("Bat", "🦇"),
    EnemyTypeDef("Spider", "🕷️"),
    EnemyTypeDef("Skeleton", "💀"),
    EnemyTypeDef("Orc", "👹"),
    EnemyTypeDef("Wolf", "🐺"),
    EnemyTypeDef("Bandit", "🧔"),
    EnemyTypeDef("Imp", "👿"),
]

BOSS_TYPES = [
    BossTypeDef("Giant Slime", "🦠"),
    BossTypeDef("Goblin King", "👑"),
    BossTypeDef("Spider Queen", "🕸️"),
    BossTypeDef("Undead Knight", "👻"),
    BossTypeDef("Orc Warlord", "🐗"),
    BossTypeDef("Stone Golem", "🗿"),
    BossTypeDef("Dark Mage", "🧙"),
    BossTypeDef("Baby Dragon", "🐉"),
]

SPECIAL_ENEMY_TYPES = [
    SpecialEnemyTypeDef(
        id="treasure_goblin",
        name="Treasure Goblin",
        glyph="💰",
        description="A rare creature overflowing with gold!",
        hp_multiplier=0.7,
        gold_multiplier=5.0,
        buff_type="gold_boost",
        buff_amount=1.5,
        buff_duration=30,
        chance=0.05,
    ),
    SpecialEnemyTypeDef(
        id="rare_fairy",
        name="Magical Fairy",
        glyph="✨",
        description="A magical fairy that grants damage buffs",
        hp_multiplier=0.5,
        gold_multiplier=2.0,
        buff_type="damage_boost",
        buff_amount=2.0,
        buff_duration=15,
        chance=0.03,
    ),
    SpecialEnemyTypeDef(
        id="critical_orb",
        name="Critical Orb",
        glyph="🔮",
        description="A mysterious orb pulsing with critical energy",
        hp_multiplier=0.8,
        gold_multiplier=1.5,
        buff_type="crit_boost",
        buff_amount=1.0,
        buff_duration=10,
        chance=0.02,
    ),
]

SKILLS = [
    SkillDef(
        id="double_damage",
        display_name="Double Damage",
        active_duration=10,
        cooldown_duration=60,
        multiplier=2.0,
    ),
]


def default_achievements() -> list[AchievementDef]:
    return [
        # Introduction
        AchievementDef(
            "click10",
            "Click 10 times! (Unlocks Critical Hits & +5% Click Damage)",
            requirement=Req.stat("total_clicks", ">=", 10),
            rewards=[Reward.unlock("crit"), Reward.click_damage(0.05)],
            glyph="🖱️",
        ),
        AchievementDef(
            "defeat5",
            "Defeat 5 enemies! (Unlocks Helpers & +10% Gold Gain)",
            requirement=Req.stat("enemies_defeated", ">=", 5),
            rewards=[Reward.unlock("helpers"), Reward.gold(0.10)],
            glyph="🎯",
        ),
        AchievementDef(
            "firstUpgrade",
            "Buy your first Click Dmg upgrade! (+0.5% Crit Chance)",
            requirement=Req.upgrade("click_damage") & Req.stat("click_damage", ">", 1),
            rewards=[Reward.crit_chance(0.005)],
            glyph="🔼",
        ),
        # Early game
        AchievementDef(
            "level10",
            "Reach Level 10! (+10% Click Damage)",
            requirement=Req.stat("enemy_level", ">=", 10),
            rewards=[Reward.click_damage(0.10)],
            glyph="📈",
        ),
        AchievementDef(
            "crit10",
            "Land 10 Critical Hits! (+1% Crit Chance)",
            requirement=Req.stat("total_crits", ">=", 10),
            rewards=[Reward.crit_chance(0.01)],
            glyph="💥",
        ),
        AchievementDef(
            "helperLevel1",
            "Hire your first Helper! (+5% Helper Damage)",
            requirement=Req.helper_hired(),
            rewards=[Reward.helper_damage(0.05)],
            glyph="🤝",
        ),
        AchievementDef(
            "warriorLevel5",
            "Level 5 Warrior! (+7% Helper Damage)",
            requirement=Req.helper_level("warrior", ">=", 5),
            rewards=[Reward.helper_damage(0.07)],
            glyph="⚔️",
        ),
        AchievementDef(
            "mageLevel5",
            "Level 5 Mage! (+10% Helper Damage)",
            requirement=Req.helper_level("mage", ">=", 5),
            rewards=[Reward.helper_damage(0.10)],
            glyph="🔮",
        ),
        AchievementDef(
            "rogueLevel5",
            "Level 5 Rogue! (+5% Crit Chance)",
            requirement=Req.helper_level("rogue", ">=", 5),
            rewards=[Reward.crit_chance(0.05)],
            glyph="🗡️",
        ),
        AchievementDef(
            "allHelpers",
            "Hire all Helper types! (+15% Gold Gain)",
            requirement=Req.all(*(Req.helper_level(h.id, ">", 0) for h in HELPER_TYPES)),
            rewards=[Reward.gold(0.15)],
            glyph="🏆",
        ),
        # Bosses and deeper progression
        AchievementDef(
            "firstBoss",
            "Defeat the first Boss! (+25% Gold Gain & +10% Click Damage)",
            requirement=Req.defeated(boss=True),
            rewards=[Reward.gold(0.25), Reward.click_damage(0.10)],
            glyph="😈",
        ),
        AchievementDef(
            "damage15",
            "Reach 15 Click Damage! (+1% Crit Chance)",
            requirement=Req.stat("click_damage", ">=", 15),
            rewards=[Reward.crit_chance(0.01)],
            glyph="⚔️",
        ),
        AchievementDef(
            "dps10",
            "Reach 10 Total DPS! (+10% Gold Gain)",
            requirement=Req.stat("dps", ">=", 10),
            rewards=[Reward.gold(0.10)],
            glyph="⏱️",
        ),
        AchievementDef(
            "dps50",
            "Reach 50 Total DPS! (+15% Helper Damage)",
            requirement=Req.stat("dps", ">=", 50),
            rewards=[Reward.helper_damage(0.15)],
            glyph="🔥",
        ),
        # Special enemies
        AchievementDef(
            "firstSpecial",
            "Defeat your first Special Enemy! (+15% Gold Gain)",
            requirement=Req.defeated(special=True),
            rewards=[Reward.gold(0.15)],
            glyph="⚡",
        ),
        AchievementDef(
            "treasureHunter",
            "Defeat 5 Treasure Goblins! (+20% Gold Gain)",
            requirement=Req.counted(
                Req.defeated(special_type="treasure_goblin"),
                counter="treasure_goblins_defeated",
                goal=5,
            ),
            rewards=[Reward.gold(0.20)],
            glyph="💰",
            progress_counter="treasure_goblins_defeated",
            progress_goal=5,
        ),
        # Prestige
        AchievementDef(
            "prestigeReady",
            "Reach Level 25! (Unlocks Prestige)",
            requirement=Req.stat("enemy_level", ">=", 25),
            rewards=[Reward.unlock("prestige")],
            prestige=True,
            glyph="🌀",
        ),
        AchievementDef(
            "firstPrestige",
            "Perform your first Prestige! (+10% Click Damage)",
            requirement=Req.trigger(Trigger.PRESTIGE) & Req.stat("total_prestiges", "==", 1),
            rewards=[Reward.click_damage(0.10)],
            prestige=True,
            glyph="✨",
        ),
    ]


def define_game() -> GameDefinition:
    return GameDefinition(
        config=GameConfig(name="Clicker RPG"),
        helper_types=list(HELPER_TYPES),
        enemy_types=list(ENEMY_TYPES),
        boss_types=list(BOSS_TYPES),
        special_enemy_types=list(SPECIAL_ENEMY_TYPES),
        skills=list(SKILLS),
        achievements=default_achievements(),
        legacy_helper_id="warrior",
    )
