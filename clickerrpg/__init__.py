# clickerrpg: Clicker RPG progression core & balance simulation

from clickerrpg._types import Trigger, Failure, compare
from clickerrpg.clock import Clock, SystemClock, ManualClock
from clickerrpg.cost_scaling import CostScaling
from clickerrpg.requirement import Requirement, Req
from clickerrpg.helper import HelperTypeDef, HelperState
from clickerrpg.enemy import EnemyTypeDef, BossTypeDef, SpecialEnemyTypeDef, EnemyState
from clickerrpg.achievement import AchievementDef, Reward, RewardDef, RewardType
from clickerrpg.definition import GameDefinition, GameConfig, SkillDef
from clickerrpg.state import ProgressionState, BuffState, SkillState
from clickerrpg.combat import AttackResult, DamageResult
from clickerrpg.economy import PurchaseResult, UpgradeStatus
from clickerrpg.timers import SkillResult
from clickerrpg.prestige import PrestigeResult
from clickerrpg.persistence import (
    SAVE_VERSION,
    PersistenceError,
    SaveStore,
    JsonFileStore,
    MemoryStore,
)
from clickerrpg.runtime import (
    GameRuntime,
    Notification,
    NotificationKind,
    SaveResult,
    LoadResult,
    TickResult,
)
from clickerrpg.content import define_game
from clickerrpg.terminal import TerminalCondition, Terminal, SimulationContext
from clickerrpg.strategy import (
    Strategy,
    ClickProfile,
    GreedyCheapest,
    PriorityList,
    CustomStrategy,
)
from clickerrpg.metrics import MetricsCollector
from clickerrpg.simulation import Simulation
from clickerrpg.report import SimulationReport, build_report
from clickerrpg.formatting import format_number, format_text_report

__all__ = [
    # Types
    "Trigger",
    "Failure",
    "compare",
    # Time
    "Clock",
    "SystemClock",
    "ManualClock",
    # Cost
    "CostScaling",
    # Requirements
    "Requirement",
    "Req",
    # Data model
    "HelperTypeDef",
    "HelperState",
    "EnemyTypeDef",
    "BossTypeDef",
    "SpecialEnemyTypeDef",
    "EnemyState",
    "AchievementDef",
    "Reward",
    "RewardDef",
    "RewardType",
    # Definition
    "GameDefinition",
    "GameConfig",
    "SkillDef",
    "define_game",
    # State
    "ProgressionState",
    "BuffState",
    "SkillState",
    # Results
    "AttackResult",
    "DamageResult",
    "PurchaseResult",
    "UpgradeStatus",
    "SkillResult",
    "PrestigeResult",
    # Persistence
    "SAVE_VERSION",
    "PersistenceError",
    "SaveStore",
    "JsonFileStore",
    "MemoryStore",
    # Runtime
    "GameRuntime",
    "Notification",
    "NotificationKind",
    "SaveResult",
    "LoadResult",
    "TickResult",
    # Terminal
    "TerminalCondition",
    "Terminal",
    "SimulationContext",
    # Strategy
    "Strategy",
    "ClickProfile",
    "GreedyCheapest",
    "PriorityList",
    "CustomStrategy",
    # Simulation
    "MetricsCollector",
    "Simulation",
    "SimulationReport",
    "build_report",
    # Formatting
    "format_number",
    "format_text_report",
]
