"""Public entrypoints for the Dungeon Battler engine."""
from .agent import HeuristicAgent
from .cards import CardDatabase
from .catalog import ContentCatalog
from .config import CombatConfig, SyncConfig
from .dice import Dice, ScriptedDice
from .enums import ClassType, EliteModifier, EnvironmentType, GamePhase, GameSpeed, PlayMode
from .errors import CatalogError, DungeonBattlerError, PhaseTransitionError, SnapshotError, SyncError
from .events import CombatEvent, EventScheduler
from .game import GameSession, HeroSpec, MonsterSpec
from .models import Card, Effect, Monster, Player
from .progression import InMemoryLedger, ProgressionLedger
from .snapshot import CombatSnapshot, from_snapshot, to_snapshot
from .state import CombatState
from .sync import InMemoryStore, ReplicatedStore, SyncBridge
from .rl import DungeonEnv, RewardConfig

__all__ = [
    "Card",
    "Effect",
    "Monster",
    "Player",
    "CardDatabase",
    "ContentCatalog",
    "CombatConfig",
    "SyncConfig",
    "Dice",
    "ScriptedDice",
    "ClassType",
    "EliteModifier",
    "EnvironmentType",
    "GamePhase",
    "GameSpeed",
    "PlayMode",
    "CatalogError",
    "DungeonBattlerError",
    "PhaseTransitionError",
    "SnapshotError",
    "SyncError",
    "CombatEvent",
    "EventScheduler",
    "GameSession",
    "HeroSpec",
    "MonsterSpec",
    "HeuristicAgent",
    "InMemoryLedger",
    "ProgressionLedger",
    "CombatSnapshot",
    "from_snapshot",
    "to_snapshot",
    "CombatState",
    "InMemoryStore",
    "ReplicatedStore",
    "SyncBridge",
    "DungeonEnv",
    "RewardConfig",
]
