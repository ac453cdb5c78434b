"""Core enumerations used across the Dungeon Battler engine."""
from __future__ import annotations

from enum import Enum


class ClassType(Enum):
    """Hero classes. Each class scales damage off one attribute."""

    FIGHTER = "fighter"
    ROGUE = "rogue"
    PALADIN = "paladin"
    MAGE = "mage"
    CLERIC = "cleric"
    BARD = "bard"
    ARCHER = "archer"
    BARBARIAN = "barbarian"

    @property
    def is_arcane(self) -> bool:
        return self in (ClassType.MAGE, ClassType.CLERIC, ClassType.BARD)


class BardSong(Enum):
    """The song a bard is building stacks of. Cards carry it as a description tag."""

    HARMONY = "harmony"
    RIOT = "riot"

    @property
    def tag(self) -> str:
        return f"[{self.value.title()}]"


class Rarity(Enum):
    """Card rarities determine shop odds and price."""

    COMMON = ("common", 50, 10)
    UNCOMMON = ("uncommon", 30, 25)
    RARE = ("rare", 15, 50)
    LEGENDARY = ("legendary", 5, 100)

    def __init__(self, label: str, weight: int, price: int) -> None:
        self.label = label
        self.weight = weight
        self.price = price

    @classmethod
    def from_label(cls, label: str) -> "Rarity":
        for rarity in cls:
            if rarity.label == label:
                return rarity
        raise ValueError(f"Unknown rarity: {label}")


class EffectType(Enum):
    """Every kind of card or ability effect the resolver understands."""

    DAMAGE = "damage"
    HEAL = "heal"
    SHIELD = "shield"
    CLEANSE = "cleanse"
    REVIVE = "revive"
    # buffs
    STEALTH = "stealth"
    TAUNT = "taunt"
    STRENGTH = "strength"
    BLOCK = "block"
    REGEN = "regen"
    # debuffs
    POISON = "poison"
    BURN = "burn"
    ICE = "ice"
    WEAKNESS = "weakness"
    STUN = "stun"
    ACCURACY = "accuracy"
    VULNERABLE = "vulnerable"

    @property
    def is_buff(self) -> bool:
        return self in BUFF_TYPES

    @property
    def is_debuff(self) -> bool:
        return self in DEBUFF_TYPES


BUFF_TYPES = frozenset(
    {EffectType.STEALTH, EffectType.TAUNT, EffectType.STRENGTH, EffectType.BLOCK, EffectType.REGEN}
)
DEBUFF_TYPES = frozenset(
    {
        EffectType.POISON,
        EffectType.BURN,
        EffectType.ICE,
        EffectType.WEAKNESS,
        EffectType.STUN,
        EffectType.ACCURACY,
        EffectType.VULNERABLE,
    }
)
DOT_TYPES = (EffectType.POISON, EffectType.BURN, EffectType.ICE)


class TargetType(Enum):
    """Who an effect lands on."""

    SELF = "self"
    ALLY = "ally"
    MONSTER = "monster"
    ALL = "all"
    ALL_ALLIES = "allAllies"
    ALL_MONSTERS = "allMonsters"


class MonsterTarget(Enum):
    """Targeting mode of a monster ability."""

    SINGLE = "single"
    ALL = "all"
    RANDOM = "random"


class GamePhase(Enum):
    """States of the turn phase machine."""

    DRAW = "DRAW"
    SELECT = "SELECT"
    TARGET_SELECT = "TARGET_SELECT"
    AGGRO = "AGGRO"
    PLAYER_ACTION = "PLAYER_ACTION"
    RESOLVE = "RESOLVE"
    MONSTER_ACTION = "MONSTER_ACTION"
    DEBUFF_RESOLUTION = "DEBUFF_RESOLUTION"
    END_TURN = "END_TURN"
    REWARD = "REWARD"
    SHOP = "SHOP"
    VICTORY = "VICTORY"
    DEFEAT = "DEFEAT"
    QUEST_COMPLETE = "QUEST_COMPLETE"
    QUEST_FAILED = "QUEST_FAILED"
    CAMPAIGN_COMPLETE = "CAMPAIGN_COMPLETE"


class LogType(Enum):
    """Classification tag of a battle log entry."""

    INFO = "info"
    ROLL = "roll"
    ACTION = "action"
    DAMAGE = "damage"
    HEAL = "heal"
    DEBUFF = "debuff"
    BUFF = "buff"


class EliteModifier(Enum):
    """Tags that alter a monster's stats or behaviour."""

    FAST = "fast"
    ARMORED = "armored"
    ENRAGED = "enraged"
    REGENERATING = "regenerating"
    CURSED = "cursed"
    SHIELDED = "shielded"


class EnvironmentEffectType(Enum):
    """Multiplicative modifiers an environment can carry."""

    DAMAGE_BONUS = "damageBonus"
    HEALING_BONUS = "healingBonus"
    SHIELD_BONUS = "shieldBonus"
    POISON_BONUS = "poisonBonus"
    FIRE_BONUS = "fireBonus"
    FROST_BONUS = "frostBonus"


class EnvironmentType(Enum):
    FOREST = "forest"
    CASTLE = "castle"
    VOLCANO = "volcano"
    ICE_CAVE = "iceCave"
    SWAMP = "swamp"
    DESERT = "desert"
    CRYPT = "crypt"
    VOID = "void"


class PlayMode(Enum):
    """Whether heroes act one at a time or submit actions together."""

    SEQUENTIAL = "sequential"
    SIMULTANEOUS = "simultaneous"


class GameSpeed(Enum):
    """Presentation pacing. The value scales every event delay."""

    NORMAL = 1.0
    FAST = 0.5
    INSTANT = 0.0


class EventKind(Enum):
    DICE_ROLL = "dice_roll"
    ACTION = "action"
    DAMAGE_NUMBER = "damage_number"
    PHASE = "phase"


class CampaignStatus(Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
