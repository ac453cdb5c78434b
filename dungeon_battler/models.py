"""Dataclasses that describe cards, heroes, monsters and combat records."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from .constants import BASE_STAT_VALUE
from .enums import (
    BardSong,
    ClassType,
    EffectType,
    EliteModifier,
    EnvironmentEffectType,
    EnvironmentType,
    GamePhase,
    LogType,
    MonsterTarget,
    Rarity,
    TargetType,
)


@dataclass(frozen=True)
class Effect:
    """One step of a card or ability. Drives both preview and resolution."""

    type: EffectType
    target: TargetType
    value: int = 0
    duration: Optional[int] = None


@dataclass(frozen=True)
class Card:
    """An immutable card. Templates live in the catalog, copies in decks."""

    id: str
    name: str
    class_type: ClassType
    rarity: Rarity
    aggro: int
    description: str
    effects: Tuple[Effect, ...]
    template_id: str = ""

    def __post_init__(self) -> None:
        if not self.template_id:
            object.__setattr__(self, "template_id", self.id)

    def instance(self, instance_id: str) -> "Card":
        """Return a runtime copy that carries its own instance id."""
        return replace(self, id=instance_id)


@dataclass
class StatusEffect:
    """A timed buff or debuff.

    Most statuses tick once per DEBUFF_RESOLUTION. Action tracked statuses
    (monster-applied stun) tick when their holder spends an action
    opportunity instead.
    """

    type: EffectType
    value: int
    duration: int
    source: str = ""
    action_tracked: bool = False


@dataclass
class Attributes:
    strength: int = BASE_STAT_VALUE
    agility: int = BASE_STAT_VALUE
    constitution: int = BASE_STAT_VALUE
    intelligence: int = BASE_STAT_VALUE
    wisdom: int = BASE_STAT_VALUE
    luck: int = BASE_STAT_VALUE

    def to_dict(self) -> Dict[str, int]:
        return {
            "STR": self.strength,
            "AGI": self.agility,
            "CON": self.constitution,
            "INT": self.intelligence,
            "WIS": self.wisdom,
            "LCK": self.luck,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> "Attributes":
        return cls(
            strength=data.get("STR", BASE_STAT_VALUE),
            agility=data.get("AGI", BASE_STAT_VALUE),
            constitution=data.get("CON", BASE_STAT_VALUE),
            intelligence=data.get("INT", BASE_STAT_VALUE),
            wisdom=data.get("WIS", BASE_STAT_VALUE),
            luck=data.get("LCK", BASE_STAT_VALUE),
        )


def _sum_values(statuses: List[StatusEffect], effect_type: EffectType) -> int:
    return sum(status.value for status in statuses if status.type == effect_type)


def _has(statuses: List[StatusEffect], effect_type: EffectType) -> bool:
    return any(status.type == effect_type for status in statuses)


@dataclass
class Player:
    """Runtime representation of a hero in combat.

    The stunned/stealth/taunt flags and the accuracy penalty are derived from
    the status lists every time they are read.
    """

    id: str
    name: str
    class_type: ClassType
    hp: int
    max_hp: int
    max_resource: int
    resource: int = 0
    shield: int = 0
    deck: List[Card] = field(default_factory=list)
    hand: List[Card] = field(default_factory=list)
    discard: List[Card] = field(default_factory=list)
    base_aggro: int = 0
    dice_aggro: int = 0
    buffs: List[StatusEffect] = field(default_factory=list)
    debuffs: List[StatusEffect] = field(default_factory=list)
    gold: int = 0
    attributes: Attributes = field(default_factory=Attributes)
    champion_id: Optional[str] = None
    bard_song: Optional[BardSong] = None

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def is_stunned(self) -> bool:
        return _has(self.debuffs, EffectType.STUN)

    @property
    def is_stealth(self) -> bool:
        return _has(self.buffs, EffectType.STEALTH)

    @property
    def has_taunt(self) -> bool:
        return _has(self.buffs, EffectType.TAUNT)

    @property
    def has_block(self) -> bool:
        return _has(self.buffs, EffectType.BLOCK)

    @property
    def is_vulnerable(self) -> bool:
        return _has(self.debuffs, EffectType.VULNERABLE)

    @property
    def accuracy_penalty(self) -> int:
        return _sum_values(self.debuffs, EffectType.ACCURACY)

    @property
    def strength_bonus(self) -> int:
        return _sum_values(self.buffs, EffectType.STRENGTH)

    @property
    def aggro(self) -> int:
        return self.base_aggro + self.dice_aggro

    def all_cards(self) -> List[Card]:
        return [*self.deck, *self.hand, *self.discard]

    def find_in_hand(self, card_id: Optional[str]) -> Optional[Card]:
        if card_id is None:
            return None
        for card in self.hand:
            if card.id == card_id:
                return card
        return None


@dataclass(frozen=True)
class AbilityDebuff:
    type: EffectType
    value: int
    duration: int


@dataclass(frozen=True)
class MonsterAbility:
    """One face of a monster's d6 table. Negative damage heals the monster."""

    roll: int
    name: str
    description: str
    damage: int
    target: MonsterTarget = MonsterTarget.SINGLE
    debuff: Optional[AbilityDebuff] = None


@dataclass
class Monster:
    id: str
    template_id: str
    name: str
    level: int
    hp: int
    max_hp: int
    abilities: List[MonsterAbility]
    shield: int = 0
    buffs: List[StatusEffect] = field(default_factory=list)
    debuffs: List[StatusEffect] = field(default_factory=list)
    intent: Optional[MonsterAbility] = None
    elite_modifier: Optional[EliteModifier] = None
    damage_reduction: float = 0.0
    damage_multiplier: float = 1.0
    gold_reward: int = 0
    xp_reward: int = 0

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def is_stunned(self) -> bool:
        return _has(self.debuffs, EffectType.STUN)

    @property
    def is_vulnerable(self) -> bool:
        return _has(self.debuffs, EffectType.VULNERABLE)

    @property
    def weakness(self) -> int:
        return _sum_values(self.debuffs, EffectType.WEAKNESS)

    def ability_for_roll(self, roll: int) -> MonsterAbility:
        for ability in self.abilities:
            if ability.roll == roll:
                return ability
        return self.abilities[0]


@dataclass(frozen=True)
class EnvironmentModifier:
    type: EnvironmentEffectType
    value: float
    description: str = ""


@dataclass(frozen=True)
class Environment:
    """Read-only modifier set attached to a round."""

    type: EnvironmentType
    name: str
    description: str
    effects: Tuple[EnvironmentModifier, ...] = ()

    def multiplier(self, effect_type: EnvironmentEffectType) -> float:
        result = 1.0
        for modifier in self.effects:
            if modifier.type == effect_type:
                result *= modifier.value
        return result


@dataclass
class LogEntry:
    """Append-only battle record. Ids are assigned when appended to a state."""

    turn: int
    phase: GamePhase
    message: str
    type: LogType
    is_sub_entry: bool = False
    id: str = ""


@dataclass
class PlayerSelection:
    """A hero's pending action in simultaneous play."""

    player_id: str
    card_id: Optional[str] = None
    target_id: Optional[str] = None
    enhance: bool = False
    ready: bool = False


@dataclass(frozen=True)
class DamageEvent:
    """A floating number for the presentation layer."""

    target_id: str
    value: int
    kind: str = "damage"
