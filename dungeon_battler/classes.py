"""Hero class definitions: hit points, resource bar, special and enhance bonus."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .enums import ClassType, EffectType, TargetType
from .models import Effect


@dataclass(frozen=True)
class EnhanceBonus:
    damage: int = 0
    heal: int = 0
    shield: int = 0

    def for_effect(self, effect_type: EffectType) -> int:
        if effect_type == EffectType.DAMAGE:
            return self.damage
        if effect_type == EffectType.HEAL:
            return self.heal
        if effect_type == EffectType.SHIELD:
            return self.shield
        return 0


@dataclass(frozen=True)
class SpecialAbility:
    name: str
    description: str
    effects: Tuple[Effect, ...]


@dataclass(frozen=True)
class ClassConfig:
    class_type: ClassType
    name: str
    description: str
    base_hp: int
    resource_name: str
    max_resource: int
    special_ability: SpecialAbility
    enhance_bonus: EnhanceBonus


def _fx(effect_type: EffectType, value: int, target: TargetType, duration: int | None = None) -> Effect:
    return Effect(effect_type, target, value, duration)


CLASS_CONFIGS: Dict[ClassType, ClassConfig] = {
    ClassType.FIGHTER: ClassConfig(
        ClassType.FIGHTER,
        "Fighter",
        "A disciplined master of combat.",
        120,
        "Discipline",
        10,
        SpecialAbility(
            "Action Surge",
            "Deal 25 damage to all enemies and expose them.",
            (
                _fx(EffectType.DAMAGE, 25, TargetType.ALL_MONSTERS),
                _fx(EffectType.STUN, 1, TargetType.ALL_MONSTERS, 1),
                _fx(EffectType.VULNERABLE, 1, TargetType.ALL_MONSTERS, 1),
                _fx(EffectType.WEAKNESS, 1, TargetType.ALL_MONSTERS, 1),
            ),
        ),
        EnhanceBonus(damage=8, shield=5),
    ),
    ClassType.ROGUE: ClassConfig(
        ClassType.ROGUE,
        "Rogue",
        "A swift assassin who strikes from the shadows.",
        80,
        "Combo",
        5,
        SpecialAbility(
            "Assassinate",
            "Deal 40 damage to one enemy and gain stealth.",
            (
                _fx(EffectType.DAMAGE, 40, TargetType.MONSTER),
                _fx(EffectType.STEALTH, 2, TargetType.SELF, 2),
            ),
        ),
        EnhanceBonus(damage=10),
    ),
    ClassType.PALADIN: ClassConfig(
        ClassType.PALADIN,
        "Paladin",
        "A holy knight who protects allies and smites evil.",
        100,
        "Faith",
        8,
        SpecialAbility(
            "Shield of Faith",
            "Heal and shield all allies and block the next blow.",
            (
                _fx(EffectType.HEAL, 10, TargetType.ALL_ALLIES),
                _fx(EffectType.SHIELD, 15, TargetType.ALL_ALLIES),
                _fx(EffectType.BLOCK, 1, TargetType.ALL_ALLIES, 1),
            ),
        ),
        EnhanceBonus(damage=5, heal=8, shield=10),
    ),
    ClassType.MAGE: ClassConfig(
        ClassType.MAGE,
        "Mage",
        "Scholarly arcanist. High damage and utility, but fragile.",
        70,
        "Mana",
        10,
        SpecialAbility(
            "Mana Overload",
            "Deal 36 damage to all enemies and apply burn, ice and vulnerable.",
            (
                _fx(EffectType.DAMAGE, 36, TargetType.ALL_MONSTERS),
                _fx(EffectType.BURN, 2, TargetType.ALL_MONSTERS, 2),
                _fx(EffectType.ICE, 2, TargetType.ALL_MONSTERS, 2),
                _fx(EffectType.VULNERABLE, 2, TargetType.ALL_MONSTERS, 2),
            ),
        ),
        EnhanceBonus(damage=12),
    ),
    ClassType.CLERIC: ClassConfig(
        ClassType.CLERIC,
        "Cleric",
        "Divine servant who channels power through prayer.",
        75,
        "Devotion",
        5,
        SpecialAbility(
            "Prayer Cycle",
            "Deal 10 damage to all enemies and heal all allies for 15.",
            (
                _fx(EffectType.DAMAGE, 10, TargetType.ALL_MONSTERS),
                _fx(EffectType.HEAL, 15, TargetType.ALL_ALLIES),
            ),
        ),
        EnhanceBonus(damage=6, heal=10, shield=5),
    ),
    ClassType.BARD: ClassConfig(
        ClassType.BARD,
        "Bard",
        "A charismatic performer building Harmony or Riot song stacks.",
        85,
        "Song",
        5,
        SpecialAbility(
            "Crescendo",
            "Harmony empowers all allies, Riot exposes all enemies. Without a song, both.",
            (
                _fx(EffectType.STRENGTH, 5, TargetType.ALL_ALLIES, 2),
                _fx(EffectType.VULNERABLE, 2, TargetType.ALL_MONSTERS, 2),
                _fx(EffectType.WEAKNESS, 2, TargetType.ALL_MONSTERS, 2),
            ),
        ),
        EnhanceBonus(damage=3, heal=8, shield=6),
    ),
    ClassType.ARCHER: ClassConfig(
        ClassType.ARCHER,
        "Archer",
        "A precise marksman building Aim for devastating shots.",
        75,
        "Aim",
        5,
        SpecialAbility(
            "Perfect Shot",
            "Gain a large strength bonus for the next attack.",
            (_fx(EffectType.STRENGTH, 15, TargetType.SELF, 1),),
        ),
        EnhanceBonus(damage=12),
    ),
    ClassType.BARBARIAN: ClassConfig(
        ClassType.BARBARIAN,
        "Barbarian",
        "A berserker who grows stronger as the fight drags on.",
        130,
        "Fury",
        10,
        SpecialAbility(
            "Bloodbath",
            "Deal 30 damage to all enemies and heal for 15.",
            (
                _fx(EffectType.DAMAGE, 30, TargetType.ALL_MONSTERS),
                _fx(EffectType.HEAL, 15, TargetType.SELF),
            ),
        ),
        EnhanceBonus(damage=10, shield=4),
    ),
}
