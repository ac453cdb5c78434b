"""Battlefield environments and their modifier sets."""
from __future__ import annotations

from typing import Dict, Optional

from .dice import Dice
from .enums import EnvironmentEffectType as E
from .enums import EnvironmentType
from .models import Environment, EnvironmentModifier

ENVIRONMENTS: Dict[EnvironmentType, Environment] = {
    EnvironmentType.FOREST: Environment(
        EnvironmentType.FOREST, "Ancient Forest", "A lush woodland where nature's magic flows freely",
        (EnvironmentModifier(E.HEALING_BONUS, 1.25, "Healing effects are 25% more effective"),
         EnvironmentModifier(E.POISON_BONUS, 1.3, "Poison damage increased by 30%")),
    ),
    EnvironmentType.CASTLE: Environment(
        EnvironmentType.CASTLE, "Fortress Battlements", "Stone walls echo with the clash of steel",
        (EnvironmentModifier(E.SHIELD_BONUS, 1.3, "Shield effects are 30% more effective"),
         EnvironmentModifier(E.DAMAGE_BONUS, 1.1, "Physical damage increased by 10%")),
    ),
    EnvironmentType.VOLCANO: Environment(
        EnvironmentType.VOLCANO, "Volcanic Crater", "Lava flows and scorching heat permeate the air",
        (EnvironmentModifier(E.FIRE_BONUS, 1.5, "Fire and burn damage increased by 50%"),
         EnvironmentModifier(E.FROST_BONUS, 0.5, "Ice and frost damage reduced by 50%")),
    ),
    EnvironmentType.ICE_CAVE: Environment(
        EnvironmentType.ICE_CAVE, "Frozen Cavern", "Icy stalactites and freezing winds chill to the bone",
        (EnvironmentModifier(E.FROST_BONUS, 1.5, "Ice and frost damage increased by 50%"),
         EnvironmentModifier(E.FIRE_BONUS, 0.5, "Fire and burn damage reduced by 50%")),
    ),
    EnvironmentType.SWAMP: Environment(
        EnvironmentType.SWAMP, "Toxic Marshlands", "Murky waters and noxious fumes fill the air",
        (EnvironmentModifier(E.POISON_BONUS, 1.6, "Poison damage increased by 60%"),
         EnvironmentModifier(E.HEALING_BONUS, 0.7, "Healing effects reduced by 30%")),
    ),
    EnvironmentType.DESERT: Environment(
        EnvironmentType.DESERT, "Scorching Wastes", "Endless dunes under a merciless sun",
        (EnvironmentModifier(E.FIRE_BONUS, 1.3, "Fire damage increased by 30%"),
         EnvironmentModifier(E.DAMAGE_BONUS, 1.15, "All damage increased by 15%")),
    ),
    EnvironmentType.CRYPT: Environment(
        EnvironmentType.CRYPT, "Haunted Crypt", "Death magic saturates this cursed place",
        (EnvironmentModifier(E.POISON_BONUS, 1.4, "Poison and curse effects increased by 40%"),
         EnvironmentModifier(E.HEALING_BONUS, 0.6, "Healing effects reduced by 40%")),
    ),
    EnvironmentType.VOID: Environment(
        EnvironmentType.VOID, "The Void", "A realm of chaos where nothing is certain",
        (EnvironmentModifier(E.DAMAGE_BONUS, 1.25, "All damage increased by 25%"),
         EnvironmentModifier(E.SHIELD_BONUS, 0.75, "Shield effects reduced by 25%")),
    ),
}

EARLY_ENVIRONMENTS = (EnvironmentType.FOREST, EnvironmentType.CASTLE, EnvironmentType.SWAMP)
MID_ENVIRONMENTS = (EnvironmentType.VOLCANO, EnvironmentType.ICE_CAVE, EnvironmentType.DESERT)
LATE_ENVIRONMENTS = (EnvironmentType.CRYPT, EnvironmentType.VOID)


def environment_for_round(round_number: int, dice: Dice) -> Optional[Environment]:
    """Half the rounds are a plain dungeon; the rest escalate with the round."""
    if dice.chance() < 0.5:
        return None
    if round_number <= 2:
        pool = EARLY_ENVIRONMENTS
    elif round_number <= 4:
        pool = MID_ENVIRONMENTS
    else:
        pool = LATE_ENVIRONMENTS
    return ENVIRONMENTS[dice.choice(pool)]
