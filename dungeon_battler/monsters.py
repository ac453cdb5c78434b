"""Monster templates, tiers and the fixed round table for standalone runs."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from . import constants
from .enums import EffectType, EliteModifier
from .enums import MonsterTarget as T
from .models import AbilityDebuff, Monster, MonsterAbility


@dataclass(frozen=True)
class MonsterTemplate:
    id: str
    name: str
    base_hp: int
    abilities: Tuple[MonsterAbility, ...]


@dataclass(frozen=True)
class RoundConfig:
    round: int
    name: str
    description: str
    monsters: Tuple[Tuple[str, int], ...]
    is_boss: bool = False


def _ab(roll: int, name: str, description: str, damage: int, target: T = T.SINGLE,
        debuff: Optional[Tuple[EffectType, int, int]] = None) -> MonsterAbility:
    return MonsterAbility(roll, name, description, damage, target, AbilityDebuff(*debuff) if debuff else None)


MONSTER_TEMPLATES: Dict[str, MonsterTemplate] = {
    t.id: t
    for t in (
        MonsterTemplate("goblin", "Goblin", 30, (
            _ab(1, "Stumble", "The goblin trips and does nothing.", 0),
            _ab(2, "Scratch", "A weak scratch attack.", 4),
            _ab(3, "Stab", "A quick stab with a rusty dagger.", 6),
            _ab(4, "Poison Spit", "Spits poison at a hero.", 3, debuff=(EffectType.POISON, 2, 2)),
            _ab(5, "Frenzy", "Wild slashing attack.", 8),
            _ab(6, "Call Reinforcements", "Attacks all heroes in a panic.", 4, T.ALL),
        )),
        MonsterTemplate("skeleton", "Skeleton", 40, (
            _ab(1, "Bone Rattle", "Bones clatter harmlessly.", 0),
            _ab(2, "Bone Throw", "Throws a bone at a hero.", 5),
            _ab(3, "Sword Slash", "Slashes with a rusted sword.", 7),
            _ab(4, "Chilling Touch", "A cold touch that slows.", 4, debuff=(EffectType.ICE, 2, 2)),
            _ab(5, "Bone Storm", "Bones fly everywhere.", 5, T.ALL),
            _ab(6, "Death Strike", "A powerful overhead strike.", 10),
        )),
        MonsterTemplate("werewolf", "Werewolf", 60, (
            _ab(1, "Howl", "A terrifying howl that weakens resolve.", 0, T.ALL, (EffectType.WEAKNESS, 1, 2)),
            _ab(2, "Claw Swipe", "Quick claw attack.", 8),
            _ab(3, "Bite", "A vicious bite.", 10),
            _ab(4, "Savage Leap", "Leaps at a random target.", 12, T.RANDOM),
            _ab(5, "Rending Claws", "Deep wounds that bleed.", 8, debuff=(EffectType.POISON, 3, 3)),
            _ab(6, "Feral Frenzy", "Attacks everyone in a blood rage.", 7, T.ALL),
        )),
        MonsterTemplate("troll", "Troll", 80, (
            _ab(1, "Regenerate", "The troll heals itself.", -10),
            _ab(2, "Club Smash", "Smashes with a massive club.", 12),
            _ab(3, "Ground Pound", "Pounds the ground, hitting all.", 6, T.ALL),
            _ab(4, "Grab and Throw", "Grabs and throws a hero.", 14, debuff=(EffectType.STUN, 1, 1)),
            _ab(5, "Roar", "A deafening roar.", 0, T.ALL, (EffectType.ACCURACY, 3, 2)),
            _ab(6, "Devastating Blow", "A crushing overhead strike.", 18),
        )),
        MonsterTemplate("vampire", "Vampire", 70, (
            _ab(1, "Mesmerize", "Hypnotic gaze stuns a hero.", 0, debuff=(EffectType.STUN, 1, 1)),
            _ab(2, "Claw Strike", "Sharp claws slash.", 9),
            _ab(3, "Life Drain", "Drains life from a hero.", 8),
            _ab(4, "Shadow Step", "Appears behind a random hero.", 11, T.RANDOM),
            _ab(5, "Blood Curse", "Curses a hero with burning blood.", 5, debuff=(EffectType.BURN, 4, 3)),
            _ab(6, "Crimson Feast", "Bites and drains all heroes.", 6, T.ALL),
        )),
        MonsterTemplate("cerberus", "Cerberus", 120, (
            _ab(1, "Triple Bark", "All three heads bark menacingly.", 0, T.ALL, (EffectType.WEAKNESS, 2, 2)),
            _ab(2, "Fire Breath", "One head breathes fire.", 10, debuff=(EffectType.BURN, 3, 2)),
            _ab(3, "Triple Bite", "All heads bite one target.", 15),
            _ab(4, "Hellfire", "Flames engulf all heroes.", 8, T.ALL, (EffectType.BURN, 2, 2)),
            _ab(5, "Savage Mauling", "Brutal attack on random hero.", 18, T.RANDOM),
            _ab(6, "Infernal Rampage", "All heads attack all heroes.", 12, T.ALL),
        )),
        MonsterTemplate("dark-knight", "Dark Knight", 100, (
            _ab(1, "Dark Aura", "Emanates a weakening darkness.", 0, T.ALL, (EffectType.WEAKNESS, 1, 2)),
            _ab(2, "Sword Strike", "A precise sword attack.", 10),
            _ab(3, "Shadow Blade", "Strikes with dark energy.", 8, debuff=(EffectType.POISON, 2, 2)),
            _ab(4, "Dark Shield", "Absorbs damage and retaliates.", 6),
            _ab(5, "Soul Drain", "Drains life force.", 12),
            _ab(6, "Darkness Falls", "Engulfs all in shadow.", 7, T.ALL, (EffectType.ACCURACY, 2, 2)),
        )),
        MonsterTemplate("orc-warlord", "Orc Warlord", 150, (
            _ab(1, "War Cry", "A rallying cry that intimidates heroes.", 0, T.ALL, (EffectType.WEAKNESS, 2, 2)),
            _ab(2, "Axe Slash", "A brutal axe attack.", 12),
            _ab(3, "Shield Bash", "Bashes with a massive shield.", 8, debuff=(EffectType.STUN, 1, 1)),
            _ab(4, "Whirlwind", "Spins with axes extended.", 9, T.ALL),
            _ab(5, "Execute", "A devastating finishing blow.", 16),
            _ab(6, "Blood Frenzy", "Goes into a blood-crazed frenzy.", 11, T.ALL),
        )),
        MonsterTemplate("necromancer", "Necromancer", 90, (
            _ab(1, "Raise Dead", "Dark energy knits the necromancer's wounds.", -8),
            _ab(2, "Bone Spear", "A spear of bone impales a hero.", 10),
            _ab(3, "Grave Rot", "A festering curse.", 5, debuff=(EffectType.POISON, 3, 3)),
            _ab(4, "Soul Siphon", "Drains a random hero.", 11, T.RANDOM),
            _ab(5, "Death Coil", "A coil of shadow strikes everyone.", 7, T.ALL),
            _ab(6, "Curse of Frailty", "All heroes are exposed.", 0, T.ALL, (EffectType.VULNERABLE, 1, 2)),
        )),
        MonsterTemplate("lich-king", "Lich King", 180, (
            _ab(1, "Frozen Throne", "A wave of cold freezes all heroes.", 6, T.ALL, (EffectType.ICE, 3, 2)),
            _ab(2, "Soul Reaper", "A scythe of shadow cuts deep.", 16),
            _ab(3, "Death Grip", "Seizes a hero in place.", 10, debuff=(EffectType.STUN, 1, 1)),
            _ab(4, "Plague of Undeath", "Rot spreads through the party.", 8, T.ALL, (EffectType.POISON, 3, 3)),
            _ab(5, "Phylactery Pulse", "The lich draws on its phylactery.", -15),
            _ab(6, "Army of the Dead", "Undead swarm a random hero.", 20, T.RANDOM),
        )),
        MonsterTemplate("dragon", "Ancient Dragon", 250, (
            _ab(1, "Terrifying Roar", "A deafening roar that shakes the ground.", 0, T.ALL,
                (EffectType.WEAKNESS, 3, 2)),
            _ab(2, "Claw Swipe", "Massive claws tear through armor.", 18),
            _ab(3, "Dragon Breath", "A torrent of flames engulfs all heroes.", 12, T.ALL, (EffectType.BURN, 5, 3)),
            _ab(4, "Tail Sweep", "The dragon sweeps its massive tail.", 10, T.ALL, (EffectType.STUN, 1, 1)),
            _ab(5, "Inferno", "The dragon unleashes a devastating inferno.", 15, T.ALL, (EffectType.BURN, 4, 2)),
            _ab(6, "Apocalyptic Fury", "The dragon enters a berserker rage!", 25, T.RANDOM,
                (EffectType.BURN, 6, 3)),
        )),
    )
}

MONSTER_TIERS: Dict[str, Tuple[str, ...]] = {
    "tier1": ("goblin", "skeleton"),
    "tier2": ("werewolf", "vampire", "troll"),
    "tier3": ("dark-knight", "orc-warlord", "cerberus", "necromancer"),
    "tier4": ("dragon", "lich-king"),
}

ROUNDS: Dict[int, RoundConfig] = {
    r.round: r
    for r in (
        RoundConfig(1, "The Dark Passage", "Goblins and undead block your path...",
                    (("goblin", 1), ("skeleton", 1))),
        RoundConfig(2, "The Orc Stronghold", "An Orc Warlord commands his forces!",
                    (("orc-warlord", 2),), is_boss=True),
        RoundConfig(3, "The Dragon's Lair", "Face the Ancient Dragon... if you dare!",
                    (("dragon", 3),), is_boss=True),
    )
}


def scaled_hp(base_hp: int, level: int) -> int:
    return math.floor(base_hp * (1 + (level - 1) * constants.MONSTER_HP_PER_LEVEL))


def build_monster(
    template: MonsterTemplate,
    level: int,
    monster_id: str,
    elite: Optional[EliteModifier] = None,
) -> Monster:
    """Instantiate a template at ``level``, optionally tagged with an elite modifier."""
    hp = scaled_hp(template.base_hp, level)
    monster = Monster(
        id=monster_id,
        template_id=template.id,
        name=template.name,
        level=level,
        hp=hp,
        max_hp=hp,
        abilities=list(template.abilities),
        gold_reward=constants.MONSTER_GOLD_PER_LEVEL * level,
        xp_reward=constants.MONSTER_XP_PER_LEVEL * level,
    )
    if elite is not None:
        apply_elite_modifier(monster, elite)
    return monster


def apply_elite_modifier(monster: Monster, elite: EliteModifier) -> None:
    monster.elite_modifier = elite
    monster.name = f"{elite.value.capitalize()} {monster.name}"
    monster.gold_reward += constants.ELITE_GOLD_BONUS
    monster.xp_reward += constants.ELITE_XP_BONUS
    if elite == EliteModifier.ARMORED:
        monster.damage_reduction = constants.ARMORED_DAMAGE_REDUCTION
    elif elite == EliteModifier.SHIELDED:
        monster.shield = math.floor(monster.max_hp * constants.SHIELDED_MAX_PERCENT)
