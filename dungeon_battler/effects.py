"""Effect resolution.

``apply_effect`` resolves one card or ability effect against copies of the
current party and monster lists and returns the new lists together with log
entries, floating numbers and champion XP credits. The only randomness it
consumes comes from the ``Dice`` that is passed in. For every monster struck
by a damage effect exactly three draws are made, in this order: an accuracy
d20, a crit roll and a dodge roll. Replaying the same rolls therefore yields
the same state and log text.
"""
from __future__ import annotations

import copy
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from . import constants
from .battle_log import create_log_entry, format_debuff_message
from .dice import Dice
from .enums import (
    EffectType,
    EliteModifier,
    EnvironmentEffectType,
    GamePhase,
    LogType,
    TargetType,
)
from .models import DamageEvent, Effect, Environment, LogEntry, Monster, Player, StatusEffect

logger = logging.getLogger(__name__)

MONSTER_DODGE_CHANCE = 0.0
CURSE_DEBUFFS = (EffectType.POISON, EffectType.BURN, EffectType.WEAKNESS, EffectType.ICE)
PLAYER_SIDE_TARGETS = (TargetType.SELF, TargetType.ALLY, TargetType.ALL_ALLIES)


@dataclass
class EffectResult:
    players: List[Player]
    monsters: List[Monster]
    logs: List[LogEntry] = field(default_factory=list)
    xp_earned: Dict[str, int] = field(default_factory=dict)
    damage_numbers: List[DamageEvent] = field(default_factory=list)
    damage_dealt: int = 0
    healing_done: int = 0


# ----------------------------------------------------------------------
# Formulas
# ----------------------------------------------------------------------


def scale_by_attribute(value: int, stat: int, multiplier: float) -> int:
    """``floor(value * (1 + (stat - 10) * multiplier))``."""
    return math.floor(value * (1 + (stat - constants.BASE_STAT_VALUE) * multiplier))


def scale_damage(value: int, player: Player) -> int:
    if player.class_type.is_arcane:
        return scale_by_attribute(value, player.attributes.intelligence, constants.INT_DAMAGE_MULTIPLIER)
    return scale_by_attribute(value, player.attributes.strength, constants.STR_DAMAGE_MULTIPLIER)


def scale_heal(value: int, player: Player) -> int:
    return scale_by_attribute(value, player.attributes.wisdom, constants.WIS_HEAL_MULTIPLIER)


def scale_shield(value: int, player: Player) -> int:
    return scale_by_attribute(value, player.attributes.constitution, constants.CON_SHIELD_MULTIPLIER)


def crit_chance(luck: int) -> float:
    return constants.BASE_CRIT_CHANCE + (luck - constants.BASE_STAT_VALUE) * constants.CRIT_CHANCE_PER_LCK


def crit_multiplier(luck: int) -> float:
    return constants.BASE_CRIT_MULTIPLIER + (luck - constants.BASE_STAT_VALUE) * constants.CRIT_MULTIPLIER_PER_LCK


def dodge_chance(agility: int) -> float:
    return max(0.0, (agility - constants.BASE_STAT_VALUE) * constants.DODGE_CHANCE_PER_AGI)


def environment_multiplier(environment: Optional[Environment], effect_type: EnvironmentEffectType) -> float:
    if environment is None:
        return 1.0
    return environment.multiplier(effect_type)


def absorb_with_shield(unit, amount: int) -> int:
    """Apply ``amount`` damage to ``unit``; shield first. Returns hp lost."""
    absorbed = min(unit.shield, amount)
    unit.shield -= absorbed
    hp_loss = min(unit.hp, amount - absorbed)
    unit.hp = max(0, unit.hp - (amount - absorbed))
    return hp_loss


def credit_kill(players: List[Player], monster: Monster, xp_earned: Dict[str, int]) -> int:
    """Split a dead monster's gold among living heroes and note champion XP.

    Returns the per-player gold share.
    """
    alive = [p for p in players if p.is_alive]
    if not alive:
        return 0
    share = monster.gold_reward // len(alive)
    for player in alive:
        player.gold += share
        if player.champion_id:
            xp_earned[player.champion_id] = xp_earned.get(player.champion_id, 0) + monster.xp_reward
    return share


# ----------------------------------------------------------------------
# Resolution
# ----------------------------------------------------------------------


class _Resolution:
    """Working copies and accumulators for a single ``apply_effect`` call."""

    def __init__(
        self,
        caster: Player,
        players: List[Player],
        monsters: List[Monster],
        turn: int,
        target_id: Optional[str],
        environment: Optional[Environment],
        dice: Dice,
        phase: GamePhase,
    ) -> None:
        self.players = copy.deepcopy(players)
        self.monsters = copy.deepcopy(monsters)
        self.caster = next((p for p in self.players if p.id == caster.id), None) or copy.deepcopy(caster)
        self.turn = turn
        self.target_id = target_id
        self.environment = environment
        self.dice = dice
        self.phase = phase
        self.logs: List[LogEntry] = []
        self.xp_earned: Dict[str, int] = defaultdict(int)
        self.damage_numbers: List[DamageEvent] = []
        self.damage_dealt = 0
        self.healing_done = 0

    def log(self, message: str, type: LogType, is_sub_entry: bool = True) -> None:
        self.logs.append(create_log_entry(self.turn, self.phase, message, type, is_sub_entry))

    def player_targets(self, target: TargetType) -> List[Player]:
        if target == TargetType.SELF:
            return [self.caster]
        if target == TargetType.ALLY:
            if self.target_id is not None:
                # a chosen target that has fallen takes nothing
                chosen = next((p for p in self.players if p.id == self.target_id and p.is_alive), None)
                return [chosen] if chosen else []
            chosen = next((p for p in self.players if p.is_alive and p.id != self.caster.id), None)
            if chosen is None and self.caster.is_alive:
                chosen = self.caster
            return [chosen] if chosen else []
        return [p for p in self.players if p.is_alive]

    def monster_targets(self, target: TargetType) -> List[Monster]:
        alive = [m for m in self.monsters if m.is_alive]
        if target == TargetType.MONSTER:
            if self.target_id is None:
                return alive[:1]
            return [m for m in alive if m.id == self.target_id][:1]
        return alive

    def result(self) -> EffectResult:
        return EffectResult(
            players=self.players,
            monsters=self.monsters,
            logs=self.logs,
            xp_earned=dict(self.xp_earned),
            damage_numbers=self.damage_numbers,
            damage_dealt=self.damage_dealt,
            healing_done=self.healing_done,
        )


def _resolve_damage(res: _Resolution, effect: Effect) -> None:
    caster = res.caster
    if effect.target == TargetType.SELF:
        lost = absorb_with_shield(caster, effect.value)
        res.damage_numbers.append(DamageEvent(caster.id, effect.value))
        res.log(f"{caster.name} takes {effect.value} damage ({lost} to HP)", LogType.DAMAGE)
        return

    base = scale_damage(effect.value + caster.strength_bonus, caster)
    for monster in res.monster_targets(effect.target):
        accuracy_roll = res.dice.d20()
        crit_roll = res.dice.chance()
        dodge_roll = res.dice.chance()

        penalty = caster.accuracy_penalty
        if penalty > 0 and accuracy_roll <= penalty:
            res.log(f"{caster.name} misses {monster.name}! (rolled {accuracy_roll})", LogType.INFO)
            continue
        if dodge_roll < MONSTER_DODGE_CHANCE:
            res.log(f"{monster.name} dodges the attack!", LogType.INFO)
            continue

        damage = base
        if crit_roll < crit_chance(caster.attributes.luck):
            damage = math.floor(damage * crit_multiplier(caster.attributes.luck))
            res.log(f"Critical hit on {monster.name}!", LogType.DAMAGE)
        damage = math.floor(damage * environment_multiplier(res.environment, EnvironmentEffectType.DAMAGE_BONUS))
        if monster.is_vulnerable:
            damage = math.floor(damage * constants.VULNERABLE_MULTIPLIER)
        if monster.damage_reduction:
            damage = math.floor(damage * (1 - monster.damage_reduction))

        if monster.elite_modifier == EliteModifier.CURSED and damage > 0:
            _apply_curse(res, monster)

        was_alive = monster.is_alive
        absorb_with_shield(monster, damage)
        res.damage_dealt += damage
        res.damage_numbers.append(DamageEvent(monster.id, damage))
        res.log(f"{caster.name} deals {damage} damage to {monster.name}", LogType.DAMAGE)

        if was_alive and not monster.is_alive:
            share = credit_kill(res.players, monster, res.xp_earned)
            res.log(f"{monster.name} is defeated! (+{share} gold each)", LogType.INFO)


def _apply_curse(res: _Resolution, monster: Monster) -> None:
    debuff_type = res.dice.choice(CURSE_DEBUFFS)
    existing = next((d for d in res.caster.debuffs if d.type == debuff_type), None)
    if existing is not None:
        existing.duration = max(existing.duration, constants.CURSE_DEBUFF_DURATION)
        existing.value = max(existing.value, constants.CURSE_DEBUFF_VALUE)
    else:
        res.caster.debuffs.append(
            StatusEffect(debuff_type, constants.CURSE_DEBUFF_VALUE, constants.CURSE_DEBUFF_DURATION, monster.name)
        )
    res.log(f"{monster.name}'s curse leaves {res.caster.name} {format_debuff_message(debuff_type)}", LogType.DEBUFF)


def _resolve_heal(res: _Resolution, effect: Effect) -> None:
    amount = scale_heal(effect.value, res.caster)
    amount = math.floor(amount * environment_multiplier(res.environment, EnvironmentEffectType.HEALING_BONUS))
    for player in res.player_targets(effect.target):
        if not player.is_alive:
            continue
        healed = min(player.max_hp, player.hp + amount) - player.hp
        player.hp += healed
        res.healing_done += healed
        res.damage_numbers.append(DamageEvent(player.id, healed, "heal"))
        res.log(f"{player.name} heals for {healed}", LogType.HEAL)


def _resolve_shield(res: _Resolution, effect: Effect) -> None:
    amount = scale_shield(effect.value, res.caster)
    amount = math.floor(amount * environment_multiplier(res.environment, EnvironmentEffectType.SHIELD_BONUS))
    for player in res.player_targets(effect.target):
        player.shield += amount
        res.log(f"{player.name} gains {amount} shield", LogType.BUFF)


def _resolve_buff(res: _Resolution, effect: Effect) -> None:
    for player in res.player_targets(effect.target):
        player.buffs.append(
            StatusEffect(effect.type, effect.value or 1, effect.duration or 1, res.caster.name)
        )
        res.log(f"{player.name} gains {effect.type.value}", LogType.BUFF)


def _resolve_debuff(res: _Resolution, effect: Effect) -> None:
    targets = (
        res.player_targets(effect.target)
        if effect.target in PLAYER_SIDE_TARGETS
        else res.monster_targets(effect.target)
    )
    for unit in targets:
        unit.debuffs.append(
            StatusEffect(effect.type, effect.value or 1, effect.duration or 1, res.caster.name)
        )
        res.log(f"{unit.name} is {format_debuff_message(effect.type)}", LogType.DEBUFF)


def _resolve_cleanse(res: _Resolution, effect: Effect) -> None:
    for player in res.player_targets(effect.target):
        if player.debuffs:
            player.debuffs = []
            res.log(f"{player.name} is cleansed", LogType.BUFF)


def _resolve_revive(res: _Resolution, effect: Effect) -> None:
    dead = [p for p in res.players if not p.is_alive and p.id != res.caster.id]
    chosen = next((p for p in dead if p.id == res.target_id), None) or (dead[0] if dead else None)
    if chosen is None:
        res.log("No fallen ally to revive", LogType.INFO)
        return
    percent = effect.value or constants.DEFAULT_REVIVE_PERCENT
    chosen.hp = max(1, math.floor(chosen.max_hp * percent / 100))
    chosen.debuffs = []
    res.log(f"{chosen.name} is revived with {chosen.hp} HP!", LogType.HEAL)


_HANDLERS: Dict[EffectType, Callable[[_Resolution, Effect], None]] = {
    EffectType.DAMAGE: _resolve_damage,
    EffectType.HEAL: _resolve_heal,
    EffectType.SHIELD: _resolve_shield,
    EffectType.CLEANSE: _resolve_cleanse,
    EffectType.REVIVE: _resolve_revive,
    **{effect_type: _resolve_buff for effect_type in EffectType if effect_type.is_buff},
    **{effect_type: _resolve_debuff for effect_type in EffectType if effect_type.is_debuff},
}


def apply_effect(
    effect: Effect,
    caster: Player,
    players: List[Player],
    monsters: List[Monster],
    turn: int,
    target_id: Optional[str] = None,
    environment: Optional[Environment] = None,
    *,
    dice: Dice,
    phase: GamePhase = GamePhase.PLAYER_ACTION,
) -> EffectResult:
    """Resolve ``effect`` cast by ``caster``. The input lists are left untouched."""
    res = _Resolution(caster, players, monsters, turn, target_id, environment, dice, phase)
    handler = _HANDLERS.get(effect.type)
    if handler is None:
        logger.warning("Ignoring effect with unsupported type %r", effect.type)
        return res.result()
    handler(res, effect)
    return res.result()
