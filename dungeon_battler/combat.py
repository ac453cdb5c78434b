"""Combat steps shared by the sequential and simultaneous drivers.

Both drivers draw, roll aggro, play cards and run the monster and status
phases through the functions in this module, so a hand played in either mode
resolves the same way for the same dice.
"""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from . import constants
from .dice import Dice
from .effects import EffectResult, absorb_with_shield, apply_effect, credit_kill, dodge_chance
from .enums import (
    BardSong,
    ClassType,
    EffectType,
    EliteModifier,
    EnvironmentEffectType,
    EventKind,
    LogType,
    TargetType,
)
from .models import AbilityDebuff, Card, Effect, Monster, MonsterAbility, Player, StatusEffect
from .state import CombatState
from .targeting import select_monster_targets

logger = logging.getLogger(__name__)

DOT_BONUSES = {
    EffectType.POISON: EnvironmentEffectType.POISON_BONUS,
    EffectType.BURN: EnvironmentEffectType.FIRE_BONUS,
    EffectType.ICE: EnvironmentEffectType.FROST_BONUS,
}


# ----------------------------------------------------------------------
# Cards in hand
# ----------------------------------------------------------------------


def draw_cards(player: Player, count: int, dice: Dice) -> List[Card]:
    """Move up to ``count`` cards from deck to hand, reshuffling the discard when needed."""
    drawn: List[Card] = []
    for _ in range(count):
        if not player.deck:
            if not player.discard:
                break
            player.deck = dice.shuffle(player.discard)
            player.discard = []
        drawn.append(player.deck.pop(0))
    player.hand.extend(drawn)
    return drawn


def return_hand(player: Player) -> None:
    player.deck.extend(player.hand)
    player.hand = []


def finish_card(player: Player, card: Card) -> None:
    """Played card goes to the discard pile, the rest of the hand back to the deck."""
    player.deck.extend(c for c in player.hand if c.id != card.id)
    player.discard.append(card)
    player.hand = []


def deal_to_player(state: CombatState, player: Player) -> List[Card]:
    drawn = draw_cards(player, state.config.cards_per_draw, state.dice)
    state.add_log(f"{player.name} draws {len(drawn)} card(s)", LogType.INFO)
    logger.debug("%s drew %s", player.id, [c.id for c in drawn])
    return drawn


# ----------------------------------------------------------------------
# Status bookkeeping
# ----------------------------------------------------------------------


def tick_statuses(statuses: List[StatusEffect]) -> List[StatusEffect]:
    """Decrement turn based statuses and drop the expired ones."""
    remaining = []
    for status in statuses:
        if not status.action_tracked:
            status.duration -= 1
        if status.duration > 0:
            remaining.append(status)
    return remaining


def tick_action_tracked(statuses: List[StatusEffect]) -> List[StatusEffect]:
    remaining = []
    for status in statuses:
        if status.action_tracked:
            status.duration -= 1
        if status.duration > 0:
            remaining.append(status)
    return remaining


def skip_stunned_player(state: CombatState, player: Player) -> None:
    state.add_log(f"{player.name} is stunned and cannot act!", LogType.DEBUFF)
    player.debuffs = tick_action_tracked(player.debuffs)
    return_hand(player)


# ----------------------------------------------------------------------
# Aggro & card resolution
# ----------------------------------------------------------------------


def roll_aggro(state: CombatState, player: Player, card: Card) -> int:
    roll = state.dice.d20()
    player.base_aggro += card.aggro
    player.dice_aggro = roll
    state.add_log(f"{player.name} rolls {roll} for aggro ({player.aggro} total)", LogType.ROLL)
    state.emit(EventKind.DICE_ROLL, f"{player.name} rolled {roll}", player.id, roll)
    return roll


def merge_result(state: CombatState, result: EffectResult) -> None:
    state.players = result.players
    state.monsters = result.monsters
    state.extend_log(result.logs)
    for number in result.damage_numbers:
        state.emit(EventKind.DAMAGE_NUMBER, number.kind, number.target_id, number.value)
    for champion_id, xp in result.xp_earned.items():
        state.ledger.add_xp(champion_id, xp)


def resolve_effects(
    state: CombatState, caster_id: str, effects: Sequence[Effect], target_id: Optional[str]
) -> Tuple[int, int]:
    """Apply ``effects`` in order. Returns total damage dealt and healing done."""
    damage = healing = 0
    for effect in effects:
        caster = state.find_player(caster_id)
        if caster is None:
            break
        result = apply_effect(
            effect,
            caster,
            state.players,
            state.monsters,
            state.turn,
            target_id,
            state.environment,
            dice=state.dice,
            phase=state.phase,
        )
        merge_result(state, result)
        damage += result.damage_dealt
        healing += result.healing_done
    return damage, healing


def enhance_effects(effects: Sequence[Effect], bonus) -> List[Effect]:
    enhanced = []
    for effect in effects:
        extra = bonus.for_effect(effect.type)
        if extra and not (effect.type == EffectType.DAMAGE and effect.target == TargetType.SELF):
            effect = replace(effect, value=effect.value + extra)
        enhanced.append(effect)
    return enhanced


def song_of(card: Card) -> Optional[BardSong]:
    for song in BardSong:
        if song.tag in card.description:
            return song
    return None


def play_song(player: Player, card: Card) -> None:
    """Track the song a bard is playing. Changing songs drops the stacks built so far."""
    song = song_of(card)
    if song is None:
        return
    if player.bard_song is not None and player.bard_song != song:
        player.resource = 0
        logger.debug("%s switches to %s", player.name, song.value)
    player.bard_song = song


def resource_gain(player: Player, card: Card, damage: int, healing: int) -> int:
    class_type = player.class_type
    if class_type == ClassType.FIGHTER:
        if damage <= 0:
            return 0
        return min(constants.WARRIOR_RAGE_MAX_GAIN, math.ceil(damage / constants.WARRIOR_RAGE_DIVISOR))
    if class_type == ClassType.ROGUE:
        return constants.ROGUE_COMBO_GAIN
    if class_type in (ClassType.PALADIN, ClassType.CLERIC):
        return constants.HEALER_RESOURCE_GAIN if healing > 0 else 0
    if class_type == ClassType.BARD:
        return constants.BARD_INSPIRATION_GAIN if song_of(card) is not None else 0
    if class_type == ClassType.ARCHER:
        return constants.ARCHER_FOCUS_GAIN
    return 0


def apply_card_effects(
    state: CombatState,
    player_id: str,
    card_id: Optional[str],
    target_id: Optional[str] = None,
    enhance: bool = False,
) -> Tuple[bool, str]:
    """Play ``card_id`` from ``player_id``'s hand. The one card routine both drivers use."""
    player = state.find_player(player_id)
    if player is None or not player.is_alive:
        return False, "Player cannot act"
    card = player.find_in_hand(card_id)
    if card is None:
        return False, "Card not in hand"

    config = state.catalog.class_config(player.class_type)
    effects: List[Effect] = list(card.effects)
    enhanced = enhance and player.resource >= player.max_resource
    if enhanced:
        player.resource = 0
        effects = enhance_effects(effects, config.enhance_bonus)
        state.add_log(f"{player.name} spends {config.resource_name} to enhance {card.name}!", LogType.BUFF)

    state.add_log(f"{player.name} plays {card.name}", LogType.ACTION)
    state.emit(EventKind.ACTION, f"{player.name} plays {card.name}", player.id)
    damage, healing = resolve_effects(state, player_id, effects, target_id)

    player = state.find_player(player_id)
    if player.class_type == ClassType.BARD:
        play_song(player, card)
    if not enhanced:
        gain = resource_gain(player, card, damage, healing)
        player.resource = min(player.max_resource, player.resource + gain)
    finish_card(player, card)
    state.touch()
    return True, f"{player.name} played {card.name}"


def crescendo_effects(effects: Sequence[Effect], song: Optional[BardSong]) -> Sequence[Effect]:
    """Harmony keeps the party side of the crescendo, Riot the monster side."""
    if song == BardSong.HARMONY:
        return [e for e in effects if e.target in (TargetType.SELF, TargetType.ALLY, TargetType.ALL_ALLIES)]
    if song == BardSong.RIOT:
        return [e for e in effects if e.target in (TargetType.MONSTER, TargetType.ALL_MONSTERS)]
    return effects


def use_special_ability(state: CombatState, player_id: str, target_id: Optional[str] = None) -> Tuple[bool, str]:
    player = state.find_player(player_id)
    if player is None or not player.is_alive:
        return False, "Player cannot act"
    config = state.catalog.class_config(player.class_type)
    if player.resource < player.max_resource:
        return False, f"Not enough {config.resource_name}"

    ability = config.special_ability
    player.resource = 0
    effects = ability.effects
    if player.class_type == ClassType.BARD:
        effects = crescendo_effects(effects, player.bard_song)
        player.bard_song = None
    state.add_log(f"{player.name} uses {ability.name}! ({ability.description})", LogType.ACTION)
    state.emit(EventKind.ACTION, f"{player.name} uses {ability.name}!", player.id)
    resolve_effects(state, player_id, effects, target_id)
    return_hand(state.find_player(player_id))
    state.touch()
    return True, f"{player.name} used {ability.name}"


# ----------------------------------------------------------------------
# Monster phase
# ----------------------------------------------------------------------


def roll_intents(state: CombatState) -> None:
    for monster in state.monsters:
        if monster.is_alive:
            monster.intent = monster.ability_for_roll(state.dice.d6())
        else:
            monster.intent = None


def run_monster_actions(state: CombatState) -> None:
    for monster in state.monsters:
        if state.all_players_dead():
            break
        if monster.is_alive:
            monster_act(state, monster)
    state.touch()


def monster_act(state: CombatState, monster: Monster) -> None:
    if monster.is_stunned:
        state.add_log(f"{monster.name} is stunned and cannot act!", LogType.DEBUFF)
        monster.debuffs = tick_action_tracked(monster.debuffs)
        monster.intent = None
        return

    actions = 2 if monster.elite_modifier == EliteModifier.FAST else 1
    for idx in range(actions):
        if state.all_players_dead():
            break
        ability = monster.intent if idx == 0 and monster.intent else monster.ability_for_roll(state.dice.d6())
        perform_ability(state, monster, ability)
    monster.intent = None


def monster_damage(monster: Monster, ability: MonsterAbility) -> int:
    damage = ability.damage
    if monster.elite_modifier == EliteModifier.ENRAGED:
        damage = math.floor(damage * constants.ENRAGED_DAMAGE_MULTIPLIER)
    damage = math.floor(damage * monster.damage_multiplier)
    return max(0, damage - monster.weakness)


def perform_ability(state: CombatState, monster: Monster, ability: MonsterAbility) -> None:
    state.add_log(f"{monster.name} uses {ability.name}!", LogType.ACTION)
    state.emit(EventKind.ACTION, f"{monster.name} uses {ability.name}!", monster.id)

    if ability.damage < 0:
        healed = min(monster.max_hp - monster.hp, -ability.damage)
        monster.hp += healed
        state.add_log(f"{monster.name} heals for {healed}", LogType.HEAL, is_sub_entry=True)
        state.emit(EventKind.DAMAGE_NUMBER, "heal", monster.id, healed)
        return

    targets = select_monster_targets(ability, state.players, state.dice)
    if not targets:
        state.add_log(f"{monster.name} finds no one to attack", LogType.INFO, is_sub_entry=True)
        return

    damage = monster_damage(monster, ability)
    for player in targets:
        if player.has_block:
            state.add_log(f"{player.name} blocks the attack!", LogType.BUFF, is_sub_entry=True)
            continue
        if damage > 0 and state.dice.chance() < dodge_chance(player.attributes.agility):
            state.add_log(f"{player.name} dodges {ability.name}!", LogType.INFO, is_sub_entry=True)
            continue

        dealt = damage
        if player.is_vulnerable:
            dealt = math.floor(dealt * constants.VULNERABLE_MULTIPLIER)
        if dealt > 0:
            lost = absorb_with_shield(player, dealt)
            state.add_log(f"{player.name} takes {dealt} damage ({lost} to HP)", LogType.DAMAGE, is_sub_entry=True)
            state.emit(EventKind.DAMAGE_NUMBER, "damage", player.id, dealt)
            _resource_on_hit(player, dealt)
        if ability.debuff is not None:
            apply_monster_debuff(state, monster, player, ability.debuff)
        if not player.is_alive:
            state.add_log(f"{player.name} has fallen!", LogType.DAMAGE)


def _resource_on_hit(player: Player, damage: int) -> None:
    if player.class_type in (ClassType.FIGHTER, ClassType.BARBARIAN):
        gain = min(
            constants.WARRIOR_RAGE_DAMAGE_MAX_GAIN, math.ceil(damage / constants.WARRIOR_RAGE_DAMAGE_DIVISOR)
        )
        player.resource = min(player.max_resource, player.resource + gain)
    elif player.class_type == ClassType.ARCHER:
        player.resource = max(0, player.resource - constants.ARCHER_FOCUS_LOSS)


def apply_monster_debuff(state: CombatState, monster: Monster, player: Player, debuff: AbilityDebuff) -> None:
    """Monster debuffs stack: same type extends duration and keeps the larger value."""
    existing = next((d for d in player.debuffs if d.type == debuff.type), None)
    if existing is not None:
        existing.duration += debuff.duration
        existing.value = max(existing.value, debuff.value)
    else:
        player.debuffs.append(
            StatusEffect(
                debuff.type,
                debuff.value,
                debuff.duration,
                monster.name,
                action_tracked=debuff.type == EffectType.STUN,
            )
        )
    state.add_log(f"{player.name} suffers {debuff.type.value} ({debuff.value})", LogType.DEBUFF, is_sub_entry=True)


# ----------------------------------------------------------------------
# Debuff resolution
# ----------------------------------------------------------------------


def damage_over_time(state: CombatState, statuses: List[StatusEffect]) -> int:
    total = 0
    for status in statuses:
        bonus = DOT_BONUSES.get(status.type)
        if bonus is None:
            continue
        multiplier = state.environment.multiplier(bonus) if state.environment else 1.0
        total += math.floor(status.value * multiplier)
    return total


def resolve_debuffs(state: CombatState) -> None:
    """Tick damage over time, regeneration and status durations for both sides."""
    for player in state.players:
        if not player.is_alive:
            continue
        dot = damage_over_time(state, player.debuffs)
        if dot > 0:
            player.hp = max(0, player.hp - dot)
            state.add_log(f"{player.name} takes {dot} damage from afflictions", LogType.DEBUFF)
            state.emit(EventKind.DAMAGE_NUMBER, "damage", player.id, dot)
            if not player.is_alive:
                state.add_log(f"{player.name} has fallen!", LogType.DAMAGE)
        regen = sum(b.value for b in player.buffs if b.type == EffectType.REGEN)
        if regen and player.is_alive:
            healed = min(player.max_hp - player.hp, regen)
            player.hp += healed
            state.add_log(f"{player.name} regenerates {healed} HP", LogType.HEAL)
        player.debuffs = tick_statuses(player.debuffs)
        player.buffs = tick_statuses(player.buffs)

    xp_earned: Dict[str, int] = {}
    for monster in state.monsters:
        if not monster.is_alive:
            continue
        dot = damage_over_time(state, monster.debuffs)
        if dot > 0:
            monster.hp = max(0, monster.hp - dot)
            state.add_log(f"{monster.name} takes {dot} damage from afflictions", LogType.DEBUFF)
            state.emit(EventKind.DAMAGE_NUMBER, "damage", monster.id, dot)
            if not monster.is_alive:
                share = credit_kill(state.players, monster, xp_earned)
                state.add_log(f"{monster.name} is defeated! (+{share} gold each)", LogType.INFO)
                continue
        if monster.elite_modifier == EliteModifier.REGENERATING:
            healed = min(monster.max_hp - monster.hp, constants.REGENERATING_HEAL_AMOUNT)
            if healed:
                monster.hp += healed
                state.add_log(f"{monster.name} regenerates {healed} HP", LogType.HEAL)
        elif monster.elite_modifier == EliteModifier.SHIELDED:
            cap = math.floor(monster.max_hp * constants.SHIELDED_MAX_PERCENT)
            if monster.shield < cap:
                step = math.floor(monster.max_hp * constants.SHIELDED_REGEN_PERCENT)
                monster.shield = min(cap, monster.shield + step)
                state.add_log(f"{monster.name}'s shield recharges to {monster.shield}", LogType.BUFF)
        monster.debuffs = tick_statuses(monster.debuffs)

    for champion_id, xp in xp_earned.items():
        state.ledger.add_xp(champion_id, xp)
    state.touch()
