"""Between-round card rewards and the shop, one living hero at a time."""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from .enums import GamePhase, LogType
from .models import Card, Player
from .phases import next_alive_index
from .state import CombatState

logger = logging.getLogger(__name__)


def open_round_clear(state: CombatState) -> None:
    """Start the reward or shop queue with the first living hero."""
    state.reward_player_index = next_alive_index(state, 0)
    _prepare_options(state)


def is_finished(state: CombatState) -> bool:
    return state.reward_player_index < 0


def current_chooser(state: CombatState) -> Optional[Player]:
    if is_finished(state):
        return None
    return state.players[state.reward_player_index]


def _prepare_options(state: CombatState) -> None:
    player = current_chooser(state)
    if player is None:
        state.reward_options = []
        return
    cards = state.catalog.cards
    if state.phase == GamePhase.REWARD:
        owned_ids = {c.template_id for c in player.all_cards()}
        state.reward_options = cards.reward_options(player.class_type, owned_ids, state.config.reward_choices)
    else:
        owned_names = {c.name for c in player.all_cards()}
        state.reward_options = cards.generate_shop(
            player.class_type, owned_names, state.dice, state.config.shop_choices
        )
    logger.debug("Offering %s to %s", [c.id for c in state.reward_options], player.id)


def _advance(state: CombatState) -> None:
    state.reward_player_index = next_alive_index(state, state.reward_player_index + 1)
    _prepare_options(state)
    state.touch()


def add_card_to_deck(player: Player, player_index: int, template: Card) -> Card:
    card = template.instance(f"{template.template_id}-{player_index}-{len(player.all_cards())}")
    player.deck.append(card)
    return card


def _validate(state: CombatState, player_id: str, phase: GamePhase) -> Tuple[Optional[Player], str]:
    if state.phase != phase:
        return None, f"Not in {phase.value} phase"
    player = current_chooser(state)
    if player is None or player.id != player_id:
        return None, "Not this player's turn to choose"
    return player, ""


def choose_reward(state: CombatState, player_id: str, card_id: str) -> Tuple[bool, str]:
    player, error = _validate(state, player_id, GamePhase.REWARD)
    if player is None:
        return False, error
    template = next((c for c in state.reward_options if c.id == card_id), None)
    if template is None:
        return False, "Card is not on offer"
    add_card_to_deck(player, state.reward_player_index, template)
    state.add_log(f"{player.name} adds {template.name} to their deck", LogType.INFO)
    _advance(state)
    return True, f"Added {template.name}"


def buy_card(state: CombatState, player_id: str, card_id: str) -> Tuple[bool, str]:
    player, error = _validate(state, player_id, GamePhase.SHOP)
    if player is None:
        return False, error
    template = next((c for c in state.reward_options if c.id == card_id), None)
    if template is None:
        return False, "Card is not on offer"
    price = template.rarity.price
    if player.gold < price:
        return False, "Not enough gold"
    player.gold -= price
    add_card_to_deck(player, state.reward_player_index, template)
    state.add_log(f"{player.name} buys {template.name} for {price} gold", LogType.INFO)
    _advance(state)
    return True, f"Bought {template.name}"


def skip(state: CombatState, player_id: str) -> Tuple[bool, str]:
    if state.phase not in (GamePhase.REWARD, GamePhase.SHOP):
        return False, "Nothing to skip"
    player = current_chooser(state)
    if player is None or player.id != player_id:
        return False, "Not this player's turn to choose"
    state.add_log(f"{player.name} skips", LogType.INFO)
    _advance(state)
    return True, "Skipped"
