"""Local turn order: one active hero draws, chooses and acts at a time."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Tuple

from . import combat
from .enums import GamePhase, LogType
from .models import Card, Player
from .phases import next_alive_index, transition
from .state import CombatState
from .targeting import needs_target_selection, valid_targets

if TYPE_CHECKING:
    from .game import GameSession

logger = logging.getLogger(__name__)


class SequentialDriver:
    """Drives DRAW -> SELECT -> TARGET_SELECT -> AGGRO -> PLAYER_ACTION for the active hero.

    Invalid input never raises: each action returns ``(success, message)``
    and leaves the phase unchanged on failure.
    """

    def __init__(self, session: "GameSession") -> None:
        self.session = session

    @property
    def state(self) -> CombatState:
        return self.session.state

    def active_player(self) -> Optional[Player]:
        return self.state.active_player

    def _selected_card(self) -> Optional[Card]:
        player = self.active_player()
        return player.find_in_hand(self.state.selected_card_id) if player else None

    # ------------------------------------------------------------------
    # Draw
    # ------------------------------------------------------------------

    def draw(self) -> None:
        """Deal to the active hero, skipping the dead and the stunned."""
        state = self.state
        idx = next_alive_index(state, state.current_player_index)
        while idx >= 0 and state.players[idx].is_stunned:
            combat.skip_stunned_player(state, state.players[idx])
            idx = next_alive_index(state, idx + 1)

        if idx < 0:
            transition(state, GamePhase.MONSTER_ACTION)
            self.session.run_monster_phase()
            return

        state.current_player_index = idx
        state.selected_card_id = None
        state.selected_target_id = None
        combat.deal_to_player(state, state.players[idx])
        transition(state, GamePhase.SELECT)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_card(self, card_id: str) -> Tuple[bool, str]:
        state = self.state
        if state.phase not in (GamePhase.SELECT, GamePhase.TARGET_SELECT):
            return False, "Cannot select a card now"
        player = self.active_player()
        card = player.find_in_hand(card_id) if player else None
        if card is None:
            return False, "Card not in hand"
        if state.phase == GamePhase.TARGET_SELECT:
            transition(state, GamePhase.SELECT)
        state.selected_card_id = card.id
        state.selected_target_id = None
        state.touch()
        return True, f"Selected {card.name}"

    def set_enhance_mode(self, enabled: bool) -> None:
        self.state.enhance_mode = enabled
        self.state.touch()

    def confirm_card(self) -> Tuple[bool, str]:
        state = self.state
        if state.phase != GamePhase.SELECT:
            return False, "Cannot confirm now"
        card = self._selected_card()
        if card is None:
            return False, "No card selected"
        if needs_target_selection(card):
            transition(state, GamePhase.TARGET_SELECT)
            return True, "Choose a target"
        transition(state, GamePhase.AGGRO)
        return self._roll_and_play()

    def select_target(self, target_id: str) -> Tuple[bool, str]:
        state = self.state
        if state.phase != GamePhase.TARGET_SELECT:
            return False, "Cannot select a target now"
        card = self._selected_card()
        if card is None or target_id not in valid_targets(card, state.players, state.monsters):
            return False, "Invalid target"
        state.selected_target_id = target_id
        state.touch()
        return True, "Target selected"

    def confirm_target(self) -> Tuple[bool, str]:
        state = self.state
        if state.phase != GamePhase.TARGET_SELECT:
            return False, "Cannot confirm a target now"
        if state.selected_target_id is None:
            return False, "No target selected"
        transition(state, GamePhase.AGGRO)
        return self._roll_and_play()

    def cancel_target(self) -> Tuple[bool, str]:
        if self.state.phase != GamePhase.TARGET_SELECT:
            return False, "Nothing to cancel"
        transition(self.state, GamePhase.SELECT)
        self.state.selected_target_id = None
        return True, "Selection cancelled"

    def use_special_ability(self, target_id: Optional[str] = None) -> Tuple[bool, str]:
        state = self.state
        player = self.active_player()
        if state.phase != GamePhase.SELECT or player is None:
            return False, "Cannot use a special ability now"
        success, message = combat.use_special_ability(state, player.id, target_id)
        if not success:
            return success, message
        transition(state, GamePhase.PLAYER_ACTION)
        self.session.after_player_action()
        return success, message

    def pass_turn(self) -> Tuple[bool, str]:
        """Give up the action. Used when a hero has nothing left to draw."""
        state = self.state
        player = self.active_player()
        if state.phase != GamePhase.SELECT or player is None:
            return False, "Cannot pass now"
        state.selected_card_id = None
        state.add_log(f"{player.name} passes", LogType.INFO)
        transition(state, GamePhase.PLAYER_ACTION)
        self.session.after_player_action()
        return True, f"{player.name} passed"

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _roll_and_play(self) -> Tuple[bool, str]:
        state = self.state
        player = self.active_player()
        card = self._selected_card()
        combat.roll_aggro(state, player, card)
        transition(state, GamePhase.PLAYER_ACTION)
        success, message = combat.apply_card_effects(
            state, player.id, card.id, state.selected_target_id, state.enhance_mode
        )
        state.selected_card_id = None
        state.selected_target_id = None
        state.enhance_mode = False
        if not success:
            state.add_log(message, LogType.INFO)
        self.session.after_player_action()
        return success, message

    def play_turn(self, card_id: str, target_id: Optional[str] = None, enhance: bool = False) -> Tuple[bool, str]:
        """Select, target and resolve a card in one call. Used by agents and tests."""
        self.set_enhance_mode(enhance)
        success, message = self.select_card(card_id)
        if not success:
            return success, message
        success, message = self.confirm_card()
        if not success or self.state.phase != GamePhase.TARGET_SELECT:
            return success, message
        if target_id is None:
            options = valid_targets(self._selected_card(), self.state.players, self.state.monsters)
            target_id = options[0] if options else None
        if target_id is None:
            return False, "No valid target"
        success, message = self.select_target(target_id)
        if not success:
            return success, message
        return self.confirm_target()
