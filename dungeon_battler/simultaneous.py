"""Networked turn: every hero submits a selection, the host resolves them together."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Tuple

from . import combat
from .enums import GamePhase
from .models import PlayerSelection
from .phases import transition
from .state import CombatState

if TYPE_CHECKING:
    from .game import GameSession

logger = logging.getLogger(__name__)


class SimultaneousDriver:
    def __init__(self, session: "GameSession") -> None:
        self.session = session

    @property
    def state(self) -> CombatState:
        return self.session.state

    def draw_all(self) -> None:
        state = self.state
        state.selections = {}
        for player in state.alive_players():
            combat.deal_to_player(state, player)
            state.selections[player.id] = PlayerSelection(player_id=player.id)
        transition(state, GamePhase.SELECT)

    def set_selection(
        self,
        player_id: str,
        card_id: Optional[str] = None,
        target_id: Optional[str] = None,
        enhance: bool = False,
    ) -> Tuple[bool, str]:
        """Overwrite a hero's pending choice. The last write wins."""
        state = self.state
        if state.phase != GamePhase.SELECT:
            return False, "Selections are closed"
        selection = state.selections.get(player_id)
        if selection is None:
            return False, "Player has no selection this turn"
        player = state.find_player(player_id)
        if card_id is not None and player.find_in_hand(card_id) is None:
            return False, "Card not in hand"
        selection.card_id = card_id
        selection.target_id = target_id
        selection.enhance = enhance
        state.touch()
        return True, "Selection updated"

    def set_ready(self, player_id: str, ready: bool = True) -> Tuple[bool, str]:
        state = self.state
        selection = state.selections.get(player_id)
        if state.phase != GamePhase.SELECT or selection is None:
            return False, "Cannot change readiness now"
        if ready and selection.card_id is None:
            return False, "Select a card first"
        selection.ready = ready
        state.touch()
        return True, "Ready" if ready else "Not ready"

    def all_ready(self) -> bool:
        selections = self.state.selections.values()
        return bool(selections) and all(s.ready and s.card_id is not None for s in selections)

    def resolve_all_actions(self, is_host: bool) -> bool:
        """Resolve every ready selection. Only the host may call this.

        Aggro is rolled for every selection in party order first, then each
        card is applied in the same order through ``combat.apply_card_effects``.
        """
        state = self.state
        if not is_host:
            logger.warning("Ignoring resolve request from a non-host participant")
            return False
        if state.phase != GamePhase.SELECT or not self.all_ready():
            return False

        order = [p.id for p in state.players if p.id in state.selections]

        transition(state, GamePhase.AGGRO)
        for player_id in order:
            player = state.find_player(player_id)
            card = player.find_in_hand(state.selections[player_id].card_id)
            if player.is_alive and not player.is_stunned and card is not None:
                combat.roll_aggro(state, player, card)

        transition(state, GamePhase.RESOLVE)
        for player_id in order:
            if state.all_monsters_dead():
                break
            player = state.find_player(player_id)
            if not player.is_alive:
                continue
            if player.is_stunned:
                combat.skip_stunned_player(state, player)
                continue
            selection = state.selections[player_id]
            combat.apply_card_effects(state, player_id, selection.card_id, selection.target_id, selection.enhance)

        state.selections = {}
        self.session.after_player_action()
        return True
