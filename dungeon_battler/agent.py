"""Lightweight heuristic agent used for autoplay, the API and the RL env."""
from __future__ import annotations

from typing import List, Optional, Tuple

from .enums import EffectType, GamePhase, TargetType
from .game import GameSession
from .models import Card, Player
from .state import CombatState
from .targeting import get_target_type, valid_targets

INJURED_THRESHOLD = 0.5


class HeuristicAgent:
    """A pragmatic baseline that follows a handful of simple rules.

    Heal the most injured ally when someone has dropped below half health,
    otherwise hit the weakest monster with the hardest hitting card.
    """

    def choose(self, state: CombatState, player: Player) -> Optional[Tuple[str, Optional[str]]]:
        if not player.hand:
            return None
        injured = self._most_injured(state.alive_players())
        if injured is not None:
            healer = self._best_card(player.hand, EffectType.HEAL)
            if healer is not None:
                return healer.id, self._ally_target(healer, state, injured)

        attack = self._best_card(player.hand, EffectType.DAMAGE)
        card = attack or player.hand[0]
        return card.id, self._target_for(card, state, player)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _score(self, card: Card, effect_type: EffectType) -> int:
        score = 0
        for effect in card.effects:
            if effect.type != effect_type or (effect.target == TargetType.SELF and effect_type == EffectType.DAMAGE):
                continue
            multiplier = 2 if effect.target in (TargetType.ALL_MONSTERS, TargetType.ALL_ALLIES) else 1
            score += effect.value * multiplier
        return score

    def _best_card(self, hand: List[Card], effect_type: EffectType) -> Optional[Card]:
        best: Optional[Card] = None
        best_score = 0
        for card in hand:
            score = self._score(card, effect_type)
            if score > best_score:
                best, best_score = card, score
        return best

    def _most_injured(self, players: List[Player]) -> Optional[Player]:
        candidates = [p for p in players if p.hp < p.max_hp * INJURED_THRESHOLD]
        if not candidates:
            return None
        return min(candidates, key=lambda p: p.hp / p.max_hp)

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------

    def _ally_target(self, card: Card, state: CombatState, injured: Player) -> Optional[str]:
        if get_target_type(card) != TargetType.ALLY:
            return None
        return injured.id

    def _target_for(self, card: Card, state: CombatState, player: Player) -> Optional[str]:
        target_type = get_target_type(card)
        if target_type == TargetType.MONSTER:
            alive = state.alive_monsters()
            return min(alive, key=lambda m: m.hp).id if alive else None
        if target_type == TargetType.ALLY:
            options = valid_targets(card, state.players, state.monsters)
            return player.id if player.id in options else (options[0] if options else None)
        return None

    # ------------------------------------------------------------------
    # Driving a session
    # ------------------------------------------------------------------

    def play_active(self, session: GameSession) -> Tuple[bool, str]:
        """Play one card for the hero whose turn it is in sequential mode."""
        state = session.state
        player = state.active_player
        if state.phase != GamePhase.SELECT or player is None:
            return False, "No hero is waiting to act"
        choice = self.choose(state, player)
        if choice is None:
            return session.sequential.pass_turn()
        card_id, target_id = choice
        return session.sequential.play_turn(card_id, target_id)

    def submit_all(self, session: GameSession, player_ids: Optional[List[str]] = None) -> int:
        """Fill in and ready simultaneous selections. Returns how many were set."""
        state = session.state
        submitted = 0
        for player_id in list(state.selections):
            if player_ids is not None and player_id not in player_ids:
                continue
            player = state.find_player(player_id)
            choice = self.choose(state, player) if player is not None else None
            if choice is None:
                continue
            card_id, target_id = choice
            ok, _ = session.simultaneous.set_selection(player_id, card_id, target_id)
            if ok and session.simultaneous.set_ready(player_id)[0]:
                submitted += 1
        return submitted
