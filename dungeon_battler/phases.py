"""Table driven turn phase machine."""
from __future__ import annotations

import logging
from typing import Dict, FrozenSet

from .enums import EventKind, GamePhase, PlayMode
from .errors import PhaseTransitionError
from .state import CombatState

logger = logging.getLogger(__name__)

P = GamePhase

TRANSITIONS: Dict[GamePhase, FrozenSet[GamePhase]] = {
    P.DRAW: frozenset({P.SELECT, P.MONSTER_ACTION, P.DEFEAT, P.QUEST_FAILED}),
    P.SELECT: frozenset({P.TARGET_SELECT, P.AGGRO, P.PLAYER_ACTION, P.RESOLVE}),
    P.TARGET_SELECT: frozenset({P.AGGRO, P.SELECT}),
    P.AGGRO: frozenset({P.PLAYER_ACTION, P.RESOLVE}),
    P.PLAYER_ACTION: frozenset({P.DRAW, P.MONSTER_ACTION, P.REWARD, P.SHOP, P.DEFEAT, P.QUEST_FAILED}),
    P.RESOLVE: frozenset({P.MONSTER_ACTION, P.REWARD, P.SHOP, P.DEFEAT, P.QUEST_FAILED}),
    P.MONSTER_ACTION: frozenset({P.DEBUFF_RESOLUTION, P.DEFEAT, P.QUEST_FAILED}),
    P.DEBUFF_RESOLUTION: frozenset({P.END_TURN, P.REWARD, P.SHOP, P.DEFEAT, P.QUEST_FAILED}),
    P.END_TURN: frozenset({P.DRAW, P.DEFEAT, P.QUEST_FAILED}),
    P.REWARD: frozenset({P.DRAW, P.VICTORY, P.QUEST_COMPLETE, P.CAMPAIGN_COMPLETE}),
    P.SHOP: frozenset({P.DRAW, P.VICTORY, P.QUEST_COMPLETE, P.CAMPAIGN_COMPLETE}),
    P.QUEST_COMPLETE: frozenset({P.DRAW}),
    P.VICTORY: frozenset(),
    P.DEFEAT: frozenset(),
    P.QUEST_FAILED: frozenset(),
    P.CAMPAIGN_COMPLETE: frozenset(),
}

TERMINAL_PHASES = frozenset(phase for phase, exits in TRANSITIONS.items() if not exits)


def can_transition(current: GamePhase, target: GamePhase) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def transition(state: CombatState, target: GamePhase) -> None:
    """Move ``state`` to ``target``, raising if the table forbids it."""
    if not can_transition(state.phase, target):
        raise PhaseTransitionError(f"Cannot move from {state.phase.value} to {target.value}")
    logger.debug("Phase %s -> %s", state.phase.value, target.value)
    state.phase = target
    state.emit(EventKind.PHASE, target.value)
    state.touch()


def reset_phase(state: CombatState, target: GamePhase = GamePhase.DRAW) -> None:
    """Round and quest starts re-enter the machine without a table check."""
    logger.debug("Phase reset %s -> %s", state.phase.value, target.value)
    state.phase = target
    state.emit(EventKind.PHASE, target.value)
    state.touch()


def is_terminal(phase: GamePhase) -> bool:
    return phase in TERMINAL_PHASES


def defeat_phase(state: CombatState) -> GamePhase:
    return P.QUEST_FAILED if state.campaign is not None else P.DEFEAT


def round_clear_phase(state: CombatState) -> GamePhase:
    return P.REWARD if state.round <= state.config.reward_round_limit else P.SHOP


def next_alive_index(state: CombatState, start: int) -> int:
    """First living player at or after ``start``; -1 when there is none."""
    for idx in range(start, len(state.players)):
        if state.players[idx].is_alive:
            return idx
    return -1


def next_phase(state: CombatState) -> GamePhase:
    """Successor of the current phase, following alive and dead scans."""
    phase = state.phase
    if phase == P.DRAW:
        return P.SELECT
    if phase == P.SELECT:
        return P.AGGRO
    if phase == P.TARGET_SELECT:
        return P.AGGRO
    if phase == P.AGGRO:
        return P.PLAYER_ACTION if state.config.mode == PlayMode.SEQUENTIAL else P.RESOLVE
    if phase in (P.PLAYER_ACTION, P.RESOLVE):
        if state.all_monsters_dead():
            return round_clear_phase(state)
        if state.all_players_dead():
            return defeat_phase(state)
        if phase == P.PLAYER_ACTION and next_alive_index(state, state.current_player_index + 1) >= 0:
            return P.DRAW
        return P.MONSTER_ACTION
    if phase == P.MONSTER_ACTION:
        return defeat_phase(state) if state.all_players_dead() else P.DEBUFF_RESOLUTION
    if phase == P.DEBUFF_RESOLUTION:
        if state.all_players_dead():
            return defeat_phase(state)
        if state.all_monsters_dead():
            return round_clear_phase(state)
        return P.END_TURN
    if phase == P.END_TURN:
        return defeat_phase(state) if state.all_players_dead() else P.DRAW
    raise PhaseTransitionError(f"{phase.value} has no automatic successor")
