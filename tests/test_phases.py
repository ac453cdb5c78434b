import pytest

from dungeon_battler import phases
from dungeon_battler.campaign import CampaignProgress
from dungeon_battler.config import CombatConfig
from dungeon_battler.enums import ClassType, GamePhase, PlayMode
from dungeon_battler.errors import PhaseTransitionError
from dungeon_battler.models import Monster, Player
from dungeon_battler.state import CombatState


def _state(mode=PlayMode.SEQUENTIAL, heroes=2, **kwargs) -> CombatState:
    players = [
        Player(id=f"player-{i}", name=f"Hero {i}", class_type=ClassType.FIGHTER, hp=30, max_hp=30, max_resource=10)
        for i in range(heroes)
    ]
    monsters = [Monster(id="m-0", template_id="x", name="X", level=1, hp=10, max_hp=10, abilities=[])]
    return CombatState(players=players, monsters=monsters, config=CombatConfig(mode=mode), **kwargs)


def test_transition_follows_the_table():
    state = _state()
    phases.transition(state, GamePhase.SELECT)
    assert state.phase == GamePhase.SELECT
    assert state.version == 1

    with pytest.raises(PhaseTransitionError):
        phases.transition(state, GamePhase.VICTORY)
    assert state.phase == GamePhase.SELECT


def test_terminal_phases_have_no_exits():
    assert phases.TERMINAL_PHASES == {
        GamePhase.VICTORY,
        GamePhase.DEFEAT,
        GamePhase.QUEST_FAILED,
        GamePhase.CAMPAIGN_COMPLETE,
    }
    assert phases.is_terminal(GamePhase.DEFEAT)
    assert not phases.is_terminal(GamePhase.REWARD)


def test_aggro_leads_to_resolve_in_simultaneous_mode():
    state = _state(mode=PlayMode.SIMULTANEOUS, phase=GamePhase.AGGRO)
    assert phases.next_phase(state) == GamePhase.RESOLVE
    state = _state(phase=GamePhase.AGGRO)
    assert phases.next_phase(state) == GamePhase.PLAYER_ACTION


def test_player_action_hands_over_to_next_living_hero():
    state = _state(heroes=3, phase=GamePhase.PLAYER_ACTION)
    assert phases.next_phase(state) == GamePhase.DRAW

    state.players[1].hp = 0
    state.players[2].hp = 0
    assert phases.next_phase(state) == GamePhase.MONSTER_ACTION


def test_round_clear_and_defeat_outcomes():
    state = _state(phase=GamePhase.PLAYER_ACTION)
    state.monsters[0].hp = 0
    assert phases.next_phase(state) == GamePhase.REWARD
    state.round = 3
    assert phases.next_phase(state) == GamePhase.SHOP

    state = _state(phase=GamePhase.MONSTER_ACTION)
    for player in state.players:
        player.hp = 0
    assert phases.next_phase(state) == GamePhase.DEFEAT
    state.campaign = CampaignProgress(campaign_id="trial")
    assert phases.next_phase(state) == GamePhase.QUEST_FAILED


def test_terminal_phase_has_no_successor():
    state = _state(phase=GamePhase.VICTORY)
    with pytest.raises(PhaseTransitionError):
        phases.next_phase(state)


def test_next_alive_index():
    state = _state(heroes=3)
    state.players[0].hp = 0
    assert phases.next_alive_index(state, 0) == 1
    assert phases.next_alive_index(state, 3) == -1
