from dungeon_battler import ClassType, GamePhase, HeroSpec, MonsterSpec, PlayMode
from dungeon_battler.config import CombatConfig
from dungeon_battler.enums import EffectType
from dungeon_battler.models import StatusEffect


def _start(make_session, hp=15):
    session = make_session(hp=hp, config=CombatConfig(mode=PlayMode.SIMULTANEOUS))
    session.start_mock_battle(
        [
            HeroSpec(ClassType.ARCHER, ["archer-2"], hp=30, champion_id="champ-a"),
            HeroSpec(ClassType.ARCHER, ["archer-2"], hp=30, champion_id="champ-b"),
        ],
        [MonsterSpec("dummy")],
    )
    return session


def _ready_both(session):
    driver = session.simultaneous
    assert driver.set_selection("player-0", "archer-2-0-0", "dummy-0")[0]
    assert driver.set_ready("player-0")[0]
    assert driver.set_selection("player-1", "archer-2-1-0", "dummy-0")[0]
    assert driver.set_ready("player-1")[0]


def test_every_hero_draws_and_gets_a_selection(make_session):
    session = _start(make_session)
    state = session.state
    assert state.phase == GamePhase.SELECT
    assert set(state.selections) == {"player-0", "player-1"}
    assert all(len(p.hand) == 1 for p in state.players)
    assert not session.simultaneous.all_ready()


def test_overkill_credits_the_kill_once(make_session):
    session = _start(make_session, hp=15)
    _ready_both(session)

    assert session.simultaneous.resolve_all_actions(is_host=True)

    state = session.state
    assert state.monsters[0].hp == 0
    defeated = [e for e in state.log if "is defeated" in e.message]
    assert len(defeated) == 1
    # five gold split between two living heroes
    assert [p.gold for p in state.players] == [2, 2]
    assert session.ledger.xp == {"champ-a": 10, "champ-b": 10}
    assert state.phase == GamePhase.REWARD
    assert state.selections == {}


def test_followers_cannot_resolve(make_session):
    session = _start(make_session)
    _ready_both(session)

    assert session.simultaneous.resolve_all_actions(is_host=False) is False
    assert session.state.phase == GamePhase.SELECT
    assert session.state.monsters[0].hp == 15


def test_ready_requires_a_card(make_session):
    session = _start(make_session)
    assert session.simultaneous.set_ready("player-0") == (False, "Select a card first")
    assert session.simultaneous.resolve_all_actions(is_host=True) is False


def test_last_selection_wins(make_session):
    session = _start(make_session)
    driver = session.simultaneous
    driver.set_selection("player-0", "archer-2-0-0", "dummy-0")
    driver.set_selection("player-0", "archer-2-0-0", None, enhance=True)
    selection = session.state.selections["player-0"]
    assert selection.target_id is None
    assert selection.enhance is True


def test_selection_rejects_cards_outside_the_hand(make_session):
    session = _start(make_session)
    assert session.simultaneous.set_selection("player-0", "archer-2-1-0") == (False, "Card not in hand")
    assert session.simultaneous.set_selection("ghost", "archer-2-0-0")[0] is False


def test_surviving_monster_acts_and_next_turn_opens(make_session):
    session = _start(make_session, hp=50)
    _ready_both(session)
    session.simultaneous.resolve_all_actions(is_host=True)

    state = session.state
    assert state.monsters[0].hp == 30
    assert state.turn == 2
    assert state.phase == GamePhase.SELECT
    # equal aggro: the earlier hero takes the hit
    assert [p.hp for p in state.players] == [25, 30]


def test_second_shot_at_a_fallen_monster_is_wasted(make_session):
    session = make_session(hp=10, config=CombatConfig(mode=PlayMode.SIMULTANEOUS))
    session.start_mock_battle(
        [
            HeroSpec(ClassType.ARCHER, ["archer-2"], hp=30),
            HeroSpec(ClassType.ARCHER, ["archer-2"], hp=30),
        ],
        [MonsterSpec("dummy"), MonsterSpec("dummy")],
    )
    _ready_both(session)
    session.simultaneous.resolve_all_actions(is_host=True)

    state = session.state
    assert [m.hp for m in state.monsters] == [0, 10]
    assert len([e for e in state.log if "is defeated" in e.message]) == 1
    assert state.phase == GamePhase.SELECT
    assert [p.hp for p in state.players] == [25, 30]


def test_stunned_hero_skips_while_the_rest_resolve(make_session):
    session = _start(make_session, hp=50)
    _ready_both(session)
    session.state.players[0].debuffs.append(StatusEffect(EffectType.STUN, 1, 1, "Troll", action_tracked=True))

    session.simultaneous.resolve_all_actions(is_host=True)

    state = session.state
    assert any("is stunned and cannot act" in e.message for e in state.log)
    assert state.monsters[0].hp == 40
    assert not state.players[0].is_stunned
    # only the acting hero built aggro, so it takes the hit
    assert [p.hp for p in state.players] == [30, 25]
    assert state.turn == 2
