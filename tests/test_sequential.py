from dungeon_battler import ClassType, GamePhase, HeroSpec, MonsterSpec
from dungeon_battler.enums import EffectType
from dungeon_battler.models import StatusEffect


def _start(make_session, heroes, hp=20, damage=5):
    session = make_session(hp=hp, damage=damage)
    session.start_mock_battle(heroes, [MonsterSpec("dummy")])
    return session


def test_single_card_turn_against_dummy(make_session):
    session = _start(make_session, [HeroSpec(ClassType.FIGHTER, ["archer-2"], hp=30)])
    state = session.state
    assert state.phase == GamePhase.SELECT
    assert [c.id for c in state.players[0].hand] == ["archer-2-0-0"]

    success, _ = session.sequential.play_turn("archer-2-0-0")
    assert success

    hero, dummy = state.players[0], state.monsters[0]
    assert dummy.hp == 10
    assert hero.hp == 25
    # one point for dealing 10 damage, one for taking a hit
    assert hero.resource == 2
    assert state.turn == 2
    assert state.phase == GamePhase.SELECT
    messages = [entry.message for entry in state.log]
    assert "Training Dummy uses Bonk!" in messages
    assert any("deals 10 damage to Training Dummy" in m for m in messages)


def test_step_by_step_selection_and_cancel(make_session):
    session = _start(make_session, [HeroSpec(ClassType.FIGHTER, ["archer-2"], hp=30)])
    driver = session.sequential
    state = session.state

    assert driver.select_card("archer-2-0-0")[0]
    assert driver.confirm_card() == (True, "Choose a target")
    assert state.phase == GamePhase.TARGET_SELECT

    assert driver.cancel_target()[0]
    assert state.phase == GamePhase.SELECT

    driver.confirm_card()
    assert driver.select_target("dummy-0")[0]
    success, _ = driver.confirm_target()
    assert success
    assert state.monsters[0].hp == 10


def test_invalid_input_leaves_phase_unchanged(make_session):
    session = _start(make_session, [HeroSpec(ClassType.FIGHTER, ["archer-2"], hp=30)])
    driver = session.sequential
    state = session.state
    version = state.version

    assert driver.select_card("no-such-card") == (False, "Card not in hand")
    assert driver.confirm_card() == (False, "No card selected")
    assert driver.select_target("dummy-0")[0] is False
    assert driver.cancel_target()[0] is False
    assert state.phase == GamePhase.SELECT
    assert state.version == version


def test_target_must_be_valid(make_session):
    session = _start(make_session, [HeroSpec(ClassType.FIGHTER, ["archer-2"], hp=30)])
    driver = session.sequential
    driver.select_card("archer-2-0-0")
    driver.confirm_card()
    assert driver.select_target("player-0") == (False, "Invalid target")
    assert driver.confirm_target() == (False, "No target selected")
    assert session.state.phase == GamePhase.TARGET_SELECT


def test_stunned_hero_is_skipped(make_session):
    session = _start(
        make_session,
        [
            HeroSpec(ClassType.FIGHTER, ["archer-2"], hp=30),
            HeroSpec(ClassType.FIGHTER, ["fighter-1"], hp=30),
        ],
        hp=50,
    )
    state = session.state
    state.players[1].debuffs.append(StatusEffect(EffectType.STUN, 1, 1, "test", action_tracked=True))

    session.sequential.play_turn("archer-2-0-0")

    messages = [entry.message for entry in state.log]
    assert "Fighter is stunned and cannot act!" in messages
    assert state.players[1].debuffs == []
    assert state.turn == 2
    assert state.current_player_index == 0
    assert state.phase == GamePhase.SELECT


def test_second_hero_acts_before_monsters(make_session):
    session = _start(
        make_session,
        [
            HeroSpec(ClassType.FIGHTER, ["archer-2"], hp=30),
            HeroSpec(ClassType.FIGHTER, ["fighter-1"], hp=30),
        ],
        hp=50,
    )
    state = session.state
    session.sequential.play_turn("archer-2-0-0")
    assert state.current_player_index == 1
    assert state.phase == GamePhase.SELECT
    assert state.turn == 1

    session.sequential.play_turn("fighter-1-1-0")
    assert state.monsters[0].hp == 50 - 10 - 8
    assert state.turn == 2


def test_pass_turn_hands_over_to_monsters(make_session):
    session = _start(make_session, [HeroSpec(ClassType.FIGHTER, ["archer-2"], hp=30)])
    success, _ = session.sequential.pass_turn()
    assert success
    assert session.state.players[0].hp == 25
    assert session.state.monsters[0].hp == 20


def test_special_ability_needs_full_resource(make_session):
    session = _start(make_session, [HeroSpec(ClassType.FIGHTER, ["archer-2"], hp=30)], hp=200)
    driver = session.sequential
    assert driver.use_special_ability()[0] is False

    hero = session.state.players[0]
    hero.resource = hero.max_resource
    success, _ = driver.use_special_ability()
    assert success
    state = session.state
    assert state.players[0].resource == 0
    assert state.monsters[0].hp == 175
    # the stunned dummy skips its attack
    assert state.players[0].hp == 30
    assert "Training Dummy is stunned and cannot act!" in [e.message for e in state.log]
