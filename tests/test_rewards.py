from dungeon_battler import ClassType, GamePhase, HeroSpec, MonsterSpec, PlayMode, rewards
from dungeon_battler.cards import CardDatabase
from dungeon_battler.config import CombatConfig
from dungeon_battler.dice import ScriptedDice


def _won_round(make_session, **config):
    session = make_session(hp=15, config=CombatConfig(mode=PlayMode.SIMULTANEOUS, **config))
    session.start_mock_battle(
        [HeroSpec(ClassType.ARCHER, ["archer-2"], hp=30), HeroSpec(ClassType.ARCHER, ["archer-2"], hp=30)],
        [MonsterSpec("dummy")],
    )
    driver = session.simultaneous
    driver.set_selection("player-0", "archer-2-0-0", "dummy-0")
    driver.set_selection("player-1", "archer-2-1-0", "dummy-0")
    driver.set_ready("player-0")
    driver.set_ready("player-1")
    driver.resolve_all_actions(is_host=True)
    return session


def test_reward_options_skip_owned_cards(make_session):
    session = _won_round(make_session)
    state = session.state
    assert state.phase == GamePhase.REWARD
    assert rewards.current_chooser(state).id == "player-0"
    assert [c.id for c in state.reward_options] == ["archer-1", "archer-3", "archer-5"]


def test_heroes_choose_in_order_then_victory(make_session):
    session = _won_round(make_session)
    state = session.state

    assert session.choose_reward("player-1", "archer-1") == (False, "Not this player's turn to choose")
    assert session.choose_reward("player-0", "archer-9") == (False, "Card is not on offer")

    success, _ = session.choose_reward("player-0", "archer-1")
    assert success
    assert "archer-1-0-1" in [c.id for c in state.players[0].all_cards()]
    assert rewards.current_chooser(state).id == "player-1"

    session.skip_reward("player-1")
    assert state.phase == GamePhase.VICTORY


def test_shop_charges_by_rarity(make_session):
    session = _won_round(make_session, reward_round_limit=0)
    state = session.state
    assert state.phase == GamePhase.SHOP
    offer = state.reward_options[0]

    assert session.buy_card("player-0", offer.id) == (False, "Not enough gold")

    state.players[0].gold = 100
    success, _ = session.buy_card("player-0", offer.id)
    assert success
    assert state.players[0].gold == 100 - offer.rarity.price
    assert offer.name in [c.name for c in state.players[0].all_cards()]


def test_dead_heroes_are_skipped(make_session):
    session = _won_round(make_session)
    state = session.state
    state.players[1].hp = 0
    session.skip_reward("player-0")
    assert rewards.is_finished(state)


def test_shop_excludes_owned_names():
    db = CardDatabase()
    owned = {c.name for c in db.for_class(ClassType.ARCHER)[:8]}
    shop = db.generate_shop(ClassType.ARCHER, owned, ScriptedDice(chance=[0.0, 0.0]), size=3)
    assert [c.id for c in shop] == ["archer-14", "archer-20"]
