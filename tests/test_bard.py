from dungeon_battler import combat
from dungeon_battler.cards import CardDatabase
from dungeon_battler.dice import ScriptedDice
from dungeon_battler.enums import BardSong, ClassType, EffectType
from dungeon_battler.models import Monster, MonsterAbility, Player
from dungeon_battler.state import CombatState

CARDS = CardDatabase()


def _bard(hand, **kwargs) -> Player:
    defaults = dict(
        id="player-0",
        name="Bard",
        class_type=ClassType.BARD,
        hp=30,
        max_hp=30,
        max_resource=5,
        hand=[CARDS.get(card_id).instance(f"{card_id}-0-{i}") for i, card_id in enumerate(hand)],
    )
    defaults.update(kwargs)
    return Player(**defaults)


def _state(bard) -> CombatState:
    friend = Player(id="player-1", name="Friend", class_type=ClassType.FIGHTER, hp=30, max_hp=30, max_resource=10)
    monster = Monster(
        id="dummy-0",
        template_id="dummy",
        name="Training Dummy",
        level=1,
        hp=100,
        max_hp=100,
        abilities=[MonsterAbility(1, "Bonk", "", 5)],
        gold_reward=5,
        xp_reward=10,
    )
    return CombatState(players=[bard, friend], monsters=[monster], dice=ScriptedDice())


def _play(state, card_id):
    bard = state.players[0]
    card = next(c for c in bard.hand if c.id.startswith(f"{card_id}-"))
    ok, _ = combat.apply_card_effects(state, bard.id, card.id, "dummy-0")
    assert ok
    # played cards go back so the next play can find them
    bard = state.players[0]
    bard.hand, bard.deck, bard.discard = bard.hand + bard.deck + bard.discard, [], []


def test_cards_are_tagged_with_their_song():
    assert combat.song_of(CARDS.get("bard-1")) == BardSong.RIOT
    assert combat.song_of(CARDS.get("bard-2")) == BardSong.HARMONY
    assert combat.song_of(CARDS.get("fighter-1")) is None
    assert BardSong.RIOT.tag == "[Riot]"


def test_same_song_stacks_and_switching_resets():
    state = _state(_bard(["bard-1", "bard-3", "bard-2"]))

    _play(state, "bard-1")
    assert state.players[0].resource == 1
    assert state.players[0].bard_song == BardSong.RIOT

    _play(state, "bard-3")
    assert state.players[0].resource == 2

    _play(state, "bard-2")
    assert state.players[0].resource == 1
    assert state.players[0].bard_song == BardSong.HARMONY


def test_harmony_crescendo_only_lifts_the_party():
    state = _state(_bard([], resource=5, bard_song=BardSong.HARMONY))
    ok, _ = combat.use_special_ability(state, "player-0")
    assert ok
    assert all(any(b.type == EffectType.STRENGTH for b in p.buffs) for p in state.players)
    assert state.monsters[0].debuffs == []
    assert state.players[0].bard_song is None
    assert state.players[0].resource == 0


def test_riot_crescendo_only_hits_the_monsters():
    state = _state(_bard([], resource=5, bard_song=BardSong.RIOT))
    combat.use_special_ability(state, "player-0")
    assert {d.type for d in state.monsters[0].debuffs} == {EffectType.VULNERABLE, EffectType.WEAKNESS}
    assert all(p.buffs == [] for p in state.players)
    assert state.players[0].bard_song is None


def test_crescendo_without_a_song_does_both():
    state = _state(_bard([], resource=5))
    combat.use_special_ability(state, "player-0")
    assert state.monsters[0].debuffs
    assert state.players[0].buffs
