from dungeon_battler import targeting
from dungeon_battler.dice import ScriptedDice
from dungeon_battler.enums import ClassType, EffectType, MonsterTarget, Rarity, TargetType
from dungeon_battler.models import Card, Effect, Monster, MonsterAbility, Player, StatusEffect


def _hero(pid, aggro=0, **kwargs) -> Player:
    defaults = dict(id=pid, name=pid, class_type=ClassType.FIGHTER, hp=30, max_hp=30, max_resource=10)
    defaults.update(kwargs)
    return Player(base_aggro=aggro, **defaults)


def _card(*effects: Effect) -> Card:
    return Card("c-1", "Test Card", ClassType.FIGHTER, Rarity.COMMON, 1, "", tuple(effects))


def _ability(target=MonsterTarget.SINGLE) -> MonsterAbility:
    return MonsterAbility(1, "Bonk", "", 5, target)


STEALTH = StatusEffect(EffectType.STEALTH, 1, 1)
TAUNT = StatusEffect(EffectType.TAUNT, 1, 1)


def test_ally_target_takes_priority():
    card = _card(Effect(EffectType.DAMAGE, TargetType.MONSTER, 5), Effect(EffectType.HEAL, TargetType.ALLY, 5))
    assert targeting.get_target_type(card) == TargetType.ALLY
    assert targeting.needs_target_selection(card)

    aoe = _card(Effect(EffectType.DAMAGE, TargetType.ALL_MONSTERS, 5))
    assert targeting.get_target_type(aoe) is None
    assert not targeting.needs_target_selection(aoe)


def test_valid_targets_skip_the_dead():
    players = [_hero("a"), _hero("b", hp=0)]
    monsters = [
        Monster(id="m-0", template_id="x", name="X", level=1, hp=0, max_hp=10, abilities=[]),
        Monster(id="m-1", template_id="x", name="X", level=1, hp=5, max_hp=10, abilities=[]),
    ]
    heal = _card(Effect(EffectType.HEAL, TargetType.ALLY, 5))
    hit = _card(Effect(EffectType.DAMAGE, TargetType.MONSTER, 5))
    assert targeting.valid_targets(heal, players, monsters) == ["a"]
    assert targeting.valid_targets(hit, players, monsters) == ["m-1"]


def test_highest_aggro_wins_and_ties_keep_the_first():
    players = [_hero("a", 2), _hero("b", 5), _hero("c", 5)]
    assert targeting.select_monster_targets(_ability(), players, ScriptedDice()) == [players[1]]


def test_taunt_overrides_aggro():
    players = [_hero("a", 9), _hero("b", 0, buffs=[TAUNT])]
    assert targeting.select_monster_targets(_ability(), players, ScriptedDice()) == [players[1]]


def test_stealth_hides_from_single_target():
    players = [_hero("a", 9, buffs=[STEALTH]), _hero("b", 1)]
    assert targeting.select_monster_targets(_ability(), players, ScriptedDice()) == [players[1]]


def test_everyone_stealthed_falls_back_to_first_alive():
    players = [_hero("a", 0, hp=0), _hero("b", 1, buffs=[STEALTH]), _hero("c", 9, buffs=[STEALTH])]
    assert targeting.select_monster_targets(_ability(), players, ScriptedDice()) == [players[1]]


def test_all_and_random_abilities():
    players = [_hero("a"), _hero("b", buffs=[STEALTH]), _hero("c")]
    assert targeting.select_monster_targets(_ability(MonsterTarget.ALL), players, ScriptedDice()) == [
        players[0],
        players[2],
    ]
    dice = ScriptedDice(choice=[1])
    assert targeting.select_monster_targets(_ability(MonsterTarget.RANDOM), players, dice) == [players[2]]
    assert dice.history == [("choice", 1)]


def test_no_living_heroes_means_no_targets():
    players = [_hero("a", hp=0)]
    assert targeting.select_monster_targets(_ability(), players, ScriptedDice()) == []
