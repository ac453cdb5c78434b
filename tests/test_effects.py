import copy
import logging
import math

import pytest

from dungeon_battler.dice import ScriptedDice
from dungeon_battler.effects import (
    absorb_with_shield,
    apply_effect,
    crit_chance,
    dodge_chance,
    scale_damage,
    scale_heal,
    scale_shield,
)
from dungeon_battler.enums import (
    ClassType,
    EffectType,
    EliteModifier,
    EnvironmentEffectType,
    EnvironmentType,
    TargetType,
)
from dungeon_battler.environments import ENVIRONMENTS
from dungeon_battler.models import Attributes, Effect, Monster, MonsterAbility, Player, StatusEffect


def _hero(pid="player-0", class_type=ClassType.FIGHTER, **kwargs) -> Player:
    defaults = dict(id=pid, name=pid.title(), class_type=class_type, hp=50, max_hp=50, max_resource=10)
    defaults.update(kwargs)
    return Player(**defaults)


def _monster(mid="dummy-0", hp=40, **kwargs) -> Monster:
    return Monster(
        id=mid,
        template_id="dummy",
        name="Training Dummy",
        level=1,
        hp=hp,
        max_hp=hp,
        abilities=[MonsterAbility(1, "Bonk", "", 5)],
        gold_reward=5,
        xp_reward=10,
        **kwargs,
    )


def _hit(value=10, target=TargetType.MONSTER):
    return Effect(EffectType.DAMAGE, target, value)


def test_attribute_scaling_formulas():
    strong = _hero(attributes=Attributes(strength=20))
    clever = _hero(class_type=ClassType.MAGE, attributes=Attributes(intelligence=15, strength=1))
    assert scale_damage(10, strong) == 13
    # arcane classes scale with intelligence
    assert scale_damage(10, clever) == 12
    assert scale_heal(10, _hero(attributes=Attributes(wisdom=20))) == 13
    assert scale_shield(10, _hero(attributes=Attributes(constitution=14))) == 11
    assert crit_chance(10) == 0.05
    assert dodge_chance(10) == 0.0
    assert dodge_chance(30) == pytest.approx(0.1)


def test_damage_hits_target_and_leaves_inputs_untouched():
    hero, monster = _hero(), _monster()
    players, monsters = [hero], [monster]
    result = apply_effect(_hit(), hero, players, monsters, 1, "dummy-0", dice=ScriptedDice())
    assert result.monsters[0].hp == 30
    assert monsters[0].hp == 40
    assert result.damage_dealt == 10
    assert [(d.target_id, d.value) for d in result.damage_numbers] == [("dummy-0", 10)]


def test_three_draws_per_struck_monster():
    hero = _hero()
    dice = ScriptedDice()
    apply_effect(
        _hit(target=TargetType.ALL_MONSTERS),
        hero,
        [hero],
        [_monster("a"), _monster("b")],
        1,
        dice=dice,
    )
    assert [kind for kind, _ in dice.history] == ["d20", "chance", "chance"] * 2


def test_critical_hit_uses_luck_multiplier():
    hero = _hero()
    result = apply_effect(_hit(), hero, [hero], [_monster()], 1, dice=ScriptedDice(chance=[0.01]))
    assert result.monsters[0].hp == 40 - 15
    assert any("Critical hit" in e.message for e in result.logs)


def test_accuracy_penalty_can_miss():
    hero = _hero(debuffs=[StatusEffect(EffectType.ACCURACY, 5, 2)])
    result = apply_effect(_hit(), hero, [hero], [_monster()], 1, dice=ScriptedDice(d20=[3]))
    assert result.monsters[0].hp == 40
    assert "misses" in result.logs[0].message

    result = apply_effect(_hit(), hero, [hero], [_monster()], 1, dice=ScriptedDice(d20=[6]))
    assert result.monsters[0].hp == 30


def test_modifiers_stack_in_order():
    hero = _hero()
    monster = _monster(
        debuffs=[StatusEffect(EffectType.VULNERABLE, 1, 1)],
        elite_modifier=EliteModifier.ARMORED,
        damage_reduction=0.25,
    )
    void = ENVIRONMENTS[EnvironmentType.VOID]
    result = apply_effect(_hit(20), hero, [hero], [monster], 1, environment=void, dice=ScriptedDice())
    boosted = math.floor(20 * void.multiplier(EnvironmentEffectType.DAMAGE_BONUS))
    expected = math.floor(math.floor(boosted * 1.5) * 0.75)
    assert expected == 27
    assert result.monsters[0].hp == 40 - expected


def test_shield_absorbs_before_hp():
    monster = _monster(shield=6)
    assert absorb_with_shield(monster, 10) == 4
    assert monster.shield == 0
    assert monster.hp == 36


def test_kill_splits_gold_and_credits_xp():
    alive = _hero("player-0", champion_id="champ")
    other = _hero("player-1")
    fallen = _hero("player-2", hp=0)
    result = apply_effect(_hit(), alive, [alive, other, fallen], [_monster(hp=5)], 1, dice=ScriptedDice())
    assert [p.gold for p in result.players] == [2, 2, 0]
    assert result.xp_earned == {"champ": 10}


def test_heal_caps_at_max_and_never_revives():
    healer = _hero("player-0", class_type=ClassType.CLERIC)
    hurt = _hero("player-1", hp=45)
    dead = _hero("player-2", hp=0)
    heal = Effect(EffectType.HEAL, TargetType.ALL_ALLIES, 12)
    result = apply_effect(heal, healer, [healer, hurt, dead], [_monster()], 1, dice=ScriptedDice())
    assert [p.hp for p in result.players] == [50, 50, 0]
    assert result.healing_done == 5


def test_heal_on_a_fallen_chosen_ally_does_nothing():
    healer = _hero("player-0", class_type=ClassType.CLERIC, hp=20)
    dead = _hero("player-1", hp=0)
    heal = Effect(EffectType.HEAL, TargetType.ALLY, 12)
    result = apply_effect(heal, healer, [healer, dead], [_monster()], 1, "player-1", dice=ScriptedDice())
    assert [p.hp for p in result.players] == [20, 0]
    assert result.healing_done == 0


def test_ally_effect_without_a_target_picks_another_living_ally():
    healer = _hero("player-0", class_type=ClassType.CLERIC, hp=20)
    dead = _hero("player-1", hp=0)
    hurt = _hero("player-2", hp=30)
    heal = Effect(EffectType.HEAL, TargetType.ALLY, 12)
    result = apply_effect(heal, healer, [healer, dead, hurt], [_monster()], 1, dice=ScriptedDice())
    assert [p.hp for p in result.players] == [20, 0, 42]


def test_strike_on_a_fallen_chosen_monster_is_not_redirected():
    hero = _hero()
    monsters = [_monster("a", hp=0), _monster("b")]
    dice = ScriptedDice()
    result = apply_effect(_hit(), hero, [hero], monsters, 1, "a", dice=dice)
    assert [m.hp for m in result.monsters] == [0, 40]
    assert result.damage_dealt == 0
    assert dice.history == []

    result = apply_effect(_hit(), hero, [hero], monsters, 1, dice=ScriptedDice())
    assert [m.hp for m in result.monsters] == [0, 30]


def test_revive_and_cleanse():
    caster = _hero("player-0", class_type=ClassType.CLERIC)
    fallen = _hero("player-1", hp=0, debuffs=[StatusEffect(EffectType.POISON, 2, 2)])
    result = apply_effect(
        Effect(EffectType.REVIVE, TargetType.ALLY, 50), caster, [caster, fallen], [], 1, dice=ScriptedDice()
    )
    assert result.players[1].hp == 25
    assert result.players[1].debuffs == []

    caster.debuffs.append(StatusEffect(EffectType.BURN, 3, 2))
    result = apply_effect(Effect(EffectType.CLEANSE, TargetType.SELF), caster, [caster], [], 1, dice=ScriptedDice())
    assert result.players[0].debuffs == []


def test_buffs_and_debuffs_land_on_the_right_side():
    hero = _hero()
    monster = _monster()
    result = apply_effect(
        Effect(EffectType.TAUNT, TargetType.SELF, 1, 2), hero, [hero], [monster], 1, dice=ScriptedDice()
    )
    assert result.players[0].has_taunt
    result = apply_effect(
        Effect(EffectType.POISON, TargetType.MONSTER, 3, 2), hero, [hero], [monster], 1, "dummy-0",
        dice=ScriptedDice(),
    )
    assert result.monsters[0].debuffs[0].type == EffectType.POISON


def test_cursed_elite_afflicts_attacker():
    hero = _hero()
    monster = _monster(elite_modifier=EliteModifier.CURSED)
    result = apply_effect(_hit(), hero, [hero], [monster], 1, dice=ScriptedDice(choice=[1]))
    assert [d.type for d in result.players[0].debuffs] == [EffectType.BURN]


def test_self_damage_uses_shield():
    hero = _hero(shield=2)
    result = apply_effect(_hit(3, TargetType.SELF), hero, [hero], [_monster()], 1, dice=ScriptedDice())
    assert result.players[0].hp == 49
    assert result.players[0].shield == 0


def test_replaying_the_same_rolls_is_deterministic():
    hero = _hero()
    monsters = [_monster("a"), _monster("b")]
    rolls = dict(d20=[4, 17], chance=[0.02, 0.9, 0.5, 0.5])
    first = apply_effect(_hit(target=TargetType.ALL_MONSTERS), hero, [hero], copy.deepcopy(monsters), 1,
                         dice=ScriptedDice(**rolls))
    second = apply_effect(_hit(target=TargetType.ALL_MONSTERS), hero, [hero], copy.deepcopy(monsters), 1,
                          dice=ScriptedDice(**rolls))
    assert [m.hp for m in first.monsters] == [m.hp for m in second.monsters]
    assert [e.message for e in first.logs] == [e.message for e in second.logs]


def test_unknown_effect_type_is_ignored(caplog):
    hero = _hero()
    bogus = Effect("teleport", TargetType.SELF, 1)
    with caplog.at_level(logging.WARNING, logger="dungeon_battler.effects"):
        result = apply_effect(bogus, hero, [hero], [_monster()], 1, dice=ScriptedDice())
    assert result.players[0].hp == 50
    assert "unsupported type" in caplog.text
