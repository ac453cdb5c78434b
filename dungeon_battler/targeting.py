"""Target selection for cards and the aggro rules monsters use to pick victims."""
from __future__ import annotations

from typing import List, Optional

from .dice import Dice
from .enums import MonsterTarget, TargetType
from .models import Card, Monster, MonsterAbility, Player


def needs_target_selection(card: Card) -> bool:
    return any(effect.target in (TargetType.ALLY, TargetType.MONSTER) for effect in card.effects)


def get_target_type(card: Card) -> Optional[TargetType]:
    """Ally takes priority over monster when a card carries both."""
    targets = [effect.target for effect in card.effects]
    if TargetType.ALLY in targets:
        return TargetType.ALLY
    if TargetType.MONSTER in targets:
        return TargetType.MONSTER
    return None


def valid_targets(card: Card, players: List[Player], monsters: List[Monster]) -> List[str]:
    target_type = get_target_type(card)
    if target_type == TargetType.ALLY:
        return [p.id for p in players if p.is_alive]
    if target_type == TargetType.MONSTER:
        return [m.id for m in monsters if m.is_alive]
    return []


def highest_aggro(players: List[Player]) -> Optional[Player]:
    """Highest ``base + dice`` aggro wins; the earlier player keeps a tie."""
    best: Optional[Player] = None
    for player in players:
        if best is None or player.aggro > best.aggro:
            best = player
    return best


def select_monster_targets(ability: MonsterAbility, players: List[Player], dice: Dice) -> List[Player]:
    alive = [p for p in players if p.is_alive]
    if not alive:
        return []
    visible = [p for p in alive if not p.is_stealth]

    if ability.target == MonsterTarget.ALL:
        return visible
    if ability.target == MonsterTarget.RANDOM:
        return [dice.choice(visible)] if visible else []

    if not visible:
        return [alive[0]]
    taunting = next((p for p in visible if p.has_taunt), None)
    if taunting is not None:
        return [taunting]
    return [highest_aggro(visible)]
