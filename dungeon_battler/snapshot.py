"""Versioned, serialisable snapshots of a combat state.

The host publishes a ``CombatSnapshot`` after every change and followers
rebuild their in-memory state from it. ``to_snapshot`` followed by
``from_snapshot`` reproduces the phase, the active index and the party and
monster lists.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from .campaign import CampaignProgress
from .enums import (
    BardSong,
    CampaignStatus,
    ClassType,
    EffectType,
    EliteModifier,
    EnvironmentEffectType,
    EnvironmentType,
    GamePhase,
    LogType,
    MonsterTarget,
    Rarity,
    TargetType,
)
from .errors import SnapshotError
from .models import (
    AbilityDebuff,
    Attributes,
    Card,
    Effect,
    Environment,
    EnvironmentModifier,
    LogEntry,
    Monster,
    MonsterAbility,
    Player,
    PlayerSelection,
    StatusEffect,
)
from .state import CombatState

SNAPSHOT_SCHEMA = 1


class EffectModel(BaseModel):
    type: EffectType
    target: TargetType
    value: int = 0
    duration: Optional[int] = None


class CardModel(BaseModel):
    id: str
    name: str
    class_type: ClassType
    rarity: str
    aggro: int
    description: str = ""
    effects: List[EffectModel] = Field(default_factory=list)
    template_id: str = ""


class StatusEffectModel(BaseModel):
    type: EffectType
    value: int
    duration: int
    source: str = ""
    action_tracked: bool = False


class PlayerModel(BaseModel):
    id: str
    name: str
    class_type: ClassType
    hp: int
    max_hp: int
    max_resource: int
    resource: int = 0
    shield: int = 0
    deck: List[CardModel] = Field(default_factory=list)
    hand: List[CardModel] = Field(default_factory=list)
    discard: List[CardModel] = Field(default_factory=list)
    base_aggro: int = 0
    dice_aggro: int = 0
    buffs: List[StatusEffectModel] = Field(default_factory=list)
    debuffs: List[StatusEffectModel] = Field(default_factory=list)
    gold: int = 0
    attributes: Dict[str, int] = Field(default_factory=dict)
    champion_id: Optional[str] = None
    bard_song: Optional[BardSong] = None


class AbilityDebuffModel(BaseModel):
    type: EffectType
    value: int
    duration: int


class MonsterAbilityModel(BaseModel):
    roll: int
    name: str
    description: str = ""
    damage: int
    target: MonsterTarget = MonsterTarget.SINGLE
    debuff: Optional[AbilityDebuffModel] = None


class MonsterModel(BaseModel):
    id: str
    template_id: str
    name: str
    level: int
    hp: int
    max_hp: int
    abilities: List[MonsterAbilityModel]
    shield: int = 0
    buffs: List[StatusEffectModel] = Field(default_factory=list)
    debuffs: List[StatusEffectModel] = Field(default_factory=list)
    intent: Optional[MonsterAbilityModel] = None
    elite_modifier: Optional[EliteModifier] = None
    damage_reduction: float = 0.0
    damage_multiplier: float = 1.0
    gold_reward: int = 0
    xp_reward: int = 0


class EnvironmentModifierModel(BaseModel):
    type: EnvironmentEffectType
    value: float
    description: str = ""


class EnvironmentModel(BaseModel):
    type: EnvironmentType
    name: str
    description: str = ""
    effects: List[EnvironmentModifierModel] = Field(default_factory=list)


class LogEntryModel(BaseModel):
    id: str
    turn: int
    phase: GamePhase
    message: str
    type: LogType
    is_sub_entry: bool = False


class SelectionModel(BaseModel):
    player_id: str
    card_id: Optional[str] = None
    target_id: Optional[str] = None
    enhance: bool = False
    ready: bool = False


class CampaignProgressModel(BaseModel):
    campaign_id: str
    quest_index: int = 0
    current_round: int = 1
    total_rounds: int = 0
    status: CampaignStatus = CampaignStatus.IN_PROGRESS
    completed_quests: List[str] = Field(default_factory=list)


class CombatSnapshot(BaseModel):
    schema_version: int = SNAPSHOT_SCHEMA
    version: int
    phase: GamePhase
    turn: int
    round: int
    max_rounds: int
    current_player_index: int
    selected_card_id: Optional[str] = None
    selected_target_id: Optional[str] = None
    enhance_mode: bool = False
    players: List[PlayerModel]
    monsters: List[MonsterModel]
    environment: Optional[EnvironmentModel] = None
    selections: Dict[str, SelectionModel] = Field(default_factory=dict)
    log: List[LogEntryModel] = Field(default_factory=list)
    log_seq: int = 0
    reward_player_index: int = 0
    reward_options: List[CardModel] = Field(default_factory=list)
    campaign: Optional[CampaignProgressModel] = None


# ----------------------------------------------------------------------
# State -> snapshot
# ----------------------------------------------------------------------


def _card_model(card: Card) -> CardModel:
    return CardModel(
        id=card.id,
        name=card.name,
        class_type=card.class_type,
        rarity=card.rarity.label,
        aggro=card.aggro,
        description=card.description,
        effects=[EffectModel(type=e.type, target=e.target, value=e.value, duration=e.duration) for e in card.effects],
        template_id=card.template_id,
    )


def _status_models(statuses: List[StatusEffect]) -> List[StatusEffectModel]:
    return [StatusEffectModel(**vars(s)) for s in statuses]


def _ability_model(ability: MonsterAbility) -> MonsterAbilityModel:
    debuff = None
    if ability.debuff is not None:
        debuff = AbilityDebuffModel(type=ability.debuff.type, value=ability.debuff.value,
                                    duration=ability.debuff.duration)
    return MonsterAbilityModel(
        roll=ability.roll,
        name=ability.name,
        description=ability.description,
        damage=ability.damage,
        target=ability.target,
        debuff=debuff,
    )


def _player_model(player: Player) -> PlayerModel:
    return PlayerModel(
        id=player.id,
        name=player.name,
        class_type=player.class_type,
        hp=player.hp,
        max_hp=player.max_hp,
        max_resource=player.max_resource,
        resource=player.resource,
        shield=player.shield,
        deck=[_card_model(c) for c in player.deck],
        hand=[_card_model(c) for c in player.hand],
        discard=[_card_model(c) for c in player.discard],
        base_aggro=player.base_aggro,
        dice_aggro=player.dice_aggro,
        buffs=_status_models(player.buffs),
        debuffs=_status_models(player.debuffs),
        gold=player.gold,
        attributes=player.attributes.to_dict(),
        champion_id=player.champion_id,
        bard_song=player.bard_song,
    )


def _monster_model(monster: Monster) -> MonsterModel:
    return MonsterModel(
        id=monster.id,
        template_id=monster.template_id,
        name=monster.name,
        level=monster.level,
        hp=monster.hp,
        max_hp=monster.max_hp,
        abilities=[_ability_model(a) for a in monster.abilities],
        shield=monster.shield,
        buffs=_status_models(monster.buffs),
        debuffs=_status_models(monster.debuffs),
        intent=_ability_model(monster.intent) if monster.intent else None,
        elite_modifier=monster.elite_modifier,
        damage_reduction=monster.damage_reduction,
        damage_multiplier=monster.damage_multiplier,
        gold_reward=monster.gold_reward,
        xp_reward=monster.xp_reward,
    )


def _environment_model(environment: Optional[Environment]) -> Optional[EnvironmentModel]:
    if environment is None:
        return None
    return EnvironmentModel(
        type=environment.type,
        name=environment.name,
        description=environment.description,
        effects=[EnvironmentModifierModel(type=m.type, value=m.value, description=m.description)
                 for m in environment.effects],
    )


def to_snapshot(state: CombatState, log_tail: int = 50) -> CombatSnapshot:
    progress = state.campaign
    return CombatSnapshot(
        version=state.version,
        phase=state.phase,
        turn=state.turn,
        round=state.round,
        max_rounds=state.max_rounds,
        current_player_index=state.current_player_index,
        selected_card_id=state.selected_card_id,
        selected_target_id=state.selected_target_id,
        enhance_mode=state.enhance_mode,
        players=[_player_model(p) for p in state.players],
        monsters=[_monster_model(m) for m in state.monsters],
        environment=_environment_model(state.environment),
        selections={pid: SelectionModel(**vars(sel)) for pid, sel in state.selections.items()},
        log=[LogEntryModel(**vars(entry)) for entry in state.log[-log_tail:]] if log_tail else [],
        log_seq=state.log_seq,
        reward_player_index=state.reward_player_index,
        reward_options=[_card_model(c) for c in state.reward_options],
        campaign=CampaignProgressModel(**vars(progress)) if progress else None,
    )


# ----------------------------------------------------------------------
# Snapshot -> state
# ----------------------------------------------------------------------


def _card(model: CardModel) -> Card:
    return Card(
        id=model.id,
        name=model.name,
        class_type=model.class_type,
        rarity=Rarity.from_label(model.rarity),
        aggro=model.aggro,
        description=model.description,
        effects=tuple(Effect(e.type, e.target, e.value, e.duration) for e in model.effects),
        template_id=model.template_id,
    )


def _statuses(models: List[StatusEffectModel]) -> List[StatusEffect]:
    return [StatusEffect(**m.model_dump()) for m in models]


def _ability(model: MonsterAbilityModel) -> MonsterAbility:
    debuff = AbilityDebuff(model.debuff.type, model.debuff.value, model.debuff.duration) if model.debuff else None
    return MonsterAbility(model.roll, model.name, model.description, model.damage, model.target, debuff)


def _player(model: PlayerModel) -> Player:
    return Player(
        id=model.id,
        name=model.name,
        class_type=model.class_type,
        hp=model.hp,
        max_hp=model.max_hp,
        max_resource=model.max_resource,
        resource=model.resource,
        shield=model.shield,
        deck=[_card(c) for c in model.deck],
        hand=[_card(c) for c in model.hand],
        discard=[_card(c) for c in model.discard],
        base_aggro=model.base_aggro,
        dice_aggro=model.dice_aggro,
        buffs=_statuses(model.buffs),
        debuffs=_statuses(model.debuffs),
        gold=model.gold,
        attributes=Attributes.from_dict(model.attributes),
        champion_id=model.champion_id,
        bard_song=model.bard_song,
    )


def _monster(model: MonsterModel) -> Monster:
    return Monster(
        id=model.id,
        template_id=model.template_id,
        name=model.name,
        level=model.level,
        hp=model.hp,
        max_hp=model.max_hp,
        abilities=[_ability(a) for a in model.abilities],
        shield=model.shield,
        buffs=_statuses(model.buffs),
        debuffs=_statuses(model.debuffs),
        intent=_ability(model.intent) if model.intent else None,
        elite_modifier=model.elite_modifier,
        damage_reduction=model.damage_reduction,
        damage_multiplier=model.damage_multiplier,
        gold_reward=model.gold_reward,
        xp_reward=model.xp_reward,
    )


def _environment(model: Optional[EnvironmentModel]) -> Optional[Environment]:
    if model is None:
        return None
    return Environment(
        model.type,
        model.name,
        model.description,
        tuple(EnvironmentModifier(m.type, m.value, m.description) for m in model.effects),
    )


def parse_snapshot(data: Union[CombatSnapshot, Mapping[str, Any]]) -> CombatSnapshot:
    if isinstance(data, CombatSnapshot):
        return data
    try:
        snapshot = CombatSnapshot.model_validate(data)
    except ValidationError as exc:
        raise SnapshotError(f"Malformed snapshot: {exc}") from exc
    if snapshot.schema_version != SNAPSHOT_SCHEMA:
        raise SnapshotError(f"Unsupported snapshot schema {snapshot.schema_version}")
    return snapshot


def from_snapshot(data: Union[CombatSnapshot, Mapping[str, Any]], state: CombatState) -> CombatState:
    """Overwrite ``state`` with the snapshot's contents and return it.

    Log entries already known locally are kept; unseen ones from the tail
    are appended in order.
    """
    snapshot = parse_snapshot(data)
    state.version = snapshot.version
    state.phase = snapshot.phase
    state.turn = snapshot.turn
    state.round = snapshot.round
    state.max_rounds = snapshot.max_rounds
    state.current_player_index = snapshot.current_player_index
    state.selected_card_id = snapshot.selected_card_id
    state.selected_target_id = snapshot.selected_target_id
    state.enhance_mode = snapshot.enhance_mode
    state.players = [_player(p) for p in snapshot.players]
    state.monsters = [_monster(m) for m in snapshot.monsters]
    state.environment = _environment(snapshot.environment)
    state.selections = {pid: PlayerSelection(**sel.model_dump()) for pid, sel in snapshot.selections.items()}
    known = {entry.id for entry in state.log}
    for entry in snapshot.log:
        if entry.id not in known:
            state.log.append(LogEntry(**entry.model_dump()))
    state.log_seq = max(state.log_seq, snapshot.log_seq)
    state.reward_player_index = snapshot.reward_player_index
    state.reward_options = [_card(c) for c in snapshot.reward_options]
    state.campaign = CampaignProgress(**snapshot.campaign.model_dump()) if snapshot.campaign else None
    return state
