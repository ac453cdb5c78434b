"""Campaign progress: quests, boss gating and round composition."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .campaigns import CampaignDefinition, QuestDefinition
from .enums import CampaignStatus, EliteModifier, GamePhase, LogType
from .models import Environment, Monster
from .monsters import apply_elite_modifier
from .state import CombatState

logger = logging.getLogger(__name__)

MONSTERS_PER_CAMPAIGN_ROUND = 2


@dataclass
class CampaignProgress:
    campaign_id: str
    quest_index: int = 0
    current_round: int = 1
    total_rounds: int = 0
    status: CampaignStatus = CampaignStatus.IN_PROGRESS
    completed_quests: List[str] = field(default_factory=list)


def campaign_definition(state: CombatState) -> CampaignDefinition:
    return state.catalog.campaign(state.campaign.campaign_id)


def current_quest(state: CombatState) -> QuestDefinition:
    return campaign_definition(state).quests[state.campaign.quest_index]


def start_campaign(state: CombatState, campaign_id: str) -> CampaignProgress:
    definition = state.catalog.campaign(campaign_id)
    state.campaign = CampaignProgress(campaign_id=definition.id)
    state.add_log(f"The campaign {definition.name} begins", LogType.INFO)
    start_quest(state, 0)
    return state.campaign


def start_quest(state: CombatState, quest_index: int) -> QuestDefinition:
    progress = state.campaign
    quests = campaign_definition(state).quests
    quest = quests[quest_index]
    progress.quest_index = quest_index
    progress.current_round = 1
    # the boss round comes on top of the rolled regular rounds
    progress.total_rounds = state.dice.randint(quest.min_rounds, quest.max_rounds) + 1
    state.round = 1
    state.max_rounds = progress.total_rounds
    state.add_log(f"Quest {quest.name}: {progress.total_rounds} rounds ahead", LogType.INFO)
    logger.debug("Quest %s started with %d rounds", quest.id, progress.total_rounds)
    return quest


def is_boss_round(progress: CampaignProgress) -> bool:
    return progress.current_round >= progress.total_rounds


def is_final_quest(state: CombatState) -> bool:
    return state.campaign.quest_index >= len(campaign_definition(state).quests) - 1


def build_campaign_round(state: CombatState) -> Tuple[List[Monster], Optional[Environment]]:
    """Monsters and environment for the campaign's current round."""
    quest = current_quest(state)
    progress = state.campaign
    if is_boss_round(progress):
        monsters = [_build_boss(state, quest)]
    else:
        pool = state.catalog.tier_templates(quest.monster_tiers)
        monsters = []
        for idx in range(min(MONSTERS_PER_CAMPAIGN_ROUND, len(pool))):
            template_id = state.dice.choice(pool)
            pool = [t for t in pool if t != template_id]
            elite = None
            if state.dice.chance() < quest.elite_chance:
                elite = state.dice.choice(list(EliteModifier))
            monsters.append(
                state.catalog.create_monster(template_id, quest.monster_level, f"{template_id}-{idx}", elite)
            )

    environment = None
    if quest.environment_pool:
        environment = state.catalog.environment(state.dice.choice(quest.environment_pool))
    return monsters, environment


def _build_boss(state: CombatState, quest: QuestDefinition) -> Monster:
    definition = campaign_definition(state)
    boss = state.catalog.create_monster(quest.boss_id, quest.boss_level, f"{quest.boss_id}-boss")
    elite = quest.boss_elite_modifier
    if is_final_quest(state) and quest.boss_id == definition.final_boss_id:
        difficulty = definition.final_boss_difficulty
        boss.max_hp = math.floor(boss.max_hp * difficulty.hp_multiplier)
        boss.hp = boss.max_hp
        boss.damage_multiplier = difficulty.damage_multiplier
        boss.name = definition.final_boss_name
        elite = elite or difficulty.elite_modifier
    if elite is not None:
        apply_elite_modifier(boss, elite)
    return boss


def complete_quest(state: CombatState) -> GamePhase:
    """Record the quest and report the phase the session should enter."""
    quest = current_quest(state)
    state.campaign.completed_quests.append(quest.id)
    state.add_log(f"Quest complete: {quest.name}!", LogType.INFO)
    if is_final_quest(state):
        complete_campaign(state)
        return GamePhase.CAMPAIGN_COMPLETE
    return GamePhase.QUEST_COMPLETE


def advance_to_next_quest(state: CombatState) -> QuestDefinition:
    return start_quest(state, state.campaign.quest_index + 1)


def complete_campaign(state: CombatState) -> None:
    state.campaign.status = CampaignStatus.COMPLETED
    state.add_log(f"{campaign_definition(state).name} is complete!", LogType.INFO)


def fail_campaign(state: CombatState) -> None:
    state.campaign.status = CampaignStatus.FAILED
    state.add_log("The party has fallen. The quest has failed.", LogType.INFO)
