"""Campaign and quest definitions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .enums import EliteModifier, EnvironmentType


@dataclass(frozen=True)
class QuestDefinition:
    id: str
    name: str
    description: str
    min_rounds: int
    max_rounds: int
    monster_tiers: Tuple[str, ...]
    monster_level: int
    elite_chance: float
    boss_id: str
    boss_level: int
    environment_pool: Tuple[EnvironmentType, ...] = ()
    boss_elite_modifier: Optional[EliteModifier] = None


@dataclass(frozen=True)
class FinalBossDifficulty:
    hp_multiplier: float = 1.0
    damage_multiplier: float = 1.0
    elite_modifier: Optional[EliteModifier] = None


@dataclass(frozen=True)
class CampaignDefinition:
    id: str
    name: str
    description: str
    difficulty: str
    quests: Tuple[QuestDefinition, ...]
    final_boss_id: str
    final_boss_name: str
    final_boss_difficulty: FinalBossDifficulty = FinalBossDifficulty()


FALLEN_KINGDOM = CampaignDefinition(
    id="fallen-kingdom",
    name="The Fallen Kingdom",
    description="An ancient kingdom corrupted by dark magic. Face the undead hordes and their Lich King.",
    difficulty="normal",
    quests=(
        QuestDefinition("fk-1", "The Blighted Village", "A village overrun by the first wave of undead.",
                        2, 3, ("tier1",), 1, 0.0, "skeleton", 1, (EnvironmentType.CRYPT,)),
        QuestDefinition("fk-2", "The Cursed Forest", "Dark magic has twisted the ancient woods.",
                        2, 4, ("tier1", "tier2"), 1, 0.1, "werewolf", 1,
                        (EnvironmentType.FOREST, EnvironmentType.SWAMP)),
        QuestDefinition("fk-3", "The Haunted Graveyard", "The dead refuse to stay buried.",
                        3, 4, ("tier1", "tier2"), 2, 0.15, "necromancer", 2, (EnvironmentType.CRYPT,)),
        QuestDefinition("fk-4", "The Fallen Cathedral", "A once-holy place now desecrated by dark rituals.",
                        3, 4, ("tier2", "tier3"), 2, 0.2, "vampire", 2,
                        (EnvironmentType.CRYPT, EnvironmentType.CASTLE), EliteModifier.REGENERATING),
        QuestDefinition("fk-5", "The Castle Gates", "The outer defenses of the Lich King's stronghold.",
                        3, 5, ("tier2", "tier3"), 2, 0.25, "dark-knight", 3,
                        (EnvironmentType.CASTLE,), EliteModifier.ARMORED),
        QuestDefinition("fk-6", "The Throne of Bones", "Face the Lich King in his seat of power.",
                        3, 4, ("tier3",), 3, 0.3, "lich-king", 3, (EnvironmentType.CRYPT,)),
    ),
    final_boss_id="lich-king",
    final_boss_name="Aldric the Undying",
    final_boss_difficulty=FinalBossDifficulty(1.75, 1.4, EliteModifier.REGENERATING),
)

CAMPAIGNS: Dict[str, CampaignDefinition] = {FALLEN_KINGDOM.id: FALLEN_KINGDOM}
