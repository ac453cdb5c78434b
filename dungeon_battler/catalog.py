"""Read-only access to every static content table."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .campaigns import CAMPAIGNS, CampaignDefinition
from .cards import CardDatabase
from .classes import CLASS_CONFIGS, ClassConfig
from .enums import ClassType, EliteModifier, EnvironmentType
from .environments import ENVIRONMENTS
from .errors import CatalogError
from .models import Card, Environment, Monster
from .monsters import MONSTER_TEMPLATES, MONSTER_TIERS, ROUNDS, MonsterTemplate, RoundConfig, build_monster


@dataclass
class ContentCatalog:
    """Bundles the content tables a session reads from.

    Tests swap individual tables (for example a custom monster template) by
    passing their own dictionaries. Lookups of unknown ids raise
    :class:`CatalogError`.
    """

    cards: CardDatabase = field(default_factory=CardDatabase)
    classes: Dict[ClassType, ClassConfig] = field(default_factory=lambda: dict(CLASS_CONFIGS))
    monster_templates: Dict[str, MonsterTemplate] = field(default_factory=lambda: dict(MONSTER_TEMPLATES))
    monster_tiers: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: dict(MONSTER_TIERS))
    environments: Dict[EnvironmentType, Environment] = field(default_factory=lambda: dict(ENVIRONMENTS))
    rounds: Dict[int, RoundConfig] = field(default_factory=lambda: dict(ROUNDS))
    campaigns: Dict[str, CampaignDefinition] = field(default_factory=lambda: dict(CAMPAIGNS))

    def card(self, card_id: str) -> Card:
        return self.cards.get(card_id)

    def cards_for_class(self, class_type: ClassType) -> List[Card]:
        return self.cards.for_class(class_type)

    def class_config(self, class_type: ClassType) -> ClassConfig:
        try:
            return self.classes[class_type]
        except KeyError:
            raise CatalogError("class", str(class_type)) from None

    def monster_template(self, template_id: str) -> MonsterTemplate:
        try:
            return self.monster_templates[template_id]
        except KeyError:
            raise CatalogError("monster template", template_id) from None

    def create_monster(
        self, template_id: str, level: int, monster_id: str, elite: Optional[EliteModifier] = None
    ) -> Monster:
        return build_monster(self.monster_template(template_id), level, monster_id, elite)

    def tier_templates(self, tiers: Tuple[str, ...]) -> List[str]:
        ids: List[str] = []
        for tier in tiers:
            if tier not in self.monster_tiers:
                raise CatalogError("monster tier", tier)
            for template_id in self.monster_tiers[tier]:
                if template_id not in ids:
                    ids.append(template_id)
        return ids

    def environment(self, environment_type: EnvironmentType | str) -> Environment:
        try:
            return self.environments[EnvironmentType(environment_type)]
        except (KeyError, ValueError):
            raise CatalogError("environment", str(environment_type)) from None

    def round_config(self, round_number: int) -> RoundConfig:
        try:
            return self.rounds[round_number]
        except KeyError:
            raise CatalogError("round", str(round_number)) from None

    def campaign(self, campaign_id: str) -> CampaignDefinition:
        try:
            return self.campaigns[campaign_id]
        except KeyError:
            raise CatalogError("campaign", campaign_id) from None
