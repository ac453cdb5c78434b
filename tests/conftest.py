import pytest

from dungeon_battler import ContentCatalog, GameSession
from dungeon_battler.config import CombatConfig
from dungeon_battler.dice import ScriptedDice
from dungeon_battler.models import MonsterAbility
from dungeon_battler.monsters import MonsterTemplate


def dummy_template(hp: int = 20, damage: int = 5) -> MonsterTemplate:
    return MonsterTemplate("dummy", "Training Dummy", hp, (MonsterAbility(1, "Bonk", "Swings wildly.", damage),))


@pytest.fixture
def dummy_catalog():
    def build(hp: int = 20, damage: int = 5, **tables) -> ContentCatalog:
        templates = {"dummy": dummy_template(hp, damage)}
        return ContentCatalog(monster_templates=templates, monster_tiers={"tier1": ("dummy",)}, **tables)

    return build


@pytest.fixture
def make_session(dummy_catalog):
    def build(hp: int = 20, damage: int = 5, dice=None, config=None, **tables) -> GameSession:
        return GameSession(
            config=config or CombatConfig(),
            catalog=dummy_catalog(hp, damage, **tables),
            dice=dice or ScriptedDice(),
        )

    return build
