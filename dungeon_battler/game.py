"""Game orchestration: party setup, rounds, checkpoints and progression."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from . import campaign, combat, constants, rewards
from .catalog import ContentCatalog
from .config import CombatConfig
from .dice import Dice
from .enums import ClassType, EliteModifier, EnvironmentType, GamePhase, LogType, PlayMode
from .environments import environment_for_round
from .models import Attributes, Environment, Monster, Player
from .phases import defeat_phase, next_alive_index, next_phase, reset_phase, transition
from .progression import InMemoryLedger, ProgressionLedger
from .sequential import SequentialDriver
from .simultaneous import SimultaneousDriver
from .state import CombatState

logger = logging.getLogger(__name__)


@dataclass
class HeroSpec:
    """A hero to seat at the table. Without ``card_ids`` the class starter deck is used."""

    class_type: ClassType
    card_ids: List[str] = field(default_factory=list)
    name: Optional[str] = None
    attributes: Optional[Attributes] = None
    hp: Optional[int] = None
    champion_id: Optional[str] = None


@dataclass
class MonsterSpec:
    template_id: str
    level: int = 1
    elite: Optional[EliteModifier] = None


class GameSession:
    """Complete state and flow for one party's run."""

    def __init__(
        self,
        config: Optional[CombatConfig] = None,
        catalog: Optional[ContentCatalog] = None,
        ledger: Optional[ProgressionLedger] = None,
        dice: Optional[Dice] = None,
    ) -> None:
        self.config = config or CombatConfig()
        self.catalog = catalog or ContentCatalog()
        self.ledger = ledger or InMemoryLedger()
        self.state = CombatState(
            max_rounds=self.config.max_rounds,
            config=self.config,
            dice=dice or Dice(self.config.seed),
            catalog=self.catalog,
            ledger=self.ledger,
        )
        self.sequential = SequentialDriver(self)
        self.simultaneous = SimultaneousDriver(self)

    @property
    def mode(self) -> PlayMode:
        return self.config.mode

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def build_player(self, spec: HeroSpec, index: int) -> Player:
        config = self.catalog.class_config(spec.class_type)
        templates = (
            [self.catalog.card(card_id) for card_id in spec.card_ids]
            if spec.card_ids
            else self.catalog.cards.starter_deck(spec.class_type)
        )
        cards = [t.instance(f"{t.template_id}-{index}-{i}") for i, t in enumerate(templates)]
        hp = spec.hp if spec.hp is not None else config.base_hp
        return Player(
            id=f"player-{index}",
            name=spec.name or config.name,
            class_type=spec.class_type,
            hp=hp,
            max_hp=hp,
            max_resource=config.max_resource,
            deck=self.state.dice.shuffle(cards),
            attributes=spec.attributes or Attributes(),
            champion_id=spec.champion_id,
        )

    def start_game(self, heroes: List[HeroSpec], campaign_id: Optional[str] = None) -> CombatState:
        """Seat the party and open round one, optionally inside a campaign."""
        state = self.state
        state.players = [self.build_player(spec, idx) for idx, spec in enumerate(heroes)]
        state.round = 1
        state.turn = 1
        state.max_rounds = self.config.max_rounds
        if campaign_id is not None:
            campaign.start_campaign(state, campaign_id)
        self.start_round()
        return state

    def start_mock_battle(
        self,
        heroes: List[HeroSpec],
        monsters: List[MonsterSpec],
        environment: Optional[EnvironmentType] = None,
    ) -> CombatState:
        """Jump straight into a single fight with an explicit roster."""
        state = self.state
        state.players = [self.build_player(spec, idx) for idx, spec in enumerate(heroes)]
        state.round = 1
        state.turn = 1
        state.max_rounds = 1
        roster = [
            self.catalog.create_monster(spec.template_id, spec.level, f"{spec.template_id}-{idx}", spec.elite)
            for idx, spec in enumerate(monsters)
        ]
        env = self.catalog.environment(environment) if environment is not None else None
        self.start_round(roster, env)
        return state

    # ------------------------------------------------------------------
    # Round flow
    # ------------------------------------------------------------------

    def _round_roster(self) -> Tuple[List[Monster], Optional[Environment]]:
        state = self.state
        if state.campaign is not None:
            return campaign.build_campaign_round(state)
        config = self.catalog.round_config(state.round)
        monsters = [
            self.catalog.create_monster(template_id, level, f"{template_id}-{idx}")
            for idx, (template_id, level) in enumerate(config.monsters)
        ]
        return monsters, environment_for_round(state.round, state.dice)

    def start_round(
        self, monsters: Optional[List[Monster]] = None, environment: Optional[Environment] = None
    ) -> None:
        state = self.state
        if monsters is None:
            monsters, environment = self._round_roster()
        state.monsters = monsters
        state.environment = environment
        state.selections = {}
        state.reward_options = []
        reset_phase(state, GamePhase.DRAW)
        state.add_log(f"Round {state.round} begins!", LogType.INFO)
        if environment is not None:
            state.add_log(f"The battle takes place in {environment.name}", LogType.INFO)
        if state.all_players_dead():
            self._defeat()
            return
        combat.roll_intents(state)
        self.begin_turn()

    def begin_turn(self) -> None:
        state = self.state
        state.current_player_index = max(0, next_alive_index(state, 0))
        if self.mode == PlayMode.SEQUENTIAL:
            self.sequential.draw()
        else:
            self.simultaneous.draw_all()

    def after_player_action(self) -> None:
        """Checkpoint after PLAYER_ACTION or RESOLVE."""
        state = self.state
        target = next_phase(state)
        if target in (GamePhase.REWARD, GamePhase.SHOP):
            self._clear_round(target)
        elif target in (GamePhase.DEFEAT, GamePhase.QUEST_FAILED):
            self._defeat()
        elif target == GamePhase.DRAW:
            state.current_player_index = next_alive_index(state, state.current_player_index + 1)
            transition(state, GamePhase.DRAW)
            self.sequential.draw()
        else:
            transition(state, GamePhase.MONSTER_ACTION)
            self.run_monster_phase()

    def run_monster_phase(self) -> None:
        state = self.state
        if state.phase != GamePhase.MONSTER_ACTION:
            transition(state, GamePhase.MONSTER_ACTION)
        combat.run_monster_actions(state)
        if next_phase(state) != GamePhase.DEBUFF_RESOLUTION:
            self._defeat()
            return

        transition(state, GamePhase.DEBUFF_RESOLUTION)
        combat.resolve_debuffs(state)
        target = next_phase(state)
        if target in (GamePhase.DEFEAT, GamePhase.QUEST_FAILED):
            self._defeat()
        elif target in (GamePhase.REWARD, GamePhase.SHOP):
            self._clear_round(target)
        else:
            transition(state, GamePhase.END_TURN)
            self.end_turn()

    def end_turn(self) -> None:
        state = self.state
        for player in state.alive_players():
            if player.class_type == ClassType.MAGE:
                player.resource = min(player.max_resource, player.resource + constants.MAGE_MANA_REGEN)
        if next_phase(state) != GamePhase.DRAW:
            self._defeat()
            return
        state.turn += 1
        combat.roll_intents(state)
        transition(state, GamePhase.DRAW)
        self.begin_turn()

    def _clear_round(self, phase: GamePhase) -> None:
        state = self.state
        transition(state, phase)
        state.add_log(f"Round {state.round} cleared!", LogType.INFO)
        rewards.open_round_clear(state)
        if rewards.is_finished(state):
            self.next_round()

    def _defeat(self) -> None:
        state = self.state
        transition(state, defeat_phase(state))
        if state.campaign is not None:
            campaign.fail_campaign(state)
        else:
            state.add_log("The party has been defeated.", LogType.INFO)

    # ------------------------------------------------------------------
    # Rewards & shop
    # ------------------------------------------------------------------

    def choose_reward(self, player_id: str, card_id: str) -> Tuple[bool, str]:
        return self._after_reward(rewards.choose_reward(self.state, player_id, card_id))

    def buy_card(self, player_id: str, card_id: str) -> Tuple[bool, str]:
        return self._after_reward(rewards.buy_card(self.state, player_id, card_id))

    def skip_reward(self, player_id: str) -> Tuple[bool, str]:
        return self._after_reward(rewards.skip(self.state, player_id))

    def _after_reward(self, outcome: Tuple[bool, str]) -> Tuple[bool, str]:
        if outcome[0] and rewards.is_finished(self.state):
            self.next_round()
        return outcome

    # ------------------------------------------------------------------
    # Progression
    # ------------------------------------------------------------------

    def next_round(self) -> None:
        state = self.state
        progress = state.campaign
        if progress is not None:
            if campaign.is_boss_round(progress):
                transition(state, campaign.complete_quest(state))
                self._award_champion_gold()
                return
        elif state.round >= state.max_rounds:
            transition(state, GamePhase.VICTORY)
            state.add_log("Victory! The dungeon is cleared.", LogType.INFO)
            self._award_champion_gold()
            return

        self._recover_between_rounds()
        state.round += 1
        state.turn += 1
        if progress is not None:
            progress.current_round += 1
        self.start_round()

    def start_next_quest(self) -> Tuple[bool, str]:
        state = self.state
        if state.phase != GamePhase.QUEST_COMPLETE:
            return False, "No quest to continue"
        quest = campaign.advance_to_next_quest(state)
        self._recover_between_rounds()
        state.turn += 1
        self.start_round()
        return True, f"Starting {quest.name}"

    def _recover_between_rounds(self) -> None:
        state = self.state
        alive = state.alive_players()
        for player in alive:
            player.hp += math.floor((player.max_hp - player.hp) * self.config.heal_percent)
            player.base_aggro = 0
            player.dice_aggro = 0
            player.gold += self.config.gold_per_alive_player
            player.deck = state.dice.shuffle([*player.deck, *player.hand, *player.discard])
            player.hand = []
            player.discard = []
        if alive:
            self.ledger.add_user_gold(self.config.gold_per_alive_player * len(alive))

    def _award_champion_gold(self) -> None:
        earned: Dict[str, int] = {}
        for player in self.state.players:
            if player.champion_id and player.gold > 0:
                earned[player.champion_id] = earned.get(player.champion_id, 0) + player.gold
        for champion_id, gold in earned.items():
            self.ledger.add_champion_gold(champion_id, gold)
