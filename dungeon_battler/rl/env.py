"""Gymnasium environment that puts one hero of a mock battle under agent control."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from ..agent import HeuristicAgent
from ..config import CombatConfig
from ..enums import ClassType, EffectType, GamePhase, PlayMode, TargetType
from ..game import GameSession, HeroSpec, MonsterSpec
from ..models import Card, Monster, Player
from ..state import CombatState
from ..targeting import get_target_type, needs_target_selection, valid_targets

MAX_PARTY = 4
MAX_MONSTERS = 3
MAX_HAND = 2
TARGET_SLOTS = MAX_PARTY + MAX_MONSTERS
_HERO_FEATURES = 7
_MONSTER_FEATURES = 6
_CARD_FEATURES = 7
_GLOBAL_FEATURES = 4

WIN_PHASES = (GamePhase.REWARD, GamePhase.SHOP, GamePhase.VICTORY)
LOSS_PHASES = (GamePhase.DEFEAT, GamePhase.QUEST_FAILED)


@dataclass
class RewardConfig:
    """Configurable reward shaping parameters."""

    damage_dealt_scale: float = 0.01
    damage_taken_scale: float = 0.01
    invalid_action_penalty: float = -0.1
    win_bonus: float = 1.0
    loss_penalty: float = 1.0


def default_party() -> List[HeroSpec]:
    return [HeroSpec(ClassType.FIGHTER), HeroSpec(ClassType.CLERIC)]


def default_monsters() -> List[MonsterSpec]:
    return [MonsterSpec("goblin"), MonsterSpec("skeleton")]


class DungeonEnv(gym.Env):
    """Single-agent environment over one mock battle.

    Actions are ``hand_slot * TARGET_SLOTS + target_slot``. Target slots
    ``0..MAX_PARTY-1`` address heroes and the rest address monsters; cards
    that need no target use slot 0. The other heroes are played by a
    ``HeuristicAgent``.
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        *,
        heroes: Optional[List[HeroSpec]] = None,
        monsters: Optional[List[MonsterSpec]] = None,
        controlled_index: int = 0,
        reward_config: Optional[RewardConfig] = None,
        max_turns: int = 50,
        seed: Optional[int] = None,
    ) -> None:
        super().__init__()
        self.heroes = heroes or default_party()
        self.monster_specs = monsters or default_monsters()
        if len(self.heroes) > MAX_PARTY or len(self.monster_specs) > MAX_MONSTERS:
            raise ValueError("Roster does not fit the observation layout")
        self.controlled_index = controlled_index
        self.reward_config = reward_config or RewardConfig()
        self.max_turns = max_turns
        self.base_seed = seed
        self.teammate = HeuristicAgent()

        self.session: Optional[GameSession] = None
        self._class_to_idx = {cls: idx for idx, cls in enumerate(ClassType)}

        obs_dim = (
            MAX_PARTY * _HERO_FEATURES
            + MAX_MONSTERS * _MONSTER_FEATURES
            + MAX_HAND * _CARD_FEATURES
            + _GLOBAL_FEATURES
        )
        self.observation_space = spaces.Box(low=-np.inf, high=np.inf, shape=(obs_dim,), dtype=np.float32)
        self.action_space = spaces.Discrete(MAX_HAND * TARGET_SLOTS)

    # ------------------------------------------------------------------
    # Gym API
    # ------------------------------------------------------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        game_seed = seed if seed is not None else self.base_seed
        self.session = GameSession(CombatConfig(seed=game_seed, mode=PlayMode.SEQUENTIAL))
        self.session.start_mock_battle(self.heroes, self.monster_specs)
        self._advance()

        observation = self._build_observation()
        info = {"action_mask": self._action_mask(), "turn": self.state.turn, "phase": self.state.phase.value}
        return observation, info

    def step(self, action: int):
        if self.session is None:
            raise RuntimeError("Environment has not been reset")

        state = self.state
        reward = 0.0
        info: Dict[str, object] = {"turn": state.turn}

        mask = self._action_mask()
        if self._is_done() or not mask[action]:
            reward += self.reward_config.invalid_action_penalty
            terminated = self._is_done()
            info["action_mask"] = mask
            info["invalid_action"] = True
            info["phase"] = state.phase.value
            return self._build_observation(), reward, terminated, self._is_truncated(terminated), info

        monster_hp, party_hp = self._hp_totals()
        card_id, target_id = self._decode(action)
        self.session.sequential.play_turn(card_id, target_id)
        self._advance()

        new_monster_hp, new_party_hp = self._hp_totals()
        reward += (monster_hp - new_monster_hp) * self.reward_config.damage_dealt_scale
        reward -= (party_hp - new_party_hp) * self.reward_config.damage_taken_scale

        terminated = self._is_done()
        if state.phase in WIN_PHASES:
            reward += self.reward_config.win_bonus
        elif state.phase in LOSS_PHASES:
            reward -= self.reward_config.loss_penalty
        truncated = self._is_truncated(terminated)

        info["action_mask"] = self._action_mask()
        info["phase"] = state.phase.value
        info["won"] = state.phase in WIN_PHASES
        return self._build_observation(), reward, terminated, truncated, info

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def state(self) -> CombatState:
        if self.session is None:
            raise RuntimeError("Environment has not been reset")
        return self.session.state

    def _is_done(self) -> bool:
        phase = self.state.phase
        return phase in WIN_PHASES or phase in LOSS_PHASES

    def _is_truncated(self, terminated: bool) -> bool:
        return not terminated and self.state.turn > self.max_turns

    def _advance(self) -> None:
        """Let teammates act until the controlled hero must choose or the fight ends."""
        state = self.state
        while not self._is_done() and state.turn <= self.max_turns and state.phase == GamePhase.SELECT:
            if state.current_player_index == self.controlled_index:
                if state.active_player.hand:
                    return
                self.session.sequential.pass_turn()
                continue
            success, _ = self.teammate.play_active(self.session)
            if not success and state.phase == GamePhase.SELECT:
                self.session.sequential.pass_turn()

    def _hp_totals(self) -> Tuple[int, int]:
        state = self.state
        return sum(m.hp for m in state.monsters), sum(p.hp for p in state.players)

    def _target_id(self, slot: int) -> Optional[str]:
        state = self.state
        if slot < MAX_PARTY:
            return state.players[slot].id if slot < len(state.players) else None
        idx = slot - MAX_PARTY
        return state.monsters[idx].id if idx < len(state.monsters) else None

    def _target_slot(self, target_id: str) -> Optional[int]:
        state = self.state
        for idx, player in enumerate(state.players):
            if player.id == target_id:
                return idx
        for idx, monster in enumerate(state.monsters):
            if monster.id == target_id:
                return MAX_PARTY + idx
        return None

    def _decode(self, action: int) -> Tuple[str, Optional[str]]:
        hand_slot, target_slot = divmod(int(action), TARGET_SLOTS)
        card = self._controlled.hand[hand_slot]
        target_id = self._target_id(target_slot) if needs_target_selection(card) else None
        return card.id, target_id

    @property
    def _controlled(self) -> Player:
        return self.state.players[self.controlled_index]

    def _action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        if self.session is None or self._is_done():
            return mask
        state = self.state
        if state.phase != GamePhase.SELECT or state.current_player_index != self.controlled_index:
            return mask

        hand = self._controlled.hand
        for slot in range(min(MAX_HAND, len(hand))):
            card = hand[slot]
            offset = slot * TARGET_SLOTS
            if not needs_target_selection(card):
                mask[offset] = 1
                continue
            for target_id in valid_targets(card, state.players, state.monsters):
                target_slot = self._target_slot(target_id)
                if target_slot is not None:
                    mask[offset + target_slot] = 1
        return mask

    def _build_observation(self) -> np.ndarray:
        state = self.state
        features: List[float] = []
        for idx in range(MAX_PARTY):
            player = state.players[idx] if idx < len(state.players) else None
            features.extend(self._encode_hero(player))

        for idx in range(MAX_MONSTERS):
            monster = state.monsters[idx] if idx < len(state.monsters) else None
            features.extend(self._encode_monster(monster))

        hand = self._controlled.hand
        for idx in range(MAX_HAND):
            card = hand[idx] if idx < len(hand) else None
            features.extend(self._encode_card(card))

        controlled = self._controlled
        features.append(state.turn / self.max_turns)
        features.append(self.controlled_index / MAX_PARTY)
        features.append(1.0 if state.environment is not None else 0.0)
        features.append(1.0 if controlled.resource >= controlled.max_resource else 0.0)
        return np.asarray(features, dtype=np.float32)

    def _encode_hero(self, player: Optional[Player]) -> List[float]:
        if player is None:
            return [0.0] * _HERO_FEATURES
        return [
            player.hp / max(1, player.max_hp),
            player.shield / 50,
            player.resource / max(1, player.max_resource),
            player.aggro / 40,
            1.0 if player.is_alive else 0.0,
            1.0 if player.is_stunned else 0.0,
            self._class_to_idx[player.class_type] / max(1, len(self._class_to_idx) - 1),
        ]

    def _encode_monster(self, monster: Optional[Monster]) -> List[float]:
        if monster is None:
            return [0.0] * _MONSTER_FEATURES
        intent_damage = monster.intent.damage if monster.intent is not None else 0
        return [
            monster.hp / max(1, monster.max_hp),
            monster.shield / 50,
            1.0 if monster.is_alive else 0.0,
            intent_damage / 30,
            1.0 if monster.is_stunned else 0.0,
            monster.level / 5,
        ]

    def _encode_card(self, card: Optional[Card]) -> List[float]:
        if card is None:
            return [0.0] * _CARD_FEATURES

        def total(effect_type: EffectType) -> float:
            return float(sum(e.value for e in card.effects if e.type == effect_type))

        return [
            1.0,
            total(EffectType.DAMAGE) / 30,
            total(EffectType.HEAL) / 30,
            total(EffectType.SHIELD) / 30,
            card.aggro / 10,
            1.0 if needs_target_selection(card) else 0.0,
            1.0 if get_target_type(card) == TargetType.ALLY else 0.0,
        ]
