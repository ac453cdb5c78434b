"""Tunable configuration for sessions and the network bridge."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from . import constants
from .enums import GameSpeed, PlayMode


@dataclass
class CombatConfig:
    """Per-session rules. Defaults match the standard three round run."""

    cards_per_draw: int = constants.CARDS_DRAWN_PER_TURN
    max_rounds: int = 3
    heal_percent: float = constants.BETWEEN_ROUND_HEAL_PERCENT
    gold_per_alive_player: int = constants.GOLD_PER_ALIVE_PLAYER
    reward_choices: int = constants.REWARD_CHOICES
    shop_choices: int = constants.SHOP_CHOICES
    reward_round_limit: int = 2
    mode: PlayMode = PlayMode.SEQUENTIAL
    speed: GameSpeed = GameSpeed.NORMAL
    seed: Optional[int] = None


@dataclass
class SyncConfig:
    """Replication settings for the network bridge."""

    debounce_seconds: float = 0.1
    log_tail: int = 50
    key_prefix: str = "battle"
