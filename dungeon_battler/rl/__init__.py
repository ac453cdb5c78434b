"""Reinforcement learning utilities for Dungeon Battler."""

from .env import DungeonEnv, RewardConfig

__all__ = [
    "DungeonEnv",
    "RewardConfig",
]
