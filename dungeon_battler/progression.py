"""Account and champion progression sinks fed by combat."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict

logger = logging.getLogger(__name__)


class ProgressionLedger:
    """Minimal interface for whatever persists XP and gold between runs."""

    def add_xp(self, champion_id: str, amount: int) -> None:
        raise NotImplementedError

    def add_champion_gold(self, champion_id: str, amount: int) -> None:
        raise NotImplementedError

    def add_user_gold(self, amount: int) -> None:
        raise NotImplementedError


class InMemoryLedger(ProgressionLedger):
    """Keeps totals in dictionaries. Used by default and by tests."""

    def __init__(self) -> None:
        self.xp: Dict[str, int] = defaultdict(int)
        self.champion_gold: Dict[str, int] = defaultdict(int)
        self.user_gold = 0

    def add_xp(self, champion_id: str, amount: int) -> None:
        self.xp[champion_id] += amount
        logger.debug("Champion %s earned %d XP", champion_id, amount)

    def add_champion_gold(self, champion_id: str, amount: int) -> None:
        self.champion_gold[champion_id] += amount

    def add_user_gold(self, amount: int) -> None:
        self.user_gold += amount
