"""Presentation events and the asyncio scheduler that paces them.

Resolution never waits: it appends ``CombatEvent`` records to the state and
an ``EventScheduler`` replays them later with speed-scaled delays.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, Iterable, Optional

from . import constants
from .enums import EventKind, GameSpeed

if TYPE_CHECKING:
    from .state import CombatState

logger = logging.getLogger(__name__)

BASE_DELAYS_MS: Dict[EventKind, int] = {
    EventKind.DICE_ROLL: constants.DICE_ROLL_DELAY_MS,
    EventKind.ACTION: constants.ACTION_DELAY_MS,
    EventKind.DAMAGE_NUMBER: constants.DAMAGE_DELAY_MS,
    EventKind.PHASE: constants.PHASE_DELAY_MS,
}


@dataclass
class CombatEvent:
    kind: EventKind
    message: str = ""
    target_id: Optional[str] = None
    value: Optional[int] = None
    delay_ms: int = 0

    @classmethod
    def create(
        cls,
        kind: EventKind,
        message: str = "",
        target_id: Optional[str] = None,
        value: Optional[int] = None,
    ) -> "CombatEvent":
        return cls(kind, message, target_id, value, BASE_DELAYS_MS[kind])


EventSink = Callable[[CombatEvent], Awaitable[None]]


class EventScheduler:
    """Replays events to a sink, sleeping ``delay * speed`` after each one."""

    def __init__(self, speed: GameSpeed = GameSpeed.NORMAL, sink: Optional[EventSink] = None) -> None:
        self.speed = speed
        self.sink = sink

    def delay_seconds(self, event: CombatEvent) -> float:
        return event.delay_ms / 1000 * self.speed.value

    async def play(self, events: Iterable[CombatEvent]) -> int:
        played = 0
        for event in events:
            if self.sink is not None:
                await self.sink(event)
            delay = self.delay_seconds(event)
            if delay > 0:
                await asyncio.sleep(delay)
            played += 1
        return played

    async def drain(self, state: "CombatState") -> int:
        """Play and clear every event queued on ``state``."""
        events, state.events = state.events, []
        played = await self.play(events)
        logger.debug("Played %d events", played)
        return played
