"""The explicit combat context handed to every resolution step."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from .battle_log import create_log_entry
from .catalog import ContentCatalog
from .config import CombatConfig
from .dice import Dice
from .enums import EventKind, GamePhase, LogType
from .events import CombatEvent
from .models import Card, Environment, LogEntry, Monster, Player, PlayerSelection
from .progression import InMemoryLedger, ProgressionLedger

if TYPE_CHECKING:
    from .campaign import CampaignProgress


@dataclass
class CombatState:
    """Everything one battle needs, owned by a single session."""

    players: List[Player] = field(default_factory=list)
    monsters: List[Monster] = field(default_factory=list)
    phase: GamePhase = GamePhase.DRAW
    turn: int = 1
    round: int = 1
    max_rounds: int = 3
    environment: Optional[Environment] = None
    current_player_index: int = 0
    selected_card_id: Optional[str] = None
    selected_target_id: Optional[str] = None
    enhance_mode: bool = False
    selections: Dict[str, PlayerSelection] = field(default_factory=dict)
    log: List[LogEntry] = field(default_factory=list)
    events: List[CombatEvent] = field(default_factory=list)
    campaign: Optional["CampaignProgress"] = None
    reward_player_index: int = 0
    reward_options: List[Card] = field(default_factory=list)
    version: int = 0
    log_seq: int = 0
    config: CombatConfig = field(default_factory=CombatConfig)
    dice: Dice = field(default_factory=Dice, repr=False, compare=False)
    catalog: ContentCatalog = field(default_factory=ContentCatalog, repr=False, compare=False)
    ledger: ProgressionLedger = field(default_factory=InMemoryLedger, repr=False, compare=False)

    # ------------------------------------------------------------------
    # Log & events
    # ------------------------------------------------------------------

    def append_log(self, entry: LogEntry) -> LogEntry:
        self.log_seq += 1
        entry.id = f"log-{self.log_seq}"
        self.log.append(entry)
        return entry

    def extend_log(self, entries: Iterable[LogEntry]) -> None:
        for entry in entries:
            self.append_log(entry)

    def add_log(self, message: str, type: LogType = LogType.INFO, is_sub_entry: bool = False) -> LogEntry:
        return self.append_log(create_log_entry(self.turn, self.phase, message, type, is_sub_entry))

    def emit(
        self, kind: EventKind, message: str = "", target_id: Optional[str] = None, value: Optional[int] = None
    ) -> CombatEvent:
        event = CombatEvent.create(kind, message, target_id, value)
        self.events.append(event)
        return event

    def touch(self) -> None:
        self.version += 1

    # ------------------------------------------------------------------
    # Scans
    # ------------------------------------------------------------------

    @property
    def active_player(self) -> Optional[Player]:
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    def alive_players(self) -> List[Player]:
        return [p for p in self.players if p.is_alive]

    def alive_monsters(self) -> List[Monster]:
        return [m for m in self.monsters if m.is_alive]

    def all_players_dead(self) -> bool:
        return not any(p.is_alive for p in self.players)

    def all_monsters_dead(self) -> bool:
        return not any(m.is_alive for m in self.monsters)

    def find_player(self, player_id: Optional[str]) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def find_monster(self, monster_id: Optional[str]) -> Optional[Monster]:
        return next((m for m in self.monsters if m.id == monster_id), None)

    def player_index(self, player_id: str) -> int:
        for idx, player in enumerate(self.players):
            if player.id == player_id:
                return idx
        return -1
