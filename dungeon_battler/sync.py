"""Replication of a session's state between host and followers.

Every client writes full snapshots to a shared store and listens for
changes. Only the host resolves simultaneous turns; followers submit their
selections and render whatever the host publishes. Store failures are
logged here and never reach the combat core.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Set, Tuple

from .config import SyncConfig
from .enums import GamePhase
from .errors import SnapshotError, SyncError
from .game import GameSession
from .snapshot import from_snapshot, parse_snapshot, to_snapshot

logger = logging.getLogger(__name__)

Payload = Dict[str, Any]
ChangeCallback = Callable[[str, int, Payload, str], Awaitable[None]]


class ReplicatedStore:
    """Key/value store with optimistic versioning and change notifications."""

    async def read(self, key: str) -> Optional[Tuple[int, Payload]]:
        raise NotImplementedError

    async def write(self, key: str, payload: Payload, expected_version: int, origin: str = "") -> int:
        raise NotImplementedError

    def subscribe(self, key: str, callback: ChangeCallback) -> Callable[[], None]:
        raise NotImplementedError


class InMemoryStore(ReplicatedStore):
    """Process-local store. Writes against a stale version raise ``SyncError``."""

    def __init__(self) -> None:
        self._data: Dict[str, Tuple[int, Payload]] = {}
        self._subscribers: Dict[str, List[ChangeCallback]] = defaultdict(list)

    async def read(self, key: str) -> Optional[Tuple[int, Payload]]:
        return self._data.get(key)

    async def write(self, key: str, payload: Payload, expected_version: int, origin: str = "") -> int:
        current = self._data.get(key, (0, {}))[0]
        if expected_version != current:
            raise SyncError(f"Version conflict on {key}: expected {expected_version}, found {current}")
        revision = current + 1
        self._data[key] = (revision, payload)
        for callback in list(self._subscribers[key]):
            await callback(key, revision, payload, origin)
        return revision

    def subscribe(self, key: str, callback: ChangeCallback) -> Callable[[], None]:
        self._subscribers[key].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[key]:
                self._subscribers[key].remove(callback)

        return unsubscribe


class SyncBridge:
    """Connects one ``GameSession`` to a ``ReplicatedStore`` key."""

    def __init__(
        self,
        session: GameSession,
        store: ReplicatedStore,
        battle_id: str,
        is_host: bool,
        config: Optional[SyncConfig] = None,
        local_player_ids: Optional[Iterable[str]] = None,
    ) -> None:
        self.session = session
        self.store = store
        self.config = config or SyncConfig()
        self.key = f"{self.config.key_prefix}:{battle_id}"
        self.is_host = is_host
        self.local_player_ids: Set[str] = set(local_player_ids or ())
        self.client_id = uuid.uuid4().hex
        self.revision = 0
        self._pending: Optional[asyncio.Task] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self.key, self.handle_remote)

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
            try:
                await self._pending
            except asyncio.CancelledError:
                pass
        self._pending = None

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    def schedule_push(self) -> asyncio.Task:
        """Queue a push. Calls made while one is pending coalesce into it."""
        if self._pending is None or self._pending.done():
            self._pending = asyncio.get_running_loop().create_task(self._delayed_push())
        return self._pending

    async def _delayed_push(self) -> bool:
        await asyncio.sleep(self.config.debounce_seconds)
        return await self.push_now()

    async def push_now(self) -> bool:
        payload = to_snapshot(self.session.state, self.config.log_tail).model_dump(mode="json")
        try:
            written = await self.store.write(self.key, payload, self.revision, self.client_id)
        except SyncError:
            logger.exception("Failed to publish state for %s", self.key)
            await self._refresh_revision()
            return False
        # a nested notification may already have moved us past this write
        self.revision = max(self.revision, written)
        return True

    async def _refresh_revision(self) -> None:
        try:
            current = await self.store.read(self.key)
        except SyncError:
            logger.exception("Failed to read %s", self.key)
            return
        if current is not None:
            self.revision = current[0]

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    async def pull(self) -> bool:
        """Replace the local state with the stored snapshot, if there is one."""
        try:
            current = await self.store.read(self.key)
            if current is None:
                return False
            revision, payload = current
            from_snapshot(payload, self.session.state)
        except (SyncError, SnapshotError):
            logger.exception("Failed to pull state for %s", self.key)
            return False
        self.revision = revision
        return True

    async def handle_remote(self, key: str, revision: int, payload: Payload, origin: str) -> None:
        if origin == self.client_id:
            return
        self.revision = max(self.revision, revision)
        try:
            snapshot = parse_snapshot(payload)
        except SnapshotError:
            logger.exception("Ignoring malformed snapshot on %s", key)
            return

        if not self.is_host:
            from_snapshot(snapshot, self.session.state)
            return

        state = self.session.state
        if state.phase != GamePhase.SELECT or snapshot.phase != GamePhase.SELECT:
            return
        merged = False
        for player_id, remote in snapshot.selections.items():
            local = state.selections.get(player_id)
            if local is None or player_id in self.local_player_ids:
                continue
            local.card_id = remote.card_id
            local.target_id = remote.target_id
            local.enhance = remote.enhance
            local.ready = remote.ready
            merged = True
        if merged:
            state.touch()
        if self.session.simultaneous.all_ready():
            logger.info("All selections ready on %s, resolving", key)
            self.session.simultaneous.resolve_all_actions(is_host=True)
            await self.push_now()

    # ------------------------------------------------------------------
    # Convenience for followers and the host's own heroes
    # ------------------------------------------------------------------

    async def submit_selection(
        self,
        player_id: str,
        card_id: str,
        target_id: Optional[str] = None,
        enhance: bool = False,
    ) -> Tuple[bool, str]:
        driver = self.session.simultaneous
        success, message = driver.set_selection(player_id, card_id, target_id, enhance)
        if not success:
            return success, message
        success, message = driver.set_ready(player_id, True)
        if not success:
            return success, message
        if self.is_host and driver.all_ready():
            driver.resolve_all_actions(is_host=True)
        await self.push_now()
        return True, message
