"""Exceptions raised by the Dungeon Battler engine."""
from __future__ import annotations


class DungeonBattlerError(Exception):
    """Base class for every engine error."""


class CatalogError(DungeonBattlerError):
    """A card, monster, class, environment or campaign id is unknown."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"Unknown {kind}: {key}")
        self.kind = kind
        self.key = key


class PhaseTransitionError(DungeonBattlerError):
    """The phase machine was asked to make a move its table does not allow."""


class SnapshotError(DungeonBattlerError):
    """A replicated snapshot could not be validated or applied."""


class SyncError(DungeonBattlerError):
    """The replicated store rejected or failed a read or write."""
