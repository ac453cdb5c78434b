"""Helpers for building battle log entries."""
from __future__ import annotations

from .enums import EffectType, GamePhase, LogType
from .models import LogEntry

_DEBUFF_MESSAGES = {
    EffectType.POISON: "poisoned",
    EffectType.BURN: "burning",
    EffectType.ICE: "frozen",
    EffectType.WEAKNESS: "weakened",
    EffectType.STUN: "stunned",
    EffectType.ACCURACY: "blinded",
    EffectType.VULNERABLE: "vulnerable",
}


def create_log_entry(
    turn: int,
    phase: GamePhase,
    message: str,
    type: LogType = LogType.INFO,
    is_sub_entry: bool = False,
) -> LogEntry:
    return LogEntry(turn=turn, phase=phase, message=message, type=type, is_sub_entry=is_sub_entry)


def format_debuff_message(effect_type: EffectType) -> str:
    return _DEBUFF_MESSAGES.get(effect_type, f"afflicted with {effect_type.value}")
