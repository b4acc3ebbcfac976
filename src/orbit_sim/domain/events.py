"""Turn log entries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LogEntry:
    turn: int
    player_id: str
    player_name: str
    action: str
    result: str
