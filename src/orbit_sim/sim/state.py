"""Simulation state container."""

from __future__ import annotations

from dataclasses import dataclass, replace
from random import Random

from orbit_sim.domain.errors import EngineFault
from orbit_sim.domain.events import LogEntry
from orbit_sim.domain.types import Missile, Player, Ship
from orbit_sim.rules.ruleset import Ruleset


@dataclass(frozen=True)
class GameState:
    turn: int
    active_player_index: int
    players: tuple[Player, ...]
    missiles: tuple[Missile, ...]
    turn_log: tuple[LogEntry, ...]
    rules: Ruleset
    missile_seq: int = 0
    winner_id: str | None = None
    is_over: bool = False
    rng_seed: int = 0

    @property
    def active_player(self) -> Player:
        if not 0 <= self.active_player_index < len(self.players):
            raise EngineFault(f"Active player index {self.active_player_index} is out of range")
        return self.players[self.active_player_index]

    def player(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def require_player(self, player_id: str) -> Player:
        player = self.player(player_id)
        if player is None:
            raise EngineFault(f"Player record missing: {player_id}")
        return player

    def with_ship(self, player_id: str, ship: Ship) -> "GameState":
        self.require_player(player_id)
        players = tuple(
            replace(player, ship=ship) if player.id == player_id else player for player in self.players
        )
        return replace(self, players=players)

    def rng(self, *, action_seq: int, stream: str, purpose: str) -> Random:
        from orbit_sim.sim.rng import derive_seed

        return Random(
            derive_seed(self.rng_seed, turn=self.turn, action_seq=action_seq, stream=stream, purpose=purpose)
        )

    def alive_players(self) -> list[Player]:
        return [player for player in self.players if not player.ship.is_destroyed]
