from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field

from orbit_sim.rules.ruleset import load_default_ruleset
from orbit_sim.rules.scenario import build_game_state, load_game_state
from orbit_sim.sim.state import GameState


@dataclass
class GameSession:
    state: GameState
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


_games: dict[str, GameSession] = {}


def create_game(scenario: dict | None = None) -> tuple[str, GameSession]:
    """Start a game from an inline scenario, or the packaged default one."""
    if scenario is None:
        state = load_game_state()
    else:
        state = build_game_state(scenario, load_default_ruleset())
    game_id = str(uuid.uuid4())
    session = GameSession(state=state)
    _games[game_id] = session
    return game_id, session


def get_game(game_id: str) -> GameSession | None:
    return _games.get(game_id)


def drop_game(game_id: str) -> None:
    _games.pop(game_id, None)
