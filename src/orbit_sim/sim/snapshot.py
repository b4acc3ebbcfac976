"""Plain-dict snapshots of the full world for transport and storage."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from orbit_sim.domain.events import LogEntry
from orbit_sim.domain.types import (
    Facing,
    Heat,
    Missile,
    Player,
    Reactor,
    Ship,
    Subsystem,
    SubsystemType,
    TransferState,
)
from orbit_sim.rules.ruleset import Ruleset
from orbit_sim.sim.state import GameState


def _ship_to_dict(ship: Ship) -> dict[str, Any]:
    data = asdict(ship)
    data["facing"] = ship.facing.value
    for sub in data["subsystems"]:
        sub["type"] = sub["type"].value
    return data


def dump_state(state: GameState) -> dict[str, Any]:
    return {
        "turn": state.turn,
        "active_player_index": state.active_player_index,
        "missile_seq": state.missile_seq,
        "winner_id": state.winner_id,
        "is_over": state.is_over,
        "rng_seed": state.rng_seed,
        "players": [
            {"id": player.id, "name": player.name, "ship": _ship_to_dict(player.ship)} for player in state.players
        ],
        "missiles": [asdict(missile) for missile in state.missiles],
        "turn_log": [asdict(entry) for entry in state.turn_log],
    }


def _ship_from_dict(data: dict[str, Any]) -> Ship:
    transfer = data.get("transfer_state")
    return Ship(
        well_id=data["well_id"],
        ring=int(data["ring"]),
        sector=int(data["sector"]),
        facing=Facing(data["facing"]),
        reaction_mass=int(data["reaction_mass"]),
        hit_points=int(data["hit_points"]),
        max_hit_points=int(data["max_hit_points"]),
        subsystems=tuple(
            Subsystem(
                type=SubsystemType(sub["type"]),
                allocated_energy=int(sub["allocated_energy"]),
                is_powered=bool(sub["is_powered"]),
                used_this_turn=bool(sub["used_this_turn"]),
                is_broken=bool(sub.get("is_broken", False)),
            )
            for sub in data["subsystems"]
        ),
        reactor=Reactor(**data["reactor"]),
        heat=Heat(**data["heat"]),
        missile_inventory=int(data["missile_inventory"]),
        transfer_state=TransferState(**transfer) if transfer else None,
    )


def load_state(data: dict[str, Any], rules: Ruleset) -> GameState:
    return GameState(
        turn=int(data["turn"]),
        active_player_index=int(data["active_player_index"]),
        players=tuple(
            Player(id=raw["id"], name=raw["name"], ship=_ship_from_dict(raw["ship"])) for raw in data["players"]
        ),
        missiles=tuple(Missile(**raw) for raw in data.get("missiles", [])),
        turn_log=tuple(LogEntry(**raw) for raw in data.get("turn_log", [])),
        rules=rules,
        missile_seq=int(data.get("missile_seq", 0)),
        winner_id=data.get("winner_id"),
        is_over=bool(data.get("is_over", False)),
        rng_seed=int(data.get("rng_seed", 0)),
    )
