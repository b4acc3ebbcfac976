from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from orbit_sim.domain.types import Facing, Heat, Player, Reactor, Ship, Subsystem, SubsystemType
from orbit_sim.rules.ruleset import RulesError, Ruleset, load_default_ruleset

if TYPE_CHECKING:
    from orbit_sim.sim.state import GameState

DEFAULT_SCENARIO_PATH = Path(__file__).resolve().parents[1] / "data" / "scenarios" / "default.json"


class ScenarioError(ValueError):
    pass


def load_game_state(path: Path | None = None, rules: Ruleset | None = None) -> "GameState":
    path = path or DEFAULT_SCENARIO_PATH
    data = _load_json(path)
    if rules is None:
        # Scenarios live in data/scenarios next to data/rules.
        rules_dir = path.parent.parent / "rules"
        try:
            rules = Ruleset.load(rules_dir) if rules_dir.exists() else load_default_ruleset()
        except RulesError as exc:
            raise ScenarioError(str(exc)) from exc
    return build_game_state(data, rules)


def build_game_state(data: dict, rules: Ruleset) -> "GameState":
    from orbit_sim.sim.state import GameState

    if not isinstance(data, dict):
        raise ScenarioError("Scenario root must be an object")
    raw_players = _require_list(data, "players")
    if not raw_players:
        raise ScenarioError("players must not be empty")

    players: list[Player] = []
    for raw in raw_players:
        if not isinstance(raw, dict):
            raise ScenarioError("players entries must be objects")
        player_id = _require_str(raw, "id")
        if any(existing.id == player_id for existing in players):
            raise ScenarioError(f"Duplicate player id: {player_id}")
        ship_data = _require_dict(raw, "ship")
        players.append(
            Player(id=player_id, name=str(raw.get("name", player_id)), ship=_parse_ship(ship_data, rules, player_id))
        )

    turn = _optional_int(data, "turn", 1)
    active = _optional_int(data, "active_player_index", 0)
    rng_seed = _optional_int(data, "rng_seed", 0)
    if not 0 <= active < len(players):
        raise ScenarioError("active_player_index is out of range")
    return GameState(
        turn=turn,
        active_player_index=active,
        players=tuple(players),
        missiles=(),
        turn_log=(),
        rules=rules,
        rng_seed=rng_seed,
    )


def build_ship(
    rules: Ruleset,
    *,
    well_id: str,
    ring: int,
    sector: int,
    facing: Facing = Facing.PROGRADE,
    allocations: dict[SubsystemType, int] | None = None,
) -> Ship:
    """A freshly launched ship with every subsystem unpowered unless allocated."""
    cfg = rules.globals
    allocations = allocations or {}
    subsystems = tuple(
        Subsystem(type=kind).with_allocation(allocations.get(kind, 0), rules.spec(kind).min_energy)
        for kind in SubsystemType
    )
    allocated = sum(allocations.values())
    return Ship(
        well_id=well_id,
        ring=ring,
        sector=sector,
        facing=facing,
        reaction_mass=cfg.starting_reaction_mass,
        hit_points=cfg.max_hit_points,
        max_hit_points=cfg.max_hit_points,
        subsystems=subsystems,
        reactor=Reactor(total_capacity=cfg.reactor_capacity, available_energy=cfg.reactor_capacity - allocated),
        heat=Heat(),
        missile_inventory=cfg.missiles.inventory,
    )


def _parse_ship(data: dict, rules: Ruleset, player_id: str) -> Ship:
    well_id = _require_str(data, "well")
    well = rules.world.well(well_id)
    if well is None:
        raise ScenarioError(f"{player_id}: unknown well {well_id!r}")
    ring = _require_int(data, "ring")
    ring_def = well.ring(ring)
    if ring_def is None:
        raise ScenarioError(f"{player_id}: ring must be between 1 and {well.ring_count}")
    sector = _require_int(data, "sector")
    if not 0 <= sector < ring_def.sectors:
        raise ScenarioError(f"{player_id}: sector must be between 0 and {ring_def.sectors - 1}")
    try:
        facing = Facing(data.get("facing", Facing.PROGRADE.value))
    except ValueError as exc:
        raise ScenarioError(f"{player_id}: facing must be prograde or retrograde") from exc

    allocations: dict[SubsystemType, int] = {}
    for key, value in _optional_dict(data, "allocations").items():
        try:
            kind = SubsystemType(key)
        except ValueError as exc:
            raise ScenarioError(f"{player_id}: unknown subsystem {key!r}") from exc
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= rules.spec(kind).max_energy:
            raise ScenarioError(f"{player_id}: allocation for {key} must be 0..{rules.spec(kind).max_energy}")
        allocations[kind] = value
    if sum(allocations.values()) > rules.globals.reactor_capacity:
        raise ScenarioError(f"{player_id}: allocations exceed reactor capacity")

    ship = build_ship(rules, well_id=well_id, ring=ring, sector=sector, facing=facing, allocations=allocations)
    overrides = {}
    for key in ("reaction_mass", "hit_points", "missile_inventory"):
        if key in data:
            overrides[key] = _require_int(data, key)
    if "heat" in data:
        overrides["heat"] = Heat(current_heat=_require_int(data, "heat"))
    if overrides:
        ship = replace(ship, **overrides)
    return ship


def _load_json(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise ScenarioError(f"Scenario not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ScenarioError(f"Invalid JSON in scenario: {exc}") from exc


def _require_dict(data: dict, key: str) -> dict:
    value = data.get(key)
    if not isinstance(value, dict):
        raise ScenarioError(f"{key} must be an object")
    return value


def _require_list(data: dict, key: str) -> list:
    value = data.get(key)
    if not isinstance(value, list):
        raise ScenarioError(f"{key} must be an array")
    return value


def _require_int(data: dict, key: str) -> int:
    value = data.get(key)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ScenarioError(f"{key} must be a non-negative integer")
    return value


def _optional_int(data: dict, key: str, default: int) -> int:
    if key not in data:
        return default
    return _require_int(data, key)


def _optional_dict(data: dict, key: str) -> dict:
    if key not in data:
        return {}
    return _require_dict(data, key)


def _require_str(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ScenarioError(f"{key} must be a non-empty string")
    return value
