"""Data-driven rules engine."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from orbit_sim.domain.types import BurnIntensity, SubsystemType, WeaponArc
from orbit_sim.rules.world import (
    GravityWell,
    OrbitalPosition,
    Ring,
    TransferSectors,
    World,
    calculate_transfer_points,
)

DEFAULT_RULES_DIR = Path(__file__).resolve().parents[1] / "data" / "rules"


class RulesError(ValueError):
    """Error loading or validating rules."""


@dataclass(frozen=True)
class WeaponStats:
    arc: WeaponArc
    ring_range: int
    sector_range: int
    damage: int
    has_recoil: bool = False


@dataclass(frozen=True)
class SubsystemSpec:
    """Energy limits for one subsystem type."""

    type: SubsystemType
    min_energy: int
    max_energy: int
    overclock_threshold: int
    weapon: WeaponStats | None = None


@dataclass(frozen=True)
class BurnCost:
    energy: int
    mass: int
    rings: int


@dataclass(frozen=True)
class MissileConfig:
    inventory: int
    fuel_per_turn: int
    max_turns_alive: int
    damage: int


@dataclass(frozen=True)
class GlobalConfig:
    reactor_capacity: int
    max_return_rate: int
    starting_reaction_mass: int
    max_reaction_mass: int
    max_hit_points: int
    well_transfer_mass: int
    railgun_recoil_mass: int
    sector_adjustment_mass: int
    min_energy_amount: int
    max_energy_amount: int
    burn_costs: dict[BurnIntensity, BurnCost]
    missiles: MissileConfig
    critical_hit_chance: float = 0.0


@dataclass(frozen=True)
class Ruleset:
    """Loaded and validated ruleset."""

    world: World
    subsystems: dict[SubsystemType, SubsystemSpec]
    globals: GlobalConfig

    @staticmethod
    def load(data_dir: Path) -> "Ruleset":
        """Load ruleset from JSON files in data directory."""
        world = _load_world(data_dir / "wells.json")
        subsystems = _load_subsystems(data_dir / "subsystems.json")
        global_config = _load_globals(data_dir / "globals.json")
        return Ruleset(world=world, subsystems=subsystems, globals=global_config)

    def spec(self, kind: SubsystemType) -> SubsystemSpec:
        return self.subsystems[kind]

    def weapon(self, kind: SubsystemType) -> WeaponStats | None:
        spec = self.subsystems.get(kind)
        return spec.weapon if spec is not None else None

    def burn_cost(self, intensity: BurnIntensity) -> BurnCost:
        return self.globals.burn_costs[intensity]


@lru_cache(maxsize=1)
def load_default_ruleset() -> Ruleset:
    return Ruleset.load(DEFAULT_RULES_DIR)


def _load_json(path: Path) -> dict[str, Any]:
    """Load JSON file."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise RulesError(f"Rules file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise RulesError(f"Invalid JSON in {path}: {exc}") from exc


def _load_world(path: Path) -> World:
    data = _load_json(path)
    raw_wells = data.get("wells")
    if not isinstance(raw_wells, list) or not raw_wells:
        raise RulesError(f"{path}: missing 'wells' array")
    default_sectors = int(data.get("sectors_per_ring", 24))

    wells: dict[str, GravityWell] = {}
    for entry in raw_wells:
        if not isinstance(entry, dict):
            raise RulesError(f"{path}: well entry must be object")
        well_id = entry.get("id")
        if not isinstance(well_id, str):
            raise RulesError(f"{path}: well.id must be string")
        raw_rings = entry.get("rings")
        if not isinstance(raw_rings, list) or not raw_rings:
            raise RulesError(f"{path}: well {well_id} needs a non-empty 'rings' array")
        rings = []
        for expected, raw_ring in enumerate(raw_rings, start=1):
            if not isinstance(raw_ring, dict) or "velocity" not in raw_ring:
                raise RulesError(f"{path}: well {well_id} ring {expected} needs a velocity")
            ring = Ring(
                index=int(raw_ring.get("ring", expected)),
                velocity=int(raw_ring["velocity"]),
                sectors=int(raw_ring.get("sectors", default_sectors)),
                radius=int(raw_ring.get("radius", 0)),
            )
            if ring.index != expected:
                raise RulesError(f"{path}: well {well_id} rings must be numbered 1..n in order")
            if ring.sectors < 1 or ring.velocity < 0:
                raise RulesError(f"{path}: well {well_id} ring {ring.index} has invalid geometry")
            rings.append(ring)
        position = entry.get("orbital_position")
        wells[well_id] = GravityWell(
            id=well_id,
            name=str(entry.get("name", well_id)),
            kind=str(entry.get("kind", "planet")),
            rings=tuple(rings),
            orbital_position=(
                OrbitalPosition(angle=float(position["angle"]), distance=float(position["distance"]))
                if isinstance(position, dict)
                else None
            ),
        )

    central_well_id = str(data.get("central_well", next(iter(wells))))
    if central_well_id not in wells:
        raise RulesError(f"{path}: central_well {central_well_id!r} is not a defined well")

    transfer_data = data.get("transfer", {})
    required_level = transfer_data.get("required_engine_level")
    fixed: dict[str, TransferSectors] = {}
    for well_id, raw in dict(transfer_data.get("sectors", {})).items():
        if well_id not in wells:
            raise RulesError(f"{path}: transfer sectors reference unknown well {well_id!r}")
        fixed[well_id] = TransferSectors(
            outbound_sector=int(raw["outbound_sector"]),
            outbound_arrival=int(raw["outbound_arrival"]),
            return_sector=int(raw["return_sector"]),
            return_arrival=int(raw["return_arrival"]),
        )

    return World(
        wells=wells,
        central_well_id=central_well_id,
        transfer_points=calculate_transfer_points(
            wells,
            central_well_id,
            fixed,
            required_engine_level=int(required_level) if required_level is not None else None,
        ),
    )


def _load_subsystems(path: Path) -> dict[SubsystemType, SubsystemSpec]:
    data = _load_json(path)
    raw = data.get("subsystems")
    if not isinstance(raw, dict):
        raise RulesError(f"{path}: missing 'subsystems' object")
    specs: dict[SubsystemType, SubsystemSpec] = {}
    for key, entry in raw.items():
        try:
            kind = SubsystemType(key)
        except ValueError as exc:
            raise RulesError(f"{path}: unknown subsystem type {key!r}") from exc
        weapon_data = entry.get("weapon")
        weapon = None
        if isinstance(weapon_data, dict):
            try:
                arc = WeaponArc(weapon_data["arc"])
            except (KeyError, ValueError) as exc:
                raise RulesError(f"{path}: {key}.weapon.arc is missing or invalid") from exc
            weapon = WeaponStats(
                arc=arc,
                ring_range=int(weapon_data.get("ring_range", 0)),
                sector_range=int(weapon_data.get("sector_range", 0)),
                damage=int(weapon_data.get("damage", 0)),
                has_recoil=bool(weapon_data.get("has_recoil", False)),
            )
        spec = SubsystemSpec(
            type=kind,
            min_energy=int(entry.get("min_energy", 1)),
            max_energy=int(entry.get("max_energy", 1)),
            overclock_threshold=int(entry.get("overclock_threshold", entry.get("max_energy", 1))),
            weapon=weapon,
        )
        if spec.min_energy < 1 or spec.max_energy < spec.min_energy:
            raise RulesError(f"{path}: {key} energy limits must satisfy 1 <= min <= max")
        specs[kind] = spec
    missing = set(SubsystemType) - set(specs)
    if missing:
        names = ", ".join(sorted(kind.value for kind in missing))
        raise RulesError(f"{path}: missing subsystem definitions: {names}")
    return specs


def _load_globals(path: Path) -> GlobalConfig:
    data = _load_json(path)
    burn_data = data.get("burn_costs", {})
    burn_costs: dict[BurnIntensity, BurnCost] = {}
    for intensity in BurnIntensity:
        raw = burn_data.get(intensity.value)
        if not isinstance(raw, dict):
            raise RulesError(f"{path}: burn_costs.{intensity.value} must be object")
        burn_costs[intensity] = BurnCost(
            energy=int(raw.get("energy", 0)),
            mass=int(raw.get("mass", 0)),
            rings=int(raw.get("rings", 1)),
        )
    missile_data = data.get("missiles", {})
    energy_bounds = data.get("energy_amount_range", [1, 10])
    critical_chance = float(data.get("critical_hit_chance", 0.0))
    if not 0.0 <= critical_chance <= 1.0:
        raise RulesError(f"{path}: critical_hit_chance must be between 0 and 1")
    if not isinstance(energy_bounds, list) or len(energy_bounds) != 2:
        raise RulesError(f"{path}: energy_amount_range must be [min, max]")
    return GlobalConfig(
        reactor_capacity=int(data.get("reactor_capacity", 10)),
        max_return_rate=int(data.get("max_return_rate", 3)),
        starting_reaction_mass=int(data.get("starting_reaction_mass", 10)),
        max_reaction_mass=int(data.get("max_reaction_mass", 10)),
        max_hit_points=int(data.get("max_hit_points", 10)),
        well_transfer_mass=int(data.get("well_transfer_mass", 2)),
        railgun_recoil_mass=int(data.get("railgun_recoil_mass", 1)),
        sector_adjustment_mass=int(data.get("sector_adjustment_mass", 1)),
        min_energy_amount=int(energy_bounds[0]),
        max_energy_amount=int(energy_bounds[1]),
        burn_costs=burn_costs,
        missiles=MissileConfig(
            inventory=int(missile_data.get("inventory", 4)),
            fuel_per_turn=int(missile_data.get("fuel_per_turn", 3)),
            max_turns_alive=int(missile_data.get("max_turns_alive", 3)),
            damage=int(missile_data.get("damage", 3)),
        ),
        critical_hit_chance=critical_chance,
    )
