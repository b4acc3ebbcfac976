"""Orbital drift, ring burns, rotation and well transfers.

Every function here returns a new ``Ship``; callers validate first.
"""

from __future__ import annotations

from dataclasses import replace

from orbit_sim.domain.errors import EngineFault
from orbit_sim.domain.types import BurnIntensity, Facing, Ship, SubsystemType, TransferState
from orbit_sim.rules.ruleset import Ruleset
from orbit_sim.rules.world import Ring, TransferPoint, World, map_sector


def current_ring(ship: Ship, world: World) -> Ring:
    ring = world.ring(ship.well_id, ship.ring)
    if ring is None:
        raise EngineFault(f"Ship position {ship.well_id}/ring {ship.ring} does not exist")
    return ring


def drift_sector(sector: int, ring: Ring) -> int:
    return (sector + ring.velocity) % ring.sectors


def apply_drift(ship: Ship, world: World) -> Ship:
    ring = current_ring(ship, world)
    return replace(ship, sector=drift_sector(ship.sector, ring))


def adjustment_limit(velocity: int) -> int:
    """Largest sector adjustment a burn may request on a ring of this velocity."""
    return max(1, velocity // 2)


def burn_mass_cost(rules: Ruleset, intensity: BurnIntensity, sector_adjustment: int) -> int:
    cost = rules.burn_cost(intensity)
    return cost.mass + abs(sector_adjustment) * rules.globals.sector_adjustment_mass


def burn_destination_ring(ship: Ship, world: World, rings: int) -> int:
    well = world.well(ship.well_id)
    if well is None:
        raise EngineFault(f"Unknown well: {ship.well_id}")
    target = ship.ring + ship.facing.direction * rings
    return max(1, min(well.ring_count, target))


def initiate_burn(ship: Ship, rules: Ruleset, intensity: BurnIntensity, sector_adjustment: int) -> Ship:
    cost = rules.burn_cost(intensity)
    destination = burn_destination_ring(ship, rules.world, cost.rings)
    return replace(
        ship,
        reaction_mass=ship.reaction_mass - burn_mass_cost(rules, intensity, sector_adjustment),
        transfer_state=TransferState(destination_ring=destination, sector_adjustment=sector_adjustment),
    )


def complete_ring_transfer(ship: Ship, world: World) -> Ship:
    transfer = ship.transfer_state
    if transfer is None:
        return ship
    from_ring = current_ring(ship, world)
    to_ring = world.ring(ship.well_id, transfer.destination_ring)
    if to_ring is None:
        raise EngineFault(f"Burn destination ring {transfer.destination_ring} missing in {ship.well_id}")
    sector = map_sector(ship.sector, from_ring, to_ring)
    sector = (sector + transfer.sector_adjustment) % to_ring.sectors
    return replace(ship, ring=to_ring.index, sector=sector, transfer_state=None)


def execute_burn(ship: Ship, rules: Ruleset, intensity: BurnIntensity, sector_adjustment: int) -> Ship:
    # drift always happens first, then the ring change, then the adjustment
    drifted = apply_drift(ship, rules.world)
    return complete_ring_transfer(initiate_burn(drifted, rules, intensity, sector_adjustment), rules.world)


def execute_coast(ship: Ship, rules: Ruleset, *, activate_scoop: bool = False) -> Ship:
    drifted = apply_drift(ship, rules.world)
    if not activate_scoop:
        return drifted
    scoop = drifted.subsystem(SubsystemType.SCOOP)
    if scoop is None:
        raise EngineFault("Scoop requested on a ship without a scoop")
    drifted = replace(drifted, reaction_mass=drifted.reaction_mass + scoop_yield(drifted, rules))
    return drifted.with_subsystem(replace(scoop, used_this_turn=True))


def scoop_yield(ship: Ship, rules: Ruleset) -> int:
    ring = current_ring(ship, rules.world)
    return min(ring.velocity, max(0, rules.globals.max_reaction_mass - ship.reaction_mass))


def rotate(ship: Ship, facing: Facing) -> Ship:
    rotation = ship.subsystem(SubsystemType.ROTATION)
    if rotation is None:
        raise EngineFault("Rotation requested on a ship without a rotation subsystem")
    return replace(ship, facing=facing).with_subsystem(replace(rotation, used_this_turn=True))


def find_transfer_point(world: World, ship: Ship, destination_well_id: str) -> TransferPoint | None:
    for point in world.transfers_from(ship.well_id, ship.ring, ship.sector):
        if point.to_well_id == destination_well_id:
            return point
    return None


def execute_well_transfer(ship: Ship, rules: Ruleset, point: TransferPoint) -> Ship:
    relocated = ship.moved_to(point.to_well_id, point.to_ring, point.to_sector)
    return replace(relocated, reaction_mass=ship.reaction_mass - rules.globals.well_transfer_mass)


def displace_ring(ship: Ship, world: World, delta: int) -> Ship:
    """Push a ship by ``delta`` rings within its well, remapping its sector."""
    well = world.well(ship.well_id)
    if well is None:
        raise EngineFault(f"Unknown well: {ship.well_id}")
    target = max(1, min(well.ring_count, ship.ring + delta))
    if target == ship.ring:
        return ship
    sector = map_sector(ship.sector, current_ring(ship, world), well.rings[target - 1])
    return replace(ship, ring=target, sector=sector)
