"""Firing solutions for spinal, broadside and turret weapons.

The same function backs authoritative fire validation and range previews.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from orbit_sim.domain.types import Facing, Player, Ship, WeaponArc
from orbit_sim.rules.ruleset import WeaponStats
from orbit_sim.rules.world import World, sector_distance


@dataclass(frozen=True)
class FiringSolution:
    target_id: str
    in_range: bool
    distance: int
    sector_distance: int
    ring_distance: int
    wrong_facing: bool
    requires_engines: bool


def facing_distance(from_sector: int, to_sector: int, sectors: int, facing: Facing) -> int:
    """Sectors travelled from ``from_sector`` to ``to_sector`` moving along ``facing``."""
    if facing is Facing.PROGRADE:
        return (to_sector - from_sector) % sectors
    return (from_sector - to_sector) % sectors


def candidate_targets(attacker_id: str, attacker: Ship, players: Iterable[Player]) -> list[Player]:
    return [
        player
        for player in players
        if player.id != attacker_id
        and player.ship.well_id == attacker.well_id
        and player.ship.hit_points > 0
    ]


def solve(weapon: WeaponStats, attacker: Ship, target_id: str, target: Ship, world: World) -> FiringSolution:
    ring = world.ring(attacker.well_id, attacker.ring)
    sectors = ring.sectors if ring is not None else 24
    ring_distance = abs(target.ring - attacker.ring)
    sector_dist = sector_distance(attacker.sector, target.sector, sectors)
    wrong_facing = False

    if weapon.arc is WeaponArc.SPINAL:
        ahead = facing_distance(attacker.sector, target.sector, sectors, attacker.facing)
        behind = facing_distance(attacker.sector, target.sector, sectors, attacker.facing.flipped())
        in_range = ring_distance == 0 and 0 < ahead <= weapon.sector_range
        wrong_facing = ring_distance == 0 and not in_range and 0 < behind <= weapon.sector_range
    else:
        in_range = 0 < ring_distance <= weapon.ring_range and sector_dist <= weapon.sector_range

    return FiringSolution(
        target_id=target_id,
        in_range=in_range,
        distance=ring_distance + sector_dist,
        sector_distance=sector_dist,
        ring_distance=ring_distance,
        wrong_facing=wrong_facing,
        requires_engines=weapon.arc is WeaponArc.SPINAL and weapon.has_recoil,
    )


def compute_firing_solutions(
    weapon: WeaponStats,
    attacker_id: str,
    attacker: Ship,
    players: Iterable[Player],
    world: World,
) -> list[FiringSolution]:
    return [
        solve(weapon, attacker, player.id, player.ship, world)
        for player in candidate_targets(attacker_id, attacker, players)
    ]
