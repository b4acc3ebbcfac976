"""Weapon hits, critical damage and railgun recoil."""

from __future__ import annotations

import random
from dataclasses import dataclass, replace

from orbit_sim.domain.types import Ship, SubsystemType
from orbit_sim.rules.ruleset import Ruleset
from orbit_sim.systems.movement import displace_ring


@dataclass(frozen=True)
class HitOutcome:
    hull_damage: int
    absorbed: int
    destroyed: bool


@dataclass(frozen=True)
class CriticalOutcome:
    subsystem: SubsystemType
    energy_lost: int
    heat_added: int


@dataclass(frozen=True)
class RecoilOutcome:
    compensated: bool
    mass_spent: int
    rings_pushed: int


def apply_hit(target: Ship, damage: int, *, shielded: bool = True) -> tuple[Ship, HitOutcome]:
    absorbed = 0
    shields = target.subsystem(SubsystemType.SHIELDS)
    if shielded and shields is not None and shields.is_powered and not shields.is_broken:
        absorbed = min(damage, shields.allocated_energy)
    hull_damage = damage - absorbed
    updated = replace(
        target,
        hit_points=max(0, target.hit_points - hull_damage),
        heat=replace(target.heat, current_heat=target.heat.current_heat + absorbed),
    )
    return updated, HitOutcome(hull_damage=hull_damage, absorbed=absorbed, destroyed=updated.is_destroyed)


def apply_recoil(ship: Ship, rules: Ruleset) -> tuple[Ship, RecoilOutcome]:
    engines = ship.subsystem(SubsystemType.ENGINES)
    cost = rules.globals.railgun_recoil_mass
    if engines is not None and engines.is_powered and not engines.is_broken and ship.reaction_mass >= cost:
        return (
            replace(ship, reaction_mass=ship.reaction_mass - cost),
            RecoilOutcome(compensated=True, mass_spent=cost, rings_pushed=0),
        )
    pushed = displace_ring(ship, rules.world, -ship.facing.direction)
    return pushed, RecoilOutcome(compensated=False, mass_spent=0, rings_pushed=pushed.ring - ship.ring)


def roll_critical(chance: float, rng: random.Random) -> bool:
    if chance <= 0.0:
        return False
    return rng.random() < chance


def apply_critical(target: Ship, kind: SubsystemType) -> tuple[Ship, CriticalOutcome | None]:
    """Break a powered subsystem; its energy returns to the reactor as heat."""
    sub = target.subsystem(kind)
    if sub is None or sub.is_broken or not sub.is_powered or sub.allocated_energy == 0:
        return target, None
    lost = sub.allocated_energy
    broken = replace(sub, allocated_energy=0, is_powered=False, is_broken=True)
    updated = replace(
        target.with_subsystem(broken),
        reactor=replace(
            target.reactor,
            available_energy=min(target.reactor.total_capacity, target.reactor.available_energy + lost),
        ),
        heat=replace(target.heat, current_heat=target.heat.current_heat + lost),
    )
    return updated, CriticalOutcome(subsystem=kind, energy_lost=lost, heat_added=lost)
