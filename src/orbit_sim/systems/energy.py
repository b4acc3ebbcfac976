"""Reactor allocation and overclock heat."""

from __future__ import annotations

from dataclasses import replace

from orbit_sim.domain.errors import EngineFault
from orbit_sim.domain.types import Ship, SubsystemType
from orbit_sim.rules.ruleset import Ruleset


def _require_subsystem(ship: Ship, kind: SubsystemType):
    sub = ship.subsystem(kind)
    if sub is None:
        raise EngineFault(f"Ship has no {kind.value} subsystem")
    return sub


def allocate(ship: Ship, rules: Ruleset, kind: SubsystemType, amount: int) -> Ship:
    sub = _require_subsystem(ship, kind)
    spec = rules.spec(kind)
    updated = ship.with_subsystem(sub.with_allocation(sub.allocated_energy + amount, spec.min_energy))
    reactor = replace(ship.reactor, available_energy=ship.reactor.available_energy - amount)
    return replace(updated, reactor=reactor)


def deallocate(ship: Ship, rules: Ruleset, kind: SubsystemType, amount: int) -> Ship:
    sub = _require_subsystem(ship, kind)
    spec = rules.spec(kind)
    updated = ship.with_subsystem(sub.with_allocation(sub.allocated_energy - amount, spec.min_energy))
    reactor = replace(ship.reactor, available_energy=ship.reactor.available_energy + amount)
    return replace(updated, reactor=reactor)


def overclock_heat(ship: Ship, rules: Ruleset) -> int:
    """Heat generated this turn: one per energy unit above each threshold."""
    return sum(
        max(0, sub.allocated_energy - rules.spec(sub.type).overclock_threshold) for sub in ship.subsystems
    )


def is_conserved(ship: Ship) -> bool:
    return ship.allocated_energy + ship.reactor.available_energy == ship.reactor.total_capacity
