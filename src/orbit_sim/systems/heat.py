"""Venting intent and the end-of-turn heat step."""

from __future__ import annotations

from dataclasses import dataclass, replace

from orbit_sim.domain.types import Heat, Ship
from orbit_sim.rules.ruleset import Ruleset
from orbit_sim.systems.energy import overclock_heat


@dataclass(frozen=True)
class HeatOutcome:
    damage: int
    vented: int
    generated: int


def record_vent(ship: Ship, amount: int) -> Ship:
    return replace(ship, heat=replace(ship.heat, heat_to_vent=ship.heat.heat_to_vent + amount))


def heat_damage(heat_at_turn_start: int, heat_vented: int) -> int:
    return max(0, heat_at_turn_start - heat_vented)


def end_of_turn(ship: Ship, rules: Ruleset, heat_at_turn_start: int) -> tuple[Ship, HeatOutcome]:
    """Apply heat damage, venting and overclock heat, then clear per-turn flags."""
    damage = heat_damage(heat_at_turn_start, ship.heat.heat_to_vent)
    vented = min(ship.heat.heat_to_vent, ship.heat.current_heat)
    generated = overclock_heat(ship, rules)
    subsystems = tuple(replace(sub, used_this_turn=False) for sub in ship.subsystems)
    updated = replace(
        ship,
        hit_points=max(0, ship.hit_points - damage),
        heat=Heat(current_heat=ship.heat.current_heat - vented + generated, heat_to_vent=0),
        subsystems=subsystems,
    )
    return updated, HeatOutcome(damage=damage, vented=vented, generated=generated)
