from __future__ import annotations

from orbit_sim.domain.actions import Burn, Coast, FireWeapon, Rotate
from orbit_sim.domain.errors import TargetError
from orbit_sim.domain.types import BurnIntensity, Facing, SubsystemType
from orbit_sim.sim import validation
from orbit_sim.sim.resolver import resolve
from orbit_sim.view.preview import (
    burn_destination,
    firing_preview,
    project_post_movement,
    project_posture,
    return_budget,
)
from tests.helpers.factories import duel, with_ship

E = SubsystemType


def test_post_movement_projection_matches_resolver() -> None:
    state = duel(p1={"allocations": {E.ENGINES: 2}})
    ship = state.require_player("p1").ship

    projected = project_post_movement(ship, state.rules, burn=BurnIntensity.MEDIUM)
    result = resolve(state, [Burn("p1", BurnIntensity.MEDIUM, sequence=1)])
    resolved = result.state.require_player("p1").ship

    assert (projected.ring, projected.sector) == (resolved.ring, resolved.sector)
    assert burn_destination(ship, state.rules, BurnIntensity.MEDIUM) == (4, 2)
    assert project_post_movement(ship, state.rules).sector == 2
    assert state.require_player("p1").ship == ship


def test_projection_with_rotation_reverses_burn_direction() -> None:
    state = duel()
    ship = state.require_player("p1").ship

    projected = project_post_movement(ship, state.rules, facing=Facing.RETROGRADE, burn=BurnIntensity.LIGHT)

    assert (projected.ring, projected.sector) == (2, 2)


def test_posture_before_sequence_applies_earlier_steps_only() -> None:
    state = duel(p1={"allocations": {E.ROTATION: 1, E.RAILGUN: 4}})
    plan = [
        Rotate("p1", Facing.RETROGRADE, sequence=1),
        Coast("p1", sequence=2),
        FireWeapon("p1", E.RAILGUN, "p2", sequence=3),
    ]

    before_fire = project_posture(state, "p1", plan, before_sequence=3)
    before_coast = project_posture(state, "p1", plan, before_sequence=2)

    assert (before_fire.facing, before_fire.sector) == (Facing.RETROGRADE, 2)
    assert (before_coast.facing, before_coast.sector) == (Facing.RETROGRADE, 0)


def test_firing_preview_agrees_with_fire_validation() -> None:
    base = duel(p1={"allocations": {E.RAILGUN: 4}})
    for sector in range(24):
        state = with_ship(base, "p2", ring=3, sector=sector)
        (solution,) = firing_preview(state, "p1", E.RAILGUN)
        ship = state.require_player("p1").ship
        errors = validation.validate_fire(state, "p1", ship, FireWeapon("p1", E.RAILGUN, "p2", sequence=1))
        assert solution.in_range is not any(isinstance(e, TargetError) for e in errors), sector


def test_return_budget_spends_energy_before_venting() -> None:
    state = duel()

    budget = return_budget(state.rules, energy_to_return=2, heat_to_vent=5)

    assert (budget.energy_returned, budget.heat_vented, budget.remaining) == (2, 1, 0)
    assert return_budget(state.rules, 0, 1).remaining == 2
