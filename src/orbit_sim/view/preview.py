"""Read-only projections for range and movement previews."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from orbit_sim.domain.actions import (
    TACTICAL_ACTIONS,
    Action,
    AllocateEnergy,
    Burn,
    Coast,
    DeallocateEnergy,
    Rotate,
    WellTransfer,
)
from orbit_sim.domain.types import BurnIntensity, Facing, Ship, SubsystemType
from orbit_sim.rules.ruleset import Ruleset
from orbit_sim.sim import validation
from orbit_sim.sim.state import GameState
from orbit_sim.systems import energy, movement
from orbit_sim.systems.targeting import FiringSolution, compute_firing_solutions


@dataclass(frozen=True)
class ReturnBudget:
    energy_returned: int
    heat_vented: int
    remaining: int


def burn_destination(ship: Ship, rules: Ruleset, intensity: BurnIntensity, sector_adjustment: int = 0) -> tuple[int, int]:
    projected = movement.execute_burn(ship, rules, intensity, sector_adjustment)
    return projected.ring, projected.sector


def project_post_movement(
    ship: Ship,
    rules: Ruleset,
    *,
    facing: Facing | None = None,
    burn: BurnIntensity | None = None,
    sector_adjustment: int = 0,
) -> Ship:
    """Where the ship ends up after an optional rotation and one coast or burn."""
    if facing is not None:
        ship = replace(ship, facing=facing)
    if burn is None:
        return movement.apply_drift(ship, rules.world)
    return movement.execute_burn(ship, rules, burn, sector_adjustment)


def project_posture(
    state: GameState,
    player_id: str,
    actions: Sequence[Action],
    *,
    before_sequence: int | None = None,
) -> Ship:
    """Project the ship through planned actions up to (not including) ``before_sequence``.

    Energy actions are applied first when they would be legal; tactical actions
    only move or turn the ship, weapons have no effect on the projection.
    """
    rules = state.rules
    ship = state.require_player(player_id).ship
    for action in actions:
        if isinstance(action, AllocateEnergy) and not validation.validate_allocate(ship, rules, action):
            ship = energy.allocate(ship, rules, action.subsystem, action.amount)
    for action in actions:
        if isinstance(action, DeallocateEnergy) and not validation.validate_deallocate(ship, rules, action):
            ship = energy.deallocate(ship, rules, action.subsystem, action.amount)

    tactical = sorted(
        (action for action in actions if isinstance(action, TACTICAL_ACTIONS) and action.sequence is not None),
        key=lambda action: action.sequence,
    )
    for action in tactical:
        if before_sequence is not None and action.sequence >= before_sequence:
            break
        if isinstance(action, Rotate):
            ship = replace(ship, facing=action.target_facing)
        elif isinstance(action, Coast):
            ship = movement.apply_drift(ship, rules.world)
        elif isinstance(action, Burn):
            if not validation.validate_burn(ship, rules, action):
                ship = movement.execute_burn(ship, rules, action.intensity, action.sector_adjustment)
            else:
                ship = movement.apply_drift(ship, rules.world)
        elif isinstance(action, WellTransfer):
            point = movement.find_transfer_point(rules.world, ship, action.destination_well_id)
            if point is not None:
                ship = ship.moved_to(point.to_well_id, point.to_ring, point.to_sector)
    return ship


def firing_preview(
    state: GameState,
    player_id: str,
    weapon: SubsystemType,
    actions: Sequence[Action] = (),
    *,
    before_sequence: int | None = None,
) -> list[FiringSolution]:
    stats = state.rules.weapon(weapon)
    if stats is None:
        return []
    posture = project_posture(state, player_id, actions, before_sequence=before_sequence)
    return compute_firing_solutions(stats, player_id, posture, state.players, state.rules.world)


def return_budget(rules: Ruleset, energy_to_return: int, heat_to_vent: int) -> ReturnBudget:
    """Rate-limited approximation of energy return and venting for the UI.

    The resolver returns energy instantly; this only shows how a shared
    per-turn budget would be spent, energy first.
    """
    limit = rules.globals.max_return_rate
    returned = min(max(0, energy_to_return), limit)
    vented = min(max(0, heat_to_vent), limit - returned)
    return ReturnBudget(energy_returned=returned, heat_vented=vented, remaining=limit - returned - vented)
