"""Precondition checks for every action kind.

Each validator returns a list of ``RuleViolation``; an empty list means the
action may be applied to the given posture.
"""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from orbit_sim.domain.actions import (
    MOVEMENT_ACTIONS,
    TACTICAL_ACTIONS,
    Action,
    AllocateEnergy,
    Burn,
    Coast,
    DeallocateEnergy,
    FireWeapon,
    Rotate,
    VentHeat,
    WellTransfer,
    action_label,
)
from orbit_sim.domain.errors import (
    PositionError,
    ResourceError,
    RuleViolation,
    SequencingError,
    SubsystemStateError,
    TargetError,
)
from orbit_sim.domain.types import WEAPON_TYPES, Facing, Ship, SubsystemType
from orbit_sim.rules.ruleset import Ruleset
from orbit_sim.sim.state import GameState
from orbit_sim.systems.movement import adjustment_limit, burn_mass_cost, current_ring, find_transfer_point
from orbit_sim.systems.targeting import candidate_targets, solve


def validate_batch(state: GameState, player_id: str, actions: Sequence[Action]) -> list[RuleViolation]:
    """Batch-level checks: ownership, sequence numbers and movement structure."""
    errors: list[RuleViolation] = []
    foreign = sorted({action.player_id for action in actions if action.player_id != player_id})
    if foreign:
        errors.append(
            SequencingError(f"All actions must belong to the active player {player_id}, got {', '.join(foreign)}")
        )

    ship = state.require_player(player_id).ship
    if ship.is_destroyed:
        if actions:
            errors.append(SubsystemStateError("Ship is destroyed; only an empty turn may be submitted"))
        return errors
    errors.extend(validate_sequence(actions))
    return errors


def validate_sequence(actions: Sequence[Action]) -> list[RuleViolation]:
    errors: list[RuleViolation] = []
    tactical = [action for action in actions if isinstance(action, TACTICAL_ACTIONS)]

    unnumbered = [action for action in tactical if action.sequence is None]
    for action in unnumbered:
        errors.append(SequencingError(f"{action_label(action)} is missing a sequence number"))

    numbers = [action.sequence for action in tactical if action.sequence is not None]
    duplicates = sorted(seq for seq, count in Counter(numbers).items() if count > 1)
    if duplicates:
        listed = ", ".join(str(seq) for seq in duplicates)
        errors.append(SequencingError(f"Duplicate sequence numbers: {listed}"))
    if not unnumbered and sorted(set(numbers)) != list(range(1, len(set(numbers)) + 1)):
        errors.append(SequencingError("Sequence numbers must be contiguous starting at 1"))

    movements = [action for action in tactical if isinstance(action, MOVEMENT_ACTIONS)]
    if len(movements) != 1:
        errors.append(
            SequencingError(f"Exactly one movement action (coast or burn) is required, got {len(movements)}")
        )

    transfers = [action for action in tactical if isinstance(action, WellTransfer)]
    if len(transfers) > 1:
        errors.append(SequencingError("Only one well transfer is allowed per turn"))
    if transfers and any(isinstance(action, Burn) for action in movements):
        errors.append(SequencingError("A well transfer cannot be combined with a burn"))
    if transfers and len(movements) == 1:
        movement_seq = movements[0].sequence
        for transfer in transfers:
            if transfer.sequence is not None and movement_seq is not None and transfer.sequence > movement_seq:
                errors.append(SequencingError("A well transfer must come before the movement action"))
    return errors


def _amount_errors(rules: Ruleset, amount: int, what: str) -> list[RuleViolation]:
    low = rules.globals.min_energy_amount
    high = rules.globals.max_energy_amount
    if not low <= amount <= high:
        return [ResourceError(f"{what} amount must be between {low} and {high}, got {amount}")]
    return []


def _usable_subsystem(ship: Ship, kind: SubsystemType, *, check_used: bool = True) -> list[RuleViolation]:
    sub = ship.subsystem(kind)
    if sub is None:
        return [SubsystemStateError(f"Ship has no {kind.value} subsystem")]
    if sub.is_broken:
        return [SubsystemStateError(f"{kind.value} is broken")]
    if not sub.is_powered:
        return [SubsystemStateError(f"{kind.value} is not powered")]
    if check_used and sub.used_this_turn:
        return [SubsystemStateError(f"{kind.value} already used this turn")]
    return []


def validate_allocate(ship: Ship, rules: Ruleset, action: AllocateEnergy) -> list[RuleViolation]:
    errors = _amount_errors(rules, action.amount, "Allocation")
    if errors:
        return errors
    sub = ship.subsystem(action.subsystem)
    if sub is None:
        return [SubsystemStateError(f"Ship has no {action.subsystem.value} subsystem")]
    if sub.is_broken:
        return [SubsystemStateError(f"{action.subsystem.value} is broken")]
    spec = rules.spec(action.subsystem)
    if sub.allocated_energy + action.amount > spec.max_energy:
        errors.append(
            ResourceError(f"{action.subsystem.value} can hold at most {spec.max_energy} energy")
        )
    if action.amount > ship.reactor.available_energy:
        errors.append(
            ResourceError(
                f"Insufficient reactor energy: need {action.amount}, have {ship.reactor.available_energy}"
            )
        )
    return errors


def validate_deallocate(ship: Ship, rules: Ruleset, action: DeallocateEnergy) -> list[RuleViolation]:
    errors = _amount_errors(rules, action.amount, "Deallocation")
    if errors:
        return errors
    sub = ship.subsystem(action.subsystem)
    if sub is None:
        return [SubsystemStateError(f"Ship has no {action.subsystem.value} subsystem")]
    if action.amount > sub.allocated_energy:
        return [
            ResourceError(
                f"Cannot deallocate {action.amount} from {action.subsystem.value}; "
                f"only {sub.allocated_energy} allocated"
            )
        ]
    return []


def validate_vent(ship: Ship, rules: Ruleset, action: VentHeat) -> list[RuleViolation]:
    errors = _amount_errors(rules, action.amount, "Vent")
    if errors:
        return errors
    if ship.heat.heat_to_vent + action.amount > ship.heat.current_heat:
        return [ResourceError("Cannot vent more heat than current level")]
    return []


def validate_rotate(ship: Ship, action: Rotate) -> list[RuleViolation]:
    errors = _usable_subsystem(ship, SubsystemType.ROTATION)
    if ship.facing is action.target_facing:
        errors.append(PositionError(f"Ship is already facing {action.target_facing.value}"))
    return errors


def validate_coast(ship: Ship, action: Coast) -> list[RuleViolation]:
    if action.activate_scoop:
        return _usable_subsystem(ship, SubsystemType.SCOOP)
    return []


def validate_burn(ship: Ship, rules: Ruleset, action: Burn) -> list[RuleViolation]:
    errors: list[RuleViolation] = []
    engines = ship.subsystem(SubsystemType.ENGINES)
    cost = rules.burn_cost(action.intensity)
    if engines is None:
        return [SubsystemStateError("Ship has no engines subsystem")]
    if engines.is_broken:
        return [SubsystemStateError("engines is broken")]
    if engines.allocated_energy < cost.energy:
        errors.append(
            ResourceError(
                f"{action.intensity.value} burn requires {cost.energy} energy in engines, "
                f"have {engines.allocated_energy}"
            )
        )
    limit = adjustment_limit(current_ring(ship, rules.world).velocity)
    if abs(action.sector_adjustment) > limit:
        errors.append(PositionError(f"Sector adjustment must be within ±{limit}"))
    mass = burn_mass_cost(rules, action.intensity, action.sector_adjustment)
    if ship.reaction_mass < mass:
        errors.append(
            ResourceError(f"{action.intensity.value} burn requires {mass} reaction mass, have {ship.reaction_mass}")
        )
    return errors


def validate_fire(state: GameState, player_id: str, ship: Ship, action: FireWeapon) -> list[RuleViolation]:
    rules = state.rules
    if action.weapon not in WEAPON_TYPES:
        return [SubsystemStateError(f"{action.weapon.value} is not a weapon")]
    errors = _usable_subsystem(ship, action.weapon)
    if action.weapon is SubsystemType.MISSILES and ship.missile_inventory <= 0:
        errors.append(ResourceError("No missiles remaining"))
    if action.weapon is SubsystemType.MISSILES and action.critical_target is not None:
        errors.append(TargetError("Missiles cannot aim at a subsystem"))

    if action.target_id == player_id:
        errors.append(TargetError("Cannot target own ship"))
        return errors
    if not candidate_targets(player_id, ship, state.players):
        errors.append(TargetError("No targets available"))
        return errors
    target = state.player(action.target_id)
    if target is None:
        errors.append(TargetError(f"Target not found: {action.target_id}"))
        return errors
    if target.ship.is_destroyed:
        errors.append(TargetError(f"{target.name} is already destroyed"))
        return errors
    if target.ship.well_id != ship.well_id:
        errors.append(TargetError(f"{target.name} is not in the same gravity well"))
        return errors

    weapon = rules.weapon(action.weapon)
    if weapon is not None and action.weapon is not SubsystemType.MISSILES:
        solution = solve(weapon, ship, target.id, target.ship, rules.world)
        if not solution.in_range:
            reason = " (wrong facing)" if solution.wrong_facing else ""
            errors.append(TargetError(f"{target.name} is out of {action.weapon.value} range{reason}"))
    return errors


def validate_well_transfer(ship: Ship, rules: Ruleset, action: WellTransfer) -> list[RuleViolation]:
    world = rules.world
    destination = world.well(action.destination_well_id)
    if destination is None:
        return [PositionError(f"Unknown gravity well: {action.destination_well_id}")]
    if destination.id == ship.well_id:
        return [PositionError(f"Ship is already in {destination.name}")]
    well = world.well(ship.well_id)
    if well is None or ship.ring != well.outermost_ring.index:
        return [PositionError("Well transfers are only possible from the outermost ring")]
    point = find_transfer_point(world, ship, destination.id)
    if point is None:
        return [PositionError(f"No transfer point to {destination.name} at sector {ship.sector}")]

    errors: list[RuleViolation] = []
    if ship.facing is not Facing.PROGRADE:
        errors.append(PositionError("Ship must face prograde to transfer"))
    if point.required_engine_level is not None:
        engines = ship.subsystem(SubsystemType.ENGINES)
        level = engines.allocated_energy if engines is not None and not engines.is_broken else 0
        if level < point.required_engine_level:
            errors.append(
                ResourceError(f"Well transfer requires {point.required_engine_level} energy in engines, have {level}")
            )
    if ship.reaction_mass < rules.globals.well_transfer_mass:
        errors.append(
            ResourceError(
                f"Well transfer requires {rules.globals.well_transfer_mass} reaction mass, have {ship.reaction_mass}"
            )
        )
    return errors
