"""Turn resolution: validated, all-or-nothing application of one player's batch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence, assert_never

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
    TacticalAction,
    VentHeat,
    WellTransfer,
    action_label,
)
from orbit_sim.domain.errors import EngineFault, RuleViolation, SequencingError
from orbit_sim.domain.events import LogEntry
from orbit_sim.domain.types import SubsystemType
from orbit_sim.sim import validation
from orbit_sim.sim.state import GameState
from orbit_sim.systems import energy, heat, missiles, movement
from orbit_sim.systems.combat import apply_critical, apply_hit, apply_recoil, roll_critical

logger = logging.getLogger(__name__)


@dataclass()
class TurnResult:
    ok: bool
    state: GameState
    log: list[LogEntry]
    errors: list[str]
    violations: list[RuleViolation]


def resolve(state: GameState, actions: Sequence[Action]) -> TurnResult:
    """Resolve the active player's turn.

    On any rule violation the input ``state`` is returned untouched together
    with every violation found in the failing phase. ``EngineFault`` propagates.
    """
    player = state.active_player
    pid = player.id
    rules = state.rules
    entries: list[LogEntry] = []

    def log(action: str, result: str) -> None:
        entries.append(
            LogEntry(turn=state.turn, player_id=pid, player_name=player.name, action=action, result=result)
        )

    def fail(violations: list[RuleViolation]) -> TurnResult:
        logger.debug("Turn %d rejected for %s: %s", state.turn, pid, [str(v) for v in violations])
        return TurnResult(
            ok=False,
            state=state,
            log=[],
            errors=[str(violation) for violation in violations],
            violations=list(violations),
        )

    if state.is_over:
        return fail([SequencingError("Game is over")])

    violations = validation.validate_batch(state, pid, actions)
    if violations:
        return fail(violations)

    ship = player.ship
    if ship.transfer_state is not None:
        raise EngineFault(f"{pid} starts its turn mid-transfer")
    if not energy.is_conserved(ship):
        raise EngineFault(f"{pid} reactor accounting is inconsistent")
    heat_at_turn_start = ship.heat.current_heat

    if ship.is_destroyed:
        log("pass", "Ship destroyed; turn passed")
        working, messages = missiles.advance_missiles(state, pid)
        for message in messages:
            log("missile", message)
        return _commit(working, entries)

    # Phases 1-3: energy and venting; unordered within each phase.
    phases: tuple[tuple[type, ...], ...] = ((AllocateEnergy,), (DeallocateEnergy,), (VentHeat,))
    for kinds in phases:
        phase_errors: list[RuleViolation] = []
        for action in actions:
            if not isinstance(action, kinds):
                continue
            if isinstance(action, AllocateEnergy):
                found = validation.validate_allocate(ship, rules, action)
                if not found:
                    ship = energy.allocate(ship, rules, action.subsystem, action.amount)
                    level = ship.subsystem(action.subsystem).allocated_energy
                    log(action_label(action), f"{action.subsystem.value} now at {level}")
            elif isinstance(action, DeallocateEnergy):
                found = validation.validate_deallocate(ship, rules, action)
                if not found:
                    ship = energy.deallocate(ship, rules, action.subsystem, action.amount)
                    log(action_label(action), f"{action.amount} energy returned to reactor")
            else:
                found = validation.validate_vent(ship, rules, action)
                if not found:
                    ship = heat.record_vent(ship, action.amount)
                    log(action_label(action), f"{ship.heat.heat_to_vent} heat queued to vent")
            phase_errors.extend(found)
        if phase_errors:
            return fail(phase_errors)

    working = state.with_ship(pid, ship)

    # Phase 4: tactical actions in sequence order.
    tactical = sorted(
        (action for action in actions if isinstance(action, TACTICAL_ACTIONS)),
        key=lambda action: action.sequence or 0,
    )
    moved = False
    for action in tactical:
        found = _validate_tactical(working, pid, action)
        if found:
            return fail(found)
        working, result = _apply_tactical(working, pid, action, moved=moved)
        log(action_label(action), result)
        moved = moved or isinstance(action, MOVEMENT_ACTIONS)

    working, messages = missiles.advance_missiles(working, pid)
    for message in messages:
        log("missile", message)

    ship = working.require_player(pid).ship
    ship, outcome = heat.end_of_turn(ship, rules, heat_at_turn_start)
    working = working.with_ship(pid, ship)
    log(
        "end_of_turn",
        f"heat damage {outcome.damage}, vented {outcome.vented}, generated {outcome.generated}",
    )
    if ship.is_destroyed:
        log("end_of_turn", f"{player.name} destroyed by heat")
    return _commit(working, entries)


def _validate_tactical(state: GameState, pid: str, action: TacticalAction) -> list[RuleViolation]:
    ship = state.require_player(pid).ship
    rules = state.rules
    if isinstance(action, Rotate):
        return validation.validate_rotate(ship, action)
    if isinstance(action, Coast):
        return validation.validate_coast(ship, action)
    if isinstance(action, Burn):
        return validation.validate_burn(ship, rules, action)
    if isinstance(action, FireWeapon):
        return validation.validate_fire(state, pid, ship, action)
    if isinstance(action, WellTransfer):
        return validation.validate_well_transfer(ship, rules, action)
    assert_never(action)


def _apply_tactical(state: GameState, pid: str, action: TacticalAction, *, moved: bool) -> tuple[GameState, str]:
    ship = state.require_player(pid).ship
    rules = state.rules

    if isinstance(action, Rotate):
        ship = movement.rotate(ship, action.target_facing)
        return state.with_ship(pid, ship), f"now facing {ship.facing.value}"

    if isinstance(action, Coast):
        before = ship.reaction_mass
        ship = movement.execute_coast(ship, rules, activate_scoop=action.activate_scoop)
        result = f"drifted to R{ship.ring} S{ship.sector}"
        if action.activate_scoop:
            result += f", scooped {ship.reaction_mass - before} mass"
        return state.with_ship(pid, ship), result

    if isinstance(action, Burn):
        ship = movement.execute_burn(ship, rules, action.intensity, action.sector_adjustment)
        return state.with_ship(pid, ship), f"burned to R{ship.ring} S{ship.sector}, mass {ship.reaction_mass}"

    if isinstance(action, WellTransfer):
        point = movement.find_transfer_point(rules.world, ship, action.destination_well_id)
        if point is None:
            raise EngineFault("Validated well transfer lost its transfer point")
        ship = movement.execute_well_transfer(ship, rules, point)
        return state.with_ship(pid, ship), f"transferred to {ship.well_id} R{ship.ring} S{ship.sector}"

    if isinstance(action, FireWeapon):
        return _fire(state, pid, action, moved=moved)

    assert_never(action)


def _fire(state: GameState, pid: str, action: FireWeapon, *, moved: bool) -> tuple[GameState, str]:
    rules = state.rules
    ship = state.require_player(pid).ship
    sub = ship.subsystem(action.weapon)
    weapon = rules.weapon(action.weapon)
    if sub is None or weapon is None:
        raise EngineFault(f"Validated shot lost its {action.weapon.value} subsystem")
    ship = ship.with_subsystem(replace(sub, used_this_turn=True))
    target = state.require_player(action.target_id)

    if action.weapon is SubsystemType.MISSILES:
        seq = state.missile_seq + 1
        missile = missiles.launch(pid, target.id, ship, turn=state.turn, seq=seq, skip_orbital=moved)
        ship = replace(ship, missile_inventory=ship.missile_inventory - 1)
        state = replace(state.with_ship(pid, ship), missiles=state.missiles + (missile,), missile_seq=seq)
        return state, f"launched {missile.id} at {target.name}"

    state = state.with_ship(pid, ship)
    hit_ship, outcome = apply_hit(target.ship, weapon.damage)
    state = state.with_ship(target.id, hit_ship)
    result = f"hit {target.name} for {outcome.hull_damage}"
    if outcome.absorbed:
        result += f" ({outcome.absorbed} absorbed by shields)"
    if outcome.destroyed:
        result += f"; {target.name} destroyed"
    elif action.critical_target is not None:
        rng = state.rng(action_seq=action.sequence or 0, stream=pid, purpose="critical")
        if roll_critical(rules.globals.critical_hit_chance, rng):
            broken_ship, critical = apply_critical(hit_ship, action.critical_target)
            if critical is not None:
                state = state.with_ship(target.id, broken_ship)
                result += f"; critical hit broke {critical.subsystem.value} (+{critical.heat_added} heat)"
                logger.info("Critical hit on %s %s", target.id, critical.subsystem.value)

    if weapon.has_recoil:
        recoiled, recoil = apply_recoil(state.require_player(pid).ship, rules)
        state = state.with_ship(pid, recoiled)
        if recoil.compensated:
            result += f"; recoil compensated with {recoil.mass_spent} mass"
        else:
            result += f"; recoil pushed ship to R{recoiled.ring}"
    return state, result


def _commit(state: GameState, entries: list[LogEntry]) -> TurnResult:
    alive = state.alive_players()
    is_over = len(state.players) > 1 and len(alive) <= 1
    winner_id = alive[0].id if is_over and alive else None
    if is_over:
        logger.info("Game over on turn %d: %s", state.turn, winner_id or "no survivors")

    count = len(state.players)
    current = state.active_player_index
    next_index = (current + 1) % count
    wrapped = current + 1 >= count
    for step in range(1, count + 1):
        candidate = (current + step) % count
        if not state.players[candidate].ship.is_destroyed:
            next_index = candidate
            wrapped = current + step >= count
            break

    committed = replace(
        state,
        turn=state.turn + 1 if wrapped else state.turn,
        active_player_index=next_index,
        turn_log=state.turn_log + tuple(entries),
        winner_id=winner_id,
        is_over=is_over,
    )
    logger.debug("Turn %d resolved for %s with %d log entries", state.turn, state.active_player.id, len(entries))
    return TurnResult(ok=True, state=committed, log=entries, errors=[], violations=[])
