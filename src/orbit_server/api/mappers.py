from __future__ import annotations

from orbit_sim.domain.actions import (
    Action,
    AllocateEnergy,
    Burn,
    Coast,
    DeallocateEnergy,
    FireWeapon,
    Rotate,
    VentHeat,
    WellTransfer,
)
from orbit_sim.domain.events import LogEntry
from orbit_sim.domain.types import BurnIntensity, Facing, Missile, Ship, SubsystemType
from orbit_sim.sim.resolver import TurnResult
from orbit_sim.sim.state import GameState
from orbit_sim.systems.targeting import FiringSolution
from orbit_server.api import schemas


def to_domain_action(request: schemas.ActionRequest) -> Action:
    if isinstance(request, schemas.AllocateEnergyRequest):
        return AllocateEnergy(
            player_id=request.player_id,
            subsystem=SubsystemType(request.data.subsystem),
            amount=request.data.amount,
        )
    if isinstance(request, schemas.DeallocateEnergyRequest):
        return DeallocateEnergy(
            player_id=request.player_id,
            subsystem=SubsystemType(request.data.subsystem),
            amount=request.data.amount,
        )
    if isinstance(request, schemas.VentHeatRequest):
        return VentHeat(player_id=request.player_id, amount=request.data.amount)
    if isinstance(request, schemas.RotateRequest):
        return Rotate(
            player_id=request.player_id,
            target_facing=Facing(request.data.target_facing),
            sequence=request.sequence,
        )
    if isinstance(request, schemas.CoastRequest):
        return Coast(
            player_id=request.player_id,
            activate_scoop=request.data.activate_scoop,
            sequence=request.sequence,
        )
    if isinstance(request, schemas.BurnRequest):
        return Burn(
            player_id=request.player_id,
            intensity=BurnIntensity(request.data.intensity),
            sector_adjustment=request.data.sector_adjustment,
            sequence=request.sequence,
        )
    if isinstance(request, schemas.FireWeaponRequest):
        return FireWeapon(
            player_id=request.player_id,
            weapon=SubsystemType(request.data.weapon_type),
            target_id=request.data.target_player_id,
            critical_target=SubsystemType(request.data.critical_target) if request.data.critical_target else None,
            sequence=request.sequence,
        )
    if isinstance(request, schemas.WellTransferRequest):
        return WellTransfer(
            player_id=request.player_id,
            destination_well_id=request.data.destination_well_id,
            sequence=request.sequence,
        )
    raise ValueError(f"Unsupported action type: {request!r}")


def _ship(ship: Ship) -> schemas.ShipView:
    return schemas.ShipView(
        well_id=ship.well_id,
        ring=ship.ring,
        sector=ship.sector,
        facing=ship.facing.value,
        reaction_mass=ship.reaction_mass,
        hit_points=ship.hit_points,
        max_hit_points=ship.max_hit_points,
        missile_inventory=ship.missile_inventory,
        subsystems=[
            schemas.SubsystemView(
                type=sub.type.value,
                allocated_energy=sub.allocated_energy,
                is_powered=sub.is_powered,
                used_this_turn=sub.used_this_turn,
                is_broken=sub.is_broken,
            )
            for sub in ship.subsystems
        ],
        reactor=schemas.ReactorView(
            total_capacity=ship.reactor.total_capacity,
            available_energy=ship.reactor.available_energy,
        ),
        heat=schemas.HeatView(current_heat=ship.heat.current_heat, heat_to_vent=ship.heat.heat_to_vent),
    )


def _missile(missile: Missile) -> schemas.MissileView:
    return schemas.MissileView(
        id=missile.id,
        owner_id=missile.owner_id,
        target_id=missile.target_id,
        well_id=missile.well_id,
        ring=missile.ring,
        sector=missile.sector,
        turn_fired=missile.turn_fired,
        turns_alive=missile.turns_alive,
    )


def _log_entry(entry: LogEntry) -> schemas.LogEntryView:
    return schemas.LogEntryView(
        turn=entry.turn,
        player_id=entry.player_id,
        player_name=entry.player_name,
        action=entry.action,
        result=entry.result,
    )


def build_state_response(game_id: str, state: GameState) -> schemas.GameStateResponse:
    return schemas.GameStateResponse(
        game_id=game_id,
        turn=state.turn,
        active_player_id=state.active_player.id,
        winner_id=state.winner_id,
        is_over=state.is_over,
        players=[schemas.PlayerView(id=p.id, name=p.name, ship=_ship(p.ship)) for p in state.players],
        missiles=[_missile(m) for m in state.missiles],
        turn_log=[_log_entry(entry) for entry in state.turn_log],
    )


def build_turn_response(game_id: str, result: TurnResult) -> schemas.TurnResponse:
    return schemas.TurnResponse(
        ok=result.ok,
        errors=list(result.errors),
        log=[_log_entry(entry) for entry in result.log],
        state=build_state_response(game_id, result.state),
    )


def build_firing_solutions(weapon: SubsystemType, solutions: list[FiringSolution]) -> schemas.FiringSolutionsResponse:
    return schemas.FiringSolutionsResponse(
        weapon=weapon.value,
        solutions=[
            schemas.FiringSolutionView(
                target_id=s.target_id,
                in_range=s.in_range,
                distance=s.distance,
                sector_distance=s.sector_distance,
                ring_distance=s.ring_distance,
                wrong_facing=s.wrong_facing,
                requires_engines=s.requires_engines,
            )
            for s in solutions
        ],
    )


def build_position(ship: Ship) -> schemas.PositionView:
    return schemas.PositionView(well_id=ship.well_id, ring=ship.ring, sector=ship.sector, facing=ship.facing.value)
