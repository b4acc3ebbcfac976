from __future__ import annotations

from orbit_sim.domain.types import Ship
from orbit_sim.sim.state import GameState


def assert_energy_conserved(ship: Ship) -> None:
    assert ship.allocated_energy + ship.reactor.available_energy == ship.reactor.total_capacity


def assert_ship_in_bounds(state: GameState, ship: Ship) -> None:
    well = state.rules.world.well(ship.well_id)
    assert well is not None
    ring = well.ring(ship.ring)
    assert ring is not None
    assert 0 <= ship.sector < ring.sectors
    assert ship.transfer_state is None
    assert ship.heat.current_heat >= 0
    assert ship.reaction_mass >= 0
    for sub in ship.subsystems:
        assert 0 <= sub.allocated_energy <= state.rules.spec(sub.type).max_energy
        assert sub.is_powered == (sub.allocated_energy >= state.rules.spec(sub.type).min_energy)


def assert_state_consistent(state: GameState) -> None:
    for player in state.players:
        assert_energy_conserved(player.ship)
        assert_ship_in_bounds(state, player.ship)
        assert not any(sub.used_this_turn for sub in player.ship.subsystems)
    for missile in state.missiles:
        ring = state.rules.world.ring(missile.well_id, missile.ring)
        assert ring is not None
        assert 0 <= missile.sector < ring.sectors
        assert missile.turns_alive < state.rules.globals.missiles.max_turns_alive
    ids = [missile.id for missile in state.missiles]
    assert len(ids) == len(set(ids))
