from __future__ import annotations

from dataclasses import replace

from hypothesis import given, settings
from hypothesis import strategies as st

from orbit_sim.domain.types import Heat, SubsystemType
from orbit_sim.rules.scenario import build_ship
from orbit_sim.systems import energy, heat
from tests.helpers.factories import rules as default_rules
from tests.helpers.invariants import assert_energy_conserved
from tests.helpers.strategies import allocation_strategy

RULES = default_rules()


def _ship(**alloc):
    allocations = {SubsystemType(k): v for k, v in alloc.items()}
    return build_ship(RULES, well_id="blackhole", ring=3, sector=0, allocations=allocations)


@settings(max_examples=50)
@given(allocations=allocation_strategy(RULES))
def test_allocation_round_trip_conserves_energy(allocations) -> None:
    ship = _ship()
    for kind, amount in allocations.items():
        if amount:
            ship = energy.allocate(ship, RULES, kind, amount)
            assert_energy_conserved(ship)

    for sub in ship.subsystems:
        assert sub.is_powered == (sub.allocated_energy >= RULES.spec(sub.type).min_energy)

    for kind, amount in allocations.items():
        if amount:
            ship = energy.deallocate(ship, RULES, kind, amount)
            assert_energy_conserved(ship)
    assert ship.reactor.available_energy == ship.reactor.total_capacity


def test_overclock_heat_counts_energy_above_thresholds() -> None:
    assert energy.overclock_heat(_ship(engines=2, laser=2), RULES) == 0
    assert energy.overclock_heat(_ship(engines=3, railgun=4, laser=3), RULES) == 3


@settings(max_examples=50)
@given(
    start=st.integers(min_value=0, max_value=12),
    vent_share=st.floats(min_value=0, max_value=1),
    allocations=allocation_strategy(RULES),
)
def test_heat_damage_formula(start: int, vent_share: float, allocations) -> None:
    vent = int(start * vent_share)
    ship = replace(
        build_ship(RULES, well_id="blackhole", ring=3, sector=0, allocations=allocations),
        heat=Heat(current_heat=start, heat_to_vent=vent),
    )
    generated = energy.overclock_heat(ship, RULES)

    updated, outcome = heat.end_of_turn(ship, RULES, heat_at_turn_start=start)

    assert outcome.damage == max(0, start - vent)
    assert updated.hit_points == max(0, ship.hit_points - outcome.damage)
    assert updated.heat.current_heat == start - vent + generated
    assert updated.heat.heat_to_vent == 0
    assert not any(sub.used_this_turn for sub in updated.subsystems)


def test_generated_heat_never_damages_the_same_turn() -> None:
    ship = _ship(railgun=4, engines=3)

    updated, outcome = heat.end_of_turn(ship, RULES, heat_at_turn_start=0)

    assert outcome.damage == 0
    assert outcome.generated == 2
    assert updated.hit_points == ship.hit_points
    assert updated.heat.current_heat == 2


def test_record_vent_accumulates_intent_only() -> None:
    ship = replace(_ship(), heat=Heat(current_heat=5))
    ship = heat.record_vent(heat.record_vent(ship, 2), 1)
    assert ship.heat.heat_to_vent == 3
    assert ship.heat.current_heat == 5
