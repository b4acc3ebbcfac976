from __future__ import annotations

from dataclasses import replace

from hypothesis import given, settings
from hypothesis import strategies as st

from orbit_sim.domain.types import Facing, Player, SubsystemType
from orbit_sim.rules.scenario import build_ship
from orbit_sim.systems.targeting import candidate_targets, compute_firing_solutions, solve
from tests.helpers.factories import rules as default_rules
from tests.helpers.strategies import position_strategy

RULES = default_rules()
RAILGUN = RULES.weapon(SubsystemType.RAILGUN)
LASER = RULES.weapon(SubsystemType.LASER)
MISSILES = RULES.weapon(SubsystemType.MISSILES)


def _ship(ring: int, sector: int, facing: Facing = Facing.PROGRADE, well_id: str = "blackhole"):
    return build_ship(RULES, well_id=well_id, ring=ring, sector=sector, facing=facing)


def test_spinal_hits_along_facing() -> None:
    attacker = _ship(3, 0)
    solution = solve(RAILGUN, attacker, "p2", _ship(3, 4), RULES.world)

    assert solution.in_range is True
    assert solution.sector_distance == 4
    assert solution.ring_distance == 0
    assert solution.requires_engines is True
    assert solution.wrong_facing is False


def test_spinal_misses_behind_and_flags_wrong_facing() -> None:
    attacker = _ship(3, 0, Facing.RETROGRADE)
    solution = solve(RAILGUN, attacker, "p2", _ship(3, 4), RULES.world)

    assert solution.in_range is False
    assert solution.wrong_facing is True

    retro = solve(RAILGUN, attacker, "p2", _ship(3, 20), RULES.world)
    assert retro.in_range is True


def test_spinal_excludes_distance_zero_other_rings_and_long_range() -> None:
    attacker = _ship(3, 0)
    assert solve(RAILGUN, attacker, "p2", _ship(3, 0), RULES.world).in_range is False
    assert solve(RAILGUN, attacker, "p2", _ship(2, 3), RULES.world).in_range is False
    assert solve(RAILGUN, attacker, "p2", _ship(3, 6), RULES.world).in_range is True
    assert solve(RAILGUN, attacker, "p2", _ship(3, 7), RULES.world).in_range is False


def test_broadside_needs_adjacent_ring() -> None:
    attacker = _ship(3, 10, Facing.RETROGRADE)
    assert solve(LASER, attacker, "p2", _ship(4, 11), RULES.world).in_range is True
    assert solve(LASER, attacker, "p2", _ship(3, 11), RULES.world).in_range is False
    assert solve(LASER, attacker, "p2", _ship(1, 10), RULES.world).in_range is False


@settings(max_examples=100)
@given(
    attacker_pos=position_strategy(RULES, "blackhole"),
    target_pos=position_strategy(RULES, "blackhole"),
    facing=st.sampled_from(list(Facing)),
    weapon_type=st.sampled_from([SubsystemType.LASER, SubsystemType.MISSILES]),
)
def test_turret_and_broadside_range_rule(attacker_pos, target_pos, facing, weapon_type) -> None:
    weapon = RULES.weapon(weapon_type)
    _, a_ring, a_sector = attacker_pos
    _, t_ring, t_sector = target_pos

    solution = solve(weapon, _ship(a_ring, a_sector, facing), "p2", _ship(t_ring, t_sector), RULES.world)

    ring_distance = abs(a_ring - t_ring)
    sector_distance = min((a_sector - t_sector) % 24, (t_sector - a_sector) % 24)
    expected = 0 < ring_distance <= weapon.ring_range and sector_distance <= weapon.sector_range
    assert solution.in_range is expected
    assert solution.distance == ring_distance + sector_distance
    assert solution.requires_engines is False


def test_candidates_exclude_self_destroyed_and_other_wells() -> None:
    me = _ship(3, 0)
    players = [
        Player("me", "Me", me),
        Player("near", "Near", _ship(3, 2)),
        Player("dead", "Dead", replace(_ship(3, 3), hit_points=0)),
        Player("away", "Away", _ship(3, 2, well_id="alpha")),
    ]

    assert [p.id for p in candidate_targets("me", me, players)] == ["near"]
    solutions = compute_firing_solutions(MISSILES, "me", me, players, RULES.world)
    assert [s.target_id for s in solutions] == ["near"]
