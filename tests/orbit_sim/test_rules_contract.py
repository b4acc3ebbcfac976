"""Ruleset, world geometry and scenario loading."""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

import pytest

from orbit_sim.domain.types import BurnIntensity, SubsystemType, WeaponArc
from orbit_sim.rules.ruleset import DEFAULT_RULES_DIR, RulesError, Ruleset
from orbit_sim.rules.scenario import ScenarioError, build_game_state, load_game_state
from orbit_sim.rules.world import TransferSectors, calculate_transfer_points
from tests.helpers.factories import rules as default_rules
from tests.helpers.invariants import assert_energy_conserved


def test_load_default_ruleset() -> None:
    rules = Ruleset.load(DEFAULT_RULES_DIR)

    blackhole = rules.world.wells["blackhole"]
    assert [ring.velocity for ring in blackhole.rings] == [8, 4, 2, 1]
    assert blackhole.outermost_ring.index == 4
    for well in rules.world.wells.values():
        assert all(ring.sectors == 24 for ring in well.rings)
    assert [ring.velocity for ring in rules.world.wells["alpha"].rings] == [4, 2, 1]

    assert rules.burn_cost(BurnIntensity.MEDIUM).mass == 2
    assert rules.burn_cost(BurnIntensity.MEDIUM).rings == 2
    railgun = rules.weapon(SubsystemType.RAILGUN)
    assert railgun is not None and railgun.arc is WeaponArc.SPINAL and railgun.has_recoil
    assert rules.weapon(SubsystemType.ENGINES) is None
    assert set(rules.subsystems) == set(SubsystemType)
    assert rules.globals.critical_hit_chance == 0.1


def test_transfer_points_link_central_well_and_planets() -> None:
    world = default_rules().world
    assert len(world.transfer_points) == 6

    outbound = world.transfers_from("blackhole", 4, 17)
    assert len(outbound) == 1
    point = outbound[0]
    assert (point.to_well_id, point.to_ring, point.to_sector) == ("alpha", 3, 7)
    assert point.required_engine_level == 3

    back = world.transfers_from("alpha", 3, 16)
    assert [(p.to_well_id, p.to_ring, p.to_sector) for p in back] == [("blackhole", 4, 6)]


def test_planet_without_transfer_sectors_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    wells = default_rules().world.wells
    fixed = {"alpha": TransferSectors(17, 7, 16, 6)}

    with caplog.at_level(logging.WARNING, logger="orbit_sim.rules.world"):
        points = calculate_transfer_points(wells, "blackhole", fixed)

    assert {p.to_well_id for p in points} == {"alpha", "blackhole"}
    assert "beta" in caplog.text and "gamma" in caplog.text


def test_rules_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RulesError):
        Ruleset.load(tmp_path / "nonexistent")


def test_rules_invalid_json(tmp_path: Path) -> None:
    shutil.copytree(DEFAULT_RULES_DIR, tmp_path / "rules")
    (tmp_path / "rules" / "globals.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(RulesError, match="Invalid JSON"):
        Ruleset.load(tmp_path / "rules")


def test_rules_reject_missing_subsystem(tmp_path: Path) -> None:
    shutil.copytree(DEFAULT_RULES_DIR, tmp_path / "rules")
    path = tmp_path / "rules" / "subsystems.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    del data["subsystems"]["shields"]
    path.write_text(json.dumps(data), encoding="utf-8")

    with pytest.raises(RulesError, match="shields"):
        Ruleset.load(tmp_path / "rules")


def test_default_scenario_starts_unpowered() -> None:
    state = load_game_state()

    assert state.turn == 1
    assert [p.id for p in state.players] == ["p1", "p2"]
    for player in state.players:
        ship = player.ship
        assert_energy_conserved(ship)
        assert ship.reactor.available_energy == 10
        assert not any(sub.is_powered for sub in ship.subsystems)
        assert ship.missile_inventory == 4
    assert state.players[0].ship.ring == 3


def test_scenario_allocations_power_subsystems() -> None:
    data = {
        "players": [
            {"id": "a", "ship": {"well": "beta", "ring": 2, "sector": 5, "allocations": {"engines": 2, "shields": 2}}},
        ]
    }
    state = build_game_state(data, default_rules())
    ship = state.players[0].ship
    assert ship.subsystem(SubsystemType.ENGINES).is_powered
    assert ship.reactor.available_energy == 6
    assert_energy_conserved(ship)


@pytest.mark.parametrize(
    "ship, message",
    [
        ({"well": "nowhere", "ring": 1, "sector": 0}, "unknown well"),
        ({"well": "alpha", "ring": 4, "sector": 0}, "ring must be"),
        ({"well": "alpha", "ring": 1, "sector": 24}, "sector must be"),
        ({"well": "alpha", "ring": 1, "sector": 0, "facing": "sideways"}, "facing"),
        ({"well": "alpha", "ring": 1, "sector": 0, "allocations": {"engines": 9}}, "allocation"),
        ({"well": "alpha", "ring": 1, "sector": 0, "allocations": {"engines": True}}, "allocation"),
        ({"well": "alpha", "ring": 1, "sector": 0, "allocations": ["engines"]}, "allocations must be"),
    ],
)
def test_scenario_rejects_bad_ships(ship: dict, message: str) -> None:
    with pytest.raises(ScenarioError, match=message):
        build_game_state({"players": [{"id": "a", "ship": ship}]}, default_rules())


@pytest.mark.parametrize(
    "extra, message",
    [
        ({"turn": "soon"}, "turn"),
        ({"active_player_index": True}, "active_player_index"),
        ({"rng_seed": -1}, "rng_seed"),
    ],
)
def test_scenario_rejects_bad_game_fields(extra: dict, message: str) -> None:
    ship = {"well": "alpha", "ring": 1, "sector": 0}
    with pytest.raises(ScenarioError, match=message):
        build_game_state({"players": [{"id": "a", "ship": ship}], **extra}, default_rules())


def test_scenario_seed_reaches_state() -> None:
    ship = {"well": "alpha", "ring": 1, "sector": 0}
    state = build_game_state({"players": [{"id": "a", "ship": ship}], "rng_seed": 99}, default_rules())
    assert state.rng_seed == 99


def test_scenario_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ScenarioError):
        load_game_state(tmp_path / "scenarios" / "missing.json")
