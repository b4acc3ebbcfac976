from __future__ import annotations

import json
from dataclasses import replace

from orbit_sim.domain.actions import Coast, FireWeapon
from orbit_sim.domain.types import SubsystemType
from orbit_sim.sim.resolver import resolve
from orbit_sim.sim.snapshot import dump_state, load_state
from tests.helpers.factories import duel


def test_snapshot_survives_json_and_keeps_resolving() -> None:
    state = duel(p1={"allocations": {SubsystemType.MISSILES: 2}})
    state = resolve(state, [FireWeapon("p1", SubsystemType.MISSILES, "p2", sequence=1), Coast("p1", sequence=2)]).state

    data = json.loads(json.dumps(dump_state(state)))
    restored = load_state(data, state.rules)

    assert restored == state
    assert data["players"][0]["ship"]["facing"] == "prograde"
    assert data["missiles"][0]["id"] == "missile-p1-1-1"

    after = resolve(restored, [Coast("p2", sequence=1)])
    assert after.ok is True
    assert after.state.turn == 2


def test_snapshot_keeps_seed_and_game_over() -> None:
    state = replace(duel(p2={"hit_points": 0}), rng_seed=42)
    state = resolve(state, [Coast("p1", sequence=1)]).state
    assert state.is_over is True

    restored = load_state(json.loads(json.dumps(dump_state(state))), state.rules)

    assert restored.rng_seed == 42
    assert restored.is_over is True
    assert resolve(restored, []).ok is False
