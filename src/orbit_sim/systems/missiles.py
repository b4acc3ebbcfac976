"""Missile entities: launch, guided movement, hit and expiry."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from orbit_sim.domain.types import Missile, Ship
from orbit_sim.rules.ruleset import MissileConfig
from orbit_sim.rules.world import World, map_sector
from orbit_sim.sim.state import GameState
from orbit_sim.systems.combat import apply_hit


class MissileStatus(str, Enum):
    ALIVE = "alive"
    HIT = "hit"
    EXPIRED = "expired"
    LOST = "lost"


@dataclass(frozen=True)
class MissileStep:
    missile: Missile
    status: MissileStatus


def launch(owner_id: str, target_id: str, ship: Ship, *, turn: int, seq: int, skip_orbital: bool) -> Missile:
    return Missile(
        id=f"missile-{owner_id}-{turn}-{seq}",
        owner_id=owner_id,
        target_id=target_id,
        well_id=ship.well_id,
        ring=ship.ring,
        sector=ship.sector,
        turn_fired=turn,
        turns_alive=0,
        skip_orbital_this_turn=skip_orbital,
    )


def _guide(missile: Missile, target: Ship, world: World, fuel: int) -> Missile:
    ring_delta = target.ring - missile.ring
    ring_steps = min(abs(ring_delta), fuel)
    if ring_steps:
        new_ring = missile.ring + (ring_steps if ring_delta > 0 else -ring_steps)
        from_ring = world.ring(missile.well_id, missile.ring)
        to_ring = world.ring(missile.well_id, new_ring)
        if from_ring is None or to_ring is None:
            return missile
        missile = replace(missile, ring=new_ring, sector=map_sector(missile.sector, from_ring, to_ring))
        fuel -= ring_steps

    ring = world.ring(missile.well_id, missile.ring)
    if fuel <= 0 or ring is None:
        return missile
    forward = (target.sector - missile.sector) % ring.sectors
    if forward == 0:
        return missile
    if forward <= ring.sectors // 2:
        step = min(forward, fuel)
    else:
        step = -min(ring.sectors - forward, fuel)
    return replace(missile, sector=(missile.sector + step) % ring.sectors)


def step_missile(missile: Missile, target: Ship | None, world: World, config: MissileConfig) -> MissileStep:
    """Advance one missile through drift, guidance and the hit/expiry check."""
    if target is None:
        return MissileStep(missile=missile, status=MissileStatus.LOST)

    if not missile.skip_orbital_this_turn:
        ring = world.ring(missile.well_id, missile.ring)
        if ring is not None:
            missile = replace(missile, sector=(missile.sector + ring.velocity) % ring.sectors)

    tracking = target.well_id == missile.well_id and not target.is_destroyed
    if tracking:
        missile = _guide(missile, target, world, config.fuel_per_turn)
        if missile.ring == target.ring and missile.sector == target.sector:
            return MissileStep(missile=missile, status=MissileStatus.HIT)

    missile = replace(missile, turns_alive=missile.turns_alive + 1, skip_orbital_this_turn=False)
    if missile.turns_alive >= config.max_turns_alive:
        return MissileStep(missile=missile, status=MissileStatus.EXPIRED)
    return MissileStep(missile=missile, status=MissileStatus.ALIVE)


def advance_missiles(state: GameState, owner_id: str) -> tuple[GameState, list[str]]:
    """Update every missile owned by ``owner_id``; others are left untouched."""
    config = state.rules.globals.missiles
    kept: list[Missile] = []
    messages: list[str] = []
    for missile in state.missiles:
        if missile.owner_id != owner_id:
            kept.append(missile)
            continue
        target_player = state.player(missile.target_id)
        step = step_missile(missile, target_player.ship if target_player else None, state.rules.world, config)
        if step.status is MissileStatus.HIT and target_player is not None:
            hit_ship, outcome = apply_hit(target_player.ship, config.damage, shielded=False)
            state = state.with_ship(target_player.id, hit_ship)
            text = f"{missile.id} hit {target_player.name} for {outcome.hull_damage}"
            if outcome.destroyed:
                text += f"; {target_player.name} destroyed"
            messages.append(text)
        elif step.status is MissileStatus.EXPIRED:
            messages.append(f"{missile.id} expired")
        elif step.status is MissileStatus.LOST:
            messages.append(f"{missile.id} lost its target")
        else:
            kept.append(step.missile)
            messages.append(
                f"{missile.id} at {step.missile.well_id} R{step.missile.ring} S{step.missile.sector}"
            )
    return replace(state, missiles=tuple(kept)), messages
