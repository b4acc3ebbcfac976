"""Value types for ships, subsystems and missiles."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Facing(str, Enum):
    PROGRADE = "prograde"
    RETROGRADE = "retrograde"

    def flipped(self) -> "Facing":
        return Facing.RETROGRADE if self is Facing.PROGRADE else Facing.PROGRADE

    @property
    def direction(self) -> int:
        # prograde moves outward and toward increasing sector indices
        return 1 if self is Facing.PROGRADE else -1


class SubsystemType(str, Enum):
    ENGINES = "engines"
    ROTATION = "rotation"
    SCOOP = "scoop"
    LASER = "laser"
    RAILGUN = "railgun"
    MISSILES = "missiles"
    SHIELDS = "shields"


WEAPON_TYPES: frozenset[SubsystemType] = frozenset(
    {SubsystemType.LASER, SubsystemType.RAILGUN, SubsystemType.MISSILES}
)


class BurnIntensity(str, Enum):
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class WeaponArc(str, Enum):
    SPINAL = "spinal"
    BROADSIDE = "broadside"
    TURRET = "turret"


@dataclass(frozen=True)
class Subsystem:
    type: SubsystemType
    allocated_energy: int = 0
    is_powered: bool = False
    used_this_turn: bool = False
    is_broken: bool = False

    def with_allocation(self, amount: int, min_energy: int) -> "Subsystem":
        return replace(self, allocated_energy=amount, is_powered=amount >= min_energy)


@dataclass(frozen=True)
class Reactor:
    total_capacity: int
    available_energy: int


@dataclass(frozen=True)
class Heat:
    current_heat: int = 0
    heat_to_vent: int = 0


@dataclass(frozen=True)
class TransferState:
    destination_ring: int
    sector_adjustment: int


@dataclass(frozen=True)
class Ship:
    well_id: str
    ring: int
    sector: int
    facing: Facing
    reaction_mass: int
    hit_points: int
    max_hit_points: int
    subsystems: tuple[Subsystem, ...]
    reactor: Reactor
    heat: Heat
    missile_inventory: int
    transfer_state: TransferState | None = None

    @property
    def is_destroyed(self) -> bool:
        return self.hit_points <= 0

    @property
    def allocated_energy(self) -> int:
        return sum(sub.allocated_energy for sub in self.subsystems)

    def subsystem(self, kind: SubsystemType) -> Subsystem | None:
        for sub in self.subsystems:
            if sub.type is kind:
                return sub
        return None

    def with_subsystem(self, updated: Subsystem) -> "Ship":
        subsystems = tuple(updated if sub.type is updated.type else sub for sub in self.subsystems)
        return replace(self, subsystems=subsystems)

    def moved_to(self, well_id: str, ring: int, sector: int) -> "Ship":
        return replace(self, well_id=well_id, ring=ring, sector=sector)


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    ship: Ship


@dataclass(frozen=True)
class Missile:
    id: str
    owner_id: str
    target_id: str
    well_id: str
    ring: int
    sector: int
    turn_fired: int
    turns_alive: int = 0
    skip_orbital_this_turn: bool = False
