"""Action definitions for the turn resolver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias, Union

from orbit_sim.domain.types import BurnIntensity, Facing, SubsystemType


@dataclass(frozen=True)
class AllocateEnergy:
    player_id: str
    subsystem: SubsystemType
    amount: int


@dataclass(frozen=True)
class DeallocateEnergy:
    player_id: str
    subsystem: SubsystemType
    amount: int


@dataclass(frozen=True)
class VentHeat:
    player_id: str
    amount: int


@dataclass(frozen=True)
class Rotate:
    player_id: str
    target_facing: Facing
    sequence: int | None = None


@dataclass(frozen=True)
class Coast:
    player_id: str
    activate_scoop: bool = False
    sequence: int | None = None


@dataclass(frozen=True)
class Burn:
    player_id: str
    intensity: BurnIntensity
    sector_adjustment: int = 0
    sequence: int | None = None


@dataclass(frozen=True)
class FireWeapon:
    player_id: str
    weapon: SubsystemType
    target_id: str
    sequence: int | None = None
    critical_target: SubsystemType | None = None


@dataclass(frozen=True)
class WellTransfer:
    player_id: str
    destination_well_id: str
    sequence: int | None = None


TacticalAction: TypeAlias = Union[Rotate, Coast, Burn, FireWeapon, WellTransfer]
Action: TypeAlias = Union[
    AllocateEnergy,
    DeallocateEnergy,
    VentHeat,
    Rotate,
    Coast,
    Burn,
    FireWeapon,
    WellTransfer,
]

TACTICAL_ACTIONS = (Rotate, Coast, Burn, FireWeapon, WellTransfer)
MOVEMENT_ACTIONS = (Coast, Burn)


def action_label(action: Action) -> str:
    if isinstance(action, AllocateEnergy):
        return f"allocate_energy {action.subsystem.value} +{action.amount}"
    if isinstance(action, DeallocateEnergy):
        return f"deallocate_energy {action.subsystem.value} -{action.amount}"
    if isinstance(action, VentHeat):
        return f"vent_heat {action.amount}"
    if isinstance(action, Rotate):
        return f"rotate {action.target_facing.value}"
    if isinstance(action, Coast):
        return "coast (scoop)" if action.activate_scoop else "coast"
    if isinstance(action, Burn):
        return f"burn {action.intensity.value} adj {action.sector_adjustment:+d}"
    if isinstance(action, FireWeapon):
        label = f"fire_weapon {action.weapon.value} -> {action.target_id}"
        if action.critical_target is not None:
            label += f" [{action.critical_target.value}]"
        return label
    if isinstance(action, WellTransfer):
        return f"well_transfer -> {action.destination_well_id}"
    raise TypeError(f"Unknown action: {action!r}")
