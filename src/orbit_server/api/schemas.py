from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

EnergyAmount = Annotated[int, Field(ge=1, le=10)]
SubsystemName = Literal["engines", "rotation", "scoop", "laser", "railgun", "missiles", "shields"]
FacingName = Literal["prograde", "retrograde"]
BurnName = Literal["light", "medium", "heavy"]
WeaponName = Literal["laser", "railgun", "missiles"]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_by_name=True)


class EnergyData(CamelModel):
    subsystem: SubsystemName
    amount: EnergyAmount


class VentData(CamelModel):
    amount: EnergyAmount


class RotateData(CamelModel):
    target_facing: FacingName = Field(..., alias="targetFacing")


class CoastData(CamelModel):
    activate_scoop: bool = Field(False, alias="activateScoop")


class BurnData(CamelModel):
    intensity: BurnName
    sector_adjustment: int = Field(0, alias="sectorAdjustment")


class FireData(CamelModel):
    weapon_type: WeaponName = Field(..., alias="weaponType")
    target_player_id: str = Field(..., alias="targetPlayerId")
    critical_target: Optional[SubsystemName] = Field(None, alias="criticalTarget")


class WellTransferData(CamelModel):
    destination_well_id: str = Field(..., alias="destinationWellId")


class AllocateEnergyRequest(CamelModel):
    type: Literal["allocate_energy"]
    player_id: str = Field(..., alias="playerId")
    data: EnergyData


class DeallocateEnergyRequest(CamelModel):
    type: Literal["deallocate_energy"]
    player_id: str = Field(..., alias="playerId")
    data: EnergyData


class VentHeatRequest(CamelModel):
    type: Literal["vent_heat"]
    player_id: str = Field(..., alias="playerId")
    data: VentData


class RotateRequest(CamelModel):
    type: Literal["rotate"]
    player_id: str = Field(..., alias="playerId")
    sequence: Optional[int] = None
    data: RotateData


class CoastRequest(CamelModel):
    type: Literal["coast"]
    player_id: str = Field(..., alias="playerId")
    sequence: Optional[int] = None
    data: CoastData = Field(default_factory=CoastData)


class BurnRequest(CamelModel):
    type: Literal["burn"]
    player_id: str = Field(..., alias="playerId")
    sequence: Optional[int] = None
    data: BurnData


class FireWeaponRequest(CamelModel):
    type: Literal["fire_weapon"]
    player_id: str = Field(..., alias="playerId")
    sequence: Optional[int] = None
    data: FireData


class WellTransferRequest(CamelModel):
    type: Literal["well_transfer"]
    player_id: str = Field(..., alias="playerId")
    sequence: Optional[int] = None
    data: WellTransferData


ActionRequest = Annotated[
    Union[
        AllocateEnergyRequest,
        DeallocateEnergyRequest,
        VentHeatRequest,
        RotateRequest,
        CoastRequest,
        BurnRequest,
        FireWeaponRequest,
        WellTransferRequest,
    ],
    Field(discriminator="type"),
]


class TurnRequest(CamelModel):
    actions: List[ActionRequest]


class CreateGameRequest(CamelModel):
    scenario: Optional[Dict[str, Any]] = None


class PreviewRequest(CamelModel):
    player_id: str = Field(..., alias="playerId")
    facing: Optional[FacingName] = None
    burn: Optional[BurnName] = None
    sector_adjustment: int = Field(0, alias="sectorAdjustment")


class SubsystemView(CamelModel):
    type: str
    allocated_energy: int = Field(..., alias="allocatedEnergy", ge=0)
    is_powered: bool = Field(..., alias="isPowered")
    used_this_turn: bool = Field(..., alias="usedThisTurn")
    is_broken: bool = Field(..., alias="isBroken")


class ReactorView(CamelModel):
    total_capacity: int = Field(..., alias="totalCapacity")
    available_energy: int = Field(..., alias="availableEnergy", ge=0)


class HeatView(CamelModel):
    current_heat: int = Field(..., alias="currentHeat", ge=0)
    heat_to_vent: int = Field(..., alias="heatToVent", ge=0)


class ShipView(CamelModel):
    well_id: str = Field(..., alias="wellId")
    ring: int
    sector: int
    facing: str
    reaction_mass: int = Field(..., alias="reactionMass")
    hit_points: int = Field(..., alias="hitPoints")
    max_hit_points: int = Field(..., alias="maxHitPoints")
    missile_inventory: int = Field(..., alias="missileInventory")
    subsystems: List[SubsystemView]
    reactor: ReactorView
    heat: HeatView


class PlayerView(CamelModel):
    id: str
    name: str
    ship: ShipView


class MissileView(CamelModel):
    id: str
    owner_id: str = Field(..., alias="ownerId")
    target_id: str = Field(..., alias="targetId")
    well_id: str = Field(..., alias="wellId")
    ring: int
    sector: int
    turn_fired: int = Field(..., alias="turnFired")
    turns_alive: int = Field(..., alias="turnsAlive")


class LogEntryView(CamelModel):
    turn: int
    player_id: str = Field(..., alias="playerId")
    player_name: str = Field(..., alias="playerName")
    action: str
    result: str


class GameStateResponse(CamelModel):
    game_id: str = Field(..., alias="gameId")
    turn: int
    active_player_id: str = Field(..., alias="activePlayerId")
    winner_id: Optional[str] = Field(None, alias="winnerId")
    is_over: bool = Field(False, alias="isOver")
    players: List[PlayerView]
    missiles: List[MissileView]
    turn_log: List[LogEntryView] = Field(..., alias="turnLog")


class TurnResponse(CamelModel):
    ok: bool
    errors: List[str]
    log: List[LogEntryView]
    state: GameStateResponse


class FiringSolutionView(CamelModel):
    target_id: str = Field(..., alias="targetId")
    in_range: bool = Field(..., alias="inRange")
    distance: int
    sector_distance: int = Field(..., alias="sectorDistance")
    ring_distance: int = Field(..., alias="ringDistance")
    wrong_facing: bool = Field(..., alias="wrongFacing")
    requires_engines: bool = Field(..., alias="requiresEngines")


class FiringSolutionsResponse(CamelModel):
    weapon: str
    solutions: List[FiringSolutionView]


class PositionView(CamelModel):
    well_id: str = Field(..., alias="wellId")
    ring: int
    sector: int
    facing: str
