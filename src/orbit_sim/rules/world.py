"""Gravity wells, rings and inter-well transfer points."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ring:
    index: int
    velocity: int
    sectors: int
    radius: int


@dataclass(frozen=True)
class OrbitalPosition:
    angle: float
    distance: float


@dataclass(frozen=True)
class GravityWell:
    id: str
    name: str
    kind: str  # "blackhole" | "planet"
    rings: tuple[Ring, ...]
    orbital_position: OrbitalPosition | None = None

    @property
    def ring_count(self) -> int:
        return len(self.rings)

    @property
    def outermost_ring(self) -> Ring:
        return self.rings[-1]

    def ring(self, index: int) -> Ring | None:
        if 1 <= index <= len(self.rings):
            return self.rings[index - 1]
        return None


@dataclass(frozen=True)
class TransferPoint:
    from_well_id: str
    from_ring: int
    from_sector: int
    to_well_id: str
    to_ring: int
    to_sector: int
    required_engine_level: int | None = None


@dataclass(frozen=True)
class TransferSectors:
    """Fixed sectors linking a planet with the central well."""

    outbound_sector: int
    outbound_arrival: int
    return_sector: int
    return_arrival: int


@dataclass(frozen=True)
class World:
    wells: dict[str, GravityWell]
    central_well_id: str
    transfer_points: tuple[TransferPoint, ...]

    def well(self, well_id: str) -> GravityWell | None:
        return self.wells.get(well_id)

    def ring(self, well_id: str, ring: int) -> Ring | None:
        well = self.wells.get(well_id)
        if well is None:
            return None
        return well.ring(ring)

    def transfers_from(self, well_id: str, ring: int, sector: int) -> list[TransferPoint]:
        return [
            point
            for point in self.transfer_points
            if point.from_well_id == well_id and point.from_ring == ring and point.from_sector == sector
        ]


def map_sector(sector: int, from_ring: Ring, to_ring: Ring) -> int:
    """Map a sector onto another ring, proportionally to the sector counts."""
    if from_ring.sectors == to_ring.sectors:
        return sector % to_ring.sectors
    return round(sector / from_ring.sectors * to_ring.sectors) % to_ring.sectors


def sector_distance(a: int, b: int, sectors: int) -> int:
    diff = abs(a - b) % sectors
    return min(diff, sectors - diff)


def calculate_transfer_points(
    wells: dict[str, GravityWell],
    central_well_id: str,
    fixed_sectors: dict[str, TransferSectors],
    *,
    required_engine_level: int | None = None,
) -> tuple[TransferPoint, ...]:
    """Link every planet's outermost ring with the central well's outermost ring."""
    central = wells[central_well_id]
    points: list[TransferPoint] = []
    for well in wells.values():
        if well.id == central_well_id:
            continue
        sectors = fixed_sectors.get(well.id)
        if sectors is None:
            logger.warning("No transfer sectors configured for well %s; skipping", well.id)
            continue
        points.append(
            TransferPoint(
                from_well_id=central.id,
                from_ring=central.outermost_ring.index,
                from_sector=sectors.outbound_sector,
                to_well_id=well.id,
                to_ring=well.outermost_ring.index,
                to_sector=sectors.outbound_arrival,
                required_engine_level=required_engine_level,
            )
        )
        points.append(
            TransferPoint(
                from_well_id=well.id,
                from_ring=well.outermost_ring.index,
                from_sector=sectors.return_sector,
                to_well_id=central.id,
                to_ring=central.outermost_ring.index,
                to_sector=sectors.return_arrival,
                required_engine_level=required_engine_level,
            )
        )
    return tuple(points)
