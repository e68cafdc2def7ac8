"""Roof assignment.

Rooms are roofed in id order. Each uncovered room starts a roof over its
footprint plus an overhang, which then grows over neighbouring rooms of the
same height. A roof that other rooms stand on becomes their floor; otherwise
its shape is drawn from the styles its neighbours leave room for.
"""

from __future__ import annotations

import logging

from taverngen import config
from taverngen.util.geometry import ALL_DIRS, Aabb, Aabr, Dir, DirMap
from taverngen.util.lottery import Lottery, draw_seed
from taverngen.util.rng import RandomSource
from taverngen.util.store import Id, Store

from .room_kinds import RoomKind
from .structure import (
    FlatBarsRoof,
    FlatRoof,
    FloorRoof,
    GableRoof,
    HipRoof,
    LeanToRoof,
    Roof,
    RoofStyle,
    Room,
    Stairs,
    Wall,
)

logger = logging.getLogger(__name__)


def abuts(roof_bounds: Aabr, dir: Dir, aabr: Aabr, max_gap: int = 1) -> bool:
    """Whether ``aabr`` lies just past the ``dir`` edge of ``roof_bounds``.

    The near edge of ``aabr`` must be on the roof edge or at most ``max_gap``
    voxels beyond it, and across ``dir`` the roof may not stick out of
    ``aabr`` by more than the merge tolerance.
    """
    sign = dir.signum()
    gap = (dir.opposite().select_aabr(aabr) - dir.select_aabr(roof_bounds)) * sign
    if not 0 <= gap <= max_gap:
        return False
    orth = dir.orthogonal()
    tolerance = config.ROOF_MERGE_TOLERANCE
    return (
        orth.select_aabr(roof_bounds) <= orth.select_aabr(aabr) + tolerance
        and orth.opposite().select_aabr(roof_bounds)
        >= orth.opposite().select_aabr(aabr) - tolerance
    )


def neighbour_heights(
    rooms: Store[Room], roof_bounds: Aabr, roof_min_z: int
) -> DirMap[int | None]:
    """Top of the first taller room touching each side of a roof, if any."""
    heights: DirMap[int | None] = DirMap.filled(None)
    for dir in ALL_DIRS:
        for room in rooms:
            if room.bounds.max.z > roof_min_z and abuts(
                roof_bounds, dir, room.footprint, max_gap=0
            ):
                heights[dir] = room.bounds.max.z
                break
    return heights


def roof_style_options(
    rooms: Store[Room],
    covered: list[Id[Room]],
    above: list[Id[Room]],
    roof_bounds: Aabr,
    roof_min_z: int,
) -> list[tuple[float, RoofStyle]]:
    """Weighted roof styles allowed for a roof over ``covered``.

    Args:
        rooms: All rooms of the tavern.
        covered: Rooms under the roof.
        above: Rooms standing on the roof.
        roof_bounds: Roof footprint, overhang included.
        roof_min_z: Lowest layer of the roof.

    Returns:
        (weight, style) pairs, never empty.
    """
    if above:
        return [(1.0, FloorRoof())]

    options: list[tuple[float, RoofStyle]] = [(config.FLAT_ROOF_WEIGHT, FlatRoof())]
    size = roof_bounds.size()

    if all(rooms[id].kind is RoomKind.GARDEN for id in covered):
        ratio = Dir.X.select(size) / Dir.Y.select(size)
        options.append((config.FLAT_BARS_ROOF_WEIGHT * ratio, FlatBarsRoof(Dir.X)))
        options.append((config.FLAT_BARS_ROOF_WEIGHT / ratio, FlatBarsRoof(Dir.Y)))

    heights = neighbour_heights(rooms, roof_bounds, roof_min_z)

    for dir in (Dir.X, Dir.Y):
        side = dir.orthogonal()
        if heights[side] is not None or heights[-side] is not None:
            continue
        max_z = roof_min_z + min(side.select(size) // 2 - 1, config.MAX_ROOF_PEAK)
        front, back = heights[dir], heights[-dir]
        if front is not None and back is not None:
            lowest = min(front, back)
            if lowest >= roof_min_z + config.MIN_GABLE_PEAK:
                max_z = min(max_z, lowest)
        elif front is not None or back is not None:
            # A gable end against a single taller room would leave a gap.
            continue
        for z in range(roof_min_z + config.MIN_GABLE_PEAK, max_z + 1):
            options.append((config.GABLE_ROOF_WEIGHT, GableRoof(dir, z)))

    for dir in ALL_DIRS:
        wall_top = heights[dir]
        if wall_top is None or heights[-dir] is not None:
            continue
        for z in range(roof_min_z + config.MIN_LEAN_TO_PEAK, wall_top + 1):
            options.append((config.LEAN_TO_ROOF_WEIGHT, LeanToRoof(dir, z)))

    if all(height is None for height in heights.values()):
        for z in range(
            roof_min_z + config.MIN_GABLE_PEAK, roof_min_z + config.MAX_ROOF_PEAK + 1
        ):
            options.append((config.HIP_ROOF_WEIGHT, HipRoof(z)))

    return options


def stair_candidates(
    rooms: Store[Room],
    walls: Store[Wall],
    covered: list[Id[Room]],
    above: list[Id[Room]],
) -> list[Stairs]:
    """Every way to run a straight staircase from a covered room to one above.

    A staircase climbs one layer per voxel, is ``STAIR_WIDTH`` wide, sits in a
    corner of the overlap of both rooms against at least one of their walls,
    and keeps a voxel clear of every door in either room.
    """
    candidates: list[Stairs] = []
    for to_id in above:
        to_room = rooms[to_id]
        for in_id in covered:
            in_room = rooms[in_id]
            in_aabr = in_room.footprint
            to_aabr = to_room.footprint
            overlap = in_aabr.intersection(to_aabr)
            stair_length = to_room.bounds.min.z - 1 - in_room.bounds.min.z
            if not overlap.is_valid() or overlap.size().reduce_min() <= stair_length:
                continue

            valid_dirs = [
                dir
                for dir in ALL_DIRS
                if dir.select_aabr(in_aabr) == dir.select_aabr(overlap)
                or dir.select_aabr(to_aabr) == dir.select_aabr(overlap)
            ]
            doors = [
                door
                for wall_id in in_room.all_walls() + to_room.all_walls()
                if (door := walls[wall_id].door_bounds()) is not None
            ]
            size = overlap.size()
            for dir in valid_dirs:
                for orth in valid_dirs:
                    if orth.abs() is dir.abs():
                        continue
                    stair_aabr = orth.trim_aabr(
                        dir.trim_aabr(overlap, dir.select(size) - stair_length),
                        orth.select(size) - config.STAIR_WIDTH + 1,
                    )
                    if not stair_aabr.is_valid():
                        continue
                    clearance = stair_aabr.expanded(1)
                    if any(clearance.collides_with_aabr(door) for door in doors):
                        continue
                    candidates.append(
                        Stairs(
                            bounds=Aabb(
                                stair_aabr.min.with_z(in_room.bounds.min.z),
                                stair_aabr.max.with_z(to_room.bounds.min.z - 1),
                            ),
                            dir=dir,
                        )
                    )
    return candidates


def _merge_neighbours(
    rooms: Store[Room],
    roofs: Store[Roof],
    room_id: Id[Room],
    roof_bounds: Aabr,
    roof_min_z: int,
    source: RandomSource,
) -> tuple[Aabr, list[Id[Room]]]:
    """Grow ``roof_bounds`` over same-height neighbours, in random directions."""
    covered = [room_id]
    dirs = list(ALL_DIRS)
    while dirs:
        dir = dirs.pop(source.randint(0, len(dirs) - 1))
        for other_id, other in rooms.items():
            if other_id in covered or other.bounds.max.z + 1 != roof_min_z:
                continue
            aabr = other.footprint
            if not abuts(roof_bounds, dir, aabr):
                continue
            if other.is_covered_by_roof(roofs):
                break
            reach = dir.signum() * (
                dir.select_aabr(aabr) - dir.select_aabr(roof_bounds)
            )
            roof_bounds = dir.extend_aabr(roof_bounds, reach + config.ROOF_OVERHANG)
            covered.append(other_id)
            dirs.append(dir)
            break
    return roof_bounds, covered


def assign_roofs(
    rooms: Store[Room], walls: Store[Wall], source: RandomSource
) -> Store[Roof]:
    """Build the roofs of a tavern and link them to the rooms they touch.

    Each roof id is added to ``roofs`` of the rooms it covers and to
    ``floors`` of the rooms standing on it.
    """
    roofs: Store[Roof] = Store()
    for room_id in rooms.ids():
        room = rooms[room_id]
        if room.is_covered_by_roof(roofs):
            continue

        roof_min_z = room.bounds.max.z + 1
        roof_bounds, covered = _merge_neighbours(
            rooms,
            roofs,
            room_id,
            room.footprint.expanded(config.ROOF_OVERHANG),
            roof_min_z,
            source,
        )
        above = [
            id
            for id, other in rooms.items()
            if other.bounds.min.z - 1 == roof_min_z
            and other.footprint.collides_with_aabr(roof_bounds)
        ]

        candidates = stair_candidates(rooms, walls, covered, above)
        stairs = source.choice(candidates) if candidates else None
        options = roof_style_options(rooms, covered, above, roof_bounds, roof_min_z)
        style = Lottery(options).choose_seeded(draw_seed(source))

        roof_id = roofs.insert(Roof(roof_bounds, roof_min_z, style, stairs))
        for id in covered:
            rooms[id].roofs.append(roof_id)
        for id in above:
            rooms[id].floors.append(roof_id)
        logger.debug(
            f"Roof {roof_id} over rooms {[id.idx for id in covered]}: "
            f"{type(style).__name__}"
        )
    return roofs
