"""Completes the wall coverage of grown rooms.

Growth only creates the walls that carry the doors between a room and the
room it was grown from. This pass walks every room's four sides, carves out
what those walls already cover, adds shared walls (often with a door) where a
neighbouring room sits one voxel away, and closes whatever is left with
exterior walls.
"""

from __future__ import annotations

import logging

from taverngen import config
from taverngen.types import IntRange
from taverngen.util.geometry import ALL_DIRS, Dir, DirMap
from taverngen.util.rng import RandomSource, gen_bool
from taverngen.util.store import Id, Store

from .structure import Room, Wall

logger = logging.getLogger(__name__)


def split_range(ranges: list[IntRange], lo: int, hi: int) -> list[IntRange]:
    """Remove ``lo..=hi`` from a list of inclusive ranges."""
    result: list[IntRange] = []
    for r_min, r_max in ranges:
        if r_min > hi or r_max < lo:
            result.append((r_min, r_max))
            continue
        if r_min < lo:
            result.append((r_min, lo - 1))
        if r_max > hi:
            result.append((hi + 1, r_max))
    return result


def partition_walls(
    rooms: Store[Room], walls: Store[Wall], source: RandomSource
) -> None:
    """Add shared and exterior walls until every room side is covered."""
    grown = len(walls)
    for from_id in rooms.ids():
        _partition_room(rooms, walls, from_id, source)
    logger.debug(f"Partitioned {len(rooms)} rooms: {len(walls) - grown} new walls")


def _partition_room(
    rooms: Store[Room], walls: Store[Wall], from_id: Id[Room], source: RandomSource
) -> None:
    room = rooms[from_id]
    room_bounds = room.footprint

    # Rooms already walled off from this one, through walls it already has.
    skip = {from_id}
    wall_ranges: DirMap[list[IntRange]] = DirMap(
        [
            [
                (
                    dir.orthogonal().select(room_bounds.min),
                    dir.orthogonal().select(room_bounds.max),
                )
            ]
            for dir in ALL_DIRS
        ]
    )

    for dir in ALL_DIRS:
        orth = dir.orthogonal()
        for wall_id in room.walls[dir]:
            wall = walls[wall_id]
            skip.update(wall.neighbours())
            lo, hi = sorted((orth.select(wall.start), orth.select(wall.end)))
            wall_ranges[dir] = split_range(wall_ranges[dir], lo + 1, hi - 1)

    for to_id in rooms.ids():
        if to_id in skip:
            continue
        other = rooms[to_id]
        if not room.bounds.z_overlaps(other.bounds):
            continue
        min_z = min(room.bounds.min.z, other.bounds.min.z)
        max_z = max(room.bounds.max.z, other.bounds.max.z)
        other_bounds = other.footprint

        # Direction from this room towards the closest part of the other one.
        p1 = other_bounds.projected_point(room_bounds.center())
        p0 = room_bounds.projected_point(p1)
        to_dir = Dir.from_vec2(p1 - p0)

        contact = to_dir.extend_aabr(room_bounds, 1).intersection(
            to_dir.opposite().extend_aabr(other_bounds, 1)
        )
        if not contact.is_valid():
            continue

        orth = to_dir.orthogonal()
        lo = orth.select(contact.min)
        hi = orth.select(contact.max)
        wall_ranges[to_dir] = split_range(wall_ranges[to_dir], lo, hi)

        door = None
        if (
            hi - lo > config.NEIGHBOUR_DOOR_MIN_WIDTH
            and max_z - min_z > config.NEIGHBOUR_DOOR_MIN_HEIGHT
            and abs(room.bounds.min.z - other.bounds.min.z)
            < config.NEIGHBOUR_DOOR_MAX_STEP
            and gen_bool(source, config.NEIGHBOUR_DOOR_CHANCE)
        ):
            door_min = source.randint(1, hi - lo - 2)
            door = (door_min, door_min + 1)

        wall_id = walls.insert(
            Wall(
                start=contact.min - orth.to_vec2(),
                end=contact.max + orth.to_vec2(),
                base_alt=min_z,
                top_alt=max_z,
                from_room=from_id,
                to_room=to_id,
                to_dir=to_dir,
                door=door,
            )
        )
        room.walls[to_dir].append(wall_id)
        other.walls[-to_dir].append(wall_id)

    for dir, ranges in wall_ranges.items():
        for lo, hi in ranges:
            start = dir.select_aabr_with(room_bounds, lo - 1) + dir.to_vec2()
            end = dir.select_aabr_with(room_bounds, hi + 1) + dir.to_vec2()
            wall_id = walls.insert(
                Wall(
                    start=start,
                    end=end,
                    base_alt=room.bounds.min.z,
                    top_alt=room.bounds.max.z,
                    from_room=from_id,
                    to_room=None,
                    to_dir=dir,
                )
            )
            room.walls[dir].append(wall_id)
