"""Frontier-driven room growth.

Starting from the entrance room against the plot edge, rooms are repeatedly
picked at random from a frontier and offered a chance to grow a new room off
one of their unused sides, or a basement underneath once their sides are used
up. Every attempt that cannot satisfy its size or space constraints is simply
dropped; only failing to place the entrance is an error.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeAlias

from taverngen import config
from taverngen.environment.terrain import TerrainSampler
from taverngen.types import Temperature
from taverngen.util.geometry import ALL_DIRS, Aabb, Aabr, Dir, DirMap, Vec2, Vec3, clamp
from taverngen.util.lottery import draw_seed
from taverngen.util.rng import RandomSource, gen_bool
from taverngen.util.store import Id, Store

from .room_kinds import RoomCounts, RoomKind
from .structure import Room, Wall

logger = logging.getLogger(__name__)

# Per-direction limit on how far ``fit_room`` may pull an edge back. None
# means unlimited.
ShrinkLimits: TypeAlias = DirMap[int | None]


class PlotTooSmallError(Exception):
    """Raised when the plot cannot even hold the entrance room.

    This means the site layout handed the generator a plot below the minimum
    viable size. No partial tavern is produced.
    """

    pass


# =============================================================================
# Placement helpers
# =============================================================================


def gen_range_snap(source: RandomSource, lo: int, hi: int, snap_max: int) -> int:
    """Draw from ``lo..=hi``, snapping to ``snap_max`` when it is close.

    Snapping only applies when ``snap_max`` is the top of the range, i.e. when
    the available space is the limiting factor. It stops growth from leaving
    strips one or two voxels wide next to a room.
    """
    res = source.randint(lo, hi)
    if snap_max <= hi and snap_max - res <= config.SIZE_SNAP_TOLERANCE:
        return snap_max
    return res


def place_side_room(
    kind: RoomKind,
    max_bounds: Aabr,
    in_dir: Dir,
    in_pos: Vec2,
    source: RandomSource,
) -> Aabr | None:
    """Size a room of ``kind`` and place it beyond the wall point ``in_pos``.

    The room extends from ``in_pos`` in ``in_dir`` and is centred on it across
    that axis as far as ``max_bounds`` allows.
    """
    (min_side, max_side), (min_area, max_area) = kind.size_range()

    snap_max = in_dir.select(max_bounds.size())
    hi = min(snap_max, max_side)
    if hi < min_side:
        return None
    size_x = gen_range_snap(source, min_side, hi, snap_max)

    lo = max(math.ceil(min_area / size_x), min_side)
    snap_max = in_dir.orthogonal().select(max_bounds.size())
    hi = min(snap_max, max_side, max_area // size_x)
    if hi < lo:
        return None
    size_y = gen_range_snap(source, lo, hi, snap_max)

    half_size_y = size_y // 2 + (size_y % 2) * source.randint(0, 1)
    forward = in_dir.to_vec2()
    cw = in_dir.rotated_cw().to_vec2()
    ccw = in_dir.rotated_ccw().to_vec2()

    near = max_bounds.projected_point(in_pos + forward + cw * half_size_y)
    far = max_bounds.projected_point(near + forward * size_x + ccw * size_y)
    near = far - forward * size_x + cw * size_y

    bounds = Aabr(near, far).made_valid()
    if not max_bounds.contains_aabr(bounds) or not kind.accepts(bounds):
        return None
    return bounds


def place_down_room(
    kind: RoomKind,
    max_bounds: Aabr,
    from_bounds: Aabr,
    source: RandomSource,
) -> Aabr | None:
    """Fit a room of ``kind`` under ``from_bounds``, anchored at one of its corners."""
    (min_side, max_side), (min_area, max_area) = kind.size_range()
    available = max_bounds.size()

    hi = min(available.x, max_side)
    if hi < min_side:
        return None
    size_x = gen_range_snap(source, min_side, hi, available.x)

    lo = max(min_side, min_area // size_x)
    hi = min(available.y, max_side, max_area // size_x)
    if hi < lo:
        return None
    size_y = gen_range_snap(source, lo, hi, available.y)
    target_size = Vec2(size_x, size_y)

    dir = source.choice(ALL_DIRS)
    orth = source.choice((dir.orthogonal(), dir.orthogonal().opposite()))

    # Grow back from the chosen corner, then slide into max_bounds if needed.
    plane = dir.to_vec2() + orth.to_vec2()
    corner = dir.select_aabr_with(from_bounds, orth.select_aabr(from_bounds))
    aabr = Aabr(corner, corner - plane * target_size).made_valid()

    inside = aabr.intersection(max_bounds)
    shift = (target_size - inside.size()) * plane
    aabr = Aabr(aabr.min + shift, aabr.max + shift).intersection(max_bounds)

    if not kind.accepts(aabr):
        return None
    return aabr


def fit_room(
    obstacles: Iterable[Room],
    min_z: int,
    max_z: int,
    max_bounds: Aabr,
    shrink_limits: ShrinkLimits,
) -> Aabr | None:
    """Narrow ``max_bounds`` until it keeps clear of every obstacle room.

    Only obstacles whose vertical extent (padded by one layer) meets
    ``min_z..=max_z`` count. For each one, the bounds are cut back on whichever
    side keeps the largest area, without pulling any edge back past its
    shrink limit. Returns None when some obstacle cannot be avoided.
    """
    for room in obstacles:
        if not (room.bounds.min.z - 1 <= max_z and room.bounds.max.z + 1 >= min_z):
            continue

        test_bounds = room.footprint
        intersection = test_bounds.expanded(config.ROOM_CLEARANCE).intersection(
            max_bounds
        )
        if not intersection.is_valid():
            continue

        best: Aabr | None = None
        for min_dir in ALL_DIRS:
            sign = min_dir.signum()
            # Only cut towards sides where the obstacle leaves some space.
            if min_dir.select_aabr(intersection) * sign >= (
                min_dir.select_aabr(max_bounds) * sign
            ):
                continue

            far = min_dir.select_aabr_with(
                max_bounds, min_dir.rotated_ccw().select_aabr(max_bounds)
            )
            near = min_dir.select_aabr_with(
                intersection, min_dir.rotated_cw().select_aabr(max_bounds)
            )
            limit = shrink_limits[min_dir]
            if limit is not None:
                edge = min(min_dir.select(near) * sign, limit * sign) * sign
                near = min_dir.select_with(Vec2.broadcast(edge), near)

            candidate = Aabr(far, near).made_valid()
            if candidate.intersection(test_bounds).is_valid():
                continue
            if best is None or candidate.area() >= best.area():
                best = candidate

        if best is None:
            return None
        max_bounds = best

    return max_bounds


# =============================================================================
# Growth engine
# =============================================================================


@dataclass
class RoomMeta:
    """Frontier record for a room that may still grow."""

    id: Id[Room]
    free_walls: list[Dir]
    can_add_basement: bool

    def exhausted(self) -> bool:
        return not self.free_walls and not self.can_add_basement


class RoomGrower:
    """Grows the room/wall graph of a tavern inside its plot.

    Attributes:
        rooms: Rooms placed so far, in placement order.
        walls: Walls created while growing; each connects a room to the room
            it was grown from (or the outside, for the front door).
        room_counts: How many rooms of each kind exist.
    """

    def __init__(
        self,
        terrain: TerrainSampler,
        inner_bounds: Aabr,
        temperature: Temperature,
        source: RandomSource,
    ) -> None:
        self.terrain = terrain
        self.inner_bounds = inner_bounds
        self.temperature = temperature
        self.source = source
        self.rooms: Store[Room] = Store()
        self.walls: Store[Wall] = Store()
        self.room_counts: RoomCounts = Counter()
        self._frontier: list[RoomMeta] = []

    # -------------------------------------------------------------------------
    # Entrance
    # -------------------------------------------------------------------------

    def place_entrance(self, door_wpos: Vec3, door_dir: Dir) -> Id[Room]:
        """Place the room behind the front door, with the front wall and door.

        Raises:
            PlotTooSmallError: If not even an entrance hall fits in the plot.
        """
        lottery = RoomKind.entrance_room_lottery(self.temperature, self.inner_bounds)
        kind = lottery.choose_seeded(draw_seed(self.source))
        height = self.source.randint(*config.ENTRANCE_HEIGHT_RANGE)
        door_xy = door_wpos.xy()

        aabr = place_side_room(
            kind, self.inner_bounds, -door_dir, door_xy, self.source
        )
        if aabr is None and kind is not RoomKind.ENTRANCE:
            logger.debug(f"No space for a {kind.value} entrance, using a hall")
            kind = RoomKind.ENTRANCE
            aabr = place_side_room(
                kind, self.inner_bounds, -door_dir, door_xy, self.source
            )
        if aabr is None:
            raise PlotTooSmallError(
                f"Not enough room in plot {self.inner_bounds} for a tavern entrance"
            )

        bounds = Aabb(
            aabr.min.with_z(door_wpos.z), aabr.max.with_z(door_wpos.z + height)
        ).made_valid()
        entrance_id = self.rooms.insert(Room(bounds, kind))

        cw = door_dir.rotated_cw()
        ccw = door_dir.rotated_ccw()
        start = (
            door_dir.select_aabr_with(aabr, cw.select_aabr(aabr))
            + cw.to_vec2()
            + door_dir.to_vec2()
        )
        end = (
            door_dir.select_aabr_with(aabr, ccw.select_aabr(aabr))
            + ccw.to_vec2()
            + door_dir.to_vec2()
        )
        length = abs(cw.select(end - start))
        door_center = clamp(abs(cw.select(door_xy - start)), 2, length - 2)

        wall_id = self.walls.insert(
            Wall(
                start=start,
                end=end,
                base_alt=bounds.min.z,
                top_alt=bounds.max.z,
                from_room=None,
                to_room=entrance_id,
                to_dir=-door_dir,
                door=(door_center - 1, door_center + 1),
            )
        )
        self.rooms[entrance_id].walls[door_dir].append(wall_id)

        self._frontier.append(
            RoomMeta(
                id=entrance_id,
                free_walls=[d for d in ALL_DIRS if d != door_dir],
                can_add_basement=False,
            )
        )
        self.room_counts[kind] += 1
        return entrance_id

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def grow(self) -> None:
        """Grow rooms until no room on the frontier can be extended."""
        while self._frontier:
            meta = self._frontier.pop(self.source.randint(0, len(self._frontier) - 1))

            if meta.free_walls:
                in_dir = self.source.choice(meta.free_walls)
                meta.free_walls.remove(in_dir)
                self._grow_side_room(meta.id, in_dir)
            elif meta.can_add_basement:
                meta.can_add_basement = False
                self._grow_basement(meta.id)

            if not meta.exhausted():
                self._frontier.append(meta)

    def _others(self, room_id: Id[Room]) -> list[Room]:
        return [room for id, room in self.rooms.items() if id != room_id]

    def _grow_side_room(self, from_id: Id[Room], in_dir: Dir) -> Id[Room] | None:
        """Try to add a room beyond the ``in_dir`` side of ``from_id``."""
        from_room = self.rooms[from_id]
        from_bounds = from_room.footprint
        ibounds = self.inner_bounds
        right = in_dir.orthogonal()
        left = -right

        max_bounds = Aabr(
            in_dir.select_aabr_with(from_bounds, ibounds.min) + in_dir.to_vec2() * 2,
            in_dir.select_aabr_with(ibounds, ibounds.max),
        ).made_valid()

        height = self.source.randint(*config.ROOM_HEIGHT_RANGE)
        wanted_alt = int(self.terrain.get_alt_approx(max_bounds.center())) + 1
        # Descending stairs have to fit in the parent, ascending ones in the new room.
        stair_space = from_bounds if wanted_alt < from_room.bounds.min.z else max_bounds
        max_stair_length = min(
            in_dir.select(stair_space.size()) // 2, config.MAX_STAIR_LENGTH
        )
        alt = clamp(
            wanted_alt,
            from_room.bounds.min.z - max_stair_length,
            from_room.bounds.min.z + max_stair_length,
        )
        min_z = min(from_room.bounds.min.z, alt)
        max_z = max(from_room.bounds.max.z, alt + height)

        limits: ShrinkLimits = DirMap.filled(None)
        shrunk_from = from_bounds.expanded(-1)
        for dir in ALL_DIRS:
            if dir == in_dir:
                # The side facing the parent must stay in contact with it.
                limits[dir] = dir.opposite().select_aabr(max_bounds)
            elif dir != in_dir.opposite():
                limits[dir] = dir.select_aabr(shrunk_from)

        fitted = fit_room(self._others(from_id), min_z, max_z, max_bounds, limits)
        if fitted is None:
            logger.debug(f"Growth {in_dir.name} of room {from_id}: blocked")
            return None

        lottery = from_room.kind.side_room_lottery(
            fitted, self.room_counts, self.temperature
        )
        if lottery is None:
            logger.debug(f"Growth {in_dir.name} of room {from_id}: nothing fits")
            return None
        kind = lottery.choose_seeded(draw_seed(self.source))

        lo = max(left.select_aabr(from_bounds), left.select_aabr(fitted))
        hi = min(right.select_aabr(from_bounds), right.select_aabr(fitted))
        if hi < lo:
            lo, hi = hi, lo
        if lo + 2 > hi:
            logger.debug(f"Growth {in_dir.name} of room {from_id}: no door space")
            return None
        door_along = self.source.randint(lo + 1, hi - 1)
        in_pos = in_dir.select_aabr_with(from_bounds, door_along) + in_dir.to_vec2()

        bounds = place_side_room(kind, fitted, in_dir, in_pos, self.source)
        if bounds is None:
            logger.debug(
                f"Growth {in_dir.name} of room {from_id}: {kind.value} does not fit"
            )
            return None

        start = (
            in_dir.select_aabr_with(
                from_bounds,
                max(left.select_aabr(from_bounds), left.select_aabr(bounds)),
            )
            + in_dir.to_vec2()
            + left.to_vec2()
        )
        end = (
            in_dir.select_aabr_with(
                from_bounds,
                min(right.select_aabr(from_bounds), right.select_aabr(bounds)),
            )
            + in_dir.to_vec2()
            + right.to_vec2()
        )
        length = right.select(end - start)
        door_center = right.select(in_pos - start)
        if length < 3:
            logger.debug(f"Growth {in_dir.name} of room {from_id}: no shared wall")
            return None
        lower_half = gen_bool(self.source, 0.5)
        door_min = clamp(door_center - int(lower_half), 1, length - 2)

        id = self.rooms.insert(Room(Aabb.from_aabr(bounds, min_z, max_z), kind))
        wall_id = self.walls.insert(
            Wall(
                start=start,
                end=end,
                base_alt=min_z,
                top_alt=max_z,
                from_room=from_id,
                to_room=id,
                to_dir=in_dir,
                door=(door_min, door_min + 1),
            )
        )
        self.rooms[id].walls[-in_dir].append(wall_id)
        self.rooms[from_id].walls[in_dir].append(wall_id)

        self._frontier.append(
            RoomMeta(
                id=id,
                free_walls=[d for d in ALL_DIRS if d != -in_dir],
                can_add_basement=bool(kind.basement_rooms()),
            )
        )
        self.room_counts[kind] += 1
        logger.debug(f"Grew {kind.value} {id} {in_dir.name} of room {from_id}")
        return id

    def _grow_basement(self, from_id: Id[Room]) -> Id[Room] | None:
        """Try to dig a basement room under ``from_id``."""
        from_room = self.rooms[from_id]
        from_bounds = from_room.footprint

        height = self.source.randint(*config.ROOM_HEIGHT_RANGE)
        max_z = from_room.bounds.min.z - config.BASEMENT_DROP
        min_z = max_z - height

        # Whichever way it is cut back, the basement must stay under the parent.
        shrunk_from = from_bounds.expanded(-2)
        limits: ShrinkLimits = DirMap(
            [dir.opposite().select_aabr(shrunk_from) for dir in ALL_DIRS]
        )
        fitted = fit_room(
            self._others(from_id), min_z, max_z, self.inner_bounds, limits
        )
        if fitted is None:
            logger.debug(f"Basement under room {from_id}: blocked")
            return None

        lottery = from_room.kind.basement_lottery(fitted, self.room_counts)
        if lottery is None:
            logger.debug(f"Basement under room {from_id}: nothing fits")
            return None
        kind = lottery.choose_seeded(draw_seed(self.source))

        bounds = place_down_room(kind, fitted, from_bounds, self.source)
        if bounds is None:
            logger.debug(f"Basement under room {from_id}: {kind.value} does not fit")
            return None

        id = self.rooms.insert(Room(Aabb.from_aabr(bounds, min_z, max_z), kind))
        self._frontier.append(
            RoomMeta(
                id=id,
                free_walls=list(ALL_DIRS),
                can_add_basement=bool(kind.basement_rooms()),
            )
        )
        self.room_counts[kind] += 1
        logger.debug(f"Dug {kind.value} {id} under room {from_id}")
        return id
