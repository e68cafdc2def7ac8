from __future__ import annotations

import random
from collections.abc import Iterator
from itertools import combinations

import numpy as np

from taverngen.environment.generators.tavern import Room, RoomKind, Tavern
from taverngen.environment.site import SiteGrid
from taverngen.environment.terrain import HeightField
from taverngen.util.geometry import Aabb, Aabr, Dir, Vec2
from taverngen.util.store import Store

# Plot of 10x10 tiles of 6 voxels: inner bounds (1, 1)-(52, 52).
AMPLE_TILES = Aabr(Vec2(0, 0), Vec2(9, 9))
GROUND_ALT = 10.0


def flat_terrain(temperature: float = 0.5, alt: float = GROUND_ALT) -> HeightField:
    return HeightField.flat(80, 80, alt=alt, temperature=temperature)


def generate_tavern(
    seed: int,
    *,
    terrain: HeightField | None = None,
    site: SiteGrid | None = None,
    tile_aabr: Aabr = AMPLE_TILES,
    door_tile: Vec2 = Vec2(4, 0),
    door_dir: Dir = Dir.NEG_Y,
    alt: int | None = None,
) -> Tavern:
    """Generate a tavern on a plot, with sensible defaults for tests."""
    return Tavern.generate(
        terrain if terrain is not None else flat_terrain(),
        site if site is not None else SiteGrid(),
        random.Random(seed),
        door_tile,
        door_dir,
        tile_aabr,
        alt=alt,
        name="The Test Tankard",
    )


def make_room(
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    z1: int,
    z2: int,
    kind: RoomKind = RoomKind.SEATING,
) -> Room:
    """Room from inclusive corner coordinates."""
    return Room(Aabb.from_aabr(Aabr.from_bounds(x1, y1, x2, y2), z1, z2), kind)


def room_pairs(rooms: Store[Room]) -> Iterator[tuple[Room, Room]]:
    return combinations(list(rooms), 2)


def shares_volume(a: Room, b: Room) -> bool:
    """Whether two rooms share at least one voxel."""
    return (
        a.footprint.collides_with_aabr(b.footprint)
        and a.bounds.min.z <= b.bounds.max.z
        and a.bounds.max.z >= b.bounds.min.z
    )


def coverage_mask(bounds: Aabr, rects: list[Aabr]) -> np.ndarray:
    """Count, per cell of ``bounds``, how many of ``rects`` cover it."""
    size = bounds.size()
    mask = np.zeros((size.x + 1, size.y + 1), dtype=np.int32)
    for rect in rects:
        clipped = rect.intersection(bounds)
        if not clipped.is_valid():
            continue
        lo = clipped.min - bounds.min
        hi = clipped.max - bounds.min
        mask[lo.x : hi.x + 1, lo.y : hi.y + 1] += 1
    return mask
