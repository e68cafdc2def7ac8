"""Rooms, walls and roofs that make up a generated tavern.

Entities refer to each other through ``Id`` values into the tavern's stores:
a wall names the rooms on either side of it, a room lists the walls around it
and the roofs above and below it. None of these references own anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

from taverngen.util.geometry import Aabb, Aabr, Dir, DirMap, Vec2
from taverngen.util.store import Id, Store

from .room_kinds import RoomKind

# =============================================================================
# Walls
# =============================================================================


@dataclass(frozen=True, slots=True)
class Wall:
    """A straight wall segment between two rooms, or a room and the outside.

    ``start`` and ``end`` are the wall's end posts; they sit one voxel past
    the rooms' corners so that neighbouring segments meet. ``door`` holds an
    inclusive pair of offsets from ``start`` along the wall, always strictly
    between the end posts.

    Attributes:
        start: First end post.
        end: Second end post, on the same horizontal axis as ``start``.
        base_alt: Lowest voxel layer of the wall.
        top_alt: Highest voxel layer of the wall.
        from_room: Room on the side opposite ``to_dir``, or None for outside.
        to_room: Room on the ``to_dir`` side, or None for outside.
        to_dir: Direction pointing from ``from_room`` towards ``to_room``.
        door: (min, max) door offsets from ``start``, or None.
    """

    start: Vec2
    end: Vec2
    base_alt: int
    top_alt: int
    from_room: Id[Room] | None
    to_room: Id[Room] | None
    to_dir: Dir
    door: tuple[int, int] | None = None

    @property
    def direction(self) -> Dir:
        """Direction the wall runs in, from ``start`` to ``end``."""
        return Dir.from_vec2(self.end - self.start)

    @property
    def length(self) -> int:
        """Distance between the end posts."""
        return abs(self.direction.select(self.end - self.start))

    def door_bounds(self) -> Aabr | None:
        """World-space rectangle of the door opening, if there is one."""
        if self.door is None:
            return None
        door_min, door_max = self.door
        step = self.direction.to_vec2()
        return Aabr(
            self.start + step * door_min, self.start + step * door_max
        ).made_valid()

    def door_pos(self) -> tuple[float, float, float] | None:
        """Centre of the door opening at floor level, if there is one."""
        if self.door is None:
            return None
        door_min, door_max = self.door
        step = self.direction.to_vec2()
        offset = (door_min + door_max) / 2.0
        return (
            self.start.x + step.x * offset + 0.5,
            self.start.y + step.y * offset + 0.5,
            float(self.base_alt),
        )

    def neighbours(self) -> tuple[Id[Room], ...]:
        """Ids of the rooms this wall touches."""
        return tuple(r for r in (self.from_room, self.to_room) if r is not None)


# =============================================================================
# Roofs
# =============================================================================


@dataclass(frozen=True, slots=True)
class FlatRoof:
    pass


@dataclass(frozen=True, slots=True)
class FlatBarsRoof:
    """Slatted flat roof, slats running along ``dir``. Only used over gardens."""

    dir: Dir


@dataclass(frozen=True, slots=True)
class LeanToRoof:
    """Single slope rising towards ``dir`` up to ``max_z``."""

    dir: Dir
    max_z: int


@dataclass(frozen=True, slots=True)
class GableRoof:
    """Two slopes meeting in a ridge along ``dir`` at ``max_z``."""

    dir: Dir
    max_z: int


@dataclass(frozen=True, slots=True)
class HipRoof:
    max_z: int


@dataclass(frozen=True, slots=True)
class FloorRoof:
    """Walkable ceiling: the roof is the floor of rooms above it."""

    pass


RoofStyle: TypeAlias = FlatRoof | FlatBarsRoof | LeanToRoof | GableRoof | HipRoof | FloorRoof


@dataclass(frozen=True, slots=True)
class Stairs:
    """Staircase volume running along ``dir`` from a lower to an upper room."""

    bounds: Aabb
    dir: Dir


@dataclass(frozen=True, slots=True)
class Roof:
    """A roof (or ceiling) over a group of rooms sharing the same top.

    Attributes:
        bounds: Footprint, including the overhang around the rooms.
        min_z: Lowest layer of the roof, one above the covered rooms.
        style: Shape of the roof.
        stairs: Staircase from a covered room to a room standing on this roof.
    """

    bounds: Aabr
    min_z: int
    style: RoofStyle
    stairs: Stairs | None = None


# =============================================================================
# Furnishing
# =============================================================================


@dataclass(frozen=True, slots=True)
class BarDetail:
    aabr: Aabr


@dataclass(frozen=True, slots=True)
class TableDetail:
    """A table at ``pos`` with a chair on each of the ``chairs`` sides."""

    pos: Vec2
    chairs: tuple[Dir, ...]


@dataclass(frozen=True, slots=True)
class StageDetail:
    aabr: Aabr


Detail: TypeAlias = BarDetail | TableDetail | StageDetail


# =============================================================================
# Rooms
# =============================================================================


@dataclass
class Room:
    """A box-shaped room. Bounds are inclusive and never change once placed.

    Everything else only grows during generation and is turned into tuples
    by ``freeze()`` when the tavern is finished.

    Attributes:
        bounds: Inclusive voxel box of the room's interior.
        kind: What the room is used for.
        walls: Walls bounding the room, per side.
        floors: Roofs this room stands on.
        roofs: Roofs covering this room.
        detail_areas: Free floor rectangles left over for furnishing.
        details: Furniture placed in the room.
    """

    bounds: Aabb
    kind: RoomKind
    walls: DirMap[list[Id[Wall]]] = field(default_factory=DirMap.of_lists)
    floors: list[Id[Roof]] = field(default_factory=list)
    roofs: list[Id[Roof]] = field(default_factory=list)
    detail_areas: list[Aabr] = field(default_factory=list)
    details: list[Detail] = field(default_factory=list)

    @property
    def footprint(self) -> Aabr:
        return self.bounds.to_aabr()

    def all_walls(self) -> list[Id[Wall]]:
        return [wall for walls in self.walls.values() for wall in walls]

    def is_covered_by_roof(self, roofs: Store[Roof]) -> bool:
        """Whether one of this room's roofs covers its whole footprint."""
        footprint = self.footprint
        return any(roofs[roof].bounds.contains_aabr(footprint) for roof in self.roofs)

    def freeze(self) -> None:
        """Replace the room's growable lists with tuples."""
        frozen_walls = [tuple(walls) for walls in self.walls.values()]
        self.walls = DirMap(frozen_walls)  # type: ignore[arg-type]
        self.floors = tuple(self.floors)  # type: ignore[assignment]
        self.roofs = tuple(self.roofs)  # type: ignore[assignment]
        self.detail_areas = tuple(self.detail_areas)  # type: ignore[assignment]
        self.details = tuple(self.details)  # type: ignore[assignment]
