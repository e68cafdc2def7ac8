"""Integer grid geometry for voxel-space layout.

Boxes here use *inclusive* corners: an ``Aabr`` from (0, 0) to (3, 3) covers
16 voxels, and its ``size`` is (3, 3). Layout rules (room size ranges, areas)
are all expressed in that ``max - min`` convention.

``Dir`` is the 4-way horizontal direction used by everything that grows,
walls or roofs a building. Most of its helpers answer "which edge/axis does
this direction pick out of a box or vector", which keeps the generators free
of per-axis special cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from taverngen.types import VoxelCoord


@dataclass(frozen=True, slots=True)
class Vec2:
    """2D integer vector or point."""

    x: VoxelCoord
    y: VoxelCoord

    @classmethod
    def broadcast(cls, value: int) -> Vec2:
        return cls(value, value)

    def __add__(self, other: Vec2 | int) -> Vec2:
        if isinstance(other, int):
            return Vec2(self.x + other, self.y + other)
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2 | int) -> Vec2:
        if isinstance(other, int):
            return Vec2(self.x - other, self.y - other)
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, other: Vec2 | int) -> Vec2:
        if isinstance(other, int):
            return Vec2(self.x * other, self.y * other)
        return Vec2(self.x * other.x, self.y * other.y)

    __rmul__ = __mul__

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def with_z(self, z: VoxelCoord) -> Vec3:
        return Vec3(self.x, self.y, z)

    def reduce_min(self) -> int:
        return min(self.x, self.y)

    def reduce_max(self) -> int:
        return max(self.x, self.y)

    def product(self) -> int:
        return self.x * self.y


@dataclass(frozen=True, slots=True)
class Vec3:
    """3D integer vector or point."""

    x: VoxelCoord
    y: VoxelCoord
    z: VoxelCoord

    def xy(self) -> Vec2:
        return Vec2(self.x, self.y)


class Dir(Enum):
    """Cardinal direction on the horizontal plane.

    Iteration order (X, Y, NegX, NegY) is relied upon for deterministic
    generation.
    """

    X = 0
    Y = 1
    NEG_X = 2
    NEG_Y = 3

    # -------------------------------------------------------------------------
    # Basic relations
    # -------------------------------------------------------------------------

    @classmethod
    def from_vec2(cls, vec: Vec2) -> Dir:
        """Dominant direction of ``vec``. Ties go to the Y axis."""
        if abs(vec.x) > abs(vec.y):
            return Dir.X if vec.x > 0 else Dir.NEG_X
        return Dir.Y if vec.y > 0 else Dir.NEG_Y

    def to_vec2(self) -> Vec2:
        return _UNIT[self]

    def opposite(self) -> Dir:
        return Dir((self.value + 2) % 4)

    def __neg__(self) -> Dir:
        return self.opposite()

    def rotated_cw(self) -> Dir:
        return Dir((self.value + 3) % 4)

    def rotated_ccw(self) -> Dir:
        return Dir((self.value + 1) % 4)

    def orthogonal(self) -> Dir:
        """Positive direction along the other axis."""
        return Dir.X if self.is_y() else Dir.Y

    def abs(self) -> Dir:
        return Dir.Y if self.is_y() else Dir.X

    def signum(self) -> int:
        return 1 if self in (Dir.X, Dir.Y) else -1

    def is_y(self) -> bool:
        return self in (Dir.Y, Dir.NEG_Y)

    # -------------------------------------------------------------------------
    # Axis selection
    # -------------------------------------------------------------------------

    def select(self, vec: Vec2) -> int:
        """Component of ``vec`` on this direction's axis (unsigned)."""
        return vec.y if self.is_y() else vec.x

    def select_with(self, vec: Vec2, other: Vec2) -> Vec2:
        """Take this axis from ``vec`` and the other axis from ``other``."""
        if self.is_y():
            return Vec2(other.x, vec.y)
        return Vec2(vec.x, other.y)

    def select_aabr(self, aabr: Aabr) -> int:
        """Coordinate of the edge of ``aabr`` facing this direction."""
        match self:
            case Dir.X:
                return aabr.max.x
            case Dir.Y:
                return aabr.max.y
            case Dir.NEG_X:
                return aabr.min.x
            case Dir.NEG_Y:
                return aabr.min.y

    def select_aabr_with(self, aabr: Aabr, other: Vec2 | int) -> Vec2:
        """Point on the facing edge of ``aabr``, other axis taken from ``other``."""
        if isinstance(other, int):
            other = Vec2.broadcast(other)
        edge = self.select_aabr(aabr)
        if self.is_y():
            return Vec2(other.x, edge)
        return Vec2(edge, other.y)

    def vec2(self, a: int, b: int) -> Vec2:
        """Vector with ``a`` on this axis and ``b`` on the other one."""
        if self.is_y():
            return Vec2(b, a)
        return Vec2(a, b)

    # -------------------------------------------------------------------------
    # Box edits
    # -------------------------------------------------------------------------

    def extend_aabr(self, aabr: Aabr, amount: int) -> Aabr:
        """Move the facing edge of ``aabr`` outward by ``amount``."""
        match self:
            case Dir.X:
                return Aabr(aabr.min, Vec2(aabr.max.x + amount, aabr.max.y))
            case Dir.Y:
                return Aabr(aabr.min, Vec2(aabr.max.x, aabr.max.y + amount))
            case Dir.NEG_X:
                return Aabr(Vec2(aabr.min.x - amount, aabr.min.y), aabr.max)
            case Dir.NEG_Y:
                return Aabr(Vec2(aabr.min.x, aabr.min.y - amount), aabr.max)

    def trim_aabr(self, aabr: Aabr, amount: int) -> Aabr:
        """Cut ``amount`` off the side opposite to this direction."""
        return self.opposite().extend_aabr(aabr, -amount)


_UNIT: dict[Dir, Vec2] = {
    Dir.X: Vec2(1, 0),
    Dir.Y: Vec2(0, 1),
    Dir.NEG_X: Vec2(-1, 0),
    Dir.NEG_Y: Vec2(0, -1),
}

ALL_DIRS: tuple[Dir, ...] = tuple(Dir)


T = TypeVar("T")


class DirMap(Generic[T]):
    """Fixed four-slot container keyed by ``Dir``."""

    __slots__ = ("_slots",)

    def __init__(self, slots: list[T]) -> None:
        if len(slots) != 4:
            raise ValueError(f"DirMap needs exactly 4 slots, got {len(slots)}")
        self._slots = slots

    @classmethod
    def of_lists(cls) -> DirMap[list]:
        return DirMap([[], [], [], []])

    @classmethod
    def filled(cls, value: T) -> DirMap[T]:
        return cls([value, value, value, value])

    def __getitem__(self, dir: Dir) -> T:
        return self._slots[dir.value]

    def __setitem__(self, dir: Dir, value: T) -> None:
        self._slots[dir.value] = value

    def items(self) -> list[tuple[Dir, T]]:
        return [(d, self._slots[d.value]) for d in ALL_DIRS]

    def values(self) -> list[T]:
        return list(self._slots)

    def __repr__(self) -> str:
        inner = ", ".join(f"{d.name}={v!r}" for d, v in self.items())
        return f"DirMap({inner})"


@dataclass(frozen=True, slots=True)
class Aabr:
    """Axis-aligned rectangle with inclusive integer corners."""

    min: Vec2
    max: Vec2

    @classmethod
    def from_bounds(cls, x1: int, y1: int, x2: int, y2: int) -> Aabr:
        """Create an Aabr from corner coordinates (x1, y1, x2, y2)."""
        return cls(Vec2(x1, y1), Vec2(x2, y2))

    def size(self) -> Vec2:
        return self.max - self.min

    def area(self) -> int:
        return self.size().product()

    def center(self) -> Vec2:
        return self.min + Vec2(self.size().x // 2, self.size().y // 2)

    def is_valid(self) -> bool:
        return self.min.x <= self.max.x and self.min.y <= self.max.y

    def made_valid(self) -> Aabr:
        return Aabr(
            Vec2(min(self.min.x, self.max.x), min(self.min.y, self.max.y)),
            Vec2(max(self.min.x, self.max.x), max(self.min.y, self.max.y)),
        )

    def intersection(self, other: Aabr) -> Aabr:
        """Overlap of both boxes. Not valid when they do not overlap."""
        return Aabr(
            Vec2(max(self.min.x, other.min.x), max(self.min.y, other.min.y)),
            Vec2(min(self.max.x, other.max.x), min(self.max.y, other.max.y)),
        )

    def collides_with_aabr(self, other: Aabr) -> bool:
        return (
            self.min.x <= other.max.x
            and self.max.x >= other.min.x
            and self.min.y <= other.max.y
            and self.max.y >= other.min.y
        )

    def contains_point(self, point: Vec2) -> bool:
        return (
            self.min.x <= point.x <= self.max.x and self.min.y <= point.y <= self.max.y
        )

    def contains_aabr(self, other: Aabr) -> bool:
        return (
            self.min.x <= other.min.x
            and self.min.y <= other.min.y
            and other.max.x <= self.max.x
            and other.max.y <= self.max.y
        )

    def projected_point(self, point: Vec2) -> Vec2:
        """Closest point to ``point`` inside this box."""
        return Vec2(
            min(max(point.x, self.min.x), self.max.x),
            min(max(point.y, self.min.y), self.max.y),
        )

    def expanded(self, amount: int) -> Aabr:
        """Grow (or shrink, for negative ``amount``) every edge."""
        return Aabr(self.min - amount, self.max + amount)

    def cells(self) -> int:
        """Number of voxel columns covered."""
        return (self.size().x + 1) * (self.size().y + 1)

    def __repr__(self) -> str:
        return (
            f"Aabr(x1={self.min.x}, y1={self.min.y}, x2={self.max.x}, y2={self.max.y})"
        )


@dataclass(frozen=True, slots=True)
class Aabb:
    """Axis-aligned box with inclusive integer corners."""

    min: Vec3
    max: Vec3

    @classmethod
    def from_aabr(cls, aabr: Aabr, min_z: int, max_z: int) -> Aabb:
        return cls(aabr.min.with_z(min_z), aabr.max.with_z(max_z))

    def to_aabr(self) -> Aabr:
        return Aabr(self.min.xy(), self.max.xy())

    def made_valid(self) -> Aabb:
        return Aabb(
            Vec3(
                min(self.min.x, self.max.x),
                min(self.min.y, self.max.y),
                min(self.min.z, self.max.z),
            ),
            Vec3(
                max(self.min.x, self.max.x),
                max(self.min.y, self.max.y),
                max(self.min.z, self.max.z),
            ),
        )

    def z_overlaps(self, other: Aabb) -> bool:
        """True when the vertical extents share more than a boundary layer."""
        return self.min.z < other.max.z and self.max.z > other.min.z


def clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(value, hi))
