"""Tavern plot generation.

``Tavern.generate`` runs the whole pipeline for one plot:

1. grow rooms from the entrance outward (``growth``),
2. close every room side with shared or exterior walls (``walls``),
3. roof rooms and link the rooms standing on those roofs (``roofs``),
4. split each room's free floor into rectangles and furnish it (``details``).

The result is frozen; nothing about it changes after generation.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass

from taverngen import config
from taverngen.environment.site import SiteLayout
from taverngen.environment.terrain import TerrainSampler
from taverngen.util.geometry import Aabr, Dir, Vec2, Vec3
from taverngen.util import rng
from taverngen.util.rng import RandomSource
from taverngen.util.store import Id, Store

from .details import furnish_rooms
from .growth import PlotTooSmallError, RoomGrower
from .namegen import generate_tavern_name
from .roofs import assign_roofs
from .room_kinds import RoomKind
from .structure import Roof, Room, Wall
from .walls import partition_walls

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tavern:
    """A generated tavern layout.

    Attributes:
        name: Name on the sign.
        rooms: Rooms in placement order; the first one is behind the front door.
        walls: Every wall segment of the building.
        roofs: Every roof and walkable ceiling.
        door_tile: Plot tile the front door faces.
        door_wpos: World position of the front door, at floor level.
        bounds: World bounds of the whole plot.
    """

    name: str
    rooms: Store[Room]
    walls: Store[Wall]
    roofs: Store[Roof]
    door_tile: Vec2
    door_wpos: Vec3
    bounds: Aabr

    @classmethod
    def generate(
        cls,
        terrain: TerrainSampler,
        site: SiteLayout,
        source: RandomSource | None,
        door_tile: Vec2,
        door_dir: Dir,
        tile_aabr: Aabr,
        alt: int | None = None,
        name: str | None = None,
    ) -> Tavern:
        """Generate a tavern on the plot spanned by ``tile_aabr``.

        Args:
            terrain: Ground altitude and temperature lookup.
            site: Tile to world mapping of the site the plot belongs to.
            source: Random stream; the same stream state gives the same tavern.
                With ``None`` the layout comes from the global tavern stream
                and a generated name from the global name stream.
            door_tile: Tile in front of the entrance.
            door_dir: Direction the front door faces, out of the building.
            tile_aabr: Tile corners of the plot.
            alt: Floor altitude of the entrance. Sampled from the terrain at
                the door when omitted.
            name: Name on the sign. Generated when omitted.

        Raises:
            PlotTooSmallError: If the plot cannot hold an entrance room.
        """
        if name is None:
            name = generate_tavern_name(source)
        if source is None:
            source = rng.get(config.TAVERN_RNG_DOMAIN)

        bounds = Aabr(site.tile_wpos(tile_aabr.min), site.tile_wpos(tile_aabr.max))
        inner_bounds = Aabr(
            bounds.min + config.PLOT_MARGIN_MIN, bounds.max - config.PLOT_MARGIN_MAX
        )
        if not inner_bounds.is_valid():
            raise PlotTooSmallError(f"Plot {bounds} has no usable interior")

        door_xy = inner_bounds.projected_point(
            door_dir.select_aabr_with(inner_bounds, site.tile_center_wpos(door_tile))
        )
        temperature = terrain.get_temperature(door_xy)
        if alt is None:
            alt = math.ceil(terrain.get_alt_approx(door_xy))
        door_wpos = door_xy.with_z(alt)

        grower = RoomGrower(terrain, inner_bounds, temperature, source)
        grower.place_entrance(door_wpos, door_dir)
        grower.grow()
        rooms, walls = grower.rooms, grower.walls

        partition_walls(rooms, walls, source)
        roofs = assign_roofs(rooms, walls, source)
        furnish_rooms(rooms, walls, roofs, source)

        for room in rooms:
            room.freeze()
        rooms.freeze()
        walls.freeze()
        roofs.freeze()

        logger.info(
            f"Generated tavern '{name}' at {door_wpos}: {len(rooms)} rooms, "
            f"{len(walls)} walls, {len(roofs)} roofs"
        )
        return cls(
            name=name,
            rooms=rooms,
            walls=walls,
            roofs=roofs,
            door_tile=door_tile,
            door_wpos=door_wpos,
            bounds=bounds,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def entrance(self) -> Room:
        """The room behind the front door."""
        return self.rooms[Id(0)]

    def room_counts(self) -> Counter[RoomKind]:
        return Counter(room.kind for room in self.rooms)

    def wall_rooms(self, wall: Wall) -> tuple[Room, ...]:
        """Rooms on either side of ``wall``, outside excluded."""
        return tuple(self.rooms[id] for id in wall.neighbours())

    def doors(self) -> list[Wall]:
        return [wall for wall in self.walls if wall.door is not None]

    def stairs_count(self) -> int:
        return sum(roof.stairs is not None for roof in self.roofs)
