"""Plot tile <-> world coordinate mapping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from taverngen import config
from taverngen.util.geometry import Aabr, Vec2


class SiteLayout(Protocol):
    """What a plot generator needs from the site it is placed in."""

    def tile_wpos(self, tile: Vec2) -> Vec2: ...

    def tile_center_wpos(self, tile: Vec2) -> Vec2: ...


@dataclass(frozen=True, slots=True)
class SiteGrid:
    """Regular tile grid a site's plots are laid out on.

    Tile ``(0, 0)`` starts at ``origin``; each tile covers ``tile_size``
    voxels along both axes.
    """

    origin: Vec2 = Vec2(0, 0)
    tile_size: int = config.SITE_TILE_SIZE

    def tile_wpos(self, tile: Vec2) -> Vec2:
        """World position of the min corner of ``tile``."""
        return self.origin + tile * self.tile_size

    def tile_center_wpos(self, tile: Vec2) -> Vec2:
        return self.tile_wpos(tile) + self.tile_size // 2

    def wpos_tile(self, wpos: Vec2) -> Vec2:
        """Tile containing the world position ``wpos``."""
        rel = wpos - self.origin
        return Vec2(rel.x // self.tile_size, rel.y // self.tile_size)

    def tile_aabr_wpos(self, tile_aabr: Aabr) -> Aabr:
        """World bounds spanned by the corners of a tile rectangle."""
        return Aabr(self.tile_wpos(tile_aabr.min), self.tile_wpos(tile_aabr.max))
