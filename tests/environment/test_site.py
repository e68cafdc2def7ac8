from __future__ import annotations

from taverngen.environment.site import SiteGrid
from taverngen.util.geometry import Aabr, Vec2


class TestSiteGrid:
    def test_tile_corners(self) -> None:
        site = SiteGrid(origin=Vec2(10, -6), tile_size=6)
        assert site.tile_wpos(Vec2(0, 0)) == Vec2(10, -6)
        assert site.tile_wpos(Vec2(2, 1)) == Vec2(22, 0)

    def test_tile_center(self) -> None:
        site = SiteGrid(tile_size=6)
        assert site.tile_center_wpos(Vec2(1, 1)) == Vec2(9, 9)

    def test_wpos_tile_inverts_tile_wpos(self) -> None:
        site = SiteGrid(origin=Vec2(-3, 4), tile_size=5)
        for tile in (Vec2(0, 0), Vec2(-2, 3), Vec2(7, -1)):
            assert site.wpos_tile(site.tile_wpos(tile)) == tile
            assert site.wpos_tile(site.tile_center_wpos(tile)) == tile

    def test_tile_aabr_wpos(self) -> None:
        site = SiteGrid(tile_size=4)
        assert site.tile_aabr_wpos(Aabr.from_bounds(0, 0, 2, 3)) == Aabr.from_bounds(
            0, 0, 8, 12
        )
